"""
Exceptions raised by lazy attribute loading.

Query execution errors (sqlite3.Error and friends) are never wrapped; they
reach the caller of the attribute accessor unchanged.
"""


class LazyAttributeError(Exception):
    """Base exception for lazy attribute loading."""
    pass


class MissingIdentifierError(LazyAttributeError):
    """A fetch needed a record identity but the record type declares no primary key."""

    def __init__(self, record_type: str):
        self.record_type = record_type
        super().__init__(f"Invalid primary key column for {record_type}: no identifier columns declared")


class FrozenRecordError(LazyAttributeError):
    """Attempt to mutate the values of a frozen record."""
    pass


class CohortError(LazyAttributeError):
    """Invalid cohort membership change."""
    pass


class RecordNotFoundError(LazyAttributeError):
    """A persisted record's row no longer exists in storage."""
    pass


class LazyDeclarationError(LazyAttributeError):
    """Invalid record type or lazy attribute declaration."""
    pass
