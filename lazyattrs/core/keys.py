"""
Identifier resolution for record types with single or composite keys.
"""

from typing import Any, Mapping, Tuple
from .errors import MissingIdentifierError


class KeyResolver:
    """Resolves the identifier columns of a record type and the key values of records."""

    def __init__(self, record_type):
        self.record_type = record_type

    def resolve(self) -> Tuple[str, ...]:
        """Ordered identifier columns, or MissingIdentifierError if none are declared."""
        columns = tuple(self.record_type.primary_key or ())
        if not columns:
            raise MissingIdentifierError(self.record_type.__name__)
        return columns

    @property
    def is_composite(self) -> bool:
        return len(self.resolve()) > 1

    def key_of(self, record) -> Any:
        """Scalar key for a single-column identifier, full tuple for a composite one."""
        return self._key(record.values.get)

    def key_of_row(self, row: Mapping[str, Any]) -> Any:
        """Key of a result row, shaped like key_of."""
        return self._key(row.get)

    def _key(self, lookup) -> Any:
        columns = self.resolve()
        if self.is_composite:
            return tuple(lookup(column) for column in columns)
        return lookup(columns[0])
