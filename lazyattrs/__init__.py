"""
lazyattrs - lazy, batch-coalescing attribute loading for SQLite-backed records.
"""

from .core.cohort import Cohort, CohortRegistry
from .core.errors import (
    CohortError,
    FrozenRecordError,
    LazyAttributeError,
    LazyDeclarationError,
    MissingIdentifierError,
    RecordNotFoundError,
)
from .core.fetch import BatchFetchCoordinator, FetchStats, coordinator
from .core.keys import KeyResolver
from .core.model import ColumnAccessor, LazyAccessor, Record
from .core.query import QueryExecutor, SQLiteQueryExecutor
from .core.values import ValueStore

__all__ = [
    "BatchFetchCoordinator",
    "Cohort",
    "CohortError",
    "CohortRegistry",
    "ColumnAccessor",
    "FetchStats",
    "FrozenRecordError",
    "KeyResolver",
    "LazyAccessor",
    "LazyAttributeError",
    "LazyDeclarationError",
    "MissingIdentifierError",
    "QueryExecutor",
    "Record",
    "RecordNotFoundError",
    "SQLiteQueryExecutor",
    "ValueStore",
    "coordinator",
]
