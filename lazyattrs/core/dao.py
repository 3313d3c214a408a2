"""
Bulk retrieval and persistence of records.

load_all attaches every record it returns to one cohort so that a lazy
attribute read on any of them is fetched for all of them at once.
"""

from typing import Any, List, Optional, Sequence
from .cohort import registry
from .keys import KeyResolver
from ..util.logging import logger


def load_all(record_type, where: Optional[str] = None, params: Sequence[Any] = ()) -> List[Any]:
    """Load records selecting the type's default columns, as one cohort."""
    rows = record_type.executor().select_rows(
        record_type.table, list(record_type.default_columns), where, params)
    records = [record_type.load(row) for row in rows]
    if records:
        registry.attach(records)
        logger.log_cohort_attached(record_type.__name__, len(records))
    return records


def get(record_type, key) -> Optional[Any]:
    """Load one record by key on its own, outside any cohort."""
    resolver = KeyResolver(record_type)
    rows = record_type.executor().select_where_keys(
        record_type.table, list(record_type.default_columns), resolver.resolve(), [key])
    if not rows:
        return None
    return record_type.load(rows[0])


def insert(record) -> Any:
    """Persist a new record and mark it as existing in storage."""
    record_type = type(record)
    if not record.is_new:
        raise ValueError(f"{record_type.__name__} record is already persisted")

    rowid = record_type.executor().insert(record_type.table, record.values.snapshot())

    primary_key = record_type.primary_key
    if len(primary_key) == 1 and not record.values.has(primary_key[0]):
        # Integer primary keys alias the rowid
        record.values.set(primary_key[0], rowid)
    record.is_new = False
    logger.log_operation("record.insert", "success", {"record_type": record_type.__name__})
    return record
