"""
Batch fetch coordinator: resolves an absent lazy attribute on a persisted record.

Paths, in priority order:
- frozen: one query matching the record's exact current values; result is
  returned but never cached.
- cohort: one query for the attribute across every cohort member still
  missing it, keyed by identifier; results cached per member.
- singleton: one query for this record alone, used when there is no cohort,
  when the requester is the only member still missing the attribute, or when
  the cohort query did not return the requester's row.

Nothing is written until the query has returned all of its rows, so a failing
query leaves every value store untouched.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any
from .cohort import registry as cohort_registry
from .config import batch_enabled, cohort_locking_enabled
from .keys import KeyResolver
from ..util.logging import logger, sanitize_payload


@dataclass
class FetchStats:
    """Query counters per fetch path, safe to update from several threads."""
    frozen: int = 0
    cohort: int = 0
    singleton: int = 0
    rows_written: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def queries(self) -> int:
        return self.frozen + self.cohort + self.singleton

    def record(self, path: str, written: int = 0):
        """Count one query on a path and the values it wrote."""
        with self._lock:
            setattr(self, path, getattr(self, path) + 1)
            self.rows_written += written

    def reset(self):
        with self._lock:
            self.frozen = self.cohort = self.singleton = self.rows_written = 0


class BatchFetchCoordinator:
    """Fetches lazy attributes, coalescing across cohorts where possible."""

    def __init__(self, registry=None):
        self.registry = registry or cohort_registry
        self.stats = FetchStats()

    def fetch(self, record, attribute: str) -> Any:
        """Return the attribute's value for a persisted record missing it."""
        if record.is_frozen:
            return self._fetch_frozen(record, attribute)

        resolver = KeyResolver(type(record))
        # Raises MissingIdentifierError before any query is issued
        resolver.resolve()

        if batch_enabled() and self.registry.cohort_of(record):
            if cohort_locking_enabled():
                with record.cohort.lock_for(attribute):
                    self._fetch_cohort(record, attribute, resolver)
            else:
                self._fetch_cohort(record, attribute, resolver)

        if not record.values.has(attribute):
            # No cohort, nothing to coalesce, or the requester's row was missing from the cohort result
            self._fetch_singleton(record, attribute, resolver)
        return record.values.get(attribute)

    def _fetch_frozen(self, record, attribute):
        record_type = type(record)
        current = record.values.snapshot()
        if not current:
            # No values to match on; an unfiltered query would answer for some other row
            logger.warning(f"Frozen {record_type.__name__} record has no values, {attribute} resolves to None")
            return None
        logger.debug(f"Frozen lookup of {attribute} on {record_type.__name__} {sanitize_payload(current)}")

        start = time.time()
        rows = self._run("frozen", record_type, attribute, 1, start,
                         lambda executor: executor.select_matching(record_type.table, [attribute], current))
        self.stats.record("frozen")
        logger.log_lazy_fetch("frozen", record_type.__name__, attribute, 1, len(rows), start, time.time())
        return rows[0][attribute] if rows else None

    def _fetch_cohort(self, record, attribute, resolver):
        if record.values.has(attribute):
            # Filled by an overlapping fetch while this one waited on the cohort lock
            return

        record_type = type(record)
        targets = self.registry.members_needing(record.cohort, attribute)
        if not targets or (len(targets) == 1 and targets[0] is record):
            # Nothing to coalesce; the singleton path fetches for the requester alone
            return

        key_columns = resolver.resolve()
        id_map = record.cohort.index_by(resolver.key_of, targets)
        columns = list(key_columns) + [attribute]

        start = time.time()
        rows = self._run("cohort", record_type, attribute, len(id_map), start,
                         lambda executor: executor.select_where_keys(
                             record_type.table, columns, key_columns, list(id_map)))

        written = 0
        for row in rows:
            target = id_map.get(resolver.key_of_row(row))
            if target is None or target.is_frozen:
                continue
            if target.values.set_if_absent(attribute, row[attribute]):
                written += 1
        self.stats.record("cohort", written)
        logger.log_lazy_fetch("cohort", record_type.__name__, attribute, len(id_map), len(rows), start, time.time())

    def _fetch_singleton(self, record, attribute, resolver):
        record_type = type(record)
        key_columns = resolver.resolve()
        key = resolver.key_of(record)

        start = time.time()
        rows = self._run("singleton", record_type, attribute, 1, start,
                         lambda executor: executor.select_where_keys(
                             record_type.table, [attribute], key_columns, [key]))

        # A row deleted since load resolves to None rather than staying absent
        value = rows[0][attribute] if rows else None
        written = 1 if record.values.set_if_absent(attribute, value) else 0
        self.stats.record("singleton", written)
        logger.log_lazy_fetch("singleton", record_type.__name__, attribute, 1, len(rows), start, time.time())

    def _run(self, path, record_type, attribute, targets, start, query):
        try:
            return query(record_type.executor())
        except Exception:
            logger.log_lazy_fetch(path, record_type.__name__, attribute, targets, 0, start, time.time(), status="failed")
            raise


# Global coordinator instance
coordinator = BatchFetchCoordinator()
