"""
Cohorts: sibling records retrieved together by one bulk load.

A Cohort keeps weak references to its members; each member keeps a strong
reference to its cohort. The cohort therefore lives as long as its
longest-lived member without a member <-> cohort reference cycle.
"""

import threading
import weakref
from typing import Any, Callable, Dict, Iterator, List, Optional
from .errors import CohortError


class Cohort:
    """Ordered, read-only set of sibling records."""

    def __init__(self, records):
        self._refs = [weakref.ref(record) for record in records]
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def members(self) -> Iterator[Any]:
        """Yield live members in load order."""
        for ref in self._refs:
            record = ref()
            if record is not None:
                yield record

    def index_by(self, key_func: Callable[[Any], Any], records=None) -> Dict[Any, Any]:
        """Build a key -> record map over the given records (default: all members)."""
        return {key_func(record): record for record in (records if records is not None else self.members())}

    def lock_for(self, attribute: str) -> threading.Lock:
        """Lock serializing coalesced fetches of one attribute across this cohort."""
        with self._locks_guard:
            lock = self._locks.get(attribute)
            if lock is None:
                lock = self._locks[attribute] = threading.Lock()
            return lock

    def __iter__(self):
        return self.members()

    def __len__(self) -> int:
        return sum(1 for _ in self.members())

    def __repr__(self) -> str:
        return f"<Cohort size={len(self)}>"


class CohortRegistry:
    """Attaches records to cohorts and answers membership questions."""

    def attach(self, records) -> Cohort:
        """Make the given records one cohort. Membership is set once per record."""
        records = list(records)
        for record in records:
            if record.cohort is not None:
                raise CohortError(f"{type(record).__name__} record is already part of a cohort")
        cohort = Cohort(records)
        for record in records:
            record.cohort = cohort
        return cohort

    def cohort_of(self, record) -> List[Any]:
        """Members of the record's cohort, or an empty list if it was loaded singly."""
        cohort: Optional[Cohort] = record.cohort
        if cohort is None:
            return []
        return list(cohort.members())

    def members_needing(self, cohort, attribute: str) -> List[Any]:
        """Members still missing the attribute, excluding frozen records."""
        return [
            record for record in cohort
            if not record.values.has(attribute) and not record.is_frozen
        ]


# Global registry instance
registry = CohortRegistry()
