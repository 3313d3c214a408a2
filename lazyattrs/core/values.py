"""
Per-record value store with explicit presence.

A stored None is a value; an absent name is not. The fetch engine writes
only through set_if_absent, so an entry it finds present is never replaced.
"""

from typing import Any, Dict, Iterator, Optional
from .errors import FrozenRecordError


class ValueStore:
    """Ordered mapping of attribute name to value, freezable."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(values or {})
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        """Reject every further mutation."""
        self._frozen = True

    def has(self, name: str) -> bool:
        return name in self._data

    def get(self, name: str, default: Any = None) -> Any:
        return self._data.get(name, default)

    def set(self, name: str, value: Any):
        """Set a value, replacing any present one."""
        self._check_mutable(name)
        self._data[name] = value

    def set_if_absent(self, name: str, value: Any) -> bool:
        """Set a value only when the name is absent. Returns True when written."""
        if name in self._data:
            return False
        self._check_mutable(name)
        self._data[name] = value
        return True

    def discard(self, name: str):
        """Forget a value so the name becomes absent again."""
        self._check_mutable(name)
        self._data.pop(name, None)

    def snapshot(self) -> Dict[str, Any]:
        """Plain dict copy of the current values."""
        return dict(self._data)

    def keys(self):
        return self._data.keys()

    def items(self):
        return self._data.items()

    def _check_mutable(self, name: str):
        if self._frozen:
            raise FrozenRecordError(f"Cannot set '{name}' on a frozen record")

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __getitem__(self, name: str) -> Any:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        state = " frozen" if self._frozen else ""
        return f"<ValueStore{state} {list(self._data)}>"
