"""
Record types and lazy attribute accessors.

A record type subclasses Record and declares its table, columns, primary key
and (optionally) lazy attributes:

    class Album(Record):
        table = "albums"
        columns = ("id", "name", "review")
        primary_key = ("id",)
        lazy = ("review",)

Every column gets a generic ColumnAccessor reading the record's value store.
declare_lazy wraps the named accessors in a LazyAccessor that only steps in
when the value is absent on a persisted record; every other read goes to the
accessor it wraps, so a property defined on the class for the same name keeps
working for present values and new records.
"""

from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple
from pydantic import ValidationError
from .config import get_query_executor
from .errors import LazyDeclarationError, RecordNotFoundError
from .fetch import coordinator
from .keys import KeyResolver
from .schema import RecordSchema
from .values import ValueStore
from ..util.logging import log_declaration


class ColumnAccessor:
    """Reads and writes one column through the record's value store."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.values.get(self.name, owner.defaults.get(self.name))

    def __set__(self, instance, value):
        instance.values.set(self.name, value)


class LazyAccessor:
    """Intercepts reads of an absent attribute on a persisted record."""

    def __init__(self, name: str, wrapped: Any):
        self.name = name
        self.wrapped = wrapped

    def __get__(self, instance, owner):
        if instance is None:
            return self
        if not instance.values.has(self.name) and not instance.is_new:
            return instance.lazy_attribute_lookup(self.name)
        return self.wrapped.__get__(instance, owner)

    def __set__(self, instance, value):
        setter = getattr(self.wrapped, "__set__", None)
        if setter is None:
            raise AttributeError(f"can't set attribute '{self.name}'")
        setter(instance, value)


_INSTANCE_STATE = ("values", "is_new", "cohort", "lazy")


def _lookup(cls, name: str) -> Optional[Any]:
    """Find a class attribute without triggering descriptors."""
    for klass in cls.__mro__:
        if name in klass.__dict__:
            return klass.__dict__[name]
    return None


class Record:
    """Base class for record types loaded from a table."""

    table: Optional[str] = None
    columns: Tuple[str, ...] = ()
    primary_key: Tuple[str, ...] = ("id",)
    defaults: Dict[str, Any] = {}
    query_executor = None

    # Per-type lazy registry and the reduced default select set
    lazy_attributes: FrozenSet[str] = frozenset()
    default_columns: Tuple[str, ...] = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.table is None:
            return

        cls.columns = tuple(cls.columns)
        cls.primary_key = tuple(cls.primary_key or ())
        cls._validate(cls.lazy_attributes)

        for name in cls.columns:
            if name in Record.__dict__ or name in _INSTANCE_STATE:
                raise LazyDeclarationError(f"{cls.__name__}: column '{name}' shadows a Record attribute")
            if _lookup(cls, name) is None:
                setattr(cls, name, ColumnAccessor(name))

        # Accessors a subclass redefines for inherited lazy names are wrapped again
        for name in cls.lazy_attributes:
            if name in cls.__dict__ and not isinstance(cls.__dict__[name], LazyAccessor):
                setattr(cls, name, LazyAccessor(name, cls.__dict__[name]))

        cls.default_columns = tuple(c for c in cls.columns if c not in cls.lazy_attributes)
        declared = cls.__dict__.get("lazy")
        if declared:
            cls.declare_lazy(*declared)

    @classmethod
    def _validate(cls, lazy):
        try:
            return RecordSchema(
                name=cls.__name__,
                table=cls.table,
                columns=cls.columns,
                primary_key=cls.primary_key,
                lazy=tuple(lazy),
            )
        except ValidationError as e:
            raise LazyDeclarationError(f"Invalid declaration for {cls.__name__}: {e}") from e

    @classmethod
    def declare_lazy(cls, *names: str):
        """Mark attributes lazy: drop them from the default select and install lazy accessors.

        Repeated declarations merge; names already lazy are left as they are.
        """
        if cls.table is None:
            raise LazyDeclarationError(f"{cls.__name__} has no table")

        merged = list(cls.lazy_attributes)
        merged.extend(n for n in dict.fromkeys(names) if n not in cls.lazy_attributes)
        schema = cls._validate(merged)

        for name in names:
            current = _lookup(cls, name)
            if isinstance(current, LazyAccessor):
                continue
            setattr(cls, name, LazyAccessor(name, current))

        cls.lazy_attributes = frozenset(merged)
        cls.default_columns = tuple(schema.default_columns)
        log_declaration(cls.__name__, merged, cls.default_columns)

    @classmethod
    def executor(cls):
        """Query executor for this record type."""
        return cls.query_executor or get_query_executor()

    @classmethod
    def load(cls, row: Mapping[str, Any]) -> "Record":
        """Build a persisted record from a result row."""
        record = cls.__new__(cls)
        record.values = ValueStore(dict(row))
        record.is_new = False
        record.cohort = None
        return record

    def __init__(self, **values):
        unknown = [name for name in values if name not in self.columns]
        if unknown:
            raise TypeError(f"{type(self).__name__} has no columns {unknown}")
        self.values = ValueStore(values)
        self.is_new = True
        self.cohort = None

    @property
    def is_frozen(self) -> bool:
        return self.values.frozen

    @property
    def pk(self):
        return KeyResolver(type(self)).key_of(self)

    def freeze(self) -> "Record":
        """Make the record immutable. Lazy reads still work but are never cached."""
        self.values.freeze()
        return self

    def lazy_attribute_lookup(self, name: str) -> Any:
        """Fetch an absent lazy attribute. Override and call super() to customize."""
        return coordinator.fetch(self, name)

    def refresh(self) -> "Record":
        """Reload default columns from storage and forget cached lazy values."""
        cls = type(self)
        resolver = KeyResolver(cls)
        rows = cls.executor().select_where_keys(
            cls.table, list(cls.default_columns), resolver.resolve(), [resolver.key_of(self)])
        if not rows:
            raise RecordNotFoundError(f"{cls.__name__} record {self.pk!r} no longer exists")
        for name in cls.lazy_attributes:
            self.values.discard(name)
        for name, value in rows[0].items():
            self.values.set(name, value)
        return self

    def __repr__(self):
        return f"<{type(self).__name__} {self.values.snapshot()!r}>"
