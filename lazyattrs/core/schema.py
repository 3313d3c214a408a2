"""
Record type declaration validation.
"""

from typing import List, Tuple
from pydantic import BaseModel, field_validator, model_validator


class RecordSchema(BaseModel):
    """Validated declaration of a record type's table, columns, key and lazy set."""
    name: str
    table: str
    columns: Tuple[str, ...]
    primary_key: Tuple[str, ...] = ()
    lazy: Tuple[str, ...] = ()

    @field_validator('table')
    @classmethod
    def table_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('table cannot be empty')
        return v

    @field_validator('columns')
    @classmethod
    def columns_must_be_unique(cls, v):
        if not v:
            raise ValueError('columns cannot be empty')
        if len(set(v)) != len(v):
            raise ValueError('columns must be unique')
        return v

    @model_validator(mode='after')
    def names_must_be_columns(self):
        unknown_key = [c for c in self.primary_key if c not in self.columns]
        if unknown_key:
            raise ValueError(f'primary key columns not declared: {unknown_key}')
        unknown_lazy = [c for c in self.lazy if c not in self.columns]
        if unknown_lazy:
            raise ValueError(f'lazy attributes not declared as columns: {unknown_lazy}')
        lazy_key = [c for c in self.lazy if c in self.primary_key]
        if lazy_key:
            raise ValueError(f'primary key columns cannot be lazy: {lazy_key}')
        return self

    @property
    def default_columns(self) -> List[str]:
        """Columns selected by default bulk loads, in declaration order."""
        return [c for c in self.columns if c not in self.lazy]
