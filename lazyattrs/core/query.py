"""
Query execution collaborator.

The fetch engine only ever asks for "these columns for rows with these keys"
or "these columns for the row equal to these values". QueryExecutor is that
contract; SQLiteQueryExecutor implements it over the sqlite3 helper in db.py.
Execution errors propagate unchanged.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence
from .config import get_max_keys_per_query, query_logging_enabled
from .db import get_db
from ..util.logging import logger


def quote_identifier(name: str) -> str:
    """Quote a table or column name for SQLite."""
    return '"' + name.replace('"', '""') + '"'


class QueryExecutor(ABC):
    """Abstract query executor returning rows as column -> value dicts."""

    @abstractmethod
    def select_rows(self, table: str, columns: Sequence[str], where: Optional[str] = None,
                    params: Sequence[Any] = (), limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Select columns from table with an optional raw WHERE clause."""
        pass

    @abstractmethod
    def select_where_keys(self, table: str, columns: Sequence[str], key_columns: Sequence[str],
                          keys: Sequence[Any]) -> List[Dict[str, Any]]:
        """Select columns for rows whose identifier is one of keys.

        Keys are scalars when key_columns has one entry and tuples otherwise.
        """
        pass

    @abstractmethod
    def select_matching(self, table: str, columns: Sequence[str],
                        values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Select columns for the row equal to every given column value (NULL-safe)."""
        pass

    @abstractmethod
    def insert(self, table: str, values: Mapping[str, Any]) -> Optional[int]:
        """Insert one row and return its rowid."""
        pass


class SQLiteQueryExecutor(QueryExecutor):
    """QueryExecutor over a SQLite database file."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def select_rows(self, table, columns, where=None, params=(), limit=None):
        sql = f"SELECT {', '.join(quote_identifier(c) for c in columns)} FROM {quote_identifier(table)}"
        if where:
            sql += f" WHERE {where}"
        if limit is not None:
            sql += f" LIMIT {int(limit)}"
        return self._fetch_all(sql, list(params))

    def select_where_keys(self, table, columns, key_columns, keys):
        keys = list(keys)
        rows = []
        chunk_size = get_max_keys_per_query()
        if len(key_columns) > 1:
            # Each composite key binds one parameter per key column
            chunk_size = max(1, chunk_size // len(key_columns))
        # All chunks are read before returning so callers never see a partial result
        for start in range(0, len(keys), chunk_size):
            chunk = keys[start:start + chunk_size]
            where, params = self._key_filter(key_columns, chunk)
            rows.extend(self.select_rows(table, columns, where, params))
        return rows

    def select_matching(self, table, columns, values):
        clauses = [f"{quote_identifier(column)} IS ?" for column in values]
        where = " AND ".join(clauses) if clauses else None
        return self.select_rows(table, columns, where, list(values.values()), limit=1)

    def insert(self, table, values):
        names = ", ".join(quote_identifier(column) for column in values)
        placeholders = ", ".join("?" for _ in values)
        sql = f"INSERT INTO {quote_identifier(table)} ({names}) VALUES ({placeholders})"
        if query_logging_enabled():
            logger.log_query(sql, len(values))
        with get_db(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(sql, list(values.values()))
            conn.commit()
            return cursor.lastrowid

    def _key_filter(self, key_columns, keys):
        if len(key_columns) == 1:
            placeholders = ", ".join("?" for _ in keys)
            return f"{quote_identifier(key_columns[0])} IN ({placeholders})", list(keys)

        # Row-value IN keeps the expression tree flat however many keys there are
        names = ", ".join(quote_identifier(column) for column in key_columns)
        row = "(" + ", ".join("?" for _ in key_columns) + ")"
        where = f"({names}) IN (VALUES {', '.join(row for _ in keys)})"
        params = [value for key in keys for value in key]
        return where, params

    def _fetch_all(self, sql, params):
        if query_logging_enabled():
            logger.log_query(sql, len(params))
        with get_db(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(sql, params)
            return [dict(row) for row in cursor.fetchall()]
