"""
SQLite connection helper used by the query executor.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional
from .config import DB_PATH, ensure_db_directory

@contextmanager
def get_db(path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection yielding rows as sqlite3.Row."""
    db_path = path or DB_PATH
    if db_path != ":memory:":
        ensure_db_directory(db_path)
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def health_check(path: Optional[str] = None, required_tables=()):
    """Check database health, optionally requiring some tables to exist."""
    try:
        with get_db(path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]
            return all(table in table_names for table in required_tables)
    except sqlite3.Error:
        return False
