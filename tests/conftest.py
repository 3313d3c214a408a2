"""
Shared fixtures: a temporary SQLite database wired in as the default executor.
"""

import pytest
from types import SimpleNamespace
from unittest.mock import patch

from lazyattrs.core import config
from lazyattrs.core.db import get_db
from lazyattrs.core.fetch import coordinator
from lazyattrs.core.query import SQLiteQueryExecutor


SAMPLE_SCHEMA = """
CREATE TABLE albums (id INTEGER PRIMARY KEY, name TEXT, review TEXT, tracklist TEXT);
INSERT INTO albums VALUES (1, 'Blue', 'great', 'a,b');
INSERT INTO albums VALUES (2, 'Red', 'fine', 'c');
INSERT INTO albums VALUES (3, 'Green', NULL, 'd,e,f');

CREATE TABLE entries ("group" INTEGER, id INTEGER, title TEXT, notes TEXT, PRIMARY KEY ("group", id));
INSERT INTO entries VALUES (1, 1, 'one', 'n11');
INSERT INTO entries VALUES (1, 2, 'two', 'n12');
INSERT INTO entries VALUES (1, 3, 'three', 'n13');
INSERT INTO entries VALUES (2, 1, 'other', 'n21');

CREATE TABLE events (message TEXT, body TEXT);
INSERT INTO events VALUES ('hello', 'payload');
"""


@pytest.fixture
def db_path(tmp_path):
    """Path of a fresh test database."""
    return str(tmp_path / "lazyattrs_test.db")


@pytest.fixture
def run_sql(db_path):
    """Execute a SQL script against the test database."""
    def run(script):
        with get_db(db_path) as conn:
            conn.executescript(script)
            conn.commit()
    return run


@pytest.fixture(autouse=True)
def executor(db_path):
    """Install a SQLite executor over the test database as the process default."""
    executor = SQLiteQueryExecutor(db_path)
    config.set_query_executor(executor)
    coordinator.stats.reset()
    yield executor
    config.set_query_executor(None)


@pytest.fixture
def sample_db(run_sql):
    """Populate the test database with albums, entries and events."""
    run_sql(SAMPLE_SCHEMA)


@pytest.fixture
def spy(executor):
    """Count the key and exact-match queries issued through the executor."""
    with patch.object(executor, "select_where_keys", wraps=executor.select_where_keys) as keys_spy, \
            patch.object(executor, "select_matching", wraps=executor.select_matching) as matching_spy:
        yield SimpleNamespace(keys=keys_spy, matching=matching_spy)
