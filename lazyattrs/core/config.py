"""
Runtime configuration for lazy attribute loading.
Settings are read from the environment; accessor functions re-read the ones
that tests and operators toggle at runtime.
"""

import os
from pathlib import Path

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/lazyattrs.db")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Cohort coalescing (default enabled)
LAZY_BATCH_ENABLED = os.getenv("LAZY_BATCH_ENABLED", "true").lower() == "true"
LAZY_COHORT_LOCKING = os.getenv("LAZY_COHORT_LOCKING", "true").lower() == "true"

# SQLite caps bound parameters per statement (999 on older builds)
LAZY_MAX_KEYS_PER_QUERY = int(os.getenv("LAZY_MAX_KEYS_PER_QUERY", "500"))

# Log SQL text of every issued query at debug level
LAZY_QUERY_LOGGING = os.getenv("LAZY_QUERY_LOGGING", "false").lower() == "true"

_default_executor = None


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def batch_enabled():
    """Check if lazy fetches may coalesce across a cohort."""
    return LAZY_BATCH_ENABLED


def cohort_locking_enabled():
    """Check if coalesced fetches are serialized per cohort and attribute."""
    return LAZY_COHORT_LOCKING


def query_logging_enabled():
    """Check if SQL text should be logged."""
    return LAZY_QUERY_LOGGING or debug_enabled()


def get_max_keys_per_query():
    """Get the key chunk size for IN-list queries."""
    return LAZY_MAX_KEYS_PER_QUERY


def ensure_db_directory(path=None):
    """Ensure the database directory exists."""
    Path(path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)


def get_query_executor():
    """Get the process default query executor, built on first use over DB_PATH."""
    global _default_executor
    if _default_executor is None:
        from .query import SQLiteQueryExecutor
        _default_executor = SQLiteQueryExecutor(DB_PATH)
    return _default_executor


def set_query_executor(executor):
    """Replace the process default query executor (None resets it)."""
    global _default_executor
    _default_executor = executor


def validate_lazy_config():
    """Validate lazy loading configuration and return any issues."""
    issues = []

    if LAZY_MAX_KEYS_PER_QUERY < 1:
        issues.append("LAZY_MAX_KEYS_PER_QUERY must be >= 1")

    if LAZY_MAX_KEYS_PER_QUERY > 32766:
        issues.append("LAZY_MAX_KEYS_PER_QUERY exceeds SQLite's bound parameter limit")

    if not LAZY_BATCH_ENABLED and LAZY_COHORT_LOCKING:
        issues.append("LAZY_COHORT_LOCKING has no effect when LAZY_BATCH_ENABLED=false")

    return issues
