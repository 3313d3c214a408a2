"""
Structured logging for lazy attribute loading.
Fetch paths, issued queries and type declarations are logged as operations.
"""

import logging
from typing import Any, Dict, List

class StructuredLogger:
    """Structured logger for lazy fetches, queries and declarations."""

    def __init__(self, name: str = "lazyattrs"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.info(message)

    def log_lazy_fetch(self, path: str, record_type: str, attribute: str, targets: int,
                       rows: int, start_time: float, end_time: float, status: str = "success"):
        """Log one lazy attribute fetch (frozen, cohort or singleton path)."""
        duration_ms = round((end_time - start_time) * 1000, 2)
        log_details = {
            "record_type": record_type,
            "attribute": attribute,
            "targets": targets,
            "rows": rows,
            "duration_ms": duration_ms
        }
        self.log_operation(f"lazy.{path}", status, log_details)

    def log_query(self, sql: str, param_count: int):
        """Log SQL text and bound parameter count, never the parameters."""
        self.logger.debug(f"Query: {sql} [{param_count} params]")

    def log_declaration(self, record_type: str, lazy_attributes: List[str], default_columns: List[str]):
        """Log a lazy attribute declaration on a record type."""
        log_details = {
            "record_type": record_type,
            "lazy": sorted(lazy_attributes),
            "default_columns": list(default_columns)
        }
        self.log_operation("lazy.declare", "installed", log_details)

    def log_cohort_attached(self, record_type: str, size: int):
        """Log a cohort being attached by a bulk retrieval."""
        self.log_operation("cohort.attach", "success", {"record_type": record_type, "size": size})

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()

def log_lazy_fetch(path: str, record_type: str, attribute: str, targets: int,
                   rows: int, start_time: float, end_time: float, status: str = "success"):
    """Log one lazy attribute fetch."""
    logger.log_lazy_fetch(path, record_type, attribute, targets, rows, start_time, end_time, status)

def log_declaration(record_type: str, lazy_attributes: List[str], default_columns: List[str]):
    """Log a lazy attribute declaration."""
    logger.log_declaration(record_type, lazy_attributes, default_columns)

# Payload sanitization utility
def sanitize_payload(payload: Any, reveal_values: bool = False) -> Any:
    """Replace column values with their type names so rows can be logged safely."""
    if reveal_values:
        return payload
    if isinstance(payload, dict):
        return {k: type(v).__name__ for k, v in payload.items()}
    elif isinstance(payload, list):
        return [sanitize_payload(item) for item in payload]
    else:
        return type(payload).__name__
