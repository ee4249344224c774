"""
datamigrations Observability Module.

Structured logging for the migration store.

Usage:
    from datamigrations.observability import setup_logging

    setup_logging(level="INFO", format_type="json")
"""

from datamigrations.observability.logging import (
    JSONFormatter,
    TextFormatter,
    setup_logging,
)

__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "setup_logging",
]
