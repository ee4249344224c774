"""
datamigrations Logging Setup.

Log lines go to the ``datamigrations`` logger hierarchy, rendered either
as one JSON object per line (for log shippers) or as plain text.

Anything passed through ``extra=`` on a logging call is carried along as
context: under ``"context"`` in JSON, as ``key=value`` pairs in text.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

PACKAGE_LOGGER = "datamigrations"

# Attributes every LogRecord has; anything else on a record came from ``extra=``
_BUILTIN_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Return the ``extra=`` values attached to a record."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _BUILTIN_ATTRS and not key.startswith("_")
    }


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
    return value


class JSONFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def __init__(self, service_name: str = PACKAGE_LOGGER):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: Dict[str, Any] = {
            "time": created.isoformat(),
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = {k: _jsonable(v) for k, v in record_context(record).items()}
        if context:
            entry["context"] = context

        if record.exc_info and record.exc_info[0] is not None:
            entry["error"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry)


class TextFormatter(logging.Formatter):
    """Plain text lines: ``time level logger: message key=value ...``."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        head, sep, rest = line.partition("\n")
        return f"{head} {pairs}{sep}{rest}"


def setup_logging(
    level: str = "INFO",
    format_type: str = "text",
    output: str = "stderr",
) -> logging.Logger:
    """
    Route the package's log records to a single handler.

    Calling it again replaces the previous handler.

    Args:
        level: Level name, e.g. "DEBUG" (unknown names fall back to INFO)
        format_type: "json" or "text"
        output: "stderr", "stdout", or a file path

    Returns:
        The ``datamigrations`` logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if output in ("stderr", "stdout"):
        handler: logging.Handler = logging.StreamHandler(getattr(sys, output))
    else:
        handler = logging.FileHandler(output)

    if format_type.lower() == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(TextFormatter())

    for old in package_logger.handlers[:]:
        package_logger.removeHandler(old)
        old.close()
    package_logger.addHandler(handler)
    return package_logger
