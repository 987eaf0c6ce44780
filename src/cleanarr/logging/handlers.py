"""JSON log output for Cleanarr.

Log calls attach their subject through ``extra``: the service being
synced, the rule being evaluated, or the media being deleted:

    logger.warning("Skipping rule ...", extra={"rule": rule.name})
    logger.info("Deleted movie ...", extra={"media_type": MediaType.MOVIE,
                                            "media_id": movie_id})

JSONFormatter collects those keys under "context".
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any

# Keys Cleanarr logs with, emitted first and in this order
CONTEXT_KEYS = ("service", "rule", "media_type", "media_id", "suggestion_id")

# Attributes present on every record; anything else was passed via extra
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _context_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def record_context(record: logging.LogRecord) -> dict[str, Any]:
    """Return the extra fields of a record, known context keys first."""
    extras = {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }
    ordered = {key: extras.pop(key) for key in CONTEXT_KEYS if key in extras}
    ordered.update(sorted(extras.items()))
    return {key: _context_value(value) for key, value in ordered.items()}


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object per line.

    Fields: timestamp (ISO-8601 UTC), level, logger, message, and when
    present context and exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = record_context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)
