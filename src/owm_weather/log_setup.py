"""Structured console logging for the weather CLI."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from .redaction import sanitize_text

# Lookup context callers attach with `extra=`; copied onto the JSON line when set.
CONTEXT_FIELDS = ("session_id", "location", "status_code")


class JsonConsoleFormatter(logging.Formatter):
    """Render records as single-line JSON with the API key scrubbed."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": sanitize_text(record.getMessage()),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                event[field] = sanitize_text(value) if isinstance(value, str) else value
        if record.exc_info:
            event["exception"] = sanitize_text(self.formatException(record.exc_info))
        return json.dumps(event, ensure_ascii=False)


def setup_logger(level: int | str = logging.INFO) -> logging.Logger:
    """Return the package logger writing JSON lines to stderr at `level`.

    Safe to call repeatedly: the handler is attached once and only the level
    is updated on later calls (the CLI re-applies LOG_LEVEL after settings load).
    """
    logger = logging.getLogger("owm_weather")
    logger.setLevel(level)
    logger.propagate = False
    if not any(isinstance(h.formatter, JsonConsoleFormatter) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonConsoleFormatter())
        logger.addHandler(handler)
    return logger
