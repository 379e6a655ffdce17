"""Helpers for redacting API tokens from logs, errors and journal payloads."""

from __future__ import annotations

import re
from typing import Any

REDACTED = "[REDACTED]"

_SENSITIVE_KEY_RE = re.compile(
    r"(appid|token|secret|authorization|api[_-]?key)",
    re.IGNORECASE,
)
# OpenWeatherMap carries the credential in the query string, not a header.
_QUERY_APPID_RE = re.compile(r"(?i)([?&]appid=)[^&#\s\"']*")
_KEY_VALUE_SECRET_RE = re.compile(
    r"""(?ix)
    (
      token|
      secret|
      authorization|
      api[_-]?key
    )
    ['"]?\s*[:=]\s*['"]?
    ([^\s,;&'"]+)
    """
)


def sanitize_text(text: str) -> str:
    """Redact sensitive content embedded in plain text."""
    sanitized = _QUERY_APPID_RE.sub(r"\1" + REDACTED, text)
    sanitized = _KEY_VALUE_SECRET_RE.sub(lambda m: f"{m.group(1)}={REDACTED}", sanitized)
    return sanitized


def sanitize_for_logging(value: Any) -> Any:
    """Recursively redact sensitive values in nested structures."""
    if isinstance(value, dict):
        sanitized: dict[Any, Any] = {}
        for key, child in value.items():
            if _SENSITIVE_KEY_RE.search(str(key)):
                sanitized[key] = REDACTED
            else:
                sanitized[key] = sanitize_for_logging(child)
        return sanitized
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_for_logging(item) for item in value)
    if isinstance(value, str):
        return sanitize_text(value)
    return value
