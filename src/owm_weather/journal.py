"""Per-session JSONL journal of weather lookups."""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .exceptions import JournalError
from .redaction import sanitize_for_logging

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9_-]+")


class JournalWriter:
    """Appends lookup events for one CLI session and saves raw responses.

    Events land in `<journal_dir>/weather_<YYYYMMDD>.jsonl`; each line carries
    the session id so concurrent runs can be told apart. Raw responses are
    written verbatim (minus credentials) so they can be reused as parser
    fixtures.
    """

    def __init__(self, journal_dir: Path, raw_payload_dir: Path, session_id: str) -> None:
        self.raw_payload_dir = raw_payload_dir
        self.session_id = session_id
        try:
            journal_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise JournalError(f"Failed creating journal directory: {exc}") from exc
        self.events_path = journal_dir / f"weather_{datetime.now(UTC):%Y%m%d}.jsonl"

    def write_event(self, event_type: str, **fields: Any) -> None:
        """Append one event; `fields` must be JSON-native values."""
        record = {
            "ts": datetime.now(UTC).isoformat(),
            "session_id": self.session_id,
            "event_type": event_type,
            **sanitize_for_logging(fields),
        }
        try:
            line = json.dumps(record, ensure_ascii=False, allow_nan=False)
            with self.events_path.open("a", encoding="utf-8") as fh:
                fh.write(line + "\n")
        except (OSError, TypeError, ValueError) as exc:
            raise JournalError(f"Failed writing {event_type} event: {exc}") from exc

    def write_raw_response(self, location: str, payload: dict[str, Any]) -> Path:
        """Save a provider response as `<ts>_<session>_<location>.json`."""
        timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")
        slug = _UNSAFE_NAME_RE.sub("_", location).strip("_").lower() or "unknown"
        output_path = self.raw_payload_dir / f"{timestamp}_{self.session_id}_{slug}.json"
        try:
            self.raw_payload_dir.mkdir(parents=True, exist_ok=True)
            output_path.write_text(
                json.dumps(sanitize_for_logging(payload), ensure_ascii=False, indent=2) + "\n",
                encoding="utf-8",
            )
        except (OSError, TypeError, ValueError) as exc:
            raise JournalError(f"Failed writing raw response for {location!r}: {exc}") from exc
        return output_path
