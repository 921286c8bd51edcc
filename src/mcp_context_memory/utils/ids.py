"""Identifier, timestamp and size helpers for topics and entries."""

import json
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

_clock_lock = threading.Lock()
_last_issued: datetime | None = None


def new_id() -> str:
    """Return a random 128-bit identifier as 32 hex characters."""
    return uuid.uuid4().hex


def _to_iso(dt: datetime) -> str:
    """Format a UTC datetime as ISO-8601 with milliseconds and a Z suffix."""
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now() -> str:
    """Return the current UTC time as an ISO-8601 string.

    Timestamps are strictly increasing within the process: if the wall clock
    has not moved past the last issued millisecond, the last value is bumped
    by one millisecond instead.
    """
    global _last_issued
    current = datetime.now(timezone.utc)
    current = current.replace(microsecond=current.microsecond // 1000 * 1000)
    with _clock_lock:
        if _last_issued is not None and current <= _last_issued:
            current = _last_issued + timedelta(milliseconds=1)
        _last_issued = current
    return _to_iso(current)


def size_of(entry: Any) -> int:
    """Return the character length of the compact JSON form of *entry*.

    Accepts a pydantic model or a plain mapping.
    """
    data = entry.model_dump(mode="json") if hasattr(entry, "model_dump") else entry
    return len(json.dumps(data, ensure_ascii=False, separators=(",", ":"), default=str))
