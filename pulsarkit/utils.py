"""Small time and counter helpers."""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_UINT64 = 1 << 64


def timestamp_millis(t: datetime) -> int:
    """Milliseconds since the Unix epoch; naive datetimes are taken as local time."""
    aware = t if t.tzinfo is not None else t.astimezone()
    return (aware - _EPOCH) // timedelta(milliseconds=1)


class SequenceGenerator:
    """Thread-safe unsigned 64-bit counter."""

    __slots__ = ("_value", "_lock")

    def __init__(self, start: int = 0) -> None:
        if not 0 <= start < _UINT64:
            raise ValueError(f"start must be an unsigned 64-bit value, got {start}")
        self._value = start
        self._lock = threading.Lock()

    def get_and_add(self, diff: int) -> int:
        """Add ``diff`` (wrapping at 2**64) and return the previous value."""
        if not 0 <= diff < _UINT64:
            raise ValueError(f"diff must be an unsigned 64-bit value, got {diff}")
        with self._lock:
            previous = self._value
            self._value = (previous + diff) % _UINT64
            return previous