"""Exponential backoff for reconnection attempts."""

from __future__ import annotations

from dataclasses import dataclass

_NS_PER_SECOND = 1_000_000_000
_MIN_BACKOFF_NS = 100_000_000
_MAX_BACKOFF_NS = 60 * _NS_PER_SECOND

MIN_BACKOFF = _MIN_BACKOFF_NS / _NS_PER_SECOND
MAX_BACKOFF = _MAX_BACKOFF_NS / _NS_PER_SECOND


@dataclass
class Backoff:
    """Delay that doubles on every call, between MIN_BACKOFF and MAX_BACKOFF seconds."""

    _backoff_ns: int = 0

    def next_delay(self) -> float:
        """Return the next delay in seconds."""
        self._backoff_ns += self._backoff_ns
        if self._backoff_ns < _MIN_BACKOFF_NS:
            self._backoff_ns = _MIN_BACKOFF_NS
        elif self._backoff_ns > _MAX_BACKOFF_NS:
            self._backoff_ns = _MAX_BACKOFF_NS
        return self._backoff_ns / _NS_PER_SECOND