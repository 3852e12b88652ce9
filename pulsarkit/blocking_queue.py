"""Bounded FIFO queue whose put blocks when full and take blocks when empty."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Iterator


class BlockingQueue:
    """Thread-safe bounded FIFO queue."""

    __slots__ = ("_items", "_max_size", "_lock", "_not_empty", "_not_full")

    def __init__(self, max_size: int) -> None:
        if max_size < 1:
            raise ValueError(f"max_size must be at least 1, got {max_size}")
        self._items: deque[Any] = deque()
        self._max_size = max_size
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._not_full = threading.Condition(self._lock)

    def put(self, item: Any) -> None:
        """Enqueue ``item``, blocking while the queue is full."""
        with self._not_full:
            while len(self._items) >= self._max_size:
                self._not_full.wait()
            self._items.append(item)
            self._not_empty.notify()

    def take(self) -> Any:
        """Dequeue the first item, blocking until one is available."""
        with self._not_empty:
            while not self._items:
                self._not_empty.wait()
            return self._dequeue()

    def poll(self) -> Any:
        """Dequeue the first item, or return None if the queue is empty."""
        with self._lock:
            if not self._items:
                return None
            return self._dequeue()

    def peek(self) -> Any:
        """Return the first item without removing it, or None if empty."""
        with self._lock:
            return self._items[0] if self._items else None

    def peek_last(self) -> Any:
        """Return the last item without removing it, or None if empty."""
        with self._lock:
            return self._items[-1] if self._items else None

    def _dequeue(self) -> Any:
        item = self._items.popleft()
        self._not_full.notify()
        return item

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        """Iterate over the items present when iteration starts, oldest first."""
        with self._lock:
            snapshot = list(self._items)
        return iter(snapshot)