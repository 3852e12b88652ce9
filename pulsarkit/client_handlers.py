"""A thread-safe registry of resources closed together with the client."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod


class Closable(ABC):
    """Something that can be closed."""

    @abstractmethod
    def close(self) -> None:
        """Close the resource."""


class ClientHandlers:
    """Set of closable handlers, all closed by ``close``."""

    __slots__ = ("_handlers", "_lock")

    def __init__(self) -> None:
        self._handlers: dict[Closable, bool] = {}
        self._lock = threading.Lock()

    def add(self, closable: Closable) -> None:
        with self._lock:
            self._handlers[closable] = True

    def val(self, closable: Closable) -> bool:
        """Whether ``closable`` has been registered."""
        with self._lock:
            return self._handlers.get(closable, False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)

    def close(self) -> None:
        """Close every registered handler."""
        with self._lock:
            handlers = list(self._handlers)
            for handler in handlers:
                handler.close()