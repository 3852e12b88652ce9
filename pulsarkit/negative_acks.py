"""Tracks negatively acknowledged messages and requests their redelivery later."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Protocol, Sequence

log = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class MessageId:
    """Position of a message: ledger, entry, index within a batch and partition."""

    ledger_id: int
    entry_id: int
    batch_idx: int = 0
    partition_idx: int = 0


class RedeliveryConsumer(Protocol):
    def redeliver(self, msg_ids: Sequence[MessageId]) -> None: ...


class NegativeAcksTracker:
    """Collects negative acks and hands them to the consumer after ``delay`` seconds.

    Acks are tracked per batch entry, and checked every third of the delay.
    """

    def __init__(self, redelivery_consumer: RedeliveryConsumer, delay: float) -> None:
        if delay <= 0:
            raise ValueError(f"delay must be positive, got {delay}")
        self._consumer = redelivery_consumer
        self._delay = delay
        self._tick = delay / 3
        self._negative_acks: dict[MessageId, float] = {}
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._thread = threading.Thread(
            target=self._track, name="nack-tracker", daemon=True
        )
        self._thread.start()

    def add(self, msg_id: MessageId) -> None:
        """Track ``msg_id``; the whole batch entry it belongs to is redelivered."""
        batch_msg_id = MessageId(msg_id.ledger_id, msg_id.entry_id, 0)
        with self._lock:
            if batch_msg_id in self._negative_acks:
                return
            self._negative_acks[batch_msg_id] = time.monotonic() + self._delay

    def _track(self) -> None:
        while not self._done.wait(self._tick):
            now = time.monotonic()
            with self._lock:
                due = [
                    msg_id
                    for msg_id, target in self._negative_acks.items()
                    if target < now
                ]
                for msg_id in due:
                    log.debug("Redelivering MsgId: %s", msg_id)
                    del self._negative_acks[msg_id]
            if due:
                self._consumer.redeliver(due)
        log.debug("Closing nack tracker")

    def close(self) -> None:
        """Stop tracking; pending negative acks are dropped."""
        self._done.set()
        if self._thread is not threading.current_thread():
            self._thread.join()

    def __enter__(self) -> NegativeAcksTracker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()