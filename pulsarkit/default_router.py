"""Default partition routing: key hash, or time-sticky round robin."""

from __future__ import annotations

import random
import time
from typing import Callable

Clock = Callable[[], int]
_UINT32 = 0xFFFFFFFF


def system_clock() -> Clock:
    """Return a clock giving the current time in nanoseconds."""
    return time.time_ns


def new_default_router(
    clock: Clock,
    hash_func: Callable[[str], int],
    max_batching_delay_ns: int,
) -> Callable[[str, int], int]:
    """Build a router mapping ``(key, num_partitions)`` to a partition index.

    Keyed messages go to ``hash(key) % num_partitions``. Messages without a
    key stay on one partition for each ``max_batching_delay_ns`` window,
    moving round robin between windows.
    """
    shift_idx = random.getrandbits(32)

    def route(key: str, num_partitions: int) -> int:
        if num_partitions == 1:
            return 0
        if key:
            return hash_func(key) % num_partitions
        if max_batching_delay_ns != 0:
            n = ((clock() // max_batching_delay_ns) + shift_idx) & _UINT32
            return n % num_partitions
        return 0

    return route