"""
core/scheduler.py — Virtual-time deferred callbacks for Math Ninja.

Staged transitions (the 0.5 s settle after the last intro fruit, the
feedback holds before the next round) are scheduled here instead of on
wall-clock sleeps. The game loop advances the scheduler by each frame's
dt; tests advance it by exact amounts.

The scheduler does not know about phases. Callers guard their callbacks
themselves (the session checks its phase generation before acting), and
clear() drops everything still pending when a session is torn down.

Usage:
    scheduler = Scheduler()
    scheduler.after(0.8, next_round)
    scheduler.advance(dt)        # fires every callback now due, in order
"""

from __future__ import annotations

import heapq
import itertools
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class Scheduler:
    """Min-heap of (due_time, seq, callback) on a virtual clock.

    Attributes:
        now:   Virtual seconds elapsed since construction.
        _heap: Pending entries. seq breaks ties so equal due times fire in
               scheduling order.
    """

    def __init__(self) -> None:
        self.now: float = 0.0
        self._heap: list[tuple[float, int, Callable[[], None]]] = []
        self._seq = itertools.count()

    def after(self, delay: float, callback: Callable[[], None]) -> None:
        """Schedule callback to run once, delay seconds from now.

        Args:
            delay:    Seconds. Negative values are treated as zero.
            callback: Zero-argument callable.
        """
        heapq.heappush(self._heap, (self.now + max(0.0, delay), next(self._seq), callback))

    def advance(self, dt: float) -> None:
        """Move virtual time forward by dt and fire every due callback.

        Callbacks scheduled by a firing callback run in the same call if
        they fall due within the advanced window.
        """
        target = self.now + max(0.0, dt)
        while self._heap and self._heap[0][0] <= target:
            due, _, callback = heapq.heappop(self._heap)
            self.now = due
            callback()
        self.now = target

    def clear(self) -> None:
        """Drop all pending callbacks."""
        if self._heap:
            logger.debug("Dropping %d pending callback(s)", len(self._heap))
        self._heap.clear()

    def pending(self) -> int:
        return len(self._heap)
