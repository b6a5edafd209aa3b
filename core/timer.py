"""
core/timer.py — Stage countdown for Math Ninja.

The intro phase and the question phase share one countdown that starts at
STAGE_TIME_S and is shown to the player in whole seconds. Timer owns only
its own state; the session polls is_expired() after each update() and
reacts to it.

Usage:
    timer = StageTimer()
    timer.start()

    # each frame:
    timer.update(dt)
    timer.seconds_left()     # int shown on the HUD
    if timer.is_expired():
        # handle time-out in the session
"""

import math

from settings import STAGE_TIME_S


class StageTimer:
    """Whole-second countdown driven by frame deltas.

    Attributes:
        _limit:    Total seconds for the current stage.
        _elapsed:  Seconds elapsed since start(), capped at _limit.
        _running:  True while counting down.
    """

    def __init__(self) -> None:
        self._limit:   float = float(STAGE_TIME_S)
        self._elapsed: float = 0.0
        self._running: bool  = False

    def start(self, seconds: int = STAGE_TIME_S) -> None:
        """(Re)start the countdown from the given number of seconds."""
        self._limit   = float(seconds)
        self._elapsed = 0.0
        self._running = True

    def stop(self) -> None:
        """Freeze the countdown without resetting it."""
        self._running = False

    def update(self, dt: float) -> None:
        """Advance by dt seconds. No-op while stopped or already expired."""
        if self._running and self._elapsed < self._limit:
            self._elapsed = min(self._elapsed + dt, self._limit)

    def seconds_left(self) -> int:
        """Return remaining time in whole seconds.

        The value drops by one each time a full second elapses, so a fresh
        timer reads 60 and reads 59 only once a whole second has passed.
        """
        return max(0, int(self._limit - math.floor(self._elapsed + 1e-9)))

    def fill(self) -> float:
        """Remaining time as a fraction in [0.0, 1.0], for the HUD ring."""
        if self._limit <= 0:
            return 0.0
        return max(0.0, 1.0 - self._elapsed / self._limit)

    def is_expired(self) -> bool:
        return self._running and self._elapsed >= self._limit
