"""
utils/clock.py — Wall-clock helpers for Math Ninja.

Life regeneration has to keep progressing while the game is closed, so it
is anchored to wall-clock epoch milliseconds rather than a monotonic clock.
Anything that needs "now" takes a Clock callable so tests can pin time.
"""

import time
from typing import Callable

Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def format_countdown(remaining_ms: int) -> str:
    """Format a positive duration as m:ss.

    Args:
        remaining_ms: Milliseconds left. Fractions of a second are dropped.

    Returns:
        String like "1:05" or "0:09".
    """
    mins, secs = divmod(max(0, remaining_ms) // 1000, 60)
    return f"{mins}:{secs:02d}"
