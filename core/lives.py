"""
core/lives.py — Life regeneration economy for Math Ninja.

Lives are not counted down by a running timer. The store holds a life
count and, while below MAX_LIVES, the epoch-ms anchor at which the current
regeneration cycle started. Every read recomputes how many whole
REGEN_PERIOD_MS intervals have passed since the anchor:

    restored = (now - anchor) // REGEN_PERIOD_MS

The anchor then advances by exactly restored * REGEN_PERIOD_MS, so the
partial progress toward the next life survives the read. At MAX_LIVES the
anchor is removed.

Losing a life only arms the anchor if none is set. A second loss while
already regenerating shares the running cycle: both lives come back on the
same 120 s cadence, one per period.

Usage:
    lives = LivesEconomy(store)
    lives.current_lives()      # 0..3, reconciles against the clock
    lives.lose_life()          # returns the new count
    lives.time_to_next_life()  # "1:42", "ready", or None at full lives
"""

from __future__ import annotations

import logging

from core.store import Store, LIVES_COUNT_KEY, LIVES_TIMESTAMP_KEY
from settings import MAX_LIVES, REGEN_PERIOD_MS
from utils.clock import Clock, now_ms, format_countdown

logger = logging.getLogger(__name__)


class LivesEconomy:
    """Derives life count and regen countdown from the persisted record.

    Attributes:
        _store: Persistence capability holding the count and anchor keys.
        _clock: Returns the current epoch milliseconds.
    """

    def __init__(self, store: Store, clock: Clock = now_ms) -> None:
        self._store = store
        self._clock = clock

    # ── Persisted record ──────────────────────────────────────────────────────

    def _read_count(self) -> int:
        raw = self._store.get(LIVES_COUNT_KEY)
        if raw is None:
            return MAX_LIVES
        try:
            count = int(raw)
        except ValueError:
            logger.warning("Corrupt lives count %r; resetting to %d", raw, MAX_LIVES)
            return MAX_LIVES
        return max(0, min(MAX_LIVES, count))

    def _read_anchor(self) -> int | None:
        raw = self._store.get(LIVES_TIMESTAMP_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("Corrupt lives timestamp %r; discarding", raw)
            return None

    def _write(self, count: int, anchor: int | None) -> None:
        self._store.set(LIVES_COUNT_KEY, str(count))
        if anchor is None:
            self._store.delete(LIVES_TIMESTAMP_KEY)
        else:
            self._store.set(LIVES_TIMESTAMP_KEY, str(anchor))

    # ── Public contract ───────────────────────────────────────────────────────

    def current_lives(self) -> int:
        """Return the life count after applying any regeneration that is due.

        Writes back only when something changed, so two calls in a row
        return the same value and leave the record untouched.

        Returns:
            Integer in [0, MAX_LIVES].
        """
        count = self._read_count()
        anchor = self._read_anchor()

        if count >= MAX_LIVES:
            if anchor is not None:
                self._store.delete(LIVES_TIMESTAMP_KEY)
            return count

        if anchor is None:
            # Below max with no cycle running: start one so the life comes back.
            self._write(count, self._clock())
            return count

        restored = (self._clock() - anchor) // REGEN_PERIOD_MS
        if restored <= 0:
            return count

        count = min(MAX_LIVES, count + restored)
        anchor = None if count >= MAX_LIVES else anchor + restored * REGEN_PERIOD_MS
        self._write(count, anchor)
        logger.info("Regenerated %d life(s); now %d", restored, count)
        return count

    def lose_life(self) -> int:
        """Spend one life and arm regeneration if no cycle is running.

        Returns:
            The new life count, floored at 0.
        """
        count = max(0, self.current_lives() - 1)
        anchor = self._read_anchor()
        if anchor is None:
            anchor = self._clock()
        self._write(count, anchor)
        logger.debug("Life lost; %d remaining", count)
        return count

    def time_to_next_life(self) -> str | None:
        """Return the countdown to the next life as m:ss.

        Returns:
            None at full lives, "ready" if a life is due but not yet
            reconciled by current_lives(), otherwise a string like "1:05".
        """
        if self._read_count() >= MAX_LIVES:
            return None
        anchor = self._read_anchor()
        if anchor is None:
            return format_countdown(REGEN_PERIOD_MS)
        remaining = REGEN_PERIOD_MS - (self._clock() - anchor)
        if remaining <= 0:
            return "ready"
        return format_countdown(remaining)

    def reset(self) -> None:
        """Restore full lives and clear the regeneration anchor."""
        self._write(MAX_LIVES, None)
