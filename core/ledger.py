"""
core/ledger.py — Score, streak and weapon bookkeeping for Math Ninja.

ScoreLedger is a pure data container with one mutator per scoring event.
It does not know about phases, lives or timers; the session decides which
event happened and calls the matching method.

Penalties always clamp the score at zero. Only a correct answer can move
the weapon up a tier, and only a failure (wrong answer or either timeout)
can move it back to the basic katana. Fruit and bomb hits in the intro
phase touch the score alone.
"""

from __future__ import annotations

from core.models import Weapon
from settings import (
    POINTS_CORRECT, POINTS_FRUIT,
    PENALTY_WRONG, PENALTY_INTRO_TIMEOUT, PENALTY_QUESTION_TIMEOUT, PENALTY_BOMB,
    GOLD_SWORD_STREAK, DIAMOND_SWORD_STREAK,
)


class ScoreLedger:
    """Score / streak / weapon state for one session.

    Attributes:
        score:  Cumulative score, never negative.
        streak: Consecutive correct answers since the last failure.
        weapon: Current weapon tier.
    """

    def __init__(self) -> None:
        self.score:  int    = 0
        self.streak: int    = 0
        self.weapon: Weapon = Weapon.BASIC_KATANA

    def reset(self) -> None:
        self.score = 0
        self.streak = 0
        self.weapon = Weapon.BASIC_KATANA

    # ── Question outcomes ─────────────────────────────────────────────────────

    def apply_correct(self) -> bool:
        """Record a correct answer and unlock a weapon tier if one is due.

        Gold is granted when the streak reaches GOLD_SWORD_STREAK while
        holding the basic katana; diamond when it reaches
        DIAMOND_SWORD_STREAK without already holding diamond.

        Returns:
            True if this answer unlocked a new weapon (reward screen due).
        """
        self.score += POINTS_CORRECT
        self.streak += 1

        if self.streak == GOLD_SWORD_STREAK and self.weapon is Weapon.BASIC_KATANA:
            self.weapon = Weapon.GOLD_SWORD
            return True
        if self.streak == DIAMOND_SWORD_STREAK and self.weapon is not Weapon.DIAMOND_SWORD:
            self.weapon = Weapon.DIAMOND_SWORD
            return True
        return False

    def apply_wrong(self) -> None:
        self._fail(PENALTY_WRONG)

    def apply_intro_timeout(self) -> None:
        self._fail(PENALTY_INTRO_TIMEOUT)

    def apply_question_timeout(self) -> None:
        """Softer than a wrong answer: running out the clock costs one point."""
        self._fail(PENALTY_QUESTION_TIMEOUT)

    def _fail(self, penalty: int) -> None:
        self._deduct(penalty)
        self.streak = 0
        self.weapon = Weapon.BASIC_KATANA

    # ── Intro hits ────────────────────────────────────────────────────────────

    def apply_fruit_hit(self) -> None:
        self.score += POINTS_FRUIT

    def apply_bomb_hit(self) -> None:
        """Bombs cost points but never a life, streak or weapon."""
        self._deduct(PENALTY_BOMB)

    def _deduct(self, amount: int) -> None:
        self.score = max(0, self.score - amount)
