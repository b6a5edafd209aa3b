"""
Unit tests for core.ledger.ScoreLedger.

Covers scoring, streak tracking, weapon unlocks and the score floor.
"""

import pytest

from core.ledger import ScoreLedger
from core.models import Weapon


class TestApplyCorrect:
    """Tests for ScoreLedger.apply_correct()."""

    def test_apply_correct_when_called_then_adds_ten_and_bumps_streak(self):
        ledger = ScoreLedger()

        unlocked = ledger.apply_correct()

        assert ledger.score == 10
        assert ledger.streak == 1
        assert unlocked is False
        assert ledger.weapon is Weapon.BASIC_KATANA

    def test_apply_correct_when_streak_reaches_three_then_unlocks_gold(self):
        ledger = ScoreLedger()
        results = [ledger.apply_correct() for _ in range(3)]

        assert results == [False, False, True]
        assert ledger.weapon is Weapon.GOLD_SWORD

    def test_apply_correct_when_streak_reaches_six_then_unlocks_diamond(self):
        ledger = ScoreLedger()
        results = [ledger.apply_correct() for _ in range(6)]

        assert results == [False, False, True, False, False, True]
        assert ledger.weapon is Weapon.DIAMOND_SWORD

    def test_apply_correct_when_past_six_then_never_downgrades(self):
        ledger = ScoreLedger()
        for expected_streak in range(1, 13):
            ledger.apply_correct()
            assert ledger.streak == expected_streak

        assert ledger.weapon is Weapon.DIAMOND_SWORD
        assert ledger.score == 120


class TestFailures:
    """Tests for the wrong-answer and timeout penalties."""

    @pytest.mark.parametrize("apply, penalty", [
        ("apply_wrong", 5),
        ("apply_intro_timeout", 5),
        ("apply_question_timeout", 1),
    ])
    def test_failure_when_on_streak_then_resets_streak_and_weapon(self, apply, penalty):
        ledger = ScoreLedger()
        for _ in range(6):
            ledger.apply_correct()

        getattr(ledger, apply)()

        assert ledger.score == 60 - penalty
        assert ledger.streak == 0
        assert ledger.weapon is Weapon.BASIC_KATANA

    @pytest.mark.parametrize("apply", ["apply_wrong", "apply_intro_timeout", "apply_question_timeout"])
    def test_failure_when_score_zero_then_stays_zero(self, apply):
        ledger = ScoreLedger()

        getattr(ledger, apply)()

        assert ledger.score == 0

    def test_apply_wrong_when_score_below_penalty_then_floors_at_zero(self):
        ledger = ScoreLedger()
        ledger.score = 3

        ledger.apply_wrong()

        assert ledger.score == 0


class TestIntroHits:
    """Tests for fruit and bomb hits."""

    def test_apply_fruit_hit_when_called_then_adds_ten_without_streak(self):
        ledger = ScoreLedger()

        ledger.apply_fruit_hit()

        assert ledger.score == 10
        assert ledger.streak == 0

    def test_apply_bomb_hit_when_on_streak_then_only_score_changes(self):
        ledger = ScoreLedger()
        for _ in range(3):
            ledger.apply_correct()

        ledger.apply_bomb_hit()

        assert ledger.score == 20
        assert ledger.streak == 3
        assert ledger.weapon is Weapon.GOLD_SWORD

    def test_apply_bomb_hit_when_score_low_then_floors_at_zero(self):
        ledger = ScoreLedger()
        ledger.apply_fruit_hit()
        ledger.apply_bomb_hit()
        ledger.apply_bomb_hit()

        assert ledger.score == 0

    def test_reset_when_called_then_restores_fresh_state(self):
        ledger = ScoreLedger()
        for _ in range(3):
            ledger.apply_correct()

        ledger.reset()

        assert (ledger.score, ledger.streak, ledger.weapon) == (0, 0, Weapon.BASIC_KATANA)
