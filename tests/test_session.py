"""
Tests for core.session.GameSession.

Sessions run against in-memory collaborators from conftest.py. Staged
delays are driven by advancing the Scheduler; the stage timer by calling
session.update() with a large dt.
"""

import pytest

from core.models import Phase, Weapon
from core.session import FAIL_INTRO_TIMEOUT, FAIL_QUESTION_TIMEOUT, FAIL_WRONG
from settings import REGEN_PERIOD_MS


def slice_all_fruit(session):
    for item in list(session.intro_items):
        if not item.is_bomb:
            session.slice_item(item.id)


def reach_question(session, scheduler):
    slice_all_fruit(session)
    scheduler.advance(0.5)
    assert session.phase is Phase.PLAYING


def correct_id(session):
    return session.question.correct_answer.id


def wrong_id(session):
    return next(a.id for a in session.question.answers if not a.is_correct)


class TestStart:

    def test_start_when_fresh_profile_then_intro_with_full_state(self, make_session):
        session = make_session()

        session.start()

        assert session.phase is Phase.INTRO_FRUIT
        assert not session.loading
        assert session.question is not None
        assert len(session.intro_items) == 13
        assert (session.lives, session.round_num, session.grade_level, session.score) == (3, 1, 1, 0)
        assert session.stage_timer == 60

    def test_start_when_grade_saved_then_snapshots_it_and_requests_easy(
        self, make_session, stats, manual_loader
    ):
        stats.save(grade_level=4)
        loader = manual_loader
        session = make_session(loader=loader)

        session.start()

        assert session.grade_level == 4
        assert loader.requests[0][:2] == ("easy", 4)

    def test_start_when_no_lives_then_game_over(self, make_session, lives):
        for _ in range(3):
            lives.lose_life()
        session = make_session()

        session.start()

        assert session.phase is Phase.GAME_OVER
        assert session.phase.is_terminal


class TestIntroPhase:

    def test_slice_all_fruit_when_clean_then_question_after_settle(self, make_session, scheduler):
        session = make_session()
        session.start()

        slice_all_fruit(session)

        assert session.score == 100
        assert session.phase is Phase.INTRO_FRUIT
        scheduler.advance(0.25)
        assert session.phase is Phase.INTRO_FRUIT
        scheduler.advance(0.25)
        assert session.phase is Phase.PLAYING
        assert session.stage_timer == 60

    def test_slice_item_when_bomb_then_penalty_only(self, make_session):
        session = make_session()
        session.start()
        fruit = session.intro_items[0]
        bomb = session.intro_items[-1]

        session.slice_item(fruit.id)
        assert session.slice_item(bomb.id) is True

        assert session.score == 0
        assert session.lives == 3
        assert session.phase is Phase.INTRO_FRUIT

    def test_slice_item_when_repeated_or_unknown_then_ignored(self, make_session):
        session = make_session()
        session.start()
        fruit = session.intro_items[0]

        assert session.slice_item(fruit.id) is True
        assert session.slice_item(fruit.id) is False
        assert session.slice_item("fruit-99-0") is False
        assert session.score == 10

    def test_slice_item_when_intro_already_exiting_then_ignored(self, make_session):
        session = make_session()
        session.start()
        slice_all_fruit(session)
        bomb = session.intro_items[-1]

        assert session.slice_item(bomb.id) is False
        assert session.score == 100

    def test_intro_timeout_when_lives_left_then_retries_same_round(
        self, make_session, scheduler, stats
    ):
        session = make_session()
        session.start()
        for item in session.intro_items[:3]:
            session.slice_item(item.id)
        first_ids = {i.id for i in session.intro_items}

        session.update(60)

        assert session.phase is Phase.FEEDBACK_WRONG
        assert session.last_failure == FAIL_INTRO_TIMEOUT
        assert session.lives == 2
        assert session.score == 25

        scheduler.advance(1.0)

        assert session.phase is Phase.INTRO_FRUIT
        assert session.round_num == 1
        assert session.stage_timer == 60
        assert first_ids.isdisjoint({i.id for i in session.intro_items})
        assert stats.read_aggregate().total_games_played == 0

    def test_intro_timeout_when_last_life_then_game_over(self, make_session, lives):
        lives.lose_life()
        lives.lose_life()
        session = make_session()
        session.start()

        session.update(60)

        assert session.lives == 0
        assert session.phase is Phase.GAME_OVER


class TestQuestionPhase:

    def test_select_answer_when_correct_then_scores_and_advances_round(
        self, make_session, scheduler, stats
    ):
        session = make_session()
        session.start()
        reach_question(session, scheduler)

        assert session.select_answer(correct_id(session)) is True

        assert session.phase is Phase.FEEDBACK_CORRECT
        assert (session.score, session.streak) == (110, 1)
        recorded = stats.read_aggregate()
        assert (recorded.total_games_played, recorded.lifetime_correct_answers) == (1, 1)
        assert recorded.highest_score == 110

        scheduler.advance(0.8)

        assert session.phase is Phase.INTRO_FRUIT
        assert session.round_num == 2
        assert session.stage_timer == 60

    def test_select_answer_when_wrong_then_loses_life_and_advances(
        self, make_session, scheduler, stats
    ):
        session = make_session()
        session.start()
        reach_question(session, scheduler)

        session.select_answer(wrong_id(session))

        assert session.phase is Phase.FEEDBACK_WRONG
        assert session.last_failure == FAIL_WRONG
        assert (session.score, session.streak, session.lives) == (95, 0, 2)
        assert stats.read_aggregate().lifetime_correct_answers == 0

        scheduler.advance(1.0)

        assert session.phase is Phase.INTRO_FRUIT
        assert session.round_num == 2

    def test_next_round_when_life_regenerated_mid_session_then_hud_count_refreshed(
        self, make_session, scheduler, clock
    ):
        session = make_session()
        session.start()
        reach_question(session, scheduler)
        session.select_answer(wrong_id(session))

        assert session.lives == 2

        clock.advance(REGEN_PERIOD_MS)
        scheduler.advance(1.0)

        assert session.round_num == 2
        assert session.lives == 3

    def test_select_answer_when_wrong_on_last_life_then_game_over_after_feedback(
        self, make_session, scheduler, lives
    ):
        lives.lose_life()
        lives.lose_life()
        session = make_session()
        session.start()
        reach_question(session, scheduler)

        session.select_answer(wrong_id(session))

        assert session.lives == 0
        assert session.phase is Phase.FEEDBACK_WRONG
        scheduler.advance(1.0)
        assert session.phase is Phase.GAME_OVER
        assert scheduler.pending() == 0

    def test_question_timeout_when_clock_runs_out_then_soft_penalty(self, make_session, scheduler):
        session = make_session()
        session.start()
        reach_question(session, scheduler)

        session.update(60)

        assert session.phase is Phase.FEEDBACK_WRONG
        assert session.last_failure == FAIL_QUESTION_TIMEOUT
        assert (session.score, session.lives) == (99, 2)

    def test_select_answer_when_already_resolved_then_ignored(self, make_session, scheduler):
        session = make_session()
        session.start()
        reach_question(session, scheduler)
        session.select_answer(correct_id(session))

        assert session.select_answer(wrong_id(session)) is False
        assert session.score == 110
        assert session.lives == 3

    def test_select_answer_when_unknown_id_then_value_error(self, make_session, scheduler):
        session = make_session()
        session.start()
        reach_question(session, scheduler)

        with pytest.raises(ValueError):
            session.select_answer("not-an-answer")

    def test_select_answer_when_in_intro_then_ignored(self, make_session):
        session = make_session()
        session.start()

        assert session.select_answer(correct_id(session)) is False


class TestReward:

    def _win_round(self, session, scheduler):
        reach_question(session, scheduler)
        session.select_answer(correct_id(session))
        scheduler.advance(0.8)

    def test_third_correct_when_on_katana_then_reward_then_claim(self, make_session, scheduler):
        session = make_session()
        session.start()
        self._win_round(session, scheduler)
        self._win_round(session, scheduler)

        assert session.claim_reward() is False

        self._win_round(session, scheduler)

        assert session.phase is Phase.REWARD
        assert session.reward_weapon is Weapon.GOLD_SWORD
        assert session.round_num == 3

        assert session.claim_reward() is True
        assert session.phase is Phase.INTRO_FRUIT
        assert session.round_num == 4
        assert session.weapon is Weapon.GOLD_SWORD


class TestLoadingAndExit:

    def test_start_when_question_pending_then_holds_in_loading(self, make_session, manual_loader):
        loader = manual_loader
        session = make_session(loader=loader)
        session.start()

        assert session.phase is Phase.INTRO_FRUIT
        assert session.loading
        assert session.intro_items == []
        session.update(120)
        assert session.phase is Phase.INTRO_FRUIT
        assert session.lives == 3

        loader.release()

        assert not session.loading
        assert len(session.intro_items) == 13
        assert session.stage_timer == 60

    def test_exit_when_fetch_in_flight_then_late_result_discarded(self, make_session, manual_loader):
        exits = []
        loader = manual_loader
        session = make_session(loader=loader, on_exit=lambda: exits.append(1))
        session.start()

        session.exit()
        loader.release()

        assert session.closed
        assert loader.cancelled == 1
        assert session.question is None
        assert session.intro_items == []
        assert exits == [1]

    def test_exit_when_called_twice_then_notifies_once(self, make_session):
        exits = []
        session = make_session(on_exit=lambda: exits.append(1))
        session.start()

        session.exit()
        session.exit()

        assert exits == [1]

    def test_exit_when_feedback_pending_then_transition_dropped(self, make_session, scheduler):
        session = make_session()
        session.start()
        reach_question(session, scheduler)
        session.select_answer(correct_id(session))

        session.exit()
        scheduler.advance(5)

        assert session.phase is Phase.FEEDBACK_CORRECT
        assert session.round_num == 1

    def test_generation_when_phase_changes_then_increases(self, make_session, scheduler):
        session = make_session()
        session.start()
        seen = [session.generation]

        reach_question(session, scheduler)
        seen.append(session.generation)
        session.select_answer(correct_id(session))
        seen.append(session.generation)

        assert seen == sorted(set(seen))
