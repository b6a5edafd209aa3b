"""
core/session.py — The game session state machine for Math Ninja.

GameSession owns the authoritative phase of one play-through and drives
every subsystem:
    - ScoreLedger   (score, streak, weapon)
    - StageTimer    (60 s countdown shared by intro and question phases)
    - LivesEconomy  (persisted lives, regeneration)
    - QuestionLoader (next round's question, possibly slow)
    - StatsRecorder (one record per resolved round)
    - Scheduler     (staged delays between phases)

Phases:
    INTRO_FRUIT      — slice every fruit, avoid bombs. While the round's
                       question is still loading the phase holds with
                       loading=True, no items and a stopped timer.
    PLAYING          — slice the fruit carrying the right answer
    FEEDBACK_CORRECT — 0.8 s hold after a correct answer
    FEEDBACK_WRONG   — 1.0 s hold after a wrong answer or any timeout
    REWARD           — a weapon tier was unlocked; waits for claim_reward()
    GAME_OVER        — out of lives, terminal
    VICTORY          — terminal; nothing inside the session produces it

Transitions:
    INTRO_FRUIT → PLAYING          : last fruit sliced, after 0.5 s
    INTRO_FRUIT → FEEDBACK_WRONG   : timer hits 0 with lives left
    INTRO_FRUIT → GAME_OVER        : timer hits 0 on the last life
    FEEDBACK_WRONG → INTRO_FRUIT   : after an intro timeout, same round
    PLAYING → FEEDBACK_CORRECT     : correct answer
    PLAYING → FEEDBACK_WRONG       : wrong answer or timer hits 0
    FEEDBACK_CORRECT → REWARD      : a weapon was unlocked
    FEEDBACK_CORRECT → INTRO_FRUIT : next round
    FEEDBACK_WRONG → INTRO_FRUIT   : next round
    FEEDBACK_WRONG → GAME_OVER     : no lives left
    REWARD → INTRO_FRUIT           : claim_reward(), next round

Every phase entry bumps a generation counter. Deferred callbacks capture
the generation they were scheduled in and do nothing if it has moved on,
and once a phase instance has begun exiting, further slices and answers
are ignored. Only the first exit event of a phase instance counts.

The session is pygame-free; core/game.py feeds it input and renders it.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from core.intro import spawn_intro_items, step_items, fruits_remaining
from core.ledger import ScoreLedger
from core.lives import LivesEconomy
from core.loader import QuestionLoader
from core.models import IntroItem, Phase, Question, Weapon
from core.question_provider import difficulty_for_score
from core.scheduler import Scheduler
from core.stats import StatsRecorder
from core.timer import StageTimer
from settings import INTRO_SETTLE_S, FEEDBACK_CORRECT_S, FEEDBACK_WRONG_S

logger = logging.getLogger(__name__)

# Reasons shown on the FEEDBACK_WRONG screen
FAIL_WRONG            = "wrong"
FAIL_QUESTION_TIMEOUT = "question_timeout"
FAIL_INTRO_TIMEOUT    = "intro_timeout"


class GameSession:
    """State machine for one continuous play-through.

    Attributes:
        phase:         Current Phase.
        ledger:        ScoreLedger holding score, streak and weapon.
        timer:         StageTimer for the intro and question phases.
        lives:         Lives left, mirrored from LivesEconomy.
        round_num:     1-based round; bumps on every resolved round.
        grade_level:   Grade read from stats at start(); fixed afterwards.
        question:      The current round's question, None while loading.
        intro_items:   Slice targets of the current intro attempt.
        loading:       True while the round's question is being fetched.
        reward_weapon: Weapon unlocked by the last correct answer, if any.
        last_failure:  Why the most recent FEEDBACK_WRONG happened.
    """

    def __init__(
        self,
        *,
        lives: LivesEconomy,
        loader: QuestionLoader,
        stats: StatsRecorder,
        scheduler: Scheduler,
        rng: random.Random | None = None,
        on_exit: Callable[[], None] | None = None,
    ) -> None:
        self._lives     = lives
        self._loader    = loader
        self._stats     = stats
        self._scheduler = scheduler
        self._rng       = rng or random.Random()
        self._on_exit   = on_exit

        self.ledger = ScoreLedger()
        self.timer  = StageTimer()

        self.phase:         Phase              = Phase.INTRO_FRUIT
        self.lives:         int                = 0
        self.round_num:     int                = 1
        self.grade_level:   int                = 1
        self.question:      Question | None    = None
        self.intro_items:   list[IntroItem]    = []
        self.loading:       bool               = False
        self.reward_weapon: Weapon | None      = None
        self.last_failure:  str | None         = None

        self._generation = 0
        self._exiting    = False
        self._closed     = False
        self._wave       = 0

    # ── Convenience reads ─────────────────────────────────────────────────────

    @property
    def score(self) -> int:
        return self.ledger.score

    @property
    def streak(self) -> int:
        return self.ledger.streak

    @property
    def weapon(self) -> Weapon:
        return self.ledger.weapon

    @property
    def stage_timer(self) -> int:
        return self.timer.seconds_left()

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Begin the session: snapshot grade and lives, load round 1."""
        stats = self._stats.read_aggregate()
        self.grade_level = stats.grade_level
        self.lives = self._lives.current_lives()
        self.ledger.reset()
        self.round_num = 1
        logger.info("Session start: grade=%d lives=%d", self.grade_level, self.lives)

        if self.lives == 0:
            self._game_over()
            return
        self._begin_round()

    def exit(self) -> None:
        """Tear the session down and notify the caller.

        Pending delays are dropped and an in-flight question fetch is
        discarded; nothing mutates the session afterwards. Safe to call
        more than once; on_exit fires only the first time.
        """
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self.timer.stop()
        self._loader.cancel()
        self._scheduler.clear()
        logger.info("Session exit in %s: score=%d round=%d", self.phase.name, self.score, self.round_num)
        if self._on_exit:
            self._on_exit()

    # ── Phase plumbing ────────────────────────────────────────────────────────

    def _enter(self, phase: Phase) -> None:
        self._generation += 1
        self._exiting = False
        logger.debug("Phase %s → %s (gen %d)", self.phase.name, phase.name, self._generation)
        self.phase = phase

    def _later(self, delay: float, action: Callable[[], None]) -> None:
        """Run action after delay, unless the phase has moved on by then."""
        generation = self._generation

        def fire() -> None:
            if self._closed or generation != self._generation:
                logger.debug("Dropping stale callback from gen %d", generation)
                return
            action()

        self._scheduler.after(delay, fire)

    def _begin_round(self) -> None:
        """Enter a fresh intro phase and start fetching this round's question."""
        self._enter(Phase.INTRO_FRUIT)
        self.loading = True
        self.question = None
        self.intro_items = []
        self.timer.stop()
        self.lives = self._lives.current_lives()

        generation = self._generation
        difficulty = difficulty_for_score(self.score)
        self._loader.request(
            difficulty,
            self.grade_level,
            lambda question: self._on_question(generation, question),
        )

    def _on_question(self, generation: int, question: Question) -> None:
        if self._closed or generation != self._generation:
            logger.debug("Discarding question %s for a stale round", question.id)
            return
        self.question = question
        self.loading = False
        self._spawn_intro()

    def _spawn_intro(self) -> None:
        self._wave += 1
        self.intro_items = spawn_intro_items(self._rng, self._wave)
        self.timer.start()

    def _next_round(self) -> None:
        self.round_num += 1
        self.reward_weapon = None
        self._begin_round()

    def _game_over(self) -> None:
        self.timer.stop()
        self._enter(Phase.GAME_OVER)
        logger.info("Game over: score=%d round=%d", self.score, self.round_num)

    # ── Intro phase ───────────────────────────────────────────────────────────

    def slice_item(self, item_id: str) -> bool:
        """Slice an intro item.

        Fruits score, bombs cost points. Slicing the last fruit freezes the
        timer and moves to the question after INTRO_SETTLE_S.

        Returns:
            True if the slice counted; False if it was ignored (wrong phase,
            still loading, already exiting, unknown or already sliced item).
        """
        if self.phase is not Phase.INTRO_FRUIT or self.loading or self._exiting:
            return False
        item = next((i for i in self.intro_items if i.id == item_id), None)
        if item is None or item.sliced:
            return False

        item.sliced = True
        if item.is_bomb:
            self.ledger.apply_bomb_hit()
        else:
            self.ledger.apply_fruit_hit()

        if fruits_remaining(self.intro_items) == 0:
            self._exiting = True
            self.timer.stop()
            self._later(INTRO_SETTLE_S, self._start_question)
        return True

    def _start_question(self) -> None:
        self._enter(Phase.PLAYING)
        self.timer.start()

    def _intro_timeout(self) -> None:
        self.timer.stop()
        self.lives = self._lives.lose_life()
        self.ledger.apply_intro_timeout()
        self.last_failure = FAIL_INTRO_TIMEOUT
        logger.info("Intro timed out in round %d; lives=%d", self.round_num, self.lives)

        if self.lives == 0:
            self._game_over()
            return
        self._enter(Phase.FEEDBACK_WRONG)
        self._later(FEEDBACK_WRONG_S, self._retry_intro)

    def _retry_intro(self) -> None:
        self._enter(Phase.INTRO_FRUIT)
        self._spawn_intro()

    # ── Question phase ────────────────────────────────────────────────────────

    def select_answer(self, answer_id: str) -> bool:
        """Answer the current question.

        Returns:
            True if the answer resolved the round; False if it was ignored
            because the session is not waiting for an answer.

        Raises:
            ValueError: If answer_id is not one of the current answers.
        """
        if self.phase is not Phase.PLAYING or self._exiting or self.question is None:
            return False
        answer = self.question.answer(answer_id)
        if answer.is_correct:
            self._resolve_correct()
        else:
            self._resolve_failure(self.ledger.apply_wrong, FAIL_WRONG)
        return True

    def _resolve_correct(self) -> None:
        self.timer.stop()
        self._enter(Phase.FEEDBACK_CORRECT)
        unlocked = self.ledger.apply_correct()
        self.reward_weapon = self.weapon if unlocked else None
        self._stats.record(self.score, 1, self.round_num)
        logger.info("Round %d correct: score=%d streak=%d", self.round_num, self.score, self.streak)
        self._later(FEEDBACK_CORRECT_S, self._after_correct)

    def _after_correct(self) -> None:
        if self.reward_weapon is not None:
            self._enter(Phase.REWARD)
        else:
            self._next_round()

    def _resolve_failure(self, apply_penalty: Callable[[], None], reason: str) -> None:
        self.timer.stop()
        self._enter(Phase.FEEDBACK_WRONG)
        self.last_failure = reason
        self.lives = self._lives.lose_life()
        apply_penalty()
        self._stats.record(self.score, 0, self.round_num)
        logger.info("Round %d failed (%s): score=%d lives=%d", self.round_num, reason, self.score, self.lives)

        if self.lives == 0:
            self._later(FEEDBACK_WRONG_S, self._game_over)
        else:
            self._later(FEEDBACK_WRONG_S, self._next_round)

    # ── Reward ────────────────────────────────────────────────────────────────

    def claim_reward(self) -> bool:
        """Dismiss the reward screen and start the next round."""
        if self.phase is not Phase.REWARD:
            return False
        self._next_round()
        return True

    # ── Per-frame update ──────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        """Advance item physics and the stage timer by dt seconds.

        Physics runs only while intro items are on screen; the timer only
        in INTRO_FRUIT and PLAYING. Expiry triggers the matching timeout.
        """
        if self._closed:
            return

        if self.phase is Phase.INTRO_FRUIT and not self.loading:
            step_items(self.intro_items, dt)

        if self.phase in (Phase.INTRO_FRUIT, Phase.PLAYING):
            self.timer.update(dt)
            if self.timer.is_expired() and not self._exiting:
                if self.phase is Phase.INTRO_FRUIT:
                    self._intro_timeout()
                else:
                    self._resolve_failure(self.ledger.apply_question_timeout, FAIL_QUESTION_TIMEOUT)
