"""
core/game.py — Top-level screen controller for Math Ninja.

Game owns the two screens and everything that outlives a single session:
    - LivesEconomy  (persisted lives, shared with every session)
    - StatsRecorder (persisted stats, grade, leaderboard)
    - QuestionLoader (one worker for the whole run)
    - Scheduler     (virtual-time delays, advanced by update())
    - BladeTrail    (pointer trail while slicing)
    - Audio         (synthesized effects)

Screens:
    MENU    — dashboard: lives, grade, stats, leaderboard, play
    SESSION — a GameSession is running; its phase drives rendering

Transitions:
    MENU    → SESSION : player clicks PLAY (only offered with lives left)
    SESSION → MENU    : home button, Escape, or RETURN TO HOME on the
                        terminal screen. All three go through
                        GameSession.exit(), whose on_exit lands here.

Input:
    Pressing the mouse starts a slice; dragging keeps slicing. Every
    pointer position along the drag is hit-tested against the current
    targets, intro fruit and bombs or the answer fruit, and hits are
    handed to the session. Buttons are checked first on press.

game.py does NOT call pygame.display.flip() or manage the window.
That is main.py's responsibility.
"""

from __future__ import annotations

import logging
import random
from enum import Enum, auto

import pygame

from core.lives import LivesEconomy
from core.loader import QuestionLoader
from core.models import Phase
from core.scheduler import Scheduler
from core.session import GameSession, FAIL_INTRO_TIMEOUT, FAIL_QUESTION_TIMEOUT, FAIL_WRONG
from core.stats import StatsRecorder, UserStats, LeaderboardEntry
from core.store import Store
from renderer import ui
from renderer.fruit import BladeTrail, draw_fruit, draw_sliced_fruit, draw_bomb, draw_answer_fruit
from renderer.menu import draw_menu
from utils.clock import Clock, now_ms
from settings import (
    COLOR, ANSWER_COLORS, FRUIT_RADIUS, ANSWER_RADIUS,
    POINTS_CORRECT, PENALTY_WRONG, PENALTY_INTRO_TIMEOUT, PENALTY_QUESTION_TIMEOUT,
)

logger = logging.getLogger(__name__)

# Sliced halves drift apart for this long before vanishing
_SLICE_ANIM_S = 0.4
_DASHBOARD_REFRESH_S = 1.0

_FEEDBACK_TEXT = {
    FAIL_WRONG:            f"-{PENALTY_WRONG} pts  ·  -1 life",
    FAIL_QUESTION_TIMEOUT: f"Time's Up! -{PENALTY_QUESTION_TIMEOUT}",
    FAIL_INTRO_TIMEOUT:    f"Time's Up! -{PENALTY_INTRO_TIMEOUT}",
}


class Screen(Enum):
    """Top-level screens."""
    MENU    = auto()
    SESSION = auto()


class Game:
    """Routes input, time and rendering between the dashboard and a session.

    Attributes:
        screen:    Current Screen.
        session:   The running GameSession, None on the dashboard.
        lives:     LivesEconomy over the persistent store.
        stats:     StatsRecorder over the persistent store.
        loader:    QuestionLoader shared by every session.
        scheduler: Scheduler advanced by update(); cleared per session.
        trail:     BladeTrail drawn while the player drags.
        _audio:    Audio instance injected via set_audio(). None until set.
        _buttons:  Action name → rect of every button drawn last frame.
    """

    def __init__(self, store: Store, loader: QuestionLoader,
                 rng: random.Random | None = None, clock: Clock = now_ms) -> None:
        self.screen:    Screen              = Screen.MENU
        self.session:   GameSession | None  = None
        self.lives:     LivesEconomy        = LivesEconomy(store, clock)
        self.stats:     StatsRecorder       = StatsRecorder(store)
        self.loader:    QuestionLoader      = loader
        self.scheduler: Scheduler           = Scheduler()
        self.trail:     BladeTrail          = BladeTrail()
        self._rng:      random.Random       = rng or random.Random()
        self._audio                         = None
        self._buttons:  dict[str, pygame.Rect] = {}

        self._slicing       = False
        self._sliced_answer: str | None   = None
        self._slice_ages:    dict[str, float] = {}
        self._last_phase:    Phase | None = None
        self._time          = 0.0
        self._dt            = 0.0

        self._dashboard_age = 0.0
        self._dash_stats:    UserStats = UserStats()
        self._dash_lives:    int = 0
        self._dash_next:     str | None = None
        self._dash_board:    list[LeaderboardEntry] = []

    # ── Audio ─────────────────────────────────────────────────────────────────

    def set_audio(self, audio) -> None:
        """Inject the Audio instance after construction.

        Args:
            audio: Initialised Audio instance from core/audio.py.
        """
        self._audio = audio

    def _play(self, name: str) -> None:
        if self._audio:
            self._audio.play(name)

    # ── Screen transitions ────────────────────────────────────────────────────

    def start_menu(self) -> None:
        """Show the dashboard with freshly reconciled lives and stats."""
        self.screen = Screen.MENU
        self.session = None
        self._slicing = False
        self.trail.clear()
        self._refresh_dashboard()

    def start_session(self) -> None:
        """Leave the dashboard and start a new GameSession."""
        if self.lives.current_lives() == 0:
            logger.info("Play refused: no lives left")
            return
        self.scheduler.clear()
        self._slice_ages.clear()
        self._sliced_answer = None
        self.session = GameSession(
            lives=self.lives,
            loader=self.loader,
            stats=self.stats,
            scheduler=self.scheduler,
            rng=self._rng,
            on_exit=self.start_menu,
        )
        self._last_phase = None
        self.screen = Screen.SESSION
        self.session.start()
        self._play("start")

    def leave_session(self) -> None:
        """Abandon the running session; on_exit brings the dashboard back."""
        if self.session is not None:
            self.session.exit()

    def shutdown(self) -> None:
        """Tear down the session and the loader's worker before quitting."""
        self.leave_session()
        self.loader.shutdown()

    def _refresh_dashboard(self) -> None:
        self._dashboard_age = 0.0
        self._dash_stats = self.stats.read_aggregate()
        self._dash_lives = self.lives.current_lives()
        self._dash_next  = self.lives.time_to_next_life()
        self._dash_board = self.stats.leaderboard(self._dash_stats)

    def _level_up(self) -> None:
        grade = self.stats.promote_grade()
        if grade is not None:
            self._play("reward")
        self._refresh_dashboard()

    # ── Per-frame update ──────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        """Advance delays, deliver loaded questions and step the session.

        Args:
            dt: Delta time in seconds since last frame.
        """
        self._dt = dt
        self._time += dt
        self.trail.update(dt)

        if self.screen is Screen.MENU:
            self._dashboard_age += dt
            if self._dashboard_age >= _DASHBOARD_REFRESH_S:
                self._refresh_dashboard()
            return

        for key in list(self._slice_ages):
            self._slice_ages[key] += dt
            if self._slice_ages[key] > _SLICE_ANIM_S:
                del self._slice_ages[key]

        self.scheduler.advance(dt)
        self.loader.poll()
        if self.session is not None:
            self.session.update(dt)
            self._on_phase_change()

    def _on_phase_change(self) -> None:
        """Play the cue for a phase the session just entered."""
        phase = self.session.phase
        if phase is self._last_phase:
            return
        self._last_phase = phase

        if phase is Phase.PLAYING:
            self._sliced_answer = None
        elif phase is Phase.FEEDBACK_CORRECT:
            self._play("correct")
        elif phase is Phase.FEEDBACK_WRONG:
            timed_out = self.session.last_failure in (FAIL_INTRO_TIMEOUT, FAIL_QUESTION_TIMEOUT)
            self._play("timeout" if timed_out else "wrong")
        elif phase is Phase.REWARD:
            self._play("reward")
        elif phase is Phase.GAME_OVER:
            self._play("bomb")

    # ── Event handling ────────────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> None:
        """Route a pygame event by screen.

        Mouse positions are expected in native game coordinates; main.py
        opens the window with pygame.SCALED so pygame already delivers them.

        Args:
            event: A pygame event.
        """
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            action = self._button_at(event.pos)
            if action is not None:
                self._on_button(action)
                return
            if self.screen is Screen.SESSION:
                self._slicing = True
                self.trail.clear()
                self._slice_at(event.pos)

        elif event.type == pygame.MOUSEMOTION and self._slicing:
            self._slice_at(event.pos)

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self._slicing = False

        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.leave_session()

    def _button_at(self, pos: tuple[int, int]) -> str | None:
        for action, rect in self._buttons.items():
            if rect.collidepoint(pos):
                return action
        return None

    def _on_button(self, action: str) -> None:
        logger.debug("Button %s", action)
        if action == "play":
            self.start_session()
        elif action == "level_up":
            self._level_up()
        elif action in ("home", "return"):
            self.leave_session()
        elif action == "claim" and self.session is not None:
            self.session.claim_reward()

    def _slice_at(self, pos: tuple[int, int]) -> None:
        """Extend the blade trail to pos and slice whatever it touches."""
        self.trail.add(pos)
        session = self.session
        if session is None:
            return

        if session.phase is Phase.INTRO_FRUIT and not session.loading:
            for item in session.intro_items:
                if item.sliced or not ui.hit_circle(ui.item_center(item), FRUIT_RADIUS, pos):
                    continue
                if session.slice_item(item.id):
                    self._slice_ages[item.id] = 0.0
                    self._play("bomb" if item.is_bomb else "slice")

        elif session.phase is Phase.PLAYING and session.question is not None:
            for answer, center in zip(session.question.answers, ui.answer_centers()):
                if ui.hit_circle(center, ANSWER_RADIUS, pos):
                    self._sliced_answer = answer.id
                    self._play("slice")
                    session.select_answer(answer.id)
                    break

    # ── Rendering ─────────────────────────────────────────────────────────────

    def render(self, surface: pygame.Surface) -> None:
        """Draw the current screen onto the game surface.

        Args:
            surface: Native 360x640 pygame Surface. Written to each frame.
        """
        if self.screen is Screen.MENU or self.session is None:
            stats = self._dash_stats
            self._buttons = draw_menu(
                surface,
                stats,
                self._dash_lives,
                self._dash_next,
                self._dash_board,
                StatsRecorder.required_score(stats.grade_level),
                self.stats.can_promote(stats),
                self._dt,
            )
            return

        self._buttons = {}
        self._render_session(surface, self.session)

    def _render_session(self, surface: pygame.Surface, session: GameSession) -> None:
        surface.fill(COLOR["background"])
        phase = session.phase
        intro_on_screen = phase is Phase.INTRO_FRUIT or (
            phase is Phase.FEEDBACK_WRONG and session.last_failure == FAIL_INTRO_TIMEOUT
        )

        if phase is Phase.INTRO_FRUIT and session.loading:
            ui.draw_banner(surface, "Loading question...")
        elif intro_on_screen:
            ui.draw_banner(surface, "SLICE FRUITS! AVOID BOMBS!")
            self._render_intro_items(surface, session)
        elif session.question is not None:
            self._render_question(surface, session)

        self.trail.draw(surface, session.weapon)

        timed = phase in (Phase.INTRO_FRUIT, Phase.PLAYING) and not session.loading
        self._buttons["home"] = ui.draw_hud(
            surface,
            lives=session.lives,
            score=session.score,
            round_num=session.round_num,
            grade=session.grade_level,
            weapon=session.weapon,
            seconds_left=session.stage_timer if timed else None,
            timer_label="SEC TO SLICE" if phase is Phase.INTRO_FRUIT else "SEC TO ANSWER",
            timer_fill=session.timer.fill(),
        )

        if phase is Phase.FEEDBACK_CORRECT:
            ui.draw_feedback(surface, True, f"+{POINTS_CORRECT} pts")
        elif phase is Phase.FEEDBACK_WRONG:
            ui.draw_feedback(surface, False, _FEEDBACK_TEXT.get(session.last_failure, ""))
        elif phase is Phase.REWARD and session.reward_weapon is not None:
            self._buttons["claim"] = ui.draw_reward(surface, session.reward_weapon)
        elif phase.is_terminal:
            self._buttons["return"] = ui.draw_game_over(
                surface, session.score, session.round_num, victory=phase is Phase.VICTORY,
            )

    def _render_intro_items(self, surface: pygame.Surface, session: GameSession) -> None:
        for item in session.intro_items:
            center = ui.item_center(item)
            if not item.sliced:
                if item.is_bomb:
                    draw_bomb(surface, center, FRUIT_RADIUS, self._time)
                else:
                    draw_fruit(surface, center, FRUIT_RADIUS, item.kind, rotation=self._time * 90)
            elif item.id in self._slice_ages and not item.is_bomb:
                spread = self._slice_ages[item.id] * 60
                draw_sliced_fruit(surface, center, FRUIT_RADIUS, item.kind, spread)

    def _render_question(self, surface: pygame.Surface, session: GameSession) -> None:
        ui.draw_question_board(surface, session.question.text)
        for i, (answer, center) in enumerate(zip(session.question.answers, ui.answer_centers())):
            color = ANSWER_COLORS[i % len(ANSWER_COLORS)]
            sliced = answer.id == self._sliced_answer
            draw_answer_fruit(surface, center, ANSWER_RADIUS, color, answer.text, sliced=sliced)
