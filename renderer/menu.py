"""
renderer/menu.py — Dashboard screen for Math Ninja.

The dashboard sits outside any session. It shows the player's lives with
the countdown to the next one, the current grade with a level-up button
once the best score allows it, lifetime stats with a bar chart of recent
scores, and the leaderboard. The play button is disabled while the player
has no lives.

Like the in-session renderer, draw_menu() is stateless apart from a
background animation clock and returns the button rects it drew, keyed
by action name, for core/game.py to hit-test.
"""

from __future__ import annotations

import math

import pygame

from core.stats import LeaderboardEntry, UserStats
from renderer.fruit import draw_fruit
from settings import (
    SCREEN_W, MAX_LIVES, MAX_GRADE, BUTTON_H, COLOR, FRUIT_VARIANTS, HISTORY_LIMIT,
    FONT_FAMILY, FONT_SIZE_XL, FONT_SIZE_LG, FONT_SIZE_MD, FONT_SIZE_SM,
)

_time: float = 0.0
_fonts: dict[tuple[int, bool], pygame.font.Font] = {}


def _font(size: int, bold: bool = False) -> pygame.font.Font:
    key = (size, bold)
    if key not in _fonts:
        _fonts[key] = pygame.font.SysFont(FONT_FAMILY, size, bold=bold)
    return _fonts[key]


def _panel(surface: pygame.Surface, rect: pygame.Rect, title: str) -> None:
    pygame.draw.rect(surface, COLOR["panel"], rect, border_radius=12)
    pygame.draw.rect(surface, COLOR["panel_border"], rect, 1, border_radius=12)
    surface.blit(_font(FONT_SIZE_SM, True).render(title, True, COLOR["text_dim"]), (rect.x + 12, rect.y + 8))


def _draw_title(surface: pygame.Surface) -> None:
    for i, variant in enumerate(FRUIT_VARIANTS):
        x = 40 + i * 70
        y = 34 + int(math.sin(_time * 2 + i) * 6)
        draw_fruit(surface, (x, y), 12, variant, rotation=_time * 40 + i * 30)
    title = _font(FONT_SIZE_XL, True).render("MATH NINJA", True, COLOR["accent"])
    surface.blit(title, ((SCREEN_W - title.get_width()) // 2, 58))


def _draw_lives(surface: pygame.Surface, lives: int, next_life: str | None) -> None:
    rect = pygame.Rect(16, 110, SCREEN_W - 32, 64)
    _panel(surface, rect, "LIVES")
    for i in range(MAX_LIVES):
        color = COLOR["heart"] if i < lives else COLOR["heart_empty"]
        pygame.draw.circle(surface, color, (rect.x + 24 + i * 30, rect.y + 40), 10)
    if next_life is not None:
        text = "Next life: ready" if next_life == "ready" else f"Next life in {next_life}"
        label = _font(FONT_SIZE_SM).render(text, True, COLOR["text"])
        surface.blit(label, (rect.right - label.get_width() - 12, rect.y + 34))


def _draw_grade(surface: pygame.Surface, stats: UserStats, required: int,
                can_promote: bool) -> pygame.Rect | None:
    rect = pygame.Rect(16, 184, SCREEN_W - 32, 84)
    _panel(surface, rect, "CURRENT LEVEL")
    surface.blit(_font(FONT_SIZE_LG, True).render(f"Grade {stats.grade_level}", True, COLOR["accent"]),
                 (rect.x + 12, rect.y + 28))

    if stats.grade_level >= MAX_GRADE:
        surface.blit(_font(FONT_SIZE_SM).render("Max grade reached", True, COLOR["text_dim"]),
                     (rect.x + 12, rect.y + 58))
        return None

    progress = min(1.0, stats.highest_score / required) if required else 1.0
    bar = pygame.Rect(rect.x + 12, rect.y + 62, 180, 8)
    pygame.draw.rect(surface, COLOR["panel_border"], bar, border_radius=4)
    pygame.draw.rect(surface, COLOR["accent"], (bar.x, bar.y, int(bar.w * progress), bar.h), border_radius=4)

    button = pygame.Rect(rect.right - 112, rect.y + 30, 100, 36)
    fill = COLOR["correct"] if can_promote else COLOR["panel_border"]
    pygame.draw.rect(surface, fill, button, border_radius=8)
    text = "LEVEL UP" if can_promote else f"{required} pts"
    label = _font(FONT_SIZE_SM, True).render(text, True, COLOR["text"])
    surface.blit(label, (button.centerx - label.get_width() // 2, button.centery - label.get_height() // 2))
    return button if can_promote else None


def bar_heights(scores: list[int], max_height: int) -> list[int]:
    """Scale scores to bar heights, tallest bar = max_height, never below 2 px."""
    top = max(scores, default=0)
    if top <= 0:
        return [2] * len(scores)
    return [max(2, round(s / top * max_height)) for s in scores]


def _draw_history(surface: pygame.Surface, rect: pygame.Rect, scores: list[int]) -> None:
    """Bar chart of recent scores; the newest bar is highlighted."""
    if not scores:
        label = _font(FONT_SIZE_SM).render("Play a round to see your history", True, COLOR["text_dim"])
        surface.blit(label, (rect.centerx - label.get_width() // 2, rect.centery - label.get_height() // 2))
        return
    slot = rect.w // HISTORY_LIMIT
    for i, height in enumerate(bar_heights(scores, rect.h)):
        newest = i == len(scores) - 1
        color = COLOR["accent"] if newest else COLOR["panel_border"]
        bar = pygame.Rect(rect.x + i * slot + 2, rect.bottom - height, slot - 4, height)
        pygame.draw.rect(surface, color, bar, border_radius=3)


def _draw_stats(surface: pygame.Surface, stats: UserStats) -> None:
    rect = pygame.Rect(16, 278, SCREEN_W - 32, 100)
    _panel(surface, rect, "STATS")
    cells = (
        ("BEST", stats.highest_score),
        ("ROUND", stats.highest_round),
        ("CORRECT", stats.lifetime_correct_answers),
    )
    for i, (name, value) in enumerate(cells):
        x = rect.x + 12 + i * ((rect.w - 24) // 3)
        surface.blit(_font(FONT_SIZE_MD, True).render(str(value), True, COLOR["text"]), (x, rect.y + 24))
        surface.blit(_font(FONT_SIZE_SM).render(name, True, COLOR["text_dim"]), (x + 52, rect.y + 28))

    chart = pygame.Rect(rect.x + 12, rect.y + 50, rect.w - 24, rect.h - 58)
    _draw_history(surface, chart, [h.score for h in stats.games_history[-HISTORY_LIMIT:]])


def _draw_leaderboard(surface: pygame.Surface, entries: list[LeaderboardEntry]) -> None:
    rect = pygame.Rect(16, 388, SCREEN_W - 32, 160)
    _panel(surface, rect, "LEADERBOARD")
    for i, entry in enumerate(entries[:6]):
        y = rect.y + 28 + i * 21
        is_you = entry.id == "local-player"
        color = COLOR["accent"] if is_you else COLOR["text"]
        row = _font(FONT_SIZE_MD, is_you)
        surface.blit(row.render(f"{i + 1}. {entry.name}", True, color), (rect.x + 12, y))
        score = row.render(f"{entry.score}  (R{entry.rounds})", True, color)
        surface.blit(score, (rect.right - score.get_width() - 12, y))


def draw_menu(
    surface: pygame.Surface,
    stats: UserStats,
    lives: int,
    next_life: str | None,
    leaderboard: list[LeaderboardEntry],
    required_score: int,
    can_promote: bool,
    dt: float = 1 / 60,
) -> dict[str, pygame.Rect]:
    """Draw the dashboard and return clickable rects.

    Args:
        surface:        Native 360x640 game surface.
        stats:          Persisted stats snapshot.
        lives:          Reconciled life count.
        next_life:      Countdown string from LivesEconomy, or None.
        leaderboard:    Sorted entries to list.
        required_score: Best score needed for the next grade.
        can_promote:    True if the level-up button should be active.
        dt:             Seconds since last frame, for the title animation.

    Returns:
        {"play": rect} while lives remain, plus {"level_up": rect} when
        promotion is available.
    """
    global _time
    _time += dt

    surface.fill(COLOR["background"])
    _draw_title(surface)
    _draw_lives(surface, lives, next_life)
    level_up = _draw_grade(surface, stats, required_score, can_promote)
    _draw_stats(surface, stats)
    _draw_leaderboard(surface, leaderboard)

    buttons: dict[str, pygame.Rect] = {}
    play = pygame.Rect(40, 556, SCREEN_W - 80, BUTTON_H + 8)
    if lives > 0:
        pulse = int(20 * (1 + math.sin(_time * 3)))
        pygame.draw.rect(surface, (250, 204 + pulse // 4, 21 + pulse), play, border_radius=14)
        text, color = "PLAY", (0, 0, 0)
        buttons["play"] = play
    else:
        pygame.draw.rect(surface, COLOR["panel_border"], play, border_radius=14)
        text, color = "NO LIVES LEFT", COLOR["text_dim"]
    label = _font(FONT_SIZE_LG, True).render(text, True, color)
    surface.blit(label, (play.centerx - label.get_width() // 2, play.centery - label.get_height() // 2))

    if level_up is not None:
        buttons["level_up"] = level_up
    return buttons
