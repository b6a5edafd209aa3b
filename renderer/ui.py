"""
renderer/ui.py — In-session UI rendering for Math Ninja.

Draws everything around the fruit itself:
    - HUD (hearts, score, round, grade, stage timer, weapon slots, home)
    - Question board and intro banner
    - Feedback flash (correct / wrong / timeout)
    - Reward, game over and victory screens

All functions are stateless — they take explicit data arguments, draw to
the provided surface, and return the rects of any buttons they drew so
core/game.py can hit-test clicks. Layout helpers (item_center,
answer_centers) are shared with game.py so drawing and hit-testing agree.
"""

from __future__ import annotations

import math

import pygame

from core.models import IntroItem, Weapon
from settings import (
    SCREEN_W, SCREEN_H, HUD_H, PLAY_TOP, PLAY_BOTTOM, BUTTON_H,
    MAX_LIVES, COLOR,
    FONT_FAMILY, FONT_SIZE_XL, FONT_SIZE_LG, FONT_SIZE_MD, FONT_SIZE_SM,
)

_fonts: dict[tuple[int, bool], pygame.font.Font] = {}

_WEAPON_ORDER = (Weapon.BASIC_KATANA, Weapon.GOLD_SWORD, Weapon.DIAMOND_SWORD)
_WEAPON_COLOR = {
    Weapon.BASIC_KATANA:  (212, 212, 216),
    Weapon.GOLD_SWORD:    COLOR["blade_gold"],
    Weapon.DIAMOND_SWORD: COLOR["blade_cyan"],
}


def _font(size: int, bold: bool = False) -> pygame.font.Font:
    key = (size, bold)
    if key not in _fonts:
        _fonts[key] = pygame.font.SysFont(FONT_FAMILY, size, bold=bold)
    return _fonts[key]


def _blit_centered(surface: pygame.Surface, text: str, size: int, color, cy: int,
                   bold: bool = True) -> None:
    label = _font(size, bold).render(text, True, color)
    surface.blit(label, ((SCREEN_W - label.get_width()) // 2, cy - label.get_height() // 2))


def _button(surface: pygame.Surface, rect: pygame.Rect, text: str,
            fill=COLOR["accent"], text_color=(0, 0, 0)) -> pygame.Rect:
    pygame.draw.rect(surface, fill, rect, border_radius=10)
    label = _font(FONT_SIZE_MD, True).render(text, True, text_color)
    surface.blit(label, (rect.centerx - label.get_width() // 2, rect.centery - label.get_height() // 2))
    return rect


def _dim(surface: pygame.Surface, alpha: int = 190) -> None:
    overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


# ── Layout ────────────────────────────────────────────────────────────────────

def item_center(item: IntroItem) -> tuple[int, int]:
    """Map an intro item's percentage position to game pixels."""
    x = int(item.x / 100 * SCREEN_W)
    y = int(PLAY_TOP + item.y / 100 * (PLAY_BOTTOM - PLAY_TOP))
    return x, y


def answer_centers(count: int = 3) -> list[tuple[int, int]]:
    """Return pixel centers for the answer fruits, left to right.

    The middle fruit sits lower than its neighbours so three large fruits
    fit across the 360 px width without overlapping.
    """
    step = SCREEN_W // (count + 1)
    base_y = SCREEN_H - 210
    return [
        (step * (i + 1), base_y + (70 if i % 2 else 0))
        for i in range(count)
    ]


def hit_circle(center: tuple[int, int], radius: int, pos: tuple[int, int]) -> bool:
    dx, dy = pos[0] - center[0], pos[1] - center[1]
    return dx * dx + dy * dy <= radius * radius


# ── HUD ───────────────────────────────────────────────────────────────────────

def draw_hud(
    surface: pygame.Surface,
    lives: int,
    score: int,
    round_num: int,
    grade: int,
    weapon: Weapon,
    seconds_left: int | None,
    timer_label: str = "",
    timer_fill: float = 1.0,
) -> pygame.Rect:
    """Draw the top bar and return the home button rect.

    Args:
        surface:      Game surface.
        lives:        Current lives, drawn as hearts out of MAX_LIVES.
        score:        Session score.
        round_num:    Current round.
        grade:        Grade level for this session.
        weapon:       Equipped weapon; its slot is highlighted.
        seconds_left: Stage timer, or None to hide it outside timed phases.
        timer_label:  Caption under the timer ("SEC TO SLICE" / "SEC TO ANSWER").
        timer_fill:   Remaining fraction of the stage, drawn as a ring round the number.
    """
    pygame.draw.rect(surface, COLOR["panel"], (0, 0, SCREEN_W, HUD_H))
    pygame.draw.line(surface, COLOR["panel_border"], (0, HUD_H), (SCREEN_W, HUD_H), 2)

    for i in range(MAX_LIVES):
        color = COLOR["heart"] if i < lives else COLOR["heart_empty"]
        x = 14 + i * 20
        pygame.draw.circle(surface, color, (x, 14), 5)
        pygame.draw.circle(surface, color, (x + 8, 14), 5)
        pygame.draw.polygon(surface, color, [(x - 5, 16), (x + 13, 16), (x + 4, 26)])

    small = _font(FONT_SIZE_SM, True)
    surface.blit(_font(FONT_SIZE_MD, True).render(f"SCORE: {score}", True, COLOR["accent"]), (10, 30))
    surface.blit(small.render(f"ROUND {round_num}  ·  Grade {grade}", True, COLOR["text_dim"]), (10, 52))

    if seconds_left is not None:
        low = seconds_left <= 10
        color = COLOR["timer_low"] if low else COLOR["timer"]
        num = _font(FONT_SIZE_XL, True).render(str(seconds_left), True, color)
        cx, cy = SCREEN_W // 2 + 20, 6 + num.get_height() // 2
        ring = pygame.Rect(0, 0, 44, 44)
        ring.center = (cx, cy)
        pygame.draw.circle(surface, COLOR["panel_border"], ring.center, 22, 3)
        if timer_fill > 0:
            # Arc starts at 12 o'clock and shrinks as the stage runs down
            start = math.pi / 2
            pygame.draw.arc(surface, color, ring, start, start + 2 * math.pi * timer_fill, 3)
        surface.blit(num, (cx - num.get_width() // 2, 6))
        if timer_label:
            cap = small.render(timer_label, True, COLOR["text_dim"])
            surface.blit(cap, (SCREEN_W // 2 - cap.get_width() // 2 + 20, 48))

    # Weapon slots, locked tiers dim
    unlocked = _WEAPON_ORDER.index(weapon)
    for i, tier in enumerate(_WEAPON_ORDER):
        rect = pygame.Rect(SCREEN_W - 104 + i * 22, 40, 18, 24)
        pygame.draw.rect(surface, COLOR["panel_border"], rect, border_radius=4)
        if i <= unlocked:
            pygame.draw.line(surface, _WEAPON_COLOR[tier], rect.midbottom, rect.midtop, 3)
        if tier is weapon:
            pygame.draw.rect(surface, COLOR["accent"], rect, 2, border_radius=4)

    home = pygame.Rect(SCREEN_W - 44, 6, 34, 28)
    pygame.draw.rect(surface, COLOR["panel_border"], home, border_radius=6)
    roof = [(home.centerx, home.y + 5), (home.x + 6, home.centery), (home.right - 6, home.centery)]
    pygame.draw.polygon(surface, COLOR["text"], roof)
    pygame.draw.rect(surface, COLOR["text"], (home.centerx - 7, home.centery, 14, 8))
    return home


# ── Phase content ─────────────────────────────────────────────────────────────

def draw_banner(surface: pygame.Surface, text: str) -> None:
    _blit_centered(surface, text, FONT_SIZE_LG, COLOR["accent"], HUD_H + 28)


def draw_question_board(surface: pygame.Surface, text: str) -> None:
    """Draw the question text on a board under the HUD."""
    board = pygame.Rect(20, HUD_H + 30, SCREEN_W - 40, 130)
    pygame.draw.rect(surface, COLOR["panel"], board, border_radius=14)
    pygame.draw.rect(surface, COLOR["accent"], board, 3, border_radius=14)
    size = FONT_SIZE_XL if len(text) <= 14 else FONT_SIZE_LG if len(text) <= 24 else FONT_SIZE_MD
    label = _font(size, True).render(text, True, COLOR["text"])
    if label.get_width() > board.w - 20:
        label = pygame.transform.smoothscale(
            label, (board.w - 20, int(label.get_height() * (board.w - 20) / label.get_width()))
        )
    surface.blit(label, (board.centerx - label.get_width() // 2, board.centery - label.get_height() // 2))
    _blit_centered(surface, "SLICE THE RIGHT ANSWER", FONT_SIZE_SM, COLOR["text_dim"], board.bottom + 18)


def draw_feedback(surface: pygame.Surface, correct: bool, message: str) -> None:
    """Tint the screen and show the feedback headline."""
    color = COLOR["correct"] if correct else COLOR["wrong"]
    overlay = pygame.Surface((SCREEN_W, SCREEN_H), pygame.SRCALPHA)
    overlay.fill((*color, 90))
    surface.blit(overlay, (0, 0))
    _blit_centered(surface, "CORRECT!" if correct else "OOPS!", 48, COLOR["text"], SCREEN_H // 2 - 30)
    _blit_centered(surface, message, FONT_SIZE_LG, COLOR["text"], SCREEN_H // 2 + 20)


def draw_reward(surface: pygame.Surface, weapon: Weapon) -> pygame.Rect:
    """Draw the weapon-unlocked screen and return the claim button rect."""
    _dim(surface, 210)
    color = _WEAPON_COLOR[weapon]
    _blit_centered(surface, "NEW WEAPON!", FONT_SIZE_XL, COLOR["accent"], 200)
    cx, cy = SCREEN_W // 2, 300
    pygame.draw.line(surface, color, (cx - 40, cy + 40), (cx + 40, cy - 40), 8)
    pygame.draw.line(surface, (120, 72, 24), (cx - 52, cy + 52), (cx - 36, cy + 36), 10)
    _blit_centered(surface, f"{weapon.value.upper()} UNLOCKED!", FONT_SIZE_LG, color, 380)
    rect = pygame.Rect((SCREEN_W - 200) // 2, 440, 200, BUTTON_H)
    return _button(surface, rect, "CLAIM & CONTINUE")


def draw_game_over(surface: pygame.Surface, score: int, round_num: int,
                   victory: bool = False) -> pygame.Rect:
    """Draw the terminal screen and return the home button rect."""
    _dim(surface, 220)
    title, color = ("VICTORY!", COLOR["correct"]) if victory else ("GAME OVER", COLOR["wrong"])
    _blit_centered(surface, title, 44, color, 200)
    _blit_centered(surface, f"Final score: {score}", FONT_SIZE_LG, COLOR["text"], 260)
    _blit_centered(surface, f"You reached round {round_num}", FONT_SIZE_MD, COLOR["text_dim"], 292, bold=False)
    rect = pygame.Rect((SCREEN_W - 200) // 2, 350, 200, BUTTON_H)
    return _button(surface, rect, "RETURN TO HOME")
