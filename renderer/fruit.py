"""
renderer/fruit.py — Vector drawing for fruit, bombs and the blade trail.

No sprites. A fruit is a rind circle, a flesh highlight and a leaf; a
sliced fruit is drawn as two half-discs drifting apart. A bomb is a dark
disc with a lit fuse. Answer fruits are larger discs carrying their
answer text.

Coordinates are native 360x640 game pixels.
"""

from __future__ import annotations

import math

import pygame

from core.models import Weapon
from settings import COLOR, FRUIT_COLORS, FONT_FAMILY

RGBColor = tuple[int, int, int]

# Blade trail: points fade over this many seconds
_TRAIL_LIFE = 0.25
_TRAIL_MAX_WIDTH = 8

_BLADE_COLOR = {
    Weapon.BASIC_KATANA:  COLOR["blade"],
    Weapon.GOLD_SWORD:    COLOR["blade_gold"],
    Weapon.DIAMOND_SWORD: COLOR["blade_cyan"],
}

_fonts: dict[int, pygame.font.Font] = {}


def _font(size: int) -> pygame.font.Font:
    if size not in _fonts:
        _fonts[size] = pygame.font.SysFont(FONT_FAMILY, size, bold=True)
    return _fonts[size]


def shade(color: RGBColor, amount: int) -> RGBColor:
    """Lighten (positive amount) or darken (negative) an RGB color."""
    return tuple(max(0, min(255, c + amount)) for c in color)  # type: ignore[return-value]


# ── Intro targets ─────────────────────────────────────────────────────────────

def draw_fruit(surface: pygame.Surface, center: tuple[int, int], radius: int,
               variant: str, rotation: float = 0.0) -> None:
    """Draw a whole fruit of the given variant.

    Args:
        surface:  Game surface.
        center:   Pixel center.
        radius:   Rind radius in pixels.
        variant:  Key of settings.FRUIT_COLORS.
        rotation: Degrees; turns the leaf around the stem.
    """
    rind, flesh = FRUIT_COLORS.get(variant, FRUIT_COLORS["apple"])
    cx, cy = center
    pygame.draw.circle(surface, shade(rind, -40), (cx + 2, cy + 3), radius)
    pygame.draw.circle(surface, rind, center, radius)
    pygame.draw.circle(surface, flesh, (cx - radius // 3, cy - radius // 3), radius // 3)

    angle = math.radians(rotation - 60)
    leaf_end = (cx + int(math.cos(angle) * radius * 0.7), cy - radius + int(math.sin(angle) * radius * 0.4))
    pygame.draw.line(surface, (120, 72, 24), (cx, cy - radius + 2), (cx, cy - radius - 6), 3)
    pygame.draw.line(surface, (34, 197, 94), (cx, cy - radius - 4), leaf_end, 4)


def draw_sliced_fruit(surface: pygame.Surface, center: tuple[int, int], radius: int,
                      variant: str, spread: float) -> None:
    """Draw the two halves of a sliced fruit, pushed apart by spread px."""
    rind, flesh = FRUIT_COLORS.get(variant, FRUIT_COLORS["apple"])
    cx, cy = center
    offset = int(spread)
    for dx, start in ((-offset, math.pi / 2), (offset, -math.pi / 2)):
        rect = pygame.Rect(cx + dx - radius, cy + offset // 2 - radius, radius * 2, radius * 2)
        pygame.draw.arc(surface, rind, rect, start, start + math.pi, radius)
        pygame.draw.arc(surface, flesh, rect.inflate(-8, -8), start, start + math.pi, radius - 4)


def draw_bomb(surface: pygame.Surface, center: tuple[int, int], radius: int, t: float) -> None:
    """Draw a bomb; the fuse spark flickers with time t (seconds)."""
    cx, cy = center
    pygame.draw.circle(surface, COLOR["bomb"], center, radius)
    pygame.draw.circle(surface, COLOR["wrong"], center, radius, 2)
    pygame.draw.circle(surface, (90, 90, 90), (cx - radius // 3, cy - radius // 3), radius // 5)
    fuse_top = (cx + radius // 2, cy - radius - 6)
    pygame.draw.line(surface, (161, 98, 7), (cx + radius // 3, cy - radius + 4), fuse_top, 3)
    spark = 3 + int(2 * (1 + math.sin(t * 20)))
    pygame.draw.circle(surface, COLOR["fuse"], fuse_top, spark)


# ── Answer fruit ──────────────────────────────────────────────────────────────

def draw_answer_fruit(surface: pygame.Surface, center: tuple[int, int], radius: int,
                      color: RGBColor, text: str, sliced: bool = False) -> None:
    """Draw a large answer fruit with its answer text centered on it."""
    cx, cy = center
    if sliced:
        draw_sliced_fruit(surface, center, radius, "apple", radius * 0.3)
        return
    pygame.draw.circle(surface, shade(color, -50), (cx + 3, cy + 4), radius)
    pygame.draw.circle(surface, color, center, radius)
    pygame.draw.circle(surface, shade(color, 60), center, radius, 4)

    size = 26 if len(text) <= 4 else 18 if len(text) <= 8 else 13
    label = _font(size).render(text, True, COLOR["text"])
    shadow = _font(size).render(text, True, (0, 0, 0))
    surface.blit(shadow, (cx - label.get_width() // 2 + 1, cy - label.get_height() // 2 + 2))
    surface.blit(label, (cx - label.get_width() // 2, cy - label.get_height() // 2))


# ── Blade trail ───────────────────────────────────────────────────────────────

class BladeTrail:
    """Fading polyline following the pointer while the player is slicing.

    Attributes:
        points: [x, y, age_seconds] per recorded pointer position.
    """

    def __init__(self) -> None:
        self.points: list[list[float]] = []

    def add(self, pos: tuple[int, int]) -> None:
        self.points.append([pos[0], pos[1], 0.0])

    def update(self, dt: float) -> None:
        for p in self.points:
            p[2] += dt
        self.points = [p for p in self.points if p[2] < _TRAIL_LIFE]

    def clear(self) -> None:
        self.points.clear()

    def draw(self, surface: pygame.Surface, weapon: Weapon) -> None:
        color = _BLADE_COLOR[weapon]
        for a, b in zip(self.points, self.points[1:]):
            life = 1.0 - a[2] / _TRAIL_LIFE
            width = max(1, int(life * _TRAIL_MAX_WIDTH))
            pygame.draw.line(surface, color, (a[0], a[1]), (b[0], b[1]), width)
