"""
core/intro.py — Intro-phase slice targets and their motion.

Each intro round spawns INTRO_FRUIT_COUNT fruits of random variants and
INTRO_BOMB_COUNT bombs at random positions inside the middle of the play
area, drifting with random velocities. step_items() runs every frame
while the session is in the intro phase and bounces items off the
BOUNCE_MIN_PCT / BOUNCE_MAX_PCT walls. Sliced items stop moving.

All coordinates are percentages of the play area; velocities are
percent per second.
"""

from __future__ import annotations

import random

from core.models import IntroItem
from settings import (
    INTRO_FRUIT_COUNT, INTRO_BOMB_COUNT, FRUIT_VARIANTS,
    FRUIT_SPEED, BOMB_SPEED,
    SPAWN_MIN_PCT, SPAWN_MAX_PCT, BOUNCE_MIN_PCT, BOUNCE_MAX_PCT,
)


def _spawn(rng: random.Random, item_id: str, kind: str, speed: float) -> IntroItem:
    return IntroItem(
        id=item_id,
        kind=kind,
        x=rng.uniform(SPAWN_MIN_PCT, SPAWN_MAX_PCT),
        y=rng.uniform(SPAWN_MIN_PCT, SPAWN_MAX_PCT),
        vx=rng.uniform(-speed, speed),
        vy=rng.uniform(-speed, speed),
    )


def spawn_intro_items(rng: random.Random, wave: int) -> list[IntroItem]:
    """Create a fresh set of fruits followed by bombs.

    Args:
        rng:  Random source for variants, positions and velocities.
        wave: Counter folded into the ids so items from an earlier intro
              attempt can never be confused with the current ones.

    Returns:
        List of unsliced IntroItems, fruits first.
    """
    fruits = [
        _spawn(rng, f"fruit-{wave}-{i}", rng.choice(FRUIT_VARIANTS), FRUIT_SPEED)
        for i in range(INTRO_FRUIT_COUNT)
    ]
    bombs = [
        _spawn(rng, f"bomb-{wave}-{i}", "bomb", BOMB_SPEED)
        for i in range(INTRO_BOMB_COUNT)
    ]
    return fruits + bombs


def step_items(items: list[IntroItem], dt: float) -> None:
    """Advance every unsliced item by dt seconds, bouncing off the walls."""
    for item in items:
        if item.sliced:
            continue
        item.x += item.vx * dt
        item.y += item.vy * dt
        if item.x <= BOUNCE_MIN_PCT or item.x >= BOUNCE_MAX_PCT:
            item.vx = -item.vx
            item.x = min(max(item.x, BOUNCE_MIN_PCT), BOUNCE_MAX_PCT)
        if item.y <= BOUNCE_MIN_PCT or item.y >= BOUNCE_MAX_PCT:
            item.vy = -item.vy
            item.y = min(max(item.y, BOUNCE_MIN_PCT), BOUNCE_MAX_PCT)


def fruits_remaining(items: list[IntroItem]) -> int:
    return sum(1 for item in items if not item.is_bomb and not item.sliced)
