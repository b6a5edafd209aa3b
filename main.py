"""
main.py — Entry point and game loop for Math Ninja.

Responsibilities:
    - Configure logging from MATH_NINJA_LOG_LEVEL
    - Initialise pygame and create the window
    - Build the persistent store, question loader and Game
    - Run the main loop: handle events → update → render → flip
    - Manage the frame clock and delta time
    - Wrap the loop in async for pygbag (WASM/itch.io export)

Architecture note:
    main.py is intentionally thin. It owns pygame lifecycle and the
    window — nothing else. All game logic lives in core/.

Window:
    The display is opened at the native 360x640 size with pygame.SCALED,
    so pygame letterboxes it into any window size and delivers mouse
    positions in game coordinates.

pygbag compatibility:
    The game loop is wrapped in an async function and driven by
    asyncio.run(). pygbag replaces asyncio with its own event loop
    that yields to the browser each frame.

Usage (local):
    python main.py

Usage (WASM export):
    pygbag main.py
"""

import asyncio
import logging
import random

import pygame

from core.audio import Audio
from core.game import Game
from core.loader import ThreadedLoader
from core.question_provider import default_provider
from core.store import JsonFileStore
from settings import SCREEN_W, SCREEN_H, FPS, TITLE, DATA_DIR, LOG_LEVEL, SEED

logger = logging.getLogger(__name__)


async def main() -> None:
    """Async main loop — compatible with both CPython and pygbag WASM."""
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    rng = random.Random(int(SEED)) if SEED else random.Random()
    if SEED:
        logger.info("Seeded run: %s", SEED)

    pygame.init()

    # ── Window setup ──────────────────────────────────────────────────────────
    screen = pygame.display.set_mode((SCREEN_W, SCREEN_H), pygame.SCALED | pygame.RESIZABLE)
    pygame.display.set_caption(TITLE)

    # ── Subsystems ────────────────────────────────────────────────────────────
    store  = JsonFileStore(DATA_DIR / "profile.json")
    loader = ThreadedLoader(default_provider(random.Random(rng.random())))
    clock  = pygame.time.Clock()
    game   = Game(store, loader, rng=rng)

    audio = Audio()
    audio.init()
    game.set_audio(audio)
    game.start_menu()

    # ── Main loop ─────────────────────────────────────────────────────────────
    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0   # seconds since last frame
        dt = min(dt, 0.05)              # clamp to 50ms after a tab switch

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            else:
                game.handle_event(event)

        game.update(dt)
        game.render(screen)
        pygame.display.flip()

        # ── Yield to browser (pygbag) ─────────────────────────────────────────
        await asyncio.sleep(0)

    # ── Cleanup ───────────────────────────────────────────────────────────────
    game.shutdown()
    audio.quit()
    pygame.quit()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
