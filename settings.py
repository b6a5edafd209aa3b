"""
settings.py — Global constants for Math Ninja.

All magic numbers live here. No other module should hardcode colors,
dimensions, timing or scoring values. Import what you need with:
    from settings import COLOR, SCREEN_W, ...

Environment overrides are read once at import time.
"""

import os
from pathlib import Path

# ── Screen ────────────────────────────────────────────────────────────────────
SCREEN_W = 360
SCREEN_H = 640
FPS = 60
TITLE = "Math Ninja"

# ── Colors ────────────────────────────────────────────────────────────────────
COLOR = {
    "background":   ( 24,  24,  27),   # #18181B ninja black
    "panel":        ( 39,  39,  42),   # #27272A
    "panel_border": ( 63,  63,  70),   # #3F3F46
    "text":         (244, 244, 245),   # #F4F4F5
    "text_dim":     (161, 161, 170),   # #A1A1AA
    "accent":       (250, 204,  21),   # #FACC15 ninja yellow
    "heart":        (239,  68,  68),   # #EF4444
    "heart_empty":  ( 82,  82,  91),   # #52525B
    "timer":        (250, 204,  21),
    "timer_low":    (239,  68,  68),
    "correct":      ( 34, 197,  94),   # green flash on correct
    "wrong":        (239,  68,  68),   # red flash on wrong
    "blade":        (255, 255, 255),
    "blade_gold":   (250, 204,  21),
    "blade_cyan":   ( 34, 211, 238),
    "bomb":         ( 30,  30,  30),
    "fuse":         (249, 115,  22),
}

# Rind / flesh pairs per intro fruit variant
FRUIT_COLORS = {
    "watermelon": (( 22, 163,  74), (239,  68,  68)),
    "orange":     ((234,  88,  12), (251, 146,  60)),
    "lemon":      ((202, 138,   4), (253, 224,  71)),
    "apple":      (( 22, 163,  74), (254, 252, 232)),
    "peach":      ((251, 113, 133), (253, 186, 116)),
}

# Answer fruits cycle through these
ANSWER_COLORS = [
    ( 34, 197,  94),
    (249, 115,  22),
    (234, 179,   8),
    (239,  68,  68),
    (168,  85, 247),
]

# ── Layout ────────────────────────────────────────────────────────────────────
HUD_H         = 72     # px, top bar
PLAY_TOP      = HUD_H + 8
PLAY_BOTTOM   = SCREEN_H - 16
FRUIT_RADIUS  = 26     # intro fruit
ANSWER_RADIUS = 46     # answer fruit
BUTTON_H      = 48

# ── Fonts ─────────────────────────────────────────────────────────────────────
FONT_FAMILY  = "arial"
FONT_SIZE_XL = 34
FONT_SIZE_LG = 22
FONT_SIZE_MD = 16
FONT_SIZE_SM = 12

# ── Stage timing (seconds) ────────────────────────────────────────────────────
STAGE_TIME_S        = 60    # shared by the intro and question phases
INTRO_SETTLE_S      = 0.5   # pause after the last fruit before the question
FEEDBACK_CORRECT_S  = 0.8
FEEDBACK_WRONG_S    = 1.0

# ── Lives ─────────────────────────────────────────────────────────────────────
MAX_LIVES       = 3
REGEN_PERIOD_MS = 2 * 60 * 1000   # one life back every two minutes

# ── Scoring ───────────────────────────────────────────────────────────────────
POINTS_CORRECT          = 10
POINTS_FRUIT            = 10
PENALTY_WRONG           = 5
PENALTY_INTRO_TIMEOUT   = 5
PENALTY_QUESTION_TIMEOUT = 1
PENALTY_BOMB            = 10

# Streak length that unlocks each weapon tier
GOLD_SWORD_STREAK    = 3
DIAMOND_SWORD_STREAK = 6

# Score above which the remote question hint steps up
DIFFICULTY_SCORE_THRESHOLDS = {
    "hard":   1000,
    "medium": 500,
}

# ── Intro phase ───────────────────────────────────────────────────────────────
INTRO_FRUIT_COUNT = 10
INTRO_BOMB_COUNT  = 3
FRUIT_VARIANTS    = ["watermelon", "orange", "lemon", "apple", "peach"]
FRUIT_SPEED       = 9.0    # max |v| in % of play area per second
BOMB_SPEED        = 12.0
SPAWN_MIN_PCT     = 20.0
SPAWN_MAX_PCT     = 80.0
BOUNCE_MIN_PCT    = 5.0
BOUNCE_MAX_PCT    = 85.0

# ── Stats / dashboard ─────────────────────────────────────────────────────────
HISTORY_LIMIT        = 10
MAX_GRADE            = 12
SCORE_PER_GRADE      = 1000   # grade N needs a best score of N * 1000
LEADERBOARD_MIN_SCORE = 1000

# ── Question backend ──────────────────────────────────────────────────────────
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
GEMINI_MODEL   = os.environ.get("MATH_NINJA_MODEL", "gemini-2.5-flash")

# ── Runtime ───────────────────────────────────────────────────────────────────
DATA_DIR  = Path(os.environ.get("MATH_NINJA_DATA_DIR", Path.home() / ".math_ninja"))
LOG_LEVEL = os.environ.get("MATH_NINJA_LOG_LEVEL", "INFO")
SEED      = os.environ.get("MATH_NINJA_SEED")
