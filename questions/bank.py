"""
questions/bank.py — Offline question bank.

Used whenever the remote source is unavailable: no API key, quota
exhaustion, a malformed payload, or any other error. Every entry is
authored with exactly one correct answer, so a drawn question always
passes Question validation.

Selection is uniform over the bank. The issued question gets a fresh id
rather than the entry's static key, and the three answers are shuffled
independently of how the entry lists them.
"""

from __future__ import annotations

import random

from core.models import Answer, Question
from questions.base import fresh_id

# ── Bank ──────────────────────────────────────────────────────────────────────
# key: (text, difficulty, correct, wrong, wrong)
_BANK: dict[str, tuple[str, str, str, str, str]] = {
    "f1":  ("5 + 5",   "easy",   "10",  "15",   "55"),
    "f2":  ("12 × 12", "medium", "144", "110",  "124"),
    "f3":  ("9 - 3",   "easy",   "6",   "3",    "0"),
    "f4":  ("√81",     "medium", "9",   "8",    "7"),
    "f5":  ("8 / 4",   "easy",   "2",   "4",    "32"),
    "f6":  ("7 × 6",   "medium", "42",  "48",   "36"),
    "f7":  ("15 ÷ 3",  "easy",   "5",   "3",    "6"),
    "f8":  ("20 - 8",  "easy",   "12",  "10",   "2"),
    "f9":  ("9 + 6",   "easy",   "15",  "14",   "16"),
    "f10": ("50 + 50", "easy",   "100", "1000", "5050"),
    "f11": ("11 × 3",  "medium", "33",  "30",   "36"),
}


def bank_keys() -> list[str]:
    return list(_BANK)


def draw_fallback(rng: random.Random) -> Question:
    """Return a random bank question with a fresh id and shuffled answers.

    Args:
        rng: Random source for the pick, the id and the answer order.

    Returns:
        A validated Question.
    """
    key = rng.choice(list(_BANK))
    return build_bank_question(key, rng)


def build_bank_question(key: str, rng: random.Random) -> Question:
    text, difficulty, correct, *wrong = _BANK[key]
    answers = [Answer(id=f"{key}-a0", text=correct, is_correct=True)]
    answers += [Answer(id=f"{key}-a{i}", text=w, is_correct=False) for i, w in enumerate(wrong, 1)]
    rng.shuffle(answers)
    return Question(
        id=fresh_id(rng),
        text=text,
        difficulty=difficulty,
        answers=tuple(answers),
    )
