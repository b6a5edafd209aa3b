"""
core/models.py — Shared value types for Math Ninja.

Phase and Weapon are plain enums. Question and Answer are frozen pydantic
models: a Question is validated on construction, so anything that reaches
the session (bank entry or remote payload) already satisfies the
three-answers / one-correct rule. IntroItem is a mutable dataclass because
the physics step moves it every frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

Difficulty = Literal["easy", "medium", "hard"]

ANSWER_COUNT = 3


class Phase(Enum):
    """Session phases. There is no menu phase inside a session."""
    INTRO_FRUIT      = "INTRO_FRUIT"
    PLAYING          = "PLAYING"
    FEEDBACK_CORRECT = "FEEDBACK_CORRECT"
    FEEDBACK_WRONG   = "FEEDBACK_WRONG"
    REWARD           = "REWARD"
    GAME_OVER        = "GAME_OVER"
    VICTORY          = "VICTORY"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.GAME_OVER, Phase.VICTORY)


class Weapon(Enum):
    """Cosmetic weapon tiers, in unlock order."""
    BASIC_KATANA  = "Basic Katana"
    GOLD_SWORD    = "Gold Sword"
    DIAMOND_SWORD = "Diamond Sword"


class Answer(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    is_correct: bool


class Question(BaseModel):
    """A three-choice question with exactly one correct answer.

    Attributes:
        id:         Unique per issued round, never a bank entry's static id.
        text:       Prompt shown on the question board, e.g. "12 × 12".
        difficulty: "easy", "medium" or "hard".
        answers:    Display order of the three answer fruits.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    difficulty: Difficulty
    answers: tuple[Answer, ...]

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("question text is empty")
        return v

    @model_validator(mode="after")
    def _one_correct_of_three(self) -> "Question":
        if len(self.answers) != ANSWER_COUNT:
            raise ValueError(f"expected {ANSWER_COUNT} answers, got {len(self.answers)}")
        correct = sum(1 for a in self.answers if a.is_correct)
        if correct != 1:
            raise ValueError(f"expected exactly one correct answer, got {correct}")
        return self

    def answer(self, answer_id: str) -> Answer:
        """Return the answer with the given id.

        Raises:
            ValueError: If no answer in this question has that id.
        """
        for a in self.answers:
            if a.id == answer_id:
                return a
        raise ValueError(f"question {self.id} has no answer {answer_id!r}")

    @property
    def correct_answer(self) -> Answer:
        return next(a for a in self.answers if a.is_correct)


@dataclass
class IntroItem:
    """A slice target in the intro phase.

    Positions and velocities are percentages of the play area (per second
    for velocity), so the renderer can map them onto any surface size.
    """

    id: str
    kind: str             # a fruit variant from settings.FRUIT_VARIANTS, or "bomb"
    x: float
    y: float
    vx: float
    vy: float
    rotation: float = 0.0
    sliced: bool = False

    @property
    def is_bomb(self) -> bool:
        return self.kind == "bomb"
