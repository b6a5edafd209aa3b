"""
questions/base.py — Abstract base for remote question sources.

A QuestionSource produces one Question for a difficulty and grade. Unlike
QuestionProvider (core/question_provider.py), a source is allowed to fail:
it raises on network errors, quota exhaustion or malformed payloads, and
the provider turns every such failure into a local bank question.

Adding a new source:
    1. Create a new file in questions/
    2. Subclass QuestionSource and implement generate()
    3. Pass an instance to QuestionProvider(source=...)
"""

from __future__ import annotations

import random
import uuid
from abc import ABC, abstractmethod

from core.models import Difficulty, Question


class QuestionSource(ABC):
    """Something that can generate a Question, possibly by failing.

    Attributes:
        name: Short label used in log lines.
    """

    name: str = "source"

    @abstractmethod
    def generate(self, difficulty: Difficulty, grade_level: int, rng: random.Random) -> Question:
        """Produce one question.

        Args:
            difficulty:  "easy", "medium" or "hard".
            grade_level: School grade 1..12 used to pick the topic.
            rng:         Random source for ids and answer order.

        Returns:
            A validated Question with a fresh id.

        Raises:
            Exception: Any failure. Callers must not let it reach the session.
        """
        ...


def fresh_id(rng: random.Random) -> str:
    """Return a new question id drawn from rng.

    Seeded RNGs produce repeatable ids, which keeps test runs deterministic
    while still giving every issued round its own id.
    """
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))
