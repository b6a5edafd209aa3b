"""
core/question_provider.py — Question selection for Math Ninja.

The provider is the only place that knows where questions come from. It
applies two rules when the session asks for the next question:

    1. Remote first — if a QuestionSource is configured, ask it.
    2. Never fail   — any exception from the source, or no source at all,
                      yields a question from the offline bank.

Quota and format problems are expected (free-tier limits, a model that
ignores the schema) and log a one-line warning. Anything else is logged
with its traceback, but still degrades to the bank.

The session calls fetch() once per round and receives a ready Question.
"""

from __future__ import annotations

import logging
import random

from core.models import Difficulty, Question
from questions.bank import draw_fallback
from questions.base import QuestionSource
from settings import DIFFICULTY_SCORE_THRESHOLDS, GEMINI_API_KEY

logger = logging.getLogger(__name__)


def difficulty_for_score(score: int) -> Difficulty:
    """Map the current session score to a difficulty hint.

    Returns:
        "hard" above 1000, "medium" above 500, otherwise "easy".
    """
    if score > DIFFICULTY_SCORE_THRESHOLDS["hard"]:
        return "hard"
    if score > DIFFICULTY_SCORE_THRESHOLDS["medium"]:
        return "medium"
    return "easy"


def is_quota_error(exc: BaseException) -> bool:
    """Return True for rate-limit / quota failures (HTTP 429, RESOURCE_EXHAUSTED)."""
    return getattr(exc, "code", None) == 429 or "RESOURCE_EXHAUSTED" in str(exc)


class QuestionProvider:
    """Remote-with-fallback question selector.

    Attributes:
        source: Optional remote QuestionSource. None means bank only.
        _rng:   Random source shared by the source and the bank.
    """

    def __init__(self, source: QuestionSource | None = None, rng: random.Random | None = None) -> None:
        self.source = source
        self._rng = rng or random.Random()

    def fetch(self, difficulty: Difficulty, grade_level: int) -> Question:
        """Return a question for the given difficulty and grade.

        Never raises.

        Args:
            difficulty:  "easy", "medium" or "hard".
            grade_level: School grade 1..12.

        Returns:
            A validated Question, remote if possible, otherwise from the bank.
        """
        if self.source is None:
            logger.debug("No remote source configured, using fallback questions")
            return draw_fallback(self._rng)

        try:
            return self.source.generate(difficulty, grade_level, self._rng)
        except Exception as exc:
            if is_quota_error(exc) or isinstance(exc, ValueError):
                logger.warning(
                    "%s issue (quota/format: %s); switching to fallback questions",
                    self.source.name, exc,
                )
            else:
                logger.exception("%s error; switching to fallback questions", self.source.name)
            return draw_fallback(self._rng)


def default_provider(rng: random.Random | None = None) -> QuestionProvider:
    """Build the provider used by the game: Gemini if a key is set, else bank only."""
    if not GEMINI_API_KEY:
        logger.warning("No API key found, using fallback questions")
        return QuestionProvider(rng=rng)
    from questions.gemini import GeminiQuestionSource

    return QuestionProvider(GeminiQuestionSource(api_key=GEMINI_API_KEY), rng=rng)
