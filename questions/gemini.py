"""
questions/gemini.py — Remote question generation with Google Gemini.

Asks the model for one grade-appropriate question as JSON, constrained by
a response schema, and validates the reply into a Question. Any failure
raises; QuestionProvider catches it and serves a bank question instead.

Wire format (camelCase, as requested in the prompt):
    {"questionText": "7 × 8", "options": [{"text": "56", "isCorrect": true}, ...]}
"""

from __future__ import annotations

import logging
import random

from google import genai
from google.genai import types
from pydantic import BaseModel, ConfigDict

from core.models import Answer, Difficulty, Question
from questions.base import QuestionSource, fresh_id
from questions.topics import topic_for_grade
from settings import GEMINI_MODEL

logger = logging.getLogger(__name__)

_PROMPT = (
    "Generate a single math question suitable for Grade {grade} students.\n"
    "The specific topic should be: {topic}.\n"
    "The difficulty within this grade level should be {difficulty}.\n"
    "Keep the question text concise (under 10 words if possible).\n"
    "Format: Return JSON Object with 'questionText' and 'options' "
    "(array of {{text, isCorrect}}).\n"
    "Provide 3 options, only 1 correct."
)


# ── Response schema ───────────────────────────────────────────────────────────

class RemoteOption(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    text: str
    isCorrect: bool


class RemoteQuestion(BaseModel):
    questionText: str
    options: list[RemoteOption]


def build_prompt(difficulty: Difficulty, grade_level: int) -> str:
    return _PROMPT.format(
        grade=grade_level,
        topic=topic_for_grade(grade_level),
        difficulty=difficulty,
    )


def parse_payload(text: str | None, difficulty: Difficulty, rng: random.Random) -> Question:
    """Validate a raw JSON reply into a Question.

    Args:
        text:       Response body from the model.
        difficulty: Difficulty that was requested; stamped on the question.
        rng:        Random source for the id and the answer shuffle.

    Returns:
        A Question with a fresh id and shuffled answers.

    Raises:
        ValueError: Empty body. pydantic.ValidationError (a ValueError) for
                    malformed JSON, missing fields, or a payload that breaks
                    the three-answers / one-correct rule.
    """
    if not text:
        raise ValueError("Empty response")
    payload = RemoteQuestion.model_validate_json(text)
    answers = [
        Answer(id=f"opt-{i}", text=opt.text, is_correct=opt.isCorrect)
        for i, opt in enumerate(payload.options)
    ]
    rng.shuffle(answers)
    return Question(
        id=fresh_id(rng),
        text=payload.questionText,
        difficulty=difficulty,
        answers=tuple(answers),
    )


class GeminiQuestionSource(QuestionSource):
    """QuestionSource backed by the google-genai client.

    Attributes:
        model:   Model name passed to generate_content.
        _client: genai.Client, or any object exposing the same
                 client.models.generate_content(...) call.
    """

    name = "gemini"

    def __init__(self, api_key: str | None = None, client=None, model: str = GEMINI_MODEL) -> None:
        if client is None:
            client = genai.Client(api_key=api_key)
        self._client = client
        self.model = model

    def generate(self, difficulty: Difficulty, grade_level: int, rng: random.Random) -> Question:
        logger.debug("Requesting %s question for grade %d", difficulty, grade_level)
        response = self._client.models.generate_content(
            model=self.model,
            contents=build_prompt(difficulty, grade_level),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RemoteQuestion,
            ),
        )
        return parse_payload(response.text, difficulty, rng)
