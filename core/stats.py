"""
core/stats.py — Persisted player statistics for Math Ninja.

UserStats is stored as one JSON blob under STATS_KEY with camelCase keys.
Reads merge the blob over defaults field by field, so older saves missing
newer fields still load and one bad field does not cost the rest.

The session calls record() once per resolved round and read_aggregate()
once at start-up (for the grade level). The dashboard uses the rest:
grade promotion and the leaderboard.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from core.store import Store, STATS_KEY
from settings import HISTORY_LIMIT, MAX_GRADE, SCORE_PER_GRADE, LEADERBOARD_MIN_SCORE

logger = logging.getLogger(__name__)


class HistoryEntry(BaseModel):
    date: str
    score: int


class UserStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    total_games_played:       int = 0
    lifetime_correct_answers: int = 0
    current_streak:           int = 0
    highest_score:            int = 0
    highest_round:            int = 0
    grade_level:              int = Field(default=1, ge=1, le=MAX_GRADE)
    games_history:            list[HistoryEntry] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class LeaderboardEntry(BaseModel):
    id: str
    name: str
    score: int
    avatar: str
    rounds: int


MOCK_LEADERBOARD: tuple[LeaderboardEntry, ...] = (
    LeaderboardEntry(id="1", name="NinjaZero",   score=2450, avatar="N", rounds=45),
    LeaderboardEntry(id="2", name="MathMaster",  score=2100, avatar="M", rounds=38),
    LeaderboardEntry(id="3", name="SliceQueen",  score=1890, avatar="S", rounds=32),
    LeaderboardEntry(id="4", name="FruitSensei", score=1500, avatar="F", rounds=25),
    LeaderboardEntry(id="5", name="BlitzKid",    score=1200, avatar="B", rounds=19),
)


# ── Salvage ───────────────────────────────────────────────────────────────────

def _clamp_grade(value):
    try:
        grade = int(value)
    except (TypeError, ValueError):
        return value
    return max(1, min(MAX_GRADE, grade))


def _valid_history(value):
    if not isinstance(value, list):
        return value
    kept = []
    for entry in value:
        try:
            kept.append(HistoryEntry.model_validate(entry))
        except ValidationError:
            logger.warning("Skipping invalid history entry %r", entry)
    return kept[-HISTORY_LIMIT:]


_REPAIR = {
    "grade_level":   _clamp_grade,
    "games_history": _valid_history,
}


def _salvage(data: dict) -> UserStats:
    """Build UserStats from a stored object, keeping every field that validates.

    Args:
        data: Decoded stats blob, camelCase or snake_case keys.

    Returns:
        UserStats with invalid fields repaired or reset to their defaults.
    """
    fields = {}
    for name in UserStats.model_fields:
        key = to_camel(name)
        if key in data:
            value = data[key]
        elif name in data:
            value = data[name]
        else:
            continue
        if name in _REPAIR:
            value = _REPAIR[name](value)
        try:
            UserStats.model_validate({name: value})
        except ValidationError as exc:
            logger.warning("Dropping invalid stats field %s (%s)", key, exc.errors()[0]["msg"])
            continue
        fields[name] = value
    return UserStats.model_validate(fields)


class StatsRecorder:
    """Reads and updates UserStats in the store.

    Attributes:
        _store: Persistence capability.
        _today: Returns today's date; injectable for tests.
    """

    def __init__(self, store: Store, today: Callable[[], date] = date.today) -> None:
        self._store = store
        self._today = today

    def read_aggregate(self) -> UserStats:
        """Return stored stats merged with defaults.

        Fields are salvaged one at a time: unknown keys are ignored, missing
        keys take their defaults, an out-of-range grade is clamped into
        1..MAX_GRADE, history entries that fail validation are skipped and
        only the newest HISTORY_LIMIT are kept. Any other invalid field
        falls back to its default while the rest of the blob survives. A
        blob that is not a JSON object yields plain defaults.
        """
        raw = self._store.get(STATS_KEY)
        if raw is None:
            return UserStats()
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Corrupt stats blob (%s); using defaults", exc)
            return UserStats()
        if not isinstance(data, dict):
            logger.warning("Stats blob is not an object; using defaults")
            return UserStats()
        return _salvage(data)

    def _write(self, stats: UserStats) -> UserStats:
        self._store.set(STATS_KEY, stats.to_json())
        return stats

    def save(self, **changes) -> UserStats:
        """Merge partial changes (snake_case field names) into the stored stats."""
        current = self.read_aggregate()
        updated = UserStats.model_validate({**current.model_dump(), **changes})
        return self._write(updated)

    def record(self, score: int, correct_increment: int, round_num: int) -> UserStats:
        """Fold one resolved round into the aggregate.

        Every call counts as one game played and appends a history entry
        dated today; the history keeps the newest HISTORY_LIMIT entries.

        Args:
            score:             Session score after the round resolved.
            correct_increment: 1 for a correct answer, 0 otherwise.
            round_num:         Round that just resolved.

        Returns:
            The updated stats.
        """
        current = self.read_aggregate()
        history = current.games_history + [HistoryEntry(date=self._today().isoformat(), score=score)]
        updated = current.model_copy(update={
            "total_games_played":       current.total_games_played + 1,
            "lifetime_correct_answers": current.lifetime_correct_answers + correct_increment,
            "highest_score":            max(current.highest_score, score),
            "highest_round":            max(current.highest_round, round_num),
            "games_history":            history[-HISTORY_LIMIT:],
        })
        logger.debug("Recorded round %d: score=%d correct=%d", round_num, score, correct_increment)
        return self._write(updated)

    # ── Dashboard ─────────────────────────────────────────────────────────────

    @staticmethod
    def required_score(grade_level: int) -> int:
        return grade_level * SCORE_PER_GRADE

    def can_promote(self, stats: UserStats | None = None) -> bool:
        stats = stats or self.read_aggregate()
        return (
            stats.grade_level < MAX_GRADE
            and stats.highest_score >= self.required_score(stats.grade_level)
        )

    def promote_grade(self) -> int | None:
        """Raise the grade by one if the best score has earned it.

        Returns:
            The new grade, or None if promotion is not available.
        """
        stats = self.read_aggregate()
        if not self.can_promote(stats):
            return None
        new_grade = stats.grade_level + 1
        self.save(grade_level=new_grade)
        logger.info("Promoted to grade %d", new_grade)
        return new_grade

    def leaderboard(self, stats: UserStats | None = None) -> list[LeaderboardEntry]:
        """Return the mock board, with the player added once they reach 1000."""
        stats = stats or self.read_aggregate()
        entries = list(MOCK_LEADERBOARD)
        if stats.highest_score >= LEADERBOARD_MIN_SCORE:
            entries.append(LeaderboardEntry(
                id="local-player",
                name="YOU",
                score=stats.highest_score,
                avatar="*",
                rounds=stats.highest_round or 1,
            ))
        return sorted(entries, key=lambda e: e.score, reverse=True)
