"""
core/store.py — Key-value persistence for lives and stats.

The game persists three string values under fixed keys (see below). Core
logic only ever talks to the Store interface, so tests run against
MemoryStore while the desktop build uses JsonFileStore, which keeps every
key in one small JSON document under settings.DATA_DIR.

The store is read-modify-write without locking. One running game per
data directory is assumed.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)

# ── Key schema ────────────────────────────────────────────────────────────────
STATS_KEY           = "math_ninja_stats"
LIVES_COUNT_KEY     = "math_ninja_lives_count"
LIVES_TIMESTAMP_KEY = "math_ninja_lives_timestamp"


class Store(ABC):
    """String-keyed, string-valued persistence capability."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. No-op if it is absent."""
        ...


class MemoryStore(Store):
    """Dict-backed store. Used by tests and as a throwaway profile."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(Store):
    """Store persisted as a single JSON object on disk.

    The file is loaded once on construction and rewritten on every
    mutation. An unreadable or non-object file is treated as empty so a
    corrupt profile degrades to a fresh one instead of crashing the game.

    Attributes:
        path: Location of the JSON document.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._data: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read store %s (%s); starting fresh", self.path, exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Store %s is not a JSON object; starting fresh", self.path)
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()
