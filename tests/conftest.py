import os
import random
import sys

import pytest

# Ensure the repo root (containing core/, questions/, settings.py) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from core.lives import LivesEconomy
from core.loader import ImmediateLoader, QuestionLoader
from core.question_provider import QuestionProvider
from core.scheduler import Scheduler
from core.session import GameSession
from core.stats import StatsRecorder
from core.store import MemoryStore


class FakeClock:
    """Epoch-ms clock that only moves when a test says so."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self.ms = start_ms

    def __call__(self) -> int:
        return self.ms

    def advance(self, ms: int) -> None:
        self.ms += ms


class ManualLoader(QuestionLoader):
    """Loader that holds every request until the test releases it."""

    def __init__(self, provider):
        super().__init__(provider)
        self.requests = []
        self.cancelled = 0

    def request(self, difficulty, grade_level, callback):
        self.requests.append((difficulty, grade_level, callback))

    def release(self, index: int = -1) -> None:
        difficulty, grade_level, callback = self.requests[index]
        callback(self.provider.fetch(difficulty, grade_level))

    def cancel(self):
        self.cancelled += 1


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def scheduler():
    return Scheduler()


@pytest.fixture()
def lives(store, clock):
    return LivesEconomy(store, clock)


@pytest.fixture()
def stats(store):
    return StatsRecorder(store)


@pytest.fixture()
def provider():
    return QuestionProvider(rng=random.Random(99))


@pytest.fixture()
def make_session(lives, stats, scheduler, provider, rng):
    """Factory for sessions wired to in-memory collaborators.

    Pass loader= to swap the default ImmediateLoader, e.g. for a ManualLoader.
    """
    def _make(loader=None, on_exit=None):
        return GameSession(
            lives=lives,
            loader=loader or ImmediateLoader(provider),
            stats=stats,
            scheduler=scheduler,
            rng=rng,
            on_exit=on_exit,
        )
    return _make


@pytest.fixture()
def manual_loader(provider):
    return ManualLoader(provider)
