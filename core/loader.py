"""
core/loader.py — Delivers fetched questions to the session.

QuestionProvider.fetch() can block on the network for as long as the
remote model takes. The session must keep rendering while it waits, so
fetches go through a loader:

    ThreadedLoader   — runs fetch() on a worker thread and hands the result
                       back on the main thread when the game loop calls
                       poll(). The session therefore only ever mutates
                       state from the main thread.
    ImmediateLoader  — calls fetch() inline and invokes the callback before
                       request() returns. Used by tests and headless runs.

cancel() drops every request still in flight; their results are discarded
and their callbacks never run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

from core.models import Difficulty, Question
from core.question_provider import QuestionProvider

logger = logging.getLogger(__name__)

QuestionCallback = Callable[[Question], None]


class QuestionLoader(ABC):
    """Asynchronous question fetch capability."""

    def __init__(self, provider: QuestionProvider) -> None:
        self.provider = provider

    @abstractmethod
    def request(self, difficulty: Difficulty, grade_level: int, callback: QuestionCallback) -> None:
        """Start fetching a question; callback receives it on the main thread."""
        ...

    def poll(self) -> None:
        """Deliver finished fetches. Called once per frame by the game loop."""

    def cancel(self) -> None:
        """Discard every request still in flight."""

    def shutdown(self) -> None:
        self.cancel()


class ImmediateLoader(QuestionLoader):
    def request(self, difficulty: Difficulty, grade_level: int, callback: QuestionCallback) -> None:
        callback(self.provider.fetch(difficulty, grade_level))


class ThreadedLoader(QuestionLoader):
    """Thread pool-backed loader.

    Attributes:
        _executor: Single worker; rounds never need more than one question
                   in flight.
        _pending:  (future, callback) pairs not yet delivered.
    """

    def __init__(self, provider: QuestionProvider, max_workers: int = 1) -> None:
        super().__init__(provider)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="question")
        self._pending: list[tuple[Future, QuestionCallback]] = []

    def request(self, difficulty: Difficulty, grade_level: int, callback: QuestionCallback) -> None:
        future = self._executor.submit(self.provider.fetch, difficulty, grade_level)
        self._pending.append((future, callback))

    def poll(self) -> None:
        if not self._pending:
            return
        still_waiting = []
        ready = []
        for future, callback in self._pending:
            (ready if future.done() else still_waiting).append((future, callback))
        self._pending = still_waiting
        for future, callback in ready:
            # fetch() never raises, so result() only re-raises programming errors
            callback(future.result())

    def cancel(self) -> None:
        if self._pending:
            logger.debug("Discarding %d in-flight question fetch(es)", len(self._pending))
        for future, _ in self._pending:
            future.cancel()
        self._pending.clear()

    def shutdown(self) -> None:
        self.cancel()
        self._executor.shutdown(wait=False, cancel_futures=True)
