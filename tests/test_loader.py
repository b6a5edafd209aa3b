"""
Tests for core.loader: results reach the callback only through poll(),
and cancel() discards in-flight fetches.
"""

import threading

import pytest

from core.loader import ImmediateLoader, ThreadedLoader
from core.models import Question


class GatedProvider:
    """Provider whose fetch() blocks until the test opens the gate."""

    def __init__(self, inner):
        self.inner = inner
        self.gate = threading.Event()

    def fetch(self, difficulty, grade_level):
        self.gate.wait(timeout=5)
        return self.inner.fetch(difficulty, grade_level)


@pytest.fixture()
def gated(provider):
    return GatedProvider(provider)


def test_immediate_loader_when_requested_then_calls_back_inline(provider):
    received = []

    ImmediateLoader(provider).request("easy", 1, received.append)

    assert len(received) == 1
    assert isinstance(received[0], Question)


def test_threaded_loader_when_done_then_delivered_on_poll(gated):
    loader = ThreadedLoader(gated)
    received = []
    try:
        loader.request("easy", 1, received.append)
        loader.poll()
        assert received == []

        gated.gate.set()
        future, _ = loader._pending[0]
        future.result(timeout=5)
        loader.poll()

        assert len(received) == 1
    finally:
        loader.shutdown()


def test_threaded_loader_when_cancelled_then_never_delivered(gated):
    loader = ThreadedLoader(gated)
    received = []
    try:
        loader.request("easy", 1, received.append)
        loader.cancel()
        gated.gate.set()
        loader.poll()

        assert received == []
    finally:
        loader.shutdown()
