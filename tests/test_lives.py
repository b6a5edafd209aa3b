"""
Unit tests for core.lives.LivesEconomy.

Time is pinned with the FakeClock fixture; the store is in memory.
"""

from core.store import LIVES_COUNT_KEY, LIVES_TIMESTAMP_KEY, MemoryStore
from core.lives import LivesEconomy
from settings import REGEN_PERIOD_MS


def _seed(store, count, anchor=None):
    store.set(LIVES_COUNT_KEY, str(count))
    if anchor is not None:
        store.set(LIVES_TIMESTAMP_KEY, str(anchor))


class TestCurrentLives:
    """Tests for current_lives()."""

    def test_current_lives_when_store_empty_then_full(self, lives, store):
        assert lives.current_lives() == 3
        assert store.get(LIVES_TIMESTAMP_KEY) is None

    def test_current_lives_when_period_and_a_bit_elapsed_then_restores_one_and_keeps_progress(
        self, lives, store, clock
    ):
        _seed(store, 1, clock.ms - 125_000)

        assert lives.current_lives() == 2
        assert store.get(LIVES_TIMESTAMP_KEY) == str(clock.ms - 5_000)
        assert store.get(LIVES_COUNT_KEY) == "2"

    def test_current_lives_when_called_twice_then_same_result(self, lives, store, clock):
        _seed(store, 1, clock.ms - 125_000)

        first = lives.current_lives()
        second = lives.current_lives()

        assert first == second == 2
        assert store.get(LIVES_TIMESTAMP_KEY) == str(clock.ms - 5_000)

    def test_current_lives_when_many_periods_elapsed_then_caps_and_clears_anchor(
        self, lives, store, clock
    ):
        _seed(store, 0, clock.ms - 10 * REGEN_PERIOD_MS)

        assert lives.current_lives() == 3
        assert store.get(LIVES_TIMESTAMP_KEY) is None

    def test_current_lives_when_under_a_period_then_unchanged(self, lives, store, clock):
        anchor = clock.ms - 60_000
        _seed(store, 2, anchor)

        assert lives.current_lives() == 2
        assert store.get(LIVES_TIMESTAMP_KEY) == str(anchor)

    def test_current_lives_when_below_max_without_anchor_then_arms_one(self, lives, store, clock):
        _seed(store, 1)

        assert lives.current_lives() == 1
        assert store.get(LIVES_TIMESTAMP_KEY) == str(clock.ms)

    def test_current_lives_when_full_with_stale_anchor_then_drops_it(self, lives, store, clock):
        _seed(store, 3, clock.ms)

        assert lives.current_lives() == 3
        assert store.get(LIVES_TIMESTAMP_KEY) is None

    def test_current_lives_when_record_corrupt_then_treated_as_fresh(self, clock):
        store = MemoryStore({LIVES_COUNT_KEY: "lots", LIVES_TIMESTAMP_KEY: "yesterday"})
        lives = LivesEconomy(store, clock)

        assert lives.current_lives() == 3


class TestLoseLife:
    """Tests for lose_life()."""

    def test_lose_life_when_full_then_arms_fresh_anchor(self, lives, store, clock):
        assert lives.lose_life() == 2
        assert store.get(LIVES_TIMESTAMP_KEY) == str(clock.ms)

    def test_lose_life_when_already_regenerating_then_keeps_anchor(self, lives, store, clock):
        lives.lose_life()
        armed_at = clock.ms
        clock.advance(30_000)

        assert lives.lose_life() == 1
        assert store.get(LIVES_TIMESTAMP_KEY) == str(armed_at)

    def test_lose_life_when_zero_then_stays_zero(self, lives, store, clock):
        _seed(store, 0, clock.ms)

        assert lives.lose_life() == 0

    def test_lose_life_when_two_lost_then_both_return_on_shared_cadence(self, lives, clock):
        lives.lose_life()
        lives.lose_life()

        clock.advance(REGEN_PERIOD_MS)
        assert lives.current_lives() == 2
        clock.advance(REGEN_PERIOD_MS)
        assert lives.current_lives() == 3


class TestTimeToNextLife:
    """Tests for time_to_next_life()."""

    def test_time_to_next_life_when_full_then_none(self, lives):
        assert lives.time_to_next_life() is None

    def test_time_to_next_life_when_regenerating_then_formats_remaining(self, lives, clock):
        lives.lose_life()
        clock.advance(55_000)

        assert lives.time_to_next_life() == "1:05"

    def test_time_to_next_life_when_due_but_unreconciled_then_ready(self, lives, store, clock):
        _seed(store, 1, clock.ms - REGEN_PERIOD_MS)

        assert lives.time_to_next_life() == "ready"

    def test_reset_when_called_then_full_without_anchor(self, lives, store):
        lives.lose_life()

        lives.reset()

        assert lives.current_lives() == 3
        assert store.get(LIVES_TIMESTAMP_KEY) is None
