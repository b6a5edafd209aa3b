"""
Unit tests for core.stats.StatsRecorder and the persistent stores.
"""

import json
from datetime import date

from core.stats import StatsRecorder, UserStats
from core.store import STATS_KEY, JsonFileStore, MemoryStore


class TestReadAggregate:

    def test_read_aggregate_when_empty_then_defaults(self, stats):
        result = stats.read_aggregate()

        assert result == UserStats()
        assert result.grade_level == 1
        assert result.games_history == []

    def test_read_aggregate_when_partial_blob_then_merged_with_defaults(self):
        store = MemoryStore({STATS_KEY: json.dumps({"highestScore": 700, "futureField": True})})

        result = StatsRecorder(store).read_aggregate()

        assert result.highest_score == 700
        assert result.total_games_played == 0

    def test_read_aggregate_when_not_an_object_then_defaults(self):
        for raw in ("{not json", "[1, 2]", "42"):
            result = StatsRecorder(MemoryStore({STATS_KEY: raw})).read_aggregate()
            assert result == UserStats()

    def test_read_aggregate_when_grade_out_of_range_then_clamped_and_rest_kept(self):
        blob = {
            "highestScore": 4200,
            "highestRound": 40,
            "gradeLevel": 13,
            "gamesHistory": [{"date": "2026-01-02", "score": 4200}],
        }
        store = MemoryStore({STATS_KEY: json.dumps(blob)})
        stats = StatsRecorder(store)

        result = stats.read_aggregate()

        assert (result.highest_score, result.highest_round, result.grade_level) == (4200, 40, 12)
        assert len(result.games_history) == 1

        stats.record(10, 0, 1)
        saved = json.loads(store.get(STATS_KEY))

        assert saved["highestScore"] == 4200
        assert len(saved["gamesHistory"]) == 2

    def test_read_aggregate_when_one_field_invalid_then_only_that_field_defaults(self):
        blob = {"highestScore": "lots", "highestRound": 7, "gradeLevel": 0, "lifetimeCorrectAnswers": 12}

        result = StatsRecorder(MemoryStore({STATS_KEY: json.dumps(blob)})).read_aggregate()

        assert result.highest_score == 0
        assert result.highest_round == 7
        assert result.grade_level == 1
        assert result.lifetime_correct_answers == 12

    def test_read_aggregate_when_history_has_bad_entries_then_skips_them_and_keeps_newest(self):
        history = [{"date": f"2026-01-{d:02d}", "score": d} for d in range(1, 13)]
        history.insert(3, {"date": "2026-01-01"})
        history.insert(5, "oops")
        blob = {"gamesHistory": history, "highestScore": 12}

        result = StatsRecorder(MemoryStore({STATS_KEY: json.dumps(blob)})).read_aggregate()

        assert [h.score for h in result.games_history] == list(range(3, 13))
        assert result.highest_score == 12


class TestRecord:

    def test_record_when_called_then_updates_counters_and_maxima(self, store):
        stats = StatsRecorder(store, today=lambda: date(2026, 3, 1))

        stats.record(110, 1, 1)
        result = stats.record(105, 0, 2)

        assert result.total_games_played == 2
        assert result.lifetime_correct_answers == 1
        assert result.highest_score == 110
        assert result.highest_round == 2
        assert [h.score for h in result.games_history] == [110, 105]
        assert result.games_history[0].date == "2026-03-01"

    def test_record_when_history_full_then_evicts_oldest(self, stats):
        for score in range(15):
            stats.record(score, 0, 1)

        history = stats.read_aggregate().games_history

        assert len(history) == 10
        assert [h.score for h in history] == list(range(5, 15))

    def test_record_when_stored_then_blob_uses_camel_case(self, store, stats):
        stats.record(10, 1, 1)

        blob = json.loads(store.get(STATS_KEY))

        assert blob["totalGamesPlayed"] == 1
        assert "gamesHistory" in blob


class TestDashboard:

    def test_promote_grade_when_score_short_then_none(self, stats):
        stats.save(highest_score=999)

        assert stats.promote_grade() is None
        assert stats.read_aggregate().grade_level == 1

    def test_promote_grade_when_earned_then_bumps_one(self, stats):
        stats.save(highest_score=1000)

        assert stats.promote_grade() == 2
        assert stats.read_aggregate().grade_level == 2
        assert stats.promote_grade() is None

    def test_promote_grade_when_max_then_none(self, stats):
        stats.save(highest_score=99_999, grade_level=12)

        assert stats.promote_grade() is None

    def test_leaderboard_when_below_threshold_then_mock_only(self, stats):
        board = stats.leaderboard()

        assert len(board) == 5
        assert all(e.name != "YOU" for e in board)

    def test_leaderboard_when_qualified_then_player_ranked_by_score(self, stats):
        stats.save(highest_score=2200, highest_round=40)

        board = stats.leaderboard()

        assert [e.name for e in board][:2] == ["NinjaZero", "YOU"]
        assert [e.score for e in board] == sorted((e.score for e in board), reverse=True)


class TestJsonFileStore:

    def test_set_when_reopened_then_value_persists(self, tmp_path):
        path = tmp_path / "nested" / "profile.json"
        JsonFileStore(path).set("k", "v")

        assert JsonFileStore(path).get("k") == "v"

    def test_delete_when_reopened_then_value_gone(self, tmp_path):
        path = tmp_path / "profile.json"
        store = JsonFileStore(path)
        store.set("k", "v")
        store.delete("k")

        assert JsonFileStore(path).get("k") is None

    def test_load_when_file_corrupt_then_starts_empty(self, tmp_path):
        path = tmp_path / "profile.json"
        path.write_text("{{{", encoding="utf-8")

        assert JsonFileStore(path).get("anything") is None
