"""Unit tests for the deterministic leaderboard ranking."""

from advent.leaderboard.ranking import rank_participants


class TestLeaderboardRanking:
    def test_more_correct_answers_first(self):
        ranked = rank_participants([
            {"address": "0xa", "correct_answers": 2, "avg_response_time_ms": 1000.0},
            {"address": "0xb", "correct_answers": 5, "avg_response_time_ms": 90000.0},
        ])
        assert [e.address for e in ranked] == ["0xb", "0xa"]

    def test_tie_broken_by_faster_average(self):
        ranked = rank_participants([
            {"address": "0xa", "correct_answers": 3, "avg_response_time_ms": 8000.0},
            {"address": "0xb", "correct_answers": 3, "avg_response_time_ms": 4000.0},
        ])
        assert ranked[0].address == "0xb"

    def test_full_tie_broken_by_address(self):
        ranked = rank_participants([
            {"address": "0xc", "correct_answers": 1, "avg_response_time_ms": 500.0},
            {"address": "0xa", "correct_answers": 1, "avg_response_time_ms": 500.0},
        ])
        assert [e.address for e in ranked] == ["0xa", "0xc"]

    def test_missing_average_sorts_last_within_tie(self):
        ranked = rank_participants([
            {"address": "0xa", "correct_answers": 1, "avg_response_time_ms": None},
            {"address": "0xb", "correct_answers": 1, "avg_response_time_ms": 99999.0},
        ])
        assert ranked[0].address == "0xb"

    def test_zero_correct_not_ranked(self):
        ranked = rank_participants([
            {"address": "0xa", "correct_answers": 0, "avg_response_time_ms": None},
            {"address": "0xb", "correct_answers": 1, "avg_response_time_ms": 10.0},
        ])
        assert len(ranked) == 1
        assert ranked[0].rank == 1

    def test_ranks_are_contiguous(self):
        rows = [
            {"address": f"0x{i:02d}", "correct_answers": 20 - i, "avg_response_time_ms": 100.0}
            for i in range(10)
        ]
        assert [e.rank for e in rank_participants(rows)] == list(range(1, 11))

    def test_empty(self):
        assert rank_participants([]) == []
