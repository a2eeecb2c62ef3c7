"""Deterministic leaderboard ranking.

Participants ranked by correct answers DESC, then by average response
time over correct answers ASC, then by address for a stable order.
Participants with no correct answers are not ranked.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    address: str
    correct_answers: int
    avg_response_time_ms: float | None


def rank_participants(rows: list[dict[str, Any]]) -> list[LeaderboardEntry]:
    """Rank aggregate rows.

    Input: dicts with
        - address: str
        - correct_answers: int
        - avg_response_time_ms: float | None
    """

    def sort_key(row: dict[str, Any]) -> tuple[int, float, str]:
        avg = row.get("avg_response_time_ms")
        return (
            -row.get("correct_answers", 0),
            avg if avg is not None else math.inf,
            row["address"],
        )

    eligible = [r for r in rows if r.get("correct_answers", 0) > 0]
    return [
        LeaderboardEntry(
            rank=idx + 1,
            address=row["address"],
            correct_answers=row["correct_answers"],
            avg_response_time_ms=row.get("avg_response_time_ms"),
        )
        for idx, row in enumerate(sorted(eligible, key=sort_key))
    ]
