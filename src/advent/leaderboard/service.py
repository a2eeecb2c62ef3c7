"""Leaderboard and stats queries over answer submissions (read-only)."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from advent.db.models import AnswerSubmission, Participant
from advent.leaderboard.ranking import LeaderboardEntry, rank_participants


async def _aggregate_rows(db: AsyncSession) -> list[dict]:
    result = await db.execute(
        select(
            Participant.address,
            func.count(AnswerSubmission.id).label("correct_answers"),
            func.avg(AnswerSubmission.response_time_ms).label("avg_response_time_ms"),
        )
        .join(AnswerSubmission, AnswerSubmission.participant == Participant.address)
        .where(
            Participant.paid.is_(True),
            AnswerSubmission.is_correct.is_(True),
        )
        .group_by(Participant.address)
    )
    return [
        {
            "address": row.address,
            "correct_answers": int(row.correct_answers),
            "avg_response_time_ms": float(row.avg_response_time_ms) if row.avg_response_time_ms is not None else None,
        }
        for row in result.all()
    ]


async def get_leaderboard(db: AsyncSession, limit: int | None = None) -> list[LeaderboardEntry]:
    """Top ranked paid participants."""
    ranked = rank_participants(await _aggregate_rows(db))
    return ranked[:limit] if limit is not None else ranked


async def get_participant_rank(db: AsyncSession, address: str) -> int:
    """1-based rank, or 0 when the participant is unranked."""
    for entry in rank_participants(await _aggregate_rows(db)):
        if entry.address == address:
            return entry.rank
    return 0
