"""Answer submissions: one effective outcome per (participant, day).

First-correct-wins: a wrong attempt replaces an earlier wrong attempt,
but a correct row is never overwritten.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from advent.db.dialect import insert_for
from advent.db.models import AnswerSubmission

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParticipantStats:
    correct_answers: int
    total_answers: int
    avg_response_time_ms: float | None


def response_time_ms(sent_at: datetime | None, submitted_at: datetime) -> int | None:
    if sent_at is None:
        return None
    return int((submitted_at - sent_at).total_seconds() * 1000)


async def record_answer(
    db: AsyncSession,
    participant: str,
    day: int,
    answer_text: str,
    is_correct: bool,
    sent_at: datetime | None,
    submitted_at: datetime,
    hints_used: int = 0,
) -> bool:
    """Write the attempt. Returns False when a correct answer was already on file."""
    values = {
        "participant": participant,
        "day": day,
        "answer_text": answer_text,
        "submitted_at": submitted_at,
        "puzzle_sent_at": sent_at,
        "response_time_ms": response_time_ms(sent_at, submitted_at),
        "is_correct": is_correct,
        "hints_used": hints_used,
    }
    stmt = insert_for(db, AnswerSubmission).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["participant", "day"],
        set_={
            key: getattr(stmt.excluded, key)
            for key in values
            if key not in ("participant", "day")
        },
        where=AnswerSubmission.is_correct.is_(False),
    ).returning(AnswerSubmission.id)
    result = await db.execute(stmt)
    recorded = result.scalar_one_or_none() is not None
    if not recorded:
        logger.info("Kept earlier correct answer for %s day %d", participant, day)
    return recorded


async def get_answer(db: AsyncSession, participant: str, day: int) -> AnswerSubmission | None:
    result = await db.execute(
        select(AnswerSubmission)
        .where(AnswerSubmission.participant == participant, AnswerSubmission.day == day)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_participant_stats(db: AsyncSession, participant: str) -> ParticipantStats:
    """Correct-answer count and mean response time over correct answers."""
    total = await db.execute(
        select(func.count()).select_from(AnswerSubmission).where(
            AnswerSubmission.participant == participant,
        )
    )
    correct = await db.execute(
        select(
            func.count(AnswerSubmission.id),
            func.avg(AnswerSubmission.response_time_ms),
        ).where(
            AnswerSubmission.participant == participant,
            AnswerSubmission.is_correct.is_(True),
        )
    )
    correct_count, avg_ms = correct.one()
    return ParticipantStats(
        correct_answers=int(correct_count or 0),
        total_answers=int(total.scalar_one()),
        avg_response_time_ms=float(avg_ms) if avg_ms is not None else None,
    )
