"""Puzzle-send records: first writer for a (participant, day) wins."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from advent.clock import ensure_utc
from advent.db.dialect import insert_for
from advent.db.models import PuzzleSend

logger = logging.getLogger(__name__)


async def get_send_time(db: AsyncSession, participant: str, day: int) -> datetime | None:
    """When the day's puzzle was delivered, or None if it has not been."""
    result = await db.execute(
        select(PuzzleSend.sent_at).where(
            PuzzleSend.participant == participant,
            PuzzleSend.day == day,
        )
    )
    sent_at = result.scalar_one_or_none()
    return ensure_utc(sent_at) if sent_at is not None else None


async def claim_puzzle_send(db: AsyncSession, participant: str, day: int, now: datetime) -> bool:
    """Create the send record. Returns False if one already exists.

    Callers deliver the puzzle only when this returns True; the loser of a
    race between the sweep and a live conversation sends nothing.
    """
    stmt = insert_for(db, PuzzleSend).values(participant=participant, day=day, sent_at=now)
    stmt = stmt.on_conflict_do_nothing(index_elements=["participant", "day"]).returning(PuzzleSend.id)
    result = await db.execute(stmt)
    claimed = result.scalar_one_or_none() is not None
    if not claimed:
        logger.debug("Send record for %s day %d already exists", participant, day)
    return claimed


async def count_sends(db: AsyncSession, participant: str | None = None) -> int:
    stmt = select(func.count()).select_from(PuzzleSend)
    if participant is not None:
        stmt = stmt.where(PuzzleSend.participant == participant)
    result = await db.execute(stmt)
    return int(result.scalar_one())
