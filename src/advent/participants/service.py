"""Participant store.

State transitions are compare-and-set UPDATEs: the WHERE clause carries
the state the caller decided on, and a rowcount of 0 means another
writer got there first.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from advent.db.dialect import insert_for
from advent.db.models import Participant

logger = logging.getLogger(__name__)


async def get_participant(db: AsyncSession, address: str) -> Participant | None:
    result = await db.execute(select(Participant).where(Participant.address == address))
    return result.scalar_one_or_none()


async def get_or_create_participant(db: AsyncSession, address: str, now: datetime) -> Participant:
    """Fetch the participant, creating an unpaid day-1 row for unseen addresses."""
    stmt = insert_for(db, Participant).values(
        address=address,
        paid=False,
        current_day=1,
        pending_reward_choice=False,
        joined_at=now,
    )
    stmt = stmt.on_conflict_do_nothing(index_elements=["address"])
    result = await db.execute(stmt)
    if result.rowcount:
        logger.info("New participant %s", address)

    fetched = await db.execute(
        select(Participant)
        .where(Participant.address == address)
        .execution_options(populate_existing=True)
    )
    return fetched.scalar_one()


async def mark_paid(db: AsyncSession, address: str) -> bool:
    """Flip `paid` on. Returns False if the participant was already paid."""
    result = await db.execute(
        update(Participant)
        .where(Participant.address == address, Participant.paid.is_(False))
        .values(paid=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def advance_after_correct(db: AsyncSession, address: str, day: int) -> bool:
    """Move a participant from day d to d+1 with a pending reward choice.

    Only succeeds while the participant is still on `day` with no pending
    choice, so two concurrent correct answers advance the day once.
    """
    result = await db.execute(
        update(Participant)
        .where(
            Participant.address == address,
            Participant.paid.is_(True),
            Participant.current_day == day,
            Participant.pending_reward_choice.is_(False),
        )
        .values(current_day=day + 1, pending_reward_choice=True)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def claim_reward_choice(db: AsyncSession, address: str) -> bool:
    """Clear the pending reward flag. Exactly one caller wins per pending choice."""
    result = await db.execute(
        update(Participant)
        .where(
            Participant.address == address,
            Participant.pending_reward_choice.is_(True),
        )
        .values(pending_reward_choice=False)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def list_paid_participants(db: AsyncSession) -> list[Participant]:
    """Snapshot of every paid participant, in join order."""
    result = await db.execute(
        select(Participant)
        .where(Participant.paid.is_(True))
        .order_by(Participant.joined_at, Participant.address)
    )
    return list(result.scalars().all())
