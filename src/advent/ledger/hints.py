"""Hint ledger: monotonically increasing, capped per (participant, day)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from advent.db.dialect import insert_for
from advent.db.models import HintUsage


async def get_hints_used(db: AsyncSession, participant: str, day: int) -> int:
    result = await db.execute(
        select(HintUsage.hints_used).where(
            HintUsage.participant == participant,
            HintUsage.day == day,
        )
    )
    return result.scalar_one_or_none() or 0


async def consume_hint(db: AsyncSession, participant: str, day: int, cap: int) -> int | None:
    """Increment the counter if below `cap`.

    Returns the new count (1-based index of the hint to reveal), or None
    when every hint for the day is already spent.
    """
    if cap <= 0:
        return None

    stmt = insert_for(db, HintUsage).values(participant=participant, day=day, hints_used=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=["participant", "day"],
        set_={"hints_used": HintUsage.hints_used + 1},
        where=HintUsage.hints_used < cap,
    ).returning(HintUsage.hints_used)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()
