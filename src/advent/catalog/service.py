"""Puzzle catalog: lookups by day and idempotent seeding."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from advent.db.dialect import insert_for
from advent.db.models import Puzzle

logger = logging.getLogger(__name__)

MAX_HINTS = 3


def normalize_answer(text: str) -> str:
    """Comparison form for answers: trimmed and case-folded."""
    return text.strip().casefold()


def is_correct_answer(puzzle: Puzzle, submitted: str) -> bool:
    """Exact match after normalization, no fuzzy matching."""
    return normalize_answer(submitted) == normalize_answer(puzzle.answer)


async def get_puzzle(db: AsyncSession, day: int) -> Puzzle | None:
    """Return the puzzle for a day, or None once the catalog is exhausted."""
    result = await db.execute(select(Puzzle).where(Puzzle.day == day))
    return result.scalar_one_or_none()


async def list_puzzles(db: AsyncSession) -> list[Puzzle]:
    result = await db.execute(select(Puzzle).order_by(Puzzle.day))
    return list(result.scalars().all())


async def count_puzzles(db: AsyncSession) -> int:
    result = await db.execute(select(func.count()).select_from(Puzzle))
    return int(result.scalar_one())


async def upsert_puzzle(
    db: AsyncSession,
    day: int,
    question: str,
    answer: str,
    hints: list[str],
    category: str | None = None,
    difficulty: int = 1,
) -> None:
    """Insert or replace the puzzle for a day."""
    if day < 1:
        msg = f"Puzzle day must be >= 1, got {day}"
        raise ValueError(msg)
    if len(hints) > MAX_HINTS:
        msg = f"At most {MAX_HINTS} hints per puzzle, got {len(hints)}"
        raise ValueError(msg)

    padded = list(hints) + [None] * (MAX_HINTS - len(hints))
    values: dict[str, Any] = {
        "day": day,
        "question": question,
        "answer": answer,
        "hint1": padded[0],
        "hint2": padded[1],
        "hint3": padded[2],
        "category": category,
        "difficulty": difficulty,
    }
    stmt = insert_for(db, Puzzle).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["day"],
        set_={key: getattr(stmt.excluded, key) for key in values if key != "day"},
    )
    await db.execute(stmt)


async def seed_catalog(db: AsyncSession, entries: list[dict[str, Any]]) -> int:
    """Upsert catalog entries and check days stay contiguous. Returns entries seeded."""
    for entry in entries:
        await upsert_puzzle(
            db,
            day=entry["day"],
            question=entry["question"],
            answer=entry["answer"],
            hints=entry.get("hints", []),
            category=entry.get("category"),
            difficulty=entry.get("difficulty", 1),
        )
    await db.commit()

    days = [p.day for p in await list_puzzles(db)]
    if days != list(range(1, len(days) + 1)):
        logger.warning("Puzzle catalog has gaps: days=%s", days)

    logger.info("Seeded %d puzzles", len(entries))
    return len(entries)
