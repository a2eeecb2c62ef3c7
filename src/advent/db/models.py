"""ORM models for the campaign schema.

Mirrors alembic/versions/001_campaign_tables.py. Uniqueness on
(participant, day) is what makes puzzle sends and answers idempotent.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from advent.db.base import Base


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------


class Participant(Base):
    """One row per messaging address."""

    __tablename__ = "participants"

    address: Mapped[str] = mapped_column(String(64), primary_key=True)
    paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    current_day: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    pending_reward_choice: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


# ---------------------------------------------------------------------------
# Puzzle catalog
# ---------------------------------------------------------------------------


class Puzzle(Base):
    """Maps to the 'puzzles' table. Day numbers are contiguous from 1."""

    __tablename__ = "puzzles"

    day: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(String(256), nullable=False)
    hint1: Mapped[str | None] = mapped_column(Text, nullable=True)
    hint2: Mapped[str | None] = mapped_column(Text, nullable=True)
    hint3: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(64), nullable=True)
    difficulty: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    @property
    def hints(self) -> list[str]:
        """Hints in reveal order, skipping empty slots."""
        return [h for h in (self.hint1, self.hint2, self.hint3) if h]


# ---------------------------------------------------------------------------
# Idempotency ledger
# ---------------------------------------------------------------------------


class PuzzleSend(Base):
    """Durable proof that a day's puzzle was delivered to a participant."""

    __tablename__ = "puzzle_sends"
    __table_args__ = (
        UniqueConstraint("participant", "day", name="uq_puzzle_sends_participant_day"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.address"), nullable=False,
    )
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class AnswerSubmission(Base):
    """The effective answer outcome for a (participant, day)."""

    __tablename__ = "answer_submissions"
    __table_args__ = (
        UniqueConstraint("participant", "day", name="uq_answer_submissions_participant_day"),
        Index("idx_answers_correct", "is_correct"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.address"), nullable=False,
    )
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    answer_text: Mapped[str] = mapped_column(Text, nullable=False)
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    puzzle_sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    response_time_ms: Mapped[int | None] = mapped_column(BigInteger, nullable=True)
    is_correct: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    hints_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


class HintUsage(Base):
    """Per-(participant, day) hint counter, capped by the puzzle's hint count."""

    __tablename__ = "hint_usage"

    participant: Mapped[str] = mapped_column(String(64), primary_key=True)
    day: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    hints_used: Mapped[int] = mapped_column(Integer, default=0, nullable=False)


# ---------------------------------------------------------------------------
# Transaction ledger
# ---------------------------------------------------------------------------


class RewardTransaction(Base):
    """Append-only audit row for a reward payout (transfer or swap)."""

    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_transactions_participant", "participant"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant: Mapped[str] = mapped_column(
        String(64), ForeignKey("participants.address"), nullable=False,
    )
    day: Mapped[int] = mapped_column(Integer, nullable=False)
    reward_path: Mapped[str] = mapped_column(String(16), nullable=False)
    asset: Mapped[str] = mapped_column(String(64), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(20, 6), nullable=False)
    external_ref: Mapped[str | None] = mapped_column(String(128), nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="pending", nullable=False)
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
