"""Pydantic schemas for leaderboard and participant read APIs."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel


class LeaderboardEntryResponse(BaseModel):
    rank: int
    address: str
    correct_answers: int
    avg_response_time_ms: float | None


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntryResponse]
    total: int


class ParticipantStatsResponse(BaseModel):
    address: str
    paid: bool
    current_day: int
    pending_reward_choice: bool
    correct_answers: int
    total_answers: int
    avg_response_time_ms: float | None
    rank: int


class TransactionResponse(BaseModel):
    id: int
    day: int
    reward_path: str
    asset: str
    amount: Decimal
    external_ref: str | None
    status: str
    error: str | None
    created_at: datetime
    completed_at: datetime | None
