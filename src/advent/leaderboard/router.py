"""Leaderboard and participant read API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from advent.dependencies import get_db
from advent.ledger.answers import get_participant_stats
from advent.ledger.transactions import list_transactions
from advent.leaderboard.schemas import (
    LeaderboardEntryResponse,
    LeaderboardResponse,
    ParticipantStatsResponse,
    TransactionResponse,
)
from advent.leaderboard.service import get_leaderboard, get_participant_rank
from advent.participants.service import get_participant

router = APIRouter(prefix="/api/v1", tags=["Leaderboard"])


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> LeaderboardResponse:
    entries = await get_leaderboard(db)
    return LeaderboardResponse(
        entries=[
            LeaderboardEntryResponse(
                rank=e.rank,
                address=e.address,
                correct_answers=e.correct_answers,
                avg_response_time_ms=e.avg_response_time_ms,
            )
            for e in entries[:limit]
        ],
        total=len(entries),
    )


@router.get("/participants/{address}/stats", response_model=ParticipantStatsResponse)
async def participant_stats(
    address: str,
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> ParticipantStatsResponse:
    participant = await get_participant(db, address)
    if participant is None:
        raise HTTPException(status_code=404, detail="Participant not found")

    stats = await get_participant_stats(db, address)
    return ParticipantStatsResponse(
        address=participant.address,
        paid=participant.paid,
        current_day=participant.current_day,
        pending_reward_choice=participant.pending_reward_choice,
        correct_answers=stats.correct_answers,
        total_answers=stats.total_answers,
        avg_response_time_ms=stats.avg_response_time_ms,
        rank=await get_participant_rank(db, address),
    )


@router.get("/participants/{address}/transactions", response_model=list[TransactionResponse])
async def participant_transactions(
    address: str,
    db: AsyncSession = Depends(get_db),  # noqa: B008
) -> list[TransactionResponse]:
    if await get_participant(db, address) is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return [
        TransactionResponse(
            id=tx.id,
            day=tx.day,
            reward_path=tx.reward_path,
            asset=tx.asset,
            amount=tx.amount,
            external_ref=tx.external_ref,
            status=tx.status,
            error=tx.error,
            created_at=tx.created_at,
            completed_at=tx.completed_at,
        )
        for tx in await list_transactions(db, address)
    ]
