"""Transaction ledger for reward payouts.

Rows are opened as `pending` before the collaborator is called and
settled exactly once afterwards. Nothing else about a row changes.
"""

from __future__ import annotations

import enum
import logging
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from advent.db.models import RewardTransaction

logger = logging.getLogger(__name__)


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    RETRYABLE = "retryable"


async def open_transaction(
    db: AsyncSession,
    participant: str,
    day: int,
    reward_path: str,
    asset: str,
    amount: Decimal,
    now: datetime,
) -> RewardTransaction:
    tx = RewardTransaction(
        participant=participant,
        day=day,
        reward_path=reward_path,
        asset=asset,
        amount=amount,
        status=TransactionStatus.PENDING.value,
        created_at=now,
    )
    db.add(tx)
    await db.flush()
    return tx


async def settle_transaction(
    db: AsyncSession,
    transaction_id: int,
    status: TransactionStatus,
    now: datetime,
    external_ref: str | None = None,
    error: str | None = None,
) -> bool:
    """Attach the outcome to a pending row. Returns False if it was already settled."""
    if status is TransactionStatus.PENDING:
        msg = "Cannot settle a transaction back to pending"
        raise ValueError(msg)

    result = await db.execute(
        update(RewardTransaction)
        .where(
            RewardTransaction.id == transaction_id,
            RewardTransaction.status == TransactionStatus.PENDING.value,
        )
        .values(
            status=status.value,
            external_ref=external_ref,
            error=error,
            completed_at=now,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning("Transaction %d was already settled", transaction_id)
        return False
    return True


async def list_transactions(db: AsyncSession, participant: str) -> list[RewardTransaction]:
    result = await db.execute(
        select(RewardTransaction)
        .where(RewardTransaction.participant == participant)
        .order_by(RewardTransaction.created_at.desc(), RewardTransaction.id.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
