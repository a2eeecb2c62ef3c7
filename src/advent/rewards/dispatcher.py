"""Reward dispatcher: pays out the safe or risky reward for a completed day.

Both paths write a transaction row before calling the collaborator and
settle it afterwards, so every payout attempt leaves an audit trail.
Collaborator failures stop here: they become a failed/retryable row and
an outcome the engine reports to the participant.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from decimal import Decimal

from advent.context import CampaignContext
from advent.ledger.transactions import TransactionStatus, open_transaction, settle_transaction
from advent.rewards.market_data import MarketDataError, TokenInfo, pick_random_token
from advent.rewards.payments import PaymentGatewayError

logger = logging.getLogger(__name__)

USDC = "USDC"


def _unexpected(exc: Exception) -> PaymentGatewayError:
    """Terminal failure for anything the payments collaborator raised outside its contract."""
    return PaymentGatewayError(f"{type(exc).__name__}: {exc}", retryable=False)


class RewardPath(str, enum.Enum):
    SAFE = "safe"
    RISKY = "risky"


@dataclass(frozen=True)
class RewardOutcome:
    path: RewardPath
    status: TransactionStatus
    amount: Decimal
    asset: str
    transaction_id: int | None = None
    external_ref: str | None = None
    token: TokenInfo | None = None
    multiplier: int = 1
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is TransactionStatus.COMPLETED


class RewardDispatcher:
    """Executes one reward choice against the payment collaborator."""

    def __init__(self, ctx: CampaignContext) -> None:
        self.ctx = ctx

    async def dispatch(self, address: str, day: int, path: RewardPath) -> RewardOutcome:
        if path is RewardPath.SAFE:
            return await self.pay_safe(address, day)
        return await self.pay_risky(address, day)

    async def pay_safe(self, address: str, day: int) -> RewardOutcome:
        """Fixed USDC transfer to the participant."""
        settings = self.ctx.settings
        amount = settings.safe_reward_usdc
        tx_id = await self._open(address, day, RewardPath.SAFE, USDC, amount)

        try:
            transfer_id = await self.ctx.payments.transfer(settings.usdc_contract_address, address, amount)
        except PaymentGatewayError as exc:
            return await self._fail(tx_id, RewardPath.SAFE, USDC, amount, exc)
        except Exception as exc:
            logger.exception("Unexpected error paying safe reward to %s (transaction %d)", address, tx_id)
            return await self._fail(tx_id, RewardPath.SAFE, USDC, amount, _unexpected(exc))

        await self._settle(tx_id, TransactionStatus.COMPLETED, external_ref=transfer_id)
        logger.info("Safe reward sent: %s day %d amount %s ref %s", address, day, amount, transfer_id)
        return RewardOutcome(
            path=RewardPath.SAFE,
            status=TransactionStatus.COMPLETED,
            amount=amount,
            asset=USDC,
            transaction_id=tx_id,
            external_ref=transfer_id,
        )

    async def pay_risky(self, address: str, day: int) -> RewardOutcome:
        """Swap the reward into a random top token, doubled for existing holders."""
        settings = self.ctx.settings
        tokens = await self.ctx.market_data.list_candidate_tokens(settings.candidate_token_limit)
        try:
            token = pick_random_token(tokens, self.ctx.rng)
        except MarketDataError as exc:
            amount = settings.risky_reward_usdc
            tx_id = await self._open(address, day, RewardPath.RISKY, USDC, amount)
            return await self._fail(
                tx_id, RewardPath.RISKY, USDC, amount,
                PaymentGatewayError(str(exc), retryable=True),
            )

        multiplier = await self._bonus_multiplier(token, address)
        amount = settings.risky_reward_usdc * multiplier
        tx_id = await self._open(address, day, RewardPath.RISKY, token.symbol, amount)

        try:
            result = await self.ctx.payments.swap(
                settings.usdc_contract_address,
                token.address,
                amount,
                settings.swap_slippage_bps,
            )
        except PaymentGatewayError as exc:
            return await self._fail(tx_id, RewardPath.RISKY, token.symbol, amount, exc, token, multiplier)
        except Exception as exc:
            logger.exception("Unexpected error swapping reward for %s (transaction %d)", address, tx_id)
            return await self._fail(
                tx_id, RewardPath.RISKY, token.symbol, amount, _unexpected(exc), token, multiplier,
            )

        await self._settle(tx_id, TransactionStatus.COMPLETED, external_ref=result.reference)
        logger.info(
            "Risky reward swapped: %s day %d %s x%d ref %s",
            address, day, token.symbol, multiplier, result.reference,
        )
        return RewardOutcome(
            path=RewardPath.RISKY,
            status=TransactionStatus.COMPLETED,
            amount=amount,
            asset=token.symbol,
            transaction_id=tx_id,
            external_ref=result.reference,
            token=token,
            multiplier=multiplier,
        )

    async def _bonus_multiplier(self, token: TokenInfo, address: str) -> int:
        """Holders of the chosen token get the bonus; a failed balance read means no bonus."""
        try:
            balance = await self.ctx.payments.read_balance(token.address, address)
        except PaymentGatewayError as exc:
            logger.warning("Balance check failed for %s on %s: %s", address, token.symbol, exc)
            return 1
        return self.ctx.settings.risky_bonus_multiplier if balance > 0 else 1

    async def _open(self, address: str, day: int, path: RewardPath, asset: str, amount: Decimal) -> int:
        async with self.ctx.session() as db:
            tx = await open_transaction(db, address, day, path.value, asset, amount, self.ctx.now())
            await db.commit()
            return tx.id

    async def _settle(
        self,
        tx_id: int,
        status: TransactionStatus,
        external_ref: str | None = None,
        error: str | None = None,
    ) -> None:
        async with self.ctx.session() as db:
            await settle_transaction(db, tx_id, status, self.ctx.now(), external_ref=external_ref, error=error)
            await db.commit()

    async def _fail(
        self,
        tx_id: int,
        path: RewardPath,
        asset: str,
        amount: Decimal,
        exc: PaymentGatewayError,
        token: TokenInfo | None = None,
        multiplier: int = 1,
    ) -> RewardOutcome:
        status = TransactionStatus.RETRYABLE if exc.retryable else TransactionStatus.FAILED
        await self._settle(tx_id, status, error=str(exc))
        logger.error("Reward %s for transaction %d failed (%s): %s", path.value, tx_id, status.value, exc)
        return RewardOutcome(
            path=path,
            status=status,
            amount=amount,
            asset=asset,
            transaction_id=tx_id,
            token=token,
            multiplier=multiplier,
            error=str(exc),
        )
