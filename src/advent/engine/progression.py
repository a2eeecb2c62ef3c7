"""Progression engine: the per-participant campaign state machine.

States, derived from the participant row and the send ledger:

    UNPAID                  paid=False
    AWAITING_PUZZLE(d)      paid, no pending choice, no send record for d
    PUZZLE_OUTSTANDING(d)   paid, no pending choice, send record for d exists
    AWAITING_REWARD_CHOICE  paid, pending_reward_choice=True

`handle()` reads a snapshot, classifies the inbound payload, and applies
at most one transition. Every transition is a uniqueness-gated insert or
a compare-and-set update, so a duplicate delivery or a concurrent sweep
produces no second send, no second day advance and no second payout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from advent.catalog.service import get_puzzle, is_correct_answer
from advent.context import CampaignContext
from advent.db.models import Puzzle
from advent.engine import replies
from advent.engine.messages import (
    Command,
    FreeText,
    InboundMessage,
    PaymentReference,
    PuzzleAnswer,
    RewardChoice,
    classify,
)
from advent.ledger.answers import get_participant_stats, record_answer, response_time_ms
from advent.ledger.hints import consume_hint, get_hints_used
from advent.ledger.sends import claim_puzzle_send, get_send_time
from advent.ledger.transactions import TransactionStatus
from advent.leaderboard.service import get_leaderboard, get_participant_rank
from advent.participants.service import (
    advance_after_correct,
    claim_reward_choice,
    get_or_create_participant,
    mark_paid,
)
from advent.rewards.dispatcher import RewardDispatcher, RewardOutcome, RewardPath
from advent.rewards.payments import PaymentGatewayError
from advent.transport.base import Outbound, OutboundText, build_usdc_payment_request

logger = logging.getLogger(__name__)

ONRAMP_KEYWORDS = ("buy", "fund", "purchase")

# Side-effect tags reported on every Reply
PAID = "paid"
PUZZLE_SENT = "puzzle_sent"
ANSWER_RECORDED = "answer_recorded"
DAY_ADVANCED = "day_advanced"
HINT_USED = "hint_used"
REWARD_DISPATCHED = "reward_dispatched"


@dataclass
class Reply:
    """Outbound messages for the sender plus the side effects that were applied."""

    messages: list[Outbound] = field(default_factory=list)
    effects: list[str] = field(default_factory=list)
    outcome: RewardOutcome | None = None

    def say(self, text: str) -> Reply:
        self.messages.append(OutboundText(text))
        return self

    @property
    def texts(self) -> list[str]:
        return [m.text for m in self.messages if isinstance(m, OutboundText)]


@dataclass(frozen=True)
class Snapshot:
    address: str
    paid: bool
    current_day: int
    pending_reward_choice: bool
    sent_at: datetime | None

    @property
    def state(self) -> str:
        if not self.paid:
            return "UNPAID"
        if self.pending_reward_choice:
            return "AWAITING_REWARD_CHOICE"
        if self.sent_at is None:
            return "AWAITING_PUZZLE"
        return "PUZZLE_OUTSTANDING"


class ProgressionEngine:
    """Decides, for one inbound payload, which side effect fires."""

    def __init__(self, ctx: CampaignContext, dispatcher: RewardDispatcher | None = None) -> None:
        self.ctx = ctx
        self.dispatcher = dispatcher or RewardDispatcher(ctx)

    async def snapshot(self, address: str) -> Snapshot:
        async with self.ctx.session() as db:
            participant = await get_or_create_participant(db, address, self.ctx.now())
            sent_at = None
            if participant.paid and not participant.pending_reward_choice:
                sent_at = await get_send_time(db, address, participant.current_day)
            await db.commit()
            return Snapshot(
                address=address,
                paid=participant.paid,
                current_day=participant.current_day,
                pending_reward_choice=participant.pending_reward_choice,
                sent_at=sent_at,
            )

    async def handle(self, address: str, content: object) -> Reply:
        snap = await self.snapshot(address)
        message = classify(
            content,
            awaiting_reward_choice=snap.state == "AWAITING_REWARD_CHOICE",
            puzzle_outstanding=snap.state == "PUZZLE_OUTSTANDING",
        )
        if message is None:
            return Reply()

        logger.debug("Inbound %s from %s in %s", type(message).__name__, address, snap.state)
        return await self._dispatch(snap, message)

    async def _dispatch(self, snap: Snapshot, message: InboundMessage) -> Reply:
        if isinstance(message, PaymentReference):
            return await self._confirm_payment(snap, message)
        if isinstance(message, Command):
            return await self._command(snap, message)
        if not snap.paid:
            return await self._request_payment(snap, message)
        if isinstance(message, RewardChoice):
            return await self._reward_choice(snap, message)
        return await self._progress(snap, message)

    # ── UNPAID ──

    async def _confirm_payment(self, snap: Snapshot, ref: PaymentReference) -> Reply:
        async with self.ctx.session() as db:
            first = await mark_paid(db, snap.address)
            await db.commit()

        if not first:
            return Reply().say(replies.already_paid())

        logger.info("Participant %s paid (network=%s ref=%s)", snap.address, ref.network_id, ref.reference)
        reply = Reply(effects=[PAID])
        return reply.say(replies.payment_confirmed(ref.network_id, ref.reference, structured=ref.structured))

    async def _request_payment(self, snap: Snapshot, message: InboundMessage) -> Reply:
        settings = self.ctx.settings
        text = getattr(message, "text", "").casefold()

        if settings.onramp_enabled and any(word in text for word in ONRAMP_KEYWORDS):
            try:
                url = await self.ctx.payments.onramp_buy_url(
                    snap.address, "USDC", settings.network_id, settings.onramp_preset_amount,
                )
            except PaymentGatewayError:
                logger.exception("Onramp link failed for %s", snap.address)
                return Reply().say(replies.onramp_unavailable())
            return Reply().say(replies.onramp_link(url, settings.onramp_preset_amount))

        reply = Reply().say(replies.payment_welcome(settings.entry_fee_usdc))
        reply.messages.append(
            build_usdc_payment_request(
                payer=snap.address,
                receiver=settings.agent_address,
                amount=settings.entry_fee_usdc,
                usdc_contract=settings.usdc_contract_address,
                decimals=settings.usdc_decimals,
                chain_id=settings.chain_id,
            )
        )
        return reply.say(replies.payment_followup())

    # ── Commands ──

    async def _command(self, snap: Snapshot, command: Command) -> Reply:
        if command.name == "/help":
            return Reply().say(replies.help_text())
        if command.name == "/leaderboard":
            async with self.ctx.session() as db:
                entries = await get_leaderboard(db, self.ctx.settings.leaderboard_size)
            return Reply().say(replies.leaderboard_text(entries))
        if command.name == "/stats":
            async with self.ctx.session() as db:
                stats = await get_participant_stats(db, snap.address)
                rank = await get_participant_rank(db, snap.address)
            return Reply().say(
                replies.stats_text(stats.correct_answers, stats.avg_response_time_ms, snap.current_day, rank)
            )
        return await self._hint(snap)

    async def _hint(self, snap: Snapshot) -> Reply:
        if snap.state != "PUZZLE_OUTSTANDING":
            return Reply().say(replies.no_puzzle_for_hint())

        async with self.ctx.session() as db:
            puzzle = await get_puzzle(db, snap.current_day)
            if puzzle is None:
                return Reply().say(replies.no_puzzle_for_hint())
            hints = puzzle.hints
            used = await consume_hint(db, snap.address, snap.current_day, cap=len(hints))
            await db.commit()

        if used is None:
            return Reply().say(replies.hints_exhausted())
        reply = Reply(effects=[HINT_USED])
        return reply.say(replies.hint_text(hints[used - 1], used, len(hints)))

    # ── AWAITING_REWARD_CHOICE ──

    async def _reward_choice(self, snap: Snapshot, choice: RewardChoice) -> Reply:
        if choice.path is None:
            return Reply().say(replies.reward_choice_reprompt())

        async with self.ctx.session() as db:
            claimed = await claim_reward_choice(db, snap.address)
            await db.commit()
        if not claimed:
            logger.info("Duplicate reward choice from %s ignored", snap.address)
            return Reply()

        # Collaborator calls run after the claim commits; no row stays locked.
        completed_day = snap.current_day - 1
        outcome = await self.dispatcher.dispatch(snap.address, completed_day, RewardPath(choice.path))

        reply = Reply(effects=[REWARD_DISPATCHED], outcome=outcome)
        if outcome.succeeded and outcome.path is RewardPath.SAFE:
            reply.say(replies.safe_reward_sent(outcome.amount))
        elif outcome.succeeded and outcome.token is not None:
            reply.say(replies.risky_reward_sent(outcome.token.symbol, outcome.multiplier))
        else:
            reply.say(replies.reward_failed(retryable=outcome.status is TransactionStatus.RETRYABLE))
        return reply.say(replies.next_puzzle_tomorrow())

    # ── AWAITING_PUZZLE / PUZZLE_OUTSTANDING ──

    async def _progress(self, snap: Snapshot, message: PuzzleAnswer | FreeText) -> Reply:
        day = snap.current_day
        async with self.ctx.session() as db:
            puzzle = await get_puzzle(db, day)
            if puzzle is None:
                return Reply().say(replies.campaign_complete())

            if isinstance(message, FreeText):
                claimed = await claim_puzzle_send(db, snap.address, day, self.ctx.now())
                await db.commit()
                if not claimed:
                    # The sweep (or a duplicate delivery) already sent it
                    return Reply()
                return Reply(effects=[PUZZLE_SENT]).say(replies.puzzle_text(day, puzzle.question))

            return await self._answer(db, snap, puzzle, message.text)

    async def _answer(self, db: AsyncSession, snap: Snapshot, puzzle: Puzzle, text: str) -> Reply:
        day = snap.current_day
        now = self.ctx.now()
        hints_used = await get_hints_used(db, snap.address, day)
        correct = is_correct_answer(puzzle, text)

        await record_answer(
            db,
            participant=snap.address,
            day=day,
            answer_text=text.strip(),
            is_correct=correct,
            sent_at=snap.sent_at,
            submitted_at=now,
            hints_used=hints_used,
        )

        if not correct:
            await db.commit()
            return Reply(effects=[ANSWER_RECORDED]).say(replies.wrong_answer(day, puzzle.question))

        if not await advance_after_correct(db, snap.address, day):
            await db.rollback()
            logger.info("Duplicate correct answer from %s for day %d ignored", snap.address, day)
            return Reply()
        await db.commit()

        logger.info("Participant %s solved day %d", snap.address, day)
        reply = Reply(effects=[ANSWER_RECORDED, DAY_ADVANCED])
        reply.say(replies.correct_answer(day, response_time_ms(snap.sent_at, now)))
        return reply.say(replies.reward_choice_prompt())
