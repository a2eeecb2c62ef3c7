"""Daily broadcast sweep.

For every paid participant, send the current day's puzzle unless a send
record already exists. Uses the same first-send-wins claim as the
progression engine, so the sweep and a live conversation can race
safely. Each participant is handled in its own session; one failure
never stops the sweep.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass

from advent.catalog.service import get_puzzle
from advent.context import CampaignContext
from advent.engine import replies
from advent.ledger.sends import claim_puzzle_send, get_send_time
from advent.participants.service import list_paid_participants

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    checked: int = 0
    sent: int = 0
    already_sent: int = 0
    no_puzzle: int = 0
    failed: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


class BroadcastScheduler:
    """Runs one sweep over all paid participants."""

    def __init__(self, ctx: CampaignContext) -> None:
        self.ctx = ctx

    async def sweep(self) -> SweepReport:
        report = SweepReport()
        async with self.ctx.session() as db:
            participants = [(p.address, p.current_day) for p in await list_paid_participants(db)]

        logger.info("Daily sweep: checking %d paid participants", len(participants))
        for address, day in participants:
            report.checked += 1
            try:
                outcome = await self.send_if_due(address, day)
            except Exception:
                report.failed += 1
                logger.exception("Daily sweep failed for %s (day %d)", address, day)
                continue
            setattr(report, outcome, getattr(report, outcome) + 1)

        logger.info(
            "Daily sweep complete: checked=%d sent=%d already_sent=%d no_puzzle=%d failed=%d",
            report.checked, report.sent, report.already_sent, report.no_puzzle, report.failed,
        )
        return report

    async def send_if_due(self, address: str, day: int) -> str:
        """Claim and deliver one participant's puzzle. Returns the report field to bump."""
        async with self.ctx.session() as db:
            puzzle = await get_puzzle(db, day)
            if puzzle is None:
                return "no_puzzle"
            if await get_send_time(db, address, day) is not None:
                return "already_sent"
            if not await claim_puzzle_send(db, address, day, self.ctx.now()):
                return "already_sent"
            await db.commit()
            question = puzzle.question

        await self.ctx.transport.send_text(address, replies.puzzle_text(day, question))
        logger.debug("Sent day %d puzzle to %s", day, address)
        return "sent"
