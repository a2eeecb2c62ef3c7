"""Campaign agent: routes transport events through the progression engine.

The transport hands us three kinds of events (text received, payment
reference received, agent started). Each inbound event is run through
the engine and the resulting outbound messages are delivered to the
sender in order.
"""

from __future__ import annotations

import structlog

from advent.context import CampaignContext
from advent.engine.progression import ProgressionEngine, Reply

logger = structlog.get_logger()


class CampaignAgent:
    def __init__(self, ctx: CampaignContext, engine: ProgressionEngine | None = None) -> None:
        self.ctx = ctx
        self.engine = engine or ProgressionEngine(ctx)

    async def on_text(self, sender: str, content: object) -> Reply:
        logger.info("inbound_text", sender=sender, content_type=type(content).__name__)
        reply = await self.engine.handle(sender, content)
        await self.deliver(sender, reply)
        return reply

    async def on_payment_reference(self, sender: str, payload: object) -> Reply:
        logger.info("inbound_payment_reference", sender=sender)
        if not isinstance(payload, dict):
            logger.warning("payment_reference_ignored", sender=sender, reason="not an object")
            return Reply()
        reply = await self.engine.handle(sender, payload)
        await self.deliver(sender, reply)
        return reply

    async def on_started(self) -> None:
        logger.info(
            "agent_started",
            network=self.ctx.settings.network_id,
            agent_address=self.ctx.settings.agent_address,
        )

    async def deliver(self, sender: str, reply: Reply) -> int:
        """Send every outbound message; stop at the first transport failure. Returns count sent."""
        sent = 0
        for message in reply.messages:
            try:
                await self.ctx.transport.deliver(sender, message)
            except Exception:
                logger.exception("outbound_delivery_failed", to=sender, message_type=type(message).__name__)
                break
            sent += 1
        return sent
