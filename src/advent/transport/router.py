"""Inbound relay webhooks: text and payment-reference events."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from advent.agent import CampaignAgent
from advent.dependencies import get_agent, require_inbound_token
from advent.engine.progression import Reply
from advent.transport.schemas import InboundAck, InboundPaymentReferenceEvent, InboundTextEvent

router = APIRouter(
    prefix="/api/v1/inbound",
    tags=["Inbound"],
    dependencies=[Depends(require_inbound_token)],
)


def _ack(reply: Reply, status: str = "processed") -> InboundAck:
    return InboundAck(status=status, messages=len(reply.messages), effects=reply.effects)


@router.post("/text", response_model=InboundAck)
async def inbound_text(
    event: InboundTextEvent,
    agent: CampaignAgent = Depends(get_agent),  # noqa: B008
) -> InboundAck:
    """A direct message arrived. Group conversations are acknowledged and ignored."""
    if not event.is_dm:
        return _ack(Reply(), status="ignored")
    reply = await agent.on_text(event.sender, event.content)
    return _ack(reply)


@router.post("/payment-reference", response_model=InboundAck)
async def inbound_payment_reference(
    event: InboundPaymentReferenceEvent,
    agent: CampaignAgent = Depends(get_agent),  # noqa: B008
) -> InboundAck:
    """A structured transaction reference arrived (payment confirmation)."""
    reply = await agent.on_payment_reference(event.sender, event.content)
    return _ack(reply)
