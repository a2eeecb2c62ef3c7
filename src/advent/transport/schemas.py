"""Pydantic schemas for the inbound relay webhooks."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class InboundTextEvent(BaseModel):
    sender: str = Field(min_length=1, max_length=64)
    content: Any = None
    is_dm: bool = True


class InboundPaymentReferenceEvent(BaseModel):
    sender: str = Field(min_length=1, max_length=64)
    content: dict[str, Any]


class InboundAck(BaseModel):
    status: str
    messages: int
    effects: list[str]
