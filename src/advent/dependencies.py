"""Shared FastAPI dependencies."""

from __future__ import annotations

import hmac

from fastapi import Header, HTTPException, Request

from advent.agent import CampaignAgent
from advent.config import get_settings
from advent.database import get_session as _get_session

get_db = _get_session


def get_agent(request: Request) -> CampaignAgent:
    """The agent built by the app lifespan."""
    return request.app.state.agent


async def require_inbound_token(authorization: str | None = Header(default=None)) -> None:
    """Relay webhooks must carry `Authorization: Bearer <inbound_token>` when one is configured."""
    expected = get_settings().inbound_token
    if not expected:
        return
    token = (authorization or "").removeprefix("Bearer ").strip()
    if not hmac.compare_digest(token, expected):
        raise HTTPException(status_code=401, detail="Invalid inbound token")
