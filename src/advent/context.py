"""Campaign service context.

One explicitly constructed bundle of collaborators, owned by whoever
runs the process (the FastAPI lifespan or the arq worker) and handed to
every handler. Tests build it with fakes.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from advent.clock import Clock, SystemClock
from advent.config import Settings
from advent.rewards.market_data import CoinGeckoMarketData, TokenInfo
from advent.rewards.payments import CustodialPaymentsClient, PaymentGateway
from advent.transport.base import Transport
from advent.transport.relay import RelayTransport


class MarketData(Protocol):
    async def list_candidate_tokens(self, limit: int) -> list[TokenInfo]: ...

    async def aclose(self) -> None: ...


@dataclass
class CampaignContext:
    settings: Settings
    session_factory: async_sessionmaker[AsyncSession]
    transport: Transport
    payments: PaymentGateway
    market_data: MarketData
    clock: Clock = field(default_factory=SystemClock)
    rng: random.Random = field(default_factory=random.Random)

    def session(self) -> AsyncSession:
        return self.session_factory()

    def now(self) -> datetime:
        return self.clock.now()


def build_context(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
    *,
    transport: Transport | None = None,
    payments: PaymentGateway | None = None,
    market_data: MarketData | None = None,
    clock: Clock | None = None,
    rng: random.Random | None = None,
) -> CampaignContext:
    """Wire real collaborators from settings, keeping any overrides passed in."""
    return CampaignContext(
        settings=settings,
        session_factory=session_factory,
        transport=transport or RelayTransport(settings.relay_url, settings.relay_token),
        payments=payments or CustodialPaymentsClient(
            settings.payments_api_url,
            settings.payments_api_key,
            timeout=settings.payments_timeout_seconds,
        ),
        market_data=market_data or CoinGeckoMarketData(
            settings.market_data_url,
            timeout=settings.market_data_timeout_seconds,
        ),
        clock=clock or SystemClock(),
        rng=rng or random.Random(),
    )


async def close_context(ctx: CampaignContext) -> None:
    await ctx.transport.aclose()
    await ctx.payments.aclose()
    await ctx.market_data.aclose()
