"""Shared test fixtures.

Tests run against a throwaway SQLite file (or ADVENT_TEST_DATABASE_URL)
with every external collaborator replaced by an in-memory fake.
"""

from __future__ import annotations

import os
import random
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from advent.agent import CampaignAgent
from advent.catalog.seed import seed_puzzles
from advent.config import Settings
from advent.context import CampaignContext, build_context
from advent.database import close_db, get_engine, get_session_factory, init_db
from advent.db import models  # noqa: F401
from advent.db.base import Base
from advent.db.models import Participant
from advent.engine.progression import ProgressionEngine
from advent.rewards.market_data import TokenInfo
from advent.rewards.payments import PaymentGateway, PaymentGatewayError, SwapResult
from advent.transport.base import PaymentRequest, Transport

ADDR = "0x1111111111111111111111111111111111111111"
OTHER = "0x2222222222222222222222222222222222222222"
AGENT = "0x" + "ab" * 20
USDC = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"
DEGEN = TokenInfo(symbol="DEGEN", address="0x4ed4E862860beD51a9570b96d89aF5E1B0Efefed", name="Degen")
START = datetime(2026, 12, 1, 6, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FrozenClock:
    def __init__(self, now: datetime = START) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


class FakeTransport(Transport):
    """Records deliveries; raises for addresses listed in `fail_for`."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, object]] = []
        self.fail_for: set[str] = set()

    async def send_text(self, address: str, text: str) -> None:
        if address in self.fail_for:
            raise ConnectionError(f"relay unavailable for {address}")
        self.sent.append((address, text))

    async def send_payment_request(self, address: str, request: PaymentRequest) -> None:
        if address in self.fail_for:
            raise ConnectionError(f"relay unavailable for {address}")
        self.sent.append((address, request))

    def texts_to(self, address: str) -> list[str]:
        return [m for a, m in self.sent if a == address and isinstance(m, str)]


class FakePayments(PaymentGateway):
    def __init__(self) -> None:
        self.transfers: list[tuple[str, str, Decimal]] = []
        self.swaps: list[tuple[str, str, Decimal, int]] = []
        self.balances: dict[tuple[str, str], Decimal] = {}
        self.transfer_error: Exception | None = None
        self.swap_error: Exception | None = None
        self.balance_error: PaymentGatewayError | None = None
        self.onramp_error: PaymentGatewayError | None = None

    async def transfer(self, asset: str, to: str, amount: Decimal) -> str:
        if self.transfer_error:
            raise self.transfer_error
        self.transfers.append((asset, to, amount))
        return f"transfer-{len(self.transfers)}"

    async def swap(self, from_asset: str, to_asset: str, amount: Decimal, slippage_bps: int) -> SwapResult:
        if self.swap_error:
            raise self.swap_error
        self.swaps.append((from_asset, to_asset, amount, slippage_bps))
        return SwapResult(reference=f"0xswap{len(self.swaps)}")

    async def read_balance(self, asset: str, address: str) -> Decimal:
        if self.balance_error:
            raise self.balance_error
        return self.balances.get((asset, address), Decimal("0"))

    async def onramp_buy_url(self, address: str, asset: str, network_id: str, preset_amount: Decimal) -> str:
        if self.onramp_error:
            raise self.onramp_error
        return f"https://pay.example/buy?address={address}&amount={preset_amount}"


class FakeMarketData:
    def __init__(self, tokens: list[TokenInfo] | None = None) -> None:
        self.tokens = [DEGEN] if tokens is None else tokens

    async def list_candidate_tokens(self, limit: int) -> list[TokenInfo]:
        return list(self.tokens[:limit])

    async def aclose(self) -> None:
        pass


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def database(tmp_path) -> AsyncGenerator[str, None]:
    """Fresh schema per test; yields the database URL."""
    url = os.environ.get("ADVENT_TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'advent.db'}"
    await init_db(url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield url
    await close_db()


@pytest_asyncio.fixture
async def db_session(database: str) -> AsyncGenerator[AsyncSession, None]:
    """Get a direct database session for test assertions."""
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(database: str) -> None:
    async with get_session_factory()() as session:
        await seed_puzzles(session)


# ---------------------------------------------------------------------------
# Campaign context
# ---------------------------------------------------------------------------


@pytest.fixture
def settings(database: str) -> Settings:
    return Settings(
        _env_file=None,
        database_url=database,
        agent_address=AGENT,
        usdc_contract_address=USDC,
        inbound_token="",
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def payments() -> FakePayments:
    return FakePayments()


@pytest.fixture
def market_data() -> FakeMarketData:
    return FakeMarketData()


@pytest.fixture
def ctx(
    settings: Settings,
    seeded: None,
    transport: FakeTransport,
    payments: FakePayments,
    market_data: FakeMarketData,
    clock: FrozenClock,
) -> CampaignContext:
    return build_context(
        settings,
        get_session_factory(),
        transport=transport,
        payments=payments,
        market_data=market_data,
        clock=clock,
        rng=random.Random(7),
    )


@pytest.fixture
def engine(ctx: CampaignContext) -> ProgressionEngine:
    return ProgressionEngine(ctx)


@pytest_asyncio.fixture
async def client(ctx: CampaignContext) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client over the app, with the test context installed in place of the lifespan's."""
    from advent.main import create_app

    app = create_app()
    app.state.campaign = ctx
    app.state.agent = CampaignAgent(ctx)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def make_participant(
    ctx: CampaignContext,
    address: str = ADDR,
    *,
    paid: bool = True,
    current_day: int = 1,
    pending_reward_choice: bool = False,
) -> None:
    """Insert a participant row directly in the given state."""
    async with ctx.session() as db:
        db.add(
            Participant(
                address=address,
                paid=paid,
                current_day=current_day,
                pending_reward_choice=pending_reward_choice,
                joined_at=ctx.now(),
            )
        )
        await db.commit()
