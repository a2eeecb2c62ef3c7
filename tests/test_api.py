"""HTTP surface tests: relay webhooks, leaderboard and health endpoints."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from advent.config import get_settings
from advent.context import CampaignContext
from advent.transport.base import PaymentRequest
from tests.conftest import ADDR, FakeTransport, make_participant


@pytest.fixture
def inbound_token(monkeypatch):
    monkeypatch.setenv("ADVENT_INBOUND_TOKEN", "relay-secret")
    get_settings.cache_clear()
    yield "relay-secret"
    monkeypatch.delenv("ADVENT_INBOUND_TOKEN")
    get_settings.cache_clear()


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_readiness(self, client: AsyncClient) -> None:
        response = await client.get("/ready")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["checks"]["database"] == "ok"
        assert data["checks"]["catalog"] == "ok"

    async def test_version(self, client: AsyncClient) -> None:
        response = await client.get("/version")
        assert response.status_code == 200
        assert "version" in response.json()


class TestInboundWebhooks:
    async def test_text_event_runs_the_engine(self, client: AsyncClient, transport: FakeTransport) -> None:
        response = await client.post("/api/v1/inbound/text", json={"sender": ADDR, "content": "hi"})

        assert response.status_code == 200
        assert response.json() == {"status": "processed", "messages": 3, "effects": []}
        assert len(transport.sent) == 3
        assert isinstance(transport.sent[1][1], PaymentRequest)

    async def test_group_messages_ignored(self, client: AsyncClient, transport: FakeTransport) -> None:
        response = await client.post(
            "/api/v1/inbound/text", json={"sender": ADDR, "content": "hi", "is_dm": False},
        )
        assert response.json()["status"] == "ignored"
        assert transport.sent == []

    async def test_non_text_content_ignored(self, client: AsyncClient, transport: FakeTransport) -> None:
        response = await client.post("/api/v1/inbound/text", json={"sender": ADDR, "content": 42})
        assert response.json() == {"status": "processed", "messages": 0, "effects": []}
        assert transport.sent == []

    async def test_payment_reference_event(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/inbound/payment-reference",
            json={"sender": ADDR, "content": {"networkId": "base-sepolia", "reference": "0xfeed"}},
        )
        assert response.json()["effects"] == ["paid"]

    async def test_missing_sender_rejected(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/inbound/text", json={"content": "hi"})
        assert response.status_code == 422

    async def test_token_required_when_configured(self, client: AsyncClient, inbound_token: str) -> None:
        body = {"sender": ADDR, "content": "hi"}
        assert (await client.post("/api/v1/inbound/text", json=body)).status_code == 401

        response = await client.post(
            "/api/v1/inbound/text", json=body, headers={"Authorization": f"Bearer {inbound_token}"},
        )
        assert response.status_code == 200

    async def test_delivery_failure_still_acknowledged(self, client: AsyncClient, transport: FakeTransport) -> None:
        transport.fail_for.add(ADDR)
        response = await client.post("/api/v1/inbound/text", json={"sender": ADDR, "content": "hi"})
        assert response.status_code == 200
        assert transport.sent == []


class TestLeaderboardApi:
    async def test_empty_leaderboard(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/leaderboard")
        assert response.status_code == 200
        assert response.json() == {"entries": [], "total": 0}

    async def test_solver_listed_with_stats(self, client: AsyncClient, ctx: CampaignContext) -> None:
        await make_participant(ctx)
        await client.post("/api/v1/inbound/text", json={"sender": ADDR, "content": "start"})
        await client.post("/api/v1/inbound/text", json={"sender": ADDR, "content": "Paris"})

        board = (await client.get("/api/v1/leaderboard")).json()
        assert board["total"] == 1
        assert board["entries"][0]["address"] == ADDR

        stats = (await client.get(f"/api/v1/participants/{ADDR}/stats")).json()
        assert stats["current_day"] == 2
        assert stats["pending_reward_choice"] is True
        assert stats["correct_answers"] == 1
        assert stats["rank"] == 1

    async def test_transactions_listed(self, client: AsyncClient, ctx: CampaignContext) -> None:
        await make_participant(ctx, current_day=2, pending_reward_choice=True)
        await client.post("/api/v1/inbound/text", json={"sender": ADDR, "content": "Nice"})

        [tx] = (await client.get(f"/api/v1/participants/{ADDR}/transactions")).json()
        assert tx["reward_path"] == "safe"
        assert tx["status"] == "completed"

    async def test_unknown_participant(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/participants/0xnobody/stats")
        assert response.status_code == 404
        assert response.json() == {"detail": "Participant not found"}
