"""Unit tests for the HTTP relay transport."""

import json
from decimal import Decimal

import httpx
import pytest

from advent.transport.base import OutboundText, build_usdc_payment_request
from advent.transport.relay import RelayTransport

TO = "0x1111111111111111111111111111111111111111"


class TestRelayTransport:
    async def test_text_and_payment_request(self):
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/v1/messages"
            bodies.append(json.loads(request.content))
            return httpx.Response(202)

        relay = RelayTransport("https://relay.test", "tok", transport=httpx.MockTransport(handler))
        request = build_usdc_payment_request(TO, "0x" + "ab" * 20, Decimal("0.01"), "0xusdc", 6, 8453)
        await relay.deliver(TO, OutboundText("hello"))
        await relay.deliver(TO, request)
        await relay.aclose()

        assert bodies[0] == {"to": TO, "content_type": "text", "content": "hello"}
        assert bodies[1]["content_type"] == "wallet_send_calls"
        assert bodies[1]["content"]["chainId"] == "0x2105"

    async def test_relay_error_propagates(self):
        relay = RelayTransport("https://relay.test", "", transport=httpx.MockTransport(lambda r: httpx.Response(502)))
        with pytest.raises(httpx.HTTPStatusError):
            await relay.send_text(TO, "hello")
        await relay.aclose()
