"""Unit tests for the CoinGecko market-data collaborator."""

import random

import httpx
import pytest

from advent.rewards.market_data import (
    FALLBACK_TOKENS,
    CoinGeckoMarketData,
    MarketDataError,
    TokenInfo,
    parse_base_tokens,
    pick_random_token,
)

MARKETS_URL = "https://markets.test/api/v3/coins/markets"

ROWS = [
    {"symbol": "degen", "name": "Degen", "platforms": {"base": "0x4ed4E862860beD51a9570b96d89aF5E1B0Efefed"}},
    {"symbol": "eth", "name": "Ethereum", "platforms": {"ethereum": "0xeee"}},
    {"symbol": "bad", "name": "Bad", "platforms": {"base": "not-an-address"}},
    {"symbol": "toshi", "name": "Toshi", "platforms": {"base": "0xa62d2f01f8e0361b15f9596d5fd339fd00c9f717"}},
    "garbage",
]


class TestParsing:
    def test_keeps_base_tokens_only(self):
        tokens = parse_base_tokens(ROWS)
        assert [t.symbol for t in tokens] == ["DEGEN", "TOSHI"]

    def test_non_list_rejected(self):
        with pytest.raises(MarketDataError):
            parse_base_tokens({"error": "rate limited"})

    def test_pick_from_empty_raises(self):
        with pytest.raises(MarketDataError):
            pick_random_token([], random.Random(1))

    def test_pick_is_member(self):
        tokens = list(FALLBACK_TOKENS)
        assert pick_random_token(tokens, random.Random(1)) in tokens


class TestCoinGeckoClient:
    async def test_fetch_sends_query_and_parses(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=ROWS)

        client = CoinGeckoMarketData(MARKETS_URL, transport=httpx.MockTransport(handler))
        tokens = await client.list_candidate_tokens(50)
        await client.aclose()

        assert tokens[0] == TokenInfo(
            symbol="DEGEN", address="0x4ed4E862860beD51a9570b96d89aF5E1B0Efefed", name="Degen",
        )
        assert seen[0].url.params["category"] == "base-ecosystem"
        assert seen[0].url.params["per_page"] == "50"

    async def test_limit_applied(self):
        client = CoinGeckoMarketData(
            MARKETS_URL, transport=httpx.MockTransport(lambda r: httpx.Response(200, json=ROWS)),
        )
        assert len(await client.list_candidate_tokens(1)) == 1
        await client.aclose()

    async def test_http_error_falls_back(self):
        client = CoinGeckoMarketData(
            MARKETS_URL, transport=httpx.MockTransport(lambda r: httpx.Response(503)),
        )
        assert await client.list_candidate_tokens(100) == list(FALLBACK_TOKENS)
        await client.aclose()

    async def test_no_base_tokens_falls_back(self):
        client = CoinGeckoMarketData(
            MARKETS_URL, transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[ROWS[1]])),
        )
        assert await client.list_candidate_tokens(100) == list(FALLBACK_TOKENS)
        await client.aclose()

    async def test_fetch_raises_for_callers_that_want_errors(self):
        client = CoinGeckoMarketData(
            MARKETS_URL, transport=httpx.MockTransport(lambda r: httpx.Response(200, text="<html>")),
        )
        with pytest.raises(MarketDataError):
            await client.fetch_candidate_tokens(10)
        await client.aclose()
