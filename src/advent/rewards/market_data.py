"""Market-data collaborator: ranked candidate tokens for the risky reward.

Queries CoinGecko for Base-ecosystem tokens by market cap and falls back
to a fixed list when the API is unavailable or returns nothing usable.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import httpx
import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class TokenInfo:
    symbol: str
    address: str
    name: str


FALLBACK_TOKENS: tuple[TokenInfo, ...] = (
    TokenInfo(symbol="DEGEN", address="0x4ed4E862860beD51a9570b96d89aF5E1B0Efefed", name="Degen"),
    TokenInfo(symbol="TOSHI", address="0xa62d2f01f8e0361b15f9596d5fd339fd00c9f717", name="Toshi"),
    TokenInfo(symbol="BRETT", address="0x3363e87f0723d92685589a4d9a3195d47124dde0", name="Brett"),
)


class MarketDataError(Exception):
    """The market-data API could not produce a token list."""


def parse_base_tokens(rows: object) -> list[TokenInfo]:
    """Keep entries with a 0x-prefixed Base contract address."""
    if not isinstance(rows, list):
        raise MarketDataError("Expected a list of markets")

    tokens = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        platforms = row.get("platforms") or {}
        address = platforms.get("base") if isinstance(platforms, dict) else None
        if not address or not str(address).startswith("0x"):
            continue
        tokens.append(
            TokenInfo(
                symbol=str(row.get("symbol", "")).upper(),
                address=str(address),
                name=str(row.get("name", "")),
            )
        )
    return tokens


def pick_random_token(tokens: list[TokenInfo], rng: random.Random) -> TokenInfo:
    """Uniform pick."""
    if not tokens:
        raise MarketDataError("No candidate tokens to choose from")
    return rng.choice(tokens)


class CoinGeckoMarketData:
    """Fetches candidate tokens, never raising to callers."""

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._client = httpx.AsyncClient(
            headers={"Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def fetch_candidate_tokens(self, limit: int) -> list[TokenInfo]:
        """Raw fetch; raises MarketDataError on any failure."""
        try:
            response = await self._client.get(
                self._url,
                params={
                    "vs_currency": "usd",
                    "category": "base-ecosystem",
                    "order": "market_cap_desc",
                    "per_page": limit,
                    "page": 1,
                    "sparkline": "false",
                },
            )
            response.raise_for_status()
            rows = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise MarketDataError(f"CoinGecko request failed: {exc}") from exc
        return parse_base_tokens(rows)[:limit]

    async def list_candidate_tokens(self, limit: int) -> list[TokenInfo]:
        try:
            tokens = await self.fetch_candidate_tokens(limit)
        except MarketDataError as exc:
            logger.warning("market_data_fallback", reason=str(exc))
            return list(FALLBACK_TOKENS)

        if not tokens:
            logger.warning("market_data_fallback", reason="no Base tokens in response")
            return list(FALLBACK_TOKENS)

        logger.info("market_data_fetched", count=len(tokens))
        return tokens

    async def aclose(self) -> None:
        await self._client.aclose()
