"""Custodial payment/swap collaborator.

Provider abstraction in the same shape as the email providers: an
abstract gateway plus an HTTP implementation against the custodial
wallet service's REST API.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import httpx
import structlog

logger = structlog.get_logger()

RETRYABLE_STATUS_CODES = {408, 425, 429}


class PaymentGatewayError(Exception):
    """A transfer, swap or balance call failed."""

    def __init__(self, message: str, *, retryable: bool) -> None:
        super().__init__(message)
        self.retryable = retryable


@dataclass(frozen=True)
class SwapResult:
    reference: str
    to_amount: Decimal | None = None


class PaymentGateway(ABC):
    """Abstract custodial wallet: transfers, swaps and balance reads."""

    @abstractmethod
    async def transfer(self, asset: str, to: str, amount: Decimal) -> str:
        """Send `amount` of `asset` to `to`. Returns the transfer id."""
        ...

    @abstractmethod
    async def swap(self, from_asset: str, to_asset: str, amount: Decimal, slippage_bps: int) -> SwapResult:
        """Swap `amount` of `from_asset` into `to_asset` for the participant payout."""
        ...

    @abstractmethod
    async def read_balance(self, asset: str, address: str) -> Decimal:
        ...

    @abstractmethod
    async def onramp_buy_url(self, address: str, asset: str, network_id: str, preset_amount: Decimal) -> str:
        ...

    async def aclose(self) -> None:  # noqa: B027
        pass


def _classify_http_error(exc: httpx.HTTPError) -> PaymentGatewayError:
    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        retryable = code >= 500 or code in RETRYABLE_STATUS_CODES
        return PaymentGatewayError(f"HTTP {code} from payments service", retryable=retryable)
    if isinstance(exc, (httpx.TimeoutException, httpx.TransportError)):
        return PaymentGatewayError(f"{type(exc).__name__}: {exc}", retryable=True)
    return PaymentGatewayError(str(exc), retryable=False)


class CustodialPaymentsClient(PaymentGateway):
    """HTTP client for the custodial wallet service."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}"} if api_key else {},
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs: object) -> dict:
        try:
            response = await self._client.request(method, path, **kwargs)  # type: ignore[arg-type]
            response.raise_for_status()
        except httpx.HTTPError as exc:
            error = _classify_http_error(exc)
            logger.warning("payments_request_failed", method=method, path=path, error=str(error), retryable=error.retryable)
            raise error from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise PaymentGatewayError(f"Unparseable response from {path}", retryable=False) from exc
        if not isinstance(payload, dict):
            raise PaymentGatewayError(f"Unexpected response shape from {path}", retryable=False)
        return payload

    async def transfer(self, asset: str, to: str, amount: Decimal) -> str:
        payload = await self._request(
            "POST", "/v1/transfers", json={"asset": asset, "to": to, "amount": str(amount)},
        )
        transfer_id = payload.get("transfer_id") or payload.get("transaction_hash")
        if not transfer_id:
            raise PaymentGatewayError("Transfer response missing transfer_id", retryable=False)
        logger.info("payments_transfer_sent", asset=asset, to=to, amount=str(amount), transfer_id=transfer_id)
        return str(transfer_id)

    async def swap(self, from_asset: str, to_asset: str, amount: Decimal, slippage_bps: int) -> SwapResult:
        payload = await self._request(
            "POST",
            "/v1/swaps",
            json={
                "from_asset": from_asset,
                "to_asset": to_asset,
                "amount": str(amount),
                "slippage_bps": slippage_bps,
            },
        )
        reference = str(payload.get("transaction_hash") or "SWAP_EXECUTED")
        to_amount = payload.get("to_amount")
        try:
            parsed_amount = Decimal(str(to_amount)) if to_amount is not None else None
        except InvalidOperation as exc:
            msg = f"Swap {reference} returned a non-numeric to_amount: {to_amount!r}"
            raise PaymentGatewayError(msg, retryable=False) from exc

        result = SwapResult(reference=reference, to_amount=parsed_amount)
        logger.info("payments_swap_executed", from_asset=from_asset, to_asset=to_asset, reference=result.reference)
        return result

    async def read_balance(self, asset: str, address: str) -> Decimal:
        payload = await self._request("GET", f"/v1/balances/{asset}/{address}")
        try:
            return Decimal(str(payload.get("amount", "0")))
        except InvalidOperation as exc:
            raise PaymentGatewayError("Balance response is not a number", retryable=False) from exc

    async def onramp_buy_url(self, address: str, asset: str, network_id: str, preset_amount: Decimal) -> str:
        payload = await self._request(
            "POST",
            "/v1/onramp/buy-url",
            json={
                "address": address,
                "asset": asset,
                "network_id": network_id,
                "preset_fiat_amount": str(preset_amount),
            },
        )
        url = payload.get("url")
        if not url:
            raise PaymentGatewayError("Onramp response missing url", retryable=False)
        return str(url)

    async def aclose(self) -> None:
        await self._client.aclose()
