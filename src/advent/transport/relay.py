"""HTTP relay transport: outbound messages are POSTed to the messaging relay."""

from __future__ import annotations

import httpx
import structlog

from advent.transport.base import PaymentRequest, Transport

logger = structlog.get_logger()


class RelayTransport(Transport):
    """Sends texts and wallet payment requests through the relay's REST API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {token}"} if token else {},
            timeout=timeout,
            transport=transport,
        )

    async def _post(self, payload: dict) -> None:
        response = await self._client.post("/v1/messages", json=payload)
        response.raise_for_status()

    async def send_text(self, address: str, text: str) -> None:
        await self._post({"to": address, "content_type": "text", "content": text})
        logger.debug("relay_text_sent", to=address)

    async def send_payment_request(self, address: str, request: PaymentRequest) -> None:
        await self._post({"to": address, "content_type": "wallet_send_calls", "content": request.to_payload()})
        logger.info("relay_payment_request_sent", to=address, chain_id=request.chain_id)

    async def aclose(self) -> None:
        await self._client.aclose()
