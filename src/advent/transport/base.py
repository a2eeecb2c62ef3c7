"""Outbound message types and the messaging transport abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

TRANSFER_SELECTOR = "a9059cbb"  # transfer(address,uint256)


@dataclass(frozen=True)
class OutboundText:
    text: str


@dataclass(frozen=True)
class PaymentRequest:
    """wallet_sendCalls payload asking the participant to pay the entry fee."""

    chain_id: int
    from_address: str
    calls: list[dict[str, Any]] = field(default_factory=list)
    version: str = "1.0"

    def to_payload(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "chainId": hex(self.chain_id),
            "from": self.from_address,
            "calls": self.calls,
        }


Outbound = OutboundText | PaymentRequest


def to_base_units(amount: Decimal, decimals: int) -> int:
    return int((amount * (Decimal(10) ** decimals)).to_integral_value())


def encode_erc20_transfer(to: str, amount: int) -> str:
    """ABI-encode transfer(to, amount) calldata."""
    address = to.lower().removeprefix("0x")
    if len(address) != 40:
        msg = f"Not a 20-byte address: {to}"
        raise ValueError(msg)
    if amount < 0:
        msg = "Transfer amount must be non-negative"
        raise ValueError(msg)
    return "0x" + TRANSFER_SELECTOR + address.rjust(64, "0") + format(amount, "x").rjust(64, "0")


def build_usdc_payment_request(
    payer: str,
    receiver: str,
    amount: Decimal,
    usdc_contract: str,
    decimals: int,
    chain_id: int,
) -> PaymentRequest:
    units = to_base_units(amount, decimals)
    return PaymentRequest(
        chain_id=chain_id,
        from_address=payer,
        calls=[
            {
                "to": usdc_contract,
                "data": encode_erc20_transfer(receiver, units),
                "metadata": {
                    "description": f"Transfer {amount} USDC",
                    "transactionType": "transfer",
                    "currency": "USDC",
                    "amount": units,
                    "decimals": decimals,
                    "toAddress": receiver,
                },
            }
        ],
    )


class Transport(ABC):
    """Direct-message channel to participants."""

    @abstractmethod
    async def send_text(self, address: str, text: str) -> None:
        ...

    @abstractmethod
    async def send_payment_request(self, address: str, request: PaymentRequest) -> None:
        ...

    async def deliver(self, address: str, message: Outbound) -> None:
        if isinstance(message, PaymentRequest):
            await self.send_payment_request(address, message)
        else:
            await self.send_text(address, message.text)

    async def aclose(self) -> None:  # noqa: B027
        pass
