"""Unit tests for the entry-fee payment request encoding."""

from decimal import Decimal

import pytest

from advent.transport.base import (
    TRANSFER_SELECTOR,
    build_usdc_payment_request,
    encode_erc20_transfer,
    to_base_units,
)

RECEIVER = "0x" + "ab" * 20
USDC = "0x036CbD53842c5426634e7929541eC2318f3dCF7e"


class TestErc20Encoding:
    def test_calldata_layout(self):
        data = encode_erc20_transfer(RECEIVER, 10_000)
        assert data.startswith("0x" + TRANSFER_SELECTOR)
        body = data[2 + len(TRANSFER_SELECTOR):]
        assert len(body) == 128
        assert body[:64] == "0" * 24 + "ab" * 20
        assert int(body[64:], 16) == 10_000

    def test_mixed_case_address_lowercased(self):
        data = encode_erc20_transfer("0xABABABABABABABABABABABABABABABABABABABAB", 1)
        assert "ab" * 20 in data

    def test_bad_address_rejected(self):
        with pytest.raises(ValueError):
            encode_erc20_transfer("0x1234", 1)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValueError):
            encode_erc20_transfer(RECEIVER, -1)


def test_to_base_units():
    assert to_base_units(Decimal("0.01"), 6) == 10_000
    assert to_base_units(Decimal("1"), 18) == 10**18


def test_payment_request_payload():
    request = build_usdc_payment_request(
        payer="0x" + "11" * 20,
        receiver=RECEIVER,
        amount=Decimal("0.01"),
        usdc_contract=USDC,
        decimals=6,
        chain_id=84532,
    )
    payload = request.to_payload()
    assert payload["version"] == "1.0"
    assert payload["chainId"] == "0x14a34"
    assert payload["from"] == "0x" + "11" * 20
    [call] = payload["calls"]
    assert call["to"] == USDC
    assert call["metadata"]["amount"] == 10_000
    assert call["metadata"]["toAddress"] == RECEIVER
    assert call["data"] == encode_erc20_transfer(RECEIVER, 10_000)
