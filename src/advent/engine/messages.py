"""Inbound message classification.

Every inbound payload is turned into exactly one tagged variant before
the progression engine looks at it. Non-text content and malformed
payment references come back as None and are ignored.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

COMMANDS = frozenset({"/help", "/leaderboard", "/stats", "/hint"})
SAFE_KEYWORD = "nice"
RISKY_KEYWORD = "naughty"
PAYMENT_REFERENCE_KEYS = ("networkId", "reference")


@dataclass(frozen=True)
class Command:
    name: str


@dataclass(frozen=True)
class PaymentReference:
    network_id: str
    reference: str
    structured: bool = False


@dataclass(frozen=True)
class PuzzleAnswer:
    text: str


@dataclass(frozen=True)
class RewardChoice:
    path: str | None  # "safe", "risky", or None when unrecognized
    text: str


@dataclass(frozen=True)
class FreeText:
    text: str


InboundMessage = Command | PaymentReference | PuzzleAnswer | RewardChoice | FreeText


def parse_payment_reference(payload: object, *, structured: bool = False) -> PaymentReference | None:
    """Build a PaymentReference from a mapping, or None if the fields are missing."""
    if not isinstance(payload, Mapping):
        return None
    network_id = payload.get("networkId") or payload.get("network_id")
    reference = payload.get("reference")
    if not isinstance(network_id, str) or not isinstance(reference, str) or not network_id or not reference:
        return None
    return PaymentReference(network_id=network_id, reference=reference, structured=structured)


def _json_object(text: str) -> dict | None:
    stripped = text.strip()
    if not (stripped.startswith("{") and stripped.endswith("}")):
        return None
    try:
        parsed = json.loads(stripped)
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None


def classify_reward_choice(text: str) -> str | None:
    # Substring match; puzzle answers must not contain either keyword.
    lowered = text.casefold()
    if SAFE_KEYWORD in lowered:
        return "safe"
    if RISKY_KEYWORD in lowered:
        return "risky"
    return None


def classify(
    content: object,
    *,
    awaiting_reward_choice: bool = False,
    puzzle_outstanding: bool = False,
) -> InboundMessage | None:
    """Classify one inbound payload against the participant's current state."""
    if isinstance(content, Mapping):
        reference = parse_payment_reference(content, structured=True)
        if reference is None:
            logger.warning("Ignoring malformed payment reference payload: keys=%s", list(content))
        return reference

    if not isinstance(content, str):
        logger.debug("Ignoring non-text content of type %s", type(content).__name__)
        return None

    obj = _json_object(content)
    if obj is not None and any(key in obj for key in PAYMENT_REFERENCE_KEYS):
        reference = parse_payment_reference(obj)
        if reference is None:
            logger.warning("Ignoring malformed payment reference in text: keys=%s", list(obj))
        return reference

    normalized = content.strip().casefold()
    if normalized in COMMANDS:
        return Command(name=normalized)

    if awaiting_reward_choice:
        return RewardChoice(path=classify_reward_choice(content), text=content)
    if puzzle_outstanding:
        return PuzzleAnswer(text=content)
    return FreeText(text=content)
