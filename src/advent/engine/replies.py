"""
Participant-facing message templates.

Each function returns the text of one outbound message. Kept apart from
the engine so the state machine reads as decisions, not copy.
"""

from __future__ import annotations

from decimal import Decimal

from advent.leaderboard.ranking import LeaderboardEntry

CAMPAIGN_NAME = "Advent Calendar"


def help_text() -> str:
    return (
        f"\U0001F384 {CAMPAIGN_NAME} Commands \U0001F384\n\n"
        "/help - Show this message\n"
        "/leaderboard - Show top players\n"
        "/stats - Show your statistics\n"
        "/hint - Get a hint for the current puzzle"
    )


def short_address(address: str) -> str:
    if len(address) <= 12:
        return address
    return f"{address[:6]}...{address[-4:]}"


def format_seconds(ms: float | None) -> str:
    return f"{(ms or 0) / 1000:.1f}s"


def leaderboard_text(entries: list[LeaderboardEntry]) -> str:
    lines = [f"\U0001F3C6 {CAMPAIGN_NAME} Leaderboard \U0001F3C6", ""]
    if not entries:
        lines.append("No scores yet! Be the first to answer correctly.")
    for entry in entries:
        lines.append(
            f"{entry.rank}. {short_address(entry.address)} - "
            f"{entry.correct_answers} ⭐ ({format_seconds(entry.avg_response_time_ms)})"
        )
    return "\n".join(lines)


def stats_text(correct_answers: int, avg_response_time_ms: float | None, current_day: int, rank: int) -> str:
    return (
        "\U0001F4CA Your Stats \U0001F4CA\n\n"
        f"⭐ Correct Answers: {correct_answers or 'None yet'}\n"
        f"⚡ Avg Response Time: {format_seconds(avg_response_time_ms)}\n"
        f"\U0001F4C5 Current Day: {current_day}\n"
        f"\U0001F3C5 Rank: {f'#{rank}' if rank else 'Unranked'}"
    )


def hint_text(hint: str, number: int, total: int) -> str:
    return f"\U0001F4A1 Hint {number}/{total}: {hint}"


def hints_exhausted() -> str:
    return "❌ No more hints available for this puzzle."


def no_puzzle_for_hint() -> str:
    return "No puzzle is waiting for an answer right now. Send any message to get today's puzzle."


def payment_welcome(entry_fee: Decimal) -> str:
    return (
        f"Welcome to the {CAMPAIGN_NAME}! \U0001F384\n\n"
        f"Unlock daily puzzles and crypto rewards for just {entry_fee} USDC.\n\n"
        "I'll send you a payment request now..."
    )


def payment_followup() -> str:
    return "\U0001F4A1 Complete the payment and you'll be unlocked automatically!"


def onramp_link(url: str, preset_amount: Decimal) -> str:
    return (
        f"\U0001F4B3 Get Started for ${preset_amount}\n\n"
        "Purchase USDC with your debit card or bank account:\n"
        f"{url}\n\n"
        "Once complete, you'll automatically unlock the calendar!"
    )


def onramp_unavailable() -> str:
    return "⚠️ Sorry, I couldn't generate the buy link. Please try again later."


def payment_confirmed(network_id: str, reference: str, *, structured: bool) -> str:
    if structured:
        return (
            f"✅ Payment received! Welcome to the {CAMPAIGN_NAME}! \U0001F384\n\n"
            "Your first puzzle will be available soon. Check back daily for new puzzles!"
        )
    return (
        "✅ Payment confirmed!\n"
        f"\U0001F517 Network: {network_id}\n"
        f"\U0001F4C4 Hash: {reference}\n\n"
        f"\U0001F385 Welcome to the {CAMPAIGN_NAME}!\n"
        "Send any message to get your first puzzle!"
    )


def already_paid() -> str:
    return "✅ You're already unlocked! Send any message to get today's puzzle."


def puzzle_text(day: int, question: str) -> str:
    return f"\U0001F384 Day {day} Puzzle \U0001F384\n\n{question}\n\nReply with your answer!"


def campaign_complete() -> str:
    return "\U0001F389 You have completed all the puzzles! Merry Christmas!"


def correct_answer(day: int, response_time_ms: int | None) -> str:
    return f"✅ Correct! You solved Day {day} in {format_seconds(response_time_ms)}!"


def reward_choice_prompt() -> str:
    return (
        "\U0001F385 Choose your reward:\n"
        "\U0001F607 Nice: Get your reward now (safe)\n"
        "\U0001F608 Naughty: Swap for a random memecoin (risky, but could 10x!)\n\n"
        "Reply: 'Nice' or 'Naughty'"
    )


def reward_choice_reprompt() -> str:
    return "Please choose: Reply with 'Naughty' or 'Nice'"


def wrong_answer(day: int, question: str) -> str:
    """Retry prompt that repeats the day's question."""
    return f"❌ Not quite! Try again. (Type /hint if you need help)\n\n\U0001F384 Day {day}: {question}"


def safe_reward_sent(amount: Decimal) -> str:
    return f"\U0001F607 Nice choice! \U0001F4B8 Sent {amount} USDC. Check your wallet."


def risky_reward_sent(symbol: str, multiplier: int) -> str:
    bonus = (
        f"\U0001F381 Bonus! You already hold ${symbol} - your reward was multiplied by {multiplier}!\n"
        if multiplier > 1
        else ""
    )
    return f"\U0001F608 Feeling risky! \U0001F3AF You got ${symbol}!\n{bonus}✅ Done! Check your wallet for ${symbol}."


def reward_failed(retryable: bool) -> str:
    if retryable:
        return "⚠️ I couldn't send your reward right now. The payout is logged and can be retried."
    return "⚠️ Your reward payout failed. The failure has been recorded."


def next_puzzle_tomorrow() -> str:
    return "\U0001F31F Your next puzzle will unlock tomorrow. See you then!"
