"""Unit tests for participant-facing message templates."""

from decimal import Decimal

from advent.engine import replies
from advent.leaderboard.ranking import LeaderboardEntry


def test_short_address():
    assert replies.short_address("0x1234567890abcdef1234") == "0x1234...1234"
    assert replies.short_address("0xshort") == "0xshort"


def test_format_seconds():
    assert replies.format_seconds(12500) == "12.5s"
    assert replies.format_seconds(None) == "0.0s"


def test_leaderboard_text_empty():
    assert "No scores yet" in replies.leaderboard_text([])


def test_leaderboard_text_lines():
    text = replies.leaderboard_text([
        LeaderboardEntry(rank=1, address="0x1111111111111111111111111111111111111111",
                         correct_answers=3, avg_response_time_ms=4200.0),
    ])
    assert "1. 0x1111...1111 - 3 ⭐ (4.2s)" in text


def test_stats_text_unranked():
    text = replies.stats_text(0, None, 1, 0)
    assert "None yet" in text
    assert "Unranked" in text


def test_stats_text_ranked():
    text = replies.stats_text(4, 1500.0, 5, 2)
    assert "Correct Answers: 4" in text
    assert "1.5s" in text
    assert "#2" in text


def test_puzzle_text():
    assert replies.puzzle_text(3, "Q?") == "\U0001F384 Day 3 Puzzle \U0001F384\n\nQ?\n\nReply with your answer!"


def test_wrong_answer_repeats_question():
    text = replies.wrong_answer(2, "Q?")
    assert text.startswith("❌ Not quite!")
    assert text.endswith("Day 2: Q?")


def test_payment_confirmed_variants():
    assert "Hash: 0xabc" in replies.payment_confirmed("base", "0xabc", structured=False)
    assert "Payment received" in replies.payment_confirmed("base", "0xabc", structured=True)


def test_risky_reward_bonus_line_only_for_holders():
    assert "multiplied" not in replies.risky_reward_sent("DEGEN", 1)
    assert "multiplied by 2" in replies.risky_reward_sent("DEGEN", 2)


def test_safe_reward_amount():
    assert "0.001 USDC" in replies.safe_reward_sent(Decimal("0.001"))
