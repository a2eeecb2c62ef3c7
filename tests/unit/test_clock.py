"""Unit tests for the daily trigger."""

from datetime import datetime, timezone

import pytest

from advent.clock import DailyTrigger, ensure_utc


class TestDailyTrigger:
    def test_later_today(self):
        trigger = DailyTrigger(6, 30)
        after = datetime(2026, 12, 3, 5, 0, tzinfo=timezone.utc)
        assert trigger.next_fire(after) == datetime(2026, 12, 3, 6, 30, tzinfo=timezone.utc)

    def test_already_passed_rolls_to_tomorrow(self):
        trigger = DailyTrigger(6)
        after = datetime(2026, 12, 3, 7, 0, tzinfo=timezone.utc)
        assert trigger.next_fire(after) == datetime(2026, 12, 4, 6, 0, tzinfo=timezone.utc)

    def test_exact_fire_time_is_not_next(self):
        trigger = DailyTrigger(6)
        at = datetime(2026, 12, 3, 6, 0, tzinfo=timezone.utc)
        assert trigger.next_fire(at) == datetime(2026, 12, 4, 6, 0, tzinfo=timezone.utc)

    def test_month_rollover(self):
        trigger = DailyTrigger(0)
        after = datetime(2026, 12, 31, 23, 59, tzinfo=timezone.utc)
        assert trigger.next_fire(after) == datetime(2027, 1, 1, 0, 0, tzinfo=timezone.utc)

    def test_seconds_until_next(self):
        trigger = DailyTrigger(6)
        now = datetime(2026, 12, 3, 5, 59, 30, tzinfo=timezone.utc)
        assert trigger.seconds_until_next(now) == 30.0

    def test_naive_input_treated_as_utc(self):
        trigger = DailyTrigger(12)
        assert trigger.next_fire(datetime(2026, 12, 3, 11, 0)).tzinfo is timezone.utc

    @pytest.mark.parametrize(("hour", "minute"), [(24, 0), (-1, 0), (6, 60)])
    def test_invalid_time_rejected(self, hour, minute):
        with pytest.raises(ValueError):
            DailyTrigger(hour, minute)

    def test_repr(self):
        assert repr(DailyTrigger(6, 5)) == "DailyTrigger(06:05 UTC)"


def test_ensure_utc_keeps_aware_datetimes():
    aware = datetime(2026, 12, 3, 6, 0, tzinfo=timezone.utc)
    assert ensure_utc(aware) == aware
