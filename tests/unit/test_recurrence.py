"""Unit tests for recurrence rule evaluation."""

from datetime import UTC, datetime, time, timedelta

import pytest

from lumina_jobs.core.errors import InvalidRecurrenceRule
from lumina_jobs.scheduling.clock import REGIONAL_TIMEZONE, to_regional
from lumina_jobs.scheduling.recurrence import (
    WEEKDAYS,
    RecurrenceRule,
    next_occurrence,
    next_occurrence_for,
)

# Wednesday 2025-01-15 10:00 UTC (12:00 CAT)
WEDNESDAY_MORNING = datetime(2025, 1, 15, 10, 0, tzinfo=UTC)

REFERENCE_INSTANTS = [
    WEDNESDAY_MORNING,
    datetime(2025, 1, 12, 0, 0, tzinfo=UTC),  # Sunday midnight UTC
    datetime(2025, 1, 14, 21, 59, tzinfo=UTC),  # Tuesday, 23:59 CAT
    datetime(2025, 1, 14, 22, 30, tzinfo=UTC),  # Tuesday UTC, already Wednesday CAT
    datetime(2025, 3, 30, 1, 30, tzinfo=UTC),  # European DST change; CAT has none
    datetime(2024, 12, 31, 23, 45, tzinfo=UTC),  # year boundary in CAT
]

TIMES = ["00:00", "01:59", "09:30", "12:00", "18:00", "22:15", "23:59"]


def _sunday_based_weekday(moment: datetime) -> int:
    return (to_regional(moment).weekday() + 1) % 7


class TestRecurrenceRuleParse:
    """Tests for RecurrenceRule.parse."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("day", "expected"),
        [("sunday", 0), ("Monday", 1), ("TUESDAY", 2), (" saturday ", 6)],
    )
    def test_weekday_is_case_insensitive(self, day: str, expected: int) -> None:
        """Should map weekday names regardless of case and padding."""
        assert RecurrenceRule.parse(day, "10:00").weekday == expected

    @pytest.mark.unit
    def test_seconds_are_accepted_and_dropped(self) -> None:
        """Should accept HH:MM:SS and keep hour/minute precision."""
        rule = RecurrenceRule.parse("friday", "14:30:45")

        assert rule.at == time(14, 30)

    @pytest.mark.unit
    @pytest.mark.parametrize("day", ["funday", "", "mon", "1"])
    def test_unknown_weekday_raises(self, day: str) -> None:
        """Should reject anything that is not a full weekday name."""
        with pytest.raises(InvalidRecurrenceRule):
            RecurrenceRule.parse(day, "10:00")

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value",
        ["", "12", "24:00", "12:60", "12:00:60", "ab:cd", "12:00:00:00", "-1:30", "１２:００"],
    )
    def test_malformed_time_raises(self, value: str) -> None:
        """Should reject times outside HH:MM[:SS]."""
        with pytest.raises(InvalidRecurrenceRule):
            RecurrenceRule.parse("monday", value)


class TestNextOccurrence:
    """Tests for next_occurrence / next_occurrence_for."""

    @pytest.mark.unit
    def test_wednesday_to_monday_evening(self) -> None:
        """Monday 18:00 CAT seen from Wednesday lands on next Monday 16:00 UTC."""
        result = next_occurrence_for("monday", "18:00", WEDNESDAY_MORNING)

        assert result == datetime(2025, 1, 20, 16, 0, tzinfo=UTC)

    @pytest.mark.unit
    def test_later_this_week(self) -> None:
        """A weekday later in the week resolves within the same week."""
        result = next_occurrence_for("friday", "14:00", WEDNESDAY_MORNING)

        assert result == datetime(2025, 1, 17, 12, 0, tzinfo=UTC)

    @pytest.mark.unit
    def test_result_is_utc(self) -> None:
        """Should return an aware UTC datetime."""
        result = next_occurrence_for("monday", "18:00", WEDNESDAY_MORNING)

        assert result.tzinfo is not None
        assert result.utcoffset() == timedelta(0)

    @pytest.mark.unit
    @pytest.mark.parametrize("now", REFERENCE_INSTANTS)
    def test_every_rule_is_correct_future_and_within_a_week(self, now: datetime) -> None:
        """Every weekday/time lands on that regional weekday, after now, within a week."""
        for day, weekday in WEEKDAYS.items():
            for value in TIMES:
                result = next_occurrence_for(day, value, now)
                local = to_regional(result)
                days_ahead = (local.date() - to_regional(now).date()).days

                assert _sunday_based_weekday(result) == weekday, (day, value)
                assert local.strftime("%H:%M") == value
                assert result > now, (day, value)
                assert 1 <= days_ahead <= 7, (day, value)

    @pytest.mark.unit
    @pytest.mark.parametrize("value", ["06:00", "12:00", "12:01", "23:00"])
    def test_same_weekday_always_jumps_a_full_week(self, value: str) -> None:
        """A rule for today's weekday never resolves to later today."""
        now_local = WEDNESDAY_MORNING.astimezone(REGIONAL_TIMEZONE)
        result = next_occurrence_for("wednesday", value, WEDNESDAY_MORNING)

        local = to_regional(result)
        assert local.date() == now_local.date() + timedelta(days=7)
        assert local.strftime("%H:%M") == value

    @pytest.mark.unit
    def test_same_weekday_uses_regional_calendar(self) -> None:
        """Late UTC evening is already the next day in CAT."""
        # Tuesday 22:30 UTC is Wednesday 00:30 CAT.
        now = datetime(2025, 1, 14, 22, 30, tzinfo=UTC)

        result = next_occurrence_for("wednesday", "00:30", now)

        assert result == datetime(2025, 1, 21, 22, 30, tzinfo=UTC)

    @pytest.mark.unit
    def test_naive_now_is_rejected(self) -> None:
        """Should refuse a naive reference instant."""
        rule = RecurrenceRule.parse("monday", "18:00")

        with pytest.raises(ValueError):
            next_occurrence(rule, datetime(2025, 1, 15, 10, 0))
