"""Recurrence rule evaluation.

A recurring class repeats weekly on a named weekday at a regional wall-clock
time. Evaluation is pure: given the rule and "now" it returns the next
occurrence as a UTC instant.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta

from lumina_jobs.core.errors import InvalidRecurrenceRule
from lumina_jobs.scheduling.clock import REGIONAL_TIMEZONE, to_regional

# Sunday=0, matching how recurrence days are stored by the web app.
WEEKDAYS: dict[str, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}


@dataclass(frozen=True)
class RecurrenceRule:
    """Weekly recurrence rule.

    Attributes:
        weekday: Target day, Sunday=0 .. Saturday=6.
        at: Regional wall-clock time of day (seconds are dropped).
    """

    weekday: int
    at: time

    @classmethod
    def parse(cls, day: str, time_of_day: str) -> "RecurrenceRule":
        """Build a rule from stored ``recurrence_day``/``recurrence_time`` values.

        Args:
            day: Weekday name, case-insensitive.
            time_of_day: ``HH:MM`` or ``HH:MM:SS``.

        Raises:
            InvalidRecurrenceRule: Unknown weekday or malformed time.
        """
        weekday = WEEKDAYS.get(day.strip().lower()) if day else None
        if weekday is None:
            raise InvalidRecurrenceRule(f"Invalid recurrence day: {day!r}")

        parts = time_of_day.strip().split(":") if time_of_day else []
        numeric = all(p.isascii() and p.isdigit() for p in parts)
        if len(parts) not in (2, 3) or not numeric:
            raise InvalidRecurrenceRule(f"Invalid recurrence time: {time_of_day!r}")

        hour, minute = int(parts[0]), int(parts[1])
        second = int(parts[2]) if len(parts) == 3 else 0
        if hour > 23 or minute > 59 or second > 59:
            raise InvalidRecurrenceRule(f"Invalid recurrence time: {time_of_day!r}")

        return cls(weekday=weekday, at=time(hour, minute))


def next_occurrence(rule: RecurrenceRule, now: datetime) -> datetime:
    """Next occurrence of ``rule`` strictly after ``now``.

    The day difference is computed on the regional calendar. A rule for
    today's weekday always lands a full week ahead, never later today.

    Args:
        rule: Parsed recurrence rule.
        now: Aware reference instant.

    Returns:
        Aware UTC datetime of the next occurrence.
    """
    local_now = to_regional(now)
    current_day = (local_now.weekday() + 1) % 7  # Python's Monday=0 -> Sunday=0

    days_until = rule.weekday - current_day
    if days_until <= 0:
        days_until += 7

    target_date = local_now.date() + timedelta(days=days_until)
    local_start = datetime.combine(target_date, rule.at, tzinfo=REGIONAL_TIMEZONE)
    return local_start.astimezone(UTC)


def next_occurrence_for(day: str, time_of_day: str, now: datetime) -> datetime:
    """Parse and evaluate stored recurrence fields in one step."""
    return next_occurrence(RecurrenceRule.parse(day, time_of_day), now)
