"""Scheduling policy: regional clock, recurrence rules and reminder windows."""

from lumina_jobs.scheduling.clock import (
    REGIONAL_TIMEZONE,
    format_regional,
    to_regional,
    utc_now,
)
from lumina_jobs.scheduling.recurrence import (
    WEEKDAYS,
    RecurrenceRule,
    next_occurrence,
    next_occurrence_for,
)
from lumina_jobs.scheduling.windows import (
    FIVE_MINUTE_WINDOW,
    REMINDER_WINDOWS,
    THIRTY_MINUTE_WINDOW,
    ReminderWindow,
    WindowKind,
)

__all__ = [
    "FIVE_MINUTE_WINDOW",
    "REGIONAL_TIMEZONE",
    "REMINDER_WINDOWS",
    "THIRTY_MINUTE_WINDOW",
    "WEEKDAYS",
    "RecurrenceRule",
    "ReminderWindow",
    "WindowKind",
    "format_regional",
    "next_occurrence",
    "next_occurrence_for",
    "to_regional",
    "utc_now",
]
