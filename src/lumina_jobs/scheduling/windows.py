"""Reminder lead-time windows."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum


class WindowKind(StrEnum):
    """Persisted identifier of a reminder window."""

    THIRTY_MINUTE = "thirty_minute"
    FIVE_MINUTE = "five_minute"


@dataclass(frozen=True)
class ReminderWindow:
    """Band of start times that should receive one reminder.

    Attributes:
        kind: Window identifier stored with the dispatch marker.
        lead_minutes: Nominal minutes before start.
        tolerance_minutes: Allowed deviation either side of the lead.
    """

    kind: WindowKind
    lead_minutes: int
    tolerance_minutes: int = 2

    def bounds(self, now: datetime) -> tuple[datetime, datetime]:
        """Inclusive ``(start, end)`` range of scheduled starts inside the window."""
        return (
            now + timedelta(minutes=self.lead_minutes - self.tolerance_minutes),
            now + timedelta(minutes=self.lead_minutes + self.tolerance_minutes),
        )

    def contains(self, scheduled_at: datetime, now: datetime) -> bool:
        start, end = self.bounds(now)
        return start <= scheduled_at <= end


THIRTY_MINUTE_WINDOW = ReminderWindow(WindowKind.THIRTY_MINUTE, lead_minutes=30)
FIVE_MINUTE_WINDOW = ReminderWindow(WindowKind.FIVE_MINUTE, lead_minutes=5)

REMINDER_WINDOWS: tuple[ReminderWindow, ...] = (
    THIRTY_MINUTE_WINDOW,
    FIVE_MINUTE_WINDOW,
)
