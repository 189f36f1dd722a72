"""Regional time policy.

Classes are scheduled and displayed in Central Africa Time, a fixed UTC+2
offset with no daylight saving. Everything that turns wall-clock time into
an instant, or an instant into text, goes through this module.
"""

from datetime import UTC, datetime, timedelta, timezone

REGIONAL_OFFSET = timedelta(hours=2)
REGIONAL_TIMEZONE = timezone(REGIONAL_OFFSET, "CAT")


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC)


def to_regional(moment: datetime) -> datetime:
    """Convert an aware datetime to regional wall-clock time.

    Raises:
        ValueError: If ``moment`` is naive.
    """
    if moment.tzinfo is None:
        raise ValueError("naive datetime has no defined instant")
    return moment.astimezone(REGIONAL_TIMEZONE)


def format_regional(moment: datetime) -> str:
    """Human-readable regional start time, e.g. 'Monday, 13 January 2025 at 18:00 CAT'."""
    local = to_regional(moment)
    return f"{local:%A}, {local.day} {local:%B %Y} at {local:%H:%M} CAT"
