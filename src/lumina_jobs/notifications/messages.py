"""Notification content for each class event.

Times shown to students are always regional (CAT). Optional fields that
are missing simply drop their line.
"""

from datetime import datetime
from uuid import UUID

from lumina_jobs.events.live_class import RecordingReady, RecurringClassCreated
from lumina_jobs.notifications.models import NotificationMessage
from lumina_jobs.scheduling.clock import format_regional, to_regional


def class_link(app_url: str, class_id: UUID) -> str:
    """Deep link that opens (and joins) a live class."""
    return f"{app_url.rstrip('/')}/live-class/{class_id}"


def class_reminder_message(
    class_id: UUID,
    title: str,
    scheduled_at: datetime | None,
    minutes_until: int,
    app_url: str,
) -> NotificationMessage:
    """Reminder sent when a class enters a lead-time window."""
    paragraphs = [f'Your live class "{title}" starts in {minutes_until} minutes.']
    if scheduled_at is not None:
        paragraphs.append(f"Start time: {format_regional(scheduled_at)}.")
    paragraphs.append("Join a minute early to check your audio and video.")

    return NotificationMessage(
        kind="class_reminder",
        title="Class Starting Soon!",
        body=f"{title} starts in {minutes_until} minutes",
        email_subject=f"Reminder: {title} starts in {minutes_until} minutes",
        email_heading="Your class is starting soon",
        email_paragraphs=tuple(paragraphs),
        action_label="Join Class",
        action_url=class_link(app_url, class_id),
        data={"classId": str(class_id), "minutesUntil": minutes_until},
    )


def recurring_class_created_message(
    event: RecurringClassCreated,
    app_url: str,
) -> NotificationMessage:
    """Announcement of the next occurrence of a recurring class."""
    paragraphs = [
        f'{event.tutor_name} has scheduled the next session of "{event.title}".',
        f"When: {format_regional(event.scheduled_at)}.",
    ]
    if event.description:
        paragraphs.append(event.description)

    local_start = to_regional(event.scheduled_at)
    return NotificationMessage(
        kind=RecurringClassCreated.kind,
        title="New Class Scheduled",
        body=f"{event.title} is on {local_start:%d %b} at {local_start:%H:%M} CAT",
        email_subject=f"New class scheduled: {event.title}",
        email_heading="Your next class is scheduled",
        email_paragraphs=tuple(paragraphs),
        action_label="View Class",
        action_url=class_link(app_url, event.class_id),
        data={"classId": str(event.class_id)},
    )


def recording_ready_message(event: RecordingReady, app_url: str) -> NotificationMessage:
    """Announcement that a class recording can be watched."""
    paragraphs = [f'The recording for "{event.title}" is now available.']
    if event.duration_seconds:
        minutes = max(1, round(event.duration_seconds / 60))
        paragraphs.append(f"Length: about {minutes} minutes.")
    if event.description:
        paragraphs.append(event.description)

    return NotificationMessage(
        kind=RecordingReady.kind,
        title="Class Recording Available",
        body=f'The recording for "{event.title}" is now available!',
        email_subject=f"Recording available: {event.title}",
        email_heading="Your class recording is ready",
        email_paragraphs=tuple(paragraphs),
        action_label="Watch Recording",
        action_url=f"{app_url.rstrip('/')}/recordings",
        data={"classId": str(event.class_id)},
    )
