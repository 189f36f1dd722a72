"""Course announcement tasks.

Announcements are enqueued only after the mutation that triggered them has
committed, so a failed fan-out never rolls back the class change.
"""

from typing import Annotated, Any

from taskiq import Context, TaskiqDepends

from lumina_jobs.broker import broker
from lumina_jobs.core.logging import get_logger
from lumina_jobs.core.settings import get_settings
from lumina_jobs.events.live_class import (
    CourseAnnouncement,
    RecordingReady,
    announcement_from_payload,
)
from lumina_jobs.infrastructure.repositories.enrollment import EnrollmentRepository
from lumina_jobs.infrastructure.repositories.profile import ProfileRepository
from lumina_jobs.notifications.messages import (
    recording_ready_message,
    recurring_class_created_message,
)
from lumina_jobs.notifications.models import NotificationMessage

logger = get_logger(__name__)
_settings = get_settings()


def _message_for(announcement: CourseAnnouncement) -> NotificationMessage:
    if isinstance(announcement, RecordingReady):
        return recording_ready_message(announcement, _settings.app_url)
    return recurring_class_created_message(announcement, _settings.app_url)


# No automatic retry: a retried fan-out would re-send to everyone already reached.
@broker.task(
    retry_on_error=False,
    timeout=300,
    labels={"category": "notifications"},
)
async def announce_to_course(
    announcement: dict[str, Any],
    context: Annotated[Context, TaskiqDepends()],
) -> dict[str, Any]:
    """Notify every active enrollee of a course about a class event.

    Args:
        announcement: Serialized event (``RecurringClassCreated`` or
            ``RecordingReady`` payload).
        context: TaskIQ context with injected dependencies.
            - context.state.database: Database instance.
            - context.state.dispatcher: NotificationDispatcher.

    Returns:
        Dict with the event kind and dispatch counts.

    Example:
        await announce_to_course.kiq(event.to_payload())
    """
    event = announcement_from_payload(announcement)

    async with context.state.database.get_session() as session:
        user_ids = await EnrollmentRepository(session).active_user_ids(event.course_id)
        recipients = await ProfileRepository(session).get_recipients(user_ids)

    summary = await context.state.dispatcher.broadcast(recipients, _message_for(event))

    result = {"kind": event.kind, "class_id": str(event.class_id), **summary.as_dict()}
    logger.info("course_announcement_sent", **result)
    return result


async def enqueue_announcement(event: CourseAnnouncement) -> None:
    """Queue a course announcement for ``event``."""
    await announce_to_course.kiq(event.to_payload())
    logger.info(
        "course_announcement_enqueued",
        kind=event.kind,
        class_id=str(event.class_id),
        course_id=str(event.course_id),
    )
