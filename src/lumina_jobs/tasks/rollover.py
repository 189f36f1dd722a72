"""Recurring class rollover task."""

from typing import Annotated, Any
from uuid import UUID

from taskiq import Context, TaskiqDepends

from lumina_jobs.broker import broker
from lumina_jobs.core.errors import InvalidRecurrenceRule, LiveClassNotFound
from lumina_jobs.core.logging import get_logger
from lumina_jobs.core.settings import get_settings
from lumina_jobs.services.rollover import SessionRolloverService
from lumina_jobs.tasks.announcements import enqueue_announcement

logger = get_logger(__name__)
_settings = get_settings()


@broker.task(
    retry_on_error=True,
    max_retries=3,
    timeout=120,
    labels={"category": "scheduling"},
)
async def rollover_recurring_class(
    class_id: str,
    context: Annotated[Context, TaskiqDepends()],
) -> dict[str, Any]:
    """Create the next weekly occurrence of an ended recurring class.

    Enqueued by ``handle_video_event`` when a meeting ends, or by the API
    when a tutor ends a class. Safe to run more than once per class.

    Args:
        class_id: Id of the class that ended.
        context: TaskIQ context with injected dependencies.
            - context.state.database: Database instance.
            - context.state.daily_client: Daily API client.

    Returns:
        RolloverResult as a dict, or ``{"outcome": "invalid_rule"|"not_found"}``.

    Example:
        await rollover_recurring_class.kiq(str(live_class_id))
    """
    service = SessionRolloverService(
        context.state.database,
        context.state.daily_client,
        announce=enqueue_announcement,
        room_expiry_hours=_settings.room_expiry_hours,
    )

    try:
        result = await service.rollover(UUID(class_id))
    except InvalidRecurrenceRule as e:
        logger.error("rollover_invalid_rule", class_id=class_id, error=str(e))
        return {"outcome": "invalid_rule", "ended_class_id": class_id}
    except LiveClassNotFound:
        logger.warning("rollover_class_not_found", class_id=class_id)
        return {"outcome": "not_found", "ended_class_id": class_id}

    return result.as_dict()
