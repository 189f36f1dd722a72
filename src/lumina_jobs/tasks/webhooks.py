"""Video provider webhook task."""

from typing import Annotated, Any

from taskiq import Context, TaskiqDepends

from lumina_jobs.broker import broker
from lumina_jobs.core.logging import get_logger
from lumina_jobs.services.recordings import RecordingSyncService
from lumina_jobs.services.webhooks import VideoEventHandler
from lumina_jobs.tasks.announcements import enqueue_announcement
from lumina_jobs.tasks.rollover import rollover_recurring_class

logger = get_logger(__name__)


@broker.task(
    retry_on_error=True,
    max_retries=3,
    timeout=120,
    labels={"category": "video"},
)
async def handle_video_event(
    event: dict[str, Any],
    context: Annotated[Context, TaskiqDepends()],
) -> dict[str, Any]:
    """Apply a Daily webhook event and queue follow-up work.

    On ``meeting.ended`` every ended recurring class in the room that still
    lacks a successor gets a rollover job, including classes ended by an
    earlier attempt of this job whose enqueue failed. Rollover is
    idempotent, so queueing it twice is harmless.

    Args:
        event: Raw webhook body as received by the API.
        context: TaskIQ context with injected dependencies.
            - context.state.database: Database instance.
            - context.state.daily_client: Daily API client.
            - context.state.llm_client: LLM client for summaries.

    Returns:
        VideoEventResult as a dict.
    """
    recordings = RecordingSyncService(
        context.state.database,
        context.state.daily_client,
        llm=context.state.llm_client,
        announce=enqueue_announcement,
    )
    result = await VideoEventHandler(context.state.database, recordings).handle(event)

    for class_id in result.rollover_class_ids:
        await rollover_recurring_class.kiq(str(class_id))
        logger.info("rollover_enqueued", class_id=str(class_id))

    return result.as_dict()
