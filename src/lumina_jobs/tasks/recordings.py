"""Recording reconciliation task."""

from typing import Annotated, Any

from taskiq import Context, TaskiqDepends

from lumina_jobs.broker import broker
from lumina_jobs.core.logging import get_logger
from lumina_jobs.core.settings import get_settings
from lumina_jobs.services.recordings import RecordingSyncService
from lumina_jobs.tasks.announcements import enqueue_announcement

logger = get_logger(__name__)
_settings = get_settings()


@broker.task(
    retry_on_error=True,
    max_retries=3,
    timeout=600,
    schedule=[{"cron": _settings.recording_sync_cron}],
    labels={"category": "recordings", "schedule": _settings.recording_sync_cron},
)
async def sync_recordings(
    context: Annotated[Context, TaskiqDepends()],
) -> dict[str, Any]:
    """Attach finished Daily recordings to ended classes.

    Runs every 15 minutes via scheduler. Classes whose recording is not
    ready yet are picked up again on the next run.

    Args:
        context: TaskIQ context with injected dependencies.
            - context.state.database: Database instance.
            - context.state.daily_client: Daily API client.
            - context.state.llm_client: LLM client for summaries.

    Returns:
        RecordingSyncResult counts as a dict.
    """
    batch_size = _settings.recording_sync_batch_size
    logger.info("recording_sync_started", batch_size=batch_size)

    service = RecordingSyncService(
        context.state.database,
        context.state.daily_client,
        llm=context.state.llm_client,
        announce=enqueue_announcement,
    )
    result = (await service.sync(limit=batch_size)).as_dict()

    logger.info("recording_sync_completed", **result)
    return result
