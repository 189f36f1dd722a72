"""Class reminder task."""

from typing import Annotated, Any

from taskiq import Context, TaskiqDepends

from lumina_jobs.broker import broker
from lumina_jobs.core.logging import get_logger
from lumina_jobs.core.settings import get_settings
from lumina_jobs.services.reminders import ReminderScanner

logger = get_logger(__name__)
_settings = get_settings()


@broker.task(
    retry_on_error=True,
    max_retries=3,
    timeout=300,
    schedule=[{"cron": _settings.reminder_check_cron}],
    labels={"category": "notifications", "schedule": _settings.reminder_check_cron},
)
async def send_class_reminders(
    context: Annotated[Context, TaskiqDepends()],
) -> dict[str, Any]:
    """Remind enrollees of classes starting in about 30 and 5 minutes.

    Runs every 2 minutes via scheduler. Each (class, window) pair is sent at
    most once no matter how often the poll runs.

    Args:
        context: TaskIQ context with injected dependencies.
            - context.state.database: Database instance.
            - context.state.dispatcher: NotificationDispatcher.

    Returns:
        ReminderRunResult counts as a dict.

    Example:
        # Enqueue manually (for testing)
        await send_class_reminders.kiq()
    """
    logger.info("send_class_reminders_started")

    scanner = ReminderScanner(
        context.state.database,
        context.state.dispatcher,
        app_url=_settings.app_url,
    )
    result = (await scanner.run()).as_dict()

    logger.info("send_class_reminders_completed", **result)
    return result
