"""TaskIQ broker configuration.

This module configures the central broker instance connecting to Redis
for task queuing and result storage, and the collaborators shared by
every task execution.
"""

from taskiq import TaskiqEvents, TaskiqState
from taskiq_redis import ListQueueBroker, RedisAsyncResultBackend

from lumina_jobs.core.logging import configure_logging, get_logger
from lumina_jobs.core.settings import get_settings
from lumina_jobs.middlewares.logging import JobLoggingMiddleware

logger = get_logger(__name__)

# Get settings lazily
_settings = get_settings()

# Broker for task queuing with middleware
broker = (
    ListQueueBroker(
        url=_settings.redis_url,
        queue_name="lumina:jobs",
    )
    .with_result_backend(
        RedisAsyncResultBackend(
            redis_url=_settings.redis_url,
            result_ex_time=_settings.job_result_ttl,
        )
    )
    .with_middlewares(
        JobLoggingMiddleware(),
    )
)


@broker.on_event(TaskiqEvents.WORKER_STARTUP)
async def startup(state: TaskiqState) -> None:
    """Initialize resources shared across all task executions.

    This runs ONCE when the worker process starts, not per-task.
    Resources are stored in `state` and accessed via TaskiqDepends.

    Args:
        state: TaskIQ state object for storing shared resources.
    """
    configure_logging()
    logger.info("worker_startup")

    # Import here to avoid circular imports and allow lazy loading
    from redis.asyncio import Redis

    from lumina_jobs.infrastructure.daily_client import DailyClient
    from lumina_jobs.infrastructure.database import Database
    from lumina_jobs.infrastructure.email_sender import EmailSender
    from lumina_jobs.infrastructure.llm_client import LLMClient
    from lumina_jobs.infrastructure.push_publisher import PushPublisher
    from lumina_jobs.notifications.dispatcher import NotificationDispatcher

    state.database = Database(_settings.database_url)

    # Push events go through the same Redis the web-push gateway subscribes to
    state.push_redis = Redis.from_url(_settings.redis_url)
    state.push_publisher = PushPublisher(state.push_redis)

    state.email_sender = EmailSender(
        api_key=_settings.email_api_key,
        api_url=_settings.email_api_url,
        from_email=_settings.email_from,
        sender_name=_settings.email_sender_name,
        timeout=_settings.http_timeout_seconds,
    )
    state.dispatcher = NotificationDispatcher(state.push_publisher, state.email_sender)

    state.daily_client = DailyClient(
        api_key=_settings.daily_api_key,
        base_url=_settings.daily_api_url,
        domain=_settings.daily_domain,
        timeout=_settings.http_timeout_seconds,
    )
    state.llm_client = LLMClient(
        api_key=_settings.llm_api_key,
        api_url=_settings.llm_api_url,
        model=_settings.llm_model,
    )

    logger.info(
        "worker_startup_complete",
        database_url=_settings.database_url[:20] + "...",  # Truncate for safety
        database_reachable=await state.database.check_connection(),
        email_configured=state.email_sender.is_configured,
        video_configured=state.daily_client.is_configured,
        llm_configured=state.llm_client.is_configured,
    )


@broker.on_event(TaskiqEvents.WORKER_SHUTDOWN)
async def shutdown(state: TaskiqState) -> None:
    """Clean up resources when worker shuts down.

    Args:
        state: TaskIQ state object containing shared resources.
    """
    logger.info("worker_shutdown")

    if getattr(state, "database", None) is not None:
        await state.database.close()
        logger.info("worker_database_closed")

    for name in ("push_publisher", "email_sender", "daily_client", "llm_client"):
        resource = getattr(state, name, None)
        if resource is not None:
            await resource.close()
            logger.info("worker_resource_closed", resource=name)

    logger.info("worker_shutdown_complete")
