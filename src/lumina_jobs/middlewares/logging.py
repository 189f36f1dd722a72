"""Job execution logging middleware.

Binds the job id and task name into structlog contextvars for the
duration of a job so every log line emitted by services carries them.
"""

from typing import Any

import structlog
from taskiq import TaskiqMessage, TaskiqMiddleware, TaskiqResult

from lumina_jobs.core.logging import get_logger

logger = get_logger(__name__)


class JobLoggingMiddleware(TaskiqMiddleware):
    """Structured logging for all job executions.

    Logs are written to stdout in JSON format, picked up by
    container logging.
    """

    async def pre_execute(self, message: TaskiqMessage) -> TaskiqMessage:
        """Bind job context and log when the job starts.

        Args:
            message: TaskIQ message containing job details.

        Returns:
            Unmodified message for continued processing.
        """
        structlog.contextvars.bind_contextvars(
            job_id=message.task_id,
            task_name=message.task_name,
        )
        logger.info(
            "job_started",
            args=str(message.args)[:100],  # Truncate for safety
            labels=message.labels,
        )
        return message

    async def post_execute(
        self,
        message: TaskiqMessage,
        result: TaskiqResult[Any],
    ) -> None:
        """Log when job completes (success or failure) and drop job context.

        Args:
            message: TaskIQ message containing job details.
            result: TaskIQ result containing execution outcome.
        """
        log_data: dict[str, Any] = {
            "execution_time_seconds": result.execution_time,
            "is_error": result.is_err,
        }

        if result.is_err:
            log_data["error"] = str(result.error)[:500]
            logger.error("job_failed", **log_data)
        else:
            logger.info("job_completed", **log_data)

        structlog.contextvars.unbind_contextvars("job_id", "task_name")
