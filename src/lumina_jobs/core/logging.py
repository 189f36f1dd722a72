"""Structured logging configuration for lumina-jobs.

Events go through the standard library root logger so that worker output,
taskiq's own records and ours share one stream on stdout: JSON lines in
production, colored console output when LOG_LEVEL=DEBUG. Job context
(job_id, task_name) is merged in from structlog contextvars bound by
JobLoggingMiddleware.
"""

import logging
import sys
from typing import Any

import structlog

from lumina_jobs.core.settings import get_settings


def _renderer(is_dev: bool) -> list[structlog.types.Processor]:
    if is_dev:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging() -> None:
    """Configure stdlib logging and structlog for the worker process.

    Safe to call more than once; the root handler is replaced each time.
    """
    _settings = get_settings()
    log_level: Any = logging.getLevelName(_settings.log_level)

    # structlog renders the whole line; the handler only writes it out.
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(_settings.log_level == "DEBUG"),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger bound to a stdlib logger called ``name``.

    Args:
        name: Logger name, typically __name__ of the calling module.
    """
    return structlog.get_logger(name)
