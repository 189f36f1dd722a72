"""TaskIQ scheduler configuration.

Cron schedules declared on tasks (``schedule=[{"cron": ...}]``) are read by
the label source; ad-hoc schedules added at runtime live in Redis.

Run with:
    taskiq scheduler lumina_jobs.scheduler:scheduler lumina_jobs.tasks
"""

from taskiq import TaskiqScheduler
from taskiq.schedule_sources import LabelScheduleSource
from taskiq_redis import RedisScheduleSource

from lumina_jobs.broker import broker
from lumina_jobs.core.settings import get_settings

# Get settings lazily
_settings = get_settings()

# Schedule source stores scheduled tasks in Redis
schedule_source = RedisScheduleSource(_settings.redis_url)

# Scheduler manages execution timing
scheduler = TaskiqScheduler(
    broker=broker,
    sources=[LabelScheduleSource(broker), schedule_source],
)
