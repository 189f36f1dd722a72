"""Scheduling services driven by the worker tasks."""

from lumina_jobs.services.recordings import (
    RecordingSyncResult,
    RecordingSyncService,
    SyncOutcome,
)
from lumina_jobs.services.reminders import (
    ReminderRunResult,
    ReminderScanner,
    ReminderWorkItem,
)
from lumina_jobs.services.rollover import (
    Announcer,
    RolloverOutcome,
    RolloverResult,
    SessionRolloverService,
)
from lumina_jobs.services.webhooks import VideoEventHandler, VideoEventResult

__all__ = [
    "Announcer",
    "RecordingSyncResult",
    "RecordingSyncService",
    "ReminderRunResult",
    "ReminderScanner",
    "ReminderWorkItem",
    "RolloverOutcome",
    "RolloverResult",
    "SessionRolloverService",
    "SyncOutcome",
    "VideoEventHandler",
    "VideoEventResult",
]
