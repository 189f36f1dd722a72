"""Task definitions for lumina-jobs.

All background tasks are defined in this package and registered with the broker.

Tasks are automatically registered with the broker via the @broker.task decorator.
Import this module to ensure all tasks are registered.
"""

# Re-export tasks for easy importing and to ensure registration
from lumina_jobs.tasks.announcements import announce_to_course
from lumina_jobs.tasks.recordings import sync_recordings
from lumina_jobs.tasks.reminders import send_class_reminders
from lumina_jobs.tasks.rollover import rollover_recurring_class
from lumina_jobs.tasks.webhooks import handle_video_event

__all__ = [
    "announce_to_course",
    "handle_video_event",
    "rollover_recurring_class",
    "send_class_reminders",
    "sync_recordings",
]
