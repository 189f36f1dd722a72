"""Domain events emitted by lumina-jobs.

Minimal local definitions; the web app owns its own event types.
"""

from lumina_jobs.events.live_class import (
    CourseAnnouncement,
    RecordingReady,
    RecurringClassCreated,
    announcement_from_payload,
)

__all__ = [
    "CourseAnnouncement",
    "RecordingReady",
    "RecurringClassCreated",
    "announcement_from_payload",
]
