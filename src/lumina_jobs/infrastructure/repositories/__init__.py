"""Repository implementations for data access.

Thin raw-SQL repositories over the web app's tables.
"""

from lumina_jobs.infrastructure.repositories.class_content import (
    ClassContentRepository,
    ClassSummary,
    TranscriptSegment,
)
from lumina_jobs.infrastructure.repositories.enrollment import EnrollmentRepository
from lumina_jobs.infrastructure.repositories.live_class import (
    LiveClass,
    LiveClassRepository,
    Successor,
)
from lumina_jobs.infrastructure.repositories.profile import ProfileRepository
from lumina_jobs.infrastructure.repositories.reminder_dispatch import (
    ReminderDispatchRepository,
)

__all__ = [
    "ClassContentRepository",
    "ClassSummary",
    "EnrollmentRepository",
    "LiveClass",
    "LiveClassRepository",
    "ProfileRepository",
    "ReminderDispatchRepository",
    "Successor",
    "TranscriptSegment",
]
