"""Live-class domain events.

Events emitted by jobs after a live-class mutation has committed. Course
announcements travel between jobs as plain JSON payloads, so every event
here round-trips through ``to_payload``/``announcement_from_payload``.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, ClassVar
from uuid import UUID, uuid4


@dataclass(frozen=True, kw_only=True)
class RecurringClassCreated:
    """Next occurrence of a recurring class was scheduled.

    Emitted by the rollover job once the successor row is committed.
    Triggers a "new class scheduled" announcement to active enrollees.

    Attributes:
        event_id: Unique identifier for this event instance.
        occurred_at: Timestamp when the event occurred (UTC).
        class_id: The newly created class.
        preceding_class_id: The ended class it was rolled over from.
        course_id: Course whose enrollees are notified.
        title: Class title.
        description: Class description, if any.
        scheduled_at: Start of the new occurrence (UTC).
        tutor_name: Host display name.
    """

    kind: ClassVar[str] = "recurring_class_created"

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    class_id: UUID
    preceding_class_id: UUID
    course_id: UUID
    title: str
    description: str | None
    scheduled_at: datetime
    tutor_name: str = "Your Tutor"

    def to_payload(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "class_id": str(self.class_id),
            "preceding_class_id": str(self.preceding_class_id),
            "course_id": str(self.course_id),
            "title": self.title,
            "description": self.description,
            "scheduled_at": self.scheduled_at.isoformat(),
            "tutor_name": self.tutor_name,
        }


@dataclass(frozen=True, kw_only=True)
class RecordingReady:
    """A class recording was accepted and stored.

    Emitted by recording sync after ``recording_url`` is committed.

    Attributes:
        event_id: Unique identifier for this event instance.
        occurred_at: Timestamp when the event occurred (UTC).
        class_id: Class whose recording is available.
        course_id: Course whose enrollees are notified.
        title: Class title.
        description: Class description, if any.
        duration_seconds: Recording length.
    """

    kind: ClassVar[str] = "recording_ready"

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    class_id: UUID
    course_id: UUID
    title: str
    description: str | None = None
    duration_seconds: int = 0

    def to_payload(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "event_id": str(self.event_id),
            "occurred_at": self.occurred_at.isoformat(),
            "class_id": str(self.class_id),
            "course_id": str(self.course_id),
            "title": self.title,
            "description": self.description,
            "duration_seconds": self.duration_seconds,
        }


CourseAnnouncement = RecurringClassCreated | RecordingReady


def announcement_from_payload(payload: dict[str, Any]) -> CourseAnnouncement:
    """Rebuild an announcement event from its job payload.

    Raises:
        ValueError: Unknown announcement kind.
    """
    kind = payload.get("kind")
    common = {
        "event_id": UUID(payload["event_id"]),
        "occurred_at": datetime.fromisoformat(payload["occurred_at"]),
        "class_id": UUID(payload["class_id"]),
        "course_id": UUID(payload["course_id"]),
        "title": payload["title"],
        "description": payload.get("description"),
    }

    if kind == RecurringClassCreated.kind:
        return RecurringClassCreated(
            **common,
            preceding_class_id=UUID(payload["preceding_class_id"]),
            scheduled_at=datetime.fromisoformat(payload["scheduled_at"]),
            tutor_name=payload.get("tutor_name") or "Your Tutor",
        )
    if kind == RecordingReady.kind:
        return RecordingReady(
            **common,
            duration_seconds=int(payload.get("duration_seconds") or 0),
        )
    raise ValueError(f"Unknown announcement kind: {kind!r}")
