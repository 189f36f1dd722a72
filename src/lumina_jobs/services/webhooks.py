"""Video provider webhook processing.

The API acknowledges Daily webhooks immediately and enqueues the raw event;
this handler applies it to live-class state.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from lumina_jobs.core.logging import get_logger
from lumina_jobs.infrastructure.database import Database
from lumina_jobs.infrastructure.repositories.live_class import LiveClassRepository
from lumina_jobs.scheduling.clock import utc_now
from lumina_jobs.services.recordings import RecordingSyncService, SyncOutcome

logger = get_logger(__name__)

MEETING_STARTED = "meeting.started"
MEETING_ENDED = "meeting.ended"
RECORDING_READY = "recording.ready-to-download"


@dataclass
class VideoEventResult:
    """What a single webhook event changed."""

    event_type: str
    room_name: str | None = None
    handled: bool = False
    started_class_ids: list[UUID] = field(default_factory=list)
    ended_class_ids: list[UUID] = field(default_factory=list)
    rollover_class_ids: list[UUID] = field(default_factory=list)
    recording: SyncOutcome | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "room_name": self.room_name,
            "handled": self.handled,
            "started": [str(i) for i in self.started_class_ids],
            "ended": [str(i) for i in self.ended_class_ids],
            "rollover": [str(i) for i in self.rollover_class_ids],
            "recording": str(self.recording) if self.recording else None,
        }


def room_name_of(event: dict[str, Any]) -> str | None:
    """Room name from the event root or its payload."""
    payload = event.get("payload") or {}
    name = event.get("room_name") or payload.get("room_name") or payload.get("room")
    return str(name) if name else None


class VideoEventHandler:
    """Apply Daily meeting and recording events.

    Example:
        handler = VideoEventHandler(db, recordings)
        result = await handler.handle({"type": "meeting.ended", "room_name": "lumina-1"})
    """

    def __init__(self, database: Database, recordings: RecordingSyncService) -> None:
        self._database = database
        self._recordings = recordings

    async def handle(
        self,
        event: dict[str, Any],
        now: datetime | None = None,
    ) -> VideoEventResult:
        """Apply one webhook event.

        Args:
            event: Raw webhook body.
            now: Transition timestamp (defaults to the current time).

        Returns:
            VideoEventResult; ``rollover_class_ids`` lists classes to roll over.
        """
        now = now or utc_now()
        event_type = str(event.get("type") or "")
        room_name = room_name_of(event)
        result = VideoEventResult(event_type=event_type, room_name=room_name)

        if event_type not in (MEETING_STARTED, MEETING_ENDED, RECORDING_READY):
            logger.info("video_event_ignored", event_type=event_type)
            return result

        if not room_name:
            logger.warning("video_event_missing_room", event_type=event_type)
            return result

        result.handled = True

        if event_type == MEETING_STARTED:
            async with self._database.get_session() as session:
                result.started_class_ids = await LiveClassRepository(session).mark_live(
                    room_name, now
                )
            logger.info(
                "live_class_started",
                room_name=room_name,
                classes=len(result.started_class_ids),
            )

        elif event_type == MEETING_ENDED:
            async with self._database.get_session() as session:
                classes = LiveClassRepository(session)
                result.ended_class_ids = await classes.mark_ended(room_name, now)
                result.rollover_class_ids = await classes.find_awaiting_rollover(room_name)
            logger.info(
                "live_class_ended",
                room_name=room_name,
                classes=len(result.ended_class_ids),
                awaiting_rollover=len(result.rollover_class_ids),
            )

        else:
            async with self._database.get_session() as session:
                live_class = await LiveClassRepository(session).find_by_room(room_name)
            if live_class is None:
                logger.warning("recording_event_unknown_room", room_name=room_name)
                result.handled = False
                return result
            result.recording = await self._recordings.sync_class(live_class)
            logger.info(
                "recording_event_processed",
                class_id=str(live_class.id),
                outcome=str(result.recording),
            )

        return result
