"""Recording reconciliation.

Ended classes without a recording are matched against Daily's recording
index by room name. A recording is accepted once it is finished and has a
download link; the guarded UPDATE makes acceptance (and the announcement
that follows it) happen once per class. Transcript storage and the AI
summary are best-effort extras that never undo an accepted recording.
"""

from dataclasses import dataclass, fields
from enum import StrEnum

from lumina_jobs.core.errors import ConfigurationError, VideoProviderConfigurationError
from lumina_jobs.core.logging import get_logger
from lumina_jobs.events.live_class import RecordingReady
from lumina_jobs.infrastructure.daily_client import DailyClient, Recording
from lumina_jobs.infrastructure.database import Database
from lumina_jobs.infrastructure.llm_client import LLMClient
from lumina_jobs.infrastructure.repositories.class_content import (
    ClassContentRepository,
)
from lumina_jobs.infrastructure.repositories.live_class import (
    LiveClass,
    LiveClassRepository,
)
from lumina_jobs.services.rollover import Announcer
from lumina_jobs.services.summaries import summarize_class

logger = get_logger(__name__)


class SyncOutcome(StrEnum):
    SYNCED = "synced"
    NOT_READY = "not_ready"
    NO_RECORDING = "no_recording"
    ALREADY_SYNCED = "already_synced"


@dataclass
class RecordingSyncResult:
    """Counts reported by one sync run."""

    synced: int = 0
    not_ready: int = 0
    no_recording: int = 0
    already_synced: int = 0
    errors: int = 0

    def record(self, outcome: SyncOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class RecordingSyncService:
    """Attach finished recordings to ended classes.

    Example:
        service = RecordingSyncService(db, daily, llm, announce=enqueue_announcement)
        result = await service.sync(limit=50)
    """

    def __init__(
        self,
        database: Database,
        daily: DailyClient,
        llm: LLMClient | None = None,
        announce: Announcer | None = None,
    ) -> None:
        self._database = database
        self._daily = daily
        self._llm = llm
        self._announce = announce

    async def sync(self, limit: int = 50) -> RecordingSyncResult:
        """Reconcile up to ``limit`` ended classes that lack a recording.

        Raises:
            VideoProviderConfigurationError: Daily API key is missing.
        """
        if not self._daily.is_configured:
            raise VideoProviderConfigurationError("DAILY_API_KEY is not configured")

        async with self._database.get_session() as session:
            pending = await LiveClassRepository(session).find_pending_recordings(limit)

        logger.info("recording_sync_pending", pending=len(pending))

        result = RecordingSyncResult()
        for live_class in pending:
            try:
                outcome = await self.sync_class(live_class)
            except ConfigurationError:
                raise
            except Exception as e:
                result.errors += 1
                logger.error(
                    "recording_sync_class_failed",
                    class_id=str(live_class.id),
                    room_name=live_class.daily_room_name,
                    error=str(e)[:500],
                )
                continue
            result.record(outcome)

        return result

    async def sync_class(self, live_class: LiveClass) -> SyncOutcome:
        """Try to accept a recording for one class."""
        if live_class.recording_url:
            return SyncOutcome.ALREADY_SYNCED
        if not live_class.daily_room_name:
            return SyncOutcome.NO_RECORDING

        recordings = await self._daily.list_recordings(live_class.daily_room_name)
        if not recordings:
            logger.info(
                "recording_not_found",
                class_id=str(live_class.id),
                room_name=live_class.daily_room_name,
            )
            return SyncOutcome.NO_RECORDING

        accepted = await self._accept(recordings)
        if accepted is None or not accepted.download_link:
            logger.info(
                "recording_not_ready",
                class_id=str(live_class.id),
                status=recordings[0].status,
            )
            return SyncOutcome.NOT_READY

        async with self._database.get_session() as session:
            stored = await LiveClassRepository(session).attach_recording(
                live_class.id, accepted.download_link, accepted.duration
            )
        if not stored:
            return SyncOutcome.ALREADY_SYNCED

        logger.info(
            "recording_synced",
            class_id=str(live_class.id),
            recording_id=accepted.id,
            duration_seconds=accepted.duration,
        )

        await self._store_post_class_content(live_class, accepted)
        await self._announce_ready(live_class, accepted)
        return SyncOutcome.SYNCED

    async def _accept(self, recordings: list[Recording]) -> Recording | None:
        for recording in recordings:
            if recording.is_finished and recording.download_link:
                return recording

        # The index may omit links for finished recordings; ask for the detail once.
        finished = next((r for r in recordings if r.is_finished and r.id), None)
        if finished is None:
            return None
        detail = await self._daily.get_recording(finished.id)
        if detail.is_finished and detail.download_link:
            return detail
        return None

    async def _store_post_class_content(
        self,
        live_class: LiveClass,
        recording: Recording,
    ) -> None:
        try:
            segments = await self._daily.get_transcript(recording.id)
            if not segments:
                return
            async with self._database.get_session() as session:
                saved = await ClassContentRepository(session).save_transcript(
                    live_class.id, segments
                )
            logger.info(
                "transcript_saved", class_id=str(live_class.id), segments=saved
            )
        except Exception as e:
            logger.warning(
                "transcript_sync_failed",
                class_id=str(live_class.id),
                error=str(e)[:300],
            )
            return

        if self._llm is None or not self._llm.is_configured:
            return

        try:
            summary = await summarize_class(self._llm, live_class.title, segments)
            if summary is None:
                return
            async with self._database.get_session() as session:
                await ClassContentRepository(session).save_summary(live_class.id, summary)
            logger.info(
                "class_summary_saved",
                class_id=str(live_class.id),
                key_points=len(summary.key_points),
            )
        except Exception as e:
            logger.warning(
                "class_summary_failed",
                class_id=str(live_class.id),
                error=str(e)[:300],
            )

    async def _announce_ready(self, live_class: LiveClass, recording: Recording) -> None:
        if self._announce is None or live_class.course_id is None:
            return

        event = RecordingReady(
            class_id=live_class.id,
            course_id=live_class.course_id,
            title=live_class.title,
            description=live_class.description,
            duration_seconds=recording.duration,
        )
        try:
            await self._announce(event)
        except Exception as e:
            logger.error(
                "recording_announcement_failed",
                class_id=str(live_class.id),
                error=str(e)[:300],
            )
