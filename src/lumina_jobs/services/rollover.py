"""Recurring class rollover.

When a recurring class ends, its next weekly occurrence is created with a
fresh video room. Rollover is safe to re-run: the successor row is keyed by
the ended class id, so a retried webhook or job never forks the lineage.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum
from typing import Any
from uuid import UUID

from lumina_jobs.core.errors import LiveClassNotFound
from lumina_jobs.core.logging import get_logger
from lumina_jobs.events.live_class import CourseAnnouncement, RecurringClassCreated
from lumina_jobs.infrastructure.daily_client import DailyClient, Room
from lumina_jobs.infrastructure.database import Database
from lumina_jobs.infrastructure.repositories.live_class import (
    LiveClass,
    LiveClassRepository,
)
from lumina_jobs.infrastructure.repositories.profile import ProfileRepository
from lumina_jobs.scheduling.clock import utc_now
from lumina_jobs.scheduling.recurrence import next_occurrence_for

logger = get_logger(__name__)

Announcer = Callable[[CourseAnnouncement], Awaitable[Any]]


class RolloverOutcome(StrEnum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    NOT_RECURRING = "not_recurring"
    NOT_ENDED = "not_ended"


@dataclass(frozen=True)
class RolloverResult:
    """Outcome of one rollover attempt.

    Attributes:
        outcome: What happened.
        ended_class_id: The class that was rolled over.
        next_class_id: Successor id (created or pre-existing).
        scheduled_at: Successor start (UTC).
        room_fallback: True if the room could not be provisioned.
    """

    outcome: RolloverOutcome
    ended_class_id: UUID
    next_class_id: UUID | None = None
    scheduled_at: datetime | None = None
    room_fallback: bool = False

    def as_dict(self) -> dict[str, Any]:
        return {
            "outcome": str(self.outcome),
            "ended_class_id": str(self.ended_class_id),
            "next_class_id": str(self.next_class_id) if self.next_class_id else None,
            "scheduled_at": self.scheduled_at.isoformat() if self.scheduled_at else None,
            "room_fallback": self.room_fallback,
        }


class SessionRolloverService:
    """Create the next occurrence of an ended recurring class.

    Example:
        service = SessionRolloverService(db, daily, announce=enqueue_announcement)
        result = await service.rollover(ended_class_id)
    """

    def __init__(
        self,
        database: Database,
        daily: DailyClient,
        announce: Announcer | None = None,
        room_expiry_hours: int = 4,
    ) -> None:
        self._database = database
        self._daily = daily
        self._announce = announce
        self._room_expiry = timedelta(hours=room_expiry_hours)

    async def rollover(
        self,
        class_id: UUID,
        now: datetime | None = None,
    ) -> RolloverResult:
        """Roll ``class_id`` over to its next occurrence.

        Args:
            class_id: The ended class.
            now: Reference instant (defaults to the current time).

        Returns:
            RolloverResult describing the successor, if any.

        Raises:
            LiveClassNotFound: ``class_id`` does not exist.
            InvalidRecurrenceRule: Stored recurrence day/time cannot be evaluated.
        """
        now = now or utc_now()

        async with self._database.get_session() as session:
            classes = LiveClassRepository(session)
            ended = await classes.get(class_id)
            if ended is None:
                raise LiveClassNotFound(class_id)

            if not ended.has_recurrence_rule:
                logger.info("rollover_skipped_not_recurring", class_id=str(class_id))
                return RolloverResult(RolloverOutcome.NOT_RECURRING, class_id)

            if ended.status != "ended":
                logger.info(
                    "rollover_skipped_not_ended",
                    class_id=str(class_id),
                    status=ended.status,
                )
                return RolloverResult(RolloverOutcome.NOT_ENDED, class_id)

            existing = await classes.find_successor(ended.id)

        if existing is not None:
            logger.info(
                "rollover_already_done",
                class_id=str(class_id),
                next_class_id=str(existing.id),
            )
            return RolloverResult(
                RolloverOutcome.ALREADY_EXISTS,
                class_id,
                next_class_id=existing.id,
                scheduled_at=existing.scheduled_at,
            )

        next_at = next_occurrence_for(
            ended.recurrence_day or "", ended.recurrence_time or "", now
        )
        room, room_fallback = await self._provision_room(ended, next_at, now)

        tutor_name: str | None = None
        async with self._database.get_session() as session:
            classes = LiveClassRepository(session)
            successor = await classes.insert_successor(
                ended, next_at, room.name, room.url
            )
            if successor is None:
                # A concurrent run inserted first; report its row.
                winner = await classes.find_successor(ended.id)
                logger.info(
                    "rollover_lost_race",
                    class_id=str(class_id),
                    next_class_id=str(winner.id) if winner else None,
                )
                return RolloverResult(
                    RolloverOutcome.ALREADY_EXISTS,
                    class_id,
                    next_class_id=winner.id if winner else None,
                    scheduled_at=winner.scheduled_at if winner else None,
                )
            if ended.course_id is not None:
                tutor_name = await ProfileRepository(session).get_display_name(
                    ended.host_id
                )

        logger.info(
            "recurring_class_created",
            class_id=str(class_id),
            next_class_id=str(successor.id),
            scheduled_at=successor.scheduled_at.isoformat(),
            room_name=room.name,
            room_fallback=room_fallback,
        )

        if ended.course_id is not None:
            await self._announce_created(ended, successor.id, next_at, tutor_name)

        return RolloverResult(
            RolloverOutcome.CREATED,
            class_id,
            next_class_id=successor.id,
            scheduled_at=successor.scheduled_at,
            room_fallback=room_fallback,
        )

    async def _provision_room(
        self,
        ended: LiveClass,
        next_at: datetime,
        now: datetime,
    ) -> tuple[Room, bool]:
        """Create the successor's room, falling back to a synthesized name.

        Returns:
            The room and whether the fallback was used.
        """
        name = f"lumina-{int(now.timestamp() * 1000)}"
        if self._daily.is_configured:
            try:
                return (
                    await self._daily.create_room(name, next_at + self._room_expiry),
                    False,
                )
            except Exception as e:
                logger.warning(
                    "rollover_room_fallback",
                    class_id=str(ended.id),
                    room_name=name,
                    error=str(e)[:300],
                )
        else:
            logger.warning(
                "rollover_room_fallback",
                class_id=str(ended.id),
                room_name=name,
                error="video provider not configured",
            )
        return Room(name=name, url=self._daily.room_url(name)), True

    async def _announce_created(
        self,
        ended: LiveClass,
        next_class_id: UUID,
        next_at: datetime,
        tutor_name: str | None,
    ) -> None:
        if self._announce is None or ended.course_id is None:
            return

        event = RecurringClassCreated(
            class_id=next_class_id,
            preceding_class_id=ended.id,
            course_id=ended.course_id,
            title=ended.title,
            description=ended.description,
            scheduled_at=next_at,
            tutor_name=tutor_name or "Your Tutor",
        )
        try:
            await self._announce(event)
        except Exception as e:
            # The successor is already committed; a lost announcement is tolerated.
            logger.error(
                "rollover_announcement_failed",
                class_id=str(next_class_id),
                error=str(e)[:300],
            )
