"""Live class repository.

Thin raw-SQL adapter over the web app's ``live_classes`` table. Only the
queries the scheduling jobs need live here; the web app owns the model.
"""

from dataclasses import dataclass
from datetime import datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

_COLUMNS = """
    id, title, description, course_id, host_id, status,
    scheduled_at, started_at, ended_at,
    is_recurring, recurrence_day, recurrence_time, recurrence_description,
    daily_room_name, daily_room_url,
    recording_url, recording_duration_seconds,
    live_class_price, recording_price, is_purchasable,
    preceding_class_id
"""


@dataclass(frozen=True)
class LiveClass:
    """One occurrence of a live class.

    Attributes:
        id: Class identifier.
        title: Display title.
        description: Display description.
        course_id: Course whose enrollees attend, None for ad-hoc classes.
        host_id: Tutor who runs the class.
        status: "scheduled", "live" or "ended".
        scheduled_at: Planned start (UTC); None means "start immediately".
        started_at: Actual start.
        ended_at: Actual end.
        is_recurring: Whether the class repeats weekly.
        recurrence_day: Weekday name for recurring classes.
        recurrence_time: Regional ``HH:MM[:SS]`` for recurring classes.
        recurrence_description: Free-text schedule label.
        daily_room_name: Video room name.
        daily_room_url: Video room URL.
        recording_url: Download link once a recording is synced.
        recording_duration_seconds: Recording length.
        live_class_price: Price to attend live.
        recording_price: Price of the recording.
        is_purchasable: Whether the class can be bought individually.
        preceding_class_id: Ended occurrence this one was rolled over from.
    """

    id: UUID
    title: str
    description: str | None
    course_id: UUID | None
    host_id: UUID
    status: str
    scheduled_at: datetime | None = None
    started_at: datetime | None = None
    ended_at: datetime | None = None
    is_recurring: bool = False
    recurrence_day: str | None = None
    recurrence_time: str | None = None
    recurrence_description: str | None = None
    daily_room_name: str | None = None
    daily_room_url: str | None = None
    recording_url: str | None = None
    recording_duration_seconds: int | None = None
    live_class_price: Decimal | None = None
    recording_price: Decimal | None = None
    is_purchasable: bool | None = None
    preceding_class_id: UUID | None = None

    @property
    def has_recurrence_rule(self) -> bool:
        return bool(self.is_recurring and self.recurrence_day and self.recurrence_time)


@dataclass(frozen=True)
class Successor:
    """Identifier and start of a rolled-over occurrence."""

    id: UUID
    scheduled_at: datetime


def _time_text(value: Any) -> str | None:
    # recurrence_time may be a TIME column (asyncpg returns datetime.time) or text.
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


def _to_live_class(row: Any) -> LiveClass:
    return LiveClass(
        id=row.id,
        title=row.title,
        description=row.description,
        course_id=row.course_id,
        host_id=row.host_id,
        status=row.status,
        scheduled_at=row.scheduled_at,
        started_at=row.started_at,
        ended_at=row.ended_at,
        is_recurring=bool(row.is_recurring),
        recurrence_day=row.recurrence_day,
        recurrence_time=_time_text(row.recurrence_time),
        recurrence_description=row.recurrence_description,
        daily_room_name=row.daily_room_name,
        daily_room_url=row.daily_room_url,
        recording_url=row.recording_url,
        recording_duration_seconds=row.recording_duration_seconds,
        live_class_price=row.live_class_price,
        recording_price=row.recording_price,
        is_purchasable=row.is_purchasable,
        preceding_class_id=row.preceding_class_id,
    )


class LiveClassRepository:
    """Queries over ``live_classes`` needed by the scheduling jobs.

    Example:
        async with db.get_session() as session:
            repo = LiveClassRepository(session)
            due = await repo.find_scheduled_between(start, end)
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, class_id: UUID) -> LiveClass | None:
        query = text(f"SELECT {_COLUMNS} FROM live_classes WHERE id = :id")
        result = await self._session.execute(query, {"id": class_id})
        row = result.first()
        return _to_live_class(row) if row else None

    async def find_successor(self, preceding_class_id: UUID) -> Successor | None:
        """Return the occurrence already rolled over from ``preceding_class_id``."""
        query = text("""
            SELECT id, scheduled_at FROM live_classes
            WHERE preceding_class_id = :preceding_class_id
        """)
        result = await self._session.execute(
            query, {"preceding_class_id": preceding_class_id}
        )
        row = result.first()
        return Successor(id=row.id, scheduled_at=row.scheduled_at) if row else None

    async def insert_successor(
        self,
        ended: LiveClass,
        scheduled_at: datetime,
        room_name: str,
        room_url: str,
    ) -> Successor | None:
        """Clone ``ended`` into a new scheduled occurrence.

        Display, recurrence and pricing columns are copied in SQL straight
        from the ended row. The unique ``preceding_class_id`` constraint
        makes a second insert for the same ended class a no-op.

        Returns:
            The new occurrence, or None if a successor already existed.
        """
        query = text("""
            INSERT INTO live_classes (
                title, description, host_id, course_id, status, scheduled_at,
                daily_room_name, daily_room_url,
                is_recurring, recurrence_day, recurrence_time,
                recurrence_description,
                live_class_price, recording_price, is_purchasable,
                preceding_class_id
            )
            SELECT
                title, description, host_id, course_id, 'scheduled', :scheduled_at,
                :room_name, :room_url,
                TRUE, recurrence_day, recurrence_time,
                recurrence_description,
                live_class_price, recording_price, is_purchasable,
                id
            FROM live_classes
            WHERE id = :preceding_class_id
            ON CONFLICT (preceding_class_id) DO NOTHING
            RETURNING id, scheduled_at
        """)
        result = await self._session.execute(
            query,
            {
                "scheduled_at": scheduled_at,
                "room_name": room_name,
                "room_url": room_url,
                "preceding_class_id": ended.id,
            },
        )
        row = result.first()
        return Successor(id=row.id, scheduled_at=row.scheduled_at) if row else None

    async def find_scheduled_between(
        self,
        start: datetime,
        end: datetime,
    ) -> list[LiveClass]:
        """Scheduled classes starting within ``[start, end]`` (inclusive)."""
        query = text(f"""
            SELECT {_COLUMNS} FROM live_classes
            WHERE status = 'scheduled'
              AND scheduled_at IS NOT NULL
              AND scheduled_at >= :start
              AND scheduled_at <= :end
            ORDER BY scheduled_at ASC
        """)
        result = await self._session.execute(query, {"start": start, "end": end})
        return [_to_live_class(row) for row in result.fetchall()]

    async def find_pending_recordings(self, limit: int = 50) -> list[LiveClass]:
        """Ended classes with a room but no recording yet, newest first."""
        query = text(f"""
            SELECT {_COLUMNS} FROM live_classes
            WHERE status = 'ended'
              AND recording_url IS NULL
              AND daily_room_name IS NOT NULL
            ORDER BY ended_at DESC NULLS LAST
            LIMIT :limit
        """)
        result = await self._session.execute(query, {"limit": limit})
        return [_to_live_class(row) for row in result.fetchall()]

    async def find_by_room(self, room_name: str) -> LiveClass | None:
        """Most recently ended class held in ``room_name``."""
        query = text(f"""
            SELECT {_COLUMNS} FROM live_classes
            WHERE daily_room_name = :room_name AND status = 'ended'
            ORDER BY ended_at DESC NULLS LAST, created_at DESC
            LIMIT 1
        """)
        result = await self._session.execute(query, {"room_name": room_name})
        row = result.first()
        return _to_live_class(row) if row else None

    async def attach_recording(
        self,
        class_id: UUID,
        recording_url: str,
        duration_seconds: int,
    ) -> bool:
        """Store the recording link unless one is already set.

        Returns:
            True if this call stored it, False if another run got there first.
        """
        query = text("""
            UPDATE live_classes
            SET recording_url = :recording_url,
                recording_duration_seconds = :duration_seconds,
                updated_at = now()
            WHERE id = :id AND recording_url IS NULL
            RETURNING id
        """)
        result = await self._session.execute(
            query,
            {
                "id": class_id,
                "recording_url": recording_url,
                "duration_seconds": duration_seconds,
            },
        )
        return result.first() is not None

    async def mark_live(self, room_name: str, started_at: datetime) -> list[UUID]:
        """Move scheduled classes in ``room_name`` to live."""
        query = text("""
            UPDATE live_classes
            SET status = 'live', started_at = :started_at, updated_at = now()
            WHERE daily_room_name = :room_name AND status = 'scheduled'
            RETURNING id
        """)
        result = await self._session.execute(
            query, {"room_name": room_name, "started_at": started_at}
        )
        return [row.id for row in result.fetchall()]

    async def mark_ended(self, room_name: str, ended_at: datetime) -> list[UUID]:
        """Move live classes in ``room_name`` to ended."""
        query = text("""
            UPDATE live_classes
            SET status = 'ended', ended_at = :ended_at, updated_at = now()
            WHERE daily_room_name = :room_name AND status = 'live'
            RETURNING id
        """)
        result = await self._session.execute(
            query, {"room_name": room_name, "ended_at": ended_at}
        )
        return [row.id for row in result.fetchall()]

    async def find_awaiting_rollover(self, room_name: str) -> list[UUID]:
        """Ended recurring classes in ``room_name`` that have no successor yet.

        Covers classes ended by an earlier, interrupted run as well as the
        ones just transitioned by ``mark_ended``.
        """
        query = text("""
            SELECT c.id FROM live_classes c
            WHERE c.daily_room_name = :room_name
              AND c.status = 'ended'
              AND c.is_recurring
              AND NOT EXISTS (
                  SELECT 1 FROM live_classes s WHERE s.preceding_class_id = c.id
              )
            ORDER BY c.ended_at DESC NULLS LAST
        """)
        result = await self._session.execute(query, {"room_name": room_name})
        return [row.id for row in result.fetchall()]
