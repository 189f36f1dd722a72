"""Reminder dispatch markers.

One row per (class, window) in ``class_reminder_dispatches``. The primary
key makes the claim atomic: of any number of overlapping scans, exactly
one insert returns a row.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


class ReminderDispatchRepository:
    """Claims reminder windows for at-most-once delivery."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def claim(
        self,
        class_id: UUID,
        window_kind: str,
        dispatched_at: datetime,
    ) -> bool:
        """Record that ``window_kind`` is being sent for ``class_id``.

        The marker commits or rolls back with the caller's transaction.

        Returns:
            True if this call claimed the window, False if already claimed.
        """
        query = text("""
            INSERT INTO class_reminder_dispatches (class_id, window_kind, dispatched_at)
            VALUES (:class_id, :window_kind, :dispatched_at)
            ON CONFLICT (class_id, window_kind) DO NOTHING
            RETURNING class_id
        """)
        result = await self._session.execute(
            query,
            {
                "class_id": class_id,
                "window_kind": window_kind,
                "dispatched_at": dispatched_at,
            },
        )
        return result.first() is not None
