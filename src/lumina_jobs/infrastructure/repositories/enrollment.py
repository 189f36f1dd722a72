"""Enrollment repository.

Only active enrollments matter for notification fan-out.
"""

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession


class EnrollmentRepository:
    """Thin repository over ``academy_enrollments``."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def active_user_ids(self, course_id: UUID) -> list[UUID]:
        """Users actively enrolled in ``course_id``, deduplicated."""
        query = text("""
            SELECT DISTINCT user_id
            FROM academy_enrollments
            WHERE course_id = :course_id
              AND status = 'active'
        """)
        result = await self._session.execute(query, {"course_id": course_id})
        return [row.user_id for row in result.fetchall()]
