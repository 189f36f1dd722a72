"""Profile repository.

Resolves user ids to contact details. Emails live in Supabase's
``auth.users``; display names live in ``profiles``.
"""

from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from lumina_jobs.notifications.models import Recipient


class ProfileRepository:
    """Identity lookups needed to address notifications."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_recipients(self, user_ids: list[UUID]) -> list[Recipient]:
        """Resolve ``user_ids`` in order.

        Users with no auth row still get a Recipient (push only), so a
        missing profile never drops someone from the fan-out.
        """
        if not user_ids:
            return []

        query = text("""
            SELECT u.id AS user_id, u.email, p.full_name
            FROM auth.users u
            LEFT JOIN profiles p ON p.user_id = u.id
            WHERE u.id = ANY(:user_ids)
        """)
        result = await self._session.execute(query, {"user_ids": list(user_ids)})
        found = {
            row.user_id: Recipient(
                user_id=row.user_id,
                email=row.email,
                display_name=row.full_name,
            )
            for row in result.fetchall()
        }
        return [found.get(user_id, Recipient(user_id=user_id)) for user_id in user_ids]

    async def get_display_name(self, user_id: UUID) -> str | None:
        query = text("SELECT full_name FROM profiles WHERE user_id = :user_id")
        result = await self._session.execute(query, {"user_id": user_id})
        name: str | None = result.scalar_one_or_none()
        return name
