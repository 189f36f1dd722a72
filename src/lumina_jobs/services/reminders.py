"""Reminder window scanning and delivery.

Each poll looks for scheduled classes whose start falls in a lead-time
window and reminds their active enrollees. A (class, window) pair is
claimed in ``class_reminder_dispatches`` and the claim is committed before
the fan-out starts, so overlapping or repeated polls send each reminder at
most once.

The fan-out runs outside the claim transaction. A job cancelled by its
timeout partway through a large course therefore leaves the remaining
enrollees unreminded for that window instead of re-sending to the ones
already reached on the next poll. A failure before the claim commits
(recipient lookup, database errors) rolls the claim back and the next poll
retries it.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from lumina_jobs.core.errors import ConfigurationError, NotificationConfigurationError
from lumina_jobs.core.logging import get_logger
from lumina_jobs.infrastructure.database import Database
from lumina_jobs.infrastructure.repositories.enrollment import EnrollmentRepository
from lumina_jobs.infrastructure.repositories.live_class import (
    LiveClass,
    LiveClassRepository,
)
from lumina_jobs.infrastructure.repositories.profile import ProfileRepository
from lumina_jobs.infrastructure.repositories.reminder_dispatch import (
    ReminderDispatchRepository,
)
from lumina_jobs.notifications.dispatcher import NotificationDispatcher
from lumina_jobs.notifications.messages import class_reminder_message
from lumina_jobs.notifications.models import Delivery, DispatchSummary, Recipient
from lumina_jobs.scheduling.clock import utc_now
from lumina_jobs.scheduling.windows import REMINDER_WINDOWS, ReminderWindow

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReminderWorkItem:
    """One reminder owed to one enrollee."""

    user_id: UUID
    live_class: LiveClass
    window: ReminderWindow

    @property
    def minutes_until(self) -> int:
        return self.window.lead_minutes


@dataclass
class ReminderRunResult:
    """Counts reported by one reminder poll."""

    candidates: int = 0
    claimed: int = 0
    already_notified: int = 0
    skipped_no_course: int = 0
    reminders: int = 0
    push_sent: int = 0
    email_sent: int = 0
    failed: int = 0
    errors: int = 0

    def add_dispatch(self, summary: DispatchSummary) -> None:
        self.reminders += summary.recipients
        self.push_sent += summary.push_sent
        self.email_sent += summary.email_sent
        self.failed += summary.failed

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class ReminderScanner:
    """Find classes entering a reminder window and notify enrollees.

    Example:
        scanner = ReminderScanner(db, dispatcher, app_url="https://lmvacademy.app")
        result = await scanner.run()
    """

    def __init__(
        self,
        database: Database,
        dispatcher: NotificationDispatcher,
        app_url: str,
        windows: tuple[ReminderWindow, ...] = REMINDER_WINDOWS,
    ) -> None:
        self._database = database
        self._dispatcher = dispatcher
        self._app_url = app_url
        self._windows = windows

    async def scan(self, now: datetime | None = None) -> list[ReminderWorkItem]:
        """Work items for every class currently inside a window.

        Read-only: does not consult or write dispatch markers.
        """
        now = now or utc_now()
        items: list[ReminderWorkItem] = []
        async with self._database.get_session() as session:
            for window, live_class in await self._candidates(session, now):
                if live_class.course_id is None:
                    continue
                items.extend(await self._work_items(session, window, live_class))
        return items

    async def run(self, now: datetime | None = None) -> ReminderRunResult:
        """Claim and deliver every reminder that is due.

        Each (class, window) is claimed in its own transaction. Nothing is
        claimed when notification delivery is not configured.

        Raises:
            ConfigurationError: Notification delivery is not configured.
        """
        now = now or utc_now()
        result = ReminderRunResult()

        async with self._database.get_session() as session:
            candidates = await self._candidates(session, now)
        result.candidates = len(candidates)

        if candidates and not self._dispatcher.is_configured:
            raise NotificationConfigurationError("Email delivery is not configured")

        for window, live_class in candidates:
            if live_class.course_id is None:
                result.skipped_no_course += 1
                continue

            try:
                summary = await self._remind(window, live_class, now)
            except ConfigurationError:
                raise
            except Exception as e:
                result.errors += 1
                logger.error(
                    "class_reminder_failed",
                    class_id=str(live_class.id),
                    window=str(window.kind),
                    error=str(e)[:500],
                )
                continue

            if summary is None:
                result.already_notified += 1
                continue

            result.claimed += 1
            result.add_dispatch(summary)

        return result

    async def _remind(
        self,
        window: ReminderWindow,
        live_class: LiveClass,
        now: datetime,
    ) -> DispatchSummary | None:
        """Claim the window for ``live_class``, commit, then send.

        Returns:
            Dispatch counts, or None if another poll already claimed it.
        """
        async with self._database.get_session() as session:
            markers = ReminderDispatchRepository(session)
            if not await markers.claim(live_class.id, str(window.kind), now):
                logger.debug(
                    "class_reminder_already_sent",
                    class_id=str(live_class.id),
                    window=str(window.kind),
                )
                return None

            items = await self._work_items(session, window, live_class)
            recipients = await ProfileRepository(session).get_recipients(
                [item.user_id for item in items]
            )
            by_user = {recipient.user_id: recipient for recipient in recipients}

            message = class_reminder_message(
                class_id=live_class.id,
                title=live_class.title,
                scheduled_at=live_class.scheduled_at,
                minutes_until=window.lead_minutes,
                app_url=self._app_url,
            )
            deliveries = [
                Delivery(by_user.get(item.user_id, Recipient(item.user_id)), message)
                for item in items
            ]

            logger.info(
                "class_reminder_claimed",
                class_id=str(live_class.id),
                window=str(window.kind),
                recipients=len(deliveries),
            )

        return await self._dispatcher.dispatch(deliveries)

    async def _candidates(
        self,
        session: AsyncSession,
        now: datetime,
    ) -> list[tuple[ReminderWindow, LiveClass]]:
        classes = LiveClassRepository(session)
        found: list[tuple[ReminderWindow, LiveClass]] = []
        for window in self._windows:
            start, end = window.bounds(now)
            for live_class in await classes.find_scheduled_between(start, end):
                found.append((window, live_class))
        return found

    async def _work_items(
        self,
        session: AsyncSession,
        window: ReminderWindow,
        live_class: LiveClass,
    ) -> list[ReminderWorkItem]:
        if live_class.course_id is None:
            return []
        enrollments = EnrollmentRepository(session)
        user_ids = await enrollments.active_user_ids(live_class.course_id)
        return [ReminderWorkItem(user_id, live_class, window) for user_id in user_ids]
