"""Notification dispatcher.

Delivers each message over push and email independently. A failure on one
channel, or for one recipient, is logged and counted but never stops the
rest of the batch. The only error that reaches the caller is a missing
email configuration, because then every email would fail the same way.
"""

from collections.abc import Sequence

from lumina_jobs.core.errors import NotificationConfigurationError
from lumina_jobs.core.logging import get_logger
from lumina_jobs.infrastructure.email_sender import EmailSender
from lumina_jobs.infrastructure.push_publisher import PushPublisher
from lumina_jobs.notifications.email_template import render_email
from lumina_jobs.notifications.models import (
    Delivery,
    DispatchSummary,
    NotificationMessage,
    Recipient,
)

logger = get_logger(__name__)


class NotificationDispatcher:
    """Fan a notification out to recipients over push and email.

    Example:
        dispatcher = NotificationDispatcher(push_publisher, email_sender)
        summary = await dispatcher.broadcast(recipients, message)
        logger.info("sent", **summary.as_dict())
    """

    def __init__(self, push: PushPublisher, email: EmailSender) -> None:
        self._push = push
        self._email = email

    @property
    def is_configured(self) -> bool:
        """Whether the email channel has credentials."""
        return self._email.is_configured

    async def broadcast(
        self,
        recipients: Sequence[Recipient],
        message: NotificationMessage,
    ) -> DispatchSummary:
        """Send the same ``message`` to every recipient."""
        return await self.dispatch([Delivery(r, message) for r in recipients])

    async def dispatch(self, deliveries: Sequence[Delivery]) -> DispatchSummary:
        """Deliver each (recipient, message) pair on both channels.

        Returns:
            Per-channel success/failure counts.

        Raises:
            NotificationConfigurationError: Email channel has no credentials.
        """
        if deliveries and not self._email.is_configured:
            raise NotificationConfigurationError("Email delivery is not configured")

        summary = DispatchSummary()
        for delivery in deliveries:
            summary.recipients += 1
            await self._send_push(delivery, summary)
            await self._send_email(delivery, summary)

        logger.info(
            "notifications_dispatched",
            kinds=sorted({d.message.kind for d in deliveries}),
            **summary.as_dict(),
        )
        return summary

    async def _send_push(self, delivery: Delivery, summary: DispatchSummary) -> None:
        recipient, message = delivery.recipient, delivery.message
        try:
            await self._push.send(recipient.user_id, message.push_payload())
        except Exception as e:
            summary.push_failed += 1
            logger.warning(
                "push_delivery_failed",
                user_id=str(recipient.user_id),
                kind=message.kind,
                error=str(e)[:300],
            )
        else:
            summary.push_sent += 1

    async def _send_email(self, delivery: Delivery, summary: DispatchSummary) -> None:
        recipient, message = delivery.recipient, delivery.message
        if not recipient.email:
            summary.email_skipped += 1
            return

        try:
            html = render_email(message, recipient)
            await self._email.send(recipient.email, message.email_subject, html)
        except Exception as e:
            summary.email_failed += 1
            logger.warning(
                "email_delivery_failed",
                user_id=str(recipient.user_id),
                kind=message.kind,
                error=str(e)[:300],
            )
        else:
            summary.email_sent += 1
