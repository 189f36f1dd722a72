"""Notification value objects."""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

DEFAULT_ICON = "/pwa-192x192.png"


@dataclass(frozen=True)
class Recipient:
    """A user resolved to their contact details.

    Attributes:
        user_id: Auth user id (push target).
        email: Contact email; None skips the email channel.
        display_name: Profile full name, if the user has one.
    """

    user_id: UUID
    email: str | None = None
    display_name: str | None = None


@dataclass(frozen=True)
class NotificationMessage:
    """Channel-neutral content of one notification.

    Attributes:
        kind: Notification type, carried in the push data as ``type``.
        title: Push title.
        body: Push body.
        email_subject: Email subject line.
        email_heading: Heading rendered at the top of the email.
        email_paragraphs: Plain-text paragraphs of the email body.
        action_label: Button label; the button is omitted without ``action_url``.
        action_url: Deep link into the web app.
        data: Extra push payload fields.
        icon: Push icon path.
    """

    kind: str
    title: str
    body: str
    email_subject: str
    email_heading: str
    email_paragraphs: tuple[str, ...] = ()
    action_label: str | None = None
    action_url: str | None = None
    data: dict[str, Any] = field(default_factory=dict)
    icon: str = DEFAULT_ICON

    def push_payload(self) -> dict[str, Any]:
        data = {"type": self.kind, **self.data}
        if self.action_url:
            data.setdefault("url", self.action_url)
        return {
            "title": self.title,
            "body": self.body,
            "icon": self.icon,
            "data": data,
        }


@dataclass(frozen=True)
class Delivery:
    """One message for one recipient."""

    recipient: Recipient
    message: NotificationMessage


@dataclass
class DispatchSummary:
    """Per-channel outcome counts of a dispatch.

    Attributes:
        recipients: Deliveries processed.
        push_sent: Push events published.
        push_failed: Push events that raised.
        email_sent: Emails accepted by the provider.
        email_failed: Emails that raised.
        email_skipped: Recipients without an email address.
    """

    recipients: int = 0
    push_sent: int = 0
    push_failed: int = 0
    email_sent: int = 0
    email_failed: int = 0
    email_skipped: int = 0

    @property
    def attempted(self) -> int:
        return self.push_sent + self.push_failed + self.email_sent + self.email_failed

    @property
    def failed(self) -> int:
        return self.push_failed + self.email_failed

    def as_dict(self) -> dict[str, int]:
        return {
            "recipients": self.recipients,
            "push_sent": self.push_sent,
            "push_failed": self.push_failed,
            "email_sent": self.email_sent,
            "email_failed": self.email_failed,
            "email_skipped": self.email_skipped,
            "attempted": self.attempted,
            "failed": self.failed,
        }
