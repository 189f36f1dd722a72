"""Notification content, rendering and multi-channel dispatch."""

from lumina_jobs.notifications.models import (
    Delivery,
    DispatchSummary,
    NotificationMessage,
    Recipient,
)

__all__ = [
    "Delivery",
    "DispatchSummary",
    "NotificationMessage",
    "Recipient",
]
