"""Centralized notification dispatcher.

Provides channel-agnostic notification delivery with:
- Per-recipient channel selection and fallback
- Idempotency (prevents duplicate sends)
- Failure isolation per recipient

Usage:
    from infrastructure.notifications import (
        Notification,
        Recipient,
        NotificationDispatcher,
        LogChannel,
    )

    dispatcher = NotificationDispatcher(channels={"log": LogChannel()})
    results = dispatcher.send(
        Notification(
            subject="Issue closed",
            message="Issue #12 was closed by alice.",
            recipients=[Recipient(user_id="42")],
            channels=["log"],
        )
    )
"""

from infrastructure.notifications.models import (
    Notification,
    Recipient,
    NotificationResult,
    NotificationStatus,
)
from infrastructure.notifications.dispatcher import NotificationDispatcher
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.log import LogChannel

__all__ = [
    "Notification",
    "Recipient",
    "NotificationResult",
    "NotificationStatus",
    "NotificationDispatcher",
    "NotificationChannel",
    "LogChannel",
]
