"""Log-only notification channel."""

import uuid
from typing import List

import structlog
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import (
    Notification,
    NotificationResult,
    NotificationStatus,
)

logger = structlog.get_logger()


class LogChannel(NotificationChannel):
    """Channel that records each delivery as a structured log line.

    Used where no transport is wired (local runs, dry runs). The message
    body is not logged, only its routing metadata.
    """

    def __init__(self, name: str = "log"):
        self._name = name

    @property
    def channel_name(self) -> str:
        return self._name

    def send(self, notification: Notification) -> List[NotificationResult]:
        results = []
        for recipient in notification.recipients:
            external_id = str(uuid.uuid4())
            logger.info(
                "notification_queued",
                channel=self._name,
                recipient_id=recipient.user_id,
                subject=notification.subject,
                external_id=external_id,
                metadata=notification.metadata,
            )
            results.append(
                NotificationResult(
                    notification=notification,
                    channel=self._name,
                    status=NotificationStatus.SENT,
                    message=f"Logged for user {recipient.user_id}",
                    external_id=external_id,
                )
            )
        return results
