"""Notification channel abstract base class."""

from abc import ABC, abstractmethod
from typing import List
from infrastructure.notifications.models import (
    Notification,
    NotificationResult,
)


class NotificationChannel(ABC):
    """Abstract base class for notification channels.

    Each channel handles delivery through one transport. Rendering and
    transport live behind this interface so the dispatcher and the
    notifications feature never depend on a specific platform.
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Channel identifier used for routing and logging."""
        pass

    @abstractmethod
    def send(self, notification: Notification) -> List[NotificationResult]:
        """Send notification to all recipients.

        Must handle errors gracefully and return NotificationResult
        with FAILED status rather than raising exceptions.

        Args:
            notification: Notification to send

        Returns:
            List of NotificationResult (one per recipient)
        """
        pass
