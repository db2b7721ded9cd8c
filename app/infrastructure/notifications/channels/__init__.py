"""Notification channel implementations."""

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.log import LogChannel

__all__ = [
    "NotificationChannel",
    "LogChannel",
]
