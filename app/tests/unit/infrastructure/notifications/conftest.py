"""Test fixtures for notification infrastructure tests."""

import pytest
from unittest.mock import MagicMock

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import NotificationStatus
from tests.factories.notifications import (
    make_notification,
    make_notification_result,
    make_recipient,
)


@pytest.fixture
def recipient_factory():
    """Factory for creating Recipient instances."""
    return make_recipient


@pytest.fixture
def notification_factory():
    """Factory for creating Notification instances.

    Example:
        notification = notification_factory(channels=["email", "log"])
    """
    return make_notification


@pytest.fixture
def notification_result_factory():
    return make_notification_result


@pytest.fixture
def channel_factory():
    """Factory for mocked channels that answer with a fixed status.

    Example:
        failing = channel_factory("email", NotificationStatus.FAILED)
    """

    def _factory(name: str, status: NotificationStatus = NotificationStatus.SENT):
        channel = MagicMock(spec=NotificationChannel)
        channel.channel_name = name

        def _send(notification):
            return [
                make_notification_result(
                    notification=notification, channel=name, status=status
                )
                for _ in notification.recipients
            ]

        channel.send.side_effect = _send
        return channel

    return _factory


@pytest.fixture
def mock_notification_channel(channel_factory):
    return channel_factory("log")
