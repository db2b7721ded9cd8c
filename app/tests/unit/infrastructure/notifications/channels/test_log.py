"""Unit tests for LogChannel."""

import pytest
from unittest.mock import patch

from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.channels.log import LogChannel
from infrastructure.notifications.models import NotificationStatus


@pytest.mark.unit
class TestLogChannel:
    def test_is_notification_channel(self):
        assert isinstance(LogChannel(), NotificationChannel)

    def test_channel_name(self):
        assert LogChannel().channel_name == "log"
        assert LogChannel(name="audit").channel_name == "audit"

    def test_send_returns_sent_result_per_recipient(
        self, notification_factory, recipient_factory
    ):
        notification = notification_factory(
            recipients=[
                recipient_factory(user_id="u1", email="u1@example.com"),
                recipient_factory(user_id="u2", email="u2@example.com"),
            ]
        )

        results = LogChannel().send(notification)

        assert [r.status for r in results] == [NotificationStatus.SENT] * 2
        assert all(r.external_id for r in results)
        assert results[0].external_id != results[1].external_id

    def test_message_body_is_not_logged(self, notification_factory):
        notification = notification_factory(message="secret body")

        with patch("infrastructure.notifications.channels.log.logger") as logger:
            LogChannel().send(notification)

        kwargs = logger.info.call_args.kwargs
        assert "secret body" not in str(kwargs)
        assert kwargs["recipient_id"] == "user-1"
