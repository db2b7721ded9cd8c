"""Notification dispatcher with per-recipient channel fallback.

Each recipient of a Notification is delivered separately: channels are tried
in order until one reports success, and a channel that raises counts as a
failed attempt rather than aborting the others. When the notification carries
an idempotency key, a successful delivery is remembered in the idempotency
cache and a repeated send with the same key returns the remembered results
without touching any channel.

Usage Example:
    from infrastructure.notifications import (
        NotificationDispatcher,
        Notification,
        Recipient,
        LogChannel,
    )

    dispatcher = NotificationDispatcher(
        channels={"log": LogChannel()},
        idempotency_cache=cache,
    )

    results = dispatcher.send(
        Notification(
            subject="my-group/my-project | Fix login (#12)",
            message="Issue #12 was closed by alice.",
            recipients=[Recipient(user_id="42")],
            channels=["log"],
            idempotency_key="notifications:deliver:1a2b3c",
        )
    )
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
import structlog
from infrastructure.notifications.channels.base import NotificationChannel
from infrastructure.notifications.models import (
    Notification,
    NotificationResult,
    NotificationStatus,
    Recipient,
)
from infrastructure.idempotency.cache import IdempotencyCache

logger = structlog.get_logger()


class NotificationDispatcher:
    """Deliver notifications through named channels.

    Attributes:
        channels: Dict mapping channel name to NotificationChannel instance
        fallback_order: Channels tried when a notification names none
            (default: every registered channel, in registration order)
        idempotency_cache: Optional cache of delivered idempotency keys
        idempotency_ttl_seconds: How long a delivery is remembered
    """

    def __init__(
        self,
        channels: Dict[str, NotificationChannel],
        fallback_order: Optional[List[str]] = None,
        idempotency_cache: Optional[IdempotencyCache] = None,
        idempotency_ttl_seconds: int = 3600,
    ):
        self.channels = channels
        self.fallback_order = fallback_order or list(channels)
        self.idempotency_cache = idempotency_cache
        self.idempotency_ttl_seconds = idempotency_ttl_seconds

        logger.info(
            "initialized_notification_dispatcher",
            channels=list(channels),
            fallback_order=self.fallback_order,
            idempotency_enabled=idempotency_cache is not None,
        )

    def send(self, notification: Notification) -> List[NotificationResult]:
        """Deliver notification to each of its recipients.

        Returns:
            Every attempt made, one NotificationResult per (recipient, channel
            tried), or the remembered results of an earlier delivery.
        """
        key = notification.idempotency_key
        use_cache = bool(key) and self.idempotency_cache is not None

        if use_cache:
            remembered = self._remembered_results(key)
            if remembered is not None:
                logger.info(
                    "notification_already_sent",
                    idempotency_key=key,
                    result_count=len(remembered),
                )
                return remembered

        results: List[NotificationResult] = []
        for recipient in notification.recipients:
            results.extend(self._deliver_to(recipient, notification))

        success_count = sum(1 for r in results if r.is_success)
        # Only successful deliveries are remembered; a failed one is retried.
        if use_cache and success_count:
            self._remember(notification, results)

        logger.info(
            "notification_sent",
            recipient_count=len(notification.recipients),
            success_count=success_count,
            total_attempts=len(results),
            idempotency_key=key,
        )
        return results

    def _deliver_to(
        self, recipient: Recipient, notification: Notification
    ) -> List[NotificationResult]:
        attempts: List[NotificationResult] = []
        order = self._channel_order(recipient, notification)

        for channel_name in order:
            channel = self.channels.get(channel_name)
            if channel is None:
                logger.warning(
                    "channel_not_available",
                    channel_name=channel_name,
                    recipient_id=recipient.user_id,
                )
                continue

            single = notification.model_copy(
                update={"recipients": [recipient], "channels": [channel_name]}
            )
            outcome = self._attempt(channel, channel_name, single)
            attempts.extend(outcome)
            if any(r.is_success for r in outcome):
                logger.debug(
                    "recipient_notified",
                    recipient_id=recipient.user_id,
                    channel=channel_name,
                )
                return attempts

        logger.warning(
            "recipient_notification_failed",
            recipient_id=recipient.user_id,
            channels_tried=order,
        )
        return attempts

    @staticmethod
    def _attempt(
        channel: NotificationChannel, channel_name: str, notification: Notification
    ) -> List[NotificationResult]:
        try:
            return channel.send(notification)
        except Exception as e:
            logger.error(
                "channel_exception",
                channel_name=channel_name,
                recipient_id=notification.recipients[0].user_id,
                error=str(e),
                exc_info=True,
            )
            return [
                NotificationResult(
                    notification=notification,
                    channel=channel_name,
                    status=NotificationStatus.FAILED,
                    message=f"Channel exception: {e}",
                    error_code="CHANNEL_EXCEPTION",
                )
            ]

    def _channel_order(
        self, recipient: Recipient, notification: Notification
    ) -> List[str]:
        """Recipient preferences first, then the notification's own channels."""
        preferred = [
            ch for ch in recipient.preferred_channels if ch in notification.channels
        ]
        order = preferred + [ch for ch in notification.channels if ch not in preferred]
        return order or [ch for ch in self.fallback_order if ch in self.channels]

    def _remembered_results(self, key: str) -> Optional[List[NotificationResult]]:
        try:
            cached = self.idempotency_cache.get(key)
        except Exception as e:
            logger.error(
                "idempotency_cache_error",
                idempotency_key=key,
                error=str(e),
                exc_info=True,
            )
            return None

        if not cached:
            return None
        if not isinstance(cached, dict) or not cached.get("results"):
            logger.warning(
                "invalid_cache_structure",
                idempotency_key=key,
                cached_type=type(cached).__name__,
            )
            return None
        return [NotificationResult(**result) for result in cached["results"]]

    def _remember(
        self, notification: Notification, results: List[NotificationResult]
    ) -> None:
        key = notification.idempotency_key
        payload = {
            "results": [r.model_dump(mode="json") for r in results],
            "metadata": notification.metadata,
            "sent_at": datetime.now(timezone.utc).isoformat(),
        }
        try:
            self.idempotency_cache.set(
                key, payload, ttl_seconds=self.idempotency_ttl_seconds
            )
        except Exception as e:
            logger.error(
                "idempotency_cache_set_error",
                idempotency_key=key,
                error=str(e),
                exc_info=True,
            )
