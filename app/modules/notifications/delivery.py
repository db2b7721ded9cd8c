"""Delivery of resolved recipients through the notification dispatcher.

Builds one single-recipient Notification per user so every (event,
recipient) pair gets its own idempotency key: delivering the same event
twice never sends a second message to a user who already received one.
"""

from typing import Dict, FrozenSet, List, Optional, Tuple

from infrastructure.idempotency import IdempotencyKeyBuilder
from infrastructure.logging import get_module_logger
from infrastructure.notifications import (
    Notification,
    NotificationDispatcher,
    NotificationResult,
    Recipient,
)
from modules.notifications.domain.errors import collaborator_call
from modules.notifications.domain.models import Event, EventKind, User
from modules.notifications.domain.types import UserDirectory

logger = get_module_logger()

MESSAGE_TEMPLATES: Dict[EventKind, str] = {
    EventKind.NEW_ISSUE: "{ref} was opened by {actor}.",
    EventKind.REASSIGNED_ISSUE: "{ref} was reassigned to {assignee} by {actor}.",
    EventKind.RELABELED_ISSUE: "{ref} was labeled {labels} by {actor}.",
    EventKind.CLOSED_ISSUE: "{ref} was closed by {actor}.",
    EventKind.REOPENED_ISSUE: "{ref} was reopened by {actor}.",
    EventKind.NEW_MERGE_REQUEST: "{ref} was opened by {actor}.",
    EventKind.REASSIGNED_MERGE_REQUEST: "{ref} was reassigned to {assignee} by {actor}.",
    EventKind.RELABELED_MERGE_REQUEST: "{ref} was labeled {labels} by {actor}.",
    EventKind.CLOSED_MERGE_REQUEST: "{ref} was closed by {actor}.",
    EventKind.MERGED_MERGE_REQUEST: "{ref} was merged by {actor}.",
    EventKind.REOPENED_MERGE_REQUEST: "{ref} was reopened by {actor}.",
    EventKind.NEW_NOTE: "{actor} commented on {ref}:\n\n{body}",
    EventKind.PROJECT_MOVED: "Project {old_path} was moved to {path}.",
}

ITEM_NAMES = {
    "issue": "Issue",
    "merge_request": "Merge request",
    "commit": "Commit",
    "snippet": "Snippet",
}


def describe_event(event: Event) -> Tuple[str, str]:
    """Return the (subject, message) pair used for every recipient of event."""
    project = event.project
    item = event.subject
    actor = event.actor.username if event.actor is not None else "the system"

    if item is None:
        subject = f"{project.path} | Project moved"
        ref = project.path
    else:
        ref = f"{ITEM_NAMES[item.kind.value]} {item.id}"
        title = item.title or ref
        subject = f"{project.path} | {title} ({item.id})"

    message = MESSAGE_TEMPLATES[event.kind].format(
        ref=ref,
        actor=actor,
        assignee=(
            item.assignee.username
            if item is not None and item.assignee is not None
            else "nobody"
        ),
        labels=", ".join(label.title for label in event.added_labels) or "none",
        body=event.note.body if event.note is not None else "",
        old_path=event.old_path or project.path,
        path=project.path,
    )
    return subject, message


class NotificationDelivery:
    """Dispatcher seam of the notification service.

    Args:
        dispatcher: Multi-channel dispatcher doing the actual sending.
        user_directory: Resolves recipient ids to user records.
        channels: Channel names to try, in order.
        key_builder: Builds the per-(event, recipient) idempotency key.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        user_directory: UserDirectory,
        channels: Optional[List[str]] = None,
        key_builder: Optional[IdempotencyKeyBuilder] = None,
    ):
        self.dispatcher = dispatcher
        self.user_directory = user_directory
        self.channels = list(channels or ["email"])
        self.key_builder = key_builder or IdempotencyKeyBuilder("notifications")

    def deliver(
        self, recipients: FrozenSet[str], event: Event
    ) -> Dict[str, List[NotificationResult]]:
        """Send event to each recipient.

        Failures are isolated per recipient: one that raises is logged and
        reported with an empty result list.

        Returns:
            Dict mapping recipient id to its delivery results
        """
        if not recipients:
            logger.debug("no_recipients_to_deliver", event_id=event.event_id)
            return {}

        with collaborator_call("user_directory"):
            users = self.user_directory.get_users(sorted(recipients))

        missing = set(recipients) - {user.id for user in users}
        if missing:
            logger.warning(
                "recipients_not_found", event_id=event.event_id, user_ids=sorted(missing)
            )

        subject, message = describe_event(event)
        report: Dict[str, List[NotificationResult]] = {}

        for user in users:
            try:
                notification = self._build_notification(user, event, subject, message)
                report[user.id] = self.dispatcher.send(notification)
            except Exception as e:
                logger.error(
                    "recipient_delivery_failed",
                    event_id=event.event_id,
                    recipient_id=user.id,
                    error=str(e),
                    exc_info=True,
                )
                report[user.id] = []

        delivered = sum(
            1 for results in report.values() if any(r.is_success for r in results)
        )
        logger.info(
            "event_delivered",
            event_id=event.event_id,
            recipient_count=len(report),
            delivered_count=delivered,
        )
        return report

    def _build_notification(
        self, user: User, event: Event, subject: str, message: str
    ) -> Notification:
        item = event.subject
        return Notification(
            subject=subject,
            message=message,
            recipients=[
                Recipient(
                    user_id=user.id,
                    username=user.username,
                    email=user.email,
                    preferred_channels=self.channels,
                )
            ],
            channels=self.channels,
            metadata={
                "event_id": event.event_id,
                "event_kind": event.kind.value,
                "project_id": event.project.id,
                "item_id": item.id if item is not None else None,
                "recipient_id": user.id,
            },
            idempotency_key=self.key_builder.build(
                "deliver", event_id=event.event_id, recipient_id=user.id
            ),
        )
