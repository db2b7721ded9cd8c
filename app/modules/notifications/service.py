"""Notification service facade.

One method per lifecycle event. Each builds the Event, resolves its
recipients and hands them to the dispatcher, returning the resolved id set.

Usage:
    from modules.notifications import create_notification_service

    service = create_notification_service(directory, subscriptions, settings_store)
    recipients = service.close_issue(issue, current_user)
"""

from typing import Dict, FrozenSet, Iterable, Optional

from infrastructure.configuration import Settings
from infrastructure.idempotency import IdempotencyCache
from infrastructure.logging import bind_event_context, get_module_logger
from infrastructure.notifications import (
    LogChannel,
    NotificationChannel,
    NotificationDispatcher,
)
from infrastructure.services import get_idempotency_cache, get_settings
from modules.notifications.access import AccessLevelCache
from modules.notifications.delivery import NotificationDelivery
from modules.notifications.domain.errors import (
    CollaboratorUnavailable,
    MalformedEvent,
)
from modules.notifications.domain.models import (
    AccessLevel,
    Event,
    EventKind,
    Label,
    Note,
    NotificationLevel,
    Project,
    User,
    WorkItem,
)
from modules.notifications.domain.types import (
    AccessLevelProvider,
    Dispatcher,
    NotificationSettingStore,
    SubscriptionStore,
    TeamDirectory,
    UserDirectory,
)
from modules.notifications.engine import RecipientResolutionEngine
from modules.notifications.mentions import RegexMentionExtractor
from modules.notifications.preferences import PreferenceResolver

logger = get_module_logger()


class NotificationService:
    """Facade over recipient resolution and delivery.

    Every method takes an optional ``event_id``. Passing the upstream event
    identity makes a redelivered event resolve to the same delivery keys, so
    recipients already notified are not notified again. Without one, each
    call is a new event; ``new_note`` falls back to the note's id.

    Args:
        engine: Recipient resolution engine.
        dispatcher: Anything satisfying the Dispatcher contract.
    """

    def __init__(self, engine: RecipientResolutionEngine, dispatcher: Dispatcher):
        self.engine = engine
        self.dispatcher = dispatcher

    # Issues

    def new_issue(
        self, issue: WorkItem, current_user: User, event_id: Optional[str] = None
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.NEW_ISSUE,
                issue.project,
                event_id,
                actor=current_user,
                item=issue,
            )
        )

    def reassigned_issue(
        self,
        issue: WorkItem,
        current_user: User,
        previous_assignee: Optional[User] = None,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.REASSIGNED_ISSUE,
                issue.project,
                event_id,
                actor=current_user,
                item=issue,
                previous_assignee=previous_assignee,
            )
        )

    def relabeled_issue(
        self,
        issue: WorkItem,
        added_labels: Iterable[Label],
        current_user: User,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.RELABELED_ISSUE,
                issue.project,
                event_id,
                actor=current_user,
                item=issue,
                added_labels=list(added_labels),
            )
        )

    def close_issue(
        self, issue: WorkItem, current_user: User, event_id: Optional[str] = None
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.CLOSED_ISSUE,
                issue.project,
                event_id,
                actor=current_user,
                item=issue,
            )
        )

    def reopen_issue(
        self, issue: WorkItem, current_user: User, event_id: Optional[str] = None
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.REOPENED_ISSUE,
                issue.project,
                event_id,
                actor=current_user,
                item=issue,
            )
        )

    # Merge requests

    def new_merge_request(
        self,
        merge_request: WorkItem,
        current_user: User,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.NEW_MERGE_REQUEST,
                merge_request.project,
                event_id,
                actor=current_user,
                item=merge_request,
            )
        )

    def reassigned_merge_request(
        self,
        merge_request: WorkItem,
        current_user: User,
        previous_assignee: Optional[User] = None,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.REASSIGNED_MERGE_REQUEST,
                merge_request.project,
                event_id,
                actor=current_user,
                item=merge_request,
                previous_assignee=previous_assignee,
            )
        )

    def relabeled_merge_request(
        self,
        merge_request: WorkItem,
        added_labels: Iterable[Label],
        current_user: User,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.RELABELED_MERGE_REQUEST,
                merge_request.project,
                event_id,
                actor=current_user,
                item=merge_request,
                added_labels=list(added_labels),
            )
        )

    def close_mr(
        self,
        merge_request: WorkItem,
        current_user: User,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.CLOSED_MERGE_REQUEST,
                merge_request.project,
                event_id,
                actor=current_user,
                item=merge_request,
            )
        )

    def merge_mr(
        self,
        merge_request: WorkItem,
        current_user: User,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.MERGED_MERGE_REQUEST,
                merge_request.project,
                event_id,
                actor=current_user,
                item=merge_request,
            )
        )

    def reopen_mr(
        self,
        merge_request: WorkItem,
        current_user: User,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.REOPENED_MERGE_REQUEST,
                merge_request.project,
                event_id,
                actor=current_user,
                item=merge_request,
            )
        )

    # Notes and projects

    def new_note(self, note: Note, event_id: Optional[str] = None) -> FrozenSet[str]:
        """Notify about a new comment. The note's author is the actor."""
        return self._process(
            self._event(
                EventKind.NEW_NOTE,
                note.noteable.project,
                event_id or f"{EventKind.NEW_NOTE.value}:{note.id}",
                actor=note.author,
                note=note,
            )
        )

    def project_was_moved(
        self,
        project: Project,
        old_path: str,
        current_user: Optional[User] = None,
        event_id: Optional[str] = None,
    ) -> FrozenSet[str]:
        return self._process(
            self._event(
                EventKind.PROJECT_MOVED,
                project,
                event_id,
                actor=current_user,
                old_path=old_path,
            )
        )

    @staticmethod
    def _event(
        kind: EventKind, project: Project, event_id: Optional[str], **fields
    ) -> Event:
        if event_id is not None:
            fields["event_id"] = event_id
        return Event(kind, project, **fields)

    def _process(self, event: Event) -> FrozenSet[str]:
        with bind_event_context(
            event_id=event.event_id,
            event_kind=event.kind.value,
            actor_id=event.actor.id if event.actor is not None else None,
            project_id=event.project.id,
        ):
            try:
                recipients = self.engine.resolve(
                    event, AccessLevelCache(self.engine.access_provider)
                )
            except CollaboratorUnavailable as e:
                logger.error(
                    "recipient_resolution_aborted",
                    collaborator=e.collaborator,
                    error=str(e),
                )
                raise
            except MalformedEvent as e:
                logger.error("malformed_event_rejected", error=str(e))
                raise

            self.dispatcher.deliver(recipients, event)
            return recipients


def create_notification_service(
    directory: TeamDirectory,
    subscriptions: SubscriptionStore,
    settings_store: NotificationSettingStore,
    user_directory: Optional[UserDirectory] = None,
    access_provider: Optional[AccessLevelProvider] = None,
    settings: Optional[Settings] = None,
    channels: Optional[Dict[str, NotificationChannel]] = None,
    idempotency_cache: Optional[IdempotencyCache] = None,
) -> NotificationService:
    """Wire a NotificationService from settings and collaborators.

    ``directory`` doubles as user directory and access provider unless those
    are given separately (InMemoryDirectory implements all three).
    """
    settings = settings or get_settings()
    feature = settings.notifications
    user_directory = user_directory or directory
    access_provider = access_provider or directory

    engine = RecipientResolutionEngine(
        team_directory=directory,
        user_directory=user_directory,
        access_provider=access_provider,
        mention_extractor=RegexMentionExtractor(
            feature.NOTIFICATIONS_BROADCAST_HANDLES
        ),
        subscription_store=subscriptions,
        preferences=PreferenceResolver(
            settings_store, NotificationLevel(feature.NOTIFICATIONS_DEFAULT_LEVEL)
        ),
        confidential_min_access=AccessLevel(
            feature.NOTIFICATIONS_CONFIDENTIAL_MIN_ACCESS
        ),
    )

    if channels is None:
        channels = {"log": LogChannel()}
    dispatcher = NotificationDispatcher(
        channels=channels,
        idempotency_cache=idempotency_cache or get_idempotency_cache(),
        idempotency_ttl_seconds=settings.idempotency.IDEMPOTENCY_TTL_SECONDS,
    )
    delivery = NotificationDelivery(
        dispatcher, user_directory, channels=feature.NOTIFICATIONS_CHANNELS
    )

    return NotificationService(engine, delivery)
