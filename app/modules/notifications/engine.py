"""Recipient resolution engine.

Turns one Event into the set of user ids that must be notified. Resolution
runs in fixed stages over a pool of candidates, each candidate carrying the
reasons it was added:

    A. collect candidates (watchers, participants, subscribers, mentions)
    B. gate each candidate by its effective notification level
    C. drop explicit item unsubscribers
    D. drop users who cannot read the item
    E. drop the actor, the author of a newly created item and the author
       of a new note
    F. de-duplicate by user id

The engine holds no mutable state between calls. Stage order matters: an
explicit unsubscribe and the visibility filter must run after every
inclusion source.
"""

from collections import defaultdict
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Set

from infrastructure.logging import get_module_logger
from modules.notifications.access import AccessLevelCache, can_read_item
from modules.notifications.domain.errors import MalformedEvent, collaborator_call
from modules.notifications.domain.models import (
    AccessLevel,
    Event,
    EventKind,
    InclusionReason,
    ItemKind,
    Label,
    NotificationLevel,
    SubscribableKind,
    User,
    WorkItem,
)
from modules.notifications.domain.types import (
    AccessLevelProvider,
    MentionExtractor,
    SubscriptionStore,
    TeamDirectory,
    UserDirectory,
)
from modules.notifications.participants import ParticipantSetBuilder
from modules.notifications.preferences import PreferenceResolver

logger = get_module_logger()

Pool = Dict[User, Set[InclusionReason]]

ISSUE_EVENTS = frozenset(
    {
        EventKind.NEW_ISSUE,
        EventKind.REASSIGNED_ISSUE,
        EventKind.RELABELED_ISSUE,
        EventKind.CLOSED_ISSUE,
        EventKind.REOPENED_ISSUE,
    }
)
MERGE_REQUEST_EVENTS = frozenset(
    {
        EventKind.NEW_MERGE_REQUEST,
        EventKind.REASSIGNED_MERGE_REQUEST,
        EventKind.RELABELED_MERGE_REQUEST,
        EventKind.CLOSED_MERGE_REQUEST,
        EventKind.MERGED_MERGE_REQUEST,
        EventKind.REOPENED_MERGE_REQUEST,
    }
)
NEW_ITEM_EVENTS = frozenset({EventKind.NEW_ISSUE, EventKind.NEW_MERGE_REQUEST})
REASSIGN_EVENTS = frozenset(
    {EventKind.REASSIGNED_ISSUE, EventKind.REASSIGNED_MERGE_REQUEST}
)
RELABEL_EVENTS = frozenset(
    {EventKind.RELABELED_ISSUE, EventKind.RELABELED_MERGE_REQUEST}
)

# Reasons each effective level accepts. A candidate survives stage B when
# at least one of its reasons is listed for its level.
LEVEL_GATES: Dict[NotificationLevel, FrozenSet[InclusionReason]] = {
    NotificationLevel.WATCH: frozenset(InclusionReason),
    NotificationLevel.PARTICIPATING: frozenset(
        {
            InclusionReason.PARTICIPANT,
            InclusionReason.MENTIONED,
            InclusionReason.BROADCAST,
            InclusionReason.EXPLICIT_SUBSCRIBE,
            InclusionReason.ASSIGNED,
        }
    ),
    NotificationLevel.MENTION: frozenset(
        {
            InclusionReason.MENTIONED,
            InclusionReason.BROADCAST,
            InclusionReason.EXPLICIT_SUBSCRIBE,
            InclusionReason.ASSIGNED,
        }
    ),
    NotificationLevel.DISABLED: frozenset(),
}


class RecipientResolutionEngine:
    """Compute notification recipients for lifecycle events.

    Args:
        team_directory: Project membership lookup.
        user_directory: Username and id lookup.
        access_provider: Access tier and confidentiality lookup.
        mention_extractor: Parses '@handle' references out of text.
        subscription_store: Explicit item and label subscription flags.
        preferences: Effective notification level resolver.
        confidential_min_access: Lowest team tier that may read a
            confidential item.
    """

    def __init__(
        self,
        team_directory: TeamDirectory,
        user_directory: UserDirectory,
        access_provider: AccessLevelProvider,
        mention_extractor: MentionExtractor,
        subscription_store: SubscriptionStore,
        preferences: PreferenceResolver,
        confidential_min_access: AccessLevel = AccessLevel.DEVELOPER,
    ):
        self.team_directory = team_directory
        self.user_directory = user_directory
        self.access_provider = access_provider
        self.mention_extractor = mention_extractor
        self.subscription_store = subscription_store
        self.preferences = preferences
        self.confidential_min_access = AccessLevel(confidential_min_access)
        self.participants = ParticipantSetBuilder(user_directory, mention_extractor)

    def resolve(
        self, event: Event, access_cache: Optional[AccessLevelCache] = None
    ) -> FrozenSet[str]:
        """Return the ids of every user to notify about event.

        Args:
            event: The event to resolve.
            access_cache: Batch-scoped access cache. A fresh one is used
                when omitted.

        Raises:
            MalformedEvent: The event carries an item its kind cannot carry.
            CollaboratorUnavailable: A collaborator could not answer.
        """
        self._validate(event)

        if event.note is not None and event.note.is_cross_reference:
            logger.debug("cross_reference_note_skipped", note_id=event.note.id)
            return frozenset()

        access = access_cache or AccessLevelCache(self.access_provider)
        levels: Dict[str, NotificationLevel] = {}

        def level_of(user: User) -> NotificationLevel:
            if user.id not in levels:
                levels[user.id] = self.preferences.resolve(user, event.project)
            return levels[user.id]

        pool = self._collect_candidates(event, level_of)
        logger.debug("candidates_collected", candidate_count=len(pool))

        pool = {
            user: reasons
            for user, reasons in pool.items()
            if reasons & LEVEL_GATES[level_of(user)]
        }

        item = event.subject
        if item is not None:
            pool = self._drop_unsubscribed(pool, item)
            pool = {
                user: reasons
                for user, reasons in pool.items()
                if can_read_item(user, item, access, self.confidential_min_access)
            }

        excluded = self._excluded_ids(event)
        recipients = frozenset(user.id for user in pool if user.id not in excluded)

        logger.info(
            "recipients_resolved",
            recipient_count=len(recipients),
            access_lookups=access.lookups,
        )
        return recipients

    def _validate(self, event: Event) -> None:
        kind = event.kind
        item = event.item

        if kind is EventKind.PROJECT_MOVED:
            if item is not None or event.note is not None:
                raise MalformedEvent(
                    "project_moved events carry no item", event_kind=kind.value
                )
            return

        if kind is EventKind.NEW_NOTE:
            if event.note is None:
                raise MalformedEvent("new_note event without a note", kind.value)
            item = event.note.noteable
        elif kind in ISSUE_EVENTS:
            self._expect_item(event, ItemKind.ISSUE)
        elif kind in MERGE_REQUEST_EVENTS:
            self._expect_item(event, ItemKind.MERGE_REQUEST)

        if item is not None and item.project.id != event.project.id:
            raise MalformedEvent(
                f"item {item.id} does not belong to project {event.project.id}",
                event_kind=kind.value,
            )

    @staticmethod
    def _expect_item(event: Event, item_kind: ItemKind) -> None:
        if event.item is None:
            raise MalformedEvent(
                f"{event.kind.value} event without an item", event.kind.value
            )
        if event.item.kind is not item_kind:
            raise MalformedEvent(
                f"{event.kind.value} event cannot carry a {event.item.kind.value}",
                event_kind=event.kind.value,
            )

    def _collect_candidates(
        self, event: Event, level_of: Callable[[User], NotificationLevel]
    ) -> Pool:
        pool: Pool = defaultdict(set)

        with collaborator_call("team_directory"):
            members = set(self.team_directory.members_of(event.project))

        if event.kind is EventKind.PROJECT_MOVED:
            for member in members:
                level = level_of(member)
                if level is NotificationLevel.WATCH:
                    pool[member].add(InclusionReason.WATCHED)
                elif level is NotificationLevel.PARTICIPATING:
                    pool[member].add(InclusionReason.PARTICIPANT)
            return pool

        if event.kind in RELABEL_EVENTS:
            self._add_label_subscribers(pool, event.added_labels)
            return pool

        item = event.subject

        for member in members:
            if level_of(member) is NotificationLevel.WATCH:
                pool[member].add(InclusionReason.WATCHED)
        for watcher in self.preferences.watchers_of(event.project):
            pool[watcher].add(InclusionReason.WATCHED)

        previous_assignee = (
            event.previous_assignee if event.kind in REASSIGN_EVENTS else None
        )
        for participant in self.participants.participants_of(item, previous_assignee):
            pool[participant].add(InclusionReason.PARTICIPANT)

        with collaborator_call("subscription_store"):
            item_flags = self.subscription_store.subscriptions_for(
                item.id, SubscribableKind.ITEM
            )
        for user, subscribed in item_flags.items():
            if subscribed:
                pool[user].add(InclusionReason.EXPLICIT_SUBSCRIBE)

        if event.kind in NEW_ITEM_EVENTS:
            self._add_label_subscribers(pool, item.labels)

        if event.kind in REASSIGN_EVENTS:
            for assignee in (item.assignee, event.previous_assignee):
                if assignee is not None:
                    pool[assignee].add(InclusionReason.ASSIGNED)

        mentions = self.participants.mentioned_in(self._mention_sources(event))
        for user in self.participants.users_for(mentions):
            pool[user].add(InclusionReason.MENTIONED)
        if mentions.broadcast:
            for member in members:
                pool[member].add(InclusionReason.BROADCAST)

        return pool

    def _add_label_subscribers(self, pool: Pool, labels: Iterable[Label]) -> None:
        for label in labels:
            with collaborator_call("subscription_store"):
                flags = self.subscription_store.subscriptions_for(
                    label.id, SubscribableKind.LABEL
                )
            for user, subscribed in flags.items():
                if subscribed:
                    pool[user].add(InclusionReason.EXPLICIT_SUBSCRIBE)

    def _drop_unsubscribed(self, pool: Pool, item: WorkItem) -> Pool:
        kept: Pool = {}
        for user, reasons in pool.items():
            with collaborator_call("subscription_store"):
                flag = self.subscription_store.get(
                    item.id, SubscribableKind.ITEM, user
                )
            if flag is not False:
                kept[user] = reasons
        return kept

    @staticmethod
    def _mention_sources(event: Event) -> Iterable[str]:
        if event.kind in NEW_ITEM_EVENTS:
            return [event.item.title, event.item.description]
        if event.kind is EventKind.NEW_NOTE:
            return [event.note.body]
        return []

    @staticmethod
    def _excluded_ids(event: Event) -> Set[str]:
        excluded = set()
        if event.actor is not None:
            excluded.add(event.actor.id)
        if event.kind in NEW_ITEM_EVENTS and event.item.author is not None:
            excluded.add(event.item.author.id)
        if event.kind is EventKind.NEW_NOTE:
            excluded.add(event.note.author.id)
        return excluded
