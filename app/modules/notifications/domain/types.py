"""Collaborator contracts consumed by recipient resolution.

Protocol definitions only (no implementations, no validation). Adapters
backed by a database, a directory service or memory satisfy them
structurally. Any of them may raise CollaboratorUnavailable when it cannot
answer.
"""

from typing import FrozenSet, Iterable, List, Mapping, Optional, Protocol, Set

from modules.notifications.domain.models import (
    AccessLevel,
    Event,
    Mentions,
    NotificationLevel,
    Project,
    Scope,
    SubscribableKind,
    User,
    WorkItem,
)


class TeamDirectory(Protocol):
    """Team membership lookup."""

    def members_of(self, project: Project) -> Set[User]:
        """Return every user holding a membership record on the project."""
        ...


class UserDirectory(Protocol):
    """User lookup by handle and by id."""

    def find_by_usernames(self, handles: Iterable[str]) -> Set[User]:
        """Return users whose username matches one of the handles (case-insensitive)."""
        ...

    def get_users(self, user_ids: Iterable[str]) -> List[User]:
        """Return the users for the given ids, skipping unknown ids."""
        ...


class AccessLevelProvider(Protocol):
    def team_access_level(self, project: Project, user: User) -> AccessLevel:
        """Return the user's access tier on the project (NO_ACCESS if none)."""
        ...

    def is_confidential(self, item: WorkItem) -> bool:
        ...


class MentionExtractor(Protocol):
    def extract(self, text: str) -> Mentions:
        ...


class SubscriptionStore(Protocol):
    """Explicit per-(subject, user) subscription flags, last write wins."""

    def get(
        self, subject_id: str, subject_kind: SubscribableKind, user: User
    ) -> Optional[bool]:
        """Return the user's flag on the subject, or None when never set.

        Used per candidate to apply explicit unsubscribes.
        """
        ...

    def subscriptions_for(
        self, subject_id: str, subject_kind: SubscribableKind
    ) -> Mapping[User, bool]:
        """Return every explicit flag recorded on the subject.

        Used to collect explicit subscribers as candidates.
        """
        ...


class NotificationSettingStore(Protocol):
    """Per-(user, scope) notification settings, at most one per key."""

    def get(self, user: User, scope: Scope) -> Optional[NotificationLevel]:
        ...

    def users_with_level(self, scope: Scope, level: NotificationLevel) -> Set[User]:
        """Return users whose stored setting on the scope equals level."""
        ...


class Dispatcher(Protocol):
    def deliver(self, recipients: FrozenSet[str], event: Event) -> None:
        """Enqueue one delivery per recipient.

        Must be idempotent per (event identity, recipient).
        """
        ...
