"""In-memory collaborator adapters.

Thread-safe dict-backed implementations of the collaborator contracts,
used for local wiring and tests. Every store keeps at most one value per
key; the last write wins.
"""

import threading
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from modules.notifications.domain.models import (
    AccessLevel,
    ItemKind,
    NotificationLevel,
    Project,
    Scope,
    SubscribableKind,
    User,
    WorkItem,
)


class InMemoryDirectory:
    """Users, team memberships and access tiers.

    Implements TeamDirectory, UserDirectory and AccessLevelProvider.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}
        self._memberships: Dict[Tuple[str, str], AccessLevel] = {}

    def add_user(self, user: User) -> User:
        with self._lock:
            self._users[user.id] = user
        return user

    def add_member(
        self, project: Project, user: User, access_level: AccessLevel = AccessLevel.DEVELOPER
    ) -> None:
        """Record (or replace) user's membership on project."""
        with self._lock:
            self._users.setdefault(user.id, user)
            self._memberships[(project.id, user.id)] = AccessLevel(access_level)

    def remove_member(self, project: Project, user: User) -> None:
        with self._lock:
            self._memberships.pop((project.id, user.id), None)

    def members_of(self, project: Project) -> Set[User]:
        with self._lock:
            return {
                self._users[user_id]
                for (project_id, user_id) in self._memberships
                if project_id == project.id
            }

    def find_by_usernames(self, handles: Iterable[str]) -> Set[User]:
        wanted = {h.lower() for h in handles}
        with self._lock:
            return {u for u in self._users.values() if u.username.lower() in wanted}

    def get_users(self, user_ids: Iterable[str]) -> List[User]:
        with self._lock:
            return [self._users[i] for i in user_ids if i in self._users]

    def team_access_level(self, project: Project, user: User) -> AccessLevel:
        with self._lock:
            return self._memberships.get((project.id, user.id), AccessLevel.NO_ACCESS)

    def is_confidential(self, item: WorkItem) -> bool:
        # Only issues carry a confidential flag.
        return item.kind is ItemKind.ISSUE and item.confidential


class InMemorySubscriptionStore:
    """Explicit item and label subscription flags."""

    def __init__(self):
        self._lock = threading.Lock()
        self._flags: Dict[Tuple[str, SubscribableKind], Dict[str, Tuple[User, bool]]] = {}

    def subscribe(
        self,
        subject_id: str,
        subject_kind: SubscribableKind,
        user: User,
        subscribed: bool = True,
    ) -> None:
        with self._lock:
            self._flags.setdefault((subject_id, subject_kind), {})[user.id] = (
                user,
                subscribed,
            )

    def unsubscribe(
        self, subject_id: str, subject_kind: SubscribableKind, user: User
    ) -> None:
        self.subscribe(subject_id, subject_kind, user, subscribed=False)

    def get(
        self, subject_id: str, subject_kind: SubscribableKind, user: User
    ) -> Optional[bool]:
        with self._lock:
            entry = self._flags.get((subject_id, subject_kind), {}).get(user.id)
        return entry[1] if entry is not None else None

    def subscriptions_for(
        self, subject_id: str, subject_kind: SubscribableKind
    ) -> Mapping[User, bool]:
        with self._lock:
            entries = list(self._flags.get((subject_id, subject_kind), {}).values())
        return {user: subscribed for user, subscribed in entries}


class InMemoryNotificationSettingStore:
    """Per-(user, scope) notification settings."""

    def __init__(self):
        self._lock = threading.Lock()
        self._levels: Dict[Tuple[Scope, str], Tuple[User, NotificationLevel]] = {}

    def set_level(self, user: User, scope: Scope, level: NotificationLevel) -> None:
        with self._lock:
            self._levels[(scope, user.id)] = (user, level)

    def get(self, user: User, scope: Scope) -> Optional[NotificationLevel]:
        with self._lock:
            entry = self._levels.get((scope, user.id))
        return entry[1] if entry is not None else None

    def users_with_level(self, scope: Scope, level: NotificationLevel) -> Set[User]:
        with self._lock:
            return {
                user
                for (entry_scope, _), (user, stored) in self._levels.items()
                if entry_scope == scope and stored is level
            }
