"""Effective notification level resolution.

The effective level of a user on a project is the first concrete value in
the cascade project setting → group setting → account default → configured
fallback. GLOBAL and missing values defer to the next step.
"""

from typing import Callable, Iterator, Optional, Set

from modules.notifications.domain.errors import collaborator_call
from modules.notifications.domain.models import (
    NotificationLevel,
    Project,
    Scope,
    User,
)
from modules.notifications.domain.types import NotificationSettingStore

Lookup = Callable[[], Optional[NotificationLevel]]


class PreferenceResolver:
    """Resolve the effective NotificationLevel for (user, project)."""

    def __init__(
        self,
        settings_store: NotificationSettingStore,
        default_level: NotificationLevel = NotificationLevel.PARTICIPATING,
    ):
        if default_level is NotificationLevel.GLOBAL:
            raise ValueError("default_level must be a concrete level, not GLOBAL")
        self._store = settings_store
        self.default_level = default_level

    def resolve(self, user: User, project: Project) -> NotificationLevel:
        """Return the effective level. Never returns GLOBAL."""
        for lookup in self._lookups(user, project):
            level = lookup()
            if level is not None and level is not NotificationLevel.GLOBAL:
                return level
        return self.default_level

    def watchers_of(self, project: Project) -> Set[User]:
        """Users whose project-scoped setting is WATCH, members or not."""
        with collaborator_call("notification_settings"):
            return set(
                self._store.users_with_level(
                    Scope.project(project.id), NotificationLevel.WATCH
                )
            )

    def _lookups(self, user: User, project: Project) -> Iterator[Lookup]:
        yield lambda: self._stored(user, Scope.project(project.id))
        if project.group_id:
            yield lambda: self._stored(user, Scope.group(project.group_id))
        yield lambda: user.notification_level

    def _stored(self, user: User, scope: Scope) -> Optional[NotificationLevel]:
        with collaborator_call("notification_settings"):
            return self._store.get(user, scope)
