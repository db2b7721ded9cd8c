"""Batch-scoped access lookups and visibility rules.

The AccessLevelCache memoizes (project, user) access tiers for the
lifetime of one resolution or one delivery batch. It is created per batch
and passed into the engine; it is never shared process-wide. Clear it, or
create a new one, between unrelated batches.
"""

from typing import Dict, Tuple

from modules.notifications.domain.errors import collaborator_call
from modules.notifications.domain.models import (
    AccessLevel,
    Project,
    User,
    Visibility,
    WorkItem,
)
from modules.notifications.domain.types import AccessLevelProvider


class AccessLevelCache:
    """Memoizing wrapper around an AccessLevelProvider."""

    def __init__(self, provider: AccessLevelProvider):
        self._provider = provider
        self._levels: Dict[Tuple[str, str], AccessLevel] = {}
        self._confidential: Dict[str, bool] = {}
        self.lookups = 0

    def team_access_level(self, project: Project, user: User) -> AccessLevel:
        key = (project.id, user.id)
        if key not in self._levels:
            self.lookups += 1
            with collaborator_call("access_level_provider"):
                level = self._provider.team_access_level(project, user)
            try:
                self._levels[key] = AccessLevel(level)
            except ValueError:
                # Anything unrecognised counts as no access.
                self._levels[key] = AccessLevel.NO_ACCESS
        return self._levels[key]

    def is_confidential(self, item: WorkItem) -> bool:
        if item.id not in self._confidential:
            with collaborator_call("access_level_provider"):
                self._confidential[item.id] = bool(self._provider.is_confidential(item))
        return self._confidential[item.id]

    def clear(self) -> None:
        self._levels.clear()
        self._confidential.clear()
        self.lookups = 0


def can_read_item(
    user: User,
    item: WorkItem,
    access: AccessLevelCache,
    confidential_min_access: AccessLevel = AccessLevel.DEVELOPER,
) -> bool:
    """Return whether user may see item, and so be notified about it.

    Administrators always can. A confidential item is visible to its author,
    its current assignee and members at or above confidential_min_access. A
    non-confidential item on a private project is visible to team members
    only; internal and public projects are visible to everyone.
    """
    if user.is_admin:
        return True

    project = item.project
    if access.is_confidential(item):
        if item.author is not None and item.author.id == user.id:
            return True
        if item.assignee is not None and item.assignee.id == user.id:
            return True
        return access.team_access_level(project, user) >= confidential_min_access

    if project.visibility is Visibility.PRIVATE:
        return access.team_access_level(project, user) > AccessLevel.NO_ACCESS

    return True
