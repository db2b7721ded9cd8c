"""Test factories for notification recipient resolution and delivery.

Domain factories return dataclasses from modules.notifications.domain;
delivery factories return Pydantic models from infrastructure.notifications.
Identifiers are generated from a module counter so each call yields a
distinct, deterministic id.
"""

import itertools
from typing import Any, Dict, List, Optional

from infrastructure.notifications.models import (
    Notification,
    NotificationResult,
    NotificationStatus,
    Recipient,
)
from modules.notifications.domain.models import (
    Event,
    EventKind,
    ItemKind,
    Label,
    NotificationLevel,
    Project,
    User,
    Visibility,
    WorkItem,
)

_ids = itertools.count(1)


def _next_id(prefix: str) -> str:
    return f"{prefix}-{next(_ids)}"


def make_user(
    username: Optional[str] = None,
    notification_level: Optional[NotificationLevel] = None,
    is_admin: bool = False,
    email: Optional[str] = None,
    user_id: Optional[str] = None,
) -> User:
    """Create a test User.

    Example:
        >>> watcher = make_user("watcher", NotificationLevel.WATCH)
    """
    user_id = user_id or _next_id("user")
    username = username or user_id
    return User(
        id=user_id,
        username=username,
        notification_level=notification_level,
        is_admin=is_admin,
        email=email if email is not None else f"{username}@example.com",
    )


def make_project(
    path: Optional[str] = None,
    group_id: Optional[str] = None,
    visibility: Visibility = Visibility.PRIVATE,
    project_id: Optional[str] = None,
) -> Project:
    project_id = project_id or _next_id("project")
    return Project(
        id=project_id,
        path=path or f"namespace/{project_id}",
        group_id=group_id,
        visibility=visibility,
    )


def make_label(title: str = "bug") -> Label:
    return Label(id=_next_id("label"), title=title)


def _make_item(
    kind: ItemKind,
    project: Optional[Project],
    author: Optional[User],
    title: str,
    description: str,
    assignee: Optional[User],
    confidential: bool,
    labels: Optional[List[Label]],
) -> WorkItem:
    return WorkItem(
        id=_next_id(kind.value),
        kind=kind,
        project=project or make_project(),
        author=author,
        title=title,
        description=description,
        assignee=assignee,
        confidential=confidential,
        labels=list(labels or []),
    )


def make_issue(
    project: Optional[Project] = None,
    author: Optional[User] = None,
    title: str = "Login page broken",
    description: str = "",
    assignee: Optional[User] = None,
    confidential: bool = False,
    labels: Optional[List[Label]] = None,
) -> WorkItem:
    """Create a test issue. An author is generated when none is given."""
    return _make_item(
        ItemKind.ISSUE,
        project,
        author or make_user(),
        title,
        description,
        assignee,
        confidential,
        labels,
    )


def make_merge_request(
    project: Optional[Project] = None,
    author: Optional[User] = None,
    title: str = "Fix login page",
    description: str = "",
    assignee: Optional[User] = None,
    labels: Optional[List[Label]] = None,
) -> WorkItem:
    return _make_item(
        ItemKind.MERGE_REQUEST,
        project,
        author or make_user(),
        title,
        description,
        assignee,
        False,
        labels,
    )


def make_commit(
    project: Optional[Project] = None,
    author: Optional[User] = None,
    title: str = "Update README",
) -> WorkItem:
    """Create a test commit. ``author`` may be None (unmapped committer)."""
    return _make_item(ItemKind.COMMIT, project, author, title, "", None, False, None)


def make_snippet(
    project: Optional[Project] = None,
    author: Optional[User] = None,
    title: str = "deploy.sh",
) -> WorkItem:
    return _make_item(
        ItemKind.SNIPPET, project, author or make_user(), title, "", None, False, None
    )


def make_event(
    kind: EventKind,
    item: Optional[WorkItem] = None,
    actor: Optional[User] = None,
    project: Optional[Project] = None,
    **kwargs: Any,
) -> Event:
    """Create a test Event. The project defaults to the item's project."""
    if project is None:
        project = item.project if item is not None else make_project()
    return Event(kind=kind, project=project, actor=actor, item=item, **kwargs)


def make_recipient(
    user_id: str = "user-1",
    username: Optional[str] = "alice",
    email: Optional[str] = "alice@example.com",
    preferred_channels: Optional[List[str]] = None,
) -> Recipient:
    return Recipient(
        user_id=user_id,
        username=username,
        email=email,
        preferred_channels=preferred_channels or ["log"],
    )


def make_notification(
    subject: str = "namespace/project | Login page broken (issue-1)",
    message: str = "Issue issue-1 was closed by alice.",
    recipients: Optional[List[Recipient]] = None,
    channels: Optional[List[str]] = None,
    metadata: Optional[Dict[str, Any]] = None,
    idempotency_key: Optional[str] = None,
) -> Notification:
    return Notification(
        subject=subject,
        message=message,
        recipients=recipients or [make_recipient()],
        channels=channels or ["log"],
        metadata=metadata or {},
        idempotency_key=idempotency_key,
    )


def make_notification_result(
    notification: Optional[Notification] = None,
    channel: str = "log",
    status: NotificationStatus = NotificationStatus.SENT,
    message: str = "Delivered",
    error_code: Optional[str] = None,
    external_id: Optional[str] = None,
) -> NotificationResult:
    return NotificationResult(
        notification=notification or make_notification(),
        channel=channel,
        status=status,
        message=message,
        error_code=error_code,
        external_id=external_id,
    )
