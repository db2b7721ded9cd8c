"""Domain layer - data models, collaborator contracts, and errors."""

from modules.notifications.domain.models import (
    AccessLevel,
    Event,
    EventKind,
    InclusionReason,
    ItemKind,
    Label,
    Mentions,
    Note,
    NotificationLevel,
    Project,
    Scope,
    ScopeKind,
    SubscribableKind,
    User,
    Visibility,
    WorkItem,
)
from modules.notifications.domain.errors import (
    CollaboratorUnavailable,
    MalformedEvent,
    NotificationError,
    collaborator_call,
)

__all__ = [
    "AccessLevel",
    "Event",
    "EventKind",
    "InclusionReason",
    "ItemKind",
    "Label",
    "Mentions",
    "Note",
    "NotificationLevel",
    "Project",
    "Scope",
    "ScopeKind",
    "SubscribableKind",
    "User",
    "Visibility",
    "WorkItem",
    "CollaboratorUnavailable",
    "MalformedEvent",
    "NotificationError",
    "collaborator_call",
]
