"""Domain models for notification recipient resolution.

Lightweight dataclasses (not Pydantic) describing the inputs of a
resolution: users, projects, work items, notes and the event itself. They
carry no runtime validation; collaborators hand them over already
validated, and the engine treats them as read-only snapshots.

Key distinctions:
  - models.py: domain values and enums (this module)
  - types.py: collaborator protocols the engine consumes
  - errors.py: exceptions raised while resolving
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import FrozenSet, List, Optional


class NotificationLevel(Enum):
    """Notification preference level for a (user, scope) pair.

    GLOBAL is only valid as a stored setting: it defers to the next broader
    scope. Effective levels are always one of the other four.
    """

    DISABLED = "disabled"
    MENTION = "mention"
    PARTICIPATING = "participating"
    WATCH = "watch"
    GLOBAL = "global"


class AccessLevel(IntEnum):
    """Team access tier of a user on a project, ordered."""

    NO_ACCESS = 0
    GUEST = 10
    REPORTER = 20
    DEVELOPER = 30
    MASTER = 40
    ADMIN = 50


class Visibility(Enum):
    """Project visibility."""

    PRIVATE = "private"
    INTERNAL = "internal"
    PUBLIC = "public"


class ScopeKind(Enum):
    PROJECT = "project"
    GROUP = "group"


class SubscribableKind(Enum):
    """Kinds of subject a user can subscribe to."""

    ITEM = "item"
    LABEL = "label"


class ItemKind(Enum):
    ISSUE = "issue"
    MERGE_REQUEST = "merge_request"
    COMMIT = "commit"
    SNIPPET = "snippet"


class EventKind(Enum):
    """Lifecycle events that trigger notifications."""

    NEW_ISSUE = "new_issue"
    REASSIGNED_ISSUE = "reassigned_issue"
    RELABELED_ISSUE = "relabeled_issue"
    CLOSED_ISSUE = "closed_issue"
    REOPENED_ISSUE = "reopened_issue"
    NEW_MERGE_REQUEST = "new_merge_request"
    REASSIGNED_MERGE_REQUEST = "reassigned_merge_request"
    RELABELED_MERGE_REQUEST = "relabeled_merge_request"
    CLOSED_MERGE_REQUEST = "closed_merge_request"
    MERGED_MERGE_REQUEST = "merged_merge_request"
    REOPENED_MERGE_REQUEST = "reopened_merge_request"
    NEW_NOTE = "new_note"
    PROJECT_MOVED = "project_moved"


class InclusionReason(Enum):
    """Why a candidate entered the recipient pool."""

    WATCHED = "watched"
    PARTICIPANT = "participant"
    MENTIONED = "mentioned"
    BROADCAST = "broadcast"
    EXPLICIT_SUBSCRIBE = "explicit_subscribe"
    ASSIGNED = "assigned"


@dataclass(frozen=True)
class Scope:
    """Settings scope: a project or a group."""

    kind: ScopeKind
    id: str

    @classmethod
    def project(cls, project_id: str) -> "Scope":
        return cls(ScopeKind.PROJECT, project_id)

    @classmethod
    def group(cls, group_id: str) -> "Scope":
        return cls(ScopeKind.GROUP, group_id)


@dataclass(frozen=True)
class User:
    """A user account.

    Attributes:
        id: Unique identifier.
        username: Unique handle used for mention matching.
        notification_level: Account-level default preference, if set.
        is_admin: Administrative override for visibility checks.
        email: Delivery address, if known.
    """

    id: str
    username: str
    notification_level: Optional[NotificationLevel] = None
    is_admin: bool = False
    email: Optional[str] = None


@dataclass(frozen=True)
class Project:
    id: str
    path: str
    group_id: Optional[str] = None
    visibility: Visibility = Visibility.PRIVATE


@dataclass(frozen=True)
class Label:
    id: str
    title: str


@dataclass(eq=False)
class Note:
    """A comment attached to a work item.

    Attributes:
        id: Unique identifier.
        author: User who wrote the note.
        body: Free text, fed to the mention extractor.
        noteable: Work item the note belongs to.
        system: True for notes generated by the system.
        cross_reference: True for system notes that only record a
            "mentioned in" cross reference.
    """

    id: str
    author: User
    body: str
    noteable: "WorkItem" = field(repr=False)
    system: bool = False
    cross_reference: bool = False

    @property
    def is_cross_reference(self) -> bool:
        return self.system and self.cross_reference


@dataclass(eq=False)
class WorkItem:
    """An issue, merge request, commit or snippet.

    Attributes:
        id: Unique identifier (also the subscription subject id).
        kind: ItemKind of the item.
        project: Owning project.
        author: Creator, or commit author; None when a commit author does
            not map to a user.
        title: Title text (mention source for new items).
        description: Description text (mention source for new items).
        assignee: Current assignee, if any.
        confidential: Confidential flag (issues only).
        labels: Labels attached to the item.
        notes: Comments attached to the item.
    """

    id: str
    kind: ItemKind
    project: Project
    author: Optional[User]
    title: str = ""
    description: str = ""
    assignee: Optional[User] = None
    confidential: bool = False
    labels: List[Label] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)

    def add_note(
        self,
        note_id: str,
        author: User,
        body: str,
        system: bool = False,
        cross_reference: bool = False,
    ) -> Note:
        """Attach a new note to this item and return it."""
        note = Note(
            id=note_id,
            author=author,
            body=body,
            noteable=self,
            system=system,
            cross_reference=cross_reference,
        )
        self.notes.append(note)
        return note


@dataclass(frozen=True)
class Mentions:
    """Output of the mention extractor for one piece of text.

    Attributes:
        handles: Referenced user handles, lower-cased, without '@'.
        broadcast: True when a "notify everyone" token was present.
    """

    handles: FrozenSet[str] = frozenset()
    broadcast: bool = False

    def merge(self, other: "Mentions") -> "Mentions":
        return Mentions(
            handles=self.handles | other.handles,
            broadcast=self.broadcast or other.broadcast,
        )


@dataclass(eq=False)
class Event:
    """A notification-triggering event.

    Attributes:
        kind: EventKind.
        project: Project the event belongs to.
        actor: Acting user; None for system-initiated project events.
        item: Affected work item (None for project events).
        note: New note (NewNote only).
        previous_assignee: Assignee before a reassignment.
        added_labels: Labels attached by a relabel event.
        old_path: Previous project path (ProjectMoved only).
        event_id: Identity used to de-duplicate delivery.
    """

    kind: EventKind
    project: Project
    actor: Optional[User] = None
    item: Optional[WorkItem] = None
    note: Optional[Note] = None
    previous_assignee: Optional[User] = None
    added_labels: List[Label] = field(default_factory=list)
    old_path: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @property
    def subject(self) -> Optional[WorkItem]:
        """Item whose participants, subscriptions and visibility apply."""
        if self.note is not None:
            return self.note.noteable
        return self.item
