"""Participant set computation.

A participant is a user functionally involved with an item: its author,
current or previous assignee, anyone who commented on it, and anyone
individually mentioned in its text or comments. The set is recomputed on
every call; comments may be added between resolutions.
"""

from typing import Iterable, Optional, Set

from modules.notifications.domain.errors import collaborator_call
from modules.notifications.domain.models import Mentions, User, WorkItem
from modules.notifications.domain.types import MentionExtractor, UserDirectory


class ParticipantSetBuilder:
    def __init__(self, users: UserDirectory, mention_extractor: MentionExtractor):
        self._users = users
        self._mentions = mention_extractor

    def participants_of(
        self, item: WorkItem, previous_assignee: Optional[User] = None
    ) -> Set[User]:
        participants: Set[User] = set()

        if item.author is not None:
            participants.add(item.author)
        if item.assignee is not None:
            participants.add(item.assignee)
        if previous_assignee is not None:
            participants.add(previous_assignee)

        texts = [item.title, item.description]
        for note in item.notes:
            if note.is_cross_reference:
                continue
            if not note.system:
                participants.add(note.author)
            texts.append(note.body)

        participants |= self.users_for(self.mentioned_in(texts))
        return participants

    def mentioned_in(self, texts: Iterable[str]) -> Mentions:
        """Merge the mentions found across several texts."""
        mentions = Mentions()
        for text in texts:
            if text:
                mentions = mentions.merge(self._mentions.extract(text))
        return mentions

    def users_for(self, mentions: Mentions) -> Set[User]:
        """Map individually mentioned handles to users; unknown handles drop out."""
        if not mentions.handles:
            return set()
        with collaborator_call("user_directory"):
            return set(self._users.find_by_usernames(mentions.handles))
