"""Mention extraction from free text.

Produces the Mentions value consumed by recipient resolution. Handles are
normalized the same way everywhere: leading '@' removed, lower-cased,
de-duplicated. Markdown rendering and redaction are not performed here.
"""

import re
from typing import Iterable, Optional

from modules.notifications.domain.models import Mentions

# A handle starts with a word character and may contain dots and dashes, but
# never ends with one ("@alice." at the end of a sentence is "alice").
MENTION_PATTERN = re.compile(r"(?<![\w@/])@([A-Za-z0-9_](?:[A-Za-z0-9_.\-]*[A-Za-z0-9_])?)")

DEFAULT_BROADCAST_HANDLES = ("all",)


def normalize_handle(raw: str) -> str:
    value = raw.strip()
    if value.startswith("@"):
        value = value[1:]
    return value.strip().lower()


class RegexMentionExtractor:
    """Extract '@handle' references and the broadcast token from text.

    Broadcast handles never appear in ``Mentions.handles``; they only set the
    broadcast flag.

    Example:
        >>> extractor = RegexMentionExtractor()
        >>> m = extractor.extract("@Mention referenced, @all and @outsider")
        >>> sorted(m.handles), m.broadcast
        (['mention', 'outsider'], True)
    """

    def __init__(self, broadcast_handles: Optional[Iterable[str]] = None):
        handles = (
            DEFAULT_BROADCAST_HANDLES if broadcast_handles is None else broadcast_handles
        )
        self.broadcast_handles = frozenset(
            normalize_handle(h) for h in handles if normalize_handle(h)
        )

    def extract(self, text: str) -> Mentions:
        if not text:
            return Mentions()

        handles = set()
        broadcast = False
        for match in MENTION_PATTERN.finditer(text):
            handle = normalize_handle(match.group(1))
            if handle in self.broadcast_handles:
                broadcast = True
            elif handle:
                handles.add(handle)

        return Mentions(handles=frozenset(handles), broadcast=broadcast)
