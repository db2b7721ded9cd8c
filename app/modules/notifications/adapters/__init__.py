"""In-memory adapters for the collaborator contracts."""

from modules.notifications.adapters.memory import (
    InMemoryDirectory,
    InMemoryNotificationSettingStore,
    InMemorySubscriptionStore,
)

__all__ = [
    "InMemoryDirectory",
    "InMemoryNotificationSettingStore",
    "InMemorySubscriptionStore",
]
