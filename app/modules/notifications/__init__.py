# modules/notifications/__init__.py
"""Notification recipient resolution module.

Decides, for each lifecycle event on a work item or project, which users
receive a notification, then hands them to the notification dispatcher.

Features:
- Effective notification levels cascading project → group → account default
- Participants, watchers, mentions and explicit subscriptions as inclusion sources
- Confidential item and private project visibility filtering
- Idempotent per-(event, recipient) delivery
"""

from modules.notifications.access import AccessLevelCache, can_read_item
from modules.notifications.delivery import NotificationDelivery
from modules.notifications.engine import RecipientResolutionEngine
from modules.notifications.mentions import RegexMentionExtractor
from modules.notifications.participants import ParticipantSetBuilder
from modules.notifications.preferences import PreferenceResolver
from modules.notifications.service import (
    NotificationService,
    create_notification_service,
)

__all__ = [
    "AccessLevelCache",
    "can_read_item",
    "NotificationDelivery",
    "RecipientResolutionEngine",
    "RegexMentionExtractor",
    "ParticipantSetBuilder",
    "PreferenceResolver",
    "NotificationService",
    "create_notification_service",
]
