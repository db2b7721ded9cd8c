"""Notification recipient resolution feature settings."""

from typing import List

from pydantic import Field, field_validator

from infrastructure.configuration.base import FeatureSettings

VALID_LEVELS = ("disabled", "mention", "participating", "watch")


class NotificationFeatureSettings(FeatureSettings):
    """Configuration for notification recipient resolution and delivery.

    Environment Variables:
        NOTIFICATIONS_DEFAULT_LEVEL: Level used when no project, group or
            account setting exists (default: participating)
        NOTIFICATIONS_CONFIDENTIAL_MIN_ACCESS: Minimum team access tier that
            may read a confidential item (default: 30, Developer)
        NOTIFICATIONS_BROADCAST_HANDLES: JSON list of handles that notify the
            whole team (default: ["all"])
        NOTIFICATIONS_CHANNELS: JSON list of delivery channels handed to the
            dispatcher (default: ["log"])

    Example:
        ```python
        from infrastructure.services.providers import get_settings

        settings = get_settings()
        default_level = settings.notifications.NOTIFICATIONS_DEFAULT_LEVEL
        ```
    """

    NOTIFICATIONS_DEFAULT_LEVEL: str = Field(
        default="participating", alias="NOTIFICATIONS_DEFAULT_LEVEL"
    )
    NOTIFICATIONS_CONFIDENTIAL_MIN_ACCESS: int = Field(
        default=30, alias="NOTIFICATIONS_CONFIDENTIAL_MIN_ACCESS"
    )
    NOTIFICATIONS_BROADCAST_HANDLES: List[str] = Field(
        default_factory=lambda: ["all"], alias="NOTIFICATIONS_BROADCAST_HANDLES"
    )
    NOTIFICATIONS_CHANNELS: List[str] = Field(
        default_factory=lambda: ["log"], alias="NOTIFICATIONS_CHANNELS"
    )

    @field_validator("NOTIFICATIONS_DEFAULT_LEVEL")
    @classmethod
    def validate_default_level(cls, v: str) -> str:
        """A fallback level must be concrete, never 'global'."""
        value = v.strip().lower()
        if value not in VALID_LEVELS:
            raise ValueError(
                f"NOTIFICATIONS_DEFAULT_LEVEL must be one of {VALID_LEVELS}, got {v!r}"
            )
        return value

    @field_validator("NOTIFICATIONS_BROADCAST_HANDLES")
    @classmethod
    def normalize_broadcast_handles(cls, v: List[str]) -> List[str]:
        """Store handles lower-cased and without a leading '@'."""
        return [h.strip().lstrip("@").lower() for h in v if h and h.strip()]
