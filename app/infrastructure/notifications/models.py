"""Notification system core models.

Platform-agnostic delivery models. The notifications feature decides who
is notified and what the message says; infrastructure handles delivery.

Uses Pydantic BaseModel for:
- RFC 5322 compliant email validation (EmailStr)
- Runtime input validation
- JSON round-tripping of results held in the idempotency cache
"""

from typing import Optional, List, Dict, Any
from enum import Enum
from pydantic import BaseModel, EmailStr, Field, field_validator


class NotificationStatus(Enum):
    """Notification delivery status.

    Tracks delivery attempt outcome for observability.
    """

    SENT = "sent"
    FAILED = "failed"


class Recipient(BaseModel):
    """Notification recipient information.

    The user id is the universal identifier; email and username are carried
    for channels that address users by them.

    Attributes:
        user_id: Identifier of the user being notified (required)
        username: User handle, for display and chat-style channels
        email: Address for the email channel (validated with EmailStr)
        preferred_channels: Channel names to try first (default: ["email"])
    """

    user_id: str
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    preferred_channels: List[str] = Field(default_factory=lambda: ["email"])

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Recipient user_id cannot be empty")
        return v


class Notification(BaseModel):
    """Platform-agnostic notification message.

    Attributes:
        subject: Subject line (email), card title (chat)
        message: Plain text message body (required)
        recipients: List of recipients (required, minimum 1)
        channels: List of channel names to use (default: ["email"])
        metadata: Additional context (event_id, item_id, project_id, ...)
        idempotency_key: Prevents duplicate sends when set

    Example:
        notification = Notification(
            subject="my-group/my-project | Fix login (#12)",
            message="Issue #12 was closed by alice.",
            recipients=[Recipient(user_id="42", email="bob@example.com")],
            metadata={"event_id": "evt-1", "item_id": "issue-12"},
        )
    """

    subject: str
    message: str
    recipients: List[Recipient] = Field(..., min_length=1)
    channels: List[str] = Field(default_factory=lambda: ["email"])
    metadata: Dict[str, Any] = Field(default_factory=dict)
    idempotency_key: Optional[str] = None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Ensure message is not empty."""
        if not v or not v.strip():
            raise ValueError("Notification message cannot be empty")
        return v


class NotificationResult(BaseModel):
    """Result of one delivery attempt through one channel.

    Attributes:
        notification: Notification that was attempted
        channel: Channel name used (e.g., "email", "log")
        status: Delivery status
        message: Human-readable result message
        error_code: Optional error code for failures
        external_id: External platform ID for the delivered message
    """

    notification: Notification
    channel: str
    status: NotificationStatus
    message: str
    error_code: Optional[str] = None
    external_id: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Check if delivery was successful."""
        return self.status == NotificationStatus.SENT
