"""Errors for the notifications module."""

from contextlib import contextmanager
from typing import Iterator, Optional


class NotificationError(Exception):
    """Base class for recipient resolution errors."""


class CollaboratorUnavailable(NotificationError):
    """Raised when a collaborator could not answer during resolution.

    Resolution aborts rather than guess: a wrong guess either leaks
    confidential content or drops a required notification.

    Attributes:
        collaborator: Name of the collaborator that failed
        cause: The original exception, if any
    """

    def __init__(
        self, collaborator: str, message: str, cause: Optional[BaseException] = None
    ):
        super().__init__(f"{collaborator}: {message}")
        self.collaborator = collaborator
        self.cause = cause


class MalformedEvent(NotificationError):
    """Raised when an event references something its kind cannot carry.

    Fatal, never retried.

    Attributes:
        event_kind: Value of the offending event's kind, when known
    """

    def __init__(self, message: str, event_kind: Optional[str] = None):
        super().__init__(message)
        self.event_kind = event_kind


@contextmanager
def collaborator_call(collaborator: str) -> Iterator[None]:
    """Translate transport failures of a collaborator into CollaboratorUnavailable.

    CollaboratorUnavailable raised by the collaborator itself passes through
    untouched.
    """
    try:
        yield
    except (ConnectionError, TimeoutError) as e:
        raise CollaboratorUnavailable(collaborator, str(e) or type(e).__name__, e) from e
