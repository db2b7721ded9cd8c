"""Event context binding for structured logging.

Binds the identity of the event being resolved to every log entry emitted
while its recipients are computed and its notifications are delivered.

Usage:
    from infrastructure.logging import bind_event_context

    with bind_event_context(event_id=event.event_id, event_kind="new_note"):
        logger.info("recipients_resolved", recipient_count=3)

Dependencies:
    - structlog.contextvars
"""

import uuid
from contextlib import contextmanager
from typing import Optional, Any, Generator
import structlog


@contextmanager
def bind_event_context(
    correlation_id: Optional[str] = None,
    event_id: Optional[str] = None,
    event_kind: Optional[str] = None,
    actor_id: Optional[str] = None,
    project_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[None, None, None]:
    """Bind event-scoped context to all logs within the context manager.

    Args:
        correlation_id: Unique identifier for this resolution. Auto-generated
            if not provided.
        event_id: Identity of the event being processed.
        event_kind: Event kind value (e.g. "reassigned_issue").
        actor_id: ID of the acting user, if any.
        project_id: ID of the project the event belongs to.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        None - context is bound to structlog's context vars.
    """
    context: dict[str, Any] = {}
    context["correlation_id"] = correlation_id or str(uuid.uuid4())

    if event_id is not None:
        context["event_id"] = event_id

    if event_kind is not None:
        context["event_kind"] = event_kind

    if actor_id is not None:
        context["actor_id"] = actor_id

    if project_id is not None:
        context["project_id"] = project_id

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_correlation_id() -> Optional[str]:
    """Get the current correlation ID from the logging context.

    Returns:
        The correlation ID if set, None otherwise.
    """
    ctx = structlog.contextvars.get_contextvars()
    return ctx.get("correlation_id")


def clear_event_context() -> None:
    """Clear all event-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
