"""Structured logging infrastructure.

Centralized logging configuration and utilities built on structlog.

Public API:
    - configure_logging(): Initialize logging for the application
    - get_module_logger(): Get a logger for the calling module
    - bind_event_context(): Context manager for event-scoped logging
    - get_correlation_id(): Get current correlation ID from context
    - clear_event_context(): Clear all event context

Example:
    from infrastructure.logging import get_module_logger, bind_event_context

    logger = get_module_logger()

    with bind_event_context(event_id="evt-1", event_kind="new_issue"):
        logger.info("recipients_resolved", recipient_count=4)
"""

from infrastructure.logging.setup import (
    configure_logging,
    get_module_logger,
)

from infrastructure.logging.context import (
    bind_event_context,
    get_correlation_id,
    clear_event_context,
)

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_event_context",
    "get_correlation_id",
    "clear_event_context",
]
