"""Infrastructure idempotency cache.

Records which (event, recipient) pairs have already been handed to a
delivery channel so that an event redelivered upstream does not notify
the same user twice.

Usage:

    from infrastructure.idempotency import (
        InMemoryIdempotencyCache,
        IdempotencyKeyBuilder,
    )

    cache = InMemoryIdempotencyCache(default_ttl_seconds=3600)
    key = IdempotencyKeyBuilder("notifications").build(
        "deliver", event_id="evt-1", recipient_id="42"
    )

    if cache.get(key) is None:
        deliver(...)
        cache.set(key, {"item_id": "issue-7"})
"""

from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.memory import InMemoryIdempotencyCache
from infrastructure.idempotency.key_builder import IdempotencyKeyBuilder

__all__ = [
    "IdempotencyCache",
    "InMemoryIdempotencyCache",
    "IdempotencyKeyBuilder",
]
