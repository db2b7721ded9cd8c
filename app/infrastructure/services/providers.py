"""
Factory functions for dependency injection.

Provides application-scoped singleton providers for core infrastructure services.
"""

from functools import lru_cache

from infrastructure.configuration import Settings
from infrastructure.idempotency.cache import IdempotencyCache
from infrastructure.idempotency.memory import InMemoryIdempotencyCache


@lru_cache
def get_settings() -> Settings:
    """
    Get application-scoped settings singleton.

    This is the single source of truth for settings across the entire application.
    The @lru_cache decorator ensures only ONE instance is created per process,
    even if called from multiple packages.

        from infrastructure.services.providers import get_settings
        settings = get_settings()

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_idempotency_cache() -> IdempotencyCache:
    """
    Get application-scoped idempotency cache singleton.

    Holds the per-(event, recipient) delivery markers written by the
    notification delivery adapter. The default TTL comes from
    ``settings.idempotency.IDEMPOTENCY_TTL_SECONDS``.

    Returns:
        IdempotencyCache: Cached in-process cache instance.
    """
    settings = get_settings()
    return InMemoryIdempotencyCache(
        default_ttl_seconds=settings.idempotency.IDEMPOTENCY_TTL_SECONDS
    )
