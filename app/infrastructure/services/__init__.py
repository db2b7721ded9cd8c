"""
Dependency injection services.

Provides provider functions for application-scoped infrastructure singletons.
"""

from infrastructure.services.providers import (
    get_settings,
    get_idempotency_cache,
)

__all__ = [
    "get_settings",
    "get_idempotency_cache",
]
