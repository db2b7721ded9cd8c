"""Idempotency cache abstract base class."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class IdempotencyCache(ABC):
    """Abstract base class for idempotency cache implementations.

    Stores a small JSON-serializable marker per key so that an operation
    retried with the same key (e.g. redelivery of one notification to one
    recipient) can be recognised and skipped.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Get cached marker for idempotency key.

        Args:
            key: Idempotency key.

        Returns:
            Cached marker dict or None if not found/expired.
        """
        pass

    @abstractmethod
    def set(
        self, key: str, response: Dict[str, Any], ttl_seconds: Optional[int] = None
    ) -> None:
        """Cache a marker for the given idempotency key.

        Args:
            key: Idempotency key.
            response: Marker dict to cache.
            ttl_seconds: Time-to-live in seconds (implementation default if None).
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all cached entries (for testing)."""
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dict with cache statistics (implementation-specific).
        """
        pass
