"""In-process idempotency cache implementation."""

import copy
import threading
import time
from typing import Any, Dict, Optional, Tuple

import structlog
from infrastructure.idempotency.cache import IdempotencyCache

logger = structlog.get_logger()


class InMemoryIdempotencyCache(IdempotencyCache):
    """Thread-safe in-memory idempotency cache with per-entry TTL.

    Entries are stored as (expires_at, payload). An expired entry is dropped
    when it is read, and set() sweeps every expired entry at most once per
    sweep interval, since most delivery keys are never read again. Suitable
    for single-instance deployments and tests; a shared backend is needed
    when several workers deliver the same events.

    Attributes:
        default_ttl_seconds: TTL applied when set() is called without one
        sweep_interval_seconds: Minimum time between sweeps run by set()
    """

    def __init__(
        self,
        default_ttl_seconds: int = 3600,
        clock=time.monotonic,
        sweep_interval_seconds: float = 60.0,
    ):
        """Initialize the in-memory cache.

        Args:
            default_ttl_seconds: Default time-to-live for entries.
            clock: Monotonic time source (injectable for tests).
            sweep_interval_seconds: Minimum time between sweeps run by set().
        """
        self.default_ttl_seconds = default_ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self._clock = clock
        self._store: Dict[str, Tuple[float, Dict[str, Any]]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._next_sweep = clock() + sweep_interval_seconds

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                logger.debug("idempotency_cache_miss", key=key)
                return None

            expires_at, payload = entry
            if expires_at <= self._clock():
                del self._store[key]
                self._misses += 1
                logger.debug("idempotency_cache_expired", key=key)
                return None

            self._hits += 1
            logger.debug("idempotency_cache_hit", key=key)
            return copy.deepcopy(payload)

    def set(
        self, key: str, response: Dict[str, Any], ttl_seconds: Optional[int] = None
    ) -> None:
        if ttl_seconds is None:
            ttl_seconds = self.default_ttl_seconds
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        with self._lock:
            now = self._clock()
            if now >= self._next_sweep:
                self._sweep(now)
            self._store[key] = (now + ttl_seconds, copy.deepcopy(response))

        logger.debug("idempotency_cache_set_success", key=key, ttl_seconds=ttl_seconds)

    def cleanup_expired_entries(self) -> int:
        """Remove every expired entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            return self._sweep(self._clock())

    def _sweep(self, now: float) -> int:
        expired = [
            key for key, (expires_at, _) in self._store.items() if expires_at <= now
        ]
        for key in expired:
            del self._store[key]
        self._next_sweep = now + self.sweep_interval_seconds
        if expired:
            logger.debug(
                "idempotency_cache_cleanup",
                expired_count=len(expired),
                remaining_count=len(self._store),
            )
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            count = len(self._store)
            self._store.clear()
            self._hits = 0
            self._misses = 0
        logger.info("idempotency_cache_cleared", items_deleted=count)

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "default_ttl_seconds": self.default_ttl_seconds,
            }
