"""Idempotency key builder for consistent key generation."""

import hashlib
from typing import Any


class IdempotencyKeyBuilder:
    """Build deterministic idempotency keys.

    Provides a consistent key format with namespace isolation. Component
    order does not matter; components are sorted before hashing.

    Example:
        >>> builder = IdempotencyKeyBuilder(namespace="notifications")
        >>> key = builder.build(
        ...     operation="deliver",
        ...     event_id="evt-42",
        ...     recipient_id="17",
        ... )
        >>> key.startswith("notifications:deliver:")
        True
    """

    def __init__(self, namespace: str):
        """Initialize key builder.

        Args:
            namespace: Namespace for key isolation (e.g., "notifications")
        """
        if not namespace:
            raise ValueError("namespace is required")
        self.namespace = namespace

    def build(self, operation: str, **components: Any) -> str:
        """Build idempotency key from components.

        Args:
            operation: Operation type (e.g., "deliver")
            **components: Key components (event_id, recipient_id, etc.)

        Returns:
            Idempotency key string
        """
        sorted_components = sorted(components.items())

        key_parts = [self.namespace, operation]
        key_parts.extend(f"{k}={v}" for k, v in sorted_components)
        key_string = "|".join(str(part) for part in key_parts)

        key_hash = hashlib.sha256(key_string.encode()).hexdigest()[:16]

        return f"{self.namespace}:{operation}:{key_hash}"
