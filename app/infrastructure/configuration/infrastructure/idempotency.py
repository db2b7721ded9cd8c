"""Idempotency infrastructure settings."""

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class IdempotencySettings(InfrastructureSettings):
    """Delivery de-duplication marker configuration.

    A marker is written per (event, recipient) once a notification has been
    handed to a channel, so a redelivered event does not notify twice.

    Environment Variables:
        IDEMPOTENCY_TTL_SECONDS: Time-to-live for delivery markers (default: 3600s = 1h)

    Example:
        ```python
        from infrastructure.services.providers import get_settings

        ttl = get_settings().idempotency.IDEMPOTENCY_TTL_SECONDS
        ```
    """

    IDEMPOTENCY_TTL_SECONDS: int = Field(default=3600, alias="IDEMPOTENCY_TTL_SECONDS")
