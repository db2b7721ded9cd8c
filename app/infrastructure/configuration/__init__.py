"""Infrastructure configuration module - public API.

Centralized configuration management using Pydantic BaseSettings with
domain-based organization.

Exports:
    Settings: Main settings class (for testing/overrides)
    NotificationFeatureSettings: Recipient resolution settings
    IdempotencySettings: Delivery de-duplication settings

Example:
    ```python
    from infrastructure.services.providers import get_settings

    settings = get_settings()
    ttl = settings.idempotency.IDEMPOTENCY_TTL_SECONDS
    ```
"""

from infrastructure.configuration.settings import Settings
from infrastructure.configuration.features import NotificationFeatureSettings
from infrastructure.configuration.infrastructure import IdempotencySettings

__all__ = ["Settings", "NotificationFeatureSettings", "IdempotencySettings"]
