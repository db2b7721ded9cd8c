"""Infrastructure modules for the notification service.

Centralized infrastructure components:
- configuration: Settings management (Settings and per-domain settings)
- logging: Structured logging with structlog
- idempotency: Delivery de-duplication cache
- notifications: Notification dispatcher and channels
- services: Application-scoped providers (get_settings, get_idempotency_cache)
"""
