"""Shared fixtures for the test suite."""

import pytest
import structlog

from infrastructure.services.providers import get_idempotency_cache, get_settings


@pytest.fixture(autouse=True)
def reset_providers():
    """Drop cached settings and cache singletons around every test."""
    get_settings.cache_clear()
    get_idempotency_cache.cache_clear()
    yield
    get_settings.cache_clear()
    get_idempotency_cache.cache_clear()


@pytest.fixture(autouse=True)
def clean_log_context():
    """Ensure no event context leaks between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
