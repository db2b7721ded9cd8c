"""Fixtures for idempotency cache tests."""

import pytest


@pytest.fixture
def sample_payload():
    """Cached delivery payload as written by the dispatcher."""
    return {
        "results": [{"status": "sent"}],
        "metadata": {"event_id": "evt-1", "recipient_id": "user-1"},
        "sent_at": "2024-01-01T00:00:00+00:00",
    }
