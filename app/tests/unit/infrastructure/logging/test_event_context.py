"""Unit tests for infrastructure.logging.context.

Tests cover:
- bind_event_context() context manager
- get_correlation_id()
- clear_event_context()
- Context cleanup on exit and on error
"""

import uuid

import pytest
import structlog

from infrastructure.logging.context import (
    bind_event_context,
    clear_event_context,
    get_correlation_id,
)


@pytest.mark.unit
class TestBindEventContext:
    def test_auto_generates_correlation_id(self):
        with bind_event_context(event_id="evt-1"):
            uuid.UUID(get_correlation_id())

    def test_uses_provided_correlation_id(self):
        with bind_event_context(correlation_id="corr-1"):
            assert get_correlation_id() == "corr-1"

    def test_binds_event_fields(self):
        with bind_event_context(
            event_id="evt-1",
            event_kind="new_note",
            actor_id="user-1",
            project_id="project-1",
        ):
            ctx = structlog.contextvars.get_contextvars()

        assert ctx["event_id"] == "evt-1"
        assert ctx["event_kind"] == "new_note"
        assert ctx["actor_id"] == "user-1"
        assert ctx["project_id"] == "project-1"

    def test_none_values_are_not_bound(self):
        with bind_event_context(event_id="evt-1", actor_id=None):
            ctx = structlog.contextvars.get_contextvars()

        assert "actor_id" not in ctx

    def test_binds_extra_context(self):
        with bind_event_context(batch="b-7"):
            assert structlog.contextvars.get_contextvars()["batch"] == "b-7"

    def test_context_removed_on_exit(self):
        with bind_event_context(event_id="evt-1"):
            pass

        ctx = structlog.contextvars.get_contextvars()
        assert "event_id" not in ctx
        assert get_correlation_id() is None

    def test_context_removed_on_exception(self):
        with pytest.raises(RuntimeError):
            with bind_event_context(event_id="evt-1"):
                raise RuntimeError("boom")

        assert "event_id" not in structlog.contextvars.get_contextvars()


@pytest.mark.unit
class TestClearEventContext:
    def test_clears_everything(self):
        structlog.contextvars.bind_contextvars(event_id="evt-1", correlation_id="c")

        clear_event_context()

        assert structlog.contextvars.get_contextvars() == {}
