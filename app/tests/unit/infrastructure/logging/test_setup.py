"""Unit tests for infrastructure.logging.setup."""

import logging

import pytest
from unittest.mock import patch

from infrastructure.logging import setup


@pytest.fixture
def outside_tests(mock_settings):
    """Run configure_logging as if outside pytest, without touching globals."""
    with patch.object(setup, "_is_test_environment", return_value=False), patch.object(
        setup, "get_settings", return_value=mock_settings
    ), patch.object(setup.structlog, "configure") as configure, patch.object(
        setup.logging, "basicConfig"
    ) as basic_config:
        yield configure, basic_config


@pytest.mark.unit
class TestConfigureLogging:
    def test_silenced_under_pytest(self):
        setup.configure_logging()

        assert logging.root.level > logging.CRITICAL

    def test_uses_settings_level(self, outside_tests):
        _, basic_config = outside_tests

        setup.configure_logging()

        assert basic_config.call_args.kwargs["level"] == logging.INFO

    def test_explicit_level_overrides_settings(self, outside_tests):
        _, basic_config = outside_tests

        setup.configure_logging(log_level="debug")

        assert basic_config.call_args.kwargs["level"] == logging.DEBUG

    def test_console_renderer_in_development(self, outside_tests):
        configure, _ = outside_tests

        setup.configure_logging(is_production=False)

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], setup.structlog.dev.ConsoleRenderer)

    def test_json_renderer_in_production(self, outside_tests):
        configure, _ = outside_tests

        setup.configure_logging(is_production=True)

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], setup.structlog.processors.JSONRenderer)
        assert setup.structlog.contextvars.merge_contextvars in processors


@pytest.mark.unit
class TestGetModuleLogger:
    def test_binds_calling_module(self):
        from modules.notifications import engine

        context = engine.logger._context

        assert context["module_path"] == "modules.notifications.engine"
        assert context["component"] == "engine"
