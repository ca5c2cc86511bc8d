"""Unit tests for logging setup."""

import structlog

from xiq.utils.logger import setup_logging


class TestSetupLogging:
    """Tests for setup_logging."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_should_render_json_by_default(self):
        """Test JSON renderer."""
        setup_logging("INFO")

        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_should_render_console_when_requested(self):
        """Test console renderer."""
        setup_logging("DEBUG", json_logs=False)

        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_should_merge_bound_context(self):
        """Test request id binding reaches log events."""
        setup_logging("INFO")

        processors = structlog.get_config()["processors"]
        assert processors[0] is structlog.contextvars.merge_contextvars
