"""
Tests for the logging module.
"""

import json
import logging

import pytest
import structlog


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_development_mode(self):
        """Test that development mode uses console renderer."""
        from core.logging import configure_logging

        # Should not raise
        configure_logging(json_logs=False, log_level="DEBUG")

    def test_configure_production_mode(self):
        """Test that production mode uses JSON renderer."""
        from core.logging import configure_logging

        # Should not raise
        configure_logging(json_logs=True, log_level="INFO")

    def test_configure_log_level(self):
        """Test that log level is correctly set."""
        from core.logging import configure_logging

        configure_logging(log_level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_configure_from_settings(self, test_settings):
        from core.logging import configure_from_settings

        configure_from_settings(test_settings.model_copy(update={"log_level": "ERROR"}))

        assert logging.getLogger().level == logging.ERROR

    def test_http_client_loggers_quieted(self):
        from core.logging import configure_logging

        configure_logging(log_level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_named_logger(self):
        """Test getting a named logger."""
        from core.logging import get_logger

        logger = get_logger("personalization.evaluator")

        assert logger is not None
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")

    def test_logger_can_log(self):
        """Test that logger can actually log messages."""
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=False, log_level="DEBUG")
        logger = get_logger("test")

        # Should not raise
        logger.info("Test message", key="value")
        logger.warning("Adaptation rule skipped", rule_id="morning-energy-adaptation")
        logger.error("Error", error="test error")


class TestContextBinding:
    """Tests for context binding functions."""

    def test_bind_and_unbind(self):
        from core.logging import bind_context, clear_context, unbind_context

        clear_context()
        bind_context(user_id="123", request_id="abc")
        unbind_context("request_id")

        ctx = structlog.contextvars.get_contextvars()
        assert ctx.get("user_id") == "123"
        assert "request_id" not in ctx

        clear_context()

    def test_log_context_scoped(self):
        from core.logging import clear_context, log_context

        clear_context()
        with log_context(user_id="u1"):
            assert structlog.contextvars.get_contextvars().get("user_id") == "u1"
        assert "user_id" not in structlog.contextvars.get_contextvars()

    def test_log_context_unbinds_on_error(self):
        from core.logging import clear_context, log_context

        clear_context()
        with pytest.raises(RuntimeError):
            with log_context(user_id="u1"):
                raise RuntimeError("boom")
        assert "user_id" not in structlog.contextvars.get_contextvars()


class TestLoggerMixin:
    """Tests for LoggerMixin class."""

    def test_mixin_provides_logger(self):
        """Test that mixin provides logger property."""
        from core.logging import LoggerMixin

        class MyService(LoggerMixin):
            def do_work(self):
                self.logger.info("Working")

        service = MyService()
        assert service.logger is not None
        # Should not raise
        service.do_work()


class TestJSONOutput:
    """Tests for JSON logging output."""

    def test_json_output_is_valid_json(self, capsys):
        """Test that JSON output is valid JSON."""
        from core.logging import configure_logging, get_logger

        configure_logging(json_logs=True, log_level="INFO")
        logger = get_logger("json_test")

        logger.info("Test message", rule_id="islamic-prayer-integration")

        captured = capsys.readouterr()

        if captured.out:
            for line in captured.out.strip().split("\n"):
                if line:
                    data = json.loads(line)
                    assert "event" in data


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
