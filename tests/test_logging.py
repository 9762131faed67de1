"""Tests for logging configuration"""
import logging
import tempfile
from pathlib import Path

from config import Config
from logging_config import (
    setup_structured_logging,
    get_logger,
    log_scrape,
    log_server_startup,
    log_error
)


class TestLoggingConfig:
    """Test logging configuration and structured logging"""

    def test_setup_structured_logging(self):
        """Test structured logging setup"""
        with tempfile.TemporaryDirectory() as tmp_dir:
            log_file = Path(tmp_dir) / "logs" / "test.log"
            config = Config(log_file=log_file, log_level="DEBUG")

            setup_structured_logging(config)

            assert log_file.parent.exists()
            assert logging.getLogger("test").isEnabledFor(logging.DEBUG)
            assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

            for handler in list(logging.getLogger().handlers):
                if isinstance(handler, logging.FileHandler):
                    handler.close()
                    logging.getLogger().removeHandler(handler)

    def test_setup_without_log_file(self):
        """Test stdout-only logging"""
        setup_structured_logging(Config(log_level="WARNING"))

        root = logging.getLogger()
        assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)
        assert root.level == logging.WARNING

    def test_get_logger(self):
        """Test getting structured logger"""
        logger = get_logger("test_logger")

        assert logger is not None
        assert hasattr(logger, 'info')
        assert hasattr(logger, 'error')
        assert hasattr(logger, 'debug')
        assert hasattr(logger, 'warning')

    def test_log_scrape(self):
        """Test structured scrape logging"""
        logger = get_logger("test")

        # This should not raise an exception
        log_scrape(logger, metrics_count=3, series_count=5, render_time=0.0012)

    def test_log_server_startup(self):
        """Test structured server startup logging"""
        logger = get_logger("test")

        # This should not raise an exception
        log_server_startup(logger, Config())

    def test_log_error(self):
        """Test structured error logging"""
        logger = get_logger("test")
        error = ValueError("Test error")
        context = {"component": "test", "request_id": "123"}

        # This should not raise an exception
        log_error(logger, error, context)
        log_error(logger, error)  # Without context

    def test_development_vs_production_logging(self):
        """Test different logging configurations for development vs production"""
        setup_structured_logging(Config(environment="development"))
        get_logger("test").info("Test development log")

        setup_structured_logging(Config(environment="production"))
        get_logger("test").info("Test production log")

    def test_logger_context_binding(self):
        """Test logger context binding"""
        logger = get_logger("test")

        bound_logger = logger.bind(request_id="123", origin="prod")
        bound_logger.info("Test message with context")

        more_bound = bound_logger.bind(operation="test_op")
        more_bound.info("Test message with more context")
