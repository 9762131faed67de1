"""Structured logging configuration for the golden signals exporter"""
import logging
import sys
from typing import Any, Dict
import structlog
from structlog.stdlib import LoggerFactory
from structlog.dev import ConsoleRenderer
from structlog.processors import JSONRenderer, TimeStamper, StackInfoRenderer
from config import Config


def setup_structured_logging(config: Config) -> None:
    """Setup structured logging with JSON format for production and console for development"""

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        TimeStamper(fmt="iso"),
        StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if config.is_development():
        processors.append(ConsoleRenderer())
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, config.log_level.upper())
    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    handlers.append(console_handler)

    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(config.log_file))
        file_handler.setLevel(level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=handlers,
        force=True
    )

    # Set specific logger levels to reduce noise
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('fastapi').setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)


def log_scrape(logger: structlog.stdlib.BoundLogger, metrics_count: int, series_count: int, render_time: float) -> None:
    """Log an exposition scrape with structured data"""
    logger.debug(
        "Metrics scrape rendered",
        metrics_count=metrics_count,
        series_count=series_count,
        render_time_seconds=round(render_time, 4),
        event_type="metrics_scrape"
    )


def log_server_startup(logger: structlog.stdlib.BoundLogger, config: Config) -> None:
    """Log server startup with configuration details"""
    logger.info(
        "Server starting up",
        service_name=config.service_name,
        service_version=config.service_version,
        origin=config.origin,
        app_port=config.app_port,
        metrics_port=config.metrics_port,
        enabled_collectors=config.enabled_collectors,
        textfile_export=str(config.prometheus_file) if config.prometheus_file else None,
        event_type="server_startup"
    )


def log_error(logger: structlog.stdlib.BoundLogger, error: Exception, context: Dict[str, Any] = None) -> None:
    """Log error with structured context"""
    logger.error(
        "Error occurred",
        error=str(error),
        error_type=type(error).__name__,
        context=context or {},
        event_type="error",
        exc_info=True
    )
