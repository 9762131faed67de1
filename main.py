#!/usr/bin/env python3
"""Main entry point for the golden signals exporter"""
import asyncio
import sys
import uvicorn
from pydantic import ValidationError
from config import Config
from app.demo import DemoApplication
from app.server import MetricsServer
from collectors import load_collectors
from metrics.registry import MetricRegistry
from metrics.signals import GoldenSignals
from logging_config import setup_structured_logging, get_logger, log_server_startup, log_error


def build_servers(config: Config):
    """Build the shared registry and both uvicorn servers around it"""
    registry = MetricRegistry(include_timestamps=config.include_timestamps)
    signals = GoldenSignals(registry, config.origin)
    load_collectors(registry, config)

    demo = DemoApplication(config, signals)
    exposition = MetricsServer(config, registry)

    return [
        uvicorn.Server(uvicorn.Config(
            demo.get_app(),
            host=config.app_host,
            port=config.app_port,
            log_config=None  # We handle logging ourselves
        )),
        uvicorn.Server(uvicorn.Config(
            exposition.get_app(),
            host=config.metrics_host,
            port=config.metrics_port,
            log_config=None
        )),
    ]


async def serve(config: Config) -> None:
    """Run the application and exposition listeners in one event loop"""
    await asyncio.gather(*(server.serve() for server in build_servers(config)))


def main():
    """Main application entry point"""
    try:
        config = Config()
    except ValidationError as e:
        # Logging is not configured yet, structlog falls back to its defaults
        log_error(get_logger(__name__), e, {"component": "main", "phase": "configuration"})
        sys.exit(1)

    setup_structured_logging(config)
    logger = get_logger(__name__)

    try:
        log_server_startup(logger, config)
        asyncio.run(serve(config))

    except Exception as e:
        log_error(logger, e, {"component": "main", "phase": "startup"})
        sys.exit(1)


if __name__ == '__main__':
    main()
