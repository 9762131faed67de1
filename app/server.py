"""FastAPI exposition server and routes"""
import asyncio
import time
from typing import Optional
from fastapi import FastAPI, Response
from config import Config
from metrics.registry import MetricRegistry
from metrics.exporters.prometheus import CONTENT_TYPE, generate_prometheus_output
from metrics.exporters.textfile import TextfileExporter
from logging_config import get_logger, log_error, log_scrape


logger = get_logger(__name__)


class MetricsServer:
    """FastAPI server answering scrapes of the shared registry

    Runs on its own listener so scrape traffic never mixes with, or gets
    counted as, application traffic.
    """

    def __init__(self, config: Config, registry: MetricRegistry):
        self.config = config
        self.registry = registry
        self.app = FastAPI(
            title="Metrics Exposition",
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )

        self.exporter: Optional[TextfileExporter] = None
        if config.is_textfile_export_enabled():
            self.exporter = TextfileExporter(config, registry)
        self.export_task: Optional[asyncio.Task] = None
        self.scrape_count = 0

        self._setup_routes()
        self._setup_events()

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get('/metrics', response_class=Response)
        def get_metrics():
            """Serve the registry in Prometheus format"""
            start_time = time.time()
            self.registry.run_collectors()
            families = self.registry.collect()
            content = generate_prometheus_output(families, include_timestamps=self.registry.include_timestamps)
            self.scrape_count += 1

            log_scrape(
                logger,
                metrics_count=len(families),
                series_count=sum(len(family.samples) for family in families),
                render_time=time.time() - start_time
            )
            return Response(content, media_type=CONTENT_TYPE)

        @self.app.get('/health')
        def health_check():
            """Health check endpoint"""
            return {
                "status": "healthy",
                "service": self.config.service_name,
                "version": self.config.service_version,
                "origin": self.config.origin,
                "metrics": len(self.registry.list_metrics()),
                "series": self.registry.series_count(),
                "collectors": self.registry.list_collectors(),
                "scrapes": self.scrape_count,
                "textfile_exporter_healthy": self.exporter.is_healthy() if self.exporter else None
            }

    def _setup_events(self):
        """Setup FastAPI startup/shutdown events"""

        @self.app.on_event("startup")
        async def startup_event():
            if self.exporter is None:
                return
            await self.exporter.start()
            self.export_task = asyncio.create_task(self._export_loop())

        @self.app.on_event("shutdown")
        async def shutdown_event():
            if self.export_task:
                self.export_task.cancel()
                try:
                    await self.export_task
                except asyncio.CancelledError:
                    pass

            if self.exporter:
                await self.exporter.shutdown()

    async def _export_loop(self):
        """Background textfile export loop"""
        while True:
            try:
                await asyncio.sleep(self.config.export_interval)
                await self.exporter.export()
            except asyncio.CancelledError:
                break
            except Exception as e:
                log_error(logger, e, {"component": "textfile_export_loop"})

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
