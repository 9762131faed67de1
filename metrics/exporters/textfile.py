"""Textfile exporter writing registry snapshots for node_exporter-style collection"""
from .base import BaseExporter
from config import Config
from metrics.registry import MetricRegistry
from logging_config import get_logger


logger = get_logger(__name__)


class TextfileExporter(BaseExporter):
    """Writes the rendered registry to a .prom file"""

    def __init__(self, config: Config, registry: MetricRegistry):
        super().__init__(config, registry)
        self.metrics_file = config.prometheus_file
        self._healthy = False

    async def start(self) -> None:
        """Initialize the textfile exporter"""
        try:
            self.metrics_file.parent.mkdir(parents=True, exist_ok=True)
            self.registry.run_collectors()
            self._write(self.registry.render())
            self._healthy = True
            logger.info("Textfile exporter started", path=str(self.metrics_file), event_type="exporter_startup")

        except OSError as e:
            logger.error("Failed to start textfile exporter", path=str(self.metrics_file), error=str(e))
            self._healthy = False
            raise

    async def export(self) -> None:
        """Write the current snapshot, marking the exporter unhealthy on failure"""
        try:
            self.registry.run_collectors()
            content = self.registry.render()
            self._write(content)
            self._healthy = True
            logger.debug("Exported metrics to textfile", path=str(self.metrics_file), bytes=len(content))

        except OSError as e:
            logger.error("Failed to write textfile metrics", path=str(self.metrics_file), error=str(e))
            self._healthy = False

    async def shutdown(self) -> None:
        """Cleanup the textfile exporter"""
        self._healthy = False
        logger.info("Textfile exporter shutdown", event_type="exporter_shutdown")

    def is_healthy(self) -> bool:
        return self._healthy

    def _write(self, content: str) -> None:
        # Write atomically using temporary file
        temp_file = self.metrics_file.with_suffix('.tmp')
        temp_file.write_text(content, encoding='utf-8')
        temp_file.replace(self.metrics_file)
