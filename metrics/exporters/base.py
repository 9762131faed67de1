"""Base exporter interface"""
import abc

from config import Config
from metrics.registry import MetricRegistry


class BaseExporter(abc.ABC):
    """Abstract base class for exporters pushing registry snapshots somewhere"""

    def __init__(self, config: Config, registry: MetricRegistry):
        self.config = config
        self.registry = registry

    @abc.abstractmethod
    async def start(self) -> None:
        """Initialize the exporter"""
        pass

    @abc.abstractmethod
    async def export(self) -> None:
        """Export the current registry snapshot"""
        pass

    @abc.abstractmethod
    async def shutdown(self) -> None:
        """Cleanup the exporter"""
        pass

    @abc.abstractmethod
    def is_healthy(self) -> bool:
        """Check if exporter is healthy"""
        pass
