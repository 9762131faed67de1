"""Base collector class and interfaces"""
from abc import ABC, abstractmethod
from metrics.registry import MetricRegistry


class BaseCollector(ABC):
    """Base class for collectors refreshing registry instruments on every scrape

    Subclasses define their instruments in ``__init__`` and update them in
    ``collect``. The registry calls ``collect`` just before it renders.
    """

    collector_name = ""

    def __init__(self, registry: MetricRegistry, config=None, name: str = "", help_text: str = ""):
        self.registry = registry
        self.config = config
        self._name = name or self.collector_name
        self._help_text = help_text

    @abstractmethod
    def collect(self) -> None:
        """Refresh the values of this collector's instruments"""
        pass

    @property
    def name(self) -> str:
        """Collector name for identification"""
        return self._name

    @property
    def help_text(self) -> str:
        """Help text describing what this collector does"""
        return self._help_text or f"{self.name} metrics collector"

    def is_enabled(self) -> bool:
        """Check if this collector is enabled"""
        if hasattr(self.config, 'is_collector_enabled'):
            return self.config.is_collector_enabled(self.name)
        return True
