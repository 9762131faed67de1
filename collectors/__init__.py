"""Scrape-time collectors and their discovery"""
import importlib
import pkgutil
from typing import List
from .base import BaseCollector
from metrics.registry import MetricRegistry
from logging_config import get_logger


logger = get_logger(__name__)


def load_collectors(registry: MetricRegistry, config=None) -> List[BaseCollector]:
    """Discover collector classes in this package and register the enabled ones"""
    loaded = []

    for importer, modname, ispkg in pkgutil.iter_modules(__path__, __name__ + "."):
        if modname.endswith('.base'):
            continue  # Skip base module

        try:
            module = importlib.import_module(modname)
        except ImportError as e:
            logger.error("Failed to load collector module", module=modname, error=str(e))
            continue

        for attr_name in dir(module):
            attr = getattr(module, attr_name)
            if not (isinstance(attr, type) and issubclass(attr, BaseCollector) and attr is not BaseCollector):
                continue
            if attr.__module__ != module.__name__:
                continue  # Imported from elsewhere

            if hasattr(config, "is_collector_enabled") and not config.is_collector_enabled(attr.collector_name):
                logger.debug("Collector disabled", collector=attr.collector_name)
                continue

            collector = attr(registry, config)

            registry.register_collector(collector)
            loaded.append(collector)
            logger.info("Discovered collector", collector=collector.name, event_type="collector_discovered")

    return loaded
