"""Tests for collector modules"""
import itertools
import threading
from collections import namedtuple
from unittest.mock import MagicMock, patch
import pytest

from config import Config
from collectors import load_collectors
from collectors.base import BaseCollector
from collectors.process import ProcessCollector
from metrics.registry import MetricRegistry


MemoryInfo = namedtuple("MemoryInfo", ["rss", "vms"])
CpuTimes = namedtuple("CpuTimes", ["user", "system"])


class MockCollector(BaseCollector):
    """Mock collector for testing base functionality"""

    collector_name = "mock"

    def __init__(self, registry, config=None):
        super().__init__(registry, config, help_text="Mock collector for testing")
        self.gauge = registry.define_gauge("mock_metric", "Mock metric", ["test"])

    def collect(self):
        self.gauge.set({"test": "value"}, 1.0)


class TestBaseCollector:
    """Test base collector functionality"""

    def setup_method(self):
        """Setup test fixtures"""
        self.config = Config()
        self.registry = MetricRegistry()
        self.collector = MockCollector(self.registry, self.config)

    def test_collector_initialization(self):
        """Test collector initialization"""
        assert self.collector.name == "mock"
        assert self.collector.help_text == "Mock collector for testing"
        assert self.collector.config == self.config
        assert self.registry.list_metrics() == ["mock_metric"]

    def test_collector_enabled_check(self):
        """Test collector enabled check"""
        # Mock collector is not in default enabled collectors
        assert self.collector.is_enabled() is False

        config = Config(enabled_collectors="process,mock")
        assert MockCollector(MetricRegistry(), config).is_enabled() is True

    def test_collector_without_config_is_enabled(self):
        """Test collectors default to enabled"""
        assert MockCollector(MetricRegistry()).is_enabled() is True

    def test_collector_refreshes_on_run(self):
        """Test registered collectors run when the registry refreshes them"""
        collector = MockCollector(self.registry)
        self.registry.register_collector(collector)
        self.registry.run_collectors()

        assert 'mock_metric{test="value"} 1\n' in self.registry.render()


class TestProcessCollector:
    """Test process collector"""

    def setup_method(self):
        """Setup test fixtures"""
        self.registry = MetricRegistry()
        self.process = MagicMock()
        self.process.memory_info.return_value = MemoryInfo(rss=1048576, vms=4194304)
        self.process.cpu_times.return_value = CpuTimes(user=1.5, system=0.5)
        self.process.num_threads.return_value = 4
        self.process.create_time.return_value = 1700000000.0
        self.process.num_fds.return_value = 12

        with patch("collectors.process.psutil.Process", return_value=self.process):
            self.collector = ProcessCollector(self.registry)

    def test_process_collector_initialization(self):
        """Test process collector definitions"""
        assert self.collector.name == "process"
        assert "process_cpu_seconds_total" in self.registry.list_metrics()
        assert "process_resident_memory_bytes" in self.registry.list_metrics()

    def test_process_metrics_collection(self):
        """Test process metrics collection"""
        self.collector.collect()
        output = self.registry.render()

        assert "process_resident_memory_bytes 1048576\n" in output
        assert "process_virtual_memory_bytes 4194304\n" in output
        assert "process_threads 4\n" in output
        assert "process_open_fds 12\n" in output
        assert "process_start_time_seconds 1700000000\n" in output
        assert "process_cpu_seconds_total 2\n" in output
        assert "# TYPE process_cpu_seconds_total counter" in output

    def test_cpu_counter_adds_deltas(self):
        """Test cpu time is fed to the counter as increments"""
        self.collector.collect()
        self.process.cpu_times.return_value = CpuTimes(user=2.0, system=0.75)
        self.collector.collect()

        assert self.collector.cpu_seconds.value() == pytest.approx(2.75)

    def test_cpu_counter_ignores_regression(self):
        """Test a lower cpu reading never decreases the counter"""
        self.collector.collect()
        self.process.cpu_times.return_value = CpuTimes(user=1.0, system=0.0)
        self.collector.collect()

        assert self.collector.cpu_seconds.value() == 2

    def test_concurrent_collects_do_not_overcount_cpu(self):
        """Test parallel scrapes add each cpu second exactly once"""
        readings = itertools.count(1)
        self.process.cpu_times.side_effect = lambda: CpuTimes(user=next(readings) / 100, system=0.0)
        barrier = threading.Barrier(4)

        def scrape():
            barrier.wait()
            for _ in range(500):
                self.collector.collect()

        threads = [threading.Thread(target=scrape) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert self.collector.cpu_seconds.value() == pytest.approx(2000 / 100)

    def test_open_fds_skipped_without_support(self):
        """Test platforms without num_fds"""
        del self.process.num_fds
        self.collector.collect()

        assert "\nprocess_open_fds " not in self.registry.render()


class TestLoadCollectors:
    """Test collector discovery"""

    def test_load_enabled_collectors(self):
        """Test the process collector is discovered and registered"""
        registry = MetricRegistry()
        loaded = load_collectors(registry, Config(enabled_collectors="process"))

        assert [collector.name for collector in loaded] == ["process"]
        assert registry.list_collectors() == ["process"]
        registry.run_collectors()
        assert "\nprocess_threads " in registry.render()

    def test_disabled_collectors_define_nothing(self):
        """Test disabled collectors leave the registry untouched"""
        registry = MetricRegistry()
        loaded = load_collectors(registry, Config(enabled_collectors=""))

        assert loaded == []
        assert registry.list_metrics() == []
