"""Tests for the textfile exporter"""
from unittest.mock import Mock, patch
import pytest

from config import Config
from metrics.exporters.textfile import TextfileExporter
from metrics.registry import MetricRegistry


class TestTextfileExporter:
    """Test atomic textfile export"""

    def setup_method(self):
        """Setup test fixtures"""
        self.registry = MetricRegistry()
        self.counter = self.registry.define_counter("request_count", "Total requests", ["origin"])

    def _exporter(self, path):
        return TextfileExporter(Config(prometheus_file=path), self.registry)

    @pytest.mark.asyncio
    async def test_start_writes_snapshot(self, tmp_path):
        """Test start creates the directory and the first snapshot"""
        path = tmp_path / "textfile" / "golden.prom"
        exporter = self._exporter(path)
        self.counter.add({"origin": "prod"}, 2)

        await exporter.start()

        assert exporter.is_healthy() is True
        assert path.read_text(encoding="utf-8") == self.registry.render()

    @pytest.mark.asyncio
    async def test_export_replaces_file(self, tmp_path):
        """Test each export overwrites the previous snapshot without leftovers"""
        path = tmp_path / "golden.prom"
        exporter = self._exporter(path)
        await exporter.start()

        self.counter.add({"origin": "prod"}, 5)
        await exporter.export()

        assert 'request_count{origin="prod"} 5\n' in path.read_text(encoding="utf-8")
        assert not path.with_suffix(".tmp").exists()

    @pytest.mark.asyncio
    async def test_export_refreshes_collectors(self, tmp_path):
        """Test every write runs the registered collectors first"""
        path = tmp_path / "golden.prom"
        collector = Mock()
        collector.name = "ticker"
        collector.is_enabled.return_value = True
        collector.collect.side_effect = lambda: self.counter.add({"origin": "tick"}, 1)
        self.registry.register_collector(collector)
        exporter = self._exporter(path)

        await exporter.start()
        await exporter.export()

        assert 'request_count{origin="tick"} 2\n' in path.read_text(encoding="utf-8")

    @pytest.mark.asyncio
    async def test_export_failure_marks_unhealthy(self, tmp_path):
        """Test write failures are logged, not raised"""
        exporter = self._exporter(tmp_path / "golden.prom")
        await exporter.start()

        with patch.object(exporter, "_write", side_effect=OSError("disk full")):
            await exporter.export()

        assert exporter.is_healthy() is False

        await exporter.export()
        assert exporter.is_healthy() is True

    @pytest.mark.asyncio
    async def test_start_failure_raises(self, tmp_path):
        """Test an unwritable target fails startup"""
        exporter = self._exporter(tmp_path / "golden.prom")

        with patch.object(exporter, "_write", side_effect=PermissionError("read-only")):
            with pytest.raises(OSError):
                await exporter.start()

        assert exporter.is_healthy() is False

    @pytest.mark.asyncio
    async def test_shutdown(self, tmp_path):
        """Test shutdown marks the exporter unhealthy"""
        exporter = self._exporter(tmp_path / "golden.prom")
        await exporter.start()
        await exporter.shutdown()

        assert exporter.is_healthy() is False
