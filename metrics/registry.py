"""Metrics registry holding counters, gauges and their time series"""
import logging
import math
import threading
import time
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Union

from .errors import DuplicateMetricName, InvalidDelta, InvalidValue
from .exporters.prometheus import generate_prometheus_output
from .models import LabelSet, MetricDescriptor, MetricFamily, MetricType, MetricValue

if TYPE_CHECKING:
    from collectors.base import BaseCollector


logger = logging.getLogger(__name__)

Labels = Optional[Mapping[str, str]]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class TimeSeries:
    """Current value of one (metric, label set) pair"""

    def __init__(self, descriptor: MetricDescriptor, labels: LabelSet):
        self.descriptor = descriptor
        self.labels = labels
        self._lock = threading.Lock()
        self._value = 0.0
        self._updated_ms = _now_ms()

    def add(self, delta: float) -> None:
        with self._lock:
            self._value += delta
            self._updated_ms = _now_ms()

    def set(self, value: float) -> None:
        with self._lock:
            self._value = float(value)
            self._updated_ms = _now_ms()

    def get(self) -> float:
        with self._lock:
            return self._value

    def sample(self) -> MetricValue:
        """Read value and update time together"""
        with self._lock:
            value, updated_ms = self._value, self._updated_ms
        return MetricValue(self.descriptor.name, value, self.labels, updated_ms)


class _Metric:
    """A descriptor and its lazily created series"""

    def __init__(self, descriptor: MetricDescriptor):
        self.descriptor = descriptor
        self._lock = threading.Lock()
        self._series: Dict[LabelSet, TimeSeries] = {}

    def series(self, labels: LabelSet) -> TimeSeries:
        series = self._series.get(labels)
        if series is not None:
            return series
        with self._lock:
            series = self._series.get(labels)
            if series is None:
                series = TimeSeries(self.descriptor, labels)
                self._series[labels] = series
            return series

    def peek(self, labels: LabelSet) -> Optional[TimeSeries]:
        with self._lock:
            return self._series.get(labels)

    def snapshot(self) -> MetricFamily:
        with self._lock:
            series = list(self._series.values())
        series.sort(key=lambda s: s.labels.values)
        return MetricFamily(self.descriptor, [s.sample() for s in series])

    def __len__(self) -> int:
        with self._lock:
            return len(self._series)


class _MetricHandle:
    """Caller-facing handle for one registered metric"""

    def __init__(self, metric: _Metric):
        self._metric = metric

    @property
    def descriptor(self) -> MetricDescriptor:
        return self._metric.descriptor

    @property
    def name(self) -> str:
        return self._metric.descriptor.name

    def _series(self, labels: Labels) -> TimeSeries:
        return self._metric.series(self.descriptor.label_set(labels))

    def value(self, labels: Labels = None) -> float:
        """Current value of a series, 0 if it was never used"""
        series = self._metric.peek(self.descriptor.label_set(labels))
        return series.get() if series is not None else 0.0

    def _bind_labels(self, labels: Labels, kwargs: Dict[str, str]) -> TimeSeries:
        if labels is not None and kwargs:
            raise TypeError("pass labels either as a mapping or as keyword arguments, not both")
        return self._series(labels if labels is not None else kwargs)


class CounterHandle(_MetricHandle):
    """Monotonic counter"""

    def add(self, labels: Labels = None, delta: float = 1) -> None:
        label_set = self.descriptor.label_set(labels)
        _check_delta(self.name, delta)
        self._metric.series(label_set).add(delta)

    def labels(self, labels: Labels = None, **kwargs: str) -> "BoundCounter":
        """Bind label values once and reuse the returned child"""
        return BoundCounter(self._bind_labels(labels, kwargs))


class GaugeHandle(_MetricHandle):
    """Last-value gauge"""

    def set(self, labels: Labels = None, value: float = 0) -> None:
        label_set = self.descriptor.label_set(labels)
        _check_value(self.name, value)
        self._metric.series(label_set).set(value)

    def labels(self, labels: Labels = None, **kwargs: str) -> "BoundGauge":
        """Bind label values once and reuse the returned child"""
        return BoundGauge(self._bind_labels(labels, kwargs))


class BoundCounter:
    def __init__(self, series: TimeSeries):
        self._series = series

    def add(self, delta: float = 1) -> None:
        _check_delta(self._series.descriptor.name, delta)
        self._series.add(delta)

    def value(self) -> float:
        return self._series.get()


class BoundGauge:
    def __init__(self, series: TimeSeries):
        self._series = series

    def set(self, value: float) -> None:
        _check_value(self._series.descriptor.name, value)
        self._series.set(value)

    def value(self) -> float:
        return self._series.get()


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        return False


def _check_delta(name: str, delta) -> None:
    if not _is_number(delta) or not _is_finite(delta):
        raise InvalidDelta(name, f"delta must be a finite number, got {delta!r}")
    if delta < 0:
        raise InvalidDelta(name, f"counters can only increase, got delta {delta!r}")


def _check_value(name: str, value) -> None:
    if not _is_number(value) or not _is_finite(value):
        raise InvalidValue(name, f"value must be a finite number, got {value!r}")


Handle = Union[CounterHandle, GaugeHandle]


class MetricRegistry:
    """Process-wide registry of counters and gauges

    Create one instance at startup and pass it to every component that records
    or renders metrics. Definitions are serialised on a registry lock; updates
    only lock the series they touch.
    """

    def __init__(self, include_timestamps: bool = False):
        self.include_timestamps = include_timestamps
        self._lock = threading.Lock()
        self._handles: Dict[str, Handle] = {}
        self._collectors: Dict[str, "BaseCollector"] = {}

    def define_counter(self, name: str, help_text: str, label_keys=()) -> CounterHandle:
        """Register a monotonic counter, or return the identical existing one"""
        return self._define(MetricDescriptor(name, MetricType.COUNTER, help_text, tuple(label_keys)), CounterHandle)

    def define_gauge(self, name: str, help_text: str, label_keys=()) -> GaugeHandle:
        """Register a gauge, or return the identical existing one"""
        return self._define(MetricDescriptor(name, MetricType.GAUGE, help_text, tuple(label_keys)), GaugeHandle)

    def _define(self, descriptor: MetricDescriptor, handle_class) -> Handle:
        with self._lock:
            existing = self._handles.get(descriptor.name)
            if existing is not None:
                if not existing.descriptor.same_schema(descriptor):
                    raise DuplicateMetricName(
                        descriptor.name,
                        f"already registered as {existing.descriptor.metric_type.value} "
                        f"with labels {list(existing.descriptor.label_keys)}"
                    )
                if existing.descriptor.help_text != descriptor.help_text:
                    logger.warning(f"Metric {descriptor.name} redefined with different help text, keeping the first")
                return existing

            handle = handle_class(_Metric(descriptor))
            self._handles[descriptor.name] = handle
            logger.debug(f"Defined {descriptor.metric_type.value} {descriptor.name}")
            return handle

    def get(self, name: str) -> Optional[Handle]:
        """Get handle by metric name"""
        with self._lock:
            return self._handles.get(name)

    def list_metrics(self) -> List[str]:
        """List registered metric names in definition order"""
        with self._lock:
            return list(self._handles.keys())

    def series_count(self) -> int:
        with self._lock:
            handles = list(self._handles.values())
        return sum(len(handle._metric) for handle in handles)

    def register_collector(self, collector: "BaseCollector") -> None:
        """Register a collector refreshed on every scrape"""
        with self._lock:
            self._collectors[collector.name] = collector
        logger.info(f"Registered collector: {collector.name}")

    def unregister_collector(self, name: str) -> None:
        with self._lock:
            self._collectors.pop(name, None)

    def list_collectors(self) -> List[str]:
        with self._lock:
            return list(self._collectors.keys())

    def run_collectors(self) -> int:
        """Run all enabled collectors, returning how many failed"""
        with self._lock:
            collectors = list(self._collectors.items())

        errors = 0
        for name, collector in collectors:
            if not collector.is_enabled():
                continue
            try:
                collector.collect()
            except Exception as e:
                # Continue with other collectors even if one fails
                errors += 1
                logger.error(f"Collector {name} failed: {e}", exc_info=True)
        return errors

    def collect(self) -> List[MetricFamily]:
        """Snapshot every metric without touching any series

        Scrape paths call run_collectors() first to refresh collector-backed
        instruments.
        """
        with self._lock:
            handles = list(self._handles.values())
        return [handle._metric.snapshot() for handle in handles]

    def render(self) -> str:
        """Render all metrics in the Prometheus text exposition format"""
        return generate_prometheus_output(self.collect(), include_timestamps=self.include_timestamps)
