"""In-process counters and gauges with Prometheus text exposition"""
from .errors import (
    MetricsError,
    DuplicateMetricName,
    InvalidMetricDefinition,
    InvalidLabelSet,
    InvalidDelta,
    InvalidValue,
)
from .models import LabelSet, MetricDescriptor, MetricFamily, MetricType, MetricValue
from .registry import CounterHandle, GaugeHandle, MetricRegistry

__all__ = [
    'MetricsError',
    'DuplicateMetricName',
    'InvalidMetricDefinition',
    'InvalidLabelSet',
    'InvalidDelta',
    'InvalidValue',
    'LabelSet',
    'MetricDescriptor',
    'MetricFamily',
    'MetricType',
    'MetricValue',
    'CounterHandle',
    'GaugeHandle',
    'MetricRegistry'
]
