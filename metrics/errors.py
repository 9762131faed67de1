"""Errors raised by the metrics registry"""


class MetricsError(Exception):
    """Base class for all metrics registry errors"""

    def __init__(self, metric_name: str, message: str):
        super().__init__(f"{metric_name}: {message}")
        self.metric_name = metric_name


class DuplicateMetricName(MetricsError):
    """Metric name already registered with a different kind or label schema"""


class InvalidMetricDefinition(MetricsError):
    """Metric name or label keys are not valid exposition identifiers"""


class InvalidLabelSet(MetricsError):
    """Labels do not match the metric's declared label keys"""


class InvalidDelta(MetricsError):
    """Counter increment is negative or not a finite number"""


class InvalidValue(MetricsError):
    """Gauge value is not a finite number"""
