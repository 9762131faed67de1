"""Metric data models"""
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import InvalidLabelSet, InvalidMetricDefinition


METRIC_NAME_RE = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
LABEL_KEY_RE = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class MetricType(Enum):
    """Prometheus metric types"""
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class LabelSet:
    """Immutable label values, ordered as the descriptor declares its keys"""
    keys: Tuple[str, ...] = ()
    values: Tuple[str, ...] = ()

    def as_dict(self) -> Dict[str, str]:
        return dict(zip(self.keys, self.values))


@dataclass(frozen=True)
class MetricDescriptor:
    """Identity and schema of one metric"""
    name: str
    metric_type: MetricType
    help_text: str
    label_keys: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.name, str) or not METRIC_NAME_RE.match(self.name):
            raise InvalidMetricDefinition(str(self.name), "invalid metric name")
        # Normalise lists to tuples so descriptors stay hashable and comparable
        object.__setattr__(self, "label_keys", tuple(self.label_keys))
        seen = set()
        for key in self.label_keys:
            if not isinstance(key, str) or not LABEL_KEY_RE.match(key) or key.startswith("__"):
                raise InvalidMetricDefinition(self.name, f"invalid label key {key!r}")
            if key in seen:
                raise InvalidMetricDefinition(self.name, f"duplicate label key {key!r}")
            seen.add(key)

    def same_schema(self, other: "MetricDescriptor") -> bool:
        """Check whether two descriptors agree on kind and ordered label keys"""
        return self.metric_type == other.metric_type and self.label_keys == other.label_keys

    def label_set(self, labels: Optional[Mapping[str, str]]) -> LabelSet:
        """Validate a label mapping against this descriptor and build its LabelSet"""
        labels = labels or {}
        if not isinstance(labels, Mapping):
            raise InvalidLabelSet(self.name, f"labels must be a mapping, got {type(labels).__name__}")

        if set(labels.keys()) != set(self.label_keys):
            raise InvalidLabelSet(
                self.name,
                f"expected label keys {list(self.label_keys)}, got {sorted(map(repr, labels))}"
            )

        values = []
        for key in self.label_keys:
            value = labels[key]
            if not isinstance(value, str):
                raise InvalidLabelSet(self.name, f"label {key!r} must be a string, got {type(value).__name__}")
            values.append(value)

        return LabelSet(self.label_keys, tuple(values))


def format_value(value: float) -> str:
    """Format a sample value for the exposition format"""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if float(value).is_integer() and abs(value) < 1e15:
        return str(int(value))
    return repr(float(value))


def escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def escape_label_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


@dataclass
class MetricValue:
    """Represents a single sample of one time series"""
    name: str
    value: float
    labels: LabelSet = field(default_factory=LabelSet)
    timestamp_ms: Optional[int] = None

    def to_prometheus_line(self, include_timestamp: bool = False) -> str:
        """Convert to Prometheus exposition format"""
        labels_str = ""
        if self.labels.keys:
            label_pairs = [
                f'{k}="{escape_label_value(v)}"'
                for k, v in zip(self.labels.keys, self.labels.values)
            ]
            labels_str = "{" + ",".join(label_pairs) + "}"

        line = f"{self.name}{labels_str} {format_value(self.value)}"
        if include_timestamp and self.timestamp_ms is not None:
            line += f" {self.timestamp_ms}"
        return line


@dataclass
class MetricFamily:
    """One metric with every sample collected for it"""
    descriptor: MetricDescriptor
    samples: List[MetricValue] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def help_text(self) -> str:
        return self.descriptor.help_text

    @property
    def metric_type(self) -> MetricType:
        return self.descriptor.metric_type
