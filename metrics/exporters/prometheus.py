"""Prometheus text exposition format"""
from typing import List

from ..models import MetricFamily, escape_help


CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"


def generate_prometheus_output(families: List[MetricFamily], include_timestamps: bool = False) -> str:
    """Generate Prometheus exposition format output

    Every family gets its HELP and TYPE comments, even before its first sample.
    """
    lines = []

    for family in families:
        lines.append(f"# HELP {family.name} {escape_help(family.help_text)}")
        lines.append(f"# TYPE {family.name} {family.metric_type.value}")

        for sample in family.samples:
            lines.append(sample.to_prometheus_line(include_timestamp=include_timestamps))

    if not lines:
        return ""

    lines.append("")  # Final newline
    return "\n".join(lines)
