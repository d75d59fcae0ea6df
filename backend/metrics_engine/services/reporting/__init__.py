"""
reporting — Impact summaries and display formatting for computed metrics.
"""

from metrics_engine.services.reporting.formatting import (
    build_chart_series,
    decimal_places,
    format_metric_value,
    format_records_for_display,
    records_to_frame,
)
from metrics_engine.services.reporting.impact import (
    MetricImpact,
    change_direction,
    impact,
    impact_to_frame,
    percent_change_label,
    period_impacts,
)

__all__ = [
    "build_chart_series",
    "decimal_places",
    "format_metric_value",
    "format_records_for_display",
    "records_to_frame",
    "MetricImpact",
    "change_direction",
    "impact",
    "impact_to_frame",
    "percent_change_label",
    "period_impacts",
]
