"""
impact.py — Original-vs-adjusted deltas per metric.

Used by the what-if view to show how far each metric moved under the active
adjustments, and by exports that tabulate the impact of a scenario.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence

import pandas as pd

from metrics_engine.services.calculation.adjustments import coerce_numeric
from metrics_engine.services.calculation.types import PeriodRecord

POSITIVE_INFINITY_LABEL = "+∞%"
ZERO_CHANGE_LABEL = "0%"


@dataclass(frozen=True)
class MetricImpact:
    """Change of one metric between original and adjusted data."""
    original: float
    adjusted: float
    change: float
    percent_change: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def percent_change_label(original: float, adjusted: float) -> str:
    """
    Signed percentage change to one decimal, e.g. "+12.5%" / "-3.0%".

    A zero original has no meaningful ratio: "+∞%" when the adjusted value
    is positive, otherwise "0%".
    """
    if original == 0:
        return POSITIVE_INFINITY_LABEL if adjusted > 0 else ZERO_CHANGE_LABEL
    percent = (adjusted - original) / abs(original) * 100
    return f"{percent:+.1f}%"


def change_direction(label: str) -> str:
    """Classify a percent-change label as "increase", "decrease" or "neutral"."""
    if label.startswith("+"):
        return "increase"
    if label.startswith("-"):
        return "decrease"
    return "neutral"


def _number(values: Mapping[str, Any], name: str) -> float:
    return coerce_numeric(values.get(name))


def impact(
    original: Mapping[str, float],
    adjusted: Mapping[str, float],
    metric_names: Iterable[str],
) -> Dict[str, MetricImpact]:
    """Impact of the adjustments on every metric in `metric_names` (missing values read as 0)."""
    result: Dict[str, MetricImpact] = {}
    for name in metric_names:
        before = _number(original, name)
        after = _number(adjusted, name)
        result[name] = MetricImpact(
            original=before,
            adjusted=after,
            change=after - before,
            percent_change=percent_change_label(before, after),
        )
    return result


def period_impacts(
    original_records: Sequence[PeriodRecord],
    adjusted_records: Sequence[PeriodRecord],
    metric_names: Iterable[str],
) -> Dict[str, Dict[str, MetricImpact]]:
    """
    Impact per period label.

    Periods are matched by label, not by position; a period missing from
    the adjusted data compares against an empty record.
    """
    names = list(metric_names)
    adjusted_by_label = {record.label: record for record in adjusted_records}
    result: Dict[str, Dict[str, MetricImpact]] = {}
    for record in original_records:
        adjusted = adjusted_by_label.get(record.label)
        result[record.label] = impact(
            record.values,
            adjusted.values if adjusted else {},
            names,
        )
    return result


def impact_to_frame(impacts: Mapping[str, MetricImpact]) -> pd.DataFrame:
    """One row per metric: original, adjusted, change, percent_change."""
    rows: List[Dict[str, Any]] = [
        {"metric": name, **metric_impact.to_dict()}
        for name, metric_impact in impacts.items()
    ]
    frame = pd.DataFrame(rows, columns=["metric", "original", "adjusted", "change", "percent_change"])
    return frame.set_index("metric")
