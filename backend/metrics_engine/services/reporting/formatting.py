"""
formatting.py — Display-ready values for tables, charts and exports.

Decimal places are picked from the metric NAME, checked in this order:
- contains "Price", "Revenue", "GM" or "OM"  -> 2 decimals
- contains "%"                               -> 1 decimal
- contains "Unit"                            -> 2 decimals
- anything else                              -> 0 decimals

Because the checks are ordered, "% Average GM" formats with 2 decimals.
Halfway values round away from zero (2.5 -> "3", 1.125 -> "1.13"), matching
the dashboard's number display rather than Python's round-half-to-even.
Currency symbols and locale grouping are left to the consumer.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from metrics_engine.services.calculation.adjustments import coerce_numeric
from metrics_engine.services.calculation.types import PeriodRecord

_TWO_DECIMAL_MARKERS = ("Price", "Revenue", "GM", "OM")

# Wide enough to quantize any finite float without InvalidOperation
_DISPLAY_CONTEXT = Context(prec=400)


def decimal_places(metric: str) -> int:
    if any(marker in metric for marker in _TWO_DECIMAL_MARKERS):
        return 2
    if "%" in metric:
        return 1
    if "Unit" in metric:
        return 2
    return 0


def format_metric_value(value: Optional[float], metric: str) -> str:
    """Format one value for display; None formats as an empty string."""
    if value is None:
        return ""
    places = decimal_places(metric)
    if not math.isfinite(value):
        return f"{value:.{places}f}"
    rounded = Decimal(str(value)).quantize(
        Decimal(1).scaleb(-places),
        rounding=ROUND_HALF_UP,
        context=_DISPLAY_CONTEXT,
    )
    if rounded == 0:
        rounded = abs(rounded)  # drop the sign of -0.0 and of values rounding to zero
    return f"{rounded:f}"


def format_records_for_display(
    records: Sequence[PeriodRecord],
    metric_names: Iterable[str],
    label_key: str = "month",
) -> List[Dict[str, str]]:
    """One dict of formatted strings per period, keyed by metric name plus the label key."""
    names = list(metric_names)
    rows: List[Dict[str, str]] = []
    for record in records:
        row: Dict[str, str] = {label_key: record.label}
        for name in names:
            row[name] = format_metric_value(coerce_numeric(record.values.get(name)), name)
        rows.append(row)
    return rows


def build_chart_series(
    original_records: Sequence[PeriodRecord],
    adjusted_records: Sequence[PeriodRecord],
    selected_metrics: Iterable[str],
) -> List[Dict[str, Any]]:
    """
    Chart rows pairing actual and adjusted values.

    Example row:
        {"name": "Jan", "Tons (Actual)": 100.0, "Tons (Adjusted)": 80.0}
    """
    metrics = list(selected_metrics)
    adjusted_by_label = {record.label: record for record in adjusted_records}
    rows: List[Dict[str, Any]] = []
    for original in original_records:
        adjusted = adjusted_by_label.get(original.label)
        row: Dict[str, Any] = {"name": original.label}
        for metric in metrics:
            row[f"{metric} (Actual)"] = coerce_numeric(original.values.get(metric))
            row[f"{metric} (Adjusted)"] = coerce_numeric(
                adjusted.values.get(metric) if adjusted else None
            )
        rows.append(row)
    return rows


def records_to_frame(
    records: Sequence[PeriodRecord],
    metric_names: Iterable[str],
) -> pd.DataFrame:
    """Numeric table: one row per period (indexed by label), one column per metric."""
    names = list(metric_names)
    data = {
        record.label: [coerce_numeric(record.values.get(name)) for name in names]
        for record in records
    }
    return pd.DataFrame.from_dict(data, orient="index", columns=names)
