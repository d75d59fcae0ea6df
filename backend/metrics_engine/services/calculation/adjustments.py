"""
adjustments.py — Apply what-if adjustments and recompute downstream metrics.

Purpose:
- Coerce raw per-period values (numbers or dashboard-style numeric strings)
  into floats.
- Apply percentage/absolute adjustments to base metrics, period by period.
- Recompute every derived metric through the evaluator so no derived value
  is ever left stale.
- Provide the small editing helpers a UI needs to build an adjustment set.

Semantics worth knowing as a caller:
- Adjustments overwrite, they do not compose. When a period lists several
  adjustments for the same metric, each one is computed from the ORIGINAL
  value and the last one wins ("+10% then absolute 5" leaves 5).
- This is NOT sequential application: "absolute 5 then +10%" on an
  original of 100 leaves 110 here, where applying each step to the running
  value would leave 5.5. Sets built with set_adjustment() hold one entry
  per metric and period, so both readings agree for them.
- Adjustments naming unknown or derived metrics are ignored unless strict
  mode is on (settings.STRICT_ADJUSTMENT_TARGETS or strict=True).
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from metrics_engine.catalog.catalog import MetricCatalog
from metrics_engine.core.config import settings
from metrics_engine.core.errors import InvalidAdjustmentError
from metrics_engine.core.logging import get_logger
from metrics_engine.services.calculation.evaluator import MetricEvaluator
from metrics_engine.services.calculation.types import (
    Adjustment,
    AdjustmentType,
    AdjustmentsByPeriod,
    PeriodRecord,
)

logger = get_logger(__name__)

# Quotes (straight and curly), currency sign, thousands separators, whitespace
_NUMERIC_NOISE = re.compile(r"[\"“”$,\s]")


def coerce_numeric(value: Any) -> float:
    """
    Convert a stored metric value to a float.

    - int/float pass through
    - "$1,234.50" -> 1234.5, "(500)" -> -500.0
    - None, booleans, empty or unparseable strings, NaN/inf strings -> 0.0
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = _NUMERIC_NOISE.sub("", str(value))
    negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1]
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return -number if negative else number


def apply_adjustment(original: float, adjustment: Adjustment) -> float:
    """New value for one base metric under one adjustment."""
    if adjustment.type == "percentage":
        return original * (1 + adjustment.value / 100)
    return adjustment.value


class AdjustmentEngine:
    """Perturb base metrics per period and recompute everything downstream."""

    def __init__(
        self,
        catalog: MetricCatalog,
        evaluator: Optional[MetricEvaluator] = None,
        strict: Optional[bool] = None,
    ):
        self.catalog = catalog
        self.evaluator = evaluator or MetricEvaluator(catalog)
        self.strict = settings.STRICT_ADJUSTMENT_TARGETS if strict is None else strict

    def apply_adjustments(
        self,
        original_periods: Sequence[PeriodRecord],
        adjustments_by_period: Mapping[str, Sequence[Adjustment]],
    ) -> List[PeriodRecord]:
        """
        Return new PeriodRecords with adjustments applied and derived metrics recomputed.

        The original records are not modified. Periods without adjustments are
        still recomputed, so passing an empty adjustment set is equivalent to
        running the evaluator on the original base values.
        """
        adjusted: List[PeriodRecord] = []
        for record in original_periods:
            period_adjustments = adjustments_by_period.get(record.label) or []
            adjusted.append(self._adjust_period(record, period_adjustments))
        return adjusted

    def _adjust_period(
        self,
        record: PeriodRecord,
        adjustments: Sequence[Adjustment],
    ) -> PeriodRecord:
        numeric: Dict[str, float] = {
            name: coerce_numeric(record.values.get(name))
            for name in self.catalog.all_metric_names()
        }
        originals = dict(numeric)

        for adjustment in adjustments:
            if not self.catalog.is_base_metric(adjustment.metric):
                if self.strict:
                    raise InvalidAdjustmentError(record.label, adjustment.metric)
                logger.debug(
                    "Ignoring adjustment for '%s' in %s: not a base metric",
                    adjustment.metric,
                    record.label,
                )
                continue
            numeric[adjustment.metric] = apply_adjustment(originals[adjustment.metric], adjustment)

        calculated = self.evaluator.calculate(numeric)

        values = dict(record.values)
        values.update(calculated)
        logger.debug(
            "Recomputed %s with %d adjustment(s)", record.label, len(adjustments)
        )
        return PeriodRecord(label=record.label, values=values)


# ============================================================================
# Adjustment-set editing helpers
# ============================================================================

def set_adjustment(
    adjustments: Mapping[str, Sequence[Adjustment]],
    period: str,
    metric: str,
    value: float,
    adjustment_type: AdjustmentType = "percentage",
) -> AdjustmentsByPeriod:
    """
    Return a new adjustment set where `metric` in `period` is adjusted by `value`.

    An existing adjustment for the same metric in that period is replaced in
    place; otherwise the new one is appended.
    """
    result: AdjustmentsByPeriod = {p: list(items) for p, items in adjustments.items()}
    new_adjustment = Adjustment(metric=metric, type=adjustment_type, value=value)
    period_items = result.setdefault(period, [])
    for index, existing in enumerate(period_items):
        if existing.metric == metric:
            period_items[index] = new_adjustment
            break
    else:
        period_items.append(new_adjustment)
    return result


def clear_adjustment(
    adjustments: Mapping[str, Sequence[Adjustment]],
    period: str,
    metric: str,
) -> AdjustmentsByPeriod:
    """Return a new adjustment set without `metric` in `period`; empty periods are dropped."""
    result: AdjustmentsByPeriod = {p: list(items) for p, items in adjustments.items()}
    if period in result:
        remaining = [item for item in result[period] if item.metric != metric]
        if remaining:
            result[period] = remaining
        else:
            del result[period]
    return result


def has_adjustments(adjustments: Mapping[str, Sequence[Adjustment]]) -> bool:
    return any(adjustments.get(period) for period in adjustments)
