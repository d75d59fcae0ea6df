"""
calculation — Calculation order, per-period evaluation and what-if adjustments.

The MetricsEngine facade lives in metrics_engine.services.calculation.engine.
"""

from metrics_engine.services.calculation.adjustments import (
    AdjustmentEngine,
    apply_adjustment,
    clear_adjustment,
    coerce_numeric,
    has_adjustments,
    set_adjustment,
)
from metrics_engine.services.calculation.dependency_graph import (
    DependencyGraph,
    build_dependents_graph,
)
from metrics_engine.services.calculation.evaluator import MetricEvaluator
from metrics_engine.services.calculation.types import (
    Adjustment,
    AdjustmentsByPeriod,
    PeriodRecord,
    Scenario,
    as_period_records,
)

__all__ = [
    "AdjustmentEngine",
    "apply_adjustment",
    "clear_adjustment",
    "coerce_numeric",
    "has_adjustments",
    "set_adjustment",
    "DependencyGraph",
    "build_dependents_graph",
    "MetricEvaluator",
    "Adjustment",
    "AdjustmentsByPeriod",
    "PeriodRecord",
    "Scenario",
    "as_period_records",
]
