"""
catalog — Metric definitions for the calculation engine.

Base metrics are independent per-period inputs; derived metrics are declared
formulas over other metrics. The catalog is validated once and is immutable.
"""

from metrics_engine.catalog.calculators import (
    CalculatorKind,
    CalculatorSpec,
    difference,
    function,
    percent_of,
    ratio,
    register_calculator,
    sum_of,
)
from metrics_engine.catalog.catalog import DerivedMetric, MetricCatalog, derived
from metrics_engine.catalog.definitions import (
    BASE_METRICS,
    DEFAULT_ADJUSTMENT_RANGES,
    DERIVED_METRICS,
    METRIC_CATEGORIES,
    build_default_catalog,
)

__all__ = [
    "CalculatorKind",
    "CalculatorSpec",
    "difference",
    "function",
    "percent_of",
    "ratio",
    "register_calculator",
    "sum_of",
    "DerivedMetric",
    "MetricCatalog",
    "derived",
    "BASE_METRICS",
    "DEFAULT_ADJUSTMENT_RANGES",
    "DERIVED_METRICS",
    "METRIC_CATEGORIES",
    "build_default_catalog",
]
