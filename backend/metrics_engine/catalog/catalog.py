"""
catalog.py — Immutable metric catalog.

A MetricCatalog holds the base metrics (independent inputs) and the derived
metrics (declared formulas with explicit dependency lists). It is built once,
validated up front, and is read-only afterwards so it can be shared by
reference between the dependency graph, the evaluator, and concurrent callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from metrics_engine.catalog.calculators import CalculatorSpec
from metrics_engine.core.errors import MetricConfigurationError
from metrics_engine.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ADJUSTMENT_RANGE: Tuple[float, float] = (-50.0, 50.0)


@dataclass(frozen=True)
class DerivedMetric:
    """
    A metric computed from other metrics.

    Attributes:
        name: Unique metric name
        dependencies: Metric names (base or derived) the formula needs
        calculator: Declarative formula
        description: Human-readable explanation
    """
    name: str
    dependencies: Tuple[str, ...]
    calculator: CalculatorSpec
    description: Optional[str] = None

    def calculate(self, values: Mapping[str, float]) -> float:
        return self.calculator.evaluate(values)


def derived(
    name: str,
    dependencies: Sequence[str],
    calculator: CalculatorSpec,
    description: Optional[str] = None,
) -> DerivedMetric:
    """Shorthand used by catalog definitions."""
    return DerivedMetric(
        name=name,
        dependencies=tuple(dependencies),
        calculator=calculator,
        description=description,
    )


class MetricCatalog:
    """
    Static definitions of base and derived metrics.

    Raises MetricConfigurationError on construction for:
    - duplicate metric names
    - dependencies that name no metric in the catalog
    - invalid calculator specs, or calculators reading undeclared dependencies
    """

    def __init__(
        self,
        base_metrics: Iterable[str],
        derived_metrics: Iterable[DerivedMetric],
        categories: Optional[Mapping[str, Sequence[str]]] = None,
        adjustment_ranges: Optional[Mapping[str, Tuple[float, float]]] = None,
    ):
        self._base: Tuple[str, ...] = tuple(base_metrics)
        self._derived: Tuple[DerivedMetric, ...] = tuple(derived_metrics)

        self._check_unique_names()
        self._derived_by_name: Mapping[str, DerivedMetric] = MappingProxyType(
            {metric.name: metric for metric in self._derived}
        )
        self._base_set = frozenset(self._base)
        self._check_dependencies()

        self._categories: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {category: tuple(names) for category, names in (categories or {}).items()}
        )
        self._check_categories()
        self._adjustment_ranges: Mapping[str, Tuple[float, float]] = MappingProxyType(
            dict(adjustment_ranges or {})
        )

        logger.info(
            "Metric catalog built: %d base metrics, %d derived metrics",
            len(self._base),
            len(self._derived),
        )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _check_unique_names(self) -> None:
        seen: Dict[str, int] = {}
        for name in list(self._base) + [metric.name for metric in self._derived]:
            if not name:
                raise MetricConfigurationError("Metric names must be non-empty strings")
            seen[name] = seen.get(name, 0) + 1
        duplicates = sorted(name for name, count in seen.items() if count > 1)
        if duplicates:
            raise MetricConfigurationError(f"Duplicate metric names: {', '.join(duplicates)}")

    def _check_dependencies(self) -> None:
        known = set(self._base) | set(self._derived_by_name)
        for metric in self._derived:
            missing = [dep for dep in metric.dependencies if dep not in known]
            if missing:
                raise MetricConfigurationError(
                    f"{metric.name}: unknown dependencies {missing}"
                )
            metric.calculator.validate(metric.name)
            undeclared = [
                operand for operand in metric.calculator.operands
                if operand not in metric.dependencies
            ]
            if undeclared:
                raise MetricConfigurationError(
                    f"{metric.name}: calculator reads undeclared dependencies {undeclared}"
                )

    def _check_categories(self) -> None:
        known = set(self._base) | set(self._derived_by_name)
        for category, names in self._categories.items():
            unknown = [name for name in names if name not in known]
            if unknown:
                raise MetricConfigurationError(
                    f"Category '{category}' lists unknown metrics {unknown}"
                )

    # -------------------------------------------------------------------------
    # Read-only accessors
    # -------------------------------------------------------------------------

    def list_base_metrics(self) -> Tuple[str, ...]:
        return self._base

    def list_derived_metrics(self) -> Tuple[DerivedMetric, ...]:
        return self._derived

    def all_metric_names(self) -> Tuple[str, ...]:
        """Base metrics first, then derived metrics, each in declaration order."""
        return self._base + tuple(metric.name for metric in self._derived)

    def is_base_metric(self, name: str) -> bool:
        return name in self._base_set

    def is_derived_metric(self, name: str) -> bool:
        return name in self._derived_by_name

    def get_derived_metric(self, name: str) -> Optional[DerivedMetric]:
        return self._derived_by_name.get(name)

    def metric_categories(self) -> Mapping[str, Tuple[str, ...]]:
        return self._categories

    def category_of(self, name: str) -> Optional[str]:
        for category, names in self._categories.items():
            if name in names:
                return category
        return None

    def adjustment_range(self, name: str) -> Tuple[float, float]:
        """Default slider range (percent) for adjusting a base metric."""
        return self._adjustment_ranges.get(name, DEFAULT_ADJUSTMENT_RANGE)

    def __contains__(self, name: object) -> bool:
        return name in self._base_set or name in self._derived_by_name

    def __len__(self) -> int:
        return len(self._base) + len(self._derived)

    def describe(self) -> List[Dict[str, object]]:
        """Plain-data dump of the catalog, e.g. for a metric picker."""
        rows: List[Dict[str, object]] = []
        for name in self._base:
            rows.append({
                "name": name,
                "kind": "base",
                "category": self.category_of(name),
                "dependencies": [],
                "description": None,
            })
        for metric in self._derived:
            rows.append({
                "name": metric.name,
                "kind": "derived",
                "category": self.category_of(metric.name),
                "dependencies": list(metric.dependencies),
                "description": metric.description,
            })
        return rows
