"""
evaluator.py — Recompute every derived metric for one period.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from metrics_engine.catalog.catalog import MetricCatalog
from metrics_engine.core.logging import get_logger
from metrics_engine.services.calculation.dependency_graph import DependencyGraph

logger = get_logger(__name__)


class MetricEvaluator:
    """
    Fill in all derived metrics for one period's values.

    The calculation order is taken from the dependency graph once, at
    construction, so a misconfigured catalog fails here rather than on the
    first period.
    """

    def __init__(self, catalog: MetricCatalog, graph: Optional[DependencyGraph] = None):
        self.catalog = catalog
        self.graph = graph or DependencyGraph(catalog)
        self._order = self.graph.get_calculation_order()

    def calculate(self, period_values: Mapping[str, float]) -> Dict[str, float]:
        """
        Return a new map with base values as given and every derived value recomputed.

        Each derived metric sees the values already computed for its
        dependencies. Derived values present in the input are overwritten;
        the input mapping is never mutated.
        """
        result: Dict[str, float] = dict(period_values)
        for name in self._order:
            metric = self.catalog.get_derived_metric(name)
            if metric is not None:
                result[name] = metric.calculate(result)
        return result
