"""
dependency_graph.py — Calculation order for the metric catalog.

Builds the *dependents* graph (metric -> metrics that need it) and
topologically sorts it with a depth-first traversal that starts from every
base metric. A node finishes after all of its dependents have finished, so
the finish list runs dependents-first; reversing it gives the calculation
order, in which every derived metric comes after all of its dependencies.

Derived metrics that no base metric reaches (e.g. a derived metric without
dependencies) are traversed afterwards in declaration order, so the order
always covers the entire catalog.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set, Tuple

from metrics_engine.catalog.catalog import MetricCatalog
from metrics_engine.core.errors import CircularDependencyError
from metrics_engine.core.logging import get_logger

logger = get_logger(__name__)

_VISITING = "visiting"
_VISITED = "visited"


def build_dependents_graph(catalog: MetricCatalog) -> Dict[str, List[str]]:
    """
    Map every metric to the metrics that depend on it.

    Dependents are listed in catalog declaration order, which keeps the
    traversal (and the resulting order) deterministic.
    """
    graph: Dict[str, List[str]] = {name: [] for name in catalog.all_metric_names()}
    for metric in catalog.list_derived_metrics():
        for dependency in metric.dependencies:
            dependents = graph[dependency]
            if metric.name not in dependents:
                dependents.append(metric.name)
    return graph


class DependencyGraph:
    """Dependency structure and cached calculation order for one catalog."""

    def __init__(self, catalog: MetricCatalog):
        self.catalog = catalog
        self._dependents = build_dependents_graph(catalog)
        self._order: Optional[Tuple[str, ...]] = None

    def get_calculation_order(self) -> Tuple[str, ...]:
        """
        Return all metric names, dependencies before dependents.

        Raises:
            CircularDependencyError: if any dependency chain loops back on itself
        """
        if self._order is None:
            self._order = self._topological_order()
            logger.info("Calculation order built for %d metrics", len(self._order))
        return self._order

    def _topological_order(self) -> Tuple[str, ...]:
        state: Dict[str, str] = {}
        finished: List[str] = []

        def visit(metric: str) -> None:
            mark = state.get(metric)
            if mark == _VISITING:
                raise CircularDependencyError(metric)
            if mark == _VISITED:
                return
            state[metric] = _VISITING
            for dependent in self._dependents.get(metric, []):
                visit(dependent)
            state[metric] = _VISITED
            finished.append(metric)

        for metric in self.catalog.list_base_metrics():
            visit(metric)

        unreachable = [
            metric.name for metric in self.catalog.list_derived_metrics()
            if metric.name not in state
        ]
        if unreachable:
            logger.debug("Derived metrics not reachable from base metrics: %s", unreachable)
        for name in unreachable:
            visit(name)

        finished.reverse()
        return tuple(finished)

    def dependents_of(self, metric: str) -> Set[str]:
        """Every metric downstream of `metric` (transitively)."""
        seen: Set[str] = set()
        stack = list(self._dependents.get(metric, []))
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._dependents.get(current, []))
        return seen

    def dependencies_of(self, metric: str) -> Set[str]:
        """Every metric upstream of `metric` (transitively)."""
        seen: Set[str] = set()
        definition = self.catalog.get_derived_metric(metric)
        stack = list(definition.dependencies) if definition else []
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            upstream = self.catalog.get_derived_metric(current)
            if upstream:
                stack.extend(upstream.dependencies)
        return seen
