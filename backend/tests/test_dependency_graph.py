"""
Unit tests for the dependency graph and calculation order.
"""

import pytest

from metrics_engine.catalog import MetricCatalog, derived, function, register_calculator, sum_of
from metrics_engine.core.errors import CircularDependencyError, MetricConfigurationError
from metrics_engine.services.calculation.dependency_graph import (
    DependencyGraph,
    build_dependents_graph,
)
from metrics_engine.services.calculation.evaluator import MetricEvaluator


@register_calculator("test_fixed_hundred")
def _fixed_hundred():
    return 100.0


def assert_topologically_valid(catalog, order):
    index = {name: position for position, name in enumerate(order)}
    for metric in catalog.list_derived_metrics():
        for dependency in metric.dependencies:
            assert index[dependency] < index[metric.name], (
                f"{dependency} must come before {metric.name}"
            )


def test_dependents_graph(default_catalog):
    graph = build_dependents_graph(default_catalog)
    assert set(graph) == set(default_catalog.all_metric_names())
    assert "Average Price" in graph["Tons"]
    assert "Unit Waste" in graph["Tons"]
    assert graph["% Average OM"] == []
    assert graph["Average GM"] == ["Average OM", "% Average GM"]


def test_default_order_is_topological_and_complete(default_catalog):
    order = DependencyGraph(default_catalog).get_calculation_order()
    assert sorted(order) == sorted(default_catalog.all_metric_names())
    assert len(order) == len(set(order))
    assert_topologically_valid(default_catalog, order)


def test_order_is_cached_and_deterministic(default_catalog):
    graph = DependencyGraph(default_catalog)
    first = graph.get_calculation_order()
    assert graph.get_calculation_order() is first
    assert DependencyGraph(default_catalog).get_calculation_order() == first


def test_multi_level_chain():
    catalog = MetricCatalog(
        ["A"],
        [
            derived("C", ["B"], sum_of("B")),
            derived("B", ["A"], sum_of("A")),
            derived("D", ["C", "A"], sum_of("C", "A")),
        ],
    )
    order = DependencyGraph(catalog).get_calculation_order()
    assert order.index("A") < order.index("B") < order.index("C") < order.index("D")


def test_cycle_detected():
    catalog = MetricCatalog(
        ["A"],
        [
            derived("X", ["A", "Y"], sum_of("A", "Y")),
            derived("Y", ["X"], sum_of("X")),
        ],
    )
    with pytest.raises(CircularDependencyError) as exc_info:
        DependencyGraph(catalog).get_calculation_order()
    assert exc_info.value.metric in {"X", "Y"}
    assert "Circular dependency detected involving" in str(exc_info.value)
    assert isinstance(exc_info.value, MetricConfigurationError)


def test_self_dependency_detected_even_when_unreachable():
    catalog = MetricCatalog(["A"], [derived("Loop", ["Loop"], sum_of("Loop"))])
    with pytest.raises(CircularDependencyError, match="Loop"):
        DependencyGraph(catalog).get_calculation_order()


def test_cycle_aborts_evaluator_construction():
    catalog = MetricCatalog(
        ["A"],
        [
            derived("X", ["Y"], sum_of("Y")),
            derived("Y", ["X"], sum_of("X")),
        ],
    )
    with pytest.raises(CircularDependencyError):
        MetricEvaluator(catalog)


def test_unreachable_derived_metric_is_still_ordered():
    catalog = MetricCatalog(
        ["A"],
        [
            derived("Constant", [], function("test_fixed_hundred")),
            derived("Scaled", ["Constant", "A"], sum_of("Constant", "A")),
        ],
    )
    order = DependencyGraph(catalog).get_calculation_order()
    assert set(order) == {"A", "Constant", "Scaled"}
    assert order.index("Constant") < order.index("Scaled")
    assert MetricEvaluator(catalog).calculate({"A": 1})["Scaled"] == 101


def test_transitive_lookups(default_catalog):
    graph = DependencyGraph(default_catalog)
    downstream = graph.dependents_of("Tons")
    assert {"Average Price", "Average GM", "% Average OM", "Unit Shipping"} <= downstream
    assert "Total Expenses" not in downstream

    upstream = graph.dependencies_of("% Average OM")
    assert {"Tons", "Product Revenue", "Process Labor", "Legal", "Average GM"} <= upstream
    assert "Total Orders" not in upstream
    assert graph.dependencies_of("Tons") == set()
