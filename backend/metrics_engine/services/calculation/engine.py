"""
engine.py — One-stop facade over the calculation services.

Wires catalog -> dependency graph -> evaluator -> adjustment engine once,
plus a scenario store, and exposes the operations a dashboard backend calls.
Construction fails loudly on a misconfigured catalog (cycles, unknown
dependencies); after that every call is a pure computation over its
arguments and can be shared across threads/requests.

Example:
    engine = MetricsEngine()
    records = engine.records_from_rows(rows)
    adjusted = engine.apply_scenario(records, "economic-downturn")
    impacts = engine.period_impacts(records, adjusted)
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from metrics_engine.catalog.catalog import MetricCatalog
from metrics_engine.catalog.definitions import build_default_catalog
from metrics_engine.core.config import Settings, settings as default_settings
from metrics_engine.core.logging import get_logger
from metrics_engine.services.calculation.adjustments import AdjustmentEngine
from metrics_engine.services.calculation.dependency_graph import DependencyGraph
from metrics_engine.services.calculation.evaluator import MetricEvaluator
from metrics_engine.services.calculation.types import (
    Adjustment,
    PeriodRecord,
    as_period_records,
)
from metrics_engine.services.reporting.impact import MetricImpact, impact, period_impacts
from metrics_engine.services.scenarios.predefined import build_predefined_scenarios
from metrics_engine.services.scenarios.store import ScenarioStore

logger = get_logger(__name__)


class MetricsEngine:
    """Catalog, calculation order, evaluator, adjustment engine and scenario store in one place."""

    def __init__(
        self,
        catalog: Optional[MetricCatalog] = None,
        settings: Optional[Settings] = None,
        scenario_store: Optional[ScenarioStore] = None,
    ):
        self.settings = settings or default_settings
        self.catalog = catalog or build_default_catalog()
        self.graph = DependencyGraph(self.catalog)
        self.evaluator = MetricEvaluator(self.catalog, self.graph)
        self.adjustment_engine = AdjustmentEngine(
            self.catalog,
            self.evaluator,
            strict=self.settings.STRICT_ADJUSTMENT_TARGETS,
        )
        self.scenarios = scenario_store or ScenarioStore(
            build_predefined_scenarios(self.settings.DEFAULT_PERIOD_LABELS)
        )
        logger.info("Metrics engine ready (%d metrics)", len(self.catalog))

    @property
    def calculation_order(self) -> Tuple[str, ...]:
        return self.graph.get_calculation_order()

    def records_from_rows(self, rows: Sequence[Mapping[str, Any]]) -> List[PeriodRecord]:
        """Build PeriodRecords from flat rows keyed by settings.PERIOD_LABEL_KEY."""
        return as_period_records(list(rows), label_key=self.settings.PERIOD_LABEL_KEY)

    def calculate(self, period_values: Mapping[str, float]) -> Dict[str, float]:
        return self.evaluator.calculate(period_values)

    def recalculate(self, records: Sequence[PeriodRecord]) -> List[PeriodRecord]:
        """Fully recompute derived metrics for every period without adjusting anything."""
        return self.adjustment_engine.apply_adjustments(records, {})

    def apply_adjustments(
        self,
        records: Sequence[PeriodRecord],
        adjustments_by_period: Mapping[str, Sequence[Adjustment]],
    ) -> List[PeriodRecord]:
        return self.adjustment_engine.apply_adjustments(records, adjustments_by_period)

    def apply_scenario(self, records: Sequence[PeriodRecord], scenario_id: str) -> List[PeriodRecord]:
        """
        Apply a stored scenario's adjustments.

        Raises:
            ScenarioNotFoundError: unknown scenario id
        """
        adjustments = self.scenarios.load_adjustments(scenario_id)
        logger.info("Applying scenario %s to %d period(s)", scenario_id, len(records))
        return self.apply_adjustments(records, adjustments)

    def impact(
        self,
        original: Mapping[str, float],
        adjusted: Mapping[str, float],
    ) -> Dict[str, MetricImpact]:
        return impact(original, adjusted, self.catalog.all_metric_names())

    def period_impacts(
        self,
        original_records: Sequence[PeriodRecord],
        adjusted_records: Sequence[PeriodRecord],
    ) -> Dict[str, Dict[str, MetricImpact]]:
        """
        Per-period impact, comparing against the recomputed originals.

        Originals are recomputed first so derived metrics missing or stale in
        the raw input do not show up as spurious changes.
        """
        baseline = self.recalculate(original_records)
        return period_impacts(baseline, adjusted_records, self.catalog.all_metric_names())
