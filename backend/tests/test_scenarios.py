"""
Unit tests for predefined scenarios and the in-memory scenario store.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from metrics_engine.core.config import MONTH_LABELS
from metrics_engine.core.errors import ScenarioNotFoundError
from metrics_engine.services.calculation.adjustments import set_adjustment
from metrics_engine.services.calculation.types import Adjustment, Scenario
from metrics_engine.services.scenarios import (
    ScenarioStore,
    build_predefined_scenarios,
    make_scenario_id,
)

PREDEFINED_IDS = [
    "cost-reduction",
    "revenue-growth",
    "efficiency-improvement",
    "market-expansion",
    "economic-downturn",
    "price-increase",
    "raw-material-cost-increase",
    "seasonal-demand",
]


def _find(adjustments, metric):
    return next(item for item in adjustments if item.metric == metric)


@pytest.fixture
def store():
    return ScenarioStore(build_predefined_scenarios())


class TestPredefinedScenarios:

    def test_ids_in_order(self):
        assert [s.id for s in build_predefined_scenarios()] == PREDEFINED_IDS

    def test_every_month_covered(self):
        for scenario in build_predefined_scenarios():
            assert list(scenario.adjustments) == MONTH_LABELS, scenario.id

    def test_all_percentage_shifts(self):
        for scenario in build_predefined_scenarios():
            for items in scenario.adjustments.values():
                assert all(item.type == "percentage" for item in items)

    def test_economic_downturn_values(self):
        downturn = {s.id: s for s in build_predefined_scenarios()}["economic-downturn"]
        jan = downturn.adjustments["Jan"]
        assert _find(jan, "Tons").value == -18
        assert _find(jan, "Product Revenue").value == -25
        assert len(jan) == 9

    def test_seasonal_demand_varies_by_quarter(self):
        seasonal = {s.id: s for s in build_predefined_scenarios()}["seasonal-demand"]
        assert _find(seasonal.adjustments["Jan"], "Tons").value == -15
        assert _find(seasonal.adjustments["May"], "Tons").value == 5
        assert _find(seasonal.adjustments["Jul"], "Product Revenue").value == 35
        assert _find(seasonal.adjustments["Dec"], "Product Revenue").value == 18

    def test_custom_period_labels(self):
        scenarios = build_predefined_scenarios(["Jan", "Q2-2025"])
        by_id = {s.id: s for s in scenarios}
        assert list(by_id["cost-reduction"].adjustments) == ["Jan", "Q2-2025"]
        # seasonal shifts only map onto month labels
        assert list(by_id["seasonal-demand"].adjustments) == ["Jan"]

    def test_scenario_is_frozen(self):
        scenario = build_predefined_scenarios()[0]
        with pytest.raises(ValidationError):
            scenario.name = "Renamed"

    def test_adjustments_are_read_only(self):
        scenario = build_predefined_scenarios()[0]
        with pytest.raises(TypeError):
            scenario.adjustments["Jan"] = ()
        with pytest.raises(AttributeError):
            scenario.adjustments["Jan"].append(
                Adjustment(metric="Tons", type="absolute", value=0)
            )
        assert len(scenario.adjustments["Jan"]) == 12

    def test_default_adjustments_are_read_only(self):
        scenario = Scenario(id="empty", name="Empty", created_at="2025-01-01T00:00:00+00:00")
        assert dict(scenario.adjustments) == {}
        with pytest.raises(TypeError):
            scenario.adjustments["Jan"] = ()

    def test_adjustment_set_is_editable_copy(self):
        scenario = build_predefined_scenarios()[0]
        editable = scenario.adjustment_set()
        editable["Jan"].clear()
        editable.pop("Feb")
        assert len(scenario.adjustments["Jan"]) == 12
        assert "Feb" in scenario.adjustments

    def test_model_dump_has_plain_lists(self):
        scenario = build_predefined_scenarios(["Jan"])[0]
        dumped = scenario.model_dump()
        assert isinstance(dumped["adjustments"]["Jan"], list)
        assert dumped["adjustments"]["Jan"][0] == {
            "metric": "Process Labor",
            "type": "percentage",
            "value": -10.0,
        }


class TestScenarioStore:

    def test_lists_predefined(self, store):
        assert [s.id for s in store.list_predefined_scenarios()] == PREDEFINED_IDS
        assert [s.id for s in store.list_scenarios()] == PREDEFINED_IDS

    def test_create_scenario(self, store):
        adjustments = set_adjustment({}, "Jan", "Tons", -20)
        scenario = store.create_scenario("Lean January", adjustments, description="Fewer tons")

        assert scenario.id.startswith("scenario-")
        assert scenario.name == "Lean January"
        assert scenario.description == "Fewer tons"
        assert scenario.adjustment_set() == adjustments
        assert datetime.fromisoformat(scenario.created_at).tzinfo is not None
        assert store.list_scenarios()[-1] is scenario

    def test_create_snapshots_adjustments(self, store):
        adjustments = set_adjustment({}, "Jan", "Tons", -20)
        scenario = store.create_scenario("Snapshot", adjustments)
        adjustments["Jan"].append(Adjustment(metric="Waste", type="percentage", value=5))
        assert len(scenario.adjustments["Jan"]) == 1

    def test_returned_scenarios_cannot_alter_the_store(self, store):
        created = store.create_scenario("Locked", set_adjustment({}, "Jan", "Tons", -20))
        with pytest.raises(AttributeError):
            created.adjustments["Jan"].append(
                Adjustment(metric="Waste", type="percentage", value=5)
            )
        assert len(store.load_adjustments(created.id)["Jan"]) == 1

        builtin = store.list_predefined_scenarios()[0]
        with pytest.raises(AttributeError):
            builtin.adjustments.clear()
        with pytest.raises(TypeError):
            del store.get_scenario_by_id("cost-reduction").adjustments["Jan"]
        assert list(store.load_adjustments("cost-reduction")) == MONTH_LABELS

    def test_ids_unique(self, store):
        ids = {store.create_scenario(f"S{i}", {}).id for i in range(20)}
        assert len(ids) == 20
        assert make_scenario_id() != make_scenario_id()

    def test_get_scenario_by_id(self, store):
        assert store.get_scenario_by_id("price-increase").name == "Price Increase"
        assert store.get_scenario_by_id("missing") is None

    def test_load_adjustments_returns_copy(self, store):
        loaded = store.load_adjustments("cost-reduction")
        loaded["Jan"].clear()
        loaded.pop("Feb")
        again = store.load_adjustments("cost-reduction")
        assert len(again["Jan"]) == 12
        assert "Feb" in again

    def test_load_unknown_scenario(self, store):
        with pytest.raises(ScenarioNotFoundError, match="no-such-scenario"):
            store.load_adjustments("no-such-scenario")

    def test_not_found_is_lookup_error(self, store):
        with pytest.raises(LookupError):
            store.load_adjustments("no-such-scenario")

    def test_delete_scenario(self, store):
        scenario = store.create_scenario("Temporary", {})
        assert store.delete_scenario(scenario.id) is True
        assert store.get_scenario_by_id(scenario.id) is None
        assert store.delete_scenario(scenario.id) is False
        assert store.delete_scenario("cost-reduction") is False
        assert store.get_scenario_by_id("cost-reduction") is not None

    def test_scenario_options(self, store):
        store.create_scenario("Mine", {})
        options = store.scenario_options()
        assert options[0] == {"id": "cost-reduction", "name": "Cost Reduction"}
        assert options[-1]["name"] == "Mine"
        assert len(options) == 9
