"""
scenarios — Named what-if adjustment sets (built-in and user-created).
"""

from metrics_engine.services.scenarios.predefined import (
    build_predefined_scenarios,
    build_uniform_scenario,
)
from metrics_engine.services.scenarios.store import ScenarioStore, make_scenario_id

__all__ = [
    "build_predefined_scenarios",
    "build_uniform_scenario",
    "ScenarioStore",
    "make_scenario_id",
]
