"""
store.py — In-memory scenario registry.

Purpose:
- Serve the built-in scenario catalog.
- Stamp and keep user-created scenarios for the lifetime of the process.

This module does NOT persist anything; saving scenarios to a file, a database
or browser storage is the caller's concern. Loading a scenario hands back a
copy of its adjustments, which the caller uses to REPLACE its active set.
"""

from __future__ import annotations

import threading
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from metrics_engine.core.config import settings
from metrics_engine.core.errors import ScenarioNotFoundError
from metrics_engine.core.logging import get_logger
from metrics_engine.services.calculation.types import (
    Adjustment,
    AdjustmentsByPeriod,
    Scenario,
    copy_adjustments,
)
from metrics_engine.services.scenarios.predefined import build_predefined_scenarios

logger = get_logger(__name__)


def make_scenario_id() -> str:
    """
    Unique id from creation time plus a random component.

    Example: "scenario-1718000000000-3f9c2a1b"
    """
    return f"scenario-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


class ScenarioStore:
    """Predefined + user-created scenarios, looked up by id."""

    def __init__(self, predefined: Optional[Sequence[Scenario]] = None):
        if predefined is None:
            predefined = build_predefined_scenarios(settings.DEFAULT_PERIOD_LABELS)
        self._predefined: Tuple[Scenario, ...] = tuple(predefined)
        self._user: Dict[str, Scenario] = {}
        self._lock = threading.Lock()

    def create_scenario(
        self,
        name: str,
        adjustments_by_period: Mapping[str, Sequence[Adjustment]],
        description: Optional[str] = None,
    ) -> Scenario:
        """Snapshot the given adjustments into a new, immutable scenario."""
        scenario = Scenario(
            id=make_scenario_id(),
            name=name,
            description=description,
            adjustments=copy_adjustments(adjustments_by_period),
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            self._user[scenario.id] = scenario
        logger.info("Created scenario %s (%s)", scenario.id, name)
        return scenario

    def list_predefined_scenarios(self) -> List[Scenario]:
        return list(self._predefined)

    def list_scenarios(self) -> List[Scenario]:
        """Predefined scenarios first, then user scenarios in creation order."""
        with self._lock:
            return list(self._predefined) + list(self._user.values())

    def get_scenario_by_id(self, scenario_id: str) -> Optional[Scenario]:
        for scenario in self._predefined:
            if scenario.id == scenario_id:
                return scenario
        with self._lock:
            return self._user.get(scenario_id)

    def scenario_options(self) -> List[Dict[str, str]]:
        """[{"id": ..., "name": ...}] for a scenario picker."""
        return [{"id": s.id, "name": s.name} for s in self.list_scenarios()]

    def load_adjustments(self, scenario_id: str) -> AdjustmentsByPeriod:
        """
        Copy of a scenario's adjustments, to replace the caller's active set wholesale.

        Raises:
            ScenarioNotFoundError: unknown id
        """
        scenario = self.get_scenario_by_id(scenario_id)
        if scenario is None:
            raise ScenarioNotFoundError(scenario_id)
        return scenario.adjustment_set()

    def delete_scenario(self, scenario_id: str) -> bool:
        """Remove a user scenario. Predefined scenarios cannot be deleted."""
        with self._lock:
            removed = self._user.pop(scenario_id, None)
        return removed is not None
