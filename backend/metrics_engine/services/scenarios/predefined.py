"""
predefined.py — Built-in scenarios users can load as starting points.

Each scenario applies a fixed list of percentage shifts uniformly to every
period label in a period set (by default the twelve months). Seasonal Demand
is the exception: it uses a different shift list per quarter.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

from metrics_engine.core.config import MONTH_LABELS
from metrics_engine.services.calculation.types import Adjustment, AdjustmentsByPeriod, Scenario

# (metric, percent) pairs; every predefined adjustment is a percentage shift
Shifts = Sequence[Tuple[str, float]]


def _adjustments(shifts: Shifts) -> List[Adjustment]:
    return [Adjustment(metric=metric, type="percentage", value=value) for metric, value in shifts]


def uniform_adjustments(shifts: Shifts, periods: Sequence[str]) -> AdjustmentsByPeriod:
    """The same shift list for every period label."""
    adjustments = _adjustments(shifts)
    return {period: list(adjustments) for period in periods}


def build_uniform_scenario(
    scenario_id: str,
    name: str,
    description: str,
    shifts: Shifts,
    periods: Sequence[str] = MONTH_LABELS,
    created_at: Optional[str] = None,
) -> Scenario:
    return Scenario(
        id=scenario_id,
        name=name,
        description=description,
        adjustments=uniform_adjustments(shifts, periods),
        created_at=created_at or datetime.now(timezone.utc).isoformat(),
    )


# ============================================================================
# Shift definitions
# ============================================================================

COST_REDUCTION: Shifts = [
    ("Process Labor", -10),
    ("Raw Material", -5),
    ("Packaging", -8),
    ("Maintenance", -12),
    ("Waste", -20),
    ("Inventory", -15),
    ("Utilities", -7),
    ("Shipping", -6),
    ("Professional Fees", -15),
    ("Sales & Marketing", -10),
    ("Overhead Labor", -8),
    ("Benefits", -5),
]

REVENUE_GROWTH: Shifts = [
    ("Total Orders", 15),
    ("Tons", 18),
    ("Product Revenue", 25),
    # Higher volume costs more to produce
    ("Process Labor", 10),
    ("Raw Material", 15),
    ("Packaging", 12),
    ("Shipping", 14),
    ("Sales & Marketing", 30),
]

EFFICIENCY_IMPROVEMENT: Shifts = [
    ("Process Labor", -15),
    ("Raw Material", -8),
    ("Waste", -30),
    ("Utilities", -12),
    ("Maintenance", 5),
    ("R&D", 20),
]

MARKET_EXPANSION: Shifts = [
    ("Total Orders", 25),
    ("Tons", 22),
    ("Product Revenue", 30),
    ("Sales & Marketing", 50),
    ("Overhead Labor", 15),
    ("Professional Fees", 20),
    ("Shipping", 25),
]

ECONOMIC_DOWNTURN: Shifts = [
    ("Total Orders", -20),
    ("Tons", -18),
    ("Product Revenue", -25),
    # Cost cutting
    ("Process Labor", -15),
    ("Overhead Labor", -10),
    ("Benefits", -8),
    ("Sales & Marketing", -30),
    ("R&D", -25),
    ("Office", -20),
]

PRICE_INCREASE: Shifts = [
    ("Product Revenue", 15),
    ("Total Orders", 0),
    ("Tons", 0),
    ("Sales & Marketing", 5),
]

RAW_MATERIAL_COST_INCREASE: Shifts = [
    ("Raw Material", 25),
    # Partial price pass-through
    ("Product Revenue", 10),
    ("Process Labor", -5),
    ("Waste", -10),
    ("Utilities", -3),
]

SEASONAL_DEMAND: Dict[str, Shifts] = {
    # Q1: low season
    "Q1": [("Total Orders", -15), ("Tons", -15), ("Product Revenue", -15)],
    # Q2: moderate
    "Q2": [("Total Orders", 5), ("Tons", 5), ("Product Revenue", 5)],
    # Q3: peak
    "Q3": [("Total Orders", 30), ("Tons", 30), ("Product Revenue", 35)],
    # Q4: moderate-high
    "Q4": [("Total Orders", 15), ("Tons", 15), ("Product Revenue", 18)],
}

QUARTER_MONTHS: Dict[str, List[str]] = {
    "Q1": ["Jan", "Feb", "Mar"],
    "Q2": ["Apr", "May", "Jun"],
    "Q3": ["Jul", "Aug", "Sep"],
    "Q4": ["Oct", "Nov", "Dec"],
}


def build_seasonal_scenario(
    periods: Sequence[str] = MONTH_LABELS,
    created_at: Optional[str] = None,
) -> Scenario:
    """Seasonal Demand: quarter-specific shifts, restricted to `periods`."""
    wanted = set(periods)
    adjustments: AdjustmentsByPeriod = {}
    for quarter, months in QUARTER_MONTHS.items():
        selected = [month for month in months if month in wanted]
        adjustments.update(uniform_adjustments(SEASONAL_DEMAND[quarter], selected))
    return Scenario(
        id="seasonal-demand",
        name="Seasonal Demand",
        description="Model seasonal fluctuations in demand",
        adjustments=adjustments,
        created_at=created_at or datetime.now(timezone.utc).isoformat(),
    )


def build_predefined_scenarios(periods: Sequence[str] = MONTH_LABELS) -> List[Scenario]:
    """Build the built-in scenario catalog for the given period labels."""
    created_at = datetime.now(timezone.utc).isoformat()
    definitions = [
        ("cost-reduction", "Cost Reduction",
         "Reduce costs across all categories to improve margins", COST_REDUCTION),
        ("revenue-growth", "Revenue Growth",
         "Increase revenue through higher volume and prices", REVENUE_GROWTH),
        ("efficiency-improvement", "Efficiency Improvement",
         "Improve operational efficiency while maintaining output", EFFICIENCY_IMPROVEMENT),
        ("market-expansion", "Market Expansion",
         "Expand into new markets with increased marketing and sales efforts", MARKET_EXPANSION),
        ("economic-downturn", "Economic Downturn",
         "Adjust to an economic downturn with reduced demand", ECONOMIC_DOWNTURN),
        ("price-increase", "Price Increase",
         "Increase prices while maintaining volume", PRICE_INCREASE),
        ("raw-material-cost-increase", "Raw Material Cost Increase",
         "Adjust to increased raw material costs", RAW_MATERIAL_COST_INCREASE),
    ]
    scenarios = [
        build_uniform_scenario(scenario_id, name, description, shifts, periods, created_at)
        for scenario_id, name, description, shifts in definitions
    ]
    scenarios.append(build_seasonal_scenario(periods, created_at))
    return scenarios
