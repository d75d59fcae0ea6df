"""
definitions.py — The dashboard's metric catalog.

Base metrics are independent variables the user adjusts directly. Derived
metrics are computed from base metrics and from other derived metrics.

Naming convention matters: display formatting is driven by substrings of the
metric name (see services/reporting/formatting.py), so new metrics should
follow the existing patterns ("Unit ...", "% ...", "... Price", "... Revenue").
"""

from typing import Dict, List, Tuple

from metrics_engine.catalog.calculators import (
    difference,
    function,
    percent_of,
    ratio,
    sum_of,
)
from metrics_engine.catalog.catalog import DerivedMetric, MetricCatalog, derived

# ============================================================================
# BASE METRICS
# ============================================================================

# Cost of Goods Sold components
COGS_COMPONENTS: List[str] = [
    "Process Labor",
    "Raw Material",
    "Packaging",
    "Maintenance",
    "Waste",
    "Inventory",
    "Utilities",
    "Shipping",
]

# SG&A expense lines
SGA_EXPENSES: List[str] = [
    "Professional Fees",
    "Sales & Marketing",
    "Overhead Labor",
    "Benefits",
    "Accounting",
    "Equipment Rental",
    "Tax",
    "Insurance",
    "Office",
    "Banking",
    "R&D",
    "Warehouse",
    "Misc",
    "Legal",
]

# Business performance inputs
TOTAL_ORDERS = "Total Orders"
TONS = "Tons"
PRODUCT_REVENUE = "Product Revenue"

BASE_METRICS: List[str] = COGS_COMPONENTS + SGA_EXPENSES + [
    TOTAL_ORDERS,
    TONS,
    PRODUCT_REVENUE,
]

# ============================================================================
# DERIVED METRICS
# ============================================================================

TOTAL_COGS = "Total COGS"
TOTAL_UNIT_COGS = "Total Unit COGS"
TOTAL_EXPENSES = "Total Expenses"
AVERAGE_PRICE = "Average Price"
AVERAGE_GM = "Average GM"
AVERAGE_OM = "Average OM"


def _unit_cost(component: str) -> DerivedMetric:
    return derived(
        f"Unit {component}",
        [component, TONS],
        ratio(component, TONS),
        f"{component} cost per ton",
    )


DERIVED_METRICS: List[DerivedMetric] = [
    # Cost of goods
    derived(
        TOTAL_COGS,
        COGS_COMPONENTS,
        sum_of(*COGS_COMPONENTS),
        "Sum of all cost of goods sold components",
    ),

    # Unit metrics
    *[_unit_cost(component) for component in COGS_COMPONENTS],
    derived(
        TOTAL_UNIT_COGS,
        [TOTAL_COGS, TONS],
        ratio(TOTAL_COGS, TONS),
        "Total cost of goods sold per ton",
    ),

    # SG&A
    derived(
        TOTAL_EXPENSES,
        SGA_EXPENSES,
        sum_of(*SGA_EXPENSES),
        "Sum of all SG&A expenses",
    ),

    # Business performance
    derived(
        "Tons/Order",
        [TONS, TOTAL_ORDERS],
        ratio(TONS, TOTAL_ORDERS),
        "Average tons per order",
    ),
    derived(
        "Revenue/Order",
        [PRODUCT_REVENUE, TOTAL_ORDERS],
        ratio(PRODUCT_REVENUE, TOTAL_ORDERS),
        "Average revenue per order",
    ),
    derived(
        AVERAGE_PRICE,
        [PRODUCT_REVENUE, TONS],
        ratio(PRODUCT_REVENUE, TONS),
        "Average price per ton",
    ),
    derived(
        AVERAGE_GM,
        [AVERAGE_PRICE, TOTAL_UNIT_COGS],
        difference(AVERAGE_PRICE, TOTAL_UNIT_COGS),
        "Average gross margin per ton",
    ),
    derived(
        AVERAGE_OM,
        [AVERAGE_GM, TOTAL_EXPENSES, TONS],
        function("average_operating_margin", AVERAGE_GM, TOTAL_EXPENSES, TONS),
        "Average operating margin per ton",
    ),
    derived(
        "% Average GM",
        [AVERAGE_GM, AVERAGE_PRICE],
        percent_of(AVERAGE_GM, AVERAGE_PRICE),
        "Average gross margin as a percentage of price",
    ),
    derived(
        "% Average OM",
        [AVERAGE_OM, AVERAGE_PRICE],
        percent_of(AVERAGE_OM, AVERAGE_PRICE),
        "Average operating margin as a percentage of price",
    ),
]

# ============================================================================
# UI ORGANIZATION
# ============================================================================

METRIC_CATEGORIES: Dict[str, List[str]] = {
    "Cost of Goods": COGS_COMPONENTS + [TOTAL_COGS],
    "Unit Metrics": [f"Unit {component}" for component in COGS_COMPONENTS] + [TOTAL_UNIT_COGS],
    "SG&A Expenses": SGA_EXPENSES + [TOTAL_EXPENSES],
    "Business Performance": [
        TOTAL_ORDERS,
        TONS,
        PRODUCT_REVENUE,
        "Tons/Order",
        "Revenue/Order",
        AVERAGE_PRICE,
        AVERAGE_GM,
        AVERAGE_OM,
        "% Average GM",
        "% Average OM",
    ],
}

# Default adjustment ranges for each base metric (percent)
DEFAULT_ADJUSTMENT_RANGES: Dict[str, Tuple[float, float]] = {
    # Cost of Goods Sold
    "Process Labor": (-30, 30),
    "Raw Material": (-20, 20),
    "Packaging": (-25, 25),
    "Maintenance": (-40, 40),
    "Waste": (-50, 50),
    "Inventory": (-30, 30),
    "Utilities": (-20, 20),
    "Shipping": (-25, 25),

    # SG&A Expenses
    "Professional Fees": (-30, 30),
    "Sales & Marketing": (-40, 40),
    "Overhead Labor": (-30, 30),
    "Benefits": (-20, 20),
    "Accounting": (-25, 25),
    "Equipment Rental": (-40, 40),
    "Tax": (-15, 15),
    "Insurance": (-20, 20),
    "Office": (-30, 30),
    "Banking": (-25, 25),
    "R&D": (-50, 50),
    "Warehouse": (-30, 30),
    "Misc": (-40, 40),
    "Legal": (-35, 35),

    # Business Performance
    TOTAL_ORDERS: (-20, 20),
    TONS: (-20, 20),
    PRODUCT_REVENUE: (-20, 20),
}


def build_default_catalog() -> MetricCatalog:
    """Build the dashboard catalog (25 base metrics, 18 derived metrics)."""
    return MetricCatalog(
        BASE_METRICS,
        DERIVED_METRICS,
        categories=METRIC_CATEGORIES,
        adjustment_ranges=DEFAULT_ADJUSTMENT_RANGES,
    )
