"""
Shared fixtures for calculation engine tests.
"""

from typing import Any, Dict, List

import pytest

from metrics_engine.catalog import MetricCatalog, build_default_catalog, derived, ratio
from metrics_engine.services.calculation.types import PeriodRecord


@pytest.fixture
def default_catalog() -> MetricCatalog:
    return build_default_catalog()


@pytest.fixture
def price_catalog() -> MetricCatalog:
    """Two base metrics and one guarded ratio."""
    return MetricCatalog(
        ["Tons", "Product Revenue"],
        [
            derived(
                "Average Price",
                ["Product Revenue", "Tons"],
                ratio("Product Revenue", "Tons"),
                "Average price per ton",
            ),
        ],
    )


@pytest.fixture
def jan_values() -> Dict[str, Any]:
    """
    Round-number month for the dashboard catalog.

    Total COGS = 5000, Total Expenses = 1500, Tons = 100, Orders = 50,
    Revenue = 10000 -> Average Price 100, GM 50, OM 35.
    """
    return {
        "Process Labor": 1000,
        "Raw Material": 2000,
        "Packaging": 500,
        "Maintenance": 300,
        "Waste": 100,
        "Inventory": 200,
        "Utilities": 400,
        "Shipping": 500,
        "Professional Fees": 100,
        "Sales & Marketing": 200,
        "Overhead Labor": 300,
        "Benefits": 100,
        "Accounting": 50,
        "Equipment Rental": 50,
        "Tax": 100,
        "Insurance": 50,
        "Office": 25,
        "Banking": 25,
        "R&D": 100,
        "Warehouse": 200,
        "Misc": 50,
        "Legal": 150,
        "Total Orders": 50,
        "Tons": 100,
        "Product Revenue": 10000,
    }


@pytest.fixture
def monthly_records(jan_values) -> List[PeriodRecord]:
    """Jan as given, Feb with doubled revenue and dashboard-style strings."""
    feb = dict(jan_values)
    feb["Product Revenue"] = "$20,000.00"
    feb["Tons"] = "100"
    return [
        PeriodRecord(label="Jan", values=dict(jan_values)),
        PeriodRecord(label="Feb", values=feb),
    ]
