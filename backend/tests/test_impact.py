"""
Unit tests for original-vs-adjusted impact summaries.
"""

import pytest

from metrics_engine.services.calculation.types import PeriodRecord
from metrics_engine.services.reporting.impact import (
    MetricImpact,
    change_direction,
    impact,
    impact_to_frame,
    percent_change_label,
    period_impacts,
)


@pytest.mark.parametrize(
    "original, adjusted, expected",
    [
        (100, 110, "+10.0%"),
        (200, 150, "-25.0%"),
        (100, 100, "+0.0%"),
        (-50, -25, "+50.0%"),
        (0, 10, "+∞%"),
        (0, 0, "0%"),
        (0, -10, "0%"),
    ],
)
def test_percent_change_label(original, adjusted, expected):
    assert percent_change_label(original, adjusted) == expected


@pytest.mark.parametrize(
    "label, expected",
    [
        ("+10.0%", "increase"),
        ("+∞%", "increase"),
        ("-3.2%", "decrease"),
        ("0%", "neutral"),
    ],
)
def test_change_direction(label, expected):
    assert change_direction(label) == expected


def test_impact_per_metric():
    result = impact(
        {"Tons": 100, "Waste": 0, "Average Price": "5.00"},
        {"Tons": 80, "Waste": 12},
        ["Tons", "Waste", "Average Price"],
    )
    assert result["Tons"] == MetricImpact(original=100, adjusted=80, change=-20, percent_change="-20.0%")
    assert result["Waste"].percent_change == "+∞%"
    assert result["Average Price"].original == 5.0
    assert result["Average Price"].adjusted == 0
    assert result["Average Price"].percent_change == "-100.0%"


def test_period_impacts_match_by_label():
    originals = [
        PeriodRecord(label="Jan", values={"Tons": 100}),
        PeriodRecord(label="Feb", values={"Tons": 50}),
    ]
    adjusted = [
        PeriodRecord(label="Feb", values={"Tons": 60}),
        PeriodRecord(label="Jan", values={"Tons": 90}),
    ]
    result = period_impacts(originals, adjusted, ["Tons"])
    assert list(result) == ["Jan", "Feb"]
    assert result["Jan"]["Tons"].change == -10
    assert result["Feb"]["Tons"].percent_change == "+20.0%"


def test_period_missing_from_adjusted():
    result = period_impacts([PeriodRecord(label="Jan", values={"Tons": 100})], [], ["Tons"])
    assert result["Jan"]["Tons"].adjusted == 0
    assert result["Jan"]["Tons"].percent_change == "-100.0%"


def test_impact_to_frame():
    impacts = impact({"Tons": 100, "Waste": 10}, {"Tons": 110, "Waste": 10}, ["Tons", "Waste"])
    frame = impact_to_frame(impacts)
    assert list(frame.index) == ["Tons", "Waste"]
    assert list(frame.columns) == ["original", "adjusted", "change", "percent_change"]
    assert frame.loc["Tons", "change"] == 10
    assert frame.loc["Waste", "percent_change"] == "+0.0%"


def test_impact_to_dict():
    item = MetricImpact(original=1.0, adjusted=2.0, change=1.0, percent_change="+100.0%")
    assert item.to_dict() == {
        "original": 1.0,
        "adjusted": 2.0,
        "change": 1.0,
        "percent_change": "+100.0%",
    }
