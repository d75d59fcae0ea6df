"""
types.py — Shared data layer for the calculation services.

Purpose:
- Define the plain-data structures passed between the adjustment engine,
  the scenario store and the reporter.
- Adjustment and Scenario are pydantic models so values coming from a UI or
  a JSON file are validated once at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

AdjustmentType = Literal["percentage", "absolute"]


class Adjustment(BaseModel):
    """
    One change to one base metric in one period.

    percentage: new = original * (1 + value / 100)
    absolute:   new = value (replaces the original outright)
    """
    model_config = ConfigDict(frozen=True)

    metric: str
    type: AdjustmentType
    value: float


# period label -> adjustments applied to that period, in order
AdjustmentsByPeriod = Dict[str, List[Adjustment]]

# Read-only form kept by Scenario
FrozenAdjustments = Mapping[str, Tuple[Adjustment, ...]]


class Scenario(BaseModel):
    """
    Named, timestamped bundle of per-period adjustments.

    Immutable once created: `adjustments` is a read-only mapping of tuples,
    so a scenario handed out by the store cannot be edited in place. Use
    adjustment_set() to get an editable copy.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: Optional[str] = None
    adjustments: FrozenAdjustments = Field(default_factory=dict, validate_default=True)
    created_at: str

    @field_validator("adjustments", mode="after")
    @classmethod
    def freeze_adjustments(cls, v: Mapping[str, Tuple[Adjustment, ...]]) -> FrozenAdjustments:
        return MappingProxyType({period: tuple(items) for period, items in v.items()})

    @field_serializer("adjustments")
    def serialize_adjustments(self, v: FrozenAdjustments) -> Dict[str, List[Dict[str, Any]]]:
        return {
            period: [item.model_dump() for item in items]
            for period, items in v.items()
        }

    def adjustment_set(self) -> AdjustmentsByPeriod:
        """Fresh, editable copy of the adjustments."""
        return copy_adjustments(self.adjustments)


def copy_adjustments(adjustments: Mapping[str, Sequence[Adjustment]]) -> AdjustmentsByPeriod:
    # Adjustment is frozen, so copying the lists is enough
    return {period: list(items) for period, items in adjustments.items()}


@dataclass
class PeriodRecord:
    """
    One time bucket (e.g. a month) of metric values.

    Example:
        PeriodRecord(label="Jan", values={"Tons": 100.0, "Product Revenue": 500.0})
    """
    label: str
    values: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any], label_key: str = "month") -> "PeriodRecord":
        """Build from a flat row like {"month": "Jan", "Tons": "100", ...}."""
        if label_key not in row:
            raise ValueError(f"Row is missing period label key '{label_key}'")
        values = {key: value for key, value in row.items() if key != label_key}
        return cls(label=str(row[label_key]), values=values)

    def to_mapping(self, label_key: str = "month") -> Dict[str, Any]:
        return {label_key: self.label, **self.values}

    def copy(self) -> "PeriodRecord":
        return PeriodRecord(label=self.label, values=dict(self.values))


def as_period_records(
    periods: List[Any],
    label_key: str = "month",
) -> List[PeriodRecord]:
    """Accept PeriodRecord objects or flat rows and return PeriodRecords."""
    records: List[PeriodRecord] = []
    for period in periods:
        if isinstance(period, PeriodRecord):
            records.append(period)
        else:
            records.append(PeriodRecord.from_mapping(period, label_key=label_key))
    return records
