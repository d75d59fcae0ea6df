"""
calculators.py — Calculator vocabulary for derived metrics.

Derived metrics describe HOW they are computed as data (a CalculatorSpec)
instead of carrying executable closures. A small interpreter evaluates a
spec against one period's accumulated values.

Kinds:
- SUM         operand_1 + operand_2 + ...
- RATIO       numerator / denominator        (0 when denominator <= 0)
- DIFFERENCE  operand_1 - operand_2 - ...
- PERCENT_OF  part / base * 100              (0 when base <= 0)
- FUNCTION    named pure function from the calculator registry, called
              with the operand values in operand order

Missing operands read as 0 everywhere, so evaluation never raises.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple

from metrics_engine.core.errors import MetricConfigurationError

Values = Mapping[str, float]
# Receives one float per operand, positionally
CalculatorFunction = Callable[..., float]


class CalculatorKind(str, Enum):
    """Supported calculator shapes."""
    SUM = "sum"
    RATIO = "ratio"
    DIFFERENCE = "difference"
    PERCENT_OF = "percent_of"
    FUNCTION = "function"


# Registry of named calculator functions (CalculatorKind.FUNCTION)
_CALCULATOR_FUNCTIONS: Dict[str, CalculatorFunction] = {}


def register_calculator(name: str) -> Callable[[CalculatorFunction], CalculatorFunction]:
    """
    Register a pure function under `name` for use by FUNCTION calculators.

    Example:
        @register_calculator("average_operating_margin")
        def average_operating_margin(average_gm, total_expenses, tons):
            ...

    The function only sees its operands, so it cannot read a metric the
    derived metric does not declare.
    """
    def decorator(func: CalculatorFunction) -> CalculatorFunction:
        if name in _CALCULATOR_FUNCTIONS and _CALCULATOR_FUNCTIONS[name] is not func:
            raise MetricConfigurationError(f"Calculator function already registered: {name}")
        _CALCULATOR_FUNCTIONS[name] = func
        return func
    return decorator


def get_calculator_function(name: str) -> Optional[CalculatorFunction]:
    """Return the registered function or None."""
    return _CALCULATOR_FUNCTIONS.get(name)


def value_or_zero(values: Values, name: str) -> float:
    """Read a metric value, treating missing/None as 0."""
    value = values.get(name)
    if value is None:
        return 0.0
    return value


def guarded_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is zero or negative."""
    if denominator > 0:
        return numerator / denominator
    return 0.0


@dataclass(frozen=True)
class CalculatorSpec:
    """
    Declarative description of a derived metric formula.

    Attributes:
        kind: CalculatorKind
        operands: Metric names the formula reads, in formula order
            (RATIO: numerator, denominator; PERCENT_OF: part, base)
        function: Registry name, only for CalculatorKind.FUNCTION
    """
    kind: CalculatorKind
    operands: Tuple[str, ...] = field(default_factory=tuple)
    function: Optional[str] = None

    def validate(self, metric_name: str) -> None:
        """Raise MetricConfigurationError when this calculator cannot be evaluated."""
        if self.kind in (CalculatorKind.RATIO, CalculatorKind.PERCENT_OF):
            if len(self.operands) != 2:
                raise MetricConfigurationError(
                    f"{metric_name}: {self.kind.value} calculator needs exactly 2 operands, "
                    f"got {len(self.operands)}"
                )
        elif self.kind in (CalculatorKind.SUM, CalculatorKind.DIFFERENCE):
            if not self.operands:
                raise MetricConfigurationError(
                    f"{metric_name}: {self.kind.value} calculator needs at least 1 operand"
                )
        elif self.kind == CalculatorKind.FUNCTION:
            if not self.function:
                raise MetricConfigurationError(
                    f"{metric_name}: function calculator needs a registered function name"
                )
            func = get_calculator_function(self.function)
            if func is None:
                raise MetricConfigurationError(
                    f"{metric_name}: unknown calculator function '{self.function}'"
                )
            try:
                inspect.signature(func).bind(*self.operands)
            except TypeError:
                raise MetricConfigurationError(
                    f"{metric_name}: calculator function '{self.function}' does not accept "
                    f"{len(self.operands)} operand(s)"
                ) from None

    def evaluate(self, values: Values) -> float:
        """Evaluate against one period's accumulated values."""
        if self.kind == CalculatorKind.SUM:
            return sum((value_or_zero(values, name) for name in self.operands), 0.0)

        if self.kind == CalculatorKind.DIFFERENCE:
            first, *rest = self.operands
            result = value_or_zero(values, first)
            for name in rest:
                result -= value_or_zero(values, name)
            return result

        if self.kind == CalculatorKind.RATIO:
            numerator, denominator = self.operands
            return guarded_ratio(
                value_or_zero(values, numerator),
                value_or_zero(values, denominator),
            )

        if self.kind == CalculatorKind.PERCENT_OF:
            part, base = self.operands
            return guarded_ratio(
                value_or_zero(values, part),
                value_or_zero(values, base),
            ) * 100

        func = get_calculator_function(self.function or "")
        if func is None:
            raise MetricConfigurationError(f"Unknown calculator function '{self.function}'")
        return func(*(value_or_zero(values, name) for name in self.operands))


# ============================================================================
# Spec constructors
# ============================================================================

def sum_of(*operands: str) -> CalculatorSpec:
    return CalculatorSpec(CalculatorKind.SUM, tuple(operands))


def ratio(numerator: str, denominator: str) -> CalculatorSpec:
    return CalculatorSpec(CalculatorKind.RATIO, (numerator, denominator))


def difference(minuend: str, *subtrahends: str) -> CalculatorSpec:
    return CalculatorSpec(CalculatorKind.DIFFERENCE, (minuend, *subtrahends))


def percent_of(part: str, base: str) -> CalculatorSpec:
    return CalculatorSpec(CalculatorKind.PERCENT_OF, (part, base))


def function(name: str, *operands: str) -> CalculatorSpec:
    return CalculatorSpec(CalculatorKind.FUNCTION, tuple(operands), function=name)


# ============================================================================
# Registered functions
# ============================================================================

@register_calculator("average_operating_margin")
def average_operating_margin(average_gm: float, total_expenses: float, tons: float) -> float:
    """Average GM minus per-ton SG&A (Total Expenses / Tons, guarded)."""
    return average_gm - guarded_ratio(total_expenses, tons)
