"""
errors.py — Exception types raised by the calculation engine.

Configuration errors are fatal and surface while the catalog and the
calculation order are being built. Everything that happens per period
(missing values, zero divisors, bad numeric cells) degrades to 0 instead
of raising, so the only runtime errors are opt-in (strict adjustment
targets) or lookup failures on the scenario store.
"""


class MetricsEngineError(ValueError):
    """Base class for all engine errors."""


class MetricConfigurationError(MetricsEngineError):
    """Invalid metric catalog: duplicate names, unknown dependencies, bad calculators."""


class CircularDependencyError(MetricConfigurationError):
    """The dependency relation between metrics contains a cycle."""

    def __init__(self, metric: str):
        self.metric = metric
        super().__init__(f"Circular dependency detected involving {metric}")


class InvalidAdjustmentError(MetricsEngineError):
    """An adjustment targets something other than a base metric (strict mode only)."""

    def __init__(self, period: str, metric: str):
        self.period = period
        self.metric = metric
        super().__init__(
            f"Adjustment for period '{period}' targets '{metric}', which is not a base metric"
        )


class ScenarioNotFoundError(MetricsEngineError, LookupError):
    """No predefined or user scenario exists with the requested id."""

    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(f"Scenario not found: {scenario_id}")
