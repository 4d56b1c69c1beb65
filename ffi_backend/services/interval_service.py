"""
Optimal inspection interval: two-step flow.

Step 1 turns an MTBF (any supported unit) into a failure rate per hour.
Step 2 combines that rate with inspection and failure costs into the
cost-optimal interval, expressed in the largest readable unit.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from ffi_backend.services.formula_service import (
    FormulaDomainError,
    convert_mtbf,
    failure_rate_from_mtbf,
    optimal_interval,
)

logger = logging.getLogger(__name__)

# Largest first; the first unit giving a value in [1, 100] wins.
DISPLAY_UNITS: list[tuple[str, float]] = [
    ("years", 8760),
    ("months", 730),
    ("weeks", 168),
    ("days", 24),
    ("hours", 1),
]


class FormattedInterval(BaseModel):
    value: float
    unit: str
    hours: float

    model_config = {"frozen": True}


def format_optimal_interval(interval_hours: float) -> FormattedInterval:
    """Pick the largest unit whose value lies in [1, 100]; fall back to hours."""
    for unit, hours in DISPLAY_UNITS:
        if interval_hours >= hours or unit == "hours":
            value = interval_hours / hours
            if 1 <= value <= 100:
                return FormattedInterval(value=value, unit=unit, hours=interval_hours)
    return FormattedInterval(value=interval_hours, unit="hours", hours=interval_hours)


def failure_rate_per_hour(mtbf: float, mtbf_unit: str) -> float:
    """Step 1: MTBF in ``mtbf_unit`` -> failures per hour."""
    return failure_rate_from_mtbf(convert_mtbf(mtbf, mtbf_unit, "hours"))


class OptimalIntervalWizard:
    """
    Holds the state of the two-step flow.

    The HTTP API exposes each step as a stateless endpoint; this class is the
    stateful form used by scripts and tests. Going back keeps the values
    already entered.
    """

    def __init__(self) -> None:
        self.step = 1
        self.mtbf: Optional[float] = None
        self.mtbf_unit: str = "years"
        self.failure_rate: Optional[float] = None
        self.inspection_cost: Optional[float] = None
        self.failure_cost: Optional[float] = None
        self.result: Optional[FormattedInterval] = None

    def submit_mtbf(self, mtbf: float, mtbf_unit: str = "years") -> float:
        self.mtbf = mtbf
        self.mtbf_unit = mtbf_unit
        self.failure_rate = failure_rate_per_hour(mtbf, mtbf_unit)
        self.step = 2
        logger.debug("MTBF %s %s -> failure rate %.6g per hour", mtbf, mtbf_unit, self.failure_rate)
        return self.failure_rate

    def submit_costs(
        self,
        inspection_cost: float,
        failure_cost: float,
        failure_rate: Optional[float] = None,
    ) -> FormattedInterval:
        """Step 2. ``failure_rate`` overrides the rate carried from step 1."""
        if self.step != 2:
            raise FormulaDomainError("Submit the MTBF before the costs")
        if failure_rate is not None:
            self.failure_rate = failure_rate
        self.inspection_cost = inspection_cost
        self.failure_cost = failure_cost
        hours = optimal_interval(inspection_cost, failure_cost, self.failure_rate)
        self.result = format_optimal_interval(hours)
        return self.result

    def back(self) -> None:
        self.step = 1
        self.result = None
