"""
Closed-form reliability formulas.

Pure functions over scalars, no I/O. Arguments outside a formula's domain,
or a result that would not be finite, raise FormulaDomainError rather than
returning inf/nan.

    P_f(t)   = 1 - exp(-λ t)
    R(t)     = exp(-λ t)
    T_opt    = sqrt(2 C_i / (C_f λ²))
    λ        = 1 / MTBF
"""

import math
from typing import Literal, Optional

GRAVITY = 9.81  # m/s^2
WATER_DENSITY = 1000.0  # kg/m^3

HOURS_PER_UNIT: dict[str, float] = {
    "hours": 1,
    "days": 24,
    "weeks": 168,
    "months": 730,
    "years": 8760,
}


class FormulaDomainError(ValueError):
    """Raised when a formula is evaluated outside its domain."""


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise FormulaDomainError(message)


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise FormulaDomainError(f"{what} is not a finite number for the given inputs")
    return value


def checked_divide(numerator: float, denominator: float, what: str) -> float:
    # products of positive inputs can underflow to 0.0 or overflow to inf
    if denominator == 0 or not math.isfinite(denominator):
        raise FormulaDomainError(f"{what} is not a finite number for the given inputs")
    return _finite(numerator / denominator, what)


def _positive(value: float, name: str) -> None:
    _require(math.isfinite(value) and value > 0, f"{name} must be greater than zero")


def _non_negative(value: float, name: str) -> None:
    _require(math.isfinite(value) and value >= 0, f"{name} must be zero or greater")


def failure_probability(failure_rate: float, interval: float) -> float:
    """Probability that the item has failed by ``interval``: 1 - e^(-λt)."""
    _positive(failure_rate, "Failure rate")
    _non_negative(interval, "Inspection interval")
    return -math.expm1(-failure_rate * interval)


def reliability(failure_rate: float, interval: float) -> float:
    """Probability of survival to ``interval``: e^(-λt)."""
    _positive(failure_rate, "Failure rate")
    _non_negative(interval, "Inspection interval")
    return math.exp(-failure_rate * interval)


def optimal_interval(inspection_cost: float, failure_cost: float, failure_rate: float) -> float:
    """Cost-optimal inspection interval sqrt(2·Ci / (Cf·λ²)), in the time unit of 1/λ."""
    _non_negative(inspection_cost, "Inspection cost")
    _positive(failure_cost, "Failure cost")
    _positive(failure_rate, "Failure rate")
    ratio = checked_divide(2 * inspection_cost, failure_cost * failure_rate * failure_rate, "Optimal interval")
    return _finite(math.sqrt(ratio), "Optimal interval")


def failure_rate_from_mtbf(mtbf: float) -> float:
    _positive(mtbf, "MTBF")
    return _finite(1 / mtbf, "Failure rate")


def mtbf_from_failure_rate(failure_rate: float) -> float:
    _positive(failure_rate, "Failure rate")
    return _finite(1 / failure_rate, "MTBF")


def convert_mtbf(value: float, from_unit: str, to_unit: str) -> float:
    """Convert a duration between hours/days/weeks/months/years (730 h per month)."""
    for unit in (from_unit, to_unit):
        _require(unit in HOURS_PER_UNIT, f"Unknown time unit: {unit!r}")
    _require(math.isfinite(value), "MTBF must be a finite number")
    return value * HOURS_PER_UNIT[from_unit] / HOURS_PER_UNIT[to_unit]


def voiding_time(
    tank_volume: float,
    pipe_length: float,
    pipe_diameter: float,
    system_type: Literal["gravity", "pressurized"],
    pressure_difference: Optional[float] = None,
) -> float:
    """
    Time to drain a tank through a pipe, in seconds.

    tank_volume in m³, pipe_length in m (head for gravity systems),
    pipe_diameter in mm, pressure_difference in Pa.
    Gravity systems use Torricelli's law, pressurized ones Bernoulli with water.
    """
    _positive(tank_volume, "Tank volume")
    _positive(pipe_diameter, "Pipe diameter")
    pipe_radius = pipe_diameter / 2000  # mm -> m
    pipe_area = math.pi * pipe_radius * pipe_radius

    if system_type == "gravity":
        _positive(pipe_length, "Pipe length")
        exit_velocity = math.sqrt(2 * GRAVITY * pipe_length)
    elif system_type == "pressurized":
        if pressure_difference is None:
            raise FormulaDomainError("Pressure difference is required for pressurized systems")
        _positive(pressure_difference, "Pressure difference")
        exit_velocity = math.sqrt((2 * pressure_difference) / WATER_DENSITY)
    else:
        raise FormulaDomainError(f"Unknown system type: {system_type!r}")

    return checked_divide(tank_volume, pipe_area * exit_velocity, "Voiding time")
