"""
Failure Finding Interval (FFI) calculators.

Each variant computes a closed-form interval, then re-derives an implied
availability and/or demand ratio and attaches advisory warnings when the
result sits outside the formula's validity range.

- availability-based:  FFI = MTBF · ((n+1)(1-A))^(1/n)
- economic optimum:    FFI = (MTBF^n (n+1) MTBD C_ff / (n C_mf))^(1/(n+1))
- risk-based:          FFI = MTBF · ((n+1) MPBD / MTBMF)^(1/n)
- risk-based voting:   r = n-m+1,
                       FFI = MTBF · (r! (n-r)! (r+1) MPBD / (n! MTBMF))^(1/r)
                           = MTBF · ((r+1) MPBD / (C(n,r) MTBMF))^(1/r)
- voting systems:      FFI = sqrt(2 T_d / (λ N T_v))

Inputs and results are in years except for voting systems, whose interval is
in the time unit of the inputs (hours on the calculator page).
"""

import logging
import math
from typing import Optional

from ffi_backend.models.calculators import (
    AvailabilityFFIInput,
    AvailabilityPolicy,
    EconomicFFIInput,
    FFIResult,
    RiskFFIInput,
    RiskVotingFFIInput,
    VotingSystemsFFIInput,
)
from ffi_backend.services.formula_service import FormulaDomainError, checked_divide
from ffi_backend.utils.formatting import format_interval, format_number, round_half_up

logger = logging.getLogger(__name__)

MIN_VALID_AVAILABILITY = 0.9

AVAILABILITY_TARGET_WARNING = (
    "The calculation uses a linear approximation to an exponential decay. The formula is only valid "
    "for availabilities above 90%. Please select a figure greater than 90%"
)
ECONOMIC_DEMAND_WARNING = (
    "Warning 1 - Demand rate high in relation to failure finding interval: The demand rate is high in "
    "relation to the Failure Finding Interval. Failure Finding is not technically feasible in such "
    "circumstances because a high proportion of tests of the protective device will be demands on it."
)
HIGH_DEMAND_WARNING = (
    "Warning: High demand rate - The demand rate is high in relation to the Failure Finding Interval. "
    "Failure Finding is not technically feasible in such circumstances because a high proportion of "
    "tests of the protective device will be demands on it."
)
LOW_AVAILABILITY_WARNING = (
    "Warning: Low availability - The calculated availability is below 90%. The formula uses a linear "
    "approximation to an exponential decay and is not mathematically valid for availability less than "
    "90%. Please adjust your inputs. The availability for the figures used is {percent}%"
)


def _power(base: float, exponent: float, what: str) -> float:
    try:
        value = math.pow(base, exponent)
    except (OverflowError, ValueError) as e:
        raise FormulaDomainError(f"{what} cannot be evaluated for the given inputs: {e}") from e
    if not math.isfinite(value):
        raise FormulaDomainError(f"{what} is not a finite number for the given inputs")
    return value


def _low_availability_warning(availability: float) -> Optional[str]:
    if availability < MIN_VALID_AVAILABILITY:
        return LOW_AVAILABILITY_WARNING.format(percent=f"{availability * 100:.2f}")
    return None


# -----------------------------------------------------------------------------
# Formulas
# -----------------------------------------------------------------------------


def availability_ffi(mtbf: float, target_availability_pct: float, parallel_devices: int) -> float:
    target_unavailability = 1 - (target_availability_pct / 100)
    n = parallel_devices
    return mtbf * _power((n + 1) * target_unavailability, 1 / n, "Availability-based FFI")


def economic_optimum_ffi(
    mtbf_protective: float,
    mtbd_protective: float,
    cost_failure_finding: float,
    cost_multiple_failure: float,
    parallel_devices: int,
) -> float:
    n = parallel_devices
    numerator = _power(mtbf_protective, n, "MTBF^n") * (n + 1) * mtbd_protective * cost_failure_finding
    return _power(numerator / (n * cost_multiple_failure), 1 / (n + 1), "Economic optimum FFI")


def economic_implied_availability(ffi: float, mtbf_protective: float, parallel_devices: int) -> float:
    """Inverse of the availability formula at the economic-optimum interval."""
    n = parallel_devices
    ratio = _power(ffi / mtbf_protective, n, "FFI/MTBF ratio")
    return 1 - _power(ratio / (n + 1), 1 / n, "Implied availability")


def risk_based_ffi(
    mtbf_protective: float,
    mean_period_between_demands: float,
    mtbmf: float,
    parallel_devices: int,
) -> float:
    n = parallel_devices
    return mtbf_protective * _power((n + 1) * mean_period_between_demands / mtbmf, 1 / n, "Risk-based FFI")


def risk_implied_availability(mean_period_between_demands: float, mtbmf: float, parallel_devices: int) -> float:
    return 1 - _power(mean_period_between_demands / mtbmf, 1 / parallel_devices, "Implied availability")


def voting_redundancy(parallel_devices: int, devices_to_activate: int) -> int:
    """r = n - m + 1: devices that must fail before an m-out-of-n system cannot trip."""
    if not 1 <= devices_to_activate <= parallel_devices:
        raise FormulaDomainError("Devices to activate (m) must be between 1 and the number of devices (n)")
    return parallel_devices - devices_to_activate + 1


def risk_based_voting_ffi(
    mtbf_protective: float,
    mean_period_between_demands: float,
    mtbmf: float,
    parallel_devices: int,
    devices_to_activate: int,
) -> float:
    n = parallel_devices
    r = voting_redundancy(n, devices_to_activate)
    # r!(n-r)!/n! == 1/C(n, r); float() overflows once C(n, r) exceeds the float range
    try:
        combinations = float(math.comb(n, r))
    except OverflowError as e:
        raise FormulaDomainError("Risk-based voting FFI cannot be evaluated for this many devices") from e
    ratio = checked_divide((r + 1) * mean_period_between_demands, combinations * mtbmf, "Risk-based voting FFI")
    return mtbf_protective * _power(ratio, 1 / r, "Risk-based voting FFI")


def voting_systems_ffi(total_voters: float, voting_period: float, failure_rate: float, detection_time: float) -> float:
    combined_rate = failure_rate * total_voters
    ratio = checked_divide(2 * detection_time, combined_rate * voting_period, "Voting systems FFI")
    return math.sqrt(ratio)


# -----------------------------------------------------------------------------
# Calculators (input record -> FFIResult)
# -----------------------------------------------------------------------------


def calculate_availability_based(data: AvailabilityFFIInput, decimal_separator: str = ".") -> FFIResult:
    """
    Availability-based FFI. Below a 90% target the BLOCK policy withholds the
    interval and WARN computes it anyway; both return the same warning.
    """
    warnings: list[str] = []
    if data.target_availability < 90:
        warnings.append(AVAILABILITY_TARGET_WARNING)
        if data.policy == AvailabilityPolicy.BLOCK:
            logger.info("Availability-based FFI blocked: target %.2f%% below 90%%", data.target_availability)
            return FFIResult(
                calculator="availability-based-ffi",
                interval_years=None,
                formatted=None,
                warnings=warnings,
                details={"policy": data.policy.value, "blocked": True},
            )
    ffi = availability_ffi(data.mtbf, data.target_availability, data.parallel_devices)
    return FFIResult(
        calculator="availability-based-ffi",
        interval_years=ffi,
        formatted=format_interval(ffi, decimal_separator),
        warnings=warnings,
        details={
            "policy": data.policy.value,
            "blocked": False,
            "target_unavailability": 1 - data.target_availability / 100,
        },
    )


def calculate_economic_optimum(data: EconomicFFIInput, decimal_separator: str = ".") -> FFIResult:
    ffi = economic_optimum_ffi(
        data.mtbf_protective,
        data.mtbd_protective,
        data.cost_failure_finding,
        data.cost_multiple_failure,
        data.parallel_devices,
    )
    warnings: list[str] = []
    if ffi * 2 > data.mtbd_protective:
        warnings.append(ECONOMIC_DEMAND_WARNING)
    availability = economic_implied_availability(ffi, data.mtbf_protective, data.parallel_devices)
    low = _low_availability_warning(availability)
    if low:
        warnings.append(low)
    return FFIResult(
        calculator="economic-optimum-ffi",
        interval_years=ffi,
        formatted=format_interval(ffi, decimal_separator),
        warnings=warnings,
        details={"implied_availability": availability},
    )


def _risk_warnings(ffi: float, mean_period_between_demands: float, mtbmf: float, parallel_devices: int) -> tuple[list[str], float]:
    warnings: list[str] = []
    availability = risk_implied_availability(mean_period_between_demands, mtbmf, parallel_devices)
    low = _low_availability_warning(availability)
    if low:
        warnings.append(low)
    if ffi * 2 > mean_period_between_demands:
        warnings.append(HIGH_DEMAND_WARNING)
    return warnings, availability


def calculate_risk_based(data: RiskFFIInput, decimal_separator: str = ".") -> FFIResult:
    ffi = risk_based_ffi(data.mtbf_protective, data.mean_period_between_demands, data.mtbmf, data.parallel_devices)
    warnings, availability = _risk_warnings(ffi, data.mean_period_between_demands, data.mtbmf, data.parallel_devices)
    return FFIResult(
        calculator="risk-based-ffi",
        interval_years=ffi,
        formatted=format_interval(ffi, decimal_separator),
        warnings=warnings,
        details={"implied_availability": availability},
    )


def calculate_risk_based_voting(data: RiskVotingFFIInput, decimal_separator: str = ".") -> FFIResult:
    ffi = risk_based_voting_ffi(
        data.mtbf_protective,
        data.mean_period_between_demands,
        data.mtbmf,
        data.parallel_devices,
        data.devices_to_activate,
    )
    # availability check uses n, not r
    warnings, availability = _risk_warnings(ffi, data.mean_period_between_demands, data.mtbmf, data.parallel_devices)
    return FFIResult(
        calculator="risk-based-voting-ffi",
        interval_years=ffi,
        formatted=format_interval(ffi, decimal_separator),
        warnings=warnings,
        details={
            "r": voting_redundancy(data.parallel_devices, data.devices_to_activate),
            "implied_availability": availability,
        },
    )


def calculate_voting_systems(data: VotingSystemsFFIInput, decimal_separator: str = ".") -> FFIResult:
    ffi_hours = voting_systems_ffi(data.total_voters, data.voting_period, data.failure_rate, data.detection_time)
    return FFIResult(
        calculator="voting-systems-ffi",
        interval_years=ffi_hours / 8760,
        formatted=f"{format_number(round_half_up(ffi_hours, 2), decimal_separator)} hours",
        warnings=[],
        details={"interval_hours": ffi_hours, "interval_days": ffi_hours / 24},
    )
