"""
Calculator endpoints: formula library, optimal interval and the FFI variants.

Every request is evaluated fresh; nothing is stored. Numbers are formatted
with the stored display settings. Domain errors come back as 400.
"""

import logging
from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ffi_backend.auth import require_paid_plan
from ffi_backend.database import get_db
from ffi_backend.models.calculators import (
    AvailabilityFFIInput,
    EconomicFFIInput,
    FailureProbabilityInput,
    FFIResult,
    MTBFInput,
    OptimalIntervalInput,
    ReliabilityInput,
    RiskFFIInput,
    RiskVotingFFIInput,
    VoidingTimeInput,
    VotingSystemsFFIInput,
)
from ffi_backend.services import curve_service, ffi_service
from ffi_backend.services.formula_service import (
    FormulaDomainError,
    failure_probability,
    failure_rate_from_mtbf,
    mtbf_from_failure_rate,
    optimal_interval,
    reliability,
    voiding_time,
)
from ffi_backend.services.interval_service import failure_rate_per_hour, format_optimal_interval
from ffi_backend.services.settings_service import load_settings
from ffi_backend.utils.formatting import format_currency, format_number
from ffi_backend.utils.logging import log_calculation
from ffi_shared.schemas.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(db: Session = Depends(get_db)) -> Settings:
    return load_settings(db)


def _evaluate(calculator: str, inputs: dict[str, Any], compute: Callable[[], Any]) -> Any:
    """Run one calculation; log it and turn domain errors into 400."""
    try:
        result = compute()
    except FormulaDomainError as e:
        log_calculation(logger, calculator, inputs, None, error=str(e))
        raise HTTPException(status_code=400, detail=str(e)) from e
    if isinstance(result, FFIResult):
        log_calculation(logger, calculator, inputs, result.interval_years, warnings=len(result.warnings))
    else:
        log_calculation(logger, calculator, inputs, result.get("result") if isinstance(result, dict) else None)
    return result


def _percent(fraction: float, settings: Settings) -> str:
    return f"{format_number(fraction * 100, settings.decimalSeparator)}%"


# -----------------------------------------------------------------------------
# Formula library
# -----------------------------------------------------------------------------


@router.post("/failure-probability")
def calculate_failure_probability(body: FailureProbabilityInput, settings: Settings = Depends(get_settings)):
    """Probability of failure within the inspection interval, with the cost curve over ten intervals."""

    def compute():
        probability = failure_probability(body.failure_rate, body.inspection_interval)
        return {
            "result": probability,
            "probability": probability,
            "formatted": _percent(probability, settings),
            "inspection_cost": format_currency(body.inspection_cost, settings.currency),
            "failure_cost": format_currency(body.failure_cost, settings.currency),
            "curve": curve_service.failure_probability_curve(
                body.failure_rate, body.inspection_interval, body.inspection_cost, body.failure_cost
            ),
        }

    return _evaluate("failure-probability", body.model_dump(), compute)


@router.post("/reliability")
def calculate_reliability(body: ReliabilityInput, settings: Settings = Depends(get_settings)):
    """Reliability at the inspection interval and whether it meets the target."""

    def compute():
        if body.input_type == "failureRate":
            rate = body.failure_rate
            mtbf = mtbf_from_failure_rate(rate)
        else:
            mtbf = body.mtbf
            rate = failure_rate_from_mtbf(mtbf)
        value = reliability(rate, body.inspection_interval)
        return {
            "result": value,
            "failure_rate": rate,
            "mtbf": mtbf,
            "reliability": value,
            "meeting_target": value >= body.target_reliability,
            "formatted": _percent(value, settings),
            "curve": curve_service.reliability_curve(rate, body.inspection_interval, body.target_reliability),
        }

    return _evaluate("reliability", body.model_dump(), compute)


@router.post("/voiding-time")
def calculate_voiding_time(body: VoidingTimeInput, settings: Settings = Depends(get_settings)):
    def compute():
        seconds = voiding_time(
            body.tank_volume, body.pipe_length, body.pipe_diameter, body.system_type, body.pressure_difference
        )
        return {
            "result": seconds,
            "seconds": seconds,
            "minutes": seconds / 60,
            "formatted": f"{format_number(seconds, settings.decimalSeparator)} s",
        }

    return _evaluate("voiding-time", body.model_dump(), compute)


# -----------------------------------------------------------------------------
# Optimal interval (two steps)
# -----------------------------------------------------------------------------


@router.post("/optimal-interval/failure-rate")
def optimal_interval_failure_rate(body: MTBFInput):
    """Step 1: MTBF in any unit -> failure rate per hour."""

    def compute():
        rate = failure_rate_per_hour(body.mtbf, body.mtbf_unit)
        return {
            "result": rate,
            "failure_rate": rate,
            "mtbf_hours": 1 / rate,
            "formatted": f"{rate:.6g} failures/hour",
        }

    return _evaluate("optimal-interval/failure-rate", body.model_dump(), compute)


@router.post("/optimal-interval")
def calculate_optimal_interval(body: OptimalIntervalInput, settings: Settings = Depends(get_settings)):
    """Step 2: cost-optimal inspection interval in the largest readable unit, with the cost curves."""

    def compute():
        hours = optimal_interval(body.inspection_cost, body.failure_cost, body.failure_rate)
        shown = format_optimal_interval(hours)
        return {
            "result": hours,
            "interval_hours": hours,
            "value": shown.value,
            "unit": shown.unit,
            "formatted": f"{format_number(shown.value, settings.decimalSeparator)} {shown.unit}",
            "curve": curve_service.optimal_interval_curve(
                hours, body.failure_rate, body.inspection_cost, body.failure_cost
            ),
        }

    return _evaluate("optimal-interval", body.model_dump(), compute)


# -----------------------------------------------------------------------------
# FFI variants
# -----------------------------------------------------------------------------


@router.post("/availability-based-ffi", response_model=FFIResult)
def availability_based_ffi(body: AvailabilityFFIInput, settings: Settings = Depends(get_settings)):
    return _evaluate(
        "availability-based-ffi",
        body.model_dump(mode="json"),
        lambda: ffi_service.calculate_availability_based(body, settings.decimalSeparator),
    )


@router.post("/economic-optimum-ffi", response_model=FFIResult)
def economic_optimum_ffi(
    body: EconomicFFIInput,
    settings: Settings = Depends(get_settings),
    _session: dict = Depends(require_paid_plan),
):
    return _evaluate(
        "economic-optimum-ffi",
        body.model_dump(),
        lambda: ffi_service.calculate_economic_optimum(body, settings.decimalSeparator),
    )


@router.post("/risk-based-ffi", response_model=FFIResult)
def risk_based_ffi(
    body: RiskFFIInput,
    settings: Settings = Depends(get_settings),
    _session: dict = Depends(require_paid_plan),
):
    return _evaluate(
        "risk-based-ffi",
        body.model_dump(),
        lambda: ffi_service.calculate_risk_based(body, settings.decimalSeparator),
    )


@router.post("/risk-based-voting-ffi", response_model=FFIResult)
def risk_based_voting_ffi(
    body: RiskVotingFFIInput,
    settings: Settings = Depends(get_settings),
    _session: dict = Depends(require_paid_plan),
):
    return _evaluate(
        "risk-based-voting-ffi",
        body.model_dump(),
        lambda: ffi_service.calculate_risk_based_voting(body, settings.decimalSeparator),
    )


@router.post("/voting-systems-ffi")
def voting_systems_ffi(body: VotingSystemsFFIInput, settings: Settings = Depends(get_settings)):
    """Voting-systems FFI in hours (and days), with reliability/detection curves."""
    result = _evaluate(
        "voting-systems-ffi",
        body.model_dump(),
        lambda: ffi_service.calculate_voting_systems(body, settings.decimalSeparator),
    )
    hours = result.details["interval_hours"]
    return {
        **result.model_dump(),
        "curve": curve_service.voting_systems_curve(hours, body.failure_rate, body.total_voters, body.detection_time),
    }
