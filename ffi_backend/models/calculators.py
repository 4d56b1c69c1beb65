"""
Input and result models for the reliability calculators.

Each calculator takes one constrained input record. Constraints are enforced
at the boundary (Pydantic), so the services only see values in range.
All FFI inputs and results are in years unless a field says otherwise.
"""

from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

MTBFUnit = Literal["hours", "days", "weeks", "months", "years"]


class AvailabilityPolicy(str, Enum):
    """How the availability-based calculator treats targets below 90%."""

    BLOCK = "block"  # withhold the interval, return the warning only
    WARN = "warn"  # compute the interval and attach the warning


# -----------------------------------------------------------------------------
# Formula library calculators
# -----------------------------------------------------------------------------


class FailureProbabilityInput(BaseModel):
    failure_rate: float = Field(0.1, gt=0, description="Failures per hour (λ)")
    inspection_interval: float = Field(100, gt=0, description="Inspection interval in hours (t)")
    inspection_cost: float = Field(500, ge=0, description="Cost of one inspection (Ci)")
    failure_cost: float = Field(10000, gt=0, description="Cost of one failure (Cf)")


class ReliabilityInput(BaseModel):
    input_type: Literal["failureRate", "mtbf"] = Field("failureRate", description="Which of the two rate fields is authoritative")
    failure_rate: Optional[float] = Field(0.001, gt=0, description="Failures per hour")
    mtbf: Optional[float] = Field(None, gt=0, description="Mean time between failures in hours")
    inspection_interval: float = Field(1000, gt=0, description="Mission/inspection time in hours")
    target_reliability: float = Field(0.95, ge=0, le=1, description="Required reliability (0-1)")

    @model_validator(mode="after")
    def _rate_present(self):
        if self.input_type == "failureRate" and self.failure_rate is None:
            raise ValueError("Either Failure Rate or MTBF must be provided")
        if self.input_type == "mtbf" and self.mtbf is None:
            raise ValueError("Either Failure Rate or MTBF must be provided")
        return self


class MTBFInput(BaseModel):
    """Step 1 of the optimal-interval flow."""

    mtbf: float = Field(7, gt=0, description="Mean time between failures")
    mtbf_unit: MTBFUnit = Field("years", description="Unit of the MTBF")


class OptimalIntervalInput(BaseModel):
    """Step 2 of the optimal-interval flow; failure rate is per hour."""

    failure_rate: float = Field(0.001, gt=0, description="Failures per hour")
    inspection_cost: float = Field(500, ge=0, description="Cost of one inspection (Ci)")
    failure_cost: float = Field(10000, gt=0, description="Cost of one failure (Cf)")


class VoidingTimeInput(BaseModel):
    tank_volume: float = Field(..., gt=0, description="Tank volume in m³")
    pipe_length: float = Field(..., gt=0, description="Pipe length / head in m")
    pipe_diameter: float = Field(..., gt=0, description="Pipe diameter in mm")
    system_type: Literal["gravity", "pressurized"] = "gravity"
    pressure_difference: Optional[float] = Field(None, gt=0, description="Pressure difference in Pa")


# -----------------------------------------------------------------------------
# FFI variants
# -----------------------------------------------------------------------------


class AvailabilityFFIInput(BaseModel):
    target_availability: float = Field(95, ge=0, le=100, description="Target availability of the protective device (%)")
    mtbf: float = Field(10, gt=0, description="MTBF of the protective device (years)")
    parallel_devices: int = Field(1, gt=0, description="Number of parallel protective devices (n)")
    policy: AvailabilityPolicy = Field(AvailabilityPolicy.BLOCK, description="Treatment of targets below 90%")


class EconomicFFIInput(BaseModel):
    mtbf_protective: float = Field(10, gt=0, description="MTBF of the protective device (years)")
    mtbd_protective: float = Field(1, gt=0, description="Mean time between demands on the protective device (years)")
    cost_failure_finding: float = Field(1000, ge=0, description="Cost of one failure-finding task")
    cost_multiple_failure: float = Field(100000, gt=0, description="Cost of the multiple failure")
    parallel_devices: int = Field(1, gt=0, description="Number of parallel protective devices (n)")


class RiskFFIInput(BaseModel):
    mtbf_protective: float = Field(10, gt=0, description="MTBF of the protective device (years)")
    mean_period_between_demands: float = Field(1, gt=0, description="Mean period between demands (years)")
    mtbmf: float = Field(1000, gt=0, description="Tolerable mean time between multiple failures (years)")
    parallel_devices: int = Field(1, gt=0, description="Number of parallel protective devices (n)")


class RiskVotingFFIInput(BaseModel):
    mtbf_protective: float = Field(100, gt=0, description="MTBF of each protective device (years)")
    mean_period_between_demands: float = Field(50, gt=0, description="Mean period between demands (years)")
    mtbmf: float = Field(100000, gt=0, description="Tolerable mean time between multiple failures (years)")
    parallel_devices: int = Field(3, gt=0, description="Total number of protective devices (n)")
    devices_to_activate: int = Field(2, gt=0, description="Devices needed to activate the protection (m)")

    @model_validator(mode="after")
    def _m_not_above_n(self):
        if self.devices_to_activate > self.parallel_devices:
            raise ValueError("devices_to_activate (m) cannot exceed parallel_devices (n)")
        return self


class VotingSystemsFFIInput(BaseModel):
    total_voters: float = Field(10000, gt=0, description="Number of identical voting units")
    voting_period: float = Field(12, gt=0, description="Voting period")
    failure_rate: float = Field(0.001, gt=0, description="Failure rate of one unit")
    detection_time: float = Field(1, gt=0, description="Time to detect a failure")


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------


class FFIResult(BaseModel):
    """Interval result plus advisory warnings. Recomputed on every request."""

    calculator: str
    interval_years: Optional[float] = Field(None, description="None when a blocking policy withheld the result")
    formatted: Optional[str] = None
    warnings: list[str] = Field(default_factory=list)
    details: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}
