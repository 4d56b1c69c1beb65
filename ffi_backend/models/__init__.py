"""
Calculator input and result models.

Request bodies for the calculator endpoints; the RCM and settings contract
shared with front ends lives in ffi_shared.schemas.
"""

from ffi_backend.models.calculators import (
    AvailabilityFFIInput,
    AvailabilityPolicy,
    EconomicFFIInput,
    FailureProbabilityInput,
    FFIResult,
    MTBFInput,
    MTBFUnit,
    OptimalIntervalInput,
    ReliabilityInput,
    RiskFFIInput,
    RiskVotingFFIInput,
    VoidingTimeInput,
    VotingSystemsFFIInput,
)

__all__ = [
    "AvailabilityFFIInput",
    "AvailabilityPolicy",
    "EconomicFFIInput",
    "FailureProbabilityInput",
    "FFIResult",
    "MTBFInput",
    "MTBFUnit",
    "OptimalIntervalInput",
    "ReliabilityInput",
    "RiskFFIInput",
    "RiskVotingFFIInput",
    "VoidingTimeInput",
    "VotingSystemsFFIInput",
]
