"""Backend services (formulas, FFI variants, RCM walker, membership, etc.)."""

from ffi_backend.services.formula_service import (
    FormulaDomainError,
    convert_mtbf,
    failure_probability,
    failure_rate_from_mtbf,
    mtbf_from_failure_rate,
    optimal_interval,
    reliability,
    voiding_time,
)
from ffi_backend.services.interval_service import OptimalIntervalWizard, format_optimal_interval
from ffi_backend.services.membership_service import MembershipError, has_paid_plan, is_paid_plan
from ffi_backend.services.rcm_service import (
    GraphValidationError,
    NodeNotFoundError,
    RCMSessionStore,
    RCMWalker,
    ValidationError,
    export_filename,
    validate_graph,
)

__all__ = [
    "FormulaDomainError",
    "convert_mtbf",
    "failure_probability",
    "failure_rate_from_mtbf",
    "mtbf_from_failure_rate",
    "optimal_interval",
    "reliability",
    "voiding_time",
    "OptimalIntervalWizard",
    "format_optimal_interval",
    "MembershipError",
    "has_paid_plan",
    "is_paid_plan",
    "GraphValidationError",
    "NodeNotFoundError",
    "RCMSessionStore",
    "RCMWalker",
    "ValidationError",
    "export_filename",
    "validate_graph",
]
