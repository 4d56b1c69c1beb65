"""Health endpoint."""

from fastapi import APIRouter

from ffi_backend.services.monitoring_service import get_health

router = APIRouter(tags=["monitoring"])


@router.get("/health", summary="Health check")
def health():
    """
    Health check for load balancers and orchestration.
    Returns database and membership config status. Does not require authentication.
    """
    return get_health()
