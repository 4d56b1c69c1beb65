"""API routes for the FFI calculator backend."""

from fastapi import APIRouter

from ffi_backend.routes import calculators, membership, monitoring, rcm, settings

api_router = APIRouter(prefix="/api", tags=["api"])

api_router.include_router(monitoring.router)
api_router.include_router(membership.router)
api_router.include_router(calculators.router, prefix="/calculators", tags=["calculators"])
api_router.include_router(rcm.router, prefix="/rcm", tags=["rcm"])
api_router.include_router(settings.router, prefix="/settings", tags=["settings"])
