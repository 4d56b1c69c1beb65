"""
FFI Calculator FastAPI application entrypoint.

Run with: uvicorn ffi_backend.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from ffi_backend.auth import (
    API_KEY_HEADER,
    _check_rate_limit,
    _get_client_id,
    extract_api_key,
    skip_auth_path,
)
from ffi_backend.config import API_KEY_ENV, CORS_ORIGINS
from ffi_backend.database import Base, engine
from ffi_backend.models_db import ClientStateModel  # noqa: F401  registers the table
from ffi_backend.routes import api_router
from ffi_backend.utils.logging import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and create DB tables on startup."""
    configure_logging()
    Base.metadata.create_all(bind=engine)
    yield
    # Shutdown: nothing to do for SQLite


app = FastAPI(
    title="FFI Calculator API",
    description="""Failure Finding Interval calculators and the RCM Decision Tool.

## Authentication
When `FFI_API_KEY` is set, include it in requests:
- **Header:** `X-API-Key: your-key`
- **Query:** `?api_key=your-key`
- **Bearer:** `Authorization: Bearer your-key`

`/api/health` does not require a key (for load balancers).

The economic-optimum, risk-based and risk-based-voting calculators also need a
logged-in member on a bronze, silver or gold plan (`POST /api/auth/login`).

## Rate limiting
Configurable via `FFI_RATE_LIMIT_REQUESTS` (default 120) per `FFI_RATE_LIMIT_WINDOW_SEC` (default 60). 429 when exceeded.
""",
    version="0.1.0",
    lifespan=lifespan,
    swagger_ui_parameters={"persistAuthorization": True},
)


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "ApiKeyHeader": {"type": "apiKey", "in": "header", "name": API_KEY_HEADER, "description": "Set FFI_API_KEY in env to enforce"},
        "ApiKeyQuery": {"type": "apiKey", "in": "query", "name": "api_key"},
    }
    openapi_schema["security"] = [{"ApiKeyHeader": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

# CORS for the front-end dev server
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AuthAndRateLimitMiddleware(BaseHTTPMiddleware):
    """Optional API key auth and rate limiting for /api/*."""

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if not path.startswith("/api/"):
            return await call_next(request)
        key = extract_api_key(request)
        try:
            _check_rate_limit(_get_client_id(request, key))
        except HTTPException as e:
            return JSONResponse(status_code=e.status_code, content={"detail": e.detail})
        if API_KEY_ENV and not skip_auth_path(path):
            if not key:
                return JSONResponse(status_code=401, content={"detail": "Missing API key. Provide X-API-Key or api_key."})
            if key != API_KEY_ENV:
                return JSONResponse(status_code=403, content={"detail": "Invalid API key."})
        return await call_next(request)


app.add_middleware(AuthAndRateLimitMiddleware)
app.include_router(api_router)


@app.get("/")
def root():
    return {"service": "FFI Calculator", "docs": "/docs", "api": "/api"}
