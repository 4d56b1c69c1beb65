"""
Access control: optional API key, rate limiting and the paid-plan gate.

- If FFI_API_KEY is set, /api/* requests must include X-API-Key: <key> (or Authorization: Bearer <key>).
- Health is excluded from the key check for load balancers.
- Rate limiting: in-memory, per-IP or per-API-key; configurable requests per window.
- Paid calculators need a stored user whose plans include a bronze, silver or gold tier.
"""

import time
from typing import Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ffi_backend.config import API_KEY_ENV, RATE_LIMIT_REQUESTS, RATE_LIMIT_WINDOW_SEC
from ffi_backend.database import get_db
from ffi_backend.services.membership_service import current_session

API_KEY_HEADER = "X-API-Key"
UPGRADE_MESSAGE = "Upgrade Plan to Unlock"

# In-memory rate limit: key -> (window_start_sec, count)
_rate_limit_store: dict[str, tuple[float, int]] = {}


def _get_client_id(request: Request, api_key: Optional[str]) -> str:
    """Identify client for rate limiting: API key if present, else X-Forwarded-For or client host."""
    if api_key:
        return f"key:{api_key[:16]}"
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return f"ip:{forwarded.split(',')[0].strip()}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


def _check_rate_limit(client_id: str) -> None:
    """Raise 429 if over limit. Otherwise increment and allow."""
    if RATE_LIMIT_REQUESTS <= 0:
        return
    now = time.time()
    if client_id not in _rate_limit_store:
        _rate_limit_store[client_id] = (now, 1)
        return
    start, count = _rate_limit_store[client_id]
    if now - start >= RATE_LIMIT_WINDOW_SEC:
        _rate_limit_store[client_id] = (now, 1)
        return
    count += 1
    _rate_limit_store[client_id] = (start, count)
    if count > RATE_LIMIT_REQUESTS:
        raise HTTPException(status_code=429, detail="Rate limit exceeded. Try again later.")


def reset_rate_limits() -> None:
    _rate_limit_store.clear()


def extract_api_key(request: Request) -> Optional[str]:
    """API key from header, query, or Bearer token."""
    key = request.headers.get(API_KEY_HEADER) or request.query_params.get("api_key")
    auth = request.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        key = key or auth[7:]
    return key


def skip_auth_path(path: str) -> bool:
    """Paths that do not require an API key."""
    return path.rstrip("/") in ("/api/health",)


def require_paid_plan(db: Session = Depends(get_db)) -> dict:
    """Dependency for the paid calculators; 403 unless the stored user is on a paid tier."""
    session = current_session(db)
    if not session["is_paid"]:
        raise HTTPException(status_code=403, detail=UPGRADE_MESSAGE)
    return session
