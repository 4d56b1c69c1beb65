"""
Health checks for the FFI calculator backend.

- Database connectivity (client-state store)
- Membership integration configured (API key set); does not call the site
"""

import logging
from typing import Any

from sqlalchemy import text

from ffi_backend.config import ARMEMBER_API_KEY
from ffi_backend.database import engine

logger = logging.getLogger(__name__)


def check_db() -> tuple[bool, str]:
    """Check database connectivity. Returns (ok, message)."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, "ok"
    except Exception as e:
        logger.warning("Health check: database unavailable: %s", e)
        return False, str(e)


def check_membership_config() -> tuple[bool, str]:
    if ARMEMBER_API_KEY:
        return True, "armember configured"
    return False, "FFI_ARMEMBER_API_KEY not set"


def get_health() -> dict[str, Any]:
    """Return health status for /api/health."""
    db_ok, db_msg = check_db()
    membership_ok, membership_msg = check_membership_config()
    return {
        "status": "healthy" if db_ok else "unhealthy",
        "checks": {
            "database": {"status": "up" if db_ok else "down", "message": db_msg},
            "membership": {
                "status": "configured" if membership_ok else "not_configured",
                "message": membership_msg,
            },
        },
    }
