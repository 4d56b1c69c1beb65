"""
Runtime configuration for the FFI calculator backend.

All values come from environment variables with development defaults:

  FFI_DB_PATH                    SQLite file for client state (default: <root>/ffi.db)
  FFI_DB_ECHO                    "1" to log SQL
  FFI_LOG_LEVEL                  DEBUG | INFO | WARNING | ERROR (default: INFO)
  FFI_API_KEY                    if set, /api/* requires X-API-Key
  FFI_RATE_LIMIT_REQUESTS        requests per window (default 120, 0 disables)
  FFI_RATE_LIMIT_WINDOW_SEC      window length (default 60)
  FFI_JWT_AUTH_URL               JWT login endpoint of the membership site
  FFI_ARMEMBER_MEMBERSHIPS_URL   ARMember memberships endpoint
  FFI_ARMEMBER_API_KEY           ARMember API key (never committed)
  FFI_HTTP_TIMEOUT_SEC           timeout for outbound calls (default 15)
  FFI_RCM_SESSION_TTL_SEC        idle RCM wizard sessions expire after this (default 3600)
  FFI_RCM_MAX_SESSIONS           oldest RCM session is evicted beyond this (default 1000)
"""

import os
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent

DB_PATH = os.getenv("FFI_DB_PATH", str(ROOT_DIR / "ffi.db"))
DB_ECHO = os.getenv("FFI_DB_ECHO", "0") == "1"

LOG_DIR = Path(os.getenv("FFI_LOG_DIR", str(ROOT_DIR / "logs")))
LOG_LEVEL = os.getenv("FFI_LOG_LEVEL", "INFO").upper()

API_KEY_ENV = os.getenv("FFI_API_KEY", "").strip()
RATE_LIMIT_REQUESTS = int(os.environ.get("FFI_RATE_LIMIT_REQUESTS", "120"))
RATE_LIMIT_WINDOW_SEC = int(os.environ.get("FFI_RATE_LIMIT_WINDOW_SEC", "60"))

JWT_AUTH_URL = os.getenv(
    "FFI_JWT_AUTH_URL",
    "https://reliabilitymanagement.co.uk/wp-json/jwt-auth/v1/token",
)
ARMEMBER_MEMBERSHIPS_URL = os.getenv(
    "FFI_ARMEMBER_MEMBERSHIPS_URL",
    "https://reliabilitymanagement.co.uk/wp-json/armember/v1/arm_member_memberships",
)
ARMEMBER_API_KEY = os.getenv("FFI_ARMEMBER_API_KEY", "")
HTTP_TIMEOUT_SEC = float(os.getenv("FFI_HTTP_TIMEOUT_SEC", "15"))

RCM_SESSION_TTL_SEC = int(os.getenv("FFI_RCM_SESSION_TTL_SEC", "3600"))
RCM_MAX_SESSIONS = int(os.getenv("FFI_RCM_MAX_SESSIONS", "1000"))

# CORS for local front-end dev servers
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("FFI_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if o.strip()
]
