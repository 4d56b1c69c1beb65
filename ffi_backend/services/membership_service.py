"""
Membership integration: JWT login, membership lookup and the paid-plan gate.

Authentication is delegated to the membership site. The token it returns is
decoded without signature verification, only to read the user id; the plan
list then comes from the ARMember memberships endpoint. Calls are made once,
with no retry.
"""

import base64
import binascii
import json
import logging
import time
from typing import Any, Iterable, Optional

import httpx
from sqlalchemy.orm import Session

from ffi_backend.config import (
    ARMEMBER_API_KEY,
    ARMEMBER_MEMBERSHIPS_URL,
    HTTP_TIMEOUT_SEC,
    JWT_AUTH_URL,
)
from ffi_backend.models_db import USER_KEY, USER_PLANS_KEY
from ffi_backend.services.settings_service import get_state, remove_state, set_state
from ffi_backend.utils.logging import log_external_call

logger = logging.getLogger(__name__)

PAID_TIERS = ("bronze", "silver", "gold")


class MembershipError(Exception):
    """Login or membership lookup failed; the message is safe to show."""


async def get_http_client():
    """Dependency: one AsyncClient per request."""
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SEC) as client:
        yield client


# -----------------------------------------------------------------------------
# Plans
# -----------------------------------------------------------------------------


def is_paid_plan(name: Optional[str]) -> bool:
    lowered = (name or "").lower()
    return any(tier in lowered for tier in PAID_TIERS)


def _plan_name(plan: Any) -> Optional[str]:
    if isinstance(plan, dict):
        return plan.get("name")
    return plan if isinstance(plan, str) else None


def has_paid_plan(plans: Optional[Iterable[Any]]) -> bool:
    """Plans may be membership dicts (with a 'name') or bare names."""
    return any(is_paid_plan(_plan_name(p)) for p in (plans or []))


def extract_plans(memberships_body: Any) -> list[Any]:
    """response.result.memberships of the ARMember reply, or []."""
    if not isinstance(memberships_body, dict):
        return []
    result = (memberships_body.get("response") or {}).get("result") or {}
    memberships = result.get("memberships") if isinstance(result, dict) else None
    return memberships if isinstance(memberships, list) else []


# -----------------------------------------------------------------------------
# Token
# -----------------------------------------------------------------------------


def decode_token_payload(token: str) -> dict[str, Any]:
    """Payload of a JWT, unverified."""
    try:
        payload_part = token.split(".")[1]
        padded = payload_part + "=" * (-len(payload_part) % 4)
        payload = json.loads(base64.urlsafe_b64decode(padded))
    except (IndexError, ValueError, binascii.Error, AttributeError) as e:
        raise MembershipError("Invalid token") from e
    if not isinstance(payload, dict):
        raise MembershipError("Invalid token")
    return payload


def user_id_from_token(token: str) -> str:
    payload = decode_token_payload(token)
    user = ((payload.get("data") or {}).get("user")) or {}
    user_id = user.get("id") if isinstance(user, dict) else None
    if user_id in (None, ""):
        raise MembershipError("Token does not identify a user")
    return str(user_id)


# -----------------------------------------------------------------------------
# Outbound calls
# -----------------------------------------------------------------------------


def _status_of(error: Exception) -> Optional[int]:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


async def request_token(client: httpx.AsyncClient, username: str, password: str) -> dict[str, Any]:
    """POST credentials to the JWT endpoint; returns the reply body (contains 'token')."""
    start = time.perf_counter()
    try:
        response = await client.post(JWT_AUTH_URL, json={"username": username, "password": password})
        response.raise_for_status()
        body = response.json()
    except (httpx.HTTPError, ValueError) as e:
        log_external_call(
            logger, "jwt_auth", _status_of(e), time.perf_counter() - start, success=False, error=type(e).__name__
        )
        raise MembershipError("Please check your username and password.") from e
    log_external_call(logger, "jwt_auth", response.status_code, time.perf_counter() - start)
    # some deployments wrap the reply in {"data": {...}}
    if isinstance(body, dict) and "token" not in body and isinstance(body.get("data"), dict):
        body = body["data"]
    if not isinstance(body, dict) or not body.get("token"):
        raise MembershipError("Please check your username and password.")
    return body


async def fetch_memberships(client: httpx.AsyncClient, arm_member_id: str) -> Any:
    """GET the member's memberships from ARMember; returns the upstream JSON."""
    start = time.perf_counter()
    params = {"arm_api_key": ARMEMBER_API_KEY, "arm_user_id": arm_member_id}
    try:
        response = await client.get(ARMEMBER_MEMBERSHIPS_URL, params=params)
        response.raise_for_status()
        data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        log_external_call(
            logger,
            "armember_memberships",
            _status_of(e),
            time.perf_counter() - start,
            success=False,
            error=type(e).__name__,
        )
        raise MembershipError("Could not fetch member details") from e
    log_external_call(logger, "armember_memberships", response.status_code, time.perf_counter() - start)
    return data


# -----------------------------------------------------------------------------
# Session (stored user / plans)
# -----------------------------------------------------------------------------


async def sign_in(client: httpx.AsyncClient, db: Session, username: str, password: str) -> dict[str, Any]:
    """Log in, look up plans and store both blobs. Raises MembershipError."""
    user = await request_token(client, username.strip(), password.strip())
    user_id = user_id_from_token(user["token"])
    plans = extract_plans(await fetch_memberships(client, user_id))
    set_state(db, USER_KEY, user)
    set_state(db, USER_PLANS_KEY, plans)
    logger.info("User %s signed in with %d plan(s)", user_id, len(plans))
    return {"user": user, "plans": plans, "is_paid": has_paid_plan(plans)}


def sign_out(db: Session) -> None:
    remove_state(db, USER_KEY, USER_PLANS_KEY)


def current_session(db: Session) -> dict[str, Any]:
    user = get_state(db, USER_KEY)
    plans = get_state(db, USER_PLANS_KEY)
    return {
        "user": user,
        "plans": plans or [],
        "is_paid": bool(user) and plans is not None and has_paid_plan(plans),
    }
