"""
Login against the membership site and the ARMember details relay.
"""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from ffi_backend.database import get_db
from ffi_backend.services.membership_service import (
    MembershipError,
    current_session,
    fetch_memberships,
    get_http_client,
    sign_in,
    sign_out,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class MemberDetailsRequest(BaseModel):
    arm_member_id: str = Field(..., description="ARMember user id")


@router.post("/auth/login", tags=["auth"])
async def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Log in, fetch the member's plans and store both. 401 on any failure."""
    try:
        return await sign_in(client, db, body.username, body.password)
    except MembershipError as e:
        logger.warning("Login failed: %s", e)
        raise HTTPException(status_code=401, detail=f"Login Failed. {e}") from e


@router.post("/auth/logout", tags=["auth"])
def logout(db: Session = Depends(get_db)):
    sign_out(db)
    return {"message": "Logged out"}


@router.get("/auth/me", tags=["auth"])
def me(db: Session = Depends(get_db)):
    """The stored user, their plans and whether any plan is a paid tier."""
    return current_session(db)


@router.post("/armember-details", tags=["membership"])
async def armember_details(body: MemberDetailsRequest, client: httpx.AsyncClient = Depends(get_http_client)):
    """Relay to the ARMember memberships endpoint. 500 with a message on any failure."""
    try:
        data = await fetch_memberships(client, body.arm_member_id)
    except MembershipError as e:
        return JSONResponse(status_code=500, content={"message": str(e)})
    return {"message": "AR Member Details Fetched Successfully", "data": data}
