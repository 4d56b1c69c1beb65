"""
RCM Decision Tool routes: the diagram, the asset catalogue and wizard sessions.
"""

import re
from typing import Callable, Literal
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from ffi_backend.services.rcm_service import (
    NodeNotFoundError,
    RCMSessionStore,
    export_filename,
    get_session_store,
    list_assets,
)
from ffi_shared.schemas.rcm import Asset, DecisionGraph, RCMState

router = APIRouter()


class BeginRequest(BaseModel):
    asset: str = Field(..., min_length=1, description="Asset name (from the catalogue or a new one)")
    failure_mode: str = Field("", description="Failure mode being analysed (optional)")


class AnswerRequest(BaseModel):
    answer: Literal["yes", "no"]


def _attachment(filename: str) -> str:
    """Content-Disposition for any filename: ASCII fallback plus the UTF-8 form (RFC 6266 / 5987)."""
    fallback = re.sub(r'[^\x20-\x7e]|["\\]', "_", filename)
    encoded = quote(filename, safe="")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _view(store: RCMSessionStore, session_id: str, state: RCMState) -> dict:
    node = store.walker.graph.nodes.get(state.current_step)
    return {
        "session_id": session_id,
        "state": state.model_dump(mode="json"),
        "node": node.model_dump() if node else None,
        "complete": store.walker.is_complete(state),
    }


def _get_state(store: RCMSessionStore, session_id: str) -> RCMState:
    state = store.get(session_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return state


@router.get("/graph", response_model=DecisionGraph)
def get_graph(store: RCMSessionStore = Depends(get_session_store)):
    """The full node table used by the wizard."""
    return store.walker.graph


@router.get("/assets", response_model=list[Asset])
def get_assets():
    """Assets and failure modes offered on the intake form."""
    return list_assets()


@router.post("/sessions", status_code=201)
def create_session(store: RCMSessionStore = Depends(get_session_store)):
    session_id, state = store.create()
    return _view(store, session_id, state)


@router.get("/sessions/{session_id}")
def get_session(session_id: str, store: RCMSessionStore = Depends(get_session_store)):
    return _view(store, session_id, _get_state(store, session_id))


@router.delete("/sessions/{session_id}", status_code=204)
def delete_session(session_id: str, store: RCMSessionStore = Depends(get_session_store)):
    if not store.delete(session_id):
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return Response(status_code=204)


def _apply(store: RCMSessionStore, session_id: str, step: Callable[[RCMState], RCMState]) -> dict:
    state = store.update(session_id, step)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Session '{session_id}' not found")
    return _view(store, session_id, state)


@router.post("/sessions/{session_id}/begin")
def begin_session(session_id: str, body: BeginRequest, store: RCMSessionStore = Depends(get_session_store)):
    """Submit the intake form (asset and optional failure mode)."""
    asset, failure_mode = body.asset.strip(), body.failure_mode.strip()
    return _apply(store, session_id, lambda state: store.walker.begin(state, asset, failure_mode))


@router.post("/sessions/{session_id}/answer")
def answer_question(session_id: str, body: AnswerRequest, store: RCMSessionStore = Depends(get_session_store)):
    """Answer the current question. 409 if the current step is not a question; the session is unchanged."""
    try:
        return _apply(store, session_id, lambda state: store.walker.answer(state, body.answer))
    except NodeNotFoundError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e


@router.post("/sessions/{session_id}/back")
def go_back(session_id: str, store: RCMSessionStore = Depends(get_session_store)):
    return _apply(store, session_id, store.walker.back)


@router.post("/sessions/{session_id}/reset")
def reset_session(session_id: str, store: RCMSessionStore = Depends(get_session_store)):
    """Start over: clears answers, classification and the intake labels."""
    return _apply(store, session_id, lambda _state: store.walker.reset())


@router.get("/sessions/{session_id}/export")
def export_session(session_id: str, store: RCMSessionStore = Depends(get_session_store)):
    """Decision record as a downloadable JSON file."""
    state = _get_state(store, session_id)
    return Response(
        content=store.walker.export_json(state),
        media_type="application/json",
        headers={"Content-Disposition": _attachment(export_filename(state.asset))},
    )
