"""
RCM decision graph validation and walker.

The walker is a finite-state machine over a validated DecisionGraph. Every
operation takes an RCMState and returns a new one; on error the input state
is left untouched so the user can still go back or start over.
"""

import json
import logging
import re
import threading
import time
import uuid
from collections import OrderedDict
from datetime import date, datetime, timezone
from typing import Callable, Literal, Optional

from pydantic import BaseModel, Field

from ffi_backend.config import RCM_MAX_SESSIONS, RCM_SESSION_TTL_SEC
from ffi_backend.data.rcm_diagram import ASSETS, build_default_graph
from ffi_shared.schemas.rcm import (
    AnswerNode,
    Asset,
    DecisionExport,
    DecisionGraph,
    DecisionPathEntry,
    FailureLeg,
    FailureType,
    QuestionNode,
    RCMState,
    RecommendedAction,
)

logger = logging.getLogger(__name__)

# Questions whose answer classifies the failure
FAILURE_TYPE_STEP = "Start"
FAILURE_LEG_STEPS = ("Evident", "Hidden")

# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------


class ValidationError(BaseModel):
    """A single graph validation issue."""

    code: str = Field(..., description="Error code (e.g. missing_node, cycle)")
    message: str = Field(..., description="Human-readable message")
    node_id: Optional[str] = Field(None, description="Relevant node ID if applicable")
    path: Optional[list[str]] = Field(None, description="Path of node IDs if applicable")


class GraphValidationError(ValueError):
    """Raised when a decision graph fails validation."""

    def __init__(self, errors: list[ValidationError]):
        self.errors = errors
        super().__init__(f"Invalid decision graph: {[e.message for e in errors]}")


class NodeNotFoundError(LookupError):
    """A step id did not resolve to the expected kind of node."""

    def __init__(self, step_id: str, kind: Literal["question", "answer"]):
        self.step_id = step_id
        self.kind = kind
        super().__init__(f"{kind.capitalize()} not found: {step_id}")


# -----------------------------------------------------------------------------
# Graph validation
# -----------------------------------------------------------------------------


def validate_graph(graph: DecisionGraph) -> list[ValidationError]:
    """
    Check: start node exists and is a question, node keys match ids, every
    branch target exists, no cycles, every node reachable from the start.
    """
    errors: list[ValidationError] = []
    nodes = graph.nodes
    start_id = graph.start_id

    for key, node in nodes.items():
        if key != node.id:
            errors.append(
                ValidationError(code="id_mismatch", message=f"Node key '{key}' does not match id '{node.id}'", node_id=key)
            )

    if start_id not in nodes:
        errors.append(
            ValidationError(code="root_not_found", message=f"Start node '{start_id}' is not in nodes", node_id=start_id)
        )
        return errors
    if not isinstance(nodes[start_id], QuestionNode):
        errors.append(
            ValidationError(code="root_not_question", message=f"Start node '{start_id}' must be a question", node_id=start_id)
        )
        return errors

    # Depth-first walk; a branch back onto the current path is a cycle,
    # reaching an already finished node from another branch is fine.
    finished: set[str] = set()
    on_path: set[str] = set()
    stack: list[tuple[str, list[str], bool]] = [(start_id, [start_id], False)]

    while stack:
        nid, path, leaving = stack.pop()
        if leaving:
            on_path.discard(nid)
            finished.add(nid)
            continue
        if nid in finished:
            continue
        on_path.add(nid)
        stack.append((nid, path, True))
        node = nodes[nid]
        if not isinstance(node, QuestionNode):
            continue
        for child_id in (node.yes_next_step, node.no_next_step):
            if child_id not in nodes:
                errors.append(
                    ValidationError(
                        code="missing_node",
                        message=f"Branch target '{child_id}' of '{nid}' does not exist",
                        node_id=child_id,
                        path=path + [child_id],
                    )
                )
            elif child_id in on_path:
                errors.append(
                    ValidationError(
                        code="cycle", message=f"Cycle detected at node '{child_id}'", node_id=child_id, path=path + [child_id]
                    )
                )
            elif child_id not in finished:
                stack.append((child_id, path + [child_id], False))

    for nid in nodes:
        if nid not in finished:
            errors.append(
                ValidationError(code="unreachable", message=f"Node '{nid}' is not reachable from '{start_id}'", node_id=nid)
            )

    return errors


# -----------------------------------------------------------------------------
# Walker
# -----------------------------------------------------------------------------


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RCMWalker:
    """Answer/back/reset/export over one decision graph."""

    def __init__(self, graph: Optional[DecisionGraph] = None):
        self.graph = graph or build_default_graph()
        errors = validate_graph(self.graph)
        if errors:
            raise GraphValidationError(errors)

    @property
    def total_steps(self) -> int:
        return self.graph.total_steps

    def initial_state(self) -> RCMState:
        return RCMState(current_step=self.graph.start_id, total_steps=self.total_steps)

    def question(self, step_id: str) -> QuestionNode:
        if not self.graph.is_question(step_id):
            raise NodeNotFoundError(step_id, "question")
        return self.graph.nodes[step_id]

    def answer_node(self, step_id: str) -> AnswerNode:
        if not self.graph.is_answer(step_id):
            raise NodeNotFoundError(step_id, "answer")
        return self.graph.nodes[step_id]

    def begin(self, state: RCMState, asset: str, failure_mode: str) -> RCMState:
        """Intake form: record the labels; the walk itself stays on the start question."""
        return state.model_copy(
            update={
                "asset": asset,
                "failure_mode": failure_mode,
                "current_step": self.graph.start_id,
                "progress": 1 / self.total_steps * 100,
            }
        )

    def answer(self, state: RCMState, answer: str) -> RCMState:
        if answer not in ("yes", "no"):
            raise ValueError(f"Answer must be 'yes' or 'no', got {answer!r}")
        current = state.current_step
        question = self.question(current)
        next_step = question.next_step(answer)

        if self.graph.is_answer(next_step):
            progress = 100.0
        else:
            progress = min((len(state.history) + 1) / self.total_steps * 100, 100.0)

        failure_type = state.failure_type
        failure_leg = state.failure_leg
        if current == FAILURE_TYPE_STEP:
            failure_type = FailureType.EVIDENT if answer == "yes" else FailureType.HIDDEN
        elif current in FAILURE_LEG_STEPS:
            failure_leg = FailureLeg.SAFETY if answer == "yes" else FailureLeg.FINANCIAL

        logger.debug("RCM %s --%s--> %s", current, answer, next_step)
        return state.model_copy(
            update={
                "current_step": next_step,
                "failure_type": failure_type,
                "failure_leg": failure_leg,
                "progress": progress,
                "history": [*state.history, current],
            }
        )

    def back(self, state: RCMState) -> RCMState:
        """Undo one answer. Classification flags are left as they were."""
        if not state.history:
            return state.model_copy()
        history = list(state.history)
        previous = history.pop()
        if self.graph.is_answer(previous):
            progress = 100.0
        else:
            progress = max(len(history) / self.total_steps * 100, 0.0)
        return state.model_copy(update={"current_step": previous, "history": history, "progress": progress})

    def reset(self) -> RCMState:
        return self.initial_state()

    def is_complete(self, state: RCMState) -> bool:
        return self.graph.is_answer(state.current_step)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def decision_path(self, state: RCMState) -> list[DecisionPathEntry]:
        """History plus the current step; each entry says which branch was taken."""
        path = [*state.history, state.current_step]
        entries = []
        for index, step in enumerate(path):
            node = self.graph.nodes.get(step)
            question = node if isinstance(node, QuestionNode) else None
            if index == len(path) - 1:
                taken = "Final"
            elif question is not None and question.yes_next_step == path[index + 1]:
                taken = "Yes"
            else:
                taken = "No"
            entries.append(
                DecisionPathEntry(step=step, question=question.main_text if question else None, answer=taken)
            )
        return entries

    def export(self, state: RCMState, timestamp: Optional[str] = None) -> DecisionExport:
        node = self.graph.nodes.get(state.current_step)
        answer = node if isinstance(node, AnswerNode) else None
        return DecisionExport(
            asset=state.asset,
            failureMode=state.failure_mode,
            failureType=state.failure_type,
            failureLeg=state.failure_leg,
            recommendedAction=RecommendedAction(
                id=state.current_step,
                recommendation=answer.recommendation if answer else None,
                explanation=answer.explanation if answer else None,
            ),
            decisionPath=self.decision_path(state),
            timestamp=timestamp or _timestamp(),
        )

    def export_json(self, state: RCMState, timestamp: Optional[str] = None) -> str:
        return json.dumps(self.export(state, timestamp).model_dump(mode="json"), indent=2, ensure_ascii=False)


def export_filename(asset: str, on: Optional[date] = None) -> str:
    slug = re.sub(r"\s+", "_", asset).lower()
    return f"rcm_decision_{slug}_{(on or date.today()).isoformat()}.json"


def list_assets() -> list[Asset]:
    return list(ASSETS)


# -----------------------------------------------------------------------------
# Session store
# -----------------------------------------------------------------------------


class RCMSessionStore:
    """
    In-memory wizard sessions keyed by id. Not persisted; lost on restart.

    Sessions idle for longer than ``ttl_sec`` expire, and beyond ``max_sessions``
    the least recently used one is evicted. All access goes through one lock,
    since handlers run in the threadpool.
    """

    def __init__(
        self,
        walker: Optional[RCMWalker] = None,
        ttl_sec: float = RCM_SESSION_TTL_SEC,
        max_sessions: int = RCM_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.walker = walker or RCMWalker()
        self.ttl_sec = ttl_sec
        self.max_sessions = max_sessions
        self._clock = clock
        self._lock = threading.Lock()
        # session id -> (state, last access); oldest access first
        self._sessions: OrderedDict[str, tuple[RCMState, float]] = OrderedDict()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._sessions)

    def _purge_expired(self) -> None:
        cutoff = self._clock() - self.ttl_sec
        while self._sessions:
            session_id, (_, seen) = next(iter(self._sessions.items()))
            if seen > cutoff:
                break
            del self._sessions[session_id]
            logger.info("RCM session expired: %s", session_id)

    def _touch(self, session_id: str, state: RCMState) -> None:
        self._sessions[session_id] = (state, self._clock())
        self._sessions.move_to_end(session_id)

    def create(self) -> tuple[str, RCMState]:
        session_id = str(uuid.uuid4())
        state = self.walker.initial_state()
        with self._lock:
            self._purge_expired()
            while len(self._sessions) >= self.max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("RCM session evicted: %s", evicted)
            self._touch(session_id, state)
        logger.info("RCM session created: %s", session_id)
        return session_id, state

    def get(self, session_id: str) -> Optional[RCMState]:
        with self._lock:
            self._purge_expired()
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            self._touch(session_id, entry[0])
            return entry[0]

    def save(self, session_id: str, state: RCMState) -> RCMState:
        with self._lock:
            self._touch(session_id, state)
        return state

    def update(self, session_id: str, step: Callable[[RCMState], RCMState]) -> Optional[RCMState]:
        """
        Apply ``step`` to the stored state and store its result, atomically.
        Returns None for an unknown or expired session; exceptions from
        ``step`` propagate and leave the session unchanged.
        """
        with self._lock:
            self._purge_expired()
            entry = self._sessions.get(session_id)
            if entry is None:
                return None
            state = step(entry[0])
            self._touch(session_id, state)
            return state

    def delete(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("RCM session deleted: %s", session_id)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


_store: Optional[RCMSessionStore] = None


def get_session_store() -> RCMSessionStore:
    """Process-wide store; used as a FastAPI dependency."""
    global _store
    if _store is None:
        _store = RCMSessionStore()
    return _store
