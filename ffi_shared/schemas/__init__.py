"""Shared schemas and types for the FFI calculator suite (backend and frontend contract)."""

from ffi_shared.schemas.rcm import (
    AnswerNode,
    Asset,
    DecisionExport,
    DecisionGraph,
    DecisionNode,
    DecisionPathEntry,
    FailureLeg,
    FailureType,
    QuestionNode,
    RCMState,
    RecommendedAction,
)
from ffi_shared.schemas.settings import CURRENCIES, Settings, SettingsUpdate

__all__ = [
    "AnswerNode",
    "Asset",
    "CURRENCIES",
    "DecisionExport",
    "DecisionGraph",
    "DecisionNode",
    "DecisionPathEntry",
    "FailureLeg",
    "FailureType",
    "QuestionNode",
    "RCMState",
    "RecommendedAction",
    "Settings",
    "SettingsUpdate",
]
