"""
Client-state store: the settings, user and userPlans blobs.

Reads and writes are best-effort. A failing read logs and falls back to the
default; a failing write logs, rolls back and reports False. Nothing here
raises to the caller.
"""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ffi_backend.models_db import SETTINGS_KEY, ClientStateModel
from ffi_shared.schemas.settings import Settings, SettingsUpdate

logger = logging.getLogger(__name__)


def get_state(db: Session, key: str, default: Any = None) -> Any:
    try:
        row = db.get(ClientStateModel, key)
    except SQLAlchemyError as e:
        logger.error("Error loading client state %r: %s", key, e)
        return default
    if row is None or row.value is None:
        return default
    return row.value


def set_state(db: Session, key: str, value: Any) -> bool:
    """Store one blob (last write wins)."""
    try:
        row = db.get(ClientStateModel, key)
        if row is None:
            db.add(ClientStateModel(key=key, value=value))
        else:
            row.value = value
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error saving client state %r: %s", key, e)
        return False


def remove_state(db: Session, *keys: str) -> bool:
    try:
        for key in keys:
            row = db.get(ClientStateModel, key)
            if row is not None:
                db.delete(row)
        db.commit()
        return True
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Error removing client state %s: %s", keys, e)
        return False


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------


def load_settings(db: Session) -> Settings:
    """Stored settings, or defaults if none are stored or the blob is unreadable."""
    stored = get_state(db, SETTINGS_KEY)
    if not isinstance(stored, dict):
        return Settings()
    try:
        return Settings.model_validate(stored)
    except ValidationError as e:
        logger.error("Error loading settings, using defaults: %s", e)
        return Settings()


def save_settings(db: Session, settings: Settings) -> bool:
    return set_state(db, SETTINGS_KEY, settings.model_dump())


def update_settings(db: Session, update: SettingsUpdate) -> Settings:
    """Merge the set fields over the stored settings and persist the result."""
    current = load_settings(db)
    merged = current.model_copy(update=update.model_dump(exclude_none=True))
    save_settings(db, merged)
    return merged
