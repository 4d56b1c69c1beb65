"""
SQLAlchemy ORM models (persisted in SQLite).

A single key/value table stands in for browser local storage: each key holds
one JSON blob, last write wins, no schema version.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, String, JSON
from sqlalchemy.orm import Mapped, mapped_column

from ffi_backend.database import Base

SETTINGS_KEY = "settings"
USER_KEY = "user"
USER_PLANS_KEY = "userPlans"


class ClientStateModel(Base):
    """One persisted client-state blob."""

    __tablename__ = "client_state"

    key: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    value: Mapped[Optional[Any]] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
