"""Display settings (currency, dark mode, decimal separator)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ffi_backend.database import get_db
from ffi_backend.services.settings_service import load_settings, update_settings
from ffi_shared.schemas.settings import CURRENCIES, Settings, SettingsUpdate

router = APIRouter()


@router.get("", response_model=Settings)
def get_settings(db: Session = Depends(get_db)):
    """Stored settings, or the defaults (EUR, light mode, '.')."""
    return load_settings(db)


@router.put("", response_model=Settings)
def put_settings(body: SettingsUpdate, db: Session = Depends(get_db)):
    """Partial update; fields left out keep their stored value."""
    return update_settings(db, body)


@router.get("/currencies")
def get_currencies():
    return CURRENCIES
