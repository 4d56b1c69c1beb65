"""Tests for the client-state store and display settings."""

from ffi_backend.models_db import SETTINGS_KEY
from ffi_backend.services.settings_service import (
    get_state,
    load_settings,
    remove_state,
    save_settings,
    set_state,
    update_settings,
)
from ffi_shared.schemas import Settings, SettingsUpdate


def test_defaults_when_nothing_stored(db_session):
    settings = load_settings(db_session)
    assert settings == Settings(currency="EUR", darkMode=False, decimalSeparator=".")


def test_save_and_load(db_session):
    assert save_settings(db_session, Settings(currency="GBP", darkMode=True, decimalSeparator=","))
    loaded = load_settings(db_session)
    assert loaded.currency == "GBP"
    assert loaded.darkMode is True
    assert loaded.decimalSeparator == ","


def test_partial_update_keeps_other_fields(db_session):
    save_settings(db_session, Settings(currency="USD"))
    merged = update_settings(db_session, SettingsUpdate(darkMode=True))
    assert merged.currency == "USD"
    assert merged.darkMode is True
    assert load_settings(db_session) == merged


def test_unreadable_blob_falls_back_to_defaults(db_session):
    set_state(db_session, SETTINGS_KEY, {"currency": "XYZ", "decimalSeparator": ";"})
    assert load_settings(db_session) == Settings()


def test_last_write_wins(db_session):
    set_state(db_session, "user", {"user_display_name": "first"})
    set_state(db_session, "user", {"user_display_name": "second"})
    assert get_state(db_session, "user") == {"user_display_name": "second"}


def test_remove_state(db_session):
    set_state(db_session, "user", {"token": "t"})
    set_state(db_session, "userPlans", [{"name": "Gold"}])
    assert remove_state(db_session, "user", "userPlans")
    assert get_state(db_session, "user") is None
    assert get_state(db_session, "userPlans", default=[]) == []
