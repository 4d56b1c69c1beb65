"""Shared contract between the FFI calculator backend and any front end."""
