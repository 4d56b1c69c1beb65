"""
Structured logging for the FFI calculator backend.

- Configurable level (DEBUG, INFO, WARNING, ERROR)
- Writes to the logs/ directory
- Console handler for development
- Helpers for calculation and outbound-call logging
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ffi_backend.config import LOG_DIR, LOG_LEVEL


def _ensure_log_dir(log_dir: Path) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def configure_logging(
    level: str = LOG_LEVEL,
    log_dir: Optional[Path] = None,
    log_to_console: bool = True,
) -> None:
    """Configure root and ffi_backend loggers. Call once at app startup."""
    log_dir = _ensure_log_dir(log_dir or LOG_DIR)
    level_value = getattr(logging, level, logging.INFO)

    file_handler = logging.FileHandler(log_dir / "ffi.log", encoding="utf-8")
    file_handler.setLevel(level_value)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(level_value)
    # Avoid duplicate handlers when reloading
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(file_handler)
    if log_to_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level_value)
        console.setFormatter(logging.Formatter("%(levelname)s | %(name)s | %(message)s"))
        root.addHandler(console)

    logging.getLogger("ffi_backend").setLevel(level_value)


def log_calculation(
    logger: logging.Logger,
    calculator: str,
    inputs: dict[str, Any],
    result: Optional[float],
    warnings: int = 0,
    error: Optional[str] = None,
) -> None:
    """Log one calculator evaluation."""
    payload = {
        "event": "calculation",
        "calculator": calculator,
        "inputs": inputs,
        "result": result,
        "warnings": warnings,
        "error": error,
        "ts": datetime.utcnow().isoformat() + "Z",
    }
    if error:
        logger.warning("Calculation: %s", json.dumps(payload, default=str))
    else:
        logger.info("Calculation: %s", json.dumps(payload, default=str))


def log_external_call(
    logger: logging.Logger,
    target: str,
    status_code: Optional[int] = None,
    duration_sec: Optional[float] = None,
    success: bool = True,
    error: Optional[str] = None,
) -> None:
    """Log an outbound request to the membership service. Never logs credentials."""
    payload = {
        "event": "external_call",
        "target": target,
        "status_code": status_code,
        "duration_sec": duration_sec,
        "success": success,
        "error": error,
    }
    level = logging.INFO if success else logging.WARNING
    logger.log(level, "External call: %s", json.dumps(payload, default=str))
