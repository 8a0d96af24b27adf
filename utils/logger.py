"""Logging utilities for Draftpad."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from core.security.redaction import redact

APP_LOGGER = "draftpad"


def setup_logger(
    name: str = APP_LOGGER,
    logs_dir: Optional[Path] = None,
    debug: bool = False,
) -> logging.Logger:
    """
    Set up and return a logger instance.

    Args:
        name: Logger name
        logs_dir: Directory for the dated log file (console only if None)
        debug: Log at DEBUG level on the console

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_format = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S"
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler
    if logs_dir is not None:
        log_file = Path(logs_dir) / f"{name}_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the application logger for a module."""
    return logging.getLogger(f"{APP_LOGGER}.{name}")


logger = get_logger("settings")


def log_setting_write(key: str, encrypted: bool):
    """Log a setting write without its value."""
    marker = " (encrypted)" if encrypted else ""
    logger.debug(f"Setting saved: {key}{marker}")


def log_payload(action: str, payload: Any):
    """Log a structured payload with sensitive fields redacted."""
    logger.info(f"{action}: {redact(payload)}")
