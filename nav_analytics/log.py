"""Logging setup for the NAV analytics package."""
from __future__ import annotations

import logging
import sys

from nav_analytics.config import SETTINGS

_PACKAGE_LOGGER = "nav_analytics"
_IS_CONFIGURED = False


def _build_formatter() -> logging.Formatter:
    return logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")


def setup_logging(level: int | str | None = None) -> logging.Logger:
    """Attach a stderr handler to the package logger. Repeated calls only adjust the level."""

    global _IS_CONFIGURED
    logger = logging.getLogger(_PACKAGE_LOGGER)
    resolved = level if level is not None else SETTINGS.log_level
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO
    logger.setLevel(resolved)

    if _IS_CONFIGURED:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_build_formatter())
    logger.addHandler(handler)
    _IS_CONFIGURED = True
    return logger
