"""Shared logging utilities for request observability.

Usage example:
    from stripe_request_core.observability.logging import get_logger

    logger = get_logger("stripe_request_core.executor")
    logger.warning("Retrying %s %s after status %s", method, path, status)

Set `STRIPE_LOG_LEVEL` (e.g. `DEBUG`) to change the level of loggers created here.
"""

from __future__ import annotations

import logging
import os
import time

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_LEVEL_ENV = "STRIPE_LOG_LEVEL"


def _resolve_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    text = (level or os.getenv(_LEVEL_ENV, "")).strip().upper()
    resolved = logging.getLevelName(text) if text else logging.INFO
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(name: str, level: int | str | None = None) -> logging.Logger:
    """Return a logger with a single UTC-timestamped stream handler.

    Args:
        name: Logger name (use a stable module-qualified name).
        level: Explicit level; falls back to `STRIPE_LOG_LEVEL`, then INFO.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(_resolve_level(level))
        logger.propagate = False
    return logger
