"""Logging bootstrap for the blogviewer service."""
from __future__ import annotations

import logging

LOGGER_NAME = "blogviewer"

_handler: logging.Handler | None = None


def _parse_level(raw: str | None) -> int:
    normalized = str(raw or "INFO").strip().upper()
    level = getattr(logging, normalized, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Repeated calls only adjust the level.
    """

    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    resolved = _parse_level(level)
    if _handler is None:
        _handler = logging.StreamHandler()
        _handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s %(message)s"))
        logger.addHandler(_handler)
    _handler.setLevel(resolved)
    logger.setLevel(resolved)
    return logger
