"""Centralized logging configuration for the ``expense_tracker`` package.

Entrypoints (the CLI) call :func:`configure_logging` once; library modules
only ever call ``get_logger("expense_tracker.<module>")`` and never attach
handlers of their own. Until configuration runs, the package logger carries a
``NullHandler`` so embedding applications see no "No handler" warnings.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PKG_LOGGER_NAME = "expense_tracker"
LOG_LEVEL_ENV = "EXPENSE_TRACKER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None) -> int:
    """Translate ``level`` (int, name, numeric string, or None) to a logging level.

    ``None`` falls back to ``EXPENSE_TRACKER_LOG_LEVEL`` and then to INFO.
    Unknown names also resolve to INFO.
    """

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV)
        if not level:
            return logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a single ``StreamHandler`` to the package logger.

    Repeated calls only adjust the level, so commands may call this freely.
    Records do not propagate to the root logger.
    """

    global _handler
    logger = logging.getLogger(PKG_LOGGER_NAME)
    numeric = resolve_level(level)

    if _handler is None:
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        logger.addHandler(_handler)
        logger.propagate = False

    _handler.setLevel(numeric)
    logger.setLevel(numeric)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a logger by name, keeping the package logger silent until configured."""

    pkg_logger = logging.getLogger(PKG_LOGGER_NAME)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "resolve_level"]
