"""Logging utilities for qcondsim.

Every module obtains its logger through :func:`get_logger`, so the whole
package lives under one ``qcondsim`` namespace. Each logger owns a single
stream handler and does not propagate; :func:`set_log_level` and
:func:`configure_logging` act on every logger handed out so far and on the
ones created afterwards. The initial level comes from ``QCONDSIM_LOG_LEVEL``
(default ``WARNING``).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Dict, Optional, Union

ROOT_NAME = "qcondsim"
_LEVEL_ENV_VAR = "QCONDSIM_LOG_LEVEL"
_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

Level = Union[int, str]


def _coerce_level(level: Level) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


class _Settings:
    level: int = _coerce_level(os.getenv(_LEVEL_ENV_VAR, "WARNING"))
    formatter: logging.Formatter = logging.Formatter(_FORMAT)
    stream: Optional[IO[str]] = None


_loggers: Dict[str, logging.Logger] = {}


def _attach_handler(logger: logging.Logger) -> None:
    for old in logger.handlers[:]:
        logger.removeHandler(old)
    handler = logging.StreamHandler(_Settings.stream or sys.stderr)
    handler.setLevel(_Settings.level)
    handler.setFormatter(_Settings.formatter)
    logger.addHandler(handler)
    logger.setLevel(_Settings.level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a logger under the ``qcondsim`` namespace.

    Args:
        name: Logger name, typically ``__name__``. Names outside the package
            are prefixed with ``qcondsim.``; None returns the package root.

    Returns:
        The cached logger for that name.

    Example:
        >>> from qcondsim.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("applying gate")
    """
    if not name or name == ROOT_NAME:
        full_name = ROOT_NAME
    elif name.startswith(ROOT_NAME + "."):
        full_name = name
    else:
        full_name = f"{ROOT_NAME}.{name}"

    logger = _loggers.get(full_name)
    if logger is None:
        logger = logging.getLogger(full_name)
        if not logger.handlers:
            _attach_handler(logger)
        logger.propagate = False
        _loggers[full_name] = logger
    return logger


def set_log_level(level: Level) -> None:
    """Change the level of every qcondsim logger and its handlers.

    Args:
        level: ``logging.DEBUG`` etc., or a level name such as ``"INFO"``.
    """
    _Settings.level = _coerce_level(level)
    for logger in _loggers.values():
        logger.setLevel(_Settings.level)
        for handler in logger.handlers:
            handler.setLevel(_Settings.level)


def configure_logging(
    level: Level = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Replace the handler of every qcondsim logger.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. If None, uses the default.
        stream: Output stream (default: sys.stderr).
    """
    _Settings.level = _coerce_level(level)
    _Settings.formatter = logging.Formatter(format_string or _FORMAT)
    _Settings.stream = stream
    for logger in _loggers.values():
        _attach_handler(logger)


__all__ = ["get_logger", "set_log_level", "configure_logging"]
