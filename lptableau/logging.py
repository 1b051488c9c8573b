"""Logging utilities for lptableau.

Solver modules obtain their logger through :func:`get_logger` so that every
message ends up under the ``lptableau.`` namespace with one shared handler
configuration.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

_DEFAULT_LEVEL = logging.WARNING
_DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

_loggers: dict[str, logging.Logger] = {}


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the solver logger for ``name``, creating its stderr handler once.

    Names outside the package are nested under ``lptableau.``, so
    ``get_logger("bench")`` and ``get_logger("lptableau.bench")`` are the same
    logger.

    Args:
        name: Module name, usually ``__name__``. ``None`` gives the root
            ``lptableau`` logger.

    Example:
        >>> from lptableau.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("pivot at (%d, %d)", 1, 0)
    """
    if name is None:
        name = "lptableau"

    logger_name = name if name.startswith("lptableau") else f"lptableau.{name}"

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_DEFAULT_FORMAT))

        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Change the level of every cached logger and of loggers created later.

    Args:
        level: A ``logging`` constant or its name, case-insensitive. Unknown
            names fall back to WARNING.
    """
    global _DEFAULT_LEVEL
    level = _coerce_level(level)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Configure logging for lptableau.

    Replaces the handlers of every logger created so far and sets the default
    used for loggers created later.

    Args:
        level: Threshold for both loggers and handlers.
        format_string: ``logging.Formatter`` pattern; ``None`` keeps
            ``[LEVEL] name: message``.
        stream: Where pivot traces go; ``None`` means stderr.

    Example:
        >>> from lptableau.logging import configure_logging
        >>> configure_logging(level="DEBUG")  # one line per pivot
    """
    global _DEFAULT_LEVEL
    level = _coerce_level(level)

    if stream is None:
        stream = sys.stderr

    formatter = logging.Formatter(format_string or _DEFAULT_FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _DEFAULT_LEVEL = level


__all__ = ["get_logger", "set_log_level", "configure_logging"]
