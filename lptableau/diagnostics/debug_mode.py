"""Debug mode management for lptableau.

When debug mode is on, the solver driver re-checks the tableau invariants
after every pivot and fails loudly on the first violation.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator

_DEBUG_ENV_VAR = "LPTABLEAU_DEBUG"
_debug_enabled: bool = os.getenv(_DEBUG_ENV_VAR, "0").lower() in (
    "1",
    "true",
    "yes",
    "on",
)


def is_debug_enabled() -> bool:
    """
    Return whether lptableau debug mode is currently enabled.

    Debug mode can be toggled via set_debug_enabled(...) or the
    LPTABLEAU_DEBUG environment variable.
    """
    return _debug_enabled


def set_debug_enabled(enabled: bool) -> None:
    """Globally enable or disable lptableau debug mode."""
    global _debug_enabled
    _debug_enabled = bool(enabled)


@contextmanager
def debug_context(enabled: bool = True) -> Iterator[None]:
    """
    Context manager to temporarily enable or disable debug mode.

    Example
    -------
    >>> with debug_context(True):
    ...     # invariants are checked after every pivot inside this block
    ...     pass
    """
    global _debug_enabled
    prev = _debug_enabled
    _debug_enabled = bool(enabled)
    try:
        yield
    finally:
        _debug_enabled = prev
