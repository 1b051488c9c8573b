"""Diagnostics and debugging utilities for lptableau."""

from .core import (
    assert_basis_valid,
    assert_rhs_feasible,
    assert_tableaux_close,
    basis_violations,
    max_abs_difference,
    tableaux_close,
)
from .debug_mode import (
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

__all__ = [
    "basis_violations",
    "assert_basis_valid",
    "assert_rhs_feasible",
    "max_abs_difference",
    "tableaux_close",
    "assert_tableaux_close",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
]
