"""lptableau - a two-phase simplex tableau engine with dense and sparse storage."""

__version__ = "0.1.0"

# Simplex engine
from .simplex import (
    DegeneratePivotError,
    DenseTableau,
    IterationPoint,
    LPProblem,
    Phase,
    SimplexConfig,
    SimplexResult,
    SparseTableau,
    Status,
    TableauLayout,
    TableauStorage,
    build_tableau,
    linprog_reference,
    make_storage,
    next_iteration_point,
    pivot_tableau,
    simplex,
    solve,
)

# Diagnostics
from .diagnostics import (
    assert_basis_valid,
    assert_rhs_feasible,
    assert_tableaux_close,
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
)

# Logging
from .logging import configure_logging, get_logger, set_log_level

__all__ = [
    "__version__",
    # Simplex engine
    "Status",
    "Phase",
    "IterationPoint",
    "SimplexConfig",
    "SimplexResult",
    "LPProblem",
    "DegeneratePivotError",
    "TableauStorage",
    "DenseTableau",
    "SparseTableau",
    "TableauLayout",
    "make_storage",
    "build_tableau",
    "pivot_tableau",
    "next_iteration_point",
    "solve",
    "simplex",
    "linprog_reference",
    # Diagnostics
    "assert_basis_valid",
    "assert_rhs_feasible",
    "assert_tableaux_close",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Logging
    "get_logger",
    "set_log_level",
    "configure_logging",
]
