"""
Two-phase simplex tableau engine.

A linear program ``min c^T x, A x = b, x >= 0`` is held in a tableau that
carries both the phase-1 and phase-2 cost rows. Pivots are Gauss-Jordan
eliminations applied through the :class:`TableauStorage` interface, so a
dense (``numpy``) and a sparse (``scipy.sparse``) tableau can be used
interchangeably and produce the same values after any pivot sequence.
"""

from . import core, pivot, selection, storage, tableau, utils
from .core import (
    DegeneratePivotError,
    IterationPoint,
    LPProblem,
    Phase,
    SimplexConfig,
    SimplexResult,
    Status,
)
from .storage import DenseTableau, SparseTableau, TableauStorage, make_storage
from .tableau import TableauLayout, basic_columns, basic_solution, build_tableau, objective_value
from .pivot import pivot as pivot_tableau
from .selection import (
    Selection,
    is_phase1_feasible,
    next_iteration_point,
    select_entering,
    select_leaving,
)
from . import solver
from .solver import linprog_reference, simplex, solve

__all__ = [
    "core",
    "pivot",
    "selection",
    "solver",
    "storage",
    "tableau",
    "utils",
    # Core types
    "Status",
    "Phase",
    "IterationPoint",
    "SimplexConfig",
    "SimplexResult",
    "LPProblem",
    "DegeneratePivotError",
    # Storage
    "TableauStorage",
    "DenseTableau",
    "SparseTableau",
    "make_storage",
    # Tableau bookkeeping
    "TableauLayout",
    "build_tableau",
    "objective_value",
    "basic_solution",
    "basic_columns",
    # Pivoting
    "pivot_tableau",
    "Selection",
    "select_entering",
    "select_leaving",
    "next_iteration_point",
    "is_phase1_feasible",
    # Drivers
    "solve",
    "simplex",
    "linprog_reference",
]
