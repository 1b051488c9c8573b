"""
Core types shared by the tableau simplex components.

Problems are given in equality standard form

```
    minimize    c^T x
    subject to  A x = b
                x >= 0
```

with ``A`` of shape ``(m, n)``. The solver reports its exit through
:class:`Status`; unboundedness and infeasibility are regular outcomes, not
exceptions. The only exception raised during pivoting is
:class:`DegeneratePivotError`, which signals a broken precondition.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import Any, Optional, Tuple

import numpy as np

# Magnitudes at or below this are snapped to exact zero after a pivot.
ZERO_EPSILON = 1e-12
# Smallest pivot element magnitude the pivot operator accepts.
PIVOT_TOLERANCE = 1e-10
# Reduced costs must be below -COST_TOLERANCE to enter the basis.
COST_TOLERANCE = 1e-9
# Phase-1 objective at or below this counts as feasible.
FEASIBILITY_TOLERANCE = 1e-9

STORAGE_KINDS = ("dense", "sparse")
PIVOT_RULES = ("dantzig", "bland")


class Status(Enum):
    """Solution status of a simplex solve."""

    OPTIMAL = "optimal"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    MAX_ITER = "max_iter"
    NUMERICAL_ERROR = "numerical_error"


class Phase(IntEnum):
    """Active phase of a two-phase solve."""

    ONE = 1
    TWO = 2


class DegeneratePivotError(ArithmeticError):
    """Raised when a pivot is attempted on a (near-)zero or invalid element."""


@dataclass
class IterationPoint:
    """
    Pivot cursor: the selected row and column plus the active phase.

    A fresh point is created for every solve. Pivot selection returns new
    points through :meth:`at`, so the phase travels with the cursor while the
    row and column change each iteration.
    """

    row: int = 0
    col: int = 0
    phase: Phase = Phase.ONE

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise ValueError(
                f"IterationPoint indices must be non-negative, got ({self.row}, {self.col})."
            )
        self.phase = Phase(self.phase)

    @property
    def is_phase1(self) -> bool:
        return self.phase is Phase.ONE

    @property
    def is_phase2(self) -> bool:
        return self.phase is Phase.TWO

    def switch_to_phase2(self) -> None:
        """Mark phase 2 as active; artificial columns stop being eligible."""
        self.phase = Phase.TWO

    def at(self, row: int, col: int) -> "IterationPoint":
        """Return a new point at ``(row, col)`` in the same phase."""
        return replace(self, row=row, col=col)


@dataclass(frozen=True)
class SimplexConfig:
    """
    Configuration for a simplex solve.

    Args:
        storage: Tableau implementation, ``"dense"`` or ``"sparse"``.
        rule: Entering-variable rule. ``"dantzig"`` picks the most negative
            reduced cost, ``"bland"`` the lowest-index negative one. Ties are
            always broken towards the lowest index.
        maxiter: Maximum number of pivots over both phases. ``None`` derives a
            cap from the tableau size.
        pivot_tol: Smallest accepted pivot element magnitude; also the
            threshold for a "strictly positive" entry in the ratio test.
        cost_tol: Reduced costs must be below ``-cost_tol`` to enter.
        feasibility_tol: Largest phase-1 objective value still accepted as
            feasible.
        epsilon: Values at or below this magnitude are stored as exact zero.
        degenerate_limit: Consecutive degenerate pivots after which the
            Dantzig rule falls back to Bland's rule. ``None`` never falls back.
        check_invariants: Verify basis and feasibility after every pivot.
            Debug mode turns this on globally.
    """

    storage: str = "dense"
    rule: str = "dantzig"
    maxiter: Optional[int] = None
    pivot_tol: float = PIVOT_TOLERANCE
    cost_tol: float = COST_TOLERANCE
    feasibility_tol: float = FEASIBILITY_TOLERANCE
    epsilon: float = ZERO_EPSILON
    degenerate_limit: Optional[int] = 50
    check_invariants: bool = False

    def __post_init__(self) -> None:
        """Validate SimplexConfig invariants."""
        if self.storage not in STORAGE_KINDS:
            raise ValueError(
                f"storage must be one of {STORAGE_KINDS}, got {self.storage!r}."
            )
        if self.rule not in PIVOT_RULES:
            raise ValueError(f"rule must be one of {PIVOT_RULES}, got {self.rule!r}.")
        if self.maxiter is not None and self.maxiter < 0:
            raise ValueError(f"maxiter must be non-negative, got {self.maxiter}.")
        for name in ("pivot_tol", "cost_tol", "feasibility_tol", "epsilon"):
            value = getattr(self, name)
            if not np.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative float, got {value}.")
        if self.epsilon > self.pivot_tol:
            raise ValueError(
                f"epsilon ({self.epsilon}) must not exceed pivot_tol ({self.pivot_tol})."
            )
        if self.degenerate_limit is not None and self.degenerate_limit < 1:
            raise ValueError(
                f"degenerate_limit must be >= 1 or None, got {self.degenerate_limit}."
            )


@dataclass
class LPProblem:
    """
    Linear program in equality standard form.

    ``A`` may be any 2-D array-like or a ``scipy.sparse`` matrix; ``b`` and
    ``c`` are 1-D array-likes.
    """

    c: Any
    A: Any
    b: Any


@dataclass
class SimplexResult:
    """
    Outcome of a simplex solve.

    Attributes:
        x: Basic solution over the ``n`` original variables. For ``OPTIMAL`` it
            is the optimum; for ``UNBOUNDED`` and ``INFEASIBLE`` it is the basic
            solution at the moment the condition was detected.
        fun: Objective value ``c @ x`` for ``OPTIMAL`` results, else ``None``.
        status: Terminal state of the solve.
        message: Human-readable explanation of the status.
        nit: Total number of pivots performed.
        basis: Column basic in each constraint row at exit.
        phase1_nit: Pivots spent in phase 1 (artificial cleanup included).
        primal_residual: ``max |A x - b|`` for ``OPTIMAL`` results.
    """

    x: Optional[np.ndarray]
    fun: Optional[float]
    status: Status
    message: str
    nit: int
    basis: Tuple[int, ...] = ()
    phase1_nit: int = 0
    primal_residual: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status is Status.OPTIMAL


__all__ = [
    "Status",
    "Phase",
    "DegeneratePivotError",
    "IterationPoint",
    "SimplexConfig",
    "LPProblem",
    "SimplexResult",
    "ZERO_EPSILON",
    "PIVOT_TOLERANCE",
    "COST_TOLERANCE",
    "FEASIBILITY_TOLERANCE",
    "STORAGE_KINDS",
    "PIVOT_RULES",
]
