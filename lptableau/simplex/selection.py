"""
Pivot selection: entering column, leaving row and terminal detection.

Two entering rules are supported:

* ``"dantzig"``: most negative reduced cost in the active cost row;
* ``"bland"``: lowest-index column with a negative reduced cost.

The minimum-ratio test picks the leaving row. Ties go to the lowest row
index under Dantzig's rule and to the row whose basic variable has the
lowest index under Bland's rule. Bland's rule never cycles, which is why the
driver falls back to it after a run of degenerate pivots.

References:
    - Bland, "New finite pivoting rules for the simplex method",
      Mathematics of Operations Research 2(2), 1977.
    - Bertsimas & Tsitsiklis, *Introduction to Linear Optimization*, 1997.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core import (
    COST_TOLERANCE,
    FEASIBILITY_TOLERANCE,
    PIVOT_TOLERANCE,
    IterationPoint,
    Phase,
    Status,
)
from .storage import TableauStorage
from .tableau import TableauLayout, objective_value


@dataclass(frozen=True)
class Selection:
    """
    Result of one selection step.

    ``status`` is ``None`` when ``point`` should be pivoted next, otherwise
    ``Status.OPTIMAL`` (for the active phase) or ``Status.UNBOUNDED``. For an
    unbounded outcome ``point.col`` is the column that could not be bounded.
    """

    point: Optional[IterationPoint]
    status: Optional[Status] = None

    @property
    def is_terminal(self) -> bool:
        return self.status is not None


def select_entering(
    tableau: TableauStorage,
    layout: TableauLayout,
    phase: Phase,
    rule: str = "dantzig",
    tol: float = COST_TOLERANCE,
) -> Optional[int]:
    """Entering column, or ``None`` when the phase is optimal."""
    cost_row = layout.objective_row(phase)
    costs = dict(tableau.row_entries(cost_row))
    best_col = None
    best_value = -tol
    for col in layout.eligible_columns(phase):
        value = costs.get(col, 0.0)
        if value >= -tol:
            continue
        if rule == "bland":
            return col
        # strictly better than the current best by more than tol; ties keep the lower index
        if best_col is None or value < best_value - tol:
            best_col = col
            best_value = value
    return best_col


def select_leaving(
    tableau: TableauStorage,
    layout: TableauLayout,
    col: int,
    rule: str = "dantzig",
    tol: float = PIVOT_TOLERANCE,
) -> Optional[int]:
    """Leaving row by the minimum-ratio test, or ``None`` when unbounded."""
    rhs = layout.rhs_column
    best_row = None
    best_ratio = 0.0
    for row, entry in tableau.column_entries(col):
        if row >= layout.n_constraints or entry <= tol:
            continue
        ratio = max(tableau.double_value(row, rhs), 0.0) / entry
        if best_row is None or ratio < best_ratio - tol:
            best_row, best_ratio = row, ratio
        elif (
            rule == "bland"
            and ratio <= best_ratio + tol
            and layout.basis[row] < layout.basis[best_row]
        ):
            best_row, best_ratio = row, ratio
    return best_row


def next_iteration_point(
    tableau: TableauStorage,
    layout: TableauLayout,
    point: IterationPoint,
    rule: str = "dantzig",
    cost_tol: float = COST_TOLERANCE,
    pivot_tol: float = PIVOT_TOLERANCE,
) -> Selection:
    """Choose the next pivot for the phase carried by ``point``."""
    col = select_entering(tableau, layout, point.phase, rule=rule, tol=cost_tol)
    if col is None:
        return Selection(point=None, status=Status.OPTIMAL)
    row = select_leaving(tableau, layout, col, rule=rule, tol=pivot_tol)
    if row is None:
        return Selection(point=point.at(point.row, col), status=Status.UNBOUNDED)
    return Selection(point=point.at(row, col))


def is_phase1_feasible(
    tableau: TableauStorage, layout: TableauLayout, tol: float = FEASIBILITY_TOLERANCE
) -> bool:
    """Whether the phase-1 objective (sum of artificials) is numerically zero."""
    return abs(objective_value(tableau, layout, Phase.ONE)) <= tol


def is_degenerate(tableau: TableauStorage, layout: TableauLayout, row: int, tol: float) -> bool:
    """Whether pivoting on ``row`` leaves the basic solution unchanged."""
    return abs(tableau.double_value(row, layout.rhs_column)) <= tol


__all__ = [
    "Selection",
    "select_entering",
    "select_leaving",
    "next_iteration_point",
    "is_phase1_feasible",
    "is_degenerate",
]
