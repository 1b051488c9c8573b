"""
Tableau construction and phase/objective bookkeeping.

For ``m`` constraints and ``n`` variables the tableau has ``m + 2`` rows and
``n + m + 1`` columns::

    rows 0 .. m-1   [ A        | I (artificials) | b       ]
    row  m          [ c        | 0               | 0       ]   phase-2 costs
    row  m + 1      [ -1^T A   | 0               | -1^T b  ]   phase-1 costs

Both cost rows are carried through every pivot like any other row. The RHS
cell of a cost row holds the negated objective value of the current basic
solution, so the phase-1 objective (sum of artificials) is driven to zero
exactly when the RHS of row ``m + 1`` reaches zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

import numpy as np

from .core import ZERO_EPSILON, Phase
from .storage import TableauStorage, make_storage
from .utils import coerce_problem, column_sums, iter_nonzeros, normalize_rhs


@dataclass
class TableauLayout:
    """
    Row/column layout of a tableau plus the current basis mapping.

    ``basis[i]`` is the column that is basic in constraint row ``i``. The
    driver updates it after every pivot.
    """

    n_variables: int
    n_constraints: int
    basis: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.basis:
            self.basis = list(self.artificial_columns)
        if len(self.basis) != self.n_constraints:
            raise ValueError(
                f"basis has {len(self.basis)} entries for {self.n_constraints} constraints"
            )

    @property
    def phase2_row(self) -> int:
        return self.n_constraints

    @property
    def phase1_row(self) -> int:
        return self.n_constraints + 1

    @property
    def rhs_column(self) -> int:
        return self.n_variables + self.n_constraints

    @property
    def artificial_columns(self) -> range:
        return range(self.n_variables, self.n_variables + self.n_constraints)

    @property
    def n_rows(self) -> int:
        return self.n_constraints + 2

    @property
    def n_columns(self) -> int:
        return self.rhs_column + 1

    def is_artificial(self, col: int) -> bool:
        return self.n_variables <= col < self.rhs_column

    def objective_row(self, phase: Phase) -> int:
        """Cost row that pivot selection consults in ``phase``."""
        return self.phase1_row if Phase(phase) is Phase.ONE else self.phase2_row

    def eligible_columns(self, phase: Phase) -> List[int]:
        """Non-basic columns allowed to enter the basis in ``phase``."""
        stop = self.n_variables if Phase(phase) is Phase.TWO else self.rhs_column
        basic = set(self.basis)
        return [j for j in range(stop) if j not in basic]

    def basic_artificial_rows(self) -> List[int]:
        return [i for i, col in enumerate(self.basis) if self.is_artificial(col)]

    def update(self, row: int, col: int) -> None:
        self.basis[row] = col


def build_tableau(
    c: Any,
    a_mat: Any,
    b_vec: Any,
    storage: str = "dense",
    epsilon: float = ZERO_EPSILON,
) -> Tuple[TableauStorage, TableauLayout]:
    """
    Build the initial phase-1 tableau for ``min c^T x, A x = b, x >= 0``.

    Rows with a negative right-hand side are negated first. Every constraint
    receives its own artificial column, which forms the starting basis.

    Args:
        c: Cost vector of length ``n``.
        a_mat: ``(m, n)`` constraint matrix, dense or ``scipy.sparse``.
        b_vec: Right-hand side of length ``m``.
        storage: ``"dense"`` or ``"sparse"``.
        epsilon: Zero threshold handed to the storage.

    Returns:
        The initialised tableau and its layout.

    Raises:
        ValueError: If the inputs are inconsistent or there are no constraints.
    """
    c_arr, a_arr, b_arr = coerce_problem(c, a_mat, b_vec)
    m, n = a_arr.shape
    if m == 0:
        raise ValueError("A tableau needs at least one constraint")

    a_arr, b_arr = normalize_rhs(a_arr, b_arr)
    layout = TableauLayout(n_variables=n, n_constraints=m)
    tableau = make_storage(storage, layout.n_rows, layout.n_columns, epsilon)
    rhs = layout.rhs_column

    for i, j, value in iter_nonzeros(a_arr):
        tableau.set_value_at(i, j, value)
    for i, col in enumerate(layout.artificial_columns):
        tableau.set_value_at(i, col, 1.0)
        if b_arr[i] != 0.0:
            tableau.set_value_at(i, rhs, b_arr[i])

    for j in np.flatnonzero(c_arr):
        tableau.set_value_at(layout.phase2_row, int(j), c_arr[j])

    phase1_costs = -column_sums(a_arr)
    for j in np.flatnonzero(phase1_costs):
        tableau.set_value_at(layout.phase1_row, int(j), phase1_costs[j])
    total_rhs = float(np.sum(b_arr))
    if total_rhs != 0.0:
        tableau.set_value_at(layout.phase1_row, rhs, -total_rhs)

    return tableau, layout


def objective_value(tableau: TableauStorage, layout: TableauLayout, phase: Phase) -> float:
    """Objective of the current basic solution for ``phase``."""
    value = -tableau.double_value(layout.objective_row(phase), layout.rhs_column)
    # avoid reporting -0.0
    return value + 0.0


def basic_solution(tableau: TableauStorage, layout: TableauLayout) -> np.ndarray:
    """
    Values of the ``n`` original variables in the current basic solution.

    Basic variables take the RHS of their row, non-basic ones are zero.
    """
    x = np.zeros(layout.n_variables)
    for row, col in enumerate(layout.basis):
        if col < layout.n_variables:
            x[col] = tableau.double_value(row, layout.rhs_column)
    return x


def basic_columns(
    tableau: TableauStorage, n_constraints: int, atol: float = 1e-9
) -> List[Optional[int]]:
    """
    Recover the basis by scanning for identity columns.

    Returns, for every constraint row, the lowest-index column that holds 1 in
    that row and 0 in every other constraint row, or ``None`` if the row has
    no such column.
    """
    rhs = tableau.rhs_column_index()
    found: List[Optional[int]] = [None] * n_constraints
    for col in range(rhs):
        entries = [
            (row, value) for row, value in tableau.column_entries(col)
            if row < n_constraints and abs(value) > atol
        ]
        if len(entries) != 1:
            continue
        row, value = entries[0]
        if abs(value - 1.0) <= atol and found[row] is None:
            found[row] = col
    return found


__all__ = [
    "TableauLayout",
    "build_tableau",
    "objective_value",
    "basic_solution",
    "basic_columns",
]
