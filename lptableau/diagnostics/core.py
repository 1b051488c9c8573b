"""Invariant checks for simplex tableaux."""

from __future__ import annotations

from typing import Optional

import numpy as np

from ..simplex.storage import TableauStorage
from ..simplex.tableau import TableauLayout


def basis_violations(
    tableau: TableauStorage,
    layout: TableauLayout,
    atol: float = 1e-9,
) -> list[str]:
    """
    List every way the basis mapping disagrees with the tableau.

    Each constraint row ``i`` must have its basic column ``layout.basis[i]``
    equal to the unit vector ``e_i`` over the constraint rows, and no column
    may be basic in two rows.
    """
    problems = []
    if len(set(layout.basis)) != len(layout.basis):
        problems.append(f"basis lists a column twice: {layout.basis}")
    for row, col in enumerate(layout.basis):
        for other in range(layout.n_constraints):
            expected = 1.0 if other == row else 0.0
            value = tableau.double_value(other, col)
            if abs(value - expected) > atol:
                problems.append(
                    f"column {col} basic in row {row} has {value!r} at row {other}"
                )
    return problems


def assert_basis_valid(
    tableau: TableauStorage,
    layout: TableauLayout,
    atol: float = 1e-9,
) -> None:
    """
    Assert that every constraint row owns exactly one identity column.

    Raises
    ------
    ValueError
        If any basic column is not a unit column at its row.
    """
    problems = basis_violations(tableau, layout, atol=atol)
    if problems:
        raise ValueError("Invalid simplex basis: " + "; ".join(problems))


def assert_rhs_feasible(
    tableau: TableauStorage,
    layout: TableauLayout,
    atol: float = 1e-9,
) -> None:
    """
    Assert that every constraint row has a right-hand side ``>= -atol``.

    Raises
    ------
    ValueError
        If a basic variable has gone negative.
    """
    rhs = layout.rhs_column
    negative = [
        (row, tableau.double_value(row, rhs))
        for row in range(layout.n_constraints)
        if tableau.double_value(row, rhs) < -atol
    ]
    if negative:
        raise ValueError(f"Infeasible basic solution, negative RHS at (row, value): {negative}")


def max_abs_difference(first: TableauStorage, second: TableauStorage) -> float:
    """Largest cell-wise absolute difference between two tableaux of equal shape."""
    if first.shape != second.shape:
        raise ValueError(f"Tableau shapes differ: {first.shape} vs {second.shape}")
    return float(np.max(np.abs(first.to_array() - second.to_array())))


def tableaux_close(
    first: TableauStorage,
    second: TableauStorage,
    atol: float = 1e-9,
) -> bool:
    """Whether two tableaux (of any backing kind) agree cell by cell."""
    if first.shape != second.shape:
        return False
    return max_abs_difference(first, second) <= atol


def assert_tableaux_close(
    first: TableauStorage,
    second: TableauStorage,
    atol: float = 1e-9,
    context: Optional[str] = None,
) -> None:
    """
    Assert cell-wise agreement of two tableaux, typically dense vs sparse.

    Raises
    ------
    ValueError
        If the shapes differ or any cell differs by more than ``atol``.
    """
    diff = max_abs_difference(first, second)
    if diff > atol:
        where = f" after {context}" if context else ""
        raise ValueError(
            f"Tableaux differ{where}: max |difference| {diff!r} exceeds {atol}"
        )


__all__ = [
    "basis_violations",
    "assert_basis_valid",
    "assert_rhs_feasible",
    "max_abs_difference",
    "tableaux_close",
    "assert_tableaux_close",
]
