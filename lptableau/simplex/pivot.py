"""Gauss-Jordan pivot operator, written once against :class:`TableauStorage`."""

from __future__ import annotations

from .core import PIVOT_TOLERANCE, ZERO_EPSILON, DegeneratePivotError, IterationPoint
from .storage import TableauStorage


def _snap(value: float, epsilon: float) -> float:
    return 0.0 if abs(value) <= epsilon else value


def pivot(
    tableau: TableauStorage,
    point: IterationPoint,
    tol: float = PIVOT_TOLERANCE,
    epsilon: float = ZERO_EPSILON,
) -> None:
    """
    Pivot ``tableau`` in place around ``(point.row, point.col)``.

    The pivot row is divided by the pivot element, then the pivot column is
    eliminated from every other row, both cost rows included. Results with
    magnitude at or below ``epsilon`` are written as exact zero, and the pivot
    column ends up as an exact unit column.

    Only non-zero cells are visited, so the cost per pivot is proportional to
    the non-zeros touched rather than the full tableau size.

    Raises:
        DegeneratePivotError: If the pivot element magnitude is at or below
            ``tol``, or the point lies on the RHS column or outside the tableau.
    """
    row, col = point.row, point.col
    if row < 0 or col < 0 or row >= tableau.count_rows() or col >= tableau.rhs_column_index():
        raise DegeneratePivotError(
            f"Pivot ({row}, {col}) outside the pivotable region of a "
            f"{tableau.count_rows()}x{tableau.count_columns()} tableau"
        )

    pivot_value = tableau.value_at(row, col)
    if abs(pivot_value) <= tol:
        raise DegeneratePivotError(
            f"Pivot element {pivot_value!r} at ({row}, {col}) is below tolerance {tol}"
        )

    pivot_row = []
    for j, value in tableau.row_entries(row):
        scaled = 1.0 if j == col else _snap(value / pivot_value, epsilon)
        tableau.set_value_at(row, j, scaled)
        if scaled != 0.0:
            pivot_row.append((j, scaled))

    for i, factor in tableau.column_entries(col):
        if i == row:
            continue
        for j, value in pivot_row:
            if j == col:
                continue
            updated = tableau.value_at(i, j) - factor * value
            tableau.set_value_at(i, j, _snap(updated, epsilon))
        tableau.set_value_at(i, col, 0.0)


__all__ = ["pivot"]
