"""Tests for entering/leaving selection and phase-1 termination checks."""

import numpy as np
import pytest

from lptableau.simplex import IterationPoint, Phase, Status, build_tableau
from lptableau.simplex.pivot import pivot
from lptableau.simplex.selection import (
    is_degenerate,
    is_phase1_feasible,
    next_iteration_point,
    select_entering,
    select_leaving,
)

DEGENERACY = (
    [-2.0, -1.0, 0.0, 0.0, 0.0],
    [[4.0, 3.0, 1.0, 0.0, 0.0], [4.0, 1.0, 0.0, 1.0, 0.0], [4.0, 2.0, 0.0, 0.0, 1.0]],
    [12.0, 8.0, 8.0],
)


def test_phase1_entering_uses_phase1_row():
    tableau, layout = build_tableau(*DEGENERACY)
    # phase-1 costs are -12, -6, -1, -1, -1
    assert select_entering(tableau, layout, Phase.ONE) == 0
    # phase-2 costs are -2, -1, 0, 0, 0
    assert select_entering(tableau, layout, Phase.TWO) == 0


def test_leaving_ties_go_to_lowest_row():
    tableau, layout = build_tableau(*DEGENERACY)
    # ratios 12/4, 8/4, 8/4: rows 1 and 2 tie
    assert select_leaving(tableau, layout, 0) == 1


def test_entering_ties_go_to_lowest_column():
    tableau, layout = build_tableau(
        [-4.0, -14.0, 0.0, 0.0], [[2.0, 7.0, 1.0, 0.0], [7.0, 2.0, 0.0, 1.0]], [21.0, 21.0]
    )
    # phase-1 costs for columns 0 and 1 are both -9
    assert select_entering(tableau, layout, Phase.ONE) == 0


def test_bland_rule_takes_first_negative_column():
    tableau, layout = build_tableau([1.0, -1.0, -5.0], [[1.0, 1.0, 1.0]], [1.0])
    assert select_entering(tableau, layout, Phase.TWO, rule="dantzig") == 2
    assert select_entering(tableau, layout, Phase.TWO, rule="bland") == 1


def test_bland_leaving_prefers_lowest_basic_variable():
    tableau, layout = build_tableau([-1.0, 0.0], [[1.0, 0.0], [1.0, 0.0]], [2.0, 2.0])
    layout.basis = [3, 2]
    assert select_leaving(tableau, layout, 0, rule="dantzig") == 0
    assert select_leaving(tableau, layout, 0, rule="bland") == 1


def test_artificial_columns_barred_in_phase2():
    tableau, layout = build_tableau([1.0, 1.0], [[1.0, 1.0]], [1.0])
    point = IterationPoint()
    pivot(tableau, point.at(0, 0))
    layout.update(0, 0)
    # make the artificial column (2) look attractive in both cost rows
    tableau.set_value_at(layout.phase1_row, 2, -10.0)
    tableau.set_value_at(layout.phase2_row, 2, -10.0)
    assert select_entering(tableau, layout, Phase.ONE) == 2
    assert select_entering(tableau, layout, Phase.TWO) is None


def test_optimal_when_no_negative_cost():
    tableau, layout = build_tableau([1.0, 2.0], [[1.0, 1.0]], [3.0])
    point = IterationPoint()
    point.switch_to_phase2()
    selection = next_iteration_point(tableau, layout, point)
    assert selection.status is Status.OPTIMAL
    assert selection.is_terminal
    assert selection.point is None


def test_unbounded_when_no_positive_entry():
    tableau, layout = build_tableau(
        [-2.0, -1.0, 0.0, 0.0], [[1.0, -1.0, 1.0, 0.0], [2.0, -1.0, 0.0, 1.0]], [10.0, 40.0]
    )
    point = IterationPoint()
    for row, col in [(0, 0), (1, 1)]:
        pivot(tableau, point.at(row, col))
        layout.update(row, col)
    point.switch_to_phase2()
    selection = next_iteration_point(tableau, layout, point)
    assert selection.status is Status.UNBOUNDED
    assert selection.point.col == 2


def test_next_point_carries_phase():
    tableau, layout = build_tableau(*DEGENERACY)
    point = IterationPoint()
    selection = next_iteration_point(tableau, layout, point)
    assert selection.status is None
    assert not selection.is_terminal
    assert (selection.point.row, selection.point.col) == (1, 0)
    assert selection.point.phase is Phase.ONE


def test_phase1_feasibility_check():
    tableau, layout = build_tableau([0.0, 0.0], [[1.0, 1.0], [1.0, -1.0]], [2.0, 0.0])
    assert not is_phase1_feasible(tableau, layout)
    point = IterationPoint()
    for row, col in [(1, 0), (0, 1)]:
        pivot(tableau, point.at(row, col))
        layout.update(row, col)
    assert is_phase1_feasible(tableau, layout)
    assert np.isclose(tableau.double_value(layout.phase1_row, layout.rhs_column), 0.0)


def test_is_degenerate_detects_zero_rhs():
    tableau, layout = build_tableau([0.0, 0.0], [[1.0, 1.0], [1.0, -1.0]], [2.0, 0.0])
    assert not is_degenerate(tableau, layout, 0, 1e-12)
    assert is_degenerate(tableau, layout, 1, 1e-12)


@pytest.mark.parametrize("rule", ["dantzig", "bland"])
def test_selection_never_picks_basic_columns(rule):
    tableau, layout = build_tableau(*DEGENERACY)
    point = IterationPoint()
    for _ in range(3):
        selection = next_iteration_point(tableau, layout, point, rule=rule)
        if selection.is_terminal:
            break
        assert selection.point.col not in layout.basis
        pivot(tableau, selection.point)
        layout.update(selection.point.row, selection.point.col)
