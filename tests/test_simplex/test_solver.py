import logging

import numpy as np
import pytest
import scipy.sparse as sp

from lptableau.simplex import LPProblem, SimplexConfig, Status, solve
from lptableau.simplex.solver import linprog_reference, simplex

# Beale's example: cycles under the textbook Dantzig rule without anti-cycling.
BEALE = (
    np.array([0.0, 0.0, 0.0, -0.75, 20.0, -0.5, 6.0]),
    np.array(
        [
            [1.0, 0.0, 0.0, 0.25, -8.0, -1.0, 9.0],
            [0.0, 1.0, 0.0, 0.5, -12.0, -0.5, 3.0],
            [0.0, 0.0, 1.0, 0.0, 0.0, 1.0, 0.0],
        ]
    ),
    np.array([0.0, 0.0, 1.0]),
)


@pytest.mark.parametrize("storage", ["dense", "sparse"])
def test_simplex_canonical_example(storage):
    # max 3x + 5y s.t. x + 2y <= 4, 3x + 2y <= 6 with explicit slacks
    c = np.array([-3.0, -5.0, 0.0, 0.0])
    A = np.array([[1.0, 2.0, 1.0, 0.0], [3.0, 2.0, 0.0, 1.0]])
    b = np.array([4.0, 6.0])
    result = simplex(c, A, b, storage=storage)
    assert result.status is Status.OPTIMAL
    assert result.success
    assert np.allclose(result.x, [1.0, 1.5, 0.0, 0.0], atol=1e-9)
    assert pytest.approx(-10.5, rel=1e-9) == result.fun
    assert result.primal_residual == pytest.approx(0.0, abs=1e-9)
    assert result.nit >= result.phase1_nit > 0
    assert sorted(result.basis) == [0, 1]


@pytest.mark.parametrize("storage", ["dense", "sparse"])
def test_simplex_infeasible(storage):
    # x1 + x2 = 1 and x1 + x2 = 3 cannot both hold
    c = np.array([1.0, 1.0])
    A = np.array([[1.0, 1.0], [1.0, 1.0]])
    b = np.array([1.0, 3.0])
    result = simplex(c, A, b, storage=storage)
    assert result.status is Status.INFEASIBLE
    assert result.fun is None
    assert not result.success
    assert "infeasible" in result.message.lower()


def test_simplex_infeasible_from_sign():
    # x1 + x2 = -1 has no non-negative solution
    result = simplex([1.0, 1.0], [[1.0, 1.0]], [-1.0])
    assert result.status is Status.INFEASIBLE


def test_negative_rhs_is_normalised():
    # -x1 - x2 = -2 is x1 + x2 = 2
    result = simplex([1.0, 2.0], [[-1.0, -1.0]], [-2.0])
    assert result.status is Status.OPTIMAL
    assert np.allclose(result.x, [2.0, 0.0])
    assert result.fun == pytest.approx(2.0)


@pytest.mark.parametrize("storage", ["dense", "sparse"])
def test_redundant_constraint_keeps_artificial(storage):
    c = np.array([1.0, 2.0, 0.0])
    A = np.array([[1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])
    b = np.array([4.0, 8.0])
    result = simplex(c, A, b, storage=storage)
    assert result.status is Status.OPTIMAL
    assert result.fun == pytest.approx(0.0, abs=1e-12)
    assert np.allclose(A @ result.x, b)
    # one artificial stays basic at zero level in the redundant row
    assert any(col >= 3 for col in result.basis)


def test_zero_level_artificial_is_driven_out():
    # phase 1 ends with the second artificial basic at zero level
    c = np.array([1.0, 1.0])
    A = np.array([[1.0, 1.0], [1.0, -1.0]])
    b = np.array([0.0, 0.0])
    result = simplex(c, A, b, config=SimplexConfig(check_invariants=True))
    assert result.status is Status.OPTIMAL
    assert np.allclose(result.x, [0.0, 0.0])
    assert result.phase1_nit == 2
    assert all(col < 2 for col in result.basis)


@pytest.mark.parametrize("storage", ["dense", "sparse"])
def test_drive_out_clears_residual_artificial_value(storage):
    # phase 1 leaves 5e-10 on the second artificial and the only
    # replacement column has a tiny negative entry in that row
    c = np.zeros(3)
    A = np.array([[1.0, 1.0, 0.0], [1.0, 1.0, -1e-9]])
    b = np.array([1.0, 1.0 + 5e-10])
    config = SimplexConfig(storage=storage, check_invariants=True)
    result = simplex(c, A, b, config=config)
    assert result.status is Status.OPTIMAL
    assert np.all(result.x >= 0.0)
    assert np.allclose(result.x, [1.0, 0.0, 0.0])
    assert all(col < 3 for col in result.basis)


@pytest.mark.parametrize("storage", ["dense", "sparse"])
def test_beale_cycling_example_terminates(storage):
    result = simplex(*BEALE, storage=storage)
    assert result.status is Status.OPTIMAL
    assert result.fun == pytest.approx(-1.25)
    assert np.all(result.x >= -1e-12)
    assert np.allclose(BEALE[1] @ result.x, BEALE[2])


def test_beale_with_blands_rule():
    config = SimplexConfig(rule="bland", check_invariants=True)
    result = solve(LPProblem(*BEALE), config)
    assert result.status is Status.OPTIMAL
    assert result.fun == pytest.approx(-1.25)


def test_degenerate_fallback_to_bland_is_logged(caplog):
    from lptableau.logging import get_logger

    logger = get_logger("lptableau.simplex.solver")
    logger.propagate = True
    try:
        with caplog.at_level(logging.INFO, logger="lptableau.simplex.solver"):
            result = simplex(*BEALE, config=SimplexConfig(degenerate_limit=1))
    finally:
        logger.propagate = False
    assert result.status is Status.OPTIMAL
    assert "Bland" in caplog.text


def test_maxiter_reports_status():
    c = np.array([-3.0, -5.0, 0.0, 0.0])
    A = np.array([[1.0, 2.0, 1.0, 0.0], [3.0, 2.0, 0.0, 1.0]])
    b = np.array([4.0, 6.0])
    result = simplex(c, A, b, config=SimplexConfig(maxiter=1))
    assert result.status is Status.MAX_ITER
    assert result.nit == 1
    assert result.fun is None


def test_no_constraints():
    res = solve(LPProblem(c=[2.0, 3.0], A=None, b=None))
    assert res.status is Status.OPTIMAL
    assert np.allclose(res.x, [0.0, 0.0])
    assert res.fun == 0.0
    assert simplex([-1.0], None, None).status is Status.UNBOUNDED


def test_invalid_input_raises():
    with pytest.raises(ValueError, match="provided together"):
        simplex([1.0, 2.0], np.ones((1, 2)), None)
    with pytest.raises(ValueError, match="non-finite"):
        simplex([1.0, np.inf], np.ones((1, 2)), [1.0])
    with pytest.raises(ValueError, match="at least one variable"):
        simplex([], None, None)


def test_storage_argument_overrides_config():
    config = SimplexConfig(storage="dense")
    dense = simplex([1.0, 1.0], [[1.0, 2.0]], [4.0], config=config)
    sparse = simplex([1.0, 1.0], [[1.0, 2.0]], [4.0], storage="sparse", config=config)
    assert np.allclose(dense.x, sparse.x)
    assert dense.basis == sparse.basis


@pytest.mark.parametrize(
    "kwargs",
    [
        {"storage": "banded"},
        {"rule": "steepest"},
        {"maxiter": -1},
        {"pivot_tol": -1.0},
        {"epsilon": 1e-6, "pivot_tol": 1e-9},
        {"degenerate_limit": 0},
    ],
)
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        SimplexConfig(**kwargs)


def test_debug_mode_checks_invariants(debug_mode):
    result = simplex(*BEALE, storage="sparse")
    assert result.status is Status.OPTIMAL


def test_sparse_matrix_input():
    A = sp.csr_matrix(np.array([[1.0, 2.0, 1.0, 0.0], [3.0, 2.0, 0.0, 1.0]]))
    result = simplex([-3.0, -5.0, 0.0, 0.0], A, [4.0, 6.0], storage="sparse")
    assert result.status is Status.OPTIMAL
    assert pytest.approx(-10.5) == result.fun


@pytest.mark.parametrize("storage", ["dense", "sparse"])
def test_matches_linprog_reference(feasible_lp, storage):
    for _ in range(10):
        c, A, b = feasible_lp(4, 8, density=0.7)
        result = simplex(c, A, b, storage=storage, config=SimplexConfig(check_invariants=True))
        reference = linprog_reference(c, A, b)
        assert reference.status is Status.OPTIMAL
        assert result.status is Status.OPTIMAL
        assert result.fun == pytest.approx(reference.fun, abs=1e-7)
        assert np.all(result.x >= -1e-9)
        assert np.allclose(A @ result.x, b, atol=1e-7)


def test_dense_and_sparse_solves_agree(feasible_lp):
    for _ in range(10):
        c, A, b = feasible_lp(5, 9, density=0.5)
        dense = simplex(c, A, b, storage="dense")
        sparse = simplex(c, A, b, storage="sparse")
        assert dense.status is sparse.status
        assert dense.basis == sparse.basis
        assert dense.nit == sparse.nit
        assert np.allclose(dense.x, sparse.x, atol=1e-9)


def test_linprog_reference_reports_failures():
    infeasible = linprog_reference([1.0, 1.0], [[1.0, 1.0]], [-1.0])
    assert infeasible.status is not Status.OPTIMAL
    assert infeasible.x is None
    unbounded = linprog_reference(
        [-2.0, -1.0, 0.0, 0.0], [[1.0, -1.0, 1.0, 0.0], [2.0, -1.0, 0.0, 1.0]], [10.0, 40.0]
    )
    assert unbounded.status is not Status.OPTIMAL
    assert unbounded.fun is None
