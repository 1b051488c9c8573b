"""
Two-phase tableau simplex driver and a SciPy reference solver.

The driver runs the state machine::

    BUILD -> PHASE1 -> (INFEASIBLE | PHASE2) -> (OPTIMAL | UNBOUNDED)

Phase 1 minimises the sum of the artificial variables; a positive optimum
means the constraints cannot be satisfied. Artificials still basic at zero
level are pivoted out before phase 2, which minimises the real cost with the
artificial columns barred from entering.

Example:
    >>> import numpy as np
    >>> from lptableau.simplex import simplex
    >>> c = np.array([-4.0, -14.0, 0.0, 0.0])
    >>> A = np.array([[2.0, 7.0, 1.0, 0.0], [7.0, 2.0, 0.0, 1.0]])
    >>> b = np.array([21.0, 21.0])
    >>> result = simplex(c, A, b, storage="sparse")
    >>> result.status
    <Status.OPTIMAL: 'optimal'>
    >>> np.round(result.x, 6)
    array([2.333333, 2.333333, 0.      , 0.      ])
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional

import numpy as np
from scipy.optimize import linprog as _scipy_linprog

from ..diagnostics.core import assert_basis_valid, assert_rhs_feasible
from ..diagnostics.debug_mode import is_debug_enabled
from ..logging import get_logger
from .core import IterationPoint, LPProblem, Phase, SimplexConfig, SimplexResult, Status
from .pivot import pivot
from .selection import is_degenerate, is_phase1_feasible, next_iteration_point
from .storage import TableauStorage
from .tableau import TableauLayout, basic_solution, build_tableau, objective_value
from .utils import coerce_problem

logger = get_logger(__name__)

_INVARIANT_ATOL = 1e-7

# scipy.optimize.linprog status codes
_LINPROG_STATUS = {
    0: Status.OPTIMAL,
    1: Status.MAX_ITER,
    2: Status.INFEASIBLE,
    3: Status.UNBOUNDED,
    4: Status.NUMERICAL_ERROR,
}


@dataclass
class _PhaseState:
    status: Status
    iterations: int
    rule: str
    column: Optional[int] = None


def _default_maxiter(layout: TableauLayout) -> int:
    return max(1000, 20 * (layout.n_variables + layout.n_constraints))


def _apply_pivot(
    tableau: TableauStorage,
    layout: TableauLayout,
    point: IterationPoint,
    config: SimplexConfig,
    check: bool,
) -> None:
    logger.debug(
        "phase %d pivot at (%d, %d): column %d replaces %d",
        point.phase,
        point.row,
        point.col,
        point.col,
        layout.basis[point.row],
    )
    pivot(tableau, point, tol=config.pivot_tol, epsilon=config.epsilon)
    layout.update(point.row, point.col)
    if check:
        assert_basis_valid(tableau, layout, atol=_INVARIANT_ATOL)
        assert_rhs_feasible(tableau, layout, atol=_INVARIANT_ATOL)


def _run_phase(
    tableau: TableauStorage,
    layout: TableauLayout,
    point: IterationPoint,
    config: SimplexConfig,
    budget: int,
    rule: str,
    check: bool,
) -> _PhaseState:
    nit = 0
    degenerate_run = 0
    while True:
        selection = next_iteration_point(
            tableau,
            layout,
            point,
            rule=rule,
            cost_tol=config.cost_tol,
            pivot_tol=config.pivot_tol,
        )
        if selection.is_terminal:
            column = selection.point.col if selection.point is not None else None
            return _PhaseState(selection.status, nit, rule, column=column)
        if nit >= budget:
            return _PhaseState(Status.MAX_ITER, nit, rule)

        step = selection.point
        degenerate = is_degenerate(tableau, layout, step.row, config.epsilon)
        _apply_pivot(tableau, layout, step, config, check)
        nit += 1

        degenerate_run = degenerate_run + 1 if degenerate else 0
        if (
            rule == "dantzig"
            and config.degenerate_limit is not None
            and degenerate_run >= config.degenerate_limit
        ):
            logger.info(
                "%d consecutive degenerate pivots in phase %d, switching to Bland's rule",
                degenerate_run,
                point.phase,
            )
            rule = "bland"


def _drive_out_artificials(
    tableau: TableauStorage,
    layout: TableauLayout,
    point: IterationPoint,
    config: SimplexConfig,
    check: bool,
) -> int:
    """Pivot zero-level artificials out of the basis; returns the pivot count."""
    nit = 0
    for row in layout.basic_artificial_rows():
        col = next(
            (
                j
                for j, value in tableau.row_entries(row)
                if j < layout.n_variables
                and j not in layout.basis
                and abs(value) > config.pivot_tol
            ),
            None,
        )
        if col is None:
            logger.debug("constraint row %d is redundant, artificial stays basic", row)
            continue
        # The artificial is within feasibility_tol of zero; dividing that
        # residue by a negative pivot element would make the entering value negative.
        tableau.set_value_at(row, layout.rhs_column, 0.0)
        _apply_pivot(tableau, layout, point.at(row, col), config, check)
        nit += 1
    return nit


def _no_constraints(c_arr: np.ndarray, config: SimplexConfig) -> SimplexResult:
    if np.any(c_arr < -config.cost_tol):
        return SimplexResult(
            x=np.zeros_like(c_arr),
            fun=None,
            status=Status.UNBOUNDED,
            message="Objective decreases without constraints",
            nit=0,
        )
    return SimplexResult(
        x=np.zeros_like(c_arr),
        fun=0.0,
        status=Status.OPTIMAL,
        message="Trivial solution (no constraints)",
        nit=0,
        primal_residual=0.0,
    )


def solve(problem: LPProblem, config: Optional[SimplexConfig] = None) -> SimplexResult:
    """
    Solve ``min c^T x, A x = b, x >= 0`` with the two-phase tableau simplex.

    Args:
        problem: The linear program.
        config: Solver configuration; defaults to ``SimplexConfig()``.

    Returns:
        A :class:`SimplexResult`. Unboundedness, infeasibility and hitting the
        iteration cap are reported through ``status``.

    Raises:
        ValueError: If the problem data are inconsistent or non-finite.
        DegeneratePivotError: If a pivot on a (near-)zero element is attempted.
    """
    if config is None:
        config = SimplexConfig()
    c_arr, a_arr, b_arr = coerce_problem(problem.c, problem.A, problem.b)
    if a_arr.shape[0] == 0:
        return _no_constraints(c_arr, config)

    tableau, layout = build_tableau(
        c_arr, a_arr, b_arr, storage=config.storage, epsilon=config.epsilon
    )
    maxiter = config.maxiter if config.maxiter is not None else _default_maxiter(layout)
    check = config.check_invariants or is_debug_enabled()
    point = IterationPoint()

    logger.info(
        "phase 1: %d constraints, %d variables, %s tableau",
        layout.n_constraints,
        layout.n_variables,
        config.storage,
    )
    phase1 = _run_phase(tableau, layout, point, config, maxiter, config.rule, check)
    nit = phase1.iterations

    def _result(status: Status, message: str, **extra: Any) -> SimplexResult:
        logger.info("%s after %d pivots: %s", status.value, nit, message)
        return SimplexResult(
            x=basic_solution(tableau, layout),
            fun=None,
            status=status,
            message=message,
            nit=nit,
            basis=tuple(layout.basis),
            **extra,
        )

    if phase1.status is Status.MAX_ITER:
        return _result(Status.MAX_ITER, "Maximum iterations exceeded in phase I", phase1_nit=nit)
    if phase1.status is Status.UNBOUNDED:
        return _result(
            Status.NUMERICAL_ERROR, "Phase I objective reported unbounded", phase1_nit=nit
        )
    if not is_phase1_feasible(tableau, layout, tol=config.feasibility_tol):
        infeasibility = objective_value(tableau, layout, Phase.ONE)
        return _result(
            Status.INFEASIBLE,
            f"Problem infeasible (phase I objective {infeasibility:.6g} > 0)",
            phase1_nit=nit,
        )

    nit += _drive_out_artificials(tableau, layout, point, config, check)
    phase1_nit = nit
    point.switch_to_phase2()
    logger.info("phase 1 feasible after %d pivots, switching to phase 2", phase1_nit)

    phase2 = _run_phase(
        tableau, layout, point, config, maxiter - nit, phase1.rule, check
    )
    nit += phase2.iterations

    if phase2.status is Status.UNBOUNDED:
        return _result(
            Status.UNBOUNDED,
            f"Objective unbounded below along column {phase2.column}",
            phase1_nit=phase1_nit,
        )
    if phase2.status is Status.MAX_ITER:
        return _result(
            Status.MAX_ITER, "Maximum iterations exceeded in phase II", phase1_nit=phase1_nit
        )

    x = basic_solution(tableau, layout)
    residual = float(np.max(np.abs(a_arr @ x - b_arr)))
    logger.info("optimal after %d pivots", nit)
    return SimplexResult(
        x=x,
        fun=float(c_arr @ x),
        status=Status.OPTIMAL,
        message="Optimal solution found",
        nit=nit,
        basis=tuple(layout.basis),
        phase1_nit=phase1_nit,
        primal_residual=residual,
    )


def simplex(
    c: Any,
    a_mat: Any,
    b_vec: Any,
    storage: Optional[str] = None,
    config: Optional[SimplexConfig] = None,
) -> SimplexResult:
    """
    Solve an equality-form LP given as ``(c, A, b)``.

    ``storage`` overrides ``config.storage`` when given.
    """
    if config is None:
        config = SimplexConfig()
    if storage is not None:
        config = replace(config, storage=storage)
    return solve(LPProblem(c=c, A=a_mat, b=b_vec), config)


def linprog_reference(
    c: Any,
    a_mat: Any,
    b_vec: Any,
    maxiter: Optional[int] = None,
) -> SimplexResult:
    """
    Solve the same equality-form LP via SciPy's ``linprog`` (HiGHS).

    Useful to cross-check tableau results; the returned ``basis`` is empty.
    """
    c_arr, a_arr, b_arr = coerce_problem(c, a_mat, b_vec)
    has_constraints = a_arr.shape[0] > 0
    options = {} if maxiter is None else {"maxiter": maxiter}
    res = _scipy_linprog(
        c=c_arr,
        A_eq=a_arr if has_constraints else None,
        b_eq=b_arr if has_constraints else None,
        bounds=(0, None),
        method="highs",
        options=options,
    )
    status = _LINPROG_STATUS.get(res.status, Status.NUMERICAL_ERROR)
    success = status is Status.OPTIMAL
    return SimplexResult(
        x=np.asarray(res.x, dtype=float) if success else None,
        fun=float(res.fun) if success else None,
        status=status,
        message=str(res.message),
        nit=int(getattr(res, "nit", 0)),
    )


__all__ = ["solve", "simplex", "linprog_reference"]
