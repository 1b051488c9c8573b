"""
Example: two-phase tableau simplex with dense and sparse storage

Solves three small LPs in equality form (a degenerate one, one with
multiple optima and an unbounded one), then steps through a solve by hand to
show how the tableau, the iteration point and pivot selection fit together.
"""

import logging

import numpy as np

from lptableau import (
    IterationPoint,
    Status,
    assert_tableaux_close,
    build_tableau,
    configure_logging,
    next_iteration_point,
    pivot_tableau,
    simplex,
)


def example_solve():
    """Example: solve with either storage and compare."""
    print("=" * 60)
    print("Example 1: Solving equality-form LPs")
    print("=" * 60)

    problems = {
        "degenerate": (
            np.array([-2.0, -1.0, 0.0, 0.0, 0.0]),
            np.array([[4.0, 3.0, 1.0, 0.0, 0.0], [4.0, 1.0, 0.0, 1.0, 0.0], [4.0, 2.0, 0.0, 0.0, 1.0]]),
            np.array([12.0, 8.0, 8.0]),
        ),
        "multiple optima": (
            np.array([-4.0, -14.0, 0.0, 0.0]),
            np.array([[2.0, 7.0, 1.0, 0.0], [7.0, 2.0, 0.0, 1.0]]),
            np.array([21.0, 21.0]),
        ),
        "unbounded": (
            np.array([-2.0, -1.0, 0.0, 0.0]),
            np.array([[1.0, -1.0, 1.0, 0.0], [2.0, -1.0, 0.0, 1.0]]),
            np.array([10.0, 40.0]),
        ),
    }

    for name, (c, A, b) in problems.items():
        for storage in ("dense", "sparse"):
            result = simplex(c, A, b, storage=storage)
            print(f"{name:>16} [{storage:>6}]  status={result.status.value}")
            print(f"{'':>26}x={np.round(result.x, 4)}  nit={result.nit}")
            if result.status == Status.OPTIMAL:
                print(f"{'':>26}objective={result.fun:.4f}")
    print()


def example_step_by_step():
    """Example: drive the pivots manually on both storages."""
    print("=" * 60)
    print("Example 2: Stepping through a solve")
    print("=" * 60)

    c = np.array([-3.0, -5.0, 0.0, 0.0])
    A = np.array([[1.0, 2.0, 1.0, 0.0], [3.0, 2.0, 0.0, 1.0]])
    b = np.array([4.0, 6.0])

    dense, layout = build_tableau(c, A, b, storage="dense")
    sparse, _ = build_tableau(c, A, b, storage="sparse")
    point = IterationPoint()

    while True:
        selection = next_iteration_point(dense, layout, point)
        if selection.is_terminal:
            print(f"phase {int(point.phase)}: {selection.status.value}")
            if point.is_phase2 or selection.status is not Status.OPTIMAL:
                break
            point.switch_to_phase2()
            continue
        step = selection.point
        pivot_tableau(dense, step)
        pivot_tableau(sparse, step)
        layout.update(step.row, step.col)
        assert_tableaux_close(dense, sparse, context=f"pivot ({step.row}, {step.col})")
        print(f"phase {int(step.phase)}: pivot at ({step.row}, {step.col}), basis={layout.basis}")

    print("final tableau:")
    print(np.round(dense.to_array(), 4))
    print(f"sparse tableau keeps {sparse.count_nonzeros()} of {dense.count_rows() * dense.count_columns()} cells")
    print()


def main():
    """Run all examples."""
    configure_logging(level=logging.WARNING)
    example_solve()
    example_step_by_step()


if __name__ == "__main__":
    main()
