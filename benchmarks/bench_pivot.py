"""Benchmark dense vs sparse tableau solves across constraint densities."""

import time
from typing import Dict

import numpy as np

from lptableau import SimplexConfig, Status, simplex


def random_sparse_lp(m: int, n: int, density: float, seed: int = 0):
    """Random bounded, feasible equality-form LP with roughly ``density`` fill."""
    rng = np.random.default_rng(seed)
    a_mat = rng.uniform(0.5, 5.0, size=(m, n))
    a_mat[rng.random((m, n)) > density] = 0.0
    a_mat[0, :] = 1.0
    b_vec = a_mat @ rng.random(n)
    c = rng.uniform(-1.0, 1.0, size=n)
    return c, a_mat, b_vec


def benchmark_solve(
    m: int,
    n: int,
    density: float,
    storage: str,
    repeats: int = 3,
) -> Dict[str, float]:
    """Benchmark one solve configuration.

    Args:
        m: Number of equality constraints.
        n: Number of variables.
        density: Fraction of non-zero constraint coefficients.
        storage: "dense" or "sparse".
        repeats: Number of timed solves.

    Returns:
        Dictionary with timing results.
    """
    c, a_mat, b_vec = random_sparse_lp(m, n, density)
    config = SimplexConfig(storage=storage)

    # Warmup
    result = simplex(c, a_mat, b_vec, config=config)

    start = time.perf_counter()
    for _ in range(repeats):
        simplex(c, a_mat, b_vec, config=config)
    end = time.perf_counter()

    time_per_solve = (end - start) / repeats
    return {
        "m": m,
        "n": n,
        "density": density,
        "optimal": float(result.status is Status.OPTIMAL),
        "pivots": result.nit,
        "time_per_solve_sec": time_per_solve,
        "time_per_pivot_sec": time_per_solve / max(result.nit, 1),
    }


if __name__ == "__main__":
    print("Benchmarking dense vs sparse tableau solves...")

    for density in (0.05, 0.2, 0.8):
        for storage in ("dense", "sparse"):
            results = benchmark_solve(m=30, n=80, density=density, storage=storage)
            print(f"density={density:.2f} {storage:>6}:")
            print(f"  Pivots: {results['pivots']}")
            print(f"  Time per solve: {results['time_per_solve_sec']*1e3:.1f} ms")
            print(f"  Time per pivot: {results['time_per_pivot_sec']*1e3:.2f} ms")
