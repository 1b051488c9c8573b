"""Pytest configuration and shared fixtures for lptableau tests.

This module provides:
- A deterministic numpy RNG fixture
- Small helpers to build random feasible equality-form LPs
"""

import os

import numpy as np
import pytest

from lptableau.diagnostics import set_debug_enabled


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Seed numpy's global RNG for legacy code paths."""
    np.random.seed(int(os.environ.get("TEST_RNG_SEED", "0")))


@pytest.fixture(scope="function")
def debug_mode():
    """Enable per-pivot invariant checks for the duration of a test."""
    set_debug_enabled(True)
    try:
        yield
    finally:
        set_debug_enabled(False)


@pytest.fixture(scope="function")
def feasible_lp(rng: np.random.Generator):
    """Factory for random ``(c, A, b)`` with a feasible point and a bounded objective.

    The first constraint row is all ones with a positive right-hand side, so
    the feasible region is bounded and every generated LP has an optimum.
    """

    def _make(m: int, n: int, density: float = 1.0):
        a_mat = rng.integers(-3, 6, size=(m, n)).astype(float)
        if density < 1.0:
            a_mat[rng.random((m, n)) > density] = 0.0
        a_mat[0, :] = 1.0
        x_feasible = rng.random(n) * 2.0
        b_vec = a_mat @ x_feasible
        c = rng.integers(-5, 6, size=n).astype(float)
        return c, a_mat, b_vec

    return _make
