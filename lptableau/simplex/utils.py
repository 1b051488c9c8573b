"""
Input coercion helpers for the tableau builder.

Constraint matrices arrive either as array-likes or as ``scipy.sparse``
matrices. Sparse inputs stay sparse (CSR) so that building a sparse tableau
never materialises the full matrix.
"""

from __future__ import annotations

from typing import Any, Iterator, Tuple, Union

import numpy as np
import scipy.sparse as sp

Matrix = Union[np.ndarray, sp.csr_matrix]


def coerce_vector(vec: Any, name: str) -> np.ndarray:
    arr = np.asarray(vec, dtype=float)
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains non-finite values (NaN or Inf)")
    return arr.copy()


def coerce_matrix(mat: Any, name: str) -> Matrix:
    if sp.issparse(mat):
        arr = sp.csr_matrix(mat, dtype=float)
        values = arr.data
    else:
        arr = np.array(mat, dtype=float)
        if arr.ndim != 2:
            raise ValueError(f"{name} must be two-dimensional, got shape {arr.shape}")
        values = arr
    if not np.all(np.isfinite(values)):
        raise ValueError(f"{name} contains non-finite values (NaN or Inf)")
    return arr


def coerce_problem(c: Any, a_mat: Any, b_vec: Any) -> Tuple[np.ndarray, Matrix, np.ndarray]:
    """
    Validate and convert ``(c, A, b)``.

    Raises:
        ValueError: On dimension mismatches or non-finite values.
    """
    c_arr = coerce_vector(c, "c")
    n = c_arr.shape[0]
    if n == 0:
        raise ValueError("Linear program must contain at least one variable")

    if a_mat is None and b_vec is None:
        return c_arr, np.zeros((0, n)), np.zeros(0)
    if (a_mat is None) ^ (b_vec is None):
        raise ValueError("A and b must be provided together")

    a_arr = coerce_matrix(a_mat, "A")
    b_arr = coerce_vector(b_vec, "b")
    m = a_arr.shape[0]
    if a_arr.shape[1] != n:
        raise ValueError(
            f"A has {a_arr.shape[1]} columns but c has {n} entries"
        )
    if b_arr.shape[0] != m:
        raise ValueError(f"b has {b_arr.shape[0]} entries but A has {m} rows")
    return c_arr, a_arr, b_arr


def normalize_rhs(a_mat: Matrix, b_vec: np.ndarray) -> Tuple[Matrix, np.ndarray]:
    """
    Negate every constraint whose right-hand side is negative.

    ``A x = b`` is preserved row by row, and the returned ``b`` is
    non-negative.
    """
    signs = np.where(b_vec < 0, -1.0, 1.0)
    if sp.issparse(a_mat):
        a_out = sp.csr_matrix(sp.diags(signs) @ a_mat)
    else:
        a_out = a_mat * signs[:, np.newaxis]
    return a_out, b_vec * signs


def iter_nonzeros(a_mat: Matrix) -> Iterator[Tuple[int, int, float]]:
    """Yield ``(row, col, value)`` for every non-zero entry of ``a_mat``."""
    if sp.issparse(a_mat):
        coo = a_mat.tocoo()
        for i, j, v in zip(coo.row, coo.col, coo.data):
            if v != 0.0:
                yield int(i), int(j), float(v)
    else:
        rows, cols = np.nonzero(a_mat)
        for i, j in zip(rows, cols):
            yield int(i), int(j), float(a_mat[i, j])


def column_sums(a_mat: Matrix) -> np.ndarray:
    return np.asarray(a_mat.sum(axis=0), dtype=float).reshape(-1)


__all__ = [
    "coerce_vector",
    "coerce_matrix",
    "coerce_problem",
    "normalize_rhs",
    "iter_nonzeros",
    "column_sums",
]
