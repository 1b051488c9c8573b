"""
Tableau storage: one cell-level interface, a dense and a sparse backing.

The pivot operator and pivot selection only talk to :class:`TableauStorage`,
so :class:`DenseTableau` and :class:`SparseTableau` can be swapped freely.
Callers pick one based on the density of their constraint matrix.

Example:
    >>> from lptableau.simplex.storage import make_storage
    >>> tableau = make_storage("sparse", 3, 4)
    >>> tableau.set_value_at(0, 1, 2.5)
    >>> tableau.double_value(0, 1), tableau.double_value(2, 2)
    (2.5, 0.0)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

import numpy as np
import scipy.sparse as sp

from .core import STORAGE_KINDS, ZERO_EPSILON

Entry = Tuple[int, float]


class TableauStorage(ABC):
    """
    Rectangular grid of float64 values addressed by ``(row, col)``.

    The right-hand side lives in the last column. ``row_entries`` and
    ``column_entries`` return snapshot lists of the non-zero cells so callers
    may write to the tableau while iterating over them.
    """

    def __init__(self, rows: int, cols: int, epsilon: float = ZERO_EPSILON) -> None:
        if rows < 1 or cols < 1:
            raise ValueError(f"Tableau shape must be positive, got ({rows}, {cols}).")
        self._epsilon = float(epsilon)

    @property
    def epsilon(self) -> float:
        return self._epsilon

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.count_rows(), self.count_columns())

    @abstractmethod
    def count_rows(self) -> int:
        """Number of rows, constraint and cost rows together."""

    @abstractmethod
    def count_columns(self) -> int:
        """Number of columns, the right-hand side included."""

    def rhs_column_index(self) -> int:
        return self.count_columns() - 1

    @abstractmethod
    def value_at(self, row: int, col: int) -> float:
        """Read one cell."""

    @abstractmethod
    def set_value_at(self, row: int, col: int, value: float) -> None:
        """Write one cell."""

    def double_value(self, row: int, col: int) -> float:
        """Read one cell as a Python float."""
        return float(self.value_at(row, col))

    @abstractmethod
    def row_entries(self, row: int) -> List[Entry]:
        """Non-zero ``(col, value)`` pairs of ``row`` in ascending column order."""

    @abstractmethod
    def column_entries(self, col: int) -> List[Entry]:
        """Non-zero ``(row, value)`` pairs of ``col`` in ascending row order."""

    @abstractmethod
    def count_nonzeros(self) -> int:
        """Number of non-zero cells."""

    @abstractmethod
    def to_array(self) -> np.ndarray:
        """Dense copy of the whole tableau."""

    @abstractmethod
    def copy(self) -> "TableauStorage":
        """Independent copy with the same backing kind."""

    def _check_index(self, row: int, col: int) -> None:
        if not (0 <= row < self.count_rows() and 0 <= col < self.count_columns()):
            raise IndexError(
                f"Cell ({row}, {col}) outside tableau of shape {self.shape}."
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape}, nnz={self.count_nonzeros()})"


class DenseTableau(TableauStorage):
    """Tableau backed by a contiguous ``numpy`` array; every cell is stored."""

    def __init__(self, rows: int, cols: int, epsilon: float = ZERO_EPSILON) -> None:
        super().__init__(rows, cols, epsilon)
        self._data = np.zeros((rows, cols), dtype=float)

    def count_rows(self) -> int:
        return self._data.shape[0]

    def count_columns(self) -> int:
        return self._data.shape[1]

    def value_at(self, row: int, col: int) -> float:
        self._check_index(row, col)
        return float(self._data[row, col])

    def set_value_at(self, row: int, col: int, value: float) -> None:
        self._check_index(row, col)
        self._data[row, col] = value

    def row_entries(self, row: int) -> List[Entry]:
        values = self._data[row]
        return [(int(j), float(values[j])) for j in np.flatnonzero(values)]

    def column_entries(self, col: int) -> List[Entry]:
        values = self._data[:, col]
        return [(int(i), float(values[i])) for i in np.flatnonzero(values)]

    def count_nonzeros(self) -> int:
        return int(np.count_nonzero(self._data))

    def to_array(self) -> np.ndarray:
        return self._data.copy()

    def copy(self) -> "DenseTableau":
        clone = DenseTableau(self.count_rows(), self.count_columns(), self.epsilon)
        clone._data[:, :] = self._data
        return clone


class SparseTableau(TableauStorage):
    """
    Tableau backed by a ``scipy.sparse.lil_matrix``.

    Entries are kept per row in column order. Writes with magnitude at or
    below ``epsilon`` drop the entry instead of storing an explicit zero, so
    cancellation during elimination never accumulates stored zeros.
    """

    def __init__(self, rows: int, cols: int, epsilon: float = ZERO_EPSILON) -> None:
        super().__init__(rows, cols, epsilon)
        self._data = sp.lil_matrix((rows, cols), dtype=float)

    def count_rows(self) -> int:
        return self._data.shape[0]

    def count_columns(self) -> int:
        return self._data.shape[1]

    def value_at(self, row: int, col: int) -> float:
        self._check_index(row, col)
        return float(self._data[row, col])

    def set_value_at(self, row: int, col: int, value: float) -> None:
        self._check_index(row, col)
        value = float(value)
        if abs(value) <= self.epsilon:
            value = 0.0
        # lil_matrix removes the entry when assigned zero
        self._data[row, col] = value

    def row_entries(self, row: int) -> List[Entry]:
        return [
            (int(j), float(v)) for j, v in zip(self._data.rows[row], self._data.data[row])
        ]

    def column_entries(self, col: int) -> List[Entry]:
        entries = []
        for i, (cols, vals) in enumerate(zip(self._data.rows, self._data.data)):
            if col in cols:
                entries.append((i, float(vals[cols.index(col)])))
        return entries

    def count_nonzeros(self) -> int:
        return int(self._data.nnz)

    def to_array(self) -> np.ndarray:
        return self._data.toarray()

    def copy(self) -> "SparseTableau":
        clone = SparseTableau(self.count_rows(), self.count_columns(), self.epsilon)
        clone._data = self._data.copy()
        return clone


def make_storage(
    kind: str, rows: int, cols: int, epsilon: float = ZERO_EPSILON
) -> TableauStorage:
    """Create an all-zero tableau of the requested kind."""
    if kind == "dense":
        return DenseTableau(rows, cols, epsilon)
    if kind == "sparse":
        return SparseTableau(rows, cols, epsilon)
    raise ValueError(f"Unknown storage kind {kind!r}; expected one of {STORAGE_KINDS}.")


__all__ = ["TableauStorage", "DenseTableau", "SparseTableau", "make_storage"]
