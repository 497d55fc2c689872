"""Symmetric matrix stored as packed upper-triangular rows."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from ._validation import _check_product_dimension, _check_same_dimension, _check_square
from .base import AbstractMatrix
from .dense import Matrix
from .exceptions import NotSymmetricError, StructuralWriteError
from .ops import (
    absorbing_multiply,
    isserlis,
    ordered_self_product_upper,
    pack_upper,
    unpack_upper,
)


class SymmetricMatrix(Matrix):
    """Square symmetric matrix.

    Row ``i`` of the storage holds columns ``i..n-1`` of the matrix, so a
    matrix of size ``n`` keeps ``n (n + 1) / 2`` values. Reads and writes
    at ``(i, j)`` with ``i > j`` are redirected to ``(j, i)``.

    Operations against another symmetric operand return a
    ``SymmetricMatrix``; any other operand falls back to the dense result.

    Parameters
    ----------
    size : int
        Number of rows and columns.
    """

    def __init__(self, size: int) -> None:
        super().__init__(size, size)

    @classmethod
    def from_array(cls, data: Any) -> SymmetricMatrix:
        """Build from a square array that passes the symmetry test.

        Only the upper triangle is kept.

        Raises
        ------
        NotSymmetricError
            If ``data`` is not square or not symmetric.
        """
        return SymmetricMatrix.convert_if_possible(Matrix.from_array(data))

    @classmethod
    def _from_full(cls, arr: np.ndarray) -> SymmetricMatrix:
        out = SymmetricMatrix(arr.shape[0])
        out._data = pack_upper(arr)
        return out

    @staticmethod
    def _force(m: AbstractMatrix) -> SymmetricMatrix:
        if isinstance(m, SymmetricMatrix):
            return m
        _check_square(m, op="SymmetricMatrix conversion")
        return SymmetricMatrix._from_full(m.to_array())

    @staticmethod
    def convert_if_possible(m: AbstractMatrix) -> SymmetricMatrix:
        """Return ``m`` as a ``SymmetricMatrix`` if it passes the symmetry test.

        A ``SymmetricMatrix`` is returned unchanged; a dense matrix is
        converted by copying its upper triangle.
        """
        if isinstance(m, SymmetricMatrix):
            return m
        if not m.is_symmetric():
            raise NotSymmetricError("The matrix m is not symmetric!")
        return SymmetricMatrix._force(m)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    def _construct_storage(self, rows: int, cols: int) -> list[np.ndarray]:
        return [np.zeros(cols - i) for i in range(rows)]

    def _get(self, i: int, j: int) -> float:
        if j >= i:
            return self._data[i][j - i]
        return self._data[j][i - j]

    def _set(self, i: int, j: int, value: float) -> None:
        if j >= i:
            self._data[i][j - i] = value
        else:
            self._data[j][i - j] = value

    def _buffers(self) -> list[np.ndarray]:
        return self._data

    def to_array(self) -> np.ndarray:
        return unpack_upper(self._data)

    def clone(self) -> SymmetricMatrix:
        out = SymmetricMatrix(self._rows)
        out._data = [row.copy() for row in self._data]
        return out

    def is_symmetric(self, tolerance: float | None = None) -> bool:
        return True

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def _packed_rows(self) -> list[np.ndarray]:
        return self._data

    @staticmethod
    def _from_rows(rows: list[np.ndarray]) -> SymmetricMatrix:
        out = SymmetricMatrix(len(rows))
        out._data = rows
        return out

    def _map(self, fn) -> SymmetricMatrix:
        return SymmetricMatrix._from_rows([fn(row) for row in self._packed_rows()])

    def _combine(self, m: AbstractMatrix, fn) -> SymmetricMatrix:
        rows = zip(self._packed_rows(), _packed_rows_of(m))
        return SymmetricMatrix._from_rows([fn(a, b) for a, b in rows])

    def add(self, m: AbstractMatrix) -> AbstractMatrix:
        _check_same_dimension(self, m, op="add")
        if m.is_symmetric():
            return self._combine(m, np.add)
        return super().add(m)

    def subtract(self, m: AbstractMatrix) -> AbstractMatrix:
        _check_same_dimension(self, m, op="subtract")
        if m.is_symmetric():
            return self._combine(m, np.subtract)
        return super().subtract(m)

    def elementwise_multiply(self, m: AbstractMatrix) -> AbstractMatrix:
        if self.is_same_dimension(m) and m.is_symmetric():
            return self._combine(m, absorbing_multiply)
        return super().elementwise_multiply(m)

    def elementwise_divide(self, m: AbstractMatrix) -> AbstractMatrix:
        if self.is_same_dimension(m) and m.is_symmetric():
            with np.errstate(divide="ignore", invalid="ignore"):
                return self._combine(m, np.divide)
        return super().elementwise_divide(m)

    def scalar_add(self, d: float) -> SymmetricMatrix:
        return self._map(lambda row: row + d)

    def scalar_multiply(self, d: float) -> SymmetricMatrix:
        return self._map(lambda row: row * d)

    def elementwise_power(self, power: float) -> SymmetricMatrix:
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return self._map(lambda row: np.power(row, power))

    def pow_matrix(self, seed: float) -> SymmetricMatrix:
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return self._map(lambda row: np.power(seed, row))

    def exp(self) -> SymmetricMatrix:
        with np.errstate(over="ignore"):
            return self._map(np.exp)

    def log(self) -> SymmetricMatrix:
        for row in self._packed_rows():
            self._check_log_domain(row)
        return self._map(np.log)

    def absolute(self) -> SymmetricMatrix:
        return self._map(np.abs)

    def multiply(self, m: AbstractMatrix) -> AbstractMatrix:
        """Matrix product; the square of a symmetric matrix stays symmetric."""
        _check_product_dimension(self, m)
        if m == self:
            return SymmetricMatrix._from_full(ordered_self_product_upper(self.to_array()))
        return super().multiply(m)

    def transpose(self) -> SymmetricMatrix:
        return self

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def kronecker(self, m: AbstractMatrix) -> AbstractMatrix:
        """Kronecker product ``self ⊗ m``.

        With a symmetric ``m`` only the upper block triangle is computed:
        packed row ``i1 * p + i2`` is ``a[i1, i1] * b[i2, i2:]`` followed by
        ``a[i1, j1] * b[i2, :]`` for every ``j1 > i1``.
        """
        if not m.is_symmetric():
            return super().kronecker(m)
        a_rows = self._packed_rows()
        b_rows = _packed_rows_of(m)
        b_full = [_full_row(b_rows, i) for i in range(len(b_rows))]
        rows = []
        for a_row in a_rows:
            for b_row, b_line in zip(b_rows, b_full):
                tail = np.outer(a_row[1:], b_line).ravel()
                rows.append(np.concatenate([a_row[0] * b_row, tail]))
        return SymmetricMatrix._from_rows(rows)

    def diag_block(self, m: AbstractMatrix) -> AbstractMatrix:
        if not m.is_symmetric():
            return super().diag_block(m)
        pad = np.zeros(m.rows)
        rows = [np.concatenate([row, pad]) for row in self._packed_rows()]
        rows.extend(row.copy() for row in _packed_rows_of(m))
        return SymmetricMatrix._from_rows(rows)

    def sym_square(self) -> Matrix:
        """Column vector stacking, for each row ``i``, the columns ``0..i``.

        The vector holds ``n (n + 1) / 2`` elements and is turned back into
        this matrix by :meth:`Matrix.square_sym`.
        """
        rows = self._packed_rows()
        return Matrix.from_array(
            np.concatenate([_full_row(rows, i)[: i + 1] for i in range(self._rows)])
        )

    def isserlis_matrix(self) -> SymmetricMatrix:
        """Fourth-moment matrix of a centred Gaussian vector with this covariance.

        Entry ``(i*n + k, j*n + l)`` is
        ``S[i, j] S[k, l] + S[i, k] S[j, l] + S[i, l] S[j, k]``.
        """
        return SymmetricMatrix._from_full(isserlis(self.to_array()))

    # ------------------------------------------------------------------
    # Writes the packed layout cannot hold
    # ------------------------------------------------------------------
    def set_sub_matrix(self, m: AbstractMatrix, i: int, j: int) -> None:
        raise StructuralWriteError(
            f"{type(self).__name__} does not support the set_sub_matrix method!"
        )

    def set_elements(self, indices: Sequence[int], m: AbstractMatrix) -> None:
        raise StructuralWriteError(
            f"{type(self).__name__} does not support the set_elements method!"
        )

    def add_elements_at(self, indices: Sequence[int], m: AbstractMatrix) -> None:
        raise StructuralWriteError(
            f"{type(self).__name__} does not support the add_elements_at method!"
        )

    # ------------------------------------------------------------------
    # Inversion
    # ------------------------------------------------------------------
    def _internal_inverse(self) -> SymmetricMatrix:
        return SymmetricMatrix._force(super()._internal_inverse())


def _packed_rows_of(m: AbstractMatrix) -> list[np.ndarray]:
    if isinstance(m, SymmetricMatrix):
        return m._packed_rows()
    return pack_upper(m.to_array())


def _full_row(rows: list[np.ndarray], i: int) -> np.ndarray:
    """Row ``i`` of the full matrix, read from packed upper rows."""
    lower = [rows[k][i - k] for k in range(i)]
    return np.concatenate([np.array(lower, dtype=np.float64), rows[i]])
