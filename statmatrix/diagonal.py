"""Diagonal matrix stored as a single array."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from ._validation import (
    _check_product_dimension,
    _check_same_dimension,
    _check_square,
    _validate_buffer,
)
from .base import AbstractMatrix
from .dense import Matrix
from .exceptions import (
    DimensionError,
    DomainError,
    NotPositiveDefiniteError,
    StructuralWriteError,
)
from .ops import absorbing_multiply
from .symmetric import SymmetricMatrix


class DiagonalMatrix(SymmetricMatrix):
    """Square matrix whose off-diagonal elements are structurally zero.

    Only the diagonal is stored. Writing a value off the diagonal raises
    :class:`~statmatrix.exceptions.StructuralWriteError`, even if the value
    is 0. Operations that would fill the off-diagonal part (adding a scalar,
    ``exp``) return a ``SymmetricMatrix`` instead.
    """

    @classmethod
    def from_values(cls, values: Sequence[float]) -> DiagonalMatrix:
        """Diagonal matrix with ``values`` on its diagonal."""
        arr = _validate_buffer(values, name="values")
        if arr.ndim != 1:
            raise DimensionError("values must be a flat sequence of numbers.")
        out = DiagonalMatrix(arr.size)
        out._data[:] = arr
        return out

    @classmethod
    def from_array(cls, data: Any) -> DiagonalMatrix:
        """Build from a square array whose off-diagonal elements are all 0."""
        return DiagonalMatrix._force(Matrix.from_array(data))

    @staticmethod
    def _force(m: AbstractMatrix) -> DiagonalMatrix:
        if isinstance(m, DiagonalMatrix):
            return m
        _check_square(m, op="DiagonalMatrix conversion")
        if not m.is_diagonal_matrix():
            raise StructuralWriteError("Some off diagonal elements are different from 0!")
        return DiagonalMatrix.from_values(np.diag(m.to_array()))

    def _construct_storage(self, rows: int, cols: int) -> np.ndarray:
        return np.zeros(rows)

    def _get(self, i: int, j: int) -> float:
        return self._data[i] if i == j else 0.0

    def _set(self, i: int, j: int, value: float) -> None:
        if i != j:
            raise StructuralWriteError(
                "The DiagonalMatrix instance only allows for setting the values on the diagonal!"
            )
        self._data[i] = value

    def _buffers(self) -> list[np.ndarray]:
        return [self._data]

    def _packed_rows(self) -> list[np.ndarray]:
        n = self._rows
        rows = [np.zeros(n - i) for i in range(n)]
        for i, row in enumerate(rows):
            row[0] = self._data[i]
        return rows


    def to_array(self) -> np.ndarray:
        return np.diag(self._data)

    def clone(self) -> DiagonalMatrix:
        return DiagonalMatrix.from_values(self._data)

    def is_diagonal_matrix(self) -> bool:
        return True

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def add(self, m: AbstractMatrix) -> AbstractMatrix:
        _check_same_dimension(self, m, op="add")
        if m.is_diagonal_matrix():
            return DiagonalMatrix.from_values(self._data + np.diag(m.to_array()))
        return super().add(m)

    def subtract(self, m: AbstractMatrix) -> AbstractMatrix:
        _check_same_dimension(self, m, op="subtract")
        if m.is_diagonal_matrix():
            return DiagonalMatrix.from_values(self._data - np.diag(m.to_array()))
        return super().subtract(m)

    def scalar_multiply(self, d: float) -> DiagonalMatrix:
        return DiagonalMatrix.from_values(self._data * d)

    def elementwise_multiply(self, m: AbstractMatrix) -> DiagonalMatrix:
        """Product of the diagonals; the off-diagonal part stays 0 whatever ``m`` holds."""
        _check_same_dimension(self, m, op="elementwise_multiply")
        return DiagonalMatrix.from_values(
            absorbing_multiply(self._data, np.diag(m.to_array()))
        )

    def elementwise_divide(self, m: AbstractMatrix) -> DiagonalMatrix:
        _check_same_dimension(self, m, op="elementwise_divide")
        with np.errstate(divide="ignore", invalid="ignore"):
            return DiagonalMatrix.from_values(self._data / np.diag(m.to_array()))

    def elementwise_power(self, power: float) -> DiagonalMatrix:
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return DiagonalMatrix.from_values(np.power(self._data, power))

    def absolute(self) -> DiagonalMatrix:
        return DiagonalMatrix.from_values(np.abs(self._data))

    def log(self):
        raise DomainError("The DiagonalMatrix class does not support the log method!")

    def multiply(self, m: AbstractMatrix) -> AbstractMatrix:
        """Matrix product; stays diagonal when ``m`` is diagonal too."""
        _check_product_dimension(self, m)
        if m.is_diagonal_matrix():
            return DiagonalMatrix.from_values(self._data * np.diag(m.to_array()))
        return super().multiply(m)

    def diag_block(self, m: AbstractMatrix) -> AbstractMatrix:
        if m.is_diagonal_matrix():
            return DiagonalMatrix.from_values(
                np.concatenate([self._data, np.diag(m.to_array())])
            )
        return super().diag_block(m)

    # ------------------------------------------------------------------
    # Decompositions
    # ------------------------------------------------------------------
    def lower_cholesky(self) -> DiagonalMatrix:
        """Square roots of the diagonal.

        Raises
        ------
        NotPositiveDefiniteError
            If a diagonal element is negative or NaN.
        """
        with np.errstate(invalid="ignore"):
            root = np.sqrt(self._data)
        if np.isnan(root).any():
            raise NotPositiveDefiniteError(
                "lower_cholesky: a negative diagonal element has no square root!"
            )
        return DiagonalMatrix.from_values(root)

    def inverse(self) -> DiagonalMatrix:
        """Reciprocal of each diagonal element; a zero gives ``inf``."""
        return self._internal_inverse()

    def _internal_inverse(self) -> DiagonalMatrix:
        with np.errstate(divide="ignore"):
            return DiagonalMatrix.from_values(1.0 / self._data)

    # ------------------------------------------------------------------
    # In-place utilities
    # ------------------------------------------------------------------
    def clamp_if_lower_than(self, value: float) -> None:
        """Raise diagonal elements below ``value`` to ``value`` (in place).

        A positive ``value`` would have to lift the off-diagonal zeros too,
        which the storage cannot hold.
        """
        if value > 0.0 and self._rows > 1:
            raise StructuralWriteError(
                f"clamp_if_lower_than({value}) would change the off-diagonal zeros."
            )
        super().clamp_if_lower_than(value)

    def clamp_if_higher_than(self, value: float) -> None:
        """Lower diagonal elements above ``value`` to ``value`` (in place)."""
        if value < 0.0 and self._rows > 1:
            raise StructuralWriteError(
                f"clamp_if_higher_than({value}) would change the off-diagonal zeros."
            )
        super().clamp_if_higher_than(value)
