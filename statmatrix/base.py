"""Shape contract and abstract operation set shared by the matrix family."""

from __future__ import annotations

import abc
import numbers
from typing import Any

import numpy as np

from ._validation import _check_index, _validate_dimensions


def _is_scalar(val: Any) -> bool:
    return isinstance(val, numbers.Number) or (
        hasattr(val, "__array__") and not isinstance(val, AbstractMatrix)
        and np.ndim(val) == 0
    )


class AbstractMatrix(abc.ABC):
    """Base class of the matrix family.

    A matrix has a fixed number of rows and columns, both at least 1, set
    at construction and never changed afterwards. Subclasses choose the
    physical layout of their buffer and implement the unchecked accessors
    ``_get`` and ``_set``; the public accessors validate indices first.

    Operations never mutate their operands: arithmetic, decompositions and
    structural transforms all return new instances.
    """

    # numpy must defer to our reflected operators
    __array_priority__ = 1000

    def __init__(self, rows: int, cols: int) -> None:
        self._rows, self._cols = _validate_dimensions(rows, cols)
        self._data = self._construct_storage(self._rows, self._cols)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    def is_column_vector(self) -> bool:
        return self._cols == 1

    def is_row_vector(self) -> bool:
        return self._rows == 1

    def is_square(self) -> bool:
        return self._rows == self._cols

    def is_same_dimension(self, m: AbstractMatrix) -> bool:
        return self.shape == m.shape

    def number_of_elements(self) -> int:
        return self._rows * self._cols

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    @abc.abstractmethod
    def _construct_storage(self, rows: int, cols: int) -> Any:
        """Allocate a zero-filled buffer in the layout of the subclass."""

    @abc.abstractmethod
    def _get(self, i: int, j: int) -> float:
        """Read entry (i, j) without bounds checking."""

    @abc.abstractmethod
    def _set(self, i: int, j: int, value: float) -> None:
        """Write entry (i, j) without bounds checking."""

    @abc.abstractmethod
    def to_array(self) -> np.ndarray:
        """Independent dense (rows × cols) copy of the matrix."""

    def get(self, i: int, j: int) -> float:
        """Return the value at row ``i`` and column ``j``."""
        _check_index(i, j, self.shape)
        return float(self._get(i, j))

    def set(self, i: int, j: int, value: float) -> None:
        """Set the value at row ``i`` and column ``j``."""
        _check_index(i, j, self.shape)
        self._set(i, j, float(value))

    def __getitem__(self, key: tuple[int, int]) -> float:
        i, j = key
        return self.get(i, j)

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        i, j = key
        self.set(i, j, value)

    def __array__(self, dtype=None, copy=None) -> np.ndarray:
        arr = self.to_array()
        return arr if dtype is None else arr.astype(dtype)

    # ------------------------------------------------------------------
    # Abstract operation set
    # ------------------------------------------------------------------
    @abc.abstractmethod
    def add(self, m: AbstractMatrix) -> AbstractMatrix: ...

    @abc.abstractmethod
    def subtract(self, m: AbstractMatrix) -> AbstractMatrix: ...

    @abc.abstractmethod
    def scalar_add(self, d: float) -> AbstractMatrix: ...

    @abc.abstractmethod
    def scalar_multiply(self, d: float) -> AbstractMatrix: ...

    @abc.abstractmethod
    def elementwise_multiply(self, m: AbstractMatrix) -> AbstractMatrix: ...

    @abc.abstractmethod
    def elementwise_divide(self, m: AbstractMatrix) -> AbstractMatrix: ...

    @abc.abstractmethod
    def elementwise_power(self, power: float) -> AbstractMatrix: ...

    @abc.abstractmethod
    def multiply(self, m: AbstractMatrix) -> AbstractMatrix: ...

    @abc.abstractmethod
    def exp(self) -> AbstractMatrix: ...

    @abc.abstractmethod
    def log(self) -> AbstractMatrix: ...

    @abc.abstractmethod
    def transpose(self) -> AbstractMatrix: ...

    @abc.abstractmethod
    def sub_matrix(
        self, start_row: int, end_row: int, start_col: int, end_col: int
    ) -> AbstractMatrix: ...

    @abc.abstractmethod
    def select(self, rows=None, cols=None, sort_indices: bool = True) -> AbstractMatrix: ...

    @abc.abstractmethod
    def set_sub_matrix(self, m: AbstractMatrix, i: int, j: int) -> None: ...

    @abc.abstractmethod
    def clone(self) -> AbstractMatrix: ...

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def __add__(self, other):
        if isinstance(other, AbstractMatrix):
            return self.add(other)
        if _is_scalar(other):
            return self.scalar_add(float(other))
        return NotImplemented

    def __radd__(self, other):
        if _is_scalar(other):
            return self.scalar_add(float(other))
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, AbstractMatrix):
            return self.subtract(other)
        if _is_scalar(other):
            return self.scalar_add(-float(other))
        return NotImplemented

    def __rsub__(self, other):
        if _is_scalar(other):
            return self.scalar_multiply(-1.0).scalar_add(float(other))
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, AbstractMatrix):
            return self.elementwise_multiply(other)
        if _is_scalar(other):
            return self.scalar_multiply(float(other))
        return NotImplemented

    def __rmul__(self, other):
        if _is_scalar(other):
            return self.scalar_multiply(float(other))
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, AbstractMatrix):
            return self.elementwise_divide(other)
        if _is_scalar(other):
            with np.errstate(divide="ignore", invalid="ignore"):
                factor = np.float64(1.0) / np.float64(other)
            return self.scalar_multiply(float(factor))
        return NotImplemented

    def __matmul__(self, other):
        if isinstance(other, AbstractMatrix):
            return self.multiply(other)
        return NotImplemented

    def __neg__(self):
        return self.scalar_multiply(-1.0)

    def __eq__(self, other):
        if other is self:
            return True
        if not isinstance(other, AbstractMatrix):
            return NotImplemented
        return self.shape == other.shape and bool(
            np.array_equal(self.to_array(), other.to_array())
        )

    # mutable through set(); equality is by value
    __hash__ = None  # type: ignore[assignment]

    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo):
        return self.clone()

    def __repr__(self) -> str:
        arr = self.to_array()
        lines = []
        size = 0
        for i in range(self._rows):
            cells = []
            for v in arr[i]:
                if 0.1 < abs(v) < 1e3:
                    cells.append(f"[{v:.2f}]")
                else:
                    cells.append(f"[{v:.2e}]")
            line = " ".join(cells)
            lines.append(line)
            size += len(line)
            if size > 5000:
                lines.append("...")
                break
        sep = ", " if self.is_column_vector() else ", \n"
        return "{" + sep.join(lines) + "}"
