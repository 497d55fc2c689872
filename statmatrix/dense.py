"""Dense matrix type and the general algorithms of the matrix family.

``Matrix`` stores a full two-dimensional float64 buffer, except for
column vectors with more than one row which are stored as a single row
and read through transposed indices. It implements every operation in
its general form: the symmetric and diagonal subtypes override the ones
they can do more cheaply and defer here otherwise.

Inversion dispatch
------------------
1. a structurally diagonal matrix is inverted through the reciprocal of
   its diagonal;
2. otherwise the index set is partitioned into independent diagonal
   blocks (only for matrices that pass the symmetry test) and each block
   is inverted on its own;
3. a single block is inverted by reciprocal (size 1), recursive Schur
   complement (size above ``DETERMINANT_LU_THRESHOLD``) or adjugate over
   determinant.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np

from ._validation import (
    _check_index,
    _check_product_dimension,
    _check_same_dimension,
    _check_square,
    _check_vector,
    _validate_buffer,
    _validate_dimensions,
    _validate_flat_indices,
    _validate_index_list,
)
from .base import AbstractMatrix
from .exceptions import (
    DimensionError,
    DomainError,
    IndexBoundsError,
    NotPositiveDefiniteError,
    NotVectorError,
    SingularMatrixError,
)
from .ops import (
    absorbing_multiply,
    block_configuration,
    is_symmetric_array,
    ordered_product,
    triangular_root,
)

logger = logging.getLogger(__name__)


def _determinant(a: np.ndarray, threshold: int) -> float:
    """Determinant of a square array: closed forms, Laplace, then LU."""
    n = a.shape[0]
    if n == 1:
        return float(a[0, 0])
    if n == 2:
        return float(a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0])
    if n <= threshold:
        det = 0.0
        for j in range(n):
            if a[0, j] != 0.0:
                det += a[0, j] * _cofactor(a, 0, j, threshold)
        return float(det)
    _, u = _lu(a)
    det = 1.0
    with np.errstate(over="ignore", under="ignore"):
        for i in range(n):
            det *= u[i, i]
    return float(det)


def _minor(a: np.ndarray, i: int, j: int, threshold: int) -> float:
    sub = np.delete(np.delete(a, i, axis=0), j, axis=1)
    return _determinant(sub, threshold)


def _cofactor(a: np.ndarray, i: int, j: int, threshold: int) -> float:
    multiplicator = -1.0 if (i + j) % 2 else 1.0
    return _minor(a, i, j, threshold) * multiplicator


def _lu(a: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Doolittle LU without pivoting: unit lower L, upper U."""
    n = a.shape[0]
    l = np.zeros((n, n))
    u = np.zeros((n, n))
    for i in range(n):
        l[i, i] = 1.0
        u[i, i:] = a[i, i:] - ordered_product(l[i : i + 1, :i], u[:i, i:])[0]
        if i + 1 < n:
            if u[i, i] == 0.0:
                raise SingularMatrixError(
                    "The LU decomposition cannot be completed because of a "
                    f"division by 0 (pivot {i})!"
                )
            tmp = ordered_product(l[i + 1 :, :i], u[:i, i : i + 1])[:, 0]
            l[i + 1 :, i] = (a[i + 1 :, i] - tmp) / u[i, i]
    return l, u


class Matrix(AbstractMatrix):
    """General dense matrix of float64 values.

    Parameters
    ----------
    rows, cols : int
        Shape of the zero-filled matrix, both at least 1.

    See :meth:`from_array`, :meth:`from_values` and :meth:`sequence` for
    the other constructors.
    """

    DETERMINANT_LU_THRESHOLD = 6
    SYMMETRY_TOLERANCE = 1.5e-6
    NEAR_ZERO = 1e-50
    DIFFERENCE_EPSILON = 1e-12

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_array(cls, data: Any) -> Matrix:
        """Build a matrix from a 2D buffer, or a column vector from a 1D one."""
        arr = _validate_buffer(data)
        if arr.ndim == 1:
            arr = arr[:, None]
        out = Matrix(*arr.shape)
        out._load(arr)
        return out

    @classmethod
    def from_values(cls, values: Sequence[float]) -> Matrix:
        """Column vector holding ``values`` in order."""
        arr = _validate_buffer(list(values), name="values")
        if arr.ndim != 1:
            raise DimensionError("values must be a flat sequence of numbers.")
        return Matrix.from_array(arr)

    @classmethod
    def sequence(cls, rows: int, cols: int, start: float, increment: float) -> Matrix:
        """Matrix filled row by row with ``start``, ``start + increment``, ..."""
        rows, cols = _validate_dimensions(rows, cols)
        out = Matrix(rows, cols)
        value = float(start)
        for i in range(rows):
            for j in range(cols):
                out._set(i, j, value)
                value += increment
        return out

    @classmethod
    def _from_full(cls, arr: np.ndarray) -> Matrix:
        out = Matrix(*arr.shape)
        out._load(arr)
        return out

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    def _construct_storage(self, rows: int, cols: int) -> np.ndarray:
        if cols == 1 and rows > 1:
            # column vectors are kept as a single row
            return np.zeros((1, rows))
        return np.zeros((rows, cols))

    def _is_stored_transposed(self) -> bool:
        return self._cols == 1 and self._rows > 1 and self._data.shape[0] == 1

    def _get(self, i: int, j: int) -> float:
        if self._is_stored_transposed():
            return self._data[j, i]
        return self._data[i, j]

    def _set(self, i: int, j: int, value: float) -> None:
        if self._is_stored_transposed():
            self._data[j, i] = value
        else:
            self._data[i, j] = value

    def _load(self, arr: np.ndarray) -> None:
        self._data[...] = arr.T if self._is_stored_transposed() else arr

    def to_array(self) -> np.ndarray:
        if self._is_stored_transposed():
            return self._data.T.copy()
        return self._data.copy()

    def clone(self) -> Matrix:
        return Matrix._from_full(self.to_array())

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    def add(self, m: AbstractMatrix) -> AbstractMatrix:
        _check_same_dimension(self, m, op="add")
        return Matrix._from_full(self.to_array() + m.to_array())

    def subtract(self, m: AbstractMatrix) -> AbstractMatrix:
        _check_same_dimension(self, m, op="subtract")
        return Matrix._from_full(self.to_array() - m.to_array())

    def scalar_add(self, d: float) -> AbstractMatrix:
        return Matrix._from_full(self.to_array() + d)

    def scalar_multiply(self, d: float) -> AbstractMatrix:
        return Matrix._from_full(self.to_array() * d)

    def elementwise_multiply(self, m: AbstractMatrix) -> AbstractMatrix:
        """Elementwise product; a zero on either side gives exactly 0."""
        _check_same_dimension(self, m, op="elementwise_multiply")
        return Matrix._from_full(absorbing_multiply(self.to_array(), m.to_array()))

    def elementwise_divide(self, m: AbstractMatrix) -> AbstractMatrix:
        _check_same_dimension(self, m, op="elementwise_divide")
        with np.errstate(divide="ignore", invalid="ignore"):
            return Matrix._from_full(self.to_array() / m.to_array())

    def elementwise_power(self, power: float) -> AbstractMatrix:
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return Matrix._from_full(np.power(self.to_array(), power))

    def pow_matrix(self, seed: float) -> AbstractMatrix:
        """Raise ``seed`` to the power of each element."""
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            return Matrix._from_full(np.power(seed, self.to_array()))

    def exp(self) -> AbstractMatrix:
        with np.errstate(over="ignore"):
            return Matrix._from_full(np.exp(self.to_array()))

    def log(self) -> AbstractMatrix:
        arr = self.to_array()
        self._check_log_domain(arr)
        return Matrix._from_full(np.log(arr))

    @staticmethod
    def _check_log_domain(arr: np.ndarray) -> None:
        if np.any(arr <= 0.0):
            raise DomainError(
                "log: at least one argument value for the log function is "
                "smaller than or equal to 0"
            )

    def absolute(self) -> AbstractMatrix:
        return Matrix._from_full(np.abs(self.to_array()))

    def __abs__(self):
        return self.absolute()

    def multiply(self, m: AbstractMatrix) -> AbstractMatrix:
        """Matrix product ``self @ m``."""
        _check_product_dimension(self, m)
        return Matrix._from_full(ordered_product(self.to_array(), m.to_array()))

    def transpose(self) -> AbstractMatrix:
        return Matrix._from_full(self.to_array().T)

    @property
    def T(self) -> AbstractMatrix:
        return self.transpose()

    # ------------------------------------------------------------------
    # Scans and structural queries
    # ------------------------------------------------------------------
    def is_symmetric(self, tolerance: float | None = None) -> bool:
        """Test whether mirrored entries agree within a relative tolerance.

        Parameters
        ----------
        tolerance : float, optional
            Maximum relative deviation of ``m[i, j] / m[j, i]`` from 1.
            Defaults to ``SYMMETRY_TOLERANCE``.
        """
        if not self.is_square():
            return False
        tol = self.SYMMETRY_TOLERANCE if tolerance is None else float(tolerance)
        return is_symmetric_array(self.to_array(), tol, self.NEAR_ZERO)

    def is_diagonal_matrix(self) -> bool:
        """True for a square matrix whose off-diagonal entries are all exactly 0."""
        if not self.is_square():
            return False
        arr = self.to_array()
        return not np.any(arr[~np.eye(self._rows, dtype=bool)] != 0.0)

    def any_element_nan(self) -> bool:
        return bool(np.isnan(self.to_array()).any())

    def any_element_larger_than(self, d: float) -> bool:
        return bool(np.any(self.to_array() > d))

    def any_element_smaller_or_equal_to(self, d: float) -> bool:
        return bool(np.any(self.to_array() <= d))

    def any_element_different_from(self, d: float) -> bool:
        return bool(np.any(np.abs(self.to_array() - d) > self.DIFFERENCE_EPSILON))

    def trace(self) -> float:
        _check_square(self, op="trace")
        return float(np.trace(self.to_array()))

    def diagonal_vector(self) -> Matrix:
        """Column vector of the diagonal elements."""
        _check_square(self, op="diagonal_vector")
        return Matrix.from_array(np.diag(self.to_array()).copy())

    def sum_of_elements(
        self, bounds: tuple[int, int, int, int] | None = None
    ) -> float:
        """Sum of all elements, or of those within inclusive bounds.

        Parameters
        ----------
        bounds : tuple of int, optional
            ``(start_row, end_row, start_col, end_col)``, all inclusive.
        """
        arr = self.to_array()
        if bounds is None:
            return float(arr.sum())
        start_row, end_row, start_col, end_col = bounds
        if end_row >= self._rows or end_col >= self._cols:
            raise IndexBoundsError(
                "The specified end row or end column exceeds the capacity of the matrix!"
            )
        if start_row < 0 or start_row > end_row:
            raise IndexBoundsError(
                "The specified start row is either negative or larger than the end row!"
            )
        if start_col < 0 or start_col > end_col:
            raise IndexBoundsError(
                "The specified start column is either negative or larger than the end column!"
            )
        return float(arr[start_row : end_row + 1, start_col : end_col + 1].sum())

    # ------------------------------------------------------------------
    # Element lists (row-major flat indices)
    # ------------------------------------------------------------------
    def get_elements(self, indices: Sequence[int]) -> Matrix:
        """Row vector of the elements at the given flat indices, in storage order."""
        idx = _validate_flat_indices(indices, self.number_of_elements())
        flat = self.to_array().ravel()
        keep = np.zeros(flat.size, dtype=bool)
        keep[idx] = True
        return Matrix._from_full(flat[keep][None, :])

    def remove_elements(self, indices: Sequence[int]) -> Matrix:
        """Row vector of the elements not listed in ``indices``."""
        idx = _validate_flat_indices(indices, self.number_of_elements())
        flat = self.to_array().ravel()
        keep = np.ones(flat.size, dtype=bool)
        keep[idx] = False
        if not keep.any():
            raise DimensionError("remove_elements: no element would be left.")
        return Matrix._from_full(flat[keep][None, :])

    def set_elements(self, indices: Sequence[int], m: AbstractMatrix) -> None:
        """Write the column vector ``m`` at the given flat indices (in place)."""
        self._write_elements(indices, m, accumulate=False)

    def add_elements_at(self, indices: Sequence[int], m: AbstractMatrix) -> None:
        """Add the column vector ``m`` to the elements at the flat indices (in place)."""
        self._write_elements(indices, m, accumulate=True)

    def _write_elements(
        self, indices: Sequence[int], m: AbstractMatrix, *, accumulate: bool
    ) -> None:
        if not m.is_column_vector():
            raise NotVectorError("Parameter m must be a column vector!")
        idx = _validate_flat_indices(indices, self.number_of_elements())
        if len(idx) != m.rows:
            raise DimensionError(
                f"{len(idx)} indices were given for a vector of {m.rows} elements."
            )
        values = m.to_array()[:, 0]
        first: dict[int, int] = {}
        for pos, k in enumerate(idx):
            first.setdefault(k, pos)
        for k, pos in first.items():
            i, j = divmod(k, self._cols)
            value = self._get(i, j) + values[pos] if accumulate else values[pos]
            self._set(i, j, value)

    def location_index(self, d: float) -> list[int]:
        """Flat indices of the elements within ``SYMMETRY_TOLERANCE`` of ``d``."""
        flat = self.to_array().ravel()
        return np.flatnonzero(np.abs(flat - d) < self.SYMMETRY_TOLERANCE).tolist()

    # ------------------------------------------------------------------
    # Sub-matrices
    # ------------------------------------------------------------------
    def sub_matrix(
        self, start_row: int, end_row: int, start_col: int, end_col: int
    ) -> Matrix:
        """Rectangular block with inclusive bounds, as a dense matrix."""
        _check_index(start_row, start_col, self.shape)
        _check_index(end_row, end_col, self.shape)
        if end_row < start_row or end_col < start_col:
            raise DimensionError(
                f"sub_matrix: empty range rows {start_row}..{end_row}, "
                f"cols {start_col}..{end_col}."
            )
        arr = self.to_array()
        return Matrix._from_full(arr[start_row : end_row + 1, start_col : end_col + 1])

    def select(
        self,
        rows: Sequence[int] | None = None,
        cols: Sequence[int] | None = None,
        sort_indices: bool = True,
    ) -> Matrix:
        """Gather the elements at ``rows`` × ``cols``.

        ``None`` or an empty list selects all rows (columns). With
        ``sort_indices`` the index lists are sorted first, so output row
        ``k`` maps to the ``k``-th smallest requested row. The lists passed
        in are left untouched.
        """
        r = _validate_index_list(rows, self._rows, name="rows", sort=sort_indices)
        c = _validate_index_list(cols, self._cols, name="cols", sort=sort_indices)
        return Matrix._from_full(self.to_array()[np.ix_(r, c)])

    def set_sub_matrix(self, m: AbstractMatrix, i: int, j: int) -> None:
        """Overwrite the region starting at ``(i, j)`` with ``m`` (in place)."""
        _check_index(i, j, self.shape)
        _check_index(i + m.rows - 1, j + m.cols - 1, self.shape)
        values = m.to_array()
        for ii in range(m.rows):
            for jj in range(m.cols):
                self._set(i + ii, j + jj, values[ii, jj])

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def diag_block(self, m: AbstractMatrix) -> AbstractMatrix:
        """Block-diagonal matrix with ``self`` then ``m`` on the diagonal."""
        out = np.zeros((self._rows + m.rows, self._cols + m.cols))
        out[: self._rows, : self._cols] = self.to_array()
        out[self._rows :, self._cols :] = m.to_array()
        return Matrix._from_full(out)

    def stack(self, m: AbstractMatrix, vertical: bool = True) -> Matrix:
        """Stack ``m`` below (``vertical``) or to the right of ``self``."""
        if vertical and self._cols != m.cols:
            raise DimensionError(
                f"stack: {m.rows} x {m.cols} cannot go below {self._rows} x {self._cols}."
            )
        if not vertical and self._rows != m.rows:
            raise DimensionError(
                f"stack: {m.rows} x {m.cols} cannot go beside {self._rows} x {self._cols}."
            )
        if vertical:
            return Matrix._from_full(np.vstack([self.to_array(), m.to_array()]))
        return Matrix._from_full(np.hstack([self.to_array(), m.to_array()]))

    def repeat(self, n_row: int, n_col: int) -> Matrix:
        """Tile the matrix ``n_row`` times downwards and ``n_col`` times across."""
        _validate_dimensions(n_row, n_col)
        return Matrix._from_full(np.tile(self.to_array(), (n_row, n_col)))

    def kronecker(self, m: AbstractMatrix) -> AbstractMatrix:
        """Kronecker product ``self ⊗ m``."""
        return Matrix._from_full(np.kron(self.to_array(), m.to_array()))

    def to_diagonal_matrix(self):
        """Diagonal matrix whose diagonal holds the elements of this vector."""
        from .diagonal import DiagonalMatrix

        _check_vector(self, op="to_diagonal_matrix")
        return DiagonalMatrix.from_values(self.to_array().ravel())

    def square_sym(self):
        """Unpack a column vector of ``n(n+1)/2`` elements into a symmetric matrix.

        The vector lists, for each column ``i``, the entries of rows ``0..i``;
        this is the inverse of :meth:`SymmetricMatrix.sym_square`.
        """
        from .symmetric import SymmetricMatrix

        if not self.is_column_vector():
            raise NotVectorError("square_sym: the current matrix is not a column vector!")
        n = triangular_root(self._rows)
        if n is None:
            raise NotVectorError(
                f"square_sym: {self._rows} elements cannot fill the upper triangle "
                "of a square symmetric matrix!"
            )
        values = self.to_array()[:, 0]
        out = SymmetricMatrix(n)
        pointer = 0
        for i in range(n):
            for j in range(i + 1):
                out._set(j, i, values[pointer + j])
            pointer += i + 1
        return out

    # ------------------------------------------------------------------
    # In-place utilities
    # ------------------------------------------------------------------
    def _buffers(self) -> list[np.ndarray]:
        return [self._data]

    def reset(self) -> None:
        """Set every element to 0 (in place)."""
        for buf in self._buffers():
            buf[...] = 0.0

    def clamp_if_lower_than(self, value: float) -> None:
        """Raise every element below ``value`` to ``value`` (in place)."""
        for buf in self._buffers():
            buf[buf < value] = value

    def clamp_if_higher_than(self, value: float) -> None:
        """Lower every element above ``value`` to ``value`` (in place)."""
        for buf in self._buffers():
            buf[buf > value] = value

    # ------------------------------------------------------------------
    # Determinant and decompositions
    # ------------------------------------------------------------------
    def determinant(self) -> float:
        """Determinant by closed form, Laplace expansion or LU.

        Matrices up to ``DETERMINANT_LU_THRESHOLD`` rows are expanded along
        their first row, skipping zero entries. Larger ones use the product
        of the diagonal of U from :meth:`lu_decomposition`.
        """
        _check_square(self, op="determinant")
        return _determinant(self.to_array(), self.DETERMINANT_LU_THRESHOLD)

    def lu_decomposition(self) -> tuple[Matrix, Matrix]:
        """Return ``(L, U)`` with unit-diagonal lower L and upper U, no pivoting.

        Raises
        ------
        SingularMatrixError
            If a pivot used as a divisor is exactly 0.
        """
        _check_square(self, op="lu_decomposition")
        l, u = _lu(self.to_array())
        return Matrix._from_full(l), Matrix._from_full(u)

    def minor(self, i: int, j: int) -> float:
        """Determinant of the matrix without row ``i`` and column ``j``."""
        _check_square(self, op="minor")
        _check_index(i, j, self.shape)
        if self.number_of_elements() == 1:
            raise DimensionError("minor: the matrix only has one element!")
        return _minor(self.to_array(), i, j, self.DETERMINANT_LU_THRESHOLD)

    def cofactor(self, i: int, j: int) -> float:
        """Signed minor ``(-1)**(i + j) * minor(i, j)``."""
        _check_square(self, op="cofactor")
        _check_index(i, j, self.shape)
        if self.number_of_elements() == 1:
            raise DimensionError("cofactor: the matrix only has one element!")
        return _cofactor(self.to_array(), i, j, self.DETERMINANT_LU_THRESHOLD)

    def adjugate(self) -> Matrix:
        """Transpose of the cofactor matrix."""
        _check_square(self, op="adjugate")
        n = self._rows
        a = self.to_array()
        adj = np.zeros((n, n))
        for i in range(n):
            for j in range(n):
                adj[j, i] = _cofactor(a, i, j, self.DETERMINANT_LU_THRESHOLD)
        return Matrix._from_full(adj)

    def lower_cholesky(self) -> AbstractMatrix:
        """Lower triangle L of the Cholesky factorization, ``L @ L.T == self``.

        Only the entries on and below the diagonal are read, so the result
        is meaningful for symmetric positive-definite matrices only.

        Raises
        ------
        NotPositiveDefiniteError
            If a NaN is produced, i.e. a pivot requires the square root of
            a negative number.
        """
        _check_square(self, op="lower_cholesky")
        a = self.to_array()
        n = self._rows
        chol = np.zeros((n, n))
        with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
            for i in range(n):
                for j in range(i + 1):
                    tmp = 0.0
                    for k in range(j):
                        tmp += chol[i, k] * chol[j, k]
                    if j == i:
                        chol[i, j] = np.sqrt(a[i, j] - tmp)
                    else:
                        chol[i, j] = 1.0 / chol[j, j] * (a[i, j] - tmp)
                    if np.isnan(chol[i, j]):
                        raise NotPositiveDefiniteError(
                            "lower_cholesky: the lower triangle of the Cholesky "
                            "decomposition cannot be calculated because NaN have "
                            f"been generated at ({i}, {j})!"
                        )
        return Matrix._from_full(chol)

    def is_positive_definite(self) -> bool:
        """True if the matrix is symmetric and its Cholesky factorization succeeds."""
        if not self.is_symmetric():
            return False
        try:
            self.lower_cholesky()
        except NotPositiveDefiniteError:
            return False
        return True

    # ------------------------------------------------------------------
    # Inversion
    # ------------------------------------------------------------------
    def block_configuration(self) -> list[list[int]]:
        """Index sets of the independent diagonal blocks of a square matrix.

        A matrix that fails the symmetry test is a single block.
        """
        _check_square(self, op="block_configuration")
        if not self.is_symmetric():
            return [list(range(self._cols))]
        return block_configuration(self.to_array())

    def inverse(self) -> AbstractMatrix:
        """Inverse of the matrix, exploiting diagonal and block-diagonal structure.

        Raises
        ------
        NotSquareError
            If the matrix is not square.
        SingularMatrixError
            If an adjugate-based block has a zero determinant.
        """
        if self.is_diagonal_matrix():
            from .diagonal import DiagonalMatrix

            logger.debug("inverse: %d x %d diagonal shortcut", self._rows, self._cols)
            return DiagonalMatrix._force(self).inverse()

        blocks = self.block_configuration()
        if len(blocks) == 1:
            return self._internal_inverse()

        logger.debug(
            "inverse: %d blocks of sizes %s", len(blocks), [len(b) for b in blocks]
        )
        full = np.zeros(self.shape)
        for block in blocks:
            inv_block = self.select(block, block)._internal_inverse()
            full[np.ix_(block, block)] = inv_block.to_array()
        return self._from_full(full)

    def _internal_inverse(self) -> AbstractMatrix:
        n = self._rows
        if n == 1:
            with np.errstate(divide="ignore"):
                return Matrix._from_full(np.array([[1.0 / self._get(0, 0)]]))

        if n > self.DETERMINANT_LU_THRESHOLD:
            logger.debug("inverse: Schur complement split of a %d x %d block", n, n)
            k = self._cols // 2
            a = self.sub_matrix(0, k - 1, 0, k - 1)
            b = self.sub_matrix(0, k - 1, k, n - 1)
            c = self.sub_matrix(k, n - 1, 0, k - 1)
            d = self.sub_matrix(k, n - 1, k, n - 1)
            inv_d = d._internal_inverse()
            inv_complement = a.subtract(b.multiply(inv_d).multiply(c))._internal_inverse()
            out = Matrix(n, n)
            out.set_sub_matrix(inv_complement, 0, 0)
            out.set_sub_matrix(
                inv_complement.multiply(b).multiply(inv_d).scalar_multiply(-1.0), 0, k
            )
            out.set_sub_matrix(
                inv_d.multiply(c).multiply(inv_complement).scalar_multiply(-1.0), k, 0
            )
            out.set_sub_matrix(
                inv_d.multiply(c)
                .multiply(inv_complement)
                .multiply(b)
                .multiply(inv_d)
                .add(inv_d),
                k,
                k,
            )
            return out

        determinant = self.determinant()
        if determinant == 0.0:
            raise SingularMatrixError(
                "The matrix cannot be inverted as its determinant is equal to 0!"
            )
        return self.adjugate().scalar_multiply(1.0 / determinant)


def identity_matrix(dim: int):
    """Identity matrix of dimension ``dim`` as a ``DiagonalMatrix``."""
    from .diagonal import DiagonalMatrix

    dim, _ = _validate_dimensions(dim, dim)
    return DiagonalMatrix.from_values(np.ones(dim))
