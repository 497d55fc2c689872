"""Exception hierarchy for statmatrix.

Every error raised by the matrix family derives from :class:`MatrixError`
and also from the builtin exception a caller would naturally catch for the
same situation (``ValueError`` for bad shapes, ``IndexError`` for bad
indices, ``numpy.linalg.LinAlgError`` for singular systems).
"""

from __future__ import annotations

from numpy.linalg import LinAlgError


class MatrixError(Exception):
    """Base class of all matrix errors."""


class DimensionError(MatrixError, ValueError):
    """Operand shapes are invalid or incompatible."""


class NotSquareError(DimensionError):
    """The operation requires a square matrix."""


class NotVectorError(DimensionError):
    """The operation requires a row or column vector."""


class IndexBoundsError(MatrixError, IndexError):
    """A row or column index lies outside the declared shape."""


class StructuralWriteError(MatrixError, TypeError):
    """The storage layout of the matrix cannot represent the write."""


class SingularMatrixError(MatrixError, LinAlgError):
    """A zero pivot or a zero determinant prevents the computation."""


class DomainError(MatrixError, ValueError):
    """An element lies outside the domain of the function applied to it."""


class NotPositiveDefiniteError(DomainError):
    """The Cholesky factorization produced NaN values."""


class NotSymmetricError(MatrixError, ValueError):
    """The matrix does not pass the symmetry test."""


__all__ = [
    "MatrixError",
    "DimensionError",
    "NotSquareError",
    "NotVectorError",
    "IndexBoundsError",
    "StructuralWriteError",
    "SingularMatrixError",
    "DomainError",
    "NotPositiveDefiniteError",
    "NotSymmetricError",
]
