import logging

from .base import AbstractMatrix
from .dense import Matrix, identity_matrix
from .diagonal import DiagonalMatrix
from .exceptions import (
    DimensionError,
    DomainError,
    IndexBoundsError,
    MatrixError,
    NotPositiveDefiniteError,
    NotSquareError,
    NotSymmetricError,
    NotVectorError,
    SingularMatrixError,
    StructuralWriteError,
)
from .symmetric import SymmetricMatrix

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AbstractMatrix",
    "DiagonalMatrix",
    "DimensionError",
    "DomainError",
    "IndexBoundsError",
    "Matrix",
    "MatrixError",
    "NotPositiveDefiniteError",
    "NotSquareError",
    "NotSymmetricError",
    "NotVectorError",
    "SingularMatrixError",
    "StructuralWriteError",
    "SymmetricMatrix",
    "identity_matrix",
]
