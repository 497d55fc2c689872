"""Input validation helpers for statmatrix.

This module provides the shape, index and vector checks shared by the
matrix classes so that every operation reports violations with the same
exception types and comparable messages.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from .exceptions import (
    DimensionError,
    IndexBoundsError,
    NotSquareError,
    NotVectorError,
)


def _validate_dimensions(rows: Any, cols: Any) -> tuple[int, int]:
    """Validate and convert the row and column counts of a new matrix.

    Parameters
    ----------
    rows, cols : int-like
        Requested number of rows and columns.

    Returns
    -------
    tuple[int, int]
        Validated ``(rows, cols)``.

    Raises
    ------
    DimensionError
        If either count is not an integer or is smaller than 1.
    """
    try:
        r, c = int(rows), int(cols)
    except (TypeError, ValueError) as e:
        raise DimensionError(
            f"rows and cols must be integers, got {rows!r} and {cols!r}"
        ) from e

    if r != rows or c != cols:
        raise DimensionError(
            f"rows and cols must be integers, got {rows!r} and {cols!r}"
        )

    if r < 1 or c < 1:
        raise DimensionError(
            f"The number of rows or columns must be equal to or greater than 1, "
            f"got {r} x {c}."
        )
    return r, c


def _validate_buffer(data: Any, *, name: str = "data") -> np.ndarray:
    """Convert an explicit buffer to a 1D or 2D float64 array.

    Parameters
    ----------
    data : array-like
        Nested sequence or array of numbers.
    name : str, optional
        Variable name for error messages.

    Returns
    -------
    np.ndarray
        A fresh float64 array with one or two dimensions.

    Raises
    ------
    DimensionError
        If the buffer is ragged, empty or has more than two dimensions.
    """
    try:
        arr = np.array(data, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise DimensionError(f"{name} cannot be converted to numeric array: {e}") from e

    if arr.ndim not in (1, 2):
        raise DimensionError(
            f"{name} must be 1D or 2D, got {arr.ndim}D with shape {arr.shape}."
        )
    if arr.size == 0:
        raise DimensionError(f"{name} must contain at least one element.")
    return arr


def _check_index(i: int, j: int, shape: tuple[int, int]) -> None:
    """Raise ``IndexBoundsError`` unless ``(i, j)`` lies inside ``shape``."""
    rows, cols = shape
    if not 0 <= i < rows:
        raise IndexBoundsError(
            f"Row index {i} is out of bounds for a {rows} x {cols} matrix."
        )
    if not 0 <= j < cols:
        raise IndexBoundsError(
            f"Column index {j} is out of bounds for a {rows} x {cols} matrix."
        )


def _check_same_dimension(a, b, *, op: str) -> None:
    if a.shape != b.shape:
        raise DimensionError(
            f"{op}: this instance ({a.rows} x {a.cols}) and the matrix m "
            f"({b.rows} x {b.cols}) are not of the same dimension!"
        )


def _check_product_dimension(a, b, *, op: str = "multiply") -> None:
    if a.cols != b.rows:
        raise DimensionError(
            f"{op}: the matrix m ({b.rows} x {b.cols}) cannot multiply the current "
            f"matrix ({a.rows} x {a.cols}) for the number of rows is incompatible!"
        )


def _check_square(m, *, op: str) -> None:
    if not m.is_square():
        raise NotSquareError(f"{op}: the matrix ({m.rows} x {m.cols}) is not square!")


def _check_vector(m, *, op: str) -> None:
    if not m.is_row_vector() and not m.is_column_vector():
        raise NotVectorError(
            f"{op}: the input matrix ({m.rows} x {m.cols}) is not a vector!"
        )


def _validate_index_list(
    indices: Sequence[int] | None, size: int, *, name: str, sort: bool
) -> list[int]:
    """Validate a gather index list against the extent of one dimension.

    ``None`` or an empty list selects every index. The caller's list is
    never modified; sorting is applied to a copy.

    Raises
    ------
    IndexBoundsError
        If any index lies outside ``[0, size)``.
    """
    if indices is None or len(indices) == 0:
        return list(range(size))

    out = [int(k) for k in indices]
    for k in out:
        if not 0 <= k < size:
            raise IndexBoundsError(
                f"{name} contains index {k} outside [0, {size})."
            )
    if sort:
        out.sort()
    return out


def _validate_flat_indices(indices: Sequence[int], size: int) -> list[int]:
    """Validate row-major flat element indices."""
    out = [int(k) for k in indices]
    for k in out:
        if not 0 <= k < size:
            raise IndexBoundsError(
                f"Element index {k} is outside [0, {size})."
            )
    return out
