from __future__ import annotations

import math

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import connected_components


def ordered_product(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """
    Return A @ B accumulated term by term in increasing inner index.

    Every entry is ``((0 + a_i0 b_0j) + a_i1 b_1j) + ...``, the order of a
    plain triple loop, so results do not depend on the BLAS in use.
    Vectorised over (i, j); only the inner dimension is looped.
    """
    out = np.zeros((A.shape[0], B.shape[1]))
    with np.errstate(invalid="ignore", over="ignore"):
        for s in range(A.shape[1]):
            out += A[:, s, None] * B[None, s, :]
    return out


def ordered_self_product_upper(S: np.ndarray) -> np.ndarray:
    """
    Product of a symmetric array by itself, computed on the upper triangle.

    Zero factors are skipped rather than multiplied. The lower triangle of
    the returned (n × n) array is mirrored from the upper one.
    """
    n = S.shape[0]
    iu, ju = np.triu_indices(n)
    acc = np.zeros(iu.size)
    with np.errstate(invalid="ignore", over="ignore"):
        for s in range(n):
            left = S[iu, s]
            right = S[s, ju]
            keep = (left != 0.0) & (right != 0.0)
            acc[keep] = acc[keep] + left[keep] * right[keep]
    out = np.zeros((n, n))
    out[iu, ju] = acc
    out[ju, iu] = acc
    return out


def absorbing_multiply(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """Elementwise product where a zero on either side yields exactly 0."""
    keep = (A != 0.0) & (B != 0.0)
    out = np.zeros(np.broadcast_shapes(A.shape, B.shape))
    with np.errstate(over="ignore", invalid="ignore"):
        out[keep] = A[keep] * B[keep]
    return out


def is_symmetric_array(a: np.ndarray, tol: float, near_zero: float) -> bool:
    """
    Pairwise ratio test of mirrored entries.

    For each pair above the diagonal, ``a[j, i]`` below ``near_zero`` in
    absolute value requires ``a[i, j]`` to be as small; otherwise the ratio
    ``a[i, j] / a[j, i]`` must lie within ``tol`` of 1. NaN ratios pass.
    """
    if a.shape[0] != a.shape[1]:
        return False
    iu, ju = np.triu_indices(a.shape[0], k=1)
    upper = a[iu, ju]
    lower = a[ju, iu]
    tiny = np.abs(lower) < near_zero
    if np.any(np.abs(upper[tiny]) > near_zero):
        return False
    with np.errstate(divide="ignore", invalid="ignore"):
        ratio = upper[~tiny] / lower[~tiny]
    return not np.any(np.abs(ratio - 1.0) > tol)


def block_configuration(a: np.ndarray) -> list[list[int]]:
    """
    Partition the indices of a square array into independent diagonal blocks.

    Two indices share a block when they are linked, directly or through
    other indices, by a nonzero off-diagonal entry. Each block is sorted
    and blocks are ordered by their smallest index.

    Returns
    -------
    blocks : list of list of int
    """
    pattern = (a != 0.0) | (a.T != 0.0)
    np.fill_diagonal(pattern, False)
    n_comp, labels = connected_components(
        csr_matrix(pattern), directed=False, return_labels=True
    )
    blocks = [np.flatnonzero(labels == c).tolist() for c in range(n_comp)]
    blocks.sort(key=lambda b: b[0])
    return blocks


def pack_upper(a: np.ndarray) -> list[np.ndarray]:
    """Packed upper-triangular rows: row i holds a[i, i:]."""
    return [np.array(a[i, i:], dtype=np.float64) for i in range(a.shape[0])]


def unpack_upper(rows: list[np.ndarray]) -> np.ndarray:
    """Full symmetric array from packed upper-triangular rows."""
    n = len(rows)
    out = np.empty((n, n))
    for i, row in enumerate(rows):
        out[i, i:] = row
        out[i:, i] = row
    return out


def triangular_root(count: int) -> int | None:
    """Return n such that n (n + 1) / 2 == count, or None if there is none."""
    n = int(round((-1.0 + math.sqrt(1.0 + 8.0 * count)) * 0.5))
    if n >= 1 and n * (n + 1) // 2 == count:
        return n
    return None


def isserlis(S: np.ndarray) -> np.ndarray:
    """
    Fourth-moment matrix of a centred Gaussian vector with covariance S.

    Entry ``(i*n + k, j*n + l)`` equals
    ``S[i,j] S[k,l] + S[i,k] S[j,l] + S[i,l] S[j,k]``.
    """
    n = S.shape[0]
    t = (
        np.einsum("ij,kl->ikjl", S, S)
        + np.einsum("ik,jl->ikjl", S, S)
        + np.einsum("il,jk->ikjl", S, S)
    )
    return t.reshape(n * n, n * n)
