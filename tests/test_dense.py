import copy

import numpy as np
import pytest

from statmatrix import (
    DiagonalMatrix,
    DimensionError,
    DomainError,
    IndexBoundsError,
    Matrix,
    NotPositiveDefiniteError,
    NotSquareError,
    NotVectorError,
    SingularMatrixError,
    SymmetricMatrix,
    identity_matrix,
)


def test_multiplication_of_sequences():
    m1 = Matrix.sequence(2, 2, 1, 1)
    m2 = Matrix.sequence(2, 2, 2, 1)
    product = m1.multiply(m2)
    assert product.get(0, 0) == 1 * 2 + 2 * 4
    assert product.get(0, 1) == 1 * 3 + 2 * 5
    assert product.get(1, 0) == 3 * 2 + 4 * 4
    assert product.get(1, 1) == 3 * 3 + 4 * 5


def test_matmul_matches_numpy():
    rng = np.random.default_rng(0)
    A = rng.standard_normal((4, 3))
    B = rng.standard_normal((3, 5))
    got = Matrix.from_array(A) @ Matrix.from_array(B)
    assert got.shape == (4, 5)
    assert np.allclose(got.to_array(), A @ B, rtol=1e-12, atol=1e-12)


def test_column_vector_is_stored_as_single_row():
    v = Matrix(10, 1)
    assert v._data.shape == (1, 10)
    v.set(7, 0, 3.5)
    assert v.get(7, 0) == 3.5
    assert v.to_array().shape == (10, 1)
    assert v.to_array()[7, 0] == 3.5
    assert v.is_column_vector()


def test_column_vector_equal_to_itself_and_to_copy():
    m1 = Matrix.sequence(10, 1, 1, 10)
    m2 = Matrix.sequence(10, 1, 1, 10)
    assert m1 == m1
    assert m1 == m2
    assert m1.get(9, 0) == 91.0


def test_to_array_round_trip():
    rng = np.random.default_rng(1)
    A = rng.standard_normal((9, 9))
    m = Matrix.from_array(A)
    arr = m.to_array()
    arr[0, 0] = 1e6  # copy, not a view
    assert Matrix.from_array(m.to_array()) == m
    assert m.get(0, 0) == A[0, 0]
    assert np.array_equal(np.asarray(m), A)


def test_from_values_builds_column_vector():
    v = Matrix.from_values([1.0, 2.0, 3.0])
    assert v.shape == (3, 1)
    assert Matrix.from_array(np.array([1.0, 2.0, 3.0])) == v


@pytest.mark.parametrize("rows,cols", [(0, 2), (2, 0), (-1, 3), (2.5, 2)])
def test_invalid_dimensions_raise(rows, cols):
    with pytest.raises(DimensionError):
        Matrix(rows, cols)


def test_invalid_buffers_raise():
    with pytest.raises(DimensionError, match="1D or 2D"):
        Matrix.from_array(np.zeros((2, 2, 2)))
    with pytest.raises(DimensionError):
        Matrix.from_array([])
    with pytest.raises(DimensionError):
        Matrix.from_array([[1.0, 2.0], [3.0]])


def test_index_bounds():
    m = Matrix(2, 2)
    with pytest.raises(IndexBoundsError):
        m.get(2, 0)
    with pytest.raises(IndexBoundsError):
        m[0, -1]
    with pytest.raises(IndexError):
        m.set(0, 5, 1.0)
    m[1, 0] = 4.0
    assert m[1, 0] == 4.0


def test_add_subtract_require_same_dimension():
    a = Matrix(2, 3)
    b = Matrix(3, 2)
    with pytest.raises(DimensionError, match="not of the same dimension"):
        a.add(b)
    with pytest.raises(DimensionError, match="not of the same dimension"):
        a - b


def test_multiply_requires_compatible_dimension():
    with pytest.raises(DimensionError, match="incompatible"):
        Matrix(2, 3).multiply(Matrix(2, 3))


def test_operators():
    A = np.array([[1.0, -2.0], [3.0, 4.0]])
    B = np.array([[0.5, 1.0], [2.0, -1.0]])
    a, b = Matrix.from_array(A), Matrix.from_array(B)
    assert np.array_equal((a + b).to_array(), A + B)
    assert np.array_equal((a - b).to_array(), A - B)
    assert np.array_equal((a + 1).to_array(), A + 1)
    assert np.array_equal((2 * a).to_array(), 2 * A)
    assert np.array_equal((a * 2).to_array(), 2 * A)
    assert np.array_equal((a * b).to_array(), A * B)
    assert np.array_equal((a / 2).to_array(), A / 2)
    assert np.array_equal((-a).to_array(), -A)
    assert np.array_equal((1 - a).to_array(), 1 - A)
    assert np.array_equal(abs(a).to_array(), np.abs(A))


def test_elementwise_multiply_zero_absorbs():
    a = Matrix.from_array([[0.0, 2.0], [3.0, 4.0]])
    b = Matrix.from_array([[np.inf, 1.0], [np.nan, 2.0]])
    out = a.elementwise_multiply(b)
    assert out.get(0, 0) == 0.0
    assert out.get(0, 1) == 2.0
    assert np.isnan(out.get(1, 0))
    assert out.get(1, 1) == 8.0


def test_elementwise_divide_follows_ieee():
    a = Matrix.from_array([[1.0, 0.0, -1.0]])
    b = Matrix.from_array([[0.0, 0.0, 2.0]])
    out = a.elementwise_divide(b)
    assert out.get(0, 0) == np.inf
    assert np.isnan(out.get(0, 1))
    assert out.get(0, 2) == -0.5


def test_elementwise_functions():
    A = np.array([[1.0, 2.0], [0.5, 3.0]])
    m = Matrix.from_array(A)
    assert np.allclose(m.exp().to_array(), np.exp(A))
    assert np.allclose(m.log().to_array(), np.log(A))
    assert np.allclose(m.elementwise_power(2.0).to_array(), A**2)
    assert np.allclose(m.pow_matrix(10.0).to_array(), 10.0**A)


def test_log_of_non_positive_raises():
    with pytest.raises(DomainError, match="smaller than or equal to 0"):
        Matrix.from_array([[1.0, 0.0]]).log()


def test_transpose():
    m = Matrix.sequence(2, 3, 0, 1)
    t = m.transpose()
    assert t.shape == (3, 2)
    assert np.array_equal(t.to_array(), m.to_array().T)
    assert m.T == t


@pytest.mark.parametrize("n", [1, 2, 3, 5, 6, 7, 9])
def test_determinant_matches_numpy(n):
    rng = np.random.default_rng(n)
    A = rng.standard_normal((n, n)) + n * np.eye(n)
    det = Matrix.from_array(A).determinant()
    assert np.isclose(det, np.linalg.det(A), rtol=1e-9, atol=1e-12)


def test_determinant_requires_square():
    with pytest.raises(NotSquareError):
        Matrix(2, 3).determinant()


def test_lu_decomposition():
    rng = np.random.default_rng(3)
    A = rng.standard_normal((5, 5)) + 5 * np.eye(5)
    L, U = Matrix.from_array(A).lu_decomposition()
    L, U = L.to_array(), U.to_array()
    assert np.allclose(np.diag(L), 1.0)
    assert np.allclose(np.triu(L, 1), 0.0)
    assert np.allclose(np.tril(U, -1), 0.0)
    assert np.allclose(L @ U, A, rtol=1e-12, atol=1e-12)


def test_lu_zero_pivot_raises():
    with pytest.raises(SingularMatrixError, match="division by 0"):
        Matrix.from_array([[0.0, 1.0], [1.0, 0.0]]).lu_decomposition()
    # the last pivot is never used as a divisor
    L, U = Matrix.from_array([[1.0, 1.0], [1.0, 1.0]]).lu_decomposition()
    assert U.get(1, 1) == 0.0


def test_minor_cofactor_adjugate():
    A = np.array([[2.0, -1.0, 0.0], [1.0, 3.0, 2.0], [0.0, 1.0, 4.0]])
    m = Matrix.from_array(A)
    assert m.minor(0, 1) == 1.0 * 4.0 - 2.0 * 0.0
    assert m.cofactor(0, 1) == -m.minor(0, 1)
    adj = m.adjugate().to_array()
    assert np.allclose(adj @ A, m.determinant() * np.eye(3))


def test_minor_of_single_element_raises():
    with pytest.raises(DimensionError, match="only has one element"):
        Matrix(1, 1).minor(0, 0)
    with pytest.raises(IndexBoundsError):
        Matrix(3, 3).minor(3, 0)


def test_lower_cholesky_and_positive_definiteness():
    rng = np.random.default_rng(5)
    G = rng.standard_normal((4, 4))
    A = G @ G.T + 4 * np.eye(4)
    A = 0.5 * (A + A.T)
    L = Matrix.from_array(A).lower_cholesky().to_array()
    assert np.allclose(np.triu(L, 1), 0.0)
    assert np.allclose(L @ L.T, A, rtol=1e-10, atol=1e-10)
    assert Matrix.from_array(A).is_positive_definite()

    indefinite = Matrix.from_array([[1.0, 2.0], [2.0, 1.0]])
    with pytest.raises(NotPositiveDefiniteError, match="NaN"):
        indefinite.lower_cholesky()
    assert not indefinite.is_positive_definite()


def test_sub_matrix_bounds_are_inclusive():
    m = Matrix.sequence(3, 4, 0, 1)
    sub = m.sub_matrix(0, 1, 1, 2)
    assert np.array_equal(sub.to_array(), [[1.0, 2.0], [5.0, 6.0]])
    with pytest.raises(IndexBoundsError):
        m.sub_matrix(0, 3, 0, 0)


def test_select_sorts_a_copy_of_the_indices():
    m = Matrix.sequence(3, 3, 0, 1)
    rows = [2, 0]
    out = m.select(rows, [1])
    assert np.array_equal(out.to_array(), [[1.0], [7.0]])
    assert rows == [2, 0]
    unsorted = m.select(rows, [1], sort_indices=False)
    assert np.array_equal(unsorted.to_array(), [[7.0], [1.0]])
    assert m.select(None, []) == m
    with pytest.raises(IndexBoundsError):
        m.select([3], None)


def test_set_sub_matrix_in_place():
    m = Matrix(3, 3)
    m.set_sub_matrix(Matrix.from_array([[1.0, 2.0], [3.0, 4.0]]), 1, 1)
    assert np.array_equal(m.to_array(), [[0, 0, 0], [0, 1, 2], [0, 3, 4]])
    with pytest.raises(IndexBoundsError):
        m.set_sub_matrix(Matrix(2, 2), 2, 2)


def test_stack_and_repeat():
    a = Matrix.sequence(2, 2, 0, 1)
    b = Matrix.sequence(1, 2, 10, 1)
    assert np.array_equal(a.stack(b).to_array(), [[0, 1], [2, 3], [10, 11]])
    c = Matrix.from_values([7.0, 8.0])
    assert np.array_equal(a.stack(c, vertical=False).to_array(), [[0, 1, 7], [2, 3, 8]])
    with pytest.raises(DimensionError):
        a.stack(c)
    assert np.array_equal(b.repeat(2, 2).to_array(), np.tile([[10, 11]], (2, 2)))


def test_kronecker_matches_numpy():
    rng = np.random.default_rng(2)
    A = rng.standard_normal((2, 3))
    B = rng.standard_normal((3, 2))
    got = Matrix.from_array(A).kronecker(Matrix.from_array(B))
    assert np.array_equal(got.to_array(), np.kron(A, B))


def test_diag_block():
    a = Matrix.sequence(1, 2, 1, 1)
    b = Matrix.from_values([5.0, 6.0])
    out = a.diag_block(b)
    assert np.array_equal(out.to_array(), [[1, 2, 0], [0, 0, 5], [0, 0, 6]])


def test_element_lists():
    m = Matrix.sequence(2, 3, 0, 1)
    assert np.array_equal(m.get_elements([4, 1]).to_array(), [[1.0, 4.0]])
    assert np.array_equal(m.remove_elements([0, 5]).to_array(), [[1.0, 2.0, 3.0, 4.0]])

    m.set_elements([1, 3], Matrix.from_values([10.0, 30.0]))
    assert np.array_equal(m.to_array(), [[0, 10, 2], [30, 4, 5]])
    m.add_elements_at([0], Matrix.from_values([5.0]))
    assert m.get(0, 0) == 5.0

    with pytest.raises(NotVectorError):
        m.set_elements([0, 1], Matrix(1, 2))
    with pytest.raises(IndexBoundsError):
        m.get_elements([6])


def test_location_index():
    m = Matrix.from_array([[1.0, 2.0], [1.0000001, 3.0]])
    assert m.location_index(1.0) == [0, 2]


def test_scans_and_queries():
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    m = Matrix.from_array(A)
    assert m.trace() == 5.0
    assert np.array_equal(m.diagonal_vector().to_array(), [[1.0], [4.0]])
    assert m.sum_of_elements() == 10.0
    assert m.sum_of_elements((1, 1, 0, 1)) == 7.0
    with pytest.raises(IndexBoundsError):
        m.sum_of_elements((0, 2, 0, 1))
    assert m.number_of_elements() == 4
    assert m.any_element_larger_than(3.5)
    assert not m.any_element_larger_than(4.0)
    assert m.any_element_smaller_or_equal_to(1.0)
    assert not m.any_element_nan()
    assert m.any_element_different_from(1.0)
    assert not Matrix.from_array([[2.0 + 1e-13, 2.0]]).any_element_different_from(2.0)
    with pytest.raises(NotSquareError):
        Matrix(2, 3).trace()


def test_symmetry_and_diagonal_tests():
    near = Matrix.from_array([[1.0, 1.0], [1.00001, 1.0]])
    assert not near.is_symmetric()
    assert near.is_symmetric(tolerance=1e-4)
    assert not Matrix(2, 3).is_symmetric()
    assert Matrix.from_array([[1.0, 0.0], [0.0, 2.0]]).is_diagonal_matrix()
    assert not near.is_diagonal_matrix()


def test_in_place_utilities():
    m = Matrix.from_array([[-1.0, 0.5], [2.0, np.nan]])
    m.clamp_if_lower_than(0.0)
    m.clamp_if_higher_than(1.0)
    assert m.get(0, 0) == 0.0
    assert m.get(0, 1) == 0.5
    assert m.get(1, 0) == 1.0
    assert np.isnan(m.get(1, 1))
    m.reset()
    assert not m.any_element_different_from(0.0)

    v = Matrix.from_values([-2.0, 3.0])
    v.clamp_if_lower_than(0.0)
    assert np.array_equal(v.to_array(), [[0.0], [3.0]])


def test_to_diagonal_matrix():
    d = Matrix.sequence(1, 3, 1, 1).to_diagonal_matrix()
    assert isinstance(d, DiagonalMatrix)
    assert np.array_equal(d.to_array(), np.diag([1.0, 2.0, 3.0]))
    with pytest.raises(NotVectorError):
        Matrix(2, 2).to_diagonal_matrix()


def test_square_sym_rejects_bad_vectors():
    with pytest.raises(NotVectorError):
        Matrix(2, 2).square_sym()
    with pytest.raises(NotVectorError, match="upper triangle"):
        Matrix(5, 1).square_sym()


def test_identity_matrix():
    ident = identity_matrix(3)
    assert isinstance(ident, DiagonalMatrix)
    assert np.array_equal(ident.to_array(), np.eye(3))
    with pytest.raises(DimensionError):
        identity_matrix(0)


def test_clone_and_copy_are_independent():
    m = Matrix.sequence(2, 2, 0, 1)
    for other in (m.clone(), copy.copy(m), copy.deepcopy(m)):
        assert other == m
        other.set(0, 0, 99.0)
        assert m.get(0, 0) == 0.0


def test_repr_formats_values():
    m = Matrix.from_array([[1.5, 2000.0]])
    assert repr(m) == "{[1.50] [2.00e+03]}"


def test_repr_is_cut_after_5000_characters():
    text = repr(Matrix(1000, 10))
    lines = text.split("\n")
    assert text.endswith("...}")
    assert len(lines) == 47
    assert all(line.startswith("[0.00e+00]") for line in lines[1:-1])


def test_scalar_division_by_zero_follows_ieee():
    out = Matrix.from_array([[1.0, -2.0]]) / 0
    assert out.get(0, 0) == np.inf
    assert out.get(0, 1) == -np.inf


@pytest.mark.parametrize(
    "left, right",
    [
        (Matrix(2, 2), Matrix(2, 3)),
        (SymmetricMatrix(2), SymmetricMatrix(3)),
        (SymmetricMatrix(2), Matrix(3, 2)),
        (DiagonalMatrix(2), Matrix(3, 3)),
        (DiagonalMatrix(2), DiagonalMatrix(3)),
    ],
)
@pytest.mark.parametrize("op", ["elementwise_multiply", "elementwise_divide"])
def test_elementwise_shape_mismatch_raises(left, right, op):
    with pytest.raises(DimensionError, match=op):
        getattr(left, op)(right)
    with pytest.raises(DimensionError):
        getattr(right, op)(left)


def _loop_lu(A):
    n = A.shape[0]
    L, U = np.eye(n), np.zeros((n, n))
    for i in range(n):
        for j in range(i, n):
            tmp = 0.0
            for k in range(i):
                tmp += L[i, k] * U[k, j]
            U[i, j] = A[i, j] - tmp
        for j in range(i + 1, n):
            tmp = 0.0
            for k in range(i):
                tmp += L[j, k] * U[k, i]
            L[j, i] = (A[j, i] - tmp) / U[i, i]
    return L, U


def test_lu_and_cholesky_accumulate_in_index_order():
    rng = np.random.default_rng(11)
    G = rng.standard_normal((7, 7))
    A = G @ G.T + 7 * np.eye(7)
    L, U = Matrix.from_array(A).lu_decomposition()
    L_ref, U_ref = _loop_lu(A)
    assert np.array_equal(L.to_array(), L_ref)
    assert np.array_equal(U.to_array(), U_ref)

    chol = Matrix.from_array(A).lower_cholesky().to_array()
    ref = np.zeros((7, 7))
    for i in range(7):
        for j in range(i + 1):
            tmp = 0.0
            for k in range(j):
                tmp += ref[i, k] * ref[j, k]
            if i == j:
                ref[i, j] = np.sqrt(A[i, j] - tmp)
            else:
                ref[i, j] = 1.0 / ref[j, j] * (A[i, j] - tmp)
    assert np.array_equal(chol, ref)
