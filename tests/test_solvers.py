import numpy as np
import pytest

from slamkit.decompositions import NotPositiveDefiniteError, pseudo_inverse
from slamkit.solvers import (
    LeastSquaresMethod,
    SpdMethod,
    SquareMethod,
    condition_number,
    least_squares,
    minimum_norm_solution,
    residual_norm,
    rms_error,
    solve_spd,
    solve_square,
    weighted_least_squares,
)

A_SQUARE = np.array([[1.0, 2, 3], [4, 5, 6], [7, 8, 10]])
B_SQUARE = np.array([3.0, 3, 4])
SPD = np.array([[4.0, 2, 1], [2, 5, 2], [1, 2, 6]])
A_LINE = np.array([[1.0, 0], [1, 1], [1, 2], [1, 3]])
B_LINE = np.array([0.1, 2.1, 3.9, 6.2])


@pytest.mark.parametrize("method", list(SquareMethod))
def test_square_methods_solve_system(method):
    x = solve_square(A_SQUARE, B_SQUARE, method)
    assert residual_norm(A_SQUARE, x, B_SQUARE) < 1e-10


def test_square_methods_agree():
    reference = solve_square(A_SQUARE, B_SQUARE)
    for method in SquareMethod:
        np.testing.assert_allclose(
            solve_square(A_SQUARE, B_SQUARE, method), reference, atol=1e-10
        )


@pytest.mark.parametrize(
    "method", [SquareMethod.PARTIAL_PIV_LU, SquareMethod.FULL_PIV_LU]
)
def test_singular_square_raises(method):
    singular = np.array([[1.0, 2, 3], [4, 5, 6], [7, 8, 9]])
    with pytest.raises(np.linalg.LinAlgError):
        solve_square(singular, B_SQUARE, method)


def test_square_requires_square_matrix():
    with pytest.raises(ValueError):
        solve_square(A_LINE, B_LINE)


def test_rhs_shape_mismatch():
    with pytest.raises(ValueError):
        solve_square(A_SQUARE, np.ones(4))


@pytest.mark.parametrize("method", list(SpdMethod))
def test_spd_methods(method):
    b = np.array([1.0, 2, 3])
    x = solve_spd(SPD, b, method)
    assert residual_norm(SPD, x, b) < 1e-10


def test_llt_rejects_indefinite():
    indefinite = np.array([[1.0, 2], [2, 1]])
    with pytest.raises(NotPositiveDefiniteError):
        solve_spd(indefinite, np.ones(2), SpdMethod.LLT)


@pytest.mark.parametrize("method", list(LeastSquaresMethod))
def test_line_fit(method):
    c, m = least_squares(A_LINE, B_LINE, method)
    assert c == pytest.approx(0.06, abs=1e-9)
    assert m == pytest.approx(2.01, abs=1e-9)


def test_least_squares_residual_orthogonal_to_columns():
    x = least_squares(A_LINE, B_LINE)
    residual = A_LINE @ x - B_LINE
    np.testing.assert_allclose(A_LINE.T @ residual, 0.0, atol=1e-10)
    assert rms_error(A_LINE, x, B_LINE) == pytest.approx(
        np.sqrt(np.mean(residual**2))
    )


def test_minimum_norm_solution():
    a = np.array([[1.0, 2, 3, 4], [5, 6, 7, 8]])
    b = np.array([1.0, 2])
    x = minimum_norm_solution(a, b)
    np.testing.assert_allclose(a @ x, b, atol=1e-10)
    np.testing.assert_allclose(x, pseudo_inverse(a) @ b, atol=1e-10)


def test_weighted_with_unit_weights_matches_unweighted():
    x_w = weighted_least_squares(A_LINE, B_LINE, np.ones(4))
    np.testing.assert_allclose(x_w, least_squares(A_LINE, B_LINE), atol=1e-10)


def test_weighted_downweights_outlier():
    b = np.array([0.1, 2.1, 3.9, 100.0])
    unweighted = least_squares(A_LINE, b)
    weighted = weighted_least_squares(A_LINE, b, [1, 1, 1, 0.01])
    assert abs(weighted[1] - 2.0) < abs(unweighted[1] - 2.0)


def test_weights_length_mismatch():
    with pytest.raises(ValueError):
        weighted_least_squares(A_LINE, B_LINE, [1, 1])


def test_multiple_rhs():
    b = np.array([[1.0, 2], [3, 4], [5, 6]])
    x = solve_square(A_SQUARE, b)
    assert x.shape == (3, 2)
    np.testing.assert_allclose(A_SQUARE @ x, b, atol=1e-10)
    for column in range(2):
        np.testing.assert_allclose(
            x[:, column], solve_square(A_SQUARE, b[:, column]), atol=1e-12
        )


def test_condition_numbers():
    assert condition_number(np.eye(3)) == pytest.approx(1.0)
    ill = np.array([[1.0, 1, 1], [1, 1, 1.0001], [1, 1.0001, 1]])
    assert condition_number(ill) > 1e4
    assert condition_number(np.zeros((3, 3))) == float("inf")