"""Dense linear-system solvers: square, SPD, least-squares and conditioning."""

from __future__ import annotations

import enum

import numpy as np
import scipy.linalg
from numpy.typing import ArrayLike

from slamkit.decompositions import cholesky_solve, lu_solve


class SquareMethod(enum.Enum):
    """Strategies for a general square system A x = b."""

    INVERSE = "inverse"
    PARTIAL_PIV_LU = "partial_piv_lu"
    FULL_PIV_LU = "full_piv_lu"
    COL_PIV_QR = "col_piv_qr"


class SpdMethod(enum.Enum):
    """Strategies for a symmetric positive-definite system."""

    LLT = "llt"
    LDLT = "ldlt"


class LeastSquaresMethod(enum.Enum):
    """Strategies for an overdetermined system min |A x - b|."""

    NORMAL_EQUATIONS = "normal_equations"
    QR = "qr"
    SVD = "svd"


def _matrix(value: ArrayLike) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got shape {matrix.shape}")
    return matrix


def _system(matrix: ArrayLike, rhs: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    a = _matrix(matrix)
    b = np.asarray(rhs, dtype=float)
    if b.ndim not in (1, 2) or b.shape[0] != a.shape[0]:
        raise ValueError(
            f"right-hand side of shape {b.shape} does not match matrix of shape {a.shape}"
        )
    return a, b


def _square_system(matrix: ArrayLike, rhs: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    a, b = _system(matrix, rhs)
    if a.shape[0] != a.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {a.shape}")
    return a, b


def _full_piv_lu_solve(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    n = a.shape[0]
    lu = a.copy()
    row_perm = np.arange(n)
    col_perm = np.arange(n)
    first_pivot = 0.0
    for k in range(n):
        block = np.abs(lu[k:, k:])
        i, j = divmod(int(np.argmax(block)), n - k)
        i += k
        j += k
        pivot = block.max()
        if k == 0:
            first_pivot = pivot
        if pivot == 0.0 or pivot <= np.finfo(float).eps * n * first_pivot:
            raise np.linalg.LinAlgError("matrix is singular")
        lu[[k, i]] = lu[[i, k]]
        row_perm[[k, i]] = row_perm[[i, k]]
        lu[:, [k, j]] = lu[:, [j, k]]
        col_perm[[k, j]] = col_perm[[j, k]]
        lu[k + 1 :, k] /= lu[k, k]
        lu[k + 1 :, k + 1 :] -= np.outer(lu[k + 1 :, k], lu[k, k + 1 :])
    y = scipy.linalg.solve_triangular(lu, b[row_perm], lower=True, unit_diagonal=True)
    z = scipy.linalg.solve_triangular(lu, y, lower=False)
    x = np.empty_like(z)
    x[col_perm] = z
    return x


def _col_piv_qr_solve(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    q, r, perm = scipy.linalg.qr(a, mode="economic", pivoting=True)
    diag = np.abs(np.diag(r))
    if diag.size == 0 or diag[0] == 0.0:
        rank = 0
    else:
        threshold = np.finfo(float).eps * diag.size * diag[0]
        rank = int(np.count_nonzero(diag > threshold))
    qtb = q.T @ b
    z = np.zeros((a.shape[1],) + b.shape[1:])
    if rank:
        z[:rank] = scipy.linalg.solve_triangular(r[:rank, :rank], qtb[:rank])
    x = np.empty_like(z)
    x[perm] = z
    return x


def _symmetric_solve(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return scipy.linalg.solve(a, b, assume_a="sym")


def solve_square(
    matrix: ArrayLike,
    rhs: ArrayLike,
    method: SquareMethod = SquareMethod.PARTIAL_PIV_LU,
) -> np.ndarray:
    """Solve a square system A x = b; raises LinAlgError if A is singular."""
    a, b = _square_system(matrix, rhs)
    method = SquareMethod(method)
    if method is SquareMethod.INVERSE:
        return np.linalg.inv(a) @ b
    if method is SquareMethod.PARTIAL_PIV_LU:
        return lu_solve(a, b)
    if method is SquareMethod.FULL_PIV_LU:
        return _full_piv_lu_solve(a, b)
    return _col_piv_qr_solve(a, b)


def solve_spd(
    matrix: ArrayLike, rhs: ArrayLike, method: SpdMethod = SpdMethod.LLT
) -> np.ndarray:
    """Solve a symmetric positive-definite system with Cholesky (LLT) or LDLT."""
    a, b = _square_system(matrix, rhs)
    if SpdMethod(method) is SpdMethod.LLT:
        return cholesky_solve(a, b)
    return _symmetric_solve(a, b)


def least_squares(
    matrix: ArrayLike,
    rhs: ArrayLike,
    method: LeastSquaresMethod = LeastSquaresMethod.QR,
) -> np.ndarray:
    """Return x minimising |A x - b|^2."""
    a, b = _system(matrix, rhs)
    method = LeastSquaresMethod(method)
    if method is LeastSquaresMethod.NORMAL_EQUATIONS:
        return _symmetric_solve(a.T @ a, a.T @ b)
    if method is LeastSquaresMethod.QR:
        return _col_piv_qr_solve(a, b)
    return np.linalg.lstsq(a, b, rcond=None)[0]


def minimum_norm_solution(matrix: ArrayLike, rhs: ArrayLike) -> np.ndarray:
    """Smallest-norm x minimising |A x - b|, via SVD; suits underdetermined systems."""
    a, b = _system(matrix, rhs)
    return np.linalg.lstsq(a, b, rcond=None)[0]


def weighted_least_squares(
    matrix: ArrayLike, rhs: ArrayLike, weights: ArrayLike
) -> np.ndarray:
    """Minimise (A x - b)^T W (A x - b) with W = diag(weights)."""
    a, b = _system(matrix, rhs)
    w = np.asarray(weights, dtype=float).reshape(-1)
    if w.shape[0] != a.shape[0]:
        raise ValueError(
            f"expected {a.shape[0]} weights, got {w.shape[0]}"
        )
    weighted = a.T * w
    return _symmetric_solve(weighted @ a, weighted @ b)


def residual_norm(matrix: ArrayLike, solution: ArrayLike, rhs: ArrayLike) -> float:
    """Norm of A x - b (Frobenius norm for several right-hand sides)."""
    a, b = _system(matrix, rhs)
    return float(np.linalg.norm(a @ np.asarray(solution, dtype=float) - b))


def rms_error(matrix: ArrayLike, solution: ArrayLike, rhs: ArrayLike) -> float:
    """Root-mean-square of the residual entries."""
    a, b = _system(matrix, rhs)
    residual = a @ np.asarray(solution, dtype=float) - b
    if residual.size == 0:
        raise ValueError("system has no equations")
    return float(np.sqrt(np.sum(residual**2) / residual.size))


def condition_number(matrix: ArrayLike) -> float:
    """Ratio of the largest to the smallest singular value; inf if singular."""
    values = np.linalg.svd(_matrix(matrix), compute_uv=False)
    if values.size == 0:
        raise ValueError("matrix is empty")
    if values[-1] == 0.0:
        return float("inf")
    return float(values[0] / values[-1])