"""Matrix decompositions: SVD, QR, Cholesky, LU and eigen-decompositions."""

from __future__ import annotations

import warnings
from dataclasses import dataclass

import numpy as np
import scipy.linalg
from numpy.typing import ArrayLike

DEFAULT_THRESHOLD = 1e-10


class NotPositiveDefiniteError(ValueError):
    """Raised when a Cholesky factorisation meets a non positive-definite matrix."""


@dataclass(frozen=True)
class SvdResult:
    """Full singular value decomposition A = U diag(s) V^T."""

    u: np.ndarray
    singular_values: np.ndarray
    v: np.ndarray

    def reconstruct(self) -> np.ndarray:
        """Rebuild the decomposed matrix from its factors."""
        rows, cols = self.u.shape[0], self.v.shape[0]
        sigma = np.zeros((rows, cols))
        k = len(self.singular_values)
        sigma[:k, :k] = np.diag(self.singular_values)
        return self.u @ sigma @ self.v.T


def _matrix(value: ArrayLike) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got shape {matrix.shape}")
    return matrix


def _square(value: ArrayLike) -> np.ndarray:
    matrix = _matrix(value)
    if matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {matrix.shape}")
    return matrix


def svd(matrix: ArrayLike) -> SvdResult:
    """Full SVD; singular values are in decreasing order."""
    u, s, vt = np.linalg.svd(_matrix(matrix), full_matrices=True)
    return SvdResult(u=u, singular_values=s, v=vt.T)


def matrix_rank(matrix: ArrayLike, threshold: float = DEFAULT_THRESHOLD) -> int:
    """Count singular values above ``threshold``."""
    values = np.linalg.svd(_matrix(matrix), compute_uv=False)
    return int(np.count_nonzero(values > threshold))


def pseudo_inverse(
    matrix: ArrayLike, threshold: float = DEFAULT_THRESHOLD
) -> np.ndarray:
    """Moore-Penrose pseudo-inverse, dropping singular values at or below ``threshold``."""
    u, s, vt = np.linalg.svd(_matrix(matrix), full_matrices=False)
    inverted = np.zeros_like(s)
    keep = s > threshold
    inverted[keep] = 1.0 / s[keep]
    return vt.T @ np.diag(inverted) @ u.T


def thin_qr(matrix: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """Householder QR returning Q (m x n, orthonormal columns) and R (n x n, upper)."""
    q, r = np.linalg.qr(_matrix(matrix), mode="reduced")
    return q, r


def cholesky(matrix: ArrayLike) -> np.ndarray:
    """Return lower-triangular L with A = L L^T."""
    try:
        return np.linalg.cholesky(_square(matrix))
    except np.linalg.LinAlgError as exc:
        raise NotPositiveDefiniteError("matrix is not positive definite") from exc


def cholesky_solve(matrix: ArrayLike, rhs: ArrayLike) -> np.ndarray:
    """Solve A x = b for symmetric positive-definite A using Cholesky."""
    try:
        factor = scipy.linalg.cho_factor(_square(matrix), lower=True)
    except np.linalg.LinAlgError as exc:
        raise NotPositiveDefiniteError("matrix is not positive definite") from exc
    return scipy.linalg.cho_solve(factor, np.asarray(rhs, dtype=float))


def _lu_factor(matrix: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", scipy.linalg.LinAlgWarning)
        return scipy.linalg.lu_factor(_square(matrix))


def lu_solve(matrix: ArrayLike, rhs: ArrayLike) -> np.ndarray:
    """Solve A X = B with partial-pivoting LU; B may have several columns."""
    lu, piv = _lu_factor(matrix)
    if np.any(np.diag(lu) == 0.0):
        raise np.linalg.LinAlgError("matrix is singular")
    return scipy.linalg.lu_solve((lu, piv), np.asarray(rhs, dtype=float))


def lu_determinant(matrix: ArrayLike) -> float:
    """Determinant computed from the partial-pivoting LU factors."""
    lu, piv = _lu_factor(matrix)
    swaps = int(np.count_nonzero(piv != np.arange(len(piv))))
    sign = -1.0 if swaps % 2 else 1.0
    return float(sign * np.prod(np.diag(lu)))


def symmetric_eigen(matrix: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """Eigenvalues (ascending) and column eigenvectors of a symmetric matrix."""
    return np.linalg.eigh(_square(matrix))


def general_eigenvalues(matrix: ArrayLike) -> np.ndarray:
    """Complex eigenvalues of a general square matrix."""
    return np.linalg.eigvals(_square(matrix)).astype(complex)