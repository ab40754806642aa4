"""Direct and iterative solvers for sparse linear systems."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np
import scipy.linalg
import scipy.sparse
import scipy.sparse.linalg
from numpy.typing import ArrayLike

EPSILON = float(np.finfo(float).eps)


class FactorizationError(ValueError):
    """Raised when a sparse factorisation cannot be computed."""


@dataclass(frozen=True, eq=False)
class IterativeResult:
    """Outcome of an iterative solve."""

    solution: np.ndarray
    iterations: int
    error: float
    converged: bool


def _square_sparse(matrix) -> scipy.sparse.csc_matrix:
    sparse = scipy.sparse.csc_matrix(matrix, dtype=float)
    if sparse.shape[0] != sparse.shape[1]:
        raise ValueError(f"expected a square matrix, got shape {sparse.shape}")
    return sparse


def _rhs(rhs: ArrayLike, size: int) -> np.ndarray:
    b = np.asarray(rhs, dtype=float)
    if b.ndim not in (1, 2) or b.shape[0] != size:
        raise ValueError(
            f"right-hand side of shape {b.shape} does not match size {size}"
        )
    return b


def _lower_symmetric(sparse: scipy.sparse.csc_matrix) -> np.ndarray:
    """Dense symmetric matrix read from the lower triangle."""
    lower = scipy.sparse.tril(sparse).toarray()
    return lower + np.tril(lower, -1).T


def _ldlt(a: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Unpivoted L D L^T factorisation of a symmetric matrix."""
    n = a.shape[0]
    lower = np.eye(n)
    diag = np.zeros(n)
    for j in range(n):
        ld = lower[j, :j] * diag[:j]
        diag[j] = a[j, j] - lower[j, :j] @ ld
        if diag[j] == 0.0 or not np.isfinite(diag[j]):
            raise FactorizationError("zero pivot in LDLT factorisation")
        lower[j + 1 :, j] = (a[j + 1 :, j] - lower[j + 1 :, :j] @ ld) / diag[j]
    return lower, diag


def _ldlt_solve(lower: np.ndarray, diag: np.ndarray, b: np.ndarray) -> np.ndarray:
    y = scipy.linalg.solve_triangular(lower, b, lower=True, unit_diagonal=True)
    z = y / (diag if y.ndim == 1 else diag[:, None])
    return scipy.linalg.solve_triangular(lower.T, z, lower=False, unit_diagonal=True)


def sparse_cholesky_solve(matrix, rhs: ArrayLike) -> np.ndarray:
    """Solve A x = b for symmetric positive-definite A (lower triangle is read)."""
    sparse = _square_sparse(matrix)
    b = _rhs(rhs, sparse.shape[0])
    lower, diag = _ldlt(_lower_symmetric(sparse))
    if np.any(diag <= 0.0):
        raise FactorizationError("matrix is not positive definite")
    return _ldlt_solve(lower, diag, b)


def sparse_lu_solve(matrix, rhs: ArrayLike) -> np.ndarray:
    """Solve A x = b for a general square sparse matrix with LU."""
    sparse = _square_sparse(matrix)
    b = _rhs(rhs, sparse.shape[0])
    try:
        factor = scipy.sparse.linalg.splu(sparse)
    except RuntimeError as exc:
        raise FactorizationError("matrix is singular") from exc
    solution = factor.solve(b)
    if not np.all(np.isfinite(solution)):
        raise FactorizationError("matrix is singular")
    return solution


class SparseLDLT:
    """LDLT solver whose symbolic pattern can be reused across factorisations."""

    def __init__(self) -> None:
        self._pattern: Optional[tuple] = None
        self._factor: Optional[tuple[np.ndarray, np.ndarray]] = None

    @staticmethod
    def _pattern_of(sparse: scipy.sparse.csc_matrix) -> tuple:
        lower = scipy.sparse.csc_matrix(scipy.sparse.tril(sparse))
        lower.sum_duplicates()
        lower.sort_indices()
        return sparse.shape, lower.indptr.tobytes(), lower.indices.tobytes()

    def analyze_pattern(self, matrix) -> "SparseLDLT":
        """Record the sparsity structure; values are not used."""
        self._pattern = self._pattern_of(_square_sparse(matrix))
        self._factor = None
        return self

    def factorize(self, matrix) -> "SparseLDLT":
        """Compute the numeric factorisation for a matrix with the analysed pattern."""
        sparse = _square_sparse(matrix)
        if self._pattern is None:
            self._pattern = self._pattern_of(sparse)
        elif self._pattern_of(sparse) != self._pattern:
            raise ValueError("matrix pattern differs from the analysed pattern")
        self._factor = _ldlt(_lower_symmetric(sparse))
        return self

    def solve(self, rhs: ArrayLike) -> np.ndarray:
        """Solve with the current factorisation."""
        if self._factor is None:
            raise RuntimeError("factorize must be called before solve")
        lower, diag = self._factor
        return _ldlt_solve(lower, diag, _rhs(rhs, lower.shape[0]))


def _iterative_setup(matrix, rhs, max_iterations):
    sparse = scipy.sparse.csr_matrix(_square_sparse(matrix))
    b = np.asarray(rhs, dtype=float).reshape(-1)
    if b.shape[0] != sparse.shape[0]:
        raise ValueError(
            f"right-hand side of length {b.shape[0]} does not match size {sparse.shape[0]}"
        )
    limit = 2 * sparse.shape[1] if max_iterations is None else int(max_iterations)
    if limit < 0:
        raise ValueError(f"max_iterations must be non-negative, got {limit}")
    diagonal = sparse.diagonal()
    inverse_diag = np.ones_like(diagonal)
    nonzero = diagonal != 0.0
    inverse_diag[nonzero] = 1.0 / diagonal[nonzero]
    return sparse, b, limit, inverse_diag


def conjugate_gradient(
    matrix,
    rhs: ArrayLike,
    tolerance: float = EPSILON,
    max_iterations: Optional[int] = None,
) -> IterativeResult:
    """Jacobi-preconditioned conjugate gradient for symmetric positive-definite A.

    ``max_iterations`` defaults to twice the matrix size; ``error`` is |r| / |b|.
    """
    a, b, limit, inverse_diag = _iterative_setup(matrix, rhs, max_iterations)
    x = np.zeros_like(b)
    rhs_norm2 = float(b @ b)
    if rhs_norm2 == 0.0:
        return IterativeResult(x, 0, 0.0, True)
    threshold = max(tolerance * tolerance * rhs_norm2, np.finfo(float).tiny)
    residual = b.copy()
    residual_norm2 = float(residual @ residual)
    if residual_norm2 < threshold:
        return IterativeResult(x, 0, float(np.sqrt(residual_norm2 / rhs_norm2)), True)

    direction = inverse_diag * residual
    abs_new = float(residual @ direction)
    iterations = 0
    while iterations < limit:
        product = a @ direction
        alpha = abs_new / float(direction @ product)
        x += alpha * direction
        residual -= alpha * product
        residual_norm2 = float(residual @ residual)
        if residual_norm2 < threshold:
            break
        z = inverse_diag * residual
        abs_old, abs_new = abs_new, float(residual @ z)
        direction = z + (abs_new / abs_old) * direction
        iterations += 1

    return IterativeResult(
        solution=x,
        iterations=iterations,
        error=float(np.sqrt(residual_norm2 / rhs_norm2)),
        converged=residual_norm2 < threshold,
    )


def bicgstab(
    matrix,
    rhs: ArrayLike,
    tolerance: float = EPSILON,
    max_iterations: Optional[int] = None,
) -> IterativeResult:
    """Jacobi-preconditioned BiCGSTAB for general square A."""
    a, b, limit, inverse_diag = _iterative_setup(matrix, rhs, max_iterations)
    x = np.zeros_like(b)
    rhs_norm2 = float(b @ b)
    if rhs_norm2 == 0.0:
        return IterativeResult(x, 0, 0.0, True)

    residual = b.copy()
    shadow = residual.copy()
    shadow_norm2 = float(shadow @ shadow)
    rho = alpha = omega = 1.0
    v = np.zeros_like(b)
    p = np.zeros_like(b)
    tol2 = tolerance * tolerance * rhs_norm2
    eps2 = EPSILON * EPSILON
    iterations = 0
    restarts = 0

    while float(residual @ residual) > tol2 and iterations < limit:
        rho_old = rho
        rho = float(shadow @ residual)
        if abs(rho) < eps2 * shadow_norm2:
            residual = b - a @ x
            shadow = residual.copy()
            rho = shadow_norm2 = float(residual @ residual)
            if restarts == 0:
                iterations = 0
            restarts += 1
        beta = (rho / rho_old) * (alpha / omega)
        p = residual + beta * (p - omega * v)
        y = inverse_diag * p
        v = a @ y
        alpha = rho / float(shadow @ v)
        s = residual - alpha * v
        z = inverse_diag * s
        t = a @ z
        t_norm2 = float(t @ t)
        omega = float(t @ s) / t_norm2 if t_norm2 > 0.0 else 0.0
        x += alpha * y + omega * z
        residual = s - omega * t
        iterations += 1

    residual_norm2 = float(residual @ residual)
    return IterativeResult(
        solution=x,
        iterations=iterations,
        error=float(np.sqrt(residual_norm2 / rhs_norm2)),
        converged=residual_norm2 <= tol2,
    )