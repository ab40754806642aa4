"""Structure of the information (Hessian) matrix of a pose graph."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import numpy as np
import scipy.sparse

from slamkit.sparse import Triplet, from_triplets

DEFAULT_LOOP_CLOSURES = ((0, 3), (0, 4))


def pose_graph_hessian(
    num_poses: int = 5,
    pose_dim: int = 3,
    loop_closures: Iterable[tuple[int, int]] = DEFAULT_LOOP_CLOSURES,
) -> scipy.sparse.csc_matrix:
    """Block Hessian with per-pose diagonal blocks and loop-closure couplings."""
    if num_poses <= 0 or pose_dim <= 0:
        raise ValueError("num_poses and pose_dim must be positive")
    closures = [(int(i), int(j)) for i, j in loop_closures]
    for i, j in closures:
        if not (0 <= i < num_poses and 0 <= j < num_poses):
            raise ValueError(f"loop closure ({i}, {j}) references an unknown pose")

    def entries() -> Iterator[Triplet]:
        for pose in range(num_poses):
            base = pose * pose_dim
            for r in range(pose_dim):
                for c in range(pose_dim):
                    yield Triplet(base + r, base + c, 10.0 if r == c else 0.1)
        for i, j in closures:
            base_i, base_j = i * pose_dim, j * pose_dim
            for r in range(pose_dim):
                for c in range(pose_dim):
                    value = -2.0 if r == c else -0.05
                    yield Triplet(base_i + r, base_j + c, value)
                    yield Triplet(base_j + r, base_i + c, value)
                    yield Triplet(base_i + r, base_i + c, -value)
                    yield Triplet(base_j + r, base_j + c, -value)

    total = num_poses * pose_dim
    return from_triplets(total, total, entries())


def sparsity(matrix) -> float:
    """Percentage of entries that are not stored."""
    sparse = scipy.sparse.csc_matrix(matrix)
    total = sparse.shape[0] * sparse.shape[1]
    if total == 0:
        raise ValueError("matrix has no entries")
    return 100.0 * (1.0 - sparse.nnz / total)


def sparsity_pattern(matrix, tolerance: float = 1e-10) -> list[str]:
    """One line per row: '*' where |value| exceeds ``tolerance``, '.' elsewhere."""
    if scipy.sparse.issparse(matrix):
        dense = matrix.toarray()
    else:
        dense = np.asarray(matrix, dtype=float)
    if dense.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got shape {dense.shape}")
    return ["".join("*" if abs(v) > tolerance else "." for v in row) for row in dense]