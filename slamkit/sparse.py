"""Sparse matrix construction, inspection and block assembly."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import NamedTuple, Optional, Union

import numpy as np
import scipy.sparse
from numpy.typing import ArrayLike

BYTES_PER_DOUBLE = 8
MEGABYTE = 1024 * 1024


class Triplet(NamedTuple):
    """One (row, col, value) entry used to build a sparse matrix."""

    row: int
    col: int
    value: float


def storage_megabytes(size: int, nonzeros_per_row: Optional[int] = None) -> float:
    """Memory in MB for a square ``size`` matrix of doubles.

    With ``nonzeros_per_row`` unset the dense storage is returned, otherwise the
    storage of that many values per row.
    """
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    per_row = size if nonzeros_per_row is None else nonzeros_per_row
    if per_row < 0:
        raise ValueError(f"nonzeros_per_row must be non-negative, got {per_row}")
    return size * per_row * float(BYTES_PER_DOUBLE) / MEGABYTE


def from_triplets(
    rows: int, cols: int, triplets: Iterable[tuple[int, int, float]]
) -> scipy.sparse.csc_matrix:
    """Build a compressed column matrix; duplicate entries are summed."""
    if rows < 0 or cols < 0:
        raise ValueError(f"matrix dimensions must be non-negative, got {rows}x{cols}")
    row_index: list[int] = []
    col_index: list[int] = []
    values: list[float] = []
    for row, col, value in triplets:
        if not (0 <= row < rows and 0 <= col < cols):
            raise IndexError(
                f"entry ({row}, {col}) lies outside a {rows}x{cols} matrix"
            )
        row_index.append(int(row))
        col_index.append(int(col))
        values.append(float(value))
    coo = scipy.sparse.coo_matrix(
        (
            np.array(values, dtype=float),
            (np.array(row_index, dtype=int), np.array(col_index, dtype=int)),
        ),
        shape=(rows, cols),
    )
    matrix = coo.tocsc()
    matrix.sum_duplicates()
    matrix.sort_indices()
    return matrix


def tridiagonal(
    size: int, diagonal: float = 4.0, off_diagonal: float = -1.0
) -> scipy.sparse.csc_matrix:
    """Symmetric tridiagonal matrix with constant diagonals."""
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")

    def entries() -> Iterator[Triplet]:
        for i in range(size):
            yield Triplet(i, i, diagonal)
            if i > 0:
                yield Triplet(i, i - 1, off_diagonal)
                yield Triplet(i - 1, i, off_diagonal)

    return from_triplets(size, size, entries())


def fill_ratio(matrix) -> float:
    """Percentage of entries that are stored."""
    sparse = scipy.sparse.csc_matrix(matrix)
    total = sparse.shape[0] * sparse.shape[1]
    if total == 0:
        raise ValueError("matrix has no entries")
    return 100.0 * sparse.nnz / total


def iter_nonzeros(matrix) -> Iterator[tuple[int, int, float]]:
    """Yield (row, col, value) for each stored entry, column by column."""
    sparse = scipy.sparse.csc_matrix(matrix, copy=True)
    sparse.sort_indices()
    for col in range(sparse.shape[1]):
        start, end = sparse.indptr[col], sparse.indptr[col + 1]
        for row, value in zip(sparse.indices[start:end], sparse.data[start:end]):
            yield int(row), col, float(value)


def assemble_blocks(
    blocks: Mapping[tuple[int, int], ArrayLike],
    size: Union[int, tuple[int, int]],
    tolerance: float = 1e-10,
) -> scipy.sparse.csc_matrix:
    """Place dense blocks at (row offset, col offset), skipping near-zero entries."""
    rows, cols = (size, size) if isinstance(size, int) else size

    def entries() -> Iterator[Triplet]:
        for (row_offset, col_offset), block in blocks.items():
            dense = np.asarray(block, dtype=float)
            if dense.ndim != 2:
                raise ValueError(f"block must be 2-D, got shape {dense.shape}")
            for (i, j), value in np.ndenumerate(dense):
                if abs(value) > tolerance:
                    yield Triplet(row_offset + i, col_offset + j, float(value))

    return from_triplets(rows, cols, entries())