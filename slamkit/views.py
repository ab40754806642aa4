"""Zero-copy matrix and vector views over existing flat buffers of doubles."""

from __future__ import annotations

import numpy as np


def _flat(buffer) -> np.ndarray:
    """One-dimensional view of ``buffer``.

    NumPy arrays and objects exposing a buffer of doubles are viewed in place;
    plain sequences such as lists are copied because they own no shared memory.
    """
    if isinstance(buffer, np.ndarray):
        return buffer.reshape(-1)
    try:
        view = memoryview(buffer)
    except TypeError:
        return np.asarray(buffer, dtype=float).reshape(-1)
    if view.format != "d":
        raise TypeError(f"buffer must hold doubles, got format {view.format!r}")
    return np.frombuffer(view, dtype=float)


def _check_dims(rows: int, cols: int) -> None:
    if rows < 0 or cols < 0:
        raise ValueError(f"dimensions must be non-negative, got {rows}x{cols}")


def _leading(flat: np.ndarray, needed: int) -> np.ndarray:
    if flat.size < needed:
        raise ValueError(f"buffer holds {flat.size} values but {needed} are needed")
    return flat[:needed]


def map_column_major(buffer, rows: int, cols: int) -> np.ndarray:
    """View the first rows*cols values as a matrix filled column by column."""
    _check_dims(rows, cols)
    return _leading(_flat(buffer), rows * cols).reshape((rows, cols), order="F")


def map_row_major(buffer, rows: int, cols: int) -> np.ndarray:
    """View the first rows*cols values as a matrix filled row by row."""
    _check_dims(rows, cols)
    return _leading(_flat(buffer), rows * cols).reshape((rows, cols), order="C")


def map_strided(buffer, stride: int, count: int) -> np.ndarray:
    """View ``count`` values taken every ``stride`` entries, starting at the first."""
    if stride < 1:
        raise ValueError(f"stride must be positive, got {stride}")
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    flat = _flat(buffer)
    if count == 0:
        return flat[:0]
    needed = (count - 1) * stride + 1
    return _leading(flat, needed)[::stride]