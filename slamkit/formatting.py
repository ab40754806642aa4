"""Text rendering of matrices and vectors, plus evenly spaced vectors."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike


@dataclass(frozen=True)
class MatrixFormat:
    """How a matrix is printed.

    Coefficients use ``precision`` significant digits in general notation. With
    ``align_columns`` every coefficient is padded on the left with ``fill`` to
    the width of the widest one.
    """

    precision: int = 6
    align_columns: bool = True
    coeff_separator: str = " "
    row_separator: str = "\n"
    row_prefix: str = ""
    row_suffix: str = ""
    matrix_prefix: str = ""
    matrix_suffix: str = ""
    fill: str = " "

    def __post_init__(self) -> None:
        if self.precision < 0:
            raise ValueError(f"precision must be non-negative, got {self.precision}")
        if len(self.fill) != 1:
            raise ValueError("fill must be a single character")

    def _real(self, value) -> str:
        return "%.*g" % (self.precision, float(value))

    def _coefficient(self, value, kind: str) -> str:
        if kind in "iub":
            return str(int(value))
        if kind == "c":
            return f"({self._real(value.real)},{self._real(value.imag)})"
        return self._real(value)

    def format(self, matrix: ArrayLike) -> str:
        """Render a matrix; a 1-D input is treated as a column vector."""
        m = np.asarray(matrix)
        if m.ndim == 0:
            m = m.reshape(1, 1)
        elif m.ndim == 1:
            m = m.reshape(-1, 1)
        elif m.ndim != 2:
            raise ValueError(f"expected at most 2 dimensions, got shape {m.shape}")
        kind = m.dtype.kind
        cells = [[self._coefficient(v, kind) for v in row] for row in m]
        width = 0
        if self.align_columns:
            width = max((len(c) for row in cells for c in row), default=0)
        rows = [
            self.row_prefix
            + self.coeff_separator.join(c.rjust(width, self.fill) for c in row)
            + self.row_suffix
            for row in cells
        ]
        return self.matrix_prefix + self.row_separator.join(rows) + self.matrix_suffix


DEFAULT_FORMAT = MatrixFormat()


def format_matrix(matrix: ArrayLike) -> str:
    """Render with the default format: space separated, aligned columns."""
    return DEFAULT_FORMAT.format(matrix)


def format_vector(vector: ArrayLike) -> str:
    """Render a vector on one line, as its transpose."""
    v = np.asarray(vector)
    if v.ndim > 2 or (v.ndim == 2 and 1 not in v.shape):
        raise ValueError(f"expected a vector, got shape {v.shape}")
    return DEFAULT_FORMAT.format(v.reshape(1, -1))


def linspaced(count: int, low: float, high: float) -> np.ndarray:
    """``count`` evenly spaced values from ``low`` to ``high`` inclusive.

    A single value is ``high``.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if count == 1:
        return np.array([float(high)])
    return np.linspace(float(low), float(high), count)