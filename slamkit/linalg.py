"""Dense matrix and vector helpers for rigid-body geometry."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike


def _vector3(value: ArrayLike, name: str = "vector") -> np.ndarray:
    vector = np.asarray(value, dtype=float).reshape(-1)
    if vector.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {vector.shape}")
    return vector


def _square(value: ArrayLike, size: int, name: str) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.shape != (size, size):
        raise ValueError(f"{name} must be {size}x{size}, got shape {matrix.shape}")
    return matrix


@dataclass(frozen=True)
class CoefficientStats:
    """Reductions over every coefficient of a matrix."""

    min: float
    max: float
    sum: float
    mean: float


def skew(v: ArrayLike) -> np.ndarray:
    """Return the skew-symmetric matrix [v]_x such that [v]_x @ w == v x w."""
    x, y, z = _vector3(v)
    return np.array(
        [
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ]
    )


def rotation_about_z(theta: float) -> np.ndarray:
    """Return the 3x3 rotation by ``theta`` radians about the Z axis."""
    c, s = np.cos(theta), np.sin(theta)
    return np.array(
        [
            [c, -s, 0.0],
            [s, c, 0.0],
            [0.0, 0.0, 1.0],
        ]
    )


def homogeneous(rotation: ArrayLike, translation: ArrayLike) -> np.ndarray:
    """Build the 4x4 homogeneous transform [R | t; 0 0 0 1]."""
    transform = np.eye(4)
    transform[:3, :3] = _square(rotation, 3, "rotation")
    transform[:3, 3] = _vector3(translation, "translation")
    return transform


def split_homogeneous(transform: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    """Extract the 3x3 linear block and the translation from a 4x4 transform."""
    matrix = _square(transform, 4, "transform")
    return matrix[:3, :3].copy(), matrix[:3, 3].copy()


def transform_point(
    rotation: ArrayLike, translation: ArrayLike, point: ArrayLike
) -> np.ndarray:
    """Apply p' = R p + t."""
    return _square(rotation, 3, "rotation") @ _vector3(point, "point") + _vector3(
        translation, "translation"
    )


def transform_homogeneous(transform: ArrayLike, point: ArrayLike) -> np.ndarray:
    """Apply a 4x4 transform to a 3D point through homogeneous coordinates."""
    matrix = _square(transform, 4, "transform")
    homo = np.append(_vector3(point, "point"), 1.0)
    return (matrix @ homo)[:3]


def coefficient_stats(matrix: ArrayLike) -> CoefficientStats:
    """Return the minimum, maximum, sum and mean of all coefficients."""
    values = np.asarray(matrix, dtype=float)
    if values.size == 0:
        raise ValueError("matrix has no coefficients")
    return CoefficientStats(
        min=float(values.min()),
        max=float(values.max()),
        sum=float(values.sum()),
        mean=float(values.mean()),
    )