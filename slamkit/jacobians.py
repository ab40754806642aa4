"""Analytic and numerical Jacobians for point transforms and pinhole projection."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from slamkit.linalg import skew
from slamkit.rotation import AngleAxis, unit_axis

DEFAULT_EPS = 1e-6


def _vector3(value: ArrayLike, name: str) -> np.ndarray:
    vector = np.asarray(value, dtype=float).reshape(-1)
    if vector.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {vector.shape}")
    return vector


def _matrix3(value: ArrayLike, name: str) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.shape != (3, 3):
        raise ValueError(f"{name} must be 3x3, got shape {matrix.shape}")
    return matrix


def _check_eps(eps: float) -> None:
    if not eps > 0.0:
        raise ValueError(f"eps must be positive, got {eps}")


def example_function(x: float, y: float) -> np.ndarray:
    """f(x, y) = [x^2 + y, x y, sin x]."""
    return np.array([x * x + y, x * y, np.sin(x)])


def example_jacobian(x: float, y: float) -> np.ndarray:
    """Analytic 3x2 Jacobian of :func:`example_function`."""
    return np.array(
        [
            [2.0 * x, 1.0],
            [y, x],
            [np.cos(x), 0.0],
        ]
    )


def numerical_jacobian(
    function: Callable[[np.ndarray], ArrayLike],
    point: ArrayLike,
    eps: float = DEFAULT_EPS,
) -> np.ndarray:
    """Central-difference Jacobian of ``function`` (vector in, vector out) at ``point``."""
    _check_eps(eps)
    x = np.asarray(point, dtype=float).reshape(-1)
    if x.size == 0:
        raise ValueError("point has no components")
    columns = []
    for step in eps * np.eye(x.size):
        plus = np.asarray(function(x + step), dtype=float).reshape(-1)
        minus = np.asarray(function(x - step), dtype=float).reshape(-1)
        columns.append((plus - minus) / (2.0 * eps))
    return np.column_stack(columns)


def point_pose_jacobian(rotation: ArrayLike, point: ArrayLike) -> np.ndarray:
    """3x6 Jacobian of R p + t with respect to [dt, dw], dw a right perturbation."""
    r = _matrix3(rotation, "rotation")
    p = _vector3(point, "point")
    return np.hstack([np.eye(3), -r @ skew(p)])


def numerical_point_pose_jacobian(
    rotation: ArrayLike,
    translation: ArrayLike,
    point: ArrayLike,
    eps: float = DEFAULT_EPS,
) -> np.ndarray:
    """Forward-difference version of :func:`point_pose_jacobian`."""
    _check_eps(eps)
    r = _matrix3(rotation, "rotation")
    t = _vector3(translation, "translation")
    p = _vector3(point, "point")
    base = r @ p + t

    columns = [(r @ p + t + step - base) / eps for step in eps * np.eye(3)]
    for axis in range(3):
        perturbed = r @ AngleAxis(eps, unit_axis(axis)).to_matrix()
        columns.append((perturbed @ p + t - base) / eps)
    return np.column_stack(columns)


@dataclass(frozen=True)
class PinholeCamera:
    """Pinhole intrinsics: focal lengths and principal point in pixels."""

    fx: float = 500.0
    fy: float = 500.0
    cx: float = 320.0
    cy: float = 240.0

    def project(self, point: ArrayLike) -> np.ndarray:
        """Pixel coordinates of a point given in the camera frame."""
        x, y, z = _vector3(point, "point")
        if z == 0.0:
            raise ValueError("point lies on the camera plane and cannot be projected")
        return np.array([self.fx * x / z + self.cx, self.fy * y / z + self.cy])

    def projection_jacobian(self, point: ArrayLike) -> np.ndarray:
        """2x3 Jacobian of :meth:`project` with respect to the camera-frame point."""
        x, y, z = _vector3(point, "point")
        if z == 0.0:
            raise ValueError("point lies on the camera plane and cannot be projected")
        return np.array(
            [
                [self.fx / z, 0.0, -self.fx * x / (z * z)],
                [0.0, self.fy / z, -self.fy * y / (z * z)],
            ]
        )

    def reprojection_jacobians(
        self, rotation: ArrayLike, translation: ArrayLike, point_world: ArrayLike
    ) -> tuple[np.ndarray, np.ndarray]:
        """Jacobians of the projected pixel w.r.t. the pose (2x6) and the world point (2x3)."""
        r = _matrix3(rotation, "rotation")
        t = _vector3(translation, "translation")
        p = _vector3(point_world, "point_world")
        j_proj = self.projection_jacobian(r @ p + t)
        return j_proj @ point_pose_jacobian(r, p), j_proj @ r