"""Robust cost kernels and synthetic bundle-adjustment observations."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike

from slamkit.jacobians import PinholeCamera

DEFAULT_RESIDUALS = (0.1, 0.5, 1.0, 2.0, 5.0, 10.0)


def squared(r: float) -> float:
    """Plain least-squares cost r^2 / 2."""
    return 0.5 * r * r


def huber(r: float, delta: float = 1.0) -> float:
    """Quadratic for |r| <= delta, linear beyond."""
    if not delta > 0.0:
        raise ValueError(f"delta must be positive, got {delta}")
    abs_r = abs(r)
    if abs_r <= delta:
        return 0.5 * r * r
    return delta * (abs_r - 0.5 * delta)


def cauchy(r: float, c: float = 1.0) -> float:
    """Cauchy kernel c^2 log(1 + (r/c)^2) / 2."""
    if not c > 0.0:
        raise ValueError(f"c must be positive, got {c}")
    return c * c * math.log(1.0 + (r / c) ** 2) / 2.0


def cost_table(
    residuals: Iterable[float] = DEFAULT_RESIDUALS,
) -> list[tuple[float, float, float, float]]:
    """Rows of (residual, squared, huber(1), cauchy(1))."""
    return [(r, squared(r), huber(r, 1.0), cauchy(r, 1.0)) for r in residuals]


def simulate_observations(
    camera: PinholeCamera,
    rotation: ArrayLike,
    translation: ArrayLike,
    points: Sequence[ArrayLike],
) -> list[np.ndarray]:
    """Project world points through the pose (R, t) into pixel observations."""
    r = np.asarray(rotation, dtype=float)
    if r.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {r.shape}")
    t = np.asarray(translation, dtype=float).reshape(-1)
    if t.shape != (3,):
        raise ValueError(f"translation must have 3 components, got shape {t.shape}")
    observations = []
    for point in points:
        p = np.asarray(point, dtype=float).reshape(-1)
        if p.shape != (3,):
            raise ValueError(f"point must have 3 components, got shape {p.shape}")
        observations.append(camera.project(r @ p + t))
    return observations