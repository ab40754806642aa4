"""Multi-view geometry: projection, triangulation and linear pose estimation."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np
from numpy.typing import ArrayLike


def _projection(value: ArrayLike) -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.shape != (3, 4):
        raise ValueError(f"projection must be 3x4, got shape {matrix.shape}")
    return matrix


def projection_matrix(rotation: ArrayLike, translation: ArrayLike) -> np.ndarray:
    """Pinhole projection [R | -R t] for a camera at ``translation``."""
    r = np.asarray(rotation, dtype=float)
    if r.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {r.shape}")
    t = np.asarray(translation, dtype=float).reshape(-1)
    if t.shape != (3,):
        raise ValueError(f"translation must have 3 components, got shape {t.shape}")
    return np.hstack([r, (-r @ t)[:, None]])


def project(projection: ArrayLike, point: ArrayLike) -> np.ndarray:
    """Project a 3D point to normalised image coordinates (u, v)."""
    p = _projection(projection)
    x = np.asarray(point, dtype=float).reshape(-1)
    if x.shape != (3,):
        raise ValueError(f"point must have 3 components, got shape {x.shape}")
    image = p @ np.append(x, 1.0)
    if image[2] == 0.0:
        raise ValueError("point lies on the camera plane and cannot be projected")
    return image[:2] / image[2]


def triangulate(observations: Iterable[tuple[ArrayLike, ArrayLike]]) -> np.ndarray:
    """Linear (DLT) triangulation from (projection, (u, v)) pairs."""
    rows = []
    for projection, uv in observations:
        p = _projection(projection)
        u, v = np.asarray(uv, dtype=float).reshape(-1)[:2]
        rows.append(u * p[2] - p[0])
        rows.append(v * p[2] - p[1])
    if len(rows) < 4:
        raise ValueError("triangulation needs at least two observations")
    _, _, vt = np.linalg.svd(np.array(rows))
    homo = vt[-1]
    if homo[3] == 0.0:
        raise ValueError("triangulated point is at infinity")
    return homo[:3] / homo[3]


def estimate_projection_dlt(
    points_world: Sequence[ArrayLike], points_2d: Sequence[ArrayLike]
) -> np.ndarray:
    """Estimate a 3x4 projection from 3D-2D matches, scaled so |r3| = 1.

    The overall sign is not determined.
    """
    world = np.asarray(points_world, dtype=float)
    image = np.asarray(points_2d, dtype=float)
    if world.ndim != 2 or world.shape[1] != 3:
        raise ValueError(f"world points must be Nx3, got shape {world.shape}")
    if image.shape != (world.shape[0], 2):
        raise ValueError(
            f"expected {world.shape[0]} image points of 2 components, "
            f"got shape {image.shape}"
        )
    if world.shape[0] < 6:
        raise ValueError("linear pose estimation needs at least six correspondences")

    rows = []
    for (x, y, z), (u, v) in zip(world, image):
        rows.append([x, y, z, 1, 0, 0, 0, 0, -u * x, -u * y, -u * z, -u])
        rows.append([0, 0, 0, 0, x, y, z, 1, -v * x, -v * y, -v * z, -v])
    _, _, vt = np.linalg.svd(np.array(rows), full_matrices=True)
    estimate = vt[-1].reshape(3, 4)
    scale = np.linalg.norm(estimate[2, :3])
    if scale == 0.0:
        raise ValueError("degenerate configuration")
    return estimate / scale