"""Rigid point-cloud alignment and essential-matrix construction."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike

from slamkit.linalg import skew


@dataclass(frozen=True)
class RigidAlignment:
    """Rotation and translation mapping source points onto target points."""

    rotation: np.ndarray
    translation: np.ndarray


def align_point_clouds(source: ArrayLike, target: ArrayLike) -> RigidAlignment:
    """Find R, t minimising |target - (R source + t)| for 3xN corresponding clouds."""
    p = np.asarray(source, dtype=float)
    q = np.asarray(target, dtype=float)
    if p.ndim != 2 or p.shape[0] != 3:
        raise ValueError(f"source must be 3xN, got shape {p.shape}")
    if p.shape != q.shape:
        raise ValueError(f"source shape {p.shape} differs from target shape {q.shape}")
    if p.shape[1] == 0:
        raise ValueError("point clouds are empty")

    centroid_p = p.mean(axis=1)
    centroid_q = q.mean(axis=1)
    h = (p - centroid_p[:, None]) @ (q - centroid_q[:, None]).T

    u, _, vt = np.linalg.svd(h)
    v = vt.T
    rotation = v @ u.T
    if np.linalg.det(rotation) < 0:
        v[:, 2] *= -1
        rotation = v @ u.T

    translation = centroid_q - rotation @ centroid_p
    return RigidAlignment(rotation=rotation, translation=translation)


def essential_matrix(rotation: ArrayLike, translation: ArrayLike) -> np.ndarray:
    """Return E = [t]_x R with the translation scaled to unit length."""
    r = np.asarray(rotation, dtype=float)
    if r.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {r.shape}")
    t = np.asarray(translation, dtype=float).reshape(-1)
    norm = np.linalg.norm(t)
    if norm > 0:
        t = t / norm
    return skew(t) @ r


def enforce_essential_constraint(essential: ArrayLike) -> np.ndarray:
    """Project a 3x3 matrix onto essential matrices with singular values (1, 1, 0)."""
    e = np.asarray(essential, dtype=float)
    if e.shape != (3, 3):
        raise ValueError(f"essential matrix must be 3x3, got shape {e.shape}")
    u, _, vt = np.linalg.svd(e)
    return u @ np.diag([1.0, 1.0, 0.0]) @ vt