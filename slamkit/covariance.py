"""Covariance propagation, information matrices and pose accumulation."""

from __future__ import annotations

import operator
from collections.abc import Iterable
from itertools import accumulate

import numpy as np
from numpy.typing import ArrayLike

from slamkit.transform import Affine


def propagate_covariance(jacobian: ArrayLike, covariance: ArrayLike) -> np.ndarray:
    """Covariance J P J^T of y = f(x) when x has covariance P and J = df/dx."""
    j = np.asarray(jacobian, dtype=float)
    p = np.asarray(covariance, dtype=float)
    if j.ndim != 2:
        raise ValueError(f"jacobian must be 2-D, got shape {j.shape}")
    if p.shape != (j.shape[1], j.shape[1]):
        raise ValueError(
            f"covariance must be {j.shape[1]}x{j.shape[1]}, got shape {p.shape}"
        )
    return j @ p @ j.T


def information_matrix(covariance: ArrayLike) -> np.ndarray:
    """Inverse covariance; raises numpy.linalg.LinAlgError if singular."""
    p = np.asarray(covariance, dtype=float)
    if p.ndim != 2 or p.shape[0] != p.shape[1]:
        raise ValueError(f"covariance must be square, got shape {p.shape}")
    return np.linalg.inv(p)


def accumulate_trajectory(start: Affine, deltas: Iterable[Affine]) -> list[Affine]:
    """Poses start, start*d1, start*d1*d2, ... with each delta in the body frame."""
    return list(accumulate(deltas, operator.mul, initial=start))