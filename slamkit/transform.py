"""Affine and rigid-body (SE(3)) transformations."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import reduce
from typing import Union

import numpy as np
from numpy.typing import ArrayLike

from slamkit.rotation import AngleAxis, Quaternion

RotationLike = Union[Quaternion, AngleAxis, ArrayLike]


def _rotation_matrix(rotation: RotationLike) -> np.ndarray:
    if isinstance(rotation, (Quaternion, AngleAxis)):
        return rotation.to_matrix()
    matrix = np.asarray(rotation, dtype=float)
    if matrix.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {matrix.shape}")
    return matrix


@dataclass(frozen=True, eq=False)
class Affine:
    """Transform p -> linear @ p + translation."""

    linear: np.ndarray = field(default_factory=lambda: np.eye(3))
    translation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        linear = np.array(self.linear, dtype=float)
        if linear.shape != (3, 3):
            raise ValueError(f"linear part must be 3x3, got shape {linear.shape}")
        translation = np.array(self.translation, dtype=float).reshape(-1)
        if translation.shape != (3,):
            raise ValueError(
                f"translation must have 3 components, got shape {translation.shape}"
            )
        object.__setattr__(self, "linear", linear)
        object.__setattr__(self, "translation", translation)

    @classmethod
    def identity(cls):
        return cls()

    def matrix(self) -> np.ndarray:
        """The 4x4 homogeneous matrix."""
        result = np.eye(4)
        result[:3, :3] = self.linear
        result[:3, 3] = self.translation
        return result

    def rotate(self, rotation: RotationLike):
        """Apply ``rotation`` on the right: the translation is unchanged."""
        return type(self)(self.linear @ _rotation_matrix(rotation), self.translation)

    def pretranslate(self, offset: ArrayLike):
        """Add ``offset`` to the translation, expressed in the outer frame."""
        return type(self)(
            self.linear, self.translation + np.asarray(offset, dtype=float).reshape(-1)
        )

    def apply(self, point: ArrayLike) -> np.ndarray:
        p = np.asarray(point, dtype=float).reshape(-1)
        if p.shape != (3,):
            raise ValueError(f"point must have 3 components, got shape {p.shape}")
        return self.linear @ p + self.translation

    def inverse(self):
        """General inverse; raises numpy.linalg.LinAlgError if singular."""
        inv = np.linalg.inv(self.linear)
        return type(self)(inv, -inv @ self.translation)

    def __mul__(self, other):
        """Compose (``other`` applied first) or transform a point."""
        if isinstance(other, Affine):
            result_type = (
                Isometry
                if isinstance(self, Isometry) and isinstance(other, Isometry)
                else Affine
            )
            return result_type(
                self.linear @ other.linear,
                self.linear @ other.translation + self.translation,
            )
        return self.apply(other)


@dataclass(frozen=True, eq=False)
class Isometry(Affine):
    """Rigid-body transform whose linear part is a rotation."""

    def inverse(self) -> "Isometry":
        """Inverse using the transpose of the rotation."""
        rt = self.linear.T
        return Isometry(rt, -rt @ self.translation)


def compose(*args: Affine) -> Affine:
    """Chain transforms left to right; the rightmost is applied first."""
    if not args:
        return Isometry.identity()
    return reduce(lambda left, right: left * right, args)