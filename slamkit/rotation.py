"""Rotation representations: matrices, quaternions, angle-axis and Euler angles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
from numpy.typing import ArrayLike

from slamkit.linalg import skew


def _vector3(value: ArrayLike, name: str = "vector") -> np.ndarray:
    vector = np.asarray(value, dtype=float).reshape(-1)
    if vector.shape != (3,):
        raise ValueError(f"{name} must have 3 components, got shape {vector.shape}")
    return vector


def _matrix3(value: ArrayLike, name: str = "matrix") -> np.ndarray:
    matrix = np.asarray(value, dtype=float)
    if matrix.shape != (3, 3):
        raise ValueError(f"{name} must be 3x3, got shape {matrix.shape}")
    return matrix


def unit_axis(index: int) -> np.ndarray:
    """Return the unit vector along axis 0 (X), 1 (Y) or 2 (Z)."""
    if index not in (0, 1, 2):
        raise ValueError(f"axis index must be 0, 1 or 2, got {index}")
    axis = np.zeros(3)
    axis[index] = 1.0
    return axis


@dataclass(frozen=True)
class Quaternion:
    """Quaternion w + xi + yj + zk; unit quaternions represent rotations."""

    w: float
    x: float
    y: float
    z: float

    @classmethod
    def identity(cls) -> "Quaternion":
        """The rotation that does nothing."""
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_matrix(cls, matrix: ArrayLike) -> "Quaternion":
        """Convert a rotation matrix to a unit quaternion."""
        m = _matrix3(matrix, "rotation")
        diagonal_sum = float(m.diagonal().sum())
        if diagonal_sum > 0.0:
            t = np.sqrt(diagonal_sum + 1.0)
            w = 0.5 * t
            t = 0.5 / t
            return cls(
                float(w),
                float((m[2, 1] - m[1, 2]) * t),
                float((m[0, 2] - m[2, 0]) * t),
                float((m[1, 0] - m[0, 1]) * t),
            )
        i = int(np.argmax(np.diag(m)))
        j = (i + 1) % 3
        k = (j + 1) % 3
        t = np.sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
        vec = np.zeros(3)
        vec[i] = 0.5 * t
        t = 0.5 / t
        w = (m[k, j] - m[j, k]) * t
        vec[j] = (m[j, i] + m[i, j]) * t
        vec[k] = (m[k, i] + m[i, k]) * t
        return cls(float(w), float(vec[0]), float(vec[1]), float(vec[2]))

    @classmethod
    def from_angle_axis(cls, angle_axis: "AngleAxis") -> "Quaternion":
        """Convert an angle-axis rotation to a unit quaternion."""
        half = 0.5 * angle_axis.angle
        x, y, z = np.sin(half) * angle_axis.axis
        return cls(float(np.cos(half)), float(x), float(y), float(z))

    @property
    def vec(self) -> np.ndarray:
        """The imaginary part (x, y, z)."""
        return np.array([self.x, self.y, self.z])

    def coeffs(self) -> np.ndarray:
        """Coefficients in storage order (x, y, z, w)."""
        return np.array([self.x, self.y, self.z, self.w])

    def norm(self) -> float:
        return float(np.linalg.norm(self.coeffs()))

    def normalized(self) -> "Quaternion":
        """Return the quaternion scaled to unit norm."""
        n = self.norm()
        if n == 0.0:
            raise ValueError("cannot normalise a zero quaternion")
        return Quaternion(self.w / n, self.x / n, self.y / n, self.z / n)

    def inverse(self) -> "Quaternion":
        """Multiplicative inverse: the conjugate divided by the squared norm."""
        sq = self.norm() ** 2
        if sq == 0.0:
            raise ValueError("a zero quaternion has no inverse")
        return Quaternion(self.w / sq, -self.x / sq, -self.y / sq, -self.z / sq)

    def to_matrix(self) -> np.ndarray:
        """Rotation matrix of a unit quaternion."""
        w, x, y, z = self.w, self.x, self.y, self.z
        return np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
                [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
                [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
            ]
        )

    def rotate(self, vector: ArrayLike) -> np.ndarray:
        """Rotate a 3D vector by this unit quaternion."""
        v = _vector3(vector)
        q = self.vec
        uv = 2.0 * np.cross(q, v)
        return v + self.w * uv + np.cross(q, uv)

    def __mul__(self, other: Union["Quaternion", ArrayLike]):
        """Compose with another quaternion (other applied first) or rotate a vector."""
        if isinstance(other, Quaternion):
            w1, x1, y1, z1 = self.w, self.x, self.y, self.z
            w2, x2, y2, z2 = other.w, other.x, other.y, other.z
            return Quaternion(
                w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
                w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
                w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
                w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
            )
        return self.rotate(other)


@dataclass(frozen=True, eq=False)
class AngleAxis:
    """Rotation by ``angle`` radians about the unit vector ``axis``."""

    angle: float
    axis: np.ndarray

    def __post_init__(self) -> None:
        axis = _vector3(self.axis, "axis")
        n = np.linalg.norm(axis)
        if n == 0.0:
            raise ValueError("rotation axis must be non-zero")
        object.__setattr__(self, "angle", float(self.angle))
        object.__setattr__(self, "axis", axis / n)

    @classmethod
    def from_quaternion(cls, quaternion: Quaternion) -> "AngleAxis":
        """Angle in [0, pi] and axis of a unit quaternion."""
        vec = quaternion.vec
        n = float(np.linalg.norm(vec))
        if n == 0.0:
            return cls(0.0, unit_axis(0))
        angle = 2.0 * np.arctan2(n, abs(quaternion.w))
        axis = -vec / n if quaternion.w < 0 else vec / n
        return cls(float(angle), axis)

    @classmethod
    def from_matrix(cls, matrix: ArrayLike) -> "AngleAxis":
        return cls.from_quaternion(Quaternion.from_matrix(matrix))

    @classmethod
    def from_rotation_vector(cls, vector: ArrayLike) -> "AngleAxis":
        """Interpret ``vector`` as axis * angle."""
        v = _vector3(vector)
        angle = float(np.linalg.norm(v))
        if angle == 0.0:
            return cls(0.0, unit_axis(0))
        return cls(angle, v / angle)

    def to_matrix(self) -> np.ndarray:
        """Rodrigues' formula."""
        c, s = np.cos(self.angle), np.sin(self.angle)
        n = self.axis
        return c * np.eye(3) + s * skew(n) + (1.0 - c) * np.outer(n, n)

    def rotation_vector(self) -> np.ndarray:
        return self.angle * self.axis


def is_rotation(matrix: ArrayLike, tolerance: float = 1e-9) -> bool:
    """True if ``matrix`` is orthogonal with determinant +1."""
    m = np.asarray(matrix, dtype=float)
    if m.shape != (3, 3):
        return False
    orthogonal = np.allclose(m.T @ m, np.eye(3), atol=tolerance)
    return bool(orthogonal and abs(np.linalg.det(m) - 1.0) <= tolerance)


def euler_angles(matrix: ArrayLike, a0: int, a1: int, a2: int) -> np.ndarray:
    """Angles (first in [0, pi], others in [-pi, pi]) with R = R_a0 R_a1 R_a2."""
    m = _matrix3(matrix, "rotation")
    for axis in (a0, a1, a2):
        if axis not in (0, 1, 2):
            raise ValueError(f"axis index must be 0, 1 or 2, got {axis}")
    if a0 == a1 or a1 == a2:
        raise ValueError("consecutive Euler axes must differ")

    odd = (a0 + 1) % 3 != a1
    i = a0
    j = (a0 + 1 + int(odd)) % 3
    k = (a0 + 2 - int(odd)) % 3
    res = np.zeros(3)

    if a0 == a2:
        res[0] = np.arctan2(m[j, i], m[k, i])
        s2 = np.hypot(m[j, i], m[k, i])
        flip = (odd and res[0] < 0) or (not odd and res[0] > 0)
        if flip:
            res[0] += -np.pi if res[0] > 0 else np.pi
            res[1] = -np.arctan2(s2, m[i, i])
        else:
            res[1] = np.arctan2(s2, m[i, i])
        s1, c1 = np.sin(res[0]), np.cos(res[0])
        res[2] = np.arctan2(c1 * m[j, k] - s1 * m[k, k], c1 * m[j, j] - s1 * m[k, j])
    else:
        res[0] = np.arctan2(m[j, k], m[k, k])
        c2 = np.hypot(m[i, i], m[i, j])
        flip = (odd and res[0] < 0) or (not odd and res[0] > 0)
        if flip:
            res[0] += -np.pi if res[0] > 0 else np.pi
            res[1] = np.arctan2(-m[i, k], -c2)
        else:
            res[1] = np.arctan2(-m[i, k], c2)
        s1, c1 = np.sin(res[0]), np.cos(res[0])
        res[2] = np.arctan2(s1 * m[k, i] - c1 * m[j, i], c1 * m[j, j] - s1 * m[k, j])

    return -res if not odd else res


def from_euler_zyx(yaw: float, pitch: float, roll: float) -> np.ndarray:
    """Rotation matrix Rz(yaw) Ry(pitch) Rx(roll)."""
    return (
        AngleAxis(yaw, unit_axis(2)).to_matrix()
        @ AngleAxis(pitch, unit_axis(1)).to_matrix()
        @ AngleAxis(roll, unit_axis(0)).to_matrix()
    )


def small_angle_rotation(omega: ArrayLike) -> np.ndarray:
    """First-order approximation R = I + [omega]_x."""
    return np.eye(3) + skew(_vector3(omega, "omega"))


def exact_rotation(omega: ArrayLike) -> np.ndarray:
    """Exact rotation for the rotation vector ``omega``."""
    return AngleAxis.from_rotation_vector(omega).to_matrix()