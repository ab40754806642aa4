import numpy as np
import pytest

from slamkit.alignment import (
    RigidAlignment,
    align_point_clouds,
    enforce_essential_constraint,
    essential_matrix,
)
from slamkit.linalg import rotation_about_z

SOURCE = np.array([[0.0, 1, 0, 1], [0, 0, 1, 1], [0, 0, 0, 0]])


def test_recovers_known_transformation():
    r_true = rotation_about_z(np.pi / 4)
    t_true = np.array([1.0, 2.0, 0.0])
    target = r_true @ SOURCE + t_true[:, None]
    result = align_point_clouds(SOURCE, target)
    assert isinstance(result, RigidAlignment)
    np.testing.assert_allclose(result.rotation, r_true, atol=1e-10)
    np.testing.assert_allclose(result.translation, t_true, atol=1e-10)


def test_alignment_of_random_cloud_is_proper_rotation():
    rng = np.random.default_rng(3)
    points = rng.normal(size=(3, 10))
    q, _ = np.linalg.qr(rng.normal(size=(3, 3)))
    if np.linalg.det(q) < 0:
        q[:, 0] *= -1
    t = rng.normal(size=3)
    result = align_point_clouds(points, q @ points + t[:, None])
    assert np.linalg.det(result.rotation) == pytest.approx(1.0)
    np.testing.assert_allclose(result.rotation, q, atol=1e-9)
    np.testing.assert_allclose(result.translation, t, atol=1e-9)


def test_mismatched_shapes_raise():
    with pytest.raises(ValueError):
        align_point_clouds(SOURCE, SOURCE[:, :3])
    with pytest.raises(ValueError):
        align_point_clouds(np.ones((2, 4)), np.ones((2, 4)))


def test_essential_matrix_singular_values_and_epipolar_constraint():
    r = rotation_about_z(0.1)
    t = np.array([1.0, 0.0, 0.0])
    e = essential_matrix(r, t)
    s = np.linalg.svd(e, compute_uv=False)
    assert s[0] == pytest.approx(s[1])
    assert s[2] == pytest.approx(0.0, abs=1e-12)
    x1 = np.array([0.3, -0.2, 2.0])
    x2 = r @ x1 + t
    assert x2 @ e @ x1 == pytest.approx(0.0, abs=1e-12)


def test_essential_matrix_is_scale_invariant_in_translation():
    r = rotation_about_z(0.4)
    np.testing.assert_allclose(
        essential_matrix(r, [2.0, 1.0, -1.0]),
        essential_matrix(r, [4.0, 2.0, -2.0]),
        atol=1e-12,
    )


def test_enforce_constraint_gives_unit_singular_values():
    rng = np.random.default_rng(5)
    noisy = essential_matrix(rotation_about_z(0.1), [1, 0, 0]) + 0.01 * rng.normal(size=(3, 3))
    corrected = enforce_essential_constraint(noisy)
    np.testing.assert_allclose(
        np.linalg.svd(corrected, compute_uv=False), [1.0, 1.0, 0.0], atol=1e-12
    )


def test_enforce_constraint_rejects_bad_shape():
    with pytest.raises(ValueError):
        enforce_essential_constraint(np.eye(2))