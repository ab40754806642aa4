import numpy as np
import pytest

from slamkit.linalg import (
    CoefficientStats,
    coefficient_stats,
    homogeneous,
    rotation_about_z,
    skew,
    split_homogeneous,
    transform_homogeneous,
    transform_point,
)


def test_skew_is_antisymmetric():
    m = skew([1.0, 2.0, 3.0])
    np.testing.assert_allclose(m, -m.T)


@pytest.mark.parametrize(
    "a, b",
    [([1, 2, 3], [4, 5, 6]), ([0.3, -1.2, 2.0], [5.0, 0.1, -0.7])],
)
def test_skew_matches_cross_product(a, b):
    np.testing.assert_allclose(skew(a) @ np.asarray(b, float), np.cross(a, b))


def test_skew_rejects_wrong_size():
    with pytest.raises(ValueError):
        skew([1.0, 2.0])


@pytest.mark.parametrize("theta", [0.0, np.pi / 4, np.pi / 2, 2.5])
def test_rotation_about_z_is_proper_rotation(theta):
    r = rotation_about_z(theta)
    np.testing.assert_allclose(r.T @ r, np.eye(3), atol=1e-12)
    assert np.linalg.det(r) == pytest.approx(1.0)
    np.testing.assert_allclose(r @ [0, 0, 1], [0, 0, 1], atol=1e-12)


def test_homogeneous_round_trip():
    r = rotation_about_z(0.7)
    t = np.array([1.0, 2.0, 3.0])
    transform = homogeneous(r, t)
    np.testing.assert_allclose(transform[3], [0, 0, 0, 1])
    r_back, t_back = split_homogeneous(transform)
    np.testing.assert_allclose(r_back, r)
    np.testing.assert_allclose(t_back, t)


def test_homogeneous_rejects_bad_rotation_shape():
    with pytest.raises(ValueError):
        homogeneous(np.eye(2), [0, 0, 0])


def test_split_rejects_non_4x4():
    with pytest.raises(ValueError):
        split_homogeneous(np.eye(3))


def test_point_transformation_example():
    r = rotation_about_z(np.pi / 2)
    result = transform_point(r, [1, 0, 0], [1, 0, 0])
    np.testing.assert_allclose(result, [1.0, 1.0, 0.0], atol=1e-12)


def test_homogeneous_transform_matches_direct_form():
    r = rotation_about_z(1.1)
    t = [0.5, -2.0, 4.0]
    p = [3.0, 1.0, -1.0]
    np.testing.assert_allclose(
        transform_homogeneous(homogeneous(r, t), p), transform_point(r, t, p)
    )


def test_coefficient_stats_invariants():
    rng = np.random.default_rng(0)
    m = np.abs(rng.uniform(-1, 1, size=(3, 3)))
    stats = coefficient_stats(m)
    assert isinstance(stats, CoefficientStats)
    assert stats.min in m
    assert stats.max in m
    assert stats.min <= stats.mean <= stats.max
    assert stats.mean * m.size == pytest.approx(stats.sum)


def test_coefficient_stats_rejects_empty():
    with pytest.raises(ValueError):
        coefficient_stats(np.empty((0, 3)))