import numpy as np
import pytest

from slamkit.covariance import (
    accumulate_trajectory,
    information_matrix,
    propagate_covariance,
)
from slamkit.rotation import AngleAxis, unit_axis
from slamkit.transform import Isometry


def test_propagation_is_symmetric_and_shaped():
    p_in = np.eye(3) * 0.1
    jac = np.array([[1, 0, 0.5], [0, 1, 0.3]])
    p_out = propagate_covariance(jac, p_in)
    assert p_out.shape == (2, 2)
    assert np.allclose(p_out, p_out.T)
    assert np.all(np.linalg.eigvalsh(p_out) > 0)


def test_rotation_preserves_identity_covariance():
    rotation = AngleAxis(0.7, [1, 2, 3]).to_matrix()
    assert np.allclose(propagate_covariance(rotation, np.eye(3)), np.eye(3))


def test_propagation_shape_mismatch():
    with pytest.raises(ValueError):
        propagate_covariance(np.ones((2, 3)), np.eye(2))
    with pytest.raises(ValueError):
        propagate_covariance(np.ones(3), np.eye(3))


def test_information_inverts_covariance():
    cov = np.eye(3) * 0.1
    info = information_matrix(cov)
    assert np.allclose(info @ cov, np.eye(3))
    assert np.allclose(info, np.eye(3) / 0.1)


def test_information_errors():
    with pytest.raises(np.linalg.LinAlgError):
        information_matrix(np.zeros((2, 2)))
    with pytest.raises(ValueError):
        information_matrix(np.ones((2, 3)))


def test_pose_times_inverse_is_identity():
    pose = Isometry(AngleAxis(0.5, unit_axis(2)).to_matrix(), [1, 2, 3])
    assert np.allclose((pose * pose.inverse()).matrix(), np.eye(4))


def test_empty_trajectory_is_start():
    start = Isometry(np.eye(3), [1, 2, 3])
    trajectory = accumulate_trajectory(start, [])
    assert trajectory == [start]


def test_trajectory_invariants():
    delta = Isometry(AngleAxis(0.1, unit_axis(2)).to_matrix(), [1, 0, 0])
    trajectory = accumulate_trajectory(Isometry.identity(), [delta] * 5)
    assert len(trajectory) == 6
    assert np.allclose(trajectory[0].translation, np.zeros(3))
    assert np.allclose(trajectory[1].translation, delta.translation)
    positions = np.array([pose.translation for pose in trajectory])
    steps = np.linalg.norm(np.diff(positions, axis=0), axis=1)
    assert np.allclose(steps, 1.0)
    assert np.allclose(positions[:, 2], 0.0)
    for i, pose in enumerate(trajectory):
        assert np.allclose(pose.linear, AngleAxis(0.1 * i, unit_axis(2)).to_matrix())