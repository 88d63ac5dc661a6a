import numpy as np
import pytest

from voxmap.geometry import Transformation


def _sample() -> Transformation:
    return Transformation.from_quaternion(0.9, 0.1, -0.3, 0.2, position=(1.0, -2.0, 3.0))


def test_identity_leaves_points_unchanged():
    point = np.array([1.5, -2.0, 0.25])
    assert np.allclose(Transformation().apply(point), point)


def test_quarter_turn_about_z_maps_x_to_y():
    half = np.sqrt(0.5)
    transform = Transformation.from_quaternion(half, 0.0, 0.0, half)
    assert np.allclose(transform.rotate((1.0, 0.0, 0.0)), (0.0, 1.0, 0.0))


def test_rotate_ignores_translation():
    transform = Transformation(position=(4.0, 5.0, 6.0))
    assert np.allclose(transform.rotate((1.0, 2.0, 3.0)), (1.0, 2.0, 3.0))
    assert np.allclose(transform.apply((1.0, 2.0, 3.0)), (5.0, 7.0, 9.0))


def test_inverse_round_trip():
    transform = _sample()
    point = np.array([0.3, 0.7, -1.1])
    assert np.allclose(transform.inverse().apply(transform.apply(point)), point)


def test_composition_matches_sequential_application():
    first = _sample()
    second = Transformation.from_quaternion(0.5, 0.5, 0.5, 0.5, position=(0.0, 1.0, 0.0))
    point = np.array([2.0, -1.0, 0.5])
    composed = first @ second
    assert np.allclose(composed.apply(point), first.apply(second.apply(point)))


def test_composition_with_inverse_is_identity():
    transform = _sample()
    identity = transform @ transform.inverse()
    assert np.allclose(identity.rotation, np.eye(3))
    assert np.allclose(identity.position, np.zeros(3))


def test_rotation_preserves_length():
    transform = _sample()
    vector = np.array([3.0, -4.0, 12.0])
    assert np.linalg.norm(transform.rotate(vector)) == pytest.approx(np.linalg.norm(vector))


def test_invalid_rotation_shape_raises():
    with pytest.raises(ValueError):
        Transformation(np.eye(2))


def test_non_orthonormal_rotation_raises():
    with pytest.raises(ValueError):
        Transformation(np.diag([2.0, 1.0, 1.0]))


def test_zero_quaternion_raises():
    with pytest.raises(ValueError):
        Transformation.from_quaternion(0.0, 0.0, 0.0, 0.0)


def test_bad_position_raises():
    with pytest.raises(ValueError):
        Transformation(position=(1.0, 2.0))