import math

import numpy as np
import pytest

from softraster import transforms
from softraster.transforms import (
    convert_3x3_to_4x4,
    get_model_matrix,
    get_projection_matrix,
    get_rotation_matrix,
    get_view_matrix,
    normalize,
)


def _apply(matrix, point):
    return matrix @ np.array([*point, 1.0], dtype=np.float32)


def test_view_matrix_moves_eye_to_origin():
    eye = (0.0, 0.0, 5.0)
    moved = _apply(get_view_matrix(eye), eye)
    assert np.allclose(moved, [0.0, 0.0, 0.0, 1.0])


def test_view_matrix_is_translation_by_negated_eye():
    view = get_view_matrix((1.0, -2.0, 3.0))
    assert np.allclose(view[:3, :3], np.identity(3))
    assert np.allclose(view[:3, 3], [-1.0, 2.0, -3.0])


def test_model_matrix_zero_angle_is_identity():
    assert np.allclose(get_model_matrix(0.0), np.identity(4))


def test_model_matrix_quarter_turn_about_z():
    rotated = _apply(get_model_matrix(90.0), (1.0, 0.0, 0.0))
    assert np.allclose(rotated, [0.0, 1.0, 0.0, 1.0], atol=1e-6)


def test_model_matrix_keeps_z_and_length():
    point = (2.0, -1.0, 4.0)
    rotated = _apply(get_model_matrix(33.0), point)
    assert rotated[2] == pytest.approx(4.0)
    assert np.linalg.norm(rotated[:2]) == pytest.approx(math.hypot(2.0, -1.0), rel=1e-5)


def test_rotation_about_z_matches_model_matrix():
    for angle in (0.0, 10.0, 45.0, -120.0):
        assert np.allclose(
            get_rotation_matrix(angle, (0.0, 0.0, 1.0)), get_model_matrix(angle), atol=1e-6
        )


def test_rotation_is_orthonormal_for_unit_axis():
    axis = normalize((1.0, 2.0, 3.0))
    rotation = get_rotation_matrix(70.0, axis)[:3, :3]
    assert np.allclose(rotation @ rotation.T, np.identity(3), atol=1e-5)
    assert np.linalg.det(rotation) == pytest.approx(1.0, rel=1e-5)


def test_rotation_leaves_axis_fixed():
    axis = normalize((0.0, 1.0, 1.0))
    fixed = get_rotation_matrix(123.0, axis)[:3, :3] @ axis
    assert np.allclose(fixed, axis, atol=1e-6)


def test_rotation_homogeneous_row_and_column():
    rotation = get_rotation_matrix(30.0, (1.0, 0.0, 0.0))
    assert np.allclose(rotation[3], [0.0, 0.0, 0.0, 1.0])
    assert np.allclose(rotation[:3, 3], [0.0, 0.0, 0.0])


def test_rotation_zero_axis_raises():
    with pytest.raises(ValueError, match="zero vector"):
        get_rotation_matrix(45.0, (0.0, 0.0, 0.0))


def test_normalize_gives_unit_length_same_direction():
    axis = (3.0, 0.0, 4.0)
    unit = normalize(axis)
    assert np.linalg.norm(unit) == pytest.approx(1.0)
    assert np.allclose(unit * 5.0, axis)


def test_normalize_zero_raises():
    with pytest.raises(ValueError):
        normalize((0.0, 0.0, 0.0))


def test_convert_3x3_to_4x4_embeds_matrix():
    block = np.arange(9, dtype=np.float32).reshape(3, 3)
    result = convert_3x3_to_4x4(block)
    assert result.shape == (4, 4)
    assert np.array_equal(result[:3, :3], block)
    assert np.array_equal(result[3], [0.0, 0.0, 0.0, 1.0])
    assert np.array_equal(result[:3, 3], [0.0, 0.0, 0.0])


def _to_ndc(matrix, point):
    clip = _apply(matrix, point)
    return clip[:3] / clip[3]


def test_projection_maps_frustum_edge_to_unit():
    near, far, fov, aspect = 0.1, 50.0, 45.0, 1.0
    projection = get_projection_matrix(fov, aspect, near, far)
    half = near * math.tan(fov * transforms.MY_PI / 360.0)
    ndc = _to_ndc(projection, (half * aspect, half, -near))
    assert ndc[0] == pytest.approx(1.0, rel=1e-4)
    assert ndc[1] == pytest.approx(1.0, rel=1e-4)


def test_projection_aspect_ratio_scales_x_only():
    wide = get_projection_matrix(45.0, 2.0, 0.1, 50.0)
    square = get_projection_matrix(45.0, 1.0, 0.1, 50.0)
    point = (0.3, 0.2, -2.0)
    wide_ndc, square_ndc = _to_ndc(wide, point), _to_ndc(square, point)
    assert wide_ndc[0] == pytest.approx(square_ndc[0] / 2.0, rel=1e-5)
    assert wide_ndc[1] == pytest.approx(square_ndc[1], rel=1e-5)


def test_projection_farther_points_shrink():
    projection = get_projection_matrix(45.0, 1.0, 0.1, 50.0)
    near_ndc = _to_ndc(projection, (1.0, 1.0, -2.0))
    far_ndc = _to_ndc(projection, (1.0, 1.0, -4.0))
    assert near_ndc[0] == pytest.approx(2.0 * far_ndc[0], rel=1e-5)
    assert abs(far_ndc[1]) < abs(near_ndc[1])


def test_projection_axis_point_stays_centred():
    projection = get_projection_matrix(60.0, 1.5, 0.5, 20.0)
    ndc = _to_ndc(projection, (0.0, 0.0, -3.0))
    assert np.allclose(ndc[:2], [0.0, 0.0])