"""Model, view and projection matrices for the rendering pipeline."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

MY_PI = 3.1415926
_EPSILON = 1e-8


def _radians(degrees: float) -> float:
    return degrees * MY_PI / 180.0


def get_view_matrix(eye_pos: Sequence[float]) -> np.ndarray:
    """Return the view matrix that moves the camera at ``eye_pos`` to the origin."""
    x, y, z = (float(c) for c in eye_pos)
    view = np.identity(4, dtype=np.float32)
    view[:3, 3] = (-x, -y, -z)
    return view


def get_model_matrix(rotation_angle: float) -> np.ndarray:
    """Return a rotation of ``rotation_angle`` degrees about the Z axis."""
    theta = _radians(rotation_angle)
    cos_t, sin_t = math.cos(theta), math.sin(theta)
    model = np.identity(4, dtype=np.float32)
    model[:2, :2] = ((cos_t, -sin_t), (sin_t, cos_t))
    return model


def normalize(axis: Sequence[float]) -> np.ndarray:
    """Return ``axis`` scaled to unit length; a zero vector raises ValueError."""
    vector = np.asarray(axis, dtype=np.float32).reshape(3)
    length = float(np.linalg.norm(vector))
    if length < _EPSILON:
        raise ValueError("Cannot normalize a zero vector.")
    return vector / np.float32(length)


def convert_3x3_to_4x4(matrix: np.ndarray) -> np.ndarray:
    """Embed a 3x3 matrix in the upper-left corner of a 4x4 identity."""
    result = np.identity(4, dtype=np.float32)
    result[:3, :3] = np.asarray(matrix, dtype=np.float32).reshape(3, 3)
    return result


def get_rotation_matrix(angle: float, axis: Sequence[float]) -> np.ndarray:
    """Return the Rodrigues rotation of ``angle`` degrees about ``axis``.

    The axis must not be zero. It is used as given, so a non-unit axis
    also scales the result.
    """
    normalize(axis)
    x, y, z = (float(c) for c in axis)
    theta = _radians(angle)
    cos_t, sin_t = math.cos(theta), math.sin(theta)

    direction = np.array([x, y, z, 0.0])
    cross = np.array(
        [
            [0.0, -z, y, 0.0],
            [z, 0.0, -x, 0.0],
            [-y, x, 0.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    rotation = (
        cos_t * np.identity(4)
        + (1.0 - cos_t) * np.outer(direction, direction)
        + sin_t * cross
    )
    rotation[3, 3] = 1.0
    return rotation.astype(np.float32)


def get_projection_matrix(
    eye_fov: float, aspect_ratio: float, z_near: float, z_far: float
) -> np.ndarray:
    """Return the perspective projection for a vertical field of view in degrees."""
    perspective = np.array(
        [
            [z_near, 0.0, 0.0, 0.0],
            [0.0, z_near, 0.0, 0.0],
            [0.0, 0.0, z_near + z_far, -z_near * z_far],
            [0.0, 0.0, 1.0, 0.0],
        ]
    )
    half_height = -z_near * math.tan(eye_fov * MY_PI / 360.0)
    half_width = half_height * aspect_ratio
    depth = z_near - z_far
    orthographic = np.array(
        [
            [1.0 / half_width, 0.0, 0.0, 0.0],
            [0.0, 1.0 / half_height, 0.0, 0.0],
            [0.0, 0.0, 2.0 / depth, -(z_far + z_near) / depth],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )
    return (orthographic @ perspective).astype(np.float32)