"""A triangle with per-vertex positions, colours, texture coordinates and normals."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

_MAX_CHANNEL = 255.0


def _vector(values: Sequence[float], size: int) -> np.ndarray:
    return np.asarray(values, dtype=np.float32).reshape(size)


class Triangle:
    """Three vertices, given counter-clockwise, with their per-vertex attributes."""

    def __init__(self) -> None:
        self.vertices = np.zeros((3, 3), dtype=np.float32)
        self.colors = np.zeros((3, 3), dtype=np.float32)
        self.tex_coords = np.zeros((3, 2), dtype=np.float32)
        self.normals = np.zeros((3, 3), dtype=np.float32)

    @property
    def a(self) -> np.ndarray:
        """The first vertex."""
        return self.vertices[0].copy()

    @property
    def b(self) -> np.ndarray:
        """The second vertex."""
        return self.vertices[1].copy()

    @property
    def c(self) -> np.ndarray:
        """The third vertex."""
        return self.vertices[2].copy()

    @property
    def flat_color(self) -> np.ndarray:
        """The colour of the first vertex on the 0-255 scale; used as the face colour."""
        return self.colors[0] * np.float32(_MAX_CHANNEL)

    def set_vertex(self, index: int, vertex: Sequence[float]) -> None:
        """Set the coordinates of vertex ``index``."""
        self.vertices[index] = _vector(vertex, 3)

    def set_normal(self, index: int, normal: Sequence[float]) -> None:
        """Set the normal of vertex ``index``."""
        self.normals[index] = _vector(normal, 3)

    def set_color(self, index: int, r: float, g: float, b: float) -> None:
        """Set the colour of vertex ``index`` from channels in the 0-255 range."""
        if any(channel < 0.0 or channel > _MAX_CHANNEL for channel in (r, g, b)):
            raise ValueError("Invalid color values")
        self.colors[index] = np.array([r, g, b], dtype=np.float32) / np.float32(_MAX_CHANNEL)

    def set_tex_coord(self, index: int, s: float, t: float) -> None:
        """Set the texture coordinate of vertex ``index``."""
        self.tex_coords[index] = (s, t)

    def to_vector4(self) -> np.ndarray:
        """Return the vertices as homogeneous points, one per row, with w = 1."""
        ones = np.ones((3, 1), dtype=np.float32)
        return np.hstack([self.vertices, ones])