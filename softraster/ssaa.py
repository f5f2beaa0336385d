"""Filled-triangle rasterizer with supersampling and a per-sample depth test."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

from softraster.buffers import Buffers, ColBufId, IndBufId, PosBufId, Primitive
from softraster.triangle import Triangle

_DEPTH_SCALE = np.float32((50 - 0.1) / 2.0)
_DEPTH_OFFSET = np.float32((50 + 0.1) / 2.0)


def _divide(numerator: float, denominator: float) -> float:
    if denominator != 0.0:
        return numerator / denominator
    if numerator == 0.0 or math.isnan(numerator):
        return math.nan
    return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)


def inside_triangle(x: float, y: float, vertices: Sequence[Sequence[float]]) -> bool:
    """Tell whether the integer point ``(x, y)`` lies inside or on the triangle.

    The coordinates are truncated to integers first. Edges on which the point
    lies exactly are ignored, so points on an edge count as inside.
    """
    px, py = int(x), int(y)
    flag = None
    for i in range(3):
        x1, y1 = float(vertices[i][0]), float(vertices[i][1])
        x2, y2 = float(vertices[(i + 1) % 3][0]), float(vertices[(i + 1) % 3][1])
        ax, ay = x1 - px, y1 - py
        bx, by = x1 - x2, y1 - y2
        cross = ax * by - ay * bx
        if cross == 0:
            continue
        sign = cross >= 0
        if flag is None:
            flag = sign
        if flag != sign:
            return False
    return True


def compute_barycentric_2d(
    x: float, y: float, vertices: Sequence[Sequence[float]]
) -> tuple[float, float, float]:
    """Return the barycentric coordinates of ``(x, y)`` in the triangle's plane."""
    (x0, y0), (x1, y1), (x2, y2) = ((float(v[0]), float(v[1])) for v in vertices)
    c1 = _divide(
        x * (y1 - y2) + (x2 - x1) * y + x1 * y2 - x2 * y1,
        x0 * (y1 - y2) + (x2 - x1) * y0 + x1 * y2 - x2 * y1,
    )
    c2 = _divide(
        x * (y2 - y0) + (x0 - x2) * y + x2 * y0 - x0 * y2,
        x1 * (y2 - y0) + (x0 - x2) * y1 + x2 * y0 - x0 * y2,
    )
    c3 = _divide(
        x * (y0 - y1) + (x1 - x0) * y + x0 * y1 - x1 * y0,
        x2 * (y0 - y1) + (x1 - x0) * y2 + x0 * y1 - x1 * y0,
    )
    return c1, c2, c3


class SsaaRasterizer:
    """Fills flat-coloured triangles using ``ssaa_factor`` x ``ssaa_factor`` samples per pixel.

    Buffer row 0 is the top of the image; screen row ``y`` lives in buffer
    row ``height - 1 - y``. The sample buffers are not touched by ``clear``.
    """

    def __init__(self, width: int, height: int, ssaa_factor: int = 2) -> None:
        self.width = width
        self.height = height
        self.ssaa_factor = ssaa_factor
        self.model = np.identity(4, dtype=np.float32)
        self.view = np.identity(4, dtype=np.float32)
        self.projection = np.identity(4, dtype=np.float32)
        pixels = width * height
        samples = ssaa_factor * ssaa_factor
        self._frame = np.zeros((pixels, 3), dtype=np.float32)
        self._depth = np.full(pixels, np.inf, dtype=np.float32)
        self.ssaa_frame_buffer = np.zeros((pixels, samples, 3), dtype=np.float32)
        self.ssaa_depth_buffer = np.full((pixels, samples), np.inf, dtype=np.float32)
        self._positions: dict[int, np.ndarray] = {}
        self._indices: dict[int, list[tuple[int, int, int]]] = {}
        self._colors: dict[int, np.ndarray] = {}
        self._next_id = 0

    @property
    def frame_buffer(self) -> np.ndarray:
        """The resolved colour buffer, one RGB row per pixel."""
        return self._frame

    @property
    def depth_buffer(self) -> np.ndarray:
        """The per-pixel depth buffer."""
        return self._depth

    def _take_id(self) -> int:
        ident = self._next_id
        self._next_id += 1
        return ident

    def _index(self, x: int, y: int) -> int:
        return (self.height - 1 - y) * self.width + x

    def load_positions(self, positions: Iterable[Sequence[float]]) -> PosBufId:
        """Store vertex positions and return a handle to them."""
        ident = self._take_id()
        self._positions[ident] = np.asarray(list(positions), dtype=np.float32).reshape(-1, 3)
        return PosBufId(ident)

    def load_indices(self, indices: Iterable[Sequence[int]]) -> IndBufId:
        """Store index triples and return a handle to them."""
        ident = self._take_id()
        self._indices[ident] = [tuple(int(i) for i in triple) for triple in indices]
        return IndBufId(ident)

    def load_colors(self, colors: Iterable[Sequence[float]]) -> ColBufId:
        """Store per-vertex colours (0-255 channels) and return a handle to them."""
        ident = self._take_id()
        self._colors[ident] = np.asarray(list(colors), dtype=np.float32).reshape(-1, 3)
        return ColBufId(ident)

    def set_pixel(self, point: Sequence[float], color: Sequence[float]) -> None:
        """Colour the pixel at screen position ``point``; raises IndexError off screen."""
        x, y = float(point[0]), float(point[1])
        index = int((self.height - 1 - y) * self.width + x)
        if not 0 <= index < len(self._frame):
            raise IndexError(f"pixel ({x}, {y}) is outside the frame")
        self._frame[index] = color

    def clear(self, buffers: Buffers) -> None:
        """Reset the selected buffers: colour to black, depth to infinity."""
        if Buffers.COLOR in buffers:
            self._frame.fill(0.0)
        if Buffers.DEPTH in buffers:
            self._depth.fill(np.inf)

    def _to_screen(self, corners: np.ndarray) -> np.ndarray:
        mvp = self.projection @ self.view @ self.model
        homogeneous = np.hstack([corners, np.ones((3, 1), dtype=np.float32)]) @ mvp.T
        homogeneous = homogeneous / homogeneous[:, 3:4]
        screen = homogeneous[:, :3].astype(np.float32)
        screen[:, 0] = 0.5 * self.width * (screen[:, 0] + 1.0)
        screen[:, 1] = 0.5 * self.height * (screen[:, 1] + 1.0)
        screen[:, 2] = screen[:, 2] * _DEPTH_SCALE + _DEPTH_OFFSET
        return screen

    def draw(
        self,
        pos_buffer: PosBufId,
        ind_buffer: IndBufId,
        col_buffer: ColBufId,
        primitive: Primitive = Primitive.TRIANGLE,
    ) -> None:
        """Transform, fill and resolve every indexed triangle."""
        positions = self._positions.get(pos_buffer.pos_id, np.zeros((0, 3), dtype=np.float32))
        indices = self._indices.get(ind_buffer.ind_id, [])
        colors = self._colors.get(col_buffer.col_id, np.zeros((0, 3), dtype=np.float32))
        for triple in indices:
            triangle = Triangle()
            for corner, vertex in enumerate(self._to_screen(positions[list(triple)])):
                triangle.set_vertex(corner, vertex)
            for corner, vertex_index in enumerate(triple):
                r, g, b = (float(c) for c in colors[vertex_index])
                triangle.set_color(corner, r, g, b)
            self._rasterize_triangle(triangle)
            self.resolve_to_framebuffer()

    def _rasterize_triangle(self, triangle: Triangle) -> None:
        homogeneous = triangle.to_vector4()
        corners = [tuple(float(c) for c in row) for row in triangle.vertices]
        (z0, z1, z2) = (float(row[2]) for row in homogeneous)
        (w0, w1, w2) = (float(row[3]) for row in homogeneous)
        min_x, max_x = float(homogeneous[:, 0].min()), float(homogeneous[:, 0].max())
        min_y, max_y = float(homogeneous[:, 1].min()), float(homogeneous[:, 1].max())
        color = triangle.flat_color
        factor = self.ssaa_factor

        for y in range(int(min_y), math.floor(max_y) + 1):
            if not 0 <= y < self.height:
                continue
            for x in range(int(min_x), math.floor(max_x) + 1):
                if not 0 <= x < self.width:
                    continue
                pixel = self._index(x, y)
                for dy in range(factor):
                    sample_y = y + (dy + 0.5) / factor
                    for dx in range(factor):
                        sample_x = x + (dx + 0.5) / factor
                        if not inside_triangle(sample_x, sample_y, corners):
                            continue
                        alpha, beta, gamma = compute_barycentric_2d(sample_x, sample_y, corners)
                        w_reciprocal = _divide(1.0, alpha / w0 + beta / w1 + gamma / w2)
                        depth = (alpha * z0 / w0 + beta * z1 / w1 + gamma * z2 / w2) * w_reciprocal
                        sample = dy * factor + dx
                        if depth < self.ssaa_depth_buffer[pixel, sample]:
                            self.ssaa_depth_buffer[pixel, sample] = depth
                            self.ssaa_frame_buffer[pixel, sample] = color

    def resolve_to_framebuffer(self) -> None:
        """Average each pixel's samples into the colour buffer."""
        samples = self.ssaa_factor * self.ssaa_factor
        self._frame[:] = self.ssaa_frame_buffer.sum(axis=1) / np.float32(samples)