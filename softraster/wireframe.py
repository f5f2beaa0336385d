"""Wireframe rasterizer drawing triangle edges with Bresenham lines."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from softraster.buffers import Buffers, IndBufId, PosBufId, Primitive
from softraster.triangle import Triangle

_LINE_COLOR = (255.0, 255.0, 255.0)
_DEPTH_SCALE = np.float32((100 - 0.1) / 2.0)
_DEPTH_OFFSET = np.float32((100 + 0.1) / 2.0)
_VERTEX_COLORS = ((255.0, 0.0, 0.0), (0.0, 255.0, 0.0), (0.0, 0.0, 255.0))


class WireframeRasterizer:
    """Renders indexed triangles as white outlines into a colour buffer.

    The buffer holds ``width * height`` RGB pixels; row 0 of the buffer is the
    top of the image, and a pixel at screen row ``y`` lives in buffer row
    ``height - y``.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.model = np.identity(4, dtype=np.float32)
        self.view = np.identity(4, dtype=np.float32)
        self.projection = np.identity(4, dtype=np.float32)
        self._frame = np.zeros((width * height, 3), dtype=np.float32)
        self._depth = np.full(width * height, np.inf, dtype=np.float32)
        self._positions: dict[int, np.ndarray] = {}
        self._indices: dict[int, list[tuple[int, int, int]]] = {}
        self._next_id = 0

    @property
    def frame_buffer(self) -> np.ndarray:
        """The colour buffer, one RGB row per pixel."""
        return self._frame

    @property
    def depth_buffer(self) -> np.ndarray:
        """The depth buffer, one value per pixel."""
        return self._depth

    def _take_id(self) -> int:
        ident = self._next_id
        self._next_id += 1
        return ident

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

    def set_pixel(self, point: Sequence[float], color: Sequence[float]) -> None:
        """Colour the pixel at screen position ``point``; points off screen are ignored."""
        x, y = float(point[0]), float(point[1])
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return
        index = int((self.height - y) * self.width + x)
        if index < len(self._frame):
            self._frame[index] = color

    def clear(self, buffers: Buffers) -> None:
        """Reset the selected buffers: colour to black, depth to infinity."""
        if Buffers.COLOR in buffers:
            self._frame.fill(0.0)
        if Buffers.DEPTH in buffers:
            self._depth.fill(np.inf)

    def draw_line(self, begin: Sequence[float], end: Sequence[float]) -> None:
        """Draw a white line between two screen points with Bresenham's algorithm."""
        x1, y1 = float(begin[0]), float(begin[1])
        x2, y2 = float(end[0]), float(end[1])
        dx = int(x2 - x1)
        dy = int(y2 - y1)
        dx1, dy1 = abs(dx), abs(dy)
        px = 2 * dy1 - dx1
        py = 2 * dx1 - dy1
        step = 1 if (dx < 0 and dy < 0) or (dx > 0 and dy > 0) else -1

        if dy1 <= dx1:
            if dx >= 0:
                x, y, x_end = int(x1), int(y1), int(x2)
            else:
                x, y, x_end = int(x2), int(y2), int(x1)
            self.set_pixel((x, y, 1.0), _LINE_COLOR)
            while x < x_end:
                x += 1
                if px < 0:
                    px += 2 * dy1
                else:
                    y += step
                    px += 2 * (dy1 - dx1)
                self.set_pixel((x, y, 1.0), _LINE_COLOR)
        else:
            if dy >= 0:
                x, y, y_end = int(x1), int(y1), int(y2)
            else:
                x, y, y_end = int(x2), int(y2), int(y1)
            self.set_pixel((x, y, 1.0), _LINE_COLOR)
            while y < y_end:
                y += 1
                if py <= 0:
                    py += 2 * dx1
                else:
                    x += step
                    py += 2 * (dx1 - dy1)
                self.set_pixel((x, y, 1.0), _LINE_COLOR)

    def _to_screen(self, corners: np.ndarray) -> np.ndarray:
        mvp = self.projection @ self.view @ self.model
        homogeneous = np.hstack([corners, np.ones((3, 1), dtype=np.float32)]) @ mvp.T
        homogeneous = homogeneous / homogeneous[:, 3:4]
        screen = homogeneous[:, :3].astype(np.float32)
        screen[:, 0] = 0.5 * self.width * (screen[:, 0] + 1.0)
        screen[:, 1] = 0.5 * self.height * (screen[:, 1] + 1.0)
        screen[:, 2] = screen[:, 2] * _DEPTH_SCALE + _DEPTH_OFFSET
        return screen

    def _rasterize_wireframe(self, triangle: Triangle) -> None:
        self.draw_line(triangle.c, triangle.a)
        self.draw_line(triangle.c, triangle.b)
        self.draw_line(triangle.b, triangle.a)

    def draw(self, pos_buffer: PosBufId, ind_buffer: IndBufId, primitive: Primitive) -> None:
        """Transform and outline every indexed triangle."""
        if primitive is not Primitive.TRIANGLE:
            raise NotImplementedError(
                "Drawing primitives other than triangle is not implemented yet!"
            )
        positions = self._positions.get(pos_buffer.pos_id, np.zeros((0, 3), dtype=np.float32))
        indices = self._indices.get(ind_buffer.ind_id, [])
        for triple in indices:
            triangle = Triangle()
            for corner, vertex in enumerate(self._to_screen(positions[list(triple)])):
                triangle.set_vertex(corner, vertex)
            for corner, (r, g, b) in enumerate(_VERTEX_COLORS):
                triangle.set_color(corner, r, g, b)
            self._rasterize_wireframe(triangle)