import math

import numpy as np
import pytest

from softraster.buffers import Buffers, ColBufId, IndBufId, PosBufId, Primitive
from softraster.ssaa import SsaaRasterizer, compute_barycentric_2d, inside_triangle

TRI = [(0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (0.0, 10.0, 0.0)]
BIG = [(-0.8, -0.8, 0.0), (0.8, -0.8, 0.0), (0.0, 0.8, 0.0)]


def test_inside_triangle_interior_and_exterior():
    assert inside_triangle(2, 2, TRI) is True
    assert inside_triangle(20, 20, TRI) is False


def test_inside_triangle_orientation_independent():
    reversed_tri = list(reversed(TRI))
    for point in [(2, 2), (20, 20), (5, 0), (-3, 4)]:
        assert inside_triangle(*point, TRI) == inside_triangle(*point, reversed_tri)


def test_inside_triangle_edges_count_as_inside():
    assert inside_triangle(5, 0, TRI) is True
    assert inside_triangle(0, 0, TRI) is True


def test_inside_triangle_truncates_coordinates():
    assert inside_triangle(-0.5, 1.0, TRI) is True
    assert inside_triangle(-1.5, 1.0, TRI) is False


def test_barycentric_at_vertices():
    for corner, expected in zip(TRI, [(1, 0, 0), (0, 1, 0), (0, 0, 1)]):
        result = compute_barycentric_2d(corner[0], corner[1], TRI)
        assert result == pytest.approx(expected)


@pytest.mark.parametrize("point", [(1.0, 2.0), (3.3, 4.4), (-2.0, 7.5), (12.0, -1.0)])
def test_barycentric_sums_to_one(point):
    assert sum(compute_barycentric_2d(*point, TRI)) == pytest.approx(1.0)


def test_barycentric_degenerate_is_nan():
    flat = [(0, 0, 0), (1, 1, 0), (2, 2, 0)]
    result = compute_barycentric_2d(0.5, 0.3, flat)
    assert len(result) == 3
    assert [math.isnan(c) for c in result] == [True, True, True]


def test_buffer_ids_are_sequential():
    raster = SsaaRasterizer(4, 4)
    assert raster.load_positions([(0, 0, 0)]) == PosBufId(0)
    assert raster.load_indices([(0, 0, 0)]) == IndBufId(1)
    assert raster.load_colors([(0, 0, 0)]) == ColBufId(2)


def test_set_pixel_and_frame_buffer():
    raster = SsaaRasterizer(4, 3)
    raster.set_pixel((0, 0, 0), (1, 2, 3))
    assert list(raster.frame_buffer[(3 - 1) * 4]) == [1, 2, 3]
    assert np.count_nonzero(raster.frame_buffer.any(axis=1)) == 1


def test_set_pixel_off_frame_raises():
    raster = SsaaRasterizer(4, 3)
    with pytest.raises(IndexError):
        raster.set_pixel((0, 5, 0), (1, 2, 3))


def _draw(raster, positions, colors, indices):
    pos = raster.load_positions(positions)
    ind = raster.load_indices(indices)
    col = raster.load_colors(colors)
    raster.draw(pos, ind, col, Primitive.TRIANGLE)


def test_fill_is_all_or_nothing_per_pixel():
    raster = SsaaRasterizer(12, 12)
    color = (217.0, 238.0, 185.0)
    _draw(raster, BIG, [color] * 3, [(0, 1, 2)])
    frame = raster.frame_buffer
    lit = frame.any(axis=1)
    assert lit.sum() > 0
    assert np.allclose(frame[lit], color, atol=1e-3)
    assert not frame[~lit].any()


def test_nearer_triangle_wins_regardless_of_order():
    red, blue = (255.0, 0.0, 0.0), (0.0, 0.0, 255.0)
    near = [(x, y, -0.5) for x, y, _ in BIG]
    far = [(x, y, 0.5) for x, y, _ in BIG]
    frames = []
    for order in [(far, near), (near, far)]:
        raster = SsaaRasterizer(10, 10)
        first, second = order
        colors = [blue if first is far else red] * 3 + [red if first is far else blue] * 3
        _draw(raster, first + second, colors, [(0, 1, 2), (3, 4, 5)])
        frame = raster.frame_buffer
        lit = frame.any(axis=1)
        assert lit.sum() > 0
        assert np.allclose(frame[lit], red, atol=1e-3)
        frames.append(frame.copy())
    assert np.array_equal(frames[0], frames[1])


def test_clear_keeps_samples_and_resolve_restores_frame():
    raster = SsaaRasterizer(10, 10)
    _draw(raster, BIG, [(100.0, 150.0, 200.0)] * 3, [(0, 1, 2)])
    before = raster.frame_buffer.copy()
    raster.clear(Buffers.COLOR | Buffers.DEPTH)
    assert not raster.frame_buffer.any()
    assert np.isinf(raster.depth_buffer).all()
    raster.resolve_to_framebuffer()
    assert np.array_equal(raster.frame_buffer, before)


def test_invalid_color_raises():
    raster = SsaaRasterizer(6, 6)
    with pytest.raises(ValueError):
        _draw(raster, BIG, [(300.0, 0.0, 0.0)] * 3, [(0, 1, 2)])
    assert np.count_nonzero(raster.frame_buffer) == 0


def test_larger_factor_has_more_samples():
    raster = SsaaRasterizer(3, 2, ssaa_factor=3)
    assert raster.ssaa_frame_buffer.shape == (6, 9, 3)
    assert raster.ssaa_depth_buffer.shape == (6, 9)
    assert np.isinf(raster.ssaa_depth_buffer).all()