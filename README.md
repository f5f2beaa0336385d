# softraster

A small software rasterizer built on NumPy. It covers the classic
pipeline stages:

- model, view and perspective projection matrices, plus a rotation about
  an arbitrary axis (`softraster.transforms`);
- a wireframe rasterizer that draws the edges of indexed triangles as
  white Bresenham lines (`softraster.wireframe.WireframeRasterizer`);
- a filled-triangle rasterizer with a per-sample depth test and
  supersampling anti-aliasing (`softraster.ssaa.SsaaRasterizer`).

Frames are turned into 8-bit RGB images with Pillow
(`softraster.cli.frame_to_image`).

## Installation

```
pip install .
```

## Command line

The `softraster` command renders one of two demo scenes to a PNG file.

```
softraster ssaa out.png
softraster wireframe -r 30 out.png
```

- `softraster ssaa [FILENAME] [--size N]` fills two flat-coloured,
  overlapping triangles with 2x2 supersampling and writes an N x N image
  (700 by default).
- `softraster wireframe [-r ANGLE] [FILENAME] [--size N]` first reads the
  three components of a rotation axis from standard input (`x y z`), then
  outlines a triangle rotated `ANGLE` degrees about that axis. Input that is
  not three numbers, or a zero axis, ends the command with status 1. With
  `-r` but no file name it exits without rendering.

Without a file name (and, for `wireframe`, without `-r`) the command runs a
frame loop: each frame is written to `output.png`, then one line is read
from standard input. A line starting with an escape character, or the end
of input, stops the loop. For `wireframe`, a line starting with `a` turns
the triangle by +10 degrees and one starting with `d` by -10 degrees.
Each frame prints `frame count: N`.

## Library use

```python
import numpy as np
from softraster.buffers import Buffers, Primitive
from softraster.transforms import get_model_matrix, get_view_matrix, get_projection_matrix
from softraster.ssaa import SsaaRasterizer
from softraster.cli import frame_to_image

r = SsaaRasterizer(700, 700, 2)
pos = r.load_positions([(2, 0, -2), (0, 2, -2), (-2, 0, -2)])
ind = r.load_indices([(0, 1, 2)])
col = r.load_colors([(217, 238, 185)] * 3)

r.clear(Buffers.COLOR | Buffers.DEPTH)
r.model = get_model_matrix(0)
r.view = get_view_matrix(np.array([0, 0, 5]))
r.projection = get_projection_matrix(45, 1, 0.1, 50)
r.draw(pos, ind, col, Primitive.TRIANGLE)

frame_to_image(r.frame_buffer, 700, 700, True).save("output.png")
```

Other pieces:

- `softraster.transforms`: `get_view_matrix`, `get_model_matrix` (rotation
  about Z), `get_rotation_matrix` (Rodrigues' formula about any non-zero
  axis), `get_projection_matrix`, `normalize`, `convert_3x3_to_4x4`.
- `softraster.ssaa`: `inside_triangle` and `compute_barycentric_2d`, the
  coverage and interpolation helpers used when filling.
- `softraster.triangle.Triangle`: vertices, per-vertex colours (given on
  a 0-255 scale, out-of-range values raise `ValueError`), texture
  coordinates and normals.
- `softraster.buffers`: the `Buffers` flag, the `Primitive` enum and the
  `PosBufId`, `IndBufId`, `ColBufId` handles returned by the `load_*`
  methods.
- `softraster.cli.render_wireframe` and `softraster.cli.render_ssaa`
  render the demo scenes and return the colour buffer.

## What it does not do

- It opens no window: the frame loop writes `output.png` and reads keys
  as lines from standard input.
- There is no texturing or lighting. Texture coordinates and normals can
  be stored on a `Triangle` but are not used when drawing; filled
  triangles take the colour of their first vertex.
- `WireframeRasterizer.draw` only handles `Primitive.TRIANGLE`; other
  primitives raise `NotImplementedError`. `SsaaRasterizer.draw` always
  fills triangles.
- There is no clipping, and `SsaaRasterizer.clear` does not reset the
  per-sample buffers, so samples persist across frames on one rasterizer.