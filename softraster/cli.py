"""Command-line entry point: render the demo scenes to image files."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import TextIO

import numpy as np
from PIL import Image

from softraster.buffers import Buffers, Primitive
from softraster.ssaa import SsaaRasterizer
from softraster.transforms import (
    get_model_matrix,
    get_projection_matrix,
    get_rotation_matrix,
    get_view_matrix,
)
from softraster.wireframe import WireframeRasterizer

WIDTH = 700
HEIGHT = 700
DEFAULT_FILENAME = "output.png"
EYE_POS = (0.0, 0.0, 5.0)
FIELD_OF_VIEW = 45.0
ASPECT_RATIO = 1.0
Z_NEAR = 0.1
Z_FAR = 50.0
ANGLE_STEP = 10.0
_ESCAPE = "\x1b"

_WIREFRAME_POSITIONS = [(2.0, 0.0, -2.0), (0.0, 2.0, -2.0), (-2.0, 0.0, -2.0)]
_WIREFRAME_INDICES = [(0, 1, 2)]

_SSAA_POSITIONS = [
    (2.0, 0.0, -2.0),
    (0.0, 2.0, -2.0),
    (-2.0, 0.0, -2.0),
    (3.5, -1.0, -5.0),
    (2.5, 1.5, -5.0),
    (-1.0, 0.5, -5.0),
]
_SSAA_INDICES = [(0, 1, 2), (3, 4, 5)]
_SSAA_COLORS = [
    (217.0, 238.0, 185.0),
    (217.0, 238.0, 185.0),
    (217.0, 238.0, 185.0),
    (185.0, 217.0, 238.0),
    (185.0, 217.0, 238.0),
    (185.0, 217.0, 238.0),
]


def frame_to_image(
    frame_buffer: np.ndarray, width: int, height: int, rgb: bool = True
) -> Image.Image:
    """Turn a float colour buffer into an 8-bit RGB image.

    Values are rounded and clamped to 0-255. When ``rgb`` is false the
    buffer's channels are taken to be in blue-green-red order.
    """
    pixels = np.asarray(frame_buffer, dtype=np.float64).reshape(height, width, 3)
    pixels = np.nan_to_num(pixels, nan=0.0, posinf=255.0, neginf=0.0)
    pixels = np.clip(np.rint(pixels), 0, 255).astype(np.uint8)
    if not rgb:
        pixels = np.ascontiguousarray(pixels[..., ::-1])
    return Image.fromarray(pixels, "RGB")


def _apply_camera(rasterizer: WireframeRasterizer | SsaaRasterizer) -> None:
    rasterizer.view = get_view_matrix(EYE_POS)
    rasterizer.projection = get_projection_matrix(FIELD_OF_VIEW, ASPECT_RATIO, Z_NEAR, Z_FAR)


def render_wireframe(
    angle: float, axis: Sequence[float], width: int = WIDTH, height: int = HEIGHT
) -> np.ndarray:
    """Render the outlined triangle rotated ``angle`` degrees about ``axis``."""
    rasterizer = WireframeRasterizer(width, height)
    pos_id = rasterizer.load_positions(_WIREFRAME_POSITIONS)
    ind_id = rasterizer.load_indices(_WIREFRAME_INDICES)
    rasterizer.clear(Buffers.COLOR | Buffers.DEPTH)
    rasterizer.model = get_rotation_matrix(angle, axis)
    _apply_camera(rasterizer)
    rasterizer.draw(pos_id, ind_id, Primitive.TRIANGLE)
    return rasterizer.frame_buffer.copy()


def render_ssaa(angle: float = 0.0, width: int = WIDTH, height: int = HEIGHT) -> np.ndarray:
    """Render the two filled, supersampled triangles."""
    rasterizer = SsaaRasterizer(width, height)
    pos_id = rasterizer.load_positions(_SSAA_POSITIONS)
    ind_id = rasterizer.load_indices(_SSAA_INDICES)
    col_id = rasterizer.load_colors(_SSAA_COLORS)
    rasterizer.clear(Buffers.COLOR | Buffers.DEPTH)
    rasterizer.model = get_model_matrix(angle)
    _apply_camera(rasterizer)
    rasterizer.draw(pos_id, ind_id, col_id, Primitive.TRIANGLE)
    return rasterizer.frame_buffer.copy()


def _read_axis(stream: TextIO) -> tuple[float, float, float] | None:
    tokens: list[str] = []
    while len(tokens) < 3:
        line = stream.readline()
        if not line:
            break
        tokens.extend(line.split())
    if len(tokens) < 3:
        return None
    try:
        x, y, z = (float(token) for token in tokens[:3])
    except ValueError:
        return None
    return x, y, z


def _read_key(stream: TextIO) -> str:
    line = stream.readline()
    if not line:
        return _ESCAPE
    return line.rstrip("\r\n")[:1]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="softraster", description="Render demo scenes.")
    commands = parser.add_subparsers(dest="command", required=True)

    wireframe = commands.add_parser(
        "wireframe", help="outline a triangle rotated about an axis read from standard input"
    )
    wireframe.add_argument("-r", "--rotation", type=float, default=None, metavar="ANGLE")
    wireframe.add_argument("filename", nargs="?", default=None)
    wireframe.add_argument("--size", type=int, default=WIDTH)

    ssaa = commands.add_parser("ssaa", help="fill two triangles with supersampling")
    ssaa.add_argument("filename", nargs="?", default=None)
    ssaa.add_argument("--size", type=int, default=WIDTH)
    return parser


def _run_wireframe(args: argparse.Namespace) -> int:
    print(
        "Enter the three components of the rotation axis (x y z, separated by spaces): ",
        end="",
        flush=True,
    )
    axis = _read_axis(sys.stdin)
    if axis is None:
        print("Invalid input: please enter three numbers.", file=sys.stderr)
        return 1

    size = args.size
    try:
        if args.rotation is not None:
            if args.filename is None:
                return 0
            frame = render_wireframe(args.rotation, axis, size, size)
            frame_to_image(frame, size, size, rgb=False).save(args.filename)
            return 0

        angle = 0.0
        frame_count = 0
        key = ""
        while key != _ESCAPE:
            frame = render_wireframe(angle, axis, size, size)
            frame_to_image(frame, size, size, rgb=False).save(DEFAULT_FILENAME)
            key = _read_key(sys.stdin)
            print(f"frame count: {frame_count}")
            frame_count += 1
            if key == "a":
                angle += ANGLE_STEP
            elif key == "d":
                angle -= ANGLE_STEP
    except ValueError as error:
        print(error, file=sys.stderr)
        return 1
    return 0


def _run_ssaa(args: argparse.Namespace) -> int:
    size = args.size
    if args.filename is not None:
        frame_to_image(render_ssaa(0.0, size, size), size, size).save(args.filename)
        return 0

    frame_count = 0
    key = ""
    while key != _ESCAPE:
        frame_to_image(render_ssaa(0.0, size, size), size, size).save(DEFAULT_FILENAME)
        key = _read_key(sys.stdin)
        print(f"frame count: {frame_count}")
        frame_count += 1
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    if args.command == "wireframe":
        return _run_wireframe(args)
    return _run_ssaa(args)


if __name__ == "__main__":
    sys.exit(main())