"""A small software rasterizer: transforms, wireframe drawing and supersampled triangle filling."""

__version__ = "0.1.0"
__all__ = ["buffers", "cli", "ssaa", "transforms", "triangle", "wireframe"]