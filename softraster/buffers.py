"""Buffer selectors, primitive kinds and typed buffer handles."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Buffers(enum.Flag):
    """Which of the render buffers an operation applies to."""

    COLOR = 1
    DEPTH = 2


class Primitive(enum.Enum):
    """Kinds of primitive that can be drawn."""

    LINE = enum.auto()
    TRIANGLE = enum.auto()


@dataclass(frozen=True)
class PosBufId:
    """Handle to a loaded list of vertex positions."""

    pos_id: int = 0


@dataclass(frozen=True)
class IndBufId:
    """Handle to a loaded list of index triples."""

    ind_id: int = 0


@dataclass(frozen=True)
class ColBufId:
    """Handle to a loaded list of per-vertex colours."""

    col_id: int = 0