"""
overlay/primitives.py

Draw primitives produced by the overlay renderer.

All coordinates are absolute pixels in the target viewport.  Each primitive
carries a concrete color (defaults are already applied) and the id of the
annotation it came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from utils import ArgbColor


@dataclass(frozen=True)
class CirclePrimitive:
    """Stroked ellipse centered on ``(cx, cy)`` with radii ``rx``/``ry``."""
    KIND: ClassVar[str] = "circle"

    annotation_id: str
    cx: float
    cy: float
    rx: float
    ry: float
    color: ArgbColor
    line_width: float

    @property
    def width(self) -> float:
        return 2 * self.rx

    @property
    def height(self) -> float:
        return 2 * self.ry


@dataclass(frozen=True)
class RectPrimitive:
    """Rectangle with its top-left corner at ``(x, y)``.

    ``color`` is the stroke (``None`` for no outline) and ``fill`` the
    interior (``None`` for an unfilled rectangle).
    """
    KIND: ClassVar[str] = "rect"

    annotation_id: str
    x: float
    y: float
    width: float
    height: float
    color: Optional[ArgbColor]
    line_width: float
    fill: Optional[ArgbColor] = None


@dataclass(frozen=True)
class LinePrimitive:
    """Straight stroke.  ``role`` is "shaft" for the arrow body, "head" for an arrowhead arm."""
    KIND: ClassVar[str] = "line"

    annotation_id: str
    x1: float
    y1: float
    x2: float
    y2: float
    color: ArgbColor
    line_width: float
    role: str = "shaft"


@dataclass(frozen=True)
class LabelPrimitive:
    """Text centered on ``(x, y)`` over a ``background`` box."""
    KIND: ClassVar[str] = "label"

    annotation_id: str
    x: float
    y: float
    text: str
    text_size: float
    color: ArgbColor
    background: ArgbColor


Primitive = Union[CirclePrimitive, RectPrimitive, LinePrimitive, LabelPrimitive]
