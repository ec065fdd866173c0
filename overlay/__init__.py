"""
overlay package

Geometry-to-pixel rendering of canonical annotations.  The Qt painter
lives in ``overlay.painter`` and is imported separately.
"""

from overlay.primitives import (
    CirclePrimitive,
    LabelPrimitive,
    LinePrimitive,
    Primitive,
    RectPrimitive,
)
from overlay.renderer import (
    DEFAULT_STYLE,
    RenderStyle,
    render_annotations,
    render_highlights,
    render_result,
)

__all__ = [
    "CirclePrimitive",
    "LabelPrimitive",
    "LinePrimitive",
    "Primitive",
    "RectPrimitive",
    "DEFAULT_STYLE",
    "RenderStyle",
    "render_annotations",
    "render_highlights",
    "render_result",
]
