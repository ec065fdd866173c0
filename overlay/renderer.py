"""
overlay/renderer.py

Turn canonical annotations into pixel-space draw primitives.

Rendering is a pure function of (annotations, viewport size, style): it
keeps no state between calls, never mutates its input, and silently skips
annotations whose required geometry is missing.  Re-running it on every
resize is the intended use.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from models import (
    AnalyzeResult,
    Annotation,
    AnnotationType,
    ArrowAnnotation,
    CircleAnnotation,
    HighlightAnnotation,
    RectAnnotation,
    TextAnnotation,
)
from overlay.primitives import (
    CirclePrimitive,
    LabelPrimitive,
    LinePrimitive,
    Primitive,
    RectPrimitive,
)
from utils import ArgbColor, parse_color_hex

# Arrowhead geometry is fixed in pixels; it does not follow the viewport or pen width.
ARROW_HEAD_LENGTH = 12.0
ARROW_HEAD_ANGLE = math.pi / 7


@dataclass(frozen=True)
class RenderStyle:
    """Defaults applied when an annotation leaves a style field unset.

    Defaults:
        line_width: 3.0
        text_size: 14.0
        shape_color: opaque red
        text_color: opaque blue
        label_background: white at 70% opacity
        highlight_color: opaque yellow
    """
    line_width: float = 3.0
    text_size: float = 14.0
    shape_color: ArgbColor = ArgbColor(0xFF, 0xFF, 0x00, 0x00)
    text_color: ArgbColor = ArgbColor(0xFF, 0x00, 0x00, 0xFF)
    label_background: ArgbColor = ArgbColor(0xB3, 0xFF, 0xFF, 0xFF)
    highlight_color: ArgbColor = ArgbColor(0xFF, 0xFF, 0xFF, 0x00)


DEFAULT_STYLE = RenderStyle()


def _stroke_color(ann: Annotation, fallback: ArgbColor) -> ArgbColor:
    return parse_color_hex(ann.color_hex) or fallback


def _stroke_width(ann: Annotation, style: RenderStyle) -> float:
    if ann.line_width is None or ann.line_width <= 0:
        return style.line_width
    return ann.line_width


def _render_circle(ann: CircleAnnotation, w: float, h: float, style: RenderStyle) -> List[Primitive]:
    # Radius scales per axis, so a circle becomes an ellipse on a non-square viewport.
    return [CirclePrimitive(
        annotation_id=ann.id,
        cx=ann.center.x * w,
        cy=ann.center.y * h,
        rx=ann.radius * w,
        ry=ann.radius * h,
        color=_stroke_color(ann, style.shape_color),
        line_width=_stroke_width(ann, style),
    )]


def _render_rect(ann: RectAnnotation, w: float, h: float, style: RenderStyle) -> List[Primitive]:
    return [RectPrimitive(
        annotation_id=ann.id,
        x=ann.origin.x * w,
        y=ann.origin.y * h,
        width=ann.size.x * w,
        height=ann.size.y * h,
        color=_stroke_color(ann, style.shape_color),
        line_width=_stroke_width(ann, style),
    )]


def arrowhead_arms(x1: float, y1: float, x2: float, y2: float) -> List[tuple]:
    """Return the far ends of the two arrowhead arms drawn from ``(x2, y2)``.

    Each arm points back along the line, rotated by +/- ARROW_HEAD_ANGLE,
    and is ARROW_HEAD_LENGTH pixels long.
    """
    angle = math.atan2(y2 - y1, x2 - x1)
    arms = []
    for sign in (1, -1):
        theta = angle + math.pi + sign * ARROW_HEAD_ANGLE
        arms.append((
            x2 + ARROW_HEAD_LENGTH * math.cos(theta),
            y2 + ARROW_HEAD_LENGTH * math.sin(theta),
        ))
    return arms


def _render_arrow(ann: ArrowAnnotation, w: float, h: float, style: RenderStyle) -> List[Primitive]:
    color = _stroke_color(ann, style.shape_color)
    width = _stroke_width(ann, style)
    x1, y1 = ann.start.x * w, ann.start.y * h
    x2, y2 = ann.end.x * w, ann.end.y * h

    out: List[Primitive] = [LinePrimitive(ann.id, x1, y1, x2, y2, color, width, role="shaft")]
    for ax, ay in arrowhead_arms(x1, y1, x2, y2):
        out.append(LinePrimitive(ann.id, x2, y2, ax, ay, color, width, role="head"))
    return out


def _render_text(ann: TextAnnotation, w: float, h: float, style: RenderStyle) -> List[Primitive]:
    size = ann.text_size if ann.text_size is not None and ann.text_size > 0 else style.text_size
    return [LabelPrimitive(
        annotation_id=ann.id,
        x=ann.center.x * w,
        y=ann.center.y * h,
        text=ann.text,
        text_size=size,
        color=_stroke_color(ann, style.text_color),
        background=style.label_background,
    )]


_RENDERERS: Dict[str, Callable[..., List[Primitive]]] = {
    AnnotationType.CIRCLE: _render_circle,
    AnnotationType.RECT: _render_rect,
    AnnotationType.ARROW: _render_arrow,
    AnnotationType.TEXT: _render_text,
}


def render_annotations(
    annotations: Iterable[Annotation],
    width: float,
    height: float,
    style: Optional[RenderStyle] = None,
) -> List[Primitive]:
    """
    Render typed annotations for a ``width`` x ``height`` pixel viewport.

    Args:
        annotations: Canonical annotations in paint order
        width: Viewport width in pixels
        height: Viewport height in pixels
        style: Defaults for unset colors, widths and text sizes

    Returns:
        Draw primitives in paint order.  Annotations missing their required
        geometry contribute nothing.
    """
    style = style or DEFAULT_STYLE
    out: List[Primitive] = []
    for ann in annotations:
        render = _RENDERERS.get(ann.type)
        if render is None or not ann.is_renderable:
            continue
        out.extend(render(ann, width, height, style))
    return out


def render_highlights(
    highlights: Iterable[HighlightAnnotation],
    width: float,
    height: float,
    style: Optional[RenderStyle] = None,
) -> List[Primitive]:
    """
    Render reduced-protocol highlights as filled, unstroked rectangles.

    The fill color's alpha is scaled by the highlight's opacity.
    """
    style = style or DEFAULT_STYLE
    out: List[Primitive] = []
    for hl in highlights:
        base = parse_color_hex(hl.color_hex) or style.highlight_color
        fill = base.with_alpha(round(base.alpha * hl.opacity))
        out.append(RectPrimitive(
            annotation_id=hl.id,
            x=hl.top_left.x * width,
            y=hl.top_left.y * height,
            width=hl.width * width,
            height=hl.height * height,
            color=None,
            line_width=0.0,
            fill=fill,
        ))
    return out


def render_result(
    result: AnalyzeResult,
    width: float,
    height: float,
    style: Optional[RenderStyle] = None,
) -> List[Primitive]:
    """Render everything drawable in a decoded response: highlights first, then annotations."""
    return (
        render_highlights(result.highlights, width, height, style)
        + render_annotations(result.annotations, width, height, style)
    )
