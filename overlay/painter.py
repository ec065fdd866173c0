"""
overlay/painter.py

Paint overlay primitives with Qt.

This is the only Qt-aware part of the overlay: the renderer produces plain
primitives, and the functions here replay them on a QPainter.
"""

from __future__ import annotations

from typing import Iterable, Optional

from PyQt6.QtCore import QPointF, QRectF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QFontMetricsF, QImage, QPainter, QPen, QTextOption

from models import AnalyzeResult
from overlay.primitives import (
    CirclePrimitive,
    LabelPrimitive,
    LinePrimitive,
    Primitive,
    RectPrimitive,
)
from overlay.renderer import RenderStyle, render_result
from utils import ArgbColor

LABEL_PADDING = 4.0


def to_qcolor(c: ArgbColor) -> QColor:
    """Convert an ArgbColor to a QColor."""
    return QColor(c.red, c.green, c.blue, c.alpha)


def _stroke_pen(color: ArgbColor, width: float) -> QPen:
    pen = QPen(to_qcolor(color), width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def _paint_label(painter: QPainter, p: LabelPrimitive) -> None:
    font = QFont(painter.font())
    font.setPointSizeF(p.text_size)
    painter.setFont(font)

    metrics = QFontMetricsF(font)
    text_w = metrics.horizontalAdvance(p.text)
    text_h = metrics.height()
    box = QRectF(
        p.x - text_w / 2 - LABEL_PADDING,
        p.y - text_h / 2 - LABEL_PADDING,
        text_w + 2 * LABEL_PADDING,
        text_h + 2 * LABEL_PADDING,
    )

    painter.setPen(Qt.PenStyle.NoPen)
    painter.setBrush(QBrush(to_qcolor(p.background)))
    painter.drawRoundedRect(box, 4, 4)

    painter.setPen(QPen(to_qcolor(p.color)))
    painter.setBrush(Qt.BrushStyle.NoBrush)
    painter.drawText(box, p.text, QTextOption(Qt.AlignmentFlag.AlignCenter))


def paint_primitives(painter: QPainter, primitives: Iterable[Primitive]) -> None:
    """Replay primitives on *painter* in order.  The painter state is restored afterwards."""
    painter.save()
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    try:
        for p in primitives:
            if isinstance(p, CirclePrimitive):
                painter.setPen(_stroke_pen(p.color, p.line_width))
                painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawEllipse(QPointF(p.cx, p.cy), p.rx, p.ry)
            elif isinstance(p, RectPrimitive):
                if p.color is not None and p.line_width > 0:
                    painter.setPen(_stroke_pen(p.color, p.line_width))
                else:
                    painter.setPen(Qt.PenStyle.NoPen)
                if p.fill is not None:
                    painter.setBrush(QBrush(to_qcolor(p.fill)))
                else:
                    painter.setBrush(Qt.BrushStyle.NoBrush)
                painter.drawRect(QRectF(p.x, p.y, p.width, p.height))
            elif isinstance(p, LinePrimitive):
                painter.setPen(_stroke_pen(p.color, p.line_width))
                painter.drawLine(QPointF(p.x1, p.y1), QPointF(p.x2, p.y2))
            elif isinstance(p, LabelPrimitive):
                _paint_label(painter, p)
    finally:
        painter.restore()


def render_overlay_image(
    base: QImage,
    result: AnalyzeResult,
    style: Optional[RenderStyle] = None,
) -> QImage:
    """
    Paint the result's overlay on a copy of *base*.

    Args:
        base: The sketch image; it is not modified
        result: Decoded analysis response
        style: Rendering defaults

    Returns:
        A new ARGB32 image with the overlay painted on top.
    """
    image = base.convertToFormat(QImage.Format.Format_ARGB32_Premultiplied)
    primitives = render_result(result, image.width(), image.height(), style)
    painter = QPainter(image)
    try:
        paint_primitives(painter, primitives)
    finally:
        painter.end()
    return image
