"""Tests for overlay/painter.py.  Painting goes to offscreen QImages."""
from __future__ import annotations

import pytest
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QImage, QPainter

from models import (
    AnalyzeResult,
    ArrowAnnotation,
    HighlightAnnotation,
    NormalizedPoint,
    RectAnnotation,
    TextAnnotation,
)
from overlay.painter import paint_primitives, render_overlay_image, to_qcolor
from overlay.renderer import render_annotations
from utils import ArgbColor

P = NormalizedPoint


def _white(w: int = 200, h: int = 100) -> QImage:
    image = QImage(w, h, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(QColor(Qt.GlobalColor.white))
    return image


def test_to_qcolor():
    c = to_qcolor(ArgbColor(0x40, 0x10, 0x20, 0x30))
    assert (c.alpha(), c.red(), c.green(), c.blue()) == (0x40, 0x10, 0x20, 0x30)


class TestRenderOverlayImage:
    def test_rect_stroke_only(self, qapp):
        result = AnalyzeResult(status="ok", annotations=[
            RectAnnotation(id="r", origin=P(0.25, 0.25), size=P(0.5, 0.5)),
        ])
        out = render_overlay_image(_white(), result)
        edge = out.pixelColor(50, 50)
        assert edge.red() > 200 and edge.green() < 80 and edge.blue() < 80
        inside = out.pixelColor(100, 50)
        assert (inside.red(), inside.green(), inside.blue()) == (255, 255, 255)

    def test_base_image_untouched(self, qapp):
        base = _white()
        result = AnalyzeResult(status="ok", annotations=[
            ArrowAnnotation(id="a", start=P(0, 0.5), end=P(1, 0.5)),
        ])
        out = render_overlay_image(base, result)
        assert base.pixelColor(100, 50) == QColor(Qt.GlobalColor.white)
        assert out.pixelColor(100, 50) != QColor(Qt.GlobalColor.white)
        assert (out.width(), out.height()) == (200, 100)

    def test_highlight_fill(self, qapp):
        result = AnalyzeResult(status="ok", highlights=[
            HighlightAnnotation(top_left=P(0, 0), width=0.5, height=1, color_hex="#0000FF", id="h"),
        ])
        out = render_overlay_image(_white(), result)
        c = out.pixelColor(40, 50)
        assert (c.red(), c.green(), c.blue()) == (0, 0, 255)
        right = out.pixelColor(160, 50)
        assert (right.red(), right.green(), right.blue()) == (255, 255, 255)


def test_paint_primitives_restores_painter(qapp):
    image = _white()
    prims = render_annotations([
        TextAnnotation(id="t", center=P(0.5, 0.5), text="Check step 2"),
    ], image.width(), image.height())
    painter = QPainter(image)
    try:
        pen_before = painter.pen().color()
        paint_primitives(painter, prims)
        assert painter.pen().color() == pen_before
    finally:
        painter.end()


def test_empty_result_is_a_copy(qapp):
    out = render_overlay_image(_white(30, 20), AnalyzeResult())
    assert out.pixelColor(10, 10) == QColor(Qt.GlobalColor.white)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
