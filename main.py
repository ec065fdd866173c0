"""
main.py

SketchOverlay - feedback overlay viewer

Loads an analysis response saved as JSON, decodes its annotations and
paints them over the sketch they refer to.  The overlay is re-rendered
from the canonical annotations on every repaint, so resizing the window
rescales it.

Usage:
    python main.py response.json --image sketch.png
    python main.py response.json --image sketch.png --export overlay.png
    python main.py response.json --size 1024x768 --protocol highlight

Dependencies:
    pip install PyQt6 platformdirs tomli-w jsonschema
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from PyQt6.QtCore import QRectF, Qt
from PyQt6.QtGui import QColor, QImage, QPainter
from PyQt6.QtWidgets import QApplication, QWidget

from models import AnalyzeResult, Protocol
from normalizer import parse_analyze_response
from overlay.painter import paint_primitives, render_overlay_image
from overlay.renderer import RenderStyle, render_result
from settings import get_settings

log = logging.getLogger("sketchoverlay")

DEFAULT_CANVAS_SIZE = (800, 600)


class OverlayView(QWidget):
    """Shows the sketch stretched to the widget with the overlay painted on top."""

    def __init__(self, sketch: QImage, result: AnalyzeResult, style: RenderStyle, parent=None):
        super().__init__(parent)
        self.sketch = sketch
        self.result = result
        self.style_defaults = style
        self.setWindowTitle("SketchOverlay")

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            target = QRectF(0, 0, self.width(), self.height())
            painter.fillRect(target, QColor(Qt.GlobalColor.white))
            painter.drawImage(target, self.sketch)
            primitives = render_result(self.result, self.width(), self.height(), self.style_defaults)
            paint_primitives(painter, primitives)
        finally:
            painter.end()


def parse_size(text: str) -> Tuple[int, int]:
    """Parse ``WIDTHxHEIGHT`` into a pair of positive ints."""
    try:
        w_str, h_str = text.lower().split("x", 1)
        w, h = int(w_str), int(h_str)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got '{text}'")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got '{text}'")
    return w, h


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Overlay analysis feedback on a sketch.")
    parser.add_argument("response", type=Path, help="analysis response body (JSON)")
    parser.add_argument("--image", type=Path, help="sketch image the response refers to")
    parser.add_argument("--size", type=parse_size, help="canvas size when no image is given, e.g. 800x600")
    parser.add_argument("--protocol", choices=sorted(Protocol.ALL), help="annotation family in the response")
    parser.add_argument("--export", type=Path, help="write the overlaid image here instead of opening a window")
    return parser


def log_feedback(result: AnalyzeResult) -> None:
    """Write the textual part of the response to the log."""
    if not result.is_success:
        log.error("Analysis failed: %s", result.error or f"status '{result.status}'")
        return
    if result.problem_type:
        log.info("Problem type: %s", result.problem_type)
    fb = result.feedback
    if fb is not None:
        for title, text in (("Problem", fb.problem), ("Analysis", fb.analysis),
                            ("Next step", fb.next_step), ("Encouragement", fb.encouragement)):
            if text:
                log.info("%s: %s", title, text)
        for hint in fb.hints:
            log.info("Hint: %s", hint)
        for mistake in fb.mistakes:
            log.info("Mistake: %s", mistake)
    if result.annotation_error:
        log.warning("Annotation error: %s", result.annotation_error)
    log.info("%d annotations, %d highlights", len(result.annotations), len(result.highlights))


def load_sketch(image_path: Optional[Path], size: Optional[Tuple[int, int]]) -> QImage:
    if image_path is not None:
        image = QImage(str(image_path))
        if image.isNull():
            raise OSError(f"Could not load image '{image_path}'")
        return image
    w, h = size or DEFAULT_CANVAS_SIZE
    image = QImage(w, h, QImage.Format.Format_ARGB32_Premultiplied)
    image.fill(QColor(Qt.GlobalColor.white))
    return image


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings().settings
    logging.basicConfig(
        level=settings.logging.level_number(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    protocol = args.protocol or settings.protocol
    style = settings.render.to_style()

    try:
        text = args.response.read_text(encoding="utf-8")
    except OSError as e:
        log.error("Could not read response: %s", e)
        return 1

    result = parse_analyze_response(text, protocol)
    log_feedback(result)

    app = QApplication(sys.argv[:1])
    try:
        sketch = load_sketch(args.image, args.size)
    except OSError as e:
        log.error("%s", e)
        return 1

    if args.export is not None:
        image = render_overlay_image(sketch, result, style)
        if not image.save(str(args.export)):
            log.error("Could not write '%s'", args.export)
            return 1
        log.info("Wrote %s", args.export)
        return 0

    view = OverlayView(sketch, result, style)
    view.resize(sketch.width(), sketch.height())
    view.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
