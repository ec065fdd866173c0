"""
models.py

Data models and constants for the SketchOverlay feedback client.

Every annotation here is the canonical, alias-resolved form of a record
received from the analysis service.  Geometry is expressed in normalized
coordinates (fractions of the canvas width/height) so the same annotation
can be re-rendered at any viewport size.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional


# ----------------------------
# Geometry
# ----------------------------

@dataclass(frozen=True)
class NormalizedPoint:
    """A position relative to the canvas size.

    Values are expected in ``[0, 1]`` but are never clamped; a point outside
    that range is simply drawn off-canvas.
    """
    x: float
    y: float


# ----------------------------
# Annotation type tags
# ----------------------------

class AnnotationType:
    """Type tags accepted in the ``type`` field of a full-protocol record."""
    CIRCLE = "circle"
    RECT = "rect"
    ARROW = "arrow"
    TEXT = "text"

    ALL = frozenset([CIRCLE, RECT, ARROW, TEXT])


class Protocol:
    """Which annotation family the ``annotations`` array carries."""
    FULL = "full"            # typed circle/rect/arrow/text records
    HIGHLIGHT = "highlight"  # reduced protocol: rectangle highlights only

    ALL = frozenset([FULL, HIGHLIGHT])


# ----------------------------
# Canonical annotations (one class per variant)
# ----------------------------

@dataclass(frozen=True)
class Annotation:
    """Fields shared by every annotation variant.

    ``color_hex`` and ``line_width`` are kept exactly as decoded; ``None``
    means the renderer applies its per-variant default.
    """
    KIND: ClassVar[str] = ""

    id: str
    color_hex: Optional[str] = None
    line_width: Optional[float] = None

    @property
    def type(self) -> str:
        return self.KIND

    @property
    def is_renderable(self) -> bool:
        """True when every geometry field this variant needs is present."""
        return False


@dataclass(frozen=True)
class CircleAnnotation(Annotation):
    KIND: ClassVar[str] = AnnotationType.CIRCLE

    center: Optional[NormalizedPoint] = None
    radius: Optional[float] = None

    @property
    def is_renderable(self) -> bool:
        return self.center is not None and self.radius is not None


@dataclass(frozen=True)
class RectAnnotation(Annotation):
    """Axis-aligned rectangle; ``size.x`` is the width, ``size.y`` the height."""
    KIND: ClassVar[str] = AnnotationType.RECT

    origin: Optional[NormalizedPoint] = None
    size: Optional[NormalizedPoint] = None

    @property
    def is_renderable(self) -> bool:
        return self.origin is not None and self.size is not None


@dataclass(frozen=True)
class ArrowAnnotation(Annotation):
    KIND: ClassVar[str] = AnnotationType.ARROW

    start: Optional[NormalizedPoint] = None
    end: Optional[NormalizedPoint] = None

    @property
    def is_renderable(self) -> bool:
        return self.start is not None and self.end is not None


@dataclass(frozen=True)
class TextAnnotation(Annotation):
    KIND: ClassVar[str] = AnnotationType.TEXT

    center: Optional[NormalizedPoint] = None
    text: Optional[str] = None
    text_size: Optional[float] = None

    @property
    def is_renderable(self) -> bool:
        return self.center is not None and self.text is not None


# Maps each type tag to the class holding that variant's fields.
ANNOTATION_CLASSES: Dict[str, type] = {
    AnnotationType.CIRCLE: CircleAnnotation,
    AnnotationType.RECT: RectAnnotation,
    AnnotationType.ARROW: ArrowAnnotation,
    AnnotationType.TEXT: TextAnnotation,
}


@dataclass(frozen=True)
class HighlightAnnotation:
    """Reduced-protocol annotation: a single translucent rectangle.

    Attributes:
        top_left: Upper-left corner in normalized coordinates.
        width: Width as a fraction of the canvas width.
        height: Height as a fraction of the canvas height.
        color_hex: Fill color string, ``None`` for the default highlight color.
        opacity: Fill opacity in ``[0, 1]``.
        id: Record id (generated when the backend sends none).
        kind: The backend's free-form ``type`` label, if any.
    """
    top_left: NormalizedPoint
    width: float
    height: float
    color_hex: Optional[str] = None
    opacity: float = 1.0
    id: str = ""
    kind: str = ""


# ----------------------------
# Response envelope
# ----------------------------

@dataclass
class FeedbackPayload:
    """Tutor-style text feedback that accompanies the annotations."""
    problem: str = ""
    analysis: str = ""
    hints: List[str] = field(default_factory=list)
    mistakes: List[str] = field(default_factory=list)
    next_step: str = ""
    encouragement: str = ""

    @classmethod
    def from_dict(cls, d: Any) -> Optional["FeedbackPayload"]:
        """Create a FeedbackPayload from a decoded JSON object.

        Missing or mistyped string fields become ``""``; list fields keep only
        their string entries.

        Args:
            d: The ``feedback`` value from the response body.

        Returns:
            A ``FeedbackPayload``, or ``None`` if *d* is not a mapping.
        """
        if not isinstance(d, dict):
            return None

        def text(key: str) -> str:
            v = d.get(key)
            return v if isinstance(v, str) else ""

        def items(key: str) -> List[str]:
            v = d.get(key)
            if not isinstance(v, list):
                return []
            return [s for s in v if isinstance(s, str)]

        return cls(
            problem=text("problem"),
            analysis=text("analysis"),
            hints=items("hints"),
            mistakes=items("mistakes"),
            next_step=text("next_step"),
            encouragement=text("encouragement"),
        )


@dataclass(frozen=True)
class AnnotationIssue:
    """A raw record that could not be normalized, keyed by its array index."""
    index: int
    reason: str

    def __str__(self) -> str:
        return f"annotation {self.index}: {self.reason}"


SUCCESS_STATUSES = frozenset(["ok", "success"])


@dataclass
class AnalyzeResult:
    """Decoded analysis response.

    ``annotations`` holds typed annotations (full protocol) and
    ``highlights`` holds highlight regions (reduced protocol); only one of
    them is populated for a given response.  ``issues`` lists the records
    that were dropped while decoding.
    """
    status: str = ""
    problem_type: Optional[str] = None
    context: Optional[str] = None
    feedback: Optional[FeedbackPayload] = None
    annotations: List[Annotation] = field(default_factory=list)
    highlights: List[HighlightAnnotation] = field(default_factory=list)
    issues: List[AnnotationIssue] = field(default_factory=list)
    annotation_status: Optional[str] = None
    annotation_error: Optional[str] = None
    annotation_metadata: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status.strip().lower() in SUCCESS_STATUSES
