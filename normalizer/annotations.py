"""
normalizer/annotations.py

Normalize raw annotation records into canonical annotations.

A single record is normalized best-effort: every optional field walks its
alias chain and ends up absent if nothing decodes.  Only the ``type`` tag
is required.  Batches isolate each record, so one bad entry is reported
by index and the rest of the batch still comes through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from models import (
    ANNOTATION_CLASSES,
    Annotation,
    AnnotationIssue,
    AnnotationType,
    HighlightAnnotation,
    Protocol,
)
from normalizer.fields import (
    CENTER_KEYS,
    END_KEYS,
    ORIGIN_KEYS,
    START_KEYS,
    TEXT_SIZE_KEYS,
    decode_id,
    decode_number,
    decode_point,
    decode_size,
    decode_string,
    resolve,
)

log = logging.getLogger(__name__)


class AnnotationDecodeError(ValueError):
    """A record cannot be turned into any annotation at all."""


def _decode_type(raw: Mapping[str, Any]) -> str:
    """Return the lowercase type tag of ``raw``.

    Tags are matched case-insensitively after trimming surrounding
    whitespace, so ``" Circle "`` is a circle.  A missing, non-string or
    unrecognized tag raises AnnotationDecodeError.
    """
    if "type" not in raw:
        raise AnnotationDecodeError("missing 'type'")
    tag = raw["type"]
    if not isinstance(tag, str):
        raise AnnotationDecodeError(f"'type' must be a string, got {type(tag).__name__}")
    kind = tag.strip().lower()
    if kind not in AnnotationType.ALL:
        raise AnnotationDecodeError(f"unrecognized type '{tag}'")
    return kind


def _optional(raw: Mapping[str, Any], key: str, decoder) -> Any:
    """Decode a single-key optional field, logging values that get dropped."""
    if key not in raw:
        return None
    value = decoder(raw[key])
    if value is None:
        log.debug("Dropping malformed %s=%r", key, raw[key])
    return value


def normalize_annotation(raw: Any) -> Annotation:
    """
    Normalize one raw record into its canonical annotation variant.

    Args:
        raw: A decoded JSON object for a single annotation

    Returns:
        A CircleAnnotation, RectAnnotation, ArrowAnnotation or TextAnnotation.
        Geometry fields that could not be resolved are None.

    Raises:
        AnnotationDecodeError: If raw is not a mapping or its type tag is
            missing or unrecognized.
    """
    if not isinstance(raw, Mapping):
        raise AnnotationDecodeError(f"record must be an object, got {type(raw).__name__}")

    kind = _decode_type(raw)
    common: Dict[str, Any] = {
        "id": decode_id(raw.get("id")),
        "color_hex": _optional(raw, "colorHex", decode_string),
        "line_width": _optional(raw, "lineWidth", decode_number),
    }

    if kind == AnnotationType.CIRCLE:
        geometry = {
            "center": resolve(raw, CENTER_KEYS, decode_point),
            "radius": _optional(raw, "radius", decode_number),
        }
    elif kind == AnnotationType.RECT:
        geometry = {
            "origin": resolve(raw, ORIGIN_KEYS, decode_point),
            "size": decode_size(raw),
        }
    elif kind == AnnotationType.ARROW:
        geometry = {
            "start": resolve(raw, START_KEYS, decode_point),
            "end": resolve(raw, END_KEYS, decode_point),
        }
    else:
        geometry = {
            "center": resolve(raw, CENTER_KEYS, decode_point),
            "text": _optional(raw, "text", decode_string),
            "text_size": resolve(raw, TEXT_SIZE_KEYS, decode_number),
        }

    return ANNOTATION_CLASSES[kind](**common, **geometry)


def normalize_highlight(raw: Any) -> HighlightAnnotation:
    """
    Normalize one reduced-protocol highlight record.

    The rectangle itself (``topLeft``, ``width``, ``height``) is required;
    ``colorHex`` and ``opacity`` are best-effort.

    Raises:
        AnnotationDecodeError: If raw is not a mapping or the rectangle
            cannot be decoded.
    """
    if not isinstance(raw, Mapping):
        raise AnnotationDecodeError(f"record must be an object, got {type(raw).__name__}")

    top_left = resolve(raw, ("topLeft", "origin"), decode_point)
    if top_left is None:
        raise AnnotationDecodeError("missing or malformed 'topLeft'")
    width = decode_number(raw.get("width"))
    height = decode_number(raw.get("height"))
    if width is None or height is None:
        raise AnnotationDecodeError("missing or malformed 'width'/'height'")

    opacity = _optional(raw, "opacity", decode_number)
    opacity = 1.0 if opacity is None else min(1.0, max(0.0, opacity))

    return HighlightAnnotation(
        top_left=top_left,
        width=width,
        height=height,
        color_hex=_optional(raw, "colorHex", decode_string),
        opacity=opacity,
        id=decode_id(raw.get("id")),
        kind=decode_string(raw.get("type")) or "",
    )


NormalizedItem = Union[Annotation, HighlightAnnotation]


@dataclass
class NormalizationReport:
    """Outcome of normalizing a batch of raw records.

    Attributes:
        items: Successfully normalized annotations, in input order.
        issues: One entry per rejected record.
        total: Number of records in the input.
    """
    items: List[NormalizedItem] = field(default_factory=list)
    issues: List[AnnotationIssue] = field(default_factory=list)
    total: int = 0

    @property
    def status(self) -> str:
        """``"ok"``, ``"partial"`` or ``"error"``."""
        if not self.issues:
            return "ok"
        if self.items:
            return "partial"
        return "error"

    def error_message(self) -> Optional[str]:
        """Human-readable summary of the rejected records, or None."""
        if not self.issues:
            return None
        details = "; ".join(str(issue) for issue in self.issues)
        return f"{len(self.issues)} of {self.total} annotations could not be decoded: {details}"


def normalize_annotations(records: Any, protocol: str = Protocol.FULL) -> NormalizationReport:
    """
    Normalize every record of an ``annotations`` array independently.

    Args:
        records: The raw ``annotations`` value; anything but a list is
            treated as "no annotations"
        protocol: Protocol.FULL for typed annotations, Protocol.HIGHLIGHT
            for highlight regions

    Returns:
        A NormalizationReport with the kept annotations and per-index issues.
    """
    if protocol not in Protocol.ALL:
        raise ValueError(f"Unknown protocol '{protocol}'. Must be one of: {sorted(Protocol.ALL)}")

    report = NormalizationReport()
    if not isinstance(records, list):
        if records is not None:
            log.warning("annotations is %s, not a list; treating as empty", type(records).__name__)
        return report

    normalize_one = normalize_highlight if protocol == Protocol.HIGHLIGHT else normalize_annotation
    report.total = len(records)
    for i, raw in enumerate(records):
        try:
            report.items.append(normalize_one(raw))
        except AnnotationDecodeError as e:
            log.warning("Skipping annotation %d: %s", i, e)
            report.issues.append(AnnotationIssue(i, str(e)))

    return report
