"""
normalizer package

Tolerant decoding of analysis responses into canonical annotations.
"""

from normalizer.annotations import (
    AnnotationDecodeError,
    NormalizationReport,
    normalize_annotation,
    normalize_annotations,
    normalize_highlight,
)
from normalizer.response import decode_analyze_result, parse_analyze_response

__all__ = [
    "AnnotationDecodeError",
    "NormalizationReport",
    "normalize_annotation",
    "normalize_annotations",
    "normalize_highlight",
    "decode_analyze_result",
    "parse_analyze_response",
]
