"""
normalizer/response.py

Decode the analysis service's response envelope into an AnalyzeResult.

Only the ``annotations`` array goes through the tolerant normalizer; the
surrounding fields (status, feedback, side-channel annotation status) are
copied over when they have the expected type and ignored otherwise.
Nothing in here raises for malformed input.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from models import AnalyzeResult, FeedbackPayload, Protocol
from normalizer.annotations import normalize_annotations
from schemas import validate_response
from utils import extract_first_json_object

log = logging.getLogger(__name__)


def _opt_str(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return value if isinstance(value, str) else None


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {k: v for k, v in value.items() if isinstance(k, str) and isinstance(v, str)}


def decode_analyze_result(payload: Any, protocol: str = Protocol.FULL) -> AnalyzeResult:
    """
    Decode a parsed response body.

    Args:
        payload: The JSON body as returned by ``json.loads``
        protocol: Which annotation family the ``annotations`` array carries

    Returns:
        An AnalyzeResult.  Rejected annotation records are listed in
        ``issues`` and summarized in ``annotation_status`` /
        ``annotation_error`` unless the server already set those.
    """
    if not isinstance(payload, Mapping):
        log.warning("Response body is %s, not an object", type(payload).__name__)
        return AnalyzeResult(error="Response body is not a JSON object.")

    valid, problems = validate_response(payload)
    if not valid:
        for problem in problems:
            log.warning("Response schema: %s", problem)

    status = payload.get("status")
    report = normalize_annotations(payload.get("annotations"), protocol)

    result = AnalyzeResult(
        status=status if isinstance(status, str) else "",
        problem_type=_opt_str(payload, "problem_type"),
        context=_opt_str(payload, "context"),
        feedback=FeedbackPayload.from_dict(payload.get("feedback")),
        issues=list(report.issues),
        annotation_status=_opt_str(payload, "annotation_status"),
        annotation_error=_opt_str(payload, "annotation_error"),
        annotation_metadata=_string_map(payload.get("annotation_metadata")),
        error=_opt_str(payload, "error"),
    )
    if protocol == Protocol.HIGHLIGHT:
        result.highlights = list(report.items)
    else:
        result.annotations = list(report.items)

    if report.issues:
        if result.annotation_status is None:
            result.annotation_status = report.status
        if result.annotation_error is None:
            result.annotation_error = report.error_message()

    log.debug(
        "Decoded response status=%r: %d of %d annotations kept",
        result.status, len(report.items), report.total,
    )
    return result


def parse_analyze_response(text: str, protocol: str = Protocol.FULL) -> AnalyzeResult:
    """
    Decode a raw response body.

    The body may be wrapped in markdown code fences or surrounded by prose;
    the first JSON object found is used.

    Args:
        text: Raw response text
        protocol: Which annotation family the ``annotations`` array carries

    Returns:
        The decoded AnalyzeResult, or an empty result with ``error`` set if
        no JSON object could be found.
    """
    parsed = extract_first_json_object(text)
    if parsed is None:
        log.warning("Response did not contain a parseable JSON object")
        return AnalyzeResult(error="Response did not contain parseable JSON.")
    return decode_analyze_result(parsed, protocol)
