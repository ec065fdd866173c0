"""Tests for the response envelope schema in schemas/."""
from __future__ import annotations

from schemas import get_response_schema, validate_response


def test_schema_loads():
    schema = get_response_schema()
    assert schema["required"] == ["status"]
    assert "annotationRecord" in schema["$defs"]


def test_valid_response():
    ok, errors = validate_response({
        "status": "ok",
        "feedback": {"problem": "p", "hints": ["h"]},
        "annotations": [
            {"type": "circle", "center": {"x": 0.5, "y": 0.5}, "radius": 0.1, "colorHex": "#FF0000"},
            {"type": "rect", "topLeft": {"x": 0, "y": 0}, "width": 0.2, "height": 0.2},
        ],
        "annotation_metadata": {"model": "v2"},
    })
    assert ok
    assert errors == []


def test_missing_status():
    ok, errors = validate_response({"annotations": []})
    assert not ok
    assert any(e.startswith("root:") for e in errors)


def test_error_paths():
    ok, errors = validate_response({
        "status": "ok",
        "annotations": [{"type": "circle", "center": {"x": 0.5}}],
        "annotation_metadata": {"latency": 5},
    })
    assert not ok
    assert any(e.startswith("annotation_metadata -> latency:") for e in errors)
    assert any(e.startswith("annotations -> 0 -> center:") for e in errors)
