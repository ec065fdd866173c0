"""
schemas/__init__.py

JSON Schema definition and validation utilities for the analysis response
envelope.  Validation is advisory: the normalizer decodes whatever it can
regardless, and callers use the messages for logging.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft202012Validator

# Schema file paths
SCHEMA_DIR = os.path.dirname(os.path.abspath(__file__))
RESPONSE_SCHEMA_PATH = os.path.join(SCHEMA_DIR, "analyze_response_schema.json")

# Cached schema
_response_schema: Optional[Dict] = None


def get_response_schema() -> Dict:
    """Load and return the response envelope schema."""
    global _response_schema
    if _response_schema is None:
        with open(RESPONSE_SCHEMA_PATH, "r", encoding="utf-8") as f:
            _response_schema = json.load(f)
    return _response_schema


def _format_errors(errors) -> List[str]:
    messages = []
    for error in errors:
        path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "root"
        messages.append(f"{path}: {error.message}")
    return messages


def validate_response(data: Any) -> Tuple[bool, List[str]]:
    """
    Validate a decoded response body against the envelope schema.

    Args:
        data: The parsed JSON body

    Returns:
        Tuple of (is_valid, list_of_error_messages)
    """
    validator = Draft202012Validator(get_response_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        return True, []
    return False, _format_errors(errors)
