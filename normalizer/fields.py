"""
normalizer/fields.py

Field decoders and the ordered fallback chain used to read loosely
structured annotation records.

Every decoder takes one raw JSON value and returns the decoded value or
``None``.  Decoders never raise: a value of the wrong shape is simply
"absent", and the fallback chain moves on to the next key.
"""

from __future__ import annotations

import math
import uuid
from typing import Any, Callable, Mapping, Optional, Sequence, TypeVar

from models import NormalizedPoint

T = TypeVar("T")

Decoder = Callable[[Any], Optional[T]]


# ----------------------------
# Field aliases (primary key first)
# ----------------------------

CENTER_KEYS = ("center", "position")
ORIGIN_KEYS = ("origin", "topLeft")
SIZE_KEYS = ("size",)
START_KEYS = ("start", "from")
END_KEYS = ("end", "to")
# fontSize wins over textSize when both are present
TEXT_SIZE_KEYS = ("fontSize", "textSize")


def resolve(record: Mapping[str, Any], keys: Sequence[str], decoder: Decoder) -> Optional[T]:
    """Try each key in order and return the first value *decoder* accepts.

    Args:
        record: The raw annotation record.
        keys: Key names in priority order.
        decoder: Function mapping a raw value to a decoded value or ``None``.

    Returns:
        The first successful decode, or ``None`` if no key decodes.
    """
    for key in keys:
        if key not in record:
            continue
        value = decoder(record[key])
        if value is not None:
            return value
    return None


def decode_number(value: Any) -> Optional[float]:
    """Accept JSON numbers only; booleans and non-finite values are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


def decode_string(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def decode_point(value: Any) -> Optional[NormalizedPoint]:
    """Decode ``{"x": .., "y": ..}``.  Both members must be numbers."""
    if not isinstance(value, Mapping):
        return None
    x = decode_number(value.get("x"))
    y = decode_number(value.get("y"))
    if x is None or y is None:
        return None
    return NormalizedPoint(x, y)


def decode_size(record: Mapping[str, Any]) -> Optional[NormalizedPoint]:
    """Resolve a rectangle size.

    A ``width``/``height`` pair is tried first and only used when both
    decode; otherwise the ``size`` point is used.  The two sources are
    never mixed.
    """
    width = decode_number(record.get("width"))
    height = decode_number(record.get("height"))
    if width is not None and height is not None:
        return NormalizedPoint(width, height)
    return resolve(record, SIZE_KEYS, decode_point)


def decode_id(value: Any) -> str:
    """Return the record id, or a fresh UUID when it is absent or malformed."""
    if isinstance(value, str) and value.strip():
        return value
    return str(uuid.uuid4())
