"""
utils.py

Utility functions for the SketchOverlay client: pulling JSON out of raw
response text and parsing the lenient hex color strings the analysis
service emits.
"""

from __future__ import annotations

import json
import re
from typing import NamedTuple, Optional


def strip_markdown_fences(s: str) -> str:
    """
    Strip markdown code fences from a string.

    Handles formats like:
    - ```json ... ```
    - ``` ... ```

    Args:
        s: The string potentially wrapped in markdown fences

    Returns:
        The string with markdown fences removed
    """
    ss = (s or "").strip()

    pattern = r'^```(?:\w+)?\s*\n?(.*?)\n?```\s*$'
    match = re.match(pattern, ss, re.DOTALL)
    if match:
        return match.group(1).strip()

    return ss


def extract_first_json_object(s: str) -> Optional[dict]:
    """
    Extract the first JSON object from a string.
    Handles markdown code blocks, raw JSON and JSON surrounded by prose.
    """
    ss = strip_markdown_fences(s).strip()

    if ss.startswith("{") and ss.endswith("}"):
        try:
            parsed = json.loads(ss)
            if isinstance(parsed, dict):
                return parsed
        except ValueError:
            pass

    start = ss.find("{")
    if start < 0:
        return None

    # Brace matching ignores braces inside string literals
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(ss)):
        ch = ss[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                try:
                    parsed = json.loads(ss[start:i + 1])
                except ValueError:
                    return None
                return parsed if isinstance(parsed, dict) else None
    return None


# ----------------------------
# Colors
# ----------------------------

class ArgbColor(NamedTuple):
    """An 8-bit-per-channel color, alpha first."""
    alpha: int
    red: int
    green: int
    blue: int

    def with_alpha(self, alpha: int) -> "ArgbColor":
        return self._replace(alpha=max(0, min(255, int(alpha))))

    def to_hex(self) -> str:
        """Format as ``#AARRGGBB``."""
        return "#{:02X}{:02X}{:02X}{:02X}".format(self.alpha, self.red, self.green, self.blue)


_NON_ALNUM = re.compile(r"[^0-9A-Za-z]")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def parse_color_hex(s: Optional[str]) -> Optional[ArgbColor]:
    """
    Parse a hex color string.

    Characters other than letters and digits (``#``, spaces, dashes)
    are dropped first.  A ``0x`` prefix is not recognised, so
    ``"0x1A2B3C"`` is eight characters with a non-hex ``x`` and fails.
    Six digits are ``RRGGBB`` and become fully opaque; eight digits are
    ``AARRGGBB``.

    Args:
        s: Hex string like "#1A2B3C" or "1A2B3C4D"

    Returns:
        The parsed color, or None for any other length or non-hex input
    """
    if not isinstance(s, str):
        return None
    digits = _NON_ALNUM.sub("", s)
    if len(digits) == 6:
        digits = "FF" + digits
    if len(digits) != 8 or not set(digits) <= _HEX_DIGITS:
        return None
    value = int(digits, 16)
    return ArgbColor(
        (value >> 24) & 0xFF,
        (value >> 16) & 0xFF,
        (value >> 8) & 0xFF,
        value & 0xFF,
    )
