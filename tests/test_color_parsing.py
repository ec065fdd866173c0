"""Tests for parse_color_hex and JSON extraction helpers in utils.py."""
from __future__ import annotations

import pytest

from utils import ArgbColor, extract_first_json_object, parse_color_hex, strip_markdown_fences


class TestParseColorHex:
    def test_rgb_is_opaque(self):
        assert parse_color_hex("#1A2B3C") == ArgbColor(0xFF, 0x1A, 0x2B, 0x3C)

    def test_argb_order(self):
        assert parse_color_hex("1A2B3C4D") == ArgbColor(0x1A, 0x2B, 0x3C, 0x4D)

    def test_lowercase(self):
        assert parse_color_hex("#ff0000") == ArgbColor(255, 255, 0, 0)

    def test_non_alphanumerics_stripped(self):
        assert parse_color_hex(" #1A-2B-3C ") == ArgbColor(0xFF, 0x1A, 0x2B, 0x3C)

    @pytest.mark.parametrize("bad", [
        "", "#FFF", "#12345", "#1234567", "#123456789", "#GG0000", "red", "0x1A2B3C",
    ])
    def test_invalid(self, bad):
        assert parse_color_hex(bad) is None

    def test_not_a_string(self):
        assert parse_color_hex(None) is None
        assert parse_color_hex(0xFF0000) is None

    def test_to_hex(self):
        assert ArgbColor(0x80, 0x01, 0x02, 0x03).to_hex() == "#80010203"

    def test_with_alpha_clamps(self):
        c = ArgbColor(255, 1, 2, 3)
        assert c.with_alpha(300).alpha == 255
        assert c.with_alpha(-5).alpha == 0


class TestJsonExtraction:
    def test_strip_fences(self):
        assert strip_markdown_fences("```json\n{}\n```") == "{}"
        assert strip_markdown_fences("  {} ") == "{}"

    def test_braces_inside_strings(self):
        text = 'prefix {"text": "a } b", "n": 1} suffix'
        assert extract_first_json_object(text) == {"text": "a } b", "n": 1}

    def test_no_object(self):
        assert extract_first_json_object("no json here") is None
        assert extract_first_json_object("[1, 2]") is None

    def test_broken_object(self):
        assert extract_first_json_object('{"a": }') is None
