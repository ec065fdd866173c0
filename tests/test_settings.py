"""Tests for settings.py: TOML round-trip, defaults and style conversion."""
from __future__ import annotations

import logging

from models import Protocol
from overlay.renderer import DEFAULT_STYLE
from settings import AppSettings, SettingsManager
from utils import ArgbColor


class TestSettingsManager:
    def test_defaults_without_file(self, tmp_path):
        mgr = SettingsManager(settings_dir=tmp_path)
        assert mgr.settings == AppSettings()
        assert mgr.get_settings_path() == tmp_path / "settings.toml"

    def test_save_and_reload(self, tmp_path):
        mgr = SettingsManager(settings_dir=tmp_path)
        mgr.settings.protocol = Protocol.HIGHLIGHT
        mgr.settings.render.line_width = 5.0
        mgr.settings.render.shape_color = "#00FF00"
        mgr.settings.logging.level = "DEBUG"
        mgr.save()

        again = SettingsManager(settings_dir=tmp_path)
        assert again.settings.protocol == Protocol.HIGHLIGHT
        assert again.settings.render.line_width == 5.0
        assert again.settings.render.shape_color == "#00FF00"
        assert again.settings.logging.level_number() == logging.DEBUG

    def test_partial_file(self, tmp_path):
        (tmp_path / "settings.toml").write_text('[render]\ntext_size = 18.0\n', encoding="utf-8")
        s = SettingsManager(settings_dir=tmp_path).settings
        assert s.render.text_size == 18.0
        assert s.render.line_width == 3.0
        assert s.protocol == Protocol.FULL

    def test_corrupted_file_uses_defaults(self, tmp_path):
        (tmp_path / "settings.toml").write_text("this is = = not toml", encoding="utf-8")
        assert SettingsManager(settings_dir=tmp_path).settings == AppSettings()

    def test_unknown_protocol_ignored(self, tmp_path):
        (tmp_path / "settings.toml").write_text('[general]\nprotocol = "svg"\n', encoding="utf-8")
        assert SettingsManager(settings_dir=tmp_path).settings.protocol == Protocol.FULL

    def test_non_numeric_line_width_uses_default(self, tmp_path):
        (tmp_path / "settings.toml").write_text('[render]\nline_width = "thick"\ntext_size = 20\n', encoding="utf-8")
        s = SettingsManager(settings_dir=tmp_path).settings
        assert s.render.line_width == 3.0
        assert s.render.text_size == 20
        assert s.render.to_style().line_width == DEFAULT_STYLE.line_width

    def test_boolean_text_size_uses_default(self, tmp_path):
        (tmp_path / "settings.toml").write_text("[render]\ntext_size = true\n", encoding="utf-8")
        assert SettingsManager(settings_dir=tmp_path).settings.render.text_size == 14.0

    def test_section_not_a_table(self, tmp_path):
        (tmp_path / "settings.toml").write_text('general = "x"\nrender = 5\nlogging = []\n', encoding="utf-8")
        assert SettingsManager(settings_dir=tmp_path).settings == AppSettings()

    def test_list_protocol_ignored(self, tmp_path):
        (tmp_path / "settings.toml").write_text('[general]\nprotocol = ["full"]\n', encoding="utf-8")
        assert SettingsManager(settings_dir=tmp_path).settings.protocol == Protocol.FULL

    def test_non_string_color_and_level_ignored(self, tmp_path):
        (tmp_path / "settings.toml").write_text(
            "[render]\nshape_color = 16711680\n[logging]\nlevel = 10\n", encoding="utf-8"
        )
        s = SettingsManager(settings_dir=tmp_path).settings
        assert s.render.shape_color == "#FFFF0000"
        assert s.logging.level == "INFO"

    def test_to_toml(self, tmp_path):
        text = SettingsManager(settings_dir=tmp_path).to_toml()
        assert "[render]" in text
        assert 'protocol = "full"' in text


class TestRenderSettings:
    def test_default_style_matches_renderer(self):
        assert AppSettings().render.to_style() == DEFAULT_STYLE

    def test_colors_parsed(self):
        render = AppSettings().render
        render.text_color = "#80112233"
        assert render.to_style().text_color == ArgbColor(0x80, 0x11, 0x22, 0x33)

    def test_bad_color_keeps_default(self):
        render = AppSettings().render
        render.highlight_color = "yellow"
        assert render.to_style().highlight_color == DEFAULT_STYLE.highlight_color

    def test_unknown_log_level(self):
        settings = AppSettings()
        settings.logging.level = "LOUD"
        assert settings.logging.level_number() == logging.INFO

    def test_bad_line_width_keeps_default(self):
        render = AppSettings().render
        render.line_width = "thick"
        render.text_size = None
        style = render.to_style()
        assert style.line_width == DEFAULT_STYLE.line_width
        assert style.text_size == DEFAULT_STYLE.text_size
