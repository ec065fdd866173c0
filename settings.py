"""
settings.py

Persistent settings management for SketchOverlay.

Handles cross-platform settings storage using TOML format with platformdirs
for proper user config directory detection.

Settings file location:
    - Windows: %APPDATA%/sketchoverlay/settings.toml
    - macOS: ~/Library/Application Support/sketchoverlay/settings.toml
    - Linux: ~/.config/sketchoverlay/settings.toml

Default values are documented in comments throughout this file.
If settings.toml is corrupted, these defaults will be used.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

# TOML reading - use tomllib for Python 3.11+, tomli for earlier versions
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from models import Protocol
from normalizer.fields import decode_number, decode_string
from overlay.renderer import RenderStyle
from utils import parse_color_hex

APP_NAME = "sketchoverlay"

log = logging.getLogger(__name__)

# Global settings manager instance (singleton)
_settings_manager: Optional["SettingsManager"] = None


def get_settings() -> "SettingsManager":
    """Get the global settings manager instance.

    Returns:
        The singleton SettingsManager instance.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return the named TOML table, or an empty one if it is not a table."""
    section = data.get(name, {})
    if not isinstance(section, dict):
        log.warning("Settings section [%s] is not a table, using defaults", name)
        return {}
    return section


def _value(section: Dict[str, Any], key: str, default: Any, decoder) -> Any:
    """Decode ``section[key]``, keeping ``default`` when absent or mistyped."""
    if key not in section:
        return default
    value = decoder(section[key])
    if value is None:
        log.warning("Ignoring invalid setting %s = %r", key, section[key])
        return default
    return value


# =============================================================================
# Render Settings
# =============================================================================

@dataclass
class RenderSettings:
    """Overlay rendering defaults.

    Colors are ``#RRGGBB`` or ``#AARRGGBB`` strings.

    Defaults:
        line_width: 3.0
        text_size: 14.0
        shape_color: "#FFFF0000"
        text_color: "#FF0000FF"
        label_background: "#B3FFFFFF"
        highlight_color: "#FFFFFF00"
    """
    line_width: float = 3.0                 # Default: 3.0 pixels
    text_size: float = 14.0                 # Default: 14.0 points
    shape_color: str = "#FFFF0000"          # Default: opaque red
    text_color: str = "#FF0000FF"           # Default: opaque blue
    label_background: str = "#B3FFFFFF"     # Default: white, 70% opaque
    highlight_color: str = "#FFFFFF00"      # Default: opaque yellow

    def to_style(self) -> RenderStyle:
        """Build a RenderStyle, keeping the built-in default for any bad value."""
        base = RenderStyle()

        def color(value: str, fallback):
            parsed = parse_color_hex(value) if isinstance(value, str) else None
            if parsed is None:
                log.warning("Ignoring unparseable color setting %r", value)
                return fallback
            return parsed

        def number(value, fallback: float) -> float:
            parsed = decode_number(value)
            if parsed is None:
                log.warning("Ignoring non-numeric render setting %r", value)
                return fallback
            return parsed

        return RenderStyle(
            line_width=number(self.line_width, base.line_width),
            text_size=number(self.text_size, base.text_size),
            shape_color=color(self.shape_color, base.shape_color),
            text_color=color(self.text_color, base.text_color),
            label_background=color(self.label_background, base.label_background),
            highlight_color=color(self.highlight_color, base.highlight_color),
        )


# =============================================================================
# Logging Settings
# =============================================================================

@dataclass
class LoggingSettings:
    """Logging settings.

    Defaults:
        level: "INFO"
    """
    level: str = "INFO"  # Default: "INFO"

    def level_number(self) -> int:
        """Resolve the level name, falling back to INFO for unknown names."""
        value = logging.getLevelName(str(self.level).upper())
        return value if isinstance(value, int) else logging.INFO


# =============================================================================
# Main App Settings
# =============================================================================

@dataclass
class AppSettings:
    """Application settings with default values.

    Attributes:
        protocol: Annotation family the backend sends ("full" or "highlight").
        render: Overlay rendering defaults.
        logging: Logging configuration.
    """
    protocol: str = Protocol.FULL  # Default: "full"

    render: RenderSettings = field(default_factory=RenderSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)


# =============================================================================
# Settings Manager
# =============================================================================

class SettingsManager:
    """Manages loading, saving, and accessing application settings.

    Settings are stored in a TOML file at the platform-appropriate location.
    If the settings file doesn't exist, defaults are used and the file is
    created on first save.

    Args:
        app_name: Application name used for the config directory.
        settings_dir: Explicit directory, overriding the platform location.
    """

    def __init__(self, app_name: str = APP_NAME, settings_dir: Optional[Path] = None):
        if settings_dir is None:
            settings_dir = Path(platformdirs.user_config_dir(app_name))
        self.settings_dir = Path(settings_dir)
        self.settings_file = self.settings_dir / "settings.toml"
        self.settings = self.load()

    def load(self) -> AppSettings:
        """Load settings from the TOML file.

        Returns:
            AppSettings instance with values from file or defaults if file
            doesn't exist or is invalid.
        """
        if not self.settings_file.exists():
            return AppSettings()

        try:
            with open(self.settings_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            log.warning("Settings file %s unreadable, using defaults: %s", self.settings_file, e)
            return AppSettings()

        return self._parse_toml(data)

    def _parse_toml(self, data: Dict[str, Any]) -> AppSettings:
        """Parse TOML data into AppSettings.

        Sections that are not tables and values of the wrong type are
        ignored with a warning; the default is kept in their place.

        Args:
            data: Parsed TOML dictionary.

        Returns:
            AppSettings instance populated from TOML data.
        """
        settings = AppSettings()

        # General section
        general = _section(data, "general")
        protocol = _value(general, "protocol", settings.protocol, decode_string)
        if protocol in Protocol.ALL:
            settings.protocol = protocol
        else:
            log.warning("Unknown protocol %r in settings, using %r", protocol, settings.protocol)

        # Render section
        render = _section(data, "render")
        r = settings.render
        r.line_width = _value(render, "line_width", r.line_width, decode_number)
        r.text_size = _value(render, "text_size", r.text_size, decode_number)
        r.shape_color = _value(render, "shape_color", r.shape_color, decode_string)
        r.text_color = _value(render, "text_color", r.text_color, decode_string)
        r.label_background = _value(render, "label_background", r.label_background, decode_string)
        r.highlight_color = _value(render, "highlight_color", r.highlight_color, decode_string)

        # Logging section
        logging_section = _section(data, "logging")
        settings.logging.level = _value(logging_section, "level", settings.logging.level, decode_string)

        return settings

    def save(self) -> None:
        """Save current settings to the TOML file.

        Creates the settings directory if it doesn't exist.
        """
        self.settings_dir.mkdir(parents=True, exist_ok=True)

        data = self._to_toml_dict()

        with open(self.settings_file, "wb") as f:
            tomli_w.dump(data, f)

    def _to_toml_dict(self) -> Dict[str, Any]:
        """Convert settings to a TOML-compatible dictionary structure.

        Returns:
            Dictionary organized by TOML sections.
        """
        s = self.settings
        return {
            "general": {
                "protocol": s.protocol,
            },
            "render": {
                "line_width": s.render.line_width,
                "text_size": s.render.text_size,
                "shape_color": s.render.shape_color,
                "text_color": s.render.text_color,
                "label_background": s.render.label_background,
                "highlight_color": s.render.highlight_color,
            },
            "logging": {
                "level": s.logging.level,
            },
        }

    def to_toml(self) -> str:
        """Convert current settings to a TOML-formatted string.

        Returns:
            TOML representation of the current settings.
        """
        return tomli_w.dumps(self._to_toml_dict())

    def get_settings_path(self) -> Path:
        """Get the path to the settings file.

        Returns:
            Path object pointing to the settings file location.
        """
        return self.settings_file
