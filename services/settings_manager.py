"""
Settings Manager.

Handles editor settings with JSON file storage. The editor core only
ever receives an EditorSettings instance; reading and writing the file
happens here.
"""

import json
import logging
import os
from dataclasses import MISSING, dataclass, field, asdict, fields
from typing import Optional
from pathlib import Path

logger = logging.getLogger(__name__)

VALID_MSAA_LEVELS = (1, 4)
PREVIEW_CONNECTOR_ALPHA = 0.7


def _field_default(f):
    if f.default is not MISSING:
        return f.default
    return f.default_factory()


def _matches_default_type(default, value) -> bool:
    """Check a loaded value against the type of the field default."""
    if default is None:  # optional integer such as msaa_level
        return value is None or (isinstance(value, int) and not isinstance(value, bool))
    if isinstance(default, bool):
        return isinstance(value, bool)
    if isinstance(value, bool):
        return False
    if isinstance(default, int):
        return isinstance(value, int)
    if isinstance(default, float):
        return isinstance(value, (int, float))
    if isinstance(default, list):
        # RGB triple
        return (
            isinstance(value, list)
            and len(value) == 3
            and all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in value)
        )
    return isinstance(value, type(default))


def _known_fields(cls, data: dict) -> dict:
    """
    Keep only keys that are fields of the dataclass ``cls`` and whose
    values have the field's type. Anything dropped keeps its default.
    """
    by_name = {f.name: f for f in fields(cls)}
    unknown = set(data) - set(by_name)
    if unknown:
        logger.warning(f"Ignoring unknown {cls.__name__} keys: {', '.join(sorted(unknown))}")

    kept = {}
    for name, value in data.items():
        if name not in by_name:
            continue
        if not _matches_default_type(_field_default(by_name[name]), value):
            logger.warning(f"Ignoring invalid {cls.__name__}.{name} value {value!r}. Using default.")
            continue
        kept[name] = value
    return kept


@dataclass
class WindowSettings:
    """Main window settings."""
    width: float = 800.0
    height: float = 600.0
    title: str = "Diagram Editor"
    msaa_level: Optional[int] = None
    ui_scale_factor: float = 1.0

    def validated_msaa(self) -> int:
        """Anti-aliasing sample count, falling back to 4 for invalid values."""
        if self.msaa_level is None:
            return 4
        if self.msaa_level not in VALID_MSAA_LEVELS:
            logger.warning(
                f"Invalid msaa_level '{self.msaa_level}'. Valid options are 1 or 4. Defaulting to 4."
            )
            return 4
        return self.msaa_level


@dataclass
class ShapeSettings:
    """Size and look shared by every shape."""
    width: float = 120.0
    height: float = 70.0
    corner_radius: float = 10.0
    base_color_rgb: list = field(default_factory=lambda: [100, 200, 255])
    selection_outline_color_rgb: list = field(default_factory=lambda: [255, 255, 0])
    selection_outline_width: float = 2.0
    text_padding: float = 8.0
    text_size: float = 18.0

    @property
    def wrap_width(self) -> float:
        """Width available to a label inside the shape."""
        return self.width - self.text_padding * 2.0


@dataclass
class ColorSettings:
    """Colors for the canvas, connectors and ports (RGB lists)."""
    background_rgb: list = field(default_factory=lambda: [30, 30, 40])
    connector_line_rgb: list = field(default_factory=lambda: [255, 255, 255])
    selected_connector_line_rgb: list = field(default_factory=lambda: [0, 220, 220])
    preview_connector_line_rgb: list = field(default_factory=lambda: [150, 150, 150])
    default_port_rgb: list = field(default_factory=lambda: [255, 255, 255])
    selected_connector_port_rgb: list = field(default_factory=lambda: [0, 200, 200])
    active_new_line_start_port_rgb: list = field(default_factory=lambda: [100, 255, 100])
    text_rgb: list = field(default_factory=lambda: [0, 0, 0])
    status_text_rgb: list = field(default_factory=lambda: [255, 255, 255])


@dataclass
class InteractionSettings:
    """Gesture thresholds."""
    double_click_delay_ms: int = 500
    double_click_distance: float = 10.0
    backspace_deletes_shape: bool = True

    @property
    def double_click_delay(self) -> float:
        """Double-click window in seconds."""
        return self.double_click_delay_ms / 1000.0


@dataclass
class ConnectorSettings:
    """Port and connector geometry."""
    port_offset: float = 15.0        # Ports sit this far right of the shape's left edge
    curve_offset: float = 40.0       # Horizontal push of the Bezier control points
    line_width: float = 2.0
    port_radius: float = 4.0
    port_hover_radius: float = 7.0
    port_click_radius: float = 8.0
    hit_sample_count: int = 11
    hit_radius_factor: float = 4.0   # Connector hit radius in multiples of line_width

    @property
    def hit_radius(self) -> float:
        return self.line_width * self.hit_radius_factor


@dataclass
class EditorSettings:
    """Complete editor settings."""
    window: WindowSettings = field(default_factory=WindowSettings)
    shape: ShapeSettings = field(default_factory=ShapeSettings)
    colors: ColorSettings = field(default_factory=ColorSettings)
    interaction: InteractionSettings = field(default_factory=InteractionSettings)
    connector: ConnectorSettings = field(default_factory=ConnectorSettings)

    @property
    def connector_hit_radius(self) -> float:
        return self.connector.hit_radius

    @property
    def preview_alpha(self) -> float:
        return PREVIEW_CONNECTOR_ALPHA

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "window": asdict(self.window),
            "shape": asdict(self.shape),
            "colors": asdict(self.colors),
            "interaction": asdict(self.interaction),
            "connector": asdict(self.connector),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EditorSettings":
        """Create from dictionary. Missing sections and keys keep their defaults."""
        settings = cls()

        if "window" in data:
            settings.window = WindowSettings(**_known_fields(WindowSettings, data["window"]))
        if "shape" in data:
            settings.shape = ShapeSettings(**_known_fields(ShapeSettings, data["shape"]))
        if "colors" in data:
            settings.colors = ColorSettings(**_known_fields(ColorSettings, data["colors"]))
        if "interaction" in data:
            settings.interaction = InteractionSettings(
                **_known_fields(InteractionSettings, data["interaction"])
            )
        if "connector" in data:
            settings.connector = ConnectorSettings(**_known_fields(ConnectorSettings, data["connector"]))

        return settings


class SettingsManager:
    """
    Manages editor settings with JSON file storage.

    Settings file location:
    - Windows: %APPDATA%/DiagramEditor/settings.json
    - Linux: ~/.config/DiagramEditor/settings.json
    - macOS: ~/Library/Application Support/DiagramEditor/settings.json

    When no file exists yet, the defaults are written out so users have
    something to edit.
    """

    APP_NAME = "DiagramEditor"
    SETTINGS_FILE = "settings.json"

    def __init__(self, config_override: Optional[str] = None):
        """
        Initialize settings manager.

        Args:
            config_override: Optional path to override config file location.
                            Useful for testing.
        """
        self._settings = EditorSettings()
        self._config_override = config_override
        self._settings_path = self._get_settings_path()
        if not self.load():
            if not self._settings_path.exists():
                logger.info(f"{self._settings_path} not found. Using defaults and creating it.")
                self.save()

    @property
    def settings(self) -> EditorSettings:
        """Get current settings."""
        return self._settings

    @property
    def settings_path(self) -> str:
        """Get the settings file path."""
        return str(self._settings_path)

    def _get_settings_path(self) -> Path:
        """Get platform-specific settings directory."""
        if self._config_override:
            return Path(self._config_override)

        import platform
        system = platform.system()

        if system == "Windows":
            base = os.environ.get("APPDATA", os.path.expanduser("~"))
            config_dir = Path(base) / self.APP_NAME
        elif system == "Darwin":  # macOS
            config_dir = Path.home() / "Library" / "Application Support" / self.APP_NAME
        else:  # Linux and others
            xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
            config_dir = Path(xdg_config) / self.APP_NAME

        return config_dir / self.SETTINGS_FILE

    def load(self) -> bool:
        """Load settings from file. Returns False and keeps defaults on failure."""
        if not self._settings_path.exists():
            return False

        try:
            with open(self._settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            self._settings = EditorSettings.from_dict(data)
            logger.info(f"Loaded settings from {self._settings_path}")
            return True
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Failed to parse {self._settings_path}: {e}. Using defaults.")
            self._settings = EditorSettings()
            return False

    def save(self) -> bool:
        """Save settings to file."""
        try:
            self._settings_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings.to_dict(), f, indent=2)
            return True
        except OSError as e:
            logger.warning(f"Could not write {self._settings_path}: {e}")
            return False

    def reset(self):
        """Reset settings to defaults."""
        self._settings = EditorSettings()
        self.save()


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings(config_override: Optional[str] = None) -> SettingsManager:
    """
    Get the global settings manager instance.

    Args:
        config_override: Optional path to override config location.
                        Only used on first call to initialize.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager(config_override)
    return _settings_manager


def reset_settings_manager():
    """Reset the global settings manager (useful for testing)."""
    global _settings_manager
    _settings_manager = None
