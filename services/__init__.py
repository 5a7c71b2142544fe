"""Services package."""

from .settings_manager import (
    SettingsManager,
    EditorSettings,
    WindowSettings,
    ShapeSettings,
    ColorSettings,
    InteractionSettings,
    ConnectorSettings,
    get_settings,
    reset_settings_manager,
)
from .editor_controller import EditorController
from .frame_driver import (
    FrameDriver,
    FrameSnapshot,
    ShapeView,
    ConnectionView,
    PortView,
    PortRole,
    ConnectorPreview,
)

__all__ = [
    "SettingsManager",
    "EditorSettings",
    "WindowSettings",
    "ShapeSettings",
    "ColorSettings",
    "InteractionSettings",
    "ConnectorSettings",
    "get_settings",
    "reset_settings_manager",
    "EditorController",
    "FrameDriver",
    "FrameSnapshot",
    "ShapeView",
    "ConnectionView",
    "PortView",
    "PortRole",
    "ConnectorPreview",
]
