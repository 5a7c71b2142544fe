"""Views package."""

from .diagram_canvas import DiagramCanvas
from .main_window import MainWindow

__all__ = [
    "DiagramCanvas",
    "MainWindow",
]
