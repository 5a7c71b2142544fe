"""
Main application window.

Hosts the diagram canvas and mirrors its status line in the status bar.
"""

from typing import Optional
from PyQt6.QtWidgets import QMainWindow

from services.settings_manager import EditorSettings
from views.diagram_canvas import DiagramCanvas


class MainWindow(QMainWindow):
    """Main application window for the diagram editor."""

    def __init__(self, settings: Optional[EditorSettings] = None, parent=None):
        super().__init__(parent)
        self.settings = settings or EditorSettings()
        self._setup_ui()

    def _setup_ui(self):
        window = self.settings.window
        self.setWindowTitle(window.title)
        self.resize(int(window.width), int(window.height))

        self.canvas = DiagramCanvas(self.settings, self)
        self.setCentralWidget(self.canvas)
        self.canvas.statusChanged.connect(self.statusBar().showMessage)
        self.canvas.setFocus()

        self.statusBar().showMessage("Double-click the canvas to add a shape", 3000)
