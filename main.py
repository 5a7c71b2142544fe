#!/usr/bin/env python3
"""
Diagram Editor - Main Entry Point

A canvas for drawing labeled shapes and connecting them with curved
connectors.

Usage:
    python main.py
    python main.py --debug               # Enable debug logging
    python main.py --config my.json      # Use a specific settings file
"""

import sys
import logging
import argparse
from PyQt6.QtWidgets import QApplication
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QSurfaceFormat

from services.settings_manager import get_settings
from views import MainWindow


def setup_logging(debug: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if debug else logging.INFO

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Log startup message
    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at {'DEBUG' if debug else 'INFO'} level")


def setup_application(msaa_level: int = 4) -> QApplication:
    """Configure the Qt application."""
    # Multisampling must be requested before the application exists
    surface_format = QSurfaceFormat()
    surface_format.setSamples(msaa_level)
    QSurfaceFormat.setDefaultFormat(surface_format)

    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Diagram Editor")
    app.setApplicationVersion("0.1.0")
    app.setOrganizationName("diagram-editor")
    return app


def main():
    """Main entry point."""
    # Parse command line arguments
    parser = argparse.ArgumentParser(description='Diagram Editor')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--config', metavar='PATH', help='Settings file to use')
    args = parser.parse_args()

    # Setup logging
    setup_logging(debug=args.debug)

    settings = get_settings(args.config).settings
    msaa_level = settings.window.validated_msaa()
    logger = logging.getLogger(__name__)
    logger.info(f"Using MSAA level: {msaa_level}")

    app = setup_application(msaa_level)

    # Create and show main window
    window = MainWindow(settings)
    window.show()

    # Run event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
