"""Application entry-point for the postureangle desktop GUI.

Usage (development)::

    python -m postureangle.desktop.app
"""

from __future__ import annotations

import logging
import sys

from PySide6.QtCore import QSettings
from PySide6.QtWidgets import QApplication

from postureangle.config import AppSettings, load_settings
from postureangle.desktop.main_window import MainWindow
from postureangle.runtime_paths import get_config_dir


def main(settings: AppSettings | None = None) -> None:
    """Launch the postureangle desktop application."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Use INI file instead of Windows registry for portable settings
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    QSettings.setPath(QSettings.Format.IniFormat, QSettings.Scope.UserScope, str(config_dir))

    app = QApplication(sys.argv)
    app.setApplicationName("PostureAngle")
    app.setOrganizationName("PostureAngle")

    window = MainWindow(settings=settings or load_settings())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
