"""Qt application bootstrap helpers."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from chesslens.config import AppSettings

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

_LOGGER = logging.getLogger(__name__)


def _configure_application(app: QApplication) -> None:
    """Apply app-wide settings and theme."""
    from chesslens.ui.styles.theme import APP_STYLE

    app.setApplicationName("Chesslens")
    app.setStyle("Fusion")
    app.setStyleSheet(APP_STYLE)


def run_application(settings: AppSettings, argv: list[str] | None = None) -> int:
    """Create and run the main Qt application."""
    from PyQt6.QtWidgets import QApplication

    from chesslens.ui.main_window import MainWindow

    app = QApplication(sys.argv if argv is None else argv)
    _configure_application(app)

    _LOGGER.info("Using engine %s", settings.engine_path)
    window = MainWindow(settings)
    window.show()

    return app.exec()
