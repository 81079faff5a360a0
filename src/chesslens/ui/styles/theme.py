"""Visual theme constants and QSS styles for Chesslens."""

from __future__ import annotations

from dataclasses import dataclass

from PyQt6.QtGui import QColor


@dataclass(frozen=True)
class BoardTheme:
    """Colour scheme for the chessboard."""

    light_square: QColor
    dark_square: QColor
    highlight_selected: QColor  # selected piece origin
    highlight_target: QColor  # legal destinations of the selection
    highlight_preview: QColor  # hover preview
    coord_light: QColor  # coordinate text on dark squares
    coord_dark: QColor  # coordinate text on light squares

    @classmethod
    def default(cls) -> BoardTheme:
        return cls(
            light_square=QColor(240, 217, 181),  # tan
            dark_square=QColor(181, 136, 99),  # brown
            highlight_selected=QColor(255, 255, 0, 100),
            highlight_target=QColor(0, 0, 0, 40),
            highlight_preview=QColor(20, 85, 30, 60),
            coord_light=QColor(181, 136, 99),
            coord_dark=QColor(240, 217, 181),
        )

    @classmethod
    def blue(cls) -> BoardTheme:
        return cls(
            light_square=QColor(222, 227, 230),
            dark_square=QColor(140, 162, 173),
            highlight_selected=QColor(255, 255, 0, 100),
            highlight_target=QColor(0, 0, 0, 40),
            highlight_preview=QColor(20, 85, 30, 60),
            coord_light=QColor(140, 162, 173),
            coord_dark=QColor(222, 227, 230),
        )

    @classmethod
    def green(cls) -> BoardTheme:
        return cls(
            light_square=QColor(236, 238, 220),
            dark_square=QColor(112, 149, 120),
            highlight_selected=QColor(255, 255, 0, 100),
            highlight_target=QColor(0, 0, 0, 40),
            highlight_preview=QColor(20, 85, 30, 60),
            coord_light=QColor(112, 149, 120),
            coord_dark=QColor(236, 238, 220),
        )

    @classmethod
    def named(cls, name: str) -> BoardTheme:
        return {
            "Classic": cls.default,
            "Blue": cls.blue,
            "Green": cls.green,
        }.get(name, cls.default)()


SCORE_TONE_COLORS: dict[str, str] = {
    "positive": "#9bc700",
    "negative": "#ca3431",
    "": "#d4d4d4",
}


# ── Application-wide QSS ────────────────────────────────────────────────────

APP_STYLE = """
QMainWindow {
    background: #2b2b2b;
}

QLabel {
    color: #e0e0e0;
    font-family: "Helvetica Neue", sans-serif;
}

QLineEdit, QComboBox {
    background: #1e1e1e;
    color: #d4d4d4;
    border: 1px solid #3c3c3c;
    border-radius: 4px;
    padding: 4px 6px;
    font-family: "Consolas", monospace;
}

QListWidget {
    background: #1e1e1e;
    color: #d4d4d4;
    border: 1px solid #3c3c3c;
    font-family: "Consolas", monospace;
    font-size: 13px;
}

QPushButton {
    background: #3c3c3c;
    color: #e0e0e0;
    border: 1px solid #555;
    border-radius: 4px;
    padding: 6px 14px;
    font-size: 13px;
}
QPushButton:hover {
    background: #505050;
}
QPushButton:pressed, QPushButton:checked {
    background: #264f78;
}
QPushButton:disabled {
    color: #666;
    background: #2b2b2b;
}
"""
