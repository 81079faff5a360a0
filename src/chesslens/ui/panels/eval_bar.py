"""EvalBar — vertical evaluation bar fed by the best engine line."""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont, QPaintEvent, QPainter
from PyQt6.QtWidgets import QSizePolicy, QWidget

from chesslens.core.types import Color
from chesslens.engine.protocol import Score
from chesslens.ui.formatting import eval_bar_fraction, format_score, white_pov


class EvalBar(QWidget):
    """Vertical bar showing the evaluation from White's point of view.

    White advantage → white fills from bottom.
    Black advantage → black fills from top.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._fraction = 0.5
        self._label = ""
        self.setFixedWidth(28)
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Expanding)
        self.setMinimumHeight(200)

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def label(self) -> str:
        return self._label

    def set_score(self, score: Score, side_to_move: Color) -> None:
        """Show a side-to-move relative *score*."""
        self._fraction = eval_bar_fraction(white_pov(score, side_to_move))
        self._label = format_score(score, side_to_move).text
        self.update()

    def reset(self) -> None:
        self._fraction = 0.5
        self._label = ""
        self.update()

    def paintEvent(self, event: QPaintEvent | None) -> None:
        h = self.height()
        w = self.width()

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)

        # Background (black side)
        painter.fillRect(0, 0, w, h, QColor(50, 50, 50))

        white_h = int(h * self._fraction)
        painter.fillRect(0, h - white_h, w, white_h, QColor(240, 240, 240))

        # Divider line
        painter.setPen(QColor(100, 100, 100))
        painter.drawLine(0, h - white_h, w, h - white_h)

        if self._label:
            painter.setPen(QColor(120, 120, 120))
            painter.setFont(QFont("Helvetica Neue", 8))
            painter.drawText(0, 0, w, 18, Qt.AlignmentFlag.AlignCenter, self._label)

        painter.end()
