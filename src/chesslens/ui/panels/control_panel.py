"""ControlPanel — board and analysis action buttons."""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from chesslens.core.types import Color


class ControlPanel(QWidget):
    """Buttons for board actions: flip, edit, reset, clear, analyse, load FEN.

    Signals:
        flip_clicked(): Flip the board.
        edit_toggled(bool): Edit mode button toggled.
        reset_clicked(): Standard starting position.
        clear_clicked(): Empty board.
        analyse_clicked(): Start or stop analysis.
        fen_submitted(str): Load the typed FEN.
        side_to_move_changed(Color): Edit-mode side to move picked.
    """

    flip_clicked = pyqtSignal()
    edit_toggled = pyqtSignal(bool)
    reset_clicked = pyqtSignal()
    clear_clicked = pyqtSignal()
    analyse_clicked = pyqtSignal()
    fen_submitted = pyqtSignal(str)
    side_to_move_changed = pyqtSignal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(6)

        btn_font = QFont("Helvetica Neue", 10)

        row1 = QHBoxLayout()
        self._btn_flip = self._make_button("Flip", btn_font)
        self._btn_flip.clicked.connect(self.flip_clicked)
        row1.addWidget(self._btn_flip)

        self._btn_edit = self._make_button("Edit", btn_font)
        self._btn_edit.setCheckable(True)
        self._btn_edit.toggled.connect(self.edit_toggled)
        row1.addWidget(self._btn_edit)

        self._btn_reset = self._make_button("Reset", btn_font)
        self._btn_reset.clicked.connect(self.reset_clicked)
        row1.addWidget(self._btn_reset)

        self._btn_clear = self._make_button("Clear", btn_font)
        self._btn_clear.clicked.connect(self.clear_clicked)
        row1.addWidget(self._btn_clear)
        layout.addLayout(row1)

        row2 = QHBoxLayout()
        self._btn_analyse = self._make_button("Analyse", btn_font)
        self._btn_analyse.setStyleSheet(
            "QPushButton { background-color: #205b2a; }"
            "QPushButton:hover { background-color: #2a7a38; }"
        )
        self._btn_analyse.clicked.connect(self.analyse_clicked)
        row2.addWidget(self._btn_analyse)

        self._side = QComboBox()
        self._side.addItem("White to move", Color.WHITE)
        self._side.addItem("Black to move", Color.BLACK)
        self._side.setEnabled(False)
        self._side.currentIndexChanged.connect(self._on_side_index_changed)
        row2.addWidget(self._side)
        layout.addLayout(row2)

        row3 = QHBoxLayout()
        self._fen_edit = QLineEdit()
        self._fen_edit.setPlaceholderText("FEN")
        self._fen_edit.returnPressed.connect(self._submit_fen)
        row3.addWidget(self._fen_edit, stretch=1)

        self._btn_load = self._make_button("Load", btn_font)
        self._btn_load.clicked.connect(self._submit_fen)
        row3.addWidget(self._btn_load)
        layout.addLayout(row3)

    @staticmethod
    def _make_button(text: str, font: QFont) -> QPushButton:
        button = QPushButton(text)
        button.setFont(font)
        button.setMinimumHeight(36)
        return button

    # ── State updates from the window ──────────────────────────────────

    def set_fen(self, fen: str) -> None:
        if not self._fen_edit.hasFocus():
            self._fen_edit.setText(fen)

    def fen_text(self) -> str:
        return self._fen_edit.text()

    def set_fen_text(self, text: str) -> None:
        self._fen_edit.setText(text)

    def set_edit_mode(self, editing: bool) -> None:
        """Mirror the controller's mode without re-emitting ``edit_toggled``."""
        self._btn_edit.blockSignals(True)
        self._btn_edit.setChecked(editing)
        self._btn_edit.blockSignals(False)
        self._side.setEnabled(editing)

    def set_side_to_move(self, color: Color) -> None:
        self._side.blockSignals(True)
        self._side.setCurrentIndex(0 if color == Color.WHITE else 1)
        self._side.blockSignals(False)

    def set_analysing(self, active: bool) -> None:
        self._btn_analyse.setText("Stop" if active else "Analyse")

    def side_to_move(self) -> Color:
        return Color(self._side.currentData())

    def is_edit_checked(self) -> bool:
        return self._btn_edit.isChecked()

    def analyse_text(self) -> str:
        return self._btn_analyse.text()

    def click_analyse(self) -> None:
        self._btn_analyse.click()

    def click_edit(self) -> None:
        self._btn_edit.click()

    def click_load(self) -> None:
        self._btn_load.click()

    def choose_side(self, color: Color) -> None:
        self._side.setCurrentIndex(0 if color == Color.WHITE else 1)

    # ── Internal ───────────────────────────────────────────────────────

    def _submit_fen(self) -> None:
        self.fen_submitted.emit(self._fen_edit.text())

    def _on_side_index_changed(self, index: int) -> None:
        color = self._side.itemData(index)
        if color is not None:
            self.side_to_move_changed.emit(Color(color))
