"""SparePieces — palette of pieces that can be dragged onto the board."""

from __future__ import annotations

from PyQt6.QtCore import QMimeData, Qt
from PyQt6.QtGui import QDrag, QFont, QMouseEvent
from PyQt6.QtWidgets import QGridLayout, QLabel, QWidget

from chesslens.core.types import ALL_PIECES, PieceCode
from chesslens.ui.board.board_scene import SPARE_PIECE_MIME
from chesslens.ui.board.piece_item import piece_glyph


def spare_mime_data(piece: PieceCode) -> QMimeData:
    mime = QMimeData()
    mime.setData(SPARE_PIECE_MIME, piece.encode("ascii"))
    return mime


class _SpareLabel(QLabel):
    """One draggable piece glyph."""

    def __init__(self, piece: PieceCode, parent: QWidget | None = None) -> None:
        super().__init__(piece_glyph(piece), parent)
        self.piece = piece
        font = QFont("DejaVu Sans")
        font.setPixelSize(34)
        self.setFont(font)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setFixedSize(44, 44)
        fg = "#fafafa" if piece[0] == "w" else "#141414"
        self.setStyleSheet(
            f"QLabel {{ color: {fg}; background: #8a8a8a; border-radius: 4px; }}"
        )
        self.setCursor(Qt.CursorShape.OpenHandCursor)

    def mousePressEvent(self, event: QMouseEvent | None) -> None:
        if event is None or event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)
        drag = QDrag(self)
        drag.setMimeData(spare_mime_data(self.piece))
        drag.setPixmap(self.grab())
        drag.exec(Qt.DropAction.CopyAction)


class SparePieces(QWidget):
    """Two rows of spare pieces; only shown while editing."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        layout = QGridLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)
        self._labels: dict[PieceCode, _SpareLabel] = {}
        for index, piece in enumerate(ALL_PIECES):
            label = _SpareLabel(piece)
            self._labels[piece] = label
            layout.addWidget(label, index // 6, index % 6)

    def pieces(self) -> list[PieceCode]:
        return list(self._labels)
