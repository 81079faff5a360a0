"""PieceItem — draggable chess piece glyph on the QGraphicsScene."""

from __future__ import annotations

from PyQt6.QtCore import QPointF, Qt
from PyQt6.QtGui import QBrush, QColor, QCursor, QFont, QPen
from PyQt6.QtWidgets import QGraphicsItem, QGraphicsSimpleTextItem

from chesslens.core.types import PieceCode, Square

PIECE_GLYPHS: dict[str, str] = {
    "K": "♚",
    "Q": "♛",
    "R": "♜",
    "B": "♝",
    "N": "♞",
    "P": "♟",
}


def piece_glyph(piece: PieceCode) -> str:
    return PIECE_GLYPHS[piece[1]]


class PieceItem(QGraphicsSimpleTextItem):
    """A single chess piece on the board.

    Stores its logical *square* and remembers where a drag started so an
    illegal drop can snap back.
    """

    _FONT_RATIO = 0.72

    def __init__(self, piece: PieceCode, square: Square, tile_size: int) -> None:
        super().__init__(piece_glyph(piece))
        self.piece = piece
        self.square = square
        self._tile_size = tile_size
        self._drag_origin: QPointF | None = None

        white = piece[0] == "w"
        self.setBrush(QBrush(QColor(250, 250, 250) if white else QColor(20, 20, 20)))
        self.setPen(QPen(QColor(20, 20, 20) if white else QColor(230, 230, 230), 1.0))
        self.setCacheMode(QGraphicsItem.CacheMode.NoCache)
        self.setCursor(QCursor(Qt.CursorShape.PointingHandCursor))
        self.setZValue(1)
        self._update_size(tile_size)

    def place_at(self, top_left: QPointF) -> None:
        """Centre the glyph inside the tile whose corner is *top_left*."""
        bounds = self.boundingRect()
        self.setPos(
            top_left.x() + (self._tile_size - bounds.width()) / 2,
            top_left.y() + (self._tile_size - bounds.height()) / 2,
        )

    def centre_on(self, point: QPointF) -> None:
        bounds = self.boundingRect()
        self.setPos(point.x() - bounds.width() / 2, point.y() - bounds.height() / 2)

    @property
    def is_dragging(self) -> bool:
        return self._drag_origin is not None

    def start_drag(self) -> None:
        """Called at the beginning of a drag gesture."""
        self._drag_origin = self.pos()
        self.setZValue(10)  # bring to front
        self.setCursor(QCursor(Qt.CursorShape.ClosedHandCursor))
        self.setOpacity(0.85)

    def cancel_drag(self) -> None:
        """Snap back to original position."""
        if self._drag_origin is not None:
            self.setPos(self._drag_origin)
        self._finish_drag()

    def finish_drag(self) -> None:
        """Cleanup after a successful drop."""
        self._finish_drag()

    def _finish_drag(self) -> None:
        self._drag_origin = None
        self.setZValue(1)
        self.setCursor(QCursor(Qt.CursorShape.PointingHandCursor))
        self.setOpacity(1.0)

    def _update_size(self, size: int) -> None:
        self._tile_size = size
        font = QFont("DejaVu Sans")
        font.setPixelSize(max(int(size * self._FONT_RATIO), 1))
        self.setFont(font)
