"""BoardScene — QGraphicsScene that draws the board and feeds input events.

The scene holds no chess state of its own: it renders what the
:class:`InteractionController` announces and turns mouse gestures into
``Tap`` / ``DragStart`` / ``Drop`` / hover events.
"""

from __future__ import annotations

from PyQt6.QtCore import QLineF, QObject, QPointF, Qt
from PyQt6.QtGui import QBrush, QColor, QFont, QPen
from PyQt6.QtWidgets import (
    QApplication,
    QGraphicsRectItem,
    QGraphicsScene,
    QGraphicsSceneDragDropEvent,
    QGraphicsSceneMouseEvent,
    QGraphicsSimpleTextItem,
)

from chesslens.board.controller import HighlightState, InteractionController
from chesslens.board.events import OFFBOARD, SPARE, DragStart, Drop, HoverEnter, HoverLeave, Tap
from chesslens.core.types import (
    Occupancy,
    Square,
    file_index,
    is_piece_code,
    make_square,
    rank_index,
)
from chesslens.ui.board.piece_item import PieceItem
from chesslens.ui.styles.theme import BoardTheme

SPARE_PIECE_MIME = "application/x-chesslens-piece"


class BoardScene(QGraphicsScene):
    """Renders the board, coordinates, highlights, and piece items."""

    TILE = 80  # px per square

    def __init__(
        self,
        controller: InteractionController,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._theme = BoardTheme.default()
        self._flipped = controller.flipped
        self._occupancy: Occupancy = controller.occupancy
        self._highlights = controller.highlights
        self._show_coordinates = True
        self._show_legal_moves = True

        # Gesture state
        self._press_square: Square | None = None
        self._press_pos: QPointF | None = None
        self._dragging_item: PieceItem | None = None
        self._hover_square: Square | None = None

        # Visual layers
        self._square_items: dict[Square, QGraphicsRectItem] = {}
        self._highlight_items: list[QGraphicsRectItem] = []
        self._piece_items: dict[Square, PieceItem] = {}
        self._coord_items: list[QGraphicsSimpleTextItem] = []

        controller.occupancy_changed.connect(self.set_occupancy)
        controller.highlights_changed.connect(self.set_highlights)
        controller.orientation_changed.connect(self.set_flipped)

        self._draw_board()
        self._sync_pieces()

    # ── Public API ───────────────────────────────────────────────────────

    def set_occupancy(self, occupancy: Occupancy) -> None:
        """Full redraw of pieces."""
        self._occupancy = dict(occupancy)
        self._dragging_item = None
        self._sync_pieces()

    def set_highlights(self, state: HighlightState) -> None:
        self._highlights = state
        self._draw_highlights()

    def set_flipped(self, flipped: bool) -> None:
        """Flip the board orientation."""
        self._flipped = flipped
        self._draw_board()
        self._sync_pieces()
        self._draw_highlights()

    def is_flipped(self) -> bool:
        return self._flipped

    def set_theme(self, theme: BoardTheme) -> None:
        self._theme = theme
        self._draw_board()
        self._draw_highlights()

    def set_show_coordinates(self, visible: bool) -> None:
        """Show or hide rank/file coordinate labels."""
        self._show_coordinates = visible
        for item in self._coord_items:
            item.setVisible(visible)

    def set_show_legal_moves(self, visible: bool) -> None:
        """Show or hide legal-destination highlights."""
        self._show_legal_moves = visible
        self._draw_highlights()

    def piece_item(self, square: Square) -> PieceItem | None:
        return self._piece_items.get(square)

    # ── Board drawing ────────────────────────────────────────────────────

    def _draw_board(self) -> None:
        """Draw or redraw the 64 squares and coordinates."""
        for sq_item in self._square_items.values():
            self.removeItem(sq_item)
        self._square_items.clear()
        for coord_item in self._coord_items:
            self.removeItem(coord_item)
        self._coord_items.clear()

        t = self.TILE
        font = QFont("Helvetica Neue", max(9, t // 8))

        for rank in range(8):
            for file in range(8):
                sq = make_square(file, rank)
                vf, vr = self._visual_coords(file, rank)
                is_light = (file + rank) % 2 == 1
                color = self._theme.light_square if is_light else self._theme.dark_square
                rect = QGraphicsRectItem(vf * t, vr * t, t, t)
                rect.setBrush(QBrush(color))
                rect.setPen(QPen(Qt.PenStyle.NoPen))
                rect.setZValue(0)
                self.addItem(rect)
                self._square_items[sq] = rect

                text_color = self._theme.coord_dark if is_light else self._theme.coord_light
                # Rank numbers on the left edge, file letters on the bottom edge
                if vf == 0:
                    self._add_coord(str(rank + 1), vf * t + 2, vr * t + 1, font, text_color)
                if vr == 7:
                    self._add_coord(sq[0], vf * t + t - 12, vr * t + t - 16, font, text_color)

        self.setSceneRect(0, 0, 8 * t, 8 * t)

    def _add_coord(
        self, label: str, x: float, y: float, font: QFont, color: QColor
    ) -> None:
        txt = QGraphicsSimpleTextItem(label)
        txt.setFont(font)
        txt.setBrush(QBrush(color))
        txt.setPos(x, y)
        txt.setZValue(0.3)
        txt.setVisible(self._show_coordinates)
        self.addItem(txt)
        self._coord_items.append(txt)

    def _draw_highlights(self) -> None:
        for item in self._highlight_items:
            self.removeItem(item)
        self._highlight_items.clear()

        state = self._highlights
        if state.selected is not None:
            self._highlight_items.append(
                self._make_highlight(state.selected, self._theme.highlight_selected)
            )
        if self._show_legal_moves:
            for sq in sorted(state.targets):
                self._highlight_items.append(
                    self._make_highlight(sq, self._theme.highlight_target)
                )
        if state.preview_source is not None:
            for sq in sorted(state.preview | {state.preview_source}):
                self._highlight_items.append(
                    self._make_highlight(sq, self._theme.highlight_preview)
                )

    def _make_highlight(self, sq: Square, color: QColor) -> QGraphicsRectItem:
        """Create a coloured overlay rectangle on a square."""
        t = self.TILE
        vf, vr = self._visual_coords(file_index(sq), rank_index(sq))
        rect = QGraphicsRectItem(vf * t, vr * t, t, t)
        rect.setBrush(QBrush(color))
        rect.setPen(QPen(Qt.PenStyle.NoPen))
        rect.setZValue(0.8)
        self.addItem(rect)
        return rect

    # ── Piece synchronisation ────────────────────────────────────────────

    def _sync_pieces(self) -> None:
        """Re-create all piece items from the current occupancy."""
        for item in self._piece_items.values():
            self.removeItem(item)
        self._piece_items.clear()

        t = self.TILE
        for sq, piece in self._occupancy.items():
            item = PieceItem(piece, sq, t)
            vf, vr = self._visual_coords(file_index(sq), rank_index(sq))
            item.place_at(QPointF(vf * t, vr * t))
            self.addItem(item)
            self._piece_items[sq] = item

    # ── Gesture handling ─────────────────────────────────────────────────

    def press(self, pos: QPointF) -> None:
        self._press_square = self._pos_to_square(pos)
        self._press_pos = QPointF(pos)

    def move_to(self, pos: QPointF, button_down: bool) -> None:
        if not button_down:
            self._update_hover(self._pos_to_square(pos))
            return

        if self._dragging_item is not None:
            self._dragging_item.centre_on(pos)
            return

        if self._press_square is None or self._press_pos is None:
            return
        if QLineF(self._press_pos, pos).length() < QApplication.startDragDistance():
            return
        item = self._piece_items.get(self._press_square)
        if item is None:
            return
        if not self._controller.handle(DragStart(self._press_square, item.piece)):
            self._press_square = None
            return
        item.start_drag()
        item.centre_on(pos)
        self._dragging_item = item

    def release(self, pos: QPointF) -> None:
        item = self._dragging_item
        if item is not None:
            self._dragging_item = None
            source = item.square
            target = self._pos_to_square(pos) or OFFBOARD
            # A successful drop re-syncs every piece through occupancy_changed.
            if not self._controller.handle(Drop(source, target, item.piece)):
                item.cancel_drag()
            elif item.scene() is self:
                item.finish_drag()
        elif self._press_square is not None:
            self._controller.handle(Tap(self._press_square))
        self._press_square = None
        self._press_pos = None

    def pointer_left(self) -> None:
        self._update_hover(None)

    def _update_hover(self, square: Square | None) -> None:
        if square == self._hover_square:
            return
        if self._hover_square is not None:
            self._controller.handle(HoverLeave(self._hover_square))
        self._hover_square = square
        if square is not None:
            self._controller.handle(HoverEnter(square))

    def mousePressEvent(self, event: QGraphicsSceneMouseEvent | None) -> None:
        if event is None or event.button() != Qt.MouseButton.LeftButton:
            return super().mousePressEvent(event)
        self.press(event.scenePos())
        event.accept()

    def mouseMoveEvent(self, event: QGraphicsSceneMouseEvent | None) -> None:
        if event is None:
            return super().mouseMoveEvent(event)
        button_down = bool(event.buttons() & Qt.MouseButton.LeftButton)
        self.move_to(event.scenePos(), button_down)
        event.accept()

    def mouseReleaseEvent(self, event: QGraphicsSceneMouseEvent | None) -> None:
        if event is None or event.button() != Qt.MouseButton.LeftButton:
            return super().mouseReleaseEvent(event)
        self.release(event.scenePos())
        event.accept()

    # ── Spare-piece drops (Qt drag & drop from the palette) ──────────────

    def dragEnterEvent(self, event: QGraphicsSceneDragDropEvent | None) -> None:
        self._accept_spare_drag(event)

    def dragMoveEvent(self, event: QGraphicsSceneDragDropEvent | None) -> None:
        self._accept_spare_drag(event)

    def dropEvent(self, event: QGraphicsSceneDragDropEvent | None) -> None:
        if event is None:
            return
        piece = self._spare_piece(event)
        square = self._pos_to_square(event.scenePos())
        if piece is None or square is None:
            event.ignore()
            return
        self.drop_spare(piece, square)
        event.acceptProposedAction()

    def drop_spare(self, piece: str, square: Square) -> bool:
        if not self._controller.handle(DragStart(SPARE, piece)):
            return False
        return self._controller.handle(Drop(SPARE, square, piece))

    def _accept_spare_drag(self, event: QGraphicsSceneDragDropEvent | None) -> None:
        if event is None:
            return
        if self._spare_piece(event) is None:
            event.ignore()
            return
        event.acceptProposedAction()

    @staticmethod
    def _spare_piece(event: QGraphicsSceneDragDropEvent) -> str | None:
        mime = event.mimeData()
        if mime is None or not mime.hasFormat(SPARE_PIECE_MIME):
            return None
        piece = bytes(mime.data(SPARE_PIECE_MIME).data()).decode("ascii", "replace")
        return piece if is_piece_code(piece) else None

    # ── Coordinate helpers ───────────────────────────────────────────────

    def _visual_coords(self, file: int, rank: int) -> tuple[int, int]:
        """Convert board file/rank to visual column/row."""
        if self._flipped:
            return 7 - file, rank
        return file, 7 - rank

    def square_center(self, sq: Square) -> QPointF:
        t = self.TILE
        vf, vr = self._visual_coords(file_index(sq), rank_index(sq))
        return QPointF(vf * t + t / 2, vr * t + t / 2)

    def _pos_to_square(self, pos: QPointF) -> Square | None:
        """Scene position → board square."""
        t = self.TILE
        col = int(pos.x() // t)
        row = int(pos.y() // t)
        if not (0 <= col < 8 and 0 <= row < 8):
            return None
        if self._flipped:
            f, r = 7 - col, row
        else:
            f, r = col, 7 - row
        return make_square(f, r)
