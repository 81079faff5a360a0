"""InteractionController — selection, highlights and mode-gated mutation.

Consumes the unified input stream from :mod:`chesslens.board.events`,
asks the rules engine about legality, and announces every accepted
mutation with exactly one ``position_changed`` signal.

Play mode (tap FSM)::

    Idle --tap own piece--> PieceSelected
    PieceSelected --tap legal target--> Idle (move applied)
    PieceSelected --tap other own piece--> PieceSelected (re-selected)
    PieceSelected --tap anything else--> Idle (selection cancelled)

Edit mode skips legality entirely and rebuilds the position from the
board occupancy after every change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PyQt6.QtCore import QObject, pyqtSignal

from chesslens.board.events import (
    OFFBOARD,
    SPARE,
    DragStart,
    Drop,
    HoverEnter,
    HoverLeave,
    InputEvent,
    Tap,
)
from chesslens.core.codec import encode
from chesslens.core.rules import ChessRules, RulesEngine, structural_errors
from chesslens.core.types import (
    Color,
    Mode,
    Occupancy,
    PieceCode,
    Square,
    is_piece_code,
    is_square,
    piece_color,
)

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PositionInfo:
    """Payload of ``position_changed``; all flags come from the rules engine."""

    fen: str
    side_to_move: Color
    check: bool
    checkmate: bool
    stalemate: bool
    draw: bool


@dataclass(slots=True, frozen=True)
class HighlightState:
    """Persistent selection highlights plus a transient hover preview."""

    selected: Square | None = None
    targets: frozenset[Square] = frozenset()
    preview_source: Square | None = None
    preview: frozenset[Square] = frozenset()

    @property
    def is_empty(self) -> bool:
        return self.selected is None and self.preview_source is None

    def squares(self) -> frozenset[Square]:
        """Every highlighted square, selection and preview alike."""
        result = set(self.targets) | set(self.preview)
        if self.selected is not None:
            result.add(self.selected)
        if self.preview_source is not None:
            result.add(self.preview_source)
        return frozenset(result)


class InteractionController(QObject):
    """Reconciles tap and drag input against one position.

    Signals:
        position_changed(PositionInfo): Exactly once per accepted mutation.
        highlights_changed(HighlightState): Highlight state was replaced.
        occupancy_changed(dict): Board surface snapshot to render.
        mode_changed(Mode): Play/Edit switched.
        orientation_changed(bool): Board flipped (True = Black at bottom).
    """

    position_changed = pyqtSignal(object)
    highlights_changed = pyqtSignal(object)
    occupancy_changed = pyqtSignal(object)
    mode_changed = pyqtSignal(object)
    orientation_changed = pyqtSignal(bool)

    def __init__(
        self,
        rules: RulesEngine | None = None,
        *,
        promotion: str = "q",
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._rules: RulesEngine = rules if rules is not None else ChessRules()
        self._promotion = promotion
        self._mode = Mode.PLAY
        self._highlights = HighlightState()
        self._occupancy: Occupancy = self._rules.occupancy()
        self._edit_side = self._rules.side_to_move()
        self._flipped = False

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def rules(self) -> RulesEngine:
        return self._rules

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def selection(self) -> Square | None:
        return self._highlights.selected

    @property
    def highlights(self) -> HighlightState:
        return self._highlights

    @property
    def occupancy(self) -> Occupancy:
        return dict(self._occupancy)

    @property
    def flipped(self) -> bool:
        return self._flipped

    @property
    def edit_side_to_move(self) -> Color:
        return self._edit_side

    @property
    def promotion(self) -> str:
        return self._promotion

    def set_promotion(self, piece: str) -> None:
        self._promotion = piece

    def position(self) -> PositionInfo:
        flags = self._rules.flags()
        return PositionInfo(
            fen=self._rules.fen(),
            side_to_move=self._rules.side_to_move(),
            check=flags.check,
            checkmate=flags.checkmate,
            stalemate=flags.stalemate,
            draw=flags.draw,
        )

    def validate_structure(self) -> list[str]:
        """Explicit structural check of the current occupancy."""
        return structural_errors(self._occupancy)

    # ── Input dispatch ───────────────────────────────────────────────────

    def handle(self, event: InputEvent) -> bool:
        """Process one input event.

        Returns True when a drag may proceed (``DragStart``) or when the
        event mutated the position. A False ``Drop`` means the dragged piece
        must snap back.
        """
        if isinstance(event, Tap):
            return self._on_tap(event.square)
        if isinstance(event, DragStart):
            return self._on_drag_start(event)
        if isinstance(event, Drop):
            return self._on_drop(event)
        if isinstance(event, HoverEnter):
            self._on_hover_enter(event.square)
            return False
        if isinstance(event, HoverLeave):
            self._on_hover_leave(event.square)
            return False
        raise TypeError(f"Unsupported input event: {event!r}")

    def _on_tap(self, square: Square) -> bool:
        if self._mode == Mode.EDIT or not is_square(square):
            return False

        selected = self._highlights.selected
        if selected is None:
            if self._is_own_piece(square):
                self._select(square)
            return False

        if square in self._highlights.targets and self._apply_move(selected, square):
            return True
        if square != selected and self._is_own_piece(square):
            self._select(square)
        else:
            self._clear_highlights()
        return False

    def _on_drag_start(self, event: DragStart) -> bool:
        if self._mode == Mode.EDIT:
            self._clear_highlights()
            return is_piece_code(event.piece)

        if event.source == SPARE or self._rules.is_game_over():
            return False
        if not self._is_own_piece(event.source):
            # Keep any selection: a tap capture on this square is still possible.
            return False
        self._clear_highlights()
        return True

    def _on_drop(self, event: Drop) -> bool:
        if self._mode == Mode.EDIT:
            return self._edit_drop(event)
        if event.source == SPARE or event.target == OFFBOARD:
            return False
        if event.source == event.target:
            return False
        return self._apply_move(event.source, event.target)

    def _on_hover_enter(self, square: Square) -> None:
        if self._mode == Mode.EDIT or self._highlights.selected is not None:
            return
        targets = self._rules.destinations(square)
        if not targets:
            return
        self._set_highlights(
            HighlightState(preview_source=square, preview=frozenset(targets))
        )

    def _on_hover_leave(self, square: Square) -> None:
        del square
        if self._highlights.preview_source is None:
            return
        self._set_highlights(
            HighlightState(
                selected=self._highlights.selected,
                targets=self._highlights.targets,
            )
        )

    # ── Play-mode helpers ────────────────────────────────────────────────

    def _is_own_piece(self, square: Square) -> bool:
        piece = self._rules.piece_at(square)
        return piece is not None and piece_color(piece) == self._rules.side_to_move()

    def _select(self, square: Square) -> None:
        targets = frozenset(self._rules.destinations(square))
        self._set_highlights(HighlightState(selected=square, targets=targets))

    def _apply_move(self, from_sq: Square, to_sq: Square) -> bool:
        outcome = self._rules.move(from_sq, to_sq, self._promotion)
        if not outcome.accepted:
            return False
        _LOGGER.debug("Move %s%s applied (%s)", from_sq, to_sq, outcome.san)
        self._clear_highlights()
        self._sync_occupancy()
        self._emit_position()
        return True

    # ── Edit-mode helpers ────────────────────────────────────────────────

    def _edit_drop(self, event: Drop) -> bool:
        if not is_piece_code(event.piece):
            return False
        if event.target == OFFBOARD:
            if event.source == SPARE or event.source not in self._occupancy:
                return False
            del self._occupancy[event.source]
        else:
            if not is_square(event.target) or event.source == event.target:
                return False
            if event.source != SPARE:
                self._occupancy.pop(event.source, None)
            self._occupancy[event.target] = event.piece
        self._resynthesize()
        return True

    def place(self, square: Square, piece: PieceCode) -> bool:
        """Put *piece* on *square* (edit mode only)."""
        return self.handle(Drop(SPARE, square, piece))

    def remove(self, square: Square) -> bool:
        """Take the piece off *square* (edit mode only)."""
        piece = self._occupancy.get(square)
        if piece is None:
            return False
        return self.handle(Drop(square, OFFBOARD, piece))

    def set_edit_side_to_move(self, color: Color) -> None:
        """Side to move used when edit mode rebuilds the position."""
        self._edit_side = color
        if self._mode == Mode.EDIT:
            self._resynthesize()

    def _resynthesize(self) -> None:
        fen = encode(self._occupancy, self._edit_side)
        if not self._rules.load(fen):
            _LOGGER.debug("Edited position rejected, keeping last valid one: %s", fen)
        self.occupancy_changed.emit(dict(self._occupancy))
        self._emit_position()

    # ── Mode / orientation ───────────────────────────────────────────────

    def set_mode(self, mode: Mode) -> None:
        """Switch Play/Edit. Always drops selection and highlights."""
        self._clear_highlights()
        if mode == self._mode:
            return
        self._mode = mode
        if mode == Mode.EDIT:
            self._edit_side = self._rules.side_to_move()
        else:
            # The surface may show an edit the rules engine refused.
            self._sync_occupancy()
        self.mode_changed.emit(mode)

    def toggle_mode(self) -> Mode:
        self.set_mode(Mode.PLAY if self._mode == Mode.EDIT else Mode.EDIT)
        return self._mode

    def flip(self) -> None:
        self.set_flipped(not self._flipped)

    def set_flipped(self, flipped: bool) -> None:
        if flipped == self._flipped:
            return
        self._flipped = flipped
        self.orientation_changed.emit(flipped)

    # ── Whole-position mutations ─────────────────────────────────────────

    def reset(self) -> None:
        """Standard starting position."""
        self._rules.reset()
        self._after_external_change()

    def clear(self) -> None:
        """Empty board."""
        self._rules.clear()
        self._after_external_change()

    def load_position(self, fen: str) -> bool:
        """Load *fen*; returns False (and changes nothing) when it is invalid."""
        if not self._rules.load(fen.strip()):
            return False
        self._after_external_change()
        return True

    def _after_external_change(self) -> None:
        self._clear_highlights()
        self._edit_side = self._rules.side_to_move()
        self._sync_occupancy()
        self._emit_position()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _sync_occupancy(self) -> None:
        self._occupancy = self._rules.occupancy()
        self.occupancy_changed.emit(dict(self._occupancy))

    def _set_highlights(self, state: HighlightState) -> None:
        if state == self._highlights:
            return
        self._highlights = state
        self.highlights_changed.emit(state)

    def _clear_highlights(self) -> None:
        self._set_highlights(HighlightState())

    def _emit_position(self) -> None:
        self.position_changed.emit(self.position())
