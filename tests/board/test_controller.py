"""Tests for the board interaction controller."""

from __future__ import annotations

import pytest

from chesslens.board.controller import HighlightState, InteractionController, PositionInfo
from chesslens.board.events import OFFBOARD, SPARE, DragStart, Drop, HoverEnter, HoverLeave, Tap
from chesslens.core.codec import STARTING_FEN
from chesslens.core.rules import ChessRules
from chesslens.core.types import Color, Mode

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class _Events:
    """Collects every signal the controller emits."""

    def __init__(self, ctrl: InteractionController) -> None:
        self.positions: list[PositionInfo] = []
        self.highlights: list[HighlightState] = []
        self.occupancies: list[dict[str, str]] = []
        self.modes: list[Mode] = []
        self.orientations: list[bool] = []
        ctrl.position_changed.connect(self.positions.append)
        ctrl.highlights_changed.connect(self.highlights.append)
        ctrl.occupancy_changed.connect(self.occupancies.append)
        ctrl.mode_changed.connect(self.modes.append)
        ctrl.orientation_changed.connect(self.orientations.append)


class _RefusingRules(ChessRules):
    """Rules engine whose loader rejects everything."""

    def load(self, fen: str) -> bool:
        return False


@pytest.fixture
def ctrl() -> InteractionController:
    return InteractionController(ChessRules())


class TestTapPlay:
    def test_tap_own_piece_selects_with_destinations(
        self, ctrl: InteractionController
    ) -> None:
        ev = _Events(ctrl)
        assert ctrl.handle(Tap("e2")) is False
        assert ctrl.selection == "e2"
        assert ctrl.highlights.targets == frozenset({"e3", "e4"})
        assert len(ev.highlights) == 1
        assert ev.positions == []

    def test_tap_opponent_or_empty_square_does_nothing(
        self, ctrl: InteractionController
    ) -> None:
        ev = _Events(ctrl)
        ctrl.handle(Tap("e7"))
        ctrl.handle(Tap("e4"))
        assert ctrl.selection is None
        assert ev.highlights == []

    def test_tap_target_applies_move(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.handle(Tap("e2"))
        assert ctrl.handle(Tap("e4")) is True

        assert ctrl.selection is None
        assert ctrl.highlights == HighlightState()
        assert len(ev.positions) == 1
        info = ev.positions[0]
        assert info.side_to_move == Color.BLACK
        assert info.fen.startswith("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b")
        assert ctrl.occupancy["e4"] == "wP"
        assert "e2" not in ctrl.occupancy

    def test_tap_other_own_piece_reselects(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.handle(Tap("e2"))
        assert ctrl.handle(Tap("f1")) is False
        assert ctrl.selection == "f1"
        # Bishop on f1 is blocked at the start.
        assert ctrl.highlights.targets == frozenset()
        assert ctrl.rules.fen() == STARTING_FEN
        assert ev.positions == []

    def test_tap_same_square_cancels(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.handle(Tap("e2"))
        ctrl.handle(Tap("e2"))
        assert ctrl.selection is None
        assert ctrl.highlights.is_empty
        assert ctrl.rules.fen() == STARTING_FEN
        assert ev.positions == []

    def test_tap_elsewhere_cancels(self, ctrl: InteractionController) -> None:
        ctrl.handle(Tap("g1"))
        ctrl.handle(Tap("g4"))
        assert ctrl.selection is None

    def test_tap_is_ignored_in_edit_mode(self, ctrl: InteractionController) -> None:
        ctrl.set_mode(Mode.EDIT)
        ctrl.handle(Tap("e2"))
        assert ctrl.selection is None


class TestDragPlay:
    def test_drag_own_piece_is_permitted(self, ctrl: InteractionController) -> None:
        assert ctrl.handle(DragStart("g1", "wN")) is True

    def test_drag_opponent_piece_is_refused(self, ctrl: InteractionController) -> None:
        assert ctrl.handle(DragStart("g8", "bN")) is False

    def test_refused_drag_keeps_selection(self, ctrl: InteractionController) -> None:
        ctrl.handle(Tap("e2"))
        ctrl.handle(DragStart("e7", "bP"))
        assert ctrl.selection == "e2"

    def test_spare_drag_is_refused(self, ctrl: InteractionController) -> None:
        assert ctrl.handle(DragStart(SPARE, "wQ")) is False

    def test_drag_refused_after_game_over(self) -> None:
        ctrl = InteractionController(ChessRules(FOOLS_MATE))
        assert ctrl.handle(DragStart("e1", "wK")) is False

    def test_drag_permitted_after_repeated_position(
        self, ctrl: InteractionController
    ) -> None:
        shuffle = [
            ("g1", "f3", "wN"),
            ("g8", "f6", "bN"),
            ("f3", "g1", "wN"),
            ("f6", "g8", "bN"),
        ]
        for src, dst, piece in shuffle + shuffle[:3]:
            assert ctrl.handle(DragStart(src, piece))
            assert ctrl.handle(Drop(src, dst, piece))
        assert ctrl.handle(DragStart("f6", "bN")) is True

    def test_drop_on_legal_square_moves_once(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.handle(DragStart("g1", "wN"))
        assert ctrl.handle(Drop("g1", "f3", "wN")) is True
        assert len(ev.positions) == 1
        assert ctrl.occupancy["f3"] == "wN"

    def test_drop_on_illegal_square_reverts(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.handle(DragStart("g1", "wN"))
        assert ctrl.handle(Drop("g1", "g3", "wN")) is False
        assert ev.positions == []
        assert ctrl.rules.fen() == STARTING_FEN

    def test_drop_offboard_in_play_reverts(self, ctrl: InteractionController) -> None:
        assert ctrl.handle(Drop("g1", OFFBOARD, "wN")) is False
        assert ctrl.occupancy["g1"] == "wN"

    def test_promotion_uses_configured_piece(self) -> None:
        ctrl = InteractionController(
            ChessRules("8/P6k/8/8/8/8/8/K7 w - - 0 1"), promotion="r"
        )
        assert ctrl.handle(Drop("a7", "a8", "wP")) is True
        assert ctrl.occupancy["a8"] == "wR"


class TestHover:
    def test_hover_previews_destinations(self, ctrl: InteractionController) -> None:
        ctrl.handle(HoverEnter("g1"))
        assert ctrl.highlights.preview_source == "g1"
        assert ctrl.highlights.preview == frozenset({"f3", "h3"})

    def test_hover_leave_clears_preview(self, ctrl: InteractionController) -> None:
        ctrl.handle(HoverEnter("g1"))
        ctrl.handle(HoverLeave("g1"))
        assert ctrl.highlights.is_empty

    def test_hover_never_overrides_selection(self, ctrl: InteractionController) -> None:
        ctrl.handle(Tap("e2"))
        ctrl.handle(HoverEnter("g1"))
        assert ctrl.highlights.selected == "e2"
        assert ctrl.highlights.preview_source is None

    def test_hover_on_empty_square_has_no_preview(
        self, ctrl: InteractionController
    ) -> None:
        ev = _Events(ctrl)
        ctrl.handle(HoverEnter("e4"))
        assert ev.highlights == []


class TestEditMode:
    def test_mode_switch_clears_selection(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.handle(Tap("e2"))
        ctrl.set_mode(Mode.EDIT)
        assert ctrl.mode == Mode.EDIT
        assert ctrl.selection is None
        assert ctrl.highlights.is_empty
        assert ev.modes == [Mode.EDIT]

    def test_leaving_edit_clears_highlights(self, ctrl: InteractionController) -> None:
        ctrl.set_mode(Mode.EDIT)
        ctrl.toggle_mode()
        assert ctrl.mode == Mode.PLAY
        assert ctrl.highlights.is_empty

    def test_spare_drop_overwrites_occupied_square(
        self, ctrl: InteractionController
    ) -> None:
        ctrl.set_mode(Mode.EDIT)
        ev = _Events(ctrl)
        assert ctrl.handle(DragStart(SPARE, "bQ")) is True
        assert ctrl.handle(Drop(SPARE, "e2", "bQ")) is True
        assert ctrl.occupancy["e2"] == "bQ"
        assert ctrl.rules.piece_at("e2") == "bQ"
        assert len(ev.positions) == 1

    def test_spare_drop_on_empty_square(self, ctrl: InteractionController) -> None:
        ctrl.set_mode(Mode.EDIT)
        assert ctrl.place("e4", "wN")
        assert ctrl.occupancy["e4"] == "wN"

    def test_board_drag_moves_piece_without_legality(
        self, ctrl: InteractionController
    ) -> None:
        ctrl.set_mode(Mode.EDIT)
        ev = _Events(ctrl)
        assert ctrl.handle(DragStart("d1", "wQ")) is True
        assert ctrl.handle(Drop("d1", "d7", "wQ")) is True
        occupancy = ctrl.occupancy
        assert occupancy["d7"] == "wQ"
        assert "d1" not in occupancy
        assert len(ev.positions) == 1

    def test_offboard_drop_removes_piece(self, ctrl: InteractionController) -> None:
        ctrl.set_mode(Mode.EDIT)
        ev = _Events(ctrl)
        assert ctrl.handle(Drop("a1", OFFBOARD, "wR")) is True
        assert "a1" not in ctrl.occupancy
        assert ctrl.rules.piece_at("a1") is None
        assert len(ev.positions) == 1

    def test_remove_helper(self, ctrl: InteractionController) -> None:
        ctrl.set_mode(Mode.EDIT)
        assert ctrl.remove("h8")
        assert not ctrl.remove("e4")

    def test_spare_dropped_offboard_is_noop(self, ctrl: InteractionController) -> None:
        ctrl.set_mode(Mode.EDIT)
        ev = _Events(ctrl)
        assert ctrl.handle(Drop(SPARE, OFFBOARD, "wQ")) is False
        assert ev.positions == []

    def test_same_square_drop_is_noop(self, ctrl: InteractionController) -> None:
        ctrl.set_mode(Mode.EDIT)
        ev = _Events(ctrl)
        assert ctrl.handle(Drop("e2", "e2", "wP")) is False
        assert ev.positions == []

    def test_synthesis_uses_edit_side_and_default_fields(
        self, ctrl: InteractionController
    ) -> None:
        ctrl.set_mode(Mode.EDIT)
        ctrl.clear()
        ctrl.set_edit_side_to_move(Color.BLACK)
        ctrl.place("e1", "wK")
        ctrl.place("e8", "bK")
        assert ctrl.rules.fen() == "4k3/8/8/8/8/8/8/4K3 b - - 0 1"
        assert ctrl.position().side_to_move == Color.BLACK

    def test_side_to_move_change_emits_one_position(
        self, ctrl: InteractionController
    ) -> None:
        ctrl.set_mode(Mode.EDIT)
        ev = _Events(ctrl)
        ctrl.set_edit_side_to_move(Color.BLACK)
        assert len(ev.positions) == 1
        assert ev.positions[0].side_to_move == Color.BLACK

    def test_no_implicit_structural_validation(
        self, ctrl: InteractionController
    ) -> None:
        ctrl.set_mode(Mode.EDIT)
        assert ctrl.remove("e1")
        assert ctrl.rules.piece_at("e1") is None
        assert ctrl.validate_structure() == ["White must have exactly one king"]

    def test_rejected_synthesis_keeps_last_valid_position(self) -> None:
        ctrl = InteractionController(_RefusingRules())
        ctrl.set_mode(Mode.EDIT)
        ev = _Events(ctrl)

        assert ctrl.place("e4", "wQ") is True

        assert ctrl.rules.fen() == STARTING_FEN
        assert ctrl.occupancy["e4"] == "wQ"
        assert len(ev.positions) == 1
        assert ev.positions[0].fen == STARTING_FEN

    def test_leaving_edit_resyncs_refused_surface(self) -> None:
        ctrl = InteractionController(_RefusingRules())
        ctrl.set_mode(Mode.EDIT)
        ctrl.place("e4", "wQ")
        ctrl.set_mode(Mode.PLAY)
        assert "e4" not in ctrl.occupancy


class TestWholePosition:
    def test_reset_emits_once(self, ctrl: InteractionController) -> None:
        ctrl.handle(Drop("e2", "e4", "wP"))
        ev = _Events(ctrl)
        ctrl.reset()
        assert len(ev.positions) == 1
        assert ev.positions[0].fen == STARTING_FEN

    def test_clear_emits_once(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.clear()
        assert len(ev.positions) == 1
        assert ctrl.occupancy == {}

    def test_load_valid_position(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        assert ctrl.load_position(FOOLS_MATE) is True
        assert len(ev.positions) == 1
        info = ev.positions[0]
        assert info.checkmate and info.check
        assert not info.stalemate

    def test_load_invalid_position_changes_nothing(
        self, ctrl: InteractionController
    ) -> None:
        ev = _Events(ctrl)
        assert ctrl.load_position("not a fen at all") is False
        assert ev.positions == []
        assert ctrl.rules.fen() == STARTING_FEN

    def test_load_clears_selection(self, ctrl: InteractionController) -> None:
        ctrl.handle(Tap("e2"))
        ctrl.load_position(STARTING_FEN)
        assert ctrl.selection is None

    def test_flip(self, ctrl: InteractionController) -> None:
        ev = _Events(ctrl)
        ctrl.flip()
        ctrl.set_flipped(True)
        assert ctrl.flipped is True
        assert ev.orientations == [True]

    def test_unknown_event_type_raises(self, ctrl: InteractionController) -> None:
        with pytest.raises(TypeError):
            ctrl.handle(object())  # type: ignore[arg-type]
