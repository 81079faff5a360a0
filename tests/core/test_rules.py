"""Tests for the python-chess backed rules adapter."""

from __future__ import annotations

from chesslens.core.codec import STARTING_FEN
from chesslens.core.rules import ChessRules, structural_errors
from chesslens.core.types import Color

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
PROMOTION = "8/P6k/8/8/8/8/8/K7 w - - 0 1"
# Start position recurs after plies 4 and 8
KNIGHT_SHUFFLE = [
    ("g1", "f3"), ("g8", "f6"), ("f3", "g1"), ("f6", "g8"),
    ("g1", "f3"), ("g8", "f6"), ("f3", "g1"), ("f6", "g8"),
]


class TestMoves:
    def test_legal_move_is_applied(self) -> None:
        rules = ChessRules()
        outcome = rules.move("e2", "e4")
        assert outcome.accepted
        assert outcome.san == "e4"
        assert rules.piece_at("e4") == "wP"
        assert rules.piece_at("e2") is None
        assert rules.side_to_move() == Color.BLACK

    def test_illegal_move_is_refused(self) -> None:
        rules = ChessRules()
        outcome = rules.move("e2", "f1")
        assert not outcome.accepted
        assert rules.fen() == STARTING_FEN

    def test_off_board_squares_are_refused(self) -> None:
        assert not ChessRules().move("e2", "offboard").accepted

    def test_promotion_uses_requested_piece(self) -> None:
        rules = ChessRules(PROMOTION)
        outcome = rules.move("a7", "a8", "n")
        assert outcome.accepted
        assert rules.piece_at("a8") == "wN"

    def test_promotion_defaults_to_refusal_without_piece(self) -> None:
        rules = ChessRules(PROMOTION)
        assert not rules.move("a7", "a8").accepted

    def test_promotion_piece_ignored_for_normal_moves(self) -> None:
        assert ChessRules().move("g1", "f3", "q").accepted

    def test_destinations(self) -> None:
        rules = ChessRules()
        assert rules.destinations("e2") == ["e3", "e4"]
        assert rules.destinations("e7") == []
        assert rules.destinations("e5") == []


class TestStatus:
    def test_starting_flags(self) -> None:
        flags = ChessRules().flags()
        assert not (flags.check or flags.checkmate or flags.stalemate or flags.draw)

    def test_checkmate(self) -> None:
        rules = ChessRules(FOOLS_MATE)
        flags = rules.flags()
        assert flags.check and flags.checkmate
        assert rules.is_game_over()

    def test_stalemate_counts_as_draw(self) -> None:
        flags = ChessRules(STALEMATE).flags()
        assert flags.stalemate and flags.draw
        assert not flags.checkmate

    def test_insufficient_material_is_draw(self) -> None:
        flags = ChessRules("8/8/8/4k3/8/8/8/4K3 w - - 0 1").flags()
        assert flags.draw and not flags.stalemate
        assert ChessRules("8/8/8/4k3/8/8/8/4K3 w - - 0 1").is_game_over()

    def test_twofold_repetition_is_not_a_draw(self) -> None:
        rules = ChessRules()
        for src, dst in KNIGHT_SHUFFLE[:-1]:
            assert rules.move(src, dst).accepted
        flags = rules.flags()
        assert not flags.draw
        assert not rules.is_game_over()

    def test_threefold_repetition_is_draw(self) -> None:
        rules = ChessRules()
        for src, dst in KNIGHT_SHUFFLE:
            assert rules.move(src, dst).accepted
        assert rules.flags().draw
        assert rules.is_game_over()

    def test_fifty_move_rule_is_draw(self) -> None:
        rules = ChessRules("4k3/8/8/8/8/8/8/R3K3 w - - 100 80")
        flags = rules.flags()
        assert flags.draw and not flags.stalemate
        assert rules.is_game_over()


class TestPositionAccess:
    def test_load_rejects_garbage(self) -> None:
        rules = ChessRules()
        rules.move("e2", "e4")
        before = rules.fen()
        assert not rules.load("not a fen")
        assert rules.fen() == before

    def test_load_valid(self) -> None:
        rules = ChessRules()
        assert rules.load(STALEMATE)
        assert rules.side_to_move() == Color.BLACK
        assert rules.occupancy() == {"h8": "bK", "f7": "wQ", "g6": "wK"}

    def test_reset_and_clear(self) -> None:
        rules = ChessRules()
        rules.clear()
        assert rules.occupancy() == {}
        rules.reset()
        assert rules.fen() == STARTING_FEN

    def test_san(self) -> None:
        rules = ChessRules()
        assert rules.san("g1f3") == "Nf3"
        assert rules.san("e2e5") is None
        assert rules.san("zz") is None


class TestStructuralErrors:
    def test_starting_position_is_clean(self) -> None:
        assert structural_errors(ChessRules().occupancy()) == []

    def test_missing_kings(self) -> None:
        assert structural_errors({}) == [
            "White must have exactly one king",
            "Black must have exactly one king",
        ]

    def test_two_white_kings(self) -> None:
        errors = structural_errors({"e1": "wK", "d1": "wK", "e8": "bK"})
        assert errors == ["White must have exactly one king"]

    def test_pawn_on_back_rank(self) -> None:
        errors = structural_errors({"e1": "wK", "e8": "bK", "a8": "wP"})
        assert errors == ["Pawns cannot stand on the first or eighth rank"]
