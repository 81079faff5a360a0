"""Rules-engine capability and its python-chess implementation.

The board controller never decides legality or game termination on its
own; it asks a :class:`RulesEngine` instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

import chess

from chesslens.core.types import (
    Color,
    Occupancy,
    PieceCode,
    Square,
    is_square,
    piece_from_letter,
    rank_index,
)


@dataclass(slots=True, frozen=True)
class GameFlags:
    """Termination-related flags for the current position."""

    check: bool = False
    checkmate: bool = False
    stalemate: bool = False
    draw: bool = False


@dataclass(slots=True, frozen=True)
class MoveOutcome:
    """Result of a move attempt."""

    accepted: bool
    fen: str | None = None
    san: str | None = None


class RulesEngine(Protocol):
    """Protocol for the move-legality capability used by the controller."""

    def move(
        self, from_sq: Square, to_sq: Square, promotion: str | None = None
    ) -> MoveOutcome: ...

    def destinations(self, square: Square) -> list[Square]: ...

    def flags(self) -> GameFlags: ...

    def is_game_over(self) -> bool: ...

    def load(self, fen: str) -> bool: ...

    def fen(self) -> str: ...

    def side_to_move(self) -> Color: ...

    def occupancy(self) -> Occupancy: ...

    def piece_at(self, square: Square) -> PieceCode | None: ...

    def reset(self) -> None: ...

    def clear(self) -> None: ...


_PROMOTION_PIECES: dict[str, chess.PieceType] = {
    "q": chess.QUEEN,
    "r": chess.ROOK,
    "b": chess.BISHOP,
    "n": chess.KNIGHT,
}


class ChessRules:
    """:class:`RulesEngine` backed by :class:`chess.Board`."""

    __slots__ = ("_board",)

    def __init__(self, fen: str | None = None) -> None:
        self._board = chess.Board() if fen is None else chess.Board(fen)

    # ── Moves ────────────────────────────────────────────────────────────

    def move(
        self, from_sq: Square, to_sq: Square, promotion: str | None = None
    ) -> MoveOutcome:
        if not (is_square(from_sq) and is_square(to_sq)):
            return MoveOutcome(accepted=False)

        src = chess.parse_square(from_sq)
        dst = chess.parse_square(to_sq)
        move = chess.Move(src, dst)
        if promotion is not None and self._is_promotion(src, dst):
            piece_type = _PROMOTION_PIECES.get(promotion.lower())
            if piece_type is None:
                return MoveOutcome(accepted=False)
            move = chess.Move(src, dst, promotion=piece_type)

        if move not in self._board.legal_moves:
            return MoveOutcome(accepted=False)

        san = self._board.san(move)
        self._board.push(move)
        return MoveOutcome(accepted=True, fen=self._board.fen(), san=san)

    def destinations(self, square: Square) -> list[Square]:
        if not is_square(square):
            return []
        src = chess.parse_square(square)
        targets = {
            chess.square_name(m.to_square)
            for m in self._board.legal_moves
            if m.from_square == src
        }
        return sorted(targets)

    def _is_promotion(self, src: chess.Square, dst: chess.Square) -> bool:
        piece = self._board.piece_at(src)
        if piece is None or piece.piece_type != chess.PAWN:
            return False
        return chess.square_rank(dst) in (0, 7)

    # ── Status ───────────────────────────────────────────────────────────

    def flags(self) -> GameFlags:
        board = self._board
        stalemate = board.is_stalemate()
        draw = (
            stalemate
            or board.is_insufficient_material()
            or board.is_fifty_moves()
            or board.is_repetition(3)
        )
        return GameFlags(
            check=board.is_check(),
            checkmate=board.is_checkmate(),
            stalemate=stalemate,
            draw=draw,
        )

    def is_game_over(self) -> bool:
        flags = self.flags()
        return flags.checkmate or flags.draw

    # ── Position access ──────────────────────────────────────────────────

    def load(self, fen: str) -> bool:
        """Replace the position with *fen*. Returns False on syntax errors."""
        try:
            board = chess.Board(fen)
        except ValueError:
            return False
        self._board = board
        return True

    def fen(self) -> str:
        return self._board.fen()

    def side_to_move(self) -> Color:
        return Color.WHITE if self._board.turn == chess.WHITE else Color.BLACK

    def occupancy(self) -> Occupancy:
        return {
            chess.square_name(sq): piece_from_letter(piece.symbol())
            for sq, piece in self._board.piece_map().items()
        }

    def piece_at(self, square: Square) -> PieceCode | None:
        if not is_square(square):
            return None
        piece = self._board.piece_at(chess.parse_square(square))
        return None if piece is None else piece_from_letter(piece.symbol())

    def san(self, uci: str) -> str | None:
        """SAN for a UCI move in the current position, or None if illegal."""
        try:
            move = chess.Move.from_uci(uci)
        except ValueError:
            return None
        if move not in self._board.legal_moves:
            return None
        return self._board.san(move)

    def reset(self) -> None:
        self._board.reset()

    def clear(self) -> None:
        self._board.clear()


def structural_errors(occupancy: Mapping[Square, PieceCode]) -> list[str]:
    """Sanity problems that make a set-up position unplayable.

    Never run implicitly; callers decide when to validate.
    """
    pieces = list(occupancy.items())
    white_kings = sum(1 for _, p in pieces if p == "wK")
    black_kings = sum(1 for _, p in pieces if p == "bK")
    pawns_on_edge = sum(
        1 for sq, p in pieces if p[1] == "P" and rank_index(sq) in (0, 7)
    )

    errors: list[str] = []
    if white_kings != 1:
        errors.append("White must have exactly one king")
    if black_kings != 1:
        errors.append("Black must have exactly one king")
    if pawns_on_edge:
        errors.append("Pawns cannot stand on the first or eighth rank")
    return errors
