"""Board occupancy → FEN serialisation.

Decoding is the rules engine's job; this module only encodes.
"""

from __future__ import annotations

from collections.abc import Mapping

from chesslens.core.types import Color, PieceCode, Square, make_square, piece_letter

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Fields edit mode cannot infer from occupancy alone.
DEFAULT_CASTLING = "KQkq"
DEFAULT_EN_PASSANT = "-"
DEFAULT_HALFMOVE = 0
DEFAULT_FULLMOVE = 1


def encode_placement(occupancy: Mapping[Square, PieceCode]) -> str:
    """Serialise the piece-placement field (ranks 8 → 1)."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = occupancy.get(make_square(file, rank))
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += piece_letter(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def encode(occupancy: Mapping[Square, PieceCode], side_to_move: Color) -> str:
    """Serialise *occupancy* and *side_to_move* to a full FEN string."""
    return (
        f"{encode_placement(occupancy)} {side_to_move.letter} "
        f"{DEFAULT_CASTLING} {DEFAULT_EN_PASSANT} "
        f"{DEFAULT_HALFMOVE} {DEFAULT_FULLMOVE}"
    )
