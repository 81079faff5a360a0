"""Core domain layer — square/piece vocabulary, FEN encoding, rules adapter.

Quick start::

    from chesslens.core import ChessRules, Color, encode

    rules = ChessRules()
    rules.move("e2", "e4")
    fen = encode(rules.occupancy(), Color.BLACK)
"""

from chesslens.core.codec import STARTING_FEN, encode, encode_placement
from chesslens.core.rules import (
    ChessRules,
    GameFlags,
    MoveOutcome,
    RulesEngine,
    structural_errors,
)
from chesslens.core.types import (
    ALL_PIECES,
    SQUARES,
    Color,
    Mode,
    Occupancy,
    PieceCode,
    Square,
    is_piece_code,
    is_square,
    make_square,
    piece_color,
)

__all__ = [
    # Enums
    "Color",
    "Mode",
    # Types / helpers
    "ALL_PIECES",
    "Occupancy",
    "PieceCode",
    "SQUARES",
    "Square",
    "is_piece_code",
    "is_square",
    "make_square",
    "piece_color",
    # Notation
    "STARTING_FEN",
    "encode",
    "encode_placement",
    # Rules
    "ChessRules",
    "GameFlags",
    "MoveOutcome",
    "RulesEngine",
    "structural_errors",
]
