"""Square names, piece codes and small domain enumerations.

Squares are addressed by their algebraic name (``"a1"`` … ``"h8"``).
Pieces are two-character codes: colour prefix ``w``/``b`` followed by the
upper-case piece letter, e.g. ``"wK"`` or ``"bP"``.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import TypeAlias

Square: TypeAlias = str  # "a1" … "h8"
PieceCode: TypeAlias = str  # "wK", "bP", …
Occupancy: TypeAlias = dict[Square, PieceCode]

FILES = "abcdefgh"
RANKS = "12345678"
PIECE_LETTERS = "PNBRQK"

SQUARES: tuple[Square, ...] = tuple(f + r for r in RANKS for f in FILES)


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def letter(self) -> str:
        """FEN side-to-move letter."""
        return "w" if self == Color.WHITE else "b"

    @classmethod
    def from_letter(cls, letter: str) -> Color:
        if letter == "w":
            return cls.WHITE
        if letter == "b":
            return cls.BLACK
        raise ValueError(f"Invalid side-to-move letter: {letter!r}")

    def __str__(self) -> str:
        return self.name.lower()


class Mode(StrEnum):
    """Board interaction mode."""

    PLAY = "play"
    EDIT = "edit"


# ── Square helpers ──────────────────────────────────────────────────────────


def is_square(name: object) -> bool:
    return (
        isinstance(name, str)
        and len(name) == 2
        and name[0] in FILES
        and name[1] in RANKS
    )


def file_index(sq: Square) -> int:
    """File index 0–7 (a–h)."""
    return FILES.index(sq[0])


def rank_index(sq: Square) -> int:
    """Rank index 0–7 (1–8)."""
    return RANKS.index(sq[1])


def make_square(file: int, rank: int) -> Square:
    """Create a square name from file (0–7) and rank (0–7)."""
    if not (0 <= file < 8 and 0 <= rank < 8):
        raise ValueError(f"Square out of range: file={file}, rank={rank}")
    return FILES[file] + RANKS[rank]


# ── Piece helpers ───────────────────────────────────────────────────────────


def is_piece_code(code: object) -> bool:
    return (
        isinstance(code, str)
        and len(code) == 2
        and code[0] in "wb"
        and code[1] in PIECE_LETTERS
    )


def piece_color(code: PieceCode) -> Color:
    return Color.from_letter(code[0])


def piece_letter(code: PieceCode) -> str:
    """FEN letter for *code*: upper case for White, lower case for Black."""
    if not is_piece_code(code):
        raise ValueError(f"Invalid piece code: {code!r}")
    letter = code[1]
    return letter if code[0] == "w" else letter.lower()


def piece_from_letter(letter: str) -> PieceCode:
    """Inverse of :func:`piece_letter`."""
    if len(letter) != 1 or letter.upper() not in PIECE_LETTERS:
        raise ValueError(f"Invalid piece letter: {letter!r}")
    return ("w" if letter.isupper() else "b") + letter.upper()


ALL_PIECES: tuple[PieceCode, ...] = tuple(
    c + p for c in "wb" for p in "KQRBNP"
)
