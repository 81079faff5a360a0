"""UCI wire format: command builders and ``info`` line parsing.

Everything here is pure. Aggregating parsed lines is the session's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# ── Commands ────────────────────────────────────────────────────────────────

UCI = "uci"
IS_READY = "isready"
GO_INFINITE = "go infinite"
STOP = "stop"
QUIT = "quit"

# ── Responses ───────────────────────────────────────────────────────────────

UCI_OK = "uciok"
READY_OK = "readyok"
INFO = "info"
BEST_MOVE = "bestmove"


def setoption(name: str, value: object) -> str:
    return f"setoption name {name} value {value}"


def position_fen(fen: str) -> str:
    return f"position fen {fen}"


# ── Scores ──────────────────────────────────────────────────────────────────


class ScoreKind(StrEnum):
    CP = "cp"
    MATE = "mate"


@dataclass(slots=True, frozen=True)
class Score:
    """Engine evaluation tagged with its unit.

    ``CP`` values are in pawns, ``MATE`` values are signed moves-to-mate.
    Scores of different kinds are never equal and refuse to be ordered.
    """

    kind: ScoreKind
    value: float

    @classmethod
    def from_centipawns(cls, centipawns: int) -> Score:
        return cls(ScoreKind.CP, centipawns / 100)

    @classmethod
    def from_mate(cls, moves: int) -> Score:
        return cls(ScoreKind.MATE, moves)

    @property
    def is_mate(self) -> bool:
        return self.kind == ScoreKind.MATE

    def negated(self) -> Score:
        return Score(self.kind, -self.value)

    def __lt__(self, other: Score) -> bool:
        if not isinstance(other, Score):
            return NotImplemented
        if other.kind != self.kind:
            raise TypeError("Cannot order a cp score against a mate score")
        return self.value < other.value


# ── Info records ────────────────────────────────────────────────────────────


@dataclass(slots=True, frozen=True)
class InfoRecord:
    """Fields of one ``info`` line; absent fields are ``None``."""

    depth: int | None = None
    seldepth: int | None = None
    rank: int | None = None
    score: Score | None = None
    nodes: int | None = None
    nps: int | None = None
    time_ms: int | None = None
    pv: tuple[str, ...] = ()


# Keys that consume exactly one integer token.
_INT_FIELDS: dict[str, str] = {
    "depth": "depth",
    "seldepth": "seldepth",
    "multipv": "rank",
    "nodes": "nodes",
    "nps": "nps",
    "time": "time_ms",
}


def tokenize_info(line: str) -> InfoRecord | None:
    """Tokenise an ``info`` line into a record without completeness checks.

    Returns None when the line is not an ``info`` line or a recognised key is
    followed by a missing or non-numeric value.
    """
    tokens = line.split()
    if not tokens or tokens[0] != INFO:
        return None

    fields: dict[str, object] = {}
    i = 1
    while i < len(tokens):
        key = tokens[i]
        if key in _INT_FIELDS:
            if i + 1 >= len(tokens):
                return None
            try:
                fields[_INT_FIELDS[key]] = int(tokens[i + 1])
            except ValueError:
                return None
            i += 2
        elif key == "score":
            if i + 2 >= len(tokens):
                return None
            kind, raw = tokens[i + 1], tokens[i + 2]
            try:
                value = int(raw)
            except ValueError:
                return None
            if kind == ScoreKind.CP:
                fields["score"] = Score.from_centipawns(value)
            elif kind == ScoreKind.MATE:
                fields["score"] = Score.from_mate(value)
            i += 3
        elif key == "pv":
            fields["pv"] = tuple(tokens[i + 1 :])
            break
        else:
            i += 1

    return InfoRecord(**fields)  # type: ignore[arg-type]


def parse_info_line(line: str) -> InfoRecord | None:
    """Parse a complete analysis line.

    Only lines carrying a rank, a score and a non-empty principal variation
    are returned; everything else is dropped.
    """
    record = tokenize_info(line)
    if record is None:
        return None
    if record.rank is None or record.score is None or not record.pv:
        return None
    return record
