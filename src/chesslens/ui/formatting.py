"""Display formatting for engine output."""

from __future__ import annotations

from dataclasses import dataclass

import chess

from chesslens.core.types import Color
from chesslens.engine.protocol import Score

_TONE_THRESHOLD = 0.2  # pawns
_BAR_CLAMP = 5.0  # pawns at which the bar is nearly full
MATE_DISPLAY_VALUE = 100.0


@dataclass(slots=True, frozen=True)
class ScoreText:
    """Rendered score: label, signed numeric value, and tone."""

    text: str
    value: float
    tone: str  # "positive", "negative" or ""


def white_pov(score: Score, side_to_move: Color) -> Score:
    """Engine scores are side-to-move relative; flip them for Black."""
    return score.negated() if side_to_move == Color.BLACK else score


def format_score(score: Score, side_to_move: Color) -> ScoreText:
    """Format *score* from White's point of view."""
    display = white_pov(score, side_to_move)

    if display.is_mate:
        winning = display.value > 0
        return ScoreText(
            text=("+" if winning else "-") + f"M{abs(int(display.value))}",
            value=MATE_DISPLAY_VALUE if winning else -MATE_DISPLAY_VALUE,
            tone="positive" if winning else "negative",
        )

    value = float(display.value) + 0.0  # normalise -0.0
    if value >= _TONE_THRESHOLD:
        tone = "positive"
    elif value <= -_TONE_THRESHOLD:
        tone = "negative"
    else:
        tone = ""
    return ScoreText(text=f"{value:+.2f}", value=value, tone=tone)


def eval_bar_fraction(white_score: Score | None) -> float:
    """Share of the evaluation bar filled for White (0.0–1.0)."""
    if white_score is None:
        return 0.5
    if white_score.is_mate:
        return 1.0 if white_score.value > 0 else 0.0
    clamped = max(-_BAR_CLAMP, min(_BAR_CLAMP, float(white_score.value)))
    return 0.5 + (clamped / _BAR_CLAMP) * 0.45


def format_nodes(nodes: int | None) -> str:
    if nodes is None:
        return "—"
    if nodes >= 1_000_000_000:
        return f"{nodes / 1_000_000_000:.1f}B"
    if nodes >= 1_000_000:
        return f"{nodes / 1_000_000:.1f}M"
    if nodes >= 1_000:
        return f"{nodes / 1_000:.1f}K"
    return str(nodes)


def format_time(ms: int | None) -> str:
    if ms is None:
        return "—"
    if ms >= 60_000:
        minutes, seconds = divmod(ms // 1000, 60)
        return f"{minutes}:{seconds:02d}"
    if ms >= 1000:
        return f"{ms / 1000:.1f}s"
    return f"{ms}ms"


def uci_to_san(uci: str, fen: str) -> str:
    """SAN for *uci* in *fen*; the raw UCI text when it does not apply."""
    try:
        board = chess.Board(fen)
        move = chess.Move.from_uci(uci)
    except ValueError:
        return uci
    if move not in board.legal_moves:
        return uci
    return board.san(move)


def pv_to_san(pv: tuple[str, ...], fen: str, limit: int = 8) -> str:
    """Render the first *limit* moves of a principal variation in SAN."""
    try:
        board = chess.Board(fen)
    except ValueError:
        return " ".join(pv[:limit])
    parts: list[str] = []
    for uci in pv[:limit]:
        try:
            move = chess.Move.from_uci(uci)
        except ValueError:
            break
        if move not in board.legal_moves:
            break
        if board.turn == chess.WHITE:
            parts.append(f"{board.fullmove_number}.")
        elif not parts:
            parts.append(f"{board.fullmove_number}...")
        parts.append(board.san(move))
        board.push(move)
    return " ".join(parts) if parts else " ".join(pv[:limit])
