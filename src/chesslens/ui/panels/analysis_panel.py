"""AnalysisPanel — live engine lines and search telemetry.

Shows one row per MultiPV rank (score plus the principal variation in
SAN) and the depth / nodes / time of the newest info line.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QVBoxLayout, QWidget

from chesslens.core.types import Color
from chesslens.engine.session import AnalysisLine, AnalysisUpdate
from chesslens.ui.formatting import format_nodes, format_score, format_time, pv_to_san
from chesslens.ui.styles.theme import SCORE_TONE_COLORS

# ── Small reusable sub-widgets ──────────────────────────────────────────


class _LineRow(QWidget):
    """Single row: score badge followed by the variation."""

    def __init__(self, rank: int, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.rank = rank
        layout = QHBoxLayout(self)
        layout.setContentsMargins(2, 0, 2, 0)
        layout.setSpacing(6)

        self._score = QLabel("…")
        self._score.setFont(QFont("Consolas", 10, QFont.Weight.Bold))
        self._score.setFixedWidth(56)
        self._score.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._score)

        self._moves = QLabel("")
        self._moves.setFont(QFont("Consolas", 10))
        self._moves.setStyleSheet("color: #d4d4d4;")
        self._moves.setWordWrap(True)
        layout.addWidget(self._moves, stretch=1)
        self.clear()

    @property
    def score_text(self) -> str:
        return self._score.text()

    @property
    def moves_text(self) -> str:
        return self._moves.text()

    def set_line(self, line: AnalysisLine, fen: str, side_to_move: Color) -> None:
        rendered = format_score(line.score, side_to_move)
        self._score.setText(rendered.text)
        self._score.setStyleSheet(f"color: {SCORE_TONE_COLORS[rendered.tone]};")
        self._moves.setText(pv_to_san(line.pv, fen))

    def clear(self) -> None:
        self._score.setText("…")
        self._score.setStyleSheet(f"color: {SCORE_TONE_COLORS['']};")
        self._moves.setText("")


# ── Main panel ──────────────────────────────────────────────────────────


class AnalysisPanel(QWidget):
    """Best lines and telemetry shown in the main window side panel."""

    def __init__(self, multipv: int = 3, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._rows: list[_LineRow] = []
        self._setup_ui(multipv)

    def _setup_ui(self, multipv: int) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(6, 6, 6, 6)
        root.setSpacing(6)

        # ── Title ──
        self._title = QLabel("Engine lines")
        self._title.setFont(QFont("Helvetica Neue", 12, QFont.Weight.Bold))
        self._title.setStyleSheet("color: #e0e0e0;")
        root.addWidget(self._title)

        # ── Lines ──
        lines_frame = QFrame()
        lines_frame.setStyleSheet(
            """
            QFrame {
                background: #2a2a2a;
                border-radius: 6px;
                padding: 4px;
            }
            """
        )
        lines_layout = QVBoxLayout(lines_frame)
        lines_layout.setContentsMargins(4, 4, 4, 4)
        lines_layout.setSpacing(2)
        for rank in range(1, max(1, multipv) + 1):
            row = _LineRow(rank)
            self._rows.append(row)
            lines_layout.addWidget(row)
        root.addWidget(lines_frame)

        # ── Telemetry ──
        stats = QHBoxLayout()
        stats.setSpacing(12)
        self._depth = QLabel()
        self._nodes = QLabel()
        self._time = QLabel()
        for label in (self._depth, self._nodes, self._time):
            label.setFont(QFont("Helvetica Neue", 9))
            label.setStyleSheet("color: #b0b0b0;")
            stats.addWidget(label)
        stats.addStretch(1)
        root.addLayout(stats)
        root.addStretch(1)

        self.reset()

    # ── Public API ──────────────────────────────────────────────────────

    def row(self, rank: int) -> _LineRow:
        return self._rows[rank - 1]

    @property
    def depth_text(self) -> str:
        return self._depth.text()

    @property
    def nodes_text(self) -> str:
        return self._nodes.text()

    @property
    def time_text(self) -> str:
        return self._time.text()

    def show_update(self, update: AnalysisUpdate, fen: str, side_to_move: Color) -> None:
        for row in self._rows:
            line = update.lines.get(row.rank)
            if line is None:
                row.clear()
            else:
                row.set_line(line, fen, side_to_move)
        self._depth.setText(f"Depth {update.depth if update.depth is not None else '—'}")
        self._nodes.setText(f"Nodes {format_nodes(update.nodes)}")
        self._time.setText(f"Time {format_time(update.time_ms)}")

    def reset(self) -> None:
        for row in self._rows:
            row.clear()
        self._depth.setText("Depth —")
        self._nodes.setText("Nodes —")
        self._time.setText("Time —")
