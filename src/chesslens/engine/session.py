"""UCI analysis session: handshake, infinite analysis and line aggregation.

The wire protocol carries no position identifier, so a line produced for a
superseded position can still arrive after a new request.  The session
limits the damage by clearing the rank table synchronously whenever a new
analysis is requested; a late line that reuses a rank of the new analysis
is indistinguishable from a fresh one until the engine overwrites it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum, auto

from PyQt6.QtCore import QObject, pyqtSignal

from chesslens.engine import protocol
from chesslens.engine.channel import EngineChannel
from chesslens.engine.protocol import InfoRecord, Score

_LOGGER = logging.getLogger(__name__)


class SessionState(IntEnum):
    """Lifecycle states of a :class:`ProtocolSession`."""

    UNINITIALIZED = auto()
    INITIALIZING = auto()  # "uci" sent
    CONFIGURING = auto()  # options sent, waiting for "readyok"
    IDLE = auto()
    ANALYZING = auto()
    FAILED = auto()


@dataclass(slots=True, frozen=True)
class SessionOptions:
    """Engine options applied during the handshake."""

    multipv: int = 3
    threads: int = 1
    extra: Mapping[str, object] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class AnalysisLine:
    """One ranked candidate line."""

    rank: int
    score: Score
    pv: tuple[str, ...]
    depth: int | None = None
    nodes: int | None = None
    time_ms: int | None = None

    @property
    def first_move(self) -> str:
        return self.pv[0]


@dataclass(slots=True, frozen=True)
class AnalysisUpdate:
    """Snapshot of every current line plus telemetry of the newest one."""

    lines: dict[int, AnalysisLine]
    depth: int | None
    nodes: int | None
    time_ms: int | None

    @property
    def best(self) -> AnalysisLine | None:
        return self.lines.get(1)


class ProtocolSession(QObject):
    """Owns an :class:`EngineChannel` and speaks UCI over it.

    Signals:
        engine_ready(): Handshake and configuration finished.
        analysis_updated(AnalysisUpdate): A ranked line was added or replaced.
        engine_error(str): The channel failed; the session is terminal.
    """

    engine_ready = pyqtSignal()
    analysis_updated = pyqtSignal(object)
    engine_error = pyqtSignal(str)

    def __init__(self, channel: EngineChannel, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._channel = channel
        self._state = SessionState.UNINITIALIZED
        self._options = SessionOptions()
        self._lines: dict[int, AnalysisLine] = {}

        self._channel.line_received.connect(self._on_line)
        self._channel.failed.connect(self._on_channel_failed)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        return self._state

    def ready(self) -> bool:
        return self._state in (SessionState.IDLE, SessionState.ANALYZING)

    def analyzing(self) -> bool:
        return self._state == SessionState.ANALYZING

    def lines(self) -> dict[int, AnalysisLine]:
        return dict(self._lines)

    # ── Commands ─────────────────────────────────────────────────────────

    def initialize(self, options: SessionOptions | None = None) -> None:
        """Start the engine and begin the handshake.

        Readiness is signalled later through :attr:`engine_ready`.
        """
        if self._state not in (SessionState.UNINITIALIZED, SessionState.FAILED):
            _LOGGER.debug("initialize() ignored in state %s", self._state.name)
            return
        if options is not None:
            self._options = options
        self._lines.clear()
        self._state = SessionState.INITIALIZING
        self._channel.start()
        # start() may report a spawn failure synchronously
        if self._state == SessionState.INITIALIZING:
            self._channel.send(protocol.UCI)

    def request_analysis(self, fen: str) -> None:
        """Analyse *fen* until stopped, replacing any running analysis."""
        if not self.ready():
            _LOGGER.debug("Analysis request ignored, engine not ready")
            return
        if self._state == SessionState.ANALYZING:
            self._channel.send(protocol.STOP)
        self._lines.clear()
        self._channel.send(protocol.position_fen(fen))
        self._channel.send(protocol.GO_INFINITE)
        self._state = SessionState.ANALYZING

    def stop_analysis(self) -> None:
        if self._state != SessionState.ANALYZING:
            return
        self._channel.send(protocol.STOP)
        self._state = SessionState.IDLE

    def shutdown(self) -> None:
        """Stop analysing and close the channel."""
        self.stop_analysis()
        self._channel.close()
        if self._state != SessionState.FAILED:
            self._state = SessionState.UNINITIALIZED

    # ── Channel slots ────────────────────────────────────────────────────

    def _on_line(self, line: str) -> None:
        text = line.strip()
        if text == protocol.UCI_OK:
            self._on_uciok()
        elif text == protocol.READY_OK:
            self._on_readyok()
        elif text.startswith(protocol.INFO + " "):
            record = protocol.parse_info_line(text)
            if record is None:
                _LOGGER.debug("Dropped incomplete info line: %s", text)
                return
            self._store(record)
        # "bestmove" and anything else are not consumed.

    def _on_uciok(self) -> None:
        if self._state != SessionState.INITIALIZING:
            return
        self._channel.send(protocol.setoption("MultiPV", self._options.multipv))
        self._channel.send(protocol.setoption("Threads", self._options.threads))
        for name, value in self._options.extra.items():
            self._channel.send(protocol.setoption(name, value))
        self._channel.send(protocol.IS_READY)
        self._state = SessionState.CONFIGURING

    def _on_readyok(self) -> None:
        if self._state != SessionState.CONFIGURING:
            return
        self._state = SessionState.IDLE
        _LOGGER.info("Engine ready")
        self.engine_ready.emit()

    def _store(self, record: InfoRecord) -> None:
        if not self.ready() or record.rank is None or record.score is None:
            return
        self._lines[record.rank] = AnalysisLine(
            rank=record.rank,
            score=record.score,
            pv=record.pv,
            depth=record.depth,
            nodes=record.nodes,
            time_ms=record.time_ms,
        )
        self.analysis_updated.emit(
            AnalysisUpdate(
                lines=dict(self._lines),
                depth=record.depth,
                nodes=record.nodes,
                time_ms=record.time_ms,
            )
        )

    def _on_channel_failed(self, message: str) -> None:
        if self._state == SessionState.FAILED:
            return
        self._state = SessionState.FAILED
        self._lines.clear()
        self.engine_error.emit(message)
