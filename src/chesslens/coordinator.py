"""Glue between the board controller and the engine session."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal

from chesslens.board.controller import InteractionController, PositionInfo
from chesslens.core.types import Mode
from chesslens.engine.session import AnalysisUpdate, ProtocolSession

_LOGGER = logging.getLogger(__name__)


class AnalysisCoordinator(QObject):
    """Keeps analysis in step with the position shown on the board.

    Signals:
        analysis_state_changed(bool): Analysis switched on/off by the user.
        analysis_updated(AnalysisUpdate): Forwarded while analysis is on.
        warning(str): Non-fatal problem worth showing to the user.
        status_changed(str): Engine status text ("Ready", "Analysing…", …).
    """

    analysis_state_changed = pyqtSignal(bool)
    analysis_updated = pyqtSignal(object)
    warning = pyqtSignal(str)
    status_changed = pyqtSignal(str)

    def __init__(
        self,
        controller: InteractionController,
        session: ProtocolSession,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._session = session
        self._enabled = False

        controller.position_changed.connect(self._on_position_changed)
        controller.mode_changed.connect(self._on_mode_changed)
        session.analysis_updated.connect(self._on_analysis_updated)
        session.engine_ready.connect(self._on_engine_ready)
        session.engine_error.connect(self._on_engine_error)

    @property
    def analysis_enabled(self) -> bool:
        return self._enabled

    # ── Analysis toggle ──────────────────────────────────────────────────

    def toggle_analysis(self) -> None:
        if self._enabled:
            self.stop_analysis()
        else:
            self.start_analysis()

    def start_analysis(self) -> bool:
        """Begin analysing the current position. Returns False if refused."""
        if self._controller.mode == Mode.EDIT:
            self._controller.set_mode(Mode.PLAY)

        problems = self._controller.validate_structure()
        if problems:
            # Analysis still starts; the engine copes or reports nonsense.
            self.warning.emit(problems[0])

        if not self._session.ready():
            self.warning.emit("The engine is not ready yet, please wait…")
            return False

        self._set_enabled(True)
        self._session.request_analysis(self._controller.position().fen)
        return True

    def stop_analysis(self) -> None:
        was_enabled = self._enabled
        self._set_enabled(False)
        self._session.stop_analysis()
        if was_enabled:
            self.status_changed.emit("Ready")

    def _set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if enabled:
            self.status_changed.emit("Analysing…")
        self.analysis_state_changed.emit(enabled)

    # ── Board actions that also affect analysis ──────────────────────────

    def reset_board(self) -> None:
        self.stop_analysis()
        self._controller.reset()

    def clear_board(self) -> None:
        self.stop_analysis()
        self._controller.clear()

    def load_position(self, fen: str) -> bool:
        ok = self._controller.load_position(fen)
        if not ok:
            self.warning.emit("Invalid FEN, check the format.")
        return ok

    # ── Slots ────────────────────────────────────────────────────────────

    def _on_position_changed(self, info: PositionInfo) -> None:
        if self._enabled:
            self._session.request_analysis(info.fen)

    def _on_mode_changed(self, mode: Mode) -> None:
        if mode == Mode.EDIT and self._enabled:
            self.stop_analysis()

    def _on_analysis_updated(self, update: AnalysisUpdate) -> None:
        if not self._enabled:
            return
        self.analysis_updated.emit(update)

    def _on_engine_ready(self) -> None:
        self.status_changed.emit("Ready")

    def _on_engine_error(self, message: str) -> None:
        _LOGGER.error("Engine error: %s", message)
        self._set_enabled(False)
        self.status_changed.emit("Unavailable")
        self.warning.emit(f"Engine error: {message}")
