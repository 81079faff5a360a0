"""MainWindow — top-level window assembling all UI components."""

from __future__ import annotations

import logging

from PyQt6.QtGui import QAction, QCloseEvent, QKeySequence
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from chesslens.board.controller import InteractionController, PositionInfo
from chesslens.config import AppSettings
from chesslens.coordinator import AnalysisCoordinator
from chesslens.core.rules import ChessRules
from chesslens.core.types import Color, Mode
from chesslens.engine.channel import EngineChannel, ProcessChannel
from chesslens.engine.session import AnalysisUpdate, ProtocolSession
from chesslens.ui.board.board_view import BoardView
from chesslens.ui.panels.analysis_panel import AnalysisPanel
from chesslens.ui.panels.control_panel import ControlPanel
from chesslens.ui.panels.eval_bar import EvalBar
from chesslens.ui.panels.spare_pieces import SparePieces
from chesslens.ui.styles.theme import BoardTheme

_LOGGER = logging.getLogger(__name__)

_WARNING_TIMEOUT_MS = 5000


def describe_position(info: PositionInfo) -> str:
    """Status-bar text for the side to move and any game-ending state."""
    side = "White" if info.side_to_move == Color.WHITE else "Black"
    if info.checkmate:
        winner = "Black" if info.side_to_move == Color.WHITE else "White"
        return f"Checkmate, {winner} wins"
    if info.stalemate:
        return "Stalemate"
    if info.draw:
        return "Draw"
    if info.check:
        return f"{side} to move, check"
    return f"{side} to move"


class MainWindow(QMainWindow):
    """Main application window for Chesslens."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        channel: EngineChannel | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Chesslens")
        self.setMinimumSize(900, 640)
        self.resize(1100, 750)

        self._settings = settings if settings is not None else AppSettings()
        self._controller = InteractionController(
            ChessRules(), promotion=self._settings.promotion, parent=self
        )
        if channel is None:
            channel = ProcessChannel(
                self._settings.engine_path, self._settings.engine_args, parent=self
            )
        self._channel = channel
        self._session = ProtocolSession(channel, parent=self)
        self._coordinator = AnalysisCoordinator(self._controller, self._session, parent=self)

        self._setup_ui()
        self._setup_actions()
        self._connect_signals()
        self._apply_settings()
        self._on_position_changed(self._controller.position())

        self._engine_status.setText("Starting engine…")
        self._session.initialize(self._settings.session_options())

    # ── Accessors (used by tests) ────────────────────────────────────────

    @property
    def controller(self) -> InteractionController:
        return self._controller

    @property
    def session(self) -> ProtocolSession:
        return self._session

    @property
    def coordinator(self) -> AnalysisCoordinator:
        return self._coordinator

    @property
    def board_view(self) -> BoardView:
        return self._board_view

    @property
    def analysis_panel(self) -> AnalysisPanel:
        return self._analysis_panel

    @property
    def control_panel(self) -> ControlPanel:
        return self._control_panel

    @property
    def eval_bar(self) -> EvalBar:
        return self._eval_bar

    @property
    def spare_pieces(self) -> SparePieces:
        return self._spare_pieces

    def engine_status_text(self) -> str:
        return self._engine_status.text()

    def position_status_text(self) -> str:
        return self._position_status.text()

    def mode_status_text(self) -> str:
        return self._mode_status.text()

    # ── UI setup ─────────────────────────────────────────────────────────

    def _setup_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        root.setContentsMargins(6, 6, 6, 6)
        root.setSpacing(6)

        # Eval bar (left)
        self._eval_bar = EvalBar()
        root.addWidget(self._eval_bar)

        # Board (center)
        board_col = QVBoxLayout()
        board_col.setSpacing(6)
        self._board_view = BoardView(self._controller)
        board_col.addWidget(self._board_view, stretch=1)
        self._spare_pieces = SparePieces()
        self._spare_pieces.setVisible(False)
        board_col.addWidget(self._spare_pieces)
        root.addLayout(board_col, stretch=3)

        # Right panel
        right = QVBoxLayout()
        right.setSpacing(6)

        self._analysis_panel = AnalysisPanel(self._settings.multipv)
        right.addWidget(self._analysis_panel, stretch=1)

        self._control_panel = ControlPanel()
        right.addWidget(self._control_panel)

        right_widget = QWidget()
        right_widget.setLayout(right)
        right_widget.setFixedWidth(320)
        root.addWidget(right_widget)

        # Status bar
        self._status = QStatusBar()
        self.setStatusBar(self._status)
        self._mode_status = QLabel()
        self._position_status = QLabel()
        self._engine_status = QLabel()
        self._status.addPermanentWidget(self._mode_status)
        self._status.addPermanentWidget(self._position_status)
        self._status.addPermanentWidget(self._engine_status)
        self._on_mode_changed(self._controller.mode)

    def _setup_actions(self) -> None:
        bindings = (
            ("F", self._controller.flip),
            ("E", self._controller.toggle_mode),
            ("Space", self._coordinator.toggle_analysis),
            ("A", self._coordinator.toggle_analysis),
            ("Ctrl+R", self._coordinator.reset_board),
            ("Esc", self._on_escape),
        )
        for shortcut, slot in bindings:
            action = QAction(self)
            action.setShortcut(QKeySequence(shortcut))
            action.triggered.connect(slot)
            self.addAction(action)

    def _connect_signals(self) -> None:
        ctrl = self._controller
        ctrl.position_changed.connect(self._on_position_changed)
        ctrl.mode_changed.connect(self._on_mode_changed)

        coord = self._coordinator
        coord.analysis_state_changed.connect(self._on_analysis_state_changed)
        coord.analysis_updated.connect(self._on_analysis_updated)
        coord.warning.connect(self._show_warning)
        coord.status_changed.connect(self._engine_status.setText)

        panel = self._control_panel
        panel.flip_clicked.connect(ctrl.flip)
        panel.edit_toggled.connect(
            lambda editing: ctrl.set_mode(Mode.EDIT if editing else Mode.PLAY)
        )
        panel.reset_clicked.connect(coord.reset_board)
        panel.clear_clicked.connect(coord.clear_board)
        panel.analyse_clicked.connect(coord.toggle_analysis)
        panel.fen_submitted.connect(coord.load_position)
        panel.side_to_move_changed.connect(ctrl.set_edit_side_to_move)

    def _apply_settings(self) -> None:
        scene = self._board_view.board_scene
        scene.set_theme(BoardTheme.named(self._settings.board_theme))
        scene.set_show_coordinates(self._settings.show_coordinates)
        scene.set_show_legal_moves(self._settings.show_legal_moves)

    # ── Slots ────────────────────────────────────────────────────────────

    def _on_position_changed(self, info: PositionInfo) -> None:
        self._control_panel.set_fen(info.fen)
        self._control_panel.set_side_to_move(self._controller.edit_side_to_move)
        self._position_status.setText(describe_position(info))
        if not self._coordinator.analysis_enabled:
            self._eval_bar.reset()
        self._analysis_panel.reset()

    def _on_mode_changed(self, mode: Mode) -> None:
        editing = mode == Mode.EDIT
        self._mode_status.setText("Edit mode" if editing else "Play mode")
        self._control_panel.set_edit_mode(editing)
        self._control_panel.set_side_to_move(self._controller.edit_side_to_move)
        self._spare_pieces.setVisible(editing)

    def _on_analysis_state_changed(self, active: bool) -> None:
        self._control_panel.set_analysing(active)
        if not active:
            self._eval_bar.reset()
            self._analysis_panel.reset()

    def _on_analysis_updated(self, update: AnalysisUpdate) -> None:
        info = self._controller.position()
        self._analysis_panel.show_update(update, info.fen, info.side_to_move)
        best = update.best
        if best is not None:
            self._eval_bar.set_score(best.score, info.side_to_move)

    def _show_warning(self, message: str) -> None:
        _LOGGER.warning("%s", message)
        self._status.showMessage(message, _WARNING_TIMEOUT_MS)

    def _on_escape(self) -> None:
        self._coordinator.stop_analysis()
        self._controller.set_mode(Mode.PLAY)

    # ── Lifecycle ────────────────────────────────────────────────────────

    def closeEvent(self, event: QCloseEvent | None) -> None:
        self._session.shutdown()
        super().closeEvent(event)
