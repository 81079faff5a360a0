"""Message-passing transport to an external UCI engine process."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PyQt6.QtCore import QObject, QProcess, pyqtSignal

_LOGGER = logging.getLogger(__name__)


class LineBuffer:
    """Frames a byte stream into text lines (``\\n`` or ``\\r\\n``)."""

    __slots__ = ("_pending",)

    def __init__(self) -> None:
        self._pending = b""

    def feed(self, data: bytes) -> list[str]:
        """Append *data* and return every line it completes."""
        self._pending += data
        *complete, self._pending = self._pending.split(b"\n")
        return [
            raw.decode("utf-8", errors="replace").rstrip("\r") for raw in complete
        ]

    def clear(self) -> None:
        self._pending = b""


class EngineChannel(QObject):
    """Base transport: fire-and-forget commands, unsolicited response lines.

    Signals:
        line_received(str): One complete line of engine output.
        failed(str): The transport became unusable (emitted once per start).
    """

    line_received = pyqtSignal(str)
    failed = pyqtSignal(str)

    def start(self) -> None:
        raise NotImplementedError

    def send(self, command: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError


class ProcessChannel(EngineChannel):
    """Runs the engine as a child process via :class:`QProcess`.

    Output is delivered by the Qt event loop, so nothing here blocks except
    the bounded wait in :meth:`close`.
    """

    _QUIT_GRACE_MS = 1000

    def __init__(
        self,
        program: str,
        arguments: Sequence[str] = (),
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._program = program
        self._arguments = list(arguments)
        self._buffer = LineBuffer()
        self._closing = False
        self._failure_reported = False

        self._process = QProcess(self)
        self._process.readyReadStandardOutput.connect(self._on_ready_read)
        self._process.errorOccurred.connect(self._on_error)
        self._process.finished.connect(self._on_finished)

    @property
    def program(self) -> str:
        return self._program

    def is_running(self) -> bool:
        return self._process.state() != QProcess.ProcessState.NotRunning

    def start(self) -> None:
        if self.is_running():
            return
        self._closing = False
        self._failure_reported = False
        self._buffer.clear()
        _LOGGER.info("Starting engine: %s %s", self._program, " ".join(self._arguments))
        self._process.start(self._program, self._arguments)

    def send(self, command: str) -> None:
        if not self.is_running():
            _LOGGER.warning("Dropping engine command, process not running: %s", command)
            return
        _LOGGER.debug("engine << %s", command)
        self._process.write((command + "\n").encode("utf-8"))

    def close(self) -> None:
        if not self.is_running():
            return
        self._closing = True
        self._process.write(b"quit\n")
        if not self._process.waitForFinished(self._QUIT_GRACE_MS):
            _LOGGER.warning("Engine ignored quit, killing process")
            self._process.kill()
            self._process.waitForFinished(self._QUIT_GRACE_MS)

    # ── QProcess slots ───────────────────────────────────────────────────

    def _on_ready_read(self) -> None:
        data = bytes(self._process.readAllStandardOutput().data())
        for line in self._buffer.feed(data):
            if not line:
                continue
            _LOGGER.debug("engine >> %s", line)
            self.line_received.emit(line)

    def _on_error(self, error: QProcess.ProcessError) -> None:
        if self._closing:
            return
        self._report_failure(f"{error.name}: {self._process.errorString()}")

    def _on_finished(self, exit_code: int, _status: QProcess.ExitStatus) -> None:
        if self._closing:
            return
        self._report_failure(f"Engine exited unexpectedly (code {exit_code})")

    def _report_failure(self, message: str) -> None:
        if self._failure_reported:
            return
        self._failure_reported = True
        _LOGGER.error("Engine transport failed: %s", message)
        self.failed.emit(message)
