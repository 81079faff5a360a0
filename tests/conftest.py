"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"

from chesslens.engine.channel import EngineChannel  # noqa: E402


class FakeChannel(EngineChannel):
    """In-memory engine channel: records commands, replays engine output."""

    def __init__(self) -> None:
        super().__init__()
        self.sent: list[str] = []
        self.started = 0
        self.closed = False

    def start(self) -> None:
        self.started += 1

    def send(self, command: str) -> None:
        self.sent.append(command)

    def close(self) -> None:
        self.closed = True

    def feed(self, *lines: str) -> None:
        for line in lines:
            self.line_received.emit(line)

    def fail(self, message: str = "engine crashed") -> None:
        self.failed.emit(message)

    def take(self) -> list[str]:
        sent, self.sent = self.sent, []
        return sent


def _is_ui_test(request: pytest.FixtureRequest) -> bool:
    return "ui" in Path(str(request.node.fspath)).parts


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QApplication for UI tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def fake_channel(qapp: object) -> FakeChannel:
    return FakeChannel()


@pytest.fixture(autouse=True)
def _cleanup_qt_widgets(
    request: pytest.FixtureRequest,
) -> Iterator[None]:
    """Ensure UI tests do not leak top-level widgets into the next test."""
    if not _is_ui_test(request):
        yield
        return

    app = request.getfixturevalue("qapp")
    yield

    for widget in list(app.topLevelWidgets()):
        widget.close()
    app.processEvents()
