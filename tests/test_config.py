"""Tests for settings loading."""

from __future__ import annotations

import pytest

from chesslens.config import ENGINE_ENV_VAR, AppSettings, load_settings


class TestLoadSettings:
    def test_defaults(self) -> None:
        settings = load_settings([], environ={})
        assert settings == AppSettings()
        assert settings.engine_path == "stockfish"

    def test_environment_fallback(self) -> None:
        settings = load_settings([], environ={ENGINE_ENV_VAR: "/opt/sf"})
        assert settings.engine_path == "/opt/sf"

    def test_flag_beats_environment(self) -> None:
        settings = load_settings(
            ["--engine", "/usr/bin/lc0"], environ={ENGINE_ENV_VAR: "/opt/sf"}
        )
        assert settings.engine_path == "/usr/bin/lc0"

    def test_all_options(self) -> None:
        settings = load_settings(
            [
                "--engine-arg=--verbose",
                "--engine-arg=-x",
                "--multipv",
                "5",
                "--threads",
                "4",
                "--hash",
                "128",
                "--theme",
                "Blue",
                "--no-coordinates",
                "--no-legal-moves",
                "--promotion",
                "n",
                "--log-level",
                "DEBUG",
            ],
            environ={},
        )
        assert settings.engine_args == ["--verbose", "-x"]
        assert settings.multipv == 5
        assert settings.threads == 4
        assert settings.hash_mb == 128
        assert settings.board_theme == "Blue"
        assert settings.show_coordinates is False
        assert settings.show_legal_moves is False
        assert settings.promotion == "n"
        assert settings.log_level == "DEBUG"

    def test_non_positive_multipv_is_rejected(self) -> None:
        with pytest.raises(SystemExit):
            load_settings(["--multipv", "0"], environ={})


class TestSessionOptions:
    def test_without_hash(self) -> None:
        options = AppSettings(multipv=2, threads=3).session_options()
        assert options.multipv == 2
        assert options.threads == 3
        assert dict(options.extra) == {}

    def test_hash_goes_to_extra_options(self) -> None:
        options = AppSettings(hash_mb=256).session_options()
        assert dict(options.extra) == {"Hash": 256}
