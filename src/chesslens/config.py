"""Application settings and command-line parsing."""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from chesslens.engine.session import SessionOptions

ENGINE_ENV_VAR = "CHESSLENS_ENGINE"

BOARD_THEMES = ("Classic", "Blue", "Green")


@dataclass
class AppSettings:
    """All user-configurable settings."""

    # Engine
    engine_path: str = "stockfish"
    engine_args: list[str] = field(default_factory=list)
    multipv: int = 3
    threads: int = 1
    hash_mb: int | None = None

    # Board
    board_theme: str = "Classic"
    show_coordinates: bool = True
    show_legal_moves: bool = True
    promotion: str = "q"

    # Logging
    log_level: str = "WARNING"

    def session_options(self) -> SessionOptions:
        extra: dict[str, object] = {}
        if self.hash_mb is not None:
            extra["Hash"] = self.hash_mb
        return SessionOptions(multipv=self.multipv, threads=self.threads, extra=extra)


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chesslens",
        description="Board editor and live UCI engine analysis.",
    )
    parser.add_argument(
        "--engine",
        dest="engine_path",
        help=f"UCI engine executable (default: ${ENGINE_ENV_VAR} or 'stockfish')",
    )
    parser.add_argument(
        "--engine-arg",
        dest="engine_args",
        action="append",
        default=[],
        help="extra argument passed to the engine (repeatable)",
    )
    parser.add_argument("--multipv", type=_positive_int, default=3)
    parser.add_argument("--threads", type=_positive_int, default=1)
    parser.add_argument("--hash", dest="hash_mb", type=_positive_int)
    parser.add_argument("--theme", dest="board_theme", choices=BOARD_THEMES, default="Classic")
    parser.add_argument("--no-coordinates", dest="show_coordinates", action="store_false")
    parser.add_argument("--no-legal-moves", dest="show_legal_moves", action="store_false")
    parser.add_argument("--promotion", choices=("q", "r", "b", "n"), default="q")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )
    return parser


def load_settings(
    argv: Sequence[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppSettings:
    """Build :class:`AppSettings` from *argv* with environment fallbacks."""
    env: Mapping[str, str] = os.environ if environ is None else environ
    args = build_parser().parse_args(argv)
    engine_path = args.engine_path or env.get(ENGINE_ENV_VAR) or "stockfish"
    return AppSettings(
        engine_path=engine_path,
        engine_args=list(args.engine_args),
        multipv=args.multipv,
        threads=args.threads,
        hash_mb=args.hash_mb,
        board_theme=args.board_theme,
        show_coordinates=args.show_coordinates,
        show_legal_moves=args.show_legal_moves,
        promotion=args.promotion,
        log_level=args.log_level,
    )
