"""Application entry point."""

from __future__ import annotations

import logging
import sys

from chesslens.config import load_settings


def main(argv: list[str] | None = None) -> None:
    """Launch the Chesslens application."""
    from chesslens.ui.bootstrap import run_application

    settings = load_settings(argv)
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(run_application(settings))


if __name__ == "__main__":
    main()
