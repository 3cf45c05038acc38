"""Logging setup for the command line entry point."""

from __future__ import annotations

import logging
import sys

# Per-request INFO lines from the HTTP stack.
_CHATTY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Log to stderr so stdout stays free for JSON lines output.

    HTTP library loggers are held at WARNING unless ``level`` is DEBUG.
    """

    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    library_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
