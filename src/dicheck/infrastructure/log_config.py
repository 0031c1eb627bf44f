"""Logging configuration for the command line and plugin."""

from __future__ import annotations

import logging
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "dicheck"
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(
    level: int = logging.WARNING,
    *,
    rich_output: bool = True,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach one handler to the package logger.

    Library modules only call logging.getLogger(__name__); handlers are the
    application's choice. Calling this again replaces the handler.

    Args:
        level: Log level for the package logger
        rich_output: Render with rich (False = plain formatter)
        stream: Destination (default: stderr)

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_dicheck_handler", False):
            logger.removeHandler(existing)

    handler: logging.Handler
    if rich_output:
        console = Console(file=stream, stderr=stream is None)
        handler = RichHandler(console=console, show_path=False, rich_tracebacks=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    else:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    handler._dicheck_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger
