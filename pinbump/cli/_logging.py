"""Log handler setup shared by CLI commands."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str) -> None:
    """Route ``pinbump.*`` loggers to a RichHandler on stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("pinbump")
    logger.handlers[:] = [handler]
    logger.setLevel(level.upper())
