"""Logging setup for the CLI and the interactive display."""

import logging
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.logging import RichHandler
from textual.logging import TextualHandler


def setup_logging(level: int | str = logging.WARNING, log_file: str | None = None, tui: bool = False) -> None:
    """
    Configure root logging.

    Args:
        level: Minimum severity, as a number or a level name.
        log_file: Optional path for a rotating plain-text log.
        tui: Route records through Textual instead of writing to the
            terminal the app is drawing on.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    handlers: list[logging.Handler] = []
    if tui:
        handlers.append(TextualHandler())
    else:
        handlers.append(RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False))

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        handlers=handlers,
        format="%(message)s",
        force=True,
    )
