# modsync Logging
# stdlib logging routed through a Rich console handler

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "modsync"


def setup_logging(level: str = "INFO", console: Optional[Console] = None) -> logging.Logger:
    """
    Configure the modsync logger.

    Replaces any previously attached handlers so repeated calls (tests, CLI
    re-entry) do not duplicate output. Each record is emitted under the
    handler lock, so lines from concurrent workers never interleave mid-line.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR).
        console: Optional Rich console to write to (defaults to stderr).

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package logger.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
