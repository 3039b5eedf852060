"""Logging configuration for the ToDone command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler


PACKAGE_LOGGER = "todone"


def setup_logging(level: int = logging.WARNING, console: Console | None = None) -> logging.Logger:
    """Attach a rich console handler to the package logger.

    Safe to call more than once: the handler is installed only the first
    time and later calls just adjust the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    logging.captureWarnings(True)
    return logger
