"""Logging configuration for typebridge.

Every module obtains its logger through ``get_logger(__name__)``; the CLI
calls ``setup_logging`` once to attach a rich handler to the package logger.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "typebridge"

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace.

    Args:
        name: Module name, usually ``__name__``.

    Returns:
        Logger instance.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: int = logging.WARNING,
    console: Optional[Console] = None,
    show_path: bool = False,
) -> logging.Logger:
    """Configure the package logger with a rich handler.

    Calling this again only updates the level.

    Args:
        level: Logging level for the package logger.
        console: Console to log to, defaults to stderr.
        show_path: Show the source location of each record.

    Returns:
        The configured package logger.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=show_path,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
        logger.propagate = False
        _configured = True

    return logger
