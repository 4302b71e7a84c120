"""Logging configuration for the rupeetrack package.

- configure_logging(level): attach a single rich handler to the package
  logger. Called once by the CLI at startup.
- get_logger(name): get a module logger. Library modules never attach
  handlers of their own.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "rupeetrack"

_configured = False

# Keep the library silent until the CLI configures it
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def parse_level(level: int | str | None) -> int:
    """Turn a level name or number into a logging level. Defaults to WARNING."""
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = level.strip().upper()
        if value.isdigit():
            return int(value)
        numeric = logging.getLevelName(value)
        if isinstance(numeric, int):
            return numeric
    return logging.WARNING


def configure_logging(level: int | str | None = None, console: Console | None = None) -> None:
    """Configure the package logger once.

    Args:
        level: Level name or number. None means WARNING.
        console: Console to log to. Defaults to a stderr console.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(parse_level(level))
    if _configured:
        return

    for handler in list(logger.handlers):
        if isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)

    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
