"""Logging setup for the grove CLI.

Library modules only create loggers under the ``grove`` namespace; handlers
are installed here, once, by the command line entry point.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LEVEL = logging.WARNING


def configure_logging(level: int = DEFAULT_LEVEL) -> logging.Logger:
    """Send grove's log records to stderr through rich and return the package logger."""
    logger = logging.getLogger(__package__)
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
