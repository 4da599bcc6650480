"""Console logging for the statescope CLI.

Library modules only create loggers. The CLI attaches a single Rich handler
to the ``statescope`` logger, writing to stderr so JSON on stdout stays
machine-readable.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_PACKAGE_LOGGER = "statescope"


def verbosity_level(verbosity: int) -> int:
    """Map a ``-v`` count to a logging level."""
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """Attach a stderr ``RichHandler`` to the package logger.

    Calling this again replaces the previous handler, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        verbosity: Number of ``-v`` flags. 0 = WARNING, 1 = INFO, 2+ = DEBUG.

    Returns:
        The configured package logger.
    """
    level = verbosity_level(verbosity)
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbosity >= 2,
        show_path=verbosity >= 2,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
