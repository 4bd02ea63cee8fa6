"""Logging configuration for doxysync.

Modules log through ``logging.getLogger(__name__)``; everything sits below the
``doxysync`` logger configured here. Recoverable problems are reported as
warnings and tallied so the CLI can summarise them after a run.
"""

from __future__ import annotations

import logging
import sys
import typing as typ

ROOT_LOGGER = "doxysync"

VERBOSITY_SILENT = 0  # Only errors
VERBOSITY_WARNINGS = 1  # Dangling links, missing assets, unknown markup
VERBOSITY_PROGRESS = 2  # Per-document progress
VERBOSITY_DEBUG = 3  # Full debug output

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_WARNINGS: logging.WARNING,
    VERBOSITY_PROGRESS: logging.INFO,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class WarningTally(logging.Handler):
    """Count warning records emitted during a run."""

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.count = 0

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno == logging.WARNING:
            self.count += 1


def get_logger() -> logging.Logger:
    """Return the package root logger."""
    return logging.getLogger(ROOT_LOGGER)


def setup_logging(verbosity: int, stream: typ.TextIO | None = None) -> WarningTally:
    """Configure the doxysync logger and return its warning tally.

    Can be called multiple times; previous handlers are replaced.

    Parameters
    ----------
    verbosity : int
        0 = errors only, 1 = warnings, 2 = progress, 3 = debug. Values above
        3 are treated as debug.
    stream : TextIO, optional
        Output stream; defaults to ``sys.stderr`` (useful for tests).

    Returns
    -------
    WarningTally
        Handler counting the warnings logged after this call.
    """
    logger = get_logger()
    logger.handlers.clear()
    level = _LEVELS.get(min(max(verbosity, 0), VERBOSITY_DEBUG), logging.WARNING)
    logger.setLevel(min(level, logging.WARNING))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)

    tally = WarningTally()
    logger.addHandler(tally)
    logger.propagate = False
    return tally


def reset_logging() -> None:
    """Reset the logger to a clean state between tests."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


__all__ = [
    "ROOT_LOGGER",
    "VERBOSITY_DEBUG",
    "VERBOSITY_PROGRESS",
    "VERBOSITY_SILENT",
    "VERBOSITY_WARNINGS",
    "WarningTally",
    "get_logger",
    "reset_logging",
    "setup_logging",
]
