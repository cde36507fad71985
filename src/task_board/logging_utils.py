"""Logging utilities with custom trace level."""

import logging
from typing import Any

# Define custom TRACE level (lower than DEBUG)
TRACE_LEVEL = 5

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
VERBOSE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def add_trace_level() -> None:
    """Add a custom TRACE logging level."""
    logging.addLevelName(TRACE_LEVEL, "TRACE")

    def trace(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
        """Log a message with severity 'TRACE'."""
        if self.isEnabledFor(TRACE_LEVEL):
            self._log(TRACE_LEVEL, message, args, **kwargs)

    # Monkey patch the Logger class
    logging.Logger.trace = trace  # type: ignore[attr-defined]


def get_logger(name: str) -> logging.Logger:
    """Get a logger with trace support."""
    # Ensure trace level is added
    if not hasattr(logging.Logger, "trace"):
        add_trace_level()

    return logging.getLogger(name)


def configure_logging(verbose: bool = False, trace: bool = False) -> int:
    """
    Configure root logging for the command-line front end.

    Args:
        verbose: Log DEBUG and above with logger names
        trace: Log TRACE and above with logger names (overrides verbose)

    Returns:
        The root log level that was applied
    """
    add_trace_level()

    if trace:
        level = TRACE_LEVEL
        fmt = VERBOSE_LOG_FORMAT
    elif verbose:
        level = logging.DEBUG
        fmt = VERBOSE_LOG_FORMAT
    else:
        # Normal mode only reports problems; command output goes to stdout
        level = logging.WARNING
        fmt = LOG_FORMAT

    logging.basicConfig(level=level, format=fmt, force=True)
    # aiosqlite logs every statement at DEBUG
    logging.getLogger("aiosqlite").setLevel(logging.INFO if trace else logging.WARNING)
    return level
