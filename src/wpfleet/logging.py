"""Logging configuration for wpfleet CLI.

Only the ``wpfleet`` logger tree is configured. Fleet scripts that import
wpfleet as a library keep control of the root logger, and lock and
cleanup messages still reach any handlers they install there.
"""

import logging
from enum import IntEnum
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "wpfleet"


class LogLevel(IntEnum):
    """Log level enumeration.

    QUIET still shows stale-lock reclaims and late cleanup registrations,
    which are logged as warnings.
    """

    QUIET = logging.WARNING
    NORMAL = logging.INFO
    VERBOSE = logging.DEBUG


def log_level_for(verbosity: int = 0, quiet: bool = False, debug: bool = False) -> LogLevel:
    """Pick a level from CLI flags. Precedence: quiet > debug > verbosity."""
    if quiet:
        return LogLevel.QUIET
    if debug or verbosity >= 1:
        return LogLevel.VERBOSE
    return LogLevel.NORMAL


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    stream: TextIO | None = None,
    debug: bool = False,
) -> Console:
    """Configure the wpfleet logger from CLI options.

    Args:
        verbosity: Number of -v flags (1 shows lock polling and each
            cleanup action, 2 adds timestamps and source paths)
        quiet: Only warnings and errors
        no_color: Disable colored output
        stream: Output stream for logs (default: stderr)
        debug: Same as -vv

    Returns:
        Configured Rich console for output
    """
    console = Console(
        file=stream,
        stderr=stream is None,
        force_terminal=False if no_color else None,
        no_color=no_color,
    )

    detailed = debug or verbosity >= 2
    handler = RichHandler(
        console=console,
        show_time=detailed,
        show_path=detailed,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    # Repeated CLI invocations in one process must not stack handlers
    for old in logger.handlers[:]:
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(log_level_for(verbosity, quiet, debug))

    return console
