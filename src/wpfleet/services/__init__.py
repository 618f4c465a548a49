"""External service integrations for wpfleet.

This package provides interfaces to the outside world:
- process: running external commands (docker, mysql, wp-cli, ...)
"""

from .process import CommandError, CommandResult, run_command, split_command

__all__ = [
    "CommandError",
    "CommandResult",
    "run_command",
    "split_command",
]
