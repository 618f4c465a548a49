"""CLI command implementations for wpfleet.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .init import init
from .lock import lock_app, lock_release, lock_status
from .run import run

__all__ = [
    "init",
    "lock_app",
    "lock_release",
    "lock_status",
    "run",
]
