"""Pydantic data models for wpfleet.

This package defines the data structures used by the lifecycle manager:
- Lock ownership and inspection (Lock, LockState, LockStatus)
- Deferred teardown actions (CleanupItem, CleanupKind)
"""

from .cleanup import CleanupItem, CleanupKind
from .lock import Lock, LockState, LockStatus

__all__ = [
    "CleanupItem",
    "CleanupKind",
    "Lock",
    "LockState",
    "LockStatus",
]
