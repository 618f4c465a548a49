"""Core lifecycle logic for wpfleet.

- lock_manager: directory-based cross-process locks with stale detection
- cleanup: LIFO cleanup registry drained on exit and shutdown signals
"""

from .cleanup import CleanupHook, CleanupRegistry, exit_code_for
from .lock_manager import (
    LockError,
    LockTimeoutError,
    acquire_lock,
    get_lock_status,
    held_lock,
    is_pid_running,
    is_stale_lock,
    read_lock_owner,
    release_lock,
)

__all__ = [
    "CleanupHook",
    "CleanupRegistry",
    "LockError",
    "LockTimeoutError",
    "acquire_lock",
    "exit_code_for",
    "get_lock_status",
    "held_lock",
    "is_pid_running",
    "is_stale_lock",
    "read_lock_owner",
    "release_lock",
]
