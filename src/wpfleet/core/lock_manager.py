"""Lock manager for fleet operation concurrency control.

Provides directory-based locking to prevent concurrent fleet operations
from touching the same resource. A lock is a directory created with
``mkdir`` (atomic on POSIX: exactly one caller succeeds), holding a
``pid`` file with the owner's process ID. Locks whose owner is no longer
running are reclaimed automatically.

Ownership is advisory. ``release_lock`` does not check the caller owns
the lock; callers only release locks they acquired.

Known limits:

- PID reuse. If the dead owner's PID is taken by an unrelated process the
  lock looks live, and waiters time out instead of reclaiming it.
- Reclaim race. A waiter that read a stale owner, then lost the CPU, can
  rename away a lock another waiter has just created in its place. The
  reclaim logs a warning when the directory it removed belonged to
  someone other than the stale owner.
"""

import contextlib
import logging
import os
import shutil
import time
import uuid
from collections.abc import Iterator
from pathlib import Path

from ..constants import DEFAULT_LOCK_TIMEOUT, DEFAULT_POLL_INTERVAL, PID_FILE
from ..models import Lock, LockStatus

logger = logging.getLogger(__name__)


class LockError(Exception):
    """Error acquiring or managing lock."""


class LockTimeoutError(LockError):
    """Lock could not be acquired within the timeout."""

    def __init__(self, path: Path, timeout: float, owner_pid: int | None = None) -> None:
        self.path = path
        self.timeout = timeout
        self.owner_pid = owner_pid
        holder = f" (held by PID {owner_pid})" if owner_pid is not None else ""
        super().__init__(f"Could not acquire lock {path} after {timeout:g}s{holder}")


def is_pid_running(pid: int) -> bool:
    """Check if a process with given PID is running."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)  # Signal 0 doesn't kill, just checks
    except PermissionError:
        # Exists, but owned by another user
        return True
    except OSError:
        return False
    return True


def read_lock_owner(lock_path: Path) -> int | None:
    """Read the owner PID recorded in a lock directory.

    Returns:
        PID, or None if the pid file is missing, empty or corrupted
    """
    try:
        return int((lock_path / PID_FILE).read_text().strip())
    except (OSError, ValueError):
        return None


def get_lock_status(lock_path: Path) -> LockStatus:
    """Inspect a lock path without modifying it."""
    lock_path = Path(lock_path)
    if not lock_path.exists():
        return LockStatus(path=lock_path)

    owner = read_lock_owner(lock_path)
    return LockStatus(
        path=lock_path,
        held=True,
        owner_pid=owner,
        owner_alive=owner is not None and is_pid_running(owner),
    )


def is_stale_lock(lock_path: Path) -> bool:
    """Check if lock is held by a process that no longer exists."""
    return get_lock_status(lock_path).stale


def _try_atomic_create(lock_path: Path) -> bool:
    """Attempt atomic lock directory creation.

    Returns:
        True if lock was created, False if it already exists

    Raises:
        LockError: If the directory cannot be created for another reason
    """
    try:
        lock_path.mkdir()
    except FileExistsError:
        return False
    except OSError as e:
        raise LockError(f"Cannot create lock {lock_path}: {e}") from e

    try:
        (lock_path / PID_FILE).write_text(f"{os.getpid()}\n")
    except OSError as e:
        shutil.rmtree(lock_path, ignore_errors=True)
        raise LockError(f"Cannot write owner of lock {lock_path}: {e}") from e
    return True


def _reclaim_stale(lock_path: Path, stale_pid: int | None = None) -> None:
    """Remove a stale lock.

    The directory is renamed to a unique tombstone first so that only one
    waiter can claim it; the loser sees it gone and retries creation.

    Args:
        lock_path: Lock directory to remove
        stale_pid: Dead owner observed before the reclaim, if known
    """
    tombstone = lock_path.with_name(f"{lock_path.name}.stale-{uuid.uuid4().hex[:8]}")
    try:
        os.rename(lock_path, tombstone)
    except FileNotFoundError:
        # Another waiter got there first
        return
    except OSError as e:
        raise LockError(f"Cannot remove stale lock {lock_path}: {e}") from e

    if stale_pid is not None:
        removed_owner = read_lock_owner(tombstone)
        if removed_owner != stale_pid:
            logger.warning(
                "Lock %s was re-created by PID %s before stale PID %d was reclaimed",
                lock_path,
                removed_owner,
                stale_pid,
            )
    shutil.rmtree(tombstone, ignore_errors=True)


def acquire_lock(
    lock_path: Path,
    timeout: float = DEFAULT_LOCK_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Lock:
    """Acquire an exclusive lock, waiting up to ``timeout`` seconds.

    Stale locks (owner PID no longer running) are removed and retried
    immediately without consuming the timeout. At least one attempt is
    always made, so ``timeout=0`` means try once.

    Args:
        lock_path: Lock directory to create
        timeout: Seconds to wait for a live owner to release
        poll_interval: Seconds between attempts

    Returns:
        Lock object if acquired

    Raises:
        LockTimeoutError: If the lock is still held after the timeout
        LockError: If the lock cannot be created or reclaimed
    """
    lock_path = Path(lock_path)
    try:
        lock_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise LockError(f"Cannot create lock directory {lock_path.parent}: {e}") from e

    waited = 0.0
    while True:
        if _try_atomic_create(lock_path):
            lock = Lock(path=lock_path, owner_pid=os.getpid())
            logger.debug("Acquired lock %s (PID %d)", lock_path, lock.owner_pid)
            return lock

        owner = read_lock_owner(lock_path)
        if owner is not None and not is_pid_running(owner):
            logger.warning("Removing stale lock %s (PID %d no longer exists)", lock_path, owner)
            _reclaim_stale(lock_path, owner)
            continue

        if waited >= timeout:
            raise LockTimeoutError(lock_path, timeout, owner)

        logger.debug("Lock %s busy (PID %s), waiting %gs", lock_path, owner, poll_interval)
        time.sleep(poll_interval)
        waited += poll_interval


def release_lock(lock_path: Path) -> None:
    """Release lock unconditionally. Missing locks are ignored.

    Args:
        lock_path: Lock directory to remove
    """
    lock_path = Path(lock_path)
    with contextlib.suppress(OSError):
        if lock_path.is_dir() and not lock_path.is_symlink():
            shutil.rmtree(lock_path)
        else:
            lock_path.unlink(missing_ok=True)
        logger.debug("Released lock %s", lock_path)


@contextlib.contextmanager
def held_lock(
    lock_path: Path,
    timeout: float = DEFAULT_LOCK_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Iterator[Lock]:
    """Hold a lock for the duration of a ``with`` block."""
    lock = acquire_lock(lock_path, timeout=timeout, poll_interval=poll_interval)
    try:
        yield lock
    finally:
        release_lock(lock.path)
