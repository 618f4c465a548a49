"""Lock models for cross-process mutual exclusion.

A lock is a directory whose existence means "held". The directory
contains a single ``pid`` file naming the owning process.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class LockState(str, Enum):
    """What a lock path looks like from the outside."""

    FREE = "free"
    HELD = "held"
    STALE = "stale"


class Lock(BaseModel):
    """Lock held by the current process.

    Attributes:
        path: Lock directory acting as the mutex identity.
        owner_pid: Process ID recorded at acquisition time.
        acquired: Whether the lock was successfully acquired.
        acquired_at: When the lock was acquired (not persisted).
    """

    path: Path = Field(description="Lock directory")
    owner_pid: int = Field(description="Process ID holding the lock")
    acquired: bool = True
    acquired_at: datetime = Field(default_factory=datetime.now)


class LockStatus(BaseModel):
    """Point-in-time view of a lock path."""

    path: Path
    held: bool = False
    owner_pid: int | None = None
    owner_alive: bool = False

    @property
    def stale(self) -> bool:
        """Held by a known owner that is no longer running."""
        return self.held and self.owner_pid is not None and not self.owner_alive

    @property
    def state(self) -> LockState:
        if not self.held:
            return LockState.FREE
        return LockState.STALE if self.stale else LockState.HELD
