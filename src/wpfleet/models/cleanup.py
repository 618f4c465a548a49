"""Cleanup item models."""

from enum import Enum

from pydantic import BaseModel, Field


class CleanupKind(str, Enum):
    """Kinds of deferred teardown actions."""

    FILE = "file"
    DIRECTORY = "directory"
    LOCK = "lock"
    COMMAND = "command"


class CleanupItem(BaseModel):
    """One deferred teardown action.

    Attributes:
        kind: How the target is torn down.
        target: Path for file/directory/lock items, command string otherwise.
    """

    kind: CleanupKind
    target: str = Field(min_length=1, description="Path or command string")
