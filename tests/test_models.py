"""Tests for wpfleet data models."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from wpfleet.models import CleanupItem, CleanupKind, Lock, LockState, LockStatus


class TestLock:
    """Tests for Lock model."""

    def test_defaults(self) -> None:
        lock = Lock(path=Path("/tmp/x.lock"), owner_pid=os.getpid())
        assert lock.acquired is True
        assert lock.acquired_at is not None

    def test_json_round_trip(self) -> None:
        lock = Lock(path=Path("/tmp/x.lock"), owner_pid=42)
        restored = Lock.model_validate_json(lock.model_dump_json())
        assert restored == lock


class TestLockStatus:
    """Tests for LockStatus.stale and LockStatus.state."""

    @pytest.mark.parametrize(
        ("held", "owner_pid", "owner_alive", "stale"),
        [
            (False, None, False, False),
            (True, 42, True, False),
            (True, 42, False, True),
            (True, None, False, False),
        ],
    )
    def test_stale(
        self, held: bool, owner_pid: int | None, owner_alive: bool, stale: bool
    ) -> None:
        status = LockStatus(
            path=Path("/tmp/x.lock"), held=held, owner_pid=owner_pid, owner_alive=owner_alive
        )
        assert status.stale is stale

    @pytest.mark.parametrize(
        ("held", "owner_pid", "owner_alive", "state"),
        [
            (False, None, False, LockState.FREE),
            (True, 42, True, LockState.HELD),
            (True, None, False, LockState.HELD),
            (True, 42, False, LockState.STALE),
        ],
    )
    def test_state(
        self, held: bool, owner_pid: int | None, owner_alive: bool, state: LockState
    ) -> None:
        status = LockStatus(
            path=Path("/tmp/x.lock"), held=held, owner_pid=owner_pid, owner_alive=owner_alive
        )
        assert status.state is state


class TestCleanupItem:
    """Tests for CleanupItem model."""

    def test_kind_from_string(self) -> None:
        item = CleanupItem(kind="lock", target="/tmp/x.lock")
        assert item.kind is CleanupKind.LOCK

    def test_kind_values(self) -> None:
        assert {k.value for k in CleanupKind} == {"file", "directory", "lock", "command"}

    def test_empty_target_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CleanupItem(kind=CleanupKind.FILE, target="")

    def test_unknown_kind_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CleanupItem(kind="socket", target="/tmp/x")
