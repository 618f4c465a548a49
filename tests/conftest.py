"""Shared test fixtures for wpfleet tests."""

import os
import subprocess
import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner with a wide terminal so paths don't wrap."""
    return CliRunner(env={"COLUMNS": "250"})


@pytest.fixture
def lock_dir(tmp_path: Path) -> Path:
    """Directory holding test locks."""
    d = tmp_path / "locks"
    d.mkdir()
    return d


@pytest.fixture
def dead_pid() -> int:
    """PID of a process that has already exited and been reaped."""
    proc = subprocess.Popen([sys.executable, "-c", "pass"])
    proc.wait()
    return proc.pid


@pytest.fixture
def make_lock() -> Callable[[Path, int | str | None], Path]:
    """Factory creating a lock directory as another process would have left it."""

    def _make(path: Path, pid: int | str | None) -> Path:
        path.mkdir(parents=True)
        if pid is not None:
            (path / "pid").write_text(f"{pid}\n")
        return path

    return _make


@pytest.fixture
def fleet_dir(tmp_path: Path, lock_dir: Path) -> Generator[Path, None, None]:
    """Working directory with a wpfleet.toml pointing locks at ``lock_dir``.

    Changes cwd to the directory for the duration of the test.
    """
    config = f"""[project]
name = "test-fleet"

[locks]
directory = "{lock_dir}"
timeout = 0
poll_interval = 0.05

[cleanup]
command_timeout = 10
"""
    (tmp_path / "wpfleet.toml").write_text(config)

    original_cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)
