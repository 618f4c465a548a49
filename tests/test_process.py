"""Tests for external command execution."""

import sys
from pathlib import Path

import pytest

from wpfleet.services import CommandError, run_command, split_command


class TestSplitCommand:
    """Tests for split_command."""

    def test_string_is_shlex_split(self) -> None:
        assert split_command("docker exec 'wpfleet db' mysql") == [
            "docker",
            "exec",
            "wpfleet db",
            "mysql",
        ]

    def test_sequence_is_stringified(self) -> None:
        assert split_command(["ls", Path("/tmp")]) == ["ls", "/tmp"]

    def test_invalid_syntax(self) -> None:
        with pytest.raises(CommandError, match="Invalid command syntax"):
            split_command("echo 'unterminated")

    @pytest.mark.parametrize("command", ["", "   ", []])
    def test_empty(self, command: str | list[str]) -> None:
        with pytest.raises(CommandError, match="Empty command"):
            split_command(command)


class TestRunCommand:
    """Tests for run_command."""

    def test_captures_output_and_status(self) -> None:
        result = run_command([sys.executable, "-c", "print('hello')"])
        assert result.ok
        assert result.returncode == 0
        assert result.stdout.strip() == "hello"

    def test_nonzero_exit_is_not_an_error(self) -> None:
        result = run_command([sys.executable, "-c", "import sys; sys.exit(4)"])
        assert not result.ok
        assert result.returncode == 4

    def test_runs_in_cwd(self, tmp_path: Path) -> None:
        result = run_command([sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path)
        assert Path(result.stdout.strip()).resolve() == tmp_path.resolve()

    def test_not_found(self) -> None:
        with pytest.raises(CommandError, match="Command not found"):
            run_command("definitely-not-a-real-command-xyz --help")

    def test_timeout(self) -> None:
        with pytest.raises(CommandError, match="timed out"):
            run_command([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)

    def test_inherited_stdout(self, capfd: pytest.CaptureFixture[str]) -> None:
        run_command([sys.executable, "-c", "print('to-stdout')"], capture=False)
        captured = capfd.readouterr()
        assert "to-stdout" in captured.out

    def test_stdout_redirected_to_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        result = run_command(
            [sys.executable, "-c", "print('to-stderr')"], capture=False, stdout_to_stderr=True
        )
        captured = capfd.readouterr()
        assert result.ok
        assert "to-stderr" not in captured.out
        assert "to-stderr" in captured.err
