"""External command execution for wpfleet."""

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

STDERR_FILENO = 2


class CommandError(Exception):
    """Error executing an external command."""


@dataclass
class CommandResult:
    """Outcome of a finished command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def split_command(command: str | Sequence[str]) -> list[str]:
    """Turn a command string or argument list into an argument list.

    Raises:
        CommandError: If the string cannot be parsed or is empty
    """
    if isinstance(command, str):
        try:
            args = shlex.split(command)
        except ValueError as e:
            raise CommandError(f"Invalid command syntax: {e}") from e
    else:
        args = [str(a) for a in command]

    if not args:
        raise CommandError("Empty command")
    return args


def run_command(
    command: str | Sequence[str],
    cwd: Path | None = None,
    timeout: float | None = None,
    capture: bool = True,
    stdout_to_stderr: bool = False,
) -> CommandResult:
    """Run a command and return its exit status and output.

    Args:
        command: Command string (parsed with shlex, never a shell) or argument list
        cwd: Working directory
        timeout: Optional timeout in seconds
        capture: Capture stdout/stderr instead of inheriting them
        stdout_to_stderr: When not capturing, send the child's stdout to our
            stderr so our own stdout stays machine-readable

    Returns:
        CommandResult with exit code and captured output

    Raises:
        CommandError: If the command cannot be parsed, is not found, or times out
    """
    args = split_command(command)
    stdout = STDERR_FILENO if stdout_to_stderr and not capture else None

    try:
        result = subprocess.run(
            args,
            cwd=cwd,
            capture_output=capture,
            stdout=stdout,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"Command timed out after {timeout} seconds: {args[0]}") from e
    except FileNotFoundError:
        raise CommandError(f"Command not found: {args[0]}") from None
    except PermissionError:
        raise CommandError(f"Command not executable: {args[0]}") from None

    return CommandResult(
        args=args,
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )
