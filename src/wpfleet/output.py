"""Output formatting for wpfleet CLI.

Human-readable output goes to a Rich console on stderr. With ``--json``
each command writes a single JSON document to stdout, so scripts can
parse it without the wrapped command's output getting in the way.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console

from .models import LockState, LockStatus
from .services import CommandResult

_STATE_STYLES = {
    LockState.FREE: "green",
    LockState.HELD: "red",
    LockState.STALE: "yellow",
}


def lock_status_data(status: LockStatus) -> dict[str, Any]:
    """JSON view of a lock, including derived fields."""
    data = status.model_dump(mode="json")
    data["state"] = status.state.value
    data["stale"] = status.stale
    return data


def describe_lock(status: LockStatus) -> str:
    """One-line Rich markup summary of a lock."""
    state = status.state
    style = _STATE_STYLES[state]
    line = f"[{style}]{state.value.capitalize()}:[/{style}] {status.path}"

    if state is LockState.STALE:
        return f"{line} (PID {status.owner_pid} no longer exists)"
    if state is LockState.HELD:
        owner = f"PID {status.owner_pid}" if status.owner_pid is not None else "unknown owner"
        return f"{line} ({owner})"
    return line


@dataclass
class OutputContext:
    """Context for output formatting."""

    console: Console
    json_mode: bool = False

    def print_json(self, data: dict[str, Any]) -> None:
        """Print JSON data."""
        if self.json_mode:
            print(json.dumps(data, indent=2, default=str))

    def result(self, data: dict[str, Any], message: str = "") -> None:
        """Print result in appropriate format."""
        if self.json_mode:
            self.print_json(data)
        elif message:
            self.console.print(message)

    def error(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Print error in appropriate format."""
        if self.json_mode:
            self.print_json({"error": message, **(data or {})})
        else:
            self.console.print(f"[red]Error: {message}[/red]")

    def success(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Print success message in appropriate format."""
        if self.json_mode:
            self.print_json({"success": message, **(data or {})})
        else:
            self.console.print(f"[green]{message}[/green]")

    def lock_status(self, status: LockStatus) -> None:
        """Report who holds a lock."""
        self.result(lock_status_data(status), describe_lock(status))

    def command_finished(self, lock_path: Path, result: CommandResult) -> None:
        """Report a command run under a lock.

        Silent in human mode: the command's own output and exit status
        already tell the story.
        """
        self.print_json(
            {"lock": str(lock_path), "command": result.args, "exit_code": result.returncode}
        )


# Global output context (set by cli.py main callback)
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context.

    Returns a default OutputContext if not yet initialized by CLI.
    """
    if _ctx is None:
        return OutputContext(Console(stderr=True))
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    """Set the global output context. Called by CLI main callback."""
    global _ctx
    _ctx = ctx
