"""Run a command while holding a fleet lock.

Works like ``flock(1)`` with cleanup: the lock and any extra cleanup items
are torn down on exit, including on SIGTERM, SIGINT and SIGHUP.
"""

import os
from pathlib import Path

import typer

from ..config import WPFleetConfig
from ..constants import EXIT_COMMAND_NOT_FOUND, EXIT_LOCK_BUSY
from ..core import CleanupRegistry, LockError, acquire_lock, read_lock_owner, release_lock
from ..output import OutputContext, get_output_context
from ..services import CommandError, run_command
from .common import load_cli_config


def run(
    ctx: typer.Context,
    command: list[str] = typer.Argument(..., help="Command and arguments to run"),
    lock: str = typer.Option(..., "--lock", "-l", help="Lock name or absolute lock path"),
    timeout: float | None = typer.Option(
        None, "--timeout", "-t", min=0, help="Seconds to wait for the lock"
    ),
    cleanup_file: list[Path] | None = typer.Option(
        None, "--cleanup-file", help="File to remove on exit (repeatable)"
    ),
    cleanup_dir: list[Path] | None = typer.Option(
        None, "--cleanup-dir", help="Directory to remove on exit (repeatable)"
    ),
    cleanup_command: list[str] | None = typer.Option(
        None, "--cleanup-command", help="Command to run on exit (repeatable)"
    ),
) -> None:
    """Run a command while holding a lock."""
    out = get_output_context()
    config = load_cli_config(ctx)

    with CleanupRegistry(command_timeout=config.cleanup.command_timeout) as registry:
        # Commands run last, after files and directories are gone
        for c in cleanup_command or []:
            registry.register_command(c)
        for d in cleanup_dir or []:
            registry.register_directory(d)
        for f in cleanup_file or []:
            registry.register_file(f)

        exit_code = _run_locked(out, registry, config, command, lock, timeout)

    if exit_code:
        raise typer.Exit(exit_code)


def _run_locked(
    out: OutputContext,
    registry: CleanupRegistry,
    config: WPFleetConfig,
    command: list[str],
    lock: str,
    timeout: float | None,
) -> int:
    """Acquire the lock, register it for cleanup, and run the command.

    Returns:
        Exit code for the CLI
    """
    lock_path = config.locks.resolve(lock)
    wait = config.locks.timeout if timeout is None else timeout

    try:
        acquire_lock(lock_path, timeout=wait, poll_interval=config.locks.poll_interval)
        registry.register_lock(lock_path)
    except LockError as e:
        out.error(str(e), {"lock": str(lock_path)})
        return EXIT_LOCK_BUSY
    except BaseException:
        # Interrupted before the registry owned the lock
        if read_lock_owner(lock_path) == os.getpid():
            release_lock(lock_path)
        raise

    try:
        # Keep stdout for the JSON result
        result = run_command(command, capture=False, stdout_to_stderr=out.json_mode)
    except CommandError as e:
        out.error(str(e), {"lock": str(lock_path)})
        return EXIT_COMMAND_NOT_FOUND

    out.command_finished(lock_path, result)
    return result.returncode
