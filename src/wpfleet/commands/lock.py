"""Lock inspection and release commands."""

import typer

from ..constants import EXIT_LOCK_BUSY, EXIT_LOCK_STALE
from ..core import get_lock_status, release_lock
from ..models import LockState
from ..output import get_output_context
from .common import load_cli_config

lock_app = typer.Typer(help="Inspect and release fleet locks")


@lock_app.command("status")
def lock_status(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Lock name or absolute lock path"),
) -> None:
    """Show who holds a lock.

    Exits 0 if free, 1 if held by a running process, 2 if stale.
    """
    out = get_output_context()
    config = load_cli_config(ctx)
    status = get_lock_status(config.locks.resolve(name))

    out.lock_status(status)
    if status.state is LockState.STALE:
        raise typer.Exit(EXIT_LOCK_STALE)
    if status.state is LockState.HELD:
        raise typer.Exit(EXIT_LOCK_BUSY)


@lock_app.command("release")
def lock_release(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Lock name or absolute lock path"),
    stale_only: bool = typer.Option(
        False, "--stale-only", help="Only remove the lock if its owner is gone"
    ),
) -> None:
    """Remove a lock."""
    out = get_output_context()
    config = load_cli_config(ctx)
    lock_path = config.locks.resolve(name)
    status = get_lock_status(lock_path)

    if not status.held:
        out.result(
            {"path": str(lock_path), "released": False},
            f"[yellow]Lock not held:[/yellow] {lock_path}",
        )
        return

    if stale_only and not status.stale:
        out.error(
            f"Lock {lock_path} is held by a running process",
            {"path": str(lock_path), "owner_pid": status.owner_pid},
        )
        raise typer.Exit(EXIT_LOCK_BUSY)

    release_lock(lock_path)
    out.success(f"Released lock: {lock_path}", {"path": str(lock_path), "released": True})
