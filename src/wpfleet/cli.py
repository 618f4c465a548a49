"""WPFleet CLI: locking and cleanup for fleet management scripts."""

from pathlib import Path

import typer

from wpfleet import __version__

from .commands import init, lock_app, run
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wpfleet {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="wpfleet",
    help="Locking and cleanup helpers for WPFleet scripts",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to wpfleet.toml (default: ./wpfleet.toml)",
    ),
) -> None:
    """WPFleet - locking and cleanup for fleet operations."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))
    ctx.obj = config


app.command()(init)
app.command(
    "run",
    context_settings={"allow_interspersed_args": False},
)(run)
app.add_typer(lock_app, name="lock")


if __name__ == "__main__":
    app()
