"""Helpers shared by CLI commands."""

from pathlib import Path

import typer

from ..config import ConfigError, WPFleetConfig, default_config_path, load_config
from ..output import get_output_context


def get_config_path(ctx: typer.Context) -> Path:
    """Config path chosen with --config, or wpfleet.toml in the current directory."""
    return ctx.obj if isinstance(ctx.obj, Path) else default_config_path()


def load_cli_config(ctx: typer.Context) -> WPFleetConfig:
    """Load configuration, exiting with code 1 if it is invalid."""
    try:
        return load_config(get_config_path(ctx))
    except ConfigError as e:
        get_output_context().error(str(e))
        raise typer.Exit(1) from None
