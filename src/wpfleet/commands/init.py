"""Init command implementation."""

import typer

from ..config import write_config_template
from ..output import get_output_context
from .common import get_config_path


def init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config"),
) -> None:
    """Write a wpfleet.toml config template."""
    out = get_output_context()
    config_path = get_config_path(ctx)

    if config_path.exists() and not force:
        out.result(
            {"path": str(config_path), "created": False},
            f"[yellow]Config already exists:[/yellow] {config_path}",
        )
        return

    write_config_template(config_path)
    out.success(
        f"Created config template: {config_path}",
        {"path": str(config_path), "created": True},
    )
