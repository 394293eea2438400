"""Init-config command - write a starter config file."""

from __future__ import annotations

from typing import Annotated

import typer

from logflow.config import default_config, get_config_path, save_config


def init_config(
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing config file")] = False,  # noqa: FBT002
) -> None:
    """Write a config file with a few example filter tabs."""
    path = get_config_path()
    if path.exists() and not force:
        typer.echo(f"Error: {path} already exists (use --force to overwrite)")
        raise typer.Exit(1)
    saved = save_config(default_config(), path)
    typer.echo(f"Wrote {saved}")
