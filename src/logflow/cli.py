"""CLI entry point for logflow."""

from __future__ import annotations

import typer

from logflow.commands.init_config import init_config
from logflow.commands.view import view

app = typer.Typer(add_completion=False)
app.command()(view)
app.command("init-config")(init_config)


def main() -> None:
    """Entry point for the CLI."""
    app()
