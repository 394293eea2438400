"""View command - follow log files or a pipe in a TUI."""

from __future__ import annotations

import os
import sys
from pathlib import Path  # noqa: TC003 - typer needs this at runtime for argument parsing
from typing import Annotated

import typer

from logflow.config import load_config, setup_logging
from logflow.errors import ConfigError
from logflow.ingest import is_pipe


def _setup_pipe_input() -> int:
    """Save stdin pipe fd, then redirect fd 0 to /dev/tty for Textual keyboard.

    Returns the saved pipe fd for reading data.
    """
    # Save the pipe fd
    pipe_fd = os.dup(sys.stdin.fileno())
    # Redirect fd 0 to /dev/tty for Textual keyboard input
    tty_fd = os.open("/dev/tty", os.O_RDONLY)
    os.dup2(tty_fd, sys.stdin.fileno())
    os.close(tty_fd)
    sys.stdin = os.fdopen(0)
    return pipe_fd


def view(
    files: Annotated[list[Path] | None, typer.Argument(help="Log file(s) to follow")] = None,
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Config file (default: user config dir)")] = None,
    max_lines: Annotated[
        int | None, typer.Option("--max-lines", "-n", min=0, help="Override max_lines_count from the config")
    ] = None,
    follow: Annotated[bool, typer.Option("--follow/--no-follow", "-f/-F", help="Keep reading appended lines")] = True,  # noqa: FBT002
    log_file: Annotated[Path | None, typer.Option("--log-file", help="Also write diagnostics to this file")] = None,
) -> None:
    """Follow log lines in a terminal UI with filter tabs and search."""
    if files:
        for f in files:
            if not f.is_file():
                typer.echo(f"Error: {f} is not a file")
                raise typer.Exit(1)

    if config is not None and not config.is_file():
        typer.echo(f"Error: config file {config} not found")
        raise typer.Exit(1)

    try:
        app_config = load_config(config)
    except ConfigError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(1)  # noqa: B904

    if max_lines is not None:
        app_config = app_config.model_copy(update={"max_lines_count": max_lines})

    pipe_fd: int | None = None
    if files:
        source = ", ".join(f.name for f in files)
    elif is_pipe():
        pipe_fd = _setup_pipe_input()
        source = "stdin"
    else:
        typer.echo("Error: provide a file or pipe input")
        raise typer.Exit(1)

    setup_logging(app_config.log_level, log_file)

    from logflow.app import LogFlowApp  # noqa: PLC0415

    log_app = LogFlowApp(app_config, files=files, source=source, tail=follow, pipe_fd=pipe_fd)
    log_app.run()
