"""XDG directory management and configuration for logflow."""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
from platformdirs import user_config_dir
from pydantic import ValidationError
from textual.logging import TextualHandler

from logflow.errors import ConfigError
from logflow.models import AppConfig, Filter

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

DEFAULT_FILTERS = [
    Filter(name="All"),
    Filter(name="Errors", pattern="ERROR|FATAL"),
    Filter(name="Warnings", pattern="WARN"),
]


def get_config_dir() -> Path:
    """Get the logflow config directory.

    Respects LOGFLOW_CONFIG_DIR environment variable if set.
    """
    if override := os.environ.get("LOGFLOW_CONFIG_DIR"):
        return Path(override)
    return Path(user_config_dir("logflow"))


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def load_config(path: Path | None = None) -> AppConfig:
    """Load application config from disk, returning defaults if not found.

    Unlike missing files, malformed files are fatal: tabs and their patterns
    are fixed for the lifetime of the process.
    """
    path = path or get_config_path()
    if not path.exists():
        return AppConfig()
    try:
        data: dict[str, Any] = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"cannot read config {path}: {e}"
        raise ConfigError(msg) from e
    try:
        return AppConfig(**data)
    except ValidationError as e:
        msg = f"invalid config {path}: {e}"
        raise ConfigError(msg) from e


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save application config to disk."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.model_dump(exclude_none=True)
    path.write_bytes(tomli_w.dumps(data).encode())
    return path


def default_config() -> AppConfig:
    """Config written by `logflow init-config`."""
    return AppConfig(filters=list(DEFAULT_FILTERS))


def setup_logging(level: str = "WARNING", log_file: Path | None = None) -> None:
    """Route logflow records to the Textual devtools console and optionally a file.

    Nothing is written to stderr: the terminal belongs to the viewer.
    """
    logger = logging.getLogger("logflow")
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = False
    logger.addHandler(TextualHandler())
    if log_file is not None:
        handler = logging.FileHandler(log_file)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(handler)
