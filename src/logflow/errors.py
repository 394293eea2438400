"""Exception types for logflow."""

from __future__ import annotations


class LogFlowError(Exception):
    """Base class for logflow errors."""


class ConfigError(LogFlowError):
    """Configuration could not be loaded or is invalid."""


class IngestQueuePoisoned(LogFlowError):  # noqa: N818
    """A line producer failed; the ingestion state can no longer be trusted."""
