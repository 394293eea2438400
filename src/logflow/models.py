"""Pydantic models for logflow."""

from __future__ import annotations

import re
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class Filter(BaseModel):
    """A named tab filter. A missing or empty pattern matches every line."""

    model_config = ConfigDict(frozen=True)

    name: str
    pattern: str | None = None
    _regex: re.Pattern[str] | None = PrivateAttr(default=None)

    @field_validator("pattern")
    @classmethod
    def _check_pattern(cls, value: str | None) -> str | None:
        if value:
            try:
                re.compile(value)
            except re.error as e:
                msg = f"invalid filter pattern {value!r}: {e}"
                raise ValueError(msg) from e
        return value

    def model_post_init(self, context: Any, /) -> None:  # noqa: ANN401, ARG002
        self._regex = re.compile(self.pattern) if self.pattern else None

    @property
    def matches_everything(self) -> bool:
        return not self.pattern

    @property
    def regex(self) -> re.Pattern[str] | None:
        """The pattern compiled once at construction, or None when it matches everything."""
        return self._regex

    def is_match(self, content: str) -> bool:
        """Check whether stripped line content passes this filter (case-sensitive)."""
        if self._regex is None:
            return True
        return self._regex.search(content) is not None


def _default_filters() -> list[Filter]:
    return [Filter(name="All")]


class AppConfig(BaseModel):
    """Application configuration loaded once at startup."""

    max_lines_count: int = Field(default=10_000, ge=0)
    poll_timeout: float = Field(default=0.05, gt=0)
    log_level: str = "WARNING"
    filters: list[Filter] = Field(default_factory=_default_filters, min_length=1)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            msg = f"unknown log level {value!r}"
            raise ValueError(msg)
        return level


class SearchMode(StrEnum):
    """How an active search affects the view."""

    HIGHLIGHT = "highlight"
    FILTER = "filter"


class SearchState(StrEnum):
    """Lifecycle of a search session."""

    INACTIVE = "inactive"
    COMPOSING = "composing"
    ACTIVE = "active"


class QueryState(StrEnum):
    """Result of feeding a key to the search input."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"


class SearchQuery(BaseModel):
    """Query text, mode, and the (line_index, start, end) matches over the current view."""

    text: str = ""
    mode: SearchMode = SearchMode.HIGHLIGHT
    matches: list[tuple[int, int, int]] = []
    cursor: int = -1

    @property
    def current_match(self) -> tuple[int, int, int] | None:
        if 0 <= self.cursor < len(self.matches):
            return self.matches[self.cursor]
        return None

    def matches_by_line(self) -> dict[int, list[tuple[int, int]]]:
        """Group match spans by view line index for rendering."""
        grouped: dict[int, list[tuple[int, int]]] = {}
        for line_index, start, end in self.matches:
            grouped.setdefault(line_index, []).append((start, end))
        return grouped
