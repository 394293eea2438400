"""Ingested lines and the bounded store that holds them."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING

from logflow.ansi import break_into_components, has_ansi_escape_sequence, strip_ansi

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from logflow.ansi import AnsiStyleEngine, Component, StyledRun

logger = logging.getLogger(__name__)


class Line:
    """A single raw log line. Components and stripped content are parsed lazily and cached."""

    __slots__ = ("_components", "_parsed", "_stripped", "content")

    def __init__(self, content: str) -> None:
        self.content = content
        self._components: list[Component] | None = None
        self._parsed = False
        self._stripped: str | None = None

    def __repr__(self) -> str:
        return f"Line({self.content!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Line):
            return self.content == other.content
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.content)

    @property
    def components(self) -> list[Component] | None:
        """Style/content components, or None for lines without escape sequences."""
        if not self._parsed:
            if has_ansi_escape_sequence(self.content):
                self._components = break_into_components(self.content)
            self._parsed = True
        return self._components

    @property
    def content_without_ansi(self) -> str:
        if self._stripped is None:
            self._stripped = strip_ansi(self.content)
        return self._stripped

    def styled_runs(self, engine: AnsiStyleEngine) -> list[StyledRun]:
        """Resolve this line against the engine's active style."""
        components = self.components
        if components is None:
            return [engine.current_run(self.content)]
        return engine.resolve(components)


class LineCollection:
    """All retained lines in arrival order, trimmed FIFO to ``capacity``."""

    def __init__(self, capacity: int) -> None:
        self.capacity = max(0, capacity)
        self._lines: deque[Line] = deque()

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Line]:
        return iter(self._lines)

    @property
    def excess(self) -> int:
        return max(0, len(self._lines) - self.capacity)

    def extend(self, new_lines: Iterable[str]) -> list[Line]:
        """Append lines in order and return them. Trimming is left to ``clear_excess``."""
        added = [Line(content) for content in new_lines]
        self._lines.extend(added)
        return added

    def clear_excess(self) -> int:
        """Drop the oldest lines until the collection fits its capacity. Returns the count dropped."""
        excess = self.excess
        for _ in range(excess):
            self._lines.popleft()
        if excess:
            logger.debug("evicted %d lines (capacity %d)", excess, self.capacity)
        return excess
