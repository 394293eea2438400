"""Per-tab view state and the collection of tabs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from logflow.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from logflow.lines import Line
    from logflow.models import Filter

logger = logging.getLogger(__name__)


def check_line(line: Line, filter_: Filter) -> bool:
    """Check if a single line passes a tab filter."""
    if filter_.matches_everything:
        return True
    return filter_.is_match(line.content_without_ansi)


def apply_filter(lines: Iterable[Line], filter_: Filter) -> Iterator[Line]:
    """Lazily yield the lines passing a tab filter, in arrival order."""
    if filter_.matches_everything:
        yield from lines
        return
    for line in lines:
        if filter_.is_match(line.content_without_ansi):
            yield line


class Buffer:
    """One tab: its filter plus a scroll offset counted from the tail.

    ``reverse_index == 0`` means pinned to the newest line; the largest valid
    value, ``virtual_height - viewport_height``, puts the oldest line at the
    top of the viewport.
    """

    def __init__(self, filter_: Filter) -> None:
        self.filter = filter_
        self.reverse_index: int = 0

    def __repr__(self) -> str:
        return f"Buffer({self.name!r}, reverse_index={self.reverse_index})"

    @property
    def name(self) -> str:
        return self.filter.name

    def parse(self, source: Iterable[Line]) -> Iterator[Line]:
        return apply_filter(source, self.filter)

    def matches(self, line: Line) -> bool:
        return check_line(line, self.filter)

    def count_matches(self, lines: Iterable[Line]) -> int:
        return sum(1 for _ in apply_filter(lines, self.filter))

    def is_scrolled(self) -> bool:
        return self.reverse_index != 0

    def adjust_reverse_index(self, delta: int, max_value: int) -> None:
        """Move by ``delta`` lines, clamped into ``[0, max_value]``."""
        self.reverse_index = min(max(0, self.reverse_index + delta), max(0, max_value))

    def clamp_reverse_index(self, max_value: int) -> None:
        self.adjust_reverse_index(0, max_value)

    def reset_reverse_index(self) -> None:
        self.reverse_index = 0

    def scroll_to_top(self, max_value: int) -> None:
        self.reverse_index = max(0, max_value)

    def reveal(self, line_index: int, virtual_height: int, viewport_height: int) -> None:
        """Scroll just enough to bring view line ``line_index`` into the viewport."""
        if viewport_height <= 0 or not 0 <= line_index < virtual_height:
            return
        max_value = max(0, virtual_height - viewport_height)
        top = max(0, virtual_height - viewport_height - self.reverse_index)
        if line_index < top:
            self.reverse_index = virtual_height - viewport_height - line_index
        elif line_index >= top + viewport_height:
            self.reverse_index = virtual_height - line_index - 1
        self.clamp_reverse_index(max_value)


class BufferCollection:
    """Tabs in display order with a single selected index.

    Selection clamps at both ends. Each buffer keeps its own scroll state
    while other tabs are selected.
    """

    def __init__(self, buffers: list[Buffer]) -> None:
        if not buffers:
            msg = "at least one tab filter is required"
            raise ConfigError(msg)
        self._buffers = buffers
        self.selected: int = 0

    @classmethod
    def from_filters(cls, filters: Iterable[Filter]) -> BufferCollection:
        return cls([Buffer(f) for f in filters])

    def __len__(self) -> int:
        return len(self._buffers)

    def __iter__(self) -> Iterator[Buffer]:
        return iter(self._buffers)

    @property
    def names(self) -> list[str]:
        return [b.name for b in self._buffers]

    @property
    def selected_item(self) -> Buffer:
        return self._buffers[self.selected]

    def select(self, index: int) -> bool:
        """Select a tab by position (clamped). Returns whether the selection changed."""
        index = min(max(0, index), len(self._buffers) - 1)
        if index == self.selected:
            return False
        self.selected = index
        logger.debug("selected tab %d (%s)", index, self.selected_item.name)
        return True

    def select_previous(self) -> bool:
        return self.select(self.selected - 1)

    def select_next(self) -> bool:
        return self.select(self.selected + 1)
