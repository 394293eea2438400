"""Scrollable viewport for styled log lines."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.cells import cell_len
from rich.segment import Segment
from textual.geometry import Size
from textual.message import Message
from textual.scroll_view import ScrollView
from textual.strip import Strip

from logflow.colors import SEARCH_CURRENT_STYLE, SEARCH_MATCH_STYLE, ColorPalette

if TYPE_CHECKING:
    from rich.style import Style
    from textual import events

    from logflow.ansi import StyledRun

# Wheel notches scroll this many lines.
_WHEEL_LINES = 3


class LogView(ScrollView, can_focus=False):
    """Virtual viewport using the Line API.

    The widget never decides its own scroll position: wheel and resize events
    are reported as messages and the dispatcher answers with ``scroll_reverse``.
    """

    DEFAULT_CSS = """
    LogView {
        background: $surface;
        height: 1fr;
        overflow-x: hidden;
    }
    """

    class Resized(Message):
        """The viewport changed size."""

        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    class ScrollRequested(Message):
        """The user scrolled with the mouse; positive lines move toward older content."""

        def __init__(self, lines: int) -> None:
            super().__init__()
            self.lines = lines

    def __init__(self, palette: ColorPalette | None = None, **kwargs: Any) -> None:  # noqa: ANN401
        super().__init__(**kwargs)
        self.palette = palette or ColorPalette()
        self._rows: list[list[StyledRun]] = []
        self._matches: dict[int, list[tuple[int, int]]] = {}
        self._current: tuple[int, int, int] | None = None

    def set_rows(
        self,
        rows: list[list[StyledRun]],
        matches: dict[int, list[tuple[int, int]]],
        current: tuple[int, int, int] | None,
    ) -> None:
        """Replace the printed content."""
        self._rows = rows
        self._matches = matches
        self._current = current
        max_width = max((sum(cell_len(run.text) for run in row) for row in rows), default=0)
        self.virtual_size = Size(max_width, len(rows))
        self.refresh()

    def set_matches(self, matches: dict[int, list[tuple[int, int]]], current: tuple[int, int, int] | None) -> None:
        self._matches = matches
        self._current = current
        self.refresh()

    def scroll_reverse(self, reverse_index: int) -> None:
        """Show the window ending ``reverse_index`` lines above the newest row."""
        height = self.scrollable_content_region.height
        top = max(0, len(self._rows) - height - reverse_index)
        self.scroll_to(y=top, animate=False, force=True)

    def on_resize(self, event: events.Resize) -> None:
        self.post_message(self.Resized(event.size.width, event.size.height))

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        event.prevent_default()
        event.stop()
        self.post_message(self.ScrollRequested(_WHEEL_LINES))

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        event.prevent_default()
        event.stop()
        self.post_message(self.ScrollRequested(-_WHEEL_LINES))

    # --- Rendering ---

    def render_line(self, y: int) -> Strip:
        scroll_x, scroll_y = self.scroll_offset
        row_index = scroll_y + y
        content_width = self.scrollable_content_region.width

        if content_width <= 0:
            return Strip.blank(self.size.width, self.rich_style)
        if row_index >= len(self._rows) or row_index < 0:
            return Strip.blank(content_width, self.rich_style)

        current = None
        if self._current is not None and self._current[0] == row_index:
            current = (self._current[1], self._current[2])
        segments = self._render_row(self._rows[row_index], self._matches.get(row_index), current)

        strip = Strip(segments).crop(scroll_x, scroll_x + content_width)
        strip = strip.extend_cell_length(content_width)
        return strip.apply_style(self.rich_style)

    def _render_row(
        self,
        runs: list[StyledRun],
        matches: list[tuple[int, int]] | None,
        current: tuple[int, int] | None,
    ) -> list[Segment]:
        """Render a row's styled runs, painting search matches over them."""
        segments: list[Segment] = []
        offset = 0
        for run in runs:
            style = self.palette.style_for(run)
            end = offset + len(run.text)
            if matches:
                segments.extend(self._split_with_highlights(run.text, offset, style, matches, current))
            elif run.text:
                segments.append(Segment(run.text, style))
            offset = end
        return segments

    @staticmethod
    def _split_with_highlights(
        text: str,
        offset: int,
        normal_style: Style,
        matches: list[tuple[int, int]],
        current: tuple[int, int] | None,
    ) -> list[Segment]:
        """Split one run at match boundaries. Offsets are relative to the whole row."""
        end = offset + len(text)
        marks: list[tuple[int, int, Style]] = []
        for m_start, m_end in matches:
            start, stop = max(m_start, offset), min(m_end, end)
            if start < stop:
                style = SEARCH_CURRENT_STYLE if (m_start, m_end) == current else SEARCH_MATCH_STYLE
                marks.append((start - offset, stop - offset, style))
        if not marks:
            return [Segment(text, normal_style)] if text else []

        segments: list[Segment] = []
        pos = 0
        for mark_start, stop, style in sorted(marks, key=lambda m: m[0]):
            start = max(mark_start, pos)
            if start >= stop:
                continue
            if start > pos:
                segments.append(Segment(text[pos:start], normal_style))
            segments.append(Segment(text[start:stop], normal_style + style))
            pos = stop
        if pos < len(text):
            segments.append(Segment(text[pos:], normal_style))
        return segments
