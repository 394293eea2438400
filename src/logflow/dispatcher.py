"""The single loop that interleaves UI events with line ingestion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from logflow.ansi import AnsiStyleEngine, register_color_pairs
from logflow.events import (
    CancellationToken,
    ChangeNavigation,
    Direction,
    NavigationState,
    OffsetKind,
    Quit,
    Resize,
    Scroll,
    Search,
    SearchAction,
    SelectTab,
)
from logflow.frame import ViewStatus
from logflow.models import QueryState
from logflow.search import SearchEngine

if TYPE_CHECKING:
    from collections.abc import Iterable

    from logflow.buffer import Buffer, BufferCollection
    from logflow.events import Event, Offset
    from logflow.frame import Frame
    from logflow.ingest import IngestQueue
    from logflow.lines import Line, LineCollection

logger = logging.getLogger(__name__)

# Lines kept in view from the previous page when paging.
PAGE_OVERLAP = 4


class EventSource(Protocol):
    def wait_for_event(self, timeout: float) -> Event | None: ...


class Dispatcher:
    """Owns all core state and mutates it from a single thread.

    Each iteration waits briefly for a UI event; when none arrives it drains
    the ingestion queue instead. The loop ends once the cancellation token is
    set. Errors from a poisoned ingestion queue propagate out of ``run``.
    """

    def __init__(
        self,
        frame: Frame,
        events: EventSource,
        ingest: IngestQueue,
        lines: LineCollection,
        buffers: BufferCollection,
        *,
        search: SearchEngine | None = None,
        engine: AnsiStyleEngine | None = None,
        token: CancellationToken | None = None,
        poll_timeout: float = 0.05,
    ) -> None:
        self.frame = frame
        self.events = events
        self.ingest = ingest
        self.lines = lines
        self.buffers = buffers
        self.search = search or SearchEngine()
        self.engine = engine or AnsiStyleEngine()
        self.token = token or CancellationToken()
        self.poll_timeout = poll_timeout

    @property
    def current_buffer(self) -> Buffer:
        return self.buffers.selected_item

    @property
    def max_reverse_index(self) -> int:
        return max(0, self.frame.virtual_height - self.frame.height)

    def start(self) -> None:
        """One-time setup before the loop: color pairs, menu, first render."""
        register_color_pairs(self.frame)
        self.frame.select_menu_item(self.buffers.selected)
        self.frame.set_navigation(NavigationState.MENU)
        self.reset_view()

    def run(self) -> None:
        self.start()
        logger.info("dispatcher started with %d tabs", len(self.buffers))
        try:
            while not self.token.is_cancelled:
                self.step()
        finally:
            self.frame.destroy()
        logger.info("dispatcher stopped")

    def step(self) -> None:
        """Run one loop iteration."""
        event = self.events.wait_for_event(self.poll_timeout)
        if event is None:
            self.ingest_pending()
        else:
            self.handle(event)

    def handle(self, event: Event) -> None:
        logger.debug("event %r", event)
        if isinstance(event, SelectTab):
            self.select_tab(event)
        elif isinstance(event, Scroll):
            self.scroll(event.offset)
        elif isinstance(event, ChangeNavigation):
            self.change_navigation(event.state)
        elif isinstance(event, Search):
            self.handle_search(event.action, event.key)
        elif isinstance(event, Resize):
            self.resize(event.width, event.height)
        elif isinstance(event, Quit):
            self.quit()

    # --- Tabs ---

    def select_tab(self, event: SelectTab) -> None:
        if event.index is not None:
            self.buffers.select(event.index)
        elif event.direction == Direction.LEFT:
            self.buffers.select_previous()
        elif event.direction == Direction.RIGHT:
            self.buffers.select_next()
        self.frame.select_menu_item(self.buffers.selected)
        self.reset_view()

    # --- Scrolling ---

    def scroll(self, offset: Offset) -> None:
        buffer = self.current_buffer
        max_value = self.max_reverse_index

        if offset.kind == OffsetKind.LINE:
            buffer.adjust_reverse_index(offset.value, max_value)
        elif offset.kind == OffsetKind.VIEWPORT:
            page = max(1, self.frame.height - PAGE_OVERLAP)
            buffer.adjust_reverse_index(offset.value * page, max_value)
        elif offset.kind == OffsetKind.TOP:
            buffer.scroll_to_top(max_value)
        else:
            buffer.reset_reverse_index()

        self.frame.scroll(buffer.reverse_index)
        self._update_status()

    def reset_scroll(self) -> None:
        self.current_buffer.reset_reverse_index()

    # --- Search ---

    def change_navigation(self, state: NavigationState) -> None:
        was_active = self.search.is_active
        if state == NavigationState.SEARCH:
            self.search.begin()
        else:
            self.search.end()
        self.frame.set_navigation(state)
        if state == NavigationState.SEARCH:
            self._render_search()
        if was_active:
            # Drop highlights and filter-down left over from the previous query
            self.reset_view()

    def handle_search(self, action: SearchAction, key: str | None = None) -> None:
        if action == SearchAction.READ_INPUT:
            if key is not None and self.search.read(key) == QueryState.CHANGED:
                self.perform_search()
            if self.search.is_active:
                self._render_search()
        elif action == SearchAction.FIND_NEXT_MATCH:
            self._show_match(self.search.find_next_match())
        elif action == SearchAction.FIND_PREVIOUS_MATCH:
            self._show_match(self.search.find_previous_match())
        elif action == SearchAction.TOGGLE_FILTER_MODE:
            self.search.toggle_filter_mode()
            self.perform_search()
            if self.search.is_active:
                self._render_search()

    def perform_search(self) -> None:
        """Re-run the filter-then-match pipeline and bring the first match into view."""
        self.reset_view()
        self._show_match(self.search.current_match)

    def _show_match(self, match: tuple[int, int, int] | None) -> None:
        if match is None:
            return
        buffer = self.current_buffer
        buffer.reveal(match[0], self.frame.virtual_height, self.frame.height)
        self.frame.show_matches(self.search.build_query())
        self.frame.scroll(buffer.reverse_index)
        self._update_status()

    def _render_search(self) -> None:
        editor = self.search.editor
        self.frame.render_search(self.search.PROMPT, editor.text, editor.cursor, self.search.mode)

    # --- Resize / quit ---

    def resize(self, width: int, height: int) -> None:
        logger.debug("resize to %dx%d", width, height)
        self.frame.resize(width, height)
        self.reset_scroll()
        self.reset_view()

    def quit(self) -> None:
        self.token.cancel()

    # --- Ingestion ---

    def ingest_pending(self) -> None:
        """Drain the ingestion queue. Raises if a producer poisoned it."""
        pending = self.ingest.drain()
        if pending:
            self.append_incoming_lines(pending)

    def append_incoming_lines(self, pending: list[str]) -> None:
        """Append a batch, keeping a scrolled view visually in place."""
        buffer = self.current_buffer
        initial_height = self.frame.virtual_height

        new_lines = self.lines.extend(pending)
        if buffer.is_scrolled():
            added = len(self._view_of(new_lines))
            buffer.adjust_reverse_index(added, initial_height + added - self.frame.height)

        # Evicting from the head leaves a tail-relative offset pointing at the same lines.
        self.lines.clear_excess()
        self.reset_view(keep_cursor=True)

    # --- Rendering ---

    def _view_of(self, lines: Iterable[Line]) -> list[Line]:
        return self.search.select_lines(self.current_buffer.parse(lines))

    def reset_view(self, *, keep_cursor: bool = False) -> None:
        """Re-derive the selected tab's view and print it."""
        buffer = self.current_buffer
        view = self._view_of(self.lines)
        self.search.update_matches(view, keep_cursor=keep_cursor)

        if self.frame.width <= 0 or self.frame.height <= 0:
            view = []
        engine = self.engine
        self.frame.print((line.styled_runs(engine) for line in view), self.search.build_query())

        buffer.clamp_reverse_index(self.max_reverse_index)
        self.frame.scroll(buffer.reverse_index)
        self._update_status()

    def _update_status(self) -> None:
        query = self.search.build_query()
        self.frame.set_status(
            ViewStatus(
                tab=self.current_buffer.name,
                total_lines=len(self.lines),
                view_lines=self.frame.virtual_height,
                reverse_index=self.current_buffer.reverse_index,
                match_index=query.cursor + 1 if query else None,
                match_count=len(query.matches) if query else None,
                search_mode=self.search.mode if self.search.is_active else None,
            )
        )
