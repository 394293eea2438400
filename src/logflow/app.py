"""Textual application for logflow."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding, BindingType
from textual.widgets import Footer
from textual.worker import Worker, WorkerState

from logflow.buffer import BufferCollection
from logflow.dispatcher import Dispatcher
from logflow.events import (
    CancellationToken,
    ChangeNavigation,
    Direction,
    EventQueue,
    NavigationState,
    Offset,
    Quit,
    Resize,
    Scroll,
    Search,
    SearchAction,
    SelectTab,
)
from logflow.ingest import IngestQueue, read_pipe, tail_file
from logflow.lines import LineCollection
from logflow.widgets.help_screen import HelpScreen
from logflow.widgets.log_view import LogView
from logflow.widgets.menu_bar import MenuBar
from logflow.widgets.search_bar import SearchBar
from logflow.widgets.status_bar import StatusBar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from logflow.ansi import AnsiColor, StyledRun
    from logflow.events import Event
    from logflow.frame import ViewStatus
    from logflow.models import AppConfig, SearchMode, SearchQuery

logger = logging.getLogger(__name__)

_DISPATCHER_WORKER = "dispatcher"


def _snapshot(query: SearchQuery | None) -> tuple[dict[int, list[tuple[int, int]]], tuple[int, int, int] | None]:
    if query is None:
        return {}, None
    return query.matches_by_line(), query.current_match


class TextualFrame:
    """Frame backend that forwards dispatcher calls onto the Textual event loop.

    Every method runs on the dispatcher thread. Dimensions are cached here so
    the dispatcher never reads widget state across threads.
    """

    def __init__(self, app: LogFlowApp, token: CancellationToken) -> None:
        self._app = app
        self._token = token
        self._width = 0
        self._height = 0
        self._virtual_height = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def virtual_height(self) -> int:
        return self._virtual_height

    def register_color_pair(self, pair_id: int, foreground: AnsiColor, background: AnsiColor) -> None:
        self._app.palette.register(pair_id, foreground, background)

    def print(self, lines: Iterable[list[StyledRun]], query: SearchQuery | None) -> None:
        rows = list(lines)
        self._virtual_height = len(rows)
        matches, current = _snapshot(query)
        self._call(self._app.log_view.set_rows, rows, matches, current)

    def show_matches(self, query: SearchQuery | None) -> None:
        matches, current = _snapshot(query)
        self._call(self._app.log_view.set_matches, matches, current)

    def scroll(self, reverse_index: int) -> None:
        self._call(self._app.log_view.scroll_reverse, reverse_index)

    def resize(self, width: int, height: int) -> None:
        self._width = width
        self._height = height

    def select_menu_item(self, index: int) -> None:
        self._call(self._app.menu_bar.select, index)

    def set_navigation(self, state: NavigationState) -> None:
        self._call(self._app.show_search_bar, visible=state == NavigationState.SEARCH)

    def render_search(self, prompt: str, text: str, cursor: int, mode: SearchMode) -> None:
        self._call(self._app.search_bar.update_prompt, prompt, text, cursor, mode)

    def set_status(self, status: ViewStatus) -> None:
        self._call(self._app.status_bar.update_status, status)

    def destroy(self) -> None:
        self._virtual_height = 0

    def _call(self, callback: Callable[..., Any], *args: Any, **kwargs: Any) -> None:  # noqa: ANN401
        # The event loop may already be shutting down once quit was requested.
        if self._token.is_cancelled:
            return
        self._app.call_from_thread(callback, *args, **kwargs)


class LogFlowApp(App[None]):
    """Log viewer TUI application."""

    ENABLE_COMMAND_PALETTE = False

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("left", "select_tab('left')", "Prev tab", show=False),
        Binding("right", "select_tab('right')", "Next tab", show=False),
        Binding("h", "select_tab('left')", "Prev tab", show=False),
        Binding("l", "select_tab('right')", "Next tab", show=False),
        Binding("up", "scroll_lines(1)", "Up", show=False),
        Binding("down", "scroll_lines(-1)", "Down", show=False),
        Binding("k", "scroll_lines(1)", "Up", show=False),
        Binding("j", "scroll_lines(-1)", "Down", show=False),
        Binding("pageup", "scroll_pages(1)", "Page up", show=False),
        Binding("pagedown", "scroll_pages(-1)", "Page down", show=False),
        Binding("home", "scroll_top", "Top", show=False),
        Binding("g", "scroll_top", "Top", show=False),
        Binding("end", "scroll_bottom", "Follow", show=False),
        Binding("G", "scroll_bottom", "Follow"),
        Binding("slash", "search", "Search"),
        Binding("escape", "leave_search", "Clear search", show=False),
        Binding("n", "find_match('next')", "Next match", show=False),
        Binding("N", "find_match('previous')", "Prev match", show=False),
        Binding("ctrl+t", "toggle_filter_mode", "Filter mode", show=False),
        Binding("question_mark", "show_help", "Help"),
        Binding("q", "quit", "Quit"),
        Binding("1", "select_index(0)", "Tab 1", show=False),
        Binding("2", "select_index(1)", "Tab 2", show=False),
        Binding("3", "select_index(2)", "Tab 3", show=False),
        Binding("4", "select_index(3)", "Tab 4", show=False),
        Binding("5", "select_index(4)", "Tab 5", show=False),
        Binding("6", "select_index(5)", "Tab 6", show=False),
        Binding("7", "select_index(6)", "Tab 7", show=False),
        Binding("8", "select_index(7)", "Tab 8", show=False),
        Binding("9", "select_index(8)", "Tab 9", show=False),
    ]

    def __init__(
        self,
        config: AppConfig,
        files: list[Path] | None = None,
        source: str = "",
        *,
        tail: bool = True,
        pipe_fd: int | None = None,
    ) -> None:
        super().__init__()
        self._files = files or []
        self._source = source
        self._tail = tail
        self._pipe_fd = pipe_fd

        self.token = CancellationToken()
        self.events = EventQueue()
        self.ingest = IngestQueue()
        self.buffers = BufferCollection.from_filters(config.filters)
        self.frame = TextualFrame(self, self.token)
        self.dispatcher = Dispatcher(
            self.frame,
            self.events,
            self.ingest,
            LineCollection(config.max_lines_count),
            self.buffers,
            token=self.token,
            poll_timeout=config.poll_timeout,
        )
        self.log_view = LogView(id="log-view")
        self.palette = self.log_view.palette
        self.menu_bar = MenuBar(self.buffers.names, id="menu-bar")
        self.search_bar = SearchBar(id="search-bar")
        self.status_bar = StatusBar(source=source, id="status-bar")

    def compose(self) -> ComposeResult:
        yield self.menu_bar
        yield self.log_view
        yield Footer()
        yield self.status_bar
        yield self.search_bar

    def on_mount(self) -> None:
        logger.info("viewing %s with %d tabs", self._source or "nothing", len(self.buffers))
        for path in self._files:
            self.run_worker(
                tail_file(path, self.ingest, self.token, follow=self._tail),
                name=f"read:{path}",
                group="producers",
            )
        if self._pipe_fd is not None:
            self.run_worker(
                read_pipe(self._pipe_fd, self.ingest, self.token),
                name="read:stdin",
                group="producers",
            )
        self.run_worker(self.dispatcher.run, name=_DISPATCHER_WORKER, thread=True)

    def on_unmount(self) -> None:
        self.token.cancel()

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        """Exit once the dispatcher loop has stopped."""
        if event.worker.name == _DISPATCHER_WORKER and event.state == WorkerState.SUCCESS:
            self.exit()

    def post_event(self, event: Event) -> None:
        self.events.post(event)

    def show_search_bar(self, *, visible: bool) -> None:
        self.search_bar.show(visible=visible)
        if visible:
            self.search_bar.focus()
        elif self.search_bar.has_focus:
            self.set_focus(None)

    # --- Widget messages ---

    def on_log_view_resized(self, message: LogView.Resized) -> None:
        self.post_event(Resize(width=message.width, height=message.height))

    def on_log_view_scroll_requested(self, message: LogView.ScrollRequested) -> None:
        self.post_event(Scroll(offset=Offset.line(message.lines)))

    def on_search_bar_key_read(self, message: SearchBar.KeyRead) -> None:
        self.post_event(Search(action=SearchAction.READ_INPUT, key=message.key))
        if message.key == "enter":
            self.set_focus(None)
            self.search_bar.refresh()

    def on_search_bar_cancelled(self, _message: SearchBar.Cancelled) -> None:
        self.post_event(ChangeNavigation(state=NavigationState.MENU))

    def on_search_bar_mode_toggled(self, _message: SearchBar.ModeToggled) -> None:
        self.post_event(Search(action=SearchAction.TOGGLE_FILTER_MODE))

    # --- Actions ---

    def action_select_tab(self, direction: str) -> None:
        self.post_event(SelectTab(direction=Direction(direction)))

    def action_select_index(self, index: int) -> None:
        self.post_event(SelectTab(index=index))

    def action_scroll_lines(self, lines: int) -> None:
        self.post_event(Scroll(offset=Offset.line(lines)))

    def action_scroll_pages(self, pages: int) -> None:
        self.post_event(Scroll(offset=Offset.viewport(pages)))

    def action_scroll_top(self) -> None:
        self.post_event(Scroll(offset=Offset.top()))

    def action_scroll_bottom(self) -> None:
        self.post_event(Scroll(offset=Offset.bottom()))

    def action_search(self) -> None:
        self.post_event(ChangeNavigation(state=NavigationState.SEARCH))

    def action_leave_search(self) -> None:
        self.post_event(ChangeNavigation(state=NavigationState.MENU))

    def action_find_match(self, which: str) -> None:
        action = SearchAction.FIND_NEXT_MATCH if which == "next" else SearchAction.FIND_PREVIOUS_MATCH
        self.post_event(Search(action=action))

    def action_toggle_filter_mode(self) -> None:
        self.post_event(Search(action=SearchAction.TOGGLE_FILTER_MODE))

    def action_show_help(self) -> None:
        self.push_screen(HelpScreen())

    async def action_quit(self) -> None:
        """Ask the dispatcher to stop; the app exits when its loop returns."""
        if self.token.is_cancelled:
            self.exit()
            return
        self.post_event(Quit())
