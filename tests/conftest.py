"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from logflow.buffer import BufferCollection
from logflow.dispatcher import Dispatcher
from logflow.events import CancellationToken
from logflow.ingest import IngestQueue
from logflow.lines import LineCollection
from logflow.models import Filter

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from logflow.ansi import AnsiColor, StyledRun
    from logflow.events import Event, NavigationState
    from logflow.frame import ViewStatus
    from logflow.models import SearchMode, SearchQuery

SAMPLE_LINES = [
    "2024-01-15T10:30:00Z INFO Server started on port 8080",
    "\x1b[31m2024-01-15T10:30:01Z ERROR Failed to connect\x1b[0m",
    "2024-01-15T10:30:02Z \x1b[33mWARN\x1b[0m slow response (1200ms)",
    "2024-01-15T10:30:03Z INFO Connection established from 192.168.1.1",
    "\x1b[1;31mnot a single-parameter sequence\x1b[0m",
    "",
    "2024-01-15T10:30:04Z \x1b[41;37mFATAL\x1b[0m out of memory",
]


class FakeFrame:
    """In-memory Frame recording what the dispatcher printed."""

    def __init__(self, width: int = 80, height: int = 10) -> None:
        self._width = width
        self._height = height
        self.rows: list[list[StyledRun]] = []
        self.query: SearchQuery | None = None
        self.pairs: dict[int, tuple[AnsiColor, AnsiColor]] = {}
        self.reverse_index: int | None = None
        self.menu_item: int | None = None
        self.navigation: NavigationState | None = None
        self.prompt: tuple[str, str, int, SearchMode] | None = None
        self.status: ViewStatus | None = None
        self.print_count = 0
        self.destroyed = False

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def virtual_height(self) -> int:
        return len(self.rows)

    @property
    def texts(self) -> list[str]:
        return ["".join(run.text for run in row) for row in self.rows]

    def register_color_pair(self, pair_id: int, foreground: AnsiColor, background: AnsiColor) -> None:
        self.pairs[pair_id] = (foreground, background)

    def print(self, lines: Iterable[list[StyledRun]], query: SearchQuery | None) -> None:
        self.rows = list(lines)
        self.query = query
        self.print_count += 1

    def show_matches(self, query: SearchQuery | None) -> None:
        self.query = query

    def scroll(self, reverse_index: int) -> None:
        self.reverse_index = reverse_index

    def resize(self, width: int, height: int) -> None:
        self._width = width
        self._height = height

    def select_menu_item(self, index: int) -> None:
        self.menu_item = index

    def set_navigation(self, state: NavigationState) -> None:
        self.navigation = state

    def render_search(self, prompt: str, text: str, cursor: int, mode: SearchMode) -> None:
        self.prompt = (prompt, text, cursor, mode)

    def set_status(self, status: ViewStatus) -> None:
        self.status = status

    def destroy(self) -> None:
        self.destroyed = True


class FakeEvents:
    """EventSource returning queued events, then None."""

    def __init__(self, events: Iterable[Event] = ()) -> None:
        self.pending: list[Event] = list(events)

    def wait_for_event(self, timeout: float) -> Event | None:  # noqa: ARG002
        if self.pending:
            return self.pending.pop(0)
        return None


@pytest.fixture
def sample_log_file(tmp_path: Path) -> Path:
    """Create a temporary log file with sample content."""
    log_file = tmp_path / "test.log"
    log_file.write_text("\n".join(SAMPLE_LINES) + "\n")
    return log_file


@pytest.fixture
def make_dispatcher() -> Callable[..., tuple[Dispatcher, FakeFrame]]:
    """Factory for a started dispatcher over a FakeFrame, with All/Errors tabs by default."""

    def factory(
        height: int = 10,
        capacity: int = 1000,
        filters: list[Filter] | None = None,
        events: Iterable[Event] = (),
    ) -> tuple[Dispatcher, FakeFrame]:
        frame = FakeFrame(height=height)
        buffers = BufferCollection.from_filters(filters or [Filter(name="All"), Filter(name="Errors", pattern="ERROR")])
        dispatcher = Dispatcher(
            frame,
            FakeEvents(events),
            IngestQueue(),
            LineCollection(capacity),
            buffers,
            token=CancellationToken(),
        )
        dispatcher.start()
        return dispatcher, frame

    return factory
