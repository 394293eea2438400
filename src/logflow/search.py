"""Search engine for finding text matches in the current view."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from logflow.editor import LineEditor
from logflow.models import QueryState, SearchMode, SearchQuery, SearchState

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from logflow.lines import Line

logger = logging.getLogger(__name__)

_COMMIT_KEY = "enter"


def find_matches(lines: Sequence[Line], text: str) -> list[tuple[int, int, int]]:
    """Find all case-sensitive matches, returning (line_index, start, end) tuples.

    Offsets refer to each line's content with escape sequences stripped.
    """
    results: list[tuple[int, int, int]] = []
    pat_len = len(text)
    if pat_len == 0:
        return results
    for i, line in enumerate(lines):
        content = line.content_without_ansi
        start = 0
        while True:
            pos = content.find(text, start)
            if pos == -1:
                break
            results.append((i, pos, pos + pat_len))
            start = pos + 1
    return results


class SearchEngine:
    """Search session state: INACTIVE -> COMPOSING -> ACTIVE.

    While composing, keys go to a ``LineEditor``; ``read`` reports whether the
    query text changed so the caller knows when to re-run the match pipeline.
    """

    PROMPT = "/"

    def __init__(self) -> None:
        self.state = SearchState.INACTIVE
        self.editor = LineEditor()
        self.query = SearchQuery()

    @property
    def is_active(self) -> bool:
        return self.state != SearchState.INACTIVE

    @property
    def is_composing(self) -> bool:
        return self.state == SearchState.COMPOSING

    @property
    def mode(self) -> SearchMode:
        return self.query.mode

    @property
    def current_match(self) -> tuple[int, int, int] | None:
        return self.query.current_match

    def begin(self) -> None:
        """Start a new search session with an empty query."""
        self.state = SearchState.COMPOSING
        self.editor.reset()
        self.query = SearchQuery()

    def end(self) -> None:
        """Leave search mode and discard the query."""
        self.state = SearchState.INACTIVE
        self.editor.reset()
        self.query = SearchQuery()

    def read(self, key: str) -> QueryState:
        """Feed one key from the search prompt."""
        if not self.is_active:
            return QueryState.UNCHANGED
        if key == _COMMIT_KEY:
            self.state = SearchState.ACTIVE
            return QueryState.UNCHANGED

        before = self.editor.text
        if self.editor.feed(key):
            self.state = SearchState.COMPOSING
        if self.editor.text == before:
            return QueryState.UNCHANGED
        self.query.text = self.editor.text
        return QueryState.CHANGED

    def toggle_filter_mode(self) -> SearchMode:
        self.query.mode = SearchMode.FILTER if self.query.mode == SearchMode.HIGHLIGHT else SearchMode.HIGHLIGHT
        logger.debug("search mode: %s", self.query.mode)
        return self.query.mode

    def build_query(self) -> SearchQuery | None:
        """The live query, or None when there is nothing to search for."""
        if not self.is_active or not self.query.text:
            return None
        return self.query

    def select_lines(self, lines: Iterable[Line]) -> list[Line]:
        """Apply filter-down mode to the view; highlight mode keeps every line."""
        if self.build_query() is None or self.query.mode == SearchMode.HIGHLIGHT:
            return list(lines)
        text = self.query.text
        return [line for line in lines if text in line.content_without_ansi]

    def update_matches(self, lines: Sequence[Line], *, keep_cursor: bool = False) -> None:
        """Recompute matches over the displayed lines.

        The cursor goes to the first match, or stays at its position (clamped)
        with ``keep_cursor`` so that new lines do not interrupt navigation.
        """
        if self.build_query() is None:
            self.query.matches = []
            self.query.cursor = -1
            return
        previous = self.query.cursor
        self.query.matches = find_matches(lines, self.query.text)
        if not self.query.matches:
            self.query.cursor = -1
        elif keep_cursor and previous >= 0:
            self.query.cursor = min(previous, len(self.query.matches) - 1)
        else:
            self.query.cursor = 0

    def find_next_match(self) -> tuple[int, int, int] | None:
        if not self.query.matches:
            return None
        self.query.cursor = (self.query.cursor + 1) % len(self.query.matches)
        return self.query.current_match

    def find_previous_match(self) -> tuple[int, int, int] | None:
        if not self.query.matches:
            return None
        self.query.cursor = (self.query.cursor - 1) % len(self.query.matches)
        return self.query.current_match
