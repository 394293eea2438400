"""Tests for the search engine."""

from __future__ import annotations

from logflow.lines import Line
from logflow.models import QueryState, SearchMode, SearchState
from logflow.search import SearchEngine, find_matches


def _lines(*contents: str) -> list[Line]:
    return [Line(c) for c in contents]


def _typed(engine: SearchEngine, text: str) -> None:
    for char in text:
        engine.read(char)


class TestFindMatches:
    def test_multiple_per_line(self) -> None:
        assert find_matches(_lines("abcabc", "x", "abc"), "abc") == [(0, 0, 3), (0, 3, 6), (2, 0, 3)]

    def test_overlapping(self) -> None:
        assert find_matches(_lines("aaa"), "aa") == [(0, 0, 2), (0, 1, 3)]

    def test_case_sensitive(self) -> None:
        assert find_matches(_lines("Error", "ERROR"), "ERROR") == [(1, 0, 5)]

    def test_offsets_ignore_escapes(self) -> None:
        assert find_matches(_lines("\x1b[31mHello\x1b[0m World"), "World") == [(0, 6, 11)]

    def test_empty_text(self) -> None:
        assert find_matches(_lines("abc"), "") == []


class TestSearchEngine:
    def test_lifecycle(self) -> None:
        engine = SearchEngine()
        assert engine.state == SearchState.INACTIVE
        engine.begin()
        assert engine.is_composing
        _typed(engine, "err")
        assert engine.read("enter") == QueryState.UNCHANGED
        assert engine.state == SearchState.ACTIVE
        engine.end()
        assert not engine.is_active
        assert engine.build_query() is None

    def test_read_reports_changes(self) -> None:
        engine = SearchEngine()
        engine.begin()
        assert engine.read("a") == QueryState.CHANGED
        assert engine.read("left") == QueryState.UNCHANGED
        assert engine.read("backspace") == QueryState.UNCHANGED  # cursor at start
        assert engine.read("delete") == QueryState.CHANGED
        assert engine.editor.text == ""

    def test_read_ignored_when_inactive(self) -> None:
        engine = SearchEngine()
        assert engine.read("a") == QueryState.UNCHANGED
        assert engine.editor.text == ""

    def test_editing_after_commit_resumes_composing(self) -> None:
        engine = SearchEngine()
        engine.begin()
        _typed(engine, "ab")
        engine.read("enter")
        assert engine.read("c") == QueryState.CHANGED
        assert engine.is_composing
        assert engine.query.text == "abc"

    def test_begin_discards_previous_query(self) -> None:
        engine = SearchEngine()
        engine.begin()
        _typed(engine, "old")
        engine.begin()
        assert engine.query.text == ""
        assert engine.build_query() is None

    def test_empty_query_is_none(self) -> None:
        engine = SearchEngine()
        engine.begin()
        assert engine.build_query() is None

    def test_next_and_previous_cycle(self) -> None:
        engine = SearchEngine()
        engine.begin()
        _typed(engine, "x")
        engine.update_matches(_lines("x", "y", "x", "x"))
        assert engine.current_match == (0, 0, 1)
        assert engine.find_next_match() == (2, 0, 1)
        assert engine.find_next_match() == (3, 0, 1)
        assert engine.find_next_match() == (0, 0, 1)
        assert engine.find_previous_match() == (3, 0, 1)

    def test_navigation_without_matches_is_noop(self) -> None:
        engine = SearchEngine()
        engine.begin()
        _typed(engine, "zzz")
        engine.update_matches(_lines("abc"))
        assert engine.find_next_match() is None
        assert engine.find_previous_match() is None
        assert engine.query.cursor == -1

    def test_keep_cursor(self) -> None:
        engine = SearchEngine()
        engine.begin()
        _typed(engine, "x")
        engine.update_matches(_lines("x", "x", "x"))
        engine.find_next_match()
        engine.update_matches(_lines("x", "x", "x", "x"), keep_cursor=True)
        assert engine.query.cursor == 1
        engine.update_matches(_lines("x"), keep_cursor=True)
        assert engine.query.cursor == 0

    def test_filter_mode_selects_matching_lines(self) -> None:
        engine = SearchEngine()
        lines = _lines("keep me", "drop", "keep too")
        engine.begin()
        _typed(engine, "keep")
        assert engine.select_lines(lines) == lines
        assert engine.toggle_filter_mode() == SearchMode.FILTER
        assert [line.content for line in engine.select_lines(lines)] == ["keep me", "keep too"]
        assert engine.toggle_filter_mode() == SearchMode.HIGHLIGHT

    def test_filter_mode_without_text_keeps_all(self) -> None:
        engine = SearchEngine()
        engine.begin()
        engine.toggle_filter_mode()
        lines = _lines("a", "b")
        assert engine.select_lines(lines) == lines
