"""Tests for data models."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from logflow.models import AppConfig, Filter, SearchMode, SearchQuery


class TestFilter:
    def test_no_pattern_matches_everything(self) -> None:
        f = Filter(name="All")
        assert f.matches_everything
        assert f.is_match("anything")

    def test_empty_pattern_matches_everything(self) -> None:
        assert Filter(name="All", pattern="").matches_everything

    def test_regex(self) -> None:
        f = Filter(name="Status", pattern=r"status=5\d\d")
        assert f.is_match("GET / status=503")
        assert not f.is_match("GET / status=200")

    def test_pattern_compiled_at_construction(self) -> None:
        f = Filter(name="Errors", pattern="ERROR")
        assert f.regex is not None
        assert f.regex.pattern == "ERROR"
        with (
            patch("logflow.models.re.compile", side_effect=AssertionError),
            patch("logflow.models.re.search", side_effect=AssertionError),
        ):
            assert f.is_match("an ERROR here")
            assert not f.is_match("all good")

    def test_no_pattern_has_no_regex(self) -> None:
        assert Filter(name="All").regex is None

    def test_invalid_pattern(self) -> None:
        with pytest.raises(ValidationError):
            Filter(name="Bad", pattern="[")

    def test_frozen(self) -> None:
        f = Filter(name="All")
        with pytest.raises(ValidationError):
            f.name = "Other"  # type: ignore[misc]


class TestAppConfig:
    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.poll_timeout == 0.05
        assert config.log_level == "WARNING"

    def test_log_level_validated(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(log_level="LOUD")

    def test_poll_timeout_positive(self) -> None:
        with pytest.raises(ValidationError):
            AppConfig(poll_timeout=0)


class TestSearchQuery:
    def test_current_match(self) -> None:
        query = SearchQuery(text="x", matches=[(0, 0, 1), (2, 3, 4)], cursor=1)
        assert query.current_match == (2, 3, 4)
        assert SearchQuery(text="x").current_match is None

    def test_matches_by_line(self) -> None:
        query = SearchQuery(text="a", mode=SearchMode.FILTER, matches=[(0, 0, 1), (0, 2, 3), (4, 1, 2)])
        assert query.matches_by_line() == {0: [(0, 1), (2, 3)], 4: [(1, 2)]}
