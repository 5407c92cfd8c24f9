#!/usr/bin/env python3
"""Tests for single filters and their string rendering."""

import pytest

from syncfilter.core.constants import FilterStrategy, FilterType
from syncfilter.rules.filters import (
    Filter,
    GlobFilter,
    RegexFilter,
    RuleSyntaxError,
    filter_strategy_to_string,
    filter_to_string,
    filter_type_to_string,
)


class TestGlobFilter:
    """Tests for GlobFilter."""

    def test_accessors(self):
        """Test read-only accessors."""
        f = GlobFilter("*.tmp", inheritable=False, type=FilterType.PATH)

        assert f.text == "*.tmp"
        assert f.inheritable is False
        assert f.type is FilterType.PATH
        assert f.strategy is FilterStrategy.GLOB

    def test_star_matches_whole_string(self):
        """Test that a match must cover the whole subject."""
        f = GlobFilter("*.tmp", True, FilterType.NAME)

        assert f.match("a.tmp")
        assert f.match(".tmp")
        assert not f.match("a.tmp.bak")
        assert not f.match("a.TMP")

    def test_literal_pattern(self):
        """Test that a literal pattern only matches itself."""
        f = GlobFilter("report", True, FilterType.NAME)

        assert f.match("report")
        assert not f.match("reports")
        assert not f.match("my-report")

    def test_question_mark(self):
        """Test that ? matches exactly one character."""
        f = GlobFilter("file?.txt", True, FilterType.NAME)

        assert f.match("file1.txt")
        assert not f.match("file.txt")
        assert not f.match("file12.txt")

    def test_bracket_class(self):
        """Test bracket character classes."""
        f = GlobFilter("log[0-9]", True, FilterType.NAME)

        assert f.match("log7")
        assert not f.match("logx")

    def test_star_crosses_separators(self):
        """Test that * also matches path separators."""
        f = GlobFilter("src/*.o", True, FilterType.PATH)

        assert f.match("src/main.o")
        assert f.match("src/lib/util.o")
        assert not f.match("lib/src/main.o")

    def test_any_text_is_valid(self):
        """Test that glob construction never fails."""
        f = GlobFilter("[unclosed", True, FilterType.NAME)

        assert f.match("[unclosed")


class TestRegexFilter:
    """Tests for RegexFilter."""

    def test_accessors(self):
        """Test strategy of a regex filter."""
        f = RegexFilter("a+b", True, FilterType.NAME)

        assert f.strategy is FilterStrategy.REGEX
        assert f.text == "a+b"

    def test_full_match(self):
        """Test that the regex must match the entire subject."""
        f = RegexFilter("a+b", True, FilterType.NAME)

        assert f.match("aaab")
        assert f.match("ab")
        assert not f.match("xaaab")
        assert not f.match("aaabx")

    def test_alternation_is_anchored(self):
        """Test that alternation is anchored as a whole."""
        f = RegexFilter(r"foo|bar", True, FilterType.NAME)

        assert f.match("foo")
        assert f.match("bar")
        assert not f.match("foobar")

    def test_log_pattern(self):
        """Test a typical log file pattern."""
        f = RegexFilter(r".*\.log", True, FilterType.NAME)

        assert f.match("server.log")
        assert not f.match("server.log.1")

    def test_invalid_regex_raises(self):
        """Test that an invalid regex raises RuleSyntaxError."""
        with pytest.raises(RuleSyntaxError) as exc_info:
            RegexFilter("(unclosed", True, FilterType.NAME)

        assert exc_info.value.rule == "(unclosed"
        assert "invalid regular expression" in exc_info.value.reason


class TestFilterBase:
    """Tests for the Filter base class."""

    def test_cannot_instantiate_abstract(self):
        """Test that Filter is abstract."""
        with pytest.raises(TypeError):
            Filter("x", True, FilterType.NAME)

    def test_equality(self):
        """Test value equality between filters."""
        assert GlobFilter("a", True, FilterType.NAME) == GlobFilter("a", True, FilterType.NAME)
        assert GlobFilter("a", True, FilterType.NAME) != GlobFilter("a", False, FilterType.NAME)
        assert GlobFilter("a", True, FilterType.NAME) != RegexFilter("a", True, FilterType.NAME)
        assert GlobFilter("a", True, FilterType.NAME) != GlobFilter("a", True, FilterType.PATH)

    def test_hashable(self):
        """Test that equal filters hash alike."""
        filters = {GlobFilter("a", True, FilterType.NAME), GlobFilter("a", True, FilterType.NAME)}
        assert len(filters) == 1

    def test_immutable(self):
        """Test that accessors cannot be reassigned."""
        f = GlobFilter("a", True, FilterType.NAME)

        with pytest.raises(AttributeError):
            f.text = "b"

    def test_repr(self):
        """Test repr mentions class and text."""
        assert repr(GlobFilter("a", True, FilterType.NAME)).startswith("GlobFilter('a'")


class TestRendering:
    """Tests for string rendering helpers."""

    def test_type_strings(self):
        """Test filter type rendering."""
        assert filter_type_to_string(FilterType.NAME) == "NAME"
        assert filter_type_to_string(FilterType.PATH) == "PATH"

    def test_strategy_strings(self):
        """Test filter strategy rendering."""
        assert filter_strategy_to_string(FilterStrategy.GLOB) == "GLOB"
        assert filter_strategy_to_string(FilterStrategy.REGEX) == "REGEX"

    def test_filter_string(self):
        """Test full filter rendering."""
        assert filter_to_string(GlobFilter("*.tmp", True, FilterType.NAME)) == "NAME/GLOB:*.tmp"
        assert str(RegexFilter(r"src/.*", True, FilterType.PATH)) == "PATH/REGEX:src/.*"

    def test_unknown_type_is_fatal(self):
        """Test that values outside the enum fail loudly."""
        with pytest.raises(AssertionError):
            filter_type_to_string("NAME")

    def test_unknown_strategy_is_fatal(self):
        """Test that values outside the enum fail loudly."""
        with pytest.raises(AssertionError):
            filter_strategy_to_string(2)
