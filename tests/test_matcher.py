"""
Tests for the Exclusion Matcher.

Requires Python 3.11+.
"""

import sys
from pathlib import Path

import pytest

from fswatch.core.matcher import NullMatcher, RegexMatcher, compile_matcher, path_to_text
from fswatch.errors import ConfigError, InvalidPattern


class TestCompileMatcher:
    """Test cases for compile_matcher."""

    def test_no_pattern_gives_null_matcher(self):
        """Absent pattern excludes nothing."""
        matcher = compile_matcher(None)

        assert isinstance(matcher, NullMatcher)
        assert matcher.pattern is None
        assert not matcher.matches("notes.tmp")
        assert not matcher.matches(Path("/anything/at/all"))

    def test_empty_pattern_is_a_real_rule(self):
        """An empty pattern is distinct from no pattern: it matches everything."""
        matcher = compile_matcher("")

        assert isinstance(matcher, RegexMatcher)
        assert matcher.matches("notes.txt")

    def test_tmp_suffix(self):
        """Pattern from the usage docs excludes .tmp files only."""
        matcher = compile_matcher(r".*\.tmp$")

        assert matcher.matches("notes.tmp")
        assert not matcher.matches("notes.txt")

    def test_search_is_unanchored(self):
        """Pattern may match anywhere in the path."""
        matcher = compile_matcher("build")

        assert matcher.matches(Path("/project/build/out.o"))
        assert not matcher.matches(Path("/project/src/main.c"))

    def test_invalid_pattern(self):
        """Unbalanced group fails with the pattern and compiler diagnostic."""
        with pytest.raises(InvalidPattern) as exc_info:
            compile_matcher("(unclosed")

        error = exc_info.value
        assert isinstance(error, ConfigError)
        assert error.pattern == "(unclosed"
        assert error.diagnostic
        assert "(unclosed" in str(error)


class TestPathToText:
    """Test cases for lossy path conversion."""

    def test_plain_path(self):
        """Representable paths are unchanged."""
        assert path_to_text(Path("/a/b.txt")) == str(Path("/a/b.txt"))

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX byte paths")
    def test_undecodable_bytes_are_replaced(self):
        """Undecodable bytes become replacement characters instead of raising."""
        text = path_to_text(b"/w/bad\xff.tmp")

        assert "\ufffd" in text
        assert text.endswith(".tmp")

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX byte paths")
    def test_undecodable_path_still_matches(self):
        """Matching works on the best-effort view."""
        matcher = compile_matcher(r"\.tmp$")

        assert matcher.matches(b"/w/bad\xff.tmp")
