"""
fswatch Exclusion Matcher.

Compiles the user's exclusion pattern once at startup and tests event
paths against it.

Paths are matched as text. ``os.fsdecode`` turns undecodable bytes into
surrogate escapes; those are replaced with U+FFFD before matching, so a
path the platform cannot represent is matched on a best-effort view
instead of raising.
Requires Python 3.11+.
"""

import os
import re
from pathlib import Path

from fswatch.errors import InvalidPattern


def path_to_text(path: str | bytes | Path) -> str:
    """Lossy, never-failing text view of a path."""
    text = os.fsdecode(path)
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


class ExclusionMatcher:
    """Interface for exclusion checks on event paths."""

    pattern: str | None = None

    def matches(self, path: str | bytes | Path) -> bool:
        raise NotImplementedError


class NullMatcher(ExclusionMatcher):
    """Used when no exclusion is configured. Excludes nothing."""

    def matches(self, path: str | bytes | Path) -> bool:
        return False


class RegexMatcher(ExclusionMatcher):
    """Matches paths against a compiled regular expression."""

    def __init__(self, regex: re.Pattern[str]) -> None:
        self._regex = regex
        self.pattern = regex.pattern

    def matches(self, path: str | bytes | Path) -> bool:
        """Return True if the pattern is found anywhere in the path."""
        return self._regex.search(path_to_text(path)) is not None


def compile_matcher(pattern: str | None) -> ExclusionMatcher:
    """
    Compile an exclusion pattern.

    Args:
        pattern: Regular expression, or None to exclude nothing

    Returns:
        A RegexMatcher, or a NullMatcher when pattern is None

    Raises:
        InvalidPattern: If the pattern does not compile
    """
    if pattern is None:
        return NullMatcher()

    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise InvalidPattern(pattern, str(e)) from e

    return RegexMatcher(regex)
