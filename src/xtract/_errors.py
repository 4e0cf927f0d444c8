"""Error types raised while building and evaluating matchers.

All errors derive from MatcherError. They are raised synchronously and are
never caught or translated by the combinators, so the caller of a matcher
sees the original failure. A None result is a successful "no match" and is
never represented as an error.
"""

from __future__ import annotations

from typing import Any


class MatcherError(Exception):
    """Base class for all xtract errors."""


class InvalidPathError(MatcherError):
    """A path specification is not one of the recognized shapes."""

    def __init__(self, path: Any, reason: str | None = None) -> None:
        self.path = path
        self.reason = reason
        msg = (
            "invalid path: expected str, int, dict, list, Matcher or function, "
            f"got {type(path).__name__}"
        )
        if reason is not None:
            msg = f"invalid path {path!r}: {reason}"
        super().__init__(msg)


class IndexOutOfRangeError(MatcherError):
    """An index path selects a child that does not exist."""

    def __init__(self, index: int, size: int) -> None:
        self.index = index
        self.size = size
        super().__init__(
            f"child index {index} out of range (node has {size} children)"
        )


class InvalidOperationError(MatcherError):
    """A combinator was applied to a value or matcher it does not support."""


class InvalidQueryError(MatcherError):
    """The structural query engine rejected a query string."""

    def __init__(self, query: str, source: str) -> None:
        self.query = query
        self.source = source
        super().__init__(f"invalid query {query!r}: {source}")


class InvalidPatternError(MatcherError):
    """A regular expression could not be compiled."""

    def __init__(self, pattern: str, source: str) -> None:
        self.pattern = pattern
        self.source = source
        super().__init__(f'invalid regex pattern "{pattern}": {source}')


class DocumentParseError(MatcherError):
    """Markup could not be parsed into a document tree."""
