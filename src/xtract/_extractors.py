"""Built-in extractors: functions turning a matched node into a value.

Extractor resolution order when a matcher runs:

1. an extractor bound with ``Matcher.with_extractor`` (sticky, always wins)
2. the extractor passed at call time
3. DEFAULT_EXTRACTOR (``oneline``)

Whitespace handling uses ``google-re2`` like every other regex in xtract.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import re2

from xtract._document import text_content

if TYPE_CHECKING:
    from collections.abc import Callable

    from xtract._types import Extractor, Node

_SPACE_RUNS = re2.compile(r" +")
_WHITESPACE_RUNS = re2.compile(r"\s+")
_LINE_EDGE_BLANKS = re2.compile(r"(?m)([ \t]+$|^[ \t]+)")
_EXCESS_NEWLINES = re2.compile(r"\n{3,}")
_BLANK_RUNS = re2.compile(r"[ \t]+")


def text(node: Node) -> str:
    """Text content with runs of spaces collapsed (newlines kept), trimmed."""
    return _SPACE_RUNS.sub(" ", text_content(node)).strip()


def oneline(node: Node) -> str:
    """Text content on a single line: every whitespace run becomes one space."""
    return _WHITESPACE_RUNS.sub(" ", text_content(node)).strip()


def normalize(node: Node) -> str:
    """Text content with paragraph structure kept.

    Leading and trailing blanks are stripped from every line, three or more
    newlines are squeezed into one blank line and inner blanks collapse.
    """
    s = _LINE_EDGE_BLANKS.sub("", text_content(node))
    s = _EXCESS_NEWLINES.sub("\n\n", s)
    return _BLANK_RUNS.sub(" ", s).strip()


def identity(node: Node) -> Node:
    return node


def distr(f: Callable[[Any], Any]) -> Callable[[list[Any]], list[Any]]:
    """Lift f to apply element-wise over a sequence result.

    >>> from xtract import multi, distr
    >>> multi("//a/@href").map(distr(str.upper))  # doctest: +SKIP
    """

    def apply(xs: list[Any]) -> list[Any]:
        return [f(x) for x in xs]

    return apply


DEFAULT_EXTRACTOR: Extractor = oneline


def resolve_extractor(extractor: Extractor | None) -> Extractor:
    """Use the call-time extractor if given, else the default one."""
    return extractor if extractor is not None else DEFAULT_EXTRACTOR
