"""Core protocols and type aliases for xtract.

- Node is a handle into the parsed document tree (an lxml element, or a
  string result of an XPath query such as an attribute value)
- Extractor converts a matched Node into a caller-facing value
- Evaluator is anything that can be invoked as ``(node, extractor=None)``:
  a Matcher, or a plain function used as a path
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable, TypeAlias

# lxml gives no common public base for elements and XPath string results.
Node: TypeAlias = Any

Extractor: TypeAlias = Callable[[Node], Any]

# A single value, None (no match), or a list/dict nesting mirroring the path.
Result: TypeAlias = Any


@runtime_checkable
class Evaluator(Protocol):
    """Evaluate against a document node, optionally overriding the extractor."""

    def __call__(self, node: Node, extractor: Extractor | None = None, /) -> Result: ...
