"""Path specifications — where to look in a document.

A path is written with plain Python values and coerced once, at matcher
construction, into the PathSpec union:

| Python value              | PathSpec      | Evaluates to                          |
|---------------------------|---------------|---------------------------------------|
| ``"//a[@href]"``          | QueryPath     | extractor(first match) or None        |
| ``2``                     | IndexPath     | extractor(third element child)        |
| ``{"title": "//h1"}``     | KeyedPaths    | dict, one entry per key               |
| ``[multi("//a"), ...]``   | KeyedPaths    | list, sub-results spliced in order    |
| Matcher / function        | FunctionPath  | whatever ``fn(node, extractor)`` gives |

The PathSpec union is pattern-matchable via match/case.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from xtract._document import children, query
from xtract._errors import IndexOutOfRangeError, InvalidPathError
from xtract._types import Evaluator

if TYPE_CHECKING:
    from xtract._types import Extractor, Node, Result


@dataclass(frozen=True, slots=True)
class QueryPath:
    """An XPath query run against the current node."""

    query: str


@dataclass(frozen=True, slots=True)
class IndexPath:
    """Position of an element child of the current node."""

    index: int

    def __post_init__(self) -> None:
        if self.index < 0:
            raise InvalidPathError(self.index, "child index must be non-negative")


@dataclass(frozen=True, slots=True)
class KeyedPaths:
    """Ordered nested paths.

    Integer keys splice their (sequence) result into the parent list; string
    keys assign their result under that key. The result is a list when the
    paths came from a list or when anything was spliced, a dict otherwise.
    """

    entries: tuple[tuple[str | int, PathSpec], ...]
    sequence: bool = False


@dataclass(frozen=True, slots=True)
class FunctionPath:
    """A Matcher or plain function called as ``fn(node, extractor)``."""

    fn: Evaluator


PathSpec: TypeAlias = QueryPath | IndexPath | KeyedPaths | FunctionPath


def as_path(raw: Any) -> PathSpec:
    """Coerce a Python value into a PathSpec.

    Raises:
        InvalidPathError: If raw (or anything nested in it) is not a path.
    """
    match raw:
        case QueryPath() | IndexPath() | KeyedPaths() | FunctionPath():
            return raw
        case str():
            return QueryPath(raw)
        case bool():
            raise InvalidPathError(raw)
        case int():
            return IndexPath(raw)
        case Mapping():
            return KeyedPaths(tuple((_check_key(k), as_path(v)) for k, v in raw.items()))
        case list() | tuple():
            return KeyedPaths(
                tuple((i, as_path(v)) for i, v in enumerate(raw)), sequence=True
            )
        case _ if isinstance(raw, Evaluator):
            return FunctionPath(raw)
        case _:
            raise InvalidPathError(raw)


def _check_key(key: Any) -> str | int:
    if isinstance(key, bool) or not isinstance(key, str | int):
        raise InvalidPathError(key, "keys must be strings or integers")
    return key


def eval_path(node: Node, path: PathSpec, extractor: Extractor) -> Result:
    """Evaluate a path against node, applying extractor to matched nodes.

    Raises:
        InvalidPathError: Unknown path shape, or a spliced result that is
            not a sequence.
        IndexOutOfRangeError: An IndexPath past the last child.
    """
    match path:
        case FunctionPath(fn=fn):
            return fn(node, extractor)
        case KeyedPaths():
            return _eval_keyed(node, path, extractor)
        case QueryPath(query=q):
            matches = query(node, q)
            return extractor(matches[0]) if matches else None
        case IndexPath(index=i):
            nodes = children(node)
            if i >= len(nodes):
                raise IndexOutOfRangeError(i, len(nodes))
            return extractor(nodes[i])
        case _:
            raise InvalidPathError(path)


def _eval_keyed(node: Node, path: KeyedPaths, extractor: Extractor) -> Result:
    items: list[tuple[str | None, Any]] = []
    spliced = path.sequence
    for key, sub in path.entries:
        value = eval_path(node, sub, extractor)
        if isinstance(key, int):
            if not isinstance(value, list | tuple):
                reason = f"spliced result must be a sequence, got {type(value).__name__}"
                raise InvalidPathError(sub, reason)
            spliced = True
            items.extend((None, v) for v in value)
        else:
            items.append((key, value))

    if spliced:
        return [v for _, v in items]
    return {k: v for k, v in items}
