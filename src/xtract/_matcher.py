"""Matcher — immutable, composable query + extraction unit.

A Matcher wraps an evaluation function ``(node, extractor) -> result``.
Every combinator returns a new Matcher around the previous one; nothing is
ever mutated, so a matcher built once can be evaluated against any number
of documents.

    m = multi("//article", {"title": "h2", "tags": multi(".//li")})
    m.from_html()(page_source)

The bound extractor of ``with_extractor`` is a field, not a closure, so the
precedence rule (bound > call-time > default) is visible on the object.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import re2

from xtract._document import is_node, parse_html, parse_xml, query, same_node
from xtract._errors import InvalidOperationError, InvalidPatternError
from xtract._extractors import DEFAULT_EXTRACTOR, identity, resolve_extractor
from xtract._path import FunctionPath, QueryPath, as_path, eval_path

if TYPE_CHECKING:
    from collections.abc import Callable

    from xtract._config import ParserConfig
    from xtract._path import PathSpec
    from xtract._types import Evaluator, Extractor, Node, Result

logger = logging.getLogger(__name__)

_NUMBER_PREFIX = re2.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True, slots=True)
class Matcher:
    """A reusable, side-effect-free extraction pipeline.

    Attributes:
        run: The evaluation function. Receives the node and the already
            resolved extractor argument (None when nobody supplied one).
        parent: The Matcher or PathSpec this one was derived from. Only
            ``seq_or`` looks at it, to recover the underlying query string.
        extractor: Extractor bound by ``with_extractor``. When set, any
            extractor passed at call time is discarded.

    INV: Referential transparency — the same (node, extractor) always yields
    the same result, given a pure document and extractor.
    """

    run: Callable[[Node, Extractor | None], Result] = field(repr=False)
    parent: Matcher | PathSpec | None = None
    extractor: Extractor | None = field(default=None, repr=False)

    def __call__(self, node: Node, extractor: Extractor | None = None, /) -> Result:
        return self.evaluate(node, extractor)

    def evaluate(self, node: Node, extractor: Extractor | None = None) -> Result:
        """Evaluate against a node, honouring a bound extractor first."""
        if self.extractor is not None:
            extractor = self.extractor
        return self.run(node, extractor)

    # ── Extractor binding ──────────────────────────────────────────────────

    def with_extractor(self, f: Extractor | None) -> Matcher:
        """Bind f as the extractor; call-time extractors are ignored from now on.

        ``with_extractor(None)`` binds the default extractor.
        """
        return Matcher(
            self.evaluate,
            parent=self,
            extractor=f if f is not None else DEFAULT_EXTRACTOR,
        )

    def raw(self) -> Matcher:
        """Produce matched nodes themselves instead of extracted values."""
        return self.with_extractor(identity)

    def from_html(
        self, extractor: Extractor | None = None, config: ParserConfig | None = None
    ) -> Matcher:
        """Turn this matcher into one that accepts HTML source text."""
        inner = self.with_extractor(extractor)

        def run(markup: str | bytes, _extractor: Extractor | None) -> Result:
            return inner(parse_html(markup, config))

        return Matcher(run, parent=self)

    def from_xml(
        self, extractor: Extractor | None = None, config: ParserConfig | None = None
    ) -> Matcher:
        """Turn this matcher into one that accepts XML source text.

        Raises DocumentParseError at evaluation time for malformed input.
        """
        inner = self.with_extractor(extractor)

        def run(markup: str | bytes, _extractor: Extractor | None) -> Result:
            return inner(parse_xml(markup, config))

        return Matcher(run, parent=self)

    # ── Value transformation ───────────────────────────────────────────────

    def _map_ex(self, f: Callable[[Result, Extractor | None], Result]) -> Matcher:
        inner = self.evaluate

        def run(node: Node, extractor: Extractor | None) -> Result:
            return f(inner(node, extractor), extractor)

        return Matcher(run, parent=self)

    def map(self, f: Callable[[Result], Any]) -> Matcher:
        """Apply f to the result of this matcher (after extraction)."""

        def apply(value: Result, _extractor: Extractor | None) -> Any:
            return f(value)

        return self._map_ex(apply)

    def and_then(self, f: Callable[[Result], Any]) -> Matcher:
        return self.map(f)

    def deep_map(self, f: Evaluator) -> Matcher:
        """Replace every document node inside the result by ``f(node, extractor)``.

        Lists and dicts are rebuilt with the same shape and key order at any
        depth; values that are not nodes pass through unchanged. Usually
        applied to a raw matcher, so that f sees nodes rather than text.
        """

        def walk(value: Result, extractor: Extractor | None) -> Result:
            if is_node(value):
                return f(value, extractor)
            if isinstance(value, Mapping):
                return {k: walk(v, extractor) for k, v in value.items()}
            if isinstance(value, list | tuple):
                return [walk(v, extractor) for v in value]
            return value

        return self._map_ex(walk)

    def flat_map(self, f: Callable[[Result], Evaluator]) -> Matcher:
        """Monadic bind: choose the next matcher from this one's raw result.

        The raw result (nodes, not extracted values) is passed to f, and the
        matcher f returns is evaluated against the *original* node with the
        call-time extractor, not against the intermediate result.
        """
        inner = self.evaluate

        def run(node: Node, extractor: Extractor | None) -> Result:
            next_matcher = f(inner(node, identity))
            return next_matcher(node, extractor)

        return Matcher(run, parent=self)

    def as_int(self) -> Matcher:
        """Parse the leading number of the result as an int.

        ``"12 items"`` → 12, ``"1e3"`` → 1000, ``"2.9"`` → 2, ``"n/a"`` → 0.
        """
        return self.map(lambda value: _to_number(value, int))

    def as_float(self) -> Matcher:
        """Parse the leading number of the result (``"1.5 kg"`` → 1.5, ``"n/a"`` → 0.0)."""
        return self.map(lambda value: _to_number(value, float))

    def first(self) -> Matcher:
        """First element of a sequence result (first value of a dict), or None."""
        return self.map(_first)

    # ── Post-processing ────────────────────────────────────────────────────

    def regex(self, pattern: str | re2.Pattern[str]) -> Matcher:
        """Run a regular expression over the (string) result.

        Without named groups the positional captures are returned as a list
        (the whole match is left out). With any named group only the
        ``{name: capture}`` dict is returned. Lists and dicts of strings are
        processed element-wise, keeping their shape. No match yields an
        empty list (or empty dict for named patterns); None stays None.

        Raises:
            InvalidPatternError: If the pattern is not valid RE2 syntax, or
                is neither a string nor a compiled pattern.
        """
        compiled = _compile_pattern(pattern)
        named = sorted(compiled.groupindex.items(), key=lambda kv: kv[1])

        def apply(value: Result) -> Result:
            if value is None:
                return None
            if isinstance(value, str):
                m = compiled.search(value)
                if named:
                    return {} if m is None else {name: m.group(name) for name, _ in named}
                return [] if m is None else list(m.groups())
            if isinstance(value, Mapping):
                return {k: apply(v) for k, v in value.items()}
            if isinstance(value, list | tuple):
                return [apply(v) for v in value]
            msg = (
                "regex may only be applied to string or string-container results, "
                f"got {type(value).__name__}"
            )
            raise InvalidOperationError(msg)

        return self.map(apply)

    # ── Alternation ────────────────────────────────────────────────────────

    def seq_or(self, that: Matcher) -> Matcher:
        """Merge two query-based matchers, keeping document order.

        Evaluates ``"<this query> | <that query>"`` to get the union of
        matched nodes in document order, then emits for every node the value
        produced by whichever side matched it. A node matched by both sides
        takes this side's value.

        Raises:
            InvalidOperationError: If either side is not rooted in a plain
                query string.
        """
        this_root, this_query = _root_query(self)
        that_root, that_query = _root_query(that)
        union = multi(f"{this_query} | {that_query}").raw()
        this_raw = this_root.raw()
        that_raw = that_root.raw()
        logger.debug("seq_or union query: %s | %s", this_query, that_query)

        def run(node: Node, extractor: Extractor | None) -> Result:
            in_order = union(node, extractor)
            raw = _as_list(this_raw(node, extractor)) + _as_list(that_raw(node, extractor))
            matched = _as_list(self(node, extractor)) + _as_list(that(node, extractor))
            if len(raw) != len(matched):
                msg = (
                    "seq_or sides must produce one value per matched node, "
                    f"got {len(matched)} values for {len(raw)} nodes"
                )
                raise InvalidOperationError(msg)

            result = []
            for n in in_order:
                i = _index_of(n, raw)
                if i is not None:
                    result.append(matched[i])
            return result

        return Matcher(run, parent=union)


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def multi(path: Any, *paths: Any) -> Matcher:
    """Match every node a query finds.

    For a query string the extractor is applied to all matches and a list
    is returned (possibly empty). Any other path behaves like ``single``.

    Further paths are applied inside each matched node, at any depth of the
    first path's result: ``multi("//tr", {"name": "td[1]", "age": "td[2]"})``.

    Raises:
        InvalidPathError: If a path is not a recognized shape.
    """
    spec = as_path(path)

    def run(node: Node, extractor: Extractor | None) -> Result:
        extractor = resolve_extractor(extractor)
        match spec:
            case QueryPath(query=q):
                return [extractor(n) for n in query(node, q)]
            case _:
                return eval_path(node, spec, extractor)

    m = Matcher(run, parent=spec)
    if not paths:
        return m
    return m.raw().deep_map(multi(*paths))


def single(path: Any, *paths: Any) -> Matcher:
    """Match the first node a query finds, or None.

    Further paths work as in ``multi``.

    Raises:
        InvalidPathError: If a path is not a recognized shape.
    """
    spec = as_path(path)

    def run(node: Node, extractor: Extractor | None) -> Result:
        return eval_path(node, spec, resolve_extractor(extractor))

    m = Matcher(run, parent=spec)
    if not paths:
        return m
    return m.raw().deep_map(single(*paths))


def has(path: Any) -> Matcher:
    """True when the path matches at least one node."""
    return multi(path).map(lambda xs: len(xs) > 0)


def count(path: Any) -> Matcher:
    """Number of nodes the path matches."""
    return multi(path).map(len)


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _compile_pattern(pattern: str | re2.Pattern[str]) -> re2.Pattern[str]:
    if isinstance(pattern, str):
        try:
            return re2.compile(pattern)
        except re2.error as e:
            raise InvalidPatternError(pattern, str(e)) from e
    if hasattr(pattern, "search") and hasattr(pattern, "groupindex"):
        return pattern
    raise InvalidPatternError(
        repr(pattern),
        f"expected a pattern string or compiled pattern, got {type(pattern).__name__}",
    )


def _to_number(value: Any, kind: type[int] | type[float]) -> Any:
    match value:
        case None:
            return None
        case bool() | int() | float():
            return kind(value)
        case str():
            m = _NUMBER_PREFIX.match(value)
            if m is None:
                return kind(0)
            digits = m.group(0).strip()
            if kind is float:
                return float(digits)
            try:
                return int(digits)
            except ValueError:
                # fraction or exponent: "2.9", "1e3"
                return int(float(digits))
        case list() | tuple():
            return [_to_number(v, kind) for v in value]
        case _:
            msg = f"cannot convert {type(value).__name__} to {kind.__name__}"
            raise InvalidOperationError(msg)


def _first(value: Any) -> Any:
    match value:
        case None:
            return None
        case Mapping():
            return next(iter(value.values()), None)
        case list() | tuple():
            return value[0] if value else None
        case _:
            msg = f"first() expects a sequence or mapping result, got {type(value).__name__}"
            raise InvalidOperationError(msg)


def _root_query(m: Matcher) -> tuple[Matcher, str]:
    """Walk the parent chain down to the query string a matcher was built on.

    Returns the innermost Matcher (the one holding the path) and the query.
    """
    innermost = m
    current: Any = m
    while True:
        match current:
            case Matcher(parent=parent):
                innermost = current
                current = parent
            case FunctionPath(fn=Matcher() as inner):
                current = inner
            case QueryPath(query=q):
                return innermost, q
            case _:
                msg = "seq_or can only combine matchers built on a plain query string"
                raise InvalidOperationError(msg)


def _as_list(value: Result) -> list[Any]:
    return list(value) if isinstance(value, list | tuple) else [value]


def _index_of(node: Node, candidates: list[Any]) -> int | None:
    for i, candidate in enumerate(candidates):
        if same_node(node, candidate):
            return i
    return None
