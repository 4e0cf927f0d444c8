"""Conformance fixture loader and shared fixtures for xtract.

Loads YAML fixtures from tests/fixtures/ and converts them to xtract
matchers for parametrized testing. Each YAML document holds one markup
document and a list of cases, each with its own matcher and expectation.

Matcher specs use ``$``-prefixed keys so they can be told apart from
keyed paths anywhere a path is allowed::

    matcher:
      $multi: ["//tr", {name: "td[1]", age: {$single: ["td[2]"]}}]
      $ops: [first, as_int, {regex: "(\\d+)"}, {seq_or: {$multi: ["//p"]}}]
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from xtract import Matcher, count, has, multi, parse_html, parse_xml, single

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"

SPANS_HTML = '<div><span class="x">Hello</span><span>World</span></div>'

ARTICLE_HTML = """
<html><body>
  <h1>Title</h1>
  <p>One</p>
  <h2>Sub</h2>
  <p>Two</p>
  <ul id="tags"><li>python</li><!-- hidden --><li>xpath</li></ul>
</body></html>
"""


@dataclass
class FixtureCase:
    """A single test case from a conformance fixture."""

    fixture_name: str
    case_name: str
    matcher: Matcher
    document: Any
    expect: Any


# ─── YAML → xtract conversion ───────────────────────────────────────────────


def is_matcher_spec(spec: Any) -> bool:
    return isinstance(spec, dict) and any(str(k).startswith("$") for k in spec)


def parse_path(spec: Any) -> Any:
    """Parse a YAML path, turning nested matcher specs into Matchers."""
    if is_matcher_spec(spec):
        return parse_matcher(spec)
    if isinstance(spec, dict):
        return {k: parse_path(v) for k, v in spec.items()}
    if isinstance(spec, list):
        return [parse_path(v) for v in spec]
    return spec


def parse_matcher(spec: dict[str, Any]) -> Matcher:
    """Parse a matcher spec into a Matcher."""
    if "$multi" in spec:
        m = multi(*[parse_path(p) for p in spec["$multi"]])
    elif "$single" in spec:
        m = single(*[parse_path(p) for p in spec["$single"]])
    elif "$count" in spec:
        m = count(parse_path(spec["$count"]))
    elif "$has" in spec:
        m = has(parse_path(spec["$has"]))
    else:
        msg = f"Unknown matcher type: {spec}"
        raise ValueError(msg)

    for op in spec.get("$ops", []):
        m = apply_op(m, op)
    return m


def apply_op(m: Matcher, op: Any) -> Matcher:
    """Apply a single combinator from a ``$ops`` list."""
    if op == "first":
        return m.first()
    if op == "as_int":
        return m.as_int()
    if op == "as_float":
        return m.as_float()
    if isinstance(op, dict) and "regex" in op:
        return m.regex(op["regex"])
    if isinstance(op, dict) and "seq_or" in op:
        return m.seq_or(parse_matcher(op["seq_or"]))
    msg = f"Unknown op: {op}"
    raise ValueError(msg)


def parse_document(spec: dict[str, str]) -> Any:
    if "html" in spec:
        return parse_html(spec["html"])
    if "xml" in spec:
        return parse_xml(spec["xml"])
    msg = f"document must have 'html' or 'xml': {spec}"
    raise ValueError(msg)


# ─── Fixture loading ────────────────────────────────────────────────────────


def load_fixtures() -> list[FixtureCase]:
    """Load all conformance fixtures."""
    cases: list[FixtureCase] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file))
    return cases


def _load_file(path: Path) -> list[FixtureCase]:
    """Load a single fixture YAML file (may contain multiple documents)."""
    cases: list[FixtureCase] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            fixture_name = doc["name"]
            document = parse_document(doc["document"])
            for case in doc["cases"]:
                cases.append(
                    FixtureCase(
                        fixture_name=fixture_name,
                        case_name=case["name"],
                        matcher=parse_matcher(case["matcher"]),
                        document=document,
                        expect=case["expect"],
                    )
                )
    return cases


# ─── Shared fixtures ────────────────────────────────────────────────────────


@pytest.fixture
def spans() -> Any:
    return parse_html(SPANS_HTML)


@pytest.fixture
def article() -> Any:
    return parse_html(ARTICLE_HTML)
