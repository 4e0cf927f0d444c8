"""Conformance tests for xtract.

Loads YAML fixtures from tests/fixtures/ and evaluates every case's
matcher against the fixture document.

Run with: uv run pytest tests/test_conformance.py -v
"""

from __future__ import annotations

import pytest
from conftest import FixtureCase, load_fixtures

_CASES = load_fixtures()


@pytest.mark.parametrize(
    "case",
    _CASES,
    ids=[f"{c.fixture_name}::{c.case_name}" for c in _CASES],
)
def test_conformance(case: FixtureCase) -> None:
    assert case.matcher(case.document) == case.expect


def test_fixtures_loaded() -> None:
    assert len(_CASES) > 20
