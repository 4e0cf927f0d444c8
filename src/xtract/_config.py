"""Parser configuration for the document layer.

Pipelines themselves are built in code, not loaded from config. The only
configurable surface is how markup is turned into a tree:

  dict → parse_parser_config() → ParserConfig → parse_html() / parse_xml()

The dict shape is flat and may come from YAML, JSON or keyword arguments::

    {"remove_comments": true, "huge_tree": false, "encoding": "utf-8"}
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


class ConfigParseError(Exception):
    """Error parsing a config dict into a ParserConfig."""


@dataclass(frozen=True, slots=True)
class ParserConfig:
    """Options passed to the lxml HTML and XML parsers.

    ``resolve_entities`` only applies to XML and stays off by default so
    that untrusted documents cannot pull in external entities.
    """

    remove_comments: bool = False
    remove_blank_text: bool = False
    huge_tree: bool = False
    encoding: str | None = None
    resolve_entities: bool = False


DEFAULT_PARSER_CONFIG = ParserConfig()

_BOOL_FIELDS = frozenset(
    {"remove_comments", "remove_blank_text", "huge_tree", "resolve_entities"}
)


def parse_parser_config(data: dict[str, Any]) -> ParserConfig:
    """Parse a dict into a ParserConfig.

    Missing keys take their defaults. Unknown keys are rejected so that a
    typo does not silently fall back to default parsing.

    Raises:
        ConfigParseError: If the dict is malformed.
    """
    if not isinstance(data, dict):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigParseError(msg)

    known = {f.name for f in fields(ParserConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"unknown parser config keys: {unknown} (expected some of {sorted(known)})"
        raise ConfigParseError(msg)

    for key in _BOOL_FIELDS & data.keys():
        value = data[key]
        if not isinstance(value, bool):
            msg = f"'{key}' must be a bool, got {type(value).__name__}"
            raise ConfigParseError(msg)

    encoding = data.get("encoding")
    if encoding is not None and not isinstance(encoding, str):
        msg = f"'encoding' must be a string, got {type(encoding).__name__}"
        raise ConfigParseError(msg)

    return ParserConfig(**data)
