"""Tests for parser config parsing (xtract._config)."""

import pytest

from xtract import (
    DEFAULT_PARSER_CONFIG,
    ConfigParseError,
    ParserConfig,
    multi,
    parse_html,
    parse_parser_config,
    parse_xml,
)


class TestParseParserConfig:
    def test_empty_dict_gives_defaults(self) -> None:
        assert parse_parser_config({}) == DEFAULT_PARSER_CONFIG

    def test_all_fields(self) -> None:
        config = parse_parser_config(
            {
                "remove_comments": True,
                "remove_blank_text": True,
                "huge_tree": True,
                "encoding": "utf-8",
                "resolve_entities": False,
            }
        )
        assert config == ParserConfig(
            remove_comments=True,
            remove_blank_text=True,
            huge_tree=True,
            encoding="utf-8",
        )

    def test_not_a_dict(self) -> None:
        with pytest.raises(ConfigParseError, match="expected dict"):
            parse_parser_config(["remove_comments"])  # type: ignore[arg-type]

    def test_unknown_key(self) -> None:
        with pytest.raises(ConfigParseError, match="unknown parser config keys"):
            parse_parser_config({"remove_comment": True})

    def test_bool_field_type(self) -> None:
        with pytest.raises(ConfigParseError, match="'huge_tree' must be a bool"):
            parse_parser_config({"huge_tree": "yes"})

    def test_encoding_type(self) -> None:
        with pytest.raises(ConfigParseError, match="'encoding' must be a string"):
            parse_parser_config({"encoding": 8})

    def test_config_is_frozen(self) -> None:
        config = ParserConfig()
        with pytest.raises(AttributeError):
            config.huge_tree = True  # type: ignore[misc]


class TestConfigAppliedToParsing:
    def test_remove_comments_html(self) -> None:
        html = "<ul><li>a</li><!-- c --><li>b</li></ul>"
        kept = parse_html(html)
        stripped = parse_html(html, ParserConfig(remove_comments=True))
        assert len(kept.xpath("//comment()")) == 1
        assert stripped.xpath("//comment()") == []

    def test_remove_comments_xml(self) -> None:
        xml = "<root><!-- c --><a/></root>"
        root = parse_xml(xml, parse_parser_config({"remove_comments": True}))
        assert root.xpath("//comment()") == []

    def test_from_html_accepts_config(self) -> None:
        m = multi("//comment()").raw().from_html(config=ParserConfig(remove_comments=True))
        assert m("<p><!-- x -->text</p>") == []
