"""Document layer: markup parsing and tree access on top of lxml.

The matcher core only needs a handful of operations from the tree:
parse markup into a root node, run an XPath query, list a node's element
children, and read a node's text. They live here so that nothing else in
the package touches lxml directly.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from lxml import etree

from xtract._config import DEFAULT_PARSER_CONFIG
from xtract._errors import DocumentParseError, InvalidOperationError, InvalidQueryError

if TYPE_CHECKING:
    from xtract._config import ParserConfig
    from xtract._types import Node

logger = logging.getLogger(__name__)


def parse_html(text: str | bytes, config: ParserConfig | None = None) -> Node:
    """Parse HTML into its root element.

    Recovers from malformed markup the way browsers do and never raises for
    bad input. Empty input yields an empty ``<html>`` element. ``str`` input
    is parsed as UTF-8; ``config.encoding`` applies to ``bytes`` input.
    """
    config = config or DEFAULT_PARSER_CONFIG
    # lxml refuses str input that carries an XML declaration (XHTML).
    if isinstance(text, str):
        data = text.encode("utf-8")
        encoding = "utf-8"
    else:
        data = text
        encoding = config.encoding
    parser = etree.HTMLParser(
        recover=True,
        encoding=encoding,
        remove_comments=config.remove_comments,
        remove_blank_text=config.remove_blank_text,
        huge_tree=config.huge_tree,
    )
    logger.debug("parsing HTML document (%d bytes)", len(data))
    root = etree.HTML(data, parser) if data else None
    if root is None:
        return etree.Element("html")
    return root


def parse_xml(text: str | bytes, config: ParserConfig | None = None) -> Node:
    """Parse XML into its root element.

    Raises:
        DocumentParseError: If the document is not well-formed.
    """
    config = config or DEFAULT_PARSER_CONFIG
    parser = etree.XMLParser(
        encoding=config.encoding,
        remove_comments=config.remove_comments,
        remove_blank_text=config.remove_blank_text,
        huge_tree=config.huge_tree,
        resolve_entities=config.resolve_entities,
    )
    # lxml refuses str input that carries an encoding declaration.
    data = text.encode("utf-8") if isinstance(text, str) else text
    logger.debug("parsing XML document (%d bytes)", len(data))
    try:
        return etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        msg = f"malformed XML: {e}"
        raise DocumentParseError(msg) from e


def is_node(value: object) -> bool:
    """Whether value is an element of a parsed tree."""
    return isinstance(value, etree._Element)


def query(node: Node, q: str) -> list[Node]:
    """Evaluate an XPath query against node, in document order.

    Scalar results (``count(...)``, ``string(...)``, boolean tests) are
    returned as a one-element list so callers always get a sequence.

    Raises:
        InvalidQueryError: If lxml rejects the expression.
        InvalidOperationError: If node is not an element.
    """
    if not is_node(node):
        msg = f"cannot run query {q!r} against {type(node).__name__}, expected an element"
        raise InvalidOperationError(msg)
    try:
        result = node.xpath(q)
    except etree.XPathError as e:
        logger.debug("query %r rejected by XPath engine: %s", q, e)
        raise InvalidQueryError(q, str(e)) from e
    if isinstance(result, list):
        return result
    return [result]


def children(node: Node) -> list[Node]:
    """Element children of node in document order (comments and PIs skipped)."""
    if not is_node(node):
        return []
    return [child for child in node if isinstance(child.tag, str)]


def text_content(node: Node) -> str:
    """Text of node and its descendants, whitespace untouched."""
    if is_node(node):
        return etree.tostring(node, method="text", encoding="unicode", with_tail=False)
    if node is None:
        return ""
    return str(node)


def same_node(a: object, b: object) -> bool:
    """Whether a and b refer to the same place in the same document.

    Elements compare by reference. XPath string results (attribute values,
    text nodes) are fresh objects on every query, so they compare by owning
    element, kind and value.
    """
    if a is b:
        return True
    if is_node(a) or is_node(b):
        return False
    get_a = getattr(a, "getparent", None)
    get_b = getattr(b, "getparent", None)
    if get_a is not None and get_b is not None:
        return (
            get_a() is get_b()
            and getattr(a, "attrname", None) == getattr(b, "attrname", None)
            and getattr(a, "is_text", None) == getattr(b, "is_text", None)
            and getattr(a, "is_tail", None) == getattr(b, "is_tail", None)
            and str(a) == str(b)
        )
    return a == b
