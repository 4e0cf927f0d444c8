"""xtract — Composable XPath extraction pipelines over HTML and XML.

All public types are exported from this module for flat imports:

    from xtract import multi, single, count, has, Matcher
"""

__version__ = "0.1.0"

# Config types — see xtract._config for details
from xtract._config import (
    DEFAULT_PARSER_CONFIG,
    ConfigParseError,
    ParserConfig,
    parse_parser_config,
)

# Document layer
from xtract._document import (
    children,
    is_node,
    parse_html,
    parse_xml,
    query,
    same_node,
    text_content,
)

# Errors
from xtract._errors import (
    DocumentParseError,
    IndexOutOfRangeError,
    InvalidOperationError,
    InvalidPathError,
    InvalidPatternError,
    InvalidQueryError,
    MatcherError,
)

# Extractors
from xtract._extractors import (
    DEFAULT_EXTRACTOR,
    distr,
    identity,
    normalize,
    oneline,
    resolve_extractor,
    text,
)

# Matcher and constructors
from xtract._matcher import Matcher, count, has, multi, single

# Paths
from xtract._path import (
    FunctionPath,
    IndexPath,
    KeyedPaths,
    PathSpec,
    QueryPath,
    as_path,
    eval_path,
)
from xtract._types import Evaluator, Extractor, Node, Result

__all__ = [
    # Protocols and aliases
    "Evaluator",
    "Extractor",
    "Node",
    "Result",
    # Matcher
    "Matcher",
    "multi",
    "single",
    "has",
    "count",
    # Paths
    "QueryPath",
    "IndexPath",
    "KeyedPaths",
    "FunctionPath",
    "PathSpec",
    "as_path",
    "eval_path",
    # Extractors
    "text",
    "oneline",
    "normalize",
    "identity",
    "distr",
    "resolve_extractor",
    "DEFAULT_EXTRACTOR",
    # Document layer
    "parse_html",
    "parse_xml",
    "query",
    "children",
    "text_content",
    "is_node",
    "same_node",
    # Config
    "ParserConfig",
    "DEFAULT_PARSER_CONFIG",
    "parse_parser_config",
    "ConfigParseError",
    # Errors
    "MatcherError",
    "InvalidPathError",
    "IndexOutOfRangeError",
    "InvalidOperationError",
    "InvalidQueryError",
    "InvalidPatternError",
    "DocumentParseError",
]
