"""
inline-snippets: Inline GitHub code snippets into Markdown document trees.

Links labelled ``inline`` that point at a line range of a file on GitHub are
replaced with a code block holding exactly those lines.

CLI Usage:
    inline-snippets build/post.json

Library Usage:
    from inline_snippets import SnippetConfig, inline_snippets_sync
    from inline_snippets.serialization import dumps, loads

    tree = loads(Path("build/post.json").read_text())
    inline_snippets_sync(tree, SnippetConfig(origin_comment="Source: <url>"))
    print(dumps(tree))
"""

from .config import ConfigError, SnippetConfig, build_config
from .exceptions import FetchError, MalformedReferenceError, SerializationError, SnippetError
from .extractor import extract_lines
from .languages import LanguageHandler, resolve_language
from .locator import MatchRecord, locate_matches
from .models import TransformState
from .nodes import Code, Link, Node, Parent, Text
from .reference import SnippetReference, parse_reference, raw_content_url
from .transform import (
    SnippetInliner,
    create_transformer,
    inline_snippets,
    inline_snippets_sync,
)

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "inline_snippets",
    "inline_snippets_sync",
    "create_transformer",
    "SnippetInliner",
    "locate_matches",
    "parse_reference",
    "raw_content_url",
    "extract_lines",
    "resolve_language",
    # Data models
    "Node",
    "Parent",
    "Link",
    "Text",
    "Code",
    "MatchRecord",
    "SnippetReference",
    "LanguageHandler",
    "TransformState",
    # Configuration
    "SnippetConfig",
    "build_config",
    # Exceptions
    "ConfigError",
    "FetchError",
    "MalformedReferenceError",
    "SerializationError",
    "SnippetError",
    # Version
    "__version__",
]
