"""Fluent FTL parser module.

Module Organization:
- core.py: Main FluentParser class and parse() entry point
- primitives.py: Basic parsers (identifiers, numbers, strings)
- whitespace.py: Whitespace handling and continuation detection
- rules.py: All grammar rules (patterns, expressions, entries)

Public API:
    FluentParser: Main parser class
    parse: Parse with default settings
    ParseContext: Parse context for depth tracking (advanced usage)
"""

from fluentkit.syntax.parser.core import FluentParser, parse
from fluentkit.syntax.parser.rules import ParseContext

__all__ = ["FluentParser", "ParseContext", "parse"]
