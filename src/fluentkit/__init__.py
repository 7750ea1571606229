"""fluentkit - Fluent (FTL) localization with error-recovering parsing.

Parses FTL source into an AST that keeps going past malformed entries,
serializes it back to text, and formats messages at runtime with
CLDR-backed plurals, numbers and dates (via Babel).

Public API:
    FluentBundle - Single-locale message formatting
    FluentSequence - Locale fallback over several bundles
    parse_ftl - Parse FTL source to AST
    serialize_ftl - Serialize AST to FTL source

Exceptions:
    FluentError - Base exception class
    FluentSyntaxError - Parse errors
    FluentReferenceError - Unknown message/term/variable references
    FluentResolutionError - Runtime resolution errors

Submodules:
    fluentkit.syntax - Scanner, parser, AST, serializer and visitors
    fluentkit.runtime - Bundle, resolver, scope and built-in functions
    fluentkit.localization - FluentSequence and FallbackInfo
    fluentkit.diagnostics - Error types, codes and templates
"""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

from .diagnostics import (
    FluentError,
    FluentReferenceError,
    FluentResolutionError,
    FluentSyntaxError,
)
from .localization import FluentSequence
from .runtime import FluentBundle
from .syntax import parse as parse_ftl
from .syntax import serialize as serialize_ftl

# pyproject.toml [project] version is the single source of truth.
try:
    __version__ = _get_version("fluentkit")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "FluentBundle",
    "FluentError",
    "FluentReferenceError",
    "FluentResolutionError",
    "FluentSequence",
    "FluentSyntaxError",
    "__version__",
    "parse_ftl",
    "serialize_ftl",
]
