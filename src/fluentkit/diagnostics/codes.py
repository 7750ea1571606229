"""Diagnostic codes and data structures.

Two catalogs live here:

- :class:`DiagnosticCode`: numeric codes for runtime (reference and
  resolution) errors reported by bundles.
- :class:`SyntaxCode`: the parser's E-code catalog. Each member renders
  the fixed message text attached to Junk annotations.

Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "SourceSpan",
    "SyntaxCode",
]


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Reference errors (missing messages, terms, variables)
        2000-2999: Resolution errors (runtime evaluation failures)
        3000-3999: Syntax errors (parser failures, surfaced from Junk)
    """

    # Reference errors (1000-1999)
    MESSAGE_NOT_FOUND = 1001
    ATTRIBUTE_NOT_FOUND = 1002
    TERM_NOT_FOUND = 1003
    TERM_ATTRIBUTE_NOT_FOUND = 1004
    VARIABLE_NOT_PROVIDED = 1005
    MESSAGE_NO_VALUE = 1006
    UNKNOWN_IDENTIFIER = 1007
    DUPLICATE_ENTRY = 1008

    # Resolution errors (2000-2999)
    CYCLIC_REFERENCE = 2001
    FUNCTION_NOT_FOUND = 2003
    FUNCTION_FAILED = 2004
    INVALID_ARGUMENT = 2007
    MAX_DEPTH_EXCEEDED = 2010
    FORMATTING_FAILED = 2014

    # Syntax errors (3000-3999)
    PARSE_JUNK = 3004


class SyntaxCode(StrEnum):
    """Parser diagnostic codes (E0001-E0029).

    The member value is the code itself; :meth:`format` renders the
    catalog message with positional arguments substituted.
    """

    E0001 = "E0001"
    E0002 = "E0002"
    E0003 = "E0003"
    E0004 = "E0004"
    E0005 = "E0005"
    E0006 = "E0006"
    E0007 = "E0007"
    E0008 = "E0008"
    E0009 = "E0009"
    E0010 = "E0010"
    E0011 = "E0011"
    E0012 = "E0012"
    E0013 = "E0013"
    E0014 = "E0014"
    E0015 = "E0015"
    E0016 = "E0016"
    E0017 = "E0017"
    E0018 = "E0018"
    E0019 = "E0019"
    E0020 = "E0020"
    E0021 = "E0021"
    E0022 = "E0022"
    E0025 = "E0025"
    E0026 = "E0026"
    E0027 = "E0027"
    E0028 = "E0028"
    E0029 = "E0029"

    def format(self, *arguments: str) -> str:
        """Render the catalog message for this code.

        Example:
            >>> SyntaxCode.E0003.format("}")
            'Expected token: "}"'
        """
        return _SYNTAX_MESSAGES[self].format(*arguments)


_SYNTAX_MESSAGES: dict[SyntaxCode, str] = {
    SyntaxCode.E0001: "Generic error",
    SyntaxCode.E0002: "Expected an entry start",
    SyntaxCode.E0003: 'Expected token: "{0}"',
    SyntaxCode.E0004: 'Expected a character from range: "{0}"',
    SyntaxCode.E0005: 'Expected message "{0}" to have a value or attributes',
    SyntaxCode.E0006: 'Expected term "-{0}" to have a value',
    SyntaxCode.E0007: "Expected a keyword",
    SyntaxCode.E0008: "The callee has to be an upper-case identifier or a term",
    SyntaxCode.E0009: "The argument name has to be a simple identifier",
    SyntaxCode.E0010: "Expected one of the variants to be marked as default (*)",
    SyntaxCode.E0011: 'Expected at least one variant after "->"',
    SyntaxCode.E0012: "Expected value",
    SyntaxCode.E0013: "Expected a variant key",
    SyntaxCode.E0014: "Expected literal",
    SyntaxCode.E0015: "Only one variant can be marked as default (*)",
    SyntaxCode.E0016: "Message references cannot be used as selectors",
    SyntaxCode.E0017: "Terms cannot be used as selectors",
    SyntaxCode.E0018: "Attributes of messages cannot be used as selectors",
    SyntaxCode.E0019: "Attributes of terms cannot be used as placeables",
    SyntaxCode.E0020: "Unterminated string expression",
    SyntaxCode.E0021: "Positional arguments must not follow named arguments",
    SyntaxCode.E0022: "Named arguments must be unique",
    SyntaxCode.E0025: "Unknown escape sequence: \\{0}.",
    SyntaxCode.E0026: "Invalid Unicode escape sequence: {0}.",
    SyntaxCode.E0027: "Unbalanced closing brace in TextElement.",
    SyntaxCode.E0028: "Expected an inline expression",
    SyntaxCode.E0029: "Nested placeables are not allowed",
}


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Source code location for error reporting.

    Note:
        Python strings measure positions in characters (Unicode code points),
        not bytes.

    Attributes:
        start: Starting character offset (0-indexed)
        end: Ending character offset (exclusive)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    start: int
    end: int
    line: int
    column: int

    def __post_init__(self) -> None:
        """Validate SourceSpan invariants."""
        if self.start < 0:
            msg = f"SourceSpan.start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"SourceSpan.end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)
        if self.line < 1 or self.column < 1:
            msg = f"SourceSpan line/column are 1-indexed, got {self.line}:{self.column}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Carries both the short human message (what ends up in ``str(error)``)
    and optional context for tooling.

    Attributes:
        code: Unique error code
        message: Human-readable error description
        span: Source location (None for runtime errors)
        hint: Suggestion for fixing the error
        help_url: Documentation URL for this error
        function_name: Function name where error occurred
        argument_name: Argument name that caused error
        expected_type: Expected type for argument
        received_type: Actual type received
        severity: Error severity level
    """

    code: DiagnosticCode
    message: str
    span: SourceSpan | None = None
    hint: str | None = None
    help_url: str | None = None
    function_name: str | None = None
    argument_name: str | None = None
    expected_type: str | None = None
    received_type: str | None = None
    severity: Literal["error", "warning"] = "error"

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like the Rust compiler.

        Example output:
            error[VARIABLE_NOT_PROVIDED]: Unknown variable: $name
              = help: Pass 'name' in the arguments mapping
              = note: see https://projectfluent.org/fluent/guide/variables.html
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
