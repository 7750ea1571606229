"""Diagnostic system for Fluent errors.

Provides structured error diagnostics with codes, spans, hints, and help URLs,
plus the parser's E-code catalog.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, SourceSpan, SyntaxCode
from .errors import (
    FluentCyclicReferenceError,
    FluentError,
    FluentFormattingError,
    FluentReferenceError,
    FluentResolutionError,
    FluentSyntaxError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorTemplate",
    "FluentCyclicReferenceError",
    "FluentError",
    "FluentFormattingError",
    "FluentReferenceError",
    "FluentResolutionError",
    "FluentSyntaxError",
    "OutputFormat",
    "SourceSpan",
    "SyntaxCode",
]
