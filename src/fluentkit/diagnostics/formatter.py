"""Render bundle errors for terminals, logs and tooling.

``FluentBundle.add_resource`` returns FluentSyntaxError objects and
``FluentBundle.format`` collects FluentError objects; both render here,
as do bare Diagnostic records:

    >>> errors = bundle.add_resource("-term =\\n", source_path="app.ftl")
    >>> print(DiagnosticFormatter(source_name="app.ftl").format(errors[0]))
    error[E0006]: Expected term "-term" to have a value
      --> app.ftl:1:8

Python 3.13+. Zero external dependencies.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from .codes import Diagnostic, SourceSpan
from .errors import FluentError, FluentSyntaxError

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Multi-line compiler style (default)
    SIMPLE = "simple"  # Single line
    JSON = "json"  # One JSON object per error


@dataclass(frozen=True, slots=True)
class _Entry:
    """What every renderer needs, whatever the error's origin."""

    code: str
    message: str
    severity: str = "error"
    span: SourceSpan | None = None
    details: tuple[tuple[str, str], ...] = ()
    hint: str | None = None
    help_url: str | None = None


_DETAIL_FIELDS = (
    ("function", "function_name"),
    ("argument", "argument_name"),
    ("expected", "expected_type"),
    ("received", "received_type"),
)


def _from_diagnostic(diagnostic: Diagnostic) -> _Entry:
    details = tuple(
        (label, value)
        for label, name in _DETAIL_FIELDS
        if (value := getattr(diagnostic, name))
    )
    return _Entry(
        code=diagnostic.code.name,
        message=diagnostic.message,
        severity=diagnostic.severity,
        span=diagnostic.span,
        details=details,
        hint=diagnostic.hint,
        help_url=diagnostic.help_url,
    )


def _to_entry(item: Diagnostic | FluentError) -> _Entry:
    match item:
        case Diagnostic():
            return _from_diagnostic(item)
        case FluentSyntaxError():
            return _Entry(code=str(item.code), message=str(item), span=item.span)
        case FluentError(diagnostic=Diagnostic() as diagnostic):
            return _from_diagnostic(diagnostic)
    return _Entry(code=type(item).__name__, message=str(item))


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Formats syntax errors, resolution errors and diagnostics.

    Attributes:
        output_format: Output style (rust, simple, json)
        source_name: File name shown in locations, e.g. "locales/lv/ui.ftl"
        max_content_length: Truncate messages and hints to this many
            characters (None keeps them whole)

    Example:
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(ErrorTemplate.unknown_variable("name")))
        VARIABLE_NOT_PROVIDED: Unknown variable: $name
    """

    output_format: OutputFormat = OutputFormat.RUST
    source_name: str | None = None
    max_content_length: int | None = None

    def format(self, item: Diagnostic | FluentError) -> str:
        """Format a single error or diagnostic."""
        entry = _to_entry(item)
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(entry)
            case OutputFormat.SIMPLE:
                return self._format_simple(entry)
            case OutputFormat.JSON:
                return self._format_json(entry)

    def format_errors(self, items: Iterable[Diagnostic | FluentError]) -> str:
        """Format several errors: blank-line separated, or one JSON object per line."""
        separator = "\n" if self.output_format is OutputFormat.JSON else "\n\n"
        return separator.join(self.format(item) for item in items)

    def _location(self, span: SourceSpan) -> str:
        if self.source_name:
            return f"{self.source_name}:{span.line}:{span.column}"
        return f"line {span.line}, column {span.column}"

    def _format_rust(self, entry: _Entry) -> str:
        parts = [f"{entry.severity}[{entry.code}]: {self._clip(entry.message)}"]
        if entry.span:
            parts.append(f"  --> {self._location(entry.span)}")
        parts.extend(f"  = {label}: {value}" for label, value in entry.details)
        if entry.hint:
            parts.append(f"  = help: {self._clip(entry.hint)}")
        if entry.help_url:
            parts.append(f"  = note: see {entry.help_url}")
        return "\n".join(parts)

    def _format_simple(self, entry: _Entry) -> str:
        text = f"{entry.code}: {self._clip(entry.message)}"
        if entry.span:
            return f"{self._location(entry.span)}: {text}"
        return text

    def _format_json(self, entry: _Entry) -> str:
        data: dict[str, object] = {
            "code": entry.code,
            "severity": entry.severity,
            "message": self._clip(entry.message),
        }
        if self.source_name:
            data["source"] = self.source_name
        if entry.span:
            data.update(
                line=entry.span.line,
                column=entry.span.column,
                start=entry.span.start,
                end=entry.span.end,
            )
        if entry.details:
            data["details"] = dict(entry.details)
        if entry.hint:
            data["hint"] = self._clip(entry.hint)
        if entry.help_url:
            data["help_url"] = entry.help_url
        return json.dumps(data, ensure_ascii=False)

    def _clip(self, text: str) -> str:
        if self.max_content_length is not None and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
