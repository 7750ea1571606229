"""Fluent exception hierarchy with structured diagnostics.

Resolution never raises these out of ``FluentBundle.format``; they are
collected into the caller's error list instead. The parser raises
:class:`FluentSyntaxError` internally and turns it into a Junk
annotation.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, SourceSpan, SyntaxCode

__all__ = [
    "FluentCyclicReferenceError",
    "FluentError",
    "FluentFormattingError",
    "FluentReferenceError",
    "FluentResolutionError",
    "FluentSyntaxError",
]


class FluentError(Exception):
    """Base exception for all Fluent errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize FluentError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.message)
        else:
            self.diagnostic = None
            super().__init__(message)

    @property
    def message(self) -> str:
        """Short human-readable message (same as ``str(error)``)."""
        return str(self)


class FluentSyntaxError(FluentError):
    """FTL syntax error.

    Raised inside the parser when a grammar rule is violated; the entry
    being parsed becomes Junk carrying one annotation built from this
    error. Bundles re-raise nothing: they return one FluentSyntaxError
    per annotation from ``add_resource``.

    Attributes:
        code: Catalog code (E0001-E0029)
        arguments: Positional message arguments
        position: Character offset of the failure (set by the parser)
        span: Line/column location, when known
    """

    def __init__(
        self,
        code: SyntaxCode | str,
        *arguments: str,
        position: int | None = None,
        span: SourceSpan | None = None,
    ) -> None:
        self.code = SyntaxCode(code)
        self.arguments = arguments
        self.position = position
        self.span = span
        super().__init__(self.code.format(*arguments))

    def __repr__(self) -> str:
        return f"FluentSyntaxError({self.code!s}, {str(self)!r})"


class FluentReferenceError(FluentError):
    """Unknown message, term, attribute or variable reference.

    Fallback: a ``{id}``-style placeholder in the output.
    """


class FluentCyclicReferenceError(FluentReferenceError):
    """Cyclic reference detected (message references itself).

    Example:
        hello = { hello }

    Fallback: ``{hello}`` placeholder.
    """


class FluentResolutionError(FluentError):
    """Runtime error during message resolution.

    Examples:
    - Unknown function
    - Invalid function argument or option
    - Reference chain exceeding the depth limit
    """


class FluentFormattingError(FluentResolutionError):
    """Locale-aware formatting failed inside NUMBER() or DATETIME().

    Attributes:
        fallback_value: Text to display instead of the formatted value
    """

    def __init__(self, message: str | Diagnostic, *, fallback_value: str = "") -> None:
        super().__init__(message)
        self.fallback_value = fallback_value
