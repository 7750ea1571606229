"""Fluent AST (Abstract Syntax Tree) node definitions.

Every node is a frozen, slotted dataclass. Editing a tree means building
a new one (see :mod:`fluentkit.syntax.visitor`). Includes type guards as
static methods (eliminates circular imports).

Spans are optional and declared with ``compare=False``: two trees parsed
with and without span tracking compare equal.

Python 3.13+. Zero external dependencies.
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, TypeIs

from fluentkit.enums import CommentType

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Base types
    "Span",
    "Annotation",
    "Identifier",
    # Resource structure
    "Resource",
    "Message",
    "Term",
    "Attribute",
    "Comment",
    "Junk",
    # Pattern elements
    "Pattern",
    "TextElement",
    "Placeable",
    # Expressions
    "SelectExpression",
    "Variant",
    "StringLiteral",
    "NumberLiteral",
    "VariableReference",
    "MessageReference",
    "TermReference",
    "FunctionReference",
    "CallArguments",
    "NamedArgument",
    # Type aliases
    "Entry",
    "PatternElement",
    "Expression",
    "InlineExpression",
    "VariantKey",
    "ASTNode",
]

# ============================================================================
# BASE TYPES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Span:
    """Source position span.

    Attributes:
        start: Starting character offset (inclusive)
        end: Ending character offset (exclusive)
        line: 1-indexed line of ``start``
        column: 1-indexed column of ``start``

    Example:
        Source: "hello = world"
        Message span: Span(start=0, end=13, line=1, column=1)
    """

    start: int
    end: int
    line: int | None = None
    column: int | None = None

    def __post_init__(self) -> None:
        """Validate span invariants."""
        if self.start < 0:
            msg = f"Span start must be >= 0, got {self.start}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Span end ({self.end}) must be >= start ({self.start})"
            raise ValueError(msg)


def _span() -> Any:
    # Spans never take part in structural equality or hashing.
    return field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class Annotation:
    """Parse error annotation attached to Junk.

    Attributes:
        code: Catalog code ("E0003")
        message: Rendered catalog message
        arguments: Positional message arguments
        span: Zero-width span at the failure position

    Example:
        Annotation(
            code="E0003",
            message='Expected token: "}"',
            arguments=("}",),
            span=Span(start=10, end=10),
        )
    """

    code: str
    message: str
    arguments: tuple[str, ...] = ()
    span: Span | None = _span()


@dataclass(frozen=True, slots=True)
class Identifier:
    """Identifier: [a-zA-Z][a-zA-Z0-9_-]*"""

    name: str
    span: Span | None = _span()

    @staticmethod
    def guard(key: object) -> TypeIs["Identifier"]:
        """Type guard for Identifier (used in variant keys)."""
        return isinstance(key, Identifier)


# ============================================================================
# TOP-LEVEL ENTRIES
# ============================================================================


@dataclass(frozen=True, slots=True)
class Resource:
    """Root AST node containing all entries, in source order."""

    entries: tuple["Entry", ...]
    span: Span | None = _span()


@dataclass(frozen=True, slots=True)
class Message:
    """Message definition.

    Invariant: ``value`` is None only when ``attributes`` is non-empty.

    Examples:
        hello = Hello, world!
        welcome = Welcome, { $name }!
        button = Save
            .tooltip = Click to save
    """

    id: Identifier
    value: "Pattern | None"
    attributes: tuple["Attribute", ...] = ()
    comment: "Comment | None" = None
    span: Span | None = _span()

    @staticmethod
    def guard(entry: object) -> TypeIs["Message"]:
        """Type guard for Message (used in entry filtering)."""
        return isinstance(entry, Message)

    def get_attribute(self, name: str) -> "Attribute | None":
        """Return the attribute called ``name``, if any."""
        return _find_attribute(self.attributes, name)


@dataclass(frozen=True, slots=True)
class Term:
    """Term definition. The id is stored without its leading ``-``.

    Example:
        -brand = Firefox
    """

    id: Identifier
    value: "Pattern"
    attributes: tuple["Attribute", ...] = ()
    comment: "Comment | None" = None
    span: Span | None = _span()

    @staticmethod
    def guard(entry: object) -> TypeIs["Term"]:
        """Type guard for Term (used in entry filtering)."""
        return isinstance(entry, Term)

    def get_attribute(self, name: str) -> "Attribute | None":
        """Return the attribute called ``name``, if any."""
        return _find_attribute(self.attributes, name)


@dataclass(frozen=True, slots=True)
class Attribute:
    """Message or term attribute.

    Example:
        login = Sign In
            .tooltip = Click here to sign in  <- attribute
    """

    id: Identifier
    value: "Pattern"
    span: Span | None = _span()


def _find_attribute(attributes: tuple[Attribute, ...], name: str) -> Attribute | None:
    for attribute in attributes:
        if attribute.id.name == name:
            return attribute
    return None


@dataclass(frozen=True, slots=True)
class Comment:
    """Comment (# single, ## group, ### resource).

    Group and resource comments are always standalone entries; a single
    ``#`` comment may be attached to the Message or Term that follows it.
    """

    content: str
    type: CommentType = CommentType.COMMENT
    span: Span | None = _span()

    @staticmethod
    def guard(entry: object) -> TypeIs["Comment"]:
        """Type guard for Comment (used in entry filtering)."""
        return isinstance(entry, Comment)


@dataclass(frozen=True, slots=True)
class Junk:
    """Unparseable content (syntax error recovery).

    Attributes:
        content: The unparseable source text, verbatim
        annotations: Parse errors with positions and messages
        span: Location of junk content in source
    """

    content: str
    annotations: tuple[Annotation, ...] = ()
    span: Span | None = _span()

    @staticmethod
    def guard(entry: object) -> TypeIs["Junk"]:
        """Type guard for Junk (used in entry filtering)."""
        return isinstance(entry, Junk)


# ============================================================================
# PATTERNS
# ============================================================================


@dataclass(frozen=True, slots=True)
class Pattern:
    """Text pattern with optional placeables."""

    elements: tuple["PatternElement", ...]
    span: Span | None = _span()


@dataclass(frozen=True, slots=True)
class TextElement:
    """Plain text segment."""

    value: str
    span: Span | None = _span()

    @staticmethod
    def guard(elem: object) -> TypeIs["TextElement"]:
        """Type guard for TextElement.

        Example:
            if TextElement.guard(elem):
                elem.value  # narrowed to TextElement
        """
        return isinstance(elem, TextElement)


@dataclass(frozen=True, slots=True)
class Placeable:
    """Dynamic content: { expression }

    Never wraps another Placeable.
    """

    expression: "Expression"
    span: Span | None = _span()

    @staticmethod
    def guard(elem: object) -> TypeIs["Placeable"]:
        """Type guard for Placeable."""
        return isinstance(elem, Placeable)


# ============================================================================
# EXPRESSIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class SelectExpression:
    """Conditional expression with variants.

    Exactly one variant carries ``default=True``.

    Example:
        { $count ->
            [one] 1 item
           *[other] { $count } items
        }
    """

    selector: "InlineExpression"
    variants: tuple["Variant", ...]
    span: Span | None = _span()

    @staticmethod
    def guard(expr: object) -> TypeIs["SelectExpression"]:
        """Type guard for SelectExpression."""
        return isinstance(expr, SelectExpression)

    @property
    def default_variant(self) -> "Variant":
        """The variant marked with ``*``."""
        return next(v for v in self.variants if v.default)


@dataclass(frozen=True, slots=True)
class Variant:
    """Single variant in select expression."""

    key: "VariantKey"
    value: "Pattern"
    default: bool = False
    span: Span | None = _span()


# ============================================================================
# LITERALS
# ============================================================================

_ESCAPE_PATTERN = re.compile(r"\\(?:(\\|\")|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{6}))")
_SURROGATE_RANGE = range(0xD800, 0xE000)
_MAX_CODE_POINT = 0x10FFFF


def _decode_escape(match: re.Match[str]) -> str:
    simple, short_hex, long_hex = match.groups()
    if simple:
        return simple
    code_point = int(short_hex or long_hex, 16)
    if code_point in _SURROGATE_RANGE or code_point > _MAX_CODE_POINT:
        return "\N{REPLACEMENT CHARACTER}"
    return chr(code_point)


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """String literal: "text"

    ``value`` keeps the raw source text between the quotes, escapes
    included. :meth:`unescaped` decodes it:
        \\" -> "
        \\\\ -> \\
        \\u0041, \\U01F600 -> code point (surrogates become U+FFFD)
    """

    value: str
    span: Span | None = _span()

    def unescaped(self) -> str:
        """Decode escape sequences in the raw value."""
        if "\\" not in self.value:
            return self.value
        return _ESCAPE_PATTERN.sub(_decode_escape, self.value)

    @classmethod
    def from_text(cls, text: str) -> "StringLiteral":
        """Build a literal whose unescaped value is ``text``.

        Only backslash and double quote are escaped.
        """
        return cls(value=text.replace("\\", "\\\\").replace('"', '\\"'))


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    """Number literal: 42, -3 or 3.14

    The raw field preserves the original token; ``value`` is an ``int``
    for integer tokens and a ``Decimal`` otherwise, so declared precision
    ("1.50" has two fraction digits) survives into plural selection and
    display.
    """

    value: int | Decimal
    """Parsed numeric value."""

    raw: str
    """Original source representation (for serialization)."""

    span: Span | None = _span()

    @staticmethod
    def guard(key: object) -> TypeIs["NumberLiteral"]:
        """Type guard for NumberLiteral (used in variant keys)."""
        return isinstance(key, NumberLiteral)

    @classmethod
    def from_raw(cls, raw: str) -> "NumberLiteral":
        """Build a literal from its source token."""
        value: int | Decimal = Decimal(raw) if "." in raw else int(raw)
        return cls(value=value, raw=raw)

    @property
    def precision(self) -> int:
        """Number of fraction digits as written in source."""
        _, dot, fraction = self.raw.partition(".")
        return len(fraction) if dot else 0


# ============================================================================
# REFERENCES
# ============================================================================


@dataclass(frozen=True, slots=True)
class VariableReference:
    """Variable reference: $variable"""

    id: Identifier
    span: Span | None = _span()

    @staticmethod
    def guard(expr: object) -> TypeIs["VariableReference"]:
        """Type guard for VariableReference."""
        return isinstance(expr, VariableReference)


@dataclass(frozen=True, slots=True)
class MessageReference:
    """Message reference: message-id or message-id.attribute"""

    id: Identifier
    attribute: Identifier | None = None
    span: Span | None = _span()

    @staticmethod
    def guard(expr: object) -> TypeIs["MessageReference"]:
        """Type guard for MessageReference."""
        return isinstance(expr, MessageReference)


@dataclass(frozen=True, slots=True)
class TermReference:
    """Term reference: -term-id, -term-id.attribute or -term-id(name: "v")"""

    id: Identifier
    attribute: Identifier | None = None
    arguments: "CallArguments | None" = None
    span: Span | None = _span()

    @staticmethod
    def guard(expr: object) -> TypeIs["TermReference"]:
        """Type guard for TermReference."""
        return isinstance(expr, TermReference)


@dataclass(frozen=True, slots=True)
class FunctionReference:
    """Function call: FUNCTION(arg1, key: value)"""

    id: Identifier
    arguments: "CallArguments"
    span: Span | None = _span()

    @staticmethod
    def guard(expr: object) -> TypeIs["FunctionReference"]:
        """Type guard for FunctionReference."""
        return isinstance(expr, FunctionReference)


@dataclass(frozen=True, slots=True)
class CallArguments:
    """Function or term call arguments."""

    positional: tuple["InlineExpression", ...] = ()
    named: tuple["NamedArgument", ...] = ()
    span: Span | None = _span()


@dataclass(frozen=True, slots=True)
class NamedArgument:
    """Named argument: name: value (value is always a literal)"""

    name: Identifier
    value: "StringLiteral | NumberLiteral"
    span: Span | None = _span()


# ============================================================================
# TYPE ALIASES
# ============================================================================

type Entry = Message | Term | Comment | Junk
type PatternElement = TextElement | Placeable
type Expression = SelectExpression | InlineExpression
type InlineExpression = (
    StringLiteral
    | NumberLiteral
    | VariableReference
    | MessageReference
    | TermReference
    | FunctionReference
)
type VariantKey = Identifier | NumberLiteral

# Complete ASTNode type - union of all AST node types
type ASTNode = (
    Resource
    | Message
    | Term
    | Attribute
    | Comment
    | Junk
    | Pattern
    | TextElement
    | Placeable
    | SelectExpression
    | Variant
    | StringLiteral
    | NumberLiteral
    | VariableReference
    | MessageReference
    | TermReference
    | FunctionReference
    | CallArguments
    | NamedArgument
    | Identifier
    | Annotation
    | Span
)
