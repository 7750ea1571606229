"""Grammar rules for the FTL parser.

This module provides all parsing rules for FTL grammar constructs:
- Pattern parsing (text elements, placeables, multiline dedent)
- Expression parsing (inline expressions, select expressions, calls)
- Entry parsing (messages, terms, attributes, comments)

Every rule takes the shared :class:`~fluentkit.syntax.scanner.Scanner`
plus a :class:`ParseContext`, consumes its construct, and returns the
AST node. A violated rule raises
:class:`~fluentkit.diagnostics.FluentSyntaxError`; the entry loop in
:mod:`.core` turns it into Junk.

Lookahead Patterns:
    - ``{`` starts a Placeable (a second ``{`` inside one is E0029)
    - ``$`` starts a VariableReference
    - ``-`` followed by a digit starts a number, otherwise a TermReference
    - ``NAME(`` starts a FunctionReference, other identifiers are
      MessageReferences
    - ``->`` after an inline expression turns it into a selector
    - ``[`` / ``*[`` start variants, ``.`` starts an attribute
"""

import re
from dataclasses import dataclass, replace

from fluentkit.constants import MAX_DEPTH
from fluentkit.diagnostics import FluentSyntaxError, SyntaxCode
from fluentkit.enums import CommentType
from fluentkit.syntax.ast import (
    Attribute,
    CallArguments,
    Comment,
    Expression,
    FunctionReference,
    Identifier,
    InlineExpression,
    Message,
    MessageReference,
    NamedArgument,
    NumberLiteral,
    Pattern,
    PatternElement,
    Placeable,
    SelectExpression,
    Span,
    StringLiteral,
    Term,
    TermReference,
    TextElement,
    VariableReference,
    Variant,
)
from fluentkit.syntax.parser.primitives import (
    parse_identifier,
    parse_literal,
    parse_number,
    parse_string_literal,
)
from fluentkit.syntax.parser.whitespace import (
    is_attribute_start,
    is_next_line_comment,
    is_value_continuation,
    is_value_start,
    is_variant_start,
    peek_blank,
    peek_blank_block,
    peek_blank_inline,
    skip_blank,
    skip_blank_inline,
)
from fluentkit.syntax.scanner import EOL, Scanner

__all__ = ["ParseContext", "parse_comment", "parse_message", "parse_term"]

_FUNCTION_NAME = re.compile(r"^[A-Z][A-Z0-9_-]*$")
_TRAILING_BLANK = re.compile(r"[ \n\r]+$")
_MAX_COMMENT_LEVEL = 2


@dataclass(slots=True)
class ParseContext:
    """Explicit context for parsing operations.

    Attributes:
        with_spans: Attach a Span to every node built
        max_nesting_depth: Maximum select-in-placeable nesting depth
        current_depth: Current nesting depth (0 = top level)
    """

    with_spans: bool = False
    max_nesting_depth: int = MAX_DEPTH
    current_depth: int = 0

    def is_depth_exceeded(self) -> bool:
        """Check if maximum nesting depth has been exceeded."""
        return self.current_depth >= self.max_nesting_depth

    def enter_placeable(self) -> "ParseContext":
        """Create new context with incremented depth for entering a placeable."""
        return ParseContext(
            with_spans=self.with_spans,
            max_nesting_depth=self.max_nesting_depth,
            current_depth=self.current_depth + 1,
        )

    def spanned[N](self, node: N, scanner: Scanner, start: int) -> N:
        """Attach ``Span(start, scanner.index)`` to ``node`` when tracking spans."""
        if not self.with_spans:
            return node
        line, column = scanner.line_cache.get_line_col(start)
        return replace(node, span=Span(start, scanner.index, line, column))  # type: ignore[type-var]


# =============================================================================
# Pattern Parsing
# =============================================================================


@dataclass(slots=True)
class _Indent:
    """Blank lines plus indentation between two lines of a block pattern.

    Exists only until dedent() folds it into text elements.
    """

    value: str
    start: int
    end: int


def _parse_text_element(scanner: Scanner, ctx: ParseContext) -> TextElement:
    start = scanner.index
    buffer = ""
    while (char := scanner.current_char) is not None:
        if char in ("{", "}", EOL):
            break
        buffer += char
        scanner.advance()
    return ctx.spanned(TextElement(buffer), scanner, start)


def _dedent(
    elements: list[TextElement | Placeable | _Indent],
    common_indent: int | None,
    ctx: ParseContext,
    scanner: Scanner,
) -> tuple[PatternElement, ...]:
    """Strip the common indent and merge adjacent text.

    Each _Indent loses ``common_indent`` trailing spaces (its own indent
    beyond the common one is kept as text). Adjacent text pieces merge
    into one TextElement; trailing blanks of the last one are trimmed.
    """
    trimmed: list[PatternElement] = []
    # Start offsets of merged text runs, used to span merged elements.
    starts: list[int] = []

    for element in elements:
        if isinstance(element, Placeable):
            trimmed.append(element)
            starts.append(element.span.start if element.span else 0)
            continue

        if isinstance(element, _Indent):
            cut = len(element.value) - (common_indent or 0)
            text = element.value[: max(cut, 0)]
            if not text:
                continue
            piece_start, piece_end = element.start, element.end
        else:
            text = element.value
            piece_start = element.span.start if element.span else 0
            piece_end = element.span.end if element.span else 0

        if trimmed and isinstance(trimmed[-1], TextElement):
            merged = TextElement(trimmed[-1].value + text)
            if ctx.with_spans:
                merged = _with_span(merged, scanner, starts[-1], piece_end)
            trimmed[-1] = merged
            continue

        node = TextElement(text)
        if ctx.with_spans:
            node = _with_span(node, scanner, piece_start, piece_end)
        trimmed.append(node)
        starts.append(piece_start)

    if trimmed and isinstance(trimmed[-1], TextElement):
        last = trimmed[-1]
        value = _TRAILING_BLANK.sub("", last.value)
        if value:
            trimmed[-1] = replace(last, value=value)
        else:
            trimmed.pop()

    return tuple(trimmed)


def _with_span[N](node: N, scanner: Scanner, start: int, end: int) -> N:
    line, column = scanner.line_cache.get_line_col(start)
    return replace(node, span=Span(start, end, line, column))  # type: ignore[type-var]


def parse_pattern(scanner: Scanner, ctx: ParseContext, *, is_block: bool) -> Pattern:
    """Parse a pattern that starts at the current position.

    Block patterns (starting on the line after ``=``) measure their
    first line's indent; inline patterns start with no common indent and
    take it from their continuation lines.

    Examples:
        hello = Hello, { $name }!
        multi =
            First line
              indented second line
    """
    start = scanner.index
    elements: list[TextElement | Placeable | _Indent] = []
    common_indent: int | None

    if is_block:
        first_indent = skip_blank_inline(scanner)
        elements.append(_Indent(first_indent, start, scanner.index))
        common_indent = len(first_indent)
    else:
        common_indent = None

    while (char := scanner.current_char) is not None:
        match char:
            case "\n":
                blank_start = scanner.index
                blank_lines = peek_blank_block(scanner)
                if not is_value_continuation(scanner):
                    scanner.reset_peek()
                    break
                scanner.skip_to_peek()
                indent = skip_blank_inline(scanner)
                common_indent = (
                    len(indent) if common_indent is None else min(common_indent, len(indent))
                )
                elements.append(_Indent(blank_lines + indent, blank_start, scanner.index))
            case "{":
                elements.append(parse_placeable(scanner, ctx))
            case "}":
                raise FluentSyntaxError(SyntaxCode.E0027)
            case _:
                elements.append(_parse_text_element(scanner, ctx))

    pattern = Pattern(_dedent(elements, common_indent, ctx, scanner))
    return ctx.spanned(pattern, scanner, start)


def maybe_parse_pattern(scanner: Scanner, ctx: ParseContext) -> Pattern | None:
    """Parse the value after ``=`` or ``]``, if there is one.

    Returns None when the line ends without a value and the next line is
    not an indented continuation.
    """
    peek_blank_inline(scanner)
    if is_value_start(scanner):
        scanner.skip_to_peek()
        return parse_pattern(scanner, ctx, is_block=False)

    peek_blank_block(scanner)
    if is_value_continuation(scanner):
        scanner.skip_to_peek()
        return parse_pattern(scanner, ctx, is_block=True)

    return None


# =============================================================================
# Expression Parsing
# =============================================================================


def parse_variant_key(scanner: Scanner, ctx: ParseContext) -> Identifier | NumberLiteral:
    """Parse variant key: identifier or number ([one], [0], [-1.5])."""
    start = scanner.index
    char = scanner.current_char
    if char is None:
        raise FluentSyntaxError(SyntaxCode.E0013)
    if scanner.is_digit(char) or char == "-":
        return ctx.spanned(parse_number(scanner), scanner, start)
    return ctx.spanned(parse_identifier(scanner), scanner, start)


def parse_variant(scanner: Scanner, ctx: ParseContext, *, has_default: bool) -> Variant:
    """Parse one variant: [key] pattern or *[key] pattern."""
    start = scanner.index
    default = False
    if scanner.current_char == "*":
        if has_default:
            raise FluentSyntaxError(SyntaxCode.E0015)
        scanner.advance()
        default = True

    scanner.expect_char("[")
    skip_blank(scanner)
    key = parse_variant_key(scanner, ctx)
    skip_blank(scanner)
    scanner.expect_char("]")

    value = maybe_parse_pattern(scanner, ctx)
    if value is None:
        raise FluentSyntaxError(SyntaxCode.E0012)

    return ctx.spanned(Variant(key=key, value=value, default=default), scanner, start)


def parse_variants(scanner: Scanner, ctx: ParseContext) -> tuple[Variant, ...]:
    """Parse the variant list of a select expression.

    Raises:
        FluentSyntaxError: E0011 without variants, E0010 without a default,
            E0015 with more than one default
    """
    variants: list[Variant] = []
    has_default = False
    skip_blank(scanner)

    while is_variant_start(scanner):
        variant = parse_variant(scanner, ctx, has_default=has_default)
        has_default = has_default or variant.default
        variants.append(variant)
        scanner.expect_line_end()
        skip_blank(scanner)

    if not variants:
        raise FluentSyntaxError(SyntaxCode.E0011)
    if not has_default:
        raise FluentSyntaxError(SyntaxCode.E0010)

    return tuple(variants)


def _parse_call_argument(
    scanner: Scanner, ctx: ParseContext
) -> InlineExpression | NamedArgument:
    start = scanner.index
    expression = parse_inline_expression(scanner, ctx)
    skip_blank(scanner)

    if scanner.current_char != ":":
        return expression

    match expression:
        case MessageReference(attribute=None):
            scanner.advance()
            skip_blank(scanner)
            value_start = scanner.index
            value = ctx.spanned(parse_literal(scanner), scanner, value_start)
            return ctx.spanned(NamedArgument(expression.id, value), scanner, start)
        case _:
            raise FluentSyntaxError(SyntaxCode.E0009)


def parse_call_arguments(scanner: Scanner, ctx: ParseContext) -> CallArguments:
    """Parse call arguments: (pos1, pos2, name: "value")

    Raises:
        FluentSyntaxError: E0021 for a positional argument after a named
            one, E0022 for a repeated argument name
    """
    start = scanner.index
    positional: list[InlineExpression] = []
    named: list[NamedArgument] = []
    seen_names: set[str] = set()

    scanner.expect_char("(")
    skip_blank(scanner)

    while scanner.current_char != ")":
        argument = _parse_call_argument(scanner, ctx)
        if isinstance(argument, NamedArgument):
            if argument.name.name in seen_names:
                raise FluentSyntaxError(SyntaxCode.E0022)
            named.append(argument)
            seen_names.add(argument.name.name)
        elif seen_names:
            raise FluentSyntaxError(SyntaxCode.E0021)
        else:
            positional.append(argument)

        skip_blank(scanner)
        if scanner.current_char != ",":
            break
        scanner.advance()
        skip_blank(scanner)

    scanner.expect_char(")")
    return ctx.spanned(CallArguments(tuple(positional), tuple(named)), scanner, start)


def _parse_attribute_accessor(scanner: Scanner, ctx: ParseContext) -> Identifier | None:
    if scanner.current_char != ".":
        return None
    scanner.advance()
    start = scanner.index
    return ctx.spanned(parse_identifier(scanner), scanner, start)


def parse_inline_expression(scanner: Scanner, ctx: ParseContext) -> InlineExpression:
    """Parse an inline expression (anything but a select expression).

    Raises:
        FluentSyntaxError: E0029 for a nested placeable, E0008 for a
            lower-case callee, E0028 when no expression starts here
    """
    start = scanner.index
    char = scanner.current_char

    if char == "{":
        raise FluentSyntaxError(SyntaxCode.E0029)

    if scanner.is_number_start():
        return ctx.spanned(parse_number(scanner), scanner, start)

    match char:
        case '"':
            return ctx.spanned(parse_string_literal(scanner), scanner, start)

        case "$":
            scanner.advance()
            id_start = scanner.index
            identifier = ctx.spanned(parse_identifier(scanner), scanner, id_start)
            return ctx.spanned(VariableReference(identifier), scanner, start)

        case "-":
            scanner.advance()
            id_start = scanner.index
            identifier = ctx.spanned(parse_identifier(scanner), scanner, id_start)
            attribute = _parse_attribute_accessor(scanner, ctx)
            arguments = None
            peek_blank(scanner)
            if scanner.current_peek == "(":
                scanner.skip_to_peek()
                arguments = parse_call_arguments(scanner, ctx)
            else:
                scanner.reset_peek()
            return ctx.spanned(TermReference(identifier, attribute, arguments), scanner, start)

    if scanner.is_char_id_start(char):
        identifier = ctx.spanned(parse_identifier(scanner), scanner, start)
        peek_blank(scanner)

        if scanner.current_peek == "(":
            if not _FUNCTION_NAME.match(identifier.name):
                raise FluentSyntaxError(SyntaxCode.E0008)
            scanner.skip_to_peek()
            arguments = parse_call_arguments(scanner, ctx)
            return ctx.spanned(FunctionReference(identifier, arguments), scanner, start)

        scanner.reset_peek()
        attribute = _parse_attribute_accessor(scanner, ctx)
        return ctx.spanned(MessageReference(identifier, attribute), scanner, start)

    raise FluentSyntaxError(SyntaxCode.E0028)


def parse_expression(scanner: Scanner, ctx: ParseContext) -> Expression:
    """Parse the expression inside a placeable, including select expressions.

    Raises:
        FluentSyntaxError: E0016/E0017/E0018 for references that cannot
            be selectors, E0019 for a term attribute used as a value
    """
    start = scanner.index
    selector = parse_inline_expression(scanner, ctx)
    skip_blank(scanner)

    if scanner.current_char == "-":
        if scanner.peek() != ">":
            scanner.reset_peek()
            return selector

        match selector:
            case MessageReference(attribute=None):
                raise FluentSyntaxError(SyntaxCode.E0016)
            case MessageReference():
                raise FluentSyntaxError(SyntaxCode.E0018)
            case TermReference(attribute=None):
                raise FluentSyntaxError(SyntaxCode.E0017)

        if ctx.is_depth_exceeded():
            raise FluentSyntaxError(SyntaxCode.E0001)

        scanner.advance()
        scanner.advance()
        skip_blank_inline(scanner)
        scanner.expect_line_end()

        variants = parse_variants(scanner, ctx.enter_placeable())
        return ctx.spanned(SelectExpression(selector, variants), scanner, start)

    match selector:
        case TermReference(attribute=Identifier()):
            raise FluentSyntaxError(SyntaxCode.E0019)

    return selector


def parse_placeable(scanner: Scanner, ctx: ParseContext) -> Placeable:
    """Parse placeable: { expression }"""
    start = scanner.index
    scanner.expect_char("{")
    skip_blank(scanner)
    expression = parse_expression(scanner, ctx)
    scanner.expect_char("}")
    return ctx.spanned(Placeable(expression), scanner, start)


# =============================================================================
# Entry Parsing
# =============================================================================


def parse_attribute(scanner: Scanner, ctx: ParseContext) -> Attribute:
    """Parse attribute: .name = pattern"""
    start = scanner.index
    scanner.expect_char(".")
    id_start = scanner.index
    identifier = ctx.spanned(parse_identifier(scanner), scanner, id_start)
    skip_blank_inline(scanner)
    scanner.expect_char("=")

    value = maybe_parse_pattern(scanner, ctx)
    if value is None:
        raise FluentSyntaxError(SyntaxCode.E0012)

    return ctx.spanned(Attribute(identifier, value), scanner, start)


def parse_attributes(scanner: Scanner, ctx: ParseContext) -> tuple[Attribute, ...]:
    attributes: list[Attribute] = []
    peek_blank(scanner)
    while is_attribute_start(scanner):
        scanner.skip_to_peek()
        attributes.append(parse_attribute(scanner, ctx))
        peek_blank(scanner)
    # Uncommitted lookahead must not leak into the caller.
    scanner.reset_peek()
    return tuple(attributes)


def parse_message(scanner: Scanner, ctx: ParseContext) -> Message:
    """Parse message: identifier = pattern, then attributes.

    Raises:
        FluentSyntaxError: E0005 if the message has neither value nor attributes
    """
    start = scanner.index
    identifier = ctx.spanned(parse_identifier(scanner), scanner, start)
    skip_blank_inline(scanner)
    scanner.expect_char("=")

    value = maybe_parse_pattern(scanner, ctx)
    attributes = parse_attributes(scanner, ctx)

    if value is None and not attributes:
        raise FluentSyntaxError(SyntaxCode.E0005, identifier.name)

    return ctx.spanned(Message(identifier, value, attributes), scanner, start)


def parse_term(scanner: Scanner, ctx: ParseContext) -> Term:
    """Parse term: -identifier = pattern, then attributes.

    Raises:
        FluentSyntaxError: E0006 if the term has no value
    """
    start = scanner.index
    scanner.expect_char("-")
    id_start = scanner.index
    identifier = ctx.spanned(parse_identifier(scanner), scanner, id_start)
    skip_blank_inline(scanner)
    scanner.expect_char("=")

    value = maybe_parse_pattern(scanner, ctx)
    if value is None:
        raise FluentSyntaxError(SyntaxCode.E0006, identifier.name)

    attributes = parse_attributes(scanner, ctx)
    return ctx.spanned(Term(identifier, value, attributes), scanner, start)


def parse_comment(scanner: Scanner, ctx: ParseContext) -> Comment:
    """Parse comment lines of one level into a single Comment.

    The level is taken from the first line (``#``, ``##`` or ``###``);
    following lines merge only while they have the same level.
    """
    start = scanner.index
    level = -1
    content = ""

    while True:
        hashes = -1
        limit = _MAX_COMMENT_LEVEL if level == -1 else level
        while scanner.current_char == "#" and hashes < limit:
            scanner.advance()
            hashes += 1
        if level == -1:
            level = hashes

        if scanner.current_char not in (EOL, None):
            scanner.expect_char(" ")
            while (char := scanner.take_char(lambda c: c != EOL)) is not None:
                content += char

        if not is_next_line_comment(scanner, level):
            break
        content += EOL
        scanner.advance()

    comment = Comment(content, CommentType.from_level(level))
    return ctx.spanned(comment, scanner, start)
