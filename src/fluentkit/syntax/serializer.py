"""Serialize Fluent AST back to FTL syntax.

Converts AST nodes to FTL source code. Useful for:
- Formatters
- Code generators
- Property-based testing (roundtrip: parse -> serialize -> parse)

Layout rules:
- Entries follow each other directly; a standalone comment is framed by
  blank lines so it never attaches to the entry after it
- A pattern that spans lines or holds a select expression starts on its
  own line, indented by four spaces
- Select variants are indented under their selector, the default
  variant's ``*`` hanging one column to the left

Python 3.13+.
"""

from fluentkit.syntax.ast import (
    Attribute,
    CallArguments,
    Comment,
    Entry,
    Expression,
    FunctionReference,
    Identifier,
    Junk,
    Message,
    MessageReference,
    NamedArgument,
    NumberLiteral,
    Pattern,
    PatternElement,
    Placeable,
    Resource,
    SelectExpression,
    StringLiteral,
    Term,
    TermReference,
    TextElement,
    VariableReference,
    Variant,
)

__all__ = ["FluentSerializer", "SerializationValidationError", "serialize"]


class SerializationValidationError(ValueError):
    """Raised when AST validation fails during serialization.

    This error indicates the AST structure would produce invalid FTL syntax.
    Common causes:
    - SelectExpression without exactly one default variant
    - Message with neither value nor attributes
    """


def _validate_pattern(pattern: Pattern, context: str) -> None:
    for element in pattern.elements:
        if isinstance(element, Placeable):
            _validate_expression(element.expression, context)


def _validate_expression(expr: Expression, context: str) -> None:
    match expr:
        case SelectExpression():
            default_count = sum(1 for v in expr.variants if v.default)
            if default_count != 1:
                msg = (
                    f"SelectExpression in {context} has {default_count} default "
                    "variants (requires exactly one *[key])"
                )
                raise SerializationValidationError(msg)
            for variant in expr.variants:
                _validate_pattern(variant.value, context)
        case _:
            pass


def _validate_resource(resource: Resource) -> None:
    """Check every entry would serialize to parseable FTL.

    Raises:
        SerializationValidationError: If validation fails
    """
    for entry in resource.entries:
        match entry:
            case Message() | Term():
                prefix = "-" if isinstance(entry, Term) else ""
                context = f"'{prefix}{entry.id.name}'"
                if entry.value is None and not entry.attributes:
                    msg = f"Message {context} has neither a value nor attributes"
                    raise SerializationValidationError(msg)
                if entry.value is not None:
                    _validate_pattern(entry.value, context)
                for attr in entry.attributes:
                    _validate_pattern(attr.value, f"{context}.{attr.id.name}")
            case _:
                pass


# Attribute and continuation-line indentation.
_INDENT: str = "    "

# Characters that would start a new syntax element at the beginning of a
# continuation line (variant, attribute or default marker).
_SPECIAL_FIRST_CHARS = frozenset("[.*")


def _indent_except_first_line(content: str) -> str:
    return content.replace("\n", "\n" + _INDENT)


def _is_multiline(pattern: Pattern) -> bool:
    for element in pattern.elements:
        match element:
            case Placeable(expression=SelectExpression()):
                return True
            case TextElement() if "\n" in element.value:
                return True
    return False


def _starts_on_new_line(pattern: Pattern) -> bool:
    """A multiline pattern moves to its own line unless that would turn
    its first character into syntax."""
    if not _is_multiline(pattern):
        return False
    first = pattern.elements[0]
    if isinstance(first, TextElement) and first.value[:1] in _SPECIAL_FIRST_CHARS:
        return False
    return True


class FluentSerializer:
    """Converts AST back to FTL source string.

    Thread-safe serializer with no mutable instance state.
    All serialization state is local to the serialize() call.

    Usage:
        >>> from fluentkit.syntax import parse, FluentSerializer
        >>> ast = parse("hello = Hello, world!")
        >>> print(FluentSerializer().serialize(ast), end="")
        hello = Hello, world!
    """

    __slots__ = ("_with_junk",)

    def __init__(self, *, with_junk: bool = False) -> None:
        self._with_junk = with_junk

    @property
    def with_junk(self) -> bool:
        """Whether Junk entries are written back verbatim."""
        return self._with_junk

    def serialize(self, resource: Resource, *, validate: bool = False) -> str:
        """Serialize Resource to FTL string.

        Args:
            resource: Resource AST node
            validate: If True, validate AST before serialization (default: False).
                Checks select expressions have exactly one default variant
                and messages have a value or attributes.

        Returns:
            FTL source code

        Raises:
            SerializationValidationError: If validate=True and AST is invalid
        """
        if validate:
            _validate_resource(resource)

        output: list[str] = []
        has_entries = False
        for entry in resource.entries:
            if isinstance(entry, Junk) and not self._with_junk:
                continue
            self._serialize_entry(entry, output, has_entries=has_entries)
            has_entries = True
        return "".join(output)

    def _serialize_entry(self, entry: Entry, output: list[str], *, has_entries: bool) -> None:
        match entry:
            case Message():
                self._serialize_message(entry, output)
            case Term():
                self._serialize_term(entry, output)
            case Comment():
                if has_entries:
                    output.append("\n")
                self._serialize_comment(entry, output)
                output.append("\n")
            case Junk():
                output.append(entry.content)

    def _serialize_comment(self, node: Comment, output: list[str]) -> None:
        prefix = node.type.sigil
        for line in node.content.split("\n"):
            output.append(f"{prefix} {line}\n" if line else f"{prefix}\n")

    def _serialize_message(self, node: Message, output: list[str]) -> None:
        if node.comment is not None:
            self._serialize_comment(node.comment, output)

        output.append(f"{node.id.name} =")
        if node.value is not None:
            self._serialize_value(node.value, output)
        for attr in node.attributes:
            self._serialize_attribute(attr, output)
        output.append("\n")

    def _serialize_term(self, node: Term, output: list[str]) -> None:
        if node.comment is not None:
            self._serialize_comment(node.comment, output)

        output.append(f"-{node.id.name} =")
        self._serialize_value(node.value, output)
        for attr in node.attributes:
            self._serialize_attribute(attr, output)
        output.append("\n")

    def _serialize_attribute(self, node: Attribute, output: list[str]) -> None:
        output.append(f"\n{_INDENT}.{node.id.name} =")
        output.append(_indent_except_first_line(self._pattern_value(node.value)))

    def _serialize_value(self, pattern: Pattern, output: list[str]) -> None:
        output.append(self._pattern_value(pattern))

    def _pattern_value(self, pattern: Pattern) -> str:
        """Render the part of an entry after ``=`` (or after ``]``)."""
        content = _indent_except_first_line(self._pattern_text(pattern))
        if _starts_on_new_line(pattern):
            return f"\n{_INDENT}{content}"
        return f" {content}"

    def _pattern_text(self, pattern: Pattern) -> str:
        output: list[str] = []
        for element in pattern.elements:
            self._serialize_element(element, output)
        return "".join(output)

    def _serialize_element(self, element: PatternElement, output: list[str]) -> None:
        match element:
            case TextElement():
                self._serialize_text(element.value, output)
            case Placeable(expression=SelectExpression() as select):
                output.append("{ ")
                self._serialize_select_expression(select, output)
                output.append("}")
            case Placeable():
                output.append("{ ")
                self._serialize_expression(element.expression, output)
                output.append(" }")

    @staticmethod
    def _serialize_text(value: str, output: list[str]) -> None:
        """Write text, turning braces into string literal placeables.

        Parsed text never holds braces; hand-built ASTs may.
        """
        if "{" not in value and "}" not in value:
            output.append(value)
            return
        for char in value:
            output.append(f'{{ "{char}" }}' if char in "{}" else char)

    def _serialize_expression(self, expr: Expression, output: list[str]) -> None:
        """Serialize Expression nodes using structural pattern matching."""
        match expr:
            case StringLiteral():
                output.append(f'"{expr.value}"')
            case NumberLiteral():
                output.append(expr.raw)
            case VariableReference():
                output.append(f"${expr.id.name}")
            case MessageReference():
                output.append(expr.id.name)
                if expr.attribute is not None:
                    output.append(f".{expr.attribute.name}")
            case TermReference():
                output.append(f"-{expr.id.name}")
                if expr.attribute is not None:
                    output.append(f".{expr.attribute.name}")
                if expr.arguments is not None:
                    self._serialize_call_arguments(expr.arguments, output)
            case FunctionReference():
                output.append(expr.id.name)
                self._serialize_call_arguments(expr.arguments, output)
            case SelectExpression():
                output.append("{ ")
                self._serialize_select_expression(expr, output)
                output.append("}")

    def _serialize_call_arguments(self, args: CallArguments, output: list[str]) -> None:
        output.append("(")
        named_arg: NamedArgument
        for i, arg in enumerate(args.positional):
            if i > 0:
                output.append(", ")
            self._serialize_expression(arg, output)
        for i, named_arg in enumerate(args.named):
            if i > 0 or args.positional:
                output.append(", ")
            output.append(f"{named_arg.name.name}: ")
            self._serialize_expression(named_arg.value, output)
        output.append(")")

    def _serialize_select_expression(self, expr: SelectExpression, output: list[str]) -> None:
        self._serialize_expression(expr.selector, output)
        output.append(" ->")
        for variant in expr.variants:
            self._serialize_variant(variant, output)
        output.append("\n")

    def _serialize_variant(self, variant: Variant, output: list[str]) -> None:
        output.append("\n   *[" if variant.default else "\n    [")
        match variant.key:
            case Identifier():
                output.append(variant.key.name)
            case NumberLiteral():
                output.append(variant.key.raw)
        output.append("]")
        output.append(_indent_except_first_line(self._pattern_value(variant.value)))


def serialize(resource: Resource, *, with_junk: bool = False, validate: bool = False) -> str:
    """Serialize Resource to FTL string.

    Convenience function for FluentSerializer.serialize().

    Args:
        resource: Resource AST node
        with_junk: Write Junk entries back verbatim (default: dropped)
        validate: Validate the AST before serialization

    Returns:
        FTL source code

    Example:
        >>> from fluentkit.syntax import parse, serialize
        >>> serialize(parse("hello = Hello, world!"))
        'hello = Hello, world!\\n'
    """
    return FluentSerializer(with_junk=with_junk).serialize(resource, validate=validate)
