"""Fluent message resolver - converts AST patterns to formatted strings.

Resolves patterns by walking the AST, interpolating variables, following
message and term references and evaluating selectors.

Errors never escape a format call. Each placeable that fails records its
error in the :class:`~fluentkit.runtime.scope.Scope` and writes a readable
placeholder instead:

    ======================  =============
    Failure                 Placeholder
    ======================  =============
    unknown variable        ``{$name}``
    unknown message         ``{id}``
    unknown attribute       ``{id.attr}``
    unknown term            ``{-id}``
    unknown/failed function ``{NAME()}``
    cyclic reference        the reference itself
    ======================  =============

Python 3.13+. Indirect dependency: Babel (via plural_rules and formatters).

Thread Safety:
    All per-call state lives in the Scope, so one resolver can serve
    concurrent format calls as long as the entry tables are not mutated.
"""

from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal
from typing import assert_never

from fluentkit.constants import (
    FALLBACK_FUNCTION_ERROR,
    FALLBACK_MISSING_ATTRIBUTE,
    FALLBACK_MISSING_MESSAGE,
    FALLBACK_MISSING_TERM,
    FALLBACK_MISSING_TERM_ATTRIBUTE,
    FALLBACK_MISSING_VARIABLE,
    UNICODE_FSI,
    UNICODE_PDI,
)
from fluentkit.diagnostics import (
    ErrorTemplate,
    FluentCyclicReferenceError,
    FluentError,
    FluentFormattingError,
    FluentReferenceError,
    FluentResolutionError,
)
from fluentkit.runtime.formatter_cache import FormatterCache
from fluentkit.runtime.formatters import MAX_FRACTION_DIGITS, NumberOptions
from fluentkit.runtime.function_bridge import FunctionRegistry
from fluentkit.runtime.plural_rules import select_plural_category
from fluentkit.runtime.scope import MISSING, Scope
from fluentkit.runtime.value_types import DeferredValue, FluentDateTime, FluentNumber
from fluentkit.syntax import (
    Expression,
    FunctionReference,
    Identifier,
    Message,
    MessageReference,
    NumberLiteral,
    Pattern,
    Placeable,
    SelectExpression,
    StringLiteral,
    Term,
    TermReference,
    TextElement,
    VariableReference,
    Variant,
)

__all__ = ["FluentResolver", "to_fluent_value"]


def to_fluent_value(value: object) -> object:
    """Wrap a caller-supplied value for resolution.

    Numbers (but not bools) become FluentNumber and dates become
    FluentDateTime, so they are formatted for the locale and take part in
    plural selection. Everything else passes through unchanged.
    """
    match value:
        case bool():
            return value
        case int() | float() | Decimal():
            return FluentNumber(value)
        case date():
            return FluentDateTime(value)
    return value


def _entry_key(entry: Message | Term, attribute: str | None) -> str:
    """Identifier as written in FTL: ``id``, ``id.attr``, ``-id``, ``-id.attr``."""
    prefix = "-" if isinstance(entry, Term) else ""
    suffix = f".{attribute}" if attribute else ""
    return f"{prefix}{entry.id.name}{suffix}"


class FluentResolver:
    """Resolves Fluent patterns to strings.

    Attributes:
        locale: Locale code used for formatting and plural rules
        use_isolating: Wrap placeables in FSI/PDI bidi marks
    """

    __slots__ = (
        "_formatter_cache",
        "_function_registry",
        "_messages",
        "_terms",
        "_transform",
        "locale",
        "use_isolating",
    )

    def __init__(
        self,
        locale: str,
        messages: Mapping[str, Message],
        terms: Mapping[str, Term],
        *,
        function_registry: FunctionRegistry,
        formatter_cache: FormatterCache,
        use_isolating: bool = True,
        transform: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize resolver.

        Args:
            locale: Locale code for formatting and plural selection
            messages: Message table, keyed by id
            terms: Term table, keyed by id without the leading ``-``
            function_registry: Functions callable from FTL
            formatter_cache: Cache of Babel formatters and plural rules
            use_isolating: Wrap interpolated values in Unicode bidi marks
            transform: Applied to every text element (e.g. pseudolocalization)
        """
        self.locale = locale
        self.use_isolating = use_isolating
        self._messages = messages
        self._terms = terms
        self._function_registry = function_registry
        self._formatter_cache = formatter_cache
        self._transform = transform

    # ========================================================================
    # ENTRIES AND PATTERNS
    # ========================================================================

    def resolve_entry(
        self, entry: Message | Term, scope: Scope, attribute: str | None = None
    ) -> str:
        """Resolve an entry's value, or one of its attributes.

        The entry is tracked for cycle detection while its pattern is
        resolved. Failures are recorded in ``scope`` and produce the
        entry's placeholder.
        """
        try:
            return self._resolve_entry(entry, scope, attribute)
        except FluentError as error:
            scope.add_error(error)
            return f"{{{_entry_key(entry, attribute)}}}"

    def _resolve_entry(self, entry: Message | Term, scope: Scope, attribute: str | None) -> str:
        key = _entry_key(entry, attribute)
        pattern = self._select_pattern(entry, attribute)

        if not scope.track(key):
            raise FluentCyclicReferenceError(ErrorTemplate.cyclic_reference(key))
        try:
            if not scope.enter():
                raise FluentResolutionError(ErrorTemplate.max_depth_exceeded(key, scope.max_depth))
            try:
                return self.resolve_pattern(pattern, scope)
            finally:
                scope.leave()
        finally:
            scope.release(key)

    @staticmethod
    def _select_pattern(entry: Message | Term, attribute: str | None) -> Pattern:
        if attribute is not None:
            attr = entry.get_attribute(attribute)
            if attr is not None:
                return attr.value
            if isinstance(entry, Term):
                raise FluentReferenceError(
                    ErrorTemplate.term_attribute_not_found(attribute, entry.id.name)
                )
            raise FluentReferenceError(ErrorTemplate.attribute_not_found(attribute, entry.id.name))
        if entry.value is None:
            raise FluentReferenceError(ErrorTemplate.message_no_value(entry.id.name))
        return entry.value

    def resolve_pattern(self, pattern: Pattern, scope: Scope) -> str:
        """Resolve pattern by walking elements.

        Placeables are isolated only when the pattern has more than one
        element; a pattern that is a single placeable returns its value
        bare.
        """
        isolate = self.use_isolating and len(pattern.elements) > 1
        parts: list[str] = []

        for element in pattern.elements:
            match element:
                case TextElement(value=text):
                    parts.append(self._transform(text) if self._transform else text)
                case Placeable(expression=expression):
                    formatted = self._resolve_placeable(expression, scope)
                    parts.append(f"{UNICODE_FSI}{formatted}{UNICODE_PDI}" if isolate else formatted)

        return "".join(parts)

    def _resolve_placeable(self, expression: Expression, scope: Scope) -> str:
        try:
            return self._format_value(self._resolve_expression(expression, scope))
        except FluentFormattingError as error:
            scope.add_error(error)
            return error.fallback_value
        except FluentError as error:
            scope.add_error(error)
            return self._fallback(expression)

    def _format_value(self, value: object) -> str:
        """Format a resolved value for output.

        None (a function that returned nothing) writes nothing. Deferred
        values from custom functions format themselves for the locale.

        Raises:
            FluentFormattingError: If Babel cannot format a number or date
        """
        match value:
            case str():
                return value
            case FluentNumber() | FluentDateTime():
                return value.format(self.locale, self._formatter_cache)
            case bool():
                return "true" if value else "false"
            case None:
                return ""
            case DeferredValue():
                return str(value.format(self.locale))
        return str(value)

    @staticmethod
    def _fallback(expression: Expression) -> str:
        """Readable placeholder for a placeable that failed to resolve."""
        match expression:
            case VariableReference(id=Identifier(name=name)):
                return FALLBACK_MISSING_VARIABLE.format(name=name)
            case MessageReference(id=Identifier(name=name), attribute=None):
                return FALLBACK_MISSING_MESSAGE.format(id=name)
            case MessageReference(id=Identifier(name=name), attribute=Identifier(name=attr)):
                return FALLBACK_MISSING_ATTRIBUTE.format(id=name, attribute=attr)
            case TermReference(id=Identifier(name=name), attribute=None):
                return FALLBACK_MISSING_TERM.format(name=name)
            case TermReference(id=Identifier(name=name), attribute=Identifier(name=attr)):
                return FALLBACK_MISSING_TERM_ATTRIBUTE.format(name=name, attribute=attr)
            case FunctionReference(id=Identifier(name=name)):
                return FALLBACK_FUNCTION_ERROR.format(name=name)
            case SelectExpression(selector=selector):
                return FluentResolver._fallback(selector)
            case StringLiteral(value=value):
                return f'{{"{value}"}}'
            case NumberLiteral(raw=raw):
                return f"{{{raw}}}"
            case _:
                assert_never(expression)

    # ========================================================================
    # EXPRESSIONS
    # ========================================================================

    def _resolve_expression(self, expr: Expression, scope: Scope) -> object:
        """Resolve expression to a value.

        Raises:
            FluentError: When the expression cannot be resolved; the
                calling placeable records it and writes a placeholder
        """
        match expr:
            case StringLiteral():
                return expr.unescaped()
            case NumberLiteral():
                # Shown digits are capped; the value keeps every declared digit.
                precision = min(expr.precision, MAX_FRACTION_DIGITS)
                return FluentNumber(expr.value, NumberOptions(minimum_fraction_digits=precision))
            case VariableReference():
                return self._resolve_variable_reference(expr, scope)
            case MessageReference():
                return self._resolve_message_reference(expr, scope)
            case TermReference():
                return self._resolve_term_reference(expr, scope)
            case FunctionReference():
                return self._resolve_function_call(expr, scope)
            case SelectExpression():
                return self._resolve_select_expression(expr, scope)
            case _:
                assert_never(expr)

    @staticmethod
    def _resolve_variable_reference(expr: VariableReference, scope: Scope) -> object:
        value = scope.variable(expr.id.name)
        if value is MISSING:
            raise FluentReferenceError(ErrorTemplate.unknown_variable(expr.id.name))
        return to_fluent_value(value)

    def _resolve_message_reference(self, expr: MessageReference, scope: Scope) -> str:
        message = self._messages.get(expr.id.name)
        if message is None:
            raise FluentReferenceError(ErrorTemplate.message_not_found(expr.id.name))
        attribute = expr.attribute.name if expr.attribute else None
        return self._resolve_entry(message, scope, attribute)

    def _resolve_term_reference(self, expr: TermReference, scope: Scope) -> str:
        """Resolve term reference in a child scope.

        Named arguments become the term's local variables; positional
        arguments are accepted by the grammar but have no effect.
        """
        term = self._terms.get(expr.id.name)
        if term is None:
            raise FluentReferenceError(ErrorTemplate.term_not_found(expr.id.name))

        term_locals: dict[str, object] = {}
        if expr.arguments is not None:
            for named in expr.arguments.named:
                term_locals[named.name.name] = self._resolve_expression(named.value, scope)

        attribute = expr.attribute.name if expr.attribute else None
        return self._resolve_entry(term, scope.child_scope(term_locals), attribute)

    def _resolve_function_call(self, expr: FunctionReference, scope: Scope) -> object:
        """Resolve function call.

        FunctionRegistry handles camelCase -> snake_case option names and
        locale injection for the built-ins. Numeric results are wrapped so
        they can drive plural selection.
        """
        func_name = expr.id.name
        if func_name not in self._function_registry:
            raise FluentResolutionError(ErrorTemplate.function_not_found(func_name))

        positional = [self._resolve_expression(arg, scope) for arg in expr.arguments.positional]
        named = {
            arg.name.name: self._resolve_expression(arg.value, scope)
            for arg in expr.arguments.named
        }
        result = self._function_registry.call(func_name, positional, named, self.locale)
        return to_fluent_value(result)

    # ========================================================================
    # SELECT EXPRESSIONS
    # ========================================================================

    def _resolve_select_expression(self, expr: SelectExpression, scope: Scope) -> str:
        """Resolve select expression by matching variant.

        Matching priority:
            1. Numeric selector: variant whose number key equals the value
            2. Numeric selector: variant named by the CLDR plural category
            3. String selector: variant whose identifier key equals the value
            4. Default variant

        A DeferredValue returned by a custom function is matched by its
        raw ``value``.

        A selector that fails to resolve records its error and selects the
        default variant.
        """
        try:
            selector = self._resolve_expression(expr.selector, scope)
        except FluentError as error:
            scope.add_error(error)
            selector = MISSING

        variant = self._match_variant(expr, selector) or expr.default_variant
        return self.resolve_pattern(variant.value, scope)

    def _match_variant(self, expr: SelectExpression, selector: object) -> Variant | None:
        match selector:
            case FluentNumber():
                number = selector.value
                if isinstance(number, float):
                    number = Decimal(str(number))
                for variant in expr.variants:
                    if NumberLiteral.guard(variant.key) and variant.key.value == number:
                        return variant
                category = select_plural_category(
                    selector.plural_operand(), self.locale, self._formatter_cache
                )
                return self._find_identifier_variant(expr, category)
            case bool():
                return self._find_identifier_variant(expr, "true" if selector else "false")
            case str():
                return self._find_identifier_variant(expr, selector)
            case DeferredValue():
                # Custom deferred values select by their raw value.
                raw = to_fluent_value(selector.value)
                if isinstance(raw, FluentNumber | bool | str):
                    return self._match_variant(expr, raw)
        return None

    @staticmethod
    def _find_identifier_variant(expr: SelectExpression, name: str) -> Variant | None:
        for variant in expr.variants:
            if Identifier.guard(variant.key) and variant.key.name == name:
                return variant
        return None
