"""Core value types for the Fluent runtime.

Defines the values that flow through resolution:
    - FluentNumber: Number plus the options it is displayed with
    - FluentDateTime: Date or datetime plus its display options
    - FluentValue: Union of everything an expression can evaluate to
    - FluentFunction: Protocol for callables registered as FTL functions
    - DeferredValue: Protocol for function results formatted on output

Numbers and dates are formatted lazily: they stay raw while they take
part in select expressions and function calls, and become text only when
a placeable is written to the output.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from fluentkit.enums import FormatterKind
from fluentkit.runtime.formatters import (
    DateTimeFormatter,
    DateTimeOptions,
    NumberFormatter,
    NumberOptions,
)

if TYPE_CHECKING:
    from fluentkit.runtime.formatter_cache import FormatterCache

__all__ = [
    "DeferredValue",
    "FluentDateTime",
    "FluentFunction",
    "FluentNumber",
    "FluentValue",
]


@dataclass(frozen=True, slots=True)
class FluentNumber:
    """Number preserving its numeric identity until display.

    The raw ``value`` is what select expressions match against; the
    ``options`` decide how it is displayed and which fraction digits
    count as visible for plural rules.

    Example:
        >>> n = FluentNumber(1, NumberOptions(minimum_fraction_digits=2))
        >>> n.format("en")
        '1.00'
        >>> n.plural_operand()
        Decimal('1.00')
    """

    value: int | float | Decimal
    options: NumberOptions = field(default_factory=NumberOptions)

    def format(self, locale: str, cache: FormatterCache | None = None) -> str:
        """Format for display in ``locale``.

        Args:
            locale: Locale code
            cache: Formatter cache; without one the formatter is built
                for this call only

        Raises:
            FluentFormattingError: If Babel cannot format the value
        """
        options = self.options
        if cache is None:
            formatter = NumberFormatter.create(locale, options)
        else:
            formatter = cache.get_or_create(
                FormatterKind.NUMBER,
                locale,
                options,
                lambda: NumberFormatter.create(locale, options),
            )
        return formatter.format(self.value)

    def plural_operand(self) -> Decimal:
        """The value as displayed, as a Decimal for CLDR plural rules.

        Rounded to ``maximum_fraction_digits`` and padded to
        ``minimum_fraction_digits``, so "1.00" selects differently from
        "1" in locales whose rules look at visible fraction digits.
        """
        number = self.value if isinstance(self.value, Decimal) else Decimal(str(self.value))
        if not number.is_finite():
            return number
        options = self.options
        try:
            rounded = number.quantize(
                Decimal(1).scaleb(-options.maximum_fraction_digits), rounding=ROUND_HALF_EVEN
            ).normalize()
            if rounded.as_tuple().exponent > -options.minimum_fraction_digits:  # type: ignore[operator]
                rounded = rounded.quantize(Decimal(1).scaleb(-options.minimum_fraction_digits))
        except InvalidOperation:
            return number
        return rounded


@dataclass(frozen=True, slots=True)
class FluentDateTime:
    """Date or datetime with its display options."""

    value: date | datetime
    options: DateTimeOptions = field(default_factory=DateTimeOptions)

    def format(self, locale: str, cache: FormatterCache | None = None) -> str:
        """Format for display in ``locale``.

        Raises:
            FluentFormattingError: If Babel cannot format the value
        """
        options = self.options
        if cache is None:
            formatter = DateTimeFormatter.create(locale, options)
        else:
            formatter = cache.get_or_create(
                FormatterKind.DATETIME,
                locale,
                options,
                lambda: DateTimeFormatter.create(locale, options),
            )
        return formatter.format(self.value)


# Anything an expression can evaluate to. Plain str is final text;
# FluentNumber and FluentDateTime are formatted on output.
type FluentValue = str | FluentNumber | FluentDateTime


class FluentFunction(Protocol):
    """Protocol for Fluent-compatible functions.

    Functions receive the resolved positional arguments, then the named
    options as keyword arguments (snake_case). Built-ins also receive the
    bundle locale as ``locale_code``. They return a FluentValue, a
    DeferredValue, or any object whose ``str()`` is the output text.
    """

    def __call__(self, *args: FluentValue, **kwargs: FluentValue) -> object:
        ...  # pragma: no cover  # Protocol stub - not executable


@runtime_checkable
class DeferredValue(Protocol):
    """Value a function returns to be formatted only when written out.

    FluentNumber and FluentDateTime are the built-in ones. A custom
    function may return any object with a raw ``value`` and a
    ``format(locale)`` method: the resolver writes ``format(locale)`` to
    the output, and a select expression matches on ``value`` (numbers by
    exact key, then plural category; strings by identifier key).

    Example:
        >>> @dataclass(frozen=True)
        ... class Money:
        ...     value: Decimal
        ...     def format(self, locale: str) -> str:
        ...         return f"{self.value} EUR"
    """

    @property
    def value(self) -> object: ...  # pragma: no cover  # Protocol stub

    def format(self, locale: str) -> str: ...  # pragma: no cover  # Protocol stub
