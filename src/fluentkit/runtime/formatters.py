"""Locale-aware number and date formatters built on Babel.

Options are closed, typed, frozen dataclasses: every option NUMBER() and
DATETIME() understand is a named field with a default, and an options
object is hashable so it can key a
:class:`~fluentkit.runtime.formatter_cache.FormatterCache`.

A formatter is built once from (locale, options) and then applied to any
number of values:

    >>> formatter = NumberFormatter.create("de", NumberOptions(minimum_fraction_digits=2))
    >>> formatter.format(1234.5)
    '1.234,50'

Python 3.13+. Uses Babel for CLDR data.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Literal

from babel import Locale
from babel import dates as babel_dates
from babel import numbers as babel_numbers
from babel.numbers import NumberPattern

from fluentkit.diagnostics import ErrorTemplate, FluentFormattingError
from fluentkit.locale_utils import resolve_babel_locale

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Options
    "NumberOptions",
    "DateTimeOptions",
    "NumberStyle",
    "CurrencyDisplay",
    "DateTimeStyle",
    # Formatters
    "NumberFormatter",
    "DateTimeFormatter",
]

type NumberStyle = Literal["decimal", "percent", "currency"]
type CurrencyDisplay = Literal["symbol", "code", "name"]
type DateTimeStyle = Literal["short", "medium", "long", "full"]

NUMBER_STYLES: frozenset[str] = frozenset({"decimal", "percent", "currency"})
CURRENCY_DISPLAYS: frozenset[str] = frozenset({"symbol", "code", "name"})
DATETIME_STYLES: frozenset[str] = frozenset({"short", "medium", "long", "full"})

# Upper bound on fraction digits (matches Intl.NumberFormat).
MAX_FRACTION_DIGITS: int = 100
MAX_INTEGER_DIGITS: int = 21


# ============================================================================
# OPTIONS
# ============================================================================


@dataclass(frozen=True, slots=True)
class NumberOptions:
    """Options of the NUMBER() function.

    Attributes:
        style: "decimal", "percent" or "currency"
        currency: ISO 4217 code, required for the currency style
        currency_display: "symbol", "code" or "name"
        minimum_integer_digits: Pad the integer part with zeros (1-21)
        minimum_fraction_digits: Always show at least this many decimals
        maximum_fraction_digits: Round to at most this many decimals;
            raised to ``minimum_fraction_digits`` when lower
        use_grouping: Use the locale's thousands separator

    Raises:
        ValueError: If a field is out of range
    """

    style: NumberStyle = "decimal"
    currency: str | None = None
    currency_display: CurrencyDisplay = "symbol"
    minimum_integer_digits: int = 1
    minimum_fraction_digits: int = 0
    maximum_fraction_digits: int = 3
    use_grouping: bool = True

    def __post_init__(self) -> None:
        if self.style not in NUMBER_STYLES:
            msg = f"style must be one of {sorted(NUMBER_STYLES)}, got {self.style!r}"
            raise ValueError(msg)
        if self.currency_display not in CURRENCY_DISPLAYS:
            msg = (
                f"currency_display must be one of {sorted(CURRENCY_DISPLAYS)}, "
                f"got {self.currency_display!r}"
            )
            raise ValueError(msg)
        if self.style == "currency" and not self.currency:
            msg = "currency is required when style is 'currency'"
            raise ValueError(msg)
        if not 1 <= self.minimum_integer_digits <= MAX_INTEGER_DIGITS:
            msg = f"minimum_integer_digits must be in 1..{MAX_INTEGER_DIGITS}"
            raise ValueError(msg)
        for name in ("minimum_fraction_digits", "maximum_fraction_digits"):
            if not 0 <= getattr(self, name) <= MAX_FRACTION_DIGITS:
                msg = f"{name} must be in 0..{MAX_FRACTION_DIGITS}"
                raise ValueError(msg)
        if self.maximum_fraction_digits < self.minimum_fraction_digits:
            object.__setattr__(self, "maximum_fraction_digits", self.minimum_fraction_digits)

    @property
    def pattern(self) -> str:
        """Babel/CLDR number pattern for the decimal and percent styles.

        Examples:
            defaults -> "#,##0.###"
            minimum_fraction_digits=2 -> "#,##0.00#"
            minimum_integer_digits=5 -> "00,000.###"
        """
        digits = "0" * self.minimum_integer_digits
        if self.use_grouping:
            digits = digits.rjust(4, "#")
            digits = f"{digits[:-3]},{digits[-3:]}"

        required = "0" * self.minimum_fraction_digits
        optional = "#" * (self.maximum_fraction_digits - self.minimum_fraction_digits)
        fraction = f".{required}{optional}" if required or optional else ""

        suffix = "%" if self.style == "percent" else ""
        return f"{digits}{fraction}{suffix}"


@dataclass(frozen=True, slots=True)
class DateTimeOptions:
    """Options of the DATETIME() function.

    With neither style set, the date is shown in the "medium" style and no
    time. ``pattern`` (a CLDR date pattern such as "yyyy-MM-dd") overrides
    both styles.
    """

    date_style: DateTimeStyle | None = None
    time_style: DateTimeStyle | None = None
    pattern: str | None = None

    def __post_init__(self) -> None:
        for name in ("date_style", "time_style"):
            value = getattr(self, name)
            if value is not None and value not in DATETIME_STYLES:
                msg = f"{name} must be one of {sorted(DATETIME_STYLES)}, got {value!r}"
                raise ValueError(msg)


# ============================================================================
# FORMATTERS
# ============================================================================


@dataclass(frozen=True, slots=True)
class NumberFormatter:
    """Number formatter for one locale and one NumberOptions.

    Thread-safe: immutable after construction.
    """

    locale: Locale
    options: NumberOptions
    number_pattern: NumberPattern | None
    currency_format: str | None = None

    @classmethod
    def create(cls, locale_code: str, options: NumberOptions) -> "NumberFormatter":
        """Build the formatter, parsing its CLDR pattern once."""
        locale = resolve_babel_locale(locale_code)
        if options.style != "currency":
            return cls(locale, options, babel_numbers.parse_pattern(options.pattern))

        currency_format: str | None = None
        if options.currency_display == "code":
            # A doubled currency sign shows the ISO code instead of the symbol.
            standard = locale.currency_formats.get("standard")
            if standard is not None and "\xa4" in standard.pattern:
                currency_format = standard.pattern.replace("\xa4", "\xa4\xa4")
        return cls(locale, options, None, currency_format)

    def format(self, value: int | float | Decimal) -> str:
        """Format ``value``.

        Raises:
            FluentFormattingError: If Babel rejects the value; the
                fallback is ``str(value)``
        """
        try:
            if self.number_pattern is not None:
                return str(self.number_pattern.apply(value, self.locale))
            return self._format_currency(value)
        except (ValueError, TypeError, InvalidOperation, KeyError) as e:
            raise FluentFormattingError(
                ErrorTemplate.formatting_failed("NUMBER", value, str(e)),
                fallback_value=str(value),
            ) from e

    def _format_currency(self, value: int | float | Decimal) -> str:
        currency = self.options.currency or ""
        if self.options.currency_display == "name":
            return str(
                babel_numbers.format_currency(
                    value, currency, locale=self.locale, format_type="name"
                )
            )
        return str(
            babel_numbers.format_currency(
                value,
                currency,
                format=self.currency_format,
                locale=self.locale,
                currency_digits=True,
                group_separator=self.options.use_grouping,
            )
        )


@dataclass(frozen=True, slots=True)
class DateTimeFormatter:
    """Date/time formatter for one locale and one DateTimeOptions.

    Thread-safe: immutable after construction.
    """

    locale: Locale
    options: DateTimeOptions

    @classmethod
    def create(cls, locale_code: str, options: DateTimeOptions) -> "DateTimeFormatter":
        return cls(resolve_babel_locale(locale_code), options)

    def format(self, value: date | datetime) -> str:
        """Format ``value``; a plain date is taken at midnight.

        Raises:
            FluentFormattingError: If Babel rejects the value; the
                fallback is the ISO 8601 form
        """
        moment = value if isinstance(value, datetime) else datetime.combine(value, time())
        try:
            return self._format(moment)
        except (ValueError, OverflowError, KeyError, AttributeError) as e:
            raise FluentFormattingError(
                ErrorTemplate.formatting_failed("DATETIME", value, str(e)),
                fallback_value=value.isoformat(),
            ) from e

    def _format(self, moment: datetime) -> str:
        options = self.options
        if options.pattern is not None:
            return str(babel_dates.format_datetime(moment, format=options.pattern, locale=self.locale))

        date_style = options.date_style
        time_style = options.time_style
        if date_style is None and time_style is None:
            date_style = "medium"

        if time_style is None:
            return str(babel_dates.format_date(moment, format=date_style, locale=self.locale))
        time_str = str(babel_dates.format_time(moment, format=time_style, locale=self.locale))
        if date_style is None:
            return time_str

        date_str = str(babel_dates.format_date(moment, format=date_style, locale=self.locale))
        # CLDR combining pattern: {0} is the time, {1} the date.
        combining = (
            self.locale.datetime_formats.get(date_style)
            or self.locale.datetime_formats.get("medium")
            or "{1} {0}"
        )
        return str(combining).format(time_str, date_str)
