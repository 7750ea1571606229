"""Fluent built-in functions with Python-native APIs.

Implements NUMBER and DATETIME. Both return deferred values
(:class:`FluentNumber`, :class:`FluentDateTime`) instead of text, so a
formatted number can still drive plural selection:

    count = { NUMBER($n, minimumFractionDigits: 1) ->
        [one] one item
       *[other] { $n } items
    }

Architecture:
    - Python functions use snake_case (PEP 8)
    - FunctionRegistry bridges to FTL camelCase
    - Option values arrive as FTL literals (str or FluentNumber) and are
      coerced to the declared type; a value that cannot be coerced raises
      FluentResolutionError
    - Applying NUMBER to a FluentNumber merges options: explicitly given
      options override, the rest are kept

Example:
    # Python API (snake_case):
    number_format(1234.5, "en-US", minimum_fraction_digits=2)

    # FTL file (camelCase):
    price = { NUMBER($amount, minimumFractionDigits: 2) }

Python 3.13+. Uses Babel for i18n.
"""

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from fluentkit.diagnostics import ErrorTemplate, FluentResolutionError
from fluentkit.runtime.formatters import DateTimeOptions, NumberOptions
from fluentkit.runtime.function_bridge import FunctionRegistry
from fluentkit.runtime.value_types import FluentDateTime, FluentNumber

__all__ = [
    "create_default_registry",
    "datetime_format",
    "get_shared_registry",
    "number_format",
]


# ============================================================================
# OPTION COERCION
# ============================================================================


def _coerce_int(function_name: str, option: str, value: object) -> int:
    match value:
        case bool():
            pass
        case int():
            return value
        case FluentNumber(value=number) if not isinstance(number, bool):
            if number == int(number):
                return int(number)
        case str() if value.strip().lstrip("-").isdigit():
            return int(value)
    raise FluentResolutionError(
        ErrorTemplate.invalid_argument(function_name, option, "integer", value)
    )


def _coerce_bool(function_name: str, option: str, value: object) -> bool:
    match value:
        case bool():
            return value
        case "true":
            return True
        case "false":
            return False
    raise FluentResolutionError(
        ErrorTemplate.invalid_argument(function_name, option, '"true" or "false"', value)
    )


def _coerce_str(function_name: str, option: str, value: object) -> str:
    if isinstance(value, str):
        return value
    raise FluentResolutionError(
        ErrorTemplate.invalid_argument(function_name, option, "string", value)
    )


def _coerce_number(value: object) -> FluentNumber:
    match value:
        case FluentNumber():
            return value
        case bool():
            pass
        case int() | float() | Decimal():
            return FluentNumber(value)
        case str():
            try:
                return FluentNumber(Decimal(value.strip()))
            except InvalidOperation:
                pass
    raise FluentResolutionError(
        ErrorTemplate.invalid_argument("NUMBER", "value", "number", value)
    )


def _coerce_datetime(value: object) -> FluentDateTime:
    match value:
        case FluentDateTime():
            return value
        case date():
            return FluentDateTime(value)
        case str():
            try:
                return FluentDateTime(datetime.fromisoformat(value))
            except ValueError:
                pass
    raise FluentResolutionError(
        ErrorTemplate.invalid_argument("DATETIME", "value", "date or datetime", value)
    )


# ============================================================================
# BUILT-IN FUNCTIONS
# ============================================================================


def number_format(  # noqa: PLR0913  # one parameter per NUMBER option
    value: object,
    /,
    locale_code: str = "en",
    *,
    style: object = None,
    currency: object = None,
    currency_display: object = None,
    minimum_integer_digits: object = None,
    minimum_fraction_digits: object = None,
    maximum_fraction_digits: object = None,
    use_grouping: object = None,
) -> FluentNumber:
    """Wrap a number with display options.

    Python-native API with snake_case parameters. FunctionRegistry bridges
    to FTL camelCase (minimumFractionDigits -> minimum_fraction_digits).

    Args:
        value: Number, numeric string or FluentNumber
        locale_code: Bundle locale (injected by the registry; formatting
            happens later, when the placeable is written)
        style: "decimal", "percent" or "currency"
        currency: ISO 4217 code for the currency style
        currency_display: "symbol", "code" or "name"
        minimum_integer_digits: Zero-pad the integer part
        minimum_fraction_digits: Minimum decimal places
        maximum_fraction_digits: Maximum decimal places
        use_grouping: "true"/"false" (or bool) for thousands separators

    Returns:
        FluentNumber carrying the merged options

    Raises:
        FluentResolutionError: If the value or an option cannot be coerced
        ValueError: If the coerced options are out of range

    Examples:
        >>> number_format(1234.5, "de", minimum_fraction_digits=2).format("de")
        '1.234,50'
        >>> number_format(0.25, style="percent").format("en")
        '25%'
    """
    number = _coerce_number(value)
    overrides: dict[str, object] = {}
    if style is not None:
        overrides["style"] = _coerce_str("NUMBER", "style", style)
    if currency is not None:
        overrides["currency"] = _coerce_str("NUMBER", "currency", currency)
    if currency_display is not None:
        overrides["currency_display"] = _coerce_str("NUMBER", "currencyDisplay", currency_display)
    if minimum_integer_digits is not None:
        overrides["minimum_integer_digits"] = _coerce_int(
            "NUMBER", "minimumIntegerDigits", minimum_integer_digits
        )
    if minimum_fraction_digits is not None:
        overrides["minimum_fraction_digits"] = _coerce_int(
            "NUMBER", "minimumFractionDigits", minimum_fraction_digits
        )
    if maximum_fraction_digits is not None:
        overrides["maximum_fraction_digits"] = _coerce_int(
            "NUMBER", "maximumFractionDigits", maximum_fraction_digits
        )
    if use_grouping is not None:
        overrides["use_grouping"] = _coerce_bool("NUMBER", "useGrouping", use_grouping)

    if not overrides:
        return number
    return FluentNumber(number.value, replace(number.options, **overrides))  # type: ignore[arg-type]


def datetime_format(
    value: object,
    /,
    locale_code: str = "en",
    *,
    date_style: object = None,
    time_style: object = None,
    pattern: object = None,
) -> FluentDateTime:
    """Wrap a date or datetime with display options.

    Args:
        value: date, datetime, ISO 8601 string or FluentDateTime
        locale_code: Bundle locale (injected by the registry)
        date_style: "short", "medium", "long" or "full"
        time_style: "short", "medium", "long" or "full"
        pattern: CLDR date pattern such as "yyyy-MM-dd" (overrides styles)

    Returns:
        FluentDateTime carrying the merged options

    Raises:
        FluentResolutionError: If the value or an option cannot be coerced
        ValueError: If a style is not one of the known names

    FTL Usage:
        today = { DATETIME($date, dateStyle: "short") }
        timestamp = { DATETIME($time, dateStyle: "medium", timeStyle: "short") }
    """
    moment = _coerce_datetime(value)
    overrides: dict[str, object] = {}
    if date_style is not None:
        overrides["date_style"] = _coerce_str("DATETIME", "dateStyle", date_style)
    if time_style is not None:
        overrides["time_style"] = _coerce_str("DATETIME", "timeStyle", time_style)
    if pattern is not None:
        overrides["pattern"] = _coerce_str("DATETIME", "pattern", pattern)

    if not overrides:
        return moment
    return FluentDateTime(moment.value, replace(moment.options, **overrides))  # type: ignore[arg-type]


# ============================================================================
# REGISTRIES
# ============================================================================


def create_default_registry() -> FunctionRegistry:
    """Create a new FunctionRegistry with NUMBER and DATETIME registered.

    Each call returns a fresh, unfrozen registry that callers may extend.

    Example:
        >>> registry = create_default_registry()
        >>> "NUMBER" in registry, "DATETIME" in registry
        (True, True)
    """
    registry = FunctionRegistry()
    registry.register(number_format, ftl_name="NUMBER", inject_locale=True)
    registry.register(datetime_format, ftl_name="DATETIME", inject_locale=True)
    return registry


_SHARED_REGISTRY: FunctionRegistry | None = None


def get_shared_registry() -> FunctionRegistry:
    """Get a shared, frozen FunctionRegistry with the built-in functions.

    Bundles copy it on construction, so sharing is safe; ``register`` on
    the returned object raises TypeError.
    """
    global _SHARED_REGISTRY  # noqa: PLW0603
    if _SHARED_REGISTRY is None:
        _SHARED_REGISTRY = create_default_registry()
        _SHARED_REGISTRY.freeze()
    return _SHARED_REGISTRY
