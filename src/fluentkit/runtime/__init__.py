"""Fluent runtime package.

Provides message resolution, built-in functions, and the FluentBundle API.
Depends on syntax package for parsing.

Python 3.13+.
"""

from .bundle import FluentBundle
from .formatter_cache import FormatterCache
from .formatters import DateTimeOptions, NumberOptions
from .function_bridge import FunctionRegistry
from .functions import (
    create_default_registry,
    datetime_format,
    get_shared_registry,
    number_format,
)
from .plural_rules import select_plural_category
from .resolver import FluentResolver
from .scope import MISSING, Scope
from .value_types import (
    DeferredValue,
    FluentDateTime,
    FluentFunction,
    FluentNumber,
    FluentValue,
)

__all__ = [
    "MISSING",
    "DateTimeOptions",
    "DeferredValue",
    "FluentBundle",
    "FluentDateTime",
    "FluentFunction",
    "FluentNumber",
    "FluentResolver",
    "FluentValue",
    "FormatterCache",
    "FunctionRegistry",
    "NumberOptions",
    "Scope",
    "create_default_registry",
    "datetime_format",
    "get_shared_registry",
    "number_format",
    "select_plural_category",
]
