"""Locale code handling shared by bundles, plural rules and formatters.

Bundles accept BCP-47 codes ("en-US") and POSIX codes ("en_US"); Babel
only understands the latter. Everything normalizes at the boundary with
:func:`normalize_locale` and uses the normalized form for cache keys.

Python 3.13+.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import TYPE_CHECKING

from fluentkit.constants import MAX_LOCALE_CACHE_SIZE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "is_valid_locale_code",
    "normalize_locale",
    "resolve_babel_locale",
]

logger = logging.getLogger(__name__)

# language[-_]subtag... with ASCII alphanumerics only
_LOCALE_CODE_PATTERN = re.compile(r"^[A-Za-z]{2,8}([-_][A-Za-z0-9]{1,8})*$")


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to the POSIX form Babel expects.

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


def is_valid_locale_code(locale_code: str) -> bool:
    """Check that a locale code is syntactically well formed.

    Only the shape is checked; whether CLDR has data for the locale is
    decided later by :func:`resolve_babel_locale`.
    """
    return bool(_LOCALE_CODE_PATTERN.match(locale_code))


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale object with caching.

    Thread-safe via lru_cache internal locking.

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def resolve_babel_locale(locale_code: str) -> Locale:
    """Get a Babel Locale, falling back to root locale data when unknown.

    Formatting never fails because CLDR lacks a locale: an unknown or
    malformed code resolves to the root locale and a warning is logged
    once per code.
    """
    from babel import Locale, UnknownLocaleError  # noqa: PLC0415

    try:
        return get_babel_locale(locale_code)
    except (UnknownLocaleError, ValueError):
        logger.warning("Unknown locale %r, using root locale data", locale_code)
        return Locale("root")
