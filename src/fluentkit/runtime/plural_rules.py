"""CLDR plural rules implementation using Babel.

Provides cardinal plural category selection for all locales using Babel's
CLDR data.

Python 3.13+. Depends on Babel for CLDR data.

Reference: https://www.unicode.org/cldr/charts/47/supplemental/language_plural_rules.html
"""

import logging
from decimal import Decimal

from babel.core import UnknownLocaleError
from babel.plural import PluralRule

from fluentkit.enums import FormatterKind, PluralCategory
from fluentkit.locale_utils import get_babel_locale
from fluentkit.runtime.formatter_cache import FormatterCache

__all__ = ["get_plural_rule", "select_plural_category"]

logger = logging.getLogger(__name__)

# Used when CLDR has no data for a locale: "one" for 1, "other" otherwise.
_FALLBACK_RULE = PluralRule({"one": "n is 1"})


def get_plural_rule(locale: str) -> PluralRule:
    """Return the cardinal plural rule for ``locale``.

    Unknown or malformed locale codes get the one/other fallback rule.
    """
    try:
        return get_babel_locale(locale).plural_form
    except (UnknownLocaleError, ValueError):
        logger.warning("No plural rules for locale %r, using one/other fallback", locale)
        return _FALLBACK_RULE


def select_plural_category(
    n: int | float | Decimal,
    locale: str,
    cache: FormatterCache | None = None,
) -> PluralCategory:
    """Select CLDR plural category for number using Babel's CLDR data.

    Args:
        n: Number to categorize. Pass a Decimal to keep visible fraction
            digits: ``Decimal("1.0")`` is "other" in English, 1 is "one".
        locale: Locale code (e.g., "lv_LV", "en-US", "ar")
        cache: Optional formatter cache holding built rules

    Returns:
        Plural category

    Examples:
        >>> select_plural_category(1, "en")
        <PluralCategory.ONE: 'one'>
        >>> select_plural_category(0, "lv")
        <PluralCategory.ZERO: 'zero'>
        >>> select_plural_category(5, "ru")
        <PluralCategory.MANY: 'many'>
        >>> select_plural_category(2, "ar")
        <PluralCategory.TWO: 'two'>
    """
    if cache is None:
        rule = get_plural_rule(locale)
    else:
        rule = cache.get_or_create(FormatterKind.PLURAL, locale, None, lambda: get_plural_rule(locale))
    return PluralCategory(rule(n))
