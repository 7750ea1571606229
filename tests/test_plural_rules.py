"""Tests for CLDR plural category selection."""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fluentkit.enums import PluralCategory
from fluentkit.runtime import FormatterCache, select_plural_category


class TestSelectPluralCategory:
    """Categories from Babel's CLDR data."""

    @pytest.mark.parametrize(
        ("n", "locale", "expected"),
        [
            (1, "en", PluralCategory.ONE),
            (0, "en", PluralCategory.OTHER),
            (2, "en-US", PluralCategory.OTHER),
            (0, "lv", PluralCategory.ZERO),
            (11, "lv", PluralCategory.ZERO),
            (21, "lv_LV", PluralCategory.ONE),
            (2, "ar", PluralCategory.TWO),
            (3, "ru", PluralCategory.FEW),
            (5, "ru", PluralCategory.MANY),
            (1, "ja", PluralCategory.OTHER),
        ],
    )
    def test_integers(self, n: int, locale: str, expected: PluralCategory) -> None:
        assert select_plural_category(n, locale) is expected

    def test_visible_fraction_digits(self) -> None:
        assert select_plural_category(Decimal("1"), "en") is PluralCategory.ONE
        assert select_plural_category(Decimal("1.0"), "en") is PluralCategory.OTHER

    def test_unknown_locale_falls_back_to_one_other(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert select_plural_category(1, "zz-unknown") is PluralCategory.ONE
            assert select_plural_category(7, "zz-unknown") is PluralCategory.OTHER
        assert "one/other fallback" in caplog.text

    def test_rule_is_cached(self) -> None:
        cache = FormatterCache()
        select_plural_category(1, "pl", cache)
        select_plural_category(5, "pl", cache)
        assert (cache.misses, cache.hits) == (1, 1)

    @given(st.integers(min_value=0, max_value=10**9))
    def test_every_result_is_a_category(self, n: int) -> None:
        assert select_plural_category(n, "pl") in set(PluralCategory)
