"""Tests for pattern resolution: select expressions, plurals and values."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import pytest

from fluentkit.diagnostics import FluentError, FluentReferenceError
from fluentkit.runtime import (
    FluentBundle,
    FluentDateTime,
    FluentNumber,
    FluentResolver,
    FormatterCache,
    Scope,
    create_default_registry,
)
from fluentkit.runtime.resolver import to_fluent_value
from fluentkit.syntax import Message, parse

EMAILS = """
emails = { $n ->
    [0] No emails
    [one] One email
   *[other] { $n } emails
}
"""


def _bundle(locale: str, source: str, formatter_cache: FormatterCache) -> FluentBundle:
    bundle = FluentBundle(locale, use_isolating=False, formatter_cache=formatter_cache)
    assert bundle.add_resource(source) == ()
    return bundle


class TestToFluentValue:
    """Wrapping of caller-supplied values."""

    def test_numbers_wrapped(self) -> None:
        assert to_fluent_value(3) == FluentNumber(3)
        assert to_fluent_value(Decimal("1.5")) == FluentNumber(Decimal("1.5"))

    def test_bool_is_not_a_number(self) -> None:
        assert to_fluent_value(True) is True

    def test_dates_wrapped(self) -> None:
        assert to_fluent_value(date(2024, 1, 15)) == FluentDateTime(date(2024, 1, 15))

    def test_other_values_pass_through(self) -> None:
        marker = object()
        assert to_fluent_value("text") == "text"
        assert to_fluent_value(marker) is marker


class TestNumericSelection:
    """Exact number keys, then plural categories."""

    @pytest.mark.parametrize(
        ("n", "expected"),
        [(0, "No emails"), (1, "One email"), (5, "5 emails"), (1.5, "1.5 emails")],
    )
    def test_english_plurals(self, formatter_cache: FormatterCache, n: object, expected: str) -> None:
        bundle = _bundle("en", EMAILS, formatter_cache)
        assert bundle.format("emails", {"n": n}) == expected

    def test_exact_key_beats_category(self, formatter_cache: FormatterCache) -> None:
        source = "a = { $n ->\n    [one] category\n    [1] exact\n   *[other] other\n}"
        bundle = _bundle("en", source, formatter_cache)
        assert bundle.format("a", {"n": 1}) == "exact"

    def test_float_matches_decimal_key(self, formatter_cache: FormatterCache) -> None:
        source = "a = { $n ->\n    [1.5] one and a half\n   *[other] other\n}"
        bundle = _bundle("en", source, formatter_cache)
        assert bundle.format("a", {"n": 1.5}) == "one and a half"

    def test_visible_fraction_digits_change_category(self, formatter_cache: FormatterCache) -> None:
        """1.00 is "other" in English: the one category needs no visible decimals."""
        source = (
            "a = { NUMBER($n, minimumFractionDigits: 2) ->\n"
            "    [one] one\n"
            "   *[other] other\n"
            "}"
        )
        bundle = _bundle("en", source, formatter_cache)
        assert bundle.format("a", {"n": 1}) == "other"

    def test_number_literal_selector(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", "a = { 1 ->\n    [one] one\n   *[other] other\n}", formatter_cache)
        assert bundle.format("a") == "one"

    @pytest.mark.parametrize(
        ("locale", "n", "expected"),
        [
            ("lv", 0, "zero"),
            ("lv", 1, "one"),
            ("lv", 21, "one"),
            ("pl", 2, "few"),
            ("pl", 5, "many"),
            ("ar", 2, "two"),
        ],
    )
    def test_cldr_categories(
        self, formatter_cache: FormatterCache, locale: str, n: int, expected: str
    ) -> None:
        source = (
            "a = { $n ->\n"
            "    [zero] zero\n"
            "    [one] one\n"
            "    [two] two\n"
            "    [few] few\n"
            "    [many] many\n"
            "   *[other] other\n"
            "}"
        )
        bundle = _bundle(locale, source, formatter_cache)
        assert bundle.format("a", {"n": n}) == expected

    def test_unknown_locale_uses_one_other(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("xx", EMAILS.replace("[0]", "[100]"), formatter_cache)
        assert bundle.format("emails", {"n": 1}) == "One email"
        assert bundle.format("emails", {"n": 0}) == "0 emails"


class TestOtherSelectors:
    """String, boolean and unmatched selectors."""

    GENDER = "a = { $g ->\n    [female] She\n    [male] He\n   *[other] They\n}"

    def test_string_selector(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", self.GENDER, formatter_cache)
        assert bundle.format("a", {"g": "female"}) == "She"
        assert bundle.format("a", {"g": "unknown"}) == "They"

    def test_bool_selector(self, formatter_cache: FormatterCache) -> None:
        source = "a = { $on ->\n    [true] Yes\n   *[false] No\n}"
        bundle = _bundle("en", source, formatter_cache)
        assert bundle.format("a", {"on": True}) == "Yes"
        assert bundle.format("a", {"on": False}) == "No"

    def test_unsupported_selector_type_takes_default(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", self.GENDER, formatter_cache)
        assert bundle.format("a", {"g": ["female"]}) == "They"

    def test_failed_selector_takes_default(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", self.GENDER, formatter_cache)
        errors: list[FluentError] = []
        assert bundle.format("a", {}, errors) == "They"
        assert isinstance(errors[0], FluentReferenceError)

    def test_nested_select(self, formatter_cache: FormatterCache) -> None:
        source = (
            "a = { $g ->\n"
            "    [female] { $n ->\n"
            "        [one] her item\n"
            "       *[other] her items\n"
            "    }\n"
            "   *[other] { $n ->\n"
            "        [one] their item\n"
            "       *[other] their items\n"
            "    }\n"
            "}"
        )
        bundle = _bundle("en", source, formatter_cache)
        assert bundle.format("a", {"g": "female", "n": 2}) == "her items"
        assert bundle.format("a", {"g": "x", "n": 1}) == "their item"


class TestValueFormatting:
    """Literals and variables written to the output."""

    def test_number_literal_keeps_declared_precision(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", "a = { 1.50 } { 1000 }", formatter_cache)
        assert bundle.format("a") == "1.50 1,000"

    def test_string_literal_unescaped(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", 'a = { "\\u007B" }literal{ "\\"" }', formatter_cache)
        assert bundle.format("a") == '{literal"'

    def test_date_variable_uses_medium_style(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", "a = { $d }", formatter_cache)
        assert bundle.format("a", {"d": date(2024, 1, 15)}) == "Jan 15, 2024"

    def test_bool_and_other_values(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", "a = { $b } { $o }", formatter_cache)
        assert bundle.format("a", {"b": False, "o": None}) == "false "


class TestResolverDirect:
    """FluentResolver used without a bundle."""

    def test_resolve_entry_and_errors_in_scope(self, formatter_cache: FormatterCache) -> None:
        resource = parse("hello = Hello, { $name }!\nbye = Bye { missing }")
        messages = {e.id.name: e for e in resource.entries if isinstance(e, Message)}
        resolver = FluentResolver(
            "en",
            messages,
            {},
            function_registry=create_default_registry(),
            formatter_cache=formatter_cache,
            use_isolating=False,
        )
        scope = Scope({"name": "Ann"})
        assert resolver.resolve_entry(messages["hello"], scope) == "Hello, Ann!"
        assert resolver.resolve_entry(messages["bye"], scope) == "Bye {missing}"
        assert [str(e) for e in scope.errors] == ["Unknown message: missing"]
        assert scope.depth == 0
        assert not scope.is_tracking("bye")


class TestLongNumberLiterals:
    """Literals with more fraction digits than NUMBER() accepts."""

    LONG = "1." + "0" * 101

    def test_placeable_formats_without_raising(self, formatter_cache: FormatterCache) -> None:
        bundle = FluentBundle("en", use_isolating=False, formatter_cache=formatter_cache)
        assert bundle.add_resource(f"a = {{ {self.LONG} }}") == ()
        result = bundle.format("a", {}, [])
        assert isinstance(result, str)
        assert result.startswith("1.0")

    def test_selector_takes_plural_branch(self, formatter_cache: FormatterCache) -> None:
        source = f"a = {{ {self.LONG} ->\n    [one] one\n   *[other] other\n}}"
        bundle = _bundle("en", source, formatter_cache)
        assert bundle.format("a", {}, []) == "other"


@dataclass(frozen=True)
class Money:
    """Amount formatted only when written out."""

    value: int | str

    def format(self, locale: str) -> str:
        return f"{self.value} EUR ({locale})"


class TestCustomFunctionValues:
    """Values returned by functions added with add_function()."""

    SELECT = "a = { MONEY($n) ->\n    [one] ONE\n    [gold] GOLD\n   *[other] OTHER\n}"

    def test_deferred_value_formats_for_locale(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("de", "a = { MONEY(1) }", formatter_cache)
        bundle.add_function("MONEY", lambda v: Money(int(v.value)))
        assert bundle.format("a") == "1 EUR (de)"

    def test_deferred_value_selects_on_raw_number(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", self.SELECT, formatter_cache)
        bundle.add_function("MONEY", lambda v: Money(int(v.value)))
        assert bundle.format("a", {"n": 1}) == "ONE"
        assert bundle.format("a", {"n": 7}) == "OTHER"

    def test_deferred_value_selects_on_raw_string(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", self.SELECT, formatter_cache)
        bundle.add_function("MONEY", lambda v: Money(v))
        assert bundle.format("a", {"n": "gold"}) == "GOLD"

    def test_none_result_writes_nothing(self, formatter_cache: FormatterCache) -> None:
        bundle = _bundle("en", "a = [{ NOTHING() }]", formatter_cache)
        bundle.add_function("NOTHING", lambda: None)
        errors: list[FluentError] = []
        assert bundle.format("a", {}, errors) == "[]"
        assert errors == []
