"""Tests for FluentBundle: registration, lookup and formatting."""

from __future__ import annotations

import logging
from datetime import date

import pytest

from fluentkit.diagnostics import (
    FluentCyclicReferenceError,
    FluentError,
    FluentReferenceError,
    FluentResolutionError,
    FluentSyntaxError,
    SyntaxCode,
)
from fluentkit.runtime import FluentBundle, get_shared_registry
from fluentkit.syntax import parse


class TestBundleConstruction:
    """Locale validation and configuration."""

    @pytest.mark.parametrize("locale", ["", "not a locale!", "e", "en US"])
    def test_invalid_locale_rejected(self, locale: str) -> None:
        with pytest.raises(ValueError, match="Invalid locale code"):
            FluentBundle(locale)

    @pytest.mark.parametrize("locale", ["en", "en-US", "lv_LV", "zh-Hant-TW"])
    def test_valid_locales(self, locale: str) -> None:
        assert FluentBundle(locale).locale == locale

    def test_defaults(self) -> None:
        bundle = FluentBundle("en")
        assert bundle.use_isolating
        assert "NUMBER" in bundle.functions
        assert "DATETIME" in bundle.functions
        assert repr(bundle) == "FluentBundle(locale='en', messages=0, terms=0)"

    def test_registry_is_a_private_copy(self) -> None:
        """add_function never reaches the shared registry or other bundles."""
        first = FluentBundle("en")
        second = FluentBundle("en")
        first.add_function("SHOUT", lambda value: str(value).upper())
        assert "SHOUT" in first.functions
        assert "SHOUT" not in second.functions
        assert "SHOUT" not in get_shared_registry()

    def test_shared_formatter_cache(self, formatter_cache: object) -> None:
        bundle = FluentBundle("en", formatter_cache=formatter_cache)  # type: ignore[arg-type]
        assert bundle.formatter_cache is formatter_cache


class TestAddResource:
    """Registering messages and terms."""

    def test_clean_resource_returns_no_errors(self, en_bundle: FluentBundle) -> None:
        assert en_bundle.add_resource("hello = Hello\n-brand = Firefox\n") == ()
        assert en_bundle.has_message("hello")
        assert en_bundle.has_term("brand")
        assert en_bundle.has_term("-brand")

    def test_syntax_errors_returned_per_annotation(self, en_bundle: FluentBundle) -> None:
        errors = en_bundle.add_resource("good = x\nbad = }\n")
        assert len(errors) == 1
        error = errors[0]
        assert isinstance(error, FluentSyntaxError)
        assert error.code is SyntaxCode.E0027
        assert error.position == 15
        assert error.span is not None
        assert (error.span.line, error.span.column) == (2, 7)
        assert en_bundle.format("good") == "x"

    def test_junk_logged_as_warning(
        self, en_bundle: FluentBundle, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="fluentkit.runtime.bundle"):
            en_bundle.add_resource("!!!", source_path="ui.ftl")
        assert "Syntax error in ui.ftl" in caplog.text

    def test_accepts_parsed_resource(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource(parse("a = A"))
        assert en_bundle.format("a") == "A"

    def test_later_definition_overrides(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("a = 1")
        en_bundle.add_resource("a = 2")
        assert en_bundle.format("a") == "2"

    def test_overrides_disabled_keeps_first(
        self, en_bundle: FluentBundle, caplog: pytest.LogCaptureFixture
    ) -> None:
        en_bundle.add_resource("a = 1\n-t = T")
        with caplog.at_level(logging.WARNING, logger="fluentkit.runtime.bundle"):
            errors = en_bundle.add_resource("a = 2\n-t = U", allow_overrides=False)
        assert errors == ()
        assert en_bundle.format("a") == "1"
        assert en_bundle.format("-t") == "T"
        assert "Skipping duplicate entry -t" in caplog.text

    def test_oversized_source_raises(self) -> None:
        bundle = FluentBundle("en", max_source_size=4)
        with pytest.raises(ValueError, match="exceeds maximum"):
            bundle.add_resource("hello = x")

    def test_lookup_helpers(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("a = A\nb = B\n-t = T")
        assert list(en_bundle.message_ids()) == ["a", "b"]
        assert en_bundle.get_message("a") is not None
        assert en_bundle.get_message("t") is None
        assert en_bundle.get_term("-t") is en_bundle.get_term("t")
        assert "-t" in en_bundle
        assert "t" not in en_bundle
        assert 42 not in en_bundle


class TestFormat:
    """Messages, attributes, terms and error reporting."""

    def test_variables(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("welcome = Welcome, { $name }!")
        assert en_bundle.format("welcome", {"name": "Anna"}) == "Welcome, Anna!"

    def test_missing_variable(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("welcome = Welcome, { $name }!")
        errors: list[FluentError] = []
        assert en_bundle.format("welcome", {}, errors) == "Welcome, {$name}!"
        assert len(errors) == 1
        assert isinstance(errors[0], FluentReferenceError)
        assert str(errors[0]) == "Unknown variable: $name"

    def test_unknown_identifier_returns_itself(self, en_bundle: FluentBundle) -> None:
        errors: list[FluentError] = []
        assert en_bundle.format("logout", errors=errors) == "logout"
        assert str(errors[0]) == "Unknown identifier: logout"

    def test_errors_optional(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("a = { $x }")
        assert en_bundle.format("a") == "{$x}"

    def test_attribute(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("login = Log in\n    .title = Sign in to continue")
        assert en_bundle.format("login", attribute="title") == "Sign in to continue"

    def test_unknown_attribute(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("login = Log in")
        errors: list[FluentError] = []
        assert en_bundle.format("login", errors=errors, attribute="x") == "{login.x}"
        assert str(errors[0]) == "Unknown attribute: login.x"

    def test_message_without_value(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("login =\n    .title = T")
        errors: list[FluentError] = []
        assert en_bundle.format("login", errors=errors) == "{login}"
        assert str(errors[0]) == "No value: login"

    def test_message_reference(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("x = X\n    .a = attr\ny = { x } and { x.a }")
        assert en_bundle.format("y") == "X and attr"

    def test_unknown_references(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("y = { nope } { nope.a } { -none } { -none.a ->\n   *[x] z\n}")
        errors: list[FluentError] = []
        assert en_bundle.format("y", errors=errors) == "{nope} {nope.a} {-none} z"
        assert [str(e) for e in errors] == [
            "Unknown message: nope",
            "Unknown message: nope",
            "Unknown term: -none",
            "Unknown term: -none",
        ]

    def test_format_term_directly(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("-brand = Firefox\n    .gender = masculine")
        assert en_bundle.format("-brand") == "Firefox"
        assert en_bundle.format("-brand", attribute="gender") == "masculine"

    def test_format_pattern(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("login = Log in\n    .title = Hi { $who }")
        message = en_bundle.get_message("login")
        assert message is not None
        pattern = message.attributes[0].value
        assert en_bundle.format_pattern(pattern, {"who": "Jo"}) == "Hi Jo"
        errors: list[FluentError] = []
        assert en_bundle.format_pattern(pattern, None, errors) == "Hi {$who}"
        assert len(errors) == 1


class TestTerms:
    """Term references and parameterized terms."""

    def test_term_reference(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("-brand = Firefox\nabout = About { -brand }")
        assert en_bundle.format("about") == "About Firefox"

    def test_named_arguments_become_locals(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource(
            "-brand = { $case ->\n"
            "    [gen] Firefoxa\n"
            "   *[nom] Firefox\n"
            "}\n"
            'about = O { -brand(case: "gen") }\n'
            "plain = { -brand }\n"
        )
        assert en_bundle.format("about") == "O Firefoxa"
        assert en_bundle.format("plain") == "Firefox"

    def test_locals_shadow_caller_arguments(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource('-t = { $x }\nm = { -t(x: "local") }')
        assert en_bundle.format("m", {"x": "arg"}) == "local"

    def test_positional_term_arguments_are_inert(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource('-t = T\nm = { -t("ignored", $missing) }')
        errors: list[FluentError] = []
        assert en_bundle.format("m", errors=errors) == "T"
        assert errors == []

    def test_term_attribute_selector(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource(
            "-brand = Firefox\n    .gender = masculine\n"
            "liked = { -brand.gender ->\n"
            "    [masculine] He\n"
            "   *[other] It\n"
            "}\n"
        )
        assert en_bundle.format("liked") == "He"


class TestCyclesAndDepth:
    """Cycle detection and reference depth limits."""

    def test_self_reference(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("a = { a }")
        errors: list[FluentError] = []
        assert en_bundle.format("a", errors=errors) == "{a}"
        assert len(errors) == 1
        assert isinstance(errors[0], FluentCyclicReferenceError)

    def test_indirect_cycle(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("a = { b }\nb = { a }")
        errors: list[FluentError] = []
        assert en_bundle.format("a", errors=errors) == "{a}"
        assert str(errors[0]) == "Circular reference detected: a"

    def test_cycle_through_term(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("-t = { m }\nm = { -t }")
        errors: list[FluentError] = []
        assert en_bundle.format("m", errors=errors) == "{m}"
        assert len(errors) == 1
        assert isinstance(errors[0], FluentCyclicReferenceError)

    def test_repeated_reference_is_not_a_cycle(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("x = X\ny = { x } { x }")
        errors: list[FluentError] = []
        assert en_bundle.format("y", errors=errors) == "X X"
        assert errors == []

    def test_max_depth(self) -> None:
        bundle = FluentBundle("en", use_isolating=False, max_depth=2)
        bundle.add_resource("a = { b }\nb = { c }\nc = C")
        errors: list[FluentError] = []
        assert bundle.format("a", errors=errors) == "{c}"
        assert isinstance(errors[0], FluentResolutionError)
        assert "Maximum resolution depth (2)" in str(errors[0])
        assert bundle.format("b") == "C"


class TestIsolationAndTransform:
    """Bidi isolation marks and text transforms."""

    def test_placeables_isolated_in_mixed_pattern(self) -> None:
        bundle = FluentBundle("en")
        bundle.add_resource("a = Hi { $n }")
        assert bundle.format("a", {"n": "A"}) == "Hi \u2068A\u2069"

    def test_lone_placeable_not_isolated(self) -> None:
        bundle = FluentBundle("en")
        bundle.add_resource("b = { $n }")
        assert bundle.format("b", {"n": "A"}) == "A"

    def test_transform_applies_to_text_only(self) -> None:
        bundle = FluentBundle("en", use_isolating=False, transform=str.upper)
        bundle.add_resource("a = hi { $n }")
        assert bundle.format("a", {"n": "x"}) == "HI x"


class TestFunctionsInBundle:
    """Built-in and custom functions called from FTL."""

    def test_custom_function(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_function("SHOUT", lambda value: str(value).upper())
        en_bundle.add_resource("a = { SHOUT($n) }")
        assert en_bundle.format("a", {"n": "hi"}) == "HI"

    def test_custom_function_options_are_snake_cased(self, en_bundle: FluentBundle) -> None:
        def repeat(value: object, *, times_count: object = 1) -> str:
            return str(value) * int(str(times_count))

        en_bundle.add_function("REPEAT", repeat)
        en_bundle.add_resource('a = { REPEAT("ab", timesCount: "3") }')
        assert en_bundle.format("a") == "ababab"

    def test_custom_function_with_locale(self) -> None:
        def where(value: object, *, locale_code: str) -> str:
            return f"{value}@{locale_code}"

        bundle = FluentBundle("de", use_isolating=False)
        bundle.add_function("WHERE", where, inject_locale=True)
        bundle.add_resource('a = { WHERE("x") }')
        assert bundle.format("a") == "x@de"

    def test_unknown_function(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource("a = { NOPE($x) }")
        errors: list[FluentError] = []
        assert en_bundle.format("a", errors=errors) == "{NOPE()}"
        assert str(errors[0]) == "Unknown function: NOPE()"
        assert len(errors) == 1

    def test_function_value_error_becomes_resolution_error(self, en_bundle: FluentBundle) -> None:
        def fail(value: object) -> str:
            raise ValueError("bad input")

        en_bundle.add_function("FAIL", fail)
        en_bundle.add_resource("a = x { FAIL(1) } y")
        errors: list[FluentError] = []
        assert en_bundle.format("a", errors=errors) == "x {FAIL()} y"
        assert isinstance(errors[0], FluentResolutionError)
        assert "bad input" in str(errors[0])

    def test_function_bug_propagates(self, en_bundle: FluentBundle) -> None:
        """Exceptions other than TypeError/ValueError are not Fluent errors."""

        def broken(value: object) -> str:
            raise RuntimeError("bug")

        en_bundle.add_function("BROKEN", broken)
        en_bundle.add_resource("a = { BROKEN(1) }")
        with pytest.raises(RuntimeError, match="bug"):
            en_bundle.format("a")

    def test_number_option_coercion_failure(self, en_bundle: FluentBundle) -> None:
        en_bundle.add_resource('a = { NUMBER($n, minimumFractionDigits: "lots") }')
        errors: list[FluentError] = []
        assert en_bundle.format("a", {"n": 5}, errors) == "{NUMBER()}"
        assert isinstance(errors[0], FluentResolutionError)

    def test_numbers_and_dates_formatted_for_locale(self, formatter_cache: object) -> None:
        bundle = FluentBundle("de", use_isolating=False, formatter_cache=formatter_cache)  # type: ignore[arg-type]
        bundle.add_resource("n = { $n }\nd = { DATETIME($d, pattern: \"yyyy-MM-dd\") }")
        assert bundle.format("n", {"n": 1234.5}) == "1.234,5"
        assert bundle.format("d", {"d": date(2024, 1, 15)}) == "2024-01-15"
