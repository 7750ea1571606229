"""Tests for locale fallback over several bundles."""

from __future__ import annotations

import pytest

from fluentkit import FluentSequence
from fluentkit.diagnostics import FluentError, FluentReferenceError
from fluentkit.localization import FallbackInfo
from fluentkit.runtime import FluentBundle, FormatterCache


@pytest.fixture
def bundles(formatter_cache: FormatterCache) -> tuple[FluentBundle, FluentBundle]:
    lv = FluentBundle("lv", use_isolating=False, formatter_cache=formatter_cache)
    lv.add_resource("hello = Sveiki, { $name }!\n-brand = Lapsa\n")
    en = FluentBundle("en", use_isolating=False, formatter_cache=formatter_cache)
    en.add_resource(
        "hello = Hello, { $name }!\n"
        "bye = Goodbye\n"
        "login = Log in\n    .title = Sign in\n"
        "-brand = Fox\n"
    )
    return lv, en


class TestFluentSequence:
    """First bundle defining an identifier answers in full."""

    def test_first_bundle_wins(self, bundles: tuple[FluentBundle, FluentBundle]) -> None:
        sequence = FluentSequence(*bundles)
        assert sequence.format("hello", {"name": "Anna"}) == "Sveiki, Anna!"

    def test_falls_back_to_later_bundle(self, bundles: tuple[FluentBundle, FluentBundle]) -> None:
        sequence = FluentSequence(*bundles)
        assert sequence.format("bye") == "Goodbye"
        assert sequence.format("login", attribute="title") == "Sign in"

    def test_on_fallback_called_only_for_fallbacks(
        self, bundles: tuple[FluentBundle, FluentBundle]
    ) -> None:
        events: list[FallbackInfo] = []
        sequence = FluentSequence(*bundles, on_fallback=events.append)
        sequence.format("hello", {"name": "A"})
        sequence.format("bye")
        assert events == [FallbackInfo(requested_locale="lv", resolved_locale="en", identifier="bye")]

    def test_unknown_identifier(self, bundles: tuple[FluentBundle, FluentBundle]) -> None:
        errors: list[FluentError] = []
        assert FluentSequence(*bundles).format("nope", errors=errors) == "nope"
        assert len(errors) == 1
        assert isinstance(errors[0], FluentReferenceError)
        assert str(errors[0]) == "Unknown identifier: nope"

    def test_errors_come_from_answering_bundle(
        self, bundles: tuple[FluentBundle, FluentBundle]
    ) -> None:
        errors: list[FluentError] = []
        assert FluentSequence(*bundles).format("hello", errors=errors) == "Sveiki, {$name}!"
        assert [str(e) for e in errors] == ["Unknown variable: $name"]

    def test_find(self, bundles: tuple[FluentBundle, FluentBundle]) -> None:
        lv, en = bundles
        sequence = FluentSequence(lv, en)
        assert sequence.find("hello") is lv
        assert sequence.find("-brand") is lv
        assert sequence.find("bye") is en
        assert sequence.find("nope") is None
        assert sequence.find_all("hello", "bye", "nope") == (lv, en, None)

    def test_container_protocol(self, bundles: tuple[FluentBundle, FluentBundle]) -> None:
        sequence = FluentSequence(*bundles)
        assert len(sequence) == 2
        assert list(sequence) == list(bundles)
        assert sequence.bundles == bundles
        assert sequence.locales == ("lv", "en")
        assert repr(sequence) == "FluentSequence(locales=['lv', 'en'])"

    def test_empty_sequence(self) -> None:
        assert FluentSequence().format("x") == "x"

    def test_rejects_non_bundles(self) -> None:
        with pytest.raises(TypeError, match="FluentBundle"):
            FluentSequence("en")  # type: ignore[arg-type]
