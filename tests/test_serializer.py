"""Tests for AST -> FTL serialization and the parse/serialize round trip."""

from __future__ import annotations

import pytest
from hypothesis import given

from fluentkit.enums import CommentType
from fluentkit.syntax import (
    Comment,
    FluentSerializer,
    Identifier,
    Message,
    Pattern,
    Placeable,
    Resource,
    SelectExpression,
    SerializationValidationError,
    StringLiteral,
    TextElement,
    VariableReference,
    Variant,
    parse,
    serialize,
)
from tests.strategies import ftl_resources


def _roundtrip(source: str) -> str:
    return serialize(parse(source))


class TestEntryLayout:
    """Messages, terms and attributes."""

    def test_simple_message(self) -> None:
        assert _roundtrip("hello = Hello, world!") == "hello = Hello, world!\n"

    def test_entries_follow_each_other_directly(self) -> None:
        assert _roundtrip("a = A\n\n\nb = B\n") == "a = A\nb = B\n"

    def test_attributes_indented(self) -> None:
        assert (
            _roundtrip("btn = Save\n  .tooltip = Click")
            == "btn = Save\n    .tooltip = Click\n"
        )

    def test_attribute_only_message(self) -> None:
        assert _roundtrip("login =\n    .title = Sign in") == "login =\n    .title = Sign in\n"

    def test_term_with_attribute(self) -> None:
        source = "-brand = Firefox\n    .gender = masculine\n"
        assert _roundtrip(source) == source

    def test_multiline_value_moves_to_own_line(self) -> None:
        assert _roundtrip("a = one\n  two") == "a =\n    one\n    two\n"

    def test_multiline_starting_with_special_char_stays_inline(self) -> None:
        """Moving "[a]" to the start of a line would turn it into a variant key."""
        output = _roundtrip("a = [a]\n    b")
        assert output == "a = [a]\n    b\n"
        assert parse(output) == parse("a = [a]\n    b")


class TestExpressions:
    """Placeables, calls and literals."""

    @pytest.mark.parametrize(
        "source",
        [
            "a = Hi { $name }!\n",
            "p = { NUMBER($n, minimumFractionDigits: 2) }\n",
            't = { -brand(case: "gen") }\n',
            "r = { msg.attr } and { -term.attr ->\n   *[x] y\n}",
            's = { "a\\"b \\u00E9" }\n',
            "n = { -1.50 }\n",
            "f = { F() }\n",
        ],
    )
    def test_expression_round_trips(self, source: str) -> None:
        assert parse(_roundtrip(source)) == parse(source)

    def test_canonical_call_spacing(self) -> None:
        assert _roundtrip("p = {NUMBER( $n ,style:\"percent\" )}") == (
            'p = { NUMBER($n, style: "percent") }\n'
        )

    def test_select_layout(self) -> None:
        source = "emails = { $n ->\n  [one] One\n *[other] Other\n}"
        assert _roundtrip(source) == (
            "emails =\n"
            "    { $n ->\n"
            "        [one] One\n"
            "       *[other] Other\n"
            "    }\n"
        )

    def test_braces_in_text_become_literals(self) -> None:
        """Hand-built text holding braces is written as string literal placeables."""
        resource = Resource((Message(Identifier("a"), Pattern((TextElement("{x}"),))),))
        output = serialize(resource)
        assert output == 'a = { "{" }x{ "}" }\n'
        assert isinstance(parse(output).entries[0], Message)

    def test_string_literal_from_text_escapes(self) -> None:
        literal = StringLiteral.from_text('say "hi" \\o/')
        assert literal.unescaped() == 'say "hi" \\o/'
        resource = Resource((Message(Identifier("a"), Pattern((Placeable(literal),))),))
        assert parse(serialize(resource)) == resource


class TestComments:
    """Standalone and attached comments."""

    def test_attached_comment_has_no_blank_line(self) -> None:
        assert _roundtrip("# About\nmsg = x") == "# About\nmsg = x\n"

    def test_standalone_comment_is_framed_by_blank_lines(self) -> None:
        assert _roundtrip("a = A\n# note\n\nb = B") == "a = A\n\n# note\n\nb = B\n"

    def test_multiline_comment_with_empty_line(self) -> None:
        output = serialize(Resource((Comment("a\n\nb", CommentType.GROUP),)))
        assert output == "## a\n##\n## b\n\n"


class TestJunkAndValidation:
    """Junk handling and optional AST validation."""

    def test_junk_dropped_by_default(self) -> None:
        assert _roundtrip("a = A\n!!!\nb = B\n") == "a = A\nb = B\n"

    def test_with_junk_writes_content_verbatim(self) -> None:
        source = "a = A\n!!!\nb = B\n"
        assert serialize(parse(source), with_junk=True) == source
        assert FluentSerializer(with_junk=True).with_junk

    def test_validate_rejects_select_without_default(self) -> None:
        select = SelectExpression(
            VariableReference(Identifier("n")),
            (Variant(Identifier("one"), Pattern((TextElement("x"),))),),
        )
        resource = Resource((Message(Identifier("a"), Pattern((Placeable(select),))),))
        with pytest.raises(SerializationValidationError, match="0 default"):
            serialize(resource, validate=True)

    def test_validate_rejects_empty_message(self) -> None:
        resource = Resource((Message(Identifier("a"), None),))
        with pytest.raises(SerializationValidationError, match="neither a value"):
            serialize(resource, validate=True)

    def test_validate_accepts_parsed_resource(self) -> None:
        source = "a = { $n ->\n   *[other] x\n}\n"
        assert serialize(parse(source), validate=True)


class TestRoundTripProperties:
    """parse(serialize(parse(s))) == parse(s) for valid resources."""

    @given(ftl_resources())
    def test_round_trip_preserves_ast(self, source: str) -> None:
        resource = parse(source)
        assert parse(serialize(resource)) == resource

    @given(ftl_resources())
    def test_serialization_is_idempotent(self, source: str) -> None:
        once = serialize(parse(source))
        assert serialize(parse(once)) == once
