"""Tests for the FTL character scanner."""

import pytest

from fluentkit.diagnostics import FluentSyntaxError, SyntaxCode
from fluentkit.syntax.scanner import LineOffsetCache, Scanner


class TestScannerNavigation:
    """Cursor movement and end-of-input reporting."""

    def test_advance_walks_characters_then_none(self) -> None:
        """advance() returns each following character, then None at the end."""
        scanner = Scanner("ab")
        assert scanner.current_char == "a"
        assert scanner.advance() == "b"
        assert scanner.advance() is None
        assert scanner.is_eof

    def test_empty_source_is_eof(self) -> None:
        scanner = Scanner("")
        assert scanner.current_char is None
        assert scanner.is_eof

    def test_crlf_reads_as_single_newline(self) -> None:
        """A CRLF pair is seen as one "\\n" and stepped over as a unit."""
        scanner = Scanner("a\r\nb")
        assert scanner.advance() == "\n"
        assert scanner.advance() == "b"
        assert scanner.index == 3

    def test_lone_carriage_return_is_ordinary(self) -> None:
        scanner = Scanner("a\rb")
        assert scanner.advance() == "\r"


class TestScannerPeek:
    """Lookahead with an uncommitted peek position."""

    def test_peek_does_not_move_current_position(self) -> None:
        scanner = Scanner("abc")
        assert scanner.peek() == "b"
        assert scanner.peek() == "c"
        assert scanner.current_char == "a"
        assert scanner.current_peek == "c"

    def test_skip_to_peek_commits(self) -> None:
        scanner = Scanner("abc")
        scanner.peek()
        scanner.peek()
        scanner.skip_to_peek()
        assert scanner.current_char == "c"
        assert scanner.peek_offset == 0

    def test_reset_peek_backs_out(self) -> None:
        scanner = Scanner("abc")
        scanner.peek()
        scanner.reset_peek()
        assert scanner.current_peek == "a"

    def test_peek_over_crlf(self) -> None:
        """Peeking steps over CRLF as one character too."""
        scanner = Scanner("a\r\nb")
        assert scanner.peek() == "\n"
        assert scanner.peek() == "b"

    def test_advance_resets_peek(self) -> None:
        scanner = Scanner("abc")
        scanner.peek()
        scanner.advance()
        assert scanner.peek_offset == 0
        assert scanner.current_peek == "b"


class TestScannerCharacterClasses:
    """Identifier and number start detection."""

    @pytest.mark.parametrize("char", ["a", "Z"])
    def test_identifier_start_letters(self, char: str) -> None:
        assert Scanner.is_char_id_start(char)

    @pytest.mark.parametrize("char", ["1", "-", "_", "é", None])
    def test_identifier_start_rejects(self, char: str | None) -> None:
        """Only ASCII letters start identifiers."""
        assert not Scanner.is_char_id_start(char)

    def test_identifier_chars_include_digits_hyphen_underscore(self) -> None:
        assert all(Scanner.is_identifier_char(c) for c in "a9-_")

    def test_non_ascii_digit_is_not_a_digit(self) -> None:
        """Superscript two passes str.isdigit() but is not an FTL digit."""
        assert not Scanner.is_digit("²")

    @pytest.mark.parametrize(("source", "expected"), [("5", True), ("-5", True), ("-a", False), ("a", False)])
    def test_is_number_start(self, source: str, expected: bool) -> None:
        """Negative numbers are detected; the peek position is left reset."""
        scanner = Scanner(source)
        assert scanner.is_number_start() is expected
        assert scanner.peek_offset == 0


class TestScannerExpectations:
    """Consuming helpers raise catalog errors on mismatch."""

    def test_expect_char_consumes(self) -> None:
        scanner = Scanner("=x")
        scanner.expect_char("=")
        assert scanner.current_char == "x"

    def test_expect_char_mismatch_raises_e0003(self) -> None:
        with pytest.raises(FluentSyntaxError) as exc_info:
            Scanner("x").expect_char("}")
        assert exc_info.value.code is SyntaxCode.E0003
        assert str(exc_info.value) == 'Expected token: "}"'

    def test_expect_line_end_accepts_eof(self) -> None:
        Scanner("").expect_line_end()

    def test_expect_line_end_rejects_text(self) -> None:
        with pytest.raises(FluentSyntaxError) as exc_info:
            Scanner("x").expect_line_end()
        assert exc_info.value.arguments == ("␤",)

    def test_take_id_start_rejects_digit(self) -> None:
        with pytest.raises(FluentSyntaxError) as exc_info:
            Scanner("1").take_id_start()
        assert exc_info.value.code is SyntaxCode.E0004

    def test_take_char_leaves_position_on_mismatch(self) -> None:
        scanner = Scanner("a")
        assert scanner.take_digit() is None
        assert scanner.index == 0

    def test_take_hex_digit(self) -> None:
        scanner = Scanner("fG")
        assert scanner.take_hex_digit() == "f"
        assert scanner.take_hex_digit() is None


class TestLinePositions:
    """Offset to line/column conversion."""

    def test_line_and_column_are_one_indexed(self) -> None:
        scanner = Scanner("ab\ncd")
        scanner.index = 4
        assert (scanner.line, scanner.column) == (2, 2)

    def test_line_offset_cache(self) -> None:
        cache = LineOffsetCache("line1\nline2")
        assert cache.get_line_col(0) == (1, 1)
        assert cache.get_line_col(8) == (2, 3)

    def test_positions_are_clamped(self) -> None:
        cache = LineOffsetCache("ab")
        assert cache.get_line_col(-5) == (1, 1)
        assert cache.get_line_col(99) == (1, 3)
