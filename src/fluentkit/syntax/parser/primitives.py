"""Primitive parsing utilities for the FTL parser.

Low-level rules for identifiers, numbers and string literals. Each rule
consumes input from the scanner and either returns a value or raises
:class:`~fluentkit.diagnostics.FluentSyntaxError` with its catalog code.
Spans are attached by the calling rule in :mod:`.rules`.
"""

from fluentkit.diagnostics import FluentSyntaxError, SyntaxCode
from fluentkit.syntax.ast import Identifier, NumberLiteral, StringLiteral
from fluentkit.syntax.scanner import EOL, Scanner

# Unicode escape sequence lengths.
# \uXXXX = 4 hex digits (BMP characters U+0000 to U+FFFF)
_UNICODE_ESCAPE_LEN_SHORT: int = 4

# \UXXXXXX = 6 hex digits (full Unicode range U+0000 to U+10FFFF)
_UNICODE_ESCAPE_LEN_LONG: int = 6


def parse_identifier_name(scanner: Scanner) -> str:
    """Parse identifier: [a-zA-Z][a-zA-Z0-9_-]*

    Examples:
        hello -> "hello"
        brand-name -> "brand-name"

    Raises:
        FluentSyntaxError: E0004 if the first character is not a letter
    """
    name = scanner.take_id_start()
    while (char := scanner.take_id_char()) is not None:
        name += char
    return name


def parse_identifier(scanner: Scanner) -> Identifier:
    return Identifier(parse_identifier_name(scanner))


def _parse_digits(scanner: Scanner) -> str:
    digits = ""
    while (char := scanner.take_digit()) is not None:
        digits += char
    if not digits:
        raise FluentSyntaxError(SyntaxCode.E0004, "0-9")
    return digits


def parse_number(scanner: Scanner) -> NumberLiteral:
    """Parse number literal: -?[0-9]+(\\.[0-9]+)?

    The token is kept verbatim so "1.50" keeps two fraction digits.
    """
    raw = ""
    if scanner.current_char == "-":
        scanner.advance()
        raw += "-"
    raw += _parse_digits(scanner)

    if scanner.current_char == ".":
        scanner.advance()
        raw += "." + _parse_digits(scanner)

    return NumberLiteral.from_raw(raw)


def _parse_unicode_escape(scanner: Scanner, marker: str, length: int) -> str:
    scanner.expect_char(marker)
    sequence = ""
    for _ in range(length):
        char = scanner.take_hex_digit()
        if char is None:
            current = scanner.current_char or ""
            raise FluentSyntaxError(SyntaxCode.E0026, f"\\{marker}{sequence}{current}")
        sequence += char
    return f"\\{marker}{sequence}"


def _parse_escape_sequence(scanner: Scanner) -> str:
    """Parse the part of an escape after the backslash, returning it raw."""
    char = scanner.current_char
    match char:
        case "\\" | '"':
            scanner.advance()
            return f"\\{char}"
        case "u":
            return _parse_unicode_escape(scanner, "u", _UNICODE_ESCAPE_LEN_SHORT)
        case "U":
            return _parse_unicode_escape(scanner, "U", _UNICODE_ESCAPE_LEN_LONG)
        case _:
            raise FluentSyntaxError(SyntaxCode.E0025, char or "")


def parse_string_literal(scanner: Scanner) -> StringLiteral:
    """Parse string literal: "text"

    The literal keeps its raw escaped form; escapes are only validated
    here. ``StringLiteral.unescaped()`` decodes them.

    Raises:
        FluentSyntaxError: E0020 when a line end comes before the closing
            quote, E0025/E0026 for bad escapes
    """
    scanner.expect_char('"')
    value = ""
    while (char := scanner.take_char(lambda c: c not in ('"', EOL))) is not None:
        if char == "\\":
            value += _parse_escape_sequence(scanner)
        else:
            value += char

    if scanner.current_char == EOL:
        raise FluentSyntaxError(SyntaxCode.E0020)

    scanner.expect_char('"')
    return StringLiteral(value)


def parse_literal(scanner: Scanner) -> NumberLiteral | StringLiteral:
    """Parse a number or string literal (named argument values)."""
    if scanner.is_number_start():
        return parse_number(scanner)
    if scanner.current_char == '"':
        return parse_string_literal(scanner)
    raise FluentSyntaxError(SyntaxCode.E0014)
