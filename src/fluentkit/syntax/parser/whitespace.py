"""Whitespace handling and line-structure lookahead for the FTL parser.

Per the Fluent EBNF:
    blank_inline ::= "\\u0020"+
    line_end     ::= "\\u000D\\u000A" | "\\u000A" | EOF
    blank_block  ::= (blank_inline? line_end)+
    blank        ::= (blank_inline | line_end)+

Tabs are never blank. The ``peek_*`` functions move only the scanner's
peek position; the ``skip_*`` functions commit it.
"""

from fluentkit.syntax.scanner import EOL, Scanner

# A continuation line starting with one of these begins a new syntax
# element (closing brace, attribute, variant) rather than more text.
_SPECIAL_LINE_START_CHARS = frozenset("}.[*")


def peek_blank_inline(scanner: Scanner) -> str:
    """Peek over spaces and return them."""
    start = scanner.index + scanner.peek_offset
    while scanner.current_peek == " ":
        scanner.peek()
    return scanner.source[start : scanner.index + scanner.peek_offset]


def skip_blank_inline(scanner: Scanner) -> str:
    """Skip inline whitespace (ONLY space U+0020) and return it."""
    blank = peek_blank_inline(scanner)
    scanner.skip_to_peek()
    return blank


def peek_blank_block(scanner: Scanner) -> str:
    """Peek over blank lines and return one newline per line.

    The peek position is left at the start of the first non-blank line,
    before its indentation.
    """
    blank = ""
    while True:
        line_start = scanner.peek_offset
        peek_blank_inline(scanner)
        if scanner.current_peek == EOL:
            blank += EOL
            scanner.peek()
            continue
        if scanner.current_peek is None:
            # Trailing spaces before EOF belong to the blank block.
            return blank
        scanner.reset_peek(line_start)
        return blank


def skip_blank_block(scanner: Scanner) -> str:
    """Skip blank lines and return one newline per skipped line."""
    blank = peek_blank_block(scanner)
    scanner.skip_to_peek()
    return blank


def peek_blank(scanner: Scanner) -> None:
    """Peek over spaces and line ends."""
    while scanner.current_peek in (" ", EOL):
        scanner.peek()


def skip_blank(scanner: Scanner) -> None:
    """Skip blank (spaces and line endings, as the FTL grammar defines blank)."""
    peek_blank(scanner)
    scanner.skip_to_peek()


# ============================================================================
# Lookahead predicates
# ============================================================================


def is_value_start(scanner: Scanner) -> bool:
    """True if an inline pattern starts at the peek position."""
    return scanner.current_peek not in (EOL, None)


def is_value_continuation(scanner: Scanner) -> bool:
    """Check if the line at the peek position continues a multiline pattern.

    A continuation line must be indented by at least one space and must
    not start with ``}``, ``.``, ``[`` or ``*``. An indented line starting
    with ``{`` always continues. The peek position is restored to the line
    start when the answer is True, so the caller can measure the indent.
    """
    column_start = scanner.peek_offset
    peek_blank_inline(scanner)

    if scanner.current_peek == "{":
        scanner.reset_peek(column_start)
        return True

    if scanner.peek_offset - column_start == 0:
        return False

    char = scanner.current_peek
    if char is not None and char not in _SPECIAL_LINE_START_CHARS:
        scanner.reset_peek(column_start)
        return True

    return False


def is_next_line_comment(scanner: Scanner, level: int) -> bool:
    """Check if the next line continues a comment of the same ``level``.

    ``level`` is the zero-based hash count (0 for ``#``). The scanner must
    sit on the line end of the current comment line.
    """
    if scanner.current_char != EOL:
        return False

    for _ in range(level + 1):
        if scanner.peek() != "#":
            scanner.reset_peek()
            return False

    # A further "#" means a comment of a different level.
    char = scanner.peek()
    scanner.reset_peek()
    return char in (" ", EOL)


def is_variant_start(scanner: Scanner) -> bool:
    """True if ``[key]`` or ``*[key]`` starts at the peek position."""
    peek_start = scanner.peek_offset
    if scanner.current_peek == "*":
        scanner.peek()
    found = scanner.current_peek == "["
    scanner.reset_peek(peek_start)
    return found


def is_attribute_start(scanner: Scanner) -> bool:
    return scanner.current_peek == "."


def skip_to_next_entry_start(scanner: Scanner, junk_start: int) -> None:
    """Move to the start of the next line that can begin an entry.

    Used for error recovery. Lines starting with an identifier character,
    ``-`` or ``#`` are entry starts. If the failure happened past a line
    break inside the junk, scanning restarts from that line break so the
    entry that begins there is not swallowed.
    """
    last_newline = scanner.source.rfind(EOL, 0, scanner.index + 1)
    if junk_start < last_newline:
        scanner.index = last_newline
        scanner.reset_peek()

    while (char := scanner.current_char) is not None:
        if char != EOL:
            scanner.advance()
            continue
        first = scanner.advance()
        if scanner.is_char_id_start(first) or first in ("-", "#"):
            break
