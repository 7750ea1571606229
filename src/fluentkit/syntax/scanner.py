"""Character scanner for the FTL parser.

The scanner is a mutable cursor over source text with a second, movable
peek position. Parser rules look ahead with ``peek()`` and either commit
(``skip_to_peek()``) or back out (``reset_peek()``). Both positions only
move forward over the source, so every rule either consumes input or
leaves the cursor where it was.

Line endings: a CRLF pair is reported as a single ``"\\n"`` and stepped
over as one unit, so rules never see ``"\\r"`` before a newline.

End of input is reported as ``None``.

Python 3.13+. Zero external dependencies.
"""

from bisect import bisect_right
from collections.abc import Callable

from fluentkit.diagnostics import FluentSyntaxError, SyntaxCode

__all__ = ["EOL", "LineOffsetCache", "Scanner"]

EOL = "\n"

# Identifier characters are ASCII only: [a-zA-Z][a-zA-Z0-9_-]*
_ID_START_CHARS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_ID_CHARS = _ID_START_CHARS | frozenset("0123456789_-")

# ASCII digits only; str.isdigit() also accepts digits such as "²".
_ASCII_DIGITS = frozenset("0123456789")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class LineOffsetCache:
    """Cached line offset computation for position lookups.

    Precomputes line start offsets in one pass, then answers
    ``get_line_col`` by binary search.

    Example:
        >>> cache = LineOffsetCache("line1\\nline2")
        >>> cache.get_line_col(0)
        (1, 1)
        >>> cache.get_line_col(8)
        (2, 3)

    Thread Safety:
        Thread-safe. Internal state is only set during __init__.
    """

    __slots__ = ("_offsets", "_source_len")

    def __init__(self, source: str) -> None:
        offsets = [0]
        for i, char in enumerate(source):
            if char == "\n":
                offsets.append(i + 1)
        self._offsets: tuple[int, ...] = tuple(offsets)
        self._source_len = len(source)

    def get_line_col(self, pos: int) -> tuple[int, int]:
        """Get 1-indexed (line, column) for a character offset.

        Positions outside the source are clamped to its bounds.
        """
        pos = min(max(pos, 0), self._source_len)
        line_index = bisect_right(self._offsets, pos) - 1
        return line_index + 1, pos - self._offsets[line_index] + 1


class Scanner:
    """Position-aware cursor over FTL source text.

    Attributes:
        source: Text being scanned
        index: Offset of the current character
        peek_offset: Distance of the peek position from ``index``
    """

    __slots__ = ("_line_cache", "index", "peek_offset", "source")

    def __init__(self, source: str) -> None:
        self.source = source
        self.index = 0
        self.peek_offset = 0
        self._line_cache: LineOffsetCache | None = None

    # ------------------------------------------------------------------
    # Position
    # ------------------------------------------------------------------

    @property
    def is_eof(self) -> bool:
        """True once the current position is past the last character."""
        return self.index >= len(self.source)

    @property
    def line_cache(self) -> LineOffsetCache:
        """Line index for the source, built on first use."""
        if self._line_cache is None:
            self._line_cache = LineOffsetCache(self.source)
        return self._line_cache

    @property
    def line(self) -> int:
        """1-indexed line of the current position."""
        return self.line_cache.get_line_col(self.index)[0]

    @property
    def column(self) -> int:
        """1-indexed column of the current position."""
        return self.line_cache.get_line_col(self.index)[1]

    # ------------------------------------------------------------------
    # Character access
    # ------------------------------------------------------------------

    def char_at(self, offset: int) -> str | None:
        """Character at ``offset`` with CRLF folded to ``"\\n"``, None past the end."""
        if offset >= len(self.source):
            return None
        char = self.source[offset]
        if char == "\r" and self.source.startswith("\n", offset + 1):
            return EOL
        return char

    @property
    def current_char(self) -> str | None:
        return self.char_at(self.index)

    @property
    def current_peek(self) -> str | None:
        return self.char_at(self.index + self.peek_offset)

    def advance(self) -> str | None:
        """Move to the next character and return it. Resets the peek position."""
        if self.source.startswith("\r\n", self.index):
            self.index += 1
        self.peek_offset = 0
        self.index += 1
        return self.char_at(self.index)

    def peek(self) -> str | None:
        """Move the peek position forward by one character and return it."""
        if self.source.startswith("\r\n", self.index + self.peek_offset):
            self.peek_offset += 1
        self.peek_offset += 1
        return self.char_at(self.index + self.peek_offset)

    def reset_peek(self, offset: int = 0) -> None:
        self.peek_offset = offset

    def skip_to_peek(self) -> None:
        """Commit: move the current position to the peek position."""
        self.index += self.peek_offset
        self.peek_offset = 0

    # ------------------------------------------------------------------
    # Character classes
    # ------------------------------------------------------------------

    @staticmethod
    def is_char_id_start(char: str | None) -> bool:
        return char is not None and char in _ID_START_CHARS

    @staticmethod
    def is_identifier_char(char: str | None) -> bool:
        return char is not None and char in _ID_CHARS

    @staticmethod
    def is_digit(char: str | None) -> bool:
        return char is not None and char in _ASCII_DIGITS

    def is_identifier_start(self) -> bool:
        """True if the peek position holds an identifier start character."""
        return self.is_char_id_start(self.current_peek)

    def is_number_start(self) -> bool:
        """True if a number (optionally negative) starts here. Leaves peek reset."""
        char = self.peek() if self.current_char == "-" else self.current_char
        self.reset_peek()
        return self.is_digit(char)

    # ------------------------------------------------------------------
    # Consuming helpers
    # ------------------------------------------------------------------

    def expect_char(self, char: str) -> None:
        """Consume ``char`` or raise E0003 naming it."""
        if self.current_char == char:
            self.advance()
            return
        raise FluentSyntaxError(SyntaxCode.E0003, char)

    def expect_line_end(self) -> None:
        """Consume a line end; end of input also counts as one."""
        if self.current_char is None:
            return
        if self.current_char == EOL:
            self.advance()
            return
        # U+2424 SYMBOL FOR NEWLINE
        raise FluentSyntaxError(SyntaxCode.E0003, "␤")

    def take_char(self, predicate: Callable[[str], bool]) -> str | None:
        """Consume and return the current character if it satisfies ``predicate``."""
        char = self.current_char
        if char is None or not predicate(char):
            return None
        self.advance()
        return char

    def take_id_start(self) -> str:
        char = self.current_char
        if self.is_char_id_start(char):
            self.advance()
            return char  # type: ignore[return-value]
        raise FluentSyntaxError(SyntaxCode.E0004, "a-zA-Z")

    def take_id_char(self) -> str | None:
        return self.take_char(self.is_identifier_char)

    def take_digit(self) -> str | None:
        return self.take_char(_ASCII_DIGITS.__contains__)

    def take_hex_digit(self) -> str | None:
        return self.take_char(_HEX_DIGITS.__contains__)
