"""Core FTL parser implementation.

This module provides the :class:`FluentParser` class that drives the
grammar rules in :mod:`fluentkit.syntax.parser.rules` over a
:class:`~fluentkit.syntax.scanner.Scanner` and assembles the
:class:`~fluentkit.syntax.ast.Resource`.

Error recovery:
    Each entry is parsed independently. When a rule raises
    :class:`~fluentkit.diagnostics.FluentSyntaxError`, the text from the
    entry start up to the next line that can begin an entry becomes a
    :class:`~fluentkit.syntax.ast.Junk` node with one
    :class:`~fluentkit.syntax.ast.Annotation`, and parsing resumes there.
    ``parse`` therefore never raises for any ``str`` input.

Comment attachment:
    A ``#`` comment directly followed (no blank line) by a Message or
    Term becomes that entry's ``comment``. Group (``##``) and resource
    (``###``) comments are always standalone.

Security:
    Includes a configurable input size limit and a nesting depth limit
    for select expressions nested inside variants.
"""

import logging
from dataclasses import replace

from fluentkit.constants import MAX_DEPTH, MAX_SOURCE_SIZE
from fluentkit.diagnostics import FluentSyntaxError, SyntaxCode
from fluentkit.enums import CommentType
from fluentkit.syntax.ast import (
    Annotation,
    Comment,
    Entry,
    Junk,
    Message,
    Resource,
    Span,
    Term,
)
from fluentkit.syntax.parser.rules import (
    ParseContext,
    parse_comment,
    parse_message,
    parse_term,
)
from fluentkit.syntax.parser.whitespace import skip_blank_block, skip_to_next_entry_start
from fluentkit.syntax.scanner import Scanner

__all__ = ["FluentParser", "parse"]

logger = logging.getLogger(__name__)


class FluentParser:
    """Fluent FTL parser.

    Design:
    - One mutable Scanner per ``parse`` call; the parser itself holds only
      configuration and can be shared between threads
    - Grammar rules raise on the first violation; the entry loop recovers
    - Error messages come from the fixed E-code catalog

    Attributes:
        with_spans: Attach Span objects to every node
        max_source_size: Maximum allowed source size in characters (default: 10 MiB)
        max_nesting_depth: Maximum select-expression nesting depth (default: 100)
    """

    __slots__ = ("_max_nesting_depth", "_max_source_size", "_with_spans")

    def __init__(
        self,
        *,
        with_spans: bool = False,
        max_source_size: int | None = None,
        max_nesting_depth: int | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            with_spans: Track source spans (with line/column) on every node.
            max_source_size: Maximum source size in characters (default: 10 MiB).
                Set to 0 to disable the limit.
            max_nesting_depth: Maximum nesting of select expressions inside
                variants (default: 100). Deeper input becomes Junk (E0001).
        """
        self._with_spans = with_spans
        self._max_source_size = (
            max_source_size if max_source_size is not None else MAX_SOURCE_SIZE
        )
        self._max_nesting_depth = (
            max_nesting_depth if max_nesting_depth is not None else MAX_DEPTH
        )

    @property
    def with_spans(self) -> bool:
        """Whether parsed nodes carry spans."""
        return self._with_spans

    @property
    def max_source_size(self) -> int:
        """Maximum allowed source size in characters."""
        return self._max_source_size

    @property
    def max_nesting_depth(self) -> int:
        """Maximum allowed select-expression nesting depth."""
        return self._max_nesting_depth

    def parse(self, source: str) -> Resource:
        """Parse FTL source into an AST Resource.

        Args:
            source: FTL file content

        Returns:
            Resource whose entries are Message, Term, Comment and Junk
            nodes in source order.

        Raises:
            TypeError: If source is not a str
            ValueError: If source exceeds max_source_size

        Example:
            >>> resource = FluentParser().parse("hello = World")
            >>> resource.entries[0].id.name
            'hello'
        """
        if not isinstance(source, str):
            msg = f"source must be str, not {type(source).__name__}"
            raise TypeError(msg)

        if self._max_source_size > 0 and len(source) > self._max_source_size:
            msg = (
                f"Source size ({len(source):,} characters) exceeds maximum "
                f"({self._max_source_size:,}). "
                "Configure max_source_size in FluentParser constructor to increase limit."
            )
            raise ValueError(msg)

        scanner = Scanner(source)
        context = ParseContext(
            with_spans=self._with_spans,
            max_nesting_depth=self._max_nesting_depth,
        )
        entries: list[Entry] = []
        last_comment: Comment | None = None

        skip_blank_block(scanner)

        while scanner.current_char is not None:
            entry = self._parse_entry_or_junk(scanner, context)
            blank_lines = skip_blank_block(scanner)

            # A "#" comment with no blank line after it may belong to the
            # next entry; hold it back until that entry is parsed.
            if (
                isinstance(entry, Comment)
                and entry.type is CommentType.COMMENT
                and not blank_lines
                and scanner.current_char is not None
            ):
                last_comment = entry
                continue

            if last_comment is not None:
                if isinstance(entry, Message | Term):
                    entry = self._attach_comment(entry, last_comment)
                else:
                    entries.append(last_comment)
                last_comment = None

            entries.append(entry)

        junk_count = sum(1 for entry in entries if isinstance(entry, Junk))
        if junk_count:
            logger.debug("Parsed %d entries (%d junk)", len(entries), junk_count)

        resource = Resource(tuple(entries))
        if self._with_spans:
            resource = replace(resource, span=Span(0, scanner.index, 1, 1))
        return resource

    def _attach_comment[E: (Message, Term)](self, entry: E, comment: Comment) -> E:
        if self._with_spans and entry.span is not None and comment.span is not None:
            span = replace(
                entry.span,
                start=comment.span.start,
                line=comment.span.line,
                column=comment.span.column,
            )
            return replace(entry, comment=comment, span=span)
        return replace(entry, comment=comment)

    def _parse_entry_or_junk(self, scanner: Scanner, context: ParseContext) -> Entry:
        entry_start = scanner.index
        try:
            entry = self._parse_entry(scanner, context)
            scanner.expect_line_end()
        except FluentSyntaxError as error:
            return self._make_junk(scanner, entry_start, error)
        except RecursionError:
            # Adversarial nesting that slipped past the depth limit.
            return self._make_junk(scanner, entry_start, FluentSyntaxError(SyntaxCode.E0001))
        return entry

    @staticmethod
    def _parse_entry(scanner: Scanner, context: ParseContext) -> Entry:
        match scanner.current_char:
            case "#":
                return parse_comment(scanner, context)
            case "-":
                return parse_term(scanner, context)
        if scanner.is_identifier_start():
            return parse_message(scanner, context)
        raise FluentSyntaxError(SyntaxCode.E0002)

    def _make_junk(self, scanner: Scanner, entry_start: int, error: FluentSyntaxError) -> Junk:
        error_index = scanner.index
        skip_to_next_entry_start(scanner, entry_start)
        next_entry_start = scanner.index
        error_index = min(error_index, next_entry_start)

        content = scanner.source[entry_start:next_entry_start]
        line, column = scanner.line_cache.get_line_col(error_index)
        annotation = Annotation(
            code=str(error.code),
            message=str(error),
            arguments=error.arguments,
            span=Span(error_index, error_index, line, column),
        )
        logger.debug(
            "Junk at %d:%d [%s] %s", line, column, error.code, error
        )
        junk = Junk(content=content, annotations=(annotation,))
        if self._with_spans:
            junk_line, junk_column = scanner.line_cache.get_line_col(entry_start)
            junk = replace(junk, span=Span(entry_start, next_entry_start, junk_line, junk_column))
        return junk


def parse(source: str, *, with_spans: bool = False) -> Resource:
    """Parse FTL source with a default-configured parser.

    Never raises for str input; malformed entries become Junk.

    Example:
        >>> resource = parse("hello = Hello\\n-brand = Firefox\\n")
        >>> [type(entry).__name__ for entry in resource.entries]
        ['Message', 'Term']
    """
    return FluentParser(with_spans=with_spans).parse(source)
