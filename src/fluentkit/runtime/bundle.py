"""FluentBundle - Main API for Fluent message formatting.

Python 3.13+. External dependency: Babel (CLDR locale data).
"""

import logging
from collections.abc import Callable, Iterator, Mapping

from fluentkit.constants import MAX_DEPTH, MAX_SOURCE_SIZE
from fluentkit.diagnostics import (
    DiagnosticFormatter,
    ErrorTemplate,
    FluentError,
    FluentReferenceError,
    FluentSyntaxError,
    OutputFormat,
    SourceSpan,
)
from fluentkit.locale_utils import is_valid_locale_code
from fluentkit.runtime.formatter_cache import FormatterCache
from fluentkit.runtime.function_bridge import FunctionRegistry
from fluentkit.runtime.functions import get_shared_registry
from fluentkit.runtime.resolver import FluentResolver
from fluentkit.runtime.scope import Scope
from fluentkit.syntax import Annotation, Junk, Message, Pattern, Resource, Term
from fluentkit.syntax.parser import FluentParser

__all__ = ["FluentBundle"]

logger = logging.getLogger(__name__)

# Warnings show more context (100 chars) as they're surfaced to users.
_LOG_TRUNCATE_WARNING: int = 100
_LOG_TRUNCATE_DEBUG: int = 50

_LOG_FORMATTER = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)


def _annotation_error(annotation: Annotation) -> FluentSyntaxError:
    """Turn a Junk annotation into the exception reported by add_resource."""
    span = annotation.span
    source_span = None
    if span is not None and span.line is not None and span.column is not None:
        source_span = SourceSpan(span.start, span.end, span.line, span.column)
    return FluentSyntaxError(
        annotation.code,
        *annotation.arguments,
        position=span.start if span is not None else None,
        span=source_span,
    )


class FluentBundle:
    """Fluent message bundle for a specific locale.

    Owns the locale, the table of messages and terms, and the functions
    callable from FTL. ``format`` never raises: failures are collected in
    the optional ``errors`` list and replaced by readable placeholders.

    Thread Safety:
        The entry table is not locked. Finish ``add_resource`` and
        ``add_function`` calls before sharing the bundle; after that,
        ``format`` may run concurrently since each call owns its Scope.
        The formatter cache is internally synchronized and may be shared
        between bundles.

    Examples:
        >>> bundle = FluentBundle("lv_LV", use_isolating=False)
        >>> bundle.add_resource('''
        ... hello = Sveiki, pasaule!
        ... welcome = Laipni lūdzam, { $name }!
        ... ''')
        ()
        >>> bundle.format("hello")
        'Sveiki, pasaule!'
        >>> bundle.format("welcome", {"name": "Jānis"})
        'Laipni lūdzam, Jānis!'
        >>> errors = []
        >>> bundle.format("welcome", {}, errors)
        'Laipni lūdzam, {$name}!'
        >>> errors
        [FluentReferenceError('Unknown variable: $name')]
    """

    __slots__ = (
        "_formatter_cache",
        "_function_registry",
        "_locale",
        "_max_depth",
        "_messages",
        "_parser",
        "_resolver",
        "_terms",
        "_transform",
        "_use_isolating",
    )

    def __init__(
        self,
        locale: str,
        /,
        *,
        use_isolating: bool = True,
        functions: FunctionRegistry | None = None,
        formatter_cache: FormatterCache | None = None,
        transform: Callable[[str], str] | None = None,
        max_source_size: int | None = None,
        max_depth: int | None = None,
    ) -> None:
        """Initialize bundle for locale.

        Args:
            locale: Locale code (lv_LV, en-US, de) [positional-only]
            use_isolating: Wrap interpolated values in Unicode bidi isolation
                marks (default: True). See Unicode TR9.
            functions: Registry of functions callable from FTL (default:
                NUMBER and DATETIME). The bundle works on a copy, so
                ``add_function`` never leaks into the caller's registry.
            formatter_cache: Cache of Babel formatters; bundles passed the
                same cache share formatters (default: a private cache)
            transform: Applied to every text element at format time
            max_source_size: Maximum FTL source size in characters
                (default: 10 MiB, 0 disables the limit)
            max_depth: Maximum nesting of message/term references and of
                select expressions (default: 100)

        Raises:
            ValueError: If locale code is empty or malformed
        """
        if not locale or not is_valid_locale_code(locale):
            msg = f"Invalid locale code format: '{locale}'"
            raise ValueError(msg)

        self._locale = locale
        self._use_isolating = use_isolating
        self._transform = transform
        self._messages: dict[str, Message] = {}
        self._terms: dict[str, Term] = {}
        self._max_depth = max_depth if max_depth is not None else MAX_DEPTH
        self._parser = FluentParser(
            max_source_size=max_source_size if max_source_size is not None else MAX_SOURCE_SIZE,
            max_nesting_depth=self._max_depth,
        )
        self._function_registry = (functions or get_shared_registry()).copy()
        self._formatter_cache = formatter_cache if formatter_cache is not None else FormatterCache()
        self._resolver = FluentResolver(
            locale,
            self._messages,
            self._terms,
            function_registry=self._function_registry,
            formatter_cache=self._formatter_cache,
            use_isolating=use_isolating,
            transform=transform,
        )

        logger.info(
            "FluentBundle initialized for locale: %s (use_isolating=%s, functions=%d)",
            locale,
            use_isolating,
            len(self._function_registry),
        )

    # ========================================================================
    # PROPERTIES
    # ========================================================================

    @property
    def locale(self) -> str:
        """Locale code this bundle formats for (read-only)."""
        return self._locale

    @property
    def use_isolating(self) -> bool:
        return self._use_isolating

    @property
    def functions(self) -> FunctionRegistry:
        """The bundle's own function registry."""
        return self._function_registry

    @property
    def formatter_cache(self) -> FormatterCache:
        return self._formatter_cache

    def __repr__(self) -> str:
        return (
            f"FluentBundle(locale={self._locale!r}, "
            f"messages={len(self._messages)}, terms={len(self._terms)})"
        )

    # ========================================================================
    # REGISTRATION
    # ========================================================================

    def add_resource(
        self,
        resource: Resource | str,
        /,
        *,
        allow_overrides: bool = True,
        source_path: str | None = None,
    ) -> tuple[FluentSyntaxError, ...]:
        """Add FTL messages and terms to the bundle.

        Args:
            resource: Parsed Resource, or FTL source to parse [positional-only]
            allow_overrides: Replace entries whose id is already registered
                (default). When False, duplicates are skipped and reported.
            source_path: Name of the source shown in log messages
                (e.g., "locales/lv/ui.ftl")

        Returns:
            One FluentSyntaxError per Junk annotation, in source order.
            Skipped duplicates are logged, not returned.

        Raises:
            ValueError: If source exceeds the configured maximum size

        Logging:
            Junk entries are logged at WARNING level regardless of where
            the source came from.
        """
        if isinstance(resource, str):
            resource = self._parser.parse(resource)
        source_desc = source_path or "<string>"

        syntax_errors: list[FluentSyntaxError] = []
        added = 0
        for entry in resource.entries:
            match entry:
                case Message() | Term():
                    table: dict[str, Message] | dict[str, Term] = (
                        self._messages if isinstance(entry, Message) else self._terms
                    )
                    entry_id = entry.id.name
                    if entry_id in table and not allow_overrides:
                        display_id = f"-{entry_id}" if isinstance(entry, Term) else entry_id
                        logger.warning(
                            "Skipping duplicate entry %s in %s: %s",
                            display_id,
                            source_desc,
                            ErrorTemplate.duplicate_entry(display_id).message,
                        )
                        continue
                    table[entry_id] = entry  # type: ignore[assignment]
                    added += 1
                    logger.debug("Registered %s: %s", type(entry).__name__.lower(), entry_id)
                case Junk():
                    # repr() keeps control characters out of the log.
                    logger.warning(
                        "Syntax error in %s: %s",
                        source_desc,
                        repr(entry.content[:_LOG_TRUNCATE_WARNING]),
                    )
                    junk_errors = [_annotation_error(a) for a in entry.annotations]
                    formatter = DiagnosticFormatter(
                        output_format=OutputFormat.SIMPLE, source_name=source_desc
                    )
                    for error in junk_errors:
                        logger.debug("  - %s", formatter.format(error))
                    syntax_errors.extend(junk_errors)
                case _:
                    pass

        logger.info(
            "Added resource %s: %d entries (%d messages, %d terms total), %d syntax errors",
            source_desc,
            added,
            len(self._messages),
            len(self._terms),
            len(syntax_errors),
        )
        return tuple(syntax_errors)

    def add_function(
        self, name: str, func: Callable[..., object], *, inject_locale: bool = False
    ) -> None:
        """Add custom function to bundle.

        Args:
            name: Function name as written in FTL (UPPERCASE by convention)
            func: Callable receiving the resolved positional arguments and
                the named options as snake_case keyword arguments
            inject_locale: Also pass the bundle locale as the
                ``locale_code`` keyword argument

        Example:
            >>> def shout(value):
            ...     return str(value).upper()
            >>> bundle.add_function("SHOUT", shout)
        """
        self._function_registry.register(func, ftl_name=name, inject_locale=inject_locale)
        logger.debug("Added custom function: %s", name)

    # ========================================================================
    # LOOKUP
    # ========================================================================

    def has_message(self, message_id: str) -> bool:
        return message_id in self._messages

    def get_message(self, message_id: str) -> Message | None:
        return self._messages.get(message_id)

    def has_term(self, term_id: str) -> bool:
        """Check for a term; the leading ``-`` is optional."""
        return term_id.removeprefix("-") in self._terms

    def get_term(self, term_id: str) -> Term | None:
        return self._terms.get(term_id.removeprefix("-"))

    def message_ids(self) -> Iterator[str]:
        """Iterate over registered message ids in registration order."""
        return iter(self._messages)

    def _lookup(self, identifier: str) -> Message | Term | None:
        if identifier.startswith("-"):
            return self._terms.get(identifier[1:])
        return self._messages.get(identifier)

    def __contains__(self, identifier: object) -> bool:
        """``"id" in bundle`` for messages, ``"-id" in bundle`` for terms."""
        return isinstance(identifier, str) and self._lookup(identifier) is not None

    # ========================================================================
    # FORMATTING
    # ========================================================================

    def format(
        self,
        identifier: str,
        args: Mapping[str, object] | None = None,
        errors: list[FluentError] | None = None,
        *,
        attribute: str | None = None,
    ) -> str:
        """Format a message (or a term, with a leading ``-``).

        Args:
            identifier: Message id, or ``-term`` id
            args: Variables available as ``$name``
            errors: List to which resolution errors are appended
            attribute: Format this attribute instead of the value

        Returns:
            The formatted string. An unknown identifier returns itself.

        Examples:
            >>> bundle.add_resource("login = Log in\\n    .title = Sign in to continue")
            ()
            >>> bundle.format("login", attribute="title")
            'Sign in to continue'
            >>> bundle.format("logout")
            'logout'
        """
        entry = self._lookup(identifier)
        if entry is None:
            logger.warning("Entry '%s' not found", identifier)
            if errors is not None:
                errors.append(FluentReferenceError(ErrorTemplate.unknown_identifier(identifier)))
            return identifier

        scope = Scope(args, max_depth=self._max_depth)
        result = self._resolver.resolve_entry(entry, scope, attribute)
        self._report(identifier, result, scope, errors)
        return result

    def format_pattern(
        self,
        pattern: Pattern,
        args: Mapping[str, object] | None = None,
        errors: list[FluentError] | None = None,
    ) -> str:
        """Format a pattern obtained from ``get_message`` or ``get_term``.

        Example:
            >>> message = bundle.get_message("login")
            >>> bundle.format_pattern(message.attributes[0].value)
            'Sign in to continue'
        """
        scope = Scope(args, max_depth=self._max_depth)
        result = self._resolver.resolve_pattern(pattern, scope)
        self._report("<pattern>", result, scope, errors)
        return result

    @staticmethod
    def _report(
        identifier: str, result: str, scope: Scope, errors: list[FluentError] | None
    ) -> None:
        if scope.errors:
            logger.warning(
                "Resolution errors for '%s': %d error(s)", identifier, len(scope.errors)
            )
            for err in scope.errors:
                logger.debug("  - %s", _LOG_FORMATTER.format(err))
            if errors is not None:
                errors.extend(scope.errors)
        else:
            logger.debug("Resolved '%s': %s", identifier, result[:_LOG_TRUNCATE_DEBUG])
