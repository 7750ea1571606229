"""Locale fallback over an ordered chain of bundles.

A :class:`FluentSequence` holds bundles in priority order, typically one
per locale from the user's most to least preferred. Every lookup goes to
the first bundle that defines the identifier, and that bundle answers in
full; nothing is merged across bundles.

Loading resources is the caller's job: build and fill the bundles first,
then wrap them.

Python 3.13+.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass

from fluentkit.diagnostics import ErrorTemplate, FluentError, FluentReferenceError
from fluentkit.runtime.bundle import FluentBundle

__all__ = ["FallbackInfo", "FluentSequence"]


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a locale fallback event.

    Passed to the ``on_fallback`` callback when an identifier is resolved
    by a bundle other than the first one.

    Attributes:
        requested_locale: Locale of the first bundle in the chain
        resolved_locale: Locale of the bundle that defines the identifier
        identifier: The message (or ``-term``) id that was formatted

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"{info.identifier} resolved from {info.resolved_locale}")
        >>> sequence = FluentSequence(lv_bundle, en_bundle, on_fallback=log_fallback)
    """

    requested_locale: str
    resolved_locale: str
    identifier: str


class FluentSequence:
    """Immutable ordered chain of bundles, highest priority first.

    Example:
        >>> lv = FluentBundle("lv")
        >>> lv.add_resource("hello = Sveiki!")
        ()
        >>> en = FluentBundle("en")
        >>> en.add_resource("hello = Hello!\\nbye = Goodbye!")
        ()
        >>> sequence = FluentSequence(lv, en)
        >>> sequence.format("hello"), sequence.format("bye")
        ('Sveiki!', 'Goodbye!')
        >>> sequence.find("bye") is en
        True
    """

    __slots__ = ("_bundles", "_on_fallback")

    def __init__(
        self,
        *bundles: FluentBundle,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        """Create a sequence.

        Args:
            *bundles: Bundles in priority order
            on_fallback: Called whenever ``format`` is answered by a bundle
                other than the first

        Raises:
            TypeError: If an argument is not a FluentBundle
        """
        for bundle in bundles:
            if not isinstance(bundle, FluentBundle):
                msg = f"FluentSequence accepts FluentBundle instances, got {type(bundle).__name__}"
                raise TypeError(msg)
        self._bundles: tuple[FluentBundle, ...] = bundles
        self._on_fallback = on_fallback

    @property
    def bundles(self) -> tuple[FluentBundle, ...]:
        return self._bundles

    @property
    def locales(self) -> tuple[str, ...]:
        """Locale codes of the bundles, in priority order."""
        return tuple(bundle.locale for bundle in self._bundles)

    def __iter__(self) -> Iterator[FluentBundle]:
        return iter(self._bundles)

    def __len__(self) -> int:
        return len(self._bundles)

    def __repr__(self) -> str:
        return f"FluentSequence(locales={list(self.locales)!r})"

    def find(self, identifier: str) -> FluentBundle | None:
        """Return the first bundle defining ``identifier``, or None.

        ``identifier`` is a message id, or a term id with its leading ``-``.
        """
        for bundle in self._bundles:
            if identifier in bundle:
                return bundle
        return None

    def find_all(self, *identifiers: str) -> tuple[FluentBundle | None, ...]:
        """``find`` for several identifiers at once, one result per id."""
        return tuple(self.find(identifier) for identifier in identifiers)

    def format(
        self,
        identifier: str,
        args: Mapping[str, object] | None = None,
        errors: list[FluentError] | None = None,
        *,
        attribute: str | None = None,
    ) -> str:
        """Format ``identifier`` with the first bundle that defines it.

        Returns:
            The formatted string, or ``identifier`` itself when no bundle
            defines it (an unknown-identifier error is appended to
            ``errors`` if given). Never raises for resolution problems.
        """
        bundle = self.find(identifier)
        if bundle is None:
            if errors is not None:
                errors.append(FluentReferenceError(ErrorTemplate.unknown_identifier(identifier)))
            return identifier

        if self._on_fallback is not None and bundle is not self._bundles[0]:
            self._on_fallback(
                FallbackInfo(
                    requested_locale=self._bundles[0].locale,
                    resolved_locale=bundle.locale,
                    identifier=identifier,
                )
            )
        return bundle.format(identifier, args, errors, attribute=attribute)
