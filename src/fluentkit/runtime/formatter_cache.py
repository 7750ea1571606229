"""Thread-safe LRU cache for locale-aware formatter instances.

Building a Babel number pattern, date formatter or plural rule is far
more expensive than applying it, and the same few (kind, locale, options)
combinations repeat across every format call. A :class:`FormatterCache`
memoizes those instances.

Architecture:
    - Explicit object passed into bundles (no module-level singleton);
      bundles that share one share its formatters
    - Thread-safe using threading.RLock for the table
    - Per-key construction locks: concurrent misses on one key build the
      formatter once, while different keys build in parallel
    - LRU eviction via OrderedDict

Cache Key Structure:
    (kind, locale, options)
    - kind: FormatterKind
    - locale: normalized locale code ("en_US")
    - options: hashable options object (frozen dataclass) or None

Python 3.13+.
"""

import logging
from collections import OrderedDict
from collections.abc import Callable, Hashable
from threading import Lock, RLock

from fluentkit.constants import DEFAULT_CACHE_SIZE
from fluentkit.enums import FormatterKind
from fluentkit.locale_utils import normalize_locale

__all__ = ["FormatterCache"]

logger = logging.getLogger(__name__)

type _CacheKey = tuple[FormatterKind, str, Hashable]


class FormatterCache:
    """Memoizing cache of formatter instances.

    Attributes:
        maxsize: Maximum number of cached formatters
        hits: Lookups answered from the cache
        misses: Lookups that constructed a formatter
        size: Current number of cached formatters

    Example:
        >>> cache = FormatterCache(maxsize=64)
        >>> rule = cache.get_or_create(
        ...     FormatterKind.PLURAL, "en", None, lambda: build_rule("en")
        ... )
        >>> cache.misses, cache.hits
        (1, 0)
    """

    __slots__ = ("_cache", "_construction_locks", "_hits", "_lock", "_maxsize", "_misses")

    def __init__(self, maxsize: int = DEFAULT_CACHE_SIZE) -> None:
        """Initialize formatter cache.

        Args:
            maxsize: Maximum number of entries (default: DEFAULT_CACHE_SIZE)

        Raises:
            ValueError: If maxsize is not positive
        """
        if maxsize <= 0:
            msg = "maxsize must be positive"
            raise ValueError(msg)

        self._cache: OrderedDict[_CacheKey, object] = OrderedDict()
        self._construction_locks: dict[_CacheKey, Lock] = {}
        self._maxsize = maxsize
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    def get_or_create[F](
        self,
        kind: FormatterKind,
        locale: str,
        options: Hashable,
        factory: Callable[[], F],
    ) -> F:
        """Return the cached formatter for the key, building it on first use.

        ``factory`` runs at most once per key while the entry stays cached,
        even when several threads miss at the same time. It runs outside the
        table lock, so a slow construction does not block other keys.

        Args:
            kind: Formatter kind
            locale: Locale code (BCP-47 or POSIX form)
            options: Hashable options the formatter is built from
            factory: Zero-argument constructor for the formatter

        Returns:
            The cached or newly built formatter

        Raises:
            Whatever ``factory`` raises; nothing is cached in that case.
        """
        key: _CacheKey = (kind, normalize_locale(locale), options)

        with self._lock:
            cached = self._lookup(key)
            if cached is not None:
                return cached  # type: ignore[return-value]
            construction_lock = self._construction_locks.setdefault(key, Lock())

        with construction_lock:
            # Another thread may have finished building while we waited.
            with self._lock:
                cached = self._lookup(key)
                if cached is not None:
                    return cached  # type: ignore[return-value]
                self._misses += 1

            try:
                formatter = factory()
                with self._lock:
                    self._cache[key] = formatter
                    if len(self._cache) > self._maxsize:
                        self._cache.popitem(last=False)
            finally:
                # Dropped only after the entry is cached, so a late miss
                # cannot start a second construction.
                with self._lock:
                    self._construction_locks.pop(key, None)

            logger.debug("Built %s formatter for %s (%r)", kind, key[1], options)
            return formatter

    def _lookup(self, key: _CacheKey) -> object | None:
        # Caller holds self._lock.
        if key in self._cache:
            self._cache.move_to_end(key)
            self._hits += 1
            return self._cache[key]
        return None

    def clear(self) -> None:
        """Drop all cached formatters and reset the counters."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    @property
    def maxsize(self) -> int:
        """Maximum cache size."""
        return self._maxsize

    @property
    def size(self) -> int:
        return len(self)

    @property
    def hits(self) -> int:
        with self._lock:
            return self._hits

    @property
    def misses(self) -> int:
        with self._lock:
            return self._misses

    def get_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with size, maxsize, hits, misses and hit_rate (percent)
        """
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0.0
            return {
                "size": len(self._cache),
                "maxsize": self._maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
            }

    def __repr__(self) -> str:
        return f"FormatterCache(size={len(self)}, maxsize={self._maxsize})"
