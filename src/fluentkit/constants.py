"""Shared constants for fluentkit.

Single home for the limits and placeholder formats used by the syntax
and runtime packages. Keeping them here avoids circular imports.

Constants are grouped by domain:
- Depth limits: recursion protection for resolution and traversal
- Cache limits: memory bounds for the formatter and locale caches
- Input limits: size constraints on parser input
- Bidi marks and fallback placeholders used by the resolver

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Depth limits
    "MAX_DEPTH",
    # Cache limits
    "MAX_LOCALE_CACHE_SIZE",
    "DEFAULT_CACHE_SIZE",
    # Input limits
    "MAX_SOURCE_SIZE",
    # Bidi isolation
    "UNICODE_FSI",
    "UNICODE_PDI",
    # Fallback strings
    "FALLBACK_MISSING_MESSAGE",
    "FALLBACK_MISSING_ATTRIBUTE",
    "FALLBACK_MISSING_VARIABLE",
    "FALLBACK_MISSING_TERM",
    "FALLBACK_MISSING_TERM_ATTRIBUTE",
    "FALLBACK_FUNCTION_ERROR",
]

# ============================================================================
# DEPTH LIMITS
# ============================================================================

# Shared by the resolver (reference chains), the visitor and the serializer.
# Cycles are caught by ancestor tracking long before this; the limit only
# bounds very long acyclic chains so they fail with a diagnostic instead
# of RecursionError.
MAX_DEPTH: int = 100

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Maximum cached Babel Locale objects (locale_utils.get_babel_locale).
MAX_LOCALE_CACHE_SIZE: int = 128

# Default bound on formatter instances held by a FormatterCache.
# One entry per distinct (kind, locale, options) key.
DEFAULT_CACHE_SIZE: int = 256

# ============================================================================
# INPUT LIMITS
# ============================================================================

# Default maximum source size in characters (10 MiB).
MAX_SOURCE_SIZE: int = 10 * 1024 * 1024

# ============================================================================
# BIDI ISOLATION
# ============================================================================

UNICODE_FSI: str = "⁨"  # FIRST STRONG ISOLATE
UNICODE_PDI: str = "⁩"  # POP DIRECTIONAL ISOLATE

# ============================================================================
# FALLBACK STRINGS
# ============================================================================

# Format strings for placeholders substituted on resolution errors.
# Use .format(...) with the named fields.
FALLBACK_MISSING_MESSAGE: str = "{{{id}}}"  # e.g., {my-message}
FALLBACK_MISSING_ATTRIBUTE: str = "{{{id}.{attribute}}}"  # e.g., {login.tooltip}
FALLBACK_MISSING_VARIABLE: str = "{{${name}}}"  # e.g., {$username}
FALLBACK_MISSING_TERM: str = "{{-{name}}}"  # e.g., {-brand}
FALLBACK_MISSING_TERM_ATTRIBUTE: str = "{{-{name}.{attribute}}}"  # e.g., {-brand.gender}
FALLBACK_FUNCTION_ERROR: str = "{{{name}()}}"  # e.g., {NUMBER()}
