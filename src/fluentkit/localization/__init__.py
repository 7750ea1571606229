"""Multi-locale fallback over FluentBundle instances.

Submodules:
    sequence - FluentSequence (ordered bundle chain) and FallbackInfo

Python 3.13+.
"""

from fluentkit.localization.sequence import FallbackInfo, FluentSequence

__all__ = ["FallbackInfo", "FluentSequence"]
