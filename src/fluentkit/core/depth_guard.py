"""Recursion limit for AST walks.

Visitors and ``to_dict`` each hold one guard per walk, so trees built
in code (which skip the parser's nesting limit)
fail with DepthLimitExceededError instead of RecursionError.
"""

import logging
import sys

from fluentkit.constants import MAX_DEPTH
from fluentkit.diagnostics import ErrorTemplate, FluentResolutionError

__all__ = ["DepthGuard", "DepthLimitExceededError"]

logger = logging.getLogger(__name__)

# Frames left for the walk's own calls below the interpreter limit.
_RESERVED_FRAMES = 50


class DepthLimitExceededError(FluentResolutionError):
    """An AST walk went deeper than its guard allows."""


class DepthGuard:
    """Counts nesting while used as ``with guard: walk(child)``.

    ``max_depth`` is lowered to fit under ``sys.getrecursionlimit()``.
    """

    __slots__ = ("_depth", "max_depth")

    def __init__(self, max_depth: int = MAX_DEPTH) -> None:
        ceiling = sys.getrecursionlimit() - _RESERVED_FRAMES
        if max_depth > ceiling:
            logger.warning("Depth %d is above the recursion limit; using %d", max_depth, ceiling)
            max_depth = ceiling
        self.max_depth = max_depth
        self._depth = 0

    @property
    def depth(self) -> int:
        return self._depth

    def __enter__(self) -> None:
        # __exit__ does not run when __enter__ raises.
        if self._depth >= self.max_depth:
            raise DepthLimitExceededError(ErrorTemplate.depth_exceeded(self.max_depth))
        self._depth += 1

    def __exit__(self, *exc_info: object) -> None:
        self._depth -= 1
