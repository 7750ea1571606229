"""Per-call resolution state.

A :class:`Scope` is created fresh for every ``FluentBundle.format`` call.
It holds the caller's arguments, the local bindings of the term being
resolved, the set of message/term ids currently on the resolution stack
(cycle detection), the reference depth and the error list.

Child scopes (term calls) get their own locals but share everything else
with their parent, so a cycle that passes through a term is still caught
and every error lands in the same list.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from fluentkit.constants import MAX_DEPTH
from fluentkit.diagnostics import FluentError

__all__ = ["MISSING", "Scope"]


class _Missing:
    """Sentinel type for a variable that is neither a local nor an argument."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

_EMPTY: Mapping[str, object] = MappingProxyType({})


@dataclass(slots=True)
class _SharedState:
    """State shared by a scope and all of its children."""

    errors: list[FluentError]
    max_depth: int
    ancestors: set[str] = field(default_factory=set)
    depth: int = 0


class Scope:
    """Resolution scope for one format call.

    Attributes:
        args: Arguments passed by the caller (read-only view)
        locals: Named arguments of the enclosing term call (read-only view)

    Example:
        >>> scope = Scope({"name": "Anna"})
        >>> scope.variable("name")
        'Anna'
        >>> scope.variable("other") is MISSING
        True
    """

    __slots__ = ("_args", "_locals", "_state")

    def __init__(
        self,
        args: Mapping[str, object] | None = None,
        *,
        errors: list[FluentError] | None = None,
        max_depth: int = MAX_DEPTH,
    ) -> None:
        """Create a root scope.

        Args:
            args: Caller arguments (``$name`` lookups)
            errors: List collecting resolution errors (a new list if None)
            max_depth: Maximum nesting of message/term references
        """
        self._args: Mapping[str, object] = MappingProxyType(dict(args)) if args else _EMPTY
        self._locals: Mapping[str, object] = _EMPTY
        self._state = _SharedState(errors=errors if errors is not None else [], max_depth=max_depth)

    @property
    def args(self) -> Mapping[str, object]:
        return self._args

    @property
    def locals(self) -> Mapping[str, object]:
        return self._locals

    @property
    def errors(self) -> list[FluentError]:
        """Errors recorded so far, shared with all child scopes."""
        return self._state.errors

    @property
    def depth(self) -> int:
        """Number of message/term references currently being resolved."""
        return self._state.depth

    @property
    def max_depth(self) -> int:
        return self._state.max_depth

    def variable(self, name: str) -> object:
        """Look up ``$name``: locals first, then arguments.

        Returns:
            The bound value, or :data:`MISSING`
        """
        if name in self._locals:
            return self._locals[name]
        return self._args.get(name, MISSING)

    def track(self, identifier: str) -> bool:
        """Mark ``identifier`` as being resolved.

        Returns:
            False if it is already on the resolution stack (a cycle), in
            which case nothing is recorded and ``release`` must not be called
        """
        ancestors = self._state.ancestors
        if identifier in ancestors:
            return False
        ancestors.add(identifier)
        return True

    def release(self, identifier: str) -> None:
        self._state.ancestors.discard(identifier)

    def is_tracking(self, identifier: str) -> bool:
        return identifier in self._state.ancestors

    def enter(self) -> bool:
        """Increase the reference depth; False if the limit is reached."""
        if self._state.depth >= self._state.max_depth:
            return False
        self._state.depth += 1
        return True

    def leave(self) -> None:
        self._state.depth -= 1

    def add_error(self, error: FluentError) -> None:
        self._state.errors.append(error)

    def child_scope(self, locals: Mapping[str, object] | None = None) -> "Scope":  # noqa: A002
        """Create a scope for a term call.

        The child binds ``locals`` and keeps the caller's arguments; the
        ancestor set, depth and error list are shared with this scope.
        """
        child = Scope.__new__(Scope)
        child._args = self._args
        child._locals = MappingProxyType(dict(locals)) if locals else _EMPTY
        child._state = self._state
        return child

    def __repr__(self) -> str:
        return (
            f"Scope(args={sorted(self._args)}, locals={sorted(self._locals)}, "
            f"depth={self._state.depth}, errors={len(self._state.errors)})"
        )
