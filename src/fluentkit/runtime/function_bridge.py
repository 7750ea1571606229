"""Function call bridge between Python and FTL calling conventions.

Provides a bidirectional mapping layer:
    - Python: snake_case parameters (PEP 8)
    - FTL: camelCase parameters (JavaScript/ICU heritage)

This allows Python functions to use Pythonic APIs while maintaining
compatibility with FTL syntax in .ftl files.

Architecture:
    - FunctionRegistry: Manages function registration and calling
    - Auto-generates parameter mappings from function signatures
    - Converts FTL camelCase args -> Python snake_case args at call time
    - Injects the bundle locale into functions registered with
      ``inject_locale=True`` (the built-ins)

Example:
    # Python function (snake_case):
    def number_format(value, *, minimum_fraction_digits=None):
        ...

    # FTL file (camelCase):
    price = { NUMBER($amount, minimumFractionDigits: 2) }

    # Bridge converts: minimumFractionDigits -> minimum_fraction_digits

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Callable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from inspect import Parameter, signature
from types import MappingProxyType

from fluentkit.diagnostics import ErrorTemplate, FluentError, FluentResolutionError

__all__ = ["FunctionRegistry", "FunctionSignature"]

# Keyword through which the bundle locale reaches locale-aware functions.
LOCALE_PARAMETER: str = "locale_code"


@dataclass(frozen=True, slots=True)
class FunctionSignature:
    """Function metadata with calling convention mappings.

    Attributes:
        python_name: Function name in Python (snake_case)
        ftl_name: Function name in FTL files (UPPERCASE)
        param_mapping: Sorted (ftl_param, python_param) pairs
        callable: The actual Python function
        inject_locale: Pass the bundle locale as ``locale_code``
        param_dict: Read-only dict view of param_mapping
    """

    python_name: str
    ftl_name: str
    param_mapping: tuple[tuple[str, str], ...]
    callable: Callable[..., object]
    inject_locale: bool = False
    param_dict: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "param_dict", MappingProxyType(dict(self.param_mapping)))


class FunctionRegistry:
    """Manages Python <-> FTL function calling convention bridge.

    Supports dict-like introspection (``in``, ``len``, iteration over FTL
    names). A frozen registry rejects ``register``; use ``copy()`` to get a
    mutable one.

    Example:
        >>> registry = FunctionRegistry()
        >>> registry.register(my_func, ftl_name="CUSTOM")
        >>> "CUSTOM" in registry
        True
        >>> len(registry)
        1
    """

    __slots__ = ("_frozen", "_functions")

    def __init__(self) -> None:
        self._functions: dict[str, FunctionSignature] = {}
        self._frozen = False

    def register(
        self,
        func: Callable[..., object],
        *,
        ftl_name: str | None = None,
        param_map: Mapping[str, str] | None = None,
        inject_locale: bool = False,
    ) -> None:
        """Register Python function for FTL use.

        Args:
            func: Python function to register
            ftl_name: Function name in FTL (default: func.__name__.upper())
            param_map: Custom FTL -> Python parameter mappings (override
                the generated ones)
            inject_locale: Call with ``locale_code=<bundle locale>``

        Raises:
            TypeError: If the registry is frozen

        Example:
            >>> def shout(value, *, exclamation_count=1):
            ...     return str(value).upper() + "!" * int(exclamation_count)
            >>> registry = FunctionRegistry()
            >>> registry.register(shout)
            >>> # FTL: { SHOUT($name, exclamationCount: 3) }
        """
        if self._frozen:
            msg = "Cannot register functions on a frozen FunctionRegistry; use copy()"
            raise TypeError(msg)

        python_name = getattr(func, "__name__", "unknown")
        if ftl_name is None:
            ftl_name = python_name.upper()

        auto_map: dict[str, str] = {}
        for name, parameter in signature(func).parameters.items():
            if parameter.kind in (Parameter.POSITIONAL_ONLY, Parameter.VAR_POSITIONAL):
                continue
            if parameter.kind is Parameter.VAR_KEYWORD:
                continue
            if inject_locale and name == LOCALE_PARAMETER:
                continue
            auto_map[self._to_camel_case(name.lstrip("_"))] = name

        final_map = {**auto_map, **(param_map or {})}
        self._functions[ftl_name] = FunctionSignature(
            python_name=python_name,
            ftl_name=ftl_name,
            param_mapping=tuple(sorted(final_map.items())),
            callable=func,
            inject_locale=inject_locale,
        )

    def call(
        self,
        ftl_name: str,
        positional: Sequence[object],
        named: Mapping[str, object],
        locale: str,
    ) -> object:
        """Call Python function with FTL arguments.

        Args:
            ftl_name: Function name from FTL (e.g., "NUMBER")
            positional: Resolved positional arguments
            named: Resolved named arguments (camelCase)
            locale: Bundle locale, passed on to locale-aware functions

        Returns:
            Whatever the function returns

        Raises:
            FluentResolutionError: If the function is unknown, or raises
                TypeError or ValueError (usually bad arguments)
            FluentError: Raised by the function itself, propagated as is
        """
        func_sig = self._functions.get(ftl_name)
        if func_sig is None:
            raise FluentResolutionError(ErrorTemplate.function_not_found(ftl_name))

        python_kwargs = {
            func_sig.param_dict.get(ftl_param, ftl_param): value
            for ftl_param, value in named.items()
        }
        if func_sig.inject_locale:
            python_kwargs[LOCALE_PARAMETER] = locale

        # Only TypeError and ValueError mean "bad arguments". Anything else
        # is a bug in the function and propagates.
        try:
            return func_sig.callable(*positional, **python_kwargs)
        except FluentError:
            raise
        except (TypeError, ValueError) as e:
            raise FluentResolutionError(ErrorTemplate.function_failed(ftl_name, str(e))) from e

    def has_function(self, ftl_name: str) -> bool:
        return ftl_name in self._functions

    def get_python_name(self, ftl_name: str) -> str | None:
        """Get Python function name for FTL function, or None if not found."""
        sig = self._functions.get(ftl_name)
        return sig.python_name if sig else None

    def get_function_info(self, ftl_name: str) -> FunctionSignature | None:
        """Get function metadata by FTL name."""
        return self._functions.get(ftl_name)

    def list_functions(self) -> list[str]:
        return list(self._functions)

    def freeze(self) -> None:
        """Reject further registrations."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def copy(self) -> "FunctionRegistry":
        """Create an unfrozen shallow copy (signatures are shared)."""
        new_registry = FunctionRegistry()
        new_registry._functions = self._functions.copy()
        return new_registry

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)

    def __contains__(self, ftl_name: object) -> bool:
        return ftl_name in self._functions

    def __repr__(self) -> str:
        return f"FunctionRegistry(functions={len(self._functions)})"

    @staticmethod
    def _to_camel_case(snake_case: str) -> str:
        """Convert Python snake_case to FTL camelCase.

        Examples:
            >>> FunctionRegistry._to_camel_case("minimum_fraction_digits")
            'minimumFractionDigits'
            >>> FunctionRegistry._to_camel_case("value")
            'value'
        """
        components = snake_case.split("_")
        return components[0] + "".join(comp.capitalize() for comp in components[1:])
