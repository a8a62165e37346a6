"""Central registry for formula functions.

Functions register themselves at import time with ``@register_function``.
After ``gridcalc.functions`` has been imported the table is only exposed
through the read-only ``FUNCTIONS`` mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from gridcalc.formulas.errors import FormulaFunctionError

NumberList = list[float]


@dataclass(frozen=True)
class FormulaFunction:
    """One entry of the function table.

    Attributes:
        name: Lower-case lookup name (may be empty).
        fn: Transform from a number list to a list, number or boolean.
        arity: Exact argument count required, or ``None`` for any.
        deterministic: ``False`` for functions such as ``random``.
    """

    name: str
    fn: Callable[[NumberList], Any]
    arity: int | None = None
    deterministic: bool = True

    def __call__(self, nums: NumberList) -> Any:
        if self.arity is not None and len(nums) != self.arity:
            raise FormulaFunctionError(
                self.name,
                f"{self.name} requires exactly {self.arity} arguments, got {len(nums)}",
            )
        return self.fn(nums)


_FUNCTIONS: dict[str, FormulaFunction] = {}

FUNCTIONS: Mapping[str, FormulaFunction] = MappingProxyType(_FUNCTIONS)


def register_function(
    name: str, *, arity: int | None = None, deterministic: bool = True
) -> Callable:
    """Decorator that registers a list function by name.

    Args:
        name: The lookup name for this function (stored lower-cased).
        arity: Exact number of arguments, if fixed.
        deterministic: Whether repeated calls give the same result.

    Returns:
        The original function, unmodified.
    """

    def decorator(fn: Callable[[NumberList], Any]) -> Callable[[NumberList], Any]:
        key = name.lower()
        if key in _FUNCTIONS:
            raise ValueError(f"Function already registered: {key!r}")
        _FUNCTIONS[key] = FormulaFunction(key, fn, arity, deterministic)
        return fn

    return decorator


def get_function(name: str) -> FormulaFunction | None:
    """Look up a function case-insensitively; ``None`` if unknown."""
    return FUNCTIONS.get(name.lower())
