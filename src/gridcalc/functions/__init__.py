"""The formula function table.

Importing this package registers the built-in functions.
"""

from gridcalc.functions import builtin  # noqa: F401
from gridcalc.functions.registry import (
    FUNCTIONS,
    FormulaFunction,
    get_function,
    register_function,
)

__all__ = ["FUNCTIONS", "FormulaFunction", "get_function", "register_function"]
