"""gridcalc -- spreadsheet formula evaluation by rewriting to a fixpoint."""

__version__ = "0.3.0"

from gridcalc.cells import CellStore, Sheet
from gridcalc.formulas import (
    CircularReferenceError,
    FormulaError,
    FormulaFunctionError,
    NonConvergenceError,
    UndefinedReferenceError,
    evaluate,
    evaluate_with_trace,
)

__all__ = [
    "CellStore",
    "CircularReferenceError",
    "FormulaError",
    "FormulaFunctionError",
    "NonConvergenceError",
    "Sheet",
    "UndefinedReferenceError",
    "__version__",
    "evaluate",
    "evaluate_with_trace",
]
