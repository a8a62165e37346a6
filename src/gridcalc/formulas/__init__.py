"""Spreadsheet formula evaluation by text rewriting.

Public API::

    from gridcalc.formulas import evaluate, evaluate_with_trace, rewrite_pass
"""

from gridcalc.formulas.errors import (
    CircularReferenceError,
    FormulaError,
    FormulaFunctionError,
    FormulaParseError,
    NonConvergenceError,
    UndefinedReferenceError,
)
from gridcalc.formulas.arithmetic import (
    reduce_arithmetic,
    reduce_high_precedence,
    reduce_low_precedence,
)
from gridcalc.formulas.dispatch import apply_function, parse_number_list
from gridcalc.formulas.evaluator import (
    DEFAULT_MAX_ITERATIONS,
    EvaluationTrace,
    evaluate,
    evaluate_with_trace,
    rewrite_pass,
)
from gridcalc.formulas.references import (
    CellStore,
    expand_cells,
    expand_ranges,
    find_cycle,
    referenced_addresses,
    resolve_references,
)

__all__ = [
    "CellStore",
    "CircularReferenceError",
    "DEFAULT_MAX_ITERATIONS",
    "EvaluationTrace",
    "FormulaError",
    "FormulaFunctionError",
    "FormulaParseError",
    "NonConvergenceError",
    "UndefinedReferenceError",
    "apply_function",
    "evaluate",
    "evaluate_with_trace",
    "expand_cells",
    "expand_ranges",
    "find_cycle",
    "parse_number_list",
    "reduce_arithmetic",
    "reduce_high_precedence",
    "reduce_low_precedence",
    "referenced_addresses",
    "resolve_references",
    "rewrite_pass",
]
