"""Rewrite driver: runs full passes over a formula until nothing changes.

One pass is reference expansion, then arithmetic reduction, then a single
function application.  The loop stops at the first pass whose output equals
its input.  Every pass fully replaces the text it rewrites, so a call token
such as ``random(1,6)`` is consumed by its own substitution and its
non-deterministic result is never fed back into the same call.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, computed_field

from gridcalc.formulas.arithmetic import reduce_arithmetic
from gridcalc.formulas.dispatch import apply_function
from gridcalc.formulas.errors import (
    CircularReferenceError,
    FormulaFunctionError,
    NonConvergenceError,
    UndefinedReferenceError,
)
from gridcalc.formulas.references import CellStore, find_cycle, resolve_references
from gridcalc.logging import EventType, emit_error, emit_info, emit_warning
from gridcalc.logging.events import (
    CIRCULAR_REFERENCE,
    FUNCTION_ARITY,
    NO_CONVERGENCE,
    UNDEFINED_REFERENCE,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000


class EvaluationTrace(BaseModel):
    """The text after every pass of one evaluation."""

    formula: str
    result: str
    steps: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def iterations(self) -> int:
        return len(self.steps)


def _emit_failure(formula: str, text: str, exc: Exception, code: str) -> None:
    emit_error(
        EventType.eval_failed,
        str(exc),
        {"formula": formula, "text": text},
        error_code=code,
    )


def rewrite_pass(text: str, store: CellStore) -> str:
    """One full rewrite pass over *text*."""
    resolved = resolve_references(text, store)
    reduced = reduce_arithmetic(resolved)
    return apply_function(reduced)


def evaluate_with_trace(
    formula: str,
    store: CellStore,
    *,
    max_iterations: int | None = None,
    detect_cycles: bool = True,
) -> EvaluationTrace:
    """Evaluate *formula* and record the text produced by each pass.

    Args:
        formula: Formula text without the leading ``=`` marker.
        store: Source of cell contents.
        max_iterations: Pass limit (default ``DEFAULT_MAX_ITERATIONS``).
        detect_cycles: Check the reference graph for loops before rewriting.

    Returns:
        An ``EvaluationTrace``; ``steps[-1]`` equals ``result``.

    Raises:
        UndefinedReferenceError: A referenced cell is not in *store*.
        CircularReferenceError: The references loop back on themselves.
        NonConvergenceError: No fixpoint within *max_iterations* passes.
    """
    limit = DEFAULT_MAX_ITERATIONS if max_iterations is None else max_iterations
    if detect_cycles:
        cycle = find_cycle(formula, store)
        if cycle is not None:
            emit_error(
                EventType.eval_circular_reference,
                "circular cell reference",
                {"formula": formula, "cycle": cycle},
                error_code=CIRCULAR_REFERENCE,
            )
            raise CircularReferenceError(cycle)

    steps: list[str] = []
    text = formula
    for _ in range(limit):
        try:
            nxt = rewrite_pass(text, store)
        except UndefinedReferenceError as exc:
            _emit_failure(formula, text, exc, UNDEFINED_REFERENCE)
            raise
        except FormulaFunctionError as exc:
            _emit_failure(formula, text, exc, FUNCTION_ARITY)
            raise
        steps.append(nxt)
        logger.debug("pass %d: %r -> %r", len(steps), text, nxt)
        if nxt == text:
            emit_info(
                EventType.eval_completed,
                "formula evaluated",
                {"formula": formula, "result": nxt, "iterations": len(steps)},
            )
            return EvaluationTrace(formula=formula, result=nxt, steps=steps)
        text = nxt
    emit_warning(
        EventType.eval_no_convergence,
        f"no fixpoint after {len(steps)} passes",
        {"formula": formula, "last_text": text},
        error_code=NO_CONVERGENCE,
    )
    raise NonConvergenceError(formula, text, len(steps))


def evaluate(
    formula: str,
    store: CellStore,
    *,
    max_iterations: int | None = None,
    detect_cycles: bool = True,
) -> str:
    """Evaluate *formula* to its fixpoint text.  See ``evaluate_with_trace``."""
    return evaluate_with_trace(
        formula,
        store,
        max_iterations=max_iterations,
        detect_cycles=detect_cycles,
    ).result
