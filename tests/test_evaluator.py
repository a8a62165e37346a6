"""Tests for the rewrite driver: full passes to a fixpoint."""

from __future__ import annotations

import random

import pytest

from gridcalc.cells import Sheet
from gridcalc.formulas import (
    CircularReferenceError,
    FormulaFunctionError,
    NonConvergenceError,
    UndefinedReferenceError,
    evaluate,
    evaluate_with_trace,
    rewrite_pass,
)


@pytest.fixture
def empty() -> Sheet:
    return Sheet()


# ────────────────────────────────────────────────────────────────
# Arithmetic
# ────────────────────────────────────────────────────────────────


class TestArithmetic:
    @pytest.mark.parametrize(
        ("formula", "expected"),
        [
            ("6+3", "9"),
            ("6-3", "3"),
            ("6*3", "18"),
            ("6/3", "2"),
            ("7/2", "3.5"),
            ("1.5+2.25", "3.75"),
            ("3-5", "-2"),
        ],
    )
    def test_binary_operators(self, empty: Sheet, formula: str, expected: str) -> None:
        assert evaluate(formula, empty) == expected

    def test_precedence(self, empty: Sheet) -> None:
        assert evaluate("2+3*4", empty) == "14"

    def test_left_to_right_division(self, empty: Sheet) -> None:
        assert evaluate("8/4*2", empty) == "4"

    def test_long_sum_takes_several_passes(self, empty: Sheet) -> None:
        trace = evaluate_with_trace("1+2+3+4", empty)
        assert trace.result == "10"
        assert trace.steps == ["3+3+4", "6+4", "10", "10"]
        assert trace.iterations == 4

    def test_negative_intermediate(self, empty: Sheet) -> None:
        assert evaluate("1-5+1", empty) == "-3"

    def test_mixed(self, empty: Sheet) -> None:
        assert evaluate("10-2*8+1", empty) == "-5"

    def test_division_by_zero(self, empty: Sheet) -> None:
        assert evaluate("1/0", empty) == "Infinity"

    def test_small_quotient_stays_positional(self, empty: Sheet) -> None:
        assert evaluate("3/100000", empty) == "0.00003"
        assert evaluate("1/100000+1", empty) == "1.00001"

    def test_huge_literal_is_not_even(self, empty: Sheet) -> None:
        huge = "1" + "0" * 400
        assert evaluate(f"even({huge},2)", empty) == "2"
        assert evaluate(f"someeven({huge})", empty) == "false"


    def test_plain_text_is_its_own_fixpoint(self, empty: Sheet) -> None:
        assert evaluate("hello", empty) == "hello"


# ────────────────────────────────────────────────────────────────
# References and functions
# ────────────────────────────────────────────────────────────────


class TestEvaluate:
    def test_sum_of_range(self, sheet: Sheet) -> None:
        assert evaluate("sum(A1:B2)", sheet) == "10"

    def test_single_pass(self, sheet: Sheet) -> None:
        assert rewrite_pass("sum(A1:B2)+1", sheet) == "10+1"

    def test_cells_in_arithmetic(self, sheet: Sheet) -> None:
        assert evaluate("A1+B2*2", sheet) == "9"

    def test_median(self, empty: Sheet) -> None:
        assert evaluate("median(1,2,3,4)", empty) == "2.5"

    def test_nodupes(self, empty: Sheet) -> None:
        assert evaluate("nodupes(1,1,2,3,3)", empty) == "1,2,3"

    def test_everyeven(self, empty: Sheet) -> None:
        assert evaluate("everyeven(2,4,6)", empty) == "true"

    def test_nested_calls_inside_out(self, empty: Sheet) -> None:
        trace = evaluate_with_trace("sum(range(1,3))", empty)
        assert trace.steps[0] == "sum(1,2,3)"
        assert trace.result == "6"

    def test_call_arguments_reduced_first(self, empty: Sheet) -> None:
        assert evaluate("sum(1+2+3,4)", empty) == "10"

    def test_grouping_parentheses(self, empty: Sheet) -> None:
        assert evaluate("2*(3)", empty) == "6"

    def test_unknown_function_passes_through(self, empty: Sheet) -> None:
        assert evaluate("foo(1,2)", empty) == "foo(1,2)"

    def test_malformed_number_propagates_nan(self, empty: Sheet) -> None:
        assert evaluate("sum(1..2,3)", empty) == "NaN"

    def test_reference_chain_resolved_by_later_passes(self) -> None:
        s = Sheet.from_mapping({"A1": "B1", "B1": "5"})
        trace = evaluate_with_trace("A1*2", s)
        assert trace.steps[0] == "B1*2"
        assert trace.result == "10"

    def test_random_consumed_once(self, empty: Sheet, monkeypatch: pytest.MonkeyPatch) -> None:
        values = iter([0.5, 0.0])
        monkeypatch.setattr(random, "random", lambda: next(values))
        assert evaluate("random(1,6)", empty) == "4"

    @pytest.mark.parametrize(
        "formula",
        [
            "2+3*4",
            "8/4*2",
            "sum(A1:B2)",
            "median(1,2,3,4)",
            "nodupes(1,1,2,3,3)",
            "everyeven(2,4,6)",
            "sum(range(1,3))",
            "foo(1,2)",
        ],
    )
    def test_idempotent(self, sheet: Sheet, formula: str) -> None:
        once = evaluate(formula, sheet)
        assert evaluate(once, sheet) == once


# ────────────────────────────────────────────────────────────────
# Failure modes
# ────────────────────────────────────────────────────────────────


class TestErrors:
    def test_undefined_reference(self, sheet: Sheet) -> None:
        with pytest.raises(UndefinedReferenceError) as exc_info:
            evaluate("A20+1", sheet)
        assert exc_info.value.address == "A20"

    def test_undefined_reference_without_cycle_check(self, sheet: Sheet) -> None:
        with pytest.raises(UndefinedReferenceError):
            evaluate("sum(A19:A20)", sheet, detect_cycles=False)

    def test_wrong_arity(self, empty: Sheet) -> None:
        with pytest.raises(FormulaFunctionError):
            evaluate("range(1,2,3)", empty)

    def test_circular_reference(self) -> None:
        s = Sheet.from_mapping({"A1": "B1", "B1": "A1"})
        with pytest.raises(CircularReferenceError) as exc_info:
            evaluate("A1", s)
        assert exc_info.value.cycle_path == ["A1", "B1", "A1"]

    def test_non_convergence(self) -> None:
        s = Sheet.from_mapping({"A1": "B1", "B1": "A1"})
        with pytest.raises(NonConvergenceError) as exc_info:
            evaluate("A1", s, max_iterations=10, detect_cycles=False)
        err = exc_info.value
        assert err.iterations == 10
        assert err.last_text in {"A1", "B1"}
        assert err.formula == "A1"
