"""Tests for cell and range reference expansion."""

from __future__ import annotations

import pytest

from gridcalc.cells import Sheet
from gridcalc.formulas import (
    UndefinedReferenceError,
    expand_cells,
    expand_ranges,
    find_cycle,
    referenced_addresses,
    resolve_references,
)
from gridcalc.formulas.references import parse_address, range_addresses


# ────────────────────────────────────────────────────────────────
# Address helpers
# ────────────────────────────────────────────────────────────────


class TestAddresses:
    def test_parse_address(self) -> None:
        assert parse_address("b12") == ("B", 12)

    @pytest.mark.parametrize("bad", ["K1", "A0", "A100", "1A", ""])
    def test_parse_address_invalid(self, bad: str) -> None:
        with pytest.raises(ValueError):
            parse_address(bad)

    def test_range_addresses_row_major(self) -> None:
        assert range_addresses("A1:B2") == ["A1", "B1", "A2", "B2"]

    def test_range_addresses_reversed_rows(self) -> None:
        assert range_addresses("A2:B1") == []

    def test_range_addresses_reversed_columns(self) -> None:
        assert range_addresses("B1:A2") == []


# ────────────────────────────────────────────────────────────────
# Expansion
# ────────────────────────────────────────────────────────────────


class TestExpansion:
    def test_range_expands_row_major(self, sheet: Sheet) -> None:
        assert expand_ranges("A1:B2", sheet) == "1,2,3,4"

    def test_range_is_case_insensitive(self, sheet: Sheet) -> None:
        assert expand_ranges("sum(a1:b2)", sheet) == "sum(1,2,3,4)"

    def test_every_range_replaced(self, sheet: Sheet) -> None:
        assert expand_ranges("A1:A2+B1:B2", sheet) == "1,3+2,4"

    def test_single_cells(self, sheet: Sheet) -> None:
        assert expand_cells("A1+b2", sheet) == "1+4"

    def test_empty_cell_expands_to_nothing(self, sheet: Sheet) -> None:
        assert expand_cells("C1", sheet) == ""

    def test_ranges_then_cells(self, sheet: Sheet) -> None:
        assert resolve_references("sum(A1:A2)*B1", sheet) == "sum(1,3)*2"

    def test_cells_inside_range_values_resolved_same_pass(self) -> None:
        s = Sheet.from_mapping({"A1": "B1", "A2": "7", "B1": "5"})
        assert resolve_references("A1:A2", s) == "5,7"

    def test_stored_formula_substituted_verbatim(self) -> None:
        s = Sheet.from_mapping({"A1": "1", "C1": "=A1+1"})
        assert resolve_references("C1", s) == "=A1+1"

    def test_missing_cell_raises(self, sheet: Sheet) -> None:
        with pytest.raises(UndefinedReferenceError, match="A20"):
            resolve_references("A20+1", sheet)

    def test_missing_cell_in_range_raises(self, sheet: Sheet) -> None:
        with pytest.raises(UndefinedReferenceError):
            expand_ranges("A18:A20", sheet)


# ────────────────────────────────────────────────────────────────
# Reference graph
# ────────────────────────────────────────────────────────────────


class TestReferenceGraph:
    def test_referenced_addresses(self) -> None:
        assert referenced_addresses("A1:B2+a1+C3") == ["A1", "B1", "A2", "B2", "C3"]

    def test_no_references(self) -> None:
        assert referenced_addresses("sum(1,2)") == []

    def test_two_cell_cycle(self) -> None:
        s = Sheet.from_mapping({"A1": "B1", "B1": "A1"})
        assert find_cycle("A1", s) == ["A1", "B1", "A1"]

    def test_self_reference(self) -> None:
        s = Sheet.from_mapping({"A1": "A1+1"})
        assert find_cycle("A1*2", s) == ["A1", "A1"]

    def test_cycle_through_range(self) -> None:
        s = Sheet.from_mapping({"A1": "1", "A2": "sum(A1:A3)", "A3": "2"})
        assert find_cycle("A2", s) == ["A2", "A2"]

    def test_acyclic(self) -> None:
        s = Sheet.from_mapping({"A1": "1", "B1": "A1*2"})
        assert find_cycle("B1+A1", s) is None

    def test_diamond_is_not_a_cycle(self) -> None:
        s = Sheet.from_mapping({"A1": "B1+C1", "B1": "D1", "C1": "D1", "D1": "1"})
        assert find_cycle("A1", s) is None

    def test_long_chain(self) -> None:
        cells = {f"A{r}": f"A{r + 1}" for r in range(1, 99)}
        cells["A99"] = "1"
        s = Sheet.from_mapping(cells, rows=99)
        assert find_cycle("A1", s) is None
