"""In-memory sheet of cells and the loaders that fill one.

A ``Sheet`` is the ``CellStore`` the evaluator reads from.  It owns the
cell texts; the evaluator never writes to it.  ``Sheet.update`` is the
"user typed into a cell" path: formulas are evaluated and their results
stored back.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml

from gridcalc.formulas import (
    CellStore,
    UndefinedReferenceError,
    evaluate,
    referenced_addresses,
)
from gridcalc.formulas.references import parse_address
from gridcalc.logging import EventType, emit_info
from gridcalc.ranges import char_range, int_range

__all__ = ["CellStore", "Sheet", "load_sheet"]

DEFAULT_FORMULA_MARKER = "="

_WS_RE = re.compile(r"\s")


class Sheet:
    """A rectangular grid ``A..last_column`` x ``1..rows`` of cell texts.

    Every cell starts out as the empty string.  Addresses are accepted in
    any case and stored upper-cased.
    """

    def __init__(
        self,
        last_column: str = "F",
        rows: int = 19,
        *,
        max_iterations: int | None = None,
        detect_cycles: bool = True,
        formula_marker: str = DEFAULT_FORMULA_MARKER,
    ) -> None:
        last_column = last_column.upper()
        if not ("A" <= last_column <= "J") or len(last_column) != 1:
            raise ValueError(f"last_column must be a letter A-J, got {last_column!r}")
        if not 1 <= rows <= 99:
            raise ValueError(f"rows must be 1-99, got {rows}")
        if not formula_marker:
            raise ValueError("formula_marker must not be empty")
        self.columns = char_range("A", last_column)
        self.rows = rows
        self.max_iterations = max_iterations
        self.detect_cycles = detect_cycles
        self.formula_marker = formula_marker
        self._cells: dict[str, str] = {
            f"{col}{row}": "" for row in int_range(1, rows) for col in self.columns
        }

    @classmethod
    def from_mapping(
        cls,
        cells: Mapping[str, Any],
        last_column: str = "F",
        rows: int = 19,
        **kwargs: Any,
    ) -> "Sheet":
        """Build a sheet and store each ``{address: text}`` entry verbatim."""
        sheet = cls(last_column, rows, **kwargs)
        for addr, text in cells.items():
            sheet.set(addr, "" if text is None else str(text))
        return sheet

    # ------------------------------------------------------------------
    # CellStore protocol
    # ------------------------------------------------------------------

    def lookup(self, address: str) -> str:
        key = address.upper()
        try:
            return self._cells[key]
        except KeyError:
            raise UndefinedReferenceError(key, available=len(self._cells)) from None

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, address: str) -> str:
        return self.lookup(address)

    def set(self, address: str, text: str) -> None:
        """Store *text* verbatim at *address*."""
        key = self._key(address)
        self._cells[key] = text

    def addresses(self) -> list[str]:
        """All addresses, row-major."""
        return list(self._cells)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._cells.items())

    def non_empty(self) -> dict[str, str]:
        return {addr: text for addr, text in self._cells.items() if text}

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and address.upper() in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def _key(self, address: str) -> str:
        col, row = parse_address(address)
        key = f"{col}{row}"
        if key not in self._cells:
            raise UndefinedReferenceError(key, available=len(self._cells))
        return key

    # ------------------------------------------------------------------
    # Input handling
    # ------------------------------------------------------------------

    def update(self, address: str, text: str) -> str:
        """Handle new input for a cell and return what ends up stored.

        Whitespace is removed.  Text starting with the formula marker
        (``=`` by default) that does not
        refer to the cell itself is evaluated and the result is stored;
        anything else is stored as typed.
        """
        key = self._key(address)
        value = _WS_RE.sub("", text)
        if value.startswith(self.formula_marker):
            formula = value[len(self.formula_marker):]
            if key not in referenced_addresses(formula):
                value = evaluate(
                    formula,
                    self,
                    max_iterations=self.max_iterations,
                    detect_cycles=self.detect_cycles,
                )
        self._cells[key] = value
        emit_info(EventType.cell_updated, "cell updated", {"address": key, "value": value})
        return value

    def recalculate(self) -> dict[str, str]:
        """Evaluate every formula cell in row-major order, storing results.

        Returns:
            The ``{address: result}`` of each formula cell evaluated.
        """
        results: dict[str, str] = {}
        for addr in self.addresses():
            text = self._cells[addr]
            if text.startswith(self.formula_marker):
                results[addr] = self.update(addr, text)
        return results


# ---------------------------------------------------------------------------
# Loaders
# ---------------------------------------------------------------------------


def load_sheet(path: Path, **kwargs: Any) -> Sheet:
    """Load a sheet from a ``.yaml``/``.yml`` or ``.xlsx`` file.

    YAML layout::

        columns: F        # optional, last column letter
        rows: 19          # optional
        cells:
          A1: 1
          A2: "=A1*2"

    Extra keyword arguments go to the ``Sheet`` constructor.
    """
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        from gridcalc.xlsx_import import read_xlsx_cells

        cells, last_column, rows = read_xlsx_cells(path)
        sheet = Sheet.from_mapping(cells, last_column, rows, **kwargs)
    elif suffix in (".yaml", ".yml"):
        spec = yaml.safe_load(path.read_text()) or {}
        if not isinstance(spec, dict):
            raise ValueError(f"{path} must contain a mapping")
        sheet = Sheet.from_mapping(
            spec.get("cells") or {},
            str(spec.get("columns", "F")),
            int(spec.get("rows", 19)),
            **kwargs,
        )
    else:
        raise ValueError(f"Unsupported sheet file type: {path.suffix!r}")

    emit_info(
        EventType.sheet_loaded,
        f"loaded sheet from {path.name}",
        {"path": str(path), "cells": len(sheet.non_empty())},
    )
    return sheet
