"""XLSX import -- read the first worksheet of a workbook as cell texts.

Uses openpyxl.  Formulas are kept as their ``=...`` text (no translation),
numbers and booleans are rendered the way the evaluator writes them.  Cells
outside the ``A1:J99`` grid are skipped with a warning.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from gridcalc.formulas.values import format_value

logger = logging.getLogger(__name__)

MAX_COLUMNS = 10  # A..J
MAX_ROWS = 99


def _cell_text(value: Any) -> str:
    if isinstance(value, (bool, int, float)):
        return format_value(value)
    return str(value)


def read_xlsx_cells(xlsx_path: Path) -> tuple[dict[str, str], str, int]:
    """Read cell texts from the first worksheet of *xlsx_path*.

    Returns:
        ``(cells, last_column, rows)``: the non-empty cells keyed by
        address, and the grid size needed to hold them.

    Raises:
        ImportError: If openpyxl is not installed.
    """
    try:
        import openpyxl
    except ImportError:
        raise ImportError(
            "openpyxl is required for XLSX import.  "
            "Install with: pip install 'gridcalc[xlsx]'"
        )

    wb = openpyxl.load_workbook(str(xlsx_path), data_only=False)
    try:
        ws = wb.worksheets[0]
        cells: dict[str, str] = {}
        skipped = 0
        max_col = 1
        max_row = 1
        for row in ws.iter_rows():
            for cell in row:
                if cell.value is None:
                    continue
                if cell.column > MAX_COLUMNS or cell.row > MAX_ROWS:
                    skipped += 1
                    continue
                cells[f"{cell.column_letter}{cell.row}"] = _cell_text(cell.value)
                max_col = max(max_col, cell.column)
                max_row = max(max_row, cell.row)
        if skipped:
            logger.warning(
                "%s: skipped %d cells outside A1:J99", xlsx_path.name, skipped
            )
    finally:
        wb.close()
    return cells, chr(ord("A") + max_col - 1), max_row
