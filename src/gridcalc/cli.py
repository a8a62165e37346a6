"""Command-line interface for gridcalc."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from gridcalc import __version__


@click.group()
@click.version_option(version=__version__, prog_name="gridcalc")
@click.option(
    "--project",
    "project_dir",
    default=".",
    type=click.Path(file_okay=False),
    help="Directory holding gridcalc.yaml.",
)
@click.pass_context
def main(ctx: click.Context, project_dir: str) -> None:
    """gridcalc -- evaluate spreadsheet formulas by rewriting to a fixpoint."""
    from gridcalc.config import load_config
    from gridcalc.logging import set_log_dir

    try:
        config = load_config(Path(project_dir))
    except (ValueError, OSError) as e:
        raise click.ClickException(str(e))
    if config.get("logging_dir"):
        set_log_dir(config["logging_dir"], fsync=bool(config.get("logging_fsync")))
    ctx.obj = config


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------


def _parse_cells(items: tuple[str, ...]) -> dict[str, str]:
    cells: dict[str, str] = {}
    for item in items:
        if "=" not in item:
            raise click.ClickException(f"Invalid --cell format: {item!r}. Use A1=value.")
        k, v = item.split("=", 1)
        cells[k.strip()] = v
    return cells


def _sheet_kwargs(config: dict[str, Any], max_iterations: int | None) -> dict[str, Any]:
    return {
        "max_iterations": (
            config["max_iterations"] if max_iterations is None else max_iterations
        ),
        "detect_cycles": bool(config["detect_cycles"]),
        "formula_marker": str(config["formula_marker"]),
    }


# ---------------------------------------------------------------------------
# New
# ---------------------------------------------------------------------------


@main.command()
@click.argument("directory", type=click.Path())
def new(directory: str) -> None:
    """Scaffold a config file and an example sheet in DIRECTORY."""
    from gridcalc.config import CONFIG_FILENAME, DEMO_CONFIG

    target = Path(directory)
    if (target / CONFIG_FILENAME).exists():
        raise click.ClickException(f"{CONFIG_FILENAME} already exists in {target}")
    target.mkdir(parents=True, exist_ok=True)
    (target / CONFIG_FILENAME).write_text(DEMO_CONFIG)
    (target / "sheet.yaml").write_text(
        "cells:\n"
        "  A1: 1\n"
        "  B1: 2\n"
        "  A2: 3\n"
        "  B2: 4\n"
        '  C1: "=sum(A1:B2)"\n'
        '  C2: "=median(A1:B2)*2"\n'
    )
    click.echo(f"Created project at {target}")


# ---------------------------------------------------------------------------
# Eval
# ---------------------------------------------------------------------------


@main.command("eval")
@click.argument("formula")
@click.option("--cell", "cells", multiple=True, help="Set a cell as A1=value.")
@click.option("--sheet", "sheet_path", default=None, type=click.Path(exists=True, dir_okay=False), help="Load cells from a YAML or XLSX file.")
@click.option("--max-iterations", type=int, default=None, help="Override the pass limit.")
@click.option("--trace", is_flag=True, help="Print the text after every pass.")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def eval_cmd(
    config: dict[str, Any],
    formula: str,
    cells: tuple[str, ...],
    sheet_path: str | None,
    max_iterations: int | None,
    trace: bool,
    as_json: bool,
) -> None:
    """Evaluate FORMULA (a leading '=' is optional)."""
    from gridcalc.cells import Sheet, load_sheet
    from gridcalc.formulas import FormulaError, evaluate_with_trace

    kwargs = _sheet_kwargs(config, max_iterations)
    try:
        if sheet_path:
            sheet = load_sheet(Path(sheet_path), **kwargs)
            for addr, text in _parse_cells(cells).items():
                sheet.set(addr, text)
        else:
            sheet = Sheet.from_mapping(
                _parse_cells(cells), str(config["columns"]), int(config["rows"]), **kwargs
            )
    except (ValueError, FormulaError, ImportError) as e:
        raise click.ClickException(str(e))

    if formula.startswith(sheet.formula_marker):
        formula = formula[len(sheet.formula_marker):]

    try:
        result = evaluate_with_trace(
            formula,
            sheet,
            max_iterations=sheet.max_iterations,
            detect_cycles=sheet.detect_cycles,
        )
    except FormulaError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(result.model_dump(), indent=2))
        return
    if trace:
        for i, step in enumerate(result.steps, 1):
            click.echo(f"{i:>4}  {step}")
    click.echo(result.result)


# ---------------------------------------------------------------------------
# Sheet
# ---------------------------------------------------------------------------


@main.command("sheet")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def sheet_cmd(config: dict[str, Any], path: str, as_json: bool) -> None:
    """Load a sheet from PATH, evaluate its formula cells, print the cells."""
    from gridcalc.cells import load_sheet
    from gridcalc.formulas import FormulaError

    try:
        sheet = load_sheet(Path(path), **_sheet_kwargs(config, None))
        sheet.recalculate()
    except (ValueError, FormulaError, ImportError) as e:
        raise click.ClickException(str(e))

    cells = sheet.non_empty()
    if as_json:
        click.echo(json.dumps(cells, indent=2))
        return
    for addr, text in cells.items():
        click.echo(f"{addr}\t{text}")


# ---------------------------------------------------------------------------
# Functions
# ---------------------------------------------------------------------------


@main.command()
def functions() -> None:
    """List the available formula functions."""
    from gridcalc.functions import FUNCTIONS

    for name in sorted(FUNCTIONS):
        fn = FUNCTIONS[name]
        label = name or "(bare list)"
        notes = []
        if fn.arity is not None:
            notes.append(f"{fn.arity} args")
        if not fn.deterministic:
            notes.append("non-deterministic")
        suffix = f"  [{', '.join(notes)}]" if notes else ""
        click.echo(f"{label}{suffix}")


if __name__ == "__main__":
    main()
