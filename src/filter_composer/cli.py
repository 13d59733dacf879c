"""filter-composer CLI.

`filterq compile`, `filterq preview`, `filterq fields`, `filterq values`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pandas as pd
import typer
from pydantic import ValidationError

from filter_composer.contracts.filters import FilterTree, parse_flat, parse_node
from filter_composer.engine.compiler import compile_flat_report, compile_tree_report
from filter_composer.engine.preview import preview, preview_flat, preview_flat_html, preview_html
from filter_composer.orchestrator.submission import build_filter_group
from filter_composer.tools.suggestions import (
    DataFrameFieldCatalog,
    DataFrameFieldValues,
    FieldSuggestionAdapter,
)
from filter_composer.util.logging import configure_logging

# Force a command group so the UX is always `filterq <command> ...`.
app = typer.Typer(add_completion=False, no_args_is_help=True)

FLAT_COLUMNS = ["field", "operator", "value", "relation", "minOperator", "minValue", "maxOperator", "maxValue"]


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    """filter-composer CLI."""
    configure_logging(log_level)


def _read_rows_csv(path: Path) -> list[dict[str, Any]]:
    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df = df[[c for c in FLAT_COLUMNS if c in df.columns]]
    return df.to_dict(orient="records")


def _load_filters(path: Path, flat: bool) -> Any:
    """A FilterTree / node, or a list of flat rows."""
    if not path.exists():
        typer.echo(f"Filter file not found: {path}")
        raise typer.Exit(1)

    try:
        if path.suffix.lower() == ".csv":
            return parse_flat(_read_rows_csv(path))
        raw = json.loads(path.read_text())
        if flat or isinstance(raw, list):
            return parse_flat(raw)
        if isinstance(raw, dict) and "root" in raw:
            return FilterTree.model_validate(raw)
        return parse_node(raw)
    except (json.JSONDecodeError, ValidationError) as e:
        typer.echo(f"Invalid filter file {path}: {e}")
        raise typer.Exit(1)


def _is_flat(filters: Any) -> bool:
    return isinstance(filters, list)


@app.command("compile")
def compile_cmd(
    path: Path = typer.Argument(..., help="JSON tree/rows or CSV rows"),
    flat: bool = typer.Option(False, "--flat", help="Treat a JSON file as flat rows"),
    label: Optional[str] = typer.Option(None, "--label", help="Emit a FilterGroup with this label"),
) -> None:
    """Print the compiled query document."""
    filters = _load_filters(path, flat)

    if label is not None:
        group = build_filter_group(filters, label)
        if group is None:
            typer.echo("No usable filters")
            raise typer.Exit(1)
        typer.echo(json.dumps(group.to_payload(), indent=2))
        return

    report = compile_flat_report(filters) if _is_flat(filters) else compile_tree_report(filters)
    for w in report.warnings:
        typer.echo(f"warning: {w.message}", err=True)
    typer.echo(json.dumps(report.data, indent=2))


@app.command("preview")
def preview_cmd(
    path: Path = typer.Argument(..., help="JSON tree/rows or CSV rows"),
    flat: bool = typer.Option(False, "--flat", help="Treat a JSON file as flat rows"),
    as_html: bool = typer.Option(False, "--html", help="Emit markup instead of text"),
) -> None:
    """Print the human-readable filter expression."""
    filters = _load_filters(path, flat)
    if _is_flat(filters):
        text = preview_flat_html(filters) if as_html else preview_flat(filters)
    else:
        text = preview_html(filters) if as_html else preview(filters)
    typer.echo(text or "(empty)")


@app.command("fields")
def fields_cmd(
    data: Path = typer.Argument(..., help="CSV sample of the indexed documents"),
) -> None:
    """List filterable fields, including `.keyword` variants."""
    if not data.exists():
        typer.echo(f"Data file not found: {data}")
        raise typer.Exit(1)
    catalog = DataFrameFieldCatalog(pd.read_csv(data))
    typer.echo("\n".join(catalog.list_fields()))


@app.command("values")
def values_cmd(
    data: Path = typer.Argument(..., help="CSV sample of the indexed documents"),
    field: str = typer.Argument(..., help="Exact (.keyword) field"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Substring to match"),
    size: Optional[int] = typer.Option(None, "--size", "-n", help="Maximum values"),
) -> None:
    """Suggest values for an exact field."""
    if not data.exists():
        typer.echo(f"Data file not found: {data}")
        raise typer.Exit(1)

    adapter = FieldSuggestionAdapter(DataFrameFieldValues(pd.read_csv(data)))
    out = adapter.suggest(field, search_term=search, size=size)
    if not out.ok:
        typer.echo("\n".join(e.message for e in out.errors))
        raise typer.Exit(1)
    typer.echo("\n".join(out.data or []))
