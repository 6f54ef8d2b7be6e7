"""docstore compile: show the Cosmos SQL and parameters for a filter, offline."""

from __future__ import annotations

from typing import Optional

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._filters import build_filter
from docstore.cli._output import print_error, print_json, print_table
from docstore.compiler import compile_count, compile_query
from docstore.query import Query


def compile_cmd(
    filter_json: Optional[str] = typer.Option(None, "--filter", "-f", help="Filter as JSON"),
    where_args: Optional[list[str]] = typer.Option(
        None, "--where", "-w", help="PATH OP VALUE_JSON (repeatable)"
    ),
    sort: Optional[list[str]] = typer.Option(
        None, "--sort", "-s", help="Sort field, '-' prefix for descending (repeatable)"
    ),
    fields: Optional[list[str]] = typer.Option(None, "--field", help="Projected field"),
    count: bool = typer.Option(False, "--count", help="Compile a COUNT query"),
) -> None:
    """Compile a filter into Cosmos SQL without touching the database."""
    from docstore.cli import state

    try:
        query = Query(filter=build_filter(filter_json, where_args), sort=sort or [], fields=fields)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)

    compiled = compile_count(query) if count else compile_query(query)
    if state.json_output:
        print_json({"query": compiled.text, "parameters": compiled.parameters})
        return

    print(compiled.text)
    if compiled.parameters:
        print()
        rows = [[p["name"], repr(p["value"])] for p in compiled.parameters]
        print_table(["name", "value"], rows)
