"""docstore query / count: run filtered reads against one entity type."""

from __future__ import annotations

import sys
from typing import Optional

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._filters import build_filter
from docstore.cli._output import print_documents, print_error, print_json
from docstore.cli._storage import run_with_storage
from docstore.query import Query


def _build_query(
    filter_json: str | None,
    where_args: list[str] | None,
    **options: object,
) -> Query:
    try:
        return Query(filter=build_filter(filter_json, where_args), **options)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)


def query_cmd(
    entity: str = typer.Argument(..., help="Entity type"),
    filter_json: Optional[str] = typer.Option(None, "--filter", "-f", help="Filter as JSON"),
    where_args: Optional[list[str]] = typer.Option(
        None, "--where", "-w", help="PATH OP VALUE_JSON (repeatable)"
    ),
    sort: Optional[list[str]] = typer.Option(
        None, "--sort", "-s", help="Sort field, '-' prefix for descending (repeatable)"
    ),
    limit: Optional[int] = typer.Option(None, "--limit", help="Page size"),
    continuation: Optional[str] = typer.Option(
        None, "--continuation", help="Continuation token from a previous page"
    ),
) -> None:
    """Fetch one page of documents matching a filter."""
    from docstore.cli import state

    query = _build_query(
        filter_json,
        where_args,
        sort=sort or [],
        limit=limit,
        continuation_token=continuation,
    )
    result = run_with_storage(lambda s: s.query(entity, query))

    if state.json_output:
        print_json(result.model_dump(by_alias=True))
        return
    print_documents(result.items)
    if result.continuation_token:
        print(f"continuation: {result.continuation_token}", file=sys.stderr)


def count_cmd(
    entity: str = typer.Argument(..., help="Entity type"),
    filter_json: Optional[str] = typer.Option(None, "--filter", "-f", help="Filter as JSON"),
    where_args: Optional[list[str]] = typer.Option(
        None, "--where", "-w", help="PATH OP VALUE_JSON (repeatable)"
    ),
) -> None:
    """Count documents matching a filter."""
    from docstore.cli import state

    query = _build_query(filter_json, where_args)
    total = run_with_storage(lambda s: s.count(entity, query))
    if state.json_output:
        print_json({"count": total})
    else:
        print(total)
