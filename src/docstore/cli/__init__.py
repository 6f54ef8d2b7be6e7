"""docstore CLI: operator console for a Cosmos DB document store."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from docstore.cli import compile_cmd, documents, query

app = typer.Typer(
    name="docstore",
    help="docstore CLI: compile filters and read or write documents.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    endpoint: str | None = None
    key: str | None = None
    database: str | None = None
    containers: str | None = None
    auto_register: bool = False
    json_output: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        from docstore import __version__

        print(f"docstore {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    endpoint: Optional[str] = typer.Option(
        None, "--endpoint", envvar="DOCSTORE_ENDPOINT", help="Cosmos DB account endpoint"
    ),
    key: Optional[str] = typer.Option(
        None, "--key", envvar="DOCSTORE_KEY", help="Cosmos DB account key"
    ),
    database: Optional[str] = typer.Option(
        None, "--database", envvar="DOCSTORE_DATABASE", help="Database id (default: docstore)"
    ),
    containers: Optional[str] = typer.Option(
        None,
        "--containers",
        "-c",
        envvar="DOCSTORE_CONTAINERS",
        help="YAML file with entity container configurations",
    ),
    auto_register: bool = typer.Option(
        False,
        "--auto-register",
        help="Create a container per unknown entity, partitioned on id",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all docstore commands."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    state.endpoint = endpoint
    state.key = key
    state.database = database
    state.containers = containers
    state.auto_register = auto_register
    state.json_output = json_output


app.command(name="compile")(compile_cmd.compile_cmd)
app.command(name="get")(documents.get_cmd)
app.command(name="create")(documents.create_cmd)
app.command(name="replace")(documents.replace_cmd)
app.command(name="delete")(documents.delete_cmd)
app.command(name="read-map")(documents.read_map_cmd)
app.command(name="query")(query.query_cmd)
app.command(name="count")(query.count_cmd)


def main() -> None:
    """Entry point for the docstore CLI."""
    app()
