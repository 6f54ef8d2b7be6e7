"""docstore get / create / replace / delete / read-map."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._output import print_documents, print_error, print_object
from docstore.cli._storage import run_with_storage


def _load_document(doc_json: str | None, doc_file: str | None) -> dict[str, Any]:
    if (doc_json is None) == (doc_file is None):
        print_error("Exactly one of --doc or --file is required")
        raise typer.Exit(ec.USAGE_ERROR)
    try:
        text = doc_json if doc_json is not None else Path(doc_file).read_text(encoding="utf-8")
        document = json.loads(text)
    except (OSError, json.JSONDecodeError) as e:
        print_error(f"Cannot read document: {e}")
        raise typer.Exit(ec.USAGE_ERROR)
    if not isinstance(document, dict):
        print_error("Document must be a JSON object")
        raise typer.Exit(ec.USAGE_ERROR)
    return document


def get_cmd(
    entity: str = typer.Argument(..., help="Entity type"),
    entity_id: str = typer.Argument(..., help="Document id"),
    partition_key: Optional[str] = typer.Option(None, "--pk", help="Partition key value"),
) -> None:
    """Read one document."""
    from docstore.cli import state

    document = run_with_storage(lambda s: s.read(entity, entity_id, partition_key))
    if document is None:
        print_error(f"{entity} '{entity_id}' not found")
        raise typer.Exit(ec.NOT_FOUND)
    print_object(document, json_mode=state.json_output)


def create_cmd(
    entity: str = typer.Argument(..., help="Entity type"),
    entity_id: Optional[str] = typer.Option(
        None, "--id", help="Document id (generated if omitted)"
    ),
    doc_json: Optional[str] = typer.Option(None, "--doc", help="Document as JSON"),
    doc_file: Optional[str] = typer.Option(None, "--file", help="Path to a JSON document"),
) -> None:
    """Create a document."""
    from docstore.cli import state

    document = _load_document(doc_json, doc_file)
    created = run_with_storage(lambda s: s.create(entity, entity_id, document))
    print_object(created, json_mode=state.json_output)


def replace_cmd(
    entity: str = typer.Argument(..., help="Entity type"),
    entity_id: str = typer.Argument(..., help="Document id"),
    doc_json: Optional[str] = typer.Option(None, "--doc", help="Document as JSON"),
    doc_file: Optional[str] = typer.Option(None, "--file", help="Path to a JSON document"),
) -> None:
    """Replace a document (full overwrite)."""
    from docstore.cli import state

    document = _load_document(doc_json, doc_file)
    replaced = run_with_storage(lambda s: s.replace(entity, entity_id, document))
    print_object(replaced, json_mode=state.json_output)


def delete_cmd(
    entity: str = typer.Argument(..., help="Entity type"),
    entity_id: str = typer.Argument(..., help="Document id"),
    partition_key: Optional[str] = typer.Option(None, "--pk", help="Partition key value"),
) -> None:
    """Delete a document."""
    run_with_storage(lambda s: s.delete(entity, entity_id, partition_key))
    print(f"Deleted {entity} '{entity_id}'")


def read_map_cmd(
    entity: str = typer.Argument(..., help="Entity type"),
    entity_ids: list[str] = typer.Argument(..., help="Document ids"),
    partition_key: Optional[str] = typer.Option(None, "--pk", help="Partition key value"),
) -> None:
    """Read several documents of one partition by id."""
    from docstore.cli import state

    found = run_with_storage(lambda s: s.read_map(entity, partition_key, entity_ids))
    if state.json_output:
        print_object(found, json_mode=True)
        return
    print_documents([found[i] for i in entity_ids if i in found])
    missing = [i for i in entity_ids if i not in found]
    if missing:
        print_error(f"Not found: {', '.join(missing)}")
