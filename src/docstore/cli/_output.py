"""Output formatting helpers for the CLI."""

from __future__ import annotations

import json
import sys
from typing import Any


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def print_table(headers: list[str], rows: list[list[Any]], *, json_mode: bool = False) -> None:
    """Print data as a table (text) or JSON array."""
    if json_mode:
        print_json([dict(zip(headers, row)) for row in rows])
        return

    if not rows:
        return

    widths = [len(h) for h in headers]
    str_rows = [["" if v is None else str(v) for v in row] for row in rows]
    for row in str_rows:
        for i, val in enumerate(row):
            widths[i] = max(widths[i], len(val))

    print("  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)))
    print("  ".join("-" * w for w in widths))
    for row in str_rows:
        print("  ".join(val.ljust(widths[i]) for i, val in enumerate(row)))


def print_documents(documents: list[dict[str, Any]], *, json_mode: bool = False) -> None:
    """Print documents as JSON, or as a table over the union of their top-level keys."""
    if json_mode:
        print_json(documents)
        return

    headers: list[str] = []
    for doc in documents:
        for key in doc:
            if key not in headers and not key.startswith("_"):
                headers.append(key)
    rows = [[_cell(doc.get(h)) for h in headers] for doc in documents]
    print_table(headers, rows)


def _cell(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return value


def print_object(data: dict[str, Any], *, json_mode: bool = False) -> None:
    """Print a single object as JSON or key-value pairs."""
    if json_mode:
        print_json(data)
        return

    for k, v in data.items():
        print(f"{k}: {_cell(v)}")


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)
