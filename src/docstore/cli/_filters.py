"""CLI filter parsing: ``--filter`` JSON and ``--where PATH OP VALUE_JSON`` triples."""

from __future__ import annotations

import json
from typing import Any

# Map CLI operator tokens to filter operators
_OP_MAP: dict[str, str] = {
    "eq": "$eq",
    "ne": "$ne",
    "gt": "$gt",
    "gte": "$gte",
    "lt": "$lt",
    "lte": "$lte",
    "in": "$in",
    "nin": "$nin",
    "exists": "$exists",
    "regex": "$regex",
    "sw": "$sw",
    "nsw": "$nsw",
}


def parse_cli_filters(triples: list[tuple[str, str, str]]) -> dict[str, Any] | None:
    """Parse CLI filter triples (PATH, OP, VALUE_JSON) into a wire filter.

    Multiple triples are AND-combined.
    """
    if not triples:
        return None

    conditions: list[dict[str, Any]] = []
    for path, op_token, value_json in triples:
        op = _OP_MAP.get(op_token)
        if op is None:
            raise ValueError(
                f"Unknown filter operator '{op_token}'. "
                f"Valid operators: {', '.join(sorted(_OP_MAP.keys()))}"
            )
        try:
            value = json.loads(value_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON value for '{path}': {value_json}") from e
        conditions.append({path: {op: value}})

    if len(conditions) == 1:
        return conditions[0]
    return {"$and": conditions}


def split_where_args(where_args: list[str] | None) -> list[tuple[str, str, str]]:
    """Group ``--where`` values into triples.

    Accepts either three separate ``--where`` values per condition or one
    ``"PATH OP VALUE_JSON"`` string each.
    """
    if not where_args:
        return []

    if len(where_args) % 3 == 0 and all(len(a.split(None, 2)) == 1 for a in where_args):
        return [
            (where_args[i], where_args[i + 1], where_args[i + 2])
            for i in range(0, len(where_args), 3)
        ]

    triples: list[tuple[str, str, str]] = []
    for arg in where_args:
        parts = arg.split(None, 2)
        if len(parts) != 3:
            raise ValueError(f"Invalid condition (expected 'PATH OP VALUE_JSON'): {arg}")
        triples.append((parts[0], parts[1], parts[2]))
    return triples


def build_filter(filter_json: str | None, where_args: list[str] | None) -> Any:
    """Combine ``--filter`` JSON and ``--where`` conditions into one wire filter."""
    parts: list[Any] = []
    if filter_json:
        try:
            parsed = json.loads(filter_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"--filter is not valid JSON: {e}") from e
        if not isinstance(parsed, (dict, list)):
            raise ValueError("--filter must be a JSON object or array")
        parts.append(parsed)

    where = parse_cli_filters(split_where_args(where_args))
    if where is not None:
        parts.append(where)

    if not parts:
        return None
    if len(parts) == 1:
        return parts[0]
    return {"$and": [p if isinstance(p, dict) else {"$and": p} for p in parts]}
