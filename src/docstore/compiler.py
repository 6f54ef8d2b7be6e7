"""Compile filter expressions and queries into parameterized Cosmos SQL."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any

from docstore.filters import ComparisonExpression, FilterExpression, LogicalExpression, parse_filter
from docstore.query import Query

logger = logging.getLogger(__name__)

CONTAINER_ALIAS = "c"

_COMPARISON_OPS = {
    "$eq": "=",
    "$ne": "!=",
    "$gt": ">",
    "$gte": ">=",
    "$lt": "<",
    "$lte": "<=",
}
_RANGE_OPS = ("$gt", "$gte", "$lt", "$lte")
_LIST_OPS = {"$in": "IN", "$nin": "NOT IN"}
_STRING_FUNCTIONS = {
    "$regex": "REGEX_MATCH({field}, {param})",
    "$sw": "STARTSWITH({field}, {param})",
    "$nsw": "NOT STARTSWITH({field}, {param})",
}

_IDENTIFIER_RE = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)((?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"^\d+$")

# Cosmos SQL keywords cannot be used with dot notation.
_RESERVED = frozenset(
    "and array as asc between by desc distinct escape exists false from group in is join "
    "like limit not null offset or order select top true udf undefined value where".split()
)


def render_field_path(field_path: str, alias: str = CONTAINER_ALIAS) -> str:
    """Render a dotted document path as a Cosmos SQL property reference.

    ``address.city`` becomes ``c.address.city`` and ``tags[0]`` stays an index.
    Segments that are not plain identifiers are quoted (``c["first-name"]``),
    so a field name can never break out of the generated text.
    """
    rendered = alias
    for segment in field_path.split("."):
        match = _IDENTIFIER_RE.match(segment)
        if match and match.group(1).lower() not in _RESERVED:
            rendered += f".{segment}"
        elif _INDEX_RE.match(segment):
            rendered += f"[{segment}]"
        else:
            rendered += f"[{json.dumps(segment)}]"
    return rendered


def compile_sort(sort: list[str] | None, alias: str = CONTAINER_ALIAS) -> str:
    """Render sort keys (``"name"`` / ``"-age"``) as an ORDER BY list."""
    clauses = []
    for key in sort or []:
        key = key.strip()
        if key.startswith("-") and len(key) > 1:
            clauses.append(f"{render_field_path(key[1:], alias)} DESC")
        elif key and key != "-":
            clauses.append(f"{render_field_path(key, alias)} ASC")
    return ", ".join(clauses)


class FilterCompiler:
    """Translate one filter tree into query text plus bound parameters.

    Use a fresh instance per query: parameter names (``@p0``, ``@p1``, ...)
    are allocated from a per-instance counter. Unsupported operators and
    operands of the wrong type are dropped, never rejected.
    """

    def __init__(self, alias: str = CONTAINER_ALIAS) -> None:
        self._alias = alias
        self._parameters: list[dict[str, Any]] = []

    @property
    def parameters(self) -> list[dict[str, Any]]:
        return list(self._parameters)

    def compile(self, filter_: Any) -> tuple[str, list[dict[str, Any]]]:
        """Compile a wire filter (dict/list) or a FilterExpression.

        Raises:
            ValueError: If ``filter_`` is None.
        """
        expr = parse_filter(filter_)
        return self._compile(expr), self.parameters

    def _bind(self, value: Any) -> str:
        name = f"@p{len(self._parameters)}"
        if isinstance(value, tuple):
            value = list(value)
        self._parameters.append({"name": name, "value": value})
        return name

    def _compile(self, expr: FilterExpression) -> str:
        if isinstance(expr, ComparisonExpression):
            return self._compile_comparison(expr)
        if isinstance(expr, LogicalExpression):
            return self._compile_logical(expr)
        logger.debug("Dropping unsupported filter node %s", type(expr).__name__)
        return ""

    def _compile_logical(self, expr: LogicalExpression) -> str:
        if expr.op == "NOT":
            child = self._compile(expr.children[0]) if expr.children else ""
            return f"NOT ({child})" if child else ""

        parts = [part for part in (self._compile(c) for c in expr.children) if part]
        if not parts:
            return ""
        if expr.op == "OR":
            return "(" + " OR ".join(parts) + ")"
        if expr.op == "AND":
            return " AND ".join(parts)
        logger.debug("Dropping unknown logical operator %s", expr.op)
        return ""

    def _compile_comparison(self, expr: ComparisonExpression) -> str:
        op, value = expr.op, expr.value
        if value is None:
            logger.debug("Dropping %s on %s: null operand", op, expr.field_path)
            return ""
        field_ref = render_field_path(expr.field_path, self._alias)

        if op in _COMPARISON_OPS:
            if op in _RANGE_OPS and isinstance(value, (dict, list, tuple)):
                return self._drop(expr)
            return f"{field_ref} {_COMPARISON_OPS[op]} {self._bind(value)}"

        if op in _LIST_OPS:
            if not isinstance(value, (list, tuple)):
                return self._drop(expr)
            return f"{field_ref} {_LIST_OPS[op]} {self._bind(value)}"

        if op == "$exists":
            if not isinstance(value, bool):
                return self._drop(expr)
            return f"IS_DEFINED({field_ref})" if value else f"NOT IS_DEFINED({field_ref})"

        if op in _STRING_FUNCTIONS:
            if not isinstance(value, str):
                return self._drop(expr)
            return _STRING_FUNCTIONS[op].format(field=field_ref, param=self._bind(value))

        return self._drop(expr)

    @staticmethod
    def _drop(expr: ComparisonExpression) -> str:
        logger.debug(
            "Dropping %s on %s: unsupported operator or operand type %s",
            expr.op,
            expr.field_path,
            type(expr.value).__name__,
        )
        return ""


@dataclass(frozen=True)
class CompiledQuery:
    """Query text and its parameters in the azure-cosmos ``parameters`` shape."""

    text: str
    parameters: list[dict[str, Any]] = field(default_factory=list)


def _where(query: Query) -> tuple[str, list[dict[str, Any]]]:
    if query.filter is None:
        return "", []
    return FilterCompiler().compile(query.filter)


def compile_query(query: Query | None) -> CompiledQuery:
    """Compile a Query into ``SELECT ... FROM c [WHERE ...] [ORDER BY ...]``.

    Limit and continuation token are execution options and never appear in
    the text.
    """
    if query is None:
        raise ValueError("query is required")

    where, parameters = _where(query)
    if query.fields:
        select = ", ".join(render_field_path(f) for f in query.fields)
    else:
        select = "*"
    text = f"SELECT {select} FROM {CONTAINER_ALIAS}"
    if where:
        text += f" WHERE {where}"
    order_by = compile_sort(query.sort)
    if order_by:
        text += f" ORDER BY {order_by}"

    logger.debug("Compiled query %r with %d parameter(s)", text, len(parameters))
    return CompiledQuery(text, parameters)


def compile_count(query: Query | None) -> CompiledQuery:
    """Compile the filter of ``query`` into a ``SELECT VALUE COUNT(1)`` query."""
    if query is None:
        raise ValueError("query is required")

    where, parameters = _where(query)
    text = f"SELECT VALUE COUNT(1) FROM {CONTAINER_ALIAS}"
    if where:
        text += f" WHERE {where}"
    return CompiledQuery(text, parameters)


def compile_read_map(
    entity_ids: list[str],
    partition_key_field: str,
    partition_key: Any | None,
) -> CompiledQuery:
    """Compile the batched id lookup used by ``DocumentStorage.read_map``.

    Each id gets its own parameter; the partition clause is omitted when no
    partition key value is given.
    """
    parameters: list[dict[str, Any]] = []
    conditions = []
    if partition_key is not None:
        parameters.append({"name": "@pKey", "value": partition_key})
        conditions.append(f"{render_field_path(partition_key_field)} = @pKey")

    names = []
    for index, entity_id in enumerate(entity_ids):
        names.append(f"@id{index}")
        parameters.append({"name": f"@id{index}", "value": entity_id})
    conditions.append(f"{render_field_path('id')} IN ({', '.join(names)})")

    text = f"SELECT * FROM {CONTAINER_ALIAS} WHERE " + " AND ".join(conditions)
    return CompiledQuery(text, parameters)
