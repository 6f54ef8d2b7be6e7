"""Filter expression types and the wire-format filter parser."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

logger = logging.getLogger(__name__)

LOGICAL_OPERATORS = ("$and", "$or", "$not")

# Values that compare as a bare literal, i.e. ``{"status": "active"}``.
LITERAL_TYPES: tuple[type, ...] = (str, bool, int, float, Decimal, datetime, date, list, tuple)


class FilterExpression:
    """Base class for filter expressions."""

    def __and__(self, other: FilterExpression) -> LogicalExpression:
        return LogicalExpression(op="AND", children=[self, other])

    def __or__(self, other: FilterExpression) -> LogicalExpression:
        return LogicalExpression(op="OR", children=[self, other])

    def __invert__(self) -> LogicalExpression:
        return LogicalExpression(op="NOT", children=[self])


@dataclass
class ComparisonExpression(FilterExpression):
    """A single ``field <op> value`` condition.

    ``op`` keeps the wire operator name (``$eq``, ``$in``, ...). Operators the
    compiler does not know are kept here and dropped at compile time.
    """

    field_path: str
    op: str
    value: Any = None

    def __hash__(self) -> int:
        v = self.value
        if isinstance(v, list):
            v = tuple(v)
        return hash((self.field_path, self.op, v))


@dataclass
class LogicalExpression(FilterExpression):
    """A logical combination of filter expressions."""

    op: str  # "AND", "OR", "NOT"
    children: list[FilterExpression] = field(default_factory=list)


class FieldProxy:
    """Builds comparison expressions from Python operators.

    Usage: ``where("age") >= 25``
    """

    def __init__(self, field_path: str) -> None:
        self._field_path = field_path

    def _cmp(self, op: str, value: Any) -> ComparisonExpression:
        return ComparisonExpression(self._field_path, op, value)

    def __eq__(self, other: object) -> ComparisonExpression:  # type: ignore[override]
        return self._cmp("$eq", other)

    def __ne__(self, other: object) -> ComparisonExpression:  # type: ignore[override]
        return self._cmp("$ne", other)

    def __gt__(self, other: Any) -> ComparisonExpression:
        return self._cmp("$gt", other)

    def __ge__(self, other: Any) -> ComparisonExpression:
        return self._cmp("$gte", other)

    def __lt__(self, other: Any) -> ComparisonExpression:
        return self._cmp("$lt", other)

    def __le__(self, other: Any) -> ComparisonExpression:
        return self._cmp("$lte", other)

    def in_(self, values: list[Any]) -> ComparisonExpression:
        return self._cmp("$in", list(values))

    def not_in(self, values: list[Any]) -> ComparisonExpression:
        return self._cmp("$nin", list(values))

    def exists(self, flag: bool = True) -> ComparisonExpression:
        return self._cmp("$exists", flag)

    def regex(self, pattern: str) -> ComparisonExpression:
        return self._cmp("$regex", pattern)

    def startswith(self, prefix: str) -> ComparisonExpression:
        return self._cmp("$sw", prefix)

    def not_startswith(self, prefix: str) -> ComparisonExpression:
        return self._cmp("$nsw", prefix)

    def __getitem__(self, segment: str) -> FieldProxy:
        """Navigate into a nested object field."""
        return FieldProxy(f"{self._field_path}.{segment}")


def where(field_path: str) -> FieldProxy:
    """Start a filter expression on ``field_path`` (dotted for nested fields)."""
    return FieldProxy(field_path)


def parse_filter(wire: Any) -> FilterExpression:
    """Parse a MongoDB-style filter object into a FilterExpression tree.

    A dict is an implicit AND of its keys; a list is an implicit AND of its
    object items. Malformed logical operands and null values are dropped
    rather than rejected. An empty filter parses to an empty AND, which
    matches every document.

    Raises:
        ValueError: If ``wire`` is None or not an object/array.
    """
    if wire is None:
        raise ValueError("filter is required")
    if isinstance(wire, FilterExpression):
        return wire
    if isinstance(wire, dict):
        return _parse_object(wire)
    if isinstance(wire, (list, tuple)):
        return _and([_parse_object(item) for item in wire if isinstance(item, dict)])
    raise ValueError(f"filter must be an object or an array, got {type(wire).__name__}")


def _and(children: list[FilterExpression]) -> FilterExpression:
    if len(children) == 1:
        return children[0]
    return LogicalExpression(op="AND", children=children)


def _parse_object(obj: dict[str, Any]) -> FilterExpression:
    children: list[FilterExpression] = []
    for key, value in obj.items():
        if key in LOGICAL_OPERATORS:
            expr = _parse_logical(key, value)
            if expr is not None:
                children.append(expr)
        elif key.startswith("$"):
            logger.debug("Dropping unknown top-level operator %s", key)
        else:
            children.extend(_parse_field(key, value))
    return _and(children)


def _parse_logical(op: str, value: Any) -> FilterExpression | None:
    if op == "$not":
        if not isinstance(value, dict):
            logger.debug("Dropping $not with non-object operand")
            return None
        return LogicalExpression(op="NOT", children=[_parse_object(value)])

    if not isinstance(value, (list, tuple)):
        logger.debug("Dropping %s with non-array operand", op)
        return None
    children = [_parse_object(item) for item in value if isinstance(item, dict)]
    return LogicalExpression(op="AND" if op == "$and" else "OR", children=children)


def _parse_field(field_path: str, value: Any) -> list[ComparisonExpression]:
    if value is None:
        logger.debug("Dropping null comparison on %s", field_path)
        return []
    if isinstance(value, LITERAL_TYPES):
        return [ComparisonExpression(field_path, "$eq", value)]
    if isinstance(value, dict):
        return [ComparisonExpression(field_path, op, operand) for op, operand in value.items()]
    logger.debug("Dropping comparison on %s with unsupported value type", field_path)
    return []
