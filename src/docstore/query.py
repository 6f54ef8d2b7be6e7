"""Query and QueryResult wire models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Query(BaseModel):
    """A filtered, sorted, paged read over one entity type.

    ``filter`` is a MongoDB-style object (or a FilterExpression built in
    Python); ``sort`` holds field names, ``-`` prefixed for descending.
    ``limit`` is the page size and ``continuation_token`` resumes a previous
    page. Neither limit nor token is part of the compiled query text.
    """

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    filter: Any = None
    sort: list[str] = Field(default_factory=list)
    limit: int | None = Field(default=None, gt=0)
    continuation_token: str | None = Field(default=None, alias="continuationToken")
    fields: list[str] | None = None


class QueryResult(BaseModel):
    """One page of query results."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[dict[str, Any]] = Field(default_factory=list)
    continuation_token: str | None = Field(default=None, alias="continuationToken")
