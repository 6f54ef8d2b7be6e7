"""Document storage engine: CRUD and queries over routed containers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from docstore.compiler import compile_count, compile_query, compile_read_map
from docstore.config import ContainerConfig, DocstoreConfig, load_container_configs
from docstore.driver import ContainerProtocol
from docstore.errors import NotFoundError, ValidationError
from docstore.metadata import ID, new_entity_id, stamp_for_create, stamp_for_replace, utc_now
from docstore.query import Query, QueryResult
from docstore.router import ContainerConfigRegistry, ContainerRouter

logger = logging.getLogger(__name__)


def _require(value: Any, name: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(name)


def _require_document(document: Any) -> None:
    if document is None:
        raise ValidationError("document")
    if not isinstance(document, dict):
        raise ValidationError("document", "document must be an object")


def _as_query(query: Query | dict[str, Any] | None) -> Query:
    if query is None:
        raise ValidationError("query")
    if isinstance(query, Query):
        return query
    return Query.model_validate(query)


class DocumentStorage:
    """Schema-less CRUD and filtered queries, one container per entity type.

    Every write is stamped with ``id``, ``entityName``, ``createdAt`` and
    ``updatedAt``. ``read`` returns None for a missing document while
    ``replace`` and ``delete`` raise NotFoundError. Writes to the same id are
    last-write-wins; no concurrency token is checked.
    """

    def __init__(
        self,
        router: ContainerRouter,
        *,
        default_page_size: int = 1000,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._router = router
        self._default_page_size = default_page_size
        self._clock = clock

    @property
    def router(self) -> ContainerRouter:
        return self._router

    async def create(
        self,
        entity_name: str,
        entity_id: str | None,
        document: dict[str, Any],
    ) -> dict[str, Any]:
        """Stamp and insert a new document; generates a UUIDv7 id when none is given."""
        _require(entity_name, "entity_name")
        _require_document(document)

        if entity_id is None:
            entity_id = new_entity_id()
        _require(entity_id, "entity_id")
        stamped = stamp_for_create(document, entity_name, entity_id, self._clock())
        container = await self._router.resolve(entity_name)
        result = await container.create_item(stamped)
        logger.debug("Created %s/%s", entity_name, entity_id)
        return result

    async def read(
        self,
        entity_name: str,
        entity_id: str,
        partition_key: Any | None = None,
    ) -> dict[str, Any] | None:
        """Read one document, or None when it does not exist.

        Without a partition key the id is used for containers partitioned on
        ``id``; other containers fall back to a cross-partition lookup.
        """
        _require(entity_name, "entity_name")
        _require(entity_id, "entity_id")

        container = await self._router.resolve(entity_name)
        if partition_key is None:
            config = self._router.config_for(entity_name)
            if config.partition_key_field != ID:
                return await self._find_by_id(container, entity_id)
            partition_key = entity_id

        try:
            return await container.read_item(entity_id, partition_key)
        except NotFoundError:
            logger.debug("Read %s/%s: not found", entity_name, entity_id)
            return None

    async def _find_by_id(
        self, container: ContainerProtocol, entity_id: str
    ) -> dict[str, Any] | None:
        compiled = compile_query(Query(filter={ID: entity_id}))
        token: str | None = None
        while True:
            items, token = await container.query_page(
                compiled.text,
                compiled.parameters,
                page_size=1,
                continuation_token=token,
            )
            if items:
                return items[0]
            if not token:
                return None

    async def replace(
        self,
        entity_name: str,
        entity_id: str,
        document: dict[str, Any],
    ) -> dict[str, Any]:
        """Overwrite a document. ``createdAt`` survives only if ``document`` carries it.

        Raises:
            NotFoundError: If the document does not exist.
        """
        _require(entity_name, "entity_name")
        _require(entity_id, "entity_id")
        _require_document(document)

        stamped = stamp_for_replace(document, entity_name, entity_id, self._clock())
        container = await self._router.resolve(entity_name)
        result = await container.replace_item(entity_id, stamped)
        logger.debug("Replaced %s/%s", entity_name, entity_id)
        return result

    async def delete(
        self,
        entity_name: str,
        entity_id: str,
        partition_key: Any | None = None,
    ) -> None:
        """Delete a document.

        The partition key may be omitted only for containers partitioned on
        ``id``.

        Raises:
            NotFoundError: If the document does not exist.
        """
        _require(entity_name, "entity_name")
        _require(entity_id, "entity_id")

        config = self._router.config_for(entity_name)
        if partition_key is None:
            if config.partition_key_field != ID:
                raise ValidationError(
                    "partition_key",
                    f"partition_key is required for entity '{entity_name}' "
                    f"(partitioned on '{config.partition_key_field}')",
                )
            partition_key = entity_id

        container = await self._router.resolve(entity_name)
        await container.delete_item(entity_id, partition_key)
        logger.debug("Deleted %s/%s", entity_name, entity_id)

    async def read_map(
        self,
        entity_name: str,
        partition_key: Any | None,
        entity_ids: Iterable[str],
    ) -> dict[str, dict[str, Any]]:
        """Fetch several documents of one partition in a single query.

        Returns a mapping of id to document for the ids that exist; missing
        ids are absent from the result.
        """
        _require(entity_name, "entity_name")
        if entity_ids is None:
            raise ValidationError("entity_ids")

        ids = list(dict.fromkeys(entity_ids))
        if not ids:
            return {}

        config: ContainerConfig = self._router.config_for(entity_name)
        container = await self._router.resolve(entity_name)
        compiled = compile_read_map(ids, config.partition_key_field, partition_key)

        result: dict[str, dict[str, Any]] = {}
        token: str | None = None
        while True:
            items, token = await container.query_page(
                compiled.text,
                compiled.parameters,
                page_size=len(ids),
                continuation_token=token,
                partition_key=partition_key,
            )
            for item in items:
                result[str(item[ID])] = item
            if not token:
                break
        return result

    async def query(self, entity_name: str, query: Query | dict[str, Any]) -> QueryResult:
        """Run one page of a filtered query.

        Callers page by resubmitting ``QueryResult.continuation_token``.
        """
        _require(entity_name, "entity_name")
        query = _as_query(query)

        compiled = compile_query(query)
        container = await self._router.resolve(entity_name)
        items, token = await container.query_page(
            compiled.text,
            compiled.parameters,
            page_size=query.limit or self._default_page_size,
            continuation_token=query.continuation_token,
        )
        return QueryResult(items=items, continuation_token=token)

    async def count(self, entity_name: str, query: Query | dict[str, Any] | None = None) -> int:
        """Count the documents matching ``query.filter``."""
        _require(entity_name, "entity_name")
        query = _as_query(query if query is not None else Query())

        compiled = compile_count(query)
        container = await self._router.resolve(entity_name)
        total = 0
        token: str | None = None
        while True:
            items, token = await container.query_page(
                compiled.text,
                compiled.parameters,
                page_size=self._default_page_size,
                continuation_token=token,
            )
            total += sum(int(v) for v in items)
            if not token:
                return total

    async def close(self) -> None:
        await self._router.close()

    async def __aenter__(self) -> DocumentStorage:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


async def open_storage(
    config: DocstoreConfig | None = None,
    *,
    containers: Iterable[ContainerConfig] = (),
) -> DocumentStorage:
    """Connect to Cosmos DB and build a DocumentStorage from configuration.

    Container configurations come from ``containers`` plus the YAML file named
    by ``config.containers_file``.
    """
    from docstore.cosmos import open_database

    config = config or DocstoreConfig.from_env()
    configs = list(containers)
    if config.containers_file:
        configs.extend(load_container_configs(config.containers_file))

    database = await open_database(config)
    registry = ContainerConfigRegistry(configs, auto_register=config.auto_register_entities)
    return DocumentStorage(
        ContainerRouter(database, registry),
        default_page_size=config.default_page_size,
    )
