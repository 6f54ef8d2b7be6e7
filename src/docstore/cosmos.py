"""Azure Cosmos DB (Core/SQL API) driver over ``azure.cosmos.aio``."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from azure.cosmos import PartitionKey
from azure.cosmos import exceptions as cosmos_exceptions
from azure.cosmos.aio import CosmosClient

from docstore.config import DocstoreConfig
from docstore.errors import ConfigError, NotFoundError
from docstore.metadata import format_timestamp

logger = logging.getLogger(__name__)


def _wire_value(value: Any) -> Any:
    """Convert a bound parameter value into something the SDK can serialize."""
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (list, tuple)):
        return [_wire_value(v) for v in value]
    if isinstance(value, dict):
        return {k: _wire_value(v) for k, v in value.items()}
    return value


def wire_parameters(parameters: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{"name": p["name"], "value": _wire_value(p["value"])} for p in parameters]


class CosmosContainer:
    """ContainerProtocol implementation wrapping an async ``ContainerProxy``.

    Only not-found is translated (to NotFoundError); every other SDK error
    propagates as raised.
    """

    def __init__(self, proxy: Any) -> None:
        self._proxy = proxy

    @property
    def container_id(self) -> str:
        return self._proxy.id

    async def create_item(self, body: dict[str, Any]) -> dict[str, Any]:
        return await self._proxy.create_item(body=body)

    async def read_item(self, item_id: str, partition_key: Any) -> dict[str, Any]:
        try:
            return await self._proxy.read_item(item=item_id, partition_key=partition_key)
        except cosmos_exceptions.CosmosResourceNotFoundError as e:
            raise NotFoundError(self.container_id, item_id) from e

    async def replace_item(self, item_id: str, body: dict[str, Any]) -> dict[str, Any]:
        try:
            return await self._proxy.replace_item(item=item_id, body=body)
        except cosmos_exceptions.CosmosResourceNotFoundError as e:
            raise NotFoundError(self.container_id, item_id) from e

    async def delete_item(self, item_id: str, partition_key: Any) -> None:
        try:
            await self._proxy.delete_item(item=item_id, partition_key=partition_key)
        except cosmos_exceptions.CosmosResourceNotFoundError as e:
            raise NotFoundError(self.container_id, item_id) from e

    async def query_page(
        self,
        query: str,
        parameters: list[dict[str, Any]],
        *,
        page_size: int,
        continuation_token: str | None = None,
        partition_key: Any | None = None,
    ) -> tuple[list[Any], str | None]:
        """Fetch exactly one page and the token for the next one."""
        kwargs: dict[str, Any] = {
            "query": query,
            "parameters": wire_parameters(parameters),
            "max_item_count": page_size,
        }
        if partition_key is not None:
            kwargs["partition_key"] = partition_key

        pages = self._proxy.query_items(**kwargs).by_page(continuation_token)
        try:
            page = await pages.__anext__()
        except StopAsyncIteration:
            return [], None
        items = [item async for item in page]
        logger.debug("Query on '%s' returned %d item(s)", self.container_id, len(items))
        return items, pages.continuation_token


class CosmosDatabase:
    """DatabaseProtocol implementation wrapping an async ``DatabaseProxy``."""

    def __init__(self, client: Any, proxy: Any) -> None:
        self._client = client
        self._proxy = proxy

    @property
    def database_id(self) -> str:
        return self._proxy.id

    async def create_container_if_not_exists(
        self, container_id: str, partition_key_path: str
    ) -> CosmosContainer:
        proxy = await self._proxy.create_container_if_not_exists(
            id=container_id,
            partition_key=PartitionKey(path=partition_key_path),
        )
        return CosmosContainer(proxy)

    async def close(self) -> None:
        await self._client.close()


async def open_database(config: DocstoreConfig) -> CosmosDatabase:
    """Create a Cosmos client and get-or-create the configured database."""
    if not config.endpoint:
        raise ConfigError("Cosmos DB endpoint is required (DOCSTORE_ENDPOINT)")
    if not config.key:
        raise ConfigError("Cosmos DB account key is required (DOCSTORE_KEY)")

    client = CosmosClient(config.endpoint, credential=config.key)
    try:
        proxy = await client.create_database_if_not_exists(id=config.database_id)
    except Exception:
        await client.close()
        raise
    logger.info("Connected to %s, database '%s'", config.endpoint, config.database_id)
    return CosmosDatabase(client, proxy)
