"""Driver boundary between the storage engine and a document database."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ContainerProtocol(Protocol):
    """One physical container. Implementations raise NotFoundError for
    missing documents and let every other failure propagate."""

    @property
    def container_id(self) -> str: ...

    async def create_item(self, body: dict[str, Any]) -> dict[str, Any]: ...

    async def read_item(self, item_id: str, partition_key: Any) -> dict[str, Any]: ...

    async def replace_item(self, item_id: str, body: dict[str, Any]) -> dict[str, Any]: ...

    async def delete_item(self, item_id: str, partition_key: Any) -> None: ...

    async def query_page(
        self,
        query: str,
        parameters: list[dict[str, Any]],
        *,
        page_size: int,
        continuation_token: str | None = None,
        partition_key: Any | None = None,
    ) -> tuple[list[Any], str | None]: ...


@runtime_checkable
class DatabaseProtocol(Protocol):
    """Provisions containers and owns the underlying client."""

    async def create_container_if_not_exists(
        self, container_id: str, partition_key_path: str
    ) -> ContainerProtocol: ...

    async def close(self) -> None: ...
