"""Entity type to container routing with lazy, one-time provisioning."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable

from docstore.config import ContainerConfig
from docstore.driver import ContainerProtocol, DatabaseProtocol
from docstore.errors import UnknownEntityError

logger = logging.getLogger(__name__)


class ContainerConfigRegistry:
    """Entity name to ContainerConfig lookup.

    With ``auto_register`` set, an unknown entity gets a container named after
    it, partitioned on ``id``.
    """

    def __init__(
        self,
        configs: Iterable[ContainerConfig] = (),
        *,
        auto_register: bool = False,
    ) -> None:
        self._configs = {c.entity_name: c for c in configs}
        self._auto_register = auto_register

    def register(self, config: ContainerConfig) -> None:
        self._configs[config.entity_name] = config

    def get(self, entity_name: str) -> ContainerConfig:
        config = self._configs.get(entity_name)
        if config is not None:
            return config
        if not self._auto_register:
            raise UnknownEntityError(entity_name)
        config = ContainerConfig(entity_name, entity_name, "id")
        self._configs[entity_name] = config
        logger.info("Auto-registered container configuration for entity '%s'", entity_name)
        return config

    def __contains__(self, entity_name: object) -> bool:
        return entity_name in self._configs

    def __len__(self) -> int:
        return len(self._configs)


class ContainerRouter:
    """Resolves entity types to container handles, creating containers on first use.

    Handles are cached for the router's lifetime. Concurrent first resolutions
    of one entity type share a lock, so the database sees a single
    create-if-missing call; a failed call caches nothing.
    """

    def __init__(self, database: DatabaseProtocol, registry: ContainerConfigRegistry) -> None:
        self._database = database
        self._registry = registry
        self._containers: dict[str, ContainerProtocol] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def registry(self) -> ContainerConfigRegistry:
        return self._registry

    def config_for(self, entity_name: str) -> ContainerConfig:
        return self._registry.get(entity_name)

    async def resolve(self, entity_name: str) -> ContainerProtocol:
        container = self._containers.get(entity_name)
        if container is not None:
            return container

        config = self._registry.get(entity_name)
        lock = self._locks.setdefault(entity_name, asyncio.Lock())
        async with lock:
            container = self._containers.get(entity_name)
            if container is None:
                container = await self._database.create_container_if_not_exists(
                    config.container_id, config.partition_key_path
                )
                self._containers[entity_name] = container
                logger.info(
                    "Initialized container '%s' for entity '%s' with partition key '%s'",
                    config.container_id,
                    entity_name,
                    config.partition_key_path,
                )
        return container

    def cached(self) -> dict[str, ContainerProtocol]:
        """Snapshot of the handles resolved so far."""
        return dict(self._containers)

    async def close(self) -> None:
        self._containers.clear()
        await self._database.close()
