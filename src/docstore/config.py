"""Configuration for docstore."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from docstore.errors import ConfigError

_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class ContainerConfig:
    """Physical container and partition key for one logical entity type."""

    entity_name: str
    container_id: str
    partition_key_field: str = "id"

    @property
    def partition_key_path(self) -> str:
        """Partition key path in Cosmos form (``tenant.id`` -> ``/tenant/id``)."""
        return "/" + self.partition_key_field.replace(".", "/")


@dataclass
class DocstoreConfig:
    """Configuration for the document storage engine."""

    endpoint: str | None = None
    key: str | None = None
    database_id: str = "docstore"
    default_page_size: int = 1000
    auto_register_entities: bool = False
    containers_file: str | None = None

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> DocstoreConfig:
        """Build a config from ``DOCSTORE_*`` environment variables."""
        env = os.environ if environ is None else environ
        page_size = env.get("DOCSTORE_PAGE_SIZE")
        try:
            default_page_size = int(page_size) if page_size else cls.default_page_size
        except ValueError:
            raise ConfigError(f"DOCSTORE_PAGE_SIZE must be an integer, got '{page_size}'")
        if default_page_size <= 0:
            raise ConfigError("DOCSTORE_PAGE_SIZE must be positive")

        return cls(
            endpoint=env.get("DOCSTORE_ENDPOINT") or None,
            key=env.get("DOCSTORE_KEY") or None,
            database_id=env.get("DOCSTORE_DATABASE") or cls.database_id,
            default_page_size=default_page_size,
            auto_register_entities=env.get("DOCSTORE_AUTO_REGISTER", "").lower() in _TRUTHY,
            containers_file=env.get("DOCSTORE_CONTAINERS") or None,
        )


def parse_container_configs(data: Any) -> list[ContainerConfig]:
    """Validate a ``{"containers": [...]}`` mapping into ContainerConfig entries."""
    if not isinstance(data, dict) or not isinstance(data.get("containers"), list):
        raise ConfigError("Container configuration must be a mapping with a 'containers' list")

    configs: list[ContainerConfig] = []
    seen: set[str] = set()
    for i, entry in enumerate(data["containers"]):
        if not isinstance(entry, dict):
            raise ConfigError(f"containers[{i}] must be a mapping")
        entity_name = entry.get("entityName")
        if not isinstance(entity_name, str) or not entity_name:
            raise ConfigError(f"containers[{i}].entityName is required")
        if entity_name in seen:
            raise ConfigError(f"Duplicate container configuration for entity '{entity_name}'")
        seen.add(entity_name)

        container_id = entry.get("containerId", entity_name)
        partition_key_field = entry.get("partitionKeyField", "id")
        if not isinstance(container_id, str) or not container_id:
            raise ConfigError(f"containers[{i}].containerId must be a non-empty string")
        if not isinstance(partition_key_field, str) or not partition_key_field:
            raise ConfigError(f"containers[{i}].partitionKeyField must be a non-empty string")
        configs.append(ContainerConfig(entity_name, container_id, partition_key_field))
    return configs


def load_container_configs(path: str | Path) -> list[ContainerConfig]:
    """Load container configurations from a YAML file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read container configuration '{path}': {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in '{path}': {e}") from e
    return parse_container_configs(data)
