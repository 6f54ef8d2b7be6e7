"""Structured error types for docstore."""

from __future__ import annotations


class DocstoreError(Exception):
    """Base error for all docstore errors."""


class ValidationError(DocstoreError):
    """Raised when a required argument is missing or empty."""

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"'{argument}' is required")


class NotFoundError(DocstoreError):
    """Raised by a driver when the addressed document does not exist.

    ``DocumentStorage.read`` turns this into ``None``; ``replace`` and
    ``delete`` let it propagate.
    """

    def __init__(self, container_id: str, entity_id: str) -> None:
        self.container_id = container_id
        self.entity_id = entity_id
        super().__init__(f"Document '{entity_id}' not found in container '{container_id}'")


class UnknownEntityError(DocstoreError):
    """Raised when an entity type has no registered container configuration."""

    def __init__(self, entity_name: str) -> None:
        self.entity_name = entity_name
        super().__init__(
            f"No container configured for entity '{entity_name}'. "
            "Register a ContainerConfig or enable auto_register_entities."
        )


class ConfigError(DocstoreError):
    """Raised for invalid configuration files or environment values."""

