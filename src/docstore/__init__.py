"""docstore: schema-less document storage over Azure Cosmos DB."""

__version__ = "0.1.0"

from docstore.compiler import CompiledQuery, FilterCompiler, compile_count, compile_query
from docstore.config import ContainerConfig, DocstoreConfig, load_container_configs
from docstore.errors import (
    ConfigError,
    DocstoreError,
    NotFoundError,
    UnknownEntityError,
    ValidationError,
)
from docstore.filters import parse_filter, where
from docstore.query import Query, QueryResult
from docstore.router import ContainerConfigRegistry, ContainerRouter
from docstore.storage import DocumentStorage, open_storage

__all__ = [
    "__version__",
    "DocumentStorage",
    "open_storage",
    "Query",
    "QueryResult",
    "FilterCompiler",
    "CompiledQuery",
    "compile_query",
    "compile_count",
    "parse_filter",
    "where",
    "ContainerConfig",
    "ContainerConfigRegistry",
    "ContainerRouter",
    "DocstoreConfig",
    "load_container_configs",
    "DocstoreError",
    "ValidationError",
    "NotFoundError",
    "UnknownEntityError",
    "ConfigError",
]
