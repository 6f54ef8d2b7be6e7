"""CLI helpers for building a DocumentStorage and running one operation on it."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer

from docstore.cli import _exitcodes as ec
from docstore.cli._output import print_error
from docstore.config import DocstoreConfig
from docstore.errors import ConfigError, NotFoundError, UnknownEntityError, ValidationError
from docstore.storage import DocumentStorage, open_storage

T = TypeVar("T")


def config_from_state() -> DocstoreConfig:
    """Build the storage config from global CLI options (which default to env)."""
    from docstore.cli import state

    base = DocstoreConfig.from_env()
    return DocstoreConfig(
        endpoint=state.endpoint or base.endpoint,
        key=state.key or base.key,
        database_id=state.database or base.database_id,
        default_page_size=base.default_page_size,
        auto_register_entities=state.auto_register or base.auto_register_entities,
        containers_file=state.containers or base.containers_file,
    )


def run_with_storage(action: Callable[[DocumentStorage], Awaitable[T]]) -> T:
    """Open storage, run ``action`` and close it, mapping errors to exit codes."""

    async def _run() -> T:
        storage = await open_storage(config_from_state())
        async with storage:
            return await action(storage)

    try:
        return asyncio.run(_run())
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(ec.CONFIG_ERROR)
    except (ValidationError, UnknownEntityError) as e:
        print_error(str(e))
        raise typer.Exit(ec.USAGE_ERROR)
    except NotFoundError as e:
        print_error(str(e))
        raise typer.Exit(ec.NOT_FOUND)
    except Exception as e:
        print_error(str(e))
        raise typer.Exit(ec.GENERAL_ERROR)
