"""Shared fixtures for CLI tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

from docstore.cli import app
from docstore.router import ContainerConfigRegistry, ContainerRouter
from docstore.storage import DocumentStorage
from tests.fakes import CONTAINER_CONFIGS, FakeDatabase, TickingClock

if TYPE_CHECKING:
    from click.testing import Result


@pytest.fixture
def runner():
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def cli_db(monkeypatch):
    """Route every CLI storage call to one in-memory database.

    Each command opens its own storage, so documents persist across
    invocations within a test.
    """
    database = FakeDatabase()
    clock = TickingClock()
    opened = []

    async def fake_open_storage(config=None, *, containers=()):
        opened.append(config)
        registry = ContainerConfigRegistry(
            CONTAINER_CONFIGS, auto_register=config.auto_register_entities
        )
        return DocumentStorage(ContainerRouter(database, registry), clock=clock)

    monkeypatch.setattr("docstore.cli._storage.open_storage", fake_open_storage)
    database.opened = opened
    return database


def invoke(runner: CliRunner, args: list[str], json_output: bool = False) -> "Result":
    """Invoke the CLI, optionally with the global --json flag."""
    if json_output:
        args = ["--json"] + args
    return runner.invoke(app, args, catch_exceptions=False)
