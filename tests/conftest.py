"""Shared fixtures for docstore tests."""

from __future__ import annotations

import pytest

from docstore.router import ContainerConfigRegistry, ContainerRouter
from docstore.storage import DocumentStorage
from tests.fakes import CONTAINER_CONFIGS, FakeDatabase, TickingClock


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def registry():
    return ContainerConfigRegistry(CONTAINER_CONFIGS)


@pytest.fixture
def router(database, registry):
    return ContainerRouter(database, registry)


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def storage(router, clock):
    return DocumentStorage(router, default_page_size=50, clock=clock)
