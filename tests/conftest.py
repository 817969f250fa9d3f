"""
Camunda Connector — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── math_catalog: Catalog with ("math", "add") and ("math", "sub")
    ├── client_for:   Factory giving an HTTPX AsyncClient for any catalog
    └── test_client:  HTTPX AsyncClient serving math_catalog

The app is driven through httpx's ASGITransport, so no socket is opened and
the lifespan hooks do not run.
"""

import os
from contextlib import asynccontextmanager

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set before the package loads its settings singleton
os.environ["CONNECTOR_LOG_LEVEL"] = "WARNING"

from camunda_connector import Catalog, Settings, create_app  # noqa: E402


async def add(task_id, data):
    return {"result": data["a"] + data["b"]}


async def sub(task_id, data):
    return {"result": data["a"] - data["b"]}


@pytest.fixture
def math_catalog() -> Catalog:
    """Catalog holding the two math operations, not yet frozen."""
    catalog = Catalog()
    catalog.register("math", "add", add)
    catalog.register("math", "sub", sub)
    return catalog


@pytest.fixture
def test_settings() -> Settings:
    return Settings(port=8080, log_level="WARNING")


@pytest.fixture
def client_for(test_settings):
    """
    Factory fixture: build an app from a catalog and open a client against it.

    Usage:
        async with client_for(catalog) as client:
            response = await client.post("/csp/math", json={...})
    """

    @asynccontextmanager
    async def _client(catalog: Catalog):
        app = create_app(catalog, settings=test_settings)
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client

    return _client


@pytest_asyncio.fixture
async def test_client(client_for, math_catalog):
    """HTTPX AsyncClient talking to an app that serves math_catalog."""
    async with client_for(math_catalog) as client:
        yield client
