"""
Camunda Connector — Package Initializer
=========================================

Expose plain Python functions as HTTP endpoints for a Camunda workflow engine.

Architecture:
    ┌─────────────────────────────────────┐
    │     Composition root (your code)    │  ← catalog.register(...) per handler
    ├─────────────────────────────────────┤
    │           Catalog                   │  ← ordered recipes, frozen at startup
    ├─────────────────────────────────────┤
    │     Routes (API Layer)              │  ← POST /csp/{name}, GET /health
    ├─────────────────────────────────────┤
    │     Dispatcher (Services)           │  ← envelope check, resolution, invocation
    └─────────────────────────────────────┘

Usage:
    from camunda_connector import Catalog, serve

    async def add(task_id, params):
        return {"c": params["a"] + params["b"]}

    catalog = Catalog()
    catalog.register("math", "add", add)
    serve(catalog, port=8080)
"""

__version__ = "1.0.0"

from camunda_connector.catalog import Catalog, ConnectorRecipe  # noqa: E402
from camunda_connector.config import Settings  # noqa: E402
from camunda_connector.exceptions import (  # noqa: E402
    CatalogFrozenError,
    ConnectorError,
    DuplicateRegistrationError,
    HandlerFailureError,
    InvalidRecipeError,
    MalformedPayloadError,
    UnknownOperationError,
    UnknownRouteError,
)
from camunda_connector.main import create_app, serve  # noqa: E402

__all__ = [
    "Catalog",
    "ConnectorRecipe",
    "Settings",
    "create_app",
    "serve",
    "ConnectorError",
    "InvalidRecipeError",
    "DuplicateRegistrationError",
    "CatalogFrozenError",
    "MalformedPayloadError",
    "UnknownRouteError",
    "UnknownOperationError",
    "HandlerFailureError",
]
