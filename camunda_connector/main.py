"""
Camunda Connector — FastAPI Application Factory
=================================================

What:  Turns a populated Catalog into a running HTTP service.
How:   create_app() freezes the catalog, builds the Dispatcher from the
       snapshot, and assembles middleware, exception handlers and routes.
       serve() additionally runs the app under uvicorn.
Who:   Called by the composition root after every handler is registered.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │  Req ID  │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes:                                            │
    │  ┌───────────────────────┐ ┌─────────────────┐      │
    │  │ POST /csp/{connector} │ │ GET /health     │      │
    │  └───────────────────────┘ └─────────────────┘      │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Malformed→400 │ Unknown*→404 │ Handler→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Ordering guarantee:
    The catalog is snapshotted inside create_app(), before the app object
    exists, so every registration happens-before the first request. Any
    register() after that raises CatalogFrozenError.
"""

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from camunda_connector import __version__
from camunda_connector.catalog import ROUTE_PREFIX, Catalog
from camunda_connector.config import Settings, settings as default_settings
from camunda_connector.exceptions import (
    ConnectorError,
    HandlerFailureError,
    MalformedPayloadError,
    UnknownOperationError,
    UnknownRouteError,
)
from camunda_connector.middleware.logging import RequestLoggingMiddleware
from camunda_connector.middleware.request_id import RequestIDMiddleware, request_id_var
from camunda_connector.routes import connectors, health
from camunda_connector.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging for the connector process.

    Format: 2026-01-15T12:00:00 [INFO] camunda_connector.access: POST /csp/math 200 ...
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Log the frozen route table on startup and a marker on shutdown.

    Root logging and the listen address belong to serve(); an app mounted by
    an external `uvicorn module:app` keeps the host's logging setup.
    """
    dispatcher: Dispatcher = app.state.dispatcher
    for name, operations in dispatcher.routes.items():
        for operation in operations:
            logger.info(
                "Route ready: POST %s/%s | operation => %s",
                ROUTE_PREFIX,
                name,
                operation,
            )
    if not dispatcher.routes:
        logger.warning("No connectors registered; every request will return 404")

    yield

    logger.info("Connector server shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map Dispatcher exceptions to `{"error": <message>}` responses.

    Handler hierarchy:
        MalformedPayloadError   → 400 Bad Request
        UnknownRouteError       → 404 Not Found
        UnknownOperationError   → 404 Not Found
        HandlerFailureError     → 500, the handler's own message
        ConnectorError (base)   → 500, its message
        HTTPException           → its status, detail as the error
        Exception (fallback)    → 500, generic message

    Only the message ever reaches the client; tracebacks go to the log.
    """

    @app.exception_handler(MalformedPayloadError)
    async def handle_malformed_payload(request: Request, exc: MalformedPayloadError):
        rid = request_id_var.get("")
        logger.warning("[%s] Malformed payload on %s: %s", rid, request.url.path, exc.message)
        return _error(400, exc.message)

    @app.exception_handler(UnknownRouteError)
    async def handle_unknown_route(request: Request, exc: UnknownRouteError):
        return _error(404, exc.message)

    @app.exception_handler(UnknownOperationError)
    async def handle_unknown_operation(request: Request, exc: UnknownOperationError):
        return _error(404, exc.message)

    @app.exception_handler(HandlerFailureError)
    async def handle_handler_failure(request: Request, exc: HandlerFailureError):
        rid = request_id_var.get("")
        original = exc.original
        logger.error(
            "[%s] Handler failed: %s | Context: %s",
            rid,
            exc.message,
            exc.context,
            exc_info=(type(original), original, original.__traceback__) if original else None,
        )
        return _error(500, exc.message)

    @app.exception_handler(ConnectorError)
    async def handle_connector_error(request: Request, exc: ConnectorError):
        rid = request_id_var.get("")
        logger.error("[%s] Connector error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error(500, "Internal server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(catalog: Catalog, settings: Optional[Settings] = None) -> FastAPI:
    """
    Freeze the catalog and build the FastAPI application that serves it.

    Args:
        catalog:  Fully populated catalog. It is frozen by this call.
        settings: Optional override; defaults to the environment-loaded singleton.

    Returns:
        Configured FastAPI instance.

    Raises:
        CatalogFrozenError: The catalog was already snapshotted (e.g. passed to
            create_app() twice).
    """
    config = settings or default_settings
    dispatcher = Dispatcher(catalog.snapshot())

    app = FastAPI(
        title="Camunda Connector Server",
        description=(
            "Exposes registered connector handlers to a workflow engine. "
            "Each connector is reachable at POST /csp/{name}; the operation in the "
            "request body selects the handler."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.dispatcher = dispatcher
    app.state.started_at = time.time()

    # Last added executes first: RequestID → Logging → route
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(connectors.router)
    app.include_router(health.router)

    return app


def serve(
    catalog: Catalog,
    port: Optional[int] = None,
    host: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> None:
    """
    Build the app from `catalog` and run it under uvicorn until interrupted.

    Explicit port/host arguments win over settings, which win over defaults.
    """
    config = settings or default_settings
    overrides = {}
    if port is not None:
        overrides["port"] = port
    if host is not None:
        overrides["host"] = host
    if overrides:
        config = Settings(**{**config.model_dump(), **overrides})

    setup_logging(config.log_level)
    app = create_app(catalog, settings=config)
    logger.info("Connector server listening on http://%s:%d", config.host, config.port)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
