"""
Camunda Connector — Health Check Route
========================================

What:  GET /health for container probes and load balancers.
How:   The server has no external dependencies, so "healthy" means the
       process is up and the catalog was frozen into a Dispatcher. The
       response lists the registered connectors so operators can confirm
       a deployment exposes what the process models expect.
"""

import time

from fastapi import APIRouter, Depends, Request

from camunda_connector import __version__
from camunda_connector.routes.connectors import get_dispatcher
from camunda_connector.schemas.envelope import HealthResponse
from camunda_connector.services.dispatcher import Dispatcher

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HealthResponse:
    started_at = getattr(request.app.state, "started_at", time.time())
    return HealthResponse(
        status="healthy",
        version=__version__,
        connectors=dispatcher.routes,
        uptime_seconds=round(time.time() - started_at, 2),
    )
