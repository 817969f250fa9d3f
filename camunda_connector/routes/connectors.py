"""
Camunda Connector — Connector Route
=====================================

What:  POST /csp/{connectorName}, the single endpoint the workflow engine calls.
How:   Decodes the JSON body and hands it to the Dispatcher; the Dispatcher's
       return value becomes the 200 body, its exceptions are turned into
       400/404/500 responses by the global handlers in main.py.

The body is read by hand rather than declared as a Pydantic parameter:
a missing `id` or `params` must yield the fixed 400 message, not FastAPI's
422 validation report.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from camunda_connector.catalog import ROUTE_PREFIX
from camunda_connector.schemas.envelope import ErrorResponse
from camunda_connector.services.dispatcher import Dispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix=ROUTE_PREFIX, tags=["Connectors"])


def get_dispatcher(request: Request) -> Dispatcher:
    """Dependency returning the Dispatcher built by create_app()."""
    return request.app.state.dispatcher


@router.post(
    "/{connector_name}",
    responses={
        200: {"description": "Handler result, serialized as JSON"},
        400: {"description": "Envelope lacks 'id' or 'params'", "model": ErrorResponse},
        404: {"description": "Unknown connector or operation", "model": ErrorResponse},
        500: {"description": "Handler raised an error", "model": ErrorResponse},
    },
    summary="Execute a connector operation",
    description=(
        "Body: {\"id\": <task id>, \"params\": {\"operation\": <name>, \"input\": <any>}}. "
        "The operation selects which handler registered under the connector runs; "
        "the handler receives the task id and the input."
    ),
)
async def execute_connector(
    connector_name: str,
    request: Request,
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> JSONResponse:
    payload = await _read_json(request)
    request.state.connector = connector_name
    request.state.operation = _requested_operation(payload)
    result = await dispatcher.dispatch(connector_name, payload)
    return JSONResponse(status_code=200, content=result)


def _requested_operation(payload: Any) -> Optional[str]:
    # For the access log only; the Dispatcher does the real validation
    params = payload.get("params") if isinstance(payload, dict) else None
    operation = params.get("operation") if isinstance(params, dict) else None
    return operation if isinstance(operation, str) else None


async def _read_json(request: Request) -> Any:
    # An undecodable body is reported as a malformed envelope by the Dispatcher
    try:
        return await request.json()
    except ValueError:
        logger.debug("Request body for %s is not valid JSON", request.url.path)
        return None
