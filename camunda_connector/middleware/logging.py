"""
Camunda Connector — Request Logging Middleware
================================================

What:  One access log line per connector request: method, path, status,
       duration, request ID, and the connector/operation the request named.
Who:   Applied to every request; runs inside RequestIDMiddleware so the
       request ID is already set.

Log levels follow the status class so failing handlers stand out:
    5xx → ERROR     (handler failed or server bug)
    4xx → WARNING   (engine sent a bad envelope or an unknown connector/operation)
    2xx → INFO

An exception that escapes the route and every exception handler is turned
into a 500 `{"error": "Internal server error"}` here, inside the middleware
stack, so the response still passes back through RequestIDMiddleware.

Request bodies are never logged; task inputs may carry business data.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from camunda_connector.middleware.request_id import request_id_var

logger = logging.getLogger("camunda_connector.access")

UNEXPECTED_ERROR_MESSAGE = "Internal server error"


def _level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs status, duration and the targeted connector operation of each request."""

    # Probes hit these every few seconds
    EXCLUDED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        rid = request_id_var.get("")
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("[%s] Unhandled error on %s %s", rid, request.method, request.url.path)
            response = JSONResponse(status_code=500, content={"error": UNEXPECTED_ERROR_MESSAGE})
        elapsed_ms = (time.perf_counter() - started) * 1000

        # Filled in by the connector route; absent for framework-level 404/405
        connector = getattr(request.state, "connector", None) or "-"
        operation = getattr(request.state, "operation", None) or "-"

        logger.log(
            _level_for(response.status_code),
            "%s %s %d %.1fms [%s] connector => %s | operation => %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            rid,
            connector,
            operation,
            extra={
                "request_id": rid,
                "connector": connector,
                "operation": operation,
                "status": response.status_code,
                "duration_ms": round(elapsed_ms, 2),
            },
        )
        return response
