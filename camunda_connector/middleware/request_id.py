"""
Camunda Connector — Request ID Middleware
===========================================

What:  Assigns a correlation ID to each incoming request and returns it in
       the X-Request-ID response header.
How:   Uses the caller's X-Request-ID when present (the workflow engine or a
       proxy can propagate its own), otherwise generates a short UUID.
       The ID is stored in a ContextVar so log calls anywhere in the request,
       including inside handlers, can pick it up.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local: concurrent requests on one event loop each see their own ID
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware that assigns a unique ID to each request for tracing."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 chars is enough for correlating log lines
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())[:8]

        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
