"""
Camunda Connector — Custom Exception Hierarchy
================================================

What:  Defines the errors raised while building the catalog and while
       dispatching connector requests.
How:   Each exception carries a message and an optional context dict.
       Request-time exceptions are caught by the global handlers registered
       in main.py and turned into `{"error": <message>}` JSON responses.
Who:   Raised by the Catalog (startup) and the Dispatcher (per request).

Exception Hierarchy:
    ConnectorError (base)
    ├── InvalidRecipeError          → startup, fatal
    ├── DuplicateRegistrationError  → startup, fatal
    ├── CatalogFrozenError          → programming error
    ├── MalformedPayloadError       → 400 Bad Request
    ├── UnknownRouteError           → 404 Not Found
    ├── UnknownOperationError       → 404 Not Found
    └── HandlerFailureError         → 500 Internal Server Error

Startup errors abort composition before the server listens. Request-time
errors only ever affect the request that raised them.
"""

from typing import Any, Dict, Optional


class ConnectorError(Exception):
    """
    Base exception for all connector server errors.

    Attributes:
        message:  Human-readable description (safe to return in an API response)
        context:  Additional debug info (logged but NOT returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


# ══════════════════════════════════════════════════════════════════════════
# Startup Errors: raised while the composition root populates the catalog
# ══════════════════════════════════════════════════════════════════════════


class InvalidRecipeError(ConnectorError):
    """Raised when a recipe is registered with an empty name/operation or a non-callable handler."""

    def __init__(self, message: str = "Invalid connector recipe", context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class DuplicateRegistrationError(ConnectorError):
    """
    Raised when a (connector, operation) pair is registered twice.

    The catalog is left exactly as it was before the failing call, so the
    composition root can report the clash and exit without a half-built
    catalog.
    """

    def __init__(self, name: str, operation: str):
        super().__init__(
            message=f"Connector '{name}' already has a handler for operation '{operation}'",
            context={"name": name, "operation": operation},
        )
        self.name = name
        self.operation = operation


class CatalogFrozenError(ConnectorError):
    """
    Raised when the catalog is modified (or snapshotted again) after freezing.

    The catalog freezes when the application is created; registering after
    that point would mean a handler that the running server can never see.
    """

    def __init__(self, message: str = "Catalog is frozen; no further registrations are accepted"):
        super().__init__(message=message)


# ══════════════════════════════════════════════════════════════════════════
# Request-Time Errors: raised by the Dispatcher, mapped to HTTP responses
# ══════════════════════════════════════════════════════════════════════════


class MalformedPayloadError(ConnectorError):
    """
    Raised when the request envelope lacks `id` or `params`, or `params` has the wrong shape.

    HTTP: 400 Bad Request. No handler is invoked.
    """

    def __init__(
        self,
        message: str = "Payload must contain 'id' and 'params'",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UnknownRouteError(ConnectorError):
    """Raised when no connector is registered under the requested name. HTTP: 404."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Connector '{name}' is not registered",
            context={"name": name},
        )
        self.name = name


class UnknownOperationError(ConnectorError):
    """Raised when the connector exists but none of its recipes handles the operation. HTTP: 404."""

    def __init__(self, name: str, operation: str):
        super().__init__(
            message=f"Operation '{operation}' is not registered for connector '{name}'",
            context={"name": name, "operation": operation},
        )
        self.name = name
        self.operation = operation


class HandlerFailureError(ConnectorError):
    """
    Wraps any exception raised by a user handler.

    HTTP: 500 Internal Server Error, body `{"error": <message>}`.

    The message is the handler's own error text. The original exception is
    kept on `original` (and chained via `raise ... from`) so the server log
    keeps the full traceback while the response carries only the message.
    """

    def __init__(
        self,
        message: str,
        original: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.original = original
