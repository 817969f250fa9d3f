"""
Camunda Connector — Pydantic Request/Response Schemas
======================================================

What:  Pydantic models describing the wire contract between the workflow
       engine and the connector server.
Why:   Shape validation of `params` and OpenAPI documentation of the
       connector endpoint.
How:   The Dispatcher validates `params` with OperationParams; the connector
       route references TaskEnvelope and ErrorResponse in its OpenAPI metadata.

Wire format:
    POST /csp/{connectorName}
    {
        "id": 42,                          ← task id, passed through unmodified
        "params": {
            "operation": "add",            ← selects the recipe within the connector
            "input": {"a": 5, "b": 3}      ← opaque, forwarded to the handler
        }
    }

Note that the top-level presence of `id` and `params` is checked by the
Dispatcher by key, not by these models: a missing key must produce the fixed
400 message rather than pydantic's 422 validation report.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, StrictStr


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class OperationParams(BaseModel):
    """
    The `params` object of a task envelope.

    Unknown keys are tolerated so that engines adding extra metadata next to
    `operation` and `input` are not rejected.
    """

    operation: StrictStr = Field(description="Operation name within the connector")
    input: Any = Field(default=None, description="Opaque payload forwarded to the handler")

    model_config = ConfigDict(extra="allow")


class TaskEnvelope(BaseModel):
    """Full request body accepted by POST /csp/{connectorName}."""

    id: int = Field(description="Task identifier assigned by the workflow engine")
    params: OperationParams

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "params": {"operation": "add", "input": {"a": 5, "b": 3}},
            }
        }
    )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body for every non-2xx response.

    Only the message is exposed; request correlation travels in the
    X-Request-ID response header.
    """

    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    """Liveness probe response listing the frozen catalog."""

    status: str = Field(description="Overall service status")
    version: str = Field(description="Package version")
    connectors: Dict[str, List[str]] = Field(
        description="Connector name → operations, in registration order"
    )
    uptime_seconds: float = Field(description="Seconds since the app was created")
