"""
Camunda Connector — Dispatcher
================================

What:  Routes one connector request to exactly one handler and returns the
       handler's JSON-ready result.
How:   Groups the frozen catalog by connector name into route groups, then
       for each request: match path → validate envelope → resolve operation
       → invoke handler.
Who:   Called by the POST /csp/{connectorName} route.

Request State Machine:
    Received
      → PathMatched        (else UnknownRouteError       → 404)
      → PayloadValidated   (else MalformedPayloadError   → 400, no handler runs)
      → OperationResolved  (else UnknownOperationError   → 404)
      → HandlerInvoked
      → Succeeded (200, JSON of the value) | Failed (HandlerFailureError → 500)

    Terminal in either outcome; nothing is retried or replayed here.

Concurrency:
    Route groups are built once from an immutable snapshot and never change,
    so resolution needs no locking. Coroutine handlers are awaited on the
    event loop; plain functions run in the thread pool so a slow synchronous
    handler does not stall unrelated requests. No timeout is imposed: a
    handler that never completes keeps its request pending until the
    transport gives up.
"""

import inspect
import json
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError as PydanticValidationError
from starlette.concurrency import run_in_threadpool

from camunda_connector.catalog import ConnectorRecipe, Handler
from camunda_connector.exceptions import (
    HandlerFailureError,
    MalformedPayloadError,
    UnknownOperationError,
    UnknownRouteError,
)
from camunda_connector.schemas.envelope import OperationParams

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Payload must contain 'id' and 'params'"
PARAMS_SHAPE_MESSAGE = "'params' must be an object containing a string 'operation'"


class Dispatcher:
    """
    Resolves (connector name, operation) to a handler and invokes it.

    Within a route group recipes are scanned in registration order and the
    first one whose operation matches wins. The catalog already rejects
    duplicate pairs, so a tie only exists if that check were bypassed; the
    ordered scan keeps the outcome deterministic even then.
    """

    def __init__(self, recipes: Sequence[ConnectorRecipe]):
        groups: "OrderedDict[str, List[ConnectorRecipe]]" = OrderedDict()
        for recipe in recipes:
            groups.setdefault(recipe.name, []).append(recipe)
        self._groups: Dict[str, Tuple[ConnectorRecipe, ...]] = {
            name: tuple(group) for name, group in groups.items()
        }

    # ── Introspection ─────────────────────────────────────────────────────

    @property
    def routes(self) -> Dict[str, List[str]]:
        """Connector name → operations, both in registration order."""
        return {
            name: [recipe.operation for recipe in group]
            for name, group in self._groups.items()
        }

    def route_group(self, route_name: str) -> Tuple[ConnectorRecipe, ...]:
        group = self._groups.get(route_name)
        if group is None:
            raise UnknownRouteError(route_name)
        return group

    # ── Resolution ────────────────────────────────────────────────────────

    def resolve(self, route_name: str, operation: str) -> Handler:
        """
        Return the handler registered for (route_name, operation).

        Raises:
            UnknownRouteError:     No connector registered under route_name.
            UnknownOperationError: Connector exists but has no such operation.
        """
        return self._select(route_name, self.route_group(route_name), operation).handler

    @staticmethod
    def _select(
        route_name: str, group: Sequence[ConnectorRecipe], operation: str
    ) -> ConnectorRecipe:
        for recipe in group:
            if recipe.operation == operation:
                return recipe
        raise UnknownOperationError(route_name, operation)

    # ── Dispatch ──────────────────────────────────────────────────────────

    async def dispatch(self, route_name: str, payload: Any) -> Any:
        """
        Run one request through the state machine and return a JSON-ready value.

        Args:
            route_name: The {connectorName} path segment.
            payload:    The decoded request body (any JSON value, or None if
                        the body could not be decoded).

        Returns:
            The handler's return value converted by jsonable_encoder and
            checked to be strict JSON (no NaN or infinity).

        Raises:
            UnknownRouteError, MalformedPayloadError, UnknownOperationError,
            HandlerFailureError; all mapped to responses in main.py.
        """
        group = self.route_group(route_name)
        task_id, params = validate_envelope(payload)
        recipe = self._select(route_name, group, params.operation)

        logger.info(
            "[Executing] %s.%s for task %s", recipe.name, recipe.operation, task_id
        )
        result = await self._invoke(recipe, task_id, params.input)

        try:
            encoded = jsonable_encoder(result)
            # jsonable_encoder passes NaN and ±inf through; the response renderer refuses them
            json.dumps(encoded, allow_nan=False)
        except (TypeError, ValueError) as exc:
            raise HandlerFailureError(
                f"Handler result is not JSON serializable: {type(result).__name__}",
                original=exc,
                context={"name": recipe.name, "operation": recipe.operation, "task_id": task_id},
            ) from exc
        return encoded

    async def _invoke(self, recipe: ConnectorRecipe, task_id: Any, task_input: Any) -> Any:
        try:
            if recipe.is_async:
                return await recipe.handler(task_id, task_input)
            result = await run_in_threadpool(recipe.handler, task_id, task_input)
            if inspect.isawaitable(result):
                # e.g. a functools.partial wrapping a coroutine function
                result = await result
            return result
        except Exception as exc:
            raise HandlerFailureError(
                _failure_message(exc),
                original=exc,
                context={"name": recipe.name, "operation": recipe.operation, "task_id": task_id},
            ) from exc


def validate_envelope(payload: Any) -> Tuple[Any, OperationParams]:
    """
    Check the request envelope and return (task_id, params).

    `id` and `params` are checked by key presence; an explicit null counts as
    present and is handed to the handler unchanged. The value of `id` is not
    type-checked: any JSON value is passed through as the task id.
    """
    if not isinstance(payload, Mapping) or "id" not in payload or "params" not in payload:
        raise MalformedPayloadError(MISSING_FIELDS_MESSAGE)

    try:
        params = OperationParams.model_validate(payload["params"])
    except PydanticValidationError as exc:
        raise MalformedPayloadError(
            PARAMS_SHAPE_MESSAGE,
            context={"errors": exc.errors(include_url=False)},
        ) from exc

    return payload["id"], params


def _failure_message(exc: BaseException) -> str:
    message = str(exc)
    return message if message else type(exc).__name__
