"""
Camunda Connector — Connector Catalog
=======================================

What:  Ordered, append-only collection of connector recipes. Each recipe binds
       a (connector name, operation name) pair to a handler function.
Who:   Populated by the composition root, one `register()` call per handler;
       frozen by `create_app()` via `snapshot()`.
When:  Filled at process startup, before the server accepts any request.

Lifecycle:
    ┌────────────┐  register() × N   ┌────────────┐  snapshot()  ┌─────────────┐
    │   empty    │ ────────────────→ │  building  │ ───────────→ │   frozen    │
    └────────────┘                   └────────────┘              └─────────────┘
                                          │                            │
                            duplicate → DuplicateRegistrationError     │
                                                      register() → CatalogFrozenError

    The snapshot is an immutable tuple, so the Dispatcher reads it from any
    number of concurrent requests without locking.

Usage:
    catalog = Catalog()
    catalog.register("math", "add", add)
    catalog.register("math", "sub", sub)
    app = create_app(catalog)          # freezes the catalog
"""

import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterator, List, Tuple, Union

from camunda_connector.exceptions import (
    CatalogFrozenError,
    DuplicateRegistrationError,
    InvalidRecipeError,
)

logger = logging.getLogger(__name__)

# All connector routes are mounted under this path prefix.
ROUTE_PREFIX = "/csp"

# (task_id, input) -> output, either plain or coroutine function
Handler = Callable[[Any, Any], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class ConnectorRecipe:
    """
    Registered binding of (connector name, operation) to a handler.

    Recipes sharing a connector name share a route key, and therefore one
    HTTP path; the operation carried in the request body tells them apart.
    """

    name: str
    operation: str
    handler: Handler

    @property
    def route_key(self) -> str:
        return f"{ROUTE_PREFIX}/{self.name}"

    @property
    def is_async(self) -> bool:
        return inspect.iscoroutinefunction(self.handler)


class Catalog:
    """
    Process-wide list of connector recipes with an explicit freeze.

    Registration order is preserved and is significant: the Dispatcher scans a
    route group in this order and the first matching operation wins.
    """

    def __init__(self) -> None:
        self._recipes: List[ConnectorRecipe] = []
        self._frozen: bool = False
        # Protects the frozen check + duplicate check + append as one step
        self._lock = threading.Lock()

    def register(self, name: str, operation: str, handler: Handler) -> ConnectorRecipe:
        """
        Add a recipe for (name, operation).

        Args:
            name:      Connector name; becomes the path segment in /csp/{name}.
            operation: Operation identifier matched against params.operation.
            handler:   Callable invoked as handler(task_id, input).

        Returns:
            The created ConnectorRecipe.

        Raises:
            InvalidRecipeError:         Empty name/operation or non-callable handler.
            DuplicateRegistrationError: (name, operation) already registered.
            CatalogFrozenError:         snapshot() has already been taken.
        """
        _validate_identifier("name", name)
        _validate_identifier("operation", operation)
        if not callable(handler):
            raise InvalidRecipeError(
                f"Handler for connector '{name}' operation '{operation}' is not callable",
                context={"name": name, "operation": operation},
            )

        recipe = ConnectorRecipe(name=name, operation=operation, handler=handler)

        with self._lock:
            if self._frozen:
                raise CatalogFrozenError(
                    f"Cannot register connector '{name}' operation '{operation}': catalog is frozen"
                )
            if any(r.name == name and r.operation == operation for r in self._recipes):
                raise DuplicateRegistrationError(name, operation)
            self._recipes.append(recipe)

        logger.debug(
            "Registered recipe: name => %s | operation => %s (%s)",
            name,
            operation,
            getattr(handler, "__qualname__", repr(handler)),
        )
        return recipe

    def snapshot(self) -> Tuple[ConnectorRecipe, ...]:
        """
        Freeze the catalog and return its recipes in registration order.

        Can be called once; the caller owns the returned tuple from then on.
        """
        with self._lock:
            if self._frozen:
                raise CatalogFrozenError("Catalog has already been snapshotted")
            self._frozen = True
            recipes = tuple(self._recipes)

        logger.debug("Catalog frozen with %d recipe(s)", len(recipes))
        return recipes

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self) -> Iterator[ConnectorRecipe]:
        return iter(tuple(self._recipes))

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "building"
        return f"Catalog(recipes={len(self._recipes)}, state={state})"


def _validate_identifier(field: str, value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRecipeError(
            f"Connector {field} must be a non-empty string, got {value!r}",
            context={"field": field},
        )
    if field == "name" and "/" in value:
        # The name is a single path segment
        raise InvalidRecipeError(
            f"Connector name must not contain '/', got {value!r}",
            context={"field": field},
        )
