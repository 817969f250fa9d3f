"""
Math connector example.

Registers two operations under the "math" connector and serves them:

    curl -X POST localhost:8080/csp/math \
         -H 'Content-Type: application/json' \
         -d '{"id": 1, "params": {"operation": "add", "input": {"a": 5, "b": 3}}}'
    → {"c": 8}
"""

import logging

from camunda_connector import Catalog, serve

logger = logging.getLogger(__name__)


class MathConnectors:
    async def add(self, task_id: int, params: dict) -> dict:
        logger.info("[Executing] add for task %s", task_id)
        return {"c": params["a"] + params["b"]}

    async def sub(self, task_id: int, params: dict) -> dict:
        logger.info("[Executing] sub for task %s", task_id)
        return {"c": params["a"] - params["b"]}


def build_catalog() -> Catalog:
    connectors = MathConnectors()
    catalog = Catalog()
    catalog.register("math", "add", connectors.add)
    catalog.register("math", "sub", connectors.sub)
    return catalog


if __name__ == "__main__":
    serve(build_catalog(), port=8080)
