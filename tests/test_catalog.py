"""
Camunda Connector — Catalog Unit Tests
========================================

What we test:
    ✅ register() returns a recipe with the derived route key
    ✅ Registration order is preserved
    ✅ Duplicate (name, operation) is rejected and leaves the catalog unchanged
    ✅ Same operation under different connectors is allowed
    ✅ snapshot() freezes; later register()/snapshot() raise CatalogFrozenError
    ✅ Invalid names, operations and handlers are rejected
"""

import pytest

from camunda_connector.catalog import Catalog, ConnectorRecipe
from camunda_connector.exceptions import (
    CatalogFrozenError,
    DuplicateRegistrationError,
    InvalidRecipeError,
)


async def noop(task_id, data):
    return None


def sync_noop(task_id, data):
    return None


class TestCatalogRegister:
    """Tests for building the catalog."""

    def test_register_returns_recipe(self):
        catalog = Catalog()
        recipe = catalog.register("math", "add", noop)

        assert isinstance(recipe, ConnectorRecipe)
        assert recipe.name == "math"
        assert recipe.operation == "add"
        assert recipe.handler is noop
        assert recipe.route_key == "/csp/math"

    def test_recipes_sharing_a_name_share_a_route_key(self):
        catalog = Catalog()
        add = catalog.register("math", "add", noop)
        sub = catalog.register("math", "sub", noop)
        assert add.route_key == sub.route_key

    def test_is_async_reflects_handler_kind(self):
        catalog = Catalog()
        assert catalog.register("math", "add", noop).is_async is True
        assert catalog.register("math", "sub", sync_noop).is_async is False

    def test_registration_order_is_preserved(self):
        catalog = Catalog()
        catalog.register("b", "x", noop)
        catalog.register("a", "y", noop)
        catalog.register("b", "z", noop)

        assert [(r.name, r.operation) for r in catalog] == [("b", "x"), ("a", "y"), ("b", "z")]
        assert len(catalog) == 3

    def test_duplicate_pair_is_rejected(self):
        catalog = Catalog()
        catalog.register("math", "add", noop)

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            catalog.register("math", "add", sync_noop)

        assert exc_info.value.name == "math"
        assert exc_info.value.operation == "add"

    def test_duplicate_leaves_catalog_unchanged(self):
        catalog = Catalog()
        first = catalog.register("math", "add", noop)
        catalog.register("math", "sub", noop)
        before = list(catalog)

        with pytest.raises(DuplicateRegistrationError):
            catalog.register("math", "add", sync_noop)

        assert list(catalog) == before
        assert list(catalog)[0] is first

    def test_same_operation_under_different_connectors(self):
        catalog = Catalog()
        catalog.register("math", "run", noop)
        catalog.register("text", "run", noop)
        assert len(catalog) == 2

    @pytest.mark.parametrize("name", ["", "   ", None, 42, "a/b"])
    def test_invalid_name_is_rejected(self, name):
        with pytest.raises(InvalidRecipeError):
            Catalog().register(name, "add", noop)

    @pytest.mark.parametrize("operation", ["", None, 1])
    def test_invalid_operation_is_rejected(self, operation):
        with pytest.raises(InvalidRecipeError):
            Catalog().register("math", operation, noop)

    def test_non_callable_handler_is_rejected(self):
        catalog = Catalog()
        with pytest.raises(InvalidRecipeError):
            catalog.register("math", "add", "not a function")
        assert len(catalog) == 0


class TestCatalogSnapshot:
    """Tests for freezing the catalog."""

    def test_snapshot_returns_recipes_in_order(self):
        catalog = Catalog()
        catalog.register("math", "add", noop)
        catalog.register("math", "sub", noop)

        recipes = catalog.snapshot()

        assert isinstance(recipes, tuple)
        assert [r.operation for r in recipes] == ["add", "sub"]
        assert catalog.is_frozen

    def test_register_after_snapshot_fails(self):
        catalog = Catalog()
        catalog.register("math", "add", noop)
        catalog.snapshot()

        with pytest.raises(CatalogFrozenError):
            catalog.register("math", "sub", noop)
        assert len(catalog) == 1

    def test_snapshot_is_callable_once(self):
        catalog = Catalog()
        catalog.snapshot()
        with pytest.raises(CatalogFrozenError):
            catalog.snapshot()

    def test_empty_catalog_can_be_snapshotted(self):
        assert Catalog().snapshot() == ()

    def test_recipes_are_immutable(self):
        recipe = Catalog().register("math", "add", noop)
        with pytest.raises(AttributeError):
            recipe.operation = "sub"
