import pytest

from apidoc_openapi.generator.registry import ComponentRegistry, content_hash


class TestContentHash:
    def test_key_order_does_not_matter(self):
        assert content_hash({"a": 1, "b": [1, 2]}) == content_hash({"b": [1, 2], "a": 1})

    def test_different_content(self):
        assert content_hash({"a": 1}) != content_hash({"a": 2})


class TestComponentRegistry:
    def test_register_returns_ref(self):
        registry = ComponentRegistry()
        ref = registry.register("schemas", {"type": "string"}, "Name")
        assert ref == {"$ref": "#/components/schemas/Name"}
        assert registry.get("schemas", "Name") == {"type": "string"}

    def test_equal_content_shares_one_component(self):
        registry = ComponentRegistry()
        first = registry.register("schemas", {"type": "object", "properties": {"id": {"type": "integer"}}}, "UserAtGetUsers")
        second = registry.register("schemas", {"properties": {"id": {"type": "integer"}}, "type": "object"}, "UserAtGetPets")
        assert first == second
        assert list(registry.components()["schemas"]) == ["UserAtGetUsers"]

    def test_name_collision_gets_suffix(self):
        registry = ComponentRegistry()
        registry.register("schemas", {"type": "string"}, "Name")
        ref = registry.register("schemas", {"type": "integer"}, "Name")
        assert ref == {"$ref": "#/components/schemas/Name2"}
        assert registry.get("schemas", "Name") == {"type": "string"}

    def test_kinds_are_separate(self):
        registry = ComponentRegistry()
        registry.register("schemas", {"type": "string"}, "Name")
        ref = registry.register("responses", {"type": "string"}, "Name")
        assert ref == {"$ref": "#/components/responses/Name"}

    def test_stored_copy_is_independent(self):
        registry = ComponentRegistry()
        obj = {"type": "object", "properties": {}}
        registry.register("schemas", obj, "Obj")
        obj["properties"]["x"] = {"type": "string"}
        assert registry.get("schemas", "Obj") == {"type": "object", "properties": {}}

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            ComponentRegistry().register("links", {}, "X")

    def test_components_excludes_hash_index(self):
        registry = ComponentRegistry()
        registry.register("parameters", {"in": "query", "name": "q"}, "Q")
        assert set(registry.components()) == {"schemas", "parameters", "requestBodies", "responses"}

    def test_prune(self):
        registry = ComponentRegistry()
        registry.register("schemas", {"type": "string"}, "Kept")
        registry.register("schemas", {"type": "integer"}, "Dropped")
        removed = registry.prune({"#/components/schemas/Kept"})
        assert removed == 1
        assert list(registry.components()["schemas"]) == ["Kept"]
        # pruned content can be registered again under its proposed name
        ref = registry.register("schemas", {"type": "integer"}, "Again")
        assert ref == {"$ref": "#/components/schemas/Again"}
