import logging

from apidoc_openapi.generator.inference import infer_schema, normalize_nulls, parse_example

NULLABLE = {"type": "object", "nullable": True, "default": None, "properties": {}}


class TestParseExample:
    def test_status_line_and_payload(self):
        parsed = parse_example('HTTP/1.1 201 Created\n{"id": 1}')
        assert parsed.code == 201
        assert parsed.payload == {"id": 1}

    def test_no_status_line(self):
        parsed = parse_example('{"ok":true}')
        assert (parsed.code, parsed.payload) == (200, {"ok": True})

    def test_bad_json_recovers_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            parsed = parse_example("{bad json", "GET /users")
        assert (parsed.code, parsed.payload) == (200, {})
        assert "GET /users" in caplog.text

    def test_bad_json_after_status_line_defaults_to_200(self):
        parsed = parse_example("HTTP/1.1 404 Not Found\n{oops")
        assert (parsed.code, parsed.payload) == (200, {})

    def test_no_payload(self):
        parsed = parse_example("HTTP/1.1 204 No Content")
        assert (parsed.code, parsed.payload) == (204, {})

    def test_status_after_brace_is_ignored(self):
        parsed = parse_example('{"log": "HTTP/1.1 500 x"}')
        assert parsed.code == 200


class TestInferSchema:
    def test_primitives(self):
        assert infer_schema("a") == {"type": "string"}
        assert infer_schema(1) == {"type": "integer"}
        assert infer_schema(1.5) == {"type": "number"}
        assert infer_schema(True) == {"type": "boolean"}
        assert infer_schema(None) == {"type": "null"}

    def test_object_with_title(self):
        schema = infer_schema({"id": 1, "name": "Ann"}, title="User")
        assert schema == {
            "title": "User",
            "type": "object",
            "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
        }

    def test_array_of_objects_merges_properties(self):
        schema = infer_schema([{"id": 1, "name": "Ann"}, {"id": 2}])
        items = schema["items"]
        assert items["type"] == "object"
        assert set(items["properties"]) == {"id", "name"}
        assert items["required"] == ["id"]

    def test_array_of_mixed_types(self):
        schema = infer_schema([1, "a", 2])
        assert schema["items"] == {"oneOf": [{"type": "integer"}, {"type": "string"}]}

    def test_empty_array(self):
        assert infer_schema([]) == {"type": "array", "items": {}}

    def test_nested_arrays(self):
        schema = infer_schema([[1], [2, 3]])
        assert schema["items"] == {"type": "array", "items": {"type": "integer"}}


class TestNormalizeNulls:
    def test_root_null(self):
        assert normalize_nulls({"type": "null"}) == NULLABLE

    def test_nested_in_properties_and_items(self):
        schema = infer_schema({"a": None, "list": [{"b": None}], "deep": {"c": None}})
        result = normalize_nulls(schema)
        assert result["properties"]["a"] == NULLABLE
        assert result["properties"]["list"]["items"]["properties"]["b"] == NULLABLE
        assert result["properties"]["deep"]["properties"]["c"] == NULLABLE

    def test_null_array_items(self):
        result = normalize_nulls(infer_schema([None]))
        assert result["items"] == NULLABLE

    def test_inside_one_of(self):
        result = normalize_nulls(infer_schema([1, None]))
        assert result["items"]["oneOf"] == [{"type": "integer"}, NULLABLE]

    def test_other_nodes_untouched(self):
        schema = {"type": "object", "properties": {"id": {"type": "integer"}}}
        assert normalize_nulls(schema) == {"type": "object", "properties": {"id": {"type": "integer"}}}
