"""Example parsing and JSON-schema inference from literal payloads."""

import json
import logging
import re
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

DEFAULT_STATUS = 200
STATUS_LINE = re.compile(r"HTTP/\S+\s+(\d{3})\b")


class ParsedExample(NamedTuple):
    code: int
    payload: Any


def parse_example(content: str, context: str = "") -> ParsedExample:
    """Split an apidoc example into its HTTP status code and JSON payload.

    The status line, when present, precedes the first ``{``. A payload that
    is missing or not valid JSON yields an empty object.
    """
    brace = content.find("{")
    head = content if brace < 0 else content[:brace]

    match = STATUS_LINE.search(head)
    code = int(match.group(1)) if match else DEFAULT_STATUS

    if brace < 0:
        return ParsedExample(code, {})
    try:
        payload = json.loads(content[brace:])
    except json.JSONDecodeError as e:
        logger.warning("Unparseable example payload %s: %s", context, e)
        return ParsedExample(DEFAULT_STATUS, {})
    return ParsedExample(code, payload)


def infer_schema(value: Any, title: str | None = None) -> dict:
    """Infer a JSON-schema describing ``value``."""
    schema = _infer(value)
    if title:
        schema = {"title": title, **schema}
    return schema


def _infer(value: Any) -> dict:
    # bool is an int subclass
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        return {"type": "integer"}
    if isinstance(value, float):
        return {"type": "number"}
    if isinstance(value, str):
        return {"type": "string"}
    if value is None:
        return {"type": "null"}
    if isinstance(value, dict):
        return {"type": "object", "properties": {k: _infer(v) for k, v in value.items()}}
    if isinstance(value, list):
        return {"type": "array", "items": _infer_items(value)}
    raise TypeError(f"not a JSON value: {type(value).__name__}")


def _infer_items(values: list) -> dict:
    if not values:
        return {}

    schemas = [_infer(v) for v in values]
    types = {s["type"] for s in schemas}
    if len(types) > 1:
        distinct = []
        for s in schemas:
            if s not in distinct:
                distinct.append(s)
        return {"oneOf": distinct}

    if types == {"object"}:
        return _merge_objects(schemas, values)
    if types == {"array"}:
        return {"type": "array", "items": _infer_items([item for v in values for item in v])}
    return schemas[0]


def _merge_objects(schemas: list[dict], values: list[dict]) -> dict:
    """Union the properties of object items; keys present in every item are required."""
    merged: dict[str, list] = {}
    for value in values:
        for key, item in value.items():
            merged.setdefault(key, []).append(item)

    properties = {}
    for key, samples in merged.items():
        if len(samples) == 1:
            properties[key] = _infer(samples[0])
        else:
            # treat the samples of one key like the elements of an array
            properties[key] = _infer_items(samples)

    result = {"type": "object", "properties": properties}
    required = [key for key in merged if all(key in v for v in values)]
    if required:
        result["required"] = required
    return result


def normalize_nulls(schema: Any) -> Any:
    """Rewrite ``{"type": "null"}`` nodes as nullable object placeholders.

    OpenAPI 3.0 has no null type. Applied recursively through properties,
    array items and oneOf alternatives; returns the rewritten schema.
    """
    if not isinstance(schema, dict):
        return schema
    if schema.get("type") == "null":
        return {"type": "object", "nullable": True, "default": None, "properties": {}}

    if isinstance(schema.get("properties"), dict):
        schema["properties"] = {k: normalize_nulls(v) for k, v in schema["properties"].items()}
    if "items" in schema:
        schema["items"] = normalize_nulls(schema["items"])
    if isinstance(schema.get("oneOf"), list):
        schema["oneOf"] = [normalize_nulls(s) for s in schema["oneOf"]]
    return schema
