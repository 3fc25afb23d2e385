"""Builds nested JSON-schema trees from flat dotted field declarations.

apidoc declares nested request/response fields one per line::

    @apiParam {Object}   user
    @apiParam {String}   user.name
    @apiParam {Object[]} user.pets
    @apiParam {String}   user.pets.name

Each declaration is attached to the node registered for its parent prefix
(``""`` is the root). Parents have to be declared before their children.
"""

import logging
import re
from enum import Enum

from apidoc_openapi.generator.paths import strip_tags
from apidoc_openapi.parser.base import FieldDeclaration

logger = logging.getLogger(__name__)

NUMERIC_TYPES = ("number", "integer")
BOOLEAN_LITERALS = {"true": True, "false": False}
_DASH_RANGE = re.compile(r"^(-?\d*\.?\d*)-(-?\d*\.?\d*)$")


class FieldKind(Enum):
    """How a declared field type is mounted into the schema tree."""

    OBJECT_ARRAY = "object[]"
    PRIMITIVE_ARRAY = "[]"
    OBJECT = "object"
    NULL = "null"
    PRIMITIVE = "primitive"


def classify(type_name: str) -> FieldKind:
    type_name = type_name.lower()
    if type_name.endswith("object[]"):
        return FieldKind.OBJECT_ARRAY
    if type_name.endswith("[]"):
        return FieldKind.PRIMITIVE_ARRAY
    if type_name == "object":
        return FieldKind.OBJECT
    if type_name == "null":
        return FieldKind.NULL
    return FieldKind.PRIMITIVE


def empty_object_schema() -> dict:
    return {"type": "object", "properties": {}}


def split_field(field: str) -> tuple[str, str]:
    """``user.address.city`` -> ``("user.address", "city")``; top-level -> ``("", name)``."""
    object_path, _, property_name = field.rpartition(".")
    return object_path, property_name


class MountTable:
    """Maps dotted object prefixes to the schema node that holds their properties."""

    def __init__(self, root: dict):
        self._nodes: dict[str, dict] = {"": root}

    def mount(self, prefix: str, node: dict) -> dict:
        self._nodes[prefix] = node
        return node

    def resolve(self, prefix: str) -> dict | None:
        return self._nodes.get(prefix)

    def __contains__(self, prefix: str) -> bool:
        return prefix in self._nodes


def mount_fields(fields: list[FieldDeclaration], schema: dict | None = None) -> dict:
    """Mount ``fields`` into ``schema`` (a new empty object schema by default).

    Existing array/object nodes of the declared type are reused, so a schema
    inferred from an example can be enriched with declared descriptions and
    constraints. Nodes of another type are replaced.
    Returns the root schema.
    """
    if schema is None:
        schema = empty_object_schema()
    table = MountTable(schema)

    for decl in fields:
        object_path, property_name = split_field(decl.field)
        parent = table.resolve(object_path)
        if parent is None:
            logger.debug("Skipping field %r: parent %r is not declared before it", decl.field, object_path)
            continue

        properties = parent.setdefault("properties", {})
        kind = classify(decl.type)
        if kind is FieldKind.OBJECT_ARRAY:
            node = _reuse_or_replace(properties, decl, _holds_objects, lambda: {"type": "array"})
            items = node.setdefault("items", empty_object_schema())
            if not items:
                # inferred from an empty example array
                items.update(empty_object_schema())
            table.mount(decl.field, items)
        elif kind is FieldKind.PRIMITIVE_ARRAY:
            _reuse_or_replace(properties, decl, _is_array, lambda: {"type": "array", "items": _array_items(decl)})
        elif kind is FieldKind.OBJECT:
            table.mount(decl.field, _reuse_or_replace(properties, decl, _is_object, empty_object_schema))
        elif kind is FieldKind.NULL:
            node = _reuse_or_replace(
                properties, decl, _is_object, lambda: {"type": "object", "nullable": True, "default": None}
            )
            table.mount(decl.field, node)
        elif kind is FieldKind.PRIMITIVE:
            properties[property_name] = primitive_schema(decl)
        else:
            raise ValueError(f"unhandled field kind: {kind}")

        if not decl.optional:
            required = parent.setdefault("required", [])
            if property_name not in required:
                required.append(property_name)

    return schema


def _reuse_or_replace(properties: dict, decl: FieldDeclaration, matches, factory) -> dict:
    """Existing property node when ``matches`` accepts it, else a fresh one from ``factory``."""
    _, name = split_field(decl.field)
    node = properties.get(name)
    if node is not None and matches(node):
        return node
    if node is not None:
        logger.debug("Field %r declared as %s replaces an inferred %s schema", decl.field, decl.type, node.get("type"))
    properties[name] = factory()
    return properties[name]


def _is_object(node: dict) -> bool:
    return node.get("type") == "object"


def _is_array(node: dict) -> bool:
    return node.get("type") == "array"


def _holds_objects(node: dict) -> bool:
    items = node.get("items")
    return _is_array(node) and (not items or _is_object(items))


def primitive_schema(decl: FieldDeclaration) -> dict:
    """Leaf schema with enum, default and size bounds."""
    type_name = decl.type.lower()
    prop = {"type": type_name, "description": strip_tags(decl.description)}

    if decl.allowed_values:
        prop["enum"] = [coerce_value(_unquote(v), type_name) for v in decl.allowed_values]
    if decl.default_value not in (None, ""):
        prop["default"] = coerce_value(decl.default_value, type_name)
    if decl.size:
        low, high = parse_size(decl.size)
        if type_name == "string":
            bounds = ("minLength", "maxLength")
        elif type_name in NUMERIC_TYPES:
            bounds = ("minimum", "maximum")
        else:
            bounds = None
        if bounds:
            if low is not None:
                prop[bounds[0]] = low
            if high is not None:
                prop[bounds[1]] = high
    return prop


def parse_size(size: str) -> tuple[int | float | None, int | float | None]:
    """Parse apidoc size ranges: ``1..10``, ``..10``, ``3..``, ``1-100``."""
    size = size.strip()
    if ".." in size:
        low, high = size.split("..", 1)
    else:
        match = _DASH_RANGE.match(size)
        if not match:
            logger.debug("Unrecognized size range %r", size)
            return None, None
        low, high = match.groups()
    return _number_or_none(low), _number_or_none(high)


def _array_items(decl: FieldDeclaration) -> dict:
    items = {"type": decl.type.lower()[:-2], "description": strip_tags(decl.description)}
    if decl.default_value not in (None, ""):
        items["example"] = decl.default_value
    return items


def coerce_value(value: str, type_name: str):
    """Typed value for a declared ``number``/``integer``/``boolean`` literal; other values pass through."""
    if type_name == "boolean":
        return BOOLEAN_LITERALS.get(value.strip().lower(), value)
    if type_name not in NUMERIC_TYPES:
        return value
    number = _number_or_none(value)
    return value if number is None else number


def _number_or_none(text: str) -> int | float | None:
    text = text.strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value
