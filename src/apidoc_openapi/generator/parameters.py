"""Parameter objects from declared apidoc fields."""

from typing import NamedTuple

from apidoc_openapi.generator.mounter import coerce_value
from apidoc_openapi.generator.paths import component_name, strip_tags
from apidoc_openapi.generator.registry import ComponentRegistry
from apidoc_openapi.parser.base import AnnotationRecord, FieldDeclaration

QUERY_VERBS = ("get", "delete")


class RoutedFields(NamedTuple):
    path: list[FieldDeclaration]
    query: list[FieldDeclaration]
    header: list[FieldDeclaration]
    body: list[FieldDeclaration]


def route_fields(record: AnnotationRecord, path_names: list[str]) -> RoutedFields:
    """Sort declared fields into path, query, header and body buckets.

    ``Parameter`` fields named like a path placeholder go to the path;
    the rest go to the query string for GET/DELETE and to the body otherwise.
    Placeholders nobody declared get a plain string parameter after the
    declared ones.
    """
    path: list[FieldDeclaration] = []
    query = list(record.parameter.bucket("Query"))
    body = list(record.parameter.bucket("Body"))

    for decl in record.parameter.bucket("Parameter"):
        if decl.field in path_names:
            path.append(decl)
        elif record.verb in QUERY_VERBS:
            query.append(decl)
        else:
            body.append(decl)

    declared = {decl.field for decl in path}
    path.extend(FieldDeclaration(field=name) for name in path_names if name not in declared)

    return RoutedFields(path, query, list(record.header.bucket("Header")), body)


def path_parameter(decl: FieldDeclaration) -> dict:
    # path parameters are always required, whatever the declaration says
    return {
        "in": "path",
        "name": decl.field,
        "description": strip_tags(decl.description),
        "required": True,
        "schema": {"type": decl.type.lower()},
    }


def query_parameter(decl: FieldDeclaration) -> dict:
    return {
        "in": "query",
        "name": decl.field,
        "description": strip_tags(decl.description),
        "required": not decl.optional,
        "schema": {"type": decl.type.lower()},
    }


def header_parameter(decl: FieldDeclaration) -> dict:
    schema = {"type": decl.type.lower()}
    if decl.default_value not in (None, ""):
        schema["default"] = coerce_value(decl.default_value, schema["type"])
    return {
        "in": "header",
        "name": decl.field,
        "description": strip_tags(decl.description),
        "required": not decl.optional,
        "schema": schema,
    }


def build_parameters(
    record: AnnotationRecord,
    routed: RoutedFields,
    registry: ComponentRegistry,
) -> list[dict]:
    """Register path, query and header parameters (in that order) and return their refs."""
    refs = []
    for role, builder, fields in (
        ("PathParameter", path_parameter, routed.path),
        ("QueryParameter", query_parameter, routed.query),
        ("HeaderParameter", header_parameter, routed.header),
    ):
        for decl in fields:
            name = component_name(record.verb, record.url, role, decl.field)
            refs.append(registry.register("parameters", builder(decl), name))
    return refs
