"""Operation objects: request body, responses and security for one record."""

import logging
import re
from http import HTTPStatus

from apidoc_openapi.generator.inference import infer_schema, normalize_nulls, parse_example
from apidoc_openapi.generator.mounter import mount_fields
from apidoc_openapi.generator.parameters import QUERY_VERBS, build_parameters, route_fields
from apidoc_openapi.generator.paths import component_name, strip_tags
from apidoc_openapi.generator.registry import ComponentRegistry
from apidoc_openapi.parser.base import AnnotationRecord, FieldDeclaration

logger = logging.getLogger(__name__)

JSON_CONTENT = "application/json"
BEARER_MARKER = "Authorization: Bearer"
SECURITY_SCHEME = "jwt"
_BUCKET_CODE = re.compile(r"\b(\d{3})\b")


def build_operation(record: AnnotationRecord, path_names: list[str], registry: ComponentRegistry) -> dict:
    """Build the OpenAPI operation object for one annotation record."""
    routed = route_fields(record, path_names)

    operation = {
        "tags": [record.group] if record.group else [],
        "summary": f"{record.version} {strip_tags(record.title)}".strip(),
        "description": strip_tags(record.description),
    }

    parameters = build_parameters(record, routed, registry)
    if parameters:
        operation["parameters"] = parameters

    if record.verb not in QUERY_VERBS:
        request_body = build_request_body(record, routed.body, registry)
        if request_body:
            operation["requestBody"] = request_body

    security = build_security(record)
    if security:
        operation["security"] = security

    operation["responses"] = build_responses(record, registry)
    return operation


def build_request_body(
    record: AnnotationRecord,
    body_fields: list[FieldDeclaration],
    registry: ComponentRegistry,
) -> dict | None:
    """Request body from declared body fields and ``@apiParamExample`` blocks.

    The last request example supplies the base schema; declared fields are
    mounted onto it so they add descriptions and constraints. Returns None
    when the record declares no body at all.
    """
    examples = record.parameter.examples
    if not body_fields and not examples:
        return None

    description = "Request body"
    schema = None
    for example in examples:
        parsed = parse_example(example.content, _context(record))
        schema = normalize_nulls(infer_schema(parsed.payload, title=example.title or None))
        description = example.title or description

    schema = mount_fields(body_fields, schema)

    schema_ref = registry.register("schemas", schema, component_name(record.verb, record.url, "RequestSchema"))
    body = {"description": description, "content": {JSON_CONTENT: {"schema": schema_ref}}}
    return registry.register("requestBodies", body, component_name(record.verb, record.url, "RequestBody"))


def build_responses(record: AnnotationRecord, registry: ComponentRegistry) -> dict:
    """Responses keyed by status code.

    Success and error examples come first; declared ``Success <code>`` fields
    fill in codes without an example. An operation with neither gets a plain
    ``200 OK``.
    """
    responses: dict[str, dict] = {}

    for example in [*record.success.examples, *record.error.examples]:
        parsed = parse_example(example.content, _context(record))
        code = str(parsed.code)
        schema = normalize_nulls(infer_schema(parsed.payload))
        schema_ref = registry.register(
            "schemas", schema, component_name(record.verb, record.url, "ResponseSchema", code)
        )
        response = {
            "description": example.title or _reason(parsed.code),
            "content": {JSON_CONTENT: {"schema": schema_ref, "example": parsed.payload}},
        }
        responses[code] = registry.register(
            "responses", response, component_name(record.verb, record.url, "Response", code)
        )

    for bucket, fields in record.success.fields.items():
        match = _BUCKET_CODE.search(bucket)
        if not match:
            continue
        code = match.group(1)
        if code in responses:
            logger.debug("%s: %r fields ignored, an example already documents %s", _context(record), bucket, code)
            continue
        schema_ref = registry.register(
            "schemas", mount_fields(fields), component_name(record.verb, record.url, "ResponseSchema", code)
        )
        response = {"description": bucket, "content": {JSON_CONTENT: {"schema": schema_ref}}}
        responses[code] = registry.register(
            "responses", response, component_name(record.verb, record.url, "Response", code)
        )

    if not responses:
        responses["200"] = {"description": "OK"}
    return responses


def build_security(record: AnnotationRecord) -> list[dict]:
    """Bearer-JWT requirement when a request example sends a bearer token."""
    if any(BEARER_MARKER in example.content for example in record.examples):
        return [{SECURITY_SCHEME: []}]
    return []


def _reason(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return f"HTTP {code}"


def _context(record: AnnotationRecord) -> str:
    return f"{record.verb.upper()} {record.url}"
