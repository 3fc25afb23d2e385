"""Referential checks on generated OpenAPI documents."""

from apidoc_openapi.generator.registry import content_hash

REF_PREFIX = "#/components/"


def iter_refs(node, location: str = "#"):
    """Yield ``(location, ref)`` for every ``$ref`` below ``node``.

    ``example`` values are literal payloads and are not walked.
    """
    if isinstance(node, dict):
        in_properties = location.rsplit("/", 1)[-1] == "properties"
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield location, value
            elif key == "example" and not in_properties:
                continue
            else:
                yield from iter_refs(value, f"{location}/{_escape(key)}")
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield from iter_refs(value, f"{location}/{index}")


def resolve_ref(document: dict, ref: str):
    """Return the component a local ``#/components/...`` ref points to, or None."""
    if not ref.startswith(REF_PREFIX):
        return None
    parts = ref[len(REF_PREFIX):].split("/")
    if len(parts) != 2:
        return None
    kind, name = parts
    return document.get("components", {}).get(kind, {}).get(name)


def reachable_refs(document: dict) -> set[str]:
    """Refs used by ``paths``, followed transitively through components."""
    seen: set[str] = set()
    pending = [ref for _, ref in iter_refs(document.get("paths", {}))]
    while pending:
        ref = pending.pop()
        if ref in seen:
            continue
        seen.add(ref)
        target = resolve_ref(document, ref)
        if target is not None:
            pending.extend(r for _, r in iter_refs(target))
    return seen


def find_dangling_refs(document: dict) -> dict[str, str]:
    """Return {location: error_message} for refs that do not resolve."""
    errors = {}
    for location, ref in iter_refs(document):
        if resolve_ref(document, ref) is None:
            errors[location] = f"unresolved $ref {ref}"
    return errors


def find_duplicate_components(document: dict) -> dict[str, str]:
    """Return {location: error_message} for components repeating earlier content."""
    errors = {}
    for kind, entries in document.get("components", {}).items():
        if kind == "securitySchemes" or not isinstance(entries, dict):
            continue
        first_by_hash: dict[str, str] = {}
        for name, obj in entries.items():
            digest = content_hash(obj)
            if digest in first_by_hash:
                errors[f"#/components/{kind}/{name}"] = f"duplicates #/components/{kind}/{first_by_hash[digest]}"
            else:
                first_by_hash[digest] = name
    return errors


def validate_document(document: dict) -> dict[str, str]:
    """Run all checks on a document.

    Returns dict of {location: error_message} for every problem found.
    """
    errors = {}
    errors.update(find_dangling_refs(document))
    errors.update(find_duplicate_components(document))
    return errors


def _escape(key) -> str:
    return str(key).replace("~", "~0").replace("/", "~1")
