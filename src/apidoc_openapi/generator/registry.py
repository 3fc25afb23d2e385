"""Content-addressed store for reusable OpenAPI components."""

import copy
import hashlib
import json
import logging

logger = logging.getLogger(__name__)

COMPONENT_KINDS = ("schemas", "parameters", "requestBodies", "responses")


def content_hash(obj) -> str:
    """Stable SHA-1 of a JSON-serializable object."""
    payload = json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def make_ref(kind: str, name: str) -> dict:
    return {"$ref": f"#/components/{kind}/{name}"}


class ComponentRegistry:
    """Deduplicates schema/parameter/requestBody/response objects by content.

    One registry belongs to one conversion. Registering content that was seen
    before returns the reference to the existing component, whatever name the
    caller proposed.
    """

    def __init__(self):
        self._components: dict[str, dict[str, dict]] = {kind: {} for kind in COMPONENT_KINDS}
        self._names: dict[tuple[str, str], str] = {}  # (kind, hash) -> name

    def register(self, kind: str, obj: dict, name: str) -> dict:
        """Store ``obj`` under ``name`` unless equal content already exists.

        Returns a ``{"$ref": "#/components/<kind>/<name>"}`` pointer.
        """
        if kind not in self._components:
            raise ValueError(f"unknown component kind: {kind}")

        digest = content_hash(obj)
        existing = self._names.get((kind, digest))
        if existing is not None:
            return make_ref(kind, existing)

        name = self._free_name(kind, name)
        self._names[(kind, digest)] = name
        self._components[kind][name] = copy.deepcopy(obj)
        return make_ref(kind, name)

    def get(self, kind: str, name: str) -> dict | None:
        return self._components.get(kind, {}).get(name)

    def components(self) -> dict[str, dict[str, dict]]:
        """Registered components by kind. The hash index is not included."""
        return {kind: dict(entries) for kind, entries in self._components.items()}

    def prune(self, referenced: set[str]) -> int:
        """Drop components whose ``$ref`` string is not in ``referenced``.

        Returns the number of components removed.
        """
        removed = 0
        for kind, entries in self._components.items():
            for name in list(entries):
                if make_ref(kind, name)["$ref"] not in referenced:
                    del entries[name]
                    removed += 1
        if removed:
            live = {(kind, name) for kind, entries in self._components.items() for name in entries}
            self._names = {key: name for key, name in self._names.items() if (key[0], name) in live}
            logger.debug("Pruned %d unreferenced components", removed)
        return removed

    def _free_name(self, kind: str, name: str) -> str:
        entries = self._components[kind]
        if name not in entries:
            return name
        suffix = 2
        while f"{name}{suffix}" in entries:
            suffix += 1
        return f"{name}{suffix}"
