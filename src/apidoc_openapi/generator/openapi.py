"""OpenAPI generator — folds apidoc records into one OpenAPI 3.0 document."""

import logging

from apidoc_openapi.generator.operations import SECURITY_SCHEME, build_operation
from apidoc_openapi.generator.paths import PathTemplateError, template_path
from apidoc_openapi.generator.registry import ComponentRegistry
from apidoc_openapi.generator.validator import reachable_refs
from apidoc_openapi.generator.versions import VersionResolver
from apidoc_openapi.parser.base import AnnotationRecord, ProjectInfo

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"


class OpenApiGenerator:
    """Generates an OpenAPI document from parsed apidoc records.

    Each ``generate`` call owns its own component registry and version map,
    so one generator can be reused for several inputs.
    """

    def __init__(self, project: ProjectInfo | None = None, description: str | None = None):
        self.project = project or ProjectInfo()
        self.description = description

    def generate(self, records: list[AnnotationRecord]) -> dict:
        """Convert ``records`` (in input order) into an OpenAPI document dict."""
        registry = ComponentRegistry()
        versions = VersionResolver()
        paths: dict[str, dict] = {}
        prefix = self.project.url or ""

        for record in records:
            try:
                path, path_names = template_path(record.url)
            except PathTemplateError as e:
                logger.error("Skipping %s %s: %s", record.verb.upper(), record.url, e)
                continue

            path = prefix + path
            if not versions.should_process(path, record.verb, record.version):
                logger.debug(
                    "Skipping %s %s version %s, version %s already processed",
                    record.verb.upper(), path, record.version, versions.latest(path, record.verb),
                )
                continue

            try:
                operation = build_operation(record, path_names, registry)
            except Exception:
                logger.exception("Failed to convert %s %s, skipping", record.verb.upper(), path)
                continue

            paths.setdefault(path, {})[record.verb] = operation
            versions.record(path, record.verb, record.version)

        document = self._envelope(paths, registry)
        # superseded revisions leave components nothing points to any more
        if registry.prune(reachable_refs(document)):
            document = self._envelope(paths, registry)
        logger.info("Generated %d paths from %d records", len(paths), len(records))
        return document

    def build_info(self) -> dict:
        return {
            "title": self.project.display_title,
            "version": self.project.version,
            "description": self.description if self.description is not None else self.project.description,
        }

    def _envelope(self, paths: dict, registry: ComponentRegistry) -> dict:
        components = registry.components()
        components["securitySchemes"] = {
            SECURITY_SCHEME: {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
        }
        return {
            "openapi": OPENAPI_VERSION,
            "info": self.build_info(),
            "paths": paths,
            "components": components,
        }
