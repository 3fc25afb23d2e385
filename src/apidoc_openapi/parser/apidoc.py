"""apidoc output loader.

Reads ``api_data.json`` and ``api_project.json`` (or their legacy ``.js``
wrappers) into AnnotationRecord / ProjectInfo models.
"""

import json
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .base import AnnotationRecord, ProjectInfo
from .detect import unwrap_define

logger = logging.getLogger(__name__)


class ApidocLoadError(Exception):
    """Raised when an apidoc output or project file cannot be loaded."""


def parse_apidoc(file_path: Path) -> list[AnnotationRecord]:
    """Parse an apidoc ``api_data`` file into a list of AnnotationRecord."""
    data = _read_json(file_path)

    # legacy wrapper: define({ "api": [...] })
    if isinstance(data, dict) and "api" in data:
        data = data["api"]
    if not isinstance(data, list):
        raise ApidocLoadError(f"{file_path}: expected a list of api records, got {type(data).__name__}")

    records = []
    for index, item in enumerate(data):
        try:
            records.append(AnnotationRecord.model_validate(item))
        except ValidationError as e:
            raise ApidocLoadError(f"{file_path}: record #{index} is malformed: {e}") from e

    logger.debug("Loaded %d api records from %s", len(records), file_path)
    return records


def parse_project(file_path: Path) -> ProjectInfo:
    """Parse project metadata. JSON, YAML and the legacy JS wrapper are accepted."""
    if file_path.suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ApidocLoadError(f"{file_path}: {e}") from e
    else:
        data = _read_json(file_path)

    if isinstance(data, dict) and "project" in data:
        data = data["project"]
    if not isinstance(data, dict):
        raise ApidocLoadError(f"{file_path}: expected a project object")

    try:
        return ProjectInfo.model_validate(data)
    except ValidationError as e:
        raise ApidocLoadError(f"{file_path}: invalid project metadata: {e}") from e


def read_header_description(project: ProjectInfo, base_dir: Path) -> str | None:
    """Read the file named by ``header.filename``, relative to the project file."""
    if not project.header or not project.header.filename:
        return None
    path = Path(project.header.filename)
    if not path.is_absolute():
        path = base_dir / path
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ApidocLoadError(f"header file {path}: {e}") from e


def _read_json(file_path: Path):
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ApidocLoadError(f"{file_path}: {e}") from e

    try:
        return json.loads(unwrap_define(text))
    except json.JSONDecodeError as e:
        raise ApidocLoadError(f"{file_path}: invalid JSON: {e}") from e
