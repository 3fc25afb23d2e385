"""CLI entry point for apidoc-openapi."""

import json
import logging
from pathlib import Path

import click
import yaml

from apidoc_openapi.generator.openapi import OpenApiGenerator
from apidoc_openapi.generator.validator import validate_document
from apidoc_openapi.parser.apidoc import (
    ApidocLoadError,
    parse_apidoc,
    parse_project,
    read_header_description,
)
from apidoc_openapi.parser.base import ProjectInfo
from apidoc_openapi.parser.detect import detect_format

logger = logging.getLogger(__name__)

DATA_FILES = ("api_data.json", "api_data.js")
PROJECT_FILES = ("api_project.json", "api_project.js", "apidoc.json")


class _NoAliasDumper(yaml.SafeDumper):
    def ignore_aliases(self, data):
        return True


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _find_first(directory: Path, names: tuple[str, ...]) -> Path | None:
    for name in names:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _resolve_data_file(api_data: Path) -> Path:
    if api_data.is_dir():
        found = _find_first(api_data, DATA_FILES)
        if found is None:
            raise click.ClickException(f"No {' or '.join(DATA_FILES)} in {api_data}")
        return found
    return api_data


def _load_project(data_file: Path, config: Path | None) -> tuple[ProjectInfo, str | None]:
    """Load project metadata and the optional header description file."""
    project_file = config or _find_first(data_file.parent, PROJECT_FILES)
    if project_file is None:
        logger.debug("No project file next to %s, using empty project metadata", data_file)
        return ProjectInfo(), None

    project = parse_project(project_file)
    return project, read_header_description(project, project_file.parent)


def _dump(document: dict, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.dump(document, Dumper=_NoAliasDumper, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False)


@click.group()
def main():
    """apidoc-openapi — convert apidoc output into an OpenAPI 3.0 document."""
    pass


@main.command()
@click.argument("api_data", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory for the OpenAPI document.")
@click.option("--config", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Project file (JSON or YAML) overriding api_project.json.")
@click.option("--prefix", default=None, help="Path prefix prepended to every path (overrides the project url).")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--simulate", is_flag=True, help="Convert but do not write any file.")
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging.")
def convert(api_data: Path, output: Path, config: Path | None, prefix: str | None, fmt: str, simulate: bool, verbose: bool):
    """Convert apidoc api_data (file or output directory) into swagger.json."""
    _configure_logging(verbose)

    data_file = _resolve_data_file(api_data)
    click.echo(f"Parsing {data_file} (format: {detect_format(data_file)})...")
    try:
        records = parse_apidoc(data_file)
        project, description = _load_project(data_file, config)
    except ApidocLoadError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Found {len(records)} api records.")

    if prefix is not None:
        project = project.model_copy(update={"url": prefix})

    document = OpenApiGenerator(project, description=description).generate(records)
    click.echo(f"Generated {len(document['paths'])} paths.")

    out_file = output / f"swagger.{fmt}"
    if simulate:
        logger.warning("Simulation: %s was not written", out_file)
        return

    output.mkdir(parents=True, exist_ok=True)
    out_file.write_text(_dump(document, fmt), encoding="utf-8")
    click.echo(f"OpenAPI document saved to {out_file}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def check(ctx: click.Context, doc_path: Path):
    """Report dangling $refs and duplicated components in an OpenAPI document."""
    text = doc_path.read_text(encoding="utf-8")
    try:
        document = json.loads(text) if doc_path.suffix == ".json" else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise click.ClickException(f"{doc_path}: {e}") from e
    if not isinstance(document, dict):
        raise click.ClickException(f"{doc_path}: not an OpenAPI document")

    errors = validate_document(document)
    for location, message in errors.items():
        click.echo(f"{location}: {message}")

    if errors:
        click.echo(f"{len(errors)} problems found in {doc_path}")
        ctx.exit(1)
    click.echo(f"{doc_path}: OK")
