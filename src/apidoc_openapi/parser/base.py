"""Unified data models for parsed apidoc annotations.

The loader converts apidoc's ``api_data.json`` / ``api_project.json`` output
into these models for the OpenAPI generator. Field aliases follow apidoc's
own key names so records validate straight from its JSON.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldDeclaration(BaseModel):
    """A single declared field (``@apiParam``, ``@apiHeader``, ``@apiSuccess``)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    field: str  # dotted path, e.g. user.address.city
    type: str = "String"  # String / Number / Object / Object[] / String[] ...
    description: str = ""
    optional: bool = False
    default_value: str | None = Field(default=None, alias="defaultValue")
    allowed_values: list[str] | None = Field(default=None, alias="allowedValues")
    size: str | None = None  # min..max


class LiteralExample(BaseModel):
    """A raw example blob: optional HTTP status line followed by a JSON payload."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    content: str = ""
    type: str = "json"


class FieldGroup(BaseModel):
    """Declared fields grouped by bucket, plus the examples of the same group."""

    model_config = ConfigDict(frozen=True)

    fields: dict[str, list[FieldDeclaration]] = {}
    examples: list[LiteralExample] = []

    def bucket(self, name: str) -> list[FieldDeclaration]:
        return self.fields.get(name, [])


class AnnotationRecord(BaseModel):
    """One documented endpoint revision as emitted by apidoc."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    url: str
    http_method: str = Field(alias="type")  # get / post / put / delete / patch
    version: str = "0.0.0"
    group: str = ""
    name: str = ""
    title: str = ""
    description: str = ""
    parameter: FieldGroup = FieldGroup()
    header: FieldGroup = FieldGroup()
    success: FieldGroup = FieldGroup()
    error: FieldGroup = FieldGroup()
    examples: list[LiteralExample] = []  # request examples (@apiExample)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value):
        return str(value)

    @property
    def verb(self) -> str:
        return self.http_method.lower()


class HeaderFile(BaseModel):
    filename: str | None = None
    title: str | None = None


class ProjectInfo(BaseModel):
    """Project metadata from ``api_project.json`` / ``apidoc.json``."""

    title: str | None = None
    name: str = ""
    version: str = "0.0.0"
    description: str = ""
    url: str = ""  # path prefix prepended to every templated path
    header: HeaderFile | None = None

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, value):
        return str(value)

    @property
    def display_title(self) -> str:
        return self.title or self.name
