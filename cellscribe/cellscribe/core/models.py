"""Domain models for template definitions, render context and results."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Scalar = str | int | float | bool
GlobalType = Literal["string", "number", "boolean", "date"]
Severity = Literal["error", "warning"]


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TemplateMetadata(_Model):
    """Descriptive header of a template definition."""

    name: str = Field(default="", description="Template name")
    version: str = Field(default="", description="Template version")
    description: str | None = Field(default=None, description="Optional description")


class ValueMapping(_Model):
    """Lookup-with-default transform deriving a new field from a column."""

    column: str = Field(..., description="Source column name")
    output_field: str = Field(..., alias="outputField", description="Destination field")
    lookup: dict[str, Scalar] = Field(
        default_factory=dict, alias="map", description="Stringified source value -> output"
    )
    default: Scalar | None = Field(
        default=None, description="Value used when the source is missing or unmapped"
    )


class TableBinding(_Model):
    """Reference to a host table, with optional renames and value mappings."""

    name: str = Field(default="", description="Host table name (case sensitive)")
    column_map: dict[str, str] | None = Field(
        default=None, alias="columnMap", description="Source header -> template field"
    )
    value_mappings: list[ValueMapping] | None = Field(
        default=None, alias="valueMappings", description="Mapping rules, applied in order"
    )


class GlobalBinding(_Model):
    """Reference to a host named value exposed as ``globals.<name>``."""

    name: str = Field(..., description="Host named value (case sensitive)")
    type: GlobalType = Field(default="string", description="Target type for conversion")
    default_value: Scalar | None = Field(
        default=None, alias="defaultValue", description="Used when absent or empty"
    )


class OutputDefinition(_Model):
    """One generated file: a filename template plus a content template."""

    filename: str = Field(default="", description="Filename template")
    template: str = Field(default="", description="Content template")
    description: str | None = Field(default=None, description="Optional description")


class TemplateDefinition(_Model):
    """The persisted configuration artifact.

    Required fields load as empty values when absent so that structural
    problems are reported by the validator rather than by the parser.
    """

    metadata: TemplateMetadata = Field(default_factory=TemplateMetadata)
    tables: list[TableBinding] = Field(default_factory=list)
    globals: list[GlobalBinding] | None = Field(default=None)
    outputs: dict[str, OutputDefinition] = Field(default_factory=dict)


class TemplateContext(_Model):
    """Per-render data passed to the template engine."""

    globals: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    currentdatetime: str = Field(default="", description="YYYY-MM-DD_HH-mm-ss")

    def as_mapping(self) -> dict[str, Any]:
        """Return the context as template variables (rows are not copied)."""
        return {
            "globals": self.globals,
            "data": self.data,
            "currentdatetime": self.currentdatetime,
        }

    def filename_mapping(self) -> dict[str, Any]:
        """Return the restricted variables available to filename templates."""
        return {"globals": self.globals, "currentdatetime": self.currentdatetime}


class RenderedOutput(_Model):
    """Final name/filename/content/MIME tuple for one output definition."""

    name: str
    filename: str
    content: str
    mime_type: str = Field(default="text/plain", alias="mimeType")


class ValidationIssue(_Model):
    field: str
    message: str
    severity: Severity = "error"


class ValidationResult(_Model):
    """Validity flag plus the ordered list of issues found."""

    valid: bool = True
    errors: list[ValidationIssue] = Field(default_factory=list)

    @classmethod
    def from_issues(cls, issues: list[ValidationIssue]) -> ValidationResult:
        valid = not any(issue.severity == "error" for issue in issues)
        return cls(valid=valid, errors=list(issues))

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.errors if issue.severity == "warning"]


class TemplateCheck(_Model):
    """Outcome of a standalone template syntax check."""

    valid: bool
    error: str | None = None


class TableInfo(_Model):
    """A host table as advertised by a data source."""

    name: str
    columns: list[str] = Field(default_factory=list)
    row_count: int = Field(default=0, alias="rowCount")
    location: str | None = Field(default=None, description="Host address, if known")


class NamedValueInfo(_Model):
    """A host named value as advertised by a data source."""

    name: str
    location: str | None = Field(default=None, description="Host address, if known")
