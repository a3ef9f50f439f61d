"""Template definition validation: structure and host data availability."""

from __future__ import annotations

import logging

from ..core.models import TemplateDefinition, ValidationIssue, ValidationResult
from ..sources.base import DataSource, read_with_fallback

logger = logging.getLogger(__name__)


def _empty(value: str | None) -> bool:
    return not value


def validate_template_structure(template: TemplateDefinition) -> ValidationResult:
    """Check required fields without touching the host.

    Every check runs, so one call reports all structural problems.
    """
    issues: list[ValidationIssue] = []

    if _empty(template.metadata.name):
        issues.append(ValidationIssue(field="metadata.name", message="Template name is required"))
    if _empty(template.metadata.version):
        issues.append(
            ValidationIssue(field="metadata.version", message="Template version is required")
        )

    if not template.tables:
        issues.append(
            ValidationIssue(field="tables", message="At least one table mapping is required")
        )
    for index, table in enumerate(template.tables):
        if _empty(table.name):
            issues.append(
                ValidationIssue(field=f"tables[{index}].name", message="Table name is required")
            )

    if not template.outputs:
        issues.append(ValidationIssue(field="outputs", message="At least one output is required"))
    for key, output in template.outputs.items():
        if _empty(output.template):
            issues.append(
                ValidationIssue(
                    field=f"outputs.{key}.template", message="Template content is required"
                )
            )
        if _empty(output.filename):
            issues.append(
                ValidationIssue(field=f"outputs.{key}.filename", message="Filename is required")
            )

    result = ValidationResult.from_issues(issues)
    logger.debug(f"Structure validation: {len(issues)} issue(s)")
    return result


def validate_data_availability(
    template: TemplateDefinition, source: DataSource
) -> ValidationResult:
    """Check that referenced tables and named values exist in the host.

    A missing table is an error; a missing named value is only a warning
    because its default is substituted at render time.
    """
    issues: list[ValidationIssue] = []

    available_tables = {
        table.name for table in read_with_fallback(source.list_tables, list, "table list")
    }
    for table in template.tables:
        if table.name not in available_tables:
            issues.append(
                ValidationIssue(
                    field=f"tables.{table.name}",
                    message=f'Table "{table.name}" not found in the data source',
                )
            )

    if template.globals:
        available_names = {
            info.name
            for info in read_with_fallback(source.list_named_values, list, "named values")
        }
        for binding in template.globals:
            if binding.name not in available_names:
                issues.append(
                    ValidationIssue(
                        field=f"globals.{binding.name}",
                        message=f'Named value "{binding.name}" not found. Will use default value.',
                        severity="warning",
                    )
                )

    result = ValidationResult.from_issues(issues)
    if not result.valid:
        logger.warning(f"Data availability check failed with {len(issues)} issue(s)")
    return result
