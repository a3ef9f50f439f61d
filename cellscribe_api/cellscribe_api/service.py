from __future__ import annotations

import logging

from cellscribe.core.models import RenderedOutput, ValidationResult
from cellscribe.orchestration import DataOrchestrator, validate_template_structure
from cellscribe.sources import InMemoryDataSource

from .models import RenderRequest

logger = logging.getLogger(__name__)


class TemplateStructureError(Exception):
    """Raised when a template fails structural validation before rendering."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__("Template definition is structurally invalid")
        self.result = result


def _orchestrator(request: RenderRequest) -> DataOrchestrator:
    return DataOrchestrator(InMemoryDataSource(request.tables, request.names))


def _require_valid_structure(request: RenderRequest) -> None:
    result = validate_template_structure(request.template)
    if not result.valid:
        raise TemplateStructureError(result)


def render_outputs(request: RenderRequest) -> list[RenderedOutput]:
    _require_valid_structure(request)
    return _orchestrator(request).generate_outputs(request.template)


def preview_output(request: RenderRequest, output_key: str) -> RenderedOutput | None:
    return _orchestrator(request).preview_output(request.template, output_key)


def validate_request(request: RenderRequest) -> ValidationResult:
    """Structure and data availability checks, merged into one result."""
    orchestrator = _orchestrator(request)
    structure = orchestrator.validate_structure(request.template)
    availability = orchestrator.validate_data_availability(request.template)
    merged = ValidationResult.from_issues(structure.errors + availability.errors)
    logger.debug(f"Validation: valid={merged.valid}, {len(merged.errors)} issue(s)")
    return merged
