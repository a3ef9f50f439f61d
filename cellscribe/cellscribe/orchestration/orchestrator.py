"""Coordinates host reads, value mapping and rendering."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Callable

from ..core.mapping import apply_mappings_to_all_tables
from ..core.models import RenderedOutput, TemplateContext, TemplateDefinition, ValidationResult
from ..rendering.engine import TemplateRenderer
from ..sources.base import DataSource, TableRequest
from .validation import validate_data_availability, validate_template_structure

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def format_timestamp(moment: dt.datetime) -> str:
    """Filename-safe timestamp, YYYY-MM-DD_HH-mm-ss."""
    return moment.strftime(TIMESTAMP_FORMAT)


class DataOrchestrator:
    """Builds render contexts from a data source and renders templates.

    Holds no state between calls: every build re-reads the host, so several
    orchestrators (or concurrent callers) never share mutable data.

    Args:
        source: Host data source
        renderer: Template renderer (a fresh one by default)
        clock: Returns the local wall-clock time
    """

    def __init__(
        self,
        source: DataSource,
        renderer: TemplateRenderer | None = None,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
    ) -> None:
        self.source = source
        self.renderer = renderer or TemplateRenderer()
        self.clock = clock

    def build_context(self, template: TemplateDefinition) -> TemplateContext:
        """Read globals and tables for a template and apply its value mappings."""
        logger.debug(f"Building context for template: {template.metadata.name or '<unnamed>'}")

        globals_ = self.source.read_all_globals(template.globals) if template.globals else {}

        requests = [
            TableRequest(key=table.name, table_name=table.name, column_map=table.column_map)
            for table in template.tables
        ]
        data = self.source.read_tables(requests)
        data = apply_mappings_to_all_tables(
            data, {table.name: table.value_mappings for table in template.tables}
        )

        return TemplateContext(
            globals=globals_,
            data=data,
            currentdatetime=format_timestamp(self.clock()),
        )

    def generate_outputs(self, template: TemplateDefinition) -> list[RenderedOutput]:
        """Render every output of a template against one shared context."""
        context = self.build_context(template)
        outputs = self.renderer.render_all_outputs(template.outputs, context)
        logger.info(f"Generated {len(outputs)} output(s)")
        return outputs

    def preview_output(
        self, template: TemplateDefinition, output_key: str
    ) -> RenderedOutput | None:
        """Render a single output, or return None when the key is unknown."""
        output = template.outputs.get(output_key)
        if output is None:
            return None

        context = self.build_context(template)
        rendered = self.renderer.render_output(output, context)
        rendered.name = output_key
        return rendered

    def validate_structure(self, template: TemplateDefinition) -> ValidationResult:
        return validate_template_structure(template)

    def validate_data_availability(self, template: TemplateDefinition) -> ValidationResult:
        return validate_data_availability(template, self.source)

    def navigate_to(self, name: str) -> str | None:
        """Return the host location of a table or named value, if it can be found."""
        try:
            return self.source.locate(name)
        except Exception as e:
            logger.warning(f"Could not locate {name!r}: {e}")
            return None
