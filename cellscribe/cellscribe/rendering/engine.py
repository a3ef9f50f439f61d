"""Template rendering engine."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from jinja2 import ChainableUndefined, Environment, Undefined

from ..core.models import OutputDefinition, RenderedOutput, TemplateCheck, TemplateContext
from ..core.values import stringify
from .filters import FILTERS

logger = logging.getLogger(__name__)

MIME_TYPES = {
    "json": "application/json",
    "xml": "application/xml",
    "csv": "text/csv",
    "txt": "text/plain",
    "html": "text/html",
    "md": "text/markdown",
    "yaml": "text/yaml",
    "yml": "text/yaml",
}
DEFAULT_MIME_TYPE = "text/plain"


class OutputRenderError(RuntimeError):
    """Raised when one output of a batch fails to render."""

    def __init__(self, output_key: str, cause: BaseException) -> None:
        super().__init__(f'Error rendering output "{output_key}": {cause}')
        self.output_key = output_key


def mime_type_for(filename: str) -> str:
    """Return the MIME type for a filename's extension (text/plain if unknown)."""
    if "." not in filename:
        return DEFAULT_MIME_TYPE
    extension = filename.rsplit(".", 1)[1].lower()
    return MIME_TYPES.get(extension, DEFAULT_MIME_TYPE)


def _finalize(value: Any) -> Any:
    if isinstance(value, Undefined):
        return ""
    if value is None or isinstance(value, (bool, float)):
        return stringify(value)
    return value


class RowEnvironment(Environment):
    """Environment resolving `a.b` on mappings by key before attribute.

    Rows carry arbitrary column names, so `row.items` or `data.values` must
    reach the data rather than the dict methods of the same name.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except (KeyError, TypeError):
                pass
        return super().getattr(obj, attribute)


def create_environment() -> Environment:
    """Build the Jinja2 environment used for every render.

    Markup escaping is off so JSON/XML/CSV come out raw, undefined variables
    (and attribute chains on them) render as empty, and block tags do not
    leave stray blank lines or indentation.
    """
    env = RowEnvironment(
        undefined=ChainableUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        finalize=_finalize,
    )
    env.filters.update(FILTERS)
    return env


def _variables(context: TemplateContext | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(context, TemplateContext):
        return context.as_mapping()
    return context


class TemplateRenderer:
    """Renders template strings and output definitions against a context.

    Instances hold no per-render state and may be shared or duplicated freely.
    """

    def __init__(self, env: Environment | None = None) -> None:
        self.env = env or create_environment()

    def render(
        self, template: str, context: TemplateContext | Mapping[str, Any]
    ) -> str:
        """Render a template string; engine errors propagate unchanged."""
        return self.env.from_string(template).render(_variables(context))

    def resolve_filename(self, filename: str, context: TemplateContext) -> str:
        """Render a filename template; table data is not visible to it."""
        return self.render(filename, context.filename_mapping())

    def render_output(
        self, output: OutputDefinition, context: TemplateContext
    ) -> RenderedOutput:
        """Render one output definition.

        Args:
            output: Output definition to render
            context: Full render context

        Returns:
            Rendered output named after its resolved filename
        """
        filename = self.resolve_filename(output.filename, context)
        content = self.render(output.template, context)
        return RenderedOutput(
            name=filename,
            filename=filename,
            content=content,
            mime_type=mime_type_for(filename),
        )

    def render_all_outputs(
        self, outputs: Mapping[str, OutputDefinition], context: TemplateContext
    ) -> list[RenderedOutput]:
        """Render every output in declared order, failing on the first error.

        Args:
            outputs: Output key -> output definition
            context: Full render context

        Returns:
            Rendered outputs named after their output keys

        Raises:
            OutputRenderError: naming the first output that failed
        """
        logger.info(f"Rendering {len(outputs)} output(s)")

        results: list[RenderedOutput] = []
        for key, output in outputs.items():
            try:
                rendered = self.render_output(output, context)
            except Exception as e:
                raise OutputRenderError(key, e) from e
            rendered.name = key
            results.append(rendered)
            logger.debug(f"Rendered output {key} → {rendered.filename}")

        return results

    def validate_template(self, template: str) -> TemplateCheck:
        """Trial-render a template against an empty context; never raises."""
        try:
            self.render(template, {"data": {}, "globals": {}})
        except Exception as e:
            return TemplateCheck(valid=False, error=str(e))
        return TemplateCheck(valid=True)
