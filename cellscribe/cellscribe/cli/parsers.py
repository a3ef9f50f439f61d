"""CLI argument parsers and validators."""

from __future__ import annotations

from pathlib import Path

import typer

from ..core.loader import TemplateLoadError, load_template_definition
from ..core.models import TemplateDefinition
from ..sources.base import DataSource, DataSourceError
from ..sources.memory import InMemoryDataSource
from ..sources.workbook import WorkbookDataSource


def parse_file_mode(value: str) -> int:
    """Parse octal file mode string."""
    try:
        return int(value, 8)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid octal mode: {value!r}") from e


def parse_template(path: Path) -> TemplateDefinition:
    """Load a template definition, reporting problems as bad parameters."""
    try:
        return load_template_definition(path)
    except (FileNotFoundError, TemplateLoadError) as e:
        raise typer.BadParameter(str(e), param_hint="TEMPLATE") from e


def open_source(workbook: str, data: str, *, required: bool = True) -> DataSource | None:
    """Open the data source selected by --workbook or --data."""
    if workbook and data:
        raise typer.BadParameter("Use either --workbook or --data, not both")
    if not workbook and not data:
        if required:
            raise typer.BadParameter("A data source is required: --workbook or --data")
        return None

    try:
        if workbook:
            return WorkbookDataSource(Path(workbook))
        return InMemoryDataSource.from_file(Path(data))
    except (FileNotFoundError, DataSourceError) as e:
        raise typer.BadParameter(str(e)) from e
