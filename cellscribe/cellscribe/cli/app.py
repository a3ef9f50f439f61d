"""Main CLI application."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from typing_extensions import Annotated

from ..core.models import ValidationResult
from ..orchestration import DataOrchestrator, validate_template_structure
from ..rendering import OutputRenderError, TemplateRenderer
from ..rendering.io import DeliveryError, deliver_outputs
from ..rendering.starters import generate_starter_template
from .parsers import open_source, parse_file_mode, parse_template

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="cellscribe",
    help="Render spreadsheet tables and named values through Jinja2 templates.",
    no_args_is_help=True,
)

TemplateArg = Annotated[
    Path,
    typer.Argument(
        help="Template definition file (.json, .yaml or .yml).",
        metavar="TEMPLATE",
    ),
]
WorkbookOpt = Annotated[
    str,
    typer.Option(
        "--workbook",
        help="Excel workbook (.xlsx) providing tables and names.",
        metavar="XLSX",
    ),
]
DataOpt = Annotated[
    str,
    typer.Option(
        "--data",
        help='JSON/YAML data file: {"tables": {...}, "names": {...}}.',
        metavar="FILE",
    ),
]


def _echo_result(result: ValidationResult) -> None:
    for issue in result.errors:
        typer.echo(f"[{issue.severity}] {issue.field}: {issue.message}", err=True)


@app.callback()
def configure(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose logging.",
        ),
    ] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


@app.command()
def render(
    template_path: TemplateArg,
    workbook: WorkbookOpt = "",
    data: DataOpt = "",
    dest_root: Annotated[
        str,
        typer.Option(
            "--dest",
            help="Directory receiving the file or archive (default: cwd).",
            metavar="DIR",
        ),
    ] = "",
    file_mode: Annotated[
        str,
        typer.Option(
            "--mode",
            help="File permissions in octal (default: 0644).",
            metavar="OCTAL",
        ),
    ] = "0644",
) -> None:
    """Render every output of TEMPLATE; several outputs are bundled in a ZIP."""
    template = parse_template(template_path)
    source = open_source(workbook, data)
    mode = parse_file_mode(file_mode)
    dest_path = Path(dest_root) if dest_root else Path.cwd()

    structure = validate_template_structure(template)
    if not structure.valid:
        _echo_result(structure)
        raise typer.Exit(code=1)

    orchestrator = DataOrchestrator(source)
    availability = orchestrator.validate_data_availability(template)
    _echo_result(availability)
    if not availability.valid:
        raise typer.Exit(code=1)

    try:
        outputs = orchestrator.generate_outputs(template)
    except OutputRenderError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e

    try:
        path = deliver_outputs(outputs, dest_path, template.metadata.name or None, file_mode=mode)
    except DeliveryError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e
    typer.echo(str(path))


@app.command()
def preview(
    template_path: TemplateArg,
    output_key: Annotated[str, typer.Argument(help="Key of the output to render.")],
    workbook: WorkbookOpt = "",
    data: DataOpt = "",
) -> None:
    """Print one rendered output to stdout."""
    template = parse_template(template_path)
    source = open_source(workbook, data)

    orchestrator = DataOrchestrator(source)
    try:
        output = orchestrator.preview_output(template, output_key)
    except Exception as e:
        typer.echo(f'Error rendering output "{output_key}": {e}', err=True)
        raise typer.Exit(code=1) from e

    if output is None:
        known = ", ".join(template.outputs) or "none"
        raise typer.BadParameter(
            f"Unknown output {output_key!r}. Known outputs: {known}", param_hint="OUTPUT_KEY"
        )

    logger.debug(f"{output.filename} ({output.mime_type})")
    typer.echo(output.content, nl=False)


@app.command()
def validate(
    template_path: TemplateArg,
    workbook: WorkbookOpt = "",
    data: DataOpt = "",
) -> None:
    """Validate TEMPLATE; with a data source, also check tables and names exist."""
    template = parse_template(template_path)
    source = open_source(workbook, data, required=False)

    result = validate_template_structure(template)
    _echo_result(result)
    valid = result.valid

    if source is not None:
        availability = DataOrchestrator(source).validate_data_availability(template)
        _echo_result(availability)
        valid = valid and availability.valid

    renderer = TemplateRenderer()
    for key, output in template.outputs.items():
        for part, text in (("filename", output.filename), ("template", output.template)):
            check = renderer.validate_template(text)
            if not check.valid:
                typer.echo(f"[error] outputs.{key}.{part}: {check.error}", err=True)
                valid = False

    if not valid:
        raise typer.Exit(code=1)
    typer.echo("Template is valid")


@app.command("check-expression")
def check_expression(
    path: Annotated[Path, typer.Argument(help="File holding a single template string.")],
) -> None:
    """Check the syntax of one template file."""
    if not path.exists():
        raise typer.BadParameter(f"File not found: {path}", param_hint="PATH")

    check = TemplateRenderer().validate_template(path.read_text(encoding="utf-8"))
    if not check.valid:
        typer.echo(check.error, err=True)
        raise typer.Exit(code=1)
    typer.echo("Template syntax is valid")


@app.command()
def sources(
    workbook: WorkbookOpt = "",
    data: DataOpt = "",
) -> None:
    """List the tables and named values available in a data source."""
    source = open_source(workbook, data)

    for table in source.list_tables():
        location = f" @ {table.location}" if table.location else ""
        typer.echo(f"table  {table.name} ({table.row_count} rows){location}")
        typer.echo(f"       columns: {', '.join(table.columns)}")
    for info in source.list_named_values():
        location = f" @ {info.location}" if info.location else ""
        typer.echo(f"name   {info.name}{location}")


@app.command()
def locate(
    name: Annotated[str, typer.Argument(help="Table or named value to locate.")],
    workbook: WorkbookOpt = "",
    data: DataOpt = "",
) -> None:
    """Print where a table or named value lives in the data source."""
    location = DataOrchestrator(open_source(workbook, data)).navigate_to(name)
    if location is None:
        typer.echo(f"{name!r} not found", err=True)
        raise typer.Exit(code=1)
    typer.echo(location)


@app.command()
def starter(
    filename: Annotated[
        str, typer.Argument(help="Output filename; its extension picks the format.")
    ],
    workbook: WorkbookOpt = "",
    data: DataOpt = "",
) -> None:
    """Print a starter content template for FILENAME."""
    source = open_source(workbook, data, required=False)
    tables = source.list_tables() if source is not None else []
    typer.echo(generate_starter_template(filename, tables))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
