"""Template validation tests."""

from cellscribe.core.models import NamedValueInfo, TableInfo, TemplateDefinition
from cellscribe.orchestration import validate_data_availability, validate_template_structure
from cellscribe.sources import InMemoryDataSource


def _fields(result):
    return [issue.field for issue in result.errors]


def test_valid_template_has_no_issues(template):
    result = validate_template_structure(template)
    assert result.valid
    assert result.errors == []


def test_missing_version_and_outputs_reports_exactly_two_errors():
    template = TemplateDefinition.model_validate(
        {"metadata": {"name": "T"}, "tables": [{"name": "Products"}], "outputs": {}}
    )
    result = validate_template_structure(template)
    assert not result.valid
    assert _fields(result) == ["metadata.version", "outputs"]
    assert all(issue.severity == "error" for issue in result.errors)


def test_empty_template_reports_every_problem():
    result = validate_template_structure(TemplateDefinition())
    assert _fields(result) == ["metadata.name", "metadata.version", "tables", "outputs"]


def test_nested_required_fields():
    template = TemplateDefinition.model_validate(
        {
            "metadata": {"name": "", "version": "1"},
            "tables": [{"name": "ok"}, {"name": ""}],
            "outputs": {"a": {"filename": "a.txt", "template": ""}, "b": {"template": "x"}},
        }
    )
    result = validate_template_structure(template)
    assert _fields(result) == [
        "metadata.name",
        "tables[1].name",
        "outputs.a.template",
        "outputs.b.filename",
    ]


def test_whitespace_only_values_count_as_present():
    template = TemplateDefinition.model_validate(
        {
            "metadata": {"name": " ", "version": " "},
            "tables": [{"name": " "}],
            "outputs": {"a": {"filename": " ", "template": "\n"}},
        }
    )
    assert validate_template_structure(template).valid


def test_missing_table_is_error_and_missing_global_is_warning(template):
    source = InMemoryDataSource(tables={"Other": []}, names={"Project": "Acme"})
    result = validate_data_availability(template, source)

    assert not result.valid
    by_field = {issue.field: issue for issue in result.errors}
    assert by_field["tables.Products"].severity == "error"
    assert by_field["globals.Threshold"].severity == "warning"
    assert "default" in by_field["globals.Threshold"].message
    assert [w.field for w in result.warnings] == ["globals.Threshold"]


def test_missing_global_alone_keeps_template_valid(template, source):
    del source.names["Threshold"]
    result = validate_data_availability(template, source)
    assert result.valid
    assert len(result.warnings) == 1


def test_all_available(template, source):
    result = validate_data_availability(template, source)
    assert result.valid
    assert result.errors == []


class _BrokenSource(InMemoryDataSource):
    def list_tables(self) -> list[TableInfo]:
        raise ConnectionError("host unavailable")

    def list_named_values(self) -> list[NamedValueInfo]:
        raise ConnectionError("host unavailable")


def test_availability_never_raises_on_host_failure(template):
    result = validate_data_availability(template, _BrokenSource())
    assert not result.valid
    assert _fields(result) == ["tables.Products", "globals.Project", "globals.Threshold"]
