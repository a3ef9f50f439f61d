"""Data source tests: value conversion, in-memory data and Excel workbooks."""

import datetime as dt
import json

import pytest
from openpyxl import Workbook
from openpyxl.workbook.defined_name import DefinedName
from openpyxl.worksheet.table import Table

from cellscribe.core.models import GlobalBinding
from cellscribe.sources import (
    DataSourceError,
    InMemoryDataSource,
    TableRequest,
    WorkbookDataSource,
    convert_value,
    default_for_type,
)


@pytest.mark.parametrize(
    "value,value_type,expected",
    [
        ("12.5kg", "number", 12.5),
        ("5", "number", 5),
        ("abc", "number", 0),
        (7.25, "number", 7.25),
        ("Yes", "boolean", True),
        ("1", "boolean", True),
        ("no", "boolean", False),
        (True, "boolean", True),
        (3.0, "string", "3"),
        (False, "string", "false"),
        ("plain", "date", "plain"),
        (45296, "date", "2024-01-05T00:00:00.000Z"),
        (dt.datetime(2024, 1, 5, 8, 30), "date", "2024-01-05T08:30:00.000"),
        (dt.date(2024, 1, 5), "date", "2024-01-05T00:00:00.000"),
    ],
)
def test_convert_value(value, value_type, expected):
    assert convert_value(value, value_type) == expected


def test_default_for_type():
    assert default_for_type("string") == ""
    assert default_for_type("number") == 0
    assert default_for_type("boolean") is False
    assert default_for_type("date").endswith("Z")


def test_read_global_falls_back_for_blank_and_missing():
    source = InMemoryDataSource(names={"Empty": "", "Count": "3"})
    assert source.read_global("Empty", "string", "dflt") == "dflt"
    assert source.read_global("Missing", "number") == 0
    assert source.read_global("Missing", "boolean", True) is True
    assert source.read_global("Count", "number", 9) == 3


def test_read_all_globals_keeps_declaration_order():
    source = InMemoryDataSource(names={"b": "2", "a": "1"})
    bindings = [GlobalBinding(name="a", type="number"), GlobalBinding(name="b")]
    assert list(source.read_all_globals(bindings).items()) == [("a", 1), ("b", "2")]


def test_memory_source_renames_columns_and_copies_rows():
    rows = [{"A": 1, "B": 2}]
    source = InMemoryDataSource(tables={"T": rows})
    result = source.read_table("T", {"A": "alpha", "Z": "zeta"})
    assert result == [{"alpha": 1, "B": 2}]
    result[0]["alpha"] = 99
    assert rows == [{"A": 1, "B": 2}]


def test_memory_source_listing():
    source = InMemoryDataSource(
        tables={"T": [{"A": 1}, {"A": 2, "B": 3}]}, names={"N": "v"}
    )
    [table] = source.list_tables()
    assert (table.name, table.columns, table.row_count) == ("T", ["A", "B"], 2)
    assert [info.name for info in source.list_named_values()] == ["N"]


def test_memory_source_missing_items_raise():
    source = InMemoryDataSource()
    with pytest.raises(DataSourceError):
        source.read_table("T")
    with pytest.raises(DataSourceError):
        source.read_named_value("N")
    with pytest.raises(DataSourceError):
        source.locate("N")


def test_read_tables_isolates_failures():
    source = InMemoryDataSource(tables={"Good": [{"x": 1}]})
    result = source.read_tables(
        [TableRequest(key="Bad", table_name="Bad"), TableRequest(key="Good", table_name="Good")]
    )
    assert result == {"Bad": [], "Good": [{"x": 1}]}


def test_memory_source_from_files(tmp_path):
    payload = {"tables": {"T": [{"A": 1}]}, "names": {"N": "v"}}
    json_path = tmp_path / "data.json"
    json_path.write_text(json.dumps(payload), encoding="utf-8")
    yaml_path = tmp_path / "data.yml"
    yaml_path.write_text("tables:\n  T:\n    - A: 1\nnames:\n  N: v\n", encoding="utf-8")

    for path in (json_path, yaml_path):
        source = InMemoryDataSource.from_file(path)
        assert source.tables == payload["tables"]
        assert source.names == payload["names"]


def test_memory_source_from_invalid_files(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text("{oops", encoding="utf-8")
    with pytest.raises(DataSourceError):
        InMemoryDataSource.from_file(bad)

    listing = tmp_path / "list.json"
    listing.write_text("[]", encoding="utf-8")
    with pytest.raises(DataSourceError):
        InMemoryDataSource.from_file(listing)

    with pytest.raises(FileNotFoundError):
        InMemoryDataSource.from_file(tmp_path / "missing.json")


@pytest.fixture
def workbook_path(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.title = "Data"
    ws.append(["Product Name", "Price", "Added"])
    ws.append(["Widget", 9.5, dt.datetime(2024, 1, 5)])
    ws.append(["Gadget", 20, None])
    ws.add_table(Table(displayName="Products", ref="A1:C3"))
    ws["E1"] = "Acme"
    ws["E2"] = "secret"

    summary = wb.create_sheet("Summary")
    summary.append(["Region", "Total"])
    summary.append(["North", 10])
    summary.append(["Sum", 10])
    summary.add_table(Table(displayName="Regions", ref="A1:B3", totalsRowCount=1))

    wb.defined_names.add(DefinedName("Project", attr_text="Data!$E$1"))
    wb.defined_names.add(DefinedName("FirstProduct", attr_text="Data!$A$2:$B$3"))
    wb.defined_names.add(DefinedName("Hidden", attr_text="Data!$E$2", hidden=True))

    path = tmp_path / "book.xlsx"
    wb.save(path)
    return path


def test_workbook_lists_tables(workbook_path):
    tables = {t.name: t for t in WorkbookDataSource(workbook_path).list_tables()}
    assert tables["Products"].columns == ["Product Name", "Price", "Added"]
    assert tables["Products"].row_count == 2
    assert tables["Products"].location == "Data!A1:C3"
    assert tables["Regions"].row_count == 1


def test_workbook_reads_table_rows(workbook_path):
    rows = WorkbookDataSource(workbook_path).read_table("Products", {"Product Name": "name"})
    assert rows == [
        {"name": "Widget", "Price": 9.5, "Added": dt.datetime(2024, 1, 5)},
        {"name": "Gadget", "Price": 20, "Added": None},
    ]


def test_workbook_excludes_totals_row(workbook_path):
    rows = WorkbookDataSource(workbook_path).read_table("Regions")
    assert rows == [{"Region": "North", "Total": 10}]


def test_workbook_named_values(workbook_path):
    source = WorkbookDataSource(workbook_path)
    names = [info.name for info in source.list_named_values()]
    assert "Project" in names
    assert "Hidden" not in names
    assert source.read_named_value("Project") == "Acme"
    assert source.read_named_value("FirstProduct") == "Widget"
    assert source.read_global("Project") == "Acme"


def test_workbook_missing_items(workbook_path):
    source = WorkbookDataSource(workbook_path)
    with pytest.raises(DataSourceError):
        source.read_table("Nope")
    with pytest.raises(DataSourceError):
        source.read_named_value("Nope")
    with pytest.raises(DataSourceError):
        source.locate("Nope")


def test_workbook_locate(workbook_path):
    source = WorkbookDataSource(workbook_path)
    assert source.locate("Products") == "Data!A1:C3"
    assert source.locate("Project") == "Data!$E$1"


def test_workbook_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        WorkbookDataSource(tmp_path / "missing.xlsx")
