"""Starter template generation tests."""

import json

import pytest

from cellscribe.core.models import TableInfo, TemplateContext
from cellscribe.rendering import TemplateRenderer
from cellscribe.rendering.starters import data_access, generate_starter_template, table_key

ORDERS = TableInfo(name="Sales Orders", columns=["Customer", "Total Price", "note"], row_count=2)
ROWS = [
    {"Customer": "Ann, Ltd", "Total Price": 12, "note": "<fast>"},
    {"Customer": "Bob", "Total Price": 3.5, "note": None},
]


def _render(filename: str) -> str:
    template = generate_starter_template(filename, [ORDERS])
    context = TemplateContext(data={"Sales Orders": ROWS})
    return TemplateRenderer().render(template, context)


def test_table_key_and_access():
    assert table_key("Sales  Orders!") == "sales_orders"
    assert data_access("Orders") == "data.Orders"
    assert data_access("Sales Orders") == "data['Sales Orders']"


def test_json_starter_renders_valid_json():
    parsed = json.loads(_render("orders.json"))
    assert parsed == [
        {"Customer": "Ann, Ltd", "Total Price": 12, "note": "<fast>"},
        {"Customer": "Bob", "Total Price": 3.5, "note": ""},
    ]


def test_csv_starter_escapes_values():
    assert _render("orders.csv").splitlines() == [
        "Customer,Total Price,note",
        '"Ann, Ltd",12,<fast>',
        "Bob,3.5,",
    ]


def test_xml_starter_uses_table_name():
    rendered = _render("orders.xml")
    assert "<sales_orders>" in rendered
    assert "<sales_order>" in rendered
    assert "<note>&lt;fast&gt;</note>" in rendered
    assert "<Total_Price>12</Total_Price>" in rendered


@pytest.mark.parametrize("filename", ["page.html", "page.HTM"])
def test_html_starter(filename):
    rendered = _render(filename)
    assert "<th>Customer</th>" in rendered
    assert "<td>Bob</td>" in rendered


@pytest.mark.parametrize("filename", ["notes.txt", "notes", "notes.md"])
def test_text_starter_is_the_fallback(filename):
    rendered = _render(filename)
    assert rendered.startswith("Sales Orders\n============\n")
    assert "Customer: Ann, Ltd" in rendered


@pytest.mark.parametrize("filename", ["a.json", "a.csv", "a.xml", "a.html", "a.txt"])
def test_starters_without_tables_are_valid_templates(filename):
    template = generate_starter_template(filename, [])
    assert template
    assert TemplateRenderer().validate_template(template).valid
