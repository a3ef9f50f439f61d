"""Shared fixtures for cellscribe tests."""

from __future__ import annotations

import datetime as dt

import pytest

from cellscribe.core.models import TemplateDefinition
from cellscribe.orchestration import DataOrchestrator
from cellscribe.sources import InMemoryDataSource

FIXED_NOW = dt.datetime(2024, 3, 9, 7, 5, 3)


@pytest.fixture
def template_data() -> dict:
    return {
        "metadata": {"name": "Catalog", "version": "1.0.0"},
        "tables": [
            {
                "name": "Products",
                "columnMap": {"Product Name": "name"},
                "valueMappings": [
                    {
                        "column": "Status",
                        "outputField": "statusLabel",
                        "map": {"A": "Active", "D": "Discontinued"},
                        "default": "Unknown",
                    }
                ],
            }
        ],
        "globals": [
            {"name": "Project", "type": "string", "defaultValue": "Untitled"},
            {"name": "Threshold", "type": "number"},
        ],
        "outputs": {
            "products": {
                "filename": "{{ globals.Project }}.json",
                "template": "{{ data.Products | json }}",
            },
            "report": {
                "filename": "report_{{ currentdatetime }}.txt",
                "template": (
                    "{% for row in data.Products %}\n"
                    "{{ row.name }}: {{ row.statusLabel }}\n"
                    "{% endfor %}"
                ),
            },
        },
    }


@pytest.fixture
def template(template_data: dict) -> TemplateDefinition:
    return TemplateDefinition.model_validate(template_data)


@pytest.fixture
def source() -> InMemoryDataSource:
    return InMemoryDataSource(
        tables={
            "Products": [
                {"Product Name": "Widget", "Status": "A", "Price": 9.5},
                {"Product Name": "Gadget", "Status": "X", "Price": 20.0},
                {"Product Name": "Gizmo", "Status": None, "Price": 3},
            ]
        },
        names={"Project": "Acme", "Threshold": "12.5kg"},
    )


@pytest.fixture
def orchestrator(source: InMemoryDataSource) -> DataOrchestrator:
    return DataOrchestrator(source, clock=lambda: FIXED_NOW)
