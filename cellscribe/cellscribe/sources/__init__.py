"""Host data sources: the spreadsheet-like collaborator providing tables and named values."""

from .base import (
    DataSource,
    DataSourceError,
    TableRequest,
    convert_value,
    default_for_type,
    read_with_fallback,
)
from .memory import InMemoryDataSource
from .workbook import WorkbookDataSource

__all__ = [
    "DataSource",
    "DataSourceError",
    "InMemoryDataSource",
    "TableRequest",
    "WorkbookDataSource",
    "convert_value",
    "default_for_type",
    "read_with_fallback",
]
