"""Excel workbook data source backed by openpyxl.

Tables are Excel Tables (Insert > Table); named values are visible,
workbook-scoped defined names. The file is re-read on every call so that
edits saved between two renders are picked up.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Mapping

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.table import Table
from openpyxl.worksheet.worksheet import Worksheet

from ..core.models import NamedValueInfo, TableInfo
from ..core.values import stringify
from .base import DataSource, DataSourceError, rename_columns

logger = logging.getLogger(__name__)


def _split_rows(ws: Worksheet, table: Table) -> tuple[list[str], list[tuple[Any, ...]]]:
    """Return (headers, body rows) for an Excel Table, excluding a totals row."""
    rows = [tuple(cell.value for cell in row) for row in ws[table.ref]]
    header_count = 1 if table.headerRowCount is None else table.headerRowCount
    totals_count = table.totalsRowCount or 0

    if header_count:
        headers = [stringify(value) for value in rows[0]]
    else:
        headers = [f"Column{index + 1}" for index in range(len(rows[0]) if rows else 0)]
    body = rows[header_count : len(rows) - totals_count]
    return headers, body


class WorkbookDataSource(DataSource):
    """Reads tables and named values from an ``.xlsx`` workbook."""

    def __init__(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"Workbook not found: {path}")
        self.path = path

    @contextmanager
    def _workbook(self) -> Iterator[Workbook]:
        # Cached formula results, not the formulas themselves
        wb = load_workbook(self.path, data_only=True)
        try:
            yield wb
        finally:
            wb.close()

    def _find_table(self, wb: Workbook, table_name: str) -> tuple[Worksheet, Table]:
        for ws in wb.worksheets:
            if table_name in ws.tables:
                return ws, ws.tables[table_name]
        raise DataSourceError(f'Excel Table "{table_name}" not found in {self.path}')

    @staticmethod
    def _visible_names(wb: Workbook) -> dict[str, Any]:
        return {
            name: defn
            for name, defn in wb.defined_names.items()
            if not defn.hidden
        }

    def list_tables(self) -> list[TableInfo]:
        infos: list[TableInfo] = []
        with self._workbook() as wb:
            for ws in wb.worksheets:
                for table in ws.tables.values():
                    headers, body = _split_rows(ws, table)
                    infos.append(
                        TableInfo(
                            name=table.name,
                            columns=headers,
                            row_count=len(body),
                            location=f"{ws.title}!{table.ref}",
                        )
                    )
        logger.debug(f"Found {len(infos)} table(s) in {self.path}")
        return infos

    def read_table(
        self, table_name: str, column_map: Mapping[str, str] | None = None
    ) -> list[dict[str, Any]]:
        with self._workbook() as wb:
            ws, table = self._find_table(wb, table_name)
            headers, body = _split_rows(ws, table)

        fields = rename_columns(headers, column_map)
        return [dict(zip(fields, values)) for values in body]

    def list_named_values(self) -> list[NamedValueInfo]:
        with self._workbook() as wb:
            return [
                NamedValueInfo(name=name, location=defn.attr_text)
                for name, defn in self._visible_names(wb).items()
            ]

    def read_named_value(self, name: str) -> Any:
        with self._workbook() as wb:
            defn = wb.defined_names.get(name)
            if defn is None:
                raise DataSourceError(f'Named value "{name}" not found in {self.path}')

            for sheet_title, cell_range in defn.destinations:
                # Multi-cell ranges yield their top-left cell
                top_left = cell_range.replace("$", "").split(":")[0]
                return wb[sheet_title][top_left].value

        raise DataSourceError(f'Named value "{name}" does not reference a cell')

    def locate(self, name: str) -> str:
        with self._workbook() as wb:
            for ws in wb.worksheets:
                if name in ws.tables:
                    return f"{ws.title}!{ws.tables[name].ref}"
            defn = wb.defined_names.get(name)
            if defn is not None:
                return defn.attr_text
        raise DataSourceError(f'"{name}" not found in {self.path}')
