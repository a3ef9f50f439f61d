"""Dictionary-backed data source, loadable from a JSON or YAML data file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..core.models import NamedValueInfo, TableInfo
from .base import DataSource, DataSourceError, rename_columns

logger = logging.getLogger(__name__)


def _columns(rows: list[dict[str, Any]]) -> list[str]:
    columns: dict[str, None] = {}
    for row in rows:
        columns.update(dict.fromkeys(row))
    return list(columns)


class InMemoryDataSource(DataSource):
    """Host data held in memory.

    Args:
        tables: Table name -> rows (flat mappings)
        names: Named value -> raw value
    """

    def __init__(
        self,
        tables: Mapping[str, list[dict[str, Any]]] | None = None,
        names: Mapping[str, Any] | None = None,
    ) -> None:
        self.tables = dict(tables or {})
        self.names = dict(names or {})

    @classmethod
    def from_file(cls, path: Path) -> InMemoryDataSource:
        """Load ``{"tables": {...}, "names": {...}}`` from JSON or YAML."""
        if not path.exists():
            raise FileNotFoundError(f"Data file not found: {path}")

        text = path.read_text(encoding="utf-8")
        try:
            if path.suffix.lower() in {".yaml", ".yml"}:
                payload = yaml.safe_load(text) or {}
            else:
                payload = json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise DataSourceError(f"Invalid data file {path}: {e}") from e
        if not isinstance(payload, dict):
            raise DataSourceError(f"Data file {path} must contain an object")

        logger.debug(f"Loaded data file: {path}")
        return cls(payload.get("tables") or {}, payload.get("names") or {})

    def list_tables(self) -> list[TableInfo]:
        return [
            TableInfo(name=name, columns=_columns(rows), row_count=len(rows))
            for name, rows in self.tables.items()
        ]

    def read_table(
        self, table_name: str, column_map: Mapping[str, str] | None = None
    ) -> list[dict[str, Any]]:
        if table_name not in self.tables:
            raise DataSourceError(f'Table "{table_name}" not found')

        rows = self.tables[table_name]
        if not column_map:
            return [dict(row) for row in rows]
        return [
            dict(zip(rename_columns(row.keys(), column_map), row.values()))
            for row in rows
        ]

    def list_named_values(self) -> list[NamedValueInfo]:
        return [NamedValueInfo(name=name) for name in self.names]

    def read_named_value(self, name: str) -> Any:
        if name not in self.names:
            raise DataSourceError(f'Named value "{name}" not found')
        return self.names[name]

    def locate(self, name: str) -> str:
        if name in self.tables or name in self.names:
            return name
        raise DataSourceError(f'"{name}" not found')
