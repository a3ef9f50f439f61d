"""Host data source contract and typed named-value conversion."""

from __future__ import annotations

import abc
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, TypeVar

from ..core.models import GlobalBinding, GlobalType, NamedValueInfo, TableInfo
from ..core.values import (
    is_blank,
    iso_timestamp,
    parse_bool,
    parse_number,
    stringify,
    utc_now_iso,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SERIAL_DATE_EPOCH = dt.datetime(1899, 12, 30, tzinfo=dt.timezone.utc)


class DataSourceError(LookupError):
    """Raised when a host table or named value cannot be found or read."""


@dataclass(frozen=True)
class TableRequest:
    """One table to read: host table name, emitted key and optional renames."""

    key: str
    table_name: str
    column_map: Mapping[str, str] | None = None


def read_with_fallback(read: Callable[[], T], fallback: Callable[[], T], what: str) -> T:
    """Run a host read, degrading to ``fallback()`` when it fails."""
    try:
        return read()
    except Exception as e:
        logger.warning(f"Failed to read {what}: {e}")
        return fallback()


def serial_date_to_iso(serial: float) -> str:
    """Convert a spreadsheet serial date (days since 1899-12-30) to ISO-8601."""
    return iso_timestamp(SERIAL_DATE_EPOCH + dt.timedelta(days=serial))


def default_for_type(value_type: GlobalType) -> Any:
    if value_type == "number":
        return 0
    if value_type == "boolean":
        return False
    if value_type == "date":
        return utc_now_iso()
    return ""


def convert_value(value: Any, value_type: GlobalType) -> Any:
    """Convert a raw host value to the declared global type."""
    if value_type == "number":
        return parse_number(value)
    if value_type == "boolean":
        return parse_bool(value)
    if value_type == "date":
        if isinstance(value, dt.datetime):
            return iso_timestamp(value)
        if isinstance(value, dt.date):
            return iso_timestamp(dt.datetime.combine(value, dt.time()))
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return serial_date_to_iso(value)
        return stringify(value)
    return stringify(value)


def rename_columns(headers: Iterable[str], column_map: Mapping[str, str] | None) -> list[str]:
    """Apply a header rename map (exact, case-sensitive match)."""
    if not column_map:
        return list(headers)
    return [column_map.get(header) or header for header in headers]


class DataSource(abc.ABC):
    """Spreadsheet-like host providing tables and named scalar values.

    Subclasses implement the raw host primitives; table batching, type
    conversion and fallbacks live here.
    """

    @abc.abstractmethod
    def list_tables(self) -> list[TableInfo]:
        """Return the tables available in the host."""

    @abc.abstractmethod
    def read_table(
        self, table_name: str, column_map: Mapping[str, str] | None = None
    ) -> list[dict[str, Any]]:
        """Return all rows of a table, renaming headers through ``column_map``."""

    @abc.abstractmethod
    def list_named_values(self) -> list[NamedValueInfo]:
        """Return the named scalar values available in the host."""

    @abc.abstractmethod
    def read_named_value(self, name: str) -> Any:
        """Return the raw value of a named value (first cell for ranges)."""

    @abc.abstractmethod
    def locate(self, name: str) -> str:
        """Return the host address of a table or named value."""

    def read_tables(self, requests: Iterable[TableRequest]) -> dict[str, list[dict[str, Any]]]:
        """Read several tables; a failing table yields an empty row list."""
        result: dict[str, list[dict[str, Any]]] = {}
        for request in requests:
            result[request.key] = read_with_fallback(
                lambda: self.read_table(request.table_name, request.column_map),
                list,
                f"table {request.table_name!r}",
            )
            logger.debug(f"Table {request.table_name}: {len(result[request.key])} row(s)")
        return result

    def read_global(
        self, name: str, value_type: GlobalType = "string", default: Any = None
    ) -> Any:
        """Read a named value converted to ``value_type``.

        Missing, empty or unreadable values yield ``default`` when given,
        otherwise the zero value of the type.
        """

        def fallback() -> Any:
            return default if default is not None else default_for_type(value_type)

        raw = read_with_fallback(
            lambda: self.read_named_value(name), lambda: None, f"named value {name!r}"
        )
        if is_blank(raw):
            return fallback()
        return convert_value(raw, value_type)

    def read_all_globals(self, bindings: Iterable[GlobalBinding]) -> dict[str, Any]:
        """Read globals one by one, in declaration order."""
        return {
            binding.name: self.read_global(binding.name, binding.type, binding.default_value)
            for binding in bindings
        }
