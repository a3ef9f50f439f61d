"""Scalar stringification and coercion shared by mapping, sources and filters."""

from __future__ import annotations

import datetime as dt
import re
from typing import Any

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_blank(value: Any) -> bool:
    """Return True for ``None`` and the empty string."""
    return value is None or value == ""


def stringify(value: Any) -> str:
    """Stringify a cell value the way spreadsheet hosts print it.

    Booleans become ``true``/``false``, integral floats lose their ``.0`` and
    ``None`` becomes the empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(value: Any) -> int | float:
    """Parse the leading numeric part of ``value``; non-numeric yields 0."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    match = _NUMBER_PREFIX.match(stringify(value))
    if not match:
        return 0
    number = float(match.group(0))
    return int(number) if number.is_integer() else number


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return stringify(value).strip().lower() in {"true", "1", "yes"}


def iso_timestamp(value: dt.datetime) -> str:
    """Format a datetime as ISO-8601 with millisecond precision.

    Aware values are normalized to UTC and suffixed with ``Z``.
    """
    if value.tzinfo is not None:
        value = value.astimezone(dt.timezone.utc).replace(tzinfo=None)
        return value.isoformat(timespec="milliseconds") + "Z"
    return value.isoformat(timespec="milliseconds")


def utc_now_iso() -> str:
    return iso_timestamp(dt.datetime.now(dt.timezone.utc))
