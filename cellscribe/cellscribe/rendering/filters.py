"""Custom Jinja2 filters for producing raw JSON, XML and CSV output."""

from __future__ import annotations

import datetime as dt
import json as _json
from typing import Any

from jinja2 import Undefined

from ..core.values import stringify

DATE_TOKENS = ("YYYY", "MM", "DD", "HH", "mm", "ss")


def _missing(value: Any) -> bool:
    return value is None or isinstance(value, Undefined)


def _coerce_datetime(value: Any) -> dt.datetime | None:
    if isinstance(value, dt.datetime):
        moment = value
    elif isinstance(value, dt.date):
        moment = dt.datetime.combine(value, dt.time())
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            moment = dt.datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    # Aware values are shown in local wall-clock time
    if moment.tzinfo is not None:
        moment = moment.astimezone().replace(tzinfo=None)
    return moment


def format_date(moment: dt.datetime, fmt: str) -> str:
    """Substitute each date token once, in fixed order."""
    parts = {
        "YYYY": f"{moment.year:04d}",
        "MM": f"{moment.month:02d}",
        "DD": f"{moment.day:02d}",
        "HH": f"{moment.hour:02d}",
        "mm": f"{moment.minute:02d}",
        "ss": f"{moment.second:02d}",
    }
    for token in DATE_TOKENS:
        fmt = fmt.replace(token, parts[token], 1)
    return fmt


def date_filter(value: Any, fmt: str = "YYYY-MM-DD") -> str:
    if _missing(value) or value == "":
        return ""
    moment = _coerce_datetime(value)
    if moment is None:
        return stringify(value)
    return format_date(moment, fmt)


def _json_default(value: Any) -> Any:
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, Undefined):
        return None
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def json_filter(value: Any, indent: int = 2) -> str:
    if isinstance(value, Undefined):
        return ""
    if indent <= 0:
        return json_compact_filter(value)
    return _json.dumps(value, indent=indent, ensure_ascii=False, default=_json_default)


def json_compact_filter(value: Any) -> str:
    if isinstance(value, Undefined):
        return ""
    return _json.dumps(
        value, separators=(",", ":"), ensure_ascii=False, default=_json_default
    )


def csv_escape_filter(value: Any) -> str:
    if _missing(value):
        return ""
    text = stringify(value)
    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def xml_escape_filter(value: Any) -> str:
    if _missing(value):
        return ""
    return (
        stringify(value)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def default_value_filter(value: Any, fallback: Any = None) -> Any:
    if _missing(value) or value == "":
        return fallback
    return value


FILTERS = {
    "date": date_filter,
    "json": json_filter,
    "jsonCompact": json_compact_filter,
    "csvEscape": csv_escape_filter,
    "xmlEscape": xml_escape_filter,
    "defaultValue": default_value_filter,
}
