"""Starter content templates generated from an output filename and host tables."""

from __future__ import annotations

import re
from typing import Sequence

from ..core.models import TableInfo

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_NUMERIC_HINTS = re.compile(
    r"price|cost|amount|total|quantity|qty|count|number|num|id|age|year|rate|percent",
    re.IGNORECASE,
)


def table_key(table_name: str) -> str:
    """Lowercase a table name and squash non-alphanumerics into underscores."""
    key = re.sub(r"[^a-z0-9]", "_", table_name.lower())
    return re.sub(r"_+", "_", key).strip("_")


def data_access(table_name: str) -> str:
    if _IDENTIFIER.match(table_name):
        return f"data.{table_name}"
    return f"data['{table_name}']"


def _field(column: str) -> str:
    if _IDENTIFIER.match(column):
        return f"row.{column}"
    return f"row['{column}']"


def _pluralize(word: str) -> str:
    if word.endswith("s"):
        return word
    if word.endswith("y"):
        return word[:-1] + "ies"
    return word + "s"


def _singularize(word: str) -> str:
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith("s"):
        return word[:-1]
    return word


def _json_template(table: TableInfo | None) -> str:
    if table is None:
        return "[\n  {}\n]"
    properties = []
    for column in table.columns:
        value = f"{{{{ {_field(column)} }}}}"
        if not _NUMERIC_HINTS.search(column):
            value = f'"{value}"'
        properties.append(f'    "{column}": {value}')
    body = ",\n".join(properties)
    return (
        f"[\n  {{% for row in {data_access(table.name)} %}}\n  {{\n{body}\n  }}"
        '{{ "," if not loop.last }}\n  {% endfor %}\n]'
    )


def _csv_template(table: TableInfo | None) -> str:
    if table is None:
        return "Column1,Column2,Column3\nValue1,Value2,Value3"
    header = ",".join(table.columns)
    row = ",".join(f"{{{{ {_field(col)} | csvEscape }}}}" for col in table.columns)
    return f"{header}\n{{% for row in {data_access(table.name)} %}}\n{row}\n{{% endfor %}}"


def _xml_template(table: TableInfo | None) -> str:
    if table is None:
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n<data>\n  <item>\n'
            "    <field>value</field>\n  </item>\n</data>"
        )
    base = table_key(table.name) or "data"
    root, item = _pluralize(base), _singularize(base)
    elements = "\n".join(
        f"    <{re.sub(r'[^a-zA-Z0-9]', '_', col)}>{{{{ {_field(col)} | xmlEscape }}}}"
        f"</{re.sub(r'[^a-zA-Z0-9]', '_', col)}>"
        for col in table.columns
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n<{root}>\n'
        f"  {{% for row in {data_access(table.name)} %}}\n  <{item}>\n{elements}\n"
        f"  </{item}>\n  {{% endfor %}}\n</{root}>"
    )


def _html_template(table: TableInfo | None) -> str:
    if table is None:
        return (
            "<!DOCTYPE html>\n<html>\n<body>\n  <h1>Data Export</h1>\n"
            "  <p>No tables available.</p>\n</body>\n</html>"
        )
    header_cells = "".join(f"<th>{col}</th>" for col in table.columns)
    data_cells = "".join(f"<td>{{{{ {_field(col)} }}}}</td>" for col in table.columns)
    return f"""<!DOCTYPE html>
<html>
<head>
  <title>{table.name} Export</title>
  <style>
    table {{ border-collapse: collapse; width: 100%; }}
    th, td {{ border: 1px solid #ddd; padding: 8px; text-align: left; }}
    th {{ background-color: #f2f2f2; font-weight: bold; }}
  </style>
</head>
<body>
  <h1>{table.name}</h1>
  <table>
    <thead>
      <tr>{header_cells}</tr>
    </thead>
    <tbody>
      {{% for row in {data_access(table.name)} %}}
      <tr>{data_cells}</tr>
      {{% endfor %}}
    </tbody>
  </table>
</body>
</html>"""


def _text_template(table: TableInfo | None) -> str:
    if table is None:
        return "Data Export\n===========\n\nNo tables available."
    fields = "\n".join(f"{col}: {{{{ {_field(col)} }}}}" for col in table.columns)
    title = table.name
    return (
        f"{title}\n{'=' * len(title)}\n\n"
        f"{{% for row in {data_access(table.name)} %}}\n{fields}\n---\n{{% endfor %}}"
    )


_GENERATORS = {
    "json": _json_template,
    "csv": _csv_template,
    "xml": _xml_template,
    "html": _html_template,
    "htm": _html_template,
}


def generate_starter_template(filename: str, tables: Sequence[TableInfo]) -> str:
    """Generate a starter content template for the filename's format.

    The first available table drives the generated loop; unknown extensions
    fall back to a plain-text listing.
    """
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "txt"
    generator = _GENERATORS.get(extension, _text_template)
    return generator(tables[0] if tables else None)
