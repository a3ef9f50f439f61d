"""Value mappings: derive new row fields from lookup tables with defaults."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from .models import ValueMapping
from .values import stringify

logger = logging.getLogger(__name__)

Row = dict[str, Any]


def apply_mappings(
    rows: list[Row], mappings: Sequence[ValueMapping] | None
) -> list[Row]:
    """Apply value mappings to every row.

    Args:
        rows: Table rows (never mutated)
        mappings: Mapping rules, applied in declaration order

    Returns:
        The input list itself when there are no rules, otherwise a new list of
        shallow row copies carrying the mapped fields. When two rules share a
        destination field the later one wins.
    """
    if not mappings:
        return rows

    mapped_rows: list[Row] = []
    for row in rows:
        mapped = dict(row)
        for mapping in mappings:
            source_value = row.get(mapping.column)
            if source_value is None:
                mapped[mapping.output_field] = mapping.default
                continue
            mapped[mapping.output_field] = mapping.lookup.get(
                stringify(source_value), mapping.default
            )
        mapped_rows.append(mapped)

    return mapped_rows


def apply_mappings_to_all_tables(
    tables: Mapping[str, list[Row]],
    mappings_by_table: Mapping[str, Sequence[ValueMapping] | None],
) -> dict[str, list[Row]]:
    """Apply each table's own mapping rules.

    Tables without rules are passed through by reference.
    """
    result: dict[str, list[Row]] = {}
    for key, rows in tables.items():
        mappings = mappings_by_table.get(key)
        if mappings:
            logger.debug(f"Applying {len(mappings)} value mapping(s) to table: {key}")
        result[key] = apply_mappings(rows, mappings)
    return result
