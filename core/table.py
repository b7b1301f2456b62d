# core/table.py
from __future__ import annotations

import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

import pandas as pd

from schemas.fields import ColumnSpec

PLACEHOLDER = "-"
EMPTY_TABLE_MESSAGE = 'No records found. Click "Add New" to create one!'


def cell_value(record: Mapping[str, Any], column: ColumnSpec, today: datetime.date) -> Any:
    """Display value for one cell; missing or empty values show as a placeholder."""
    if column.compute is not None:
        value = column.compute(record, today)
    else:
        value = record.get(column.key)
    if value is None or value == "":
        return PLACEHOLDER
    return value


def rows_to_frame(
    records: Iterable[Mapping[str, Any]],
    columns: Sequence[ColumnSpec],
    today: Optional[datetime.date] = None,
) -> pd.DataFrame:
    """Build the display DataFrame with column labels as headers, in schema order."""
    today = today or datetime.date.today()
    labels = [c.label for c in columns]
    rows = [[cell_value(r, c, today) for c in columns] for r in records]
    # object dtype keeps placeholders and numbers side by side as shown
    return pd.DataFrame(rows, columns=labels, dtype=object)


def sort_marker(column: ColumnSpec, sort_column: Optional[str], sort_order: str) -> str:
    if not column.sortable or column.key != sort_column:
        return ""
    return "▲" if sort_order == "asc" else "▼"


def header_label(column: ColumnSpec, sort_column: Optional[str], sort_order: str) -> str:
    marker = sort_marker(column, sort_column, sort_order)
    return f"{column.label} {marker}" if marker else column.label


def record_caption(record: Mapping[str, Any], columns: Sequence[ColumnSpec]) -> str:
    """Short 'id · first text column' label used by the record picker."""
    parts = [str(record.get("id", PLACEHOLDER))]
    for column in columns:
        if column.key != "id" and column.compute is None and record.get(column.key):
            parts.append(str(record[column.key]))
            break
    return " · ".join(parts)
