"""
Lightweight CSV readers for uploaded history and forecast-service output.
The format is plain comma-delimited text with a case-insensitive header row and no quoting.
Malformed structure never raises: callers receive empty results and a logged warning instead.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable

from scenario_sage.timeseries.models import TimeSeriesPoint

LOGGER = logging.getLogger("timeseries")

TIMESTAMP_COLUMN = "timestamp"
ITEM_ID_COLUMN = "item_id"
STORE_ID_COLUMN = "store_id"


def _non_empty_lines(csv_text: str | None) -> list[str]:
    if not csv_text or not isinstance(csv_text, str):
        return []
    lines = (line.rstrip("\r") for line in csv_text.split("\n"))
    return [line for line in lines if line.strip()]


def _split_header(line: str) -> list[str]:
    return [name.strip().lower() for name in line.split(",")]


def _cell(cells: list[str], index: int) -> str | None:
    if index < 0 or index >= len(cells):
        return None
    return cells[index].strip()


def _parse_number(raw: str | None) -> float | None:
    if raw is None or raw == "" or "_" in raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def read_csv_headers(csv_text: str | None) -> list[str]:
    """Return lower-cased header names from the first non-empty line."""

    lines = _non_empty_lines(csv_text)
    if not lines:
        return []
    return _split_header(lines[0])


def parse_csv_for_time_series(
    csv_text: str | None,
    value_column: str = "demand",
    filter_item_id: str | None = None,
    filter_store_id: str | None = None,
) -> list[TimeSeriesPoint]:
    """Parse `(timestamp, value_column)` pairs from CSV text in input line order.

    Rows are kept only when the timestamp is non-empty and the value is a finite number.
    Item/store filters apply only when the matching column exists in the header.
    """

    lines = _non_empty_lines(csv_text)
    if not lines:
        return []

    headers = _split_header(lines[0])
    if TIMESTAMP_COLUMN not in headers:
        LOGGER.warning(
            "CSV header must include '%s'; found: %s", TIMESTAMP_COLUMN, ", ".join(headers)
        )
        return []

    value_name = value_column.strip().lower()
    if value_name not in headers:
        # Forecast outputs may carry only one of the metrics.
        return []

    timestamp_index = headers.index(TIMESTAMP_COLUMN)
    value_index = headers.index(value_name)
    item_index = headers.index(ITEM_ID_COLUMN) if ITEM_ID_COLUMN in headers else -1
    store_index = headers.index(STORE_ID_COLUMN) if STORE_ID_COLUMN in headers else -1
    item_filter = filter_item_id.strip() if filter_item_id else None
    store_filter = filter_store_id.strip() if filter_store_id else None

    points: list[TimeSeriesPoint] = []
    for line in lines[1:]:
        cells = line.split(",")
        if item_filter is not None and item_index != -1:
            if _cell(cells, item_index) != item_filter:
                continue
        if store_filter is not None and store_index != -1:
            if _cell(cells, store_index) != store_filter:
                continue

        timestamp = _cell(cells, timestamp_index)
        value = _parse_number(_cell(cells, value_index))
        if timestamp and value is not None:
            points.append(TimeSeriesPoint(date=timestamp, value=value))
    return points


def extract_unique_column_values(csv_text: str | None, column_name: str) -> list[str]:
    """Return the sorted distinct non-blank values of one column (used for filter choices)."""

    lines = _non_empty_lines(csv_text)
    if not lines:
        return []

    headers = _split_header(lines[0])
    target = column_name.strip().lower()
    if target not in headers:
        LOGGER.warning("Column '%s' not found in CSV headers: %s", column_name, ", ".join(headers))
        return []

    column_index = headers.index(target)
    values: set[str] = set()
    for line in lines[1:]:
        cell = _cell(line.split(","), column_index)
        if cell:
            values.add(cell)
    return sorted(values)


def _format_value(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def points_to_csv(points: Iterable[TimeSeriesPoint], value_column: str = "price") -> str:
    """Render points as `timestamp,<value_column>` CSV text."""

    rows = [f"{TIMESTAMP_COLUMN},{value_column}"]
    rows.extend(f"{point.date},{_format_value(point.value)}" for point in points)
    return "\n".join(rows)
