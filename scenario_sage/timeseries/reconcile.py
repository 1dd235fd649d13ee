"""
Merge one historical series with any number of forecast series into a date-keyed chart table.
Each forecast line is stitched to the last historical observation so charts show a continuous path.
A forecast that cannot be read is dropped with a warning; the remaining series still reconcile.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from scenario_sage.timeseries.csv_parser import (
    TIMESTAMP_COLUMN,
    parse_csv_for_time_series,
    read_csv_headers,
)
from scenario_sage.timeseries.date_parser import date_sort_key
from scenario_sage.timeseries.models import (
    HISTORICAL_KEY,
    ReconciledRow,
    ReconciliationResult,
    TimeSeriesPoint,
)

LOGGER = logging.getLogger("timeseries")

RESERVED_SERIES_IDS = frozenset({"date", HISTORICAL_KEY})


def sort_points(points: Sequence[TimeSeriesPoint]) -> list[TimeSeriesPoint]:
    """Stable chronological sort with lexical fallback for unparseable dates."""

    return sorted(points, key=lambda point: date_sort_key(point.date))


def reconcile_series(
    historical: Sequence[TimeSeriesPoint],
    forecast_points_by_id: Mapping[str, Sequence[TimeSeriesPoint]],
) -> ReconciliationResult:
    """Build the reconciled table from already-parsed series.

    `forecast_points_by_id` is iterated in its own order, which callers use for scenario creation order.
    """

    warnings: list[str] = []
    table: dict[str, ReconciledRow] = {}

    sorted_history = sort_points(historical)
    for point in sorted_history:
        row = table.setdefault(point.date, ReconciledRow(date=point.date))
        row.historical = point.value
    last_historical = sorted_history[-1] if sorted_history else None

    series_ids: list[str] = []
    for series_id, points in forecast_points_by_id.items():
        if series_id in RESERVED_SERIES_IDS:
            message = f"Forecast series id {series_id!r} is reserved and was skipped."
            LOGGER.warning("%s", message)
            warnings.append(message)
            continue

        series_ids.append(series_id)
        for point in points:
            row = table.setdefault(point.date, ReconciledRow(date=point.date))
            row.series[series_id] = point.value

        if last_historical is not None and points:
            boundary = table.setdefault(
                last_historical.date, ReconciledRow(date=last_historical.date)
            )
            boundary.series[series_id] = last_historical.value

    rows = sorted(table.values(), key=lambda row: date_sort_key(row.date))
    return ReconciliationResult(rows=rows, series_ids=series_ids, warnings=warnings)


def reconcile_forecast_csvs(
    historical: Sequence[TimeSeriesPoint],
    forecast_csv_by_id: Mapping[str, str | None],
    value_column: str,
) -> ReconciliationResult:
    """Parse each forecast CSV for `value_column` and reconcile it with the history."""

    warnings: list[str] = []
    forecast_points: dict[str, list[TimeSeriesPoint]] = {}

    for series_id, csv_text in forecast_csv_by_id.items():
        if not isinstance(csv_text, str) or not csv_text.strip():
            warnings.append(f"Forecast for {series_id} ({value_column}) returned no data.")
            continue
        if TIMESTAMP_COLUMN not in read_csv_headers(csv_text):
            warnings.append(
                f"Forecast for {series_id} ({value_column}) is missing a "
                f"'{TIMESTAMP_COLUMN}' column and was skipped."
            )
            continue
        try:
            forecast_points[series_id] = parse_csv_for_time_series(csv_text, value_column)
        except (ValueError, TypeError, AttributeError) as exc:
            warnings.append(f"Error parsing forecast for {series_id} ({value_column}): {exc}")

    for message in warnings:
        LOGGER.warning("%s", message)

    result = reconcile_series(historical, forecast_points)
    result.warnings = warnings + result.warnings
    return result
