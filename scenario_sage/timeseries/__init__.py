"""
CSV time-series ingestion, frequency detection, and forecast reconciliation.
Every function in this package is a pure transformation of its inputs and never raises on malformed CSV.
"""

from scenario_sage.timeseries.csv_parser import (
    extract_unique_column_values,
    parse_csv_for_time_series,
    points_to_csv,
    read_csv_headers,
)
from scenario_sage.timeseries.date_parser import compare_date_tokens, date_sort_key, parse_date
from scenario_sage.timeseries.frequency import detect_time_series_frequency, format_forecast_length
from scenario_sage.timeseries.models import (
    Frequency,
    ReconciledRow,
    ReconciliationResult,
    TimeSeriesPoint,
)
from scenario_sage.timeseries.reconcile import reconcile_forecast_csvs, reconcile_series

__all__ = [
    "Frequency",
    "ReconciledRow",
    "ReconciliationResult",
    "TimeSeriesPoint",
    "compare_date_tokens",
    "date_sort_key",
    "detect_time_series_frequency",
    "extract_unique_column_values",
    "format_forecast_length",
    "parse_csv_for_time_series",
    "parse_date",
    "points_to_csv",
    "read_csv_headers",
    "reconcile_forecast_csvs",
    "reconcile_series",
]
