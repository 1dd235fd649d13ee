"""
Unit tests for reconciling historical and forecast series into one chart table.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import logging

import pytest

from scenario_sage.timeseries.models import TimeSeriesPoint
from scenario_sage.timeseries.reconcile import (
    reconcile_forecast_csvs,
    reconcile_series,
    sort_points,
)

HISTORY = [
    TimeSeriesPoint(date="2024-01-02", value=12.0),
    TimeSeriesPoint(date="2024-01-01", value=10.0),
    TimeSeriesPoint(date="2024-01-03", value=15.0),
]

FORECAST_A = "timestamp,price,demand\n2024-01-04,2.5,16\n2024-01-05,2.5,18\n"
FORECAST_B = "timestamp,price,demand\n2024-01-04,2.0,20\n2024-01-06,2.0,22\n"


def test_zero_forecasts_yields_one_historical_row_per_date() -> None:
    history = [*HISTORY, TimeSeriesPoint(date="2024-01-02", value=13.0)]

    result = reconcile_series(history, {})

    assert result.series_ids == []
    assert result.to_records() == [
        {"date": "2024-01-01", "historical": 10.0},
        {"date": "2024-01-02", "historical": 13.0},
        {"date": "2024-01-03", "historical": 15.0},
    ]


def test_boundary_point_stitches_forecast_to_last_history() -> None:
    forecast = {"scenario1": [TimeSeriesPoint(date="2024-01-04", value=16.0)]}

    result = reconcile_series(HISTORY, forecast)

    records = {record["date"]: record for record in result.to_records()}
    assert records["2024-01-03"] == {"date": "2024-01-03", "historical": 15.0, "scenario1": 15.0}
    assert records["2024-01-04"] == {"date": "2024-01-04", "scenario1": 16.0}
    assert "scenario1" not in records["2024-01-02"]


def test_boundary_overrides_forecast_value_on_last_history_date() -> None:
    forecast = {
        "scenario1": [
            TimeSeriesPoint(date="2024-01-03", value=99.0),
            TimeSeriesPoint(date="2024-01-04", value=16.0),
        ]
    }

    result = reconcile_series(HISTORY, forecast)

    boundary = next(row for row in result.rows if row.date == "2024-01-03")
    assert boundary.series["scenario1"] == 15.0


def test_empty_forecast_series_gets_no_boundary_point() -> None:
    result = reconcile_series(HISTORY, {"scenario1": []})

    assert result.series_ids == ["scenario1"]
    assert all("scenario1" not in record for record in result.to_records())


def test_forecast_without_history_has_no_boundary() -> None:
    forecast = {"scenario1": [TimeSeriesPoint(date="2024-02-01", value=3.0)]}

    result = reconcile_series([], forecast)

    assert result.to_records() == [{"date": "2024-02-01", "scenario1": 3.0}]


def test_overlapping_dates_merge_into_one_row() -> None:
    result = reconcile_forecast_csvs(
        HISTORY, {"scenario1": FORECAST_A, "scenario2": FORECAST_B}, "demand"
    )

    assert result.series_ids == ["scenario1", "scenario2"]
    records = {record["date"]: record for record in result.to_records()}
    assert records["2024-01-04"] == {"date": "2024-01-04", "scenario1": 16.0, "scenario2": 20.0}
    assert records["2024-01-03"]["scenario2"] == 15.0
    assert [record["date"] for record in result.to_records()] == [
        "2024-01-01",
        "2024-01-02",
        "2024-01-03",
        "2024-01-04",
        "2024-01-05",
        "2024-01-06",
    ]


def test_malformed_series_is_isolated(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="timeseries"):
        result = reconcile_forecast_csvs(
            HISTORY,
            {"scenario1": FORECAST_A, "scenario2": "this is not,a forecast\n???"},
            "demand",
        )

    assert result.series_ids == ["scenario1"]
    assert all("scenario2" not in record for record in result.to_records())
    records = {record["date"]: record for record in result.to_records()}
    assert records["2024-01-04"]["scenario1"] == 16.0
    assert records["2024-01-05"]["scenario1"] == 18.0
    assert len(result.warnings) == 1
    assert "scenario2" in result.warnings[0]
    assert "scenario2" in caplog.text


@pytest.mark.parametrize("csv_text", [None, "", "  \n"])
def test_empty_forecast_output_is_skipped_with_warning(csv_text: str | None) -> None:
    result = reconcile_forecast_csvs(HISTORY, {"scenario1": csv_text}, "price")

    assert result.series_ids == []
    assert result.warnings == ["Forecast for scenario1 (price) returned no data."]


def test_missing_metric_column_is_silent() -> None:
    forecast = {"scenario1": "timestamp,demand\n2024-01-04,5\n"}

    result = reconcile_forecast_csvs(HISTORY, forecast, "price")

    assert result.warnings == []
    assert result.series_ids == ["scenario1"]
    assert all("scenario1" not in record for record in result.to_records())


def test_reserved_series_ids_are_skipped() -> None:
    forecast = {
        "historical": [TimeSeriesPoint(date="2024-01-04", value=1.0)],
        "scenario1": [TimeSeriesPoint(date="2024-01-04", value=2.0)],
    }

    result = reconcile_series(HISTORY, forecast)

    assert result.series_ids == ["scenario1"]
    assert len(result.warnings) == 1
    records = {record["date"]: record for record in result.to_records()}
    assert records["2024-01-04"] == {"date": "2024-01-04", "scenario1": 2.0}


def test_rows_sort_chronologically_with_unparseable_dates_last() -> None:
    history = [
        TimeSeriesPoint(date="pending", value=2.0),
        TimeSeriesPoint(date="01/03/2024", value=3.0),
        TimeSeriesPoint(date="2024-01-02", value=1.0),
    ]

    result = reconcile_series(history, {})

    assert [row.date for row in result.rows] == ["2024-01-02", "01/03/2024", "pending"]


def test_sort_points_is_stable_for_equal_dates() -> None:
    points = [
        TimeSeriesPoint(date="2024-01-02", value=1.0),
        TimeSeriesPoint(date="2024-01-01", value=2.0),
        TimeSeriesPoint(date="01/02/2024", value=3.0),
    ]

    assert [point.value for point in sort_points(points)] == [2.0, 1.0, 3.0]
