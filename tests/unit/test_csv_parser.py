"""
Unit tests for CSV time-series parsing.
It asserts expected behavior and guards against regressions in the corresponding component.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import logging

import pytest

from scenario_sage.timeseries.csv_parser import (
    parse_csv_for_time_series,
    points_to_csv,
    read_csv_headers,
)
from scenario_sage.timeseries.models import TimeSeriesPoint

SALES_CSV = (
    "timestamp,item_id,store_id,demand,price\n"
    "2024-01-01,A,S1,10,2.5\n"
    "2024-01-01,B,S1,7,3.0\n"
    "2024-01-02,A,S2,12,2.5\n"
    "2024-01-02,B,S2,8,3.1\n"
)


def test_round_trip_example_parses_three_points() -> None:
    csv_text = "timestamp,demand\n2024-01-01,10\n2024-01-02,12\n2024-01-03,15\n"

    points = parse_csv_for_time_series(csv_text, "demand")

    assert points == [
        TimeSeriesPoint(date="2024-01-01", value=10.0),
        TimeSeriesPoint(date="2024-01-02", value=12.0),
        TimeSeriesPoint(date="2024-01-03", value=15.0),
    ]


@pytest.mark.parametrize("value_column", ["demand", "price", "anything"])
def test_missing_timestamp_header_returns_empty(
    value_column: str, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="timeseries"):
        points = parse_csv_for_time_series("date,demand,price\n2024-01-01,1,2\n", value_column)

    assert points == []
    assert "timestamp" in caplog.text


@pytest.mark.parametrize("csv_text", [None, "", "   \n\n", 42])
def test_empty_or_non_text_input_returns_empty(csv_text: object) -> None:
    assert parse_csv_for_time_series(csv_text) == []  # type: ignore[arg-type]


def test_missing_value_column_is_silent(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="timeseries"):
        points = parse_csv_for_time_series("timestamp,demand\n2024-01-01,5\n", "price")

    assert points == []
    assert caplog.text == ""


def test_headers_are_case_insensitive_and_crlf_is_tolerated() -> None:
    csv_text = "Timestamp, Demand\r\n2024-01-01,4\r\n\r\n2024-01-02,5\r\n"

    points = parse_csv_for_time_series(csv_text, "DEMAND")

    assert [point.value for point in points] == [4.0, 5.0]


def test_invalid_rows_are_dropped_and_tokens_preserved() -> None:
    csv_text = (
        "timestamp,demand\n"
        "01/05/2024,3\n"
        ",9\n"
        "2024-01-06,n/a\n"
        "2024-01-07,NaN\n"
        "2024-01-08,inf\n"
        "2024-01-09\n"
        "2024-01-10, 6.5 \n"
    )

    points = parse_csv_for_time_series(csv_text)

    assert points == [
        TimeSeriesPoint(date="01/05/2024", value=3.0),
        TimeSeriesPoint(date="2024-01-10", value=6.5),
    ]


def test_digit_group_underscores_are_not_numeric() -> None:
    csv_text = "timestamp,demand\n2024-01-01,1_000\n2024-01-02,7\n2024-01-03,2_5.0\n"

    points = parse_csv_for_time_series(csv_text)

    assert points == [TimeSeriesPoint(date="2024-01-02", value=7.0)]


def test_each_valid_row_appears_once_in_input_order() -> None:
    csv_text = "timestamp,demand\n2024-01-03,3\n2024-01-01,1\n2024-01-03,4\n"

    points = parse_csv_for_time_series(csv_text)

    assert [(point.date, point.value) for point in points] == [
        ("2024-01-03", 3.0),
        ("2024-01-01", 1.0),
        ("2024-01-03", 4.0),
    ]


def test_item_and_store_filters() -> None:
    only_a = parse_csv_for_time_series(SALES_CSV, "demand", filter_item_id="A")
    a_in_s2 = parse_csv_for_time_series(SALES_CSV, "demand", "A", "S2")

    assert [point.value for point in only_a] == [10.0, 12.0]
    assert a_in_s2 == [TimeSeriesPoint(date="2024-01-02", value=12.0)]


def test_blank_filter_is_ignored() -> None:
    assert len(parse_csv_for_time_series(SALES_CSV, "price", filter_item_id="")) == 4


def test_filter_is_noop_when_column_absent() -> None:
    csv_text = "timestamp,demand\n2024-01-01,1\n2024-01-02,2\n"

    points = parse_csv_for_time_series(csv_text, "demand", filter_item_id="A", filter_store_id="S9")

    assert len(points) == 2


def test_read_csv_headers_lowercases_first_line() -> None:
    assert read_csv_headers("\nTimestamp,Item_ID\n1,2\n") == ["timestamp", "item_id"]
    assert read_csv_headers("") == []


def test_points_to_csv_renders_prices() -> None:
    points = [
        TimeSeriesPoint(date="2024-02-01", value=10.0),
        TimeSeriesPoint(date="2024-02-02", value=10.5),
    ]

    assert points_to_csv(points) == "timestamp,price\n2024-02-01,10\n2024-02-02,10.5"
