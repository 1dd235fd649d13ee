"""
End-to-end derivation of every chart-ready view from the uploaded CSV and the scenario list.
The result is recomputed from scratch on each call; nothing is cached between uploads or filter changes.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from scenario_sage.timeseries.charting import (
    CUSTOM_PRICES_SUFFIX,
    build_chart_config,
    build_chart_title,
)
from scenario_sage.timeseries.csv_parser import (
    ITEM_ID_COLUMN,
    STORE_ID_COLUMN,
    extract_unique_column_values,
    parse_csv_for_time_series,
)
from scenario_sage.timeseries.frequency import (
    DEFAULT_FORECAST_LENGTH,
    detect_time_series_frequency,
    forecast_length_bounds,
)
from scenario_sage.timeseries.models import (
    Frequency,
    ReconciliationResult,
    ScenarioRecord,
    TimeSeriesPoint,
)
from scenario_sage.timeseries.reconcile import reconcile_forecast_csvs

METRICS = ("demand", "price")

_CUSTOM_SUFFIX_RE = re.compile(r" \(Custom Prices\)$")


@dataclass
class MetricView:
    metric: str
    historical: list[TimeSeriesPoint]
    reconciled: ReconciliationResult
    chart_config: dict[str, dict[str, Any]]
    title: str


@dataclass
class ScenarioViews:
    item_ids: list[str]
    store_ids: list[str]
    frequency: Frequency
    max_forecast_length: int
    forecast_length: int
    demand: MetricView
    price: MetricView
    warnings: list[str] = field(default_factory=list)


def next_scenario_id(existing: Sequence[ScenarioRecord]) -> str:
    return f"scenario{len(existing) + 1}"


def custom_price_scenario_name(name: str) -> str:
    """Mark a scenario as re-forecast with custom prices, without stacking the suffix."""

    return f"{_CUSTOM_SUFFIX_RE.sub('', name)}{CUSTOM_PRICES_SUFFIX}"


def _metric_view(
    metric: str,
    historical: list[TimeSeriesPoint],
    scenarios: Sequence[ScenarioRecord],
    item_id: str | None,
    store_id: str | None,
) -> MetricView:
    reconciled = reconcile_forecast_csvs(
        historical,
        {scenario.id: scenario.forecasted_data for scenario in scenarios},
        metric,
    )
    return MetricView(
        metric=metric,
        historical=historical,
        reconciled=reconciled,
        chart_config=build_chart_config(metric, scenarios),
        title=build_chart_title(
            metric,
            scenario_count=len(scenarios),
            has_history=bool(historical),
            item_id=item_id,
            store_id=store_id,
        ),
    )


def build_scenario_views(
    historical_csv: str | None,
    scenarios: Sequence[ScenarioRecord] = (),
    *,
    item_id: str | None = None,
    store_id: str | None = None,
    forecast_length: int = DEFAULT_FORECAST_LENGTH,
) -> ScenarioViews:
    """Derive filter choices, filtered history, frequency, and reconciled demand/price tables."""

    warnings: list[str] = []
    has_upload = bool(historical_csv and historical_csv.strip())

    demand_points = parse_csv_for_time_series(historical_csv, "demand", item_id, store_id)
    price_points = parse_csv_for_time_series(historical_csv, "price", item_id, store_id)
    if has_upload and not demand_points:
        warnings.append(
            "CSV parsed, but no 'timestamp' or 'demand' data found, "
            "or data could not be filtered as expected."
        )
    if has_upload and not price_points:
        warnings.append(
            "CSV parsed, but no 'timestamp' or 'price' data found, "
            "or data could not be filtered as expected."
        )

    if has_upload:
        frequency = detect_time_series_frequency(demand_points or price_points)
        max_length, clamped_length = forecast_length_bounds(
            demand_points, price_points, current=forecast_length
        )
    else:
        # Nothing uploaded yet: keep the selector defaults.
        frequency = Frequency.DAYS
        max_length, clamped_length = forecast_length_bounds([], [])

    demand_view = _metric_view("demand", demand_points, scenarios, item_id, store_id)
    price_view = _metric_view("price", price_points, scenarios, item_id, store_id)
    warnings.extend(demand_view.reconciled.warnings)
    warnings.extend(price_view.reconciled.warnings)

    return ScenarioViews(
        item_ids=extract_unique_column_values(historical_csv, ITEM_ID_COLUMN) if has_upload else [],
        store_ids=extract_unique_column_values(historical_csv, STORE_ID_COLUMN) if has_upload else [],
        frequency=frequency,
        max_forecast_length=max_length,
        forecast_length=clamped_length,
        demand=demand_view,
        price=price_view,
        warnings=warnings,
    )
