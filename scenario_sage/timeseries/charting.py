"""
Chart metadata derived from scenarios: per-series labels, color themes, and titles.
Also converts a reconciled table into a DataFrame for notebook or Altair-style plotting.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import pandas as pd

from scenario_sage.timeseries.models import HISTORICAL_KEY, ReconciliationResult, ScenarioRecord

BASE_HUE = 190
HUE_INCREMENT = 40
HISTORICAL_COLOR = "hsl(var(--chart-1))"
CUSTOM_PRICES_SUFFIX = " (Custom Prices)"

_METRIC_LABELS = {"demand": "Demand", "price": "Price"}


def _metric_label(metric: str) -> str:
    return _METRIC_LABELS.get(metric.lower(), metric.strip().title())


def scenario_color_theme(index: int) -> dict[str, str]:
    """Light and dark HSL colors for the scenario at `index`, rotating around the hue wheel."""

    hue = (BASE_HUE + index * HUE_INCREMENT) % 360
    return {
        "light": f"hsl({hue}, 70%, 50%)",
        "dark": f"hsl({hue}, 65%, 65%)",
    }


def build_chart_config(metric: str, scenarios: Sequence[ScenarioRecord]) -> dict[str, dict[str, Any]]:
    label = _metric_label(metric)
    config: dict[str, dict[str, Any]] = {
        HISTORICAL_KEY: {"label": f"Historical {label}", "color": HISTORICAL_COLOR},
    }
    for index, scenario in enumerate(scenarios):
        suffix = ""
        if scenario.is_custom_price_scenario and not scenario.name.endswith(CUSTOM_PRICES_SUFFIX):
            suffix = CUSTOM_PRICES_SUFFIX
        config[scenario.id] = {
            "label": f"{scenario.name}{suffix} ({label})",
            "theme": scenario_color_theme(index),
        }
    return config


def build_chart_title(
    metric: str,
    *,
    scenario_count: int,
    has_history: bool,
    item_id: str | None = None,
    store_id: str | None = None,
) -> str:
    label = _metric_label(metric)
    title = f"{label} Overview"
    if scenario_count > 0:
        title += f": Historical & {scenario_count} Forecast(s)"
    elif has_history:
        title = f"Historical {label} Data"
    if item_id:
        title += f" (Item: {item_id})"
    if store_id:
        title += f" (Store: {store_id})"
    return title


def reconciled_to_frame(result: ReconciliationResult) -> pd.DataFrame:
    """One row per date with `historical` and one column per series id; NaN where a value is absent."""

    columns = ["date", HISTORICAL_KEY, *result.series_ids]
    frame = pd.DataFrame.from_records(result.to_records(), columns=columns)
    return frame.astype({column: "float64" for column in columns[1:]})
