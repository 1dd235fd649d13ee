# This file defines request and response schemas for scenario forecasting and summaries.
# A scenario travels in full with each request because the server keeps no scenario state.
# View responses carry everything a chart needs: filter choices, horizon bounds, tables, and labels.

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from scenario_sage.api.schemas.common import EnvelopeFields, PointV1
from scenario_sage.timeseries.models import Frequency


class ScenarioV1(BaseModel):
    id: str
    name: str
    price_change_description: str
    forecast_length: str
    forecasted_data: str
    summary: str = ""
    is_custom_price_scenario: bool = False


class ForecastRequestV1(BaseModel):
    historical_csv: str
    name: str
    price_change_description: str
    forecast_length: int = Field(ge=1)
    frequency: Frequency = Frequency.DAYS
    existing_scenarios: list[ScenarioV1] = Field(default_factory=list)


class ReforecastRequestV1(BaseModel):
    historical_csv: str
    scenario: ScenarioV1
    prices: list[PointV1]


class SummarizeRequestV1(BaseModel):
    scenarios: list[ScenarioV1]


class ViewsRequestV1(BaseModel):
    historical_csv: str | None = None
    scenarios: list[ScenarioV1] = Field(default_factory=list)
    item_id: str | None = None
    store_id: str | None = None
    forecast_length: int = Field(default=30, ge=1)


class SummaryV1(BaseModel):
    summary: str
    most_promising_scenario: str
    riskiest_scenario: str


class MetricViewV1(BaseModel):
    metric: str
    title: str
    historical: list[PointV1]
    series_ids: list[str]
    rows: list[dict[str, Any]]
    chart_config: dict[str, dict[str, Any]]


class ScenarioViewsV1(BaseModel):
    item_ids: list[str]
    store_ids: list[str]
    frequency: Frequency
    max_forecast_length: int
    forecast_length: int
    demand: MetricViewV1
    price: MetricViewV1


class ScenarioResponseV1(EnvelopeFields):
    data: ScenarioV1


class SummaryResponseV1(EnvelopeFields):
    data: SummaryV1


class ScenarioViewsResponseV1(EnvelopeFields):
    data: ScenarioViewsV1
