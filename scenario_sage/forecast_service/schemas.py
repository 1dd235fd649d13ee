# This file defines the wire contracts of the hosted forecast and summarization services.
# Field names are camelCase on the wire and snake_case in Python; both spellings are accepted on input.
# A failed call is represented by ServiceError so callers can branch on the result type.

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ScenarioForecastInput(_CamelModel):
    historical_data: str = Field(
        description="Historical CSV with columns timestamp, item_id, store_id, demand, price."
    )
    price_change_scenario: str = Field(description="Free-text description of the price change.")
    forecast_length: str = Field(description="Horizon phrase such as 'next 30 days'.")
    custom_future_prices_csv: str | None = Field(
        default=None,
        description="Optional CSV with columns timestamp, price to use verbatim for the forecast period.",
    )


class ScenarioForecastOutput(_CamelModel):
    forecasted_data: str = Field(description="Forecast CSV with columns timestamp, price, demand.")
    summary: str


class ScenarioResultInput(_CamelModel):
    scenario_name: str
    projected_revenue_change: float | None = None
    potential_stockout_risk: str | None = None
    details: str | None = None


class SummarizeScenarioResultsInput(_CamelModel):
    scenarios: list[ScenarioResultInput]


class SummarizeScenarioResultsOutput(_CamelModel):
    summary: str
    most_promising_scenario: str
    riskiest_scenario: str


class ServiceError(BaseModel):
    error: str
