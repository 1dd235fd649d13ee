# This file holds the validating entry points that sit between callers and the forecast-service client.
# Every outcome is returned as either the typed service output or a ServiceError, never an exception,
# so the API layer and any other host can branch on the result type.
# Request builders here also turn scenario state into the service's wire contract.

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import replace

from scenario_sage.forecast_service.client import (
    ForecastServiceClient,
    ForecastServiceUnavailableError,
)
from scenario_sage.forecast_service.schemas import (
    ScenarioForecastInput,
    ScenarioForecastOutput,
    ScenarioResultInput,
    ServiceError,
    SummarizeScenarioResultsInput,
    SummarizeScenarioResultsOutput,
)
from scenario_sage.timeseries.csv_parser import points_to_csv
from scenario_sage.timeseries.frequency import format_forecast_length
from scenario_sage.timeseries.models import Frequency, ScenarioRecord, TimeSeriesPoint
from scenario_sage.timeseries.pipeline import custom_price_scenario_name

LOGGER = logging.getLogger("forecast_service")


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def validate_forecast_input(payload: ScenarioForecastInput) -> str | None:
    """Return the first validation message for a forecast request, or None when it is usable."""

    if _is_blank(payload.historical_data):
        return "Historical data cannot be empty."
    if _is_blank(payload.price_change_scenario):
        return "Price change scenario description cannot be empty."
    if _is_blank(payload.forecast_length):
        return "Forecast length cannot be empty."
    if payload.custom_future_prices_csv is not None and _is_blank(payload.custom_future_prices_csv):
        return "Custom future prices CSV was provided but is empty."
    return None


def validate_summary_input(payload: SummarizeScenarioResultsInput) -> str | None:
    if not payload.scenarios:
        return "No scenarios provided for summarization."
    for scenario in payload.scenarios:
        if _is_blank(scenario.scenario_name):
            return "Scenario name cannot be empty."
    return None


def generate_forecast_action(
    payload: ScenarioForecastInput, client: ForecastServiceClient
) -> ScenarioForecastOutput | ServiceError:
    message = validate_forecast_input(payload)
    if message is not None:
        return ServiceError(error=message)

    try:
        return client.generate_scenario_forecast(payload)
    except (ForecastServiceUnavailableError, ValueError) as exc:
        LOGGER.exception("Error in generate_forecast_action")
        return ServiceError(
            error=str(exc) or "An unknown error occurred during forecast generation."
        )


def summarize_results_action(
    payload: SummarizeScenarioResultsInput, client: ForecastServiceClient
) -> SummarizeScenarioResultsOutput | ServiceError:
    message = validate_summary_input(payload)
    if message is not None:
        return ServiceError(error=message)

    try:
        return client.summarize_scenario_results(payload)
    except (ForecastServiceUnavailableError, ValueError) as exc:
        LOGGER.exception("Error in summarize_results_action")
        return ServiceError(
            error=str(exc) or "An unknown error occurred during results summarization."
        )


def build_forecast_request(
    *,
    historical_csv: str,
    price_change_description: str,
    forecast_length: int,
    frequency: Frequency,
) -> ScenarioForecastInput:
    return ScenarioForecastInput(
        historical_data=historical_csv,
        price_change_scenario=price_change_description,
        forecast_length=format_forecast_length(forecast_length, frequency),
    )


def build_custom_price_request(
    *,
    historical_csv: str,
    scenario: ScenarioRecord,
    prices: Sequence[TimeSeriesPoint],
) -> ScenarioForecastInput:
    """Re-forecast request that pins the future price path to user-edited prices.

    Raises:
        ValueError: If there are no prices or any price is not a finite number.
    """

    if not prices:
        raise ValueError("No scenario or prices to re-forecast.")
    if any(not math.isfinite(point.value) for point in prices):
        raise ValueError("Please ensure all price fields contain valid numbers.")

    return ScenarioForecastInput(
        historical_data=historical_csv,
        price_change_scenario=scenario.price_change_description,
        forecast_length=scenario.forecast_length,
        custom_future_prices_csv=points_to_csv(prices, "price"),
    )


def build_summary_request(scenarios: Sequence[ScenarioRecord]) -> SummarizeScenarioResultsInput:
    return SummarizeScenarioResultsInput(
        scenarios=[
            ScenarioResultInput(scenario_name=scenario.name, details=scenario.summary)
            for scenario in scenarios
        ]
    )


def scenario_from_forecast(
    *,
    scenario_id: str,
    name: str,
    request: ScenarioForecastInput,
    output: ScenarioForecastOutput,
) -> ScenarioRecord:
    return ScenarioRecord(
        id=scenario_id,
        name=name,
        price_change_description=request.price_change_scenario,
        forecast_length=request.forecast_length,
        forecasted_data=output.forecasted_data,
        summary=output.summary,
    )


def apply_custom_price_forecast(
    scenario: ScenarioRecord, output: ScenarioForecastOutput
) -> ScenarioRecord:
    """Replace a scenario's output with its custom-price re-forecast, keeping its id."""

    return replace(
        scenario,
        name=custom_price_scenario_name(scenario.name),
        forecasted_data=output.forecasted_data,
        summary=output.summary,
        is_custom_price_scenario=True,
    )
