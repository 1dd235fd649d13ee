# This file defines scenario endpoints that call the hosted forecast and summarization services.
# Input problems map to 400 responses and service failures to 502, each with the service message.
# The views endpoint rebuilds every chart table from the uploaded CSV and the submitted scenarios.

from __future__ import annotations

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from scenario_sage.api.api_config import ApiConfig
from scenario_sage.api.dependencies import get_config, get_forecast_client
from scenario_sage.api.error_handlers import APIError
from scenario_sage.api.response_envelope import build_object_envelope
from scenario_sage.api.schemas.scenario_schemas import (
    ForecastRequestV1,
    ReforecastRequestV1,
    ScenarioResponseV1,
    ScenarioV1,
    ScenarioViewsResponseV1,
    SummarizeRequestV1,
    SummaryResponseV1,
    ViewsRequestV1,
)
from scenario_sage.api.upload_limits import ensure_csv_within_limit
from scenario_sage.forecast_service.actions import (
    apply_custom_price_forecast,
    build_custom_price_request,
    build_forecast_request,
    build_summary_request,
    generate_forecast_action,
    scenario_from_forecast,
    summarize_results_action,
    validate_forecast_input,
    validate_summary_input,
)
from scenario_sage.forecast_service.client import ForecastServiceClient
from scenario_sage.forecast_service.schemas import ServiceError
from scenario_sage.timeseries.models import ScenarioRecord, TimeSeriesPoint
from scenario_sage.timeseries.pipeline import MetricView, build_scenario_views, next_scenario_id

router = APIRouter(prefix="/scenarios", tags=["scenarios"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
ClientDep = Annotated[ForecastServiceClient, Depends(get_forecast_client)]

EMPTY_FORECAST_WARNING = "Forecast generated, but the output data is empty. Charts may not update."


def _invalid_input(message: str) -> APIError:
    return APIError(status_code=400, error_code="INVALID_SCENARIO_INPUT", message=message)


def _to_record(scenario: ScenarioV1) -> ScenarioRecord:
    return ScenarioRecord(**scenario.model_dump())


def _metric_view_payload(view: MetricView) -> dict[str, object]:
    return {
        "metric": view.metric,
        "title": view.title,
        "historical": [point.to_dict() for point in view.historical],
        "series_ids": view.reconciled.series_ids,
        "rows": view.reconciled.to_records(),
        "chart_config": view.chart_config,
    }


@router.post("/forecast", response_model=ScenarioResponseV1, response_model_exclude_none=True)
def forecast_scenario(
    request: Request,
    body: ForecastRequestV1,
    config: ConfigDep,
    client: ClientDep,
) -> dict[str, object]:
    ensure_csv_within_limit(
        body.historical_csv, max_chars=config.max_csv_chars, field_name="historical_csv"
    )
    if not body.name.strip():
        raise _invalid_input("Please enter a scenario name.")

    payload = build_forecast_request(
        historical_csv=body.historical_csv,
        price_change_description=body.price_change_description,
        forecast_length=body.forecast_length,
        frequency=body.frequency,
    )
    message = validate_forecast_input(payload)
    if message is not None:
        raise _invalid_input(message)

    result = generate_forecast_action(payload, client)
    if isinstance(result, ServiceError):
        raise APIError(status_code=502, error_code="FORECAST_SERVICE_ERROR", message=result.error)

    existing = [_to_record(scenario) for scenario in body.existing_scenarios]
    scenario = scenario_from_forecast(
        scenario_id=next_scenario_id(existing),
        name=body.name,
        request=payload,
        output=result,
    )
    warnings = [EMPTY_FORECAST_WARNING] if not result.forecasted_data.strip() else None

    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=asdict(scenario),
        warnings=warnings,
    )


@router.post("/reforecast", response_model=ScenarioResponseV1, response_model_exclude_none=True)
def reforecast_with_custom_prices(
    request: Request,
    body: ReforecastRequestV1,
    config: ConfigDep,
    client: ClientDep,
) -> dict[str, object]:
    ensure_csv_within_limit(
        body.historical_csv, max_chars=config.max_csv_chars, field_name="historical_csv"
    )
    scenario = _to_record(body.scenario)
    prices = [TimeSeriesPoint(date=point.date, value=point.value) for point in body.prices]

    try:
        payload = build_custom_price_request(
            historical_csv=body.historical_csv, scenario=scenario, prices=prices
        )
    except ValueError as exc:
        raise _invalid_input(str(exc)) from exc

    message = validate_forecast_input(payload)
    if message is not None:
        raise _invalid_input(message)

    result = generate_forecast_action(payload, client)
    if isinstance(result, ServiceError):
        raise APIError(status_code=502, error_code="FORECAST_SERVICE_ERROR", message=result.error)

    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=asdict(apply_custom_price_forecast(scenario, result)),
    )


@router.post("/summarize", response_model=SummaryResponseV1, response_model_exclude_none=True)
def summarize_scenarios(
    request: Request,
    body: SummarizeRequestV1,
    config: ConfigDep,
    client: ClientDep,
) -> dict[str, object]:
    payload = build_summary_request([_to_record(scenario) for scenario in body.scenarios])
    message = validate_summary_input(payload)
    if message is not None:
        raise _invalid_input(message)

    result = summarize_results_action(payload, client)
    if isinstance(result, ServiceError):
        raise APIError(status_code=502, error_code="SUMMARY_SERVICE_ERROR", message=result.error)

    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=result.model_dump(),
    )


@router.post("/views", response_model=ScenarioViewsResponseV1, response_model_exclude_none=True)
def scenario_views(
    request: Request,
    body: ViewsRequestV1,
    config: ConfigDep,
) -> dict[str, object]:
    ensure_csv_within_limit(
        body.historical_csv, max_chars=config.max_csv_chars, field_name="historical_csv"
    )
    views = build_scenario_views(
        body.historical_csv,
        [_to_record(scenario) for scenario in body.scenarios],
        item_id=body.item_id,
        store_id=body.store_id,
        forecast_length=body.forecast_length,
    )

    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data={
            "item_ids": views.item_ids,
            "store_ids": views.store_ids,
            "frequency": views.frequency,
            "max_forecast_length": views.max_forecast_length,
            "forecast_length": views.forecast_length,
            "demand": _metric_view_payload(views.demand),
            "price": _metric_view_payload(views.price),
        },
        warnings=views.warnings,
    )
