# This file defines the time-series endpoints under the versioned API path.
# Clients can parse uploaded CSV text, list filter values, detect sampling frequency,
# and reconcile historical points with forecast CSVs into one chart table or a CSV download.
# Malformed CSV never produces an error response; it yields empty data plus warnings.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response

from scenario_sage.api.api_config import ApiConfig
from scenario_sage.api.dependencies import get_config
from scenario_sage.api.response_envelope import build_object_envelope
from scenario_sage.api.schemas.timeseries_schemas import (
    ColumnValuesRequestV1,
    ColumnValuesResponseV1,
    FrequencyRequestV1,
    FrequencyResponseV1,
    ParseRequestV1,
    ParseResponseV1,
    ReconcileRequestV1,
    ReconcileResponseV1,
)
from scenario_sage.api.upload_limits import ensure_csv_within_limit
from scenario_sage.timeseries.csv_parser import (
    TIMESTAMP_COLUMN,
    extract_unique_column_values,
    parse_csv_for_time_series,
    read_csv_headers,
)
from scenario_sage.timeseries.frequency import (
    detect_time_series_frequency,
    format_forecast_length,
)
from scenario_sage.timeseries.charting import reconciled_to_frame
from scenario_sage.timeseries.models import ReconciliationResult, TimeSeriesPoint
from scenario_sage.timeseries.reconcile import reconcile_forecast_csvs

router = APIRouter(prefix="/timeseries", tags=["timeseries"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


def _envelope(
    request: Request, config: ApiConfig, data: object, warnings: list[str] | None = None
) -> dict[str, object]:
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        data=data,
        warnings=warnings,
    )


@router.post("/parse", response_model=ParseResponseV1, response_model_exclude_none=True)
def parse_time_series(
    request: Request,
    body: ParseRequestV1,
    config: ConfigDep,
) -> dict[str, object]:
    ensure_csv_within_limit(body.csv_text, max_chars=config.max_csv_chars, field_name="csv_text")

    points = parse_csv_for_time_series(
        body.csv_text, body.value_column, body.item_id, body.store_id
    )
    warnings: list[str] = []
    if not points:
        headers = read_csv_headers(body.csv_text)
        if TIMESTAMP_COLUMN not in headers:
            warnings.append("CSV is empty or has no 'timestamp' column.")
        else:
            value_name = body.value_column.strip().lower()
            warnings.append(f"No rows with a '{value_name}' value matched the requested filters.")

    return _envelope(request, config, [point.to_dict() for point in points], warnings)


@router.post(
    "/column-values", response_model=ColumnValuesResponseV1, response_model_exclude_none=True
)
def column_values(
    request: Request,
    body: ColumnValuesRequestV1,
    config: ConfigDep,
) -> dict[str, object]:
    ensure_csv_within_limit(body.csv_text, max_chars=config.max_csv_chars, field_name="csv_text")

    values = extract_unique_column_values(body.csv_text, body.column_name)
    warnings: list[str] = []
    column_name = body.column_name.strip().lower()
    if column_name not in read_csv_headers(body.csv_text):
        warnings.append(f"Column '{column_name}' not found in CSV headers.")

    return _envelope(request, config, values, warnings)


@router.post("/frequency", response_model=FrequencyResponseV1, response_model_exclude_none=True)
def frequency(
    request: Request,
    body: FrequencyRequestV1,
    config: ConfigDep,
) -> dict[str, object]:
    points = [TimeSeriesPoint(date=point.date, value=point.value) for point in body.points]
    detected = detect_time_series_frequency(points)

    return _envelope(
        request,
        config,
        {
            "frequency": detected,
            "forecast_length_label": format_forecast_length(body.forecast_length, detected),
        },
    )


def _reconcile_body(body: ReconcileRequestV1, config: ApiConfig) -> ReconciliationResult:
    for series_id, csv_text in body.forecasts.items():
        ensure_csv_within_limit(
            csv_text, max_chars=config.max_csv_chars, field_name=f"forecasts.{series_id}"
        )

    historical = [TimeSeriesPoint(date=point.date, value=point.value) for point in body.historical]
    return reconcile_forecast_csvs(historical, body.forecasts, body.value_column)


@router.post("/reconcile", response_model=ReconcileResponseV1, response_model_exclude_none=True)
def reconcile(
    request: Request,
    body: ReconcileRequestV1,
    config: ConfigDep,
) -> dict[str, object]:
    result = _reconcile_body(body, config)

    return _envelope(
        request,
        config,
        {"series_ids": result.series_ids, "rows": result.to_records()},
        result.warnings,
    )


@router.post("/reconcile/export", response_class=Response)
def export_reconciled_csv(body: ReconcileRequestV1, config: ConfigDep) -> Response:
    """Download the reconciled table as CSV with empty cells where a series has no value."""

    result = _reconcile_body(body, config)
    csv_text = reconciled_to_frame(result).to_csv(index=False, lineterminator="\n")
    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"content-disposition": 'attachment; filename="reconciled.csv"'},
    )
