# This file defines request and response schemas for the time-series endpoints.
# Uploaded CSV text travels as a JSON string so the parsing rules stay in one place on the server.
# Reconciled rows are open-ended records because each forecast series adds its own column.

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from scenario_sage.api.schemas.common import EnvelopeFields, PointV1
from scenario_sage.timeseries.models import Frequency


class ParseRequestV1(BaseModel):
    csv_text: str
    value_column: str = "demand"
    item_id: str | None = None
    store_id: str | None = None


class ColumnValuesRequestV1(BaseModel):
    csv_text: str
    column_name: str = Field(min_length=1)


class FrequencyRequestV1(BaseModel):
    points: list[PointV1]
    forecast_length: int = Field(default=30, ge=1)


class ReconcileRequestV1(BaseModel):
    historical: list[PointV1] = Field(default_factory=list)
    forecasts: dict[str, str] = Field(
        default_factory=dict,
        description="Forecast CSV text keyed by series id, merged in the given order.",
    )
    value_column: str = "demand"


class FrequencyV1(BaseModel):
    frequency: Frequency
    forecast_length_label: str


class ReconciledTableV1(BaseModel):
    series_ids: list[str]
    rows: list[dict[str, Any]]


class ParseResponseV1(EnvelopeFields):
    data: list[PointV1]


class ColumnValuesResponseV1(EnvelopeFields):
    data: list[str]


class FrequencyResponseV1(EnvelopeFields):
    data: FrequencyV1


class ReconcileResponseV1(EnvelopeFields):
    data: ReconciledTableV1
